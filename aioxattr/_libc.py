# SPDX-License-Identifier: LGPL-3.0-or-later
"""Process-wide handle on the C library xattr entry points."""

import functools
import logging
from ctypes import CDLL, c_char_p, c_int, c_size_t, c_ssize_t, c_void_p
from ctypes.util import find_library

logger = logging.getLogger(__name__)

# name -> (argtypes, restype)
_PROTOTYPES = {
    'setxattr':     ((c_char_p, c_char_p, c_void_p, c_size_t, c_int), c_int),
    'lsetxattr':    ((c_char_p, c_char_p, c_void_p, c_size_t, c_int), c_int),
    'getxattr':     ((c_char_p, c_char_p, c_void_p, c_size_t), c_ssize_t),
    'lgetxattr':    ((c_char_p, c_char_p, c_void_p, c_size_t), c_ssize_t),
    'listxattr':    ((c_char_p, c_void_p, c_size_t), c_ssize_t),
    'llistxattr':   ((c_char_p, c_void_p, c_size_t), c_ssize_t),
    'removexattr':  ((c_char_p, c_char_p), c_int),
    'lremovexattr': ((c_char_p, c_char_p), c_int),
}


class Libc:
    """Typed foreign functions for the eight xattr syscalls.

    Instances are read-only once constructed.  Every function is loaded with
    ``use_errno=True`` so ``ctypes.get_errno()`` reflects the last call made
    from the current thread.
    """

    __slots__ = ('name',) + tuple(_PROTOTYPES)

    def __init__(self, name: str | None) -> None:
        cdll = CDLL(name, use_errno=True)
        object.__setattr__(self, 'name', name)
        for sym, (argtypes, restype) in _PROTOTYPES.items():
            try:
                func = getattr(cdll, sym)
            except AttributeError:
                raise OSError(f'{name}: missing symbol {sym}') from None
            func.argtypes = argtypes
            func.restype = restype
            object.__setattr__(self, sym, func)

    def __setattr__(self, attr, value):
        raise AttributeError(f'{type(self).__name__} is read-only')

    def __repr__(self) -> str:
        return f'Libc({self.name!r})'


def load_libc(name: str | None = None) -> Libc:
    """Return the shared Libc handle, loading it on first use.

    ``name`` defaults to whatever ``find_library('c')`` resolves.  When that
    finds nothing (musl, minimal images without ldconfig) the symbols already
    linked into the process are used instead.
    Raises OSError if the library cannot be loaded.
    """
    if name is None:
        name = find_library('c')
    return _load(name)


@functools.lru_cache(maxsize=None)
def _load(name):
    handle = Libc(name)
    logger.debug('loaded xattr functions from %s', name or '<process>')
    return handle
