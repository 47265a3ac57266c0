# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Blocking extended attribute calls.

These functions talk to libc directly and raise ``OSError`` (carrying the
errno the C library reported) on failure.  They are what the async API in
``aioxattr.shim`` runs on its executor, and what the command line tools use
when they need the actual error.

getxattr() and listxattr() follow the usual two-call pattern: a sizing call
with a NULL buffer, then a fetch call into a buffer of exactly that size.
If the attribute grows in between, the fetch fails with ERANGE and that
failure is reported as-is rather than retried.
"""

import errno
import os
import tempfile
from ctypes import create_string_buffer, get_errno

from ._codec import check_size, encode_cstring, encode_value, split_names
from ._libc import Libc, load_libc


def _oserror(path, err=None):
    if err is None:
        err = get_errno()
    return OSError(err, os.strerror(err), os.fsdecode(path))


def _check(rv, path):
    if rv < 0:
        raise _oserror(path)
    return rv


def _check_status(rv, path):
    if rv != 0:
        raise _oserror(path)


def _query(func, args, path):
    size = check_size(_check(func(*args, None, 0), path))
    buf = create_string_buffer(size)
    n = _check(func(*args, buf, size), path)
    if n > size:
        # A zero-sized fetch reports the current size instead of copying;
        # anything non-zero there means the value grew since sizing.
        raise _oserror(path, errno.ERANGE)
    return buf.raw[:n]


def getxattr(path: str, name: str, *, follow_symlinks: bool = True,
             libc: Libc | None = None) -> bytes:
    """Return the raw value of attribute ``name`` on ``path``."""
    libc = libc or load_libc()
    func = libc.getxattr if follow_symlinks else libc.lgetxattr
    return _query(func, (encode_cstring(path), encode_cstring(name)), path)


def listxattr(path: str, *, follow_symlinks: bool = True,
              libc: Libc | None = None) -> list[str]:
    """Return the attribute names present on ``path``.

    Sizing and fetching always use the same variant, so a symlink is never
    sized through its target and then read as itself.
    """
    libc = libc or load_libc()
    func = libc.listxattr if follow_symlinks else libc.llistxattr
    return split_names(_query(func, (encode_cstring(path),), path))


def setxattr(path: str, name: str, value: str | bytes, *,
             follow_symlinks: bool = True,
             libc: Libc | None = None) -> None:
    """Create or replace attribute ``name`` on ``path``."""
    libc = libc or load_libc()
    func = libc.setxattr if follow_symlinks else libc.lsetxattr
    data = encode_value(value)
    _check_status(func(encode_cstring(path), encode_cstring(name),
                       data, len(data), 0), path)


def removexattr(path: str, name: str, *, follow_symlinks: bool = True,
                libc: Libc | None = None) -> None:
    libc = libc or load_libc()
    func = libc.removexattr if follow_symlinks else libc.lremovexattr
    _check_status(func(encode_cstring(path), encode_cstring(name)), path)


def is_supported(path: str | None = None, libc: Libc | None = None) -> bool:
    """Check whether ``user.*`` attributes can be stored under ``path``.

    A temporary file is created in ``path`` (the default temp directory when
    None) and a probe attribute written to it and read back.
    """
    with tempfile.NamedTemporaryFile(dir=path, prefix='aioxattr-') as f:
        try:
            setxattr(f.name, 'user.aioxattr.probe', b'probe', libc=libc)
            return getxattr(f.name, 'user.aioxattr.probe',
                            libc=libc) == b'probe'
        except OSError:
            return False
