# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Asynchronous, non-raising access to extended attributes.

Each coroutine hands the blocking libc work to an executor thread and
suspends the calling task until it completes.  Every failure, whatever the
errno, collapses to ``False`` (set/remove) or ``None`` (get/list); the
underlying error is only logged at DEBUG level.  Cancelling the awaiting task
does not interrupt a syscall that has already been dispatched.
"""

import asyncio
import functools
import logging
from concurrent.futures import Executor

from . import native
from ._codec import decode_value
from ._libc import Libc

logger = logging.getLogger(__name__)

# Raised by encoding, sizing, allocation, the syscalls themselves, or an
# executor that is shut down or broken.
_FAILURES = (OSError, ValueError, UnicodeError, MemoryError, OverflowError,
             RuntimeError)


class XattrShim:
    """The eight xattr operations, bound to one libc handle and executor.

    ``libc`` defaults to the process-wide handle from ``load_libc()``.
    ``executor`` defaults to the running loop's default executor.
    """

    def __init__(self, libc: Libc | None = None,
                 executor: Executor | None = None) -> None:
        self._libc = libc
        self._executor = executor

    def __repr__(self) -> str:
        return f'XattrShim(libc={self._libc!r}, executor={self._executor!r})'

    async def _run(self, failure, func, *args, **kwargs):
        call = functools.partial(func, *args, libc=self._libc, **kwargs)
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._executor, call)
        except _FAILURES as e:
            # value omitted
            logger.debug('%s(%s) failed: %s', func.__name__,
                         ', '.join(map(repr, args[:2])), e)
            return failure

    # ── set ───────────────────────────────────────────────────────────────

    async def setxattr(self, path: str, name: str,
                       value: str | bytes) -> bool:
        """Create or replace ``name`` on ``path``.  True on success."""
        rv = await self._run(False, native.setxattr, path, name, value)
        return rv is None

    async def lsetxattr(self, path: str, name: str,
                        value: str | bytes) -> bool:
        """Like setxattr() but on a symlink itself."""
        rv = await self._run(False, native.setxattr, path, name, value,
                             follow_symlinks=False)
        return rv is None

    # ── get ───────────────────────────────────────────────────────────────

    async def getxattr(self, path: str, name: str) -> str | None:
        """Return the value of ``name`` on ``path``, or None."""
        return await self._run(None, _get_decoded, path, name)

    async def lgetxattr(self, path: str, name: str) -> str | None:
        return await self._run(None, _get_decoded, path, name,
                               follow_symlinks=False)

    # ── list ──────────────────────────────────────────────────────────────

    async def listxattr(self, path: str) -> list[str] | None:
        """Return the attribute names on ``path``, or None."""
        return await self._run(None, native.listxattr, path)

    async def llistxattr(self, path: str) -> list[str] | None:
        return await self._run(None, native.listxattr, path,
                               follow_symlinks=False)

    # ── remove ────────────────────────────────────────────────────────────

    async def removexattr(self, path: str, name: str) -> bool:
        rv = await self._run(False, native.removexattr, path, name)
        return rv is None

    async def lremovexattr(self, path: str, name: str) -> bool:
        rv = await self._run(False, native.removexattr, path, name,
                             follow_symlinks=False)
        return rv is None

    # ── bulk ──────────────────────────────────────────────────────────────

    async def get_all(self, path: str) -> dict[str, str] | None:
        """Return every attribute on ``path`` as a name -> value dict.

        Names removed between the listing and the read are skipped.
        """
        return await self._get_all(path, self.listxattr, self.getxattr)

    async def lget_all(self, path: str) -> dict[str, str] | None:
        return await self._get_all(path, self.llistxattr, self.lgetxattr)

    async def _get_all(self, path, list_func, get_func):
        names = await list_func(path)
        if names is None:
            return None
        result = {}
        for name in names:
            value = await get_func(path, name)
            if value is not None:
                result[name] = value
        return result


def _get_decoded(path, name, *, follow_symlinks=True, libc=None):
    value = native.getxattr(path, name, follow_symlinks=follow_symlinks,
                            libc=libc)
    return decode_value(value)
