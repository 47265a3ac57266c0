# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Pytest fixtures for aioxattr tests.

Filesystem fixtures hand out files under tmp_path and skip the test when
the filesystem backing it does not accept ``user.*`` attributes (tmpfs on
older kernels, some container overlays).  The ``fake_libc`` fixture provides
an in-memory stand-in for the libc handle so sizing races can be staged
deterministically.
"""

import ctypes
import errno
import os

import pytest

from aioxattr import native


# ── Filesystem fixtures ───────────────────────────────────────────────────────

@pytest.fixture(scope='function')
def xattr_dir(tmp_path):
    """tmp_path, provided user xattrs work there."""
    if not native.is_supported(str(tmp_path)):
        pytest.skip('user xattrs not supported on this filesystem')
    return tmp_path


@pytest.fixture(scope='function')
def xattr_file(xattr_dir):
    """Path (str) of an empty regular file with no user attributes."""
    path = xattr_dir / 'target'
    path.write_text('data')
    return str(path)


@pytest.fixture(scope='function')
def xattr_symlink(xattr_file):
    """(link, target) pair; link is a symlink pointing at target."""
    link = xattr_file + '.symlink'
    os.symlink(xattr_file, link)
    return link, xattr_file


# ── Fake libc ─────────────────────────────────────────────────────────────────

class FakeLibc:
    """
    In-memory replacement for aioxattr.Libc.

    ``xattrs`` maps (path, follow) to a {name: value} dict, all bytes and
    without terminators.  Every call is appended to ``calls`` as
    (symbol, size) after checking that C strings arrive NUL-terminated.
    ``after_call`` (if set) runs after each call with (fake, symbol) so a
    test can mutate state between the sizing and the fetch call.
    """

    def __init__(self):
        self.xattrs = {}
        self.calls = []
        self.after_call = None
        self.forced_size = None

    def add(self, path, name, value, follow=True):
        self.xattrs.setdefault((path, follow), {})[name] = value

    # helpers

    def _cstr(self, s):
        assert isinstance(s, bytes) and s.endswith(b'\0'), s
        assert b'\0' not in s[:-1], s
        return s[:-1]

    def _done(self, sym, rv, err=0):
        if rv < 0:
            ctypes.set_errno(err)
        if self.after_call is not None:
            self.after_call(self, sym)
        return rv

    def _fill(self, sym, payload, buf, size):
        if buf is None and size == 0 and self.forced_size is not None:
            return self._done(sym, self.forced_size)
        if size == 0:
            return self._done(sym, len(payload))
        if size < len(payload):
            return self._done(sym, -1, errno.ERANGE)
        ctypes.memmove(buf, payload, len(payload))
        return self._done(sym, len(payload))

    def _lookup(self, path, follow):
        return self.xattrs.get((self._cstr(path), follow))

    # xattr entry points

    def _get(self, sym, follow, path, name, buf, size):
        self.calls.append((sym, size))
        attrs = self._lookup(path, follow)
        name = self._cstr(name)
        if attrs is None:
            return self._done(sym, -1, errno.ENOENT)
        if name not in attrs:
            return self._done(sym, -1, errno.ENODATA)
        return self._fill(sym, attrs[name], buf, size)

    def _list(self, sym, follow, path, buf, size):
        self.calls.append((sym, size))
        attrs = self._lookup(path, follow)
        if attrs is None:
            return self._done(sym, -1, errno.ENOENT)
        payload = b''.join(n + b'\0' for n in attrs)
        return self._fill(sym, payload, buf, size)

    def _set(self, sym, follow, path, name, value, size, flags):
        self.calls.append((sym, size))
        assert flags == 0
        assert len(value) == size
        attrs = self._lookup(path, follow)
        if attrs is None:
            return self._done(sym, -1, errno.ENOENT)
        attrs[self._cstr(name)] = value
        return self._done(sym, 0)

    def _remove(self, sym, follow, path, name):
        self.calls.append((sym, 0))
        attrs = self._lookup(path, follow)
        name = self._cstr(name)
        if attrs is None:
            return self._done(sym, -1, errno.ENOENT)
        if attrs.pop(name, None) is None:
            return self._done(sym, -1, errno.ENODATA)
        return self._done(sym, 0)

    def getxattr(self, *args):
        return self._get('getxattr', True, *args)

    def lgetxattr(self, *args):
        return self._get('lgetxattr', False, *args)

    def listxattr(self, *args):
        return self._list('listxattr', True, *args)

    def llistxattr(self, *args):
        return self._list('llistxattr', False, *args)

    def setxattr(self, *args):
        return self._set('setxattr', True, *args)

    def lsetxattr(self, *args):
        return self._set('lsetxattr', False, *args)

    def removexattr(self, *args):
        return self._remove('removexattr', True, *args)

    def lremovexattr(self, *args):
        return self._remove('lremovexattr', False, *args)


@pytest.fixture(scope='function')
def fake_libc():
    """FakeLibc with an empty file at /f and an empty symlink at /l."""
    fake = FakeLibc()
    fake.xattrs[(b'/f', True)] = {}
    fake.xattrs[(b'/l', False)] = {}
    return fake
