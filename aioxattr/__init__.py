# SPDX-License-Identifier: LGPL-3.0-or-later
"""
Asynchronous Linux extended attribute access.

All functions are coroutines operating on a process-wide default
:class:`XattrShim`.  They never raise: set/remove return a bool and
get/list return the result or None.  Use :mod:`aioxattr.native` for the
blocking variants that raise OSError with the real errno.
"""

from ._libc import Libc, load_libc
from .shim import XattrShim

__all__ = [
    'Libc', 'XattrShim', 'load_libc',
    'setxattr', 'lsetxattr', 'getxattr', 'lgetxattr',
    'listxattr', 'llistxattr', 'removexattr', 'lremovexattr',
    'get_all', 'lget_all',
]

_default = XattrShim()

setxattr = _default.setxattr
lsetxattr = _default.lsetxattr
getxattr = _default.getxattr
lgetxattr = _default.lgetxattr
listxattr = _default.listxattr
llistxattr = _default.llistxattr
removexattr = _default.removexattr
lremovexattr = _default.lremovexattr
get_all = _default.get_all
lget_all = _default.lget_all
