# SPDX-License-Identifier: LGPL-3.0-or-later
"""Conversion between Python strings and the byte buffers libc expects."""

import os
import sys

# Largest allocation a reported xattr size may request.
MAX_BUFFER_SIZE = sys.maxsize


def encode_cstring(s: str | bytes) -> bytes:
    """Encode a path or attribute name as a NUL-terminated C string.

    Raises ValueError if the encoded form already contains a NUL byte,
    since the C side would silently truncate it.
    """
    data = os.fsencode(s)
    if b'\0' in data:
        raise ValueError(f'embedded null byte in {s!r}')
    return data + b'\0'


def encode_value(value: str | bytes) -> bytes:
    """Encode an attribute value.  No terminator: the length is explicit."""
    if isinstance(value, bytes):
        return value
    return os.fsencode(value)


def decode_value(data: bytes) -> str:
    return os.fsdecode(data)


def split_names(buf: bytes) -> list[str]:
    """Split a listxattr(2) buffer into names.

    The buffer holds consecutive NUL-terminated entries, so splitting on NUL
    leaves one trailing empty element which is dropped.
    """
    if not buf:
        return []
    names = buf.split(b'\0')
    if names[-1] == b'':
        names.pop()
    return [os.fsdecode(n) for n in names]


def check_size(size: int) -> int:
    """Validate a size reported by a sizing call before allocating it."""
    if size < 0 or size > MAX_BUFFER_SIZE:
        raise OverflowError(f'xattr size {size} out of range')
    return size
