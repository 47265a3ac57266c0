# SPDX-License-Identifier: LGPL-3.0-or-later

import argparse
import base64
import binascii
import os
import sys

from aioxattr import native


def _unquote(s):
    """Inverse of getfattr's quoted text form: handles \\NNN octal escapes."""
    out = bytearray()
    i = 0
    while i < len(s):
        ch = s[i]
        if ch != '\\':
            out += os.fsencode(ch)
            i += 1
            continue
        octal = s[i + 1:i + 4]
        if len(octal) == 3 and all(c in '01234567' for c in octal):
            out.append(int(octal, 8) & 0xff)
            i += 4
        elif i + 1 < len(s):
            out += os.fsencode(s[i + 1])
            i += 2
        else:
            raise ValueError(f'trailing backslash in value: {s!r}')
    return bytes(out)


def _parse_value(s):
    """Decode a value given as text, "quoted text", 0x<hex> or 0s<base64>."""
    if s[:2] in ('0x', '0X'):
        try:
            return bytes.fromhex(s[2:])
        except ValueError:
            raise ValueError(f'invalid hex value: {s!r}') from None
    if s[:2] in ('0s', '0S'):
        try:
            return base64.b64decode(s[2:], validate=True)
        except binascii.Error:
            raise ValueError(f'invalid base64 value: {s!r}') from None
    if len(s) >= 2 and s[0] == '"' and s[-1] == '"':
        return _unquote(s[1:-1])
    return os.fsencode(s)


def _parse_restore_file(text):
    """
    Parse getfattr --dump output into [(path, {name: value}), ...].
    Blank lines separate files; other comment lines are ignored.
    """
    result = []
    path = None
    attrs = {}
    for lineno, line in enumerate(text.splitlines(), 1):
        line = line.strip()
        if not line:
            continue
        if line.startswith('# file: '):
            if path is not None:
                result.append((path, attrs))
            path = line[len('# file: '):]
            attrs = {}
            continue
        if line.startswith('#'):
            continue
        if path is None:
            raise ValueError(f'line {lineno}: attribute before "# file:"')
        name, sep, value = line.partition('=')
        attrs[name] = _parse_value(value) if sep else b''
    if path is not None:
        result.append((path, attrs))
    return result


def _do_setfattr(path, name, value, remove, follow):
    if remove is not None:
        native.removexattr(path, remove, follow_symlinks=follow)
    else:
        native.setxattr(path, name, value, follow_symlinks=follow)


def main():
    ap = argparse.ArgumentParser(
        prog='aioxattr_setfattr',
        description='Set or remove extended attributes of files.',
        add_help=False,
    )
    ap.add_argument('--help', action='help',
                    help='Show this help message and exit')
    ap.add_argument('-n', '--name', metavar='name',
                    help='Name of the attribute to set')
    ap.add_argument('-v', '--value', metavar='value', default='',
                    help='Value to set; prefix 0x for hex, 0s for base64')
    ap.add_argument('-x', '--remove', metavar='name',
                    help='Remove the named attribute')
    ap.add_argument('-h', '--no-dereference', action='store_true',
                    help='Do not follow symlinks; operate on the link itself')
    ap.add_argument('--restore', metavar='file',
                    help='Restore attributes from a getfattr --dump file '
                         '(- for stdin); paths are taken from the dump')
    ap.add_argument('path', nargs='*')
    args = ap.parse_args()

    follow = not args.no_dereference
    rc = 0

    if args.restore:
        if args.restore == '-':
            text = sys.stdin.read()
        else:
            with open(args.restore) as f:
                text = f.read()
        try:
            entries = _parse_restore_file(text)
        except ValueError as e:
            ap.error(str(e))
        for path, attrs in entries:
            for name, value in attrs.items():
                try:
                    native.setxattr(path, name, value,
                                    follow_symlinks=follow)
                except (OSError, ValueError) as e:
                    print(f'aioxattr_setfattr: {path}: {e}',
                          file=sys.stderr)
                    rc = 1
        sys.exit(rc)

    if not args.path:
        ap.error('path arguments are required when not using --restore')
    if (args.name is None) == (args.remove is None):
        ap.error('exactly one of -n or -x is required')

    try:
        value = _parse_value(args.value)
    except ValueError as e:
        ap.error(str(e))

    for path in args.path:
        try:
            _do_setfattr(path, args.name, value, args.remove, follow)
        except (OSError, ValueError) as e:
            print(f'aioxattr_setfattr: {path}: {e}', file=sys.stderr)
            rc = 1

    sys.exit(rc)


if __name__ == '__main__':
    main()
