# SPDX-License-Identifier: LGPL-3.0-or-later

import argparse
import base64
import errno
import json
import sys

from aioxattr import native


_ENCODINGS = ('text', 'hex', 'base64')


def _quote(raw):
    """Render a value in getfattr(1) text form, octal-escaping unsafe bytes."""
    out = []
    for b in raw:
        if b < 0x20 or b >= 0x7f or b in (0x22, 0x5c):
            out.append(f'\\{b:03o}')
        else:
            out.append(chr(b))
    return '"' + ''.join(out) + '"'


def _encode_value(raw, encoding):
    if encoding == 'hex':
        return '0x' + raw.hex()
    if encoding == 'base64':
        return '0s' + base64.b64encode(raw).decode('ascii')
    return _quote(raw)


def _format_text(path, attrs, encoding):
    lines = [f'# file: {path}']
    for name, raw in attrs.items():
        if raw is None:
            lines.append(name)
        else:
            lines.append(f'{name}={_encode_value(raw, encoding)}')
    return '\n'.join(lines)


def _format_json(path, attrs, encoding):
    return {
        'path': path,
        'xattrs': {
            name: None if raw is None else _encode_value(raw, encoding)
            for name, raw in attrs.items()
        },
    }


def _read_attrs(path, name, dump, follow):
    if name is not None:
        return {name: native.getxattr(path, name, follow_symlinks=follow)}

    attrs = {}
    for n in sorted(native.listxattr(path, follow_symlinks=follow)):
        if not dump:
            attrs[n] = None
            continue
        try:
            attrs[n] = native.getxattr(path, n, follow_symlinks=follow)
        except OSError as e:
            # removed after listing
            if e.errno != errno.ENODATA:
                raise
    return attrs


def _process_path(path, name, dump, follow, encoding, use_json):
    attrs = _read_attrs(path, name, dump, follow)
    if use_json:
        print(json.dumps(_format_json(path, attrs, encoding)))
    elif attrs:
        print(_format_text(path, attrs, encoding))
        print()


def main():
    ap = argparse.ArgumentParser(
        prog='aioxattr_getfattr',
        description='Display extended attributes of files.',
        add_help=False,
    )
    ap.add_argument('--help', action='help',
                    help='Show this help message and exit')
    ap.add_argument('-n', '--name', metavar='name',
                    help='Dump the value of the named attribute')
    ap.add_argument('-d', '--dump', action='store_true',
                    help='Dump the values of all attributes')
    ap.add_argument('-h', '--no-dereference', action='store_true',
                    help='Do not follow symlinks; operate on the link itself')
    ap.add_argument('-e', '--encoding', choices=_ENCODINGS, default='text',
                    help='Encode values as text, hex (0x) or base64 (0s)')
    ap.add_argument('-j', '--json', dest='use_json', action='store_true',
                    help='Output attributes as JSONL (one object per line)')
    ap.add_argument('path', nargs='+')
    args = ap.parse_args()

    rc = 0
    for path in args.path:
        try:
            _process_path(path, args.name, args.dump,
                          not args.no_dereference, args.encoding,
                          args.use_json)
        except (OSError, ValueError) as e:
            print(f'aioxattr_getfattr: {path}: {e}', file=sys.stderr)
            rc = 1

    sys.exit(rc)


if __name__ == '__main__':
    main()
