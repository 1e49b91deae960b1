# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
"""
String extraction and conversion helpers
"""

# Uppercase'd for case-insensitivity
_BYTE_LENGTH_SUFFIXES = {
    'KIB':  1024,
    'KB':   1000,
    'K':    1024,
    'MIB':  1024 * 1024,
    'MB':   1000 * 1000,
    'M':    1024 * 1024,
}


def cstring_at(data, offset: int, max_len: int) -> bytes:
    """
    Return the bytes of *data* starting at *offset*, stopping before the first
    NULL byte, after *max_len* bytes, or at the end of *data*, whichever comes first.

    This matches ``strncpy()`` into a *max_len* sized buffer, sans terminator.
    """
    if offset < 0:
        raise IndexError('Offset cannot be negative: {:d}'.format(offset))

    if max_len < 0:
        raise ValueError('Maximum length cannot be negative: {:d}'.format(max_len))

    chunk = bytes(data[offset:offset + max_len])
    nul = chunk.find(b'\x00')
    if nul >= 0:
        chunk = chunk[:nul]

    return chunk


def to_positive_int(string: str, desc='value') -> int:
    """
    Convert a string (in any base ``int(x, 0)`` accepts) to a non-negative integer.

    A :py:exc:`ValueError` describing the value, using *desc*, is raised on failure.
    """
    try:
        ret = int(string, 0)
    except ValueError:
        raise ValueError('Invalid ' + desc + ': ' + string)

    if ret < 0:
        raise ValueError('Invalid ' + desc + ' (cannot be negative): ' + string)

    return ret


def length_to_int(len_str: str, desc='length') -> int:
    """
    Convert a length string, optionally carrying one of the following
    (case insensitive) suffixes, into an integer.

    +-----------+---------------------------+
    |   Suffix  | Multiplication Factor     |
    +===========+===========================+
    |     kB    | 1,000                     |
    +-----------+---------------------------+
    |  K or KiB | 1,024                     |
    +-----------+---------------------------+
    |     MB    | 1,000,000 (1,000 ^ 2)     |
    +-----------+---------------------------+
    |  M or MiB | 1,048,576 (1,024 ^ 2)     |
    +-----------+---------------------------+

    """
    _len_str = len_str.replace(' ', '').upper()

    for suffix, factor in _BYTE_LENGTH_SUFFIXES.items():
        if _len_str.endswith(suffix):
            return to_positive_int(_len_str[:-len(suffix)], desc) * factor

    return to_positive_int(len_str.strip(), desc)


def marker_to_bytes(marker: str) -> bytes:
    """
    Convert a marker given on the command line or in a config file to ``bytes``.

    Markers prefixed with ``hex:`` are interpreted as a hex string
    (e.g. ``hex:51435f494d414745``). Anything else is ASCII-encoded as-is.
    """
    if marker.startswith('hex:'):
        try:
            return bytes.fromhex(marker[4:])
        except ValueError:
            raise ValueError('Invalid hex marker: ' + marker)

    try:
        return marker.encode('ascii')
    except UnicodeEncodeError:
        raise ValueError('Marker must be ASCII, or use hex:<bytes>: ' + marker)
