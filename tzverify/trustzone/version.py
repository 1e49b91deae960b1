# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>

"""
Firmware version comparison functionality
"""

import re

from enum import IntEnum
from itertools import zip_longest


class Ordering(IntEnum):
    """
    Result of :py:func:`compare_versions()`.

    Values match the familiar ``-1, 0, 1`` convention, so an :py:class:`Ordering`
    may be compared directly against integers (e.g. ``result <= 0``).
    """
    LESS    = -1
    EQUAL   = 0
    GREATER = 1

    def __neg__(self):
        return Ordering(-self.value)


class MalformedVersionError(ValueError):
    """
    Raised when a version string contains something other than ASCII decimal
    digits and ``.`` or ``-`` separators.

    The offending string and the index of the first invalid character are
    available via the *version* and *position* attributes.
    """
    def __init__(self, version: str, position: int):
        self.version  = version
        self.position = position

        msg = 'Invalid character {!r} at index {:d} of version string: {:s}'
        super().__init__(msg.format(version[position], position, version))


_INVALID_CHAR_RE = re.compile(r'[^0-9.\-]')
_SEPARATOR_RE    = re.compile(r'[.\-]')


def version_segments(version: str) -> list:
    """
    Split *version* into its numeric segments.

    Segments are separated by ``.`` or ``-`` and may be arbitrarily large.
    Empty segments (e.g. the middle of ``1..2``) are treated as ``0``.

    :py:exc:`MalformedVersionError` is raised for anything other than digits
    and separators.
    """
    if not isinstance(version, str):
        err = 'Expected version to be a str, got {:s}'
        raise TypeError(err.format(type(version).__name__))

    match = _INVALID_CHAR_RE.search(version)
    if match is not None:
        raise MalformedVersionError(version, match.start())

    return [int(s) if s else 0 for s in _SEPARATOR_RE.split(version)]


def compare_versions(a: str, b: str) -> Ordering:
    """
    Compare version strings *a* and *b* segment by segment, left to right.

    The first pair of differing segments decides the result. When one version
    runs out of segments, it is treated as having trailing zeros, so ``1.2``
    and ``1.2.0`` are equal. The choice of separator is irrelevant;
    ``1.2-3`` and ``1.2.3`` are also equal.

    Returns :py:attr:`Ordering.LESS` if *a* precedes *b*, :py:attr:`Ordering.EQUAL`
    if they are equivalent, or :py:attr:`Ordering.GREATER` if *a* follows *b*.
    """
    for seg_a, seg_b in zip_longest(version_segments(a), version_segments(b), fillvalue=0):
        if seg_a < seg_b:
            return Ordering.LESS

        if seg_a > seg_b:
            return Ordering.GREATER

    return Ordering.EQUAL
