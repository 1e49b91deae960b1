# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
"""
Boyer-Moore exact substring search over raw image data.

The search is split into a preprocessing step, :py:func:`build_tables()`, and
the scan itself, :py:func:`search()`. Tables depend only upon the pattern, so
callers checking many images for the same marker can build them once, or let
a :py:class:`PatternTableCache` hold on to them.

Buffers may be any bytes-like object that yields integers when indexed
(``bytes``, ``bytearray``, ``memoryview``, ``mmap.mmap``). They are never
modified.
"""

from collections import namedtuple
from functools import lru_cache

ALPHABET_LEN = 256

PatternTables = namedtuple('PatternTables', ('bad_char', 'good_suffix'))
PatternTables.__doc__ = """
Shift tables for a single pattern, as returned by :py:func:`build_tables()`.

* *bad_char* - 256 entries, indexed by byte value
* *good_suffix* - One entry per pattern index
"""


def _to_pattern(pattern) -> bytes:
    if isinstance(pattern, (bytes, bytearray, memoryview)):
        return bytes(pattern)

    err = 'Expected pattern to be bytes-like, got {:s}'
    raise TypeError(err.format(type(pattern).__name__))


def _is_prefix(pattern: bytes, p: int) -> bool:
    """
    Is pattern[p:] also a prefix of the pattern?
    """
    return pattern[p:] == pattern[:len(pattern) - p]


def _suffix_length(pattern: bytes, p: int) -> int:
    """
    Length of the longest suffix of pattern[:p + 1] that is also a suffix
    of the whole pattern, capped at p.
    """
    last = len(pattern) - 1
    i = 0
    while i < p and pattern[p - i] == pattern[last - i]:
        i += 1
    return i


def build_tables(pattern: bytes) -> PatternTables:
    """
    Build the bad-character and good-suffix shift tables for *pattern*.

    The bad-character table records, for each byte value, the distance from the
    end of the pattern to that byte's rightmost occurrence, not counting the final
    pattern byte. Bytes absent from the pattern shift by the full pattern length.

    Each good-suffix entry is the cursor advance to use after a mismatch at that
    pattern index, given that everything to its right has already matched. The
    first pass handles matched suffixes that are also a prefix of the pattern, and
    the second refines entries where the matched suffix recurs elsewhere in the
    pattern behind a different byte.

    An empty pattern yields a zero-filled bad-character table and an empty
    good-suffix table.
    """
    pattern = _to_pattern(pattern)
    m = len(pattern)

    bad_char = [m] * ALPHABET_LEN
    for i in range(0, m - 1):
        bad_char[pattern[i]] = m - 1 - i

    good_suffix = [0] * m

    # Start one past the end of the pattern; the empty suffix (p = m - 1)
    # is trivially a prefix and resets this on the first iteration.
    last_prefix = m
    for p in range(m - 1, -1, -1):
        if _is_prefix(pattern, p + 1):
            last_prefix = p + 1
        good_suffix[p] = last_prefix + (m - 1 - p)

    for p in range(0, m - 1):
        suffix_len = _suffix_length(pattern, p)
        if pattern[p - suffix_len] != pattern[m - 1 - suffix_len]:
            good_suffix[m - 1 - suffix_len] = m - 1 - p + suffix_len

    return PatternTables(tuple(bad_char), tuple(good_suffix))


def search(buffer, pattern: bytes, tables=None, start=0, end=None):
    """
    Return the offset of the first occurrence of *pattern* in *buffer*,
    or ``None`` if it does not occur.

    *tables* should be the result of :py:func:`build_tables()` for this same
    *pattern*. They are built on the fly when not provided.

    The *start* and *end* offsets bound the search using slice semantics:
    *end* is exclusive and ``None`` means the end of *buffer*. A match is
    only reported if it lies entirely within this range.

    An empty *pattern* trivially matches at *start*.
    """
    pattern = _to_pattern(pattern)
    m = len(pattern)

    if tables is None:
        tables = build_tables(pattern)
    elif len(tables.good_suffix) != m:
        err = 'Tables were built for a {:d}-byte pattern, not {:d} bytes'
        raise ValueError(err.format(len(tables.good_suffix), m))

    start, end, _ = slice(start, end).indices(len(buffer))

    if m == 0:
        return start

    bad_char, good_suffix = tables

    i = start + m - 1
    while i < end:
        j = m - 1
        k = i
        while j >= 0 and buffer[k] == pattern[j]:
            k -= 1
            j -= 1

        if j < 0:
            return k + 1

        # Shifts are relative to the mismatched position, k
        i = k + max(bad_char[buffer[k]], good_suffix[j])

    return None


def search_all(buffer, pattern: bytes, tables=None, start=0, end=None):
    """
    Generator over the offsets of all non-overlapping occurrences of *pattern*
    in *buffer*, in ascending order. Arguments are the same as :py:func:`search()`.

    An empty pattern yields only *start*.
    """
    pattern = _to_pattern(pattern)
    if tables is None:
        tables = build_tables(pattern)

    start, end, _ = slice(start, end).indices(len(buffer))

    while start <= end:
        offset = search(buffer, pattern, tables, start, end)
        if offset is None:
            return

        yield offset

        if len(pattern) == 0:
            return

        start = offset + len(pattern)


class PatternTableCache:
    """
    A least-recently-used cache of :py:class:`PatternTables`, keyed by pattern.

    Nothing in tzverify keeps tables around on its own. Create one of these
    and pass it along (e.g. to :py:class:`~tzverify.hunter.MarkerHunter`) when
    the same markers are searched for repeatedly. Cached tables are immutable,
    so a single cache may be shared between threads.
    """

    def __init__(self, maxsize=32):
        self._build = lru_cache(maxsize=maxsize)(build_tables)

    def get(self, pattern: bytes) -> PatternTables:
        """
        Return tables for *pattern*, building them if they are not cached.
        """
        return self._build(_to_pattern(pattern))

    def clear(self):
        """
        Drop all cached tables.
        """
        self._build.cache_clear()

    def info(self):
        """
        Return the underlying ``functools.lru_cache`` statistics
        (*hits*, *misses*, *maxsize*, *currsize*).
        """
        return self._build.cache_info()
