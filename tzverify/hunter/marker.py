# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
"""
Implements MarkerHunter
"""

from .. import log
from ..search import PatternTableCache, search
from ..string import cstring_at
from .hunter import Hunter, HunterResultNotFound


class MarkerHunter(Hunter):
    """
    Searches image data for a fixed marker (e.g. ``QC_IMAGE_VERSION_STRING=``)
    using a Boyer-Moore scan, and extracts the string that follows it.

    In addition to the arguments described in :py:class:`.Hunter`, the constructor
    accepts:

    * *cache* - A :py:class:`~tzverify.search.PatternTableCache` to obtain shift tables
      from. If not provided, the Hunter keeps a small one of its own so that repeated
      :py:meth:`find()` calls (e.g. via :py:meth:`finditer()`) do not rebuild them.

    * *chunk_size* - Number of candidate start offsets scanned between progress updates.

    Targets may be ``bytes`` or ASCII ``str`` values.
    """

    _target_desc = 'marker'

    DEFAULT_CHUNK_SIZE = 1024 * 1024

    def __init__(self, data, address=0, start_offset=-1, end_offset=-1,
                 cache=None, chunk_size=DEFAULT_CHUNK_SIZE):

        super().__init__(data, address, start_offset, end_offset)

        if chunk_size < 1:
            raise ValueError('Chunk size must be positive, got {:d}'.format(chunk_size))

        self._cache = PatternTableCache(maxsize=4) if cache is None else cache
        self._chunk_size = chunk_size

    @staticmethod
    def _to_bytes(target) -> bytes:
        if isinstance(target, str):
            return target.encode('ascii')

        if isinstance(target, (bytes, bytearray)):
            return bytes(target)

        err = 'Expected target to be str or bytes, got {:s}'
        raise TypeError(err.format(type(target).__name__))

    def find(self, target, start=-1, end=-1, **kwargs) -> dict:
        return super().find(self._to_bytes(target), start, end, **kwargs)

    def finditer(self, target, start=-1, end=-1, **kwargs):
        return super().finditer(self._to_bytes(target), start, end, **kwargs)

    def _find_impl(self, target, start, end, progress, **_kwargs):
        tables = self._cache.get(target)
        tlen   = len(target)
        stop   = end + 1

        # Consecutive windows overlap by tlen - 1 bytes so that each candidate
        # start offset is covered by exactly one window.
        chunk_start = start
        while chunk_start < stop:
            chunk_stop = min(chunk_start + self._chunk_size + tlen - 1, stop)

            offset = search(self._data, target, tables, chunk_start, chunk_stop)
            if offset is not None:
                progress.update(offset - chunk_start + tlen)
                log.debug('Found {:d}-byte marker at 0x{:08x}'.format(tlen, self._address + offset))
                return self._result(offset, tlen)

            progress.update(min(self._chunk_size, stop - chunk_start))
            chunk_start += self._chunk_size

        raise HunterResultNotFound('Marker {!r} not found in [0x{:08x}, 0x{:08x}]'.format(
            target, self._address + start, self._address + end))

    def string_after(self, marker, max_len=255, start=-1, end=-1, **kwargs) -> str:
        """
        Locate *marker* and return the string immediately following it.

        The string ends at the first NULL byte, after *max_len* bytes, or at the end of
        the data, whichever comes first. The *start* and *end* offsets only constrain
        where the marker itself may be found.

        Bytes are decoded as Latin-1, so each character corresponds to exactly one byte
        of the image.

        :py:exc:`~.hunter.HunterResultNotFound` is raised if the marker is not present.
        """
        result = self.find(marker, start, end, **kwargs)
        offset = result['src_off'] + result['src_size']
        return cstring_at(self._data, offset, max_len).decode('latin-1')
