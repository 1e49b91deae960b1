# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
"""
Defines the Hunter base class.
"""

from ..progress import Progress


class HunterResultNotFound(Exception):
    """
    Raised when a Hunter cannot find the requested item.

    This is an expected outcome rather than a fault. For example, an image
    that simply does not carry a version marker, or a search range that was
    narrowed too far to contain it.
    """


class Hunter:
    """
    Base class for searching firmware image data for items of interest.

    **Constructor Arguments**:

    * *data* - Image data to search. Any bytes-like object with integer indexing
      will do, including a read-only ``mmap.mmap``.

    * *address* - Address (or partition offset) corresponding to the start of *data*.
      This is only used to fill in the ``src_addr`` field of results.

    * *start_offset* - Offset within *data* to begin searching. A negative value implies 0.

    * *end_offset* - Inclusive upper bound offset for the search. A negative value implies
      the last element in *data*.

    Subclasses implement :py:meth:`_find_impl()`, which receives validated, inclusive
    offsets and a :py:class:`~tzverify.progress.Progress` handle to update.
    """

    # Briefly describes what a subclass searches for, for progress updates
    _target_desc = None

    def __init__(self, data, address=0, start_offset=-1, end_offset=-1):
        self._data = data

        self._start_offset = 0 if start_offset < 0 else start_offset
        self._end_offset   = len(data) - 1 if end_offset < 0 else end_offset

        if len(data) > 0:
            self._validate_offsets(None, self._start_offset, self._end_offset)

        self._address     = address
        self._end_address = address + self._end_offset

    def _describe_search(self, start):
        address = self._address + start

        if self._target_desc is None:
            return 'Searching at 0x{:08x}'.format(address)

        return 'Searching for {:s} at 0x{:08x}'.format(self._target_desc, address)

    def _validate_offsets(self, target, start, end):
        dlen = len(self._data)

        if start > end:
            err = 'Start index ({:d}) must be <= end ({:d})'
            raise IndexError(err.format(start, end))

        if start < 0 or start >= dlen:
            err = 'Start index ({:d}) outside bounds [0, {:d}]'
            raise IndexError(err.format(start, dlen - 1))

        if end < 0 or end >= dlen:
            err = 'End index ({:d}) outside of bounds [{:d}, {:d}]'
            raise IndexError(err.format(end, start, dlen - 1))

        if target is None:
            return

        if (end - start + 1) < len(target):
            err = 'Target size ({:d}) exceeds size of search range ([{:d}, {:d}])'
            raise IndexError(err.format(len(target), start, end))

    def _resolve_offsets(self, start, end):
        start = self._start_offset if start < 0 else start
        end   = self._end_offset if end < 0 else end
        return start, end

    def _result(self, offset, size, **extra_info) -> dict:
        return {
            'src_off':  offset,
            'src_addr': self._address + offset,
            'src_size': size,
            **extra_info,
        }

    def _find_impl(self, target, start, end, progress, **kwargs):
        err = self.__class__.__name__ + ' is missing a _find_impl() method'
        raise NotImplementedError(err)

    @property
    def name(self) -> str:
        """
        Hunter class name
        """
        return self.__class__.__name__

    def find(self, target, start=-1, end=-1, **kwargs) -> dict:
        """
        Search for *target* and return information about the first result
        as a dictionary with the following key-value pairs:

        +-----------+-----------+------------------------------------------------------------------+
        | Key (str) | Type      | Description                                                      |
        +===========+===========+==================================================================+
        | src_off   | int       | 0-based index into data where target was found                   |
        +-----------+-----------+------------------------------------------------------------------+
        | src_addr  | int       | Absolute address of the located target                           |
        +-----------+-----------+------------------------------------------------------------------+
        | src_size  | int       | Size of the located target, in bytes                             |
        +-----------+-----------+------------------------------------------------------------------+

        The *start* and *end* (inclusive) offsets override those the Hunter was created
        with. The default negative values mean, *"Use the offsets that the object was
        created with."*

        Set the *show_progress* keyword to ``False`` to suppress the progress bar.

        :py:exc:`HunterResultNotFound` is raised if the target could not be found, and
        :py:exc:`IndexError` if the offsets are invalid.
        """
        start, end = self._resolve_offsets(start, end)
        self._validate_offsets(target, start, end)

        show_progress = kwargs.pop('show_progress', True)
        desc = self._describe_search(start)

        with Progress.create(end - start + 1, desc, show=show_progress, unit='B') as progress:
            return self._find_impl(target, start, end, progress, **kwargs)

    def finditer(self, target, start=-1, end=-1, **kwargs):
        """
        Return a generator over all non-overlapping :py:meth:`find()` results
        for *target*, in ascending offset order.

        **Example:**

        .. code:: python

            for result in hunter.finditer(b'QC_IMAGE_VERSION_STRING='):
                msg = 'Version marker at 0x{:08x}'
                print(msg.format(result['src_addr']))

        """
        curr, end = self._resolve_offsets(start, end)

        while True:
            try:
                result = self.find(target, curr, end, **kwargs)
            except (IndexError, HunterResultNotFound):
                # Expected stop condition
                return

            yield result

            # Advance past prior result
            curr = result['src_off'] + max(result['src_size'], 1)
