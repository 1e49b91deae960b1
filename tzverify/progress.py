# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>

"""
Progress reporting for scans over large firmware images.

A TrustZone partition is usually a few megabytes, but full flash dumps can be
far larger, so :py:class:`~tzverify.hunter.MarkerHunter` reports how much of
its search range it has covered.
"""

from tqdm import tqdm

from . import log


class Progress:
    """
    Silent progress tracker. Counts are recorded for debugging but nothing
    is drawn. :py:class:`ProgressBar` adds a tqdm bar on top of this.

    Instances are context managers that :py:meth:`close()` on exit.
    """

    @staticmethod
    def create(total: int, desc: str, **kwargs):
        """
        Create a :py:class:`ProgressBar` if *show* (default ``True``) is set and the
        log level is one of ``NOTE``, ``INFO`` or ``WARNING``. Otherwise a silent
        :py:class:`Progress` is returned.

        *total* is the count at which the operation is complete, and *desc*
        briefly describes it.
        """
        show  = kwargs.pop('show', True)
        show &= log.get_level() in (log.NOTE, log.INFO, log.WARNING)

        if show:
            return ProgressBar(total, desc, **kwargs)

        log.debug(desc)
        return Progress(total, desc, **kwargs)

    def __init__(self, total: int, desc: str, **_kwargs):
        self._desc  = desc
        self._total = total
        self._count = 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def update(self, count=1):
        """
        Record *count* additional units of completed work.
        """
        self._count += count

    def close(self):
        """
        Finish reporting progress.
        """
        if self._desc is not None:
            log.debug('{:s}: {:d} of {:d} done'.format(self._desc, self._count, self._total))

        self._total = None
        self._desc  = None


class ProgressBar(Progress):
    """
    Draws a transient tqdm progress bar on stderr.

    Use :py:meth:`Progress.create()` rather than instantiating this directly.
    """

    def __init__(self, total, desc=None, unit='B', **kwargs):
        if not unit.startswith(' '):
            unit = ' ' + unit

        super().__init__(total, desc)
        self._pbar = tqdm(total=total, desc=desc, unit=unit, leave=False, **kwargs)

    def update(self, count=1):
        super().update(count)
        self._pbar.update(n=count)

    def close(self):
        super().close()
        self._pbar.close()
