# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
"""
Decides whether a located firmware version satisfies a list of requirements.
"""

from enum import Enum

from .. import log
from .version import MalformedVersionError, Ordering, compare_versions


class MatchMode(Enum):
    """
    How required versions are checked against the current version.

    * ``EXACT_PREFIX`` - The current version must begin with a required version.
    * ``MIN_VERSION`` - The current version must be equal to or newer than a
      required version.
    """
    EXACT_PREFIX = 'exact'
    MIN_VERSION  = 'min'


def _prefix_satisfied(current: str, required: str, component: str) -> bool:
    log.note('Comparing {:s} versions:'.format(component))
    log.note('  Must be {:s} version: {:s}'.format(component, required))
    log.note('  Current {:s} version: {:s}'.format(component, current))
    return current.startswith(required)


def _min_satisfied(current: str, required: str, component: str) -> bool:
    log.note('Comparing {:s} versions:'.format(component))
    log.note('      Min {:s} version: {:s}'.format(component, required))
    log.note('  Current {:s} version: {:s}'.format(component, current))

    try:
        return compare_versions(required, current) <= Ordering.EQUAL
    except MalformedVersionError as e:
        if e.version == required:
            log.warning('Ignoring required {:s} version: {:s}'.format(component, str(e)))
        else:
            log.error('Cannot compare current {:s} version: {:s}'.format(component, str(e)))
        return False


def version_satisfied(current: str, required, mode, component='TZ') -> bool:
    """
    Return ``True`` if *current* satisfies any of the versions in *required*
    according to *mode*, a :py:class:`MatchMode` (or its value, ``'exact'`` or ``'min'``).

    In ``EXACT_PREFIX`` mode a requirement is met when *current* starts with it,
    byte for byte. Thus ``4.0.3`` accepts a current version of ``4.0.30``, and an
    empty requirement accepts anything.

    In ``MIN_VERSION`` mode a requirement is met when it compares less than or equal
    to *current* via :py:func:`~tzverify.trustzone.compare_versions()`. Malformed
    versions never satisfy a requirement; they are logged rather than raised.

    Each comparison is logged at the *note* level. *component* names the firmware
    in those messages.
    """
    if isinstance(required, str):
        required = [required]

    mode = MatchMode(mode)

    if mode is MatchMode.EXACT_PREFIX:
        check = _prefix_satisfied
    else:
        check = _min_satisfied

    for version in required:
        if check(current, version, component):
            return True

    return False
