# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
"""
TrustZone image version checks.

Qualcomm TrustZone images embed their build version as a NULL-terminated
string following ``QC_IMAGE_VERSION_STRING=``. The functions here locate that
string within an image and check it against the versions an update package
requires, in the same manner as the ``verify_trustzone()`` and
``verify_min_trustzone()`` recovery updater functions.
"""

from .. import log
from ..hunter import HunterResultNotFound, MarkerHunter
from .policy import MatchMode, version_satisfied

TZ_VER_STR = b'QC_IMAGE_VERSION_STRING='
TZ_VER_BUF_LEN = 255

TZ_PART_PATH = '/dev/block/bootdevice/by-name/tz'
TZ_PART_PATH_LEGACY = '/dev/block/platform/msm_sdcc.1/by-name/tz'


class VersionMarkerNotFound(HunterResultNotFound):
    """
    The image does not contain the version marker.
    """


def get_tz_version(data, marker=TZ_VER_STR, max_len=TZ_VER_BUF_LEN, **kwargs) -> str:
    """
    Return the version string embedded in TrustZone image *data*.

    The string following *marker* is returned, up to *max_len* bytes or its NULL
    terminator. Remaining keyword arguments (e.g. *cache*, *address*, *show_progress*)
    are passed to :py:class:`~tzverify.hunter.MarkerHunter`.

    :py:exc:`VersionMarkerNotFound` is raised if *marker* is absent.
    """
    if len(data) < len(marker):
        err = 'Image ({:d} bytes) is too small to contain the version marker'
        raise VersionMarkerNotFound(err.format(len(data)))

    # Only an empty marker gets here with empty data; it matches, leaving nothing to extract
    if len(data) == 0:
        return ''

    show_progress = kwargs.pop('show_progress', True)
    hunter = MarkerHunter(data, **kwargs)

    try:
        version = hunter.string_after(marker, max_len, show_progress=show_progress)
    except HunterResultNotFound as e:
        raise VersionMarkerNotFound(str(e)) from e

    log.info('Located version string: ' + version)
    return version


def verify_trustzone(data, versions, **kwargs) -> bool:
    """
    Return ``True`` if the version in image *data* begins with any of *versions*.
    """
    current = get_tz_version(data, **kwargs)
    return version_satisfied(current, versions, MatchMode.EXACT_PREFIX)


def verify_min_trustzone(data, versions, **kwargs) -> bool:
    """
    Return ``True`` if the version in image *data* is at least one of *versions*.
    """
    current = get_tz_version(data, **kwargs)
    return version_satisfied(current, versions, MatchMode.MIN_VERSION)


#: Names under which the recovery updater exposed these checks, for use by
#: adapters that dispatch by name.
HOST_FUNCTIONS = {
    'verify_trustzone':     verify_trustzone,
    'verify_min_trustzone': verify_min_trustzone,
}
