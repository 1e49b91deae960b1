# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
#
# flake8: noqa=F401

"""
TrustZone version parsing, comparison and verification functionality
"""

from .image import (
    HOST_FUNCTIONS,
    TZ_PART_PATH,
    TZ_PART_PATH_LEGACY,
    TZ_VER_BUF_LEN,
    TZ_VER_STR,
    VersionMarkerNotFound,
    get_tz_version,
    verify_min_trustzone,
    verify_trustzone
)

from .policy import MatchMode, version_satisfied
from .version import MalformedVersionError, Ordering, compare_versions, version_segments
