# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
#
# flake8: noqa=F401
"""
tzverify: Locate and verify firmware version strings embedded in raw images

The search engine is a Boyer-Moore implementation (:py:mod:`tzverify.search`)
used by :py:class:`~tzverify.hunter.MarkerHunter` to find version markers, such
as the ``QC_IMAGE_VERSION_STRING=`` carried by Qualcomm TrustZone images.
:py:mod:`tzverify.trustzone` compares the located version against those an
update requires.
"""

from .version import __version__

from . import log

from . import hunter
from . import trustzone

from .search import (PatternTables,
                     PatternTableCache,
                     build_tables,
                     search,
                     search_all)

from .trustzone import (MatchMode,
                        MalformedVersionError,
                        Ordering,
                        compare_versions,
                        version_satisfied)

from .progress import Progress, ProgressBar
