# flake8: noqa=E401
# pylint: disable=missing-module-docstring

from .hunter import TestMarkerHunter

from .cmdline import (
    TestArgumentParser,
    TestLoadConfig,
    TestVerifyMain
)

from .search import (
    TestBuildTables,
    TestPatternTableCache,
    TestSearch,
    TestSearchAll
)

from .string import TestCStringAt, TestLengthToInt, TestMarkerToBytes

from .trustzone import (
    TestCompareVersions,
    TestTrustZoneImage,
    TestVersionSatisfied
)
