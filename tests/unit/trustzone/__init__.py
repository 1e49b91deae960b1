# flake8: noqa=F401
# pylint: disable=missing-module-docstring
from .image import TestTrustZoneImage
from .policy import TestVersionSatisfied
from .version import TestCompareVersions
