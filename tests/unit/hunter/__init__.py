# flake8: noqa=F401
# pylint: disable=missing-module-docstring
from .marker import TestMarkerHunter
