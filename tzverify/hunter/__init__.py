# SPDX-License-Identifier: BSD-3-Clause
#
# flake8: noqa=F401

"""
This module provides the :py:class:`~tzverify.hunter.Hunter` base class
and its associated implementations.

A *"Hunter"* is class that searches image data for items of interest and
provides information about located instances.
"""

from .hunter import Hunter, HunterResultNotFound
from .marker import MarkerHunter
