# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
# pylint: disable=missing-module-docstring
__version__ = '0.3.0'
