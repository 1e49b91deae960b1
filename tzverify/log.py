# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>

"""
Logging for tzverify, layered atop of Python's own ``logging`` module.

The initial log level is taken from the ``TZVERIFY_LOG_LEVEL`` environment
variable, and defaults to ``'note'`` when it is not set.

+----------------+-------------+------------------------------------------------------------------+
|   Level Name   | Msg. Prefix | Description                                                      |
+================+=============+==================================================================+
| debug          |   ``[#]``   | Table and scan details useful when diagnosing a failed search    |
+----------------+-------------+------------------------------------------------------------------+
| note           |   ``[*]``   | Each version comparison performed, in the recovery log format    |
+----------------+-------------+------------------------------------------------------------------+
| info           |   ``[+]``   | Located version strings and final verification results           |
+----------------+-------------+------------------------------------------------------------------+
| warning        |   ``[!]``   | Ignored inputs, such as malformed required versions              |
+----------------+-------------+------------------------------------------------------------------+
| error          |   ``[X]``   | Unreadable images, absent version markers                        |
+----------------+-------------+------------------------------------------------------------------+
| silent         |     N/A     | Nothing is written to stderr                                     |
+----------------+-------------+------------------------------------------------------------------+

Progress bars are only drawn at the *note*, *info* and *warning* levels.
"""

import os
import platform
import sys
import logging

DEBUG   = logging.DEBUG
NOTE    = logging.DEBUG + (logging.INFO - logging.DEBUG) // 2
INFO    = logging.INFO
WARNING = logging.WARN
ERROR   = logging.ERROR
SILENT  = logging.CRITICAL + (logging.CRITICAL - logging.ERROR)

_COLORS = {
    DEBUG:   '\033[34m',
    NOTE:    '\033[36m',
    INFO:    '\033[32m',
    WARNING: '\033[33m',
    ERROR:   '\033[31m',
}

_PREFIXES = {
    DEBUG:   '[#] ',
    NOTE:    '[*] ',
    INFO:    '[+] ',
    WARNING: '[!] ',
    ERROR:   '[X] ',
}


class TZVerifyLog:
    """
    A thin logger that prefixes every message with a level marker and an
    optional caller-supplied *prefix* (e.g. the name of a script).

    Every instance shares the Python logger named by *logger_name*.
    """

    _level_name_map = {
        'debug':    DEBUG,
        'note':     NOTE,
        'info':     INFO,
        'warn':     WARNING,
        'warning':  WARNING,
        'error':    ERROR,
        'fatal':    ERROR,
        'critical': ERROR,
        'silent':   SILENT
    }

    def __init__(self, prefix='', logger_name='tzverify'):
        use_color = platform.system() in ('Linux', 'Darwin') and sys.stderr.isatty()

        if prefix != '' and not prefix.endswith(' '):
            prefix += ' '

        self._prefix = {}
        for level, pfx in _PREFIXES.items():
            if use_color:
                pfx = _COLORS[level] + pfx + '\033[0m'
            self._prefix[level] = pfx + prefix

        self.logger = logging.getLogger(logger_name)

    @property
    def level(self):
        """
        Current log level
        """
        return self.logger.level

    @level.setter
    def level(self, level):
        if isinstance(level, str):
            try:
                level = self._level_name_map[level.lower()]
            except KeyError:
                raise ValueError('Invalid log level: ' + level)

        self.logger.setLevel(level)

    def _log(self, level, args, kwargs):
        self.logger.log(level, *((self._prefix[level] + args[0],) + args[1:]), **kwargs)

    def debug(self, *args, **kwargs):
        """
        Log scan internals that only matter when something looks wrong.
        """
        self._log(DEBUG, args, kwargs)

    def note(self, *args, **kwargs):
        """
        Log step-by-step detail, such as each version comparison.
        """
        self._log(NOTE, args, kwargs)

    def info(self, *args, **kwargs):
        """
        Log the outcome of a high-level operation.
        """
        self._log(INFO, args, kwargs)

    def warning(self, *args, **kwargs):
        """
        Log something undesirable that was worked around.
        """
        self._log(WARNING, args, kwargs)

    def error(self, *args, **kwargs):
        """
        Log a failure that ends the current operation.
        """
        self._log(ERROR, args, kwargs)


_tzverify_root = TZVerifyLog()  # pylint: disable=invalid-name
_tzverify_root.logger.addHandler(logging.StreamHandler())
_tzverify_root.level = os.getenv('TZVERIFY_LOG_LEVEL', NOTE)


def debug(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`TZVerifyLog.debug()` method.
    """
    _tzverify_root.debug(*args, **kwargs)


def note(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`TZVerifyLog.note()` method.
    """
    _tzverify_root.note(*args, **kwargs)


def info(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`TZVerifyLog.info()` method.
    """
    _tzverify_root.info(*args, **kwargs)


def warning(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`TZVerifyLog.warning()` method.
    """
    _tzverify_root.warning(*args, **kwargs)


def error(*args, **kwargs):
    """
    Invokes the root logger's :py:meth:`TZVerifyLog.error()` method.
    """
    _tzverify_root.error(*args, **kwargs)


def set_level(level):
    """
    Set the root logger's level, either as one of the integer constants
    in this module (``DEBUG``, ``NOTE``, ``INFO``, ``WARNING``, ``ERROR``,
    ``SILENT``) or by name (``'debug'``, ``'note'``, ...).
    """
    _tzverify_root.level = level


def get_level() -> int:
    """
    Get the current level of the root logger.
    """
    return _tzverify_root.level
