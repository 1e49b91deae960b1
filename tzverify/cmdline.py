# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
"""
The *tzverify.cmdline* module provides the shared command-line interface used
by the ``tzverify-*`` scripts. This includes tzverify's own
:py:class:`ArgumentParser`, which wraps Python's :py:class:`argparse.ArgumentParser`,
custom :py:class:`argparse.Action` classes, and :py:func:`verify_main()`.
"""

import argparse
import json
import mmap

from contextlib import contextmanager

from tzverify import log
from tzverify.string import length_to_int, marker_to_bytes
from tzverify.trustzone import (
    MatchMode,
    TZ_PART_PATH,
    TZ_VER_BUF_LEN,
    TZ_VER_STR,
    VersionMarkerNotFound,
    get_tz_version,
    version_satisfied
)

EXIT_SATISFIED = 0
EXIT_NOT_SATISFIED = 1
EXIT_ERROR = 2

_CONFIG_KEYS = ('file', 'marker', 'max_len', 'versions')
_LOG_LEVELS = ('debug', 'note', 'info', 'warning', 'error', 'silent')


class ListAction(argparse.Action):
    """
    ArgumentParser action for creating lists from comma-separated strings.

    For example, ``-V 4.0.3,4.0.4 -V 4.1`` results in ``['4.0.3', '4.0.4', '4.1']``.
    """
    def __call__(self, parser, namespace, arg, option_string=None):
        fields = [entry.strip() for entry in arg.split(',')]
        curr_list = getattr(namespace, self.dest) or []
        setattr(namespace, self.dest, curr_list + fields)


class LengthAction(argparse.Action):
    """
    ArgumentParser action for parsing length values, with support for the
    suffixes accepted by :py:func:`tzverify.string.length_to_int()`.
    """
    def __call__(self, parser, namespace, length, option_string=None):
        try:
            value = length_to_int(length)
        except ValueError as e:
            parser.error(str(e))
        setattr(namespace, self.dest, value)


class MarkerAction(argparse.Action):
    """
    ArgumentParser action for converting a marker string to ``bytes`` via
    :py:func:`tzverify.string.marker_to_bytes()`.
    """
    def __call__(self, parser, namespace, marker, option_string=None):
        try:
            value = marker_to_bytes(marker)
        except ValueError as e:
            parser.error(str(e))
        setattr(namespace, self.dest, value)


class ArgumentParser(argparse.ArgumentParser):
    """
    An extension of Python's :py:class:`argparse.ArgumentParser` that adds
    tzverify-specific argument handlers.

    The *init_args* parameter lists which ``add_<x>_argument()`` methods to invoke,
    by their ``<x>`` name. The string ``'default'`` selects everything in
    :py:attr:`DEFAULT_ARGS`, and ``None`` or an empty list selects nothing.

    Keyword arguments prefixed with ``<x>_`` are passed to the corresponding
    ``add_<x>_argument()`` call, sans prefix. For example, ``versions_required=True``
    results in ``add_versions_argument(required=True)``. All other keyword arguments
    are passed to the underlying :py:class:`argparse.ArgumentParser`.
    """
    # pylint: disable=redefined-builtin

    #: Default list used by :py:meth:`ArgumentParser.__init__()` unless
    #: otherwise overridden with a caller-provided list.
    DEFAULT_ARGS = [
        'file',
        'versions',
        'marker',
        'max_len',
        'config',
        'log_level',
    ]

    def _perform_arg_handler_init(self, init_args: list, kwargs_dict: dict):
        """
        Pair each requested add_<x>_argument() method with its prefixed
        keyword arguments, removing those from kwargs_dict.
        """
        init_operations = []
        for name in init_args:
            prefix = name + '_'
            fn_kwargs = {}
            for key in [k for k in kwargs_dict if k.startswith(prefix)]:
                fn_kwargs[key[len(prefix):]] = kwargs_dict.pop(key)

            init_fn = getattr(self, 'add_' + name + '_argument')
            init_operations.append((init_fn, fn_kwargs))

        return init_operations

    def __init__(self, init_args='default', **kwargs):
        if init_args == 'default':
            init_args = self.DEFAULT_ARGS
        elif init_args in self.DEFAULT_ARGS:
            init_args = [init_args]
        elif init_args is None:
            init_args = []
        elif not isinstance(init_args, list):
            raise TypeError('init_args expected to be a string or list')

        init_operations = self._perform_arg_handler_init(init_args, kwargs)

        super().__init__(**kwargs)
        for op_fn, op_kwargs in init_operations:
            op_fn(**op_kwargs)

        try:
            self._optionals.title = 'options'
        except AttributeError:
            pass

    def add_file_argument(self, **kwargs):
        """
        Add the TrustZone image (or partition) path argument.
        """
        help_text = 'TrustZone image or partition to read. Default: ' + TZ_PART_PATH
        self.add_argument('-f', '--file',
                          metavar=kwargs.pop('metavar', '<path>'),
                          default=kwargs.pop('default', None),
                          help=kwargs.pop('help', help_text),
                          **kwargs)

    def add_versions_argument(self, **kwargs):
        """
        Add the required version list argument. It may be repeated.
        """
        help_text = ('Acceptable version(s), comma-separated. '
                     'May be specified multiple times.')

        self.add_argument('-V', '--version-list',
                          dest='versions',
                          metavar=kwargs.pop('metavar', '<version>[,version,...]'),
                          default=kwargs.pop('default', None),
                          action=ListAction,
                          help=kwargs.pop('help', help_text),
                          **kwargs)

    def add_marker_argument(self, **kwargs):
        """
        Add an argument to override the version marker searched for.
        """
        help_text = ('Marker preceding the version string. '
                     'Use hex:<bytes> for non-ASCII markers. '
                     'Default: ' + TZ_VER_STR.decode('ascii'))

        self.add_argument('-M', '--marker',
                          metavar=kwargs.pop('metavar', '<marker>'),
                          default=kwargs.pop('default', None),
                          action=MarkerAction,
                          help=kwargs.pop('help', help_text),
                          **kwargs)

    def add_max_len_argument(self, **kwargs):
        """
        Add an argument bounding the length of the extracted version string.
        """
        help_text = 'Maximum version string length. Default: {:d}'.format(TZ_VER_BUF_LEN)
        self.add_argument('-l', '--max-len',
                          metavar=kwargs.pop('metavar', '<n>'),
                          default=kwargs.pop('default', None),
                          action=LengthAction,
                          help=kwargs.pop('help', help_text),
                          **kwargs)

    def add_config_argument(self, **kwargs):
        """
        Add the JSON configuration file argument.
        """
        help_text = ('JSON file providing any of: ' + ', '.join(_CONFIG_KEYS) + '. '
                     'Command-line arguments take precedence.')

        self.add_argument('-c', '--config',
                          metavar=kwargs.pop('metavar', '<cfg>'),
                          help=kwargs.pop('help', help_text),
                          **kwargs)

    def add_log_level_argument(self, **kwargs):
        """
        Add an argument to set the log level, overriding ``TZVERIFY_LOG_LEVEL``.
        """
        help_text = 'Log level: debug, note, info, warning, error, or silent.'
        self.add_argument('--log-level',
                          metavar=kwargs.pop('metavar', '<level>'),
                          default=kwargs.pop('default', None),
                          type=str.lower,
                          choices=_LOG_LEVELS,
                          help=kwargs.pop('help', help_text),
                          **kwargs)


def load_config(filename: str) -> dict:
    """
    Load a JSON configuration file and return its settings, converted to
    the same types produced by :py:class:`ArgumentParser`.

    A :py:exc:`ValueError` is raised for unknown keys or invalid values.
    """
    with open(filename, 'r') as infile:
        try:
            config = json.load(infile)
        except json.JSONDecodeError as e:
            raise ValueError('Invalid JSON in {:s}: {:s}'.format(filename, str(e)))

    if not isinstance(config, dict):
        raise ValueError('Expected a JSON object in ' + filename)

    for key in config:
        if key not in _CONFIG_KEYS:
            raise ValueError('Unknown configuration key in {:s}: {:s}'.format(filename, key))

    for key in ('file', 'marker'):
        if key in config and not isinstance(config[key], str):
            raise ValueError('Expected "{:s}" to be a string in {:s}'.format(key, filename))

    if 'marker' in config:
        config['marker'] = marker_to_bytes(config['marker'])

    if 'max_len' in config:
        max_len = config['max_len']
        if isinstance(max_len, str):
            config['max_len'] = length_to_int(max_len, desc='max_len')
        elif isinstance(max_len, bool) or not isinstance(max_len, int) or max_len < 0:
            err = 'Expected "max_len" to be a non-negative integer or length string in {:s}'
            raise ValueError(err.format(filename))

    versions = config.get('versions')
    if isinstance(versions, str):
        config['versions'] = [versions]
    elif versions is not None:
        if not isinstance(versions, list) or not all(isinstance(v, str) for v in versions):
            raise ValueError('Expected "versions" to be a string or list of strings in ' + filename)

    return config


@contextmanager
def load_image(filename: str):
    """
    Context manager providing read-only access to an image file's contents.

    The file is memory-mapped, as partitions may be large. Empty files
    (which cannot be mapped) yield an empty ``bytes`` object.
    """
    with open(filename, 'rb') as infile:
        infile.seek(0, 2)
        if infile.tell() == 0:
            yield b''
            return

        with mmap.mmap(infile.fileno(), 0, access=mmap.ACCESS_READ) as data:
            yield data


def _merge_settings(args, config: dict) -> dict:
    settings = {
        'file':     TZ_PART_PATH,
        'marker':   TZ_VER_STR,
        'max_len':  TZ_VER_BUF_LEN,
        'versions': [],
    }

    settings.update(config)

    for key in _CONFIG_KEYS:
        value = getattr(args, key, None)
        if value is not None:
            settings[key] = value

    return settings


def verify_main(mode, argv=None, **kwargs) -> int:
    """
    Entry point shared by the ``tzverify-exact`` and ``tzverify-min`` scripts.

    Checks the version in a TrustZone image against the requested versions using
    *mode* (see :py:class:`~tzverify.trustzone.MatchMode`), prints ``1`` or ``0``
    to stdout, and returns the exit status:

    * ``EXIT_SATISFIED`` (0) - A requested version was satisfied
    * ``EXIT_NOT_SATISFIED`` (1) - No requested version was satisfied
    * ``EXIT_ERROR`` (2) - The image could not be read, lacks a version, or no
      versions were requested

    *argv* defaults to ``sys.argv[1:]``. Remaining keyword arguments are passed
    to the :py:class:`ArgumentParser` constructor.
    """
    mode = MatchMode(mode)

    if mode is MatchMode.EXACT_PREFIX:
        desc = 'Check that a TrustZone image carries one of the specified versions.'
    else:
        desc = 'Check that a TrustZone image is at least one of the specified versions.'

    parser = ArgumentParser(description=kwargs.pop('description', desc), **kwargs)
    args = parser.parse_args(argv)

    if args.log_level:
        log.set_level(args.log_level)

    try:
        config = load_config(args.config) if args.config else {}
    except (OSError, ValueError) as e:
        log.error('Failed to load configuration: ' + str(e))
        return EXIT_ERROR

    settings = _merge_settings(args, config)
    if not settings['versions']:
        log.error('No versions specified. Use -V/--version-list or a config file.')
        return EXIT_ERROR

    try:
        with load_image(settings['file']) as data:
            current = get_tz_version(data, settings['marker'], settings['max_len'])
    except OSError as e:
        log.error('Failed to read current TZ version: ' + str(e))
        return EXIT_ERROR
    except VersionMarkerNotFound as e:
        log.error('Failed to read current TZ version: ' + str(e))
        return EXIT_ERROR

    satisfied = version_satisfied(current, settings['versions'], mode)
    print('1' if satisfied else '0')

    if satisfied:
        log.info('TZ version requirement satisfied')
        return EXIT_SATISFIED

    log.warning('TZ version requirement not satisfied')
    return EXIT_NOT_SATISFIED
