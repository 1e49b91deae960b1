#!/usr/bin/env python3
"""
tzverify installation script
"""

import os
import re

from os.path import dirname, join, realpath
from setuptools import setup, find_packages

THIS_DIR = realpath(dirname(__file__))

# Slightly more permissive than PEP440, which requires a dot for suffixes.
VERSION_REGEX = re.compile(
    r"__version__\s*=\s*'(?P<version>[0-9]+\.[0-9]+\.[0-9]+((\.|-|\+)[a-zA-Z0-9]+)*)'"
)


def get_version() -> str:
    version_file = join(THIS_DIR, 'tzverify', 'version.py')
    with open(version_file, 'r') as infile:
        version_info = infile.read()
        match = VERSION_REGEX.search(version_info)
        if match:
            return match.group('version')

    raise ValueError('Failed to find version info')


def get_scripts() -> list:
    ret = []
    for root, _, files in os.walk(join(THIS_DIR, 'scripts')):
        for filename in files:
            if filename.startswith('.') or filename.endswith('.swp'):
                continue

            ret.append(os.path.relpath(join(root, filename), THIS_DIR))

    if not ret:
        raise FileNotFoundError('tzverify scripts not found')

    return sorted(ret)


def get_description() -> str:
    with open(join(THIS_DIR, 'README.md'), 'r') as infile:
        return infile.read()


setup(
    name='tzverify',
    version=get_version(),
    description='Locate and verify TrustZone firmware version strings in raw images',

    long_description=get_description(),
    long_description_content_type='text/markdown',

    license='BSD 3-Clause License',
    url='https://github.com/tzverify/tzverify',

    packages=find_packages(exclude=['tests', 'tests.*']),
    scripts=get_scripts(),

    install_requires=['tqdm >= 4.30.0'],

    python_requires='>=3.6, <4',

    extras_require={
        'docs': ['sphinx>=4.4.0', 'sphinx_rtd_theme >=1.0.0, <2.0.0']
    },

    zip_safe=False,

    classifiers=[
        'Development Status :: 4 - Beta',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3 :: Only',
        'Topic :: Security',
        'Topic :: System :: Boot',
        'Topic :: System :: Hardware',
    ],
)
