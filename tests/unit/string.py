# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
#
# Relax style and documentation requirements for unit tests.
# pylint: disable=missing-function-docstring,missing-class-docstring,too-few-public-methods
#

"""
Unit tests for tzverify.string
"""

from unittest import TestCase

from tzverify.string import cstring_at, length_to_int, marker_to_bytes, to_positive_int


class TestCStringAt(TestCase):

    def test_cstring_at(self):
        data = b'QC_IMAGE_VERSION_STRING=4.0.3\x00\xff\xff'

        test_cases = (
            (24, 255,   b'4.0.3'),
            (24, 3,     b'4.0'),
            (24, 0,     b''),
            (29, 255,   b''),           # Sitting on the NULL
            (30, 255,   b'\xff\xff'),   # Runs to the end of data
            (99, 255,   b''),
        )

        for offset, max_len, expected in test_cases:
            with self.subTest((offset, max_len)):
                self.assertEqual(cstring_at(data, offset, max_len), expected)

    def test_bytearray(self):
        self.assertEqual(cstring_at(bytearray(b'ab\x00cd'), 0, 8), b'ab')

    def test_invalid(self):
        with self.assertRaises(IndexError):
            cstring_at(b'abc', -1, 2)

        with self.assertRaises(ValueError):
            cstring_at(b'abc', 0, -2)


class TestLengthToInt(TestCase):

    def test_length_to_int(self):
        test_cases = (
            ('255',     255),
            ('0x100',   256),
            ('1K',      1024),
            ('1 KiB',   1024),
            ('2kB',     2000),
            ('1M',      1024 * 1024),
            ('3MiB',    3 * 1024 * 1024),
            ('1MB',     1000 * 1000),
        )

        for string, expected in test_cases:
            with self.subTest(string):
                self.assertEqual(length_to_int(string), expected)

    def test_invalid(self):
        for string in ('', 'ten', '-4', '1G', '4 bytes'):
            with self.subTest(string):
                with self.assertRaises(ValueError):
                    length_to_int(string)

    def test_to_positive_int(self):
        self.assertEqual(to_positive_int('0'), 0)
        self.assertEqual(to_positive_int('0x20'), 32)

        with self.assertRaises(ValueError) as ctx:
            to_positive_int('-1', 'max_len')
        self.assertIn('max_len', str(ctx.exception))


class TestMarkerToBytes(TestCase):

    def test_marker_to_bytes(self):
        self.assertEqual(marker_to_bytes('QC_IMAGE_VERSION_STRING='), b'QC_IMAGE_VERSION_STRING=')
        self.assertEqual(marker_to_bytes('hex:5143 5f49'), b'QC_I')
        self.assertEqual(marker_to_bytes('hex:00ff'), b'\x00\xff')

    def test_invalid(self):
        with self.assertRaises(ValueError):
            marker_to_bytes('hex:zz')

        with self.assertRaises(ValueError):
            marker_to_bytes('VERSIÓN=')
