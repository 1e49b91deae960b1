# SPDX-License-Identifier: BSD-3-Clause
# tzverify: <https://github.com/tzverify/tzverify>
#
# pylint: disable=missing-function-docstring, missing-class-docstring

"""
Unit tests for tzverify.search
"""

import random

from unittest import TestCase

from tzverify.search import (
    ALPHABET_LEN,
    PatternTableCache,
    PatternTables,
    build_tables,
    search,
    search_all
)

from .test_utils import random_data, random_text, reference_find, reference_find_all


class TestBuildTables(TestCase):

    def test_bad_char(self):
        tables = build_tables(b'needle')
        self.assertEqual(len(tables.bad_char), ALPHABET_LEN)

        # The trailing 'e' is excluded, so 'e' maps to index 2
        expected = {b'n': 5, b'e': 3, b'd': 2, b'l': 1, b'x': 6, b'\x00': 6}
        for char, shift in expected.items():
            with self.subTest(char):
                self.assertEqual(tables.bad_char[char[0]], shift)

    def test_good_suffix(self):
        test_cases = (
            (b'x',          (1,)),
            (b'AA',         (2, 2)),
            (b'AB',         (3, 1)),
            (b'ABA',        (4, 3, 1)),
            (b'ABCABC',     (8, 7, 6, 8, 7, 1)),
        )

        for pattern, expected in test_cases:
            with self.subTest(pattern):
                self.assertEqual(build_tables(pattern).good_suffix, expected)

    def test_good_suffix_positive(self):
        rng = random.Random(1)
        for _ in range(0, 200):
            pattern = random_text(rng, b'ab', rng.randint(1, 12))
            with self.subTest(pattern):
                tables = build_tables(pattern)
                self.assertEqual(len(tables.good_suffix), len(pattern))
                self.assertTrue(all(shift >= 1 for shift in tables.good_suffix))

    def test_empty_pattern(self):
        tables = build_tables(b'')
        self.assertEqual(tables.bad_char, (0,) * ALPHABET_LEN)
        self.assertEqual(tables.good_suffix, ())

    def test_idempotent(self):
        pattern = b'QC_IMAGE_VERSION_STRING='
        self.assertEqual(build_tables(pattern), build_tables(pattern))
        self.assertEqual(build_tables(pattern), build_tables(bytearray(pattern)))

    def test_is_pair(self):
        bad_char, good_suffix = build_tables(b'abc')
        self.assertTrue(isinstance(build_tables(b'abc'), PatternTables))
        self.assertEqual(bad_char[ord('a')], 2)
        self.assertEqual(good_suffix[-1], 1)

    def test_invalid_type(self):
        with self.assertRaises(TypeError):
            build_tables('needle')

        with self.assertRaises(TypeError):
            build_tables(42)


class TestSearch(TestCase):

    def test_find(self):
        test_cases = (
            (b'needle6789012345678901234', b'needle', 0),
            (b'0123456789needle678901234', b'needle', 10),
            (b'0123456789012345678needle', b'needle', 19),
            (b'needle6789needle678901234', b'needle', 0),
            (b'nee needl needle',          b'needle', 10),
            (b'XCABA',                     b'ABA',    2),
            (b'ABABABCABC',                b'ABCABC', 4),
            (b'aaaaaaaaab',                b'aab',    7),
            (b'haystack',                  b'needle', None),
            (b'',                          b'x',      None),
        )

        for data, pattern, expected in test_cases:
            with self.subTest((data, pattern)):
                self.assertEqual(search(data, pattern), expected)

    def test_pattern_length_equals_buffer(self):
        self.assertEqual(search(b'needle', b'needle'), 0)
        self.assertEqual(search(b'needlf', b'needle'), None)
        self.assertEqual(search(b'oeedle', b'needle'), None)

    def test_pattern_longer_than_buffer(self):
        self.assertEqual(search(b'needl', b'needle'), None)
        self.assertEqual(search(b'', b'needle'), None)

    def test_empty_pattern(self):
        self.assertEqual(search(b'haystack', b''), 0)
        self.assertEqual(search(b'', b''), 0)
        self.assertEqual(search(b'haystack', b'', start=3), 3)

    def test_prebuilt_tables(self):
        pattern = b'QC_IMAGE_VERSION_STRING='
        tables = build_tables(pattern)

        for seed in range(0, 4):
            data = random_data(1024, seed)
            data[seed * 100:seed * 100 + len(pattern)] = pattern
            with self.subTest(seed):
                self.assertEqual(search(data, pattern, tables), seed * 100)
                self.assertEqual(search(data, pattern, tables), seed * 100)

    def test_mismatched_tables(self):
        with self.assertRaises(ValueError):
            search(b'haystack', b'hay', build_tables(b'stack'))

    def test_start_end(self):
        data = b'needle needle'

        with self.subTest('start'):
            self.assertEqual(search(data, b'needle', start=1), 7)
            self.assertEqual(search(data, b'needle', start=7), 7)
            self.assertEqual(search(data, b'needle', start=8), None)

        with self.subTest('end'):
            self.assertEqual(search(data, b'needle', end=6), 0)
            self.assertEqual(search(data, b'needle', end=5), None)
            self.assertEqual(search(data, b'needle', start=1, end=13), 7)
            self.assertEqual(search(data, b'needle', start=1, end=12), None)
            self.assertEqual(search(data, b'needle', start=1, end=-1), None)

        with self.subTest('start > end'):
            self.assertEqual(search(data, b'needle', start=10, end=2), None)

    def test_buffer_types(self):
        data = b'0123456789needle678901234'
        for buf in (data, bytearray(data), memoryview(data)):
            with self.subTest(type(buf).__name__):
                self.assertEqual(search(buf, b'needle'), 10)
                self.assertEqual(search(b'needle', bytearray(b'dle')), 3)

    def test_against_reference(self):
        rng = random.Random(0)

        for alphabet in (b'ab', b'abc', b'abcd'):
            for _ in range(0, 400):
                data = random_text(rng, alphabet, rng.randint(0, 64))

                if data and rng.random() < 0.5:
                    # Pattern taken from the data itself, so it's present
                    i = rng.randint(0, len(data) - 1)
                    pattern = data[i:i + rng.randint(1, 8)]
                else:
                    pattern = random_text(rng, alphabet, rng.randint(1, 8))

                with self.subTest(data=data, pattern=pattern):
                    expected = reference_find(data, pattern)
                    result = search(data, pattern)
                    self.assertEqual(result, expected)

                    if result is not None:
                        self.assertTrue(result + len(pattern) <= len(data))

    def test_against_reference_ranges(self):
        rng = random.Random(7)

        for _ in range(0, 400):
            data = random_text(rng, b'ab', rng.randint(1, 48))
            pattern = random_text(rng, b'ab', rng.randint(1, 5))
            start = rng.randint(0, len(data))
            end = rng.randint(start, len(data))

            with self.subTest(data=data, pattern=pattern, start=start, end=end):
                self.assertEqual(search(data, pattern, start=start, end=end),
                                 reference_find(data, pattern, start, end))


class TestSearchAll(TestCase):

    def test_non_overlapping(self):
        self.assertEqual(list(search_all(b'aaaa', b'aa')), [0, 2])
        self.assertEqual(list(search_all(b'aaaaa', b'aa')), [0, 2])
        self.assertEqual(list(search_all(b'abcabcab', b'abc')), [0, 3])
        self.assertEqual(list(search_all(b'xyz', b'abc')), [])

    def test_range(self):
        data = b'needle needle needle'
        self.assertEqual(list(search_all(data, b'needle', start=1)), [7, 14])
        self.assertEqual(list(search_all(data, b'needle', end=19)), [0, 7])

    def test_empty_pattern(self):
        self.assertEqual(list(search_all(b'abc', b'')), [0])

    def test_against_reference(self):
        rng = random.Random(3)
        for _ in range(0, 200):
            data = random_text(rng, b'abc', rng.randint(0, 80))
            pattern = random_text(rng, b'abc', rng.randint(1, 4))
            with self.subTest(data=data, pattern=pattern):
                self.assertEqual(list(search_all(data, pattern)), reference_find_all(data, pattern))


class TestPatternTableCache(TestCase):

    def test_get(self):
        cache = PatternTableCache()
        first = cache.get(b'QC_IMAGE_VERSION_STRING=')
        second = cache.get(b'QC_IMAGE_VERSION_STRING=')

        self.assertIs(first, second)
        self.assertEqual(first, build_tables(b'QC_IMAGE_VERSION_STRING='))

        info = cache.info()
        self.assertEqual(info.hits, 1)
        self.assertEqual(info.misses, 1)

    def test_bytearray_key(self):
        cache = PatternTableCache()
        self.assertIs(cache.get(b'marker'), cache.get(bytearray(b'marker')))

    def test_clear_and_eviction(self):
        cache = PatternTableCache(maxsize=2)
        cache.get(b'a')
        cache.get(b'b')
        cache.get(b'c')
        self.assertEqual(cache.info().currsize, 2)

        cache.clear()
        self.assertEqual(cache.info().currsize, 0)

    def test_used_by_search(self):
        cache = PatternTableCache()
        data = b'0123456789needle678901234'
        self.assertEqual(search(data, b'needle', cache.get(b'needle')), 10)
