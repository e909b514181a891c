"""
Tests for identifier normalization and value conversion helpers.
"""

import math
import unittest

import numpy as np

from region_coder.models import Region
from region_coder.utils.data_utils import (
    canonical_id, has_property, is_null_or_empty, is_number,
    safe_float_conversion, safe_string_conversion
)


class TestCanonicalId(unittest.TestCase):
    """Test cases for canonical_id."""

    def test_empty_and_non_string_give_empty_key(self):
        self.assertEqual(canonical_id(""), "")
        self.assertEqual(canonical_id(None), "")
        self.assertEqual(canonical_id(42), "")

    def test_names_with_stop_words_and_punctuation_share_a_key(self):
        expected = canonical_id("United States")
        self.assertEqual(expected, "UNITEDSTATES")
        self.assertEqual(canonical_id("The United States"), expected)
        self.assertEqual(canonical_id("united-states"), expected)
        self.assertEqual(canonical_id("UnitedStates"), expected)
        self.assertEqual(canonical_id("the.united.states"), expected)

    def test_underscore_joins_a_stop_word_to_the_next_word(self):
        # "_" is a word character, so "the_" is not a whole-word "the"
        self.assertEqual(canonical_id("the_united.states"), "THEUNITEDSTATES")
        self.assertEqual(canonical_id("isle_of_man"), "ISLEOFMAN")

    def test_stop_words_are_removed_case_insensitively(self):
        self.assertEqual(canonical_id("Bosnia and Herzegovina"), "BOSNIAHERZEGOVINA")
        self.assertEqual(canonical_id("Isle OF Man"), "ISLEMAN")
        self.assertEqual(canonical_id("El Salvador"), "SALVADOR")

    def test_stop_words_inside_words_are_kept(self):
        self.assertEqual(canonical_id("Deutschland"), "DEUTSCHLAND")
        self.assertEqual(canonical_id("Andorra"), "ANDORRA")
        self.assertEqual(canonical_id("Theodore"), "THEODORE")

    def test_every_listed_separator_is_removed(self):
        self.assertEqual(canonical_id("a-b_c d.e,f'g(h)i&j[k]l/m"), "ABCDEFGHIJKLM")

    def test_leading_dot_is_only_upper_cased(self):
        self.assertEqual(canonical_id(".de"), ".DE")
        self.assertEqual(canonical_id(".la"), ".LA")
        self.assertEqual(canonical_id(".co.uk"), ".CO.UK")

    def test_code_that_is_a_stop_word_is_kept(self):
        self.assertEqual(canonical_id("DE"), "DE")
        self.assertEqual(canonical_id("la"), "LA")
        self.assertEqual(canonical_id("El"), "EL")

    def test_idempotent(self):
        samples = [
            "The United States", "t-he", "d-e", "Côte d'Ivoire", "Saint Helena, Ascension and Tristan da Cunha",
            "Congo (the Democratic Republic of the)", ".de", "DE", "🇫🇷", "  ", "and the of",
            "Trinidad & Tobago", "Virgin Islands [U.S.]", "a/b", "ﬁ",
        ]
        for sample in samples:
            with self.subTest(sample=sample):
                once = canonical_id(sample)
                self.assertEqual(canonical_id(once), once)

    def test_hidden_stop_word_collapses_to_a_stable_key(self):
        self.assertEqual(canonical_id("t-he"), "THE")
        self.assertEqual(canonical_id(canonical_id("t-he")), "THE")

    def test_emoji_flag_is_upper_cased_unchanged(self):
        self.assertEqual(canonical_id("🇫🇷"), "🇫🇷")


class TestNumberHelpers(unittest.TestCase):
    """Test cases for numeric validation and conversion."""

    def test_is_number(self):
        self.assertTrue(is_number(1))
        self.assertTrue(is_number(-2.5))
        self.assertTrue(is_number(np.float64(3.0)))
        self.assertFalse(is_number(True))
        self.assertFalse(is_number(np.bool_(False)))
        self.assertFalse(is_number(float('nan')))
        self.assertFalse(is_number(float('inf')))
        self.assertFalse(is_number("1.0"))
        self.assertFalse(is_number(None))

    def test_safe_float_conversion(self):
        self.assertEqual(safe_float_conversion("12.5"), 12.5)
        self.assertEqual(safe_float_conversion(" 7 "), 7.0)
        self.assertEqual(safe_float_conversion(3), 3.0)
        self.assertIsNone(safe_float_conversion(""))
        self.assertIsNone(safe_float_conversion("abc"))
        self.assertIsNone(safe_float_conversion(None))
        self.assertIsNone(safe_float_conversion(float('nan')))
        self.assertIsNone(safe_float_conversion("inf"))
        self.assertIsNone(safe_float_conversion(True))
        self.assertIsNone(safe_float_conversion([1, 2]))

    def test_safe_string_conversion(self):
        self.assertEqual(safe_string_conversion("  abc "), "abc")
        self.assertEqual(safe_string_conversion(None), "")
        self.assertEqual(safe_string_conversion(math.nan), "")
        self.assertEqual(safe_string_conversion(12), "12")

    def test_is_null_or_empty(self):
        self.assertTrue(is_null_or_empty(None))
        self.assertTrue(is_null_or_empty("   "))
        self.assertTrue(is_null_or_empty(float('nan')))
        self.assertFalse(is_null_or_empty("x"))
        self.assertFalse(is_null_or_empty(0))


class TestHasProperty(unittest.TestCase):
    """Test cases for the required-property filter."""

    def setUp(self):
        self.region = Region(id="FR", iso1a2="FR", name_en="France", calling_codes=("33",))
        self.bare = Region(id="X")

    def test_populated_properties(self):
        self.assertTrue(has_property(self.region, "iso1A2"))
        self.assertTrue(has_property(self.region, "nameEn"))
        self.assertTrue(has_property(self.region, "callingCodes"))

    def test_empty_and_unknown_properties(self):
        self.assertFalse(has_property(self.bare, "iso1A2"))
        self.assertFalse(has_property(self.bare, "callingCodes"))
        self.assertFalse(has_property(self.region, "population"))
        self.assertFalse(has_property(self.region, ""))
        self.assertFalse(has_property(None, "iso1A2"))

    def test_explicit_empty_list_is_present(self):
        self.assertTrue(has_property(Region(id="FR", calling_codes=()), "callingCodes"))
        self.assertFalse(has_property(Region(id="FR", calling_codes=None), "callingCodes"))


if __name__ == '__main__':
    unittest.main()
