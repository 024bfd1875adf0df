#!/usr/bin/env python3
"""
Tests for unit normalization and consolidation keys.
"""

import sys
import unittest
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / "src"))

from recipro.ingredient_normalizer import (
    UnitNormalizer, build_consolidation_key, normalize_ingredient_name
)
from recipro.ingredient_parser import IngredientParser


class UnitNormalizerTests(unittest.TestCase):
    def setUp(self):
        self.normalizer = UnitNormalizer()

    def test_synonyms_map_to_canonical_tokens(self):
        cases = {
            "Cups": "cup",
            "tablespoons": "tbsp",
            "TBS": "tbsp",
            "teaspoon": "tsp",
            "fluid  ounces": "fl oz",
            "lbs": "lb",
            "Ounce": "oz",
            "grams": "g",
            "kilogram": "kg",
            "milliliters": "ml",
            "pkg": "package",
            "cloves": "clove",
        }
        for unit, canonical in cases.items():
            with self.subTest(unit=unit):
                self.assertEqual(self.normalizer.normalize(unit), canonical)

    def test_unknown_unit_passes_through_lowercased(self):
        self.assertEqual(self.normalizer.normalize("Pinch"), "pinch")

    def test_empty_unit(self):
        self.assertEqual(self.normalizer.normalize(""), "")
        self.assertEqual(self.normalizer.normalize(None), "")

    def test_extra_synonyms(self):
        normalizer = UnitNormalizer({"dash": "pinch"})
        self.assertEqual(normalizer.normalize("DASH"), "pinch")
        self.assertTrue(normalizer.is_known("dash"))

    def test_synonyms_longest_first(self):
        synonyms = self.normalizer.synonyms()
        self.assertLess(synonyms.index("cups"), synonyms.index("c"))


class ConsolidationKeyTests(unittest.TestCase):
    def setUp(self):
        self.parser = IngredientParser()

    def test_name_drops_comma_suffix_and_parentheticals(self):
        self.assertEqual(normalize_ingredient_name("garlic, minced"), "garlic")
        self.assertEqual(normalize_ingredient_name("butter (softened)"), "butter")

    def test_same_substance_same_unit_shares_key(self):
        first = build_consolidation_key(self.parser.parse_ingredient_line("2 cloves garlic, minced"))
        second = build_consolidation_key(self.parser.parse_ingredient_line("1 clove garlic"))
        self.assertEqual(first, "garlic|clove")
        self.assertEqual(first, second)

    def test_different_units_do_not_share_key(self):
        cup = build_consolidation_key(self.parser.parse_ingredient_line("1 cup milk"))
        tbsp = build_consolidation_key(self.parser.parse_ingredient_line("1 tbsp milk"))
        self.assertNotEqual(cup, tbsp)

    def test_unitless_key(self):
        key = build_consolidation_key(self.parser.parse_ingredient_line("2 eggs"))
        self.assertEqual(key, "eggs|")


if __name__ == "__main__":
    unittest.main()
