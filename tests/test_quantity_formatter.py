#!/usr/bin/env python3
"""
Tests for quantity display formatting.
"""

import sys
import unittest
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / "src"))

from recipro.quantity_formatter import (
    format_number, format_quantity, format_scaled_quantity, to_fraction
)


class FormatQuantityTests(unittest.TestCase):
    def test_common_fractions(self):
        self.assertEqual(format_quantity(0.5), "1/2")
        self.assertEqual(format_quantity(0.125), "1/8")
        self.assertEqual(format_quantity(0.33), "1/3")
        self.assertEqual(format_quantity(0.75), "3/4")

    def test_mixed_numbers(self):
        self.assertEqual(format_quantity(2.5), "2 1/2")
        self.assertEqual(format_quantity(1.666), "1 2/3")
        self.assertEqual(format_quantity(3.25), "3 1/4")

    def test_integers_and_decimals(self):
        self.assertEqual(format_quantity(3), "3")
        self.assertEqual(format_quantity(100.0), "100")
        self.assertEqual(format_quantity(1.1), "1.1")
        self.assertEqual(format_quantity(0.2), "0.2")

    def test_zero_is_blank(self):
        self.assertEqual(format_quantity(0), "")


class ToFractionTests(unittest.TestCase):
    def test_simple_fractions(self):
        self.assertEqual(to_fraction(0.5), "1/2")
        self.assertEqual(to_fraction(0.75), "3/4")
        self.assertEqual(to_fraction(1 / 3), "1/3")

    def test_whole_and_mixed(self):
        self.assertEqual(to_fraction(3.0), "3")
        self.assertEqual(to_fraction(2.5), "2 1/2")

    def test_zero_and_negative(self):
        self.assertEqual(to_fraction(0), "0")
        self.assertEqual(to_fraction(-0.5), "-1/2")


class ScaledQuantityTests(unittest.TestCase):
    def test_below_one_uses_fraction(self):
        self.assertEqual(format_scaled_quantity(0.25), "1/4")

    def test_integral_and_decimal(self):
        self.assertEqual(format_scaled_quantity(4.0), "4")
        self.assertEqual(format_scaled_quantity(1.25), "1.25")
        self.assertEqual(format_scaled_quantity(2.5), "2.5")

    def test_format_number(self):
        self.assertEqual(format_number(2.0), "2")
        self.assertEqual(format_number(1.5), "1.5")


if __name__ == "__main__":
    unittest.main()
