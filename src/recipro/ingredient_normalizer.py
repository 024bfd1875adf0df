#!/usr/bin/env python3
"""
Ingredient Normalization Module
Maps unit synonyms to canonical unit tokens and builds the consolidation
keys used to merge ingredient lines across recipes.
"""

import re
from typing import Dict, List, Optional

# Canonical unit -> accepted spellings (matched case-insensitively)
VOLUME_UNITS = {
    "cup": ["cup", "cups", "c"],
    "tbsp": ["tablespoon", "tablespoons", "tbsp", "tbs"],
    "tsp": ["teaspoon", "teaspoons", "tsp"],
    "fl oz": ["fluid ounce", "fluid ounces", "fl oz"],
    "pint": ["pint", "pints", "pt"],
    "quart": ["quart", "quarts", "qt"],
    "gallon": ["gallon", "gallons", "gal"],
    "liter": ["liter", "liters", "l"],
    "ml": ["milliliter", "milliliters", "ml"],
}

WEIGHT_UNITS = {
    "lb": ["pound", "pounds", "lb", "lbs"],
    "oz": ["ounce", "ounces", "oz"],
    "g": ["gram", "grams", "g"],
    "kg": ["kilogram", "kilograms", "kg"],
}

COUNT_UNITS = {
    "piece": ["piece", "pieces"],
    "slice": ["slice", "slices"],
    "clove": ["clove", "cloves"],
    "head": ["head", "heads"],
    "bunch": ["bunch", "bunches"],
    "package": ["package", "packages", "pkg"],
    "can": ["can", "cans"],
    "jar": ["jar", "jars"],
    "bottle": ["bottle", "bottles"],
}

KEY_SEPARATOR = "|"


def _build_lookup() -> Dict[str, str]:
    lookup = {}
    for table in (VOLUME_UNITS, WEIGHT_UNITS, COUNT_UNITS):
        for canonical, variations in table.items():
            for variation in variations:
                lookup[variation.lower()] = canonical
    return lookup


UNIT_LOOKUP = _build_lookup()


class UnitNormalizer:
    """Canonical unit lookup over a fixed synonym table."""

    def __init__(self, extra_synonyms: Optional[Dict[str, str]] = None):
        self.unit_lookup = dict(UNIT_LOOKUP)
        for synonym, canonical in (extra_synonyms or {}).items():
            self.unit_lookup[synonym.lower()] = canonical.lower()

    def normalize(self, unit: Optional[str]) -> str:
        """Canonical token for a unit; unknown units pass through lowercased."""
        if not unit:
            return ""
        unit_lower = re.sub(r'\s+', ' ', unit.strip().lower())
        return self.unit_lookup.get(unit_lower, unit_lower)

    def is_known(self, unit: str) -> bool:
        return re.sub(r'\s+', ' ', unit.strip().lower()) in self.unit_lookup

    def synonyms(self) -> List[str]:
        """All known spellings, longest first, for building match patterns."""
        return sorted(self.unit_lookup, key=len, reverse=True)


def normalize_ingredient_name(name: str) -> str:
    """Drop everything after the first comma and any parenthetical notes."""
    name = re.sub(r'\s*,.*$', '', name, flags=re.DOTALL)
    name = re.sub(r'\s*\(.*?\)', '', name)
    return name.strip()


def build_consolidation_key(parsed, normalizer: Optional[UnitNormalizer] = None) -> str:
    """
    Build the key that decides which ingredient lines merge.

    Args:
        parsed: ParsedIngredient
        normalizer: Unit normalizer, defaults to the standard table

    Returns:
        ``name|unit``; the same substance in different units gives different keys
    """
    normalizer = normalizer or _default_normalizer
    return f"{normalize_ingredient_name(parsed.ingredient_name)}{KEY_SEPARATOR}{normalizer.normalize(parsed.unit)}"


_default_normalizer = UnitNormalizer()
