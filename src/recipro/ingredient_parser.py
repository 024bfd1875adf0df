#!/usr/bin/env python3
"""
Ingredient text parser for recipe ingredient lines.
Parses quantities, units, and ingredient names from free text using an
ordered list of patterns; the first pattern that matches wins.
"""

import re
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from recipro.ingredient_normalizer import UnitNormalizer

# Integer, decimal, simple fraction or mixed number ("2 1/2")
QUANTITY_PATTERN = r'(?P<quantity>\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?)'

MIXED_NUMBER = re.compile(r'^(\d+)\s+(\d+)/(\d+)$')
SIMPLE_FRACTION = re.compile(r'^(\d+)/(\d+)$')


@dataclass(frozen=True)
class ParsedIngredient:
    """Structured ingredient data for one line."""
    original: str
    ingredient_name: str
    quantity: float = 0.0
    unit: str = ""
    has_quantity: bool = False

    def __post_init__(self):
        if not self.has_quantity and (self.quantity != 0 or self.unit):
            raise ValueError("Unquantified ingredient cannot carry a quantity or unit")

    @classmethod
    def unquantified(cls, original: str) -> "ParsedIngredient":
        return cls(original=original, ingredient_name=original.strip().lower())


@dataclass(frozen=True)
class IngredientRule:
    """One ordered parsing rule."""
    name: str
    pattern: re.Pattern
    build: Callable[[re.Match, str], Optional[ParsedIngredient]]


def parse_quantity(quantity: str) -> Optional[float]:
    """
    Parse a quantity token.

    Args:
        quantity: Integer, decimal, fraction or mixed-number text

    Returns:
        Numeric value, or None when the token is not numeric
    """
    quantity = quantity.strip()

    # Mixed numbers like "2 1/2"
    mixed_match = MIXED_NUMBER.match(quantity)
    if mixed_match:
        whole, numerator, denominator = (int(g) for g in mixed_match.groups())
        if denominator == 0:
            return None
        return whole + numerator / denominator

    # Simple fractions like "1/2"
    frac_match = SIMPLE_FRACTION.match(quantity)
    if frac_match:
        numerator, denominator = (int(g) for g in frac_match.groups())
        if denominator == 0:
            return None
        return numerator / denominator

    try:
        return float(quantity)
    except ValueError:
        return None


def has_numeric_quantity(text: str) -> bool:
    return bool(re.search(r'\d', text))


class IngredientParser:
    """Parser for extracting structured data from ingredient lines."""

    def __init__(self, normalizer: Optional[UnitNormalizer] = None):
        """
        Initialize ingredient parser.

        Args:
            normalizer: Unit normalizer used to recognize and canonicalize units
        """
        self.logger = logging.getLogger(__name__)
        self.normalizer = normalizer or UnitNormalizer()
        self.rules = self._compile_rules()

    def _compile_rules(self) -> List[IngredientRule]:
        """Compile the ordered rule list."""
        unit_pattern = '|'.join(
            r'\s+'.join(re.escape(part) for part in unit.split())
            for unit in self.normalizer.synonyms()
        )

        return [
            # "2 1/2 cups flour", "1.5 tbsp. oil"
            IngredientRule(
                name="quantity_unit_name",
                pattern=re.compile(
                    rf'^{QUANTITY_PATTERN}\s+(?P<unit>{unit_pattern})\.?\s+(?P<name>.+)$',
                    re.IGNORECASE
                ),
                build=self._build_with_unit,
            ),
            # "2 eggs"
            IngredientRule(
                name="quantity_name",
                pattern=re.compile(rf'^{QUANTITY_PATTERN}\s+(?P<name>.+)$'),
                build=self._build_without_unit,
            ),
        ]

    def _build_with_unit(self, match: re.Match, original: str) -> Optional[ParsedIngredient]:
        quantity = parse_quantity(match.group('quantity'))
        if quantity is None:
            return None
        return ParsedIngredient(
            original=original,
            ingredient_name=match.group('name').strip().lower(),
            quantity=quantity,
            unit=self.normalizer.normalize(match.group('unit')),
            has_quantity=True,
        )

    def _build_without_unit(self, match: re.Match, original: str) -> Optional[ParsedIngredient]:
        if not has_numeric_quantity(match.group('quantity')):
            return None
        quantity = parse_quantity(match.group('quantity'))
        if quantity is None:
            return None
        return ParsedIngredient(
            original=original,
            ingredient_name=match.group('name').strip().lower(),
            quantity=quantity,
            has_quantity=True,
        )

    def parse_ingredient_line(self, text: str) -> ParsedIngredient:
        """
        Parse a single ingredient line into structured data.

        Never raises; lines that match no quantity rule come back with
        has_quantity False and the whole line as the name.

        Args:
            text: Raw ingredient text

        Returns:
            Parsed ingredient data
        """
        original = text if text is not None else ""
        cleaned = original.strip()

        for rule in self.rules:
            match = rule.pattern.match(cleaned)
            if not match:
                continue
            result = rule.build(match, original)
            if result is not None:
                return result

        return ParsedIngredient.unquantified(original)

    def parse_ingredient_list(self, text_lines: List[str]) -> List[ParsedIngredient]:
        """
        Parse multiple ingredient lines.

        Args:
            text_lines: List of ingredient text lines

        Returns:
            List of parsed ingredients
        """
        results = [self.parse_ingredient_line(line) for line in text_lines]
        self.logger.debug(f"Parsed {len(results)} ingredient lines")
        return results
