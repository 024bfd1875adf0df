#!/usr/bin/env python3
"""
Quantity formatting for display.
Turns numeric ingredient quantities back into cook-friendly text, preferring
common fractions ("1/2", "2 1/3") over decimals.
"""

import math
from typing import List, Tuple

# Common fractions checked before falling back to decimals
FRACTION_TABLE: List[Tuple[float, str]] = [
    (0.125, "1/8"),
    (0.25, "1/4"),
    (0.333, "1/3"),
    (0.5, "1/2"),
    (0.667, "2/3"),
    (0.75, "3/4"),
]
FRACTION_TOLERANCE = 0.01


def _trim_decimal(value: float, precision: int = 2) -> str:
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _match_fraction(value: float) -> str:
    for decimal, fraction in FRACTION_TABLE:
        if abs(value - decimal) < FRACTION_TOLERANCE:
            return fraction
    return ""


def format_quantity(quantity: float) -> str:
    """
    Format a consolidated quantity for the shopping list.

    Args:
        quantity: Numeric quantity

    Returns:
        "" for zero, a common fraction or mixed number when one is within
        tolerance, otherwise an integer or a 2-place decimal without
        trailing zeros
    """
    if quantity == 0:
        return ""

    fraction = _match_fraction(quantity)
    if fraction:
        return fraction

    whole = math.floor(quantity)
    remainder = quantity - whole
    if whole > 0 and remainder > 0:
        fraction = _match_fraction(remainder)
        if fraction:
            return f"{whole} {fraction}"

    if quantity == int(quantity):
        return str(int(quantity))
    return _trim_decimal(quantity)


def to_fraction(decimal: float, tolerance: float = 1.0e-6, max_iterations: int = 64) -> str:
    """
    Convert a decimal to the lowest-denominator fraction via continued fractions.

    Args:
        decimal: Value to convert
        tolerance: Relative tolerance for accepting a convergent
        max_iterations: Upper bound on expansion steps

    Returns:
        "w", "n/d" or "w n/d"
    """
    if decimal == 0:
        return "0"
    if decimal < 0:
        return "-" + to_fraction(-decimal, tolerance, max_iterations)

    h1, h2, k1, k2 = 1, 0, 0, 1
    b = decimal
    for _ in range(max_iterations):
        a = math.floor(b)
        h1, h2 = a * h1 + h2, h1
        k1, k2 = a * k1 + k2, k1
        if abs(decimal - h1 / k1) <= decimal * tolerance:
            break
        remainder = b - a
        if remainder == 0:
            break
        b = 1 / remainder

    if k1 == 1:
        return str(h1)
    if h1 > k1:
        whole, remainder = divmod(h1, k1)
        return str(whole) if remainder == 0 else f"{whole} {remainder}/{k1}"
    return f"{h1}/{k1}"


def format_scaled_quantity(quantity: float) -> str:
    """Quantity text for a scaled single recipe."""
    if 0 < quantity < 1:
        return to_fraction(quantity)
    if quantity == int(quantity):
        return str(int(quantity))
    return _trim_decimal(quantity)


def format_number(value: float) -> str:
    """Plain number text for multipliers and serving counts."""
    if value == int(value):
        return str(int(value))
    return str(value)
