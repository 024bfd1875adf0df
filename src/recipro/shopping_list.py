#!/usr/bin/env python3
"""
Shopping List Generator
Buckets consolidated ingredients into store categories by keyword and renders
the shopping list, the per-ingredient breakdown and the downloadable text file.
"""

from datetime import datetime
from typing import Dict, List, Optional

import structlog

from recipro.quantity_formatter import format_number, format_quantity
from recipro.recipe_models import ConsolidatedIngredient, SelectedRecipe

# Setup logging
logger = structlog.get_logger(__name__)

PRODUCE = "Produce"
MEAT = "Meat & Seafood"
DAIRY = "Dairy & Eggs"
PANTRY = "Pantry & Dry Goods"
SPICES = "Spices & Seasonings"
OTHER = "Other"

# Display order of sections
CATEGORY_ORDER = [PRODUCE, MEAT, DAIRY, PANTRY, SPICES, OTHER]

# Keyword lists, checked in this order; first substring hit wins
CATEGORY_KEYWORDS = [
    (PRODUCE, ['tomato', 'onion', 'garlic', 'basil', 'parsley', 'dill', 'chives',
               'lemon', 'lime', 'carrot', 'celery', 'potato', 'lettuce', 'spinach',
               'bell pepper', 'mushroom', 'avocado', 'cucumber', 'berries', 'apple',
               'banana']),
    (MEAT, ['chicken', 'beef', 'pork', 'salmon', 'fish', 'turkey', 'lamb', 'shrimp',
            'crab', 'lobster']),
    (DAIRY, ['milk', 'cream', 'butter', 'cheese', 'mozzarella', 'parmesan', 'cheddar',
             'yogurt', 'sour cream', 'egg']),
    (SPICES, ['salt', 'pepper', 'oregano', 'thyme', 'rosemary', 'paprika', 'cumin',
              'cinnamon', 'vanilla', 'mustard']),
    (PANTRY, ['flour', 'sugar', 'oil', 'vinegar']),
]

HEAVY_RULE = '═'
LIGHT_RULE = '─'


def _format_date(moment: datetime) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


def _format_time(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"


def format_item(ingredient: ConsolidatedIngredient) -> str:
    """Shopping list line for one consolidated ingredient (no checkbox)."""
    if not ingredient.has_quantity:
        return ingredient.ingredient_name
    quantity = f"{format_quantity(ingredient.total_quantity)} {ingredient.unit}".strip()
    return f"{quantity} {ingredient.ingredient_name}" if quantity else ingredient.ingredient_name


class ShoppingListGenerator:
    """Renders consolidated ingredients as a categorized shopping list."""

    def __init__(self, category_keywords=None):
        """
        Initialize shopping list generator.

        Args:
            category_keywords: Ordered (category, keywords) pairs overriding
                the built-in table
        """
        self.category_keywords = category_keywords or CATEGORY_KEYWORDS

    def categorize(self, ingredient_name: str) -> str:
        """
        Pick the store category for an ingredient name.

        Args:
            ingredient_name: Ingredient name

        Returns:
            Category label, OTHER when no keyword matches
        """
        lower_name = ingredient_name.lower()
        for category, keywords in self.category_keywords:
            if any(keyword in lower_name for keyword in keywords):
                return category
        return OTHER

    def group(self, consolidated: List[ConsolidatedIngredient]) -> Dict[str, List[str]]:
        """Display lines per category in section order, empty sections omitted."""
        categories: Dict[str, List[str]] = {category: [] for category in CATEGORY_ORDER}
        for ingredient in consolidated:
            categories.setdefault(self.categorize(ingredient.ingredient_name), []).append(
                format_item(ingredient)
            )
        return {category: items for category, items in categories.items() if items}

    def generate(self, selection: List[SelectedRecipe], consolidated: List[ConsolidatedIngredient],
                 generated_at: Optional[datetime] = None) -> str:
        """
        Render the shopping list.

        Args:
            selection: Selected recipes with multipliers
            consolidated: Sorted consolidated ingredients
            generated_at: Timestamp for the footer, defaults to now

        Returns:
            Shopping list text
        """
        generated_at = generated_at or datetime.now()

        text = '🛒 SHOPPING LIST\n'
        text += HEAVY_RULE * 50 + '\n\n'

        text += '📋 RECIPES INCLUDED:\n'
        for recipe in selection:
            text += f"• {recipe.title}"
            if recipe.multiplier != 1:
                text += f" (×{format_number(recipe.multiplier)})"
            text += f" - {format_number(recipe.adjusted_servings)} servings\n"
        text += '\n'

        for category, items in self.group(consolidated).items():
            text += f"\n{category.upper()}:\n"
            text += LIGHT_RULE * (len(category) + 1) + '\n'
            for item in items:
                text += f"☐ {item}\n"

        text += '\n' + HEAVY_RULE * 50 + '\n'
        text += f"Generated on {_format_date(generated_at)} at {_format_time(generated_at)}\n"
        text += f"Total recipes: {len(selection)} | Total ingredients: {len(consolidated)}"

        logger.debug("shopping_list_generated", recipes=len(selection), ingredients=len(consolidated))
        return text

    def generate_detailed_breakdown(self, consolidated: List[ConsolidatedIngredient]) -> str:
        """Per-ingredient totals with every contributing recipe's arithmetic."""
        text = '📊 DETAILED INGREDIENT BREAKDOWN\n'
        text += HEAVY_RULE * 60 + '\n\n'

        for ingredient in consolidated:
            text += f"🔸 {ingredient.ingredient_name.upper()}\n"
            if ingredient.has_quantity:
                text += f"   Total needed: {format_quantity(ingredient.total_quantity)} {ingredient.unit}\n"

            text += '   Used in:\n'
            for source in ingredient.sources:
                if not ingredient.has_quantity:
                    text += f"   • {source.recipe_title}\n"
                    continue
                text += f"   • {source.recipe_title}: {format_quantity(source.original_quantity)} {ingredient.unit}"
                if source.multiplier != 1:
                    text += (f" × {format_number(source.multiplier)} = "
                             f"{format_quantity(source.adjusted_quantity)} {ingredient.unit}")
                text += '\n'
            text += '\n'

        return text

    def export_text(self, selection: List[SelectedRecipe], consolidated: List[ConsolidatedIngredient],
                    generated_at: Optional[datetime] = None) -> str:
        """
        Render the downloadable shopping list file.

        Args:
            selection: Selected recipes with multipliers
            consolidated: Sorted consolidated ingredients
            generated_at: Timestamp, defaults to now

        Returns:
            File content with a summary header and the shopping list
        """
        generated_at = generated_at or datetime.now()
        total_servings = sum(recipe.adjusted_servings for recipe in selection)

        recipe_lines = []
        for recipe in selection:
            multiplier = f" (×{format_number(recipe.multiplier)})" if recipe.multiplier != 1 else ""
            recipe_lines.append(
                f"- {recipe.title}{multiplier} - {format_number(recipe.adjusted_servings)} servings"
            )

        lines = [
            "RECIPE COMBINER - SHOPPING LIST",
            f"Generated on {_format_date(generated_at)}, {_format_time(generated_at)}",
            "",
            "SUMMARY:",
            f"- Total Recipes: {len(selection)}",
            f"- Total Servings: {format_number(total_servings)}",
            f"- Total Ingredients: {len(consolidated)}",
            "",
            "RECIPES INCLUDED:",
            *recipe_lines,
            "",
            self.generate(selection, consolidated, generated_at),
            "",
            "---",
            "Generated by Recipe Manager - Recipe Combiner Module",
        ]
        return "\n".join(lines)


def shopping_list_file_name(today: Optional[datetime] = None) -> str:
    today = today or datetime.now()
    return f"shopping-list-{today.date().isoformat()}.txt"
