#!/usr/bin/env python3
"""
Recipe Combiner
Session object that combines several recipes, each with its own multiplier,
into one consolidated ingredient list for shopping.
"""

import itertools
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Any

import structlog

from recipro.error_handling import NotFoundError, ValidationError
from recipro.ingredient_normalizer import UnitNormalizer, build_consolidation_key
from recipro.ingredient_parser import IngredientParser
from recipro.recipe_database import RecipeStore
from recipro.recipe_models import ConsolidatedIngredient, Recipe, SelectedRecipe, SourceRecord
from recipro.shopping_list import ShoppingListGenerator

# Setup logging
logger = structlog.get_logger(__name__)


@dataclass
class _Selection:
    recipe: Recipe
    multiplier: float


def _validate_multiplier(multiplier: Any) -> float:
    if isinstance(multiplier, bool) or not isinstance(multiplier, (int, float)) or multiplier <= 0:
        raise ValidationError(f"Multiplier must be a positive number, got {multiplier!r}",
                              validation_errors=["multiplier must be > 0"])
    return multiplier


class RecipeCombiner:
    """Combines selected recipes into consolidated ingredients."""

    def __init__(self, store: RecipeStore, parser: Optional[IngredientParser] = None,
                 normalizer: Optional[UnitNormalizer] = None, strict_ordering: bool = False,
                 shopping_list: Optional[ShoppingListGenerator] = None):
        """
        Initialize recipe combiner.

        Args:
            store: Recipe store used to fetch selected recipes
            parser: Ingredient parser
            normalizer: Unit normalizer for consolidation keys
            strict_ordering: Discard add_recipe fetches that resolve after a
                later add, remove or clear of the same recipe
            shopping_list: Shopping list renderer
        """
        self.store = store
        self.normalizer = normalizer or UnitNormalizer()
        self.parser = parser or IngredientParser(self.normalizer)
        self.strict_ordering = strict_ordering
        self.shopping_list = shopping_list or ShoppingListGenerator()

        self._selected: Dict[str, _Selection] = {}
        self._consolidated: Dict[str, ConsolidatedIngredient] = {}
        self._ticket_counter = itertools.count(1)
        self._tickets: Dict[str, int] = {}

    def _issue_ticket(self, recipe_id: str) -> int:
        ticket = next(self._ticket_counter)
        self._tickets[recipe_id] = ticket
        return ticket

    async def add_recipe(self, recipe_id: str, multiplier: float = 1) -> bool:
        """
        Add a recipe to the combination, replacing any earlier entry for it.

        Args:
            recipe_id: Recipe id
            multiplier: Positive multiplier

        Returns:
            True when applied; False when strict ordering discarded a stale fetch

        Raises:
            ValidationError: multiplier is not positive
            NotFoundError: recipe id does not resolve
        """
        multiplier = _validate_multiplier(multiplier)
        ticket = self._issue_ticket(recipe_id)

        recipe = await self.store.get(recipe_id)
        if recipe is None:
            logger.warning("combiner_recipe_not_found", recipe_id=recipe_id)
            raise NotFoundError(recipe_id)

        if self.strict_ordering and self._tickets.get(recipe_id) != ticket:
            logger.info("combiner_stale_add_discarded", recipe_id=recipe_id, ticket=ticket)
            return False

        self._selected[recipe_id] = _Selection(recipe=recipe, multiplier=multiplier)
        self._rebuild()
        logger.info("combiner_recipe_added", recipe_id=recipe_id, multiplier=multiplier)
        return True

    def remove_recipe(self, recipe_id: str) -> bool:
        """Drop a recipe from the combination; True if it was selected."""
        self._issue_ticket(recipe_id)
        removed = self._selected.pop(recipe_id, None) is not None
        if removed:
            self._rebuild()
        return removed

    def update_multiplier(self, recipe_id: str, multiplier: float) -> bool:
        """
        Change a selected recipe's multiplier.

        Returns:
            False when the recipe is not selected

        Raises:
            ValidationError: multiplier is not positive
        """
        multiplier = _validate_multiplier(multiplier)
        selection = self._selected.get(recipe_id)
        if selection is None:
            return False
        selection.multiplier = multiplier
        self._rebuild()
        return True

    def get_selection(self) -> List[SelectedRecipe]:
        return [
            SelectedRecipe(
                id=recipe_id,
                title=selection.recipe.title,
                multiplier=selection.multiplier,
                original_servings=selection.recipe.servings,
                adjusted_servings=selection.recipe.servings * selection.multiplier,
            )
            for recipe_id, selection in self._selected.items()
        ]

    def _rebuild(self):
        """Recompute the consolidated map from the current selection."""
        self._consolidated = {}

        for selection in self._selected.values():
            recipe, multiplier = selection.recipe, selection.multiplier

            for parsed in self.parser.parse_ingredient_list(recipe.ingredients):
                key = build_consolidation_key(parsed, self.normalizer)
                adjusted = parsed.quantity * multiplier
                source = SourceRecord(
                    recipe_title=recipe.title,
                    original_quantity=parsed.quantity,
                    multiplier=multiplier,
                    adjusted_quantity=adjusted,
                )

                existing = self._consolidated.get(key)
                if existing is None:
                    self._consolidated[key] = ConsolidatedIngredient(
                        ingredient_name=parsed.ingredient_name,
                        unit=parsed.unit,
                        total_quantity=adjusted if parsed.has_quantity else 0.0,
                        has_quantity=parsed.has_quantity,
                        sources=[source],
                    )
                    continue

                if parsed.has_quantity and existing.has_quantity:
                    existing.total_quantity += adjusted
                existing.sources.append(source)

        logger.debug("combiner_rebuilt", recipes=len(self._selected), ingredients=len(self._consolidated))

    def get_consolidated(self) -> List[ConsolidatedIngredient]:
        """Consolidated ingredients, quantified first, then by name."""
        return sorted(
            self._consolidated.values(),
            key=lambda ingredient: (not ingredient.has_quantity, ingredient.ingredient_name.casefold())
        )

    def clear(self):
        for recipe_id in set(self._selected) | set(self._tickets):
            self._issue_ticket(recipe_id)
        self._selected.clear()
        self._consolidated.clear()

    def get_summary(self) -> Dict[str, Any]:
        """
        Get combination statistics.

        Returns:
            Recipe, serving and ingredient totals plus the selection
        """
        selection = self.get_selection()
        ingredients = self.get_consolidated()
        quantified = sum(1 for ingredient in ingredients if ingredient.has_quantity)

        return {
            "totalRecipes": len(selection),
            "totalServings": sum(recipe.adjusted_servings for recipe in selection),
            "totalIngredients": len(ingredients),
            "quantifiedIngredients": quantified,
            "nonQuantifiedIngredients": len(ingredients) - quantified,
            "recipes": [recipe.to_dict() for recipe in selection],
        }

    def generate_shopping_list(self, generated_at: Optional[datetime] = None) -> str:
        return self.shopping_list.generate(self.get_selection(), self.get_consolidated(), generated_at)

    def generate_detailed_breakdown(self) -> str:
        return self.shopping_list.generate_detailed_breakdown(self.get_consolidated())

    def export_shopping_list(self, generated_at: Optional[datetime] = None) -> str:
        return self.shopping_list.export_text(self.get_selection(), self.get_consolidated(), generated_at)
