#!/usr/bin/env python3
"""
Recipe Scaling System
Scales a single recipe's ingredient quantities by student count and renders
printable recipe cards.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any

from recipro.config import config as default_config
from recipro.ingredient_parser import IngredientParser, ParsedIngredient
from recipro.quantity_formatter import format_scaled_quantity
from recipro.recipe_models import Recipe


@dataclass
class ScaledRecipe:
    """Recipe with quantities scaled for a student count."""
    recipe_id: str
    title: str
    student_count: int
    scale_factor: float
    base_servings: int
    total_servings: int
    ingredients: List[str]
    instructions: List[str] = field(default_factory=list)
    tips: str = ""


class RecipeScaler:
    """Scales recipes by student count (one student = one base serving)."""

    def __init__(self, parser: Optional[IngredientParser] = None, config: Optional[Dict[str, Any]] = None):
        """
        Initialize recipe scaler.

        Args:
            parser: Ingredient parser, a default one is created if omitted
            config: Configuration dictionary ('min_students', 'max_students')
        """
        self.config = config or {}
        self.logger = logging.getLogger(__name__)
        self.parser = parser or IngredientParser()

        self.min_students = self.config.get('min_students', default_config.MIN_STUDENTS)
        self.max_students = self.config.get('max_students', default_config.MAX_STUDENTS)

    def clamp_student_count(self, value: Any) -> int:
        """Coerce user input to a student count within [min, max]; junk becomes 1."""
        try:
            count = int(value)
        except (TypeError, ValueError):
            count = 1
        if count == 0:
            count = 1
        return max(self.min_students, min(self.max_students, count))

    def scale_ingredient(self, parsed: ParsedIngredient, scale_factor: float) -> str:
        """
        Scale one parsed ingredient line.

        Args:
            parsed: Parsed ingredient
            scale_factor: Multiplier applied to the quantity

        Returns:
            Display string; unquantified lines come back untouched
        """
        if not parsed.has_quantity:
            return parsed.original

        quantity = format_scaled_quantity(parsed.quantity * scale_factor)
        unit = f" {parsed.unit}" if parsed.unit else ""
        return f"{quantity}{unit} {parsed.ingredient_name}"

    def scale_recipe(self, recipe: Recipe, student_count: int) -> ScaledRecipe:
        """
        Scale a recipe for a number of students.

        The scale factor is the student count itself; the recipe's servings
        field only feeds the displayed total. Callers are expected to pass a
        count in [1, 100] (see clamp_student_count).

        Args:
            recipe: Recipe to scale
            student_count: Number of students

        Returns:
            Scaled recipe
        """
        scale_factor = student_count
        lines = [
            self.scale_ingredient(parsed, scale_factor)
            for parsed in self.parser.parse_ingredient_list(recipe.ingredients)
        ]

        self.logger.debug(f"Scaled '{recipe.title}' by {scale_factor}x")

        return ScaledRecipe(
            recipe_id=recipe.id,
            title=recipe.title,
            student_count=student_count,
            scale_factor=scale_factor,
            base_servings=recipe.servings,
            total_servings=recipe.servings * scale_factor,
            ingredients=lines,
            instructions=list(recipe.instructions),
            tips=recipe.tips,
        )

    def export_scaled_recipe(self, recipe: ScaledRecipe, format: str = "text",
                             prepared_by: Optional[str] = None) -> str:
        """Export scaled recipe in specified format."""
        if format == "json":
            return json.dumps(asdict(recipe), indent=2, default=str)
        elif format == "text":
            return self._format_recipe_as_text(recipe, prepared_by)
        elif format == "markdown":
            return self._format_recipe_as_markdown(recipe, prepared_by)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _format_recipe_as_text(self, recipe: ScaledRecipe, prepared_by: Optional[str]) -> str:
        """Format recipe as plain text."""
        lines = []

        # Header
        lines.append(recipe.title)
        lines.append("=" * len(recipe.title))
        lines.append(f"Number of Students: {recipe.student_count} | Total Servings: {recipe.total_servings}")
        lines.append("")

        # Ingredients
        lines.append("Ingredients:")
        lines.append("-" * 20)
        for ingredient in recipe.ingredients:
            lines.append(f"• {ingredient}")
        lines.append("")

        # Instructions
        if recipe.instructions:
            lines.append("Instructions:")
            lines.append("-" * 20)
            for i, instruction in enumerate(recipe.instructions, 1):
                lines.append(f"{i}. {instruction}")
            lines.append("")

        if recipe.tips:
            lines.append("Tips:")
            lines.append("-" * 20)
            lines.append(recipe.tips)
            lines.append("")

        if prepared_by:
            lines.append(f"Prepared by: {prepared_by}")

        return "\n".join(lines).rstrip() + "\n"

    def _format_recipe_as_markdown(self, recipe: ScaledRecipe, prepared_by: Optional[str]) -> str:
        """Format recipe as Markdown."""
        lines = []

        lines.append(f"# {recipe.title}")
        lines.append(f"*Number of Students: {recipe.student_count} | Total Servings: {recipe.total_servings}*")
        lines.append("")

        lines.append("## Ingredients")
        lines.append("")
        for ingredient in recipe.ingredients:
            lines.append(f"- {ingredient}")
        lines.append("")

        if recipe.instructions:
            lines.append("## Instructions")
            lines.append("")
            for i, instruction in enumerate(recipe.instructions, 1):
                lines.append(f"{i}. {instruction}")
            lines.append("")

        if recipe.tips:
            lines.append("## Tips")
            lines.append("")
            lines.append(recipe.tips)
            lines.append("")

        if prepared_by:
            lines.append(f"_Prepared by {prepared_by}_")

        return "\n".join(lines).rstrip() + "\n"
