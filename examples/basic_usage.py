#!/usr/bin/env python3
"""
Recipro - Basic Usage Examples
Demonstrates parsing, scaling and combining recipes into a shopping list.
"""

import sys
import asyncio
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from recipro.ingredient_parser import IngredientParser
from recipro.recipe_combiner import RecipeCombiner
from recipro.recipe_database import InMemoryRecipeStore
from recipro.recipe_models import Recipe
from recipro.recipe_scaler import RecipeScaler

PIZZA = Recipe(
    id="margherita-pizza",
    title="Margherita Pizza",
    category="Main Course",
    servings=4,
    ingredients=[
        "2 1/4 cups all-purpose flour",
        "1 cup warm water",
        "1 tsp salt",
        "1/2 cup tomato sauce",
        "8 oz fresh mozzarella",
        "Fresh basil leaves",
    ],
    instructions=["Make the dough", "Stretch and top", "Bake at 475F for 12 minutes"],
)

SALMON = Recipe(
    id="grilled-salmon",
    title="Grilled Salmon",
    category="Main Course",
    servings=2,
    ingredients=["2 salmon fillets", "1 tbsp olive oil", "1 lemon, sliced", "1 tsp salt"],
    instructions=["Brush with oil", "Grill 4 minutes per side"],
)


def example_1_parsing():
    """Example 1: Parse ingredient lines."""
    print("🔸 Example 1: Ingredient Parsing")
    print("-" * 50)

    parser = IngredientParser()
    for line in ["2 1/2 cups flour", "1/2 tsp salt", "3 large eggs", "Salt to taste"]:
        parsed = parser.parse_ingredient_line(line)
        if parsed.has_quantity:
            print(f"   {line!r:24} -> {parsed.quantity} | {parsed.unit or '-'} | {parsed.ingredient_name}")
        else:
            print(f"   {line!r:24} -> (no quantity) {parsed.ingredient_name}")
    print()


def example_2_scaling():
    """Example 2: Scale one recipe for a class."""
    print("🔸 Example 2: Scaling for 6 students")
    print("-" * 50)

    scaler = RecipeScaler()
    scaled = scaler.scale_recipe(PIZZA, scaler.clamp_student_count("6"))
    print(scaler.export_scaled_recipe(scaled, "text", prepared_by="Chef Instructor"))


async def example_3_combining():
    """Example 3: Combine recipes into a shopping list."""
    print("🔸 Example 3: Shopping List")
    print("-" * 50)

    combiner = RecipeCombiner(InMemoryRecipeStore([PIZZA, SALMON]))
    await combiner.add_recipe("margherita-pizza", 2)
    await combiner.add_recipe("grilled-salmon")

    print(combiner.generate_shopping_list())
    print()
    print(combiner.generate_detailed_breakdown())


def main():
    """Run all examples."""
    example_1_parsing()
    example_2_scaling()
    asyncio.run(example_3_combining())


if __name__ == "__main__":
    main()
