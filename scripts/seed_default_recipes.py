#!/usr/bin/env python3
"""
Seed script for the built-in recipes.
Loads the starter recipes into a recipe database; re-running updates them.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from recipro.logging_config import configure_logging
from recipro.recipe_database import RecipeDatabase
from recipro.recipe_interchange import import_default_recipes

DEFAULT_RECIPES = {
    "margherita-pizza": {
        "title": "Margherita Pizza",
        "category": "Main Course",
        "servings": 4,
        "difficulty": "Medium",
        "ingredients": [
            "2 1/4 cups all-purpose flour",
            "1 cup warm water",
            "2 tsp instant yeast",
            "1 tsp salt",
            "2 tbsp olive oil",
            "1/2 cup tomato sauce",
            "8 oz fresh mozzarella, sliced",
            "Fresh basil leaves",
        ],
        "instructions": [
            "Mix flour, yeast and salt, then add water and oil.",
            "Knead for 8 minutes and let rise for 1 hour.",
            "Stretch the dough, spread sauce and add mozzarella.",
            "Bake at 475F for 12-15 minutes and top with basil.",
        ],
        "tips": "Preheat the baking sheet for a crisper crust.",
    },
    "grilled-salmon": {
        "title": "Grilled Salmon with Lemon Dill",
        "category": "Main Course",
        "servings": 2,
        "difficulty": "Easy",
        "ingredients": [
            "2 salmon fillets",
            "1 tbsp olive oil",
            "1 lemon, sliced",
            "2 tbsp fresh dill",
            "1/2 tsp salt",
            "Black pepper to taste",
        ],
        "instructions": [
            "Brush fillets with oil and season.",
            "Grill skin-side down for 4-5 minutes per side.",
            "Serve with lemon slices and dill.",
        ],
        "tips": "Leave the skin on so the fillet holds together.",
    },
    "chocolate-lava-cake": {
        "title": "Chocolate Lava Cake",
        "category": "Dessert",
        "servings": 4,
        "difficulty": "Medium",
        "ingredients": [
            "4 oz dark chocolate",
            "1/2 cup butter",
            "2 eggs",
            "2 egg yolks",
            "1/4 cup sugar",
            "2 tbsp flour",
            "1 tsp vanilla extract",
        ],
        "instructions": [
            "Melt chocolate and butter together.",
            "Whisk eggs, yolks and sugar until pale, then fold in chocolate.",
            "Fold in flour and vanilla, divide into greased ramekins.",
            "Bake at 425F for 12 minutes and unmold immediately.",
        ],
        "tips": "The centre should still wobble when you take them out.",
    },
}


async def seed(db_path: str) -> int:
    db = RecipeDatabase(db_path)
    summary = await import_default_recipes(db, DEFAULT_RECIPES)
    print(f"{'✅' if not summary.failed else '❌'} Seeded {summary.successful}/{summary.total} recipes into {db.db_path}")
    for failure in summary.failures:
        print(f"   ! {failure['title']}: {failure['error']}")
    return 0 if not summary.failed else 1


def main():
    parser = argparse.ArgumentParser(description='Seed the built-in recipes')
    parser.add_argument('--db', help='Database file path (default: RECIPRO_DB_PATH)')
    parser.add_argument('--log-level', default='WARNING', help='Log level')
    args = parser.parse_args()

    configure_logging(level=args.log_level)
    return asyncio.run(seed(args.db))


if __name__ == "__main__":
    sys.exit(main())
