#!/usr/bin/env python3
"""
Tests for combining recipes into consolidated ingredients.
"""

import sys
import asyncio
import unittest
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / "src"))

from recipro.error_handling import NotFoundError, ValidationError
from recipro.recipe_combiner import RecipeCombiner
from recipro.recipe_database import InMemoryRecipeStore
from recipro.recipe_models import Recipe


def sample_recipes():
    return [
        Recipe(id="pancakes", title="Pancakes", category="Breakfast", servings=4,
               ingredients=["1 cup flour", "2 eggs", "1 cup milk", "Salt to taste"],
               instructions=["Mix", "Cook"]),
        Recipe(id="bread", title="Bread", category="Baking", servings=2,
               ingredients=["1 cup flour", "1 tbsp milk", "1 tsp salt"],
               instructions=["Knead", "Bake"]),
        Recipe(id="cookies", title="Cookies", category="Dessert", servings=12,
               ingredients=["1 cup sugar", "2 cups flour"],
               instructions=["Mix", "Bake"]),
        Recipe(id="fudge", title="Fudge", category="Dessert", servings=8,
               ingredients=["1 cup sugar"],
               instructions=["Boil"]),
    ]


class GatedStore(InMemoryRecipeStore):
    """Store whose fetches resolve only when the test releases them."""

    def __init__(self, recipes):
        super().__init__(recipes)
        self.pending = []

    async def get(self, recipe_id):
        gate = asyncio.Event()
        self.pending.append(gate)
        await gate.wait()
        return await super().get(recipe_id)


class RecipeCombinerTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.store = InMemoryRecipeStore(sample_recipes())
        self.combiner = RecipeCombiner(self.store)

    def by_key(self):
        return {(i.ingredient_name, i.unit): i for i in self.combiner.get_consolidated()}

    async def test_single_recipe_reproduces_its_ingredients(self):
        await self.combiner.add_recipe("bread")
        items = self.by_key()
        self.assertEqual(len(items), 3)
        self.assertEqual(items[("flour", "cup")].total_quantity, 1)
        self.assertEqual(items[("milk", "tbsp")].total_quantity, 1)
        self.assertEqual(items[("salt", "tsp")].total_quantity, 1)

    async def test_matching_lines_are_summed(self):
        await self.combiner.add_recipe("cookies")
        await self.combiner.add_recipe("fudge")
        sugar = self.by_key()[("sugar", "cup")]
        self.assertEqual(sugar.total_quantity, 2)
        self.assertEqual([s.recipe_title for s in sugar.sources], ["Cookies", "Fudge"])

    async def test_multiplier_scales_quantities(self):
        await self.combiner.add_recipe("pancakes", 3)
        eggs = self.by_key()[("eggs", "")]
        self.assertEqual(eggs.total_quantity, 6)
        self.assertEqual(eggs.sources[0].original_quantity, 2)
        self.assertEqual(eggs.sources[0].adjusted_quantity, 6)

    async def test_different_units_stay_separate(self):
        await self.combiner.add_recipe("pancakes")
        await self.combiner.add_recipe("bread")
        items = self.by_key()
        self.assertIn(("milk", "cup"), items)
        self.assertIn(("milk", "tbsp"), items)

    async def test_quantified_first_then_alphabetical(self):
        await self.combiner.add_recipe("pancakes")
        await self.combiner.add_recipe("bread")
        names = [i.ingredient_name for i in self.combiner.get_consolidated()]
        self.assertEqual(names, ["eggs", "flour", "milk", "milk", "salt", "salt to taste"])
        self.assertFalse(self.combiner.get_consolidated()[-1].has_quantity)

    async def test_removal_matches_never_adding(self):
        await self.combiner.add_recipe("pancakes")
        expected = self.combiner.get_consolidated()

        await self.combiner.add_recipe("bread", 2)
        self.assertTrue(self.combiner.remove_recipe("bread"))
        self.assertEqual(self.combiner.get_consolidated(), expected)
        self.assertFalse(self.combiner.remove_recipe("bread"))

    async def test_add_overwrites_existing_selection(self):
        await self.combiner.add_recipe("fudge", 2)
        await self.combiner.add_recipe("fudge", 5)
        self.assertEqual(len(self.combiner.get_selection()), 1)
        self.assertEqual(self.by_key()[("sugar", "cup")].total_quantity, 5)

    async def test_update_multiplier(self):
        await self.combiner.add_recipe("fudge")
        self.assertTrue(self.combiner.update_multiplier("fudge", 1.5))
        self.assertEqual(self.by_key()[("sugar", "cup")].total_quantity, 1.5)
        self.assertFalse(self.combiner.update_multiplier("cookies", 2))

    async def test_invalid_multiplier(self):
        await self.combiner.add_recipe("fudge")
        with self.assertRaises(ValidationError):
            self.combiner.update_multiplier("fudge", 0)
        with self.assertRaises(ValidationError):
            await self.combiner.add_recipe("cookies", -1)
        self.assertEqual([r.id for r in self.combiner.get_selection()], ["fudge"])

    async def test_missing_recipe(self):
        with self.assertRaises(NotFoundError):
            await self.combiner.add_recipe("nope")
        self.assertEqual(self.combiner.get_selection(), [])

    async def test_selection_and_summary(self):
        await self.combiner.add_recipe("pancakes", 2)
        await self.combiner.add_recipe("bread")
        selection = self.combiner.get_selection()
        self.assertEqual(selection[0].adjusted_servings, 8)
        self.assertEqual(selection[1].original_servings, 2)

        summary = self.combiner.get_summary()
        self.assertEqual(summary["totalRecipes"], 2)
        self.assertEqual(summary["totalServings"], 10)
        self.assertEqual(summary["totalIngredients"], 6)
        self.assertEqual(summary["quantifiedIngredients"], 5)
        self.assertEqual(summary["nonQuantifiedIngredients"], 1)
        self.assertEqual(summary["recipes"][0]["adjustedServings"], 8)

    async def test_clear(self):
        await self.combiner.add_recipe("pancakes")
        self.combiner.clear()
        self.assertEqual(self.combiner.get_selection(), [])
        self.assertEqual(self.combiner.get_consolidated(), [])


class FetchOrderingTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.store = GatedStore(sample_recipes())

    async def wait_for_fetches(self, count):
        while len(self.store.pending) < count:
            await asyncio.sleep(0)

    async def race_two_adds(self, combiner):
        first = asyncio.create_task(combiner.add_recipe("fudge", 2))
        second = asyncio.create_task(combiner.add_recipe("fudge", 3))
        await self.wait_for_fetches(2)

        # Resolve the later call first
        self.store.pending[1].set()
        second_result = await second
        self.store.pending[0].set()
        first_result = await first
        return first_result, second_result

    async def test_last_resolved_wins_by_default(self):
        combiner = RecipeCombiner(self.store)
        first, second = await self.race_two_adds(combiner)
        self.assertTrue(first)
        self.assertTrue(second)
        self.assertEqual(combiner.get_selection()[0].multiplier, 2)

    async def test_strict_ordering_discards_stale_fetch(self):
        combiner = RecipeCombiner(self.store, strict_ordering=True)
        first, second = await self.race_two_adds(combiner)
        self.assertFalse(first)
        self.assertTrue(second)
        self.assertEqual(combiner.get_selection()[0].multiplier, 3)

    async def test_strict_ordering_respects_removal(self):
        combiner = RecipeCombiner(self.store, strict_ordering=True)
        pending = asyncio.create_task(combiner.add_recipe("fudge"))
        await self.wait_for_fetches(1)

        combiner.remove_recipe("fudge")
        self.store.pending[0].set()
        self.assertFalse(await pending)
        self.assertEqual(combiner.get_selection(), [])

    async def test_strict_ordering_respects_clear(self):
        combiner = RecipeCombiner(self.store, strict_ordering=True)
        pending = asyncio.create_task(combiner.add_recipe("fudge"))
        await self.wait_for_fetches(1)

        combiner.clear()
        self.store.pending[0].set()
        self.assertFalse(await pending)
        self.assertEqual(combiner.get_selection(), [])
        self.assertEqual(combiner.get_consolidated(), [])


if __name__ == "__main__":
    unittest.main()
