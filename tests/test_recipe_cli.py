#!/usr/bin/env python3
"""
Smoke tests for the recipro command line.
"""

import io
import sys
import json
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / "src"))

from recipro.recipe_cli import main, parse_selection

PANCAKES = {
    "id": "pancakes",
    "title": "Pancakes",
    "category": "Breakfast",
    "servings": 4,
    "difficulty": "Easy",
    "ingredients": ["1 cup flour", "2 eggs", "Salt to taste"],
    "instructions": ["Mix", "Cook"],
}


class RecipeCliTests(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.db = str(self.root / "recipes.db")

        recipe_file = self.root / "pancakes.json"
        recipe_file.write_text(json.dumps(PANCAKES), encoding="utf-8")
        self.assertEqual(self.run_cli("add", str(recipe_file))[0], 0)

    def tearDown(self):
        self.temp_dir.cleanup()

    def run_cli(self, *args, user=None):
        argv = ["--db", self.db, "--log-level", "ERROR"]
        if user:
            argv += ["--user", user]
        stdout, stderr = io.StringIO(), io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(argv + list(args))
        return code, stdout.getvalue(), stderr.getvalue()

    def test_list(self):
        code, out, _ = self.run_cli("list", "--search", "pan")
        self.assertEqual(code, 0)
        self.assertIn("Pancakes (pancakes)", out)

    def test_list_by_difficulty(self):
        code, out, _ = self.run_cli("list", "--difficulty", "Easy")
        self.assertEqual(code, 0)
        self.assertIn("Pancakes (pancakes)", out)

        self.assertIn("Found 0 recipes", self.run_cli("list", "--difficulty", "Hard")[1])
        self.assertIn("Found 0 recipes", self.run_cli("list", "--category", "Dessert", "--difficulty", "Easy")[1])

    def test_show_scaled(self):
        code, out, _ = self.run_cli("show", "pancakes", "--students", "2")
        self.assertEqual(code, 0)
        self.assertIn("Number of Students: 2 | Total Servings: 8", out)
        self.assertIn("• 2 cup flour", out)
        self.assertIn("• 4 eggs", out)

    def test_show_missing_recipe(self):
        code, _, err = self.run_cli("show", "waffles")
        self.assertEqual(code, 1)
        self.assertIn("Recipe with ID waffles not found", err)

    def test_combine(self):
        code, out, _ = self.run_cli("combine", "pancakes:2", "--breakdown")
        self.assertEqual(code, 0)
        self.assertIn("• Pancakes (×2) - 8 servings", out)
        self.assertIn("☐ 2 cup flour", out)
        self.assertIn("📊 DETAILED INGREDIENT BREAKDOWN", out)

    def test_admin_only_commands(self):
        code, _, err = self.run_cli("delete", "pancakes")
        self.assertEqual(code, 1)
        self.assertIn("requires an admin user", err)

        self.assertEqual(self.run_cli("clear", user="admin")[0], 1)
        self.assertEqual(self.run_cli("delete", "pancakes", user="admin")[0], 0)
        self.assertIn("Found 0 recipes", self.run_cli("list")[1])

    def test_export_then_import(self):
        backup = str(self.root / "backup.json")
        self.assertEqual(self.run_cli("export", "--output", backup)[0], 0)
        self.assertEqual(json.loads(Path(backup).read_text(encoding="utf-8"))["totalRecipes"], 1)

        code, out, _ = self.run_cli("import", backup, user="admin")
        self.assertEqual(code, 0)
        self.assertIn("1 successful, 0 failed", out)

    def test_missing_files(self):
        missing = str(self.root / "missing.json")
        code, _, err = self.run_cli("add", missing)
        self.assertEqual(code, 1)
        self.assertIn("Cannot read recipe file", err)

        code, _, err = self.run_cli("import", missing, user="admin")
        self.assertEqual(code, 1)
        self.assertIn("Cannot read backup file", err)

    def test_stats(self):
        code, out, _ = self.run_cli("stats")
        self.assertEqual(code, 0)
        self.assertIn("Total recipes: 1", out)
        self.assertIn("Breakfast: 1", out)

    def test_parse_selection(self):
        self.assertEqual(parse_selection("pancakes"), ("pancakes", 1))
        self.assertEqual(parse_selection("pancakes:1.5"), ("pancakes", 1.5))


if __name__ == "__main__":
    unittest.main()
