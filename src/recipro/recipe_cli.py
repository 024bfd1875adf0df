#!/usr/bin/env python3
"""
Recipe Manager command line interface.
Browse, scale, combine, back up and restore recipes stored in SQLite.
"""

import sys
import json
import asyncio
import argparse
from typing import List, Optional, Tuple

from recipro.error_handling import NotFoundError, RecipeManagerError, ValidationError, record_error
from recipro.logging_config import configure_logging
from recipro.recipe_combiner import RecipeCombiner
from recipro.recipe_database import RecipeDatabase
from recipro.recipe_interchange import (
    default_backup_name, dump_export, export_recipes, import_recipes, load_export
)
from recipro.recipe_models import Recipe
from recipro.recipe_scaler import RecipeScaler
from recipro.user_session import GUEST_USER, CurrentUser, require_admin


def parse_selection(value: str) -> Tuple[str, float]:
    """Split ``ID[:MULT]`` into id and multiplier."""
    recipe_id, sep, multiplier = value.rpartition(':')
    if not sep:
        return value, 1
    try:
        return recipe_id, float(multiplier)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid multiplier in '{value}'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='recipro', description='Recipe manager')
    parser.add_argument('--db', help='Database file path (default: RECIPRO_DB_PATH)')
    parser.add_argument('--user', default=GUEST_USER.username, help='Username')
    parser.add_argument('--display-name', default='', help='Display name')
    parser.add_argument('--role', default=None, help='User role')
    parser.add_argument('--log-level', help='Log level')

    subparsers = parser.add_subparsers(dest='command', required=True)

    list_parser = subparsers.add_parser('list', help='List recipes')
    list_parser.add_argument('--search', help='Title search term')
    list_parser.add_argument('--category', help='Category filter')
    list_parser.add_argument('--difficulty', help='Difficulty filter')

    show_parser = subparsers.add_parser('show', help='Show a recipe scaled for students')
    show_parser.add_argument('recipe_id')
    show_parser.add_argument('--students', default='1', help='Number of students (1-100)')
    show_parser.add_argument('--format', choices=['text', 'markdown', 'json'], default='text')

    add_parser = subparsers.add_parser('add', help='Add a recipe from a JSON file')
    add_parser.add_argument('file')

    delete_parser = subparsers.add_parser('delete', help='Delete a recipe (admin)')
    delete_parser.add_argument('recipe_id')

    export_parser = subparsers.add_parser('export', help='Export all recipes to a backup file')
    export_parser.add_argument('--output', '-o', help='Output file path')

    import_parser = subparsers.add_parser('import', help='Import recipes from a backup file (admin)')
    import_parser.add_argument('path')

    clear_parser = subparsers.add_parser('clear', help='Delete every recipe (admin)')
    clear_parser.add_argument('--yes', action='store_true', help='Confirm deletion')

    subparsers.add_parser('stats', help='Show database statistics')

    combine_parser = subparsers.add_parser('combine', help='Build a shopping list from recipes')
    combine_parser.add_argument('recipes', nargs='+', type=parse_selection, metavar='ID[:MULT]')
    combine_parser.add_argument('--breakdown', action='store_true', help='Add per-ingredient breakdown')

    return parser


async def run_command(args: argparse.Namespace, db: RecipeDatabase, user: CurrentUser) -> int:
    """Execute one parsed command against the database."""
    if args.command == 'list':
        if args.search:
            recipes = await db.search_by_title(args.search)
        elif args.category:
            recipes = await db.get_by_category(args.category)
        elif args.difficulty:
            recipes = await db.get_by_difficulty(args.difficulty)
        else:
            recipes = await db.get_all()
        if args.category:
            recipes = [recipe for recipe in recipes if recipe.category == args.category]
        if args.difficulty:
            recipes = [recipe for recipe in recipes if recipe.difficulty == args.difficulty]
        print(f"Found {len(recipes)} recipes:")
        for recipe in recipes:
            print(f"  - {recipe.title} ({recipe.id}) [{recipe.category}, {recipe.servings} servings]")

    elif args.command == 'show':
        recipe = await db.get(args.recipe_id)
        if recipe is None:
            raise NotFoundError(args.recipe_id)
        scaler = RecipeScaler()
        scaled = scaler.scale_recipe(recipe, scaler.clamp_student_count(args.students))
        print(scaler.export_scaled_recipe(scaled, args.format, prepared_by=user.display_name or None), end='')

    elif args.command == 'add':
        try:
            with open(args.file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Recipe file is not valid JSON: {e}") from e
        except OSError as e:
            raise ValidationError(f"Cannot read recipe file {args.file}: {e.strerror or e}") from e
        if not isinstance(data, dict):
            raise ValidationError("Recipe file must hold a single JSON object")
        stored = await db.add(Recipe.from_dict(data).validate_for_create())
        print(f"Added recipe {stored.id}")

    elif args.command == 'delete':
        require_admin(user, 'delete')
        if not await db.delete(args.recipe_id):
            raise NotFoundError(args.recipe_id)
        print(f"Deleted recipe {args.recipe_id}")

    elif args.command == 'export':
        path = dump_export(await export_recipes(db), args.output or default_backup_name())
        print(f"Recipes exported to {path}")

    elif args.command == 'import':
        require_admin(user, 'import')
        summary = await import_recipes(db, load_export(args.path))
        print(f"Import completed: {summary.successful} successful, {summary.failed} failed "
              f"(of {summary.total})")
        for failure in summary.failures:
            print(f"  ! {failure['title']} ({failure['id']}): {failure['error']}")

    elif args.command == 'clear':
        require_admin(user, 'clear')
        if not args.yes:
            print("Refusing to delete all recipes without --yes", file=sys.stderr)
            return 1
        removed = await db.clear_all()
        print(f"Deleted {removed} recipes")

    elif args.command == 'stats':
        stats = await db.get_stats()
        print("Database Statistics:")
        print(f"  Total recipes: {stats['totalRecipes']}")
        for category, count in sorted(stats['categories'].items()):
            print(f"  {category or 'Uncategorized'}: {count}")
        if stats['recentlyAdded']:
            print("  Recently added:")
            for recipe in stats['recentlyAdded']:
                print(f"    - {recipe.title} ({recipe.date_created})")

    elif args.command == 'combine':
        combiner = RecipeCombiner(db)
        for recipe_id, multiplier in args.recipes:
            await combiner.add_recipe(recipe_id, multiplier)
        print(combiner.generate_shopping_list())
        if args.breakdown:
            print()
            print(combiner.generate_detailed_breakdown(), end='')

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main recipe manager script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level)

    user = CurrentUser(
        username=args.user,
        display_name=args.display_name,
        role=args.role or ('guest' if args.user == GUEST_USER.username else 'user'),
    )

    try:
        db = RecipeDatabase(args.db)
        return asyncio.run(run_command(args, db, user))
    except RecipeManagerError as e:
        record_error(e, component="cli", operation=args.command)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
