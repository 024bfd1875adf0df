#!/usr/bin/env python3
"""
Recipe Database Management System
Keyed recipe stores used by the scaler, combiner and interchange layers:
an in-memory store and a SQLite-backed store with retry on lock contention.
"""

import abc
import json
import sqlite3
import asyncio
import copy
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Any

import structlog
from prometheus_client import Counter
from tenacity import Retrying, stop_after_attempt, wait_fixed, retry_if_exception_type

from recipro.config import config as default_config
from recipro.error_handling import DuplicateKeyError, StorageError, ValidationError
from recipro.recipe_models import Recipe

# Metrics
STORE_OPERATIONS = Counter(
    'recipe_store_operations_total',
    'Recipe store operations by outcome',
    ['operation', 'status']
)

# Setup logging
logger = structlog.get_logger(__name__)


class RecipeStore(abc.ABC):
    """Async keyed record store for recipes."""

    @abc.abstractmethod
    async def get(self, recipe_id: str) -> Optional[Recipe]:
        """Recipe by id, or None."""

    @abc.abstractmethod
    async def get_all(self) -> List[Recipe]:
        """All recipes ordered by id."""

    @abc.abstractmethod
    async def add(self, recipe: Recipe) -> Recipe:
        """Create; raises DuplicateKeyError if the id exists."""

    @abc.abstractmethod
    async def update(self, recipe: Recipe) -> Recipe:
        """Upsert with version increment and refreshed modification time."""

    @abc.abstractmethod
    async def delete(self, recipe_id: str) -> bool:
        """Remove by id; True if a record was removed."""

    @abc.abstractmethod
    async def clear_all(self) -> int:
        """Remove every recipe; returns how many were removed."""

    async def search_by_title(self, search_term: str) -> List[Recipe]:
        """Case-insensitive substring search on titles."""
        term = search_term.lower()
        return [recipe for recipe in await self.get_all() if term in recipe.title.lower()]

    async def get_by_category(self, category: str) -> List[Recipe]:
        return [recipe for recipe in await self.get_all() if recipe.category == category]

    async def get_by_difficulty(self, difficulty: str) -> List[Recipe]:
        return [recipe for recipe in await self.get_all() if recipe.difficulty == difficulty]

    async def get_stats(self) -> Dict[str, Any]:
        """
        Get store statistics.

        Returns:
            Totals, per-category counts and the five most recently added
            and modified recipes
        """
        recipes = await self.get_all()

        categories: Dict[str, int] = {}
        for recipe in recipes:
            categories[recipe.category] = categories.get(recipe.category, 0) + 1

        return {
            "totalRecipes": len(recipes),
            "categories": categories,
            "recentlyAdded": sorted(recipes, key=lambda r: r.date_created or "", reverse=True)[:5],
            "recentlyModified": sorted(recipes, key=lambda r: r.date_modified or "", reverse=True)[:5],
        }

    @staticmethod
    def _require_id(recipe: Recipe, operation: str):
        if not recipe.id:
            raise ValidationError(f"Recipe id is required for {operation}",
                                  validation_errors=["id is required"])

    @staticmethod
    def _count(operation: str, status: str):
        STORE_OPERATIONS.labels(operation=operation, status=status).inc()


class InMemoryRecipeStore(RecipeStore):
    """Dictionary-backed store; records are copied in and out."""

    def __init__(self, recipes: Optional[List[Recipe]] = None):
        self._recipes: Dict[str, Recipe] = {}
        for recipe in recipes or []:
            stamped = recipe.stamped_for_create()
            self._recipes[stamped.id] = stamped

    async def get(self, recipe_id: str) -> Optional[Recipe]:
        self._count("get", "success")
        recipe = self._recipes.get(recipe_id)
        return copy.deepcopy(recipe) if recipe else None

    async def get_all(self) -> List[Recipe]:
        self._count("get_all", "success")
        return [copy.deepcopy(self._recipes[key]) for key in sorted(self._recipes)]

    async def add(self, recipe: Recipe) -> Recipe:
        stamped = recipe.stamped_for_create()
        if stamped.id in self._recipes:
            self._count("add", "duplicate")
            raise DuplicateKeyError(stamped.id)

        self._recipes[stamped.id] = copy.deepcopy(stamped)
        self._count("add", "success")
        logger.info("recipe_added", recipe_id=stamped.id, title=stamped.title)
        return stamped

    async def update(self, recipe: Recipe) -> Recipe:
        self._require_id(recipe, "update")
        updated = recipe.bumped()
        self._recipes[updated.id] = copy.deepcopy(updated)
        self._count("update", "success")
        logger.info("recipe_updated", recipe_id=updated.id, version=updated.version)
        return updated

    async def delete(self, recipe_id: str) -> bool:
        removed = self._recipes.pop(recipe_id, None) is not None
        self._count("delete", "success")
        logger.info("recipe_deleted", recipe_id=recipe_id, removed=removed)
        return removed

    async def clear_all(self) -> int:
        removed = len(self._recipes)
        self._recipes.clear()
        self._count("clear_all", "success")
        logger.info("recipes_cleared", removed=removed)
        return removed


class RecipeDatabase(RecipeStore):
    """SQLite-backed recipe store."""

    def __init__(self, db_path: Optional[str] = None, config: Optional[Dict[str, Any]] = None):
        """
        Initialize recipe database.

        Args:
            db_path: Path to SQLite database file, defaults to RECIPRO_DB_PATH
            config: Configuration dictionary ('retries', 'retry_delay')
        """
        self.db_path = Path(db_path or default_config.DB_PATH)
        self.config = config or {}

        self._retrying = Retrying(
            stop=stop_after_attempt(self.config.get('retries', default_config.DB_RETRIES)),
            wait=wait_fixed(self.config.get('retry_delay', default_config.DB_RETRY_DELAY)),
            retry=retry_if_exception_type(sqlite3.OperationalError),
            before_sleep=self._log_retry,
            reraise=True,
        )

        # Initialize database
        try:
            self._init_database()
        except (sqlite3.Error, OSError) as e:
            raise StorageError(f"Failed to open recipe database {self.db_path}: {e}", operation="init") from e
        logger.info("recipe_database_initialized", db_path=str(self.db_path))

    @staticmethod
    def _log_retry(retry_state):
        logger.warning(
            "sqlite_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()),
        )

    @contextmanager
    def _connect(self):
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_database(self):
        """Initialize database schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recipes (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    category TEXT,
                    servings INTEGER NOT NULL,
                    ingredients TEXT NOT NULL,
                    instructions TEXT NOT NULL,
                    tips TEXT,
                    image TEXT,
                    difficulty TEXT,
                    date_created TEXT,
                    date_modified TEXT,
                    version INTEGER NOT NULL DEFAULT 1
                )
            """)

            # Create indexes for searching
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_title ON recipes(title)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_category ON recipes(category)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_difficulty ON recipes(difficulty)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_date_created ON recipes(date_created)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_recipes_date_modified ON recipes(date_modified)")

    @staticmethod
    def _to_row(recipe: Recipe) -> tuple:
        return (
            recipe.id,
            recipe.title,
            recipe.category,
            recipe.servings,
            json.dumps(recipe.ingredients),
            json.dumps(recipe.instructions),
            recipe.tips,
            recipe.image,
            recipe.difficulty,
            recipe.date_created,
            recipe.date_modified,
            recipe.version,
        )

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Recipe:
        return Recipe(
            id=row["id"],
            title=row["title"],
            category=row["category"] or "",
            servings=row["servings"],
            ingredients=json.loads(row["ingredients"]),
            instructions=json.loads(row["instructions"]),
            tips=row["tips"] or "",
            image=row["image"] or "",
            difficulty=row["difficulty"] or "",
            date_created=row["date_created"],
            date_modified=row["date_modified"],
            version=row["version"],
        )

    async def _run(self, operation: str, func, *args):
        """Run a blocking database call off the event loop with retries."""
        try:
            result = await asyncio.to_thread(self._retrying.copy(), func, *args)
        except DuplicateKeyError:
            self._count(operation, "duplicate")
            raise
        except sqlite3.Error as e:
            self._count(operation, "error")
            raise StorageError(f"Failed to {operation} recipe: {e}", operation=operation) from e
        self._count(operation, "success")
        return result

    # Blocking implementations

    def _get(self, recipe_id: str) -> Optional[Recipe]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM recipes WHERE id = ?", (recipe_id,)).fetchone()
        return self._from_row(row) if row else None

    def _get_all(self) -> List[Recipe]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM recipes ORDER BY id").fetchall()
        return [self._from_row(row) for row in rows]

    def _get_where(self, column: str, value: str) -> List[Recipe]:
        with self._connect() as conn:
            rows = conn.execute(f"SELECT * FROM recipes WHERE {column} = ? ORDER BY id", (value,)).fetchall()
        return [self._from_row(row) for row in rows]

    def _insert(self, recipe: Recipe) -> Recipe:
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO recipes VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    self._to_row(recipe)
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateKeyError(recipe.id) from e
        return recipe

    def _upsert(self, recipe: Recipe) -> Recipe:
        with self._connect() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO recipes VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                self._to_row(recipe)
            )
        return recipe

    def _delete(self, recipe_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM recipes WHERE id = ?", (recipe_id,))
            return cursor.rowcount > 0

    def _clear(self) -> int:
        with self._connect() as conn:
            count = conn.execute("SELECT COUNT(*) FROM recipes").fetchone()[0]
            conn.execute("DELETE FROM recipes")
            return count

    # Store interface

    async def get(self, recipe_id: str) -> Optional[Recipe]:
        return await self._run("get", self._get, recipe_id)

    async def get_all(self) -> List[Recipe]:
        return await self._run("get_all", self._get_all)

    async def get_by_category(self, category: str) -> List[Recipe]:
        return await self._run("get_by_category", self._get_where, "category", category)

    async def get_by_difficulty(self, difficulty: str) -> List[Recipe]:
        return await self._run("get_by_difficulty", self._get_where, "difficulty", difficulty)

    async def add(self, recipe: Recipe) -> Recipe:
        stamped = recipe.stamped_for_create(datetime.now())
        stored = await self._run("add", self._insert, stamped)
        logger.info("recipe_added", recipe_id=stored.id, title=stored.title)
        return stored

    async def update(self, recipe: Recipe) -> Recipe:
        self._require_id(recipe, "update")
        stored = await self._run("update", self._upsert, recipe.bumped(datetime.now()))
        logger.info("recipe_updated", recipe_id=stored.id, version=stored.version)
        return stored

    async def delete(self, recipe_id: str) -> bool:
        removed = await self._run("delete", self._delete, recipe_id)
        logger.info("recipe_deleted", recipe_id=recipe_id, removed=removed)
        return removed

    async def clear_all(self) -> int:
        removed = await self._run("clear_all", self._clear)
        logger.info("recipes_cleared", removed=removed)
        return removed
