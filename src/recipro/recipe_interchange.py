#!/usr/bin/env python3
"""
Recipe Import/Export
Backup payload schema, export from a store, and per-record import with
create-then-update fallback.
"""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, date
from pathlib import Path
from typing import Dict, List, Optional, Any, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from recipro.config import config
from recipro.error_handling import DuplicateKeyError, RecipeManagerError, ValidationError
from recipro.recipe_database import RecipeStore
from recipro.recipe_models import Recipe

# Setup logging
logger = structlog.get_logger(__name__)


class RecipePayload(BaseModel):
    """One recipe inside a backup file."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = ""
    title: str = Field(..., min_length=1)
    category: str = ""
    servings: int = Field(1, ge=0)
    ingredients: List[str] = Field(default_factory=list)
    instructions: List[str] = Field(default_factory=list)
    tips: str = ""
    image: str = ""
    difficulty: str = ""
    date_created: Optional[str] = Field(None, alias="dateCreated")
    date_modified: Optional[str] = Field(None, alias="dateModified")
    version: int = Field(1, ge=1)

    @field_validator("tips", "image", "difficulty", "category", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    def to_recipe(self) -> Recipe:
        return Recipe(**self.model_dump(by_alias=False))


@dataclass
class ImportSummary:
    """Tally of an import run."""
    successful: int = 0
    failed: int = 0
    total: int = 0
    failures: List[Dict[str, str]] = field(default_factory=list)


def default_backup_name(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"recipro-backup-{today.isoformat()}.json"


async def export_recipes(store: RecipeStore, version: Optional[int] = None) -> Dict[str, Any]:
    """
    Export all recipes for backup.

    Args:
        store: Recipe store
        version: Format version, defaults to RECIPRO_EXPORT_VERSION

    Returns:
        ``{exportDate, version, totalRecipes, recipes}``
    """
    recipes = await store.get_all()
    export_data = {
        "exportDate": datetime.now().isoformat(),
        "version": version if version is not None else config.EXPORT_VERSION,
        "totalRecipes": len(recipes),
        "recipes": [recipe.to_dict() for recipe in recipes],
    }
    logger.info("recipes_exported", total=len(recipes))
    return export_data


def validate_import_payload(data: Any) -> List[Any]:
    """
    Check the shape of a backup payload.

    Args:
        data: Decoded JSON object

    Returns:
        Raw recipe records in payload order

    Raises:
        ValidationError: payload is not an object or has no ``recipes`` list
    """
    if not isinstance(data, dict) or not isinstance(data.get("recipes"), list):
        raise ValidationError("Invalid backup file format",
                              validation_errors=["'recipes' must be a list"])
    return data["recipes"]


def parse_import_record(record: Any, index: int = 0) -> Recipe:
    """
    Validate one backup record.

    Args:
        record: Raw recipe record
        index: Position in the payload, used in error messages

    Returns:
        Recipe

    Raises:
        ValidationError: the record is malformed
    """
    try:
        return RecipePayload.model_validate(record).to_recipe()
    except PydanticValidationError as e:
        errors = [
            ".".join([f"recipes[{index}]", *(str(part) for part in error["loc"])]) + f": {error['msg']}"
            for error in e.errors()
        ]
        raise ValidationError(f"Invalid recipe record at index {index}", validation_errors=errors) from e


async def _add_or_update(store: RecipeStore, recipe: Recipe, summary: ImportSummary,
                         fallback_on_any_error: bool):
    try:
        await store.add(recipe)
        summary.successful += 1
        return
    except DuplicateKeyError:
        pass
    except RecipeManagerError as e:
        if not fallback_on_any_error:
            summary.failed += 1
            summary.failures.append({"id": recipe.id, "title": recipe.title, "error": e.message})
            return

    # Recipe might already exist, try to update instead
    try:
        await store.update(recipe)
        summary.successful += 1
    except RecipeManagerError as e:
        logger.error("recipe_import_failed", recipe_id=recipe.id, title=recipe.title, error=e.message)
        summary.failed += 1
        summary.failures.append({"id": recipe.id, "title": recipe.title, "error": e.message})


async def import_recipes(store: RecipeStore, data: Any) -> ImportSummary:
    """
    Import a backup payload record by record.

    Malformed records are counted as failures. A failed create is retried
    as an update; a record only counts as failed when both attempts fail.
    The run never stops at the first failure.

    Args:
        store: Recipe store
        data: Decoded backup payload

    Returns:
        Import summary

    Raises:
        ValidationError: payload has no ``recipes`` list
    """
    records = validate_import_payload(data)
    summary = ImportSummary(total=len(records))

    for index, record in enumerate(records):
        try:
            recipe = parse_import_record(record, index)
        except RecipeManagerError as e:
            fields = record if isinstance(record, dict) else {}
            logger.error("recipe_import_invalid", index=index, errors=getattr(e, "validation_errors", []))
            summary.failed += 1
            summary.failures.append({
                "id": str(fields.get("id") or ""),
                "title": str(fields.get("title") or ""),
                "error": "; ".join(getattr(e, "validation_errors", [])) or e.message,
            })
            continue
        await _add_or_update(store, recipe, summary, fallback_on_any_error=True)

    logger.info("recipes_imported", successful=summary.successful, failed=summary.failed, total=summary.total)
    return summary


async def import_default_recipes(store: RecipeStore, default_recipes: Dict[str, Union[Recipe, Dict[str, Any]]]) -> ImportSummary:
    """
    Seed a store with built-in recipes keyed by id.

    Existing ids are updated instead of created.

    Args:
        store: Recipe store
        default_recipes: Mapping of recipe id to recipe or recipe dictionary

    Returns:
        Import summary
    """
    summary = ImportSummary(total=len(default_recipes))

    for recipe_id, recipe in default_recipes.items():
        if isinstance(recipe, Recipe):
            recipe = replace(recipe, id=recipe_id)
        else:
            recipe = Recipe.from_dict({**recipe, "id": recipe_id})
        await _add_or_update(store, recipe, summary, fallback_on_any_error=False)

    logger.info("default_recipes_imported", successful=summary.successful, failed=summary.failed)
    return summary


def dump_export(data: Dict[str, Any], path: Union[str, Path]) -> Path:
    """Write an export payload as pretty JSON."""
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
    return path


def load_export(path: Union[str, Path]) -> Any:
    """Read a backup file; unreadable files and invalid JSON raise ValidationError."""
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Backup file is not valid JSON: {e}") from e
    except OSError as e:
        raise ValidationError(f"Cannot read backup file {path}: {e.strerror or e}") from e
