#!/usr/bin/env python3
"""
Recipe Data Model
Structured recipe records, id generation and create/update stamping, plus
the selection and consolidation records used when combining recipes.
"""

import re
import time
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime
from typing import Dict, List, Optional, Any

from recipro.error_handling import ValidationError


def generate_recipe_id(title: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Generate a unique recipe ID from title and timestamp.

    Args:
        title: Recipe title
        timestamp_ms: Disambiguator in epoch milliseconds, defaults to now

    Returns:
        Slug of the title followed by the timestamp
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    slug = re.sub(r'[^a-z0-9\s]', '', title.lower())
    slug = re.sub(r'\s+', '-', slug)[:50]
    return f"{slug}-{timestamp_ms}"


def _clean_lines(lines: Optional[List[str]]) -> List[str]:
    return [str(line).strip() for line in (lines or []) if str(line).strip()]


@dataclass
class Recipe:
    """Stored recipe record."""
    title: str
    category: str = ""
    servings: int = 1
    ingredients: List[str] = field(default_factory=list)
    instructions: List[str] = field(default_factory=list)
    tips: str = ""
    image: str = ""
    difficulty: str = ""
    id: str = ""
    date_created: Optional[str] = None
    date_modified: Optional[str] = None
    version: int = 1

    def __post_init__(self):
        try:
            self.servings = int(self.servings)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid servings value: {self.servings!r}",
                                  validation_errors=["servings must be an integer"])
        self.ingredients = list(self.ingredients or [])
        self.instructions = list(self.instructions or [])

    def validate_for_create(self) -> "Recipe":
        """Check required fields for a user-submitted recipe; drops blank lines."""
        self.ingredients = _clean_lines(self.ingredients)
        self.instructions = _clean_lines(self.instructions)

        errors = []
        if not self.title or not self.title.strip():
            errors.append("title is required")
        if not self.category or not self.category.strip():
            errors.append("category is required")
        if self.servings < 1:
            errors.append("servings must be at least 1")
        if not self.ingredients:
            errors.append("at least one ingredient is required")
        if not self.instructions:
            errors.append("at least one instruction is required")

        if errors:
            raise ValidationError("Recipe is incomplete", validation_errors=errors)
        return self

    def stamped_for_create(self, now: Optional[datetime] = None) -> "Recipe":
        """Copy with id, creation/modification timestamps and version 1."""
        now = now or datetime.now()
        stamp = now.isoformat()
        return replace(
            self,
            id=self.id or generate_recipe_id(self.title, int(now.timestamp() * 1000)),
            date_created=stamp,
            date_modified=stamp,
            version=1,
        )

    def bumped(self, now: Optional[datetime] = None) -> "Recipe":
        """Copy for an update: refreshed modification time, next version."""
        now = now or datetime.now()
        return replace(
            self,
            date_modified=now.isoformat(),
            version=(self.version or 1) + 1,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the interchange dictionary."""
        data = asdict(self)
        data["dateCreated"] = data.pop("date_created")
        data["dateModified"] = data.pop("date_modified")
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Recipe":
        """Build a recipe from an interchange dictionary."""
        return cls(
            id=data.get("id") or "",
            title=data.get("title") or "",
            category=data.get("category") or "",
            servings=data.get("servings", 1),
            ingredients=data.get("ingredients") or [],
            instructions=data.get("instructions") or [],
            tips=data.get("tips") or "",
            image=data.get("image") or "",
            difficulty=data.get("difficulty") or "",
            date_created=data.get("dateCreated", data.get("date_created")),
            date_modified=data.get("dateModified", data.get("date_modified")),
            version=data.get("version") or 1,
        )


@dataclass
class SelectedRecipe:
    """One entry of a combiner selection."""
    id: str
    title: str
    multiplier: float
    original_servings: int
    adjusted_servings: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "multiplier": self.multiplier,
            "originalServings": self.original_servings,
            "adjustedServings": self.adjusted_servings,
        }


@dataclass
class SourceRecord:
    """A contributing recipe's share of a consolidated ingredient."""
    recipe_title: str
    original_quantity: float
    multiplier: float
    adjusted_quantity: float


@dataclass
class ConsolidatedIngredient:
    """Ingredient merged across every selected recipe sharing its key."""
    ingredient_name: str
    unit: str
    total_quantity: float = 0.0
    has_quantity: bool = False
    sources: List[SourceRecord] = field(default_factory=list)
