"""Read-only, in-memory recipe catalog."""

import json
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from rapidfuzz import fuzz, process

from dishplanner.errors import CatalogError
from dishplanner.logging_config import get_logger
from dishplanner.schemas import Difficulty, Recipe, RecipeCategory

logger = get_logger(__name__)

SAMPLE_CATALOG_PATH = Path(__file__).resolve().parent.parent / "data" / "sample_recipes.json"

_recipe_list = TypeAdapter(list[Recipe])


@dataclass(frozen=True)
class CatalogCriteria:
    """Criteria for RecipeCatalog.filter_by; unset fields do not filter."""

    categories: tuple[RecipeCategory, ...] = ()
    difficulty: Difficulty | None = None
    max_prep_minutes: int | None = None
    max_cook_minutes: int | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class CatalogStatistics:
    total_recipes: int
    category_counts: dict[str, int] = field(default_factory=dict)
    difficulty_counts: dict[str, int] = field(default_factory=dict)
    average_prep_minutes: int = 0
    average_cook_minutes: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_recipes": self.total_recipes,
            "category_counts": self.category_counts,
            "difficulty_counts": self.difficulty_counts,
            "average_prep_minutes": self.average_prep_minutes,
            "average_cook_minutes": self.average_cook_minutes,
        }


class RecipeCatalog:
    """
    Immutable snapshot of recipes handed to every engine call.

    Recipes are frozen pydantic models held in a tuple, so callers can share
    one catalog across calls without copying.
    """

    def __init__(self, recipes: Iterable[Recipe] = ()):
        self._recipes: tuple[Recipe, ...] = tuple(recipes)
        self._by_id: dict[str, Recipe] = {}
        for recipe in self._recipes:
            if recipe.id in self._by_id:
                raise CatalogError(f"Duplicate recipe id in catalog: {recipe.id}")
            self._by_id[recipe.id] = recipe

    def __len__(self) -> int:
        return len(self._recipes)

    def __iter__(self):
        return iter(self._recipes)

    def __contains__(self, recipe_id: object) -> bool:
        return recipe_id in self._by_id

    def get_all(self) -> list[Recipe]:
        """Get all recipes in catalog order."""
        return list(self._recipes)

    def get_by_id(self, recipe_id: str) -> Recipe | None:
        """Get a recipe by its identifier."""
        return self._by_id.get(recipe_id)

    def get_by_category(self, category: RecipeCategory | str) -> list[Recipe]:
        """Get recipes in a category."""
        category = RecipeCategory(category)
        return [recipe for recipe in self._recipes if recipe.category == category]

    def filter_by(self, criteria: CatalogCriteria) -> list[Recipe]:
        """Get recipes matching every set criterion."""

        def matches(recipe: Recipe) -> bool:
            if criteria.categories and recipe.category not in criteria.categories:
                return False
            if criteria.difficulty and recipe.difficulty != criteria.difficulty:
                return False
            if (
                criteria.max_prep_minutes is not None
                and recipe.prep_minutes > criteria.max_prep_minutes
            ):
                return False
            if (
                criteria.max_cook_minutes is not None
                and recipe.cook_minutes > criteria.max_cook_minutes
            ):
                return False
            if criteria.tags and not any(tag in recipe.tags for tag in criteria.tags):
                return False
            return True

        return [recipe for recipe in self._recipes if matches(recipe)]

    def search(self, query: str) -> list[Recipe]:
        """Case-insensitive substring search over names, descriptions, ingredients and tags."""
        needle = query.lower().strip()
        if not needle:
            return self.get_all()

        def matches(recipe: Recipe) -> bool:
            return (
                needle in recipe.name.lower()
                or needle in (recipe.description or "").lower()
                or any(needle in ing.name.lower() for ing in recipe.ingredients)
                or any(needle in tag.lower() for tag in recipe.tags)
            )

        return [recipe for recipe in self._recipes if matches(recipe)]

    def find_by_name(self, name: str, score_cutoff: float = 80.0) -> Recipe | None:
        """
        Find a recipe by name.

        Tries an exact match, then a case-insensitive substring match, then
        the best fuzzy match scoring at least ``score_cutoff``.
        """
        for recipe in self._recipes:
            if recipe.name == name:
                return recipe

        lowered = name.lower()
        for recipe in self._recipes:
            if lowered in recipe.name.lower():
                return recipe

        if not self._recipes:
            return None

        names = [recipe.name for recipe in self._recipes]
        match = process.extractOne(
            name,
            names,
            scorer=fuzz.WRatio,
            processor=str.lower,
            score_cutoff=score_cutoff,
        )
        if match is None:
            return None

        _, score, index = match
        logger.debug(f"Fuzzy matched '{name}' to '{names[index]}' (score {score:.0f})")
        return self._recipes[index]

    def related(self, recipe: Recipe, limit: int = 3) -> list[Recipe]:
        """Other recipes from the same category."""
        return [
            other
            for other in self._recipes
            if other.category == recipe.category and other.id != recipe.id
        ][:limit]

    def statistics(self) -> CatalogStatistics:
        """Summarize the catalog by category, difficulty and timing."""
        total = len(self._recipes)
        if total == 0:
            return CatalogStatistics(total_recipes=0)

        categories = Counter(recipe.category.value for recipe in self._recipes)
        difficulties = Counter(recipe.difficulty.value for recipe in self._recipes)
        return CatalogStatistics(
            total_recipes=total,
            category_counts=dict(categories),
            difficulty_counts=dict(difficulties),
            average_prep_minutes=round(sum(r.prep_minutes for r in self._recipes) / total),
            average_cook_minutes=round(sum(r.cook_minutes for r in self._recipes) / total),
        )


def load_catalog(path: str | Path | None = None) -> RecipeCatalog:
    """
    Load a catalog from a JSON file holding a list of recipes.

    Args:
        path: JSON file path. Defaults to the packaged sample catalog.

    Raises:
        CatalogError: If the file is missing, unreadable or holds invalid recipes.
    """
    catalog_path = Path(path) if path else SAMPLE_CATALOG_PATH

    try:
        raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogError(f"Cannot read recipe catalog {catalog_path}: {e}") from e

    try:
        recipes = _recipe_list.validate_python(raw)
    except PydanticValidationError as e:
        raise CatalogError(f"Invalid recipe catalog {catalog_path}: {e}") from e

    catalog = RecipeCatalog(recipes)
    logger.info(f"Loaded {len(catalog)} recipes from {catalog_path.name}")
    return catalog
