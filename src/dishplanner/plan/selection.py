"""Random recipe selection with category diversity."""

import random
from dataclasses import dataclass
from typing import Iterable, Sequence

from dishplanner.catalog import RecipeCatalog
from dishplanner.errors import PartialResultWarning, ValidationError
from dishplanner.logging_config import get_logger
from dishplanner.schemas import MealSlot, Recipe, RecipeCategory

logger = get_logger(__name__)

# Categories eligible for each primary slot of a day
SLOT_CATEGORIES: dict[MealSlot, frozenset[RecipeCategory]] = {
    MealSlot.BREAKFAST: frozenset({RecipeCategory.BREAKFAST}),
    MealSlot.LUNCH: frozenset(
        {
            RecipeCategory.MEAT,
            RecipeCategory.VEGETARIAN,
            RecipeCategory.STAPLE,
            RecipeCategory.SOUP,
        }
    ),
    MealSlot.DINNER: frozenset(
        {
            RecipeCategory.MEAT,
            RecipeCategory.VEGETARIAN,
            RecipeCategory.SEAFOOD,
            RecipeCategory.SOUP,
        }
    ),
}

DAILY_SLOTS: tuple[MealSlot, ...] = (MealSlot.BREAKFAST, MealSlot.LUNCH, MealSlot.DINNER)

# Order in which a combination tries to cover categories
CATEGORY_PRIORITY: tuple[RecipeCategory, ...] = (
    RecipeCategory.MEAT,
    RecipeCategory.VEGETARIAN,
    RecipeCategory.SOUP,
    RecipeCategory.STAPLE,
    RecipeCategory.SEAFOOD,
)


@dataclass(frozen=True)
class SelectionResult:
    """Recipes chosen for a combination, with a warning when under the minimum."""

    recipes: tuple[Recipe, ...]
    warning: PartialResultWarning | None = None


def validate_dish_bounds(
    min_dishes: int,
    max_dishes: int,
    must_include: Sequence[str] = (),
) -> None:
    """
    Check combination size bounds.

    Raises:
        ValidationError: If min_dishes < 1, min_dishes > max_dishes, or more
            recipes are required than max_dishes allows.
    """
    if min_dishes < 1:
        raise ValidationError("Minimum dishes must be at least 1")
    if min_dishes > max_dishes:
        raise ValidationError(
            "Minimum dishes cannot be greater than maximum dishes",
            hint=f"Lower min_dishes ({min_dishes}) or raise max_dishes ({max_dishes}).",
        )
    required = len(dict.fromkeys(must_include))
    if required > max_dishes:
        raise ValidationError(
            f"{required} required recipes exceed the maximum of {max_dishes} dishes",
            hint="Raise max_dishes or include fewer recipes.",
        )


def _fits_slot(recipe: Recipe, slot: MealSlot) -> bool:
    if slot == MealSlot.BREAKFAST and "breakfast" in recipe.tags:
        return True
    return recipe.category in SLOT_CATEGORIES[slot]


class RecipeSelector:
    """
    Draws recipes uniformly at random from the current candidates.

    The random source is injected so callers (and tests) control every draw;
    each draw is a single ``rng.choice`` over the candidate list at that moment.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def _choose(self, candidates: list[Recipe]) -> Recipe:
        return self.rng.choice(candidates)

    def select_day(self, recipes: Sequence[Recipe]) -> list[tuple[MealSlot, Recipe]]:
        """
        Pick one recipe for each of breakfast, lunch and dinner.

        A recipe is used at most once per day. Slots without an eligible
        recipe are left out, so a day can hold fewer than three meals.
        """
        chosen: list[tuple[MealSlot, Recipe]] = []
        used_ids: set[str] = set()

        for slot in DAILY_SLOTS:
            candidates = [r for r in recipes if _fits_slot(r, slot) and r.id not in used_ids]
            if not candidates:
                logger.debug(f"No eligible recipes for {slot.value}; slot omitted")
                continue

            recipe = self._choose(candidates)
            used_ids.add(recipe.id)
            chosen.append((slot, recipe))
            logger.debug(f"Selected '{recipe.name}' for {slot.value}")

        return chosen

    def select_dishes(
        self,
        recipes: Sequence[Recipe],
        catalog: RecipeCatalog,
        min_dishes: int = 3,
        max_dishes: int = 6,
        must_include: Iterable[str] = (),
        must_exclude: Iterable[str] = (),
    ) -> SelectionResult:
        """
        Select dishes for a combination.

        Required recipes come first and are looked up in the whole catalog,
        so they are kept even when the preference filter removed them. Then
        one recipe is drawn for each uncovered category in priority order
        until max_dishes is reached, and finally random picks fill up to
        min_dishes while candidates remain.

        Args:
            recipes: Filtered candidate recipes.
            catalog: Full catalog, used to resolve required recipe ids.
            min_dishes: Lower bound on the dish count.
            max_dishes: Upper bound on the dish count.
            must_include: Recipe ids that must be part of the combination.
            must_exclude: Recipe ids that must not be drawn.

        Returns:
            SelectionResult, carrying a PartialResultWarning when fewer than
            min_dishes recipes could be selected.

        Raises:
            ValidationError: If the bounds are inconsistent.
        """
        include_ids = list(dict.fromkeys(must_include))
        validate_dish_bounds(min_dishes, max_dishes, include_ids)
        excluded = set(must_exclude)

        selected: list[Recipe] = []
        for recipe_id in include_ids:
            recipe = catalog.get_by_id(recipe_id)
            if recipe is None:
                logger.warning(f"Required recipe '{recipe_id}' not found in catalog; skipping")
                continue
            selected.append(recipe)

        selected_ids = {recipe.id for recipe in selected}
        available = [r for r in recipes if r.id not in excluded and r.id not in selected_ids]
        used_categories = {recipe.category for recipe in selected}

        for category in CATEGORY_PRIORITY:
            if len(selected) >= max_dishes:
                break
            if category in used_categories:
                continue

            candidates = [r for r in available if r.category == category]
            if not candidates:
                continue

            recipe = self._choose(candidates)
            selected.append(recipe)
            used_categories.add(category)
            available = [r for r in available if r.id != recipe.id]
            logger.debug(f"Selected '{recipe.name}' to cover {category.value}")

        while len(selected) < min_dishes and available:
            recipe = self._choose(available)
            selected.append(recipe)
            available = [r for r in available if r.id != recipe.id]
            logger.debug(f"Selected '{recipe.name}' to reach the minimum dish count")

        warning = None
        if len(selected) < min_dishes:
            warning = PartialResultWarning(
                details=(
                    f"Only {len(selected)} of the requested minimum {min_dishes} dishes "
                    f"could be selected"
                ),
                requested=min_dishes,
                produced=len(selected),
            )
            logger.warning(warning.details)

        return SelectionResult(recipes=tuple(selected), warning=warning)
