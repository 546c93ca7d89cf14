"""Preference filtering: narrow a catalog to recipes a household can cook."""

import re
from typing import Callable, Iterable

from dishplanner.errors import NoEligibleRecipesError, ValidationError
from dishplanner.logging_config import get_logger
from dishplanner.normalize.units import normalize_ingredient_name, parse_duration_minutes
from dishplanner.schemas import (
    BasePreferences,
    DietaryRestriction,
    Difficulty,
    MealPlanPreferences,
    Recipe,
    RecipeCategory,
    SkillLevel,
)

logger = get_logger(__name__)

MIN_PEOPLE = 1
MAX_PEOPLE = 20

NUT_KEYWORDS = (
    "peanut",
    "walnut",
    "almond",
    "cashew",
    "hazelnut",
    "pecan",
    "pistachio",
    "pine nut",
)

ANIMAL_PRODUCT_KEYWORDS = (
    "chicken",
    "beef",
    "pork",
    "lamb",
    "fish",
    "shrimp",
    "bacon",
    "ham",
    "salmon",
    "milk",
    "cheese",
    "butter",
    "cream",
    "egg",
    "honey",
    "gelatin",
)

GLUTEN_KEYWORDS = ("flour", "bread", "pasta", "wheat", "barley", "noodle")

DAIRY_KEYWORDS = ("milk", "cheese", "butter", "cream", "yogurt")

SKILL_DIFFICULTIES: dict[SkillLevel, frozenset[Difficulty]] = {
    SkillLevel.BEGINNER: frozenset({Difficulty.EASY}),
    SkillLevel.INTERMEDIATE: frozenset({Difficulty.EASY, Difficulty.MEDIUM}),
    SkillLevel.ADVANCED: frozenset({Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD}),
}


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str]:
    # Word-start match; "egg" must not match "eggplant" or "veggie"
    return re.compile(r"\b(?:" + "|".join(re.escape(kw) for kw in keywords) + r")(?!plant)")


_NUT_PATTERN = _keyword_pattern(NUT_KEYWORDS)
_ANIMAL_PATTERN = _keyword_pattern(ANIMAL_PRODUCT_KEYWORDS)
_GLUTEN_PATTERN = _keyword_pattern(GLUTEN_KEYWORDS)
_DAIRY_PATTERN = _keyword_pattern(DAIRY_KEYWORDS)


def _ingredient_names(recipe: Recipe) -> list[str]:
    return [normalize_ingredient_name(ing.name) for ing in recipe.ingredients]


def _has_keyword(recipe: Recipe, pattern: re.Pattern[str]) -> bool:
    return any(pattern.search(name) for name in _ingredient_names(recipe))


# =============================================================================
# Validation
# =============================================================================


def validate_preferences(preferences: BasePreferences) -> None:
    """
    Reject malformed preferences before any selection work.

    Raises:
        ValidationError: If the diner count is out of range or a time limit
            cannot be read as a duration.
    """
    errors: list[str] = []

    if preferences.number_of_people < MIN_PEOPLE:
        errors.append("Number of people must be greater than 0")
    if preferences.number_of_people > MAX_PEOPLE:
        errors.append(f"Number of people cannot exceed {MAX_PEOPLE}")

    if preferences.cooking_time and parse_duration_minutes(preferences.cooking_time) == 0:
        errors.append(f"Unrecognized cooking time: '{preferences.cooking_time}'")

    if isinstance(preferences, MealPlanPreferences) and preferences.time_constraints:
        for label, value in (
            ("max prep time", preferences.time_constraints.max_prep_time),
            ("max cook time", preferences.time_constraints.max_cook_time),
        ):
            if value and parse_duration_minutes(value) == 0:
                errors.append(f"Unrecognized {label}: '{value}'")

    if errors:
        raise ValidationError(
            ", ".join(errors),
            hint="Use between 1 and 20 diners and durations like '45 minutes' or '1 hour'.",
        )


# =============================================================================
# Predicates
# =============================================================================


def _dietary_predicate(restriction: DietaryRestriction) -> Callable[[Recipe], bool] | None:
    """Predicate keeping recipes compatible with a restriction; None when advisory only."""
    if restriction == DietaryRestriction.VEGETARIAN:
        return lambda recipe: recipe.category != RecipeCategory.MEAT
    if restriction == DietaryRestriction.NO_SEAFOOD:
        return lambda recipe: recipe.category != RecipeCategory.SEAFOOD
    if restriction == DietaryRestriction.NUT_FREE:
        return lambda recipe: not _has_keyword(recipe, _NUT_PATTERN)
    if restriction == DietaryRestriction.VEGAN:
        return lambda recipe: (
            recipe.category not in (RecipeCategory.MEAT, RecipeCategory.SEAFOOD)
            and not _has_keyword(recipe, _ANIMAL_PATTERN)
        )
    if restriction == DietaryRestriction.GLUTEN_FREE:
        return lambda recipe: not _has_keyword(recipe, _GLUTEN_PATTERN)
    if restriction == DietaryRestriction.DAIRY_FREE:
        return lambda recipe: not _has_keyword(recipe, _DAIRY_PATTERN)
    # low_salt, low_sugar, low_fat and high_protein have no ingredient data to filter on
    return None


def _matches_allergies(recipe: Recipe, allergies: tuple[str, ...]) -> bool:
    names = _ingredient_names(recipe)
    for allergy in allergies:
        allergen = allergy.strip().lower()
        if allergen and any(allergen in name for name in names):
            return False
    return True


def _time_ceiling_predicate(preferences: BasePreferences) -> Callable[[Recipe], bool] | None:
    if not preferences.cooking_time:
        return None
    ceiling = parse_duration_minutes(preferences.cooking_time)
    return lambda recipe: recipe.total_minutes <= ceiling


# =============================================================================
# Filtering
# =============================================================================


def filter_recipes(recipes: Iterable[Recipe], preferences: BasePreferences) -> list[Recipe]:
    """
    Return the recipes that satisfy every hard constraint in the preferences.

    Constraints are applied one at a time so that an empty result can name
    the constraint that emptied it. Preferred categories are a soft
    preference: they narrow the working set only when some recipes match.

    Args:
        recipes: Candidate recipes, usually a whole catalog.
        preferences: Meal-plan or combination preferences.

    Returns:
        Matching recipes in their original order.

    Raises:
        ValidationError: If the preferences are malformed.
        NoEligibleRecipesError: If no recipe survives filtering.
    """
    validate_preferences(preferences)

    working = list(recipes)
    if not working:
        raise NoEligibleRecipesError("catalog", "No recipes available to filter")

    def apply(constraint: str, predicate: Callable[[Recipe], bool]) -> None:
        nonlocal working
        before = len(working)
        working = [recipe for recipe in working if predicate(recipe)]
        logger.debug(f"Filter '{constraint}' kept {len(working)} of {before} recipes")
        if not working:
            raise NoEligibleRecipesError(constraint)

    for restriction in preferences.dietary_restrictions:
        predicate = _dietary_predicate(restriction)
        if predicate is not None:
            apply(f"dietary_restriction:{restriction.value}", predicate)

    if preferences.allergies:
        apply("allergies", lambda recipe: _matches_allergies(recipe, preferences.allergies))

    if preferences.excluded_categories:
        excluded = set(preferences.excluded_categories)
        apply("excluded_categories", lambda recipe: recipe.category not in excluded)

    if preferences.preferred_categories:
        preferred_set = set(preferences.preferred_categories)
        preferred = [recipe for recipe in working if recipe.category in preferred_set]
        if preferred:
            working = preferred
        else:
            logger.debug("No recipes in preferred categories; keeping the unfiltered set")

    if preferences.skill_level:
        allowed = SKILL_DIFFICULTIES[preferences.skill_level]
        apply(
            f"skill_level:{preferences.skill_level.value}",
            lambda recipe: recipe.difficulty in allowed,
        )

    ceiling = _time_ceiling_predicate(preferences)
    if ceiling is not None:
        apply("cooking_time", ceiling)

    if isinstance(preferences, MealPlanPreferences) and preferences.time_constraints:
        max_prep = preferences.time_constraints.max_prep_time
        max_cook = preferences.time_constraints.max_cook_time
        if max_prep:
            prep_limit = parse_duration_minutes(max_prep)
            apply("max_prep_time", lambda recipe: recipe.prep_minutes <= prep_limit)
        if max_cook:
            cook_limit = parse_duration_minutes(max_cook)
            apply("max_cook_time", lambda recipe: recipe.cook_minutes <= cook_limit)

    logger.debug(f"{len(working)} recipes eligible after filtering")
    return working
