"""Dish combination assembly: roles, ordering, timing and cost for one meal."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable

from dishplanner.catalog import RecipeCatalog
from dishplanner.config import Settings, get_settings
from dishplanner.errors import PartialResultWarning
from dishplanner.logging_config import LoggingContext, get_logger
from dishplanner.normalize.units import format_duration, parse_duration_minutes, round_half_up
from dishplanner.plan.filters import filter_recipes
from dishplanner.plan.scoring import (
    NutritionalBalance,
    analyze_flavor_profile,
    analyze_nutritional_balance,
    overall_difficulty,
)
from dishplanner.plan.selection import RecipeSelector, validate_dish_bounds
from dishplanner.schemas import (
    BudgetLevel,
    CombinationPreferences,
    CombinationType,
    CookingMethod,
    Difficulty,
    DishPriority,
    DishRole,
    Occasion,
    Recipe,
    RecipeCategory,
)

logger = get_logger(__name__)

CATEGORY_ROLES: dict[RecipeCategory, DishRole] = {
    RecipeCategory.MEAT: DishRole.MAIN,
    RecipeCategory.SEAFOOD: DishRole.MAIN,
    RecipeCategory.VEGETARIAN: DishRole.SIDE,
    RecipeCategory.SOUP: DishRole.SOUP,
    RecipeCategory.STAPLE: DishRole.STAPLE,
    RecipeCategory.DESSERT: DishRole.DESSERT,
}

SERVING_ORDER: dict[DishRole, int] = {
    DishRole.APPETIZER: 1,
    DishRole.SOUP: 2,
    DishRole.MAIN: 3,
    DishRole.SIDE: 4,
    DishRole.STAPLE: 5,
    DishRole.DESSERT: 6,
}

# (min, max) cost of a whole combination, by budget level
COST_RANGES: dict[BudgetLevel, tuple[int, int]] = {
    BudgetLevel.ECONOMY: (20, 40),
    BudgetLevel.MODERATE: (40, 80),
    BudgetLevel.PREMIUM: (80, 150),
}

QUICK_MEAL_MINUTES = 60

COOKING_TIPS = (
    "Prepare ingredients in the listed preparation order to work efficiently",
    "Prep several dishes at once to save time",
    "Watch the heat and avoid running too many burners at once",
    "Have seasonings and garnishes ready before cooking starts",
)

_REASON_TEMPLATES = (
    "As the {role}, {name} adds depth and texture to the meal",
    "{name} is rated {difficulty}, which fits the overall cooking schedule",
    "{name} helps balance the nutrition of the whole meal",
)


def determine_role(recipe: Recipe) -> DishRole:
    return CATEGORY_ROLES.get(recipe.category, DishRole.SIDE)


def determine_priority(role: DishRole, number_of_people: int) -> DishPriority:
    """Mains and staples are required; soup is recommended for more than two diners."""
    if role in (DishRole.MAIN, DishRole.STAPLE):
        return DishPriority.REQUIRED
    if role == DishRole.SOUP and number_of_people > 2:
        return DishPriority.RECOMMENDED
    return DishPriority.OPTIONAL


def determine_combination_type(preferences: CombinationPreferences) -> CombinationType:
    if preferences.occasion == Occasion.HOSTING_GUESTS:
        return CombinationType.ENTERTAINING
    if preferences.occasion == Occasion.HOLIDAY:
        return CombinationType.HOLIDAY
    if preferences.cooking_time:
        minutes = parse_duration_minutes(preferences.cooking_time)
        if 0 < minutes < QUICK_MEAL_MINUTES:
            return CombinationType.QUICK
    if preferences.nutritional_balance:
        return CombinationType.NUTRITIONAL
    if preferences.seasonal_preference:
        return CombinationType.SEASONAL
    return CombinationType.HOME_STYLE


def _occasion_label(preferences: CombinationPreferences) -> str:
    if preferences.occasion is None:
        return "home-style"
    return preferences.occasion.value.replace("_", " ")


# =============================================================================
# Combination Values
# =============================================================================


@dataclass(frozen=True)
class RecommendedDish:
    """A recipe with its place in the meal."""

    recipe: Recipe
    role: DishRole
    priority: DishPriority
    reason: str
    preparation_order: int
    serving_order: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "recipe": self.recipe.model_dump(mode="json"),
            "role": self.role.value,
            "priority": self.priority.value,
            "reason": self.reason,
            "preparation_order": self.preparation_order,
            "serving_order": self.serving_order,
        }


@dataclass(frozen=True)
class DishCombination:
    """A multi-dish meal with aggregate timing, difficulty, nutrition and cost."""

    id: str
    name: str
    description: str
    type: CombinationType
    dishes: tuple[RecommendedDish, ...]
    total_prep_minutes: int
    total_cook_minutes: int
    difficulty: Difficulty
    servings: int
    nutritional_balance: NutritionalBalance
    flavor_profile: list[str]
    estimated_cost: str
    cooking_tips: list[str] = field(default_factory=list)
    alternatives: list[str] = field(default_factory=list)
    warnings: list[PartialResultWarning] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_prep_time(self) -> str:
        return format_duration(self.total_prep_minutes)

    @property
    def total_cook_time(self) -> str:
        return format_duration(self.total_cook_minutes)

    @property
    def recipe_ids(self) -> list[str]:
        return [dish.recipe.id for dish in self.dishes]

    @property
    def is_partial(self) -> bool:
        return bool(self.warnings)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.type.value,
            "dishes": [dish.to_dict() for dish in self.dishes],
            "total_prep_time": self.total_prep_time,
            "total_prep_minutes": self.total_prep_minutes,
            "total_cook_time": self.total_cook_time,
            "total_cook_minutes": self.total_cook_minutes,
            "difficulty": self.difficulty.value,
            "servings": self.servings,
            "nutritional_balance": self.nutritional_balance.to_dict(),
            "flavor_profile": list(self.flavor_profile),
            "estimated_cost": self.estimated_cost,
            "cooking_tips": list(self.cooking_tips),
            "alternatives": list(self.alternatives),
            "warnings": [warning.to_dict() for warning in self.warnings],
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class CookingPlan:
    """Step-by-step guidance for cooking a combination."""

    preparation_order: list[str]
    timeline_estimate: str
    parallel_tasks: list[str]
    critical_timing: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "preparation_order": list(self.preparation_order),
            "timeline_estimate": self.timeline_estimate,
            "parallel_tasks": list(self.parallel_tasks),
            "critical_timing": list(self.critical_timing),
        }


@dataclass(frozen=True)
class AlternativeCombination:
    name: str
    description: str
    key_differences: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "key_differences": list(self.key_differences),
        }


# =============================================================================
# Generator
# =============================================================================


class DishCombinationGenerator:
    """
    Builds a dish combination for one meal.

    Selection covers meat, vegetarian, soup, staple and seafood dishes in
    that order before filling up to the minimum dish count. Cook time
    assumes dishes partly cook in parallel, so it is the longer of the
    slowest dish and a share of the summed cook times.
    """

    def __init__(self, selector: RecipeSelector | None = None, settings: Settings | None = None):
        self.selector = selector or RecipeSelector()
        self.settings = settings or get_settings()

    def generate(
        self,
        recipes: Iterable[Recipe],
        catalog: RecipeCatalog,
        preferences: CombinationPreferences,
        must_include: Iterable[str] = (),
        must_exclude: Iterable[str] = (),
        min_dishes: int | None = None,
        max_dishes: int | None = None,
    ) -> DishCombination:
        """
        Generate a dish combination.

        Args:
            recipes: Candidate recipes, usually the whole catalog.
            catalog: Catalog used to resolve required recipe ids.
            preferences: Diner count, restrictions, occasion and budget.
            must_include: Recipe ids that must be part of the combination.
            must_exclude: Recipe ids that must not be selected.
            min_dishes: Lower bound on the dish count (default from settings).
            max_dishes: Upper bound on the dish count (default from settings).

        Returns:
            DishCombination; its warnings hold a PartialResultWarning when
            fewer than min_dishes recipes were available.

        Raises:
            ValidationError: If the bounds or preferences are invalid.
            NoEligibleRecipesError: If filtering leaves no recipes.
        """
        min_dishes = min_dishes if min_dishes is not None else self.settings.default_min_dishes
        max_dishes = max_dishes if max_dishes is not None else self.settings.default_max_dishes
        include_ids = list(dict.fromkeys(must_include))
        validate_dish_bounds(min_dishes, max_dishes, include_ids)

        eligible = filter_recipes(recipes, preferences)

        combination_id = f"combination_{uuid.uuid4().hex}"
        with LoggingContext(combination_id=combination_id):
            logger.info(
                f"Generating dish combination for {preferences.number_of_people} people "
                f"({min_dishes}-{max_dishes} dishes, {len(eligible)} eligible recipes)"
            )

            selection = self.selector.select_dishes(
                eligible,
                catalog,
                min_dishes=min_dishes,
                max_dishes=max_dishes,
                must_include=include_ids,
                must_exclude=must_exclude,
            )
            dishes = self._assign_roles(selection.recipes, preferences)
            selected = [dish.recipe for dish in dishes]

            combination = DishCombination(
                id=combination_id,
                name=self._generate_name(dishes, preferences),
                description=self._generate_description(dishes, preferences),
                type=determine_combination_type(preferences),
                dishes=dishes,
                total_prep_minutes=sum(recipe.prep_minutes for recipe in selected),
                total_cook_minutes=self._parallel_cook_minutes(selected),
                difficulty=overall_difficulty(selected),
                servings=preferences.number_of_people,
                nutritional_balance=analyze_nutritional_balance(selected),
                flavor_profile=analyze_flavor_profile(selected),
                estimated_cost=self.estimate_cost(len(dishes), preferences.budget_level),
                cooking_tips=list(COOKING_TIPS[:2]),
                alternatives=self._swap_suggestions(dishes, eligible),
                warnings=[selection.warning] if selection.warning else [],
            )

            logger.info(
                f"Generated combination '{combination.name}' with {len(dishes)} dishes"
            )
        return combination

    def _assign_roles(
        self,
        recipes: Iterable[Recipe],
        preferences: CombinationPreferences,
    ) -> tuple[RecommendedDish, ...]:
        dishes = []
        for index, recipe in enumerate(recipes, start=1):
            role = determine_role(recipe)
            template = _REASON_TEMPLATES[(index - 1) % len(_REASON_TEMPLATES)]
            dishes.append(
                RecommendedDish(
                    recipe=recipe,
                    role=role,
                    priority=determine_priority(role, preferences.number_of_people),
                    reason=template.format(
                        role=role.value,
                        name=recipe.name,
                        difficulty=recipe.difficulty.value,
                    ),
                    preparation_order=index,
                    serving_order=SERVING_ORDER[role],
                )
            )
        return tuple(dishes)

    def _parallel_cook_minutes(self, recipes: list[Recipe]) -> int:
        cook_times = [recipe.cook_minutes for recipe in recipes]
        if not cook_times:
            return 0
        estimate = max(max(cook_times), self.settings.parallel_cooking_factor * sum(cook_times))
        return int(round_half_up(estimate))

    def estimate_cost(self, dish_count: int, budget_level: BudgetLevel | None) -> str:
        """
        Cost range for a combination, e.g. "40-60 CNY" for three moderate dishes.

        Each dish beyond three adds 10 to the estimate; both ends stay
        inside the budget level's range.
        """
        low, high = COST_RANGES[budget_level or BudgetLevel.MODERATE]
        estimate = min(high, max(low, low + (dish_count - 3) * 10))
        return f"{estimate}-{min(high, estimate + 20)} {self.settings.currency}"

    def _generate_name(
        self,
        dishes: tuple[RecommendedDish, ...],
        preferences: CombinationPreferences,
    ) -> str:
        occasion = _occasion_label(preferences)
        main = next((dish for dish in dishes if dish.role == DishRole.MAIN), None)
        if main:
            return f"{main.recipe.name} {occasion} set"
        return f"{occasion.capitalize()} combination"

    def _generate_description(
        self,
        dishes: tuple[RecommendedDish, ...],
        preferences: CombinationPreferences,
    ) -> str:
        names = ", ".join(dish.recipe.name for dish in dishes)
        return (
            f"A {_occasion_label(preferences)} meal for {preferences.number_of_people} "
            f"people featuring {names}."
        )

    def _swap_suggestions(
        self,
        dishes: tuple[RecommendedDish, ...],
        eligible: list[Recipe],
    ) -> list[str]:
        """Up to three same-category swaps from the eligible recipes."""
        selected_ids = {dish.recipe.id for dish in dishes}
        suggestions = []
        for dish in dishes:
            swap = next(
                (
                    recipe
                    for recipe in eligible
                    if recipe.category == dish.recipe.category and recipe.id not in selected_ids
                ),
                None,
            )
            if swap:
                suggestions.append(f"{dish.recipe.name} can be swapped for {swap.name}")
        return suggestions[:3]

    def build_cooking_plan(self, combination: DishCombination) -> CookingPlan:
        """Preparation order, overall timeline and timing advice for a combination."""
        ordered = sorted(combination.dishes, key=lambda dish: dish.preparation_order)
        preparation_order = [
            f"{dish.preparation_order}. {dish.recipe.name} ({dish.role.value})" for dish in ordered
        ]

        total = format_duration(combination.total_prep_minutes + combination.total_cook_minutes)
        timeline = (
            f"About {total} in total: {combination.total_prep_time} of preparation "
            f"and {combination.total_cook_time} of cooking"
        )

        parallel_tasks = [
            "Wash and cut several vegetables in one go",
            "Start slow-cooking dishes first and prepare the rest meanwhile",
            "Use steaming and simmering time to prepare other ingredients",
        ]
        if any(dish.role == DishRole.SOUP for dish in ordered):
            parallel_tasks.append("Start the soup first so it has time to develop flavor")

        critical_timing = [
            "Time each dish so it is ready at its best",
            "Cook hot dishes last so they reach the table hot",
            "Soups can be finished early and kept warm",
        ]
        if any(CookingMethod.STIR_FRY in dish.recipe.cooking_methods for dish in ordered):
            critical_timing.append("Stir-fry over high heat and keep it quick")

        return CookingPlan(
            preparation_order=preparation_order,
            timeline_estimate=timeline,
            parallel_tasks=parallel_tasks,
            critical_timing=critical_timing,
        )

    def suggest_alternative_combinations(
        self,
        preferences: CombinationPreferences,
    ) -> list[AlternativeCombination]:
        """Variants worth trying: a cheaper, a quicker and a seasonal take."""
        alternatives = []
        if preferences.budget_level != BudgetLevel.ECONOMY:
            alternatives.append(
                AlternativeCombination(
                    name="Budget version",
                    description="Uses more affordable ingredients while keeping balance and flavor",
                    key_differences=[
                        "Lower-cost ingredients",
                        "Simplified techniques for some dishes",
                        "Nutritional balance kept",
                    ],
                )
            )
        alternatives.append(
            AlternativeCombination(
                name="Quick version",
                description="Shorter cooking time for busy days",
                key_differences=[
                    "Dishes with shorter cook times",
                    "Fewer preparation steps",
                    "Flavor variety kept",
                ],
            )
        )
        alternatives.append(
            AlternativeCombination(
                name="Seasonal version",
                description="Adjusted to the ingredients in season",
                key_differences=[
                    "Fresh seasonal ingredients",
                    "Adjusted dish selection",
                    "Highlights the season",
                ],
            )
        )
        return alternatives[:3]
