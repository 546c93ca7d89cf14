"""Planner service: the engine's operations over one catalog snapshot."""

import random
from datetime import date
from typing import Iterable

from dishplanner.catalog import RecipeCatalog
from dishplanner.config import Settings, get_settings
from dishplanner.errors import EmptyCatalogError, RecipeNotFoundError
from dishplanner.logging_config import get_logger
from dishplanner.plan.combination import DishCombination, DishCombinationGenerator
from dishplanner.plan.meal_plan import MealPlanGenerator, WeeklyPlan
from dishplanner.plan.scaling import scale_recipe
from dishplanner.plan.scoring import CombinationAnalysis, score_combination
from dishplanner.plan.selection import RecipeSelector
from dishplanner.plan.shopping_list import ShoppingList, ShoppingListGenerator
from dishplanner.schemas import (
    CombinationPreferences,
    MealPlanPreferences,
    Recipe,
    ShoppingCategory,
)

logger = get_logger(__name__)


class PlannerService:
    """
    Entry point for planning operations.

    Holds an immutable catalog snapshot and a random source shared by the
    meal-plan and combination generators. Every operation checks the
    catalog first and raises EmptyCatalogError when it holds no recipes.
    """

    def __init__(
        self,
        catalog: RecipeCatalog,
        rng: random.Random | None = None,
        settings: Settings | None = None,
    ):
        self.catalog = catalog
        self.settings = settings or get_settings()
        self.rng = rng or random.Random(self.settings.random_seed)

        selector = RecipeSelector(self.rng)
        self.meal_plans = MealPlanGenerator(selector, self.settings)
        self.combinations = DishCombinationGenerator(selector, self.settings)
        self.shopping_lists = ShoppingListGenerator()

    def _require_recipes(self) -> None:
        if len(self.catalog) == 0:
            raise EmptyCatalogError()

    # =========================================================================
    # Recipes
    # =========================================================================

    def get_recipe(self, recipe_id: str) -> Recipe:
        """Get a recipe by id, raising RecipeNotFoundError when missing."""
        self._require_recipes()
        recipe = self.catalog.get_by_id(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(
                f"Recipe not found: {recipe_id}",
                hint="List recipes to see the available identifiers.",
            )
        return recipe

    def find_recipe(self, name: str) -> Recipe:
        """Get a recipe by name, falling back to fuzzy matching."""
        self._require_recipes()
        recipe = self.catalog.find_by_name(name, score_cutoff=self.settings.fuzzy_match_cutoff)
        if recipe is None:
            raise RecipeNotFoundError(
                f"No recipe matches the name '{name}'",
                hint="Search recipes by keyword to find the exact name.",
            )
        return recipe

    def get_recipes(self, recipe_ids: Iterable[str]) -> list[Recipe]:
        """Resolve several recipe ids, failing on the first unknown one."""
        return [self.get_recipe(recipe_id) for recipe_id in recipe_ids]

    # =========================================================================
    # Engine Operations
    # =========================================================================

    def filter_and_select_meal_plan(
        self,
        preferences: MealPlanPreferences,
        start_date: date | str | None = None,
        duration_days: int | None = None,
        today: date | None = None,
    ) -> WeeklyPlan:
        """Generate a meal plan from recipes that satisfy the preferences."""
        self._require_recipes()
        return self.meal_plans.generate(
            self.catalog.get_all(),
            preferences,
            start_date=start_date,
            duration_days=duration_days,
            today=today,
        )

    def generate_shopping_list(
        self,
        recipes: Iterable[Recipe],
        number_of_people: int,
        consolidate: bool = True,
        include_price_estimates: bool = False,
        exclude_categories: Iterable[ShoppingCategory] = (),
    ) -> ShoppingList:
        """Generate a consolidated, categorized shopping list for recipes."""
        self._require_recipes()
        return self.shopping_lists.generate(
            recipes,
            number_of_people,
            consolidate=consolidate,
            include_price_estimates=include_price_estimates,
            exclude_categories=exclude_categories,
        )

    def shopping_list_for_plan(
        self,
        plan: WeeklyPlan,
        consolidate: bool = True,
        include_price_estimates: bool = False,
        exclude_categories: Iterable[ShoppingCategory] = (),
    ) -> ShoppingList:
        """Generate the shopping list covering every meal of a plan."""
        self._require_recipes()
        return self.shopping_lists.generate_from_meal_plan(
            plan,
            consolidate=consolidate,
            include_price_estimates=include_price_estimates,
            exclude_categories=exclude_categories,
        )

    def generate_dish_combination(
        self,
        preferences: CombinationPreferences,
        must_include: Iterable[str] = (),
        must_exclude: Iterable[str] = (),
        min_dishes: int | None = None,
        max_dishes: int | None = None,
    ) -> DishCombination:
        """Generate a multi-dish combination for one meal."""
        self._require_recipes()
        return self.combinations.generate(
            self.catalog.get_all(),
            self.catalog,
            preferences,
            must_include=must_include,
            must_exclude=must_exclude,
            min_dishes=min_dishes,
            max_dishes=max_dishes,
        )

    def score_combination(self, combination: DishCombination) -> CombinationAnalysis:
        """Score a combination's nutrition, flavor, difficulty and timing."""
        self._require_recipes()
        return score_combination(combination)

    def scale_recipe(self, recipe: Recipe, target_servings: int) -> Recipe:
        """Return a copy of a recipe scaled to target_servings."""
        self._require_recipes()
        return scale_recipe(recipe, target_servings)
