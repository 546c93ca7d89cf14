"""Recipe filtering, selection, scaling, scoring and plan assembly."""

from dishplanner.plan.combination import (
    AlternativeCombination,
    CookingPlan,
    DishCombination,
    DishCombinationGenerator,
    RecommendedDish,
)
from dishplanner.plan.filters import filter_recipes, validate_preferences
from dishplanner.plan.meal_plan import (
    DailyPlan,
    MealPlanGenerator,
    MealPlanRecommendations,
    MealPlanStatistics,
    PlannedMeal,
    WeeklyPlan,
)
from dishplanner.plan.scaling import scale_recipe
from dishplanner.plan.scoring import CombinationAnalysis, NutritionalBalance, score_combination
from dishplanner.plan.selection import RecipeSelector, SelectionResult
from dishplanner.plan.service import PlannerService
from dishplanner.plan.shopping_list import (
    ShoppingItem,
    ShoppingList,
    ShoppingListGenerator,
    ShoppingSection,
)

__all__ = [
    "AlternativeCombination",
    "CombinationAnalysis",
    "CookingPlan",
    "DailyPlan",
    "DishCombination",
    "DishCombinationGenerator",
    "MealPlanGenerator",
    "MealPlanRecommendations",
    "MealPlanStatistics",
    "NutritionalBalance",
    "PlannedMeal",
    "PlannerService",
    "RecipeSelector",
    "RecommendedDish",
    "SelectionResult",
    "ShoppingItem",
    "ShoppingList",
    "ShoppingListGenerator",
    "ShoppingSection",
    "WeeklyPlan",
    "filter_recipes",
    "scale_recipe",
    "score_combination",
    "validate_preferences",
]
