"""Weekly meal plan assembly, statistics and recommendations."""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable

from dishplanner.config import Settings, get_settings
from dishplanner.errors import ValidationError
from dishplanner.logging_config import LoggingContext, get_logger
from dishplanner.normalize.units import round_half_up
from dishplanner.plan.filters import filter_recipes
from dishplanner.plan.selection import RecipeSelector
from dishplanner.schemas import (
    BudgetLevel,
    DietaryRestriction,
    MealPlanPreferences,
    MealSlot,
    Recipe,
    SkillLevel,
)

logger = get_logger(__name__)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

MEAL_NOTES: dict[MealSlot, str] = {
    MealSlot.BREAKFAST: "A nourishing start to the day",
    MealSlot.LUNCH: "A filling lunch to keep energy up",
    MealSlot.DINNER: "A wholesome dinner to round off the day",
}

# Cost per meal per person, by budget level
BUDGET_BASE_COST: dict[BudgetLevel, int] = {
    BudgetLevel.ECONOMY: 8,
    BudgetLevel.MODERATE: 15,
    BudgetLevel.PREMIUM: 25,
}
BULK_PLANNING_DISCOUNT = 0.85
BUDGET_SPREAD = 50


def next_monday(today: date) -> date:
    """The Monday after today; a week ahead when today is Monday."""
    return today + timedelta(days=7 - today.weekday())


# =============================================================================
# Plan Values
# =============================================================================


@dataclass(frozen=True)
class PlannedMeal:
    """A recipe cooked for one meal slot."""

    slot: MealSlot
    recipe: Recipe
    servings: int
    notes: str | None = None

    @property
    def calories(self) -> float:
        """Recipe calories scaled to the planned servings."""
        return self.recipe.calories / self.recipe.servings * self.servings

    def to_dict(self) -> dict[str, Any]:
        return {
            "slot": self.slot.value,
            "recipe": self.recipe.model_dump(mode="json"),
            "servings": self.servings,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class DailyPlan:
    """Meals planned for one date."""

    day_name: str
    date: date
    meals: tuple[PlannedMeal, ...] = ()
    notes: str | None = None

    @property
    def total_calories(self) -> float:
        return round_half_up(sum(meal.calories for meal in self.meals), 2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "day_name": self.day_name,
            "date": self.date.isoformat(),
            "meals": [meal.to_dict() for meal in self.meals],
            "total_calories": self.total_calories,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class WeeklyPlan:
    """A multi-day meal plan; seven days unless another duration was requested."""

    id: str
    name: str
    start_date: date
    end_date: date
    preferences: MealPlanPreferences
    daily_plans: tuple[DailyPlan, ...]
    created_at: datetime
    last_modified: datetime

    @property
    def meals(self) -> list[PlannedMeal]:
        return [meal for day in self.daily_plans for meal in day.meals]

    @property
    def recipes(self) -> list[Recipe]:
        """Recipes of every planned meal, repeats included."""
        return [meal.recipe for meal in self.meals]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "preferences": self.preferences.model_dump(mode="json"),
            "daily_plans": [day.to_dict() for day in self.daily_plans],
            "created_at": self.created_at.isoformat(),
            "last_modified": self.last_modified.isoformat(),
        }


@dataclass(frozen=True)
class MealPlanStatistics:
    total_meals: int
    unique_recipes: int
    categories_used: list[str]
    average_calories_per_day: float
    total_estimated_cook_minutes: int
    budget_estimate: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_meals": self.total_meals,
            "unique_recipes": self.unique_recipes,
            "categories_used": list(self.categories_used),
            "average_calories_per_day": self.average_calories_per_day,
            "total_estimated_cook_minutes": self.total_estimated_cook_minutes,
            "budget_estimate": self.budget_estimate,
        }


@dataclass
class MealPlanRecommendations:
    cooking_tips: list[str] = field(default_factory=list)
    prep_advice: list[str] = field(default_factory=list)
    substitutions: list[str] = field(default_factory=list)
    time_management: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "cooking_tips": list(self.cooking_tips),
            "prep_advice": list(self.prep_advice),
            "substitutions": list(self.substitutions),
            "time_management": list(self.time_management),
        }


# =============================================================================
# Generator
# =============================================================================


class MealPlanGenerator:
    """
    Builds multi-day meal plans from filtered recipes.

    Each day gets a breakfast, lunch and dinner drawn by the selector; a
    recipe may appear on several days but never twice on the same day.
    """

    def __init__(self, selector: RecipeSelector | None = None, settings: Settings | None = None):
        self.selector = selector or RecipeSelector()
        self.settings = settings or get_settings()

    def generate(
        self,
        recipes: Iterable[Recipe],
        preferences: MealPlanPreferences,
        start_date: date | str | None = None,
        duration_days: int | None = None,
        today: date | None = None,
    ) -> WeeklyPlan:
        """
        Generate a meal plan.

        Args:
            recipes: Candidate recipes, usually the whole catalog.
            preferences: Household preferences; recipes failing them are never planned.
            start_date: First day of the plan. Defaults to next Monday.
            duration_days: Number of days, 1 to the configured maximum (14).
            today: Reference date for the next-Monday default.

        Returns:
            WeeklyPlan with one DailyPlan per day.

        Raises:
            ValidationError: If the duration, start date or preferences are invalid.
            NoEligibleRecipesError: If filtering leaves no recipes.
        """
        days = duration_days if duration_days is not None else self.settings.default_plan_days
        if not 1 <= days <= self.settings.max_plan_days:
            raise ValidationError(
                f"Plan duration must be between 1 and {self.settings.max_plan_days} days, "
                f"got {days}",
            )

        start = self._resolve_start_date(start_date, today)
        eligible = filter_recipes(recipes, preferences)

        plan_id = f"meal_plan_{uuid.uuid4().hex}"
        with LoggingContext(plan_id=plan_id):
            logger.info(
                f"Generating {days}-day meal plan from {start.isoformat()} "
                f"for {preferences.number_of_people} people ({len(eligible)} eligible recipes)"
            )

            daily_plans = tuple(
                self._generate_day(eligible, preferences, start + timedelta(days=offset))
                for offset in range(days)
            )

            now = datetime.now(timezone.utc)
            plan = WeeklyPlan(
                id=plan_id,
                name=f"Meal plan from {start.isoformat()}",
                start_date=start,
                end_date=start + timedelta(days=days - 1),
                preferences=preferences,
                daily_plans=daily_plans,
                created_at=now,
                last_modified=now,
            )

            logger.info(f"Generated meal plan with {len(plan.meals)} meals")
        return plan

    def _resolve_start_date(self, start_date: date | str | None, today: date | None) -> date:
        if start_date is None:
            return next_monday(today or date.today())
        if isinstance(start_date, date):
            return start_date
        try:
            return date.fromisoformat(start_date)
        except ValueError as e:
            raise ValidationError(
                f"Invalid start date '{start_date}'",
                hint="Use an ISO date such as 2024-03-04.",
            ) from e

    def _generate_day(
        self,
        recipes: list[Recipe],
        preferences: MealPlanPreferences,
        day: date,
    ) -> DailyPlan:
        day_name = DAY_NAMES[day.weekday()]
        meals = tuple(
            PlannedMeal(
                slot=slot,
                recipe=recipe,
                servings=preferences.number_of_people,
                notes=MEAL_NOTES.get(slot),
            )
            for slot, recipe in self.selector.select_day(recipes)
        )
        return DailyPlan(day_name=day_name, date=day, meals=meals, notes=f"{day_name} menu")

    def calculate_statistics(self, plan: WeeklyPlan) -> MealPlanStatistics:
        """Aggregate meal counts, calories, cook time and a budget range for a plan."""
        recipes = plan.recipes
        categories = list(dict.fromkeys(recipe.category.value for recipe in recipes))

        total_calories = sum(day.total_calories for day in plan.daily_plans)
        average_calories = (
            round_half_up(total_calories / len(plan.daily_plans), 1) if plan.daily_plans else 0.0
        )

        return MealPlanStatistics(
            total_meals=len(recipes),
            unique_recipes=len({recipe.id for recipe in recipes}),
            categories_used=categories,
            average_calories_per_day=average_calories,
            total_estimated_cook_minutes=sum(recipe.total_minutes for recipe in recipes),
            budget_estimate=self.estimate_budget(plan),
        )

    def estimate_budget(self, plan: WeeklyPlan) -> str:
        """Budget range for a plan, e.g. "307-407 CNY"."""
        base_cost = BUDGET_BASE_COST[plan.preferences.budget_level or BudgetLevel.MODERATE]
        total = len(plan.meals) * plan.preferences.number_of_people * base_cost
        estimate = int(round_half_up(total * BULK_PLANNING_DISCOUNT))
        low = max(0, estimate - BUDGET_SPREAD)
        return f"{low}-{estimate + BUDGET_SPREAD} {self.settings.currency}"

    def generate_recommendations(
        self,
        plan: WeeklyPlan,
        preferences: MealPlanPreferences | None = None,
    ) -> MealPlanRecommendations:
        """Practical tips for cooking a plan, tailored to skill level and goals."""
        preferences = preferences or plan.preferences

        recommendations = MealPlanRecommendations(
            cooking_tips=[
                "Prepare the next day's ingredients the evening before",
                "Batch-prep shared ingredients, such as chopping vegetables for several days",
                "Vary seasonings to give the same ingredients a different character",
            ],
            prep_advice=[
                "Prepare semi-finished components at the weekend for quick weekday meals",
                "Make soups in larger batches and serve them over several meals",
                "Soak dried ingredients ahead of time",
            ],
            substitutions=[
                "Swap an unavailable vegetable for one of the same kind",
                "Adjust meats to price and preference",
                "Combine basic seasonings when a specific one is missing",
            ],
            time_management=[
                "Order cooking by how long each dish takes",
                "Prepare several dishes in parallel",
                "Use waiting time to prepare other ingredients",
            ],
        )

        if preferences.skill_level == SkillLevel.BEGINNER:
            recommendations.cooking_tips.append(
                "Start with simple dishes and increase the difficulty gradually"
            )
            recommendations.time_management.append(
                "Focus on one dish at a time until you are comfortable cooking several"
            )

        goals = preferences.nutritional_goals
        if (goals and goals.high_protein) or (
            DietaryRestriction.HIGH_PROTEIN in preferences.dietary_restrictions
        ):
            recommendations.substitutions.append(
                "Add eggs, tofu or lean meat to raise the protein of lighter meals"
            )
        if goals and goals.low_carb:
            recommendations.substitutions.append(
                "Replace part of the rice or noodles with extra vegetables"
            )

        return recommendations
