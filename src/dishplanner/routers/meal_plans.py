"""API routes for meal plan generation."""

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from dishplanner.dependencies import get_planner_service
from dishplanner.logging_config import get_logger
from dishplanner.plan.service import PlannerService
from dishplanner.schemas import MealPlanPreferences

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/meal-plans", tags=["meal-plans"])


# =============================================================================
# Request Schemas
# =============================================================================


class MealPlanRequest(BaseModel):
    """Request to generate a meal plan."""

    preferences: MealPlanPreferences
    start_date: date | None = Field(None, description="First day; defaults to next Monday")
    plan_duration: int = Field(7, description="Number of days (1-14)")
    include_shopping_list: bool = True
    consolidate_ingredients: bool = True


# =============================================================================
# Meal Plan Endpoints
# =============================================================================


@router.post("")
async def create_meal_plan(
    request: MealPlanRequest,
    service: PlannerService = Depends(get_planner_service),
) -> dict[str, Any]:
    """
    Generate a meal plan with statistics, recommendations and a shopping list.

    Prices on the shopping list are estimated when a budget level is given.
    """
    logger.info(
        f"Creating {request.plan_duration}-day meal plan for "
        f"{request.preferences.number_of_people} people"
    )

    plan = service.filter_and_select_meal_plan(
        request.preferences,
        start_date=request.start_date,
        duration_days=request.plan_duration,
    )
    statistics = service.meal_plans.calculate_statistics(plan)
    recommendations = service.meal_plans.generate_recommendations(plan, request.preferences)

    data: dict[str, Any] = {
        "meal_plan": plan.to_dict(),
        "statistics": statistics.to_dict(),
        "recommendations": recommendations.to_dict(),
    }

    if request.include_shopping_list:
        shopping_list = service.shopping_list_for_plan(
            plan,
            consolidate=request.consolidate_ingredients,
            include_price_estimates=request.preferences.budget_level is not None,
        )
        data["shopping_list"] = shopping_list.to_dict()

    return {
        "success": True,
        "message": (
            f"Generated {len(plan.daily_plans)}-day meal plan for "
            f"{request.preferences.number_of_people} people with {statistics.total_meals} meals"
        ),
        "data": data,
    }
