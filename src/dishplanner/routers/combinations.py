"""API routes for dish combination recommendations."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from dishplanner.dependencies import get_planner_service
from dishplanner.logging_config import get_logger
from dishplanner.plan.service import PlannerService
from dishplanner.schemas import CombinationPreferences

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/combinations", tags=["combinations"])


class CombinationRequest(BaseModel):
    """Request to recommend a dish combination."""

    preferences: CombinationPreferences
    include_recipe_ids: list[str] = Field(default_factory=list)
    exclude_recipe_ids: list[str] = Field(default_factory=list)
    min_dishes: int | None = Field(None, description="Defaults to 3")
    max_dishes: int | None = Field(None, description="Defaults to 6")
    include_analysis: bool = True
    include_alternatives: bool = True


@router.post("")
async def create_combination(
    request: CombinationRequest,
    service: PlannerService = Depends(get_planner_service),
) -> dict[str, Any]:
    """
    Recommend a dish combination with a cooking plan.

    A combination smaller than min_dishes is still returned; its warnings
    explain the shortfall.
    """
    combination = service.generate_dish_combination(
        request.preferences,
        must_include=request.include_recipe_ids,
        must_exclude=request.exclude_recipe_ids,
        min_dishes=request.min_dishes,
        max_dishes=request.max_dishes,
    )

    data: dict[str, Any] = {
        "combination": combination.to_dict(),
        "cooking_plan": service.combinations.build_cooking_plan(combination).to_dict(),
        "warnings": [warning.to_dict() for warning in combination.warnings],
    }
    if request.include_analysis:
        data["analysis"] = service.score_combination(combination).to_dict()
    if request.include_alternatives:
        data["alternatives"] = [
            alternative.to_dict()
            for alternative in service.combinations.suggest_alternative_combinations(
                request.preferences
            )
        ]

    return {
        "success": True,
        "message": (
            f"Generated {len(combination.dishes)}-dish combination for "
            f"{request.preferences.number_of_people} people"
        ),
        "data": data,
    }
