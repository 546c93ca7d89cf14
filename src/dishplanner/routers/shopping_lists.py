"""API routes for shopping list generation."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from dishplanner.dependencies import get_planner_service
from dishplanner.logging_config import get_logger
from dishplanner.plan.service import PlannerService
from dishplanner.schemas import ShoppingCategory

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/shopping-lists", tags=["shopping-lists"])


class ShoppingListRequest(BaseModel):
    """Request to build a shopping list from catalog recipes."""

    recipe_ids: list[str] = Field(min_length=1)
    number_of_people: int = 2
    consolidate_items: bool = True
    include_price_estimates: bool = False
    exclude_categories: list[ShoppingCategory] = Field(default_factory=list)


@router.post("")
async def create_shopping_list(
    request: ShoppingListRequest,
    service: PlannerService = Depends(get_planner_service),
) -> dict[str, Any]:
    """Generate a consolidated shopping list for the given recipes."""
    logger.info(
        f"Creating shopping list for {len(request.recipe_ids)} recipes, "
        f"{request.number_of_people} people"
    )

    recipes = service.get_recipes(request.recipe_ids)
    shopping_list = service.generate_shopping_list(
        recipes,
        request.number_of_people,
        consolidate=request.consolidate_items,
        include_price_estimates=request.include_price_estimates,
        exclude_categories=request.exclude_categories,
    )

    return {
        "success": True,
        "message": f"Generated shopping list with {shopping_list.total_items} items",
        "data": shopping_list.to_dict(),
    }
