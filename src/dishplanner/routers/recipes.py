"""API routes for browsing and looking up recipes."""

from typing import Annotated, Any, Literal

from fastapi import APIRouter, Depends, Query

from dishplanner.dependencies import get_planner_service
from dishplanner.logging_config import get_logger
from dishplanner.plan.service import PlannerService
from dishplanner.schemas import Recipe, RecipeCategory

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1/recipes", tags=["recipes"])

SortField = Literal["name", "category", "difficulty", "prep_time", "cook_time", "total_time"]


def recipe_summary(recipe: Recipe) -> dict[str, Any]:
    """Compact recipe view for listings."""
    return {
        "id": recipe.id,
        "name": recipe.name,
        "description": recipe.description,
        "category": recipe.category.value,
        "difficulty": recipe.difficulty.value,
        "servings": recipe.servings,
        "prep_time": recipe.prep_time,
        "cook_time": recipe.cook_time,
        "total_time": recipe.total_time,
        "tags": list(recipe.tags),
    }


def _sort_key(field: SortField):
    keys = {
        "name": lambda r: r.name.casefold(),
        "category": lambda r: r.category.value,
        "difficulty": lambda r: r.difficulty.level,
        "prep_time": lambda r: r.prep_minutes,
        "cook_time": lambda r: r.cook_minutes,
        "total_time": lambda r: r.total_minutes,
    }
    return keys[field]


# =============================================================================
# Recipe Endpoints
# =============================================================================


@router.get("")
async def list_recipes(
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Recipes per page")] = 20,
    sort_by: Annotated[SortField, Query(description="Field to sort by")] = "name",
    sort_order: Annotated[Literal["asc", "desc"], Query(description="Sort direction")] = "asc",
    include_details: Annotated[bool, Query(description="Return full recipes")] = False,
    service: PlannerService = Depends(get_planner_service),
) -> dict[str, Any]:
    """
    List recipes, paginated and sorted.

    Summaries are returned unless include_details is set.
    """
    logger.info(f"Listing recipes: page={page}, limit={limit}, sort={sort_by} {sort_order}")

    recipes = sorted(
        service.catalog.get_all(),
        key=_sort_key(sort_by),
        reverse=sort_order == "desc",
    )
    total = len(recipes)
    start = (page - 1) * limit
    page_items = recipes[start : start + limit]

    return {
        "success": True,
        "recipes": [
            recipe.model_dump(mode="json") if include_details else recipe_summary(recipe)
            for recipe in page_items
        ],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": (total + limit - 1) // limit,
            "has_next": start + limit < total,
            "has_previous": page > 1,
        },
        "statistics": service.catalog.statistics().to_dict(),
    }


@router.get("/search")
async def search_recipes(
    q: Annotated[str, Query(min_length=1, description="Text to search for")],
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
    service: PlannerService = Depends(get_planner_service),
) -> dict[str, Any]:
    """Search recipe names, descriptions, ingredients and tags."""
    results = service.catalog.search(q)
    return {
        "success": True,
        "query": q,
        "total": len(results),
        "recipes": [recipe_summary(recipe) for recipe in results[:limit]],
    }


@router.get("/category/{category}")
async def get_recipes_by_category(
    category: RecipeCategory,
    include_details: bool = False,
    service: PlannerService = Depends(get_planner_service),
) -> dict[str, Any]:
    """List recipes in a category, with per-difficulty counts."""
    recipes = service.catalog.get_by_category(category)

    difficulty_counts: dict[str, int] = {}
    for recipe in recipes:
        difficulty_counts[recipe.difficulty.value] = (
            difficulty_counts.get(recipe.difficulty.value, 0) + 1
        )

    return {
        "success": True,
        "category": category.value,
        "total": len(recipes),
        "difficulty_counts": difficulty_counts,
        "recipes": [
            recipe.model_dump(mode="json") if include_details else recipe_summary(recipe)
            for recipe in recipes
        ],
    }


@router.get("/{identifier}")
async def get_recipe(
    identifier: str,
    search_by: Annotated[Literal["id", "name"], Query()] = "id",
    scale_servings: Annotated[int | None, Query(description="Scale to this many servings")] = None,
    include_related: bool = False,
    service: PlannerService = Depends(get_planner_service),
) -> dict[str, Any]:
    """
    Get a recipe by id or by name.

    Name lookups fall back to fuzzy matching. With scale_servings the
    ingredient amounts are rescaled; the catalog recipe is left untouched.
    """
    if search_by == "name":
        recipe = service.find_recipe(identifier)
    else:
        recipe = service.get_recipe(identifier)

    original_servings = recipe.servings
    if scale_servings is not None:
        recipe = service.scale_recipe(recipe, scale_servings)

    response: dict[str, Any] = {
        "success": True,
        "recipe": recipe.model_dump(mode="json"),
        "scaled": scale_servings is not None,
        "original_servings": original_servings,
    }
    if include_related:
        response["related"] = [
            recipe_summary(other) for other in service.catalog.related(recipe)
        ]
    return response
