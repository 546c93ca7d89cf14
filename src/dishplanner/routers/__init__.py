"""API routers for the dishplanner application."""

from dishplanner.routers.combinations import router as combinations_router
from dishplanner.routers.meal_plans import router as meal_plans_router
from dishplanner.routers.recipes import router as recipes_router
from dishplanner.routers.shopping_lists import router as shopping_lists_router

__all__ = [
    "combinations_router",
    "meal_plans_router",
    "recipes_router",
    "shopping_lists_router",
]
