"""FastAPI dependencies: the shared catalog snapshot and planner service."""

from functools import lru_cache

from dishplanner.catalog import RecipeCatalog, load_catalog
from dishplanner.config import get_settings
from dishplanner.plan.service import PlannerService


@lru_cache
def get_catalog() -> RecipeCatalog:
    """Load the configured catalog once per process."""
    return load_catalog(get_settings().catalog_path)


@lru_cache
def get_planner_service() -> PlannerService:
    """Get the process-wide planner service."""
    return PlannerService(get_catalog(), settings=get_settings())
