"""Recipe catalog access."""

from dishplanner.catalog.repository import (
    SAMPLE_CATALOG_PATH,
    CatalogCriteria,
    CatalogStatistics,
    RecipeCatalog,
    load_catalog,
)

__all__ = [
    "SAMPLE_CATALOG_PATH",
    "CatalogCriteria",
    "CatalogStatistics",
    "RecipeCatalog",
    "load_catalog",
]
