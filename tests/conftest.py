"""Pytest configuration and shared fixtures."""

import random

import pytest
from fastapi.testclient import TestClient

from dishplanner.catalog import RecipeCatalog, load_catalog
from dishplanner.config import Settings
from dishplanner.dependencies import get_planner_service
from dishplanner.main import app
from dishplanner.plan.selection import RecipeSelector
from dishplanner.plan.service import PlannerService
from dishplanner.schemas import Recipe

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow running")


# =============================================================================
# Random Sources
# =============================================================================


class FirstChoiceRandom(random.Random):
    """Random source whose choice always returns the first candidate."""

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def first_choice_rng():
    """Deterministic random source picking the first candidate."""
    return FirstChoiceRandom()


@pytest.fixture
def first_choice_selector(first_choice_rng):
    """Selector that always draws the first eligible recipe."""
    return RecipeSelector(first_choice_rng)


# =============================================================================
# Recipe Fixtures
# =============================================================================


def _make_recipe(
    recipe_id: str,
    category: str = "vegetarian",
    difficulty: str = "easy",
    servings: int = 2,
    prep_time: str = "10 minutes",
    cook_time: str = "10 minutes",
    ingredients: list[tuple[str, str]] | None = None,
    tags: tuple[str, ...] = (),
    cooking_methods: tuple[str, ...] = (),
    calories: float | None = None,
) -> Recipe:
    data = {
        "id": recipe_id,
        "name": recipe_id.replace("-", " ").title(),
        "category": category,
        "difficulty": difficulty,
        "servings": servings,
        "prep_time": prep_time,
        "cook_time": cook_time,
        "ingredients": [
            {"name": name, "amount": amount}
            for name, amount in (ingredients or [("salt", "to taste")])
        ],
        "tags": tags,
        "cooking_methods": cooking_methods,
    }
    if calories is not None:
        data["nutritional_info"] = {"calories": calories}
    return Recipe.model_validate(data)


@pytest.fixture
def make_recipe():
    """Factory for recipes with sensible defaults."""
    return _make_recipe


@pytest.fixture
def small_recipes(make_recipe):
    """One recipe in each of the main categories."""
    return [
        make_recipe(
            "pork-stir-fry",
            "meat",
            "medium",
            cook_time="15 minutes",
            ingredients=[("pork", "300g"), ("soy sauce", "15ml")],
            tags=("salty",),
            cooking_methods=("stir_fry",),
            calories=800,
        ),
        make_recipe(
            "garlic-greens",
            "vegetarian",
            ingredients=[("spinach", "300g"), ("garlic", "3 cloves")],
            tags=("light",),
            calories=200,
        ),
        make_recipe(
            "egg-soup",
            "soup",
            ingredients=[("egg", "2 pieces"), ("seaweed", "10g")],
            tags=("umami",),
            calories=150,
        ),
        make_recipe(
            "plain-rice",
            "staple",
            cook_time="20 minutes",
            ingredients=[("rice", "200g")],
            calories=600,
        ),
        make_recipe(
            "steamed-fish",
            "seafood",
            "medium",
            cook_time="12 minutes",
            ingredients=[("fish", "1 piece"), ("ginger", "3 slices")],
            cooking_methods=("steam",),
            calories=500,
        ),
        make_recipe(
            "millet-porridge",
            "breakfast",
            cook_time="30 minutes",
            ingredients=[("millet", "100g")],
            calories=300,
        ),
    ]


@pytest.fixture
def small_catalog(small_recipes):
    """Catalog built from small_recipes."""
    return RecipeCatalog(small_recipes)


@pytest.fixture
def sample_catalog():
    """The packaged sample catalog."""
    return load_catalog()


# =============================================================================
# Service and API Fixtures
# =============================================================================


@pytest.fixture
def settings():
    """Settings with defaults, independent of the environment."""
    return Settings(_env_file=None, random_seed=7)


@pytest.fixture
def planner_service(sample_catalog, settings):
    """Planner service over the sample catalog with a seeded random source."""
    return PlannerService(sample_catalog, rng=random.Random(7), settings=settings)


@pytest.fixture
def client(planner_service):
    """Test client wired to the seeded planner service."""
    app.dependency_overrides[get_planner_service] = lambda: planner_service
    yield TestClient(app)
    app.dependency_overrides.clear()
