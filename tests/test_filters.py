"""Unit tests for preference validation and recipe filtering."""

import pytest

from dishplanner.errors import NoEligibleRecipesError, ValidationError
from dishplanner.plan.filters import filter_recipes, validate_preferences
from dishplanner.schemas import (
    CombinationPreferences,
    DietaryRestriction,
    Difficulty,
    MealPlanPreferences,
    RecipeCategory,
    SkillLevel,
    TimeConstraints,
)


def _ids(recipes):
    return {recipe.id for recipe in recipes}


# =============================================================================
# Validation Tests
# =============================================================================


class TestValidatePreferences:
    """Tests for validate_preferences function."""

    def test_valid_preferences(self):
        validate_preferences(MealPlanPreferences(number_of_people=4, cooking_time="45 minutes"))

    @pytest.mark.parametrize("people", [0, 21])
    def test_people_out_of_range(self, people):
        preferences = MealPlanPreferences.model_construct(number_of_people=people)
        with pytest.raises(ValidationError):
            validate_preferences(preferences)

    def test_unreadable_cooking_time(self):
        preferences = CombinationPreferences(number_of_people=2, cooking_time="whenever")
        with pytest.raises(ValidationError, match="whenever"):
            validate_preferences(preferences)

    def test_unreadable_time_constraint(self):
        preferences = MealPlanPreferences(
            number_of_people=2,
            time_constraints=TimeConstraints(max_prep_time="quickly"),
        )
        with pytest.raises(ValidationError):
            validate_preferences(preferences)


# =============================================================================
# Filtering Tests
# =============================================================================


class TestFilterRecipes:
    """Tests for filter_recipes function."""

    def test_no_constraints_keeps_everything(self, sample_catalog):
        result = filter_recipes(sample_catalog.get_all(), MealPlanPreferences(number_of_people=2))
        assert len(result) == len(sample_catalog)

    def test_keeps_catalog_order(self, sample_catalog):
        result = filter_recipes(sample_catalog.get_all(), MealPlanPreferences(number_of_people=2))
        assert [r.id for r in result] == [r.id for r in sample_catalog.get_all()]

    def test_empty_input(self):
        with pytest.raises(NoEligibleRecipesError) as exc_info:
            filter_recipes([], MealPlanPreferences(number_of_people=2))
        assert exc_info.value.constraint == "catalog"

    def test_vegetarian_excludes_meat(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.VEGETARIAN,),
        )
        result = filter_recipes(sample_catalog.get_all(), preferences)
        assert result
        assert all(recipe.category != RecipeCategory.MEAT for recipe in result)
        assert len(result) == 12

    def test_vegetarian_on_all_meat_fails(self, make_recipe):
        recipes = [make_recipe("pork", "meat"), make_recipe("beef", "meat")]
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.VEGETARIAN,),
        )
        with pytest.raises(NoEligibleRecipesError) as exc_info:
            filter_recipes(recipes, preferences)
        assert exc_info.value.constraint == "dietary_restriction:vegetarian"
        assert exc_info.value.to_dict()["error"] == "no_eligible_recipes"

    def test_no_seafood(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.NO_SEAFOOD,),
        )
        result = filter_recipes(sample_catalog.get_all(), preferences)
        assert "steamed-sea-bass" not in _ids(result)
        assert "garlic-shrimp" not in _ids(result)

    def test_nut_free(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.NUT_FREE,),
        )
        result = filter_recipes(sample_catalog.get_all(), preferences)
        assert "kung-pao-chicken" not in _ids(result)
        assert len(result) == 14

    def test_vegan(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.VEGAN,),
        )
        ids = _ids(filter_recipes(sample_catalog.get_all(), preferences))
        assert {"garlic-spinach", "mapo-tofu", "scallion-pancake"} <= ids
        assert "tomato-egg-stir-fry" not in ids
        assert "mango-pudding" not in ids
        assert "garlic-shrimp" not in ids

    def test_vegan_keeps_eggplant(self, make_recipe):
        recipes = [
            make_recipe("braised-eggplant", ingredients=[("eggplant", "2 pieces")]),
            make_recipe("omelette", ingredients=[("egg", "3 pieces")]),
        ]
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.VEGAN,),
        )
        assert _ids(filter_recipes(recipes, preferences)) == {"braised-eggplant"}

    def test_gluten_free(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.GLUTEN_FREE,),
        )
        ids = _ids(filter_recipes(sample_catalog.get_all(), preferences))
        assert "scallion-oil-noodles" not in ids
        assert "scallion-pancake" not in ids

    def test_dairy_free(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.DAIRY_FREE,),
        )
        ids = _ids(filter_recipes(sample_catalog.get_all(), preferences))
        assert "mango-pudding" not in ids
        assert "garlic-shrimp" not in ids

    def test_advisory_restrictions_do_not_filter(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            dietary_restrictions=(DietaryRestriction.LOW_SALT, DietaryRestriction.HIGH_PROTEIN),
        )
        assert len(filter_recipes(sample_catalog.get_all(), preferences)) == len(sample_catalog)

    def test_allergies_match_ingredient_substrings(self, sample_catalog):
        preferences = MealPlanPreferences(number_of_people=2, allergies=("Peanut",))
        ids = _ids(filter_recipes(sample_catalog.get_all(), preferences))
        assert "kung-pao-chicken" not in ids

    def test_excluded_categories(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            excluded_categories=(RecipeCategory.MEAT, RecipeCategory.SEAFOOD),
        )
        result = filter_recipes(sample_catalog.get_all(), preferences)
        assert all(
            recipe.category not in (RecipeCategory.MEAT, RecipeCategory.SEAFOOD)
            for recipe in result
        )

    def test_preferred_categories_narrow_when_matching(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            preferred_categories=(RecipeCategory.SOUP,),
        )
        result = filter_recipes(sample_catalog.get_all(), preferences)
        assert _ids(result) == {"seaweed-egg-soup", "pork-rib-radish-soup"}

    def test_preferred_categories_are_soft(self, make_recipe):
        recipes = [make_recipe("greens"), make_recipe("rice", "staple")]
        preferences = MealPlanPreferences(
            number_of_people=2,
            preferred_categories=(RecipeCategory.DESSERT,),
        )
        assert len(filter_recipes(recipes, preferences)) == 2

    def test_beginner_gets_easy_recipes(self, sample_catalog):
        preferences = MealPlanPreferences(number_of_people=2, skill_level=SkillLevel.BEGINNER)
        result = filter_recipes(sample_catalog.get_all(), preferences)
        assert len(result) == 8
        assert all(recipe.difficulty == Difficulty.EASY for recipe in result)

    def test_skill_level_names_constraint(self, make_recipe):
        recipes = [make_recipe("hard-dish", difficulty="hard")]
        preferences = MealPlanPreferences(number_of_people=2, skill_level=SkillLevel.BEGINNER)
        with pytest.raises(NoEligibleRecipesError) as exc_info:
            filter_recipes(recipes, preferences)
        assert exc_info.value.constraint == "skill_level:beginner"

    def test_cooking_time_ceiling(self, sample_catalog):
        preferences = MealPlanPreferences(number_of_people=2, cooking_time="20 minutes")
        result = filter_recipes(sample_catalog.get_all(), preferences)
        assert _ids(result) == {
            "tomato-egg-stir-fry",
            "garlic-spinach",
            "garlic-shrimp",
            "seaweed-egg-soup",
            "egg-fried-rice",
            "mango-pudding",
        }

    def test_time_constraints(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=2,
            time_constraints=TimeConstraints(
                max_prep_time="10 minutes", max_cook_time="10 minutes"
            ),
        )
        result = filter_recipes(sample_catalog.get_all(), preferences)
        assert result
        assert all(r.prep_minutes <= 10 and r.cook_minutes <= 10 for r in result)

    def test_result_never_violates_constraints(self, sample_catalog):
        preferences = MealPlanPreferences(
            number_of_people=3,
            dietary_restrictions=(DietaryRestriction.VEGETARIAN, DietaryRestriction.NUT_FREE),
            allergies=("shrimp",),
            skill_level=SkillLevel.INTERMEDIATE,
            cooking_time="1 hour",
        )
        for recipe in filter_recipes(sample_catalog.get_all(), preferences):
            assert recipe.category != RecipeCategory.MEAT
            assert recipe.difficulty != Difficulty.HARD
            assert recipe.total_minutes <= 60
            assert not any("shrimp" in ing.name for ing in recipe.ingredients)
