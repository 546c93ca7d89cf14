"""Unit tests for combination scoring and analysis."""

from types import SimpleNamespace

import pytest

from dishplanner.plan.scoring import (
    NutritionalBalance,
    analyze_flavor_profile,
    analyze_nutritional_balance,
    difficulty_balance_score,
    flavor_harmony_score,
    overall_difficulty,
    score_combination,
    time_efficiency_score,
)
from dishplanner.schemas import Difficulty


def _combination(recipes, combination_id="combination_test"):
    """Minimal stand-in exposing what score_combination reads."""
    return SimpleNamespace(
        id=combination_id,
        dishes=tuple(SimpleNamespace(recipe=recipe) for recipe in recipes),
    )


# =============================================================================
# Analysis Helpers
# =============================================================================


class TestNutritionalBalance:
    def test_full_coverage(self, small_recipes):
        balance = analyze_nutritional_balance(small_recipes)
        assert balance.is_balanced
        assert balance.missing == []
        assert balance.score == 10

    def test_partial_coverage(self, make_recipe):
        balance = analyze_nutritional_balance([make_recipe("fish", "seafood")])
        assert balance == NutritionalBalance(has_protein=True)
        assert balance.missing == ["vegetables", "carbohydrates"]
        assert balance.score == 3

    def test_empty(self):
        assert analyze_nutritional_balance([]).score == 0


class TestFlavorProfile:
    def test_first_seen_order_without_duplicates(self, small_recipes):
        assert analyze_flavor_profile(small_recipes) == ["salty", "aromatic", "light", "umami"]

    def test_ignores_non_flavor_tags(self, make_recipe):
        recipe = make_recipe("fast", tags=("quick", "sweet"))
        assert analyze_flavor_profile([recipe]) == ["sweet"]

    def test_methods_imply_flavors(self, make_recipe):
        recipe = make_recipe("stew", cooking_methods=("braise", "stew"))
        assert analyze_flavor_profile([recipe]) == ["rich"]


class TestOverallDifficulty:
    @pytest.mark.parametrize(
        "levels,expected",
        [
            ([], Difficulty.EASY),
            (["easy", "easy", "easy", "medium"], Difficulty.EASY),
            (["easy", "hard"], Difficulty.MEDIUM),
            (["hard", "hard", "medium"], Difficulty.HARD),
        ],
    )
    def test_buckets(self, make_recipe, levels, expected):
        recipes = [make_recipe(f"dish-{i}", difficulty=level) for i, level in enumerate(levels)]
        assert overall_difficulty(recipes) == expected


class TestSubScores:
    def test_flavor_harmony_capped(self):
        assert flavor_harmony_score(["sweet", "sour"]) == 4
        assert flavor_harmony_score(["a", "b", "c", "d", "e", "f"]) == 10

    def test_difficulty_balance(self, make_recipe):
        same = [make_recipe("a"), make_recipe("b")]
        mixed = [
            make_recipe("a", difficulty="easy"),
            make_recipe("b", difficulty="medium"),
            make_recipe("c", difficulty="hard"),
        ]
        assert difficulty_balance_score(same) == 9
        assert difficulty_balance_score(mixed) == 5
        assert difficulty_balance_score([]) == 10

    def test_time_efficiency(self, make_recipe):
        assert time_efficiency_score([]) == 10.0
        assert time_efficiency_score([make_recipe("slow", cook_time="2 hours")]) == 1.0
        assert time_efficiency_score([make_recipe("fast", cook_time="20 minutes")]) == 8.0


# =============================================================================
# Combination Scoring
# =============================================================================


class TestScoreCombination:
    """Tests for score_combination function."""

    def test_balanced_combination(self, small_recipes):
        # Breakfast is left out: meat, vegetarian, soup, staple and seafood remain
        recipes = small_recipes[:5]
        analysis = score_combination(_combination(recipes))

        assert analysis.nutritional_score == 10
        assert analysis.flavor_harmony == 8
        assert analysis.difficulty_balance == 7
        assert analysis.time_efficiency == 8.7
        assert analysis.overall_score == 8
        assert "Nutritionally balanced with protein, vegetables and a staple" in analysis.strengths
        assert "Short cooking times keep the whole meal quick" in analysis.strengths
        assert analysis.improvements == []

    def test_slow_demanding_combination(self, make_recipe):
        recipe = make_recipe("slow-braise", "meat", "hard", cook_time="1 hour 30 minutes")
        analysis = score_combination(_combination([recipe]))

        assert analysis.nutritional_score == 3
        assert analysis.flavor_harmony == 0
        assert analysis.difficulty_balance == 9
        assert analysis.time_efficiency == 1.0
        assert analysis.overall_score == 3
        assert "Add dishes covering the missing vegetables, carbohydrates" in analysis.improvements
        assert "Several dishes cook for a long time; start them early" in analysis.improvements
        assert any("simpler" in text for text in analysis.improvements)

    def test_easy_combination_suits_beginners(self, make_recipe):
        recipes = [make_recipe("a"), make_recipe("b", "staple")]
        analysis = score_combination(_combination(recipes))
        assert "Suitable for beginner cooks" in analysis.strengths

    def test_empty_combination(self):
        analysis = score_combination(_combination([]))
        assert analysis.nutritional_score == 0
        assert analysis.difficulty_balance == 10
        assert analysis.time_efficiency == 10.0
        assert analysis.overall_score == 5

    def test_scores_within_range(self, sample_catalog):
        analysis = score_combination(_combination(sample_catalog.get_all()))
        for value in (
            analysis.nutritional_score,
            analysis.flavor_harmony,
            analysis.difficulty_balance,
            analysis.time_efficiency,
            analysis.overall_score,
        ):
            assert 0 <= value <= 10

    def test_to_dict(self, small_recipes):
        data = score_combination(_combination(small_recipes[:3])).to_dict()
        assert set(data) == {
            "nutritional_score",
            "flavor_harmony",
            "difficulty_balance",
            "time_efficiency",
            "overall_score",
            "strengths",
            "improvements",
        }
