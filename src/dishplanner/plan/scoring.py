"""Scoring and analysis of dish combinations."""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable

from dishplanner.logging_config import get_logger
from dishplanner.normalize.units import round_half_up
from dishplanner.schemas import (
    FLAVOR_DESCRIPTORS,
    CookingMethod,
    Difficulty,
    Recipe,
    RecipeCategory,
)

if TYPE_CHECKING:
    from dishplanner.plan.combination import DishCombination

logger = get_logger(__name__)

PROTEIN_CATEGORIES = frozenset({RecipeCategory.MEAT, RecipeCategory.SEAFOOD})

METHOD_FLAVORS: dict[CookingMethod, str] = {
    CookingMethod.STIR_FRY: "aromatic",
    CookingMethod.STEAM: "light",
    CookingMethod.BRAISE: "rich",
    CookingMethod.STEW: "rich",
}

# Points per satisfied nutrition flag; they add up to 10
PROTEIN_POINTS = 3
VEGETABLE_POINTS = 3
CARB_POINTS = 2
BALANCED_POINTS = 2

MAX_SCORE = 10


@dataclass(frozen=True)
class NutritionalBalance:
    """Which food groups a set of dishes covers."""

    has_protein: bool = False
    has_vegetables: bool = False
    has_carbs: bool = False

    @property
    def is_balanced(self) -> bool:
        return self.has_protein and self.has_vegetables and self.has_carbs

    @property
    def missing(self) -> list[str]:
        """Names of the food groups that are not covered."""
        groups = (
            ("protein", self.has_protein),
            ("vegetables", self.has_vegetables),
            ("carbohydrates", self.has_carbs),
        )
        return [name for name, present in groups if not present]

    @property
    def score(self) -> int:
        points = 0
        if self.has_protein:
            points += PROTEIN_POINTS
        if self.has_vegetables:
            points += VEGETABLE_POINTS
        if self.has_carbs:
            points += CARB_POINTS
        if self.is_balanced:
            points += BALANCED_POINTS
        return points

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_protein": self.has_protein,
            "has_vegetables": self.has_vegetables,
            "has_carbs": self.has_carbs,
            "is_balanced": self.is_balanced,
        }


@dataclass(frozen=True)
class CombinationAnalysis:
    """Sub-scores (1-10 scale) and narrative for a combination."""

    nutritional_score: int
    flavor_harmony: int
    difficulty_balance: int
    time_efficiency: float
    overall_score: int
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nutritional_score": self.nutritional_score,
            "flavor_harmony": self.flavor_harmony,
            "difficulty_balance": self.difficulty_balance,
            "time_efficiency": self.time_efficiency,
            "overall_score": self.overall_score,
            "strengths": list(self.strengths),
            "improvements": list(self.improvements),
        }


# =============================================================================
# Analysis
# =============================================================================


def analyze_nutritional_balance(recipes: Iterable[Recipe]) -> NutritionalBalance:
    """Check which food groups the recipes cover, by category."""
    categories = {recipe.category for recipe in recipes}
    return NutritionalBalance(
        has_protein=bool(categories & PROTEIN_CATEGORIES),
        has_vegetables=RecipeCategory.VEGETARIAN in categories,
        has_carbs=RecipeCategory.STAPLE in categories,
    )


def analyze_flavor_profile(recipes: Iterable[Recipe]) -> list[str]:
    """
    Distinct flavors across recipes, in first-seen order.

    Flavors come from recipe tags that name a flavor, plus flavors implied
    by cooking methods (stir-frying is aromatic, steaming light, braising
    and stewing rich).
    """
    flavors: dict[str, None] = {}
    for recipe in recipes:
        for tag in recipe.tags:
            if tag in FLAVOR_DESCRIPTORS:
                flavors[tag] = None
        for method in recipe.cooking_methods:
            inferred = METHOD_FLAVORS.get(method)
            if inferred:
                flavors[inferred] = None
    return list(flavors)


def overall_difficulty(recipes: Iterable[Recipe]) -> Difficulty:
    """Bucket the average difficulty level: <=1.3 easy, <=2.3 medium, else hard."""
    levels = [recipe.difficulty.level for recipe in recipes]
    if not levels:
        return Difficulty.EASY

    average = sum(levels) / len(levels)
    if average <= 1.3:
        return Difficulty.EASY
    if average <= 2.3:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def flavor_harmony_score(flavors: list[str]) -> int:
    return min(MAX_SCORE, 2 * len(flavors))


def difficulty_balance_score(recipes: list[Recipe]) -> int:
    """Fewer distinct difficulty levels score higher."""
    distinct = len({recipe.difficulty for recipe in recipes})
    return min(MAX_SCORE, max(1, 11 - 2 * distinct))


def time_efficiency_score(recipes: list[Recipe]) -> float:
    """Decays linearly with the average cook time per dish."""
    if not recipes:
        return float(MAX_SCORE)
    average_cook = sum(recipe.cook_minutes for recipe in recipes) / len(recipes)
    return max(1.0, min(float(MAX_SCORE), MAX_SCORE - average_cook / 10))


def score_combination(combination: "DishCombination") -> CombinationAnalysis:
    """
    Score a dish combination.

    The overall score is the rounded mean of the nutritional, flavor,
    difficulty and time sub-scores. Strength and improvement sentences are
    presentation text, chosen by which sub-scores cross their thresholds.
    """
    recipes = [dish.recipe for dish in combination.dishes]
    balance = analyze_nutritional_balance(recipes)
    flavors = analyze_flavor_profile(recipes)

    nutritional = balance.score
    harmony = flavor_harmony_score(flavors)
    difficulty_balance = difficulty_balance_score(recipes)
    time_efficiency = time_efficiency_score(recipes)
    overall = int(
        round_half_up((nutritional + harmony + difficulty_balance + time_efficiency) / 4)
    )

    strengths: list[str] = []
    improvements: list[str] = []

    if balance.is_balanced:
        strengths.append("Nutritionally balanced with protein, vegetables and a staple")
    else:
        improvements.append(f"Add dishes covering the missing {', '.join(balance.missing)}")

    if len(flavors) >= 3:
        strengths.append("A rich variety of flavors with distinct layers")
    else:
        improvements.append("Consider a dish with a different flavor to widen the range")

    distinct_difficulties = len({recipe.difficulty for recipe in recipes})
    if recipes and distinct_difficulties <= 2:
        strengths.append("Consistent difficulty that is easy to manage in one session")

    if time_efficiency >= 7:
        strengths.append("Short cooking times keep the whole meal quick")
    elif time_efficiency < 4:
        improvements.append("Several dishes cook for a long time; start them early")

    difficulty = overall_difficulty(recipes)
    if recipes and difficulty == Difficulty.EASY:
        strengths.append("Suitable for beginner cooks")
    elif difficulty == Difficulty.HARD:
        improvements.append("Swap a demanding dish for a simpler one to lighten the workload")

    logger.debug(
        f"Scored combination {combination.id}: nutrition {nutritional}, flavor {harmony}, "
        f"difficulty {difficulty_balance}, time {time_efficiency:.1f}, overall {overall}"
    )

    return CombinationAnalysis(
        nutritional_score=nutritional,
        flavor_harmony=harmony,
        difficulty_balance=difficulty_balance,
        time_efficiency=round_half_up(time_efficiency, 1),
        overall_score=overall,
        strengths=strengths,
        improvements=improvements,
    )
