"""Recipe scaling to a target number of servings."""

from dishplanner.errors import ValidationError
from dishplanner.logging_config import get_logger
from dishplanner.normalize.units import scale_amount
from dishplanner.schemas import Recipe

logger = get_logger(__name__)


def scale_factor(recipe: Recipe, target_servings: float) -> float:
    """Ratio of target servings to the recipe's baseline servings."""
    return target_servings / recipe.servings


def scale_recipe(recipe: Recipe, target_servings: int) -> Recipe:
    """
    Return a copy of the recipe with ingredient amounts scaled to target_servings.

    Numeric amounts are multiplied by the scale factor and rounded to two
    decimals with their unit text unchanged; qualifiers such as "to taste"
    and unparseable amounts are copied as they are. The original recipe is
    never modified.

    Raises:
        ValidationError: If target_servings is not positive.
    """
    if target_servings <= 0:
        raise ValidationError(
            f"Target servings must be greater than 0, got {target_servings}",
            hint="Request at least one serving.",
        )

    factor = scale_factor(recipe, target_servings)
    ingredients = tuple(
        ingredient.model_copy(update={"amount": scale_amount(ingredient.amount, factor)})
        for ingredient in recipe.ingredients
    )

    logger.debug(
        f"Scaled '{recipe.name}' from {recipe.servings} to {target_servings} servings "
        f"(factor {factor:.2f})"
    )
    return recipe.model_copy(update={"servings": target_servings, "ingredients": ingredients})
