"""Shopping list generation from recipes and meal plans."""

import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Iterable

from dishplanner.errors import ValidationError
from dishplanner.logging_config import get_logger
from dishplanner.normalize.units import (
    CombinedQuantity,
    normalize_ingredient_name,
    round_half_up,
    scale_amount,
)
from dishplanner.plan.scaling import scale_factor
from dishplanner.schemas import ItemPriority, Recipe, ShoppingCategory

if TYPE_CHECKING:
    from dishplanner.plan.meal_plan import WeeklyPlan

logger = get_logger(__name__)


# =============================================================================
# Categorization, Pricing and Priority
# =============================================================================

# First matching category wins, so the order of this table matters
CATEGORY_KEYWORDS: tuple[tuple[ShoppingCategory, tuple[str, ...]], ...] = (
    (
        ShoppingCategory.VEGETABLES,
        (
            "cabbage",
            "radish",
            "potato",
            "tomato",
            "cucumber",
            "eggplant",
            "green bean",
            "spinach",
            "chive",
            "celery",
            "onion",
            "scallion",
            "garlic",
            "ginger",
            "carrot",
            "lettuce",
            "broccoli",
            "mushroom",
            "bell pepper",
        ),
    ),
    (
        ShoppingCategory.FRUITS,
        (
            "apple",
            "banana",
            "orange",
            "pear",
            "grape",
            "strawberry",
            "watermelon",
            "lemon",
            "mango",
        ),
    ),
    (
        ShoppingCategory.MEAT,
        ("pork", "beef", "lamb", "mutton", "chicken", "duck", "rib", "mince", "bacon", "ham"),
    ),
    (
        ShoppingCategory.SEAFOOD,
        (
            "fish",
            "shrimp",
            "prawn",
            "crab",
            "clam",
            "squid",
            "scallop",
            "oyster",
            "sea bass",
            "salmon",
        ),
    ),
    (
        ShoppingCategory.DAIRY_EGGS,
        ("egg", "milk", "yogurt", "cheese", "butter", "cream"),
    ),
    (
        ShoppingCategory.STAPLES,
        ("rice", "flour", "noodle", "steamed bun", "bread", "millet", "oat", "pasta"),
    ),
    (
        ShoppingCategory.CONDIMENTS,
        (
            "salt",
            "sugar",
            "vinegar",
            "soy sauce",
            "cooking wine",
            "pepper",
            "star anise",
            "cinnamon",
            "chili",
            "oil",
            "bean paste",
        ),
    ),
    (ShoppingCategory.FROZEN, ("frozen",)),
    (ShoppingCategory.CANNED, ("canned", "tinned")),
    (ShoppingCategory.BEVERAGES, ("tea", "coffee", "juice", "soda")),
    (ShoppingCategory.SNACKS, ("biscuit", "cracker", "chips", "crisps", "peanut", "nut")),
)

_CATEGORY_PATTERNS = tuple(
    (category, re.compile(r"\b(?:" + "|".join(re.escape(kw) for kw in keywords) + r")"))
    for category, keywords in CATEGORY_KEYWORDS
)

# (min, max) price per item in the configured currency
PRICE_RANGES: dict[ShoppingCategory, tuple[int, int]] = {
    ShoppingCategory.VEGETABLES: (2, 8),
    ShoppingCategory.FRUITS: (5, 15),
    ShoppingCategory.MEAT: (15, 40),
    ShoppingCategory.SEAFOOD: (20, 60),
    ShoppingCategory.DAIRY_EGGS: (3, 12),
    ShoppingCategory.STAPLES: (2, 10),
    ShoppingCategory.CONDIMENTS: (1, 8),
    ShoppingCategory.FROZEN: (8, 25),
    ShoppingCategory.CANNED: (5, 15),
    ShoppingCategory.BEVERAGES: (3, 12),
    ShoppingCategory.SNACKS: (5, 20),
    ShoppingCategory.OTHER: (2, 15),
}

_HIGH_PRIORITY_PATTERN = re.compile(r"\b(?:salt|oil|rice|flour|noodle|egg(?!plant)|milk)")

ALTERNATIVES: dict[str, tuple[str, ...]] = {
    "pork": ("beef", "chicken"),
    "beef": ("pork", "lamb"),
    "chicken": ("duck", "pork"),
    "cabbage": ("spinach", "bok choy"),
    "potato": ("sweet potato", "yam"),
    "tomato": ("canned tomato",),
    "light soy sauce": ("dark soy sauce", "soy sauce"),
    "cooking wine": ("shaoxing wine", "rice wine"),
}


def categorize_ingredient(name: str) -> ShoppingCategory:
    """Map an ingredient name to a shopping category; unmatched names go to OTHER."""
    normalized = normalize_ingredient_name(name)
    for category, pattern in _CATEGORY_PATTERNS:
        if pattern.search(normalized):
            return category
    return ShoppingCategory.OTHER


def estimate_price(category: ShoppingCategory) -> float:
    """Heuristic price: the rounded midpoint of the category's price range."""
    low, high = PRICE_RANGES[category]
    return round_half_up((low + high) / 2)


def determine_priority(name: str, category: ShoppingCategory) -> ItemPriority:
    """High for pantry basics, low for snacks and beverages, medium otherwise."""
    if _HIGH_PRIORITY_PATTERN.search(normalize_ingredient_name(name)):
        return ItemPriority.HIGH
    if category in (ShoppingCategory.SNACKS, ShoppingCategory.BEVERAGES):
        return ItemPriority.LOW
    return ItemPriority.MEDIUM


def get_alternatives(name: str) -> list[str]:
    """Known substitutes for an ingredient."""
    return list(ALTERNATIVES.get(normalize_ingredient_name(name), ()))


# =============================================================================
# Shopping List Values
# =============================================================================


@dataclass
class ShoppingItem:
    """A single item in the shopping list."""

    id: str
    name: str
    category: ShoppingCategory
    quantity: str
    estimated_price: float
    priority: ItemPriority
    recipe_ids: list[str] = field(default_factory=list)
    recipe_names: list[str] = field(default_factory=list)
    notes: str | None = None
    is_purchased: bool = False
    alternatives: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "quantity": self.quantity,
            "estimated_price": self.estimated_price,
            "priority": self.priority.value,
            "recipe_ids": list(self.recipe_ids),
            "recipe_names": list(self.recipe_names),
            "notes": self.notes,
            "is_purchased": self.is_purchased,
            "alternatives": list(self.alternatives),
        }


@dataclass
class ShoppingSection:
    """Items of one shopping category, sorted by name."""

    category: ShoppingCategory
    items: list[ShoppingItem] = field(default_factory=list)
    total_estimated_cost: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "items": [item.to_dict() for item in self.items],
            "total_estimated_cost": self.total_estimated_cost,
        }


@dataclass
class ShoppingList:
    """Complete shopping list with sections in display order."""

    id: str
    name: str
    description: str
    sections: list[ShoppingSection] = field(default_factory=list)
    total_items: int = 0
    total_estimated_cost: float | None = None
    meal_plan_id: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_modified: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def items(self) -> list[ShoppingItem]:
        """All items across sections, in display order."""
        return [item for section in self.sections for item in section.items]

    def get_item(self, name: str) -> ShoppingItem | None:
        """Find the first item with the given name (case-insensitive)."""
        key = normalize_ingredient_name(name)
        for item in self.items:
            if normalize_ingredient_name(item.name) == key:
                return item
        return None

    def summary(self) -> dict[str, Any]:
        """Counts for a quick overview of the list."""
        items = self.items
        return {
            "total_items": len(items),
            "purchased_items": sum(1 for item in items if item.is_purchased),
            "total_cost": self.total_estimated_cost or 0.0,
            "categories": len(self.sections),
            "high_priority_items": sum(1 for item in items if item.priority == ItemPriority.HIGH),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sections": [section.to_dict() for section in self.sections],
            "total_items": self.total_items,
            "total_estimated_cost": self.total_estimated_cost,
            "meal_plan_id": self.meal_plan_id,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
            "last_modified": self.last_modified.isoformat(),
            "summary": self.summary(),
        }


@dataclass
class _PendingItem:
    """An item being consolidated; becomes a ShoppingItem once all recipes are merged."""

    name: str
    quantity: CombinedQuantity
    notes: str | None
    recipe_ids: list[str] = field(default_factory=list)
    recipe_names: list[str] = field(default_factory=list)

    def add_source(self, recipe: Recipe) -> None:
        if recipe.id not in self.recipe_ids:
            self.recipe_ids.append(recipe.id)
            self.recipe_names.append(recipe.name)


# =============================================================================
# Generator
# =============================================================================


class ShoppingListGenerator:
    """
    Generates shopping lists from recipes with:
    - Per-recipe scaling to the number of diners
    - Quantity consolidation across recipes (same-unit sums, " + " otherwise)
    - Keyword categorization into display-ordered sections
    - Heuristic prices and purchase priorities
    """

    def generate(
        self,
        recipes: Iterable[Recipe],
        number_of_people: int,
        consolidate: bool = True,
        include_price_estimates: bool = False,
        exclude_categories: Iterable[ShoppingCategory] = (),
        meal_plan_id: str | None = None,
    ) -> ShoppingList:
        """
        Generate a shopping list for recipes cooked for number_of_people.

        Args:
            recipes: Recipes to shop for; each is scaled by
                number_of_people / recipe.servings.
            number_of_people: Diners to scale quantities for.
            consolidate: Merge same-name ingredients across recipes. When
                False, items are kept per recipe.
            include_price_estimates: Set the list's total estimated cost.
            exclude_categories: Shopping categories to leave out.
            meal_plan_id: Plan the list was derived from, if any.

        Returns:
            ShoppingList with sections in display order.

        Raises:
            ValidationError: If number_of_people is not positive.
        """
        if number_of_people <= 0:
            raise ValidationError(
                f"Number of people must be greater than 0, got {number_of_people}",
                hint="Shop for at least one person.",
            )

        entries = [(recipe, number_of_people) for recipe in recipes]
        return self._build(
            entries,
            number_of_people=number_of_people,
            consolidate=consolidate,
            include_price_estimates=include_price_estimates,
            exclude_categories=exclude_categories,
            meal_plan_id=meal_plan_id,
        )

    def generate_from_meal_plan(
        self,
        plan: "WeeklyPlan",
        consolidate: bool = True,
        include_price_estimates: bool = False,
        exclude_categories: Iterable[ShoppingCategory] = (),
    ) -> ShoppingList:
        """
        Generate a shopping list covering every meal in a plan.

        Each planned meal contributes its recipe scaled to the meal's servings.
        """
        entries = [
            (meal.recipe, meal.servings) for day in plan.daily_plans for meal in day.meals
        ]
        return self._build(
            entries,
            number_of_people=plan.preferences.number_of_people,
            consolidate=consolidate,
            include_price_estimates=include_price_estimates,
            exclude_categories=exclude_categories,
            meal_plan_id=plan.id,
        )

    def _build(
        self,
        entries: list[tuple[Recipe, int]],
        number_of_people: int,
        consolidate: bool,
        include_price_estimates: bool,
        exclude_categories: Iterable[ShoppingCategory],
        meal_plan_id: str | None,
    ) -> ShoppingList:
        logger.info(
            f"Generating shopping list for {len(entries)} recipes, {number_of_people} people"
        )

        pending = self._consolidate(entries, consolidate)
        excluded = {ShoppingCategory(category) for category in exclude_categories}
        sections = [
            section
            for section in self._group_by_category(pending)
            if section.category not in excluded
        ]

        total_items = sum(len(section.items) for section in sections)
        total_cost = None
        if include_price_estimates:
            total_cost = round_half_up(
                sum(section.total_estimated_cost for section in sections), 2
            )

        now = datetime.now(timezone.utc)
        shopping_list = ShoppingList(
            id=f"shopping_{uuid.uuid4().hex}",
            name=f"Shopping list - {now.date().isoformat()}",
            description=f"Ingredients for {number_of_people} people",
            sections=sections,
            total_items=total_items,
            total_estimated_cost=total_cost,
            meal_plan_id=meal_plan_id,
            notes="Adjust quantities to what you already have at home.",
            created_at=now,
            last_modified=now,
        )

        logger.info(
            f"Generated shopping list: {total_items} items in {len(sections)} sections"
            + (f", estimated cost {total_cost:.2f}" if total_cost is not None else "")
        )
        return shopping_list

    def _consolidate(
        self,
        entries: list[tuple[Recipe, int]],
        consolidate: bool,
    ) -> list[_PendingItem]:
        """Scale each recipe and merge ingredient amounts by name (or name and recipe)."""
        merged: dict[tuple[str, ...], _PendingItem] = {}

        for recipe, servings in entries:
            factor = scale_factor(recipe, servings)

            for ingredient in recipe.ingredients:
                scaled = CombinedQuantity.from_amount(scale_amount(ingredient.amount, factor))
                name_key = normalize_ingredient_name(ingredient.name)
                key = (name_key,) if consolidate else (name_key, recipe.id)

                existing = merged.get(key)
                if existing is None:
                    item = _PendingItem(
                        name=ingredient.name.strip(),
                        quantity=scaled,
                        notes=ingredient.notes,
                    )
                    item.add_source(recipe)
                    merged[key] = item
                else:
                    existing.quantity = existing.quantity + scaled
                    existing.add_source(recipe)

        return list(merged.values())

    def _group_by_category(self, pending: list[_PendingItem]) -> list[ShoppingSection]:
        """Build sections in display order with items sorted by name."""
        by_category: dict[ShoppingCategory, list[ShoppingItem]] = {}

        for entry in pending:
            category = categorize_ingredient(entry.name)
            item = ShoppingItem(
                id=f"item_{uuid.uuid4().hex[:12]}",
                name=entry.name,
                category=category,
                quantity=entry.quantity.to_display_string(),
                estimated_price=estimate_price(category),
                priority=determine_priority(entry.name, category),
                recipe_ids=entry.recipe_ids,
                recipe_names=entry.recipe_names,
                notes=entry.notes,
                alternatives=get_alternatives(entry.name),
            )
            by_category.setdefault(category, []).append(item)

        sections: list[ShoppingSection] = []
        for category in ShoppingCategory:
            items = by_category.get(category)
            if not items:
                continue
            items.sort(key=lambda item: (item.name.casefold(), item.name, item.quantity))
            sections.append(
                ShoppingSection(
                    category=category,
                    items=items,
                    total_estimated_cost=sum(item.estimated_price for item in items),
                )
            )

        return sections
