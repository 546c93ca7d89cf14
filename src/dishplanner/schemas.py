"""Common data schemas for recipes and planning preferences."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from dishplanner.normalize.units import format_duration, parse_duration_minutes

# =============================================================================
# Closed Label Sets
# =============================================================================


class RecipeCategory(str, Enum):
    """Cuisine category of a recipe."""

    SEAFOOD = "seafood"
    BREAKFAST = "breakfast"
    CONDIMENT = "condiment"
    DESSERT = "dessert"
    BEVERAGE = "beverage"
    MEAT = "meat"
    SEMI_PREPARED = "semi_prepared"
    SOUP = "soup"
    STAPLE = "staple"
    VEGETARIAN = "vegetarian"


class Difficulty(str, Enum):
    """Cooking difficulty, ordered easy < medium < hard."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @property
    def level(self) -> int:
        return _DIFFICULTY_LEVELS[self]


_DIFFICULTY_LEVELS = {Difficulty.EASY: 1, Difficulty.MEDIUM: 2, Difficulty.HARD: 3}


class CookingMethod(str, Enum):
    STIR_FRY = "stir_fry"
    BOIL = "boil"
    STEAM = "steam"
    ROAST = "roast"
    DEEP_FRY = "deep_fry"
    BRAISE = "braise"
    STEW = "stew"
    PAN_FRY = "pan_fry"
    TOSS = "toss"
    MARINATE = "marinate"
    SIMMER = "simmer"
    BRINE = "brine"


class DietaryRestriction(str, Enum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten_free"
    LOW_SALT = "low_salt"
    LOW_SUGAR = "low_sugar"
    LOW_FAT = "low_fat"
    HIGH_PROTEIN = "high_protein"
    NUT_FREE = "nut_free"
    NO_SEAFOOD = "no_seafood"
    DAIRY_FREE = "dairy_free"


class BudgetLevel(str, Enum):
    ECONOMY = "economy"
    MODERATE = "moderate"
    PREMIUM = "premium"


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Occasion(str, Enum):
    EVERYDAY = "everyday"
    GATHERING = "gathering"
    HOLIDAY = "holiday"
    HOSTING_GUESTS = "hosting_guests"
    SPECIAL = "special"


class MealSlot(str, Enum):
    """Named meal position within a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    LATE_NIGHT = "late_night"


class DishRole(str, Enum):
    """A dish's function within a combination."""

    APPETIZER = "appetizer"
    SOUP = "soup"
    MAIN = "main"
    SIDE = "side"
    STAPLE = "staple"
    DESSERT = "dessert"


class DishPriority(str, Enum):
    REQUIRED = "required"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


class CombinationType(str, Enum):
    HOME_STYLE = "home_style"
    ENTERTAINING = "entertaining"
    HOLIDAY = "holiday"
    QUICK = "quick"
    NUTRITIONAL = "nutritional"
    SEASONAL = "seasonal"


class ShoppingCategory(str, Enum):
    """Shopping list sections, declared in display order."""

    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    MEAT = "meat"
    SEAFOOD = "seafood"
    DAIRY_EGGS = "dairy_eggs"
    STAPLES = "staples"
    CONDIMENTS = "condiments"
    FROZEN = "frozen"
    CANNED = "canned"
    BEVERAGES = "beverages"
    SNACKS = "snacks"
    OTHER = "other"


class ItemPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


FLAVOR_DESCRIPTORS: frozenset[str] = frozenset(
    {"sour", "sweet", "bitter", "spicy", "salty", "umami", "aromatic", "light", "rich"}
)


# =============================================================================
# Recipes
# =============================================================================


class Ingredient(BaseModel):
    """An ingredient line: amount is a quantity with unit or a qualifier like "to taste"."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    amount: str
    notes: str | None = None


class CookingStep(BaseModel):
    """A single numbered cooking instruction."""

    model_config = ConfigDict(frozen=True)

    step_number: int
    instruction: str
    duration: str | None = None
    temperature: str | None = None
    tips: str | None = None


class NutritionalInfo(BaseModel):
    """Nutrition facts per recipe (calories cover the whole recipe yield)."""

    model_config = ConfigDict(frozen=True)

    calories: float | None = None
    protein: str | None = None
    carbs: str | None = None
    fat: str | None = None
    fiber: str | None = None


class Recipe(BaseModel):
    """Recipe with ingredients and instructions."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str | None = None
    category: RecipeCategory
    difficulty: Difficulty
    servings: int
    prep_time: str
    cook_time: str
    ingredients: tuple[Ingredient, ...]
    steps: tuple[CookingStep, ...] = ()
    tags: tuple[str, ...] = ()
    cooking_methods: tuple[CookingMethod, ...] = ()
    nutritional_info: NutritionalInfo | None = None
    tips: tuple[str, ...] = ()
    variations: tuple[str, ...] = ()
    source: str | None = None

    @model_validator(mode="after")
    def check_invariants(self) -> "Recipe":
        if self.servings <= 0:
            raise ValueError("Recipe servings must be greater than 0")
        if not self.ingredients:
            raise ValueError("Recipe must have at least one ingredient")
        step_numbers = sorted(step.step_number for step in self.steps)
        if step_numbers != list(range(1, len(step_numbers) + 1)):
            raise ValueError("Recipe steps must be numbered sequentially starting from 1")
        return self

    @property
    def prep_minutes(self) -> int:
        return parse_duration_minutes(self.prep_time)

    @property
    def cook_minutes(self) -> int:
        return parse_duration_minutes(self.cook_time)

    @property
    def total_minutes(self) -> int:
        return self.prep_minutes + self.cook_minutes

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_time(self) -> str:
        return format_duration(self.total_minutes)

    @property
    def calories(self) -> float:
        if self.nutritional_info and self.nutritional_info.calories:
            return self.nutritional_info.calories
        return 0.0


# =============================================================================
# Preferences
# =============================================================================


class BasePreferences(BaseModel):
    """Constraints shared by meal plans and dish combinations."""

    model_config = ConfigDict(frozen=True)

    number_of_people: int = Field(ge=1, le=20, description="Number of diners")
    dietary_restrictions: tuple[DietaryRestriction, ...] = ()
    allergies: tuple[str, ...] = ()
    preferred_categories: tuple[RecipeCategory, ...] = ()
    excluded_categories: tuple[RecipeCategory, ...] = ()
    budget_level: BudgetLevel | None = None
    skill_level: SkillLevel | None = None
    cooking_time: str | None = Field(
        None, description="Ceiling on prep + cook time per recipe, e.g. '1 hour'"
    )


class TimeConstraints(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_prep_time: str | None = None
    max_cook_time: str | None = None


class NutritionalGoals(BaseModel):
    model_config = ConfigDict(frozen=True)

    target_calories: float | None = None
    high_protein: bool = False
    low_carb: bool = False
    balanced: bool = False


class MealPlanPreferences(BasePreferences):
    """Preferences for a weekly meal plan."""

    time_constraints: TimeConstraints | None = None
    nutritional_goals: NutritionalGoals | None = None


class CombinationPreferences(BasePreferences):
    """Preferences for a single multi-dish meal."""

    occasion: Occasion | None = None
    preferred_flavors: tuple[str, ...] = ()
    seasonal_preference: bool = False
    nutritional_balance: bool = False
