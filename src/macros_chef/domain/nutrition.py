"""Nutrition domain models."""

from dataclasses import dataclass
from datetime import datetime

MACRO_FIELDS = ("calories", "protein", "carbs", "fat")
MICRONUTRIENT_FIELDS = (
    "potassium",
    "magnesium",
    "vitamin_d",
    "calcium",
    "sugar",
    "fiber",
    "sodium",
)
NUTRIENT_FIELDS = MACRO_FIELDS + MICRONUTRIENT_FIELDS


@dataclass(frozen=True)
class Ingredient:
    """One food component of a meal.

    Nutrient values are absolute amounts for ``weight_grams``, not per gram.
    """

    name: str
    weight_grams: float
    calories: float
    protein: float
    carbs: float
    fat: float
    potassium: float | None = None
    magnesium: float | None = None
    vitamin_d: float | None = None
    calcium: float | None = None
    sugar: float | None = None
    fiber: float | None = None
    sodium: float | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class NutrientTotals:
    """Meal-level nutrient totals."""

    calories: float
    protein: float
    carbs: float
    fat: float
    potassium: float | None = None
    magnesium: float | None = None
    vitamin_d: float | None = None
    calcium: float | None = None
    sugar: float | None = None
    fiber: float | None = None
    sodium: float | None = None


@dataclass(frozen=True)
class NutritionInfo:
    """A named meal with ingredients and aggregate totals."""

    meal_name: str
    totals: NutrientTotals
    ingredients: tuple[Ingredient, ...]
    insight: str | None = None
    nutri_score: str | None = None
    eco_score: str | None = None
    allergens: tuple[str, ...] = ()
    image_url: str | None = None
    justification: str | None = None


@dataclass(frozen=True)
class SavedMeal:
    """A meal saved to the user's library."""

    id: int
    meal: NutritionInfo
    source: str | None
    has_image: bool
    created_at: datetime | None


@dataclass(frozen=True)
class MealLogEntry:
    """A meal logged to the user's timeline."""

    id: int
    meal: NutritionInfo
    has_image: bool
    created_at: datetime | None


@dataclass(frozen=True)
class Recipe:
    """Recipe suggested from pantry ingredients."""

    recipe_name: str
    description: str
    ingredients: tuple[tuple[str, str], ...]
    instructions: tuple[str, ...]
    totals: NutrientTotals
    image_url: str | None = None
