"""Domain models for meal plans and grocery lists."""

from dataclasses import dataclass, field
from datetime import datetime

from macros_chef.domain.nutrition import NutritionInfo, SavedMeal

MEAL_SLOTS = ("Breakfast", "Lunch", "Dinner", "Snack")


@dataclass(frozen=True)
class MealPlanItem:
    """A saved meal placed on a meal plan."""

    id: int
    plan_id: int
    meal: SavedMeal
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class MealPlan:
    """A named collection of planned meals."""

    id: int
    name: str
    items: list[MealPlanItem] = field(default_factory=list)


@dataclass(frozen=True)
class GroceryList:
    """A grocery list owned by a user."""

    id: int
    name: str
    is_active: bool
    created_at: datetime | None


@dataclass(frozen=True)
class GroceryItem:
    """A single entry on a grocery list."""

    id: int
    list_id: int
    name: str
    checked: bool


@dataclass(frozen=True)
class DietCondition:
    """A medical condition with its target macro split in percent of calories."""

    name: str
    protein_pct: float
    carbs_pct: float
    fat_pct: float
    avoid: str = ""


@dataclass(frozen=True)
class PlannedMeal:
    """A generated meal placed on a day and a meal slot."""

    meal: NutritionInfo
    suggested_day: str
    suggested_slot: str
