"""Row parsing helpers shared by Supabase repositories."""

from datetime import datetime

from macros_chef.domain.nutrition import NutritionInfo, SavedMeal
from macros_chef.domain.payloads import meal_from_record


def parse_timestamp(value: object) -> datetime | None:
    """Parse a PostgREST timestamp column."""
    if not value:
        return None
    return datetime.fromisoformat(str(value))


def parse_meal_data(value: object) -> tuple[NutritionInfo, str | None, bool]:
    """Parse a JSONB meal column into a meal, its source and image flag."""
    if not isinstance(value, dict):
        raise RuntimeError("Stored meal data is not an object")
    return meal_from_record(value)


def parse_saved_meal(row: dict[str, object]) -> SavedMeal:
    """Build a saved meal from a ``saved_meals`` row."""
    meal, source, has_image = parse_meal_data(row.get("meal_data"))
    return SavedMeal(
        id=int(row["id"]),
        meal=meal,
        source=source,
        has_image=has_image,
        created_at=parse_timestamp(row.get("created_at")),
    )
