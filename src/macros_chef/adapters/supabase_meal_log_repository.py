"""Supabase repository for meal log entries."""

from dataclasses import dataclass, replace

from supabase import Client

from macros_chef.adapters.supabase_rows import parse_meal_data, parse_timestamp
from macros_chef.domain.nutrition import MealLogEntry, NutritionInfo
from macros_chef.domain.payloads import image_data_url, meal_to_record
from macros_chef.services.meals import MealLogRepository

_SUMMARY_COLUMNS = "id, meal_data, has_image, created_at"


@dataclass
class SupabaseMealLogRepository(MealLogRepository):
    """Supabase implementation for the meal timeline."""

    client: Client

    def create_entry(
        self, user_id: int, meal: NutritionInfo, image_base64: str | None
    ) -> MealLogEntry:
        """Insert a log entry and return it without image data."""
        response = (
            self.client.table("meal_log_entries")
            .insert(
                {
                    "user_id": user_id,
                    "meal_data": meal_to_record(meal),
                    "image_base64": image_base64,
                    "has_image": bool(image_base64),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal log entry")
        return _parse_entry(response.data[0])

    def list_entries(self, user_id: int) -> list[MealLogEntry]:
        """Return entries newest first, without image data."""
        response = (
            self.client.table("meal_log_entries")
            .select(_SUMMARY_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def get_entry(self, user_id: int, entry_id: int) -> MealLogEntry | None:
        """Return one entry with its photo as a data URL."""
        response = (
            self.client.table("meal_log_entries")
            .select(f"{_SUMMARY_COLUMNS}, image_base64")
            .eq("id", entry_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        entry = _parse_entry(row)
        image_base64 = row.get("image_base64")
        if image_base64:
            meal = replace(entry.meal, image_url=image_data_url(str(image_base64)))
            entry = replace(entry, meal=meal, has_image=True)
        return entry


def _parse_entry(row: dict[str, object]) -> MealLogEntry:
    meal, _, _ = parse_meal_data(row.get("meal_data"))
    return MealLogEntry(
        id=int(row["id"]),
        meal=meal,
        has_image=bool(row.get("has_image")),
        created_at=parse_timestamp(row.get("created_at")),
    )
