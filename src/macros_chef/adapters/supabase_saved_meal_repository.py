"""Supabase repository for saved meals."""

from dataclasses import dataclass

from supabase import Client

from macros_chef.adapters.supabase_rows import parse_saved_meal
from macros_chef.domain.nutrition import NutritionInfo, SavedMeal
from macros_chef.domain.payloads import meal_to_record
from macros_chef.services.meals import SavedMealRepository


@dataclass
class SupabaseSavedMealRepository(SavedMealRepository):
    """Supabase implementation for the saved meal library."""

    client: Client

    def list_saved_meals(self, user_id: int) -> list[SavedMeal]:
        """Return a user's saved meals, newest first."""
        response = (
            self.client.table("saved_meals")
            .select("id, meal_data, created_at")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [parse_saved_meal(row) for row in response.data or []]

    def get_saved_meal(self, user_id: int, meal_id: int) -> SavedMeal | None:
        """Return one saved meal owned by the user."""
        response = (
            self.client.table("saved_meals")
            .select("id, meal_data, created_at")
            .eq("id", meal_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_saved_meal(response.data[0])

    def create_saved_meal(
        self, user_id: int, meal: NutritionInfo, source: str | None
    ) -> SavedMeal:
        """Insert a saved meal and return it."""
        response = (
            self.client.table("saved_meals")
            .insert({"user_id": user_id, "meal_data": meal_to_record(meal, source)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal")
        return parse_saved_meal(response.data[0])

    def delete_saved_meal(self, user_id: int, meal_id: int) -> bool:
        """Delete a saved meal owned by the user."""
        response = (
            self.client.table("saved_meals")
            .delete()
            .eq("id", meal_id)
            .eq("user_id", user_id)
            .execute()
        )
        return bool(response.data)
