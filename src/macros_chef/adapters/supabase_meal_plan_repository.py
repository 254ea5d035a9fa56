"""Supabase repository for meal plans."""

from dataclasses import dataclass

from supabase import Client

from macros_chef.adapters.supabase_rows import parse_meal_data, parse_saved_meal
from macros_chef.domain.nutrition import NutritionInfo
from macros_chef.domain.planning import MealPlan, MealPlanItem
from macros_chef.services.plans import MealPlanRepository

_ITEM_COLUMNS = (
    "id, meal_plan_id, metadata, created_at, "
    "saved_meals(id, meal_data, created_at)"
)


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans and plan items."""

    client: Client

    def list_plans(self, user_id: int) -> list[MealPlan]:
        """Return plans ordered by name with items in creation order."""
        plans_response = (
            self.client.table("meal_plans")
            .select("id, name")
            .eq("user_id", user_id)
            .order("name", desc=False)
            .execute()
        )
        plan_rows = plans_response.data or []
        if not plan_rows:
            return []
        items_response = (
            self.client.table("meal_plan_items")
            .select(_ITEM_COLUMNS)
            .eq("user_id", user_id)
            .in_("meal_plan_id", [row["id"] for row in plan_rows])
            .order("created_at", desc=False)
            .execute()
        )
        items: dict[int, list[MealPlanItem]] = {}
        for row in items_response.data or []:
            meal_row = row.get("saved_meals")
            if not isinstance(meal_row, dict):
                continue
            plan_id = int(row["meal_plan_id"])
            items.setdefault(plan_id, []).append(
                MealPlanItem(
                    id=int(row["id"]),
                    plan_id=plan_id,
                    meal=parse_saved_meal(meal_row),
                    metadata=dict(row.get("metadata") or {}),
                )
            )
        return [
            MealPlan(
                id=int(row["id"]),
                name=str(row["name"]),
                items=items.get(int(row["id"]), []),
            )
            for row in plan_rows
        ]

    def find_plan_id_by_name(self, user_id: int, name: str) -> int | None:
        """Return the id of a plan with this exact name."""
        response = (
            self.client.table("meal_plans")
            .select("id")
            .eq("user_id", user_id)
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return int(response.data[0]["id"])

    def plan_belongs_to(self, user_id: int, plan_id: int) -> bool:
        """Return whether the user owns the plan."""
        response = (
            self.client.table("meal_plans")
            .select("id")
            .eq("id", plan_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def create_plan(self, user_id: int, name: str) -> MealPlan:
        """Insert an empty plan."""
        response = (
            self.client.table("meal_plans")
            .insert({"user_id": user_id, "name": name})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal plan")
        row = response.data[0]
        return MealPlan(id=int(row["id"]), name=str(row["name"]))

    def delete_plan(self, user_id: int, plan_id: int) -> bool:
        """Delete a plan; items are removed by cascade."""
        response = (
            self.client.table("meal_plans")
            .delete()
            .eq("id", plan_id)
            .eq("user_id", user_id)
            .execute()
        )
        return bool(response.data)

    def create_plan_item(
        self,
        user_id: int,
        plan_id: int,
        saved_meal_id: int,
        metadata: dict[str, object],
    ) -> int:
        """Insert a plan item and return its id."""
        response = (
            self.client.table("meal_plan_items")
            .insert(
                {
                    "user_id": user_id,
                    "meal_plan_id": plan_id,
                    "saved_meal_id": saved_meal_id,
                    "metadata": metadata,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to add meal to plan")
        return int(response.data[0]["id"])

    def remove_plan_item(self, user_id: int, item_id: int) -> bool:
        """Delete a plan item owned by the user."""
        response = (
            self.client.table("meal_plan_items")
            .delete()
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        )
        return bool(response.data)

    def list_plan_meals(self, user_id: int, plan_ids: list[int]) -> list[NutritionInfo]:
        """Return the meals linked to the user's given plans."""
        response = (
            self.client.table("meal_plan_items")
            .select("saved_meals(meal_data)")
            .eq("user_id", user_id)
            .in_("meal_plan_id", plan_ids)
            .execute()
        )
        meals = []
        for row in response.data or []:
            meal_row = row.get("saved_meals")
            if isinstance(meal_row, dict):
                meal, _, _ = parse_meal_data(meal_row.get("meal_data"))
                meals.append(meal)
        return meals
