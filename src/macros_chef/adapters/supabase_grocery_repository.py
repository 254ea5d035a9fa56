"""Supabase repository for grocery lists."""

from dataclasses import dataclass

from supabase import Client

from macros_chef.adapters.supabase_rows import parse_timestamp
from macros_chef.domain.planning import GroceryItem, GroceryList
from macros_chef.services.grocery import GroceryRepository

_LIST_COLUMNS = "id, name, is_active, created_at"
_ITEM_COLUMNS = "id, list_id, name, checked"


@dataclass
class SupabaseGroceryRepository(GroceryRepository):
    """Supabase implementation for grocery lists and items."""

    client: Client

    def list_lists(self, user_id: int) -> list[GroceryList]:
        """Return lists newest first."""
        response = (
            self.client.table("grocery_lists")
            .select(_LIST_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_list(row) for row in response.data or []]

    def get_list(self, user_id: int, list_id: int) -> GroceryList | None:
        """Return a list owned by the user."""
        response = (
            self.client.table("grocery_lists")
            .select(_LIST_COLUMNS)
            .eq("id", list_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_list(response.data[0])

    def create_list(self, user_id: int, name: str, is_active: bool) -> GroceryList:
        """Insert a list."""
        response = (
            self.client.table("grocery_lists")
            .insert({"user_id": user_id, "name": name, "is_active": is_active})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create grocery list")
        return _parse_list(response.data[0])

    def set_active(self, user_id: int, list_id: int) -> None:
        """Deactivate the user's lists, then activate one."""
        self.client.table("grocery_lists").update({"is_active": False}).eq(
            "user_id", user_id
        ).execute()
        self.client.table("grocery_lists").update({"is_active": True}).eq(
            "id", list_id
        ).eq("user_id", user_id).execute()

    def delete_list(self, user_id: int, list_id: int) -> bool:
        """Delete a list; items are removed by cascade."""
        response = (
            self.client.table("grocery_lists")
            .delete()
            .eq("id", list_id)
            .eq("user_id", user_id)
            .execute()
        )
        return bool(response.data)

    def list_items(self, user_id: int, list_id: int) -> list[GroceryItem]:
        """Return items unchecked first, then alphabetically."""
        response = (
            self.client.table("grocery_list_items")
            .select(_ITEM_COLUMNS)
            .eq("list_id", list_id)
            .eq("user_id", user_id)
            .order("checked", desc=False)
            .order("name", desc=False)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def add_items(
        self, user_id: int, list_id: int, names: list[str]
    ) -> list[GroceryItem]:
        """Insert unchecked items."""
        response = (
            self.client.table("grocery_list_items")
            .insert(
                [
                    {"list_id": list_id, "user_id": user_id, "name": name}
                    for name in names
                ]
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to add grocery items")
        return [_parse_item(row) for row in response.data]

    def update_item(
        self, user_id: int, item_id: int, checked: bool
    ) -> GroceryItem | None:
        """Set the checked flag of an item owned by the user."""
        response = (
            self.client.table("grocery_list_items")
            .update({"checked": checked})
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_item(response.data[0])

    def remove_item(self, user_id: int, item_id: int) -> bool:
        """Delete an item owned by the user."""
        response = (
            self.client.table("grocery_list_items")
            .delete()
            .eq("id", item_id)
            .eq("user_id", user_id)
            .execute()
        )
        return bool(response.data)

    def clear_items(self, user_id: int, list_id: int, checked_only: bool) -> None:
        """Delete a list's items, or only its checked items."""
        query = (
            self.client.table("grocery_list_items")
            .delete()
            .eq("list_id", list_id)
            .eq("user_id", user_id)
        )
        if checked_only:
            query = query.eq("checked", True)
        query.execute()


def _parse_list(row: dict[str, object]) -> GroceryList:
    return GroceryList(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        is_active=bool(row.get("is_active")),
        created_at=parse_timestamp(row.get("created_at")),
    )


def _parse_item(row: dict[str, object]) -> GroceryItem:
    return GroceryItem(
        id=int(row["id"]),
        list_id=int(row["list_id"]),
        name=str(row.get("name", "")),
        checked=bool(row.get("checked")),
    )
