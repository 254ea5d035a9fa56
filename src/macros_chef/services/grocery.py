"""Grocery list service."""

import logging
from dataclasses import dataclass
from typing import Protocol

from macros_chef.domain.errors import InvalidArgumentError, NotFoundError
from macros_chef.domain.nutrition import NutritionInfo
from macros_chef.domain.planning import GroceryItem, GroceryList
from macros_chef.services.plans import MealPlanService

logger = logging.getLogger(__name__)

CLEAR_ALL = "all"
CLEAR_CHECKED = "checked"


class GroceryRepository(Protocol):
    """Persistence interface for grocery lists and items."""

    def list_lists(self, user_id: int) -> list[GroceryList]:
        """Return lists newest first."""

    def get_list(self, user_id: int, list_id: int) -> GroceryList | None:
        """Return a list owned by the user, if present."""

    def create_list(self, user_id: int, name: str, is_active: bool) -> GroceryList:
        """Create a list."""

    def set_active(self, user_id: int, list_id: int) -> None:
        """Mark one list active and every other list of the user inactive."""

    def delete_list(self, user_id: int, list_id: int) -> bool:
        """Delete a list and its items."""

    def list_items(self, user_id: int, list_id: int) -> list[GroceryItem]:
        """Return items unchecked first, then by name."""

    def add_items(
        self, user_id: int, list_id: int, names: list[str]
    ) -> list[GroceryItem]:
        """Append unchecked items to a list."""

    def update_item(
        self, user_id: int, item_id: int, checked: bool
    ) -> GroceryItem | None:
        """Set an item's checked flag."""

    def remove_item(self, user_id: int, item_id: int) -> bool:
        """Delete an item."""

    def clear_items(self, user_id: int, list_id: int, checked_only: bool) -> None:
        """Delete all items of a list, or only the checked ones."""


def ingredient_names(meals: list[NutritionInfo]) -> list[str]:
    """Return unique ingredient names across meals, sorted.

    Names are compared case-insensitively; the first spelling wins.
    """
    unique: dict[str, str] = {}
    for meal in meals:
        for ingredient in meal.ingredients:
            name = ingredient.name.strip()
            if name:
                unique.setdefault(name.casefold(), name)
    return sorted(unique.values(), key=str.casefold)


@dataclass
class GroceryService:
    """Service for grocery lists built by hand or from meal plans."""

    repository: GroceryRepository
    meal_plan_service: MealPlanService

    def list_lists(self, user_id: int) -> list[GroceryList]:
        return self.repository.list_lists(user_id)

    def create_list(self, user_id: int, name: str) -> GroceryList:
        cleaned = _require_name(name, "List name")
        return self.repository.create_list(user_id, cleaned, is_active=False)

    def activate_list(self, user_id: int, list_id: int) -> None:
        self._require_list(user_id, list_id)
        self.repository.set_active(user_id, list_id)

    def delete_list(self, user_id: int, list_id: int) -> None:
        if not self.repository.delete_list(user_id, list_id):
            raise NotFoundError("Grocery list not found")

    def list_items(self, user_id: int, list_id: int) -> list[GroceryItem]:
        self._require_list(user_id, list_id)
        return self.repository.list_items(user_id, list_id)

    def add_item(self, user_id: int, list_id: int, name: str) -> GroceryItem:
        cleaned = _require_name(name, "Item name")
        self._require_list(user_id, list_id)
        return self.repository.add_items(user_id, list_id, [cleaned])[0]

    def set_item_checked(
        self, user_id: int, item_id: int, checked: bool
    ) -> GroceryItem:
        item = self.repository.update_item(user_id, item_id, checked)
        if item is None:
            raise NotFoundError("Grocery item not found")
        return item

    def remove_item(self, user_id: int, item_id: int) -> None:
        if not self.repository.remove_item(user_id, item_id):
            raise NotFoundError("Grocery item not found")

    def clear_items(
        self, user_id: int, list_id: int, clear_type: str = CLEAR_ALL
    ) -> None:
        """Remove every item, or only checked items, from a list."""
        if clear_type not in {CLEAR_ALL, CLEAR_CHECKED}:
            raise InvalidArgumentError('Clear type must be "all" or "checked"')
        self._require_list(user_id, list_id)
        self.repository.clear_items(
            user_id, list_id, checked_only=clear_type == CLEAR_CHECKED
        )

    def import_from_plans(
        self, user_id: int, list_id: int, plan_ids: list[int]
    ) -> list[GroceryItem]:
        """Add plan ingredients not already on the list; return the full list."""
        self._require_list(user_id, list_id)
        meals = self.meal_plan_service.plan_meals(user_id, plan_ids)
        existing = {
            item.name.casefold()
            for item in self.repository.list_items(user_id, list_id)
        }
        names = [
            name for name in ingredient_names(meals) if name.casefold() not in existing
        ]
        if names:
            self.repository.add_items(user_id, list_id, names)
        logger.info("Imported %s items into grocery list %s", len(names), list_id)
        return self.repository.list_items(user_id, list_id)

    def generate_list(
        self, user_id: int, name: str, plan_ids: list[int]
    ) -> GroceryList:
        """Create a new active list filled with ingredients from plans."""
        cleaned = _require_name(name, "List name")
        grocery_list = self.repository.create_list(user_id, cleaned, is_active=True)
        self.repository.set_active(user_id, grocery_list.id)
        names = ingredient_names(self.meal_plan_service.plan_meals(user_id, plan_ids))
        if names:
            self.repository.add_items(user_id, grocery_list.id, names)
        logger.info(
            "Generated grocery list %s with %s items", grocery_list.id, len(names)
        )
        return grocery_list

    def _require_list(self, user_id: int, list_id: int) -> GroceryList:
        grocery_list = self.repository.get_list(user_id, list_id)
        if grocery_list is None:
            raise NotFoundError("Grocery list not found")
        return grocery_list


def _require_name(name: str, label: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise InvalidArgumentError(f"{label} cannot be empty")
    return cleaned
