"""Meal plan service."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from macros_chef.domain.errors import ConflictError, InvalidArgumentError, NotFoundError
from macros_chef.domain.nutrition import NutritionInfo
from macros_chef.domain.planning import MealPlan, MealPlanItem
from macros_chef.services.meals import SavedMealService, without_inline_image

logger = logging.getLogger(__name__)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans and their items."""

    def list_plans(self, user_id: int) -> list[MealPlan]:
        """Return plans ordered by name, items in creation order."""

    def find_plan_id_by_name(self, user_id: int, name: str) -> int | None:
        """Return the id of the user's plan with this name, if any."""

    def plan_belongs_to(self, user_id: int, plan_id: int) -> bool:
        """Return whether the plan exists and is owned by the user."""

    def create_plan(self, user_id: int, name: str) -> MealPlan:
        """Create an empty plan."""

    def delete_plan(self, user_id: int, plan_id: int) -> bool:
        """Delete a plan and its items."""

    def create_plan_item(
        self,
        user_id: int,
        plan_id: int,
        saved_meal_id: int,
        metadata: dict[str, object],
    ) -> int:
        """Link a saved meal to a plan and return the item id."""

    def remove_plan_item(self, user_id: int, item_id: int) -> bool:
        """Remove a plan item owned by the user."""

    def list_plan_meals(self, user_id: int, plan_ids: list[int]) -> list[NutritionInfo]:
        """Return the meals referenced by the given plans."""


@dataclass
class MealPlanService:
    """Service for building meal plans from saved meals."""

    repository: MealPlanRepository
    saved_meal_service: SavedMealService

    def list_plans(self, user_id: int) -> list[MealPlan]:
        """Return the user's plans with inline meal images removed."""
        return [
            replace(
                plan,
                items=[
                    replace(item, meal=without_inline_image(item.meal))
                    for item in plan.items
                ],
            )
            for plan in self.repository.list_plans(user_id)
        ]

    def create_plan(self, user_id: int, name: str) -> MealPlan:
        """Create a plan with a name unique to the user."""
        cleaned = name.strip()
        if not cleaned:
            raise InvalidArgumentError("Plan name cannot be empty")
        if self.repository.find_plan_id_by_name(user_id, cleaned) is not None:
            raise ConflictError(f'A plan named "{cleaned}" already exists.')
        plan = self.repository.create_plan(user_id, cleaned)
        logger.info("Created meal plan %s for user %s", plan.id, user_id)
        return plan

    def delete_plan(self, user_id: int, plan_id: int) -> None:
        if not self.repository.delete_plan(user_id, plan_id):
            raise NotFoundError("Meal plan not found")

    def add_saved_meal(
        self,
        user_id: int,
        plan_id: int,
        saved_meal_id: int,
        metadata: dict[str, object] | None = None,
    ) -> MealPlanItem:
        """Add one of the user's saved meals to one of their plans."""
        saved = self.saved_meal_service.get_meal(user_id, saved_meal_id)
        if saved is None or not self.repository.plan_belongs_to(user_id, plan_id):
            raise NotFoundError("Meal plan or saved meal not found")
        item_metadata = dict(metadata or {})
        item_id = self.repository.create_plan_item(
            user_id, plan_id, saved_meal_id, item_metadata
        )
        return MealPlanItem(
            id=item_id,
            plan_id=plan_id,
            meal=without_inline_image(saved),
            metadata=item_metadata,
        )

    def add_new_meal(
        self,
        user_id: int,
        plan_id: int,
        meal: NutritionInfo,
        metadata: dict[str, object] | None = None,
    ) -> MealPlanItem:
        """Save a meal to the library, then add it to a plan."""
        if not self.repository.plan_belongs_to(user_id, plan_id):
            raise NotFoundError("Meal plan not found")
        saved = self.saved_meal_service.save_meal(user_id, meal)
        return self.add_saved_meal(user_id, plan_id, saved.id, metadata)

    def remove_item(self, user_id: int, item_id: int) -> None:
        if not self.repository.remove_plan_item(user_id, item_id):
            raise NotFoundError("Meal plan item not found")

    def plan_meals(self, user_id: int, plan_ids: list[int]) -> list[NutritionInfo]:
        """Return the meals on the user's given plans."""
        if not plan_ids:
            return []
        return self.repository.list_plan_meals(user_id, plan_ids)
