"""Saved meal library and meal log services."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol

from macros_chef.domain.nutrition import MealLogEntry, NutritionInfo, SavedMeal
from macros_chef.domain.payloads import strip_data_url
from macros_chef.services.rewards import (
    MEAL_LOGGED_EVENT,
    MEAL_LOGGED_POINTS,
    MEAL_SAVED_EVENT,
    MEAL_SAVED_POINTS,
    RewardsService,
)

logger = logging.getLogger(__name__)


class SavedMealRepository(Protocol):
    """Persistence interface for saved meals."""

    def list_saved_meals(self, user_id: int) -> list[SavedMeal]:
        """Return a user's saved meals, newest first."""

    def get_saved_meal(self, user_id: int, meal_id: int) -> SavedMeal | None:
        """Return a saved meal owned by the user, if present."""

    def create_saved_meal(
        self, user_id: int, meal: NutritionInfo, source: str | None
    ) -> SavedMeal:
        """Persist a meal and return the stored record."""

    def delete_saved_meal(self, user_id: int, meal_id: int) -> bool:
        """Delete a saved meal, returning whether a row was removed."""


class MealLogRepository(Protocol):
    """Persistence interface for the meal timeline."""

    def create_entry(
        self, user_id: int, meal: NutritionInfo, image_base64: str | None
    ) -> MealLogEntry:
        """Persist a meal log entry and return it."""

    def list_entries(self, user_id: int) -> list[MealLogEntry]:
        """Return a user's entries, newest first, without image data."""

    def get_entry(self, user_id: int, entry_id: int) -> MealLogEntry | None:
        """Return one entry with its image as a data URL when present."""


@dataclass
class SavedMealService:
    """Service for the user's saved meal library."""

    repository: SavedMealRepository
    rewards_service: RewardsService

    def list_meals(self, user_id: int) -> list[SavedMeal]:
        """Return saved meals with inline image data removed."""
        meals = self.repository.list_saved_meals(user_id)
        return [without_inline_image(item) for item in meals]

    def get_meal(self, user_id: int, meal_id: int) -> SavedMeal | None:
        return self.repository.get_saved_meal(user_id, meal_id)

    def save_meal(
        self, user_id: int, meal: NutritionInfo, source: str | None = None
    ) -> SavedMeal:
        """Persist a meal to the library and award points."""
        saved = self.repository.create_saved_meal(user_id, meal, source)
        logger.info("Saved meal %s for user %s", saved.id, user_id)
        self.rewards_service.try_award_points(
            user_id,
            MEAL_SAVED_EVENT,
            MEAL_SAVED_POINTS,
            {"savedMealId": saved.id, "mealName": meal.meal_name},
        )
        return saved

    def delete_meal(self, user_id: int, meal_id: int) -> bool:
        return self.repository.delete_saved_meal(user_id, meal_id)


@dataclass
class MealLogService:
    """Service for logging meals to the user's timeline."""

    repository: MealLogRepository
    rewards_service: RewardsService

    def log_meal(
        self, user_id: int, meal: NutritionInfo, image: str | None = None
    ) -> MealLogEntry:
        """Persist a meal with an optional photo and award points.

        ``image`` may be raw base64 or a data URL. When omitted, an inline
        image on the meal itself is used.
        """
        if image is None and meal.image_url and meal.image_url.startswith("data:"):
            image = meal.image_url
        if meal.image_url and meal.image_url.startswith("data:"):
            meal = replace(meal, image_url=None)
        image_base64 = strip_data_url(image) if image else None
        entry = self.repository.create_entry(user_id, meal, image_base64)
        logger.info("Logged meal %s for user %s", entry.id, user_id)
        self.rewards_service.try_award_points(
            user_id,
            MEAL_LOGGED_EVENT,
            MEAL_LOGGED_POINTS,
            {"mealLogId": entry.id, "mealName": meal.meal_name},
        )
        return entry

    def list_entries(self, user_id: int) -> list[MealLogEntry]:
        return self.repository.list_entries(user_id)

    def get_entry(self, user_id: int, entry_id: int) -> MealLogEntry | None:
        return self.repository.get_entry(user_id, entry_id)


def without_inline_image(saved: SavedMeal) -> SavedMeal:
    """Return the saved meal with any inline data-URL image removed."""
    image_url = saved.meal.image_url
    if image_url and image_url.startswith("data:"):
        return replace(saved, meal=replace(saved.meal, image_url=None))
    return saved
