"""Server-held meal editing sessions."""

import logging
from dataclasses import dataclass
from uuid import UUID, uuid4

from macros_chef.domain.errors import NotFoundError
from macros_chef.domain.nutrition import MealLogEntry, NutritionInfo, SavedMeal
from macros_chef.services.aggregator import NutritionAggregator
from macros_chef.services.meals import MealLogService, SavedMealService
from macros_chef.services.session_store import SessionStore

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 3600


@dataclass
class EditSession:
    """A working copy of a meal bound to one user."""

    id: UUID
    user_id: int
    aggregator: NutritionAggregator
    source: str | None = None

    @property
    def meal(self) -> NutritionInfo:
        return self.aggregator.meal

    @property
    def is_dirty(self) -> bool:
        return self.aggregator.is_dirty


@dataclass
class EditSessionService:
    """Keeps one aggregator per session and persists committed meals."""

    store: SessionStore
    saved_meal_service: SavedMealService
    meal_log_service: MealLogService
    ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS

    def start(
        self, user_id: int, meal: NutritionInfo, source: str | None = None
    ) -> EditSession:
        """Open a session over a meal, remembering where it was saved from."""
        session = EditSession(
            id=uuid4(),
            user_id=user_id,
            aggregator=NutritionAggregator(meal),
            source=source,
        )
        self._store(session)
        return session

    def get(self, user_id: int, session_id: UUID) -> EditSession:
        """Return a live session owned by the user."""
        session = self.store.get(_session_key(session_id))
        if not isinstance(session, EditSession) or session.user_id != user_id:
            raise NotFoundError("Edit session not found")
        return session

    def rescale(
        self, user_id: int, session_id: UUID, index: int, new_weight_grams: float
    ) -> EditSession:
        """Rescale one ingredient and refresh the session TTL."""
        session = self.get(user_id, session_id)
        session.aggregator.rescale_ingredient(index, new_weight_grams)
        self._store(session)
        return session

    def commit_to_saved(
        self, user_id: int, session_id: UUID, source: str | None = None
    ) -> SavedMeal:
        """Save the working copy to the library and end the session.

        An explicit ``source`` wins over the one the session was opened with.
        """
        session = self.get(user_id, session_id)
        if source is None:
            source = session.source
        saved = self.saved_meal_service.save_meal(
            user_id, session.aggregator.commit(), source
        )
        self.store.pop(_session_key(session_id))
        logger.info("Committed edit session %s to saved meal %s", session_id, saved.id)
        return saved

    def commit_to_log(
        self, user_id: int, session_id: UUID, image: str | None = None
    ) -> MealLogEntry:
        """Log the working copy to the timeline and end the session."""
        session = self.get(user_id, session_id)
        entry = self.meal_log_service.log_meal(
            user_id, session.aggregator.commit(), image
        )
        self.store.pop(_session_key(session_id))
        logger.info("Committed edit session %s to meal log %s", session_id, entry.id)
        return entry

    def discard(self, user_id: int, session_id: UUID) -> None:
        self.get(user_id, session_id)
        self.store.pop(_session_key(session_id))

    def _store(self, session: EditSession) -> None:
        self.store.put(_session_key(session.id), session, self.ttl_seconds)


def _session_key(session_id: UUID) -> str:
    return f"meal-edit:{session_id}"
