"""Rewards points ledger and tiers."""

import logging
from dataclasses import dataclass
from typing import Protocol

from macros_chef.domain.rewards import RewardsBalance, RewardsEntry, RewardsSummary

logger = logging.getLogger(__name__)

MEAL_SAVED_EVENT = "meal.saved"
MEAL_SAVED_POINTS = 10
MEAL_LOGGED_EVENT = "meal_photo.logged"
MEAL_LOGGED_POINTS = 50
HISTORY_LIMIT = 50

_TIERS = (
    (5000, "Platinum"),
    (1000, "Gold"),
    (200, "Silver"),
)
DEFAULT_TIER = "Bronze"


class RewardsRepository(Protocol):
    """Persistence interface for balances and the points ledger."""

    def get_balance(self, user_id: int) -> RewardsBalance | None:
        """Return the stored balance for a user, if any."""

    def award_points(
        self,
        user_id: int,
        event_type: str,
        points_delta: int,
        metadata: dict[str, object],
    ) -> RewardsBalance:
        """Atomically append a ledger entry and apply it to the balance.

        Either both the entry and the updated balance are stored, or neither.
        Returns the balance after the award with its recomputed tier.
        """

    def list_ledger(self, user_id: int, limit: int) -> list[RewardsEntry]:
        """Return the most recent ledger entries, newest first."""


def tier_for_points(points_total: int) -> str:
    """Return the tier name for a lifetime points total."""
    for threshold, tier in _TIERS:
        if points_total >= threshold:
            return tier
    return DEFAULT_TIER


@dataclass
class RewardsService:
    """Service that awards points and reports balances."""

    repository: RewardsRepository

    def award_points(
        self,
        user_id: int,
        event_type: str,
        points: int,
        metadata: dict[str, object] | None = None,
    ) -> RewardsBalance:
        """Record an award in the ledger and update the balance in one step."""
        balance = self.repository.award_points(
            user_id, event_type, points, metadata or {}
        )
        logger.info(
            "Awarded %s points to user %s for %s", points, user_id, event_type
        )
        return balance

    def try_award_points(
        self,
        user_id: int,
        event_type: str,
        points: int,
        metadata: dict[str, object] | None = None,
    ) -> None:
        """Award points, logging instead of raising on failure."""
        try:
            self.award_points(user_id, event_type, points, metadata)
        except Exception:
            logger.exception(
                "Failed to award %s points to user %s", event_type, user_id
            )

    def get_summary(self, user_id: int) -> RewardsSummary:
        """Return the balance and recent history for a user."""
        balance = self.repository.get_balance(user_id) or RewardsBalance(
            points_total=0, points_available=0, tier=DEFAULT_TIER
        )
        history = self.repository.list_ledger(user_id, HISTORY_LIMIT)
        return RewardsSummary(balance=balance, history=history)
