"""Domain models for rewards."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class RewardsBalance:
    """Current points balance and tier."""

    points_total: int
    points_available: int
    tier: str


@dataclass(frozen=True)
class RewardsEntry:
    """A single points ledger entry."""

    entry_id: int
    event_type: str
    points_delta: int
    created_at: datetime | None
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class RewardsSummary:
    """Balance plus recent ledger history."""

    balance: RewardsBalance
    history: list[RewardsEntry]
