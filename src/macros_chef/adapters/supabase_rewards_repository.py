"""Supabase repository for rewards balances and the points ledger."""

from dataclasses import dataclass

from supabase import Client

from macros_chef.adapters.supabase_rows import parse_timestamp
from macros_chef.domain.rewards import RewardsBalance, RewardsEntry
from macros_chef.services.rewards import RewardsRepository, tier_for_points


@dataclass
class SupabaseRewardsRepository(RewardsRepository):
    """Supabase implementation for rewards."""

    client: Client

    def get_balance(self, user_id: int) -> RewardsBalance | None:
        """Return the stored balance for a user."""
        response = (
            self.client.table("rewards_balances")
            .select("points_total, points_available, tier")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_balance(response.data[0])

    def award_points(
        self,
        user_id: int,
        event_type: str,
        points_delta: int,
        metadata: dict[str, object],
    ) -> RewardsBalance:
        """Run the ``award_points`` database function in a single transaction."""
        response = self.client.rpc(
            "award_points",
            {
                "p_user_id": user_id,
                "p_event_type": event_type,
                "p_points": points_delta,
                "p_metadata": metadata,
            },
        ).execute()
        rows = response.data
        if isinstance(rows, dict):
            rows = [rows]
        if not rows:
            raise RuntimeError("Failed to award points")
        return _parse_balance(rows[0])

    def list_ledger(self, user_id: int, limit: int) -> list[RewardsEntry]:
        """Return the newest ledger entries."""
        response = (
            self.client.table("rewards_ledger")
            .select("entry_id, event_type, points_delta, metadata, created_at")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]


def _parse_balance(row: dict[str, object]) -> RewardsBalance:
    points_total = int(row.get("points_total") or 0)
    return RewardsBalance(
        points_total=points_total,
        points_available=int(row.get("points_available") or 0),
        tier=str(row.get("tier") or tier_for_points(points_total)),
    )


def _parse_entry(row: dict[str, object]) -> RewardsEntry:
    return RewardsEntry(
        entry_id=int(row["entry_id"]),
        event_type=str(row.get("event_type", "")),
        points_delta=int(row.get("points_delta", 0)),
        created_at=parse_timestamp(row.get("created_at")),
        metadata=dict(row.get("metadata") or {}),
    )
