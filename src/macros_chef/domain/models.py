"""Domain models for the meal coaching API."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """The user identified by a verified bearer token."""

    id: int
    email: str | None
