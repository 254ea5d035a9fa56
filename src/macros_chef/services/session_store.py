"""Process-local storage for short-lived edit sessions."""

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

DEFAULT_MAX_ENTRIES = 10_000


class SessionStore(Protocol):
    """Keyed storage whose entries expire after a TTL."""

    def get(self, key: str) -> object | None:
        """Return a live value, or None when missing or expired."""

    def put(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a value and restart its TTL."""

    def pop(self, key: str) -> object | None:
        """Remove a value and return it if it was still live."""


@dataclass
class MemorySessionStore(SessionStore):
    """Expiring store held in process memory.

    Entries are ordered by their last ``put``; once ``max_entries`` is
    exceeded the least recently stored entry is evicted.
    """

    max_entries: int = DEFAULT_MAX_ENTRIES
    clock: Callable[[], float] = time.monotonic
    _entries: OrderedDict[str, tuple[float, object]] = field(
        default_factory=OrderedDict, init=False, repr=False
    )

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self.clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def put(self, key: str, value: object, ttl_seconds: int) -> None:
        self._entries.pop(key, None)
        self._entries[key] = (self.clock() + ttl_seconds, value)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def pop(self, key: str) -> object | None:
        value = self.get(key)
        self._entries.pop(key, None)
        return value

    def __len__(self) -> int:
        return len(self._entries)
