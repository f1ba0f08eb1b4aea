"""In-memory TTL cache for LLM responses.

Entries expire ``ttl_seconds`` after they are written. Expired entries are
evicted on read and swept on every write; once ``max_entries`` is reached the
oldest entry is dropped. The cache is per process and is not shared between
workers.
"""

import copy
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class _CacheEntry:
    value: Any
    expires_at: float


class ResponseCache:
    """Key/value cache with a fixed time-to-live and a size cap."""

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialise the cache.

        Args:
            ttl_seconds: Lifetime of each entry. 0 disables caching.
            max_entries: Upper bound on stored entries.
            clock: Monotonic time source, injectable for tests.
        """
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0 and self.max_entries > 0

    def get(self, key: str) -> Any | None:
        """Return a copy of the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return copy.deepcopy(entry.value)

    def _sweep(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]

    def set(self, key: str, value: Any) -> None:
        if not self.enabled:
            return
        now = self._clock()
        self._sweep(now)
        self._entries.pop(key, None)
        # dicts keep insertion order, so the first key is the oldest write
        while len(self._entries) >= self.max_entries:
            del self._entries[next(iter(self._entries))]
        self._entries[key] = _CacheEntry(
            value=copy.deepcopy(value),
            expires_at=now + self.ttl_seconds,
        )

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
