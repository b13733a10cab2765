"""
In-memory TTL cache tier.

Expiry is evaluated lazily on lookup; there is no background sweep.
Per-key insert and overwrite are single dict operations, so concurrent
writers to the same key never corrupt the store (last write wins).

Dependencies: time (stdlib)
System role: Storage primitive behind every cache tier
"""

import time
from typing import Callable, Generic, TypeVar

from procedures_rag.core.exceptions import CacheBackendError
from procedures_rag.models.cache import CacheEntry, CacheTierStats

T = TypeVar("T")

Clock = Callable[[], float]


class MemoryCache(Generic[T]):
    """Keyed store of CacheEntry objects with a per-tier default TTL."""

    def __init__(self, name: str, default_ttl_seconds: float, clock: Clock = time.time) -> None:
        """
        Initialize an empty cache tier.

        Args:
            name: Tier name used in stats and logs
            default_ttl_seconds: TTL applied when set() is called without one
            clock: Returns the current time in seconds
        """
        if default_ttl_seconds <= 0:
            raise ValueError("default_ttl_seconds must be positive")

        self.name = name
        self.default_ttl_seconds = default_ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def now(self) -> float:
        try:
            return self._clock()
        except Exception as e:
            raise CacheBackendError(f"{self.name} cache clock failed: {e}", tier=self.name) from e

    def get_entry(self, key: str) -> CacheEntry[T] | None:
        """
        Return the live entry for key, evicting it if expired.

        Raises:
            CacheBackendError: When the store or clock cannot serve the read
        """
        try:
            entry = self._entries.get(key)
            valid = entry is not None and entry.is_valid(self._clock())
        except Exception as e:
            raise CacheBackendError(f"{self.name} cache read failed: {e}", tier=self.name) from e

        if entry is None:
            self._misses += 1
            return None

        if not valid:
            self._entries.pop(key, None)
            self._misses += 1
            return None

        self._hits += 1
        return entry

    def get(self, key: str) -> T | None:
        """Return the payload for key, or None on miss or expiry."""
        entry = self.get_entry(key)
        return None if entry is None else entry.payload

    def set(self, key: str, payload: T, ttl_seconds: float | None = None) -> None:
        """
        Store payload under key with a fresh timestamp.

        Raises:
            CacheBackendError: When the store or clock cannot serve the write
        """
        try:
            self._entries[key] = CacheEntry(
                key=key,
                payload=payload,
                created_at=self._clock(),
                ttl_seconds=ttl_seconds if ttl_seconds is not None else self.default_ttl_seconds,
            )
        except Exception as e:
            raise CacheBackendError(f"{self.name} cache write failed: {e}", tier=self.name) from e

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop all entries and reset counters."""
        self._entries.clear()
        self._hits = 0
        self._misses = 0

    def stats(self) -> CacheTierStats:
        return CacheTierStats(
            size=len(self._entries),
            keys=list(self._entries),
            hits=self._hits,
            misses=self._misses,
        )
