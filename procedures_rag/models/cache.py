"""
Cache entry and cache statistics models.

Entries are plain dataclasses held in process memory; reports are pydantic
models so they can be returned over the API.

Dependencies: dataclasses, pydantic
System role: Cache data structures
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Generic TTL-bound cache slot."""

    key: str
    payload: T
    created_at: float
    ttl_seconds: float

    def is_valid(self, now: float) -> bool:
        """Entry is valid while its age is below the TTL."""
        return now - self.created_at < self.ttl_seconds


@dataclass(frozen=True)
class EmbeddingEntry:
    """Cached embedding keyed by the hash of its exact input text."""

    content_hash: str
    vector: tuple[float, ...]
    created_at: float
    ttl_seconds: float


@dataclass(frozen=True)
class QueryHistoryEntry:
    """Recent query used only for near-duplicate detection."""

    query: str
    response: str
    timestamp: float


class ConversationMessage(BaseModel):
    """Chat message used in response cache keys."""

    role: str
    content: str


class CacheTierStats(BaseModel):
    """Counters for one cache tier."""

    size: int = 0
    keys: list[str] = Field(default_factory=list)
    hits: int = 0
    misses: int = 0


class CacheStatsReport(BaseModel):
    """Snapshot of all cache tiers."""

    embedding: CacheTierStats
    search: CacheTierStats
    response: CacheTierStats
    document: CacheTierStats
    query_history: int = 0


class SavingsReport(BaseModel):
    """Estimated provider cost saved by cache hits."""

    saved_cost: str
    savings_percent: str
    cache_hits: int
    total_calls: int
