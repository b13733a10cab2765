"""
Near-duplicate query detection.

Keeps a bounded, most-recent-first history of answered queries. A new query
whose normalized edit-distance similarity to a recent entry exceeds the
threshold reuses that entry's response. Best effort only: the history is
never an authoritative lookup.

Dependencies: rapidfuzz, collections (stdlib)
System role: Fuzzy response cache layer
"""

import logging
import time
from collections import deque

from rapidfuzz.distance import Levenshtein

from procedures_rag.core.cache.memory_cache import Clock
from procedures_rag.models.cache import QueryHistoryEntry

logger = logging.getLogger(__name__)


def normalize_query(query: str) -> str:
    return query.lower().strip()


def query_similarity(first: str, second: str) -> float:
    """
    Normalized edit-distance similarity in [0, 1].

    similarity = (max_len - levenshtein) / max_len, and 1.0 for two empty strings.
    """
    longest = max(len(first), len(second))
    if longest == 0:
        return 1.0
    return (longest - Levenshtein.distance(first, second)) / longest


class QuerySimilarityCache:
    """Bounded history of {query, response} used for fuzzy reuse."""

    def __init__(
        self,
        max_entries: int = 100,
        threshold: float = 0.8,
        window_seconds: float = 3600.0,
        clock: Clock = time.time,
    ) -> None:
        """
        Initialize an empty history.

        Args:
            max_entries: History capacity; oldest entries fall off
            threshold: Similarity that must be exceeded to reuse a response
            window_seconds: Maximum age of a reusable entry
            clock: Returns the current time in seconds
        """
        self._history: deque[QueryHistoryEntry] = deque(maxlen=max_entries)
        self.threshold = threshold
        self.window_seconds = window_seconds
        self._clock = clock

    def __len__(self) -> int:
        return len(self._history)

    def find_similar_query(self, query: str) -> str | None:
        """
        Return the response of the most recent near-duplicate query, if any.

        Args:
            query: Incoming query text

        Returns:
            str | None: Cached response or None
        """
        normalized = normalize_query(query)
        now = self._clock()

        # Snapshot so concurrent add_query calls cannot mutate during iteration
        for entry in list(self._history):
            if now - entry.timestamp >= self.window_seconds:
                continue
            similarity = query_similarity(normalized, normalize_query(entry.query))
            if similarity > self.threshold:
                logger.info(f"{__name__}:find_similar_query - Similar query found ({similarity * 100:.1f}% match)")
                return entry.response

        return None

    def add_query(self, query: str, response: str) -> None:
        """Record an answered query at the front of the history."""
        self._history.appendleft(
            QueryHistoryEntry(query=query, response=response, timestamp=self._clock())
        )

    def entries(self) -> list[QueryHistoryEntry]:
        return list(self._history)

    def clear(self) -> None:
        self._history.clear()
