"""
Embedding cache.

Maps the SHA-256 of the exact input text (whitespace-sensitive) to its
embedding. A hash always maps to the same vector while the entry lives; only
TTL expiry removes it. Concurrent misses for the same text may both call the
provider; the last insert wins, which is harmless because embeddings are a
pure function of the text.

Dependencies: asyncio, inspect (stdlib)
System role: Avoid re-embedding identical text
"""

import asyncio
import inspect
import logging
import math
import numbers
from typing import Any, Awaitable, Callable, Sequence, Union

from procedures_rag.core.cache.cache_keys import hash_text
from procedures_rag.core.cache.memory_cache import MemoryCache
from procedures_rag.core.exceptions import CacheBackendError
from procedures_rag.models.cache import EmbeddingEntry

logger = logging.getLogger(__name__)

ComputeFn = Callable[[str], Union[Awaitable[Sequence[float]], Sequence[float]]]

KEY_PREFIX = "emb"


def _is_valid_vector(vector: Any) -> bool:
    if not isinstance(vector, (list, tuple)) or not vector:
        return False
    return all(
        isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)
        for value in vector
    )


class EmbeddingCache:
    """Content-hash keyed embedding store on top of a MemoryCache tier."""

    def __init__(self, tier: MemoryCache[EmbeddingEntry]) -> None:
        """
        Initialize cache over an existing tier.

        Args:
            tier: Storage tier; its default TTL is the embedding TTL
        """
        self._tier = tier

    @staticmethod
    def key_for(text: str) -> str:
        return f"{KEY_PREFIX}:{hash_text(text)}"

    def get(self, text: str) -> list[float] | None:
        """
        Return the cached vector for text.

        Backend failures and malformed entries are logged and reported as a miss.
        """
        key = self.key_for(text)
        try:
            entry = self._tier.get(key)
        except CacheBackendError as e:
            logger.warning(f"{__name__}:get - Embedding cache read failed, treating as miss: {e}")
            return None

        if entry is None:
            logger.debug(f"{__name__}:get - Embedding CACHE MISS")
            return None

        vector = entry.vector if isinstance(entry, EmbeddingEntry) else None
        if not _is_valid_vector(vector):
            logger.warning(
                f"{__name__}:get - Malformed cached embedding under {key} "
                f"(type={type(entry).__name__}), ignoring"
            )
            return None

        logger.debug(f"{__name__}:get - Embedding CACHE HIT")
        return list(vector)

    def put(self, text: str, vector: Sequence[float]) -> None:
        """Store vector for text; write failures are logged, not raised."""
        content_hash = hash_text(text)
        try:
            entry = EmbeddingEntry(
                content_hash=content_hash,
                vector=tuple(float(value) for value in vector),
                created_at=self._tier.now(),
                ttl_seconds=self._tier.default_ttl_seconds,
            )
            self._tier.set(f"{KEY_PREFIX}:{content_hash}", entry)
        except CacheBackendError as e:
            logger.warning(f"{__name__}:put - Embedding cache write failed: {e}")

    async def get_or_compute(self, text: str, compute_fn: ComputeFn) -> list[float]:
        """
        Return the cached vector or compute, store and return it.

        Args:
            text: Exact input text
            compute_fn: Called with text on a miss; may be sync or async

        Returns:
            list[float]: Embedding vector

        Raises:
            Whatever compute_fn raises; provider errors are never swallowed here
        """
        cached = self.get(text)
        if cached is not None:
            return cached

        result = compute_fn(text)
        if inspect.isawaitable(result):
            result = await result

        vector = [float(value) for value in result]
        self.put(text, vector)
        return vector

    async def get_or_compute_many(
        self,
        texts: Sequence[str],
        compute_fn: ComputeFn,
        batch_size: int = 10,
        pause_seconds: float = 0.1,
    ) -> list[list[float]]:
        """
        Embed many texts in fixed-size concurrent batches with a pause between batches.

        Args:
            texts: Texts in output order
            compute_fn: Provider call used on cache misses
            batch_size: Texts embedded concurrently per batch
            pause_seconds: Sleep between batches (rate limiting only)

        Returns:
            list[list[float]]: Vectors aligned with texts
        """
        if batch_size < 1:
            raise ValueError("batch_size must be positive")

        vectors: list[list[float]] = []
        for start in range(0, len(texts), batch_size):
            batch = texts[start : start + batch_size]
            vectors.extend(
                await asyncio.gather(*(self.get_or_compute(text, compute_fn) for text in batch))
            )
            if start + batch_size < len(texts) and pause_seconds > 0:
                await asyncio.sleep(pause_seconds)

        logger.info(f"{__name__}:get_or_compute_many - Embedded {len(vectors)} texts in batches of {batch_size}")
        return vectors
