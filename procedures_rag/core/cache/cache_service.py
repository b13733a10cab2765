"""
Multi-tier query/response cache service.

One instance per process, built by the composition root and passed to every
caller. Holds four independent TTL tiers (search results, generated
responses, embeddings, processed document sets) plus the near-duplicate query
history. All tier access fails open: a CacheBackendError is logged and a read is
treated as a miss.

Dependencies: procedures_rag.core.cache, procedures_rag.configs
System role: Process-local cache layer in front of embedding and search
"""

import logging
import time
from typing import Any, Sequence

from procedures_rag.configs.cache import CacheSettings
from procedures_rag.core.cache.cache_keys import create_cache_key
from procedures_rag.core.cache.embedding_cache import EmbeddingCache
from procedures_rag.core.cache.memory_cache import Clock, MemoryCache
from procedures_rag.core.cache.query_similarity import QuerySimilarityCache
from procedures_rag.core.exceptions import CacheBackendError
from procedures_rag.models.cache import (
    CacheStatsReport,
    ConversationMessage,
    EmbeddingEntry,
    SavingsReport,
)
from procedures_rag.models.search import SearchResult

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_TTL_SECONDS = 7 * 24 * 60 * 60


def _document_fingerprint(documents: Sequence[Any]) -> list[dict[str, Any]]:
    """Reduce documents used for an answer to sorted {id, similarity} pairs."""
    pairs = []
    for document in documents:
        if isinstance(document, SearchResult):
            pairs.append({"id": document.metadata.id, "similarity": document.similarity})
        else:
            pairs.append({"id": document.get("id"), "similarity": document.get("similarity")})
    return sorted(pairs, key=lambda pair: (str(pair["id"]), pair["similarity"] or 0.0))


def _conversation(messages: Sequence[ConversationMessage | dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        message.model_dump() if isinstance(message, ConversationMessage) else dict(message)
        for message in messages
    ]


class CacheService:
    """Search, response, embedding and document caches with near-duplicate reuse."""

    def __init__(
        self,
        settings: CacheSettings | None = None,
        embedding_ttl_seconds: float = DEFAULT_EMBEDDING_TTL_SECONDS,
        clock: Clock = time.time,
    ) -> None:
        """
        Initialize all cache tiers.

        Args:
            settings: TTLs and near-duplicate configuration
            embedding_ttl_seconds: TTL of the embedding tier
            clock: Shared time source, injectable for deterministic tests
        """
        self.settings = settings or CacheSettings()
        self._clock = clock

        self.search_cache: MemoryCache[tuple[SearchResult, ...]] = MemoryCache(
            "search", self.settings.search_ttl_minutes * 60, clock
        )
        self.response_cache: MemoryCache[str] = MemoryCache(
            "response", self.settings.response_ttl_minutes * 60, clock
        )
        self.document_cache: MemoryCache[list[Any]] = MemoryCache(
            "document", self.settings.document_ttl_minutes * 60, clock
        )
        self.embedding_tier: MemoryCache[EmbeddingEntry] = MemoryCache(
            "embedding", embedding_ttl_seconds, clock
        )
        self.embeddings = EmbeddingCache(self.embedding_tier)
        self.query_history = QuerySimilarityCache(
            max_entries=self.settings.query_history_size,
            threshold=self.settings.near_duplicate_threshold,
            window_seconds=self.settings.near_duplicate_window_minutes * 60,
            clock=clock,
        )

    def _safe_get(self, tier: MemoryCache, key: str) -> Any | None:
        try:
            return tier.get(key)
        except CacheBackendError as e:
            logger.warning(f"{__name__}:_safe_get - {tier.name} cache read failed, treating as miss: {e}")
            return None

    def _safe_set(self, tier: MemoryCache, key: str, payload: Any) -> None:
        try:
            tier.set(key, payload)
        except CacheBackendError as e:
            logger.warning(f"{__name__}:_safe_set - {tier.name} cache write failed: {e}")

    # Search results

    @staticmethod
    def search_key(query: str, threshold: float, count: int, mode: str = "hybrid") -> str:
        return create_cache_key(
            "search", {"query": query, "threshold": threshold, "count": count, "mode": mode}
        )

    def get_search(
        self, query: str, threshold: float, count: int, mode: str = "hybrid"
    ) -> list[SearchResult] | None:
        cached = self._safe_get(self.search_cache, self.search_key(query, threshold, count, mode))
        if cached is not None:
            logger.debug(f"{__name__}:get_search - Search CACHE HIT")
            return list(cached)
        return None

    def set_search(
        self,
        query: str,
        threshold: float,
        count: int,
        results: list[SearchResult],
        mode: str = "hybrid",
    ) -> None:
        self._safe_set(self.search_cache, self.search_key(query, threshold, count, mode), tuple(results))
        logger.debug(f"{__name__}:set_search - Search cached ({len(results)} results)")

    # Generated responses

    @staticmethod
    def response_key(
        messages: Sequence[ConversationMessage | dict[str, Any]],
        documents: Sequence[Any],
        model: str,
    ) -> str:
        conversation_hash = create_cache_key("conv", _conversation(messages))
        documents_hash = create_cache_key("docs", _document_fingerprint(documents))
        return f"resp:{conversation_hash}:{documents_hash}:{model}"

    def get_response(
        self,
        messages: Sequence[ConversationMessage | dict[str, Any]],
        documents: Sequence[Any],
        model: str,
    ) -> str | None:
        return self._safe_get(self.response_cache, self.response_key(messages, documents, model))

    def set_response(
        self,
        messages: Sequence[ConversationMessage | dict[str, Any]],
        documents: Sequence[Any],
        model: str,
        response: str,
    ) -> None:
        self._safe_set(self.response_cache, self.response_key(messages, documents, model), response)

    def lookup_response(
        self,
        query: str,
        messages: Sequence[ConversationMessage | dict[str, Any]] = (),
        documents: Sequence[Any] = (),
        model: str = "",
    ) -> str | None:
        """
        Find a reusable answer: exact response key first, then near-duplicate history.

        Args:
            query: Latest user question
            messages: Conversation so far
            documents: Documents the answer would be grounded on
            model: Generating model name

        Returns:
            str | None: Cached answer, None when generation is required
        """
        exact = self.get_response(messages, documents, model)
        if exact is not None:
            logger.info(f"{__name__}:lookup_response - Response CACHE HIT")
            return exact

        try:
            return self.query_history.find_similar_query(query)
        except Exception as e:
            logger.warning(f"{__name__}:lookup_response - Query history lookup failed: {e}")
            return None

    def store_response(
        self,
        query: str,
        response: str,
        messages: Sequence[ConversationMessage | dict[str, Any]] = (),
        documents: Sequence[Any] = (),
        model: str = "",
    ) -> None:
        """Record an answer in both the exact response tier and the query history."""
        self.set_response(messages, documents, model, response)
        self.query_history.add_query(query, response)

    # Processed document sets

    def get_documents(self, doc_ids: Sequence[str]) -> list[Any] | None:
        return self._safe_get(self.document_cache, create_cache_key("docs", sorted(doc_ids)))

    def set_documents(self, doc_ids: Sequence[str], documents: list[Any]) -> None:
        self._safe_set(self.document_cache, create_cache_key("docs", sorted(doc_ids)), documents)

    # Management

    def stats(self) -> CacheStatsReport:
        return CacheStatsReport(
            embedding=self.embedding_tier.stats(),
            search=self.search_cache.stats(),
            response=self.response_cache.stats(),
            document=self.document_cache.stats(),
            query_history=len(self.query_history),
        )

    def clear_search(self) -> None:
        """Drop cached search results after the corpus changes."""
        self.search_cache.clear()
        logger.info(f"{__name__}:clear_search - Search cache cleared")

    def clear_all(self) -> None:
        for tier in (self.embedding_tier, self.search_cache, self.response_cache, self.document_cache):
            tier.clear()
        self.query_history.clear()
        logger.info(f"{__name__}:clear_all - All caches cleared")

    def savings(self) -> SavingsReport:
        """Savings estimate from the embedding and response tier counters."""
        hits = self.embedding_tier.stats().hits + self.response_cache.stats().hits
        misses = self.embedding_tier.stats().misses + self.response_cache.stats().misses
        return self.calculate_savings(hits, misses, self.settings.avg_cost_per_call)

    @staticmethod
    def calculate_savings(
        cache_hits: int,
        missed_calls: int,
        avg_cost_per_call: float = 0.002,
    ) -> SavingsReport:
        """
        Estimate cost saved by cache hits.

        Args:
            cache_hits: Calls served from cache
            missed_calls: Calls that reached the provider
            avg_cost_per_call: Provider cost per call

        Returns:
            SavingsReport: Saved cost (4 dp) and savings percent (1 dp) as strings
        """
        saved_cost = cache_hits * avg_cost_per_call
        total_possible_cost = (cache_hits + missed_calls) * avg_cost_per_call
        savings_percent = (saved_cost / total_possible_cost) * 100 if total_possible_cost > 0 else 0.0

        return SavingsReport(
            saved_cost=f"{saved_cost:.4f}",
            savings_percent=f"{savings_percent:.1f}",
            cache_hits=cache_hits,
            total_calls=cache_hits + missed_calls,
        )
