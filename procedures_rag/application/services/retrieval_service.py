"""
Retrieval service orchestrator.

Coordinates query embedding, the search cache and the hybrid search engine,
and exposes the response cache to the answer-generation collaborator.

Dependencies: procedures_rag.boundary.embeddings, procedures_rag.core.cache, procedures_rag.core.retrieval
System role: Retrieval orchestration
"""

import logging
from typing import Any, Sequence

from procedures_rag.boundary.embeddings.provider_adapter import EmbeddingProviderAdapter
from procedures_rag.configs.retrieval import RetrievalSettings
from procedures_rag.core.cache.cache_service import CacheService
from procedures_rag.core.exceptions import ProcedureSearchException
from procedures_rag.core.retrieval.hybrid_search import HybridSearchEngine
from procedures_rag.models.cache import ConversationMessage
from procedures_rag.models.search import SearchMode, SearchResult
from procedures_rag.observability.log_utils import log_with_context, preview

logger = logging.getLogger(__name__)


class RetrievalService:
    """
    Retrieval service orchestrator.

    Query flow: search cache -> embedding cache / provider -> search engine.
    Only non-empty result lists are cached so a later corpus update is
    picked up immediately for queries that previously found nothing.
    """

    def __init__(
        self,
        adapter: EmbeddingProviderAdapter,
        cache_service: CacheService,
        engine: HybridSearchEngine,
        settings: RetrievalSettings | None = None,
    ) -> None:
        """
        Initialize retrieval service.

        Args:
            adapter: Embedding provider adapter
            cache_service: Process-wide cache service
            engine: Hybrid search engine over the corpus index
            settings: Default limit and thresholds
        """
        self.adapter = adapter
        self.cache_service = cache_service
        self.engine = engine
        self.settings = settings or RetrievalSettings()

    async def embed_query(self, query: str) -> list[float]:
        """
        Embed a query through the embedding cache.

        Raises:
            ProviderError: Provider failure on a cache miss
            ProviderTimeoutError: Provider exceeded its deadline on a cache miss
        """
        return await self.cache_service.embeddings.get_or_compute(query, self.adapter.embed)

    async def search(
        self,
        query: str,
        limit: int | None = None,
        threshold: float | None = None,
        mode: SearchMode = SearchMode.HYBRID,
    ) -> list[SearchResult]:
        """
        Retrieve snippets for a question.

        Args:
            query: Free-text question
            limit: Maximum results (default from settings)
            threshold: Score floor (default depends on mode)
            mode: Hybrid or pure vector ranking

        Returns:
            list[SearchResult]: Ranked snippets, empty when nothing qualifies or retrieval failed
        """
        limit = self.settings.default_limit if limit is None else limit
        if threshold is None:
            threshold = (
                self.settings.vector_threshold if mode is SearchMode.VECTOR else self.settings.hybrid_threshold
            )

        cached = self.cache_service.get_search(query, threshold, limit, mode.value)
        if cached is not None:
            logger.info(f"{__name__}:search - Search CACHE HIT for '{preview(query)}'")
            return cached

        try:
            embedding = await self.embed_query(query)
        except ProcedureSearchException as e:
            logger.error(f"{__name__}:search - Query embedding failed, returning no context: {e}")
            return []

        if mode is SearchMode.VECTOR:
            results = await self.engine.vector_search(embedding, limit, threshold)
        else:
            results = await self.engine.search(embedding, query, limit, threshold)

        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:search - Retrieved {len(results)} results",
            mode=mode.value,
            limit=limit,
            threshold=threshold,
        )
        if results:
            self.cache_service.set_search(query, threshold, limit, results, mode.value)
        return results

    def lookup_response(
        self,
        query: str,
        messages: Sequence[ConversationMessage | dict[str, Any]] = (),
        documents: Sequence[Any] = (),
        model: str = "",
    ) -> str | None:
        """Cached answer for the conversation, or a near-duplicate question's answer."""
        return self.cache_service.lookup_response(query, messages, documents, model)

    def remember_response(
        self,
        query: str,
        response: str,
        messages: Sequence[ConversationMessage | dict[str, Any]] = (),
        documents: Sequence[Any] = (),
        model: str = "",
    ) -> None:
        self.cache_service.store_response(query, response, messages, documents, model)
