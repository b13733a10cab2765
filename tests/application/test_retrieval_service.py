"""Tests for the retrieval service orchestrator."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from procedures_rag.application.services.retrieval_service import RetrievalService
from procedures_rag.core.cache.cache_service import CacheService
from procedures_rag.core.exceptions import ProviderError, ProviderTimeoutError
from procedures_rag.models.search import SearchMode, SearchResult, SearchResultMetadata

QUERY = "What is the minimum wake turbulence separation?"


def _result(doc_id: str, similarity: float = 0.8) -> SearchResult:
    return SearchResult(text=f"text {doc_id}", metadata=SearchResultMetadata(id=doc_id), similarity=similarity)


@pytest.fixture
def mock_adapter() -> MagicMock:
    adapter = MagicMock()
    adapter.embed = AsyncMock(return_value=[1.0, 0.0, 0.0])
    return adapter


@pytest.fixture
def mock_engine() -> MagicMock:
    engine = MagicMock()
    engine.search = AsyncMock(return_value=[_result("a"), _result("b", 0.6)])
    engine.vector_search = AsyncMock(return_value=[_result("v", 0.9)])
    return engine


@pytest.fixture
def service(mock_adapter: MagicMock, cache_service: CacheService, mock_engine: MagicMock) -> RetrievalService:
    return RetrievalService(mock_adapter, cache_service, mock_engine)


class TestSearch:
    """Query flow through caches and engine."""

    @pytest.mark.asyncio
    async def test_hybrid_search_defaults(self, service: RetrievalService, mock_engine: MagicMock) -> None:
        """Should search in hybrid mode with limit 10 and threshold 0.5."""
        results = await service.search(QUERY)

        assert [result.metadata.id for result in results] == ["a", "b"]
        mock_engine.search.assert_awaited_once_with([1.0, 0.0, 0.0], QUERY, 10, 0.5)

    @pytest.mark.asyncio
    async def test_second_search_served_from_cache(
        self,
        service: RetrievalService,
        mock_adapter: MagicMock,
        mock_engine: MagicMock,
    ) -> None:
        """Should not embed or search again for an identical request."""
        first = await service.search(QUERY, limit=5, threshold=0.6)
        second = await service.search(QUERY, limit=5, threshold=0.6)

        assert first == second
        assert mock_adapter.embed.await_count == 1
        assert mock_engine.search.await_count == 1

    @pytest.mark.asyncio
    async def test_embedding_reused_across_search_keys(
        self,
        service: RetrievalService,
        mock_adapter: MagicMock,
        mock_engine: MagicMock,
    ) -> None:
        """Should search again for a new limit but reuse the cached embedding."""
        await service.search(QUERY, limit=5)
        await service.search(QUERY, limit=3)

        assert mock_engine.search.await_count == 2
        assert mock_adapter.embed.await_count == 1

    @pytest.mark.asyncio
    async def test_empty_results_are_not_cached(self, service: RetrievalService, mock_engine: MagicMock) -> None:
        """Should query the engine again after an empty result."""
        mock_engine.search.return_value = []

        assert await service.search(QUERY) == []
        assert await service.search(QUERY) == []
        assert mock_engine.search.await_count == 2

    @pytest.mark.asyncio
    async def test_vector_mode(self, service: RetrievalService, mock_engine: MagicMock) -> None:
        """Should use pure vector search with the 0.7 default threshold."""
        results = await service.search(QUERY, mode=SearchMode.VECTOR)

        assert [result.metadata.id for result in results] == ["v"]
        mock_engine.vector_search.assert_awaited_once_with([1.0, 0.0, 0.0], 10, 0.7)
        mock_engine.search.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_modes_do_not_share_cache_entries(self, service: RetrievalService, mock_engine: MagicMock) -> None:
        """Should keep hybrid and vector results under separate keys."""
        await service.search(QUERY, threshold=0.7)
        await service.search(QUERY, threshold=0.7, mode=SearchMode.VECTOR)

        assert mock_engine.search.await_count == 1
        assert mock_engine.vector_search.await_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [ProviderError("quota", provider="google"), ProviderTimeoutError("slow", timeout_seconds=30)],
    )
    async def test_provider_failure_returns_empty(
        self,
        service: RetrievalService,
        mock_adapter: MagicMock,
        mock_engine: MagicMock,
        error: Exception,
    ) -> None:
        """Should degrade to no context when the query cannot be embedded."""
        mock_adapter.embed.side_effect = error

        assert await service.search(QUERY) == []
        mock_engine.search.assert_not_awaited()


class TestResponses:
    """Response cache passthrough."""

    def test_remember_then_lookup(self, service: RetrievalService) -> None:
        """Should return the stored answer for the same conversation."""
        messages = [{"role": "user", "content": QUERY}]
        service.remember_response(QUERY, "Apply 5 miles.", messages=messages, model="gemini")

        assert service.lookup_response(QUERY, messages=messages, model="gemini") == "Apply 5 miles."

    def test_lookup_uses_query_history(self, service: RetrievalService) -> None:
        """Should reuse an answer for the same question in a different conversation."""
        service.remember_response(QUERY, "Apply 5 miles.", messages=[{"role": "user", "content": QUERY}])

        assert service.lookup_response(QUERY, messages=[{"role": "user", "content": "hello"}]) == "Apply 5 miles."

    def test_lookup_miss(self, service: RetrievalService) -> None:
        assert service.lookup_response("Unrelated question about frequencies") is None
