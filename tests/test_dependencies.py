"""
Test suite for dependency injection container.

Tests the ServiceCache composition root and the FastAPI factory functions.
Uses the deterministic fake embedding provider so no credentials are needed.

System role: Verification of DI container
"""

from unittest.mock import patch

import pytest

from procedures_rag.api.deps import (
    get_cache_service,
    get_knowledge_index,
    get_retrieval_service,
)
from procedures_rag.api.deps.dependencies import ServiceCache
from procedures_rag.application.services import IngestionService, RetrievalService
from procedures_rag.configs import Settings
from procedures_rag.configs.embeddings import EmbeddingSettings
from procedures_rag.core.retrieval.hybrid_search import HybridSearchEngine


@pytest.fixture
def service_cache() -> ServiceCache:
    """Provide a container configured for the fake embedding provider."""
    return ServiceCache(Settings(embeddings=EmbeddingSettings(provider="fake", dimension=8)))


class TestServiceCache:
    """Test suite for ServiceCache."""

    def test_retrieval_service_is_wired(self, service_cache: ServiceCache) -> None:
        """Test retrieval service shares the cache service and engine."""
        service = service_cache.retrieval_service

        assert isinstance(service, RetrievalService)
        assert service.cache_service is service_cache.cache_service
        assert isinstance(service.engine, HybridSearchEngine)
        assert service.engine.index is service_cache.index

    def test_ingestion_service_writes_to_shared_index(self, service_cache: ServiceCache) -> None:
        """Test ingestion and retrieval share one index and adapter."""
        ingestion = service_cache.ingestion_service

        assert isinstance(ingestion, IngestionService)
        assert ingestion.index is service_cache.retrieval_service.engine.index
        assert ingestion.adapter is service_cache.retrieval_service.adapter

    def test_instances_are_cached(self, service_cache: ServiceCache) -> None:
        """Test repeated access returns the same instance."""
        assert service_cache.retrieval_service is service_cache.retrieval_service
        assert service_cache.cache_service is service_cache.cache_service

    def test_adapter_uses_embedding_settings(self, service_cache: ServiceCache) -> None:
        assert service_cache.adapter.provider_name == "fake"
        assert service_cache.adapter.timeout_seconds == 30.0

    def test_clear_rebuilds_instances(self, service_cache: ServiceCache) -> None:
        """Test clear drops cached instances."""
        first = service_cache.index
        service_cache.clear()

        assert service_cache.index is not first


class TestFactoryFunctions:
    """Test suite for FastAPI dependency factories."""

    def test_factories_read_global_cache(self, service_cache: ServiceCache) -> None:
        """Test factory functions resolve through the global service cache."""
        with patch("procedures_rag.api.deps.dependencies._service_cache", service_cache):
            assert get_retrieval_service() is service_cache.retrieval_service
            assert get_cache_service() is service_cache.cache_service
            assert get_knowledge_index() is service_cache.index
