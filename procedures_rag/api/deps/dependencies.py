"""
Dependency injection container.

Composition root: builds one instance of each long-lived collaborator
(settings, caches, embedding adapter, corpus index, search engine) and
exposes factory functions for FastAPI dependencies.

Dependencies: procedures_rag.configs, procedures_rag.application, procedures_rag.boundary
System role: DI container for service injection
"""

from procedures_rag.application.services import IngestionService, RetrievalService
from procedures_rag.boundary.corpus.knowledge_index import KnowledgeIndex
from procedures_rag.boundary.embeddings.provider_adapter import EmbeddingProviderAdapter
from procedures_rag.configs import Settings, get_settings
from procedures_rag.core.cache.cache_service import CacheService


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None):
        self._settings = settings
        self._cache_service = None
        self._adapter = None
        self._index = None
        self._engine = None
        self._retrieval_service = None
        self._ingestion_service = None

    @property
    def settings(self) -> Settings:
        """Get application settings."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def cache_service(self) -> CacheService:
        """Get the process-wide cache service."""
        if self._cache_service is None:
            self._cache_service = CacheService(
                settings=self.settings.cache,
                embedding_ttl_seconds=self.settings.embeddings.cache_ttl_minutes * 60,
            )
        return self._cache_service

    @property
    def adapter(self) -> EmbeddingProviderAdapter:
        """Get cached embedding provider adapter."""
        if self._adapter is None:
            from procedures_rag.boundary.embeddings.factory import build_embeddings

            embedding_settings = self.settings.embeddings
            self._adapter = EmbeddingProviderAdapter(
                build_embeddings(embedding_settings),
                max_input_chars=embedding_settings.max_input_chars,
                timeout_seconds=embedding_settings.timeout_seconds,
                provider_name=embedding_settings.provider,
            )
        return self._adapter

    @property
    def index(self) -> KnowledgeIndex:
        """Get the in-process corpus index."""
        if self._index is None:
            self._index = KnowledgeIndex()
        return self._index

    @property
    def engine(self):
        """Get cached hybrid search engine."""
        if self._engine is None:
            from procedures_rag.core.retrieval.hybrid_search import HybridSearchEngine

            self._engine = HybridSearchEngine(self.index, self.settings.retrieval)
        return self._engine

    @property
    def retrieval_service(self) -> RetrievalService:
        """Get cached retrieval service."""
        if self._retrieval_service is None:
            self._retrieval_service = RetrievalService(
                adapter=self.adapter,
                cache_service=self.cache_service,
                engine=self.engine,
                settings=self.settings.retrieval,
            )
        return self._retrieval_service

    @property
    def ingestion_service(self) -> IngestionService:
        """Get cached ingestion service."""
        if self._ingestion_service is None:
            from procedures_rag.core.document_processing import DocumentQualityAnalyzer, SemanticChunker

            self._ingestion_service = IngestionService(
                adapter=self.adapter,
                cache_service=self.cache_service,
                index=self.index,
                analyzer=DocumentQualityAnalyzer(),
                chunker=SemanticChunker(self.settings.chunking),
                settings=self.settings.embeddings,
            )
        return self._ingestion_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._cache_service = None
        self._adapter = None
        self._index = None
        self._engine = None
        self._retrieval_service = None
        self._ingestion_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_retrieval_service() -> RetrievalService:
    """
    Get retrieval service instance.

    Returns:
        RetrievalService: Retrieval service sharing the process-wide caches and index
    """
    return get_service_cache().retrieval_service


def get_ingestion_service() -> IngestionService:
    """
    Get ingestion service instance.

    Returns:
        IngestionService: Ingestion service writing into the shared index
    """
    return get_service_cache().ingestion_service


def get_cache_service() -> CacheService:
    """Get the process-wide cache service."""
    return get_service_cache().cache_service


def get_knowledge_index() -> KnowledgeIndex:
    """Get the in-process corpus index."""
    return get_service_cache().index
