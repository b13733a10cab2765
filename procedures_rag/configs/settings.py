"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides the cached factory used by the composition root.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from procedures_rag.configs.base import BaseSettings
from procedures_rag.configs.cache import CacheSettings
from procedures_rag.configs.chunking import ChunkingSettings
from procedures_rag.configs.embeddings import EmbeddingSettings
from procedures_rag.configs.retrieval import RetrievalSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    embeddings: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from procedures_rag.configs import get_settings
        settings = get_settings()
    """
    return Settings()
