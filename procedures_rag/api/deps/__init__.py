"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_cache_service,
    get_ingestion_service,
    get_knowledge_index,
    get_retrieval_service,
    get_service_cache,
)

__all__ = [
    "get_cache_service",
    "get_ingestion_service",
    "get_knowledge_index",
    "get_retrieval_service",
    "get_service_cache",
]
