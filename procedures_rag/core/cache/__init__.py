"""
Caching layer.

TTL tiers, canonical cache keys, the embedding cache and near-duplicate
query detection, composed by CacheService.
"""

from procedures_rag.core.cache.cache_keys import canonical_json, create_cache_key, hash_text
from procedures_rag.core.cache.cache_service import CacheService
from procedures_rag.core.cache.embedding_cache import EmbeddingCache
from procedures_rag.core.cache.memory_cache import Clock, MemoryCache
from procedures_rag.core.cache.query_similarity import (
    QuerySimilarityCache,
    normalize_query,
    query_similarity,
)

__all__ = [
    "CacheService",
    "Clock",
    "EmbeddingCache",
    "MemoryCache",
    "QuerySimilarityCache",
    "canonical_json",
    "create_cache_key",
    "hash_text",
    "normalize_query",
    "query_similarity",
]
