"""
Domain and API models.

Dependencies: pydantic
"""

from procedures_rag.models.analysis import (
    AnalysisSummary,
    ChunkingPriority,
    DocumentAnalysis,
    EmbeddingQuality,
)
from procedures_rag.models.cache import (
    CacheEntry,
    CacheStatsReport,
    CacheTierStats,
    ConversationMessage,
    EmbeddingEntry,
    QueryHistoryEntry,
    SavingsReport,
)
from procedures_rag.models.chunk import Chunk, ChunkMetadata
from procedures_rag.models.document import DocumentMetadata, KnowledgeDocument
from procedures_rag.models.ingestion import IngestionReport
from procedures_rag.models.search import (
    SearchMode,
    SearchRequest,
    SearchResult,
    SearchResultMetadata,
)

__all__ = [
    "AnalysisSummary",
    "CacheEntry",
    "CacheStatsReport",
    "CacheTierStats",
    "Chunk",
    "ChunkMetadata",
    "ChunkingPriority",
    "ConversationMessage",
    "DocumentAnalysis",
    "DocumentMetadata",
    "EmbeddingEntry",
    "EmbeddingQuality",
    "IngestionReport",
    "KnowledgeDocument",
    "QueryHistoryEntry",
    "SavingsReport",
    "SearchMode",
    "SearchRequest",
    "SearchResult",
    "SearchResultMetadata",
]
