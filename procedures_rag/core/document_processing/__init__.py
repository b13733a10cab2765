"""
Document processing pipeline.

Quality analysis and semantic chunking of knowledge documents.
"""

from procedures_rag.core.document_processing.boundaries import SEMANTIC_BOUNDARIES, SemanticBoundary, match_boundary
from procedures_rag.core.document_processing.quality_analyzer import (
    DocumentQualityAnalyzer,
    analyze_knowledge_base,
    classify,
    summarize,
)
from procedures_rag.core.document_processing.semantic_chunker import (
    SemanticChunker,
    SemanticSection,
    chunk_knowledge_base,
)

__all__ = [
    "SEMANTIC_BOUNDARIES",
    "DocumentQualityAnalyzer",
    "SemanticBoundary",
    "SemanticChunker",
    "SemanticSection",
    "analyze_knowledge_base",
    "chunk_knowledge_base",
    "classify",
    "match_boundary",
    "summarize",
]
