"""
Retrieval module.

Hybrid vector + lexical search with threshold relaxation.
"""

from procedures_rag.core.retrieval.hybrid_search import (
    FusedCandidate,
    HybridSearchEngine,
    fuse_candidates,
    fused_score,
    rank_candidates,
)
from procedures_rag.core.retrieval.relaxation import search_with_relaxation

__all__ = [
    "FusedCandidate",
    "HybridSearchEngine",
    "fuse_candidates",
    "fused_score",
    "rank_candidates",
    "search_with_relaxation",
]
