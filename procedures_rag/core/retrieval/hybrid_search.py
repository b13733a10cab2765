"""
Hybrid search engine.

Ranks corpus entries by 0.7 x cosine similarity + 0.3 x lexical rank.
Candidates come from the top 2 x limit of each signal; an entry missing from
one list scores 0 on that signal. An entry qualifies when its fused score
exceeds the threshold or it has any lexical match. Empty result sets trigger
the relaxation ladder. Any failure while searching yields an empty list so a
retrieval problem degrades answer context instead of breaking the conversation.

Dependencies: asyncio, procedures_rag.boundary.corpus
System role: Core ranking for retrieval-augmented answers
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from procedures_rag.boundary.corpus.corpus_schemas import CorpusEntry, CorpusMatch
from procedures_rag.boundary.corpus.knowledge_index import KnowledgeIndex
from procedures_rag.configs.retrieval import RetrievalSettings
from procedures_rag.core.exceptions import ValidationError
from procedures_rag.core.retrieval.relaxation import search_with_relaxation
from procedures_rag.models.search import SearchResult
from procedures_rag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FusedCandidate:
    """Entry with both score components and the fused score."""

    entry: CorpusEntry
    vector_similarity: float
    lexical_rank: float
    score: float

    def to_result(self) -> SearchResult:
        return SearchResult(
            text=self.entry.content,
            metadata=self.entry.metadata,
            similarity=self.score,
            vector_similarity=self.vector_similarity,
            lexical_rank=self.lexical_rank,
        )


def fused_score(vector_similarity: float, lexical_rank: float, vector_weight: float = 0.7, lexical_weight: float = 0.3) -> float:
    return vector_weight * vector_similarity + lexical_weight * lexical_rank


def fuse_candidates(
    vector_matches: list[CorpusMatch],
    lexical_matches: list[CorpusMatch],
    vector_weight: float = 0.7,
    lexical_weight: float = 0.3,
) -> list[FusedCandidate]:
    """
    Union both candidate lists, scoring a missing component as 0.

    Returns:
        list[FusedCandidate]: One candidate per distinct entry id
    """
    entries: dict[str, CorpusEntry] = {}
    vector_scores: dict[str, float] = {}
    lexical_scores: dict[str, float] = {}

    for match in vector_matches:
        entries[match.entry.id] = match.entry
        vector_scores[match.entry.id] = match.score
    for match in lexical_matches:
        entries.setdefault(match.entry.id, match.entry)
        lexical_scores[match.entry.id] = match.score

    candidates = []
    for entry_id, entry in entries.items():
        vector_similarity = vector_scores.get(entry_id, 0.0)
        lexical = lexical_scores.get(entry_id, 0.0)
        candidates.append(
            FusedCandidate(
                entry=entry,
                vector_similarity=vector_similarity,
                lexical_rank=lexical,
                score=fused_score(vector_similarity, lexical, vector_weight, lexical_weight),
            )
        )
    return candidates


def rank_candidates(candidates: list[FusedCandidate], limit: int, threshold: float) -> list[SearchResult]:
    """
    Filter and order fused candidates.

    Keeps candidates whose fused score exceeds threshold or whose lexical rank
    is nonzero, sorted by fused score descending (ties: higher vector
    similarity, then entry id), truncated to limit.
    """
    qualified = [
        candidate for candidate in candidates
        if candidate.score > threshold or candidate.lexical_rank > 0
    ]
    qualified.sort(key=lambda c: (-c.score, -c.vector_similarity, c.entry.id))
    return [candidate.to_result() for candidate in qualified[:limit]]


class HybridSearchEngine:
    """Fused vector + lexical ranking over a KnowledgeIndex."""

    def __init__(self, index: KnowledgeIndex, settings: RetrievalSettings | None = None) -> None:
        """
        Initialize engine.

        Args:
            index: Corpus index supplying candidates
            settings: Limits, weights, thresholds and query deadline
        """
        self._index = index
        self.settings = settings or RetrievalSettings()

    @property
    def index(self) -> KnowledgeIndex:
        return self._index

    def _resolve(self, limit: int | None, threshold: float | None, default_threshold: float) -> tuple[int, float]:
        limit = self.settings.default_limit if limit is None else limit
        threshold = default_threshold if threshold is None else threshold
        if limit < 1:
            raise ValidationError("limit must be at least 1", field="limit")
        if not 0.0 <= threshold <= 1.0:
            raise ValidationError("threshold must be within [0, 1]", field="threshold")
        return limit, threshold

    async def _query(self, fn: Callable[..., T], *args) -> T:
        """Run a blocking index call off the event loop under the query deadline."""
        return await asyncio.wait_for(
            asyncio.to_thread(fn, *args),
            timeout=self.settings.query_timeout_seconds,
        )

    async def search(
        self,
        query_embedding: list[float],
        query_text: str,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """
        Hybrid vector + lexical search.

        Args:
            query_embedding: Embedding of query_text
            query_text: Raw query for lexical matching
            limit: Maximum results (default from settings)
            threshold: Fused-score floor (default from settings)

        Returns:
            list[SearchResult]: Results by fused score descending; empty on failure
        """
        limit, threshold = self._resolve(limit, threshold, self.settings.hybrid_threshold)
        started = time.perf_counter()

        try:
            vector_matches = await self._query(self._index.vector_candidates, query_embedding, limit * 2)
            lexical_matches = await self._query(self._index.lexical_candidates, query_text, limit * 2)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:search - Hybrid search failed, returning no results",
                e,
                elapsed_seconds=round(time.perf_counter() - started, 3),
                limit=limit,
                threshold=threshold,
            )
            return []

        candidates = fuse_candidates(
            vector_matches,
            lexical_matches,
            self.settings.vector_weight,
            self.settings.lexical_weight,
        )
        results = search_with_relaxation(
            lambda floor: rank_candidates(candidates, limit, floor),
            threshold,
            self.settings.relaxation_thresholds,
        )

        logger.info(
            f"{__name__}:search - {len(results)} results from {len(candidates)} candidates "
            f"in {time.perf_counter() - started:.3f}s"
        )
        if not results:
            logger.warning(f"{__name__}:search - No hybrid results for threshold {threshold}, query may be too specific")
        return results

    async def vector_search(
        self,
        query_embedding: list[float],
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[SearchResult]:
        """
        Pure vector search, used when lexical indexing is unavailable.

        Keeps entries with cosine similarity at or above the threshold and
        follows the same relaxation ladder as hybrid search.

        Returns:
            list[SearchResult]: Results by similarity descending; empty on failure
        """
        limit, threshold = self._resolve(limit, threshold, self.settings.vector_threshold)

        try:
            matches = await self._query(self._index.vector_candidates, query_embedding, limit)
        except Exception as e:
            logger.error(f"{__name__}:vector_search - Vector search failed: {type(e).__name__}: {e}")
            return []

        def run(floor: float) -> list[SearchResult]:
            return [
                SearchResult(
                    text=match.entry.content,
                    metadata=match.entry.metadata,
                    similarity=match.score,
                    vector_similarity=match.score,
                )
                for match in matches
                if match.score >= floor
            ]

        results = search_with_relaxation(run, threshold, self.settings.relaxation_thresholds)
        logger.info(f"{__name__}:vector_search - Completed with {len(results)} results")
        return results

    async def related_content(self, content_id: str, limit: int = 5) -> list[SearchResult]:
        """Entries whose similarity to an indexed entry exceeds the related-content floor."""
        try:
            matches = await self._query(
                self._index.related,
                content_id,
                limit,
                self.settings.related_content_threshold,
            )
        except Exception as e:
            logger.error(f"{__name__}:related_content - Lookup failed for {content_id}: {e}")
            return []

        return [
            SearchResult(
                text=match.entry.content,
                metadata=match.entry.metadata,
                similarity=match.score,
                vector_similarity=match.score,
            )
            for match in matches
        ]

    async def search_by_metadata(
        self,
        doc_type: str | None = None,
        chapter: str | None = None,
        section: str | None = None,
        limit: int = 20,
    ) -> list[SearchResult]:
        """Exact metadata filter; every match has similarity 1.0."""
        try:
            entries = await self._query(self._index.filter_by_metadata, doc_type, chapter, section, limit)
        except Exception as e:
            logger.error(f"{__name__}:search_by_metadata - Lookup failed: {e}")
            return []

        return [
            SearchResult(text=entry.content, metadata=entry.metadata, similarity=1.0)
            for entry in entries
        ]
