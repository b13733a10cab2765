"""Tests for the hybrid vector + lexical search engine."""

import math
import time
from unittest.mock import MagicMock

import pytest

from procedures_rag.boundary.corpus.corpus_schemas import CorpusMatch
from procedures_rag.boundary.corpus.knowledge_index import KnowledgeIndex
from procedures_rag.configs.retrieval import RetrievalSettings
from procedures_rag.core.exceptions import RetrievalError, ValidationError
from procedures_rag.core.retrieval.hybrid_search import (
    HybridSearchEngine,
    fuse_candidates,
    fused_score,
    rank_candidates,
)

QUERY = "What is the minimum wake turbulence separation?"
QUERY_VECTOR = [1.0, 0.0, 0.0]


def _vector_with_cosine(cosine: float) -> list[float]:
    return [cosine, 0.0, math.sqrt(1.0 - cosine * cosine)]


@pytest.fixture
def scenario_index(entry_factory) -> KnowledgeIndex:
    """Two-chunk corpus: one highly similar chunk and one lexical-only match."""
    return KnowledgeIndex(
        [
            entry_factory(
                "similar",
                "Wake turbulence separation behind heavy aircraft applies to arrivals on the same runway.",
                _vector_with_cosine(0.9),
            ),
            entry_factory(
                "lexical",
                "The minimum spacing table lists distances for every category pair.",
                _vector_with_cosine(0.2),
            ),
        ]
    )


class TestFusion:
    """Score fusion helpers."""

    def test_fused_score_weights(self) -> None:
        """Should weight vector 0.7 and lexical 0.3."""
        assert fused_score(0.9, 0.5) == pytest.approx(0.78)

    @pytest.mark.parametrize("lexical", [0.0, 0.25, 0.9])
    def test_fused_score_is_monotonic_in_vector_similarity(self, lexical: float) -> None:
        """Should never decrease when vector similarity increases."""
        scores = [fused_score(step / 10, lexical) for step in range(11)]

        assert scores == sorted(scores)

    def test_missing_component_counts_as_zero(self, entry_factory) -> None:
        """Should score entries found by only one signal with 0 for the other."""
        vector_only = entry_factory("v", "text", [1.0])
        lexical_only = entry_factory("l", "text", [1.0])

        candidates = fuse_candidates(
            [CorpusMatch(entry=vector_only, score=0.8)],
            [CorpusMatch(entry=lexical_only, score=0.5)],
        )
        by_id = {candidate.entry.id: candidate for candidate in candidates}

        assert by_id["v"].lexical_rank == 0.0
        assert by_id["v"].score == pytest.approx(0.56)
        assert by_id["l"].vector_similarity == 0.0
        assert by_id["l"].score == pytest.approx(0.15)

    def test_rank_keeps_lexical_matches_below_threshold(self, entry_factory) -> None:
        """Should keep a lexical match whose fused score is under the threshold."""
        candidates = fuse_candidates(
            [CorpusMatch(entry=entry_factory("v", "a", [1.0]), score=0.5)],
            [CorpusMatch(entry=entry_factory("l", "b", [1.0]), score=0.1)],
        )

        results = rank_candidates(candidates, limit=10, threshold=0.7)

        assert [result.metadata.id for result in results] == ["l"]

    def test_rank_breaks_ties_by_vector_similarity_then_id(self, entry_factory) -> None:
        """Should order equal fused scores deterministically."""
        candidates = fuse_candidates(
            [
                CorpusMatch(entry=entry_factory("b", "x", [1.0]), score=0.6),
                CorpusMatch(entry=entry_factory("a", "x", [1.0]), score=0.6),
            ],
            [],
        )

        results = rank_candidates(candidates, limit=10, threshold=0.1)

        assert [result.metadata.id for result in results] == ["a", "b"]


class TestHybridSearch:
    """End-to-end ranking over a KnowledgeIndex."""

    @pytest.mark.asyncio
    async def test_similar_and_lexical_chunks_both_returned(self, scenario_index: KnowledgeIndex) -> None:
        """Should return both chunks at threshold 0.7, ordered by fused score."""
        engine = HybridSearchEngine(scenario_index)

        results = await engine.search(QUERY_VECTOR, QUERY, limit=10, threshold=0.7)

        assert [result.metadata.id for result in results] == ["similar", "lexical"]
        assert results[0].similarity > results[1].similarity
        assert results[0].vector_similarity == pytest.approx(0.9)
        assert results[1].vector_similarity == pytest.approx(0.2)
        assert results[1].lexical_rank > 0

    @pytest.mark.asyncio
    async def test_every_matching_chunk_gets_a_lexical_rank(self, scenario_index: KnowledgeIndex) -> None:
        """Should give a nonzero lexical rank to each chunk sharing query terms, even in a two-chunk corpus."""
        results = await HybridSearchEngine(scenario_index).search(QUERY_VECTOR, QUERY, limit=10, threshold=0.7)

        assert all(result.lexical_rank > 0 for result in results)
        assert results[0].similarity > 0.7

    @pytest.mark.asyncio
    async def test_term_present_in_every_entry_still_ranks(self, entry_factory) -> None:
        """Should keep lexical matches when the query term appears in all entries."""
        index = KnowledgeIndex(
            [
                entry_factory("a", "Radar separation on final approach.", [0.0, 1.0, 0.0]),
                entry_factory("b", "Visual separation between arrivals.", [0.0, 1.0, 0.0]),
                entry_factory("c", "Separation minima for departures.", [0.0, 1.0, 0.0]),
            ]
        )

        results = await HybridSearchEngine(index).search(QUERY_VECTOR, "separation", limit=10, threshold=0.7)

        assert sorted(result.metadata.id for result in results) == ["a", "b", "c"]
        assert all(result.lexical_rank > 0 for result in results)

    @pytest.mark.asyncio
    async def test_fused_score_is_reported(self, scenario_index: KnowledgeIndex) -> None:
        """Should report similarity as 0.7 * vector + 0.3 * lexical."""
        results = await HybridSearchEngine(scenario_index).search(QUERY_VECTOR, QUERY, limit=10, threshold=0.7)

        for result in results:
            assert result.similarity == pytest.approx(0.7 * result.vector_similarity + 0.3 * result.lexical_rank)

    @pytest.mark.asyncio
    async def test_limit_truncates(self, scenario_index: KnowledgeIndex) -> None:
        """Should return at most limit results."""
        results = await HybridSearchEngine(scenario_index).search(QUERY_VECTOR, QUERY, limit=1, threshold=0.7)

        assert [result.metadata.id for result in results] == ["similar"]

    @pytest.mark.asyncio
    async def test_relaxes_to_half_when_nothing_passes(self, entry_factory) -> None:
        """Should find a 0.63 fused score only after relaxing 0.7 to 0.5."""
        index = KnowledgeIndex(
            [
                entry_factory("a", "alpha bravo", _vector_with_cosine(0.9)),
                entry_factory("b", "charlie delta", [0.0, 1.0, 0.0]),
            ]
        )

        results = await HybridSearchEngine(index).search(QUERY_VECTOR, "unrelated words", limit=5, threshold=0.7)

        assert [result.metadata.id for result in results] == ["a"]
        assert results[0].similarity == pytest.approx(0.63)

    @pytest.mark.asyncio
    async def test_relaxes_to_lowest_rung(self, entry_factory) -> None:
        """Should find a 0.42 fused score at 0.3 after 0.7 and 0.5 fail."""
        index = KnowledgeIndex([entry_factory("a", "alpha bravo", _vector_with_cosine(0.6))])

        results = await HybridSearchEngine(index).search(QUERY_VECTOR, "unrelated", limit=5, threshold=0.7)

        assert [result.metadata.id for result in results] == ["a"]

    @pytest.mark.asyncio
    async def test_empty_after_last_rung(self, entry_factory) -> None:
        """Should return empty when nothing passes 0.3."""
        index = KnowledgeIndex([entry_factory("a", "alpha bravo", _vector_with_cosine(0.4))])

        assert await HybridSearchEngine(index).search(QUERY_VECTOR, "unrelated", limit=5, threshold=0.7) == []

    @pytest.mark.asyncio
    async def test_default_limit_and_threshold(self, scenario_index: KnowledgeIndex) -> None:
        """Should apply settings defaults when limit and threshold are omitted."""
        engine = HybridSearchEngine(scenario_index, RetrievalSettings(default_limit=1))

        results = await engine.search(QUERY_VECTOR, QUERY)

        assert len(results) == 1

    @pytest.mark.asyncio
    async def test_corpus_failure_returns_empty(self) -> None:
        """Should swallow corpus errors and return no results."""
        index = MagicMock()
        index.vector_candidates.side_effect = RetrievalError("corpus unavailable", operation="vector")

        assert await HybridSearchEngine(index).search(QUERY_VECTOR, QUERY) == []

    @pytest.mark.asyncio
    async def test_dimension_mismatch_returns_empty(self, scenario_index: KnowledgeIndex) -> None:
        """Should return empty for a query embedding of the wrong size."""
        assert await HybridSearchEngine(scenario_index).search([1.0, 0.0], QUERY) == []

    @pytest.mark.asyncio
    async def test_query_timeout_returns_empty(self) -> None:
        """Should abandon a corpus query that exceeds its deadline."""
        index = MagicMock()
        index.vector_candidates.side_effect = lambda *args: time.sleep(0.5) or []
        engine = HybridSearchEngine(index, RetrievalSettings(query_timeout_seconds=0.05))

        assert await engine.search(QUERY_VECTOR, QUERY) == []

    @pytest.mark.asyncio
    async def test_invalid_limit_raises(self, scenario_index: KnowledgeIndex) -> None:
        """Should reject a limit below 1."""
        with pytest.raises(ValidationError):
            await HybridSearchEngine(scenario_index).search(QUERY_VECTOR, QUERY, limit=0)


class TestVectorSearch:
    """Pure vector mode."""

    @pytest.mark.asyncio
    async def test_default_threshold_is_point_seven(self, scenario_index: KnowledgeIndex) -> None:
        """Should keep only entries at or above 0.7 similarity."""
        results = await HybridSearchEngine(scenario_index).vector_search(QUERY_VECTOR)

        assert [result.metadata.id for result in results] == ["similar"]
        assert results[0].similarity == pytest.approx(0.9)
        assert results[0].lexical_rank == 0.0

    @pytest.mark.asyncio
    async def test_follows_relaxation_ladder(self, entry_factory) -> None:
        """Should relax to 0.3 when nothing reaches 0.7 or 0.5."""
        index = KnowledgeIndex([entry_factory("a", "alpha", _vector_with_cosine(0.35))])

        results = await HybridSearchEngine(index).vector_search(QUERY_VECTOR, threshold=0.7)

        assert [result.metadata.id for result in results] == ["a"]

    @pytest.mark.asyncio
    async def test_failure_returns_empty(self) -> None:
        """Should swallow corpus errors."""
        index = MagicMock()
        index.vector_candidates.side_effect = RuntimeError("down")

        assert await HybridSearchEngine(index).vector_search(QUERY_VECTOR) == []


class TestRelatedAndMetadata:
    """Related content and metadata lookups."""

    @pytest.mark.asyncio
    async def test_related_content_excludes_source_and_weak_matches(self, entry_factory) -> None:
        """Should return other entries above 0.8 similarity."""
        index = KnowledgeIndex(
            [
                entry_factory("source", "a", [1.0, 0.0, 0.0]),
                entry_factory("close", "b", _vector_with_cosine(0.95)),
                entry_factory("far", "c", _vector_with_cosine(0.5)),
            ]
        )

        results = await HybridSearchEngine(index).related_content("source")

        assert [result.metadata.id for result in results] == ["close"]

    @pytest.mark.asyncio
    async def test_related_content_for_unknown_id(self, scenario_index: KnowledgeIndex) -> None:
        """Should return empty for an id not in the corpus."""
        assert await HybridSearchEngine(scenario_index).related_content("missing") == []

    @pytest.mark.asyncio
    async def test_search_by_metadata(self, entry_factory) -> None:
        """Should return exact metadata matches with similarity 1.0."""
        index = KnowledgeIndex(
            [
                entry_factory("a", "x", [1.0], chapter="5", section="5"),
                entry_factory("b", "y", [1.0], chapter="5", section="6"),
                entry_factory("c", "z", [1.0], chapter="6", section="5"),
            ]
        )

        results = await HybridSearchEngine(index).search_by_metadata(chapter="5", section="5")

        assert [result.metadata.id for result in results] == ["a"]
        assert results[0].similarity == 1.0
