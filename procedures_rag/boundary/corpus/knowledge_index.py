"""
In-process knowledge index.

Holds the chunked corpus and produces the two candidate lists the hybrid
search engine fuses: cosine similarity over embeddings (numpy) and BM25
relevance over text (rank_bm25 BM25L, whose IDF stays positive on small
corpora and for terms found in most entries). Writers rebuild a snapshot
under a lock and swap it in; readers work on whichever snapshot they picked up.

Dependencies: numpy, rank_bm25
System role: Corpus store for retrieval (replaces a database-side index)
"""

import logging
import threading
from dataclasses import dataclass, field

import numpy as np
from rank_bm25 import BM25L

from procedures_rag.boundary.corpus.corpus_schemas import CorpusEntry, CorpusMatch
from procedures_rag.boundary.corpus.tokenizer import tokenize
from procedures_rag.core.exceptions import RetrievalError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _IndexSnapshot:
    entries: tuple[CorpusEntry, ...] = ()
    by_id: dict[str, int] = field(default_factory=dict)
    # Row i of `matrix` is the unit-normalised embedding of entries[vector_rows[i]]
    vector_rows: tuple[int, ...] = ()
    matrix: np.ndarray | None = None
    bm25: BM25L | None = None


def _normalise_rows(matrix: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms


def lexical_rank(bm25_score: float) -> float:
    """Squash an unbounded BM25 score into [0, 1)."""
    if bm25_score <= 0:
        return 0.0
    return bm25_score / (1.0 + bm25_score)


class KnowledgeIndex:
    """Vector + lexical index over corpus entries."""

    def __init__(self, entries: list[CorpusEntry] | None = None) -> None:
        self._lock = threading.Lock()
        self._snapshot = _IndexSnapshot()
        if entries:
            self.add_entries(entries)

    def __len__(self) -> int:
        return len(self._snapshot.entries)

    @property
    def dimension(self) -> int | None:
        matrix = self._snapshot.matrix
        return None if matrix is None else int(matrix.shape[1])

    def add_entries(self, entries: list[CorpusEntry]) -> None:
        """
        Insert or replace entries by id and rebuild the index.

        Args:
            entries: Entries to upsert

        Raises:
            RetrievalError: When embedding dimensions disagree
        """
        if not entries:
            return

        with self._lock:
            merged = {entry.id: entry for entry in self._snapshot.entries}
            for entry in entries:
                merged[entry.id] = entry
            self._snapshot = self._build(list(merged.values()))

        logger.info(f"{__name__}:add_entries - Indexed {len(entries)} entries (total={len(self)})")

    def delete(self, entry_ids: list[str]) -> None:
        """Remove entries by id."""
        doomed = set(entry_ids)
        with self._lock:
            remaining = [entry for entry in self._snapshot.entries if entry.id not in doomed]
            self._snapshot = self._build(remaining)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._snapshot = _IndexSnapshot()

    def get(self, entry_id: str) -> CorpusEntry | None:
        snapshot = self._snapshot
        position = snapshot.by_id.get(entry_id)
        return None if position is None else snapshot.entries[position]

    def entries(self) -> list[CorpusEntry]:
        return list(self._snapshot.entries)

    @staticmethod
    def _build(entries: list[CorpusEntry]) -> _IndexSnapshot:
        vector_rows = [i for i, entry in enumerate(entries) if entry.embedding]
        matrix = None
        if vector_rows:
            dimensions = {len(entries[i].embedding) for i in vector_rows}
            if len(dimensions) > 1:
                raise RetrievalError(
                    "Corpus embeddings have inconsistent dimensions",
                    operation="index",
                    details={"dimensions": sorted(dimensions)},
                )
            matrix = _normalise_rows(
                np.asarray([entries[i].embedding for i in vector_rows], dtype=np.float64)
            )

        tokenized = [tokenize(entry.content) for entry in entries]
        bm25 = BM25L(tokenized) if any(tokenized) else None

        return _IndexSnapshot(
            entries=tuple(entries),
            by_id={entry.id: i for i, entry in enumerate(entries)},
            vector_rows=tuple(vector_rows),
            matrix=matrix,
            bm25=bm25,
        )

    def vector_candidates(self, embedding: list[float], k: int) -> list[CorpusMatch]:
        """
        Top-k entries by cosine similarity, clamped to [0, 1].

        Args:
            embedding: Query embedding
            k: Number of candidates

        Returns:
            list[CorpusMatch]: Candidates in descending similarity

        Raises:
            RetrievalError: When the query dimension does not match the corpus
        """
        snapshot = self._snapshot
        if snapshot.matrix is None or k < 1:
            return []

        query = np.asarray(embedding, dtype=np.float64)
        if query.ndim != 1 or query.shape[0] != snapshot.matrix.shape[1]:
            raise RetrievalError(
                "Query embedding dimension does not match corpus",
                operation="vector",
                details={"expected": int(snapshot.matrix.shape[1]), "actual": int(query.size)},
            )

        norm = np.linalg.norm(query)
        if norm == 0:
            return []

        similarities = np.clip(snapshot.matrix @ (query / norm), 0.0, 1.0)
        order = np.argsort(-similarities, kind="stable")[:k]
        return [
            CorpusMatch(
                entry=snapshot.entries[snapshot.vector_rows[row]],
                score=float(similarities[row]),
            )
            for row in order
        ]

    def lexical_candidates(self, text: str, k: int) -> list[CorpusMatch]:
        """
        Top-k entries by BM25 relevance; only entries sharing a query term qualify.

        Args:
            text: Query text
            k: Number of candidates

        Returns:
            list[CorpusMatch]: Candidates in descending lexical rank
        """
        snapshot = self._snapshot
        query_tokens = tokenize(text)
        if snapshot.bm25 is None or not query_tokens or k < 1:
            return []

        terms = set(query_tokens)
        scores = snapshot.bm25.get_scores(query_tokens)
        order = np.argsort(-scores, kind="stable")
        matches = []
        for position in order:
            if len(matches) >= k:
                break
            # BM25L credits absent terms too, so candidacy is decided by shared tokens
            if terms.isdisjoint(snapshot.bm25.doc_freqs[position]):
                continue
            matches.append(
                CorpusMatch(
                    entry=snapshot.entries[position],
                    score=lexical_rank(float(scores[position])),
                )
            )
        return matches

    def related(self, entry_id: str, k: int, threshold: float) -> list[CorpusMatch]:
        """
        Entries similar to an indexed entry, excluding itself.

        Args:
            entry_id: Source entry id
            k: Maximum results
            threshold: Exclusive similarity floor

        Returns:
            list[CorpusMatch]: Similar entries, empty when the source is unknown or not embedded
        """
        source = self.get(entry_id)
        if source is None or not source.embedding:
            return []

        candidates = self.vector_candidates(source.embedding, k + 1)
        return [
            match
            for match in candidates
            if match.entry.id != entry_id and match.score > threshold
        ][:k]

    def filter_by_metadata(
        self,
        doc_type: str | None = None,
        chapter: str | None = None,
        section: str | None = None,
        limit: int = 20,
    ) -> list[CorpusEntry]:
        """Entries whose metadata equals every given filter, most recently indexed first."""
        matches = []
        for entry in reversed(self._snapshot.entries):
            meta = entry.metadata
            if doc_type is not None and meta.type != doc_type:
                continue
            if chapter is not None and meta.chapter_number != chapter:
                continue
            if section is not None and meta.section_number != section:
                continue
            matches.append(entry)
            if len(matches) >= limit:
                break
        return matches
