"""
Document quality analyzer.

Scores how many distinct procedural topics a knowledge document mixes, which
decides whether a single embedding would be diluted and the document should
be split before indexing.

Dependencies: re, math (stdlib)
System role: First stage of knowledge base ingestion
"""

import logging
import math
import re
from typing import Sequence

from procedures_rag.models.analysis import (
    AnalysisSummary,
    ChunkingPriority,
    DocumentAnalysis,
    EmbeddingQuality,
)
from procedures_rag.models.document import KnowledgeDocument

logger = logging.getLogger(__name__)

PROCEDURE_TOPICS: tuple[str, ...] = (
    "wake turbulence",
    "separation minima",
    "approach procedures",
    "departure procedures",
    "radar separation",
    "emergency procedures",
    "weather minimums",
    "runway incursion",
    "aircraft categories",
    "clearance procedures",
    "navigation procedures",
    "communication procedures",
)

NUMERIC_UNIT_PATTERN = re.compile(r"\d+\s*(?:miles?|minutes?|feet|nm|degrees)")
PROCEDURAL_SECTION_PATTERN = re.compile(
    r"\d+\s*(?:miles?|minutes?|feet|nm|degrees)|APPLICATION|PROCEDURE|MINIMA|SEPARATION",
    re.IGNORECASE,
)
BLANK_LINE_PATTERN = re.compile(r"\n\s*\n")

# Evaluated in order; the first matching rule wins
_CLASSIFICATION_RULES: tuple[tuple[int, int | None, EmbeddingQuality, ChunkingPriority], ...] = (
    (10000, 3, EmbeddingQuality.DILUTED, ChunkingPriority.HIGH),
    (5000, 2, EmbeddingQuality.MIXED, ChunkingPriority.MEDIUM),
    (15000, None, EmbeddingQuality.DILUTED, ChunkingPriority.HIGH),
)


def classify(size: int, topic_count: int) -> tuple[EmbeddingQuality, bool, ChunkingPriority]:
    """
    Classify a document by size and topic count.

    Rules, first match wins:
        1. size > 10000 and topics > 3  -> diluted, chunk, high
        2. size > 5000 and topics > 2   -> mixed, chunk, medium
        3. size > 15000                 -> diluted, chunk, high
        4. otherwise                    -> focused, no chunking, low

    Returns:
        tuple: (embedding quality, needs chunking, chunking priority)
    """
    for min_size, min_topics, quality, priority in _CLASSIFICATION_RULES:
        if size > min_size and (min_topics is None or topic_count > min_topics):
            return quality, True, priority
    return EmbeddingQuality.FOCUSED, False, ChunkingPriority.LOW


class DocumentQualityAnalyzer:
    """Detect topical dilution in knowledge documents."""

    def __init__(self, topics: Sequence[str] = PROCEDURE_TOPICS) -> None:
        self._topics = tuple(topic.lower() for topic in topics)

    def find_topics(self, content: str) -> list[str]:
        """Vocabulary topics present in content (case-insensitive substring match)."""
        lowered = content.lower()
        return [topic for topic in self._topics if topic in lowered]

    @staticmethod
    def count_procedural_sections(content: str) -> int:
        """Blank-line separated paragraphs carrying numeric units or structural keywords."""
        return sum(
            1 for paragraph in BLANK_LINE_PATTERN.split(content)
            if PROCEDURAL_SECTION_PATTERN.search(paragraph)
        )

    def topic_count(self, content: str, main_topics: Sequence[str] | None = None) -> int:
        if main_topics is None:
            main_topics = self.find_topics(content)
        return max(len(main_topics), math.ceil(self.count_procedural_sections(content) / 3))

    @staticmethod
    def content_density(content: str) -> float:
        """Numeric-unit matches per 100 words."""
        word_count = len(content.split())
        if word_count == 0:
            return 0.0
        return len(NUMERIC_UNIT_PATTERN.findall(content)) / word_count * 100

    def analyze(self, document: KnowledgeDocument) -> DocumentAnalysis:
        """
        Analyze one document.

        Args:
            document: Raw knowledge document

        Returns:
            DocumentAnalysis: Topic count, density and chunking decision
        """
        size = document.size
        main_topics = self.find_topics(document.content)
        topic_count = self.topic_count(document.content, main_topics)
        quality, needs_chunking, priority = classify(size, topic_count)

        return DocumentAnalysis(
            id=document.id,
            title=document.display_name,
            size=size,
            topic_count=topic_count,
            main_topics=main_topics,
            content_density=self.content_density(document.content),
            embedding_quality=quality,
            needs_chunking=needs_chunking,
            chunking_priority=priority,
        )

    def analyze_many(self, documents: Sequence[KnowledgeDocument]) -> list[DocumentAnalysis]:
        analyses = [self.analyze(document) for document in documents]
        flagged = sum(1 for analysis in analyses if analysis.needs_chunking)
        logger.info(f"{__name__}:analyze_many - Analyzed {len(analyses)} documents, {flagged} need chunking")
        return analyses


def summarize(analyses: Sequence[DocumentAnalysis]) -> AnalysisSummary:
    """Aggregate quality counts over a knowledge base."""
    summary = AnalysisSummary(total=len(analyses))
    for analysis in analyses:
        if analysis.embedding_quality is EmbeddingQuality.FOCUSED:
            summary.focused += 1
        elif analysis.embedding_quality is EmbeddingQuality.MIXED:
            summary.mixed += 1
        else:
            summary.diluted += 1
        if analysis.needs_chunking:
            summary.needs_chunking += 1
        if analysis.chunking_priority is ChunkingPriority.HIGH:
            summary.high_priority += 1
        elif analysis.chunking_priority is ChunkingPriority.MEDIUM:
            summary.medium_priority += 1
        summary.total_chars += analysis.size

    if analyses:
        summary.average_size = round(summary.total_chars / len(analyses))
    return summary


def analyze_knowledge_base(
    documents: Sequence[KnowledgeDocument],
    analyzer: DocumentQualityAnalyzer | None = None,
) -> tuple[list[DocumentAnalysis], AnalysisSummary]:
    """
    Analyze every document and aggregate the results.

    Args:
        documents: Raw knowledge documents
        analyzer: Analyzer to use (default topic list when omitted)

    Returns:
        tuple[list[DocumentAnalysis], AnalysisSummary]: Per-document analyses and totals
    """
    analyzer = analyzer or DocumentQualityAnalyzer()
    analyses = analyzer.analyze_many(documents)
    return analyses, summarize(analyses)
