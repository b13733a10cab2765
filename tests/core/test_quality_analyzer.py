"""Tests for the document quality analyzer."""

import pytest

from procedures_rag.core.document_processing.quality_analyzer import (
    DocumentQualityAnalyzer,
    analyze_knowledge_base,
    classify,
    summarize,
)
from procedures_rag.models.analysis import ChunkingPriority, EmbeddingQuality


class TestClassify:
    """Ordered classification rules."""

    def test_just_over_ten_thousand_with_four_topics(self) -> None:
        """Should classify 10,001 chars with 4 topics as diluted/high."""
        assert classify(10001, 4) == (EmbeddingQuality.DILUTED, True, ChunkingPriority.HIGH)

    def test_exactly_ten_thousand_falls_through_to_rule_two(self) -> None:
        """Should not trigger rule 1 at exactly 10,000 chars."""
        assert classify(10000, 4) == (EmbeddingQuality.MIXED, True, ChunkingPriority.MEDIUM)

    def test_rule_two_precedes_rule_three(self) -> None:
        """Should classify a very large 3-topic document as mixed because rule 2 matches first."""
        assert classify(16000, 3) == (EmbeddingQuality.MIXED, True, ChunkingPriority.MEDIUM)

    def test_rule_three_catches_large_low_topic_documents(self) -> None:
        """Should classify over 15,000 chars with 2 topics as diluted/high."""
        assert classify(15001, 2) == (EmbeddingQuality.DILUTED, True, ChunkingPriority.HIGH)

    @pytest.mark.parametrize("size,topics", [(4000, 10), (15000, 2), (5001, 2)])
    def test_focused_otherwise(self, size: int, topics: int) -> None:
        """Should keep remaining documents focused and unchunked."""
        assert classify(size, topics) == (EmbeddingQuality.FOCUSED, False, ChunkingPriority.LOW)


class TestDocumentQualityAnalyzer:
    """Topic detection, density and full analysis."""

    def test_find_topics_is_case_insensitive(self) -> None:
        """Should match vocabulary phrases regardless of case."""
        analyzer = DocumentQualityAnalyzer()

        topics = analyzer.find_topics("WAKE TURBULENCE rules and Runway Incursion prevention")

        assert topics == ["wake turbulence", "runway incursion"]

    def test_topic_count_uses_procedural_sections(self) -> None:
        """Should use ceil(sections / 3) when it exceeds the vocabulary count."""
        content = "\n\n".join(f"Maintain {index} miles behind the leader" for index in range(1, 8))

        assert DocumentQualityAnalyzer().topic_count(content) == 3

    def test_count_procedural_sections(self) -> None:
        """Should count only paragraphs with units or structural keywords."""
        content = "Apply 3 miles.\n\nGeneral remarks only.\n  \nSEPARATION is required."

        assert DocumentQualityAnalyzer.count_procedural_sections(content) == 2

    def test_content_density(self) -> None:
        """Should count numeric-unit matches per 100 words."""
        assert DocumentQualityAnalyzer.content_density("Maintain 5 miles and 1000 feet") == pytest.approx(200 / 6)

    def test_content_density_of_empty_text(self) -> None:
        """Should report zero density for empty content."""
        assert DocumentQualityAnalyzer.content_density("") == 0.0

    def test_analyze_flags_diluted_document(self, document_factory, diluted_text: str) -> None:
        """Should flag a long multi-topic document for chunking."""
        document = document_factory(content=diluted_text, display_name="Chapter 5 Section 5")

        analysis = DocumentQualityAnalyzer().analyze(document)

        assert analysis.title == "Chapter 5 Section 5"
        assert analysis.size == len(diluted_text)
        assert set(analysis.main_topics) == {"wake turbulence", "separation minima", "runway incursion"}
        assert analysis.needs_chunking is True
        assert analysis.embedding_quality is EmbeddingQuality.MIXED

    def test_analyze_keeps_short_document_focused(self, document_factory) -> None:
        """Should leave a short document unchunked."""
        analysis = DocumentQualityAnalyzer().analyze(document_factory(content="Maintain 3 miles."))

        assert analysis.needs_chunking is False
        assert analysis.chunking_priority is ChunkingPriority.LOW


class TestKnowledgeBaseAnalysis:
    """Aggregated analysis."""

    def test_summary_counts(self, document_factory, diluted_text: str) -> None:
        """Should count quality classes, chunking needs and sizes."""
        documents = [
            document_factory(doc_id="a", content=diluted_text),
            document_factory(doc_id="b", content="x" * 100),
            document_factory(doc_id="c", content="y" * 300),
        ]

        analyses, summary = analyze_knowledge_base(documents)

        assert [analysis.id for analysis in analyses] == ["a", "b", "c"]
        assert summary.total == 3
        assert summary.mixed == 1
        assert summary.focused == 2
        assert summary.needs_chunking == 1
        assert summary.medium_priority == 1
        assert summary.total_chars == len(diluted_text) + 400
        assert summary.average_size == round((len(diluted_text) + 400) / 3)

    def test_summary_of_nothing(self) -> None:
        """Should report zeros for an empty knowledge base."""
        summary = summarize([])

        assert summary.total == 0
        assert summary.average_size == 0
