"""
Shared test fixtures and configuration for entire test suite.

Provides: controllable clock, document builders, corpus builders, settings
Dependencies: pytest, langchain_core
System role: Test infrastructure and fixture management
"""

import math

import pytest

from procedures_rag.boundary.corpus.corpus_schemas import CorpusEntry
from procedures_rag.configs.cache import CacheSettings
from procedures_rag.configs.retrieval import RetrievalSettings
from procedures_rag.core.cache.cache_service import CacheService
from procedures_rag.models.document import DocumentMetadata, KnowledgeDocument
from procedures_rag.models.search import SearchResultMetadata

SPACING_SENTENCE = (
    "Controllers shall provide additional spacing between successive arrivals when the leading "
    "aircraft is in a heavier category than the following aircraft. "
)
MINIMUM_SENTENCE = (
    "Apply at least 3 miles between aircraft on the same final course, increasing to 5 miles "
    "when the leading aircraft is heavy and the following aircraft is small. "
)
HOLD_SENTENCE = (
    "Hold arriving traffic short of the active surface until the crossing traffic has cleared "
    "and issue explicit hold short instructions to every vehicle operator. "
)


class FakeClock:
    """Manually advanced time source in seconds."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_document(
    doc_id: str = "doc-1",
    content: str = "Short focused procedure text.",
    display_name: str = "Chapter 5 Section 5",
    summary: str = "",
    tags: list[str] | None = None,
    **metadata,
) -> KnowledgeDocument:
    """Build a KnowledgeDocument with sensible defaults."""
    return KnowledgeDocument(
        id=doc_id,
        content=content,
        display_name=display_name,
        summary=summary,
        tags=tags or [],
        metadata=DocumentMetadata(**metadata),
    )


def two_topic_content() -> str:
    """Wake turbulence and separation minima sections, each well over 200 characters."""
    return "\n".join(
        [
            "WAKE TURBULENCE APPLICATION",
            SPACING_SENTENCE * 2,
            "SEPARATION MINIMA",
            MINIMUM_SENTENCE * 2,
        ]
    )


def diluted_content() -> str:
    """Three topical sections, over 5000 characters in total."""
    return "\n".join(
        [
            "WAKE TURBULENCE APPLICATION",
            SPACING_SENTENCE * 12,
            "SEPARATION MINIMA",
            MINIMUM_SENTENCE * 12,
            "RUNWAY INCURSION PREVENTION",
            HOLD_SENTENCE * 12,
        ]
    )


def unit_vector(*components: float) -> list[float]:
    norm = math.sqrt(sum(value * value for value in components))
    return [value / norm for value in components]


def make_entry(
    entry_id: str,
    content: str,
    embedding: list[float] | None,
    doc_type: str | None = "section",
    chapter: str | None = "5",
    section: str | None = "5",
) -> CorpusEntry:
    """Build a corpus entry with citation metadata."""
    return CorpusEntry(
        id=entry_id,
        content=content,
        metadata=SearchResultMetadata(
            id=entry_id,
            title=f"Title {entry_id}",
            type=doc_type,
            chapter_number=chapter,
            section_number=section,
        ),
        embedding=embedding,
    )


@pytest.fixture
def clock() -> FakeClock:
    """Provide a controllable clock."""
    return FakeClock()


@pytest.fixture
def cache_service(clock: FakeClock) -> CacheService:
    """Provide a cache service on the fake clock."""
    return CacheService(settings=CacheSettings(), clock=clock)


@pytest.fixture
def retrieval_settings() -> RetrievalSettings:
    """Provide default retrieval settings."""
    return RetrievalSettings()


@pytest.fixture
def document_factory():
    """Provide the KnowledgeDocument builder."""
    return make_document


@pytest.fixture
def entry_factory():
    """Provide the CorpusEntry builder."""
    return make_entry


@pytest.fixture
def two_topic_text() -> str:
    """Provide a document body with two chunkable sections."""
    return two_topic_content()


@pytest.fixture
def diluted_text() -> str:
    """Provide a document body the analyzer flags for chunking."""
    return diluted_content()
