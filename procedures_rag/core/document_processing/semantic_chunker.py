"""
Semantic chunker.

Splits a topically diluted procedures document into topic-focused chunks.
The document is scanned line by line; a line matching a semantic boundary
closes the current section and opens a new one. Sections shorter than
min_section_chars are discarded when closed, and sections shorter than
min_chunk_chars are never emitted. A document that does not yield at least
two emit-worthy sections is emitted whole as a single unchunked chunk.

Dependencies: re, hashlib, collections (stdlib)
System role: Second stage of knowledge base ingestion
"""

import hashlib
import logging
import re
from collections import Counter
from dataclasses import dataclass
from typing import Sequence

from procedures_rag.configs.chunking import ChunkingSettings
from procedures_rag.core.document_processing.boundaries import (
    DEFAULT_DOCUMENT_FOCUS,
    DEFAULT_FOCUS,
    DEFAULT_TITLE,
    GENERAL_TOPIC,
    GENERIC_TERMS,
    PROCEDURE_TYPES,
    SEMANTIC_BOUNDARIES,
    SEMANTIC_FOCUS,
    TOPIC_KEYWORDS,
    TOPIC_TITLES,
    SemanticBoundary,
    match_boundary,
)
from procedures_rag.models.analysis import DocumentAnalysis
from procedures_rag.models.chunk import Chunk, ChunkMetadata
from procedures_rag.models.document import KnowledgeDocument

logger = logging.getLogger(__name__)

CONTENT_WORD_PATTERN = re.compile(r"\b[a-z]{4,}\b")
LEADING_NON_LETTERS = re.compile(r"^[^A-Za-z]*")
WHITESPACE_RUN = re.compile(r"\s+")


@dataclass
class SemanticSection:
    """A contiguous run of lines opened by a boundary line."""

    start_line: int
    end_line: int
    title: str
    topic: str
    content: str = ""

    @property
    def procedure_type(self) -> str:
        return PROCEDURE_TYPES.get(self.topic, GENERAL_TOPIC)


def section_title(heading: str, topic: str) -> str:
    """Cleaned heading text, or the topic's fallback label when too short."""
    cleaned = WHITESPACE_RUN.sub(" ", LEADING_NON_LETTERS.sub("", heading)).strip()
    if len(cleaned) > 3:
        return cleaned
    return TOPIC_TITLES.get(topic, DEFAULT_TITLE)


def chunk_id(parent_id: str, index: int, content: str) -> str:
    """Deterministic chunk ID: SHA-256 of parent, position and content."""
    return hashlib.sha256(f"{parent_id}:{index}:{content}".encode()).hexdigest()[:16]


class SemanticChunker:
    """Boundary-driven document splitter."""

    def __init__(
        self,
        settings: ChunkingSettings | None = None,
        boundaries: tuple[SemanticBoundary, ...] = SEMANTIC_BOUNDARIES,
    ) -> None:
        """
        Initialize chunker.

        Args:
            settings: Section and chunk size thresholds
            boundaries: Ordered boundary table
        """
        settings = settings or ChunkingSettings()
        self.min_section_chars = settings.min_section_chars
        self.min_chunk_chars = settings.min_chunk_chars
        self.max_content_keywords = settings.max_content_keywords
        self._boundaries = boundaries

    def identify_sections(self, content: str) -> list[SemanticSection]:
        """
        Scan content for boundary lines and collect the sections they open.

        Text before the first boundary line belongs to no section.

        Args:
            content: Document text

        Returns:
            list[SemanticSection]: Sections of at least min_section_chars
        """
        lines = content.split("\n")
        sections: list[SemanticSection] = []
        current: SemanticSection | None = None

        for index, raw_line in enumerate(lines):
            line = raw_line.strip()
            if not line:
                continue

            boundary = match_boundary(line, self._boundaries)
            if boundary is None:
                continue

            if current is not None:
                self._close(current, lines, index, sections)

            current = SemanticSection(
                start_line=index,
                end_line=index,
                title=section_title(line, boundary.topic),
                topic=boundary.topic,
            )

        if current is not None:
            self._close(current, lines, len(lines), sections)

        return sections

    def _close(
        self,
        section: SemanticSection,
        lines: list[str],
        end_line: int,
        sections: list[SemanticSection],
    ) -> None:
        section.end_line = end_line
        section.content = "\n".join(lines[section.start_line:end_line]).strip()
        if len(section.content) >= self.min_section_chars:
            sections.append(section)

    def extract_keywords(self, content: str, topic: str) -> list[str]:
        """
        Static topic keywords followed by the most frequent content words.

        Args:
            content: Section text
            topic: Section topic

        Returns:
            list[str]: Ordered, de-duplicated keywords
        """
        keywords = list(TOPIC_KEYWORDS.get(topic, ()))
        known = {keyword.lower() for keyword in keywords}
        counts = Counter(
            word for word in CONTENT_WORD_PATTERN.findall(content.lower())
            if word not in GENERIC_TERMS and word not in known
        )
        keywords.extend(word for word, _ in counts.most_common(self.max_content_keywords))
        return keywords

    def single_chunk(self, document: KnowledgeDocument) -> Chunk:
        """Emit the whole document as one unchunked chunk."""
        return Chunk(
            id=chunk_id(document.id, 0, document.content),
            parent_id=document.id,
            title=document.display_name,
            content=document.content,
            topic=GENERAL_TOPIC,
            procedure_type=GENERAL_TOPIC,
            semantic_focus=document.summary or DEFAULT_DOCUMENT_FOCUS,
            keywords=sorted(document.tags),
            chunk_index=0,
            total_chunks=1,
            size=len(document.content),
            metadata=ChunkMetadata(
                **document.metadata.model_dump(),
                original_id=document.id,
                chunked=False,
            ),
        )

    def chunk(self, document: KnowledgeDocument) -> list[Chunk]:
        """
        Split a document into topic-focused chunks.

        Args:
            document: Raw knowledge document

        Returns:
            list[Chunk]: Two or more focused chunks, or exactly one unchunked chunk
        """
        sections = [
            section for section in self.identify_sections(document.content)
            if len(section.content) >= self.min_chunk_chars
        ]

        if len(sections) <= 1:
            return [self.single_chunk(document)]

        total = len(sections)
        chunks = []
        for index, section in enumerate(sections):
            chunks.append(
                Chunk(
                    id=chunk_id(document.id, index, section.content),
                    parent_id=document.id,
                    title=section.title,
                    content=section.content,
                    topic=section.topic,
                    procedure_type=section.procedure_type,
                    semantic_focus=SEMANTIC_FOCUS.get(section.topic, DEFAULT_FOCUS),
                    keywords=self.extract_keywords(section.content, section.topic),
                    chunk_index=index,
                    total_chunks=total,
                    size=len(section.content),
                    metadata=ChunkMetadata(
                        **document.metadata.model_dump(),
                        original_id=document.id,
                        chunked=True,
                        chunk_topic=section.topic,
                        procedure_type=section.procedure_type,
                        parent_title=document.display_name,
                    ),
                )
            )

        logger.debug(f"{__name__}:chunk - {document.id}: {total} chunks")
        return chunks


def chunk_knowledge_base(
    documents: Sequence[KnowledgeDocument],
    analyses: Sequence[DocumentAnalysis],
    chunker: SemanticChunker | None = None,
) -> list[Chunk]:
    """
    Chunk the documents flagged by the analyzer and keep the rest whole.

    Args:
        documents: Raw knowledge documents
        analyses: Analyzer output, matched to documents by id
        chunker: Chunker to use (default settings when omitted)

    Returns:
        list[Chunk]: Chunk set for indexing, in document order
    """
    chunker = chunker or SemanticChunker()
    flagged = {analysis.id for analysis in analyses if analysis.needs_chunking}

    chunks: list[Chunk] = []
    chunked_documents = 0
    for document in documents:
        if document.id in flagged:
            document_chunks = chunker.chunk(document)
            chunked_documents += 1
            logger.info(
                f"{__name__}:chunk_knowledge_base - Chunking {document.display_name or document.id} "
                f"({document.size} chars) into {len(document_chunks)} chunks"
            )
            chunks.extend(document_chunks)
        else:
            chunks.append(chunker.single_chunk(document))

    logger.info(
        f"{__name__}:chunk_knowledge_base - {len(documents)} documents, "
        f"{chunked_documents} chunked, {len(chunks)} chunks total"
    )
    return chunks
