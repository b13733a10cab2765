"""
Corpus index schemas.

Pydantic models for indexed entries and scored candidates.
Used for type-safe index interactions.

Dependencies: pydantic
System role: Type definitions for corpus operations
"""

from pydantic import BaseModel, Field

from procedures_rag.models.chunk import Chunk
from procedures_rag.models.search import SearchResultMetadata


class CorpusEntry(BaseModel):
    """A searchable snippet with its embedding."""

    id: str = Field(description="Chunk identifier")
    content: str = Field(description="Snippet text")
    metadata: SearchResultMetadata = Field(description="Citation metadata")
    embedding: list[float] | None = Field(default=None, description="Embedding vector, None when not embedded")

    @classmethod
    def from_chunk(cls, chunk: Chunk, embedding: list[float] | None) -> "CorpusEntry":
        """
        Build an index entry from a chunk.

        Args:
            chunk: Chunk produced by the semantic chunker
            embedding: Vector for the chunk content

        Returns:
            CorpusEntry: Entry with citation metadata taken from the chunk
        """
        meta = chunk.metadata
        return cls(
            id=chunk.id,
            content=chunk.content,
            metadata=SearchResultMetadata(
                id=chunk.id,
                title=chunk.title,
                type=meta.type,
                chapter_number=meta.chapter,
                section_number=meta.section,
                url=meta.source_url,
            ),
            embedding=embedding,
        )


class CorpusMatch(BaseModel):
    """Candidate returned by the index with one score component."""

    entry: CorpusEntry
    score: float = Field(description="Cosine similarity or lexical rank, both in [0, 1]")
