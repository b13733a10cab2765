"""
Chunk domain model for the semantic chunking pipeline.

Dependencies: pydantic
System role: Chunker output and corpus index input
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from procedures_rag.models.document import DocumentMetadata


class ChunkMetadata(DocumentMetadata):
    """Parent metadata plus chunk provenance."""

    original_id: str = Field(description="ID of the parent document")
    chunked: bool = Field(description="False when the parent was emitted whole")
    chunk_topic: str | None = Field(default=None, description="Semantic topic of the section")
    procedure_type: str | None = Field(default=None, description="Procedure family of the section")
    parent_title: str | None = Field(default=None, description="Display name of the parent document")


class Chunk(BaseModel):
    """A topic-focused slice of a knowledge document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(description="Deterministic chunk identifier")
    parent_id: str = Field(description="ID of the parent document")
    title: str = Field(description="Section title or parent display name")
    content: str = Field(description="Chunk text content")
    topic: str = Field(default="general", description="Semantic topic label")
    procedure_type: str = Field(default="general", description="Procedure family")
    semantic_focus: str = Field(default="", description="One-line description of the chunk focus")
    keywords: list[str] = Field(default_factory=list, description="Ordered keyword list")
    chunk_index: int = Field(default=0, description="Zero-based ordinal among siblings", ge=0)
    total_chunks: int = Field(default=1, description="Sibling count, constant across siblings", ge=1)
    size: int = Field(description="Content length in characters", ge=0)
    metadata: ChunkMetadata
