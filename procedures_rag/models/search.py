"""
Search request and result models.

Dependencies: pydantic
System role: Retrieval API schema
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SearchMode(str, Enum):
    """Ranking strategy."""

    HYBRID = "hybrid"
    VECTOR = "vector"


class SearchResultMetadata(BaseModel):
    """Citation metadata returned with each snippet."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str | None = None
    type: str | None = None
    chapter_number: str | None = None
    section_number: str | None = None
    url: str | None = None


class SearchResult(BaseModel):
    """Single ranked snippet; immutable so cached results can be shared."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Snippet text")
    metadata: SearchResultMetadata
    similarity: float = Field(description="Fused score (hybrid) or cosine similarity (vector)")
    vector_similarity: float = Field(default=0.0, description="Cosine similarity component")
    lexical_rank: float = Field(default=0.0, description="Lexical rank component")


class SearchRequest(BaseModel):
    """Retrieval API request body."""

    query: str = Field(min_length=1, description="Free-text question")
    limit: int | None = Field(default=None, ge=1, le=100, description="Maximum results")
    threshold: float | None = Field(default=None, ge=0.0, le=1.0, description="Score floor")
    mode: SearchMode = Field(default=SearchMode.HYBRID)
