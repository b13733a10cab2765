"""
Document quality analysis models.

Dependencies: pydantic
System role: Analyzer output schema
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EmbeddingQuality(str, Enum):
    """How topically focused a document's single embedding would be."""

    FOCUSED = "focused"
    MIXED = "mixed"
    DILUTED = "diluted"


class ChunkingPriority(str, Enum):
    """Urgency of splitting a document."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DocumentAnalysis(BaseModel):
    """Topical dilution report for a single document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    size: int = Field(ge=0)
    topic_count: int = Field(ge=0)
    main_topics: list[str] = Field(default_factory=list)
    content_density: float = Field(ge=0.0, description="Numeric-unit matches per 100 words")
    embedding_quality: EmbeddingQuality
    needs_chunking: bool
    chunking_priority: ChunkingPriority


class AnalysisSummary(BaseModel):
    """Aggregate counts over an analyzed knowledge base."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total: int = 0
    focused: int = 0
    mixed: int = 0
    diluted: int = 0
    needs_chunking: int = 0
    high_priority: int = 0
    medium_priority: int = 0
    total_chars: int = 0
    average_size: int = 0
