"""
Knowledge document models.

Raw procedures documents as produced by the ingestion collaborator.
Documents are immutable once ingested.

Dependencies: pydantic
System role: Ingestion input schema
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class DocumentMetadata(BaseModel):
    """Source metadata attached to a knowledge document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    title: str | None = Field(default=None, description="Source title")
    type: str | None = Field(default=None, description="Document type (order, chapter, section)")
    chapter: str | None = Field(default=None, description="Chapter number")
    section: str | None = Field(default=None, description="Section number")
    paragraph: str | None = Field(default=None, description="Paragraph reference")
    source: str | None = Field(default=None, description="Publishing source")
    source_url: str | None = Field(default=None, alias="url", description="Canonical source URL")

    @field_validator("chapter", "section", "paragraph", mode="before")
    @classmethod
    def _coerce_reference(cls, value):
        """Chapter/section numbers arrive as ints or strings."""
        if value is None:
            return None
        return str(value)


class KnowledgeDocument(BaseModel):
    """A raw knowledge base document."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    id: str = Field(description="Document identifier")
    content: str = Field(description="Full document text")
    display_name: str = Field(default="", description="Human readable document name")
    tags: list[str] = Field(default_factory=list, description="Distinct document tags")
    summary: str = Field(default="", description="Short document summary")
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)

    @field_validator("tags", mode="before")
    @classmethod
    def _distinct_tags(cls, value):
        """Tags behave as a set; keep the first occurrence of each."""
        if value is None:
            return []
        return list(dict.fromkeys(value))

    @property
    def size(self) -> int:
        """Document length in characters."""
        return len(self.content)
