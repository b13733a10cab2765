"""
Semantic chunking configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Chunker thresholds
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ChunkingSettings(BaseSettings):
    """Size thresholds for semantic sections and emitted chunks."""

    model_config = SettingsConfigDict(
        env_prefix="CHUNKING_",
        case_sensitive=False,
        extra="ignore",
    )

    min_section_chars: int = Field(
        default=100,
        description="Sections shorter than this are discarded when closed",
        ge=0,
    )
    min_chunk_chars: int = Field(
        default=200,
        description="Sections shorter than this are never emitted as chunks",
        ge=0,
    )
    max_content_keywords: int = Field(
        default=3,
        description="Frequent content words added to the static topic keywords",
        ge=0,
    )
