"""
Retrieval configuration settings.

Result limits, similarity floors, score fusion weights and query deadlines
for the hybrid search engine.

Dependencies: pydantic, pydantic_settings
System role: Hybrid search configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RetrievalSettings(BaseSettings):
    """Hybrid and pure-vector search configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RETRIEVAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_limit: int = Field(default=10, description="Maximum results returned", ge=1, le=100)
    hybrid_threshold: float = Field(
        default=0.5,
        description="Default fused-score floor for hybrid search",
        ge=0.0,
        le=1.0,
    )
    vector_threshold: float = Field(
        default=0.7,
        description="Default similarity floor for pure vector search",
        ge=0.0,
        le=1.0,
    )
    vector_weight: float = Field(default=0.7, description="Weight of cosine similarity in the fused score", ge=0.0)
    lexical_weight: float = Field(default=0.3, description="Weight of lexical rank in the fused score", ge=0.0)
    query_timeout_seconds: float = Field(
        default=30.0,
        description="Deadline for a single corpus query",
        gt=0,
    )
    relaxation_thresholds: list[float] = Field(
        default=[0.5, 0.3],
        description="Thresholds retried in order when a search returns nothing",
    )
    related_content_threshold: float = Field(
        default=0.8,
        description="Similarity floor for related-content lookups",
        ge=0.0,
        le=1.0,
    )
    corpus_path: str | None = Field(
        default=None,
        description="Knowledge-base JSON ingested into the corpus index at API startup",
    )
