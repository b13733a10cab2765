"""
Embedding provider configuration settings.

Manages the external embedding model, input limits, call deadline and
bulk-embedding throttling.

Dependencies: pydantic, pydantic_settings
System role: Embedding adapter and embedding cache configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EmbeddingSettings(BaseSettings):
    """Embedding provider configuration (Google Gemini in production, fake for dev)."""

    model_config = SettingsConfigDict(
        env_prefix="EMBEDDING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(
        default="google",
        description="Embedding provider: 'google' for Gemini, 'fake' for deterministic local vectors",
    )
    model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    dimension: int = Field(
        default=1536,
        description="Embedding vector dimension",
        ge=1,
    )
    max_input_chars: int = Field(
        default=8000,
        description="Hard cap on characters sent to the provider",
        ge=1,
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="Deadline for a single provider call",
        gt=0,
    )
    batch_size: int = Field(
        default=10,
        description="Texts embedded concurrently per batch in bulk mode",
        ge=1,
    )
    batch_pause_seconds: float = Field(
        default=0.1,
        description="Pause between bulk batches to respect provider rate limits",
        ge=0,
    )
    cache_ttl_minutes: int = Field(
        default=7 * 24 * 60,
        description="Embedding cache TTL (default 7 days)",
        ge=1,
    )
