"""
Query/response cache configuration settings.

TTLs for the in-memory cache tiers and near-duplicate query detection.

Dependencies: pydantic, pydantic_settings
System role: Multi-tier cache configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Cache tier TTLs and near-duplicate detection settings."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    search_ttl_minutes: int = Field(default=30, description="Search result cache TTL", ge=1)
    response_ttl_minutes: int = Field(default=120, description="Generated response cache TTL", ge=1)
    document_ttl_minutes: int = Field(default=60, description="Processed document set cache TTL", ge=1)

    query_history_size: int = Field(
        default=100,
        description="Number of recent queries kept for near-duplicate detection",
        ge=1,
    )
    near_duplicate_threshold: float = Field(
        default=0.8,
        description="Edit-distance similarity above which a query counts as a near duplicate",
        ge=0.0,
        le=1.0,
    )
    near_duplicate_window_minutes: int = Field(
        default=60,
        description="Maximum age of a history entry eligible for reuse",
        ge=1,
    )
    avg_cost_per_call: float = Field(
        default=0.002,
        description="Average provider cost per call, used for savings reports",
        ge=0.0,
    )
