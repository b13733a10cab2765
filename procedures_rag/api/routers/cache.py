"""
Cache management API endpoints.

Routes: GET /cache/stats, DELETE /cache

Dependencies: procedures_rag.core.cache
System role: Cache observability and management HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from procedures_rag.api.deps import get_cache_service
from procedures_rag.core.cache.cache_service import CacheService
from procedures_rag.models.cache import CacheStatsReport, SavingsReport


class CacheStatsResponse(BaseModel):
    """Per-tier statistics with the estimated provider savings."""

    stats: CacheStatsReport
    savings: SavingsReport


class CacheClearResponse(BaseModel):
    status: str
    message: str


router = APIRouter(prefix="/cache", tags=["cache"])


@router.get("/stats", response_model=CacheStatsResponse)
async def cache_stats(cache_service: CacheService = Depends(get_cache_service)) -> CacheStatsResponse:
    """Current tier sizes, keys, hit/miss counters and savings estimate."""
    return CacheStatsResponse(stats=cache_service.stats(), savings=cache_service.savings())


@router.delete("", response_model=CacheClearResponse)
async def clear_cache(cache_service: CacheService = Depends(get_cache_service)) -> CacheClearResponse:
    """Drop every cache tier and the query history."""
    cache_service.clear_all()
    return CacheClearResponse(status="cleared", message="All caches cleared")
