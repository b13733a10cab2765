"""
Health check API endpoints.

Routes: GET /health, GET /health/index

Dependencies: procedures_rag.boundary.corpus
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from procedures_rag.api.deps import get_knowledge_index
from procedures_rag.boundary.corpus.knowledge_index import KnowledgeIndex


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


class IndexHealthResponse(HealthResponse):
    """Corpus index health with entry count."""

    entries: int
    dimension: int | None = None


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/index", response_model=IndexHealthResponse)
async def health_check_index(index: KnowledgeIndex = Depends(get_knowledge_index)) -> IndexHealthResponse:
    """Corpus index health check."""
    return IndexHealthResponse(
        status="healthy",
        message="Corpus index accessible" if len(index) else "Corpus index empty",
        entries=len(index),
        dimension=index.dimension,
    )
