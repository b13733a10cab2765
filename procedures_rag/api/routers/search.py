"""
Search API endpoints.

Routes: POST /search, GET /search/related/{content_id}, GET /search/metadata

Dependencies: procedures_rag.application.services.retrieval_service
System role: Retrieval HTTP API
"""

from fastapi import APIRouter, Depends, Query

from procedures_rag.api.deps import get_retrieval_service
from procedures_rag.application.services.retrieval_service import RetrievalService
from procedures_rag.models.search import SearchRequest, SearchResult

router = APIRouter(prefix="/search", tags=["search"])


@router.post("", response_model=list[SearchResult])
async def search(
    request: SearchRequest,
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> list[SearchResult]:
    """
    Retrieve procedure snippets for a question.

    Retrieval failures produce an empty list, never an error response.

    Args:
        request: Query, optional limit/threshold and ranking mode
        retrieval_service: Injected RetrievalService

    Returns:
        list[SearchResult]: Ranked snippets with citation metadata
    """
    return await retrieval_service.search(
        request.query,
        limit=request.limit,
        threshold=request.threshold,
        mode=request.mode,
    )


@router.get("/related/{content_id}", response_model=list[SearchResult])
async def related_content(
    content_id: str,
    limit: int = Query(default=5, ge=1, le=50),
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> list[SearchResult]:
    """Snippets closely related to an indexed entry."""
    return await retrieval_service.engine.related_content(content_id, limit)


@router.get("/metadata", response_model=list[SearchResult])
async def search_by_metadata(
    type: str | None = None,
    chapter: str | None = None,
    section: str | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> list[SearchResult]:
    """Entries matching the given document type, chapter and section exactly."""
    return await retrieval_service.engine.search_by_metadata(type, chapter, section, limit)
