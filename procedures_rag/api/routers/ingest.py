"""
Ingestion API endpoints.

Routes: POST /ingest

Dependencies: procedures_rag.application.services.ingestion_service
System role: Corpus loading HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException

from procedures_rag.api.deps import get_ingestion_service
from procedures_rag.application.services.ingestion_service import IngestionService
from procedures_rag.core.exceptions import ProviderError, ProviderTimeoutError, RetrievalError
from procedures_rag.models.document import KnowledgeDocument
from procedures_rag.models.ingestion import IngestionReport

router = APIRouter(prefix="/ingest", tags=["ingest"])


@router.post("", response_model=IngestionReport)
async def ingest_documents(
    documents: list[KnowledgeDocument],
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> IngestionReport:
    """
    Analyze, chunk, embed and index knowledge documents.

    Entries are upserted by chunk id, so posting the same documents again
    replaces rather than duplicates them.

    Args:
        documents: Knowledge-base documents in the export's camelCase shape
        ingestion_service: Injected IngestionService

    Returns:
        IngestionReport: Counts for the run and the resulting corpus size

    Raises:
        HTTPException(400): No documents supplied
        HTTPException(409): Embedding dimension does not match the indexed corpus
        HTTPException(502): Embedding provider failed
        HTTPException(504): Embedding provider timed out
    """
    if not documents:
        raise HTTPException(status_code=400, detail="No documents supplied")

    try:
        return await ingestion_service.ingest(documents)
    except ProviderTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))
    except ProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except RetrievalError as e:
        raise HTTPException(status_code=409, detail=str(e))
