"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers, loads the configured corpus
at startup and configures uvicorn server.

Dependencies: fastapi, procedures_rag.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

from contextlib import asynccontextmanager

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from procedures_rag.api.deps.dependencies import ServiceCache, get_service_cache
from procedures_rag.boundary.corpus.document_loader import load_documents
from procedures_rag.configs import get_settings
from procedures_rag.core.exceptions import ProviderError, ProviderTimeoutError
from procedures_rag.models.ingestion import IngestionReport
from procedures_rag.observability import configure_logging
from .routers import cache_router, health_router, ingest_router, search_router


async def load_corpus(cache: ServiceCache, corpus_path: str) -> IngestionReport | None:
    """
    Ingest the configured knowledge base into the shared index.

    A missing or malformed file raises; a provider outage is logged and the
    API starts with whatever the index already holds.

    Raises:
        DocumentProcessingError: When the corpus file is missing or malformed
    """
    logger = logging.getLogger("uvicorn")
    documents = load_documents(corpus_path)
    if not documents:
        logger.warning(f"Corpus file {corpus_path} holds no documents")
        return None

    try:
        report = await cache.ingestion_service.ingest(documents)
    except (ProviderError, ProviderTimeoutError) as e:
        logger.error(f"Corpus ingestion failed, serving without it: {e}")
        return None

    logger.info(f"Corpus loaded: {report.indexed} entries from {report.documents} documents")
    return report


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    configure_logging(get_settings().log_level)
    logger = logging.getLogger("uvicorn")

    # Startup
    logger.info("Pre-warming service cache...")
    cache = get_service_cache()
    _ = cache.cache_service
    _ = cache.index
    logger.info("Service cache pre-warmed")

    corpus_path = cache.settings.retrieval.corpus_path
    if corpus_path:
        await load_corpus(cache, corpus_path)

    yield

    # Shutdown
    cache.clear()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Procedures RAG API",
        description="Hybrid retrieval over air traffic control procedures",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(search_router, prefix="/api/v1")
    app.include_router(ingest_router, prefix="/api/v1")
    app.include_router(cache_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "procedures_rag.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
