"""Service orchestrators."""

from .ingestion_service import IngestionService
from .retrieval_service import RetrievalService

__all__ = [
    "IngestionService",
    "RetrievalService",
]
