"""
JSON loaders and writers for ingestion files.

Reads the knowledge-base export produced by the ingestion collaborator and
writes analyzer/chunker output in the camelCase shape downstream tools expect.

Dependencies: pydantic, pathlib
System role: File boundary for the offline ingestion scripts
"""

import json
import logging
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from procedures_rag.core.exceptions import DocumentProcessingError
from procedures_rag.models.analysis import DocumentAnalysis
from procedures_rag.models.document import KnowledgeDocument

logger = logging.getLogger(__name__)

_documents_adapter = TypeAdapter(list[KnowledgeDocument])
_analyses_adapter = TypeAdapter(list[DocumentAnalysis])


def _read(path: Path) -> str:
    if not path.exists():
        raise DocumentProcessingError(f"Input file not found: {path}", details={"path": str(path)})
    return path.read_text(encoding="utf-8")


def load_documents(path: str | Path) -> list[KnowledgeDocument]:
    """
    Load knowledge documents from a JSON array file.

    Args:
        path: Path to knowledge-base JSON

    Returns:
        list[KnowledgeDocument]: Validated documents

    Raises:
        DocumentProcessingError: When the file is missing or malformed
    """
    path = Path(path)
    try:
        documents = _documents_adapter.validate_json(_read(path))
    except PydanticValidationError as e:
        raise DocumentProcessingError(
            f"Malformed knowledge base file: {path}",
            details={"errors": e.error_count()},
        ) from e

    logger.info(f"{__name__}:load_documents - Loaded {len(documents)} documents from {path}")
    return documents


def load_analyses(path: str | Path) -> list[DocumentAnalysis]:
    """
    Load a previously written analyzer report.

    Raises:
        DocumentProcessingError: When the file is missing or malformed
    """
    path = Path(path)
    try:
        return _analyses_adapter.validate_json(_read(path))
    except PydanticValidationError as e:
        raise DocumentProcessingError(
            f"Malformed analysis file: {path}",
            details={"errors": e.error_count()},
        ) from e


def write_models(path: str | Path, models: Sequence[BaseModel]) -> Path:
    """Write models as a pretty-printed JSON array using field aliases."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [model.model_dump(mode="json", by_alias=True) for model in models]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"{__name__}:write_models - Wrote {len(payload)} records to {path}")
    return path
