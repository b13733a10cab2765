"""
Ingestion report model.

Dependencies: pydantic
System role: Ingestion service output schema
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from procedures_rag.models.analysis import AnalysisSummary


class IngestionReport(BaseModel):
    """Outcome of one ingestion run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    documents: int = Field(ge=0, description="Documents received")
    chunks: int = Field(ge=0, description="Chunks produced (chunked and unchunked)")
    indexed: int = Field(ge=0, description="Entries written to the corpus index")
    index_size: int = Field(ge=0, description="Corpus size after the run")
    summary: AnalysisSummary
