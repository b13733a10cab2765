"""
Ingestion service orchestrator.

Runs the offline pipeline in-process: quality analysis, semantic chunking,
batched embedding through the embedding cache, and indexing into the corpus.

Dependencies: procedures_rag.core.document_processing, procedures_rag.core.cache, procedures_rag.boundary
System role: Knowledge base ingestion orchestration
"""

import asyncio
import logging
from typing import Sequence

from procedures_rag.boundary.corpus.corpus_schemas import CorpusEntry
from procedures_rag.boundary.corpus.knowledge_index import KnowledgeIndex
from procedures_rag.boundary.embeddings.provider_adapter import EmbeddingProviderAdapter
from procedures_rag.configs.embeddings import EmbeddingSettings
from procedures_rag.core.cache.cache_service import CacheService
from procedures_rag.core.document_processing.quality_analyzer import (
    DocumentQualityAnalyzer,
    analyze_knowledge_base,
)
from procedures_rag.core.document_processing.semantic_chunker import SemanticChunker, chunk_knowledge_base
from procedures_rag.models.analysis import AnalysisSummary, DocumentAnalysis
from procedures_rag.models.chunk import Chunk
from procedures_rag.models.document import KnowledgeDocument
from procedures_rag.models.ingestion import IngestionReport

logger = logging.getLogger(__name__)


class IngestionService:
    """
    Ingestion service orchestrator.

    Chunk sets are cached in the document tier keyed on the sorted document
    ids, so re-ingesting the same batch skips analysis and chunking.
    """

    def __init__(
        self,
        adapter: EmbeddingProviderAdapter,
        cache_service: CacheService,
        index: KnowledgeIndex,
        analyzer: DocumentQualityAnalyzer | None = None,
        chunker: SemanticChunker | None = None,
        settings: EmbeddingSettings | None = None,
    ) -> None:
        self.adapter = adapter
        self.cache_service = cache_service
        self.index = index
        self.analyzer = analyzer or DocumentQualityAnalyzer()
        self.chunker = chunker or SemanticChunker()
        self.settings = settings or EmbeddingSettings()

    def analyze(self, documents: Sequence[KnowledgeDocument]) -> tuple[list[DocumentAnalysis], AnalysisSummary]:
        return analyze_knowledge_base(documents, self.analyzer)

    def prepare_chunks(
        self,
        documents: Sequence[KnowledgeDocument],
        analyses: Sequence[DocumentAnalysis] | None = None,
    ) -> list[Chunk]:
        """
        Analyze and chunk documents, reusing a cached chunk set when present.

        Args:
            documents: Raw knowledge documents
            analyses: Precomputed analyses (computed when omitted)

        Returns:
            list[Chunk]: Chunks ready for embedding
        """
        doc_ids = [document.id for document in documents]
        cached = self.cache_service.get_documents(doc_ids)
        if cached is not None:
            logger.info(f"{__name__}:prepare_chunks - Document CACHE HIT for {len(doc_ids)} documents")
            return list(cached)

        if analyses is None:
            analyses, _ = self.analyze(documents)
        chunks = chunk_knowledge_base(documents, analyses, self.chunker)
        self.cache_service.set_documents(doc_ids, chunks)
        return chunks

    async def embed_many(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed texts in throttled batches; every text goes through the embedding cache."""
        return await self.cache_service.embeddings.get_or_compute_many(
            texts,
            self.adapter.embed,
            batch_size=self.settings.batch_size,
            pause_seconds=self.settings.batch_pause_seconds,
        )

    async def ingest(self, documents: Sequence[KnowledgeDocument]) -> IngestionReport:
        """
        Analyze, chunk, embed and index a batch of documents.

        Args:
            documents: Raw knowledge documents

        Returns:
            IngestionReport: Counts for the run and the resulting corpus size

        Raises:
            ProviderError: Provider failure while embedding a chunk
            ProviderTimeoutError: Provider exceeded its deadline while embedding a chunk
            RetrievalError: Embedding dimension does not match the indexed corpus
        """
        analyses, summary = self.analyze(documents)
        chunks = self.prepare_chunks(documents, analyses)
        vectors = await self.embed_many([chunk.content for chunk in chunks])

        entries = [CorpusEntry.from_chunk(chunk, vector) for chunk, vector in zip(chunks, vectors)]
        await asyncio.to_thread(self.index.add_entries, entries)
        self.cache_service.clear_search()

        logger.info(
            f"{__name__}:ingest - Indexed {len(entries)} chunks from {len(documents)} documents "
            f"(corpus size {len(self.index)})"
        )
        return IngestionReport(
            documents=len(documents),
            chunks=len(chunks),
            indexed=len(entries),
            index_size=len(self.index),
            summary=summary,
        )
