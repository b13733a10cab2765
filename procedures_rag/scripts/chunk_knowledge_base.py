"""
Knowledge base semantic chunking.

Usage:
    python -m procedures_rag.scripts.chunk_knowledge_base
    python -m procedures_rag.scripts.chunk_knowledge_base --input kb.json --analysis kb-analysis.json --output kb-chunked.json

Requires the analysis written by analyze_knowledge_base. Documents flagged
for chunking are split on procedural boundaries; the rest are kept whole.

Dependencies: procedures_rag.core.document_processing, procedures_rag.boundary.corpus
System role: Offline ingestion preparation step
"""

import argparse
import sys

from procedures_rag.boundary.corpus.document_loader import load_analyses, load_documents, write_models
from procedures_rag.configs import get_settings
from procedures_rag.core.document_processing.semantic_chunker import SemanticChunker, chunk_knowledge_base
from procedures_rag.core.exceptions import DocumentProcessingError
from procedures_rag.observability import configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_INPUT = "knowledge-base.json"
DEFAULT_ANALYSIS = "knowledge-base-analysis.json"
DEFAULT_OUTPUT = "knowledge-base-chunked.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Split diluted knowledge base documents into focused chunks")
    parser.add_argument("--input", default=DEFAULT_INPUT, help="Knowledge base JSON array")
    parser.add_argument("--analysis", default=DEFAULT_ANALYSIS, help="Output of analyze_knowledge_base")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help="Where to write the chunks")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        documents = load_documents(args.input)
        analyses = load_analyses(args.analysis)
    except DocumentProcessingError as e:
        logger.error(f"{__name__}:main - {e}. Run analyze_knowledge_base first if the analysis is missing.")
        return 1

    chunker = SemanticChunker(get_settings().chunking)
    chunks = chunk_knowledge_base(documents, analyses, chunker)

    topics: dict[str, int] = {}
    for chunk in chunks:
        topics[chunk.topic] = topics.get(chunk.topic, 0) + 1
    for topic, count in sorted(topics.items()):
        logger.info(f"{__name__}:main - Topic {topic}: {count} chunks")

    output = write_models(args.output, chunks)
    logger.info(f"{__name__}:main - {len(documents)} documents -> {len(chunks)} chunks saved to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
