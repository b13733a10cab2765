"""
Knowledge base embedding-quality report.

Usage:
    python -m procedures_rag.scripts.analyze_knowledge_base
    python -m procedures_rag.scripts.analyze_knowledge_base --input kb.json --output kb-analysis.json

Purpose:
- Measure topical dilution of each document
- Flag documents that need semantic chunking, with priority
- Write the per-document analysis consumed by chunk_knowledge_base

Dependencies: procedures_rag.core.document_processing, procedures_rag.boundary.corpus
System role: Offline ingestion preparation step
"""

import argparse
import sys

from procedures_rag.boundary.corpus.document_loader import load_documents, write_models
from procedures_rag.core.document_processing.quality_analyzer import analyze_knowledge_base
from procedures_rag.core.exceptions import DocumentProcessingError
from procedures_rag.models.analysis import ChunkingPriority
from procedures_rag.observability import configure_logging, get_logger

logger = get_logger(__name__)

DEFAULT_INPUT = "knowledge-base.json"
DEFAULT_OUTPUT = "knowledge-base-analysis.json"


def _percent(count: int, total: int) -> str:
    return f"{count / total * 100:.1f}%" if total else "0.0%"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze knowledge base embedding quality")
    parser.add_argument("--input", default=DEFAULT_INPUT, help="Knowledge base JSON array")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help="Where to write the analysis")
    parser.add_argument("--log-level", default="INFO")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        documents = load_documents(args.input)
    except DocumentProcessingError as e:
        logger.error(f"{__name__}:main - {e}")
        return 1

    analyses, summary = analyze_knowledge_base(documents)

    logger.info(f"{__name__}:main - Total documents: {summary.total}")
    logger.info(f"{__name__}:main - Focused: {summary.focused} ({_percent(summary.focused, summary.total)})")
    logger.info(f"{__name__}:main - Mixed: {summary.mixed} ({_percent(summary.mixed, summary.total)})")
    logger.info(f"{__name__}:main - Diluted: {summary.diluted} ({_percent(summary.diluted, summary.total)})")
    logger.info(
        f"{__name__}:main - Need chunking: {summary.needs_chunking} "
        f"({_percent(summary.needs_chunking, summary.total)}), "
        f"high priority {summary.high_priority}, medium priority {summary.medium_priority}"
    )
    logger.info(f"{__name__}:main - Average document size: {summary.average_size} chars")

    high_priority = sorted(
        (analysis for analysis in analyses if analysis.chunking_priority is ChunkingPriority.HIGH),
        key=lambda analysis: analysis.size,
        reverse=True,
    )
    for analysis in high_priority[:10]:
        logger.info(
            f"{__name__}:main - High priority: {analysis.title} ({analysis.size} chars, "
            f"{analysis.topic_count} topics, density {analysis.content_density:.1f})"
        )

    output = write_models(args.output, analyses)
    logger.info(f"{__name__}:main - Detailed analysis saved to {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
