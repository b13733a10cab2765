"""
Knowledge corpus boundary.

In-process index supplying vector and lexical candidates to the search engine,
plus JSON loaders for ingestion files.
"""

from procedures_rag.boundary.corpus.corpus_schemas import CorpusEntry, CorpusMatch
from procedures_rag.boundary.corpus.knowledge_index import KnowledgeIndex

__all__ = ["CorpusEntry", "CorpusMatch", "KnowledgeIndex"]
