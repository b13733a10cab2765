"""
Embedding provider boundary.

Exports the provider adapter and the LangChain embeddings factory.
"""

from procedures_rag.boundary.embeddings.factory import build_embeddings
from procedures_rag.boundary.embeddings.provider_adapter import EmbeddingProviderAdapter

__all__ = ["EmbeddingProviderAdapter", "build_embeddings"]
