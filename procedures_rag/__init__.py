"""
Retrieval and caching engine for the aviation-procedures assistant.

Embedding cache, hybrid vector+lexical search, multi-tier query/response
caching and semantic chunking of the procedures knowledge base.
"""

__version__ = "0.1.0"
