"""Core retrieval, caching and document processing logic."""
