"""
Embeddings factory.

Builds the LangChain embeddings backend selected in EmbeddingSettings.
Google Gemini is the production provider; the deterministic fake provider
gives stable vectors for local development without network access.

Dependencies: langchain_core, langchain_google_genai, python-dotenv
System role: Embedding backend construction
"""

import logging

from dotenv import load_dotenv
from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings

from procedures_rag.configs.embeddings import EmbeddingSettings
from procedures_rag.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("google", "fake")


def build_embeddings(settings: EmbeddingSettings) -> Embeddings:
    """
    Create the embeddings backend for the configured provider.

    Args:
        settings: Embedding configuration

    Returns:
        Embeddings: LangChain embeddings implementation

    Raises:
        ValidationError: When the provider name is unknown
    """
    provider = settings.provider.lower()

    if provider == "fake":
        logger.info(f"{__name__}:build_embeddings - Using deterministic fake embeddings (size={settings.dimension})")
        return DeterministicFakeEmbedding(size=settings.dimension)

    if provider == "google":
        load_dotenv()
        # Imported lazily so the fake provider works without Google credentials installed
        from langchain_google_genai import GoogleGenerativeAIEmbeddings

        logger.info(f"{__name__}:build_embeddings - Using Google embeddings model={settings.model}")
        return GoogleGenerativeAIEmbeddings(model=settings.model)

    raise ValidationError(
        f"Unsupported embedding provider: {settings.provider}",
        field="provider",
        details={"supported": list(SUPPORTED_PROVIDERS)},
    )
