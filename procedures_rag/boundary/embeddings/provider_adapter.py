"""
Embedding provider adapter.

Wraps a single external text-embedding call. Input is truncated to the
provider's accepted length and flattened to one line; the call runs under a
hard deadline. Every failure surfaces as ProviderError except deadline
overruns, which surface as ProviderTimeoutError. No retries happen here.

Dependencies: langchain_core, asyncio
System role: Leaf adapter between the retrieval engine and the embedding API
"""

import asyncio
import logging

from langchain_core.embeddings import Embeddings

from procedures_rag.core.exceptions import ProviderError, ProviderTimeoutError
from procedures_rag.observability.log_utils import preview

logger = logging.getLogger(__name__)

DEFAULT_MAX_INPUT_CHARS = 8000
DEFAULT_TIMEOUT_SECONDS = 30.0


class EmbeddingProviderAdapter:
    """Normalize one embedding provider behind `embed(text) -> vector`."""

    def __init__(
        self,
        embeddings: Embeddings,
        max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        provider_name: str | None = None,
    ) -> None:
        """
        Initialize adapter around a LangChain embeddings backend.

        Args:
            embeddings: Backend performing the actual provider call
            max_input_chars: Hard cap on characters dispatched
            timeout_seconds: Deadline for one call
            provider_name: Name reported in errors (defaults to backend class name)
        """
        if max_input_chars < 1:
            raise ValueError("max_input_chars must be positive")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._embeddings = embeddings
        self._max_input_chars = max_input_chars
        self._timeout_seconds = timeout_seconds
        self.provider_name = provider_name or type(embeddings).__name__

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    def prepare(self, text: str) -> str:
        """Truncate to the provider limit and flatten newlines."""
        return text[: self._max_input_chars].replace("\n", " ")

    async def embed(self, text: str) -> list[float]:
        """
        Embed a single text.

        Args:
            text: Raw input text

        Returns:
            list[float]: Embedding vector

        Raises:
            ProviderTimeoutError: When the call exceeds its deadline
            ProviderError: On any other provider failure or an empty payload
        """
        payload = self.prepare(text)
        logger.debug(f"{__name__}:embed - Requesting embedding for: {preview(payload)!r}")

        try:
            vector = await asyncio.wait_for(
                self._embeddings.aembed_query(payload),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.warning(
                f"{__name__}:embed - Provider {self.provider_name} timed out after {self._timeout_seconds}s"
            )
            raise ProviderTimeoutError(
                f"Embedding call timed out after {self._timeout_seconds} seconds",
                timeout_seconds=self._timeout_seconds,
                details={"provider": self.provider_name},
            ) from e
        except Exception as e:
            logger.error(f"{__name__}:embed - Provider {self.provider_name} failed: {type(e).__name__}: {e}")
            raise ProviderError(
                f"Embedding provider call failed: {e}",
                provider=self.provider_name,
                details={"error_type": type(e).__name__},
            ) from e

        if not vector:
            raise ProviderError("No embedding returned from provider", provider=self.provider_name)

        return [float(value) for value in vector]
