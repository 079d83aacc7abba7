"""Primary/fallback embedding provider selection.

Wraps a primary EmbeddingProvider (usually Ollama) and a deterministic
fallback. The choice is made here, per call, so that matching code never
needs to know whether the primary backend is up.
"""

import asyncio
import logging

from geo_semantic_cache.config import settings
from geo_semantic_cache.exceptions import EmbeddingProviderError
from geo_semantic_cache.protocols import EmbeddingProvider

from .hash_embedding_provider import HashEmbeddingProvider

logger = logging.getLogger(__name__)


class FallbackEmbeddingProvider:
    """EmbeddingProvider that never fails.

    Calls the primary provider under a timeout. On timeout, on error, or
    when the primary returns a vector of the wrong length, the fallback
    vector is returned instead. The fallback is built with the primary's
    dimension so both variants produce comparable vectors.

    Example:
        ```python
        provider = FallbackEmbeddingProvider.create(
            primary=OllamaEmbeddingProvider.create(),
        )
        vector = await provider.encode("fc road pune")  # always succeeds
        ```
    """

    def __init__(
        self,
        primary: EmbeddingProvider,
        fallback: EmbeddingProvider | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the fallback embedding provider.

        Args:
            primary: Preferred embedding provider.
            fallback: Provider used when the primary fails. Defaults to a
                HashEmbeddingProvider with the primary's dimension.
            timeout: Seconds to wait for the primary. Defaults to settings.

        Raises:
            ValueError: If primary and fallback dimensions differ
        """
        self._primary = primary
        self._fallback = fallback or HashEmbeddingProvider(dimension=primary.dimension)
        self._timeout = timeout if timeout is not None else settings.embedding_timeout_seconds
        self._fallback_count = 0

        if self._fallback.dimension != self._primary.dimension:
            raise ValueError(
                f"Fallback dimension {self._fallback.dimension} does not match "
                f"primary dimension {self._primary.dimension}"
            )

    @classmethod
    def create(
        cls,
        primary: EmbeddingProvider,
        fallback: EmbeddingProvider | None = None,
        timeout: float | None = None,
    ) -> "FallbackEmbeddingProvider":
        """Factory method to create FallbackEmbeddingProvider with defaults."""
        return cls(primary=primary, fallback=fallback, timeout=timeout)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        return self._primary.dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return f"{self._primary.model_name} (fallback: {self._fallback.model_name})"

    @property
    def fallback_count(self) -> int:
        """Number of encode calls served by the fallback."""
        return self._fallback_count

    async def encode(self, text: str) -> list[float]:
        """Generate an embedding, falling back on any primary failure.

        Args:
            text: The text to encode

        Returns:
            The embedding vector as a list of floats
        """
        try:
            vector = await asyncio.wait_for(self._primary.encode(text), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Embedding provider %s timed out after %.1fs, using fallback embedding",
                self._primary.model_name,
                self._timeout,
            )
        except EmbeddingProviderError as e:
            logger.warning("Embedding provider unavailable, using fallback embedding: %s", e)
        else:
            if len(vector) == self.dimension:
                return vector
            logger.warning(
                "Embedding provider %s returned %d dimensions, expected %d; using fallback",
                self._primary.model_name,
                len(vector),
                self.dimension,
            )

        self._fallback_count += 1
        return await self._fallback.encode(text)

    async def is_available(self) -> bool:
        """Check whether the primary provider is reachable.

        encode() succeeds either way; this reports embedding quality.
        """
        return await self._primary.is_available()
