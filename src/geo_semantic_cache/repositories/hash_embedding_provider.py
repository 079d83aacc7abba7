"""Deterministic hash-based embedding provider.

Used when the primary embedding backend is unavailable. The vectors are not
semantically meaningful, but they are reproducible for the same text and
have the agreed dimension, so matching never has to special-case a missing
embedding.
"""

import numpy as np

from geo_semantic_cache.config import settings


class HashEmbeddingProvider:
    """Character-weighted hash embedding (never fails, never blocks).

    For character ``i`` with code point ``c`` of the lowercased, stripped
    text, ``c / 1000`` is added at index ``(c * (i + 1)) % dimension``; the
    vector is then L2-normalized.

    ``c`` is the Unicode code point, so a character outside the Basic
    Multilingual Plane (an emoji, say) counts once rather than as two
    UTF-16 surrogates. Vectors only need to be deterministic across calls,
    not identical to those of other implementations.
    """

    def __init__(self, dimension: int | None = None) -> None:
        """Initialize the hash embedding provider.

        Args:
            dimension: Vector length. Defaults to settings.embedding_dimension.
        """
        self._dimension = dimension or settings.embedding_dimension
        if self._dimension < 1:
            raise ValueError(f"dimension must be positive, got {self._dimension}")

    @classmethod
    def create(cls, dimension: int | None = None) -> "HashEmbeddingProvider":
        """Factory method to create HashEmbeddingProvider with defaults."""
        return cls(dimension=dimension)

    @property
    def dimension(self) -> int:
        """Get the embedding vector dimension."""
        return self._dimension

    @property
    def model_name(self) -> str:
        """Get the model name/identifier."""
        return f"hash-{self._dimension}"

    def embed(self, text: str) -> list[float]:
        """Synchronously compute the hash embedding."""
        normalized = text.lower().strip()
        vector = np.zeros(self._dimension, dtype=np.float64)
        for i, char in enumerate(normalized):
            code = ord(char)
            vector[(code * (i + 1)) % self._dimension] += code / 1000

        magnitude = np.linalg.norm(vector)
        if magnitude > 0:
            vector /= magnitude
        return vector.tolist()

    async def encode(self, text: str) -> list[float]:
        """Generate the embedding vector for a single text."""
        return self.embed(text)

    async def is_available(self) -> bool:
        """The hash provider is always available."""
        return True
