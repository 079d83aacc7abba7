"""Repository layer for data access.

This layer abstracts external dependencies (embedding APIs, geocoding APIs)
and the cache storage behind protocol-based interfaces. This enables:
- Easy swapping of implementations
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from geo_semantic_cache.protocols import CacheStore, EmbeddingProvider, GeoProvider

from .fallback_embedding_provider import FallbackEmbeddingProvider
from .hash_embedding_provider import HashEmbeddingProvider
from .memory_repository import InMemoryCacheRepository
from .nominatim_geo_provider import NominatimGeoProvider
from .ollama_embedding_provider import OllamaEmbeddingProvider

__all__ = [
    "CacheStore",
    "EmbeddingProvider",
    "GeoProvider",
    "InMemoryCacheRepository",
    "OllamaEmbeddingProvider",
    "HashEmbeddingProvider",
    "FallbackEmbeddingProvider",
    "NominatimGeoProvider",
]
