"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (in-memory store, Ollama, Nominatim, ...)
- Unit testing with fake implementations
- Clear separation of concerns

Usage:
    ```python
    from geo_semantic_cache.protocols import CacheStore, EmbeddingProvider, GeoProvider

    repo: CacheStore = InMemoryCacheRepository.create()
    geo: GeoProvider = NominatimGeoProvider.create()
    ```
"""

from .cache_store import CacheStore
from .embedding_provider import EmbeddingProvider
from .geo_provider import GeoProvider

__all__ = [
    "CacheStore",
    "EmbeddingProvider",
    "GeoProvider",
]
