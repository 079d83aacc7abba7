"""Geo Semantic Cache - semantic caching in front of a geocoding provider.

Decides whether an incoming address (or coordinate pair) matches a
previously resolved one, combining embedding cosine similarity with
great-circle distance, before paying for an external lookup.

Layers:
    - protocols: Interface contracts (CacheStore, EmbeddingProvider, GeoProvider)
    - repositories: In-memory store and provider implementations
    - services: Business logic
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from geo_semantic_cache import (
        FallbackEmbeddingProvider,
        GeocodeCacheService,
        InMemoryCacheRepository,
        NominatimGeoProvider,
        OllamaEmbeddingProvider,
    )

    service = GeocodeCacheService.create(
        repository=InMemoryCacheRepository.create(),
        embedding_provider=FallbackEmbeddingProvider.create(OllamaEmbeddingProvider.create()),
        geo_provider=NominatimGeoProvider.create(),
    )
    ```

For HTTP API:
    ```python
    from geo_semantic_cache.api.app import app
    ```
"""

from geo_semantic_cache.config import settings
from geo_semantic_cache.entities import (
    AutocompleteEntity,
    CacheEntryEntity,
    CacheStatsEntity,
    GeocodeResultEntity,
    Provenance,
    StructuredAddress,
)
from geo_semantic_cache.normalizer import normalize_address
from geo_semantic_cache.protocols import CacheStore, EmbeddingProvider, GeoProvider
from geo_semantic_cache.repositories import (
    FallbackEmbeddingProvider,
    HashEmbeddingProvider,
    InMemoryCacheRepository,
    NominatimGeoProvider,
    OllamaEmbeddingProvider,
)
from geo_semantic_cache.services import GeocodeCacheService
from geo_semantic_cache.similarity import cosine_similarity, haversine_distance

__all__ = [
    # Configuration
    "settings",
    # Core functions
    "normalize_address",
    "cosine_similarity",
    "haversine_distance",
    # Protocols (interfaces)
    "CacheStore",
    "EmbeddingProvider",
    "GeoProvider",
    # Services (business logic)
    "GeocodeCacheService",
    # Repositories (data access)
    "InMemoryCacheRepository",
    "OllamaEmbeddingProvider",
    "HashEmbeddingProvider",
    "FallbackEmbeddingProvider",
    "NominatimGeoProvider",
    # Entities (domain models)
    "StructuredAddress",
    "CacheEntryEntity",
    "CacheStatsEntity",
    "GeocodeResultEntity",
    "AutocompleteEntity",
    "Provenance",
]
