"""Service layer for business logic.

This layer contains the core business logic and orchestration.
Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)

Usage:
    ```python
    from geo_semantic_cache.services import GeocodeCacheService

    service = GeocodeCacheService.create(
        repository=repo,
        embedding_provider=embeddings,
        geo_provider=geo,
    )
    ```
"""

from .cache_service import GeocodeCacheService

__all__ = [
    "GeocodeCacheService",
]
