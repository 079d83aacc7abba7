"""Geocoding cache service for core business logic.

This service orchestrates a lookup by coordinating the cache store
(matching and storage), the embedding provider (vector generation) and the
geo provider (external resolution on a miss).
"""

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from typing import TypeVar

from geo_semantic_cache.config import settings
from geo_semantic_cache.entities import (
    AutocompleteEntity,
    CacheEntryEntity,
    CacheStatsEntity,
    GeocodeResultEntity,
    Provenance,
)
from geo_semantic_cache.entities.cache_entry import validate_coordinates
from geo_semantic_cache.exceptions import (
    EmbeddingDimensionError,
    EmbeddingProviderError,
    GeoProviderError,
)
from geo_semantic_cache.normalizer import normalize_address
from geo_semantic_cache.protocols import CacheStore, EmbeddingProvider, GeoProvider

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GeocodeCacheService:
    """Core geocoding cache orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: the in-memory matching store
    - EmbeddingProvider: Ollama with hash fallback, or anything else
    - GeoProvider: Nominatim, or anything else

    External calls are awaited outside the store, so the store lock is
    never held while a request is pending. A provider timeout or failure
    is a miss: nothing is stored.

    Example:
        ```python
        service = GeocodeCacheService.create(
            repository=InMemoryCacheRepository.create(),
            embedding_provider=FallbackEmbeddingProvider.create(OllamaEmbeddingProvider.create()),
            geo_provider=NominatimGeoProvider.create(),
        )
        result = await service.resolve_address("FC Road, Pune")
        print(result.source)  # Provenance.PROVIDER first, Provenance.CACHE afterwards
        ```
    """

    def __init__(
        self,
        repository: CacheStore,
        embedding_provider: EmbeddingProvider,
        geo_provider: GeoProvider,
        reverse_radius_meters: float | None = None,
        geocoder_timeout: float | None = None,
        exact_match_first: bool | None = None,
    ) -> None:
        """Initialize the geocoding cache service.

        Args:
            repository: Cache storage backend (required).
            embedding_provider: Embedding generation service (required).
            geo_provider: External geocoding backend (required).
            reverse_radius_meters: Radius for reverse cache hits. Defaults to settings.
            geocoder_timeout: Seconds to wait for the geo provider. Defaults to settings.
            exact_match_first: Serve an exact normalized-key match before the
                similarity scan. Off by default, in which case every forward
                lookup goes through the similarity selection. Defaults to settings.
        """
        self._repository = repository
        self._embeddings = embedding_provider
        self._geo = geo_provider
        self._reverse_radius = (
            reverse_radius_meters
            if reverse_radius_meters is not None
            else settings.reverse_radius_meters
        )
        self._geocoder_timeout = (
            geocoder_timeout if geocoder_timeout is not None else settings.geocoder_timeout_seconds
        )
        self._exact_match_first = (
            exact_match_first if exact_match_first is not None else settings.exact_match_first
        )

    @classmethod
    def create(
        cls,
        repository: CacheStore,
        embedding_provider: EmbeddingProvider,
        geo_provider: GeoProvider,
        reverse_radius_meters: float | None = None,
        exact_match_first: bool | None = None,
    ) -> "GeocodeCacheService":
        """Factory method to create GeocodeCacheService with sensible defaults.

        Args:
            repository: Cache storage backend (required).
            embedding_provider: Embedding generation service (required).
            geo_provider: External geocoding backend (required).
            reverse_radius_meters: Reverse lookup radius. If None, uses settings.
            exact_match_first: Exact key fast path. If None, uses settings.

        Returns:
            Configured GeocodeCacheService instance
        """
        return cls(
            repository=repository,
            embedding_provider=embedding_provider,
            geo_provider=geo_provider,
            reverse_radius_meters=reverse_radius_meters,
            exact_match_first=exact_match_first,
        )

    async def _call_provider(self, call: Awaitable[T], description: str) -> T | None:
        try:
            return await asyncio.wait_for(call, timeout=self._geocoder_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Geo provider timed out after %.1fs for %s", self._geocoder_timeout, description
            )
        except GeoProviderError as e:
            logger.warning("Geo provider failed for %s: %s", description, e)
        return None

    async def _embed(self, normalized: str) -> list[float] | None:
        try:
            return await self._embeddings.encode(normalized)
        except EmbeddingProviderError as e:
            logger.warning("No embedding for %r: %s", normalized, e)
            return None

    def _store(
        self,
        raw_address: str,
        normalized: str,
        result: GeocodeResultEntity,
        embedding: Sequence[float],
    ) -> None:
        entry = CacheEntryEntity.from_result(raw_address, normalized, result, embedding)
        try:
            self._repository.store(entry)
        except EmbeddingDimensionError as e:
            logger.warning("Result for %r not cached: %s", raw_address, e)

    async def resolve_address(self, address: str) -> GeocodeResultEntity | None:
        """Resolve an address, consulting the cache first.

        Business logic:
        1. Normalize the address
        2. Exact lookup by normalized key, when exact_match_first is on
        3. Embed the normalized text and run the similarity match
        4. On a miss, call the geo provider and cache its result

        Args:
            address: Free-form address text

        Returns:
            GeocodeResultEntity tagged "cache" or "provider", or None on a miss
        """
        normalized = normalize_address(address)
        if not normalized:
            logger.info("Nothing to geocode after normalizing %r", address)
            return None

        if self._exact_match_first:
            exact = self._repository.get_by_key(normalized)
            if exact is not None:
                logger.info("Cache HIT (exact) for: %s", address)
                return exact.to_result(Provenance.CACHE)

        query_embedding = await self._embed(normalized)
        if query_embedding is not None:
            similar = self._repository.find_similar(normalized, query_embedding)
            if similar is not None:
                logger.info("Cache HIT for: %s (matched %r)", address, similar.raw_address)
                return similar.to_result(Provenance.CACHE)

        logger.info("Cache MISS for: %s", address)
        result = await self._call_provider(self._geo.geocode(address), repr(address))
        if result is None:
            return None

        if query_embedding is not None:
            self._store(address, normalized, result, query_embedding)
        return result.with_source(Provenance.PROVIDER)

    async def resolve_coordinates(self, latitude: float, longitude: float) -> GeocodeResultEntity | None:
        """Resolve coordinates to an address, consulting the cache first.

        Business logic:
        1. Validate coordinate ranges
        2. Return the first cached entry within the reverse radius
        3. On a miss, call the geo provider, embed its display name and cache it

        Args:
            latitude: Latitude in degrees, [-90, 90]
            longitude: Longitude in degrees, [-180, 180]

        Returns:
            GeocodeResultEntity tagged "cache" or "provider", or None on a miss

        Raises:
            InvalidCoordinatesError: If the coordinates are out of range
        """
        validate_coordinates(latitude, longitude)

        nearby = self._repository.find_nearby(latitude, longitude, self._reverse_radius)
        if nearby is not None:
            logger.info("Cache HIT for reverse geocode: %s, %s", latitude, longitude)
            return nearby.to_result(Provenance.CACHE)

        logger.info("Cache MISS for reverse geocode: %s, %s", latitude, longitude)
        result = await self._call_provider(
            self._geo.reverse_geocode(latitude, longitude), f"({latitude}, {longitude})"
        )
        if result is None:
            return None

        normalized = normalize_address(result.display_name)
        embedding = await self._embed(normalized)
        if embedding is not None:
            self._store(result.display_name, normalized, result, embedding)
        return result.with_source(Provenance.PROVIDER)

    async def autocomplete(self, query: str) -> list[AutocompleteEntity]:
        """Suggest addresses for a partial query (not cached).

        Args:
            query: Partial address text

        Returns:
            Ordered suggestions, empty on provider failure or timeout
        """
        results = await self._call_provider(self._geo.autocomplete(query), f"autocomplete {query!r}")
        return results or []

    def get_stats(self) -> CacheStatsEntity:
        """Get cache statistics.

        Returns:
            CacheStatsEntity snapshot
        """
        return self._repository.get_stats()

    def clear(self) -> None:
        """Clear all cache entries."""
        self._repository.clear()

    async def is_healthy(self) -> dict[str, bool]:
        """Check the cache store and the embedding provider.

        Returns:
            Dict with "cache" and "embedding" health flags
        """
        return {
            "cache": self._repository.health_check(),
            "embedding": await self._embeddings.is_available(),
        }

    @property
    def exact_match_first(self) -> bool:
        """Whether exact key matches bypass the similarity scan."""
        return self._exact_match_first

    @property
    def reverse_radius_meters(self) -> float:
        """Get the reverse lookup radius."""
        return self._reverse_radius

    @property
    def repository(self) -> CacheStore:
        """Get the underlying repository (for testing)."""
        return self._repository

    @property
    def embedding_provider(self) -> EmbeddingProvider:
        """Get the underlying embedding provider (for testing)."""
        return self._embeddings

    @property
    def geo_provider(self) -> GeoProvider:
        """Get the underlying geo provider (for testing)."""
        return self._geo
