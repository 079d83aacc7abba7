"""HTTP handlers for geocoding and cache operations.

Handlers convert between DTOs (API contracts) and service calls.
They handle HTTP concerns like status codes, validation, and error handling.
"""

import logging
from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import HTTPException, status

from geo_semantic_cache.dto import (
    AutocompleteItem,
    CacheStatsResponse,
    ClearCacheResponse,
    GeocodeRequest,
    GeocodeResponse,
    HealthCheckResponse,
    ReverseGeocodeRequest,
    StructuredAddressItem,
)
from geo_semantic_cache.entities import GeocodeResultEntity, StructuredAddress
from geo_semantic_cache.exceptions import InvalidCoordinatesError
from geo_semantic_cache.services import GeocodeCacheService

logger = logging.getLogger(__name__)


def _address_item(address: StructuredAddress) -> StructuredAddressItem:
    return StructuredAddressItem(**asdict(address))


def _geocode_response(result: GeocodeResultEntity) -> GeocodeResponse:
    return GeocodeResponse(
        lat=result.latitude,
        lng=result.longitude,
        display_name=result.display_name,
        structured=_address_item(result.structured),
        source=result.source.value,
    )


def _internal_error(action: str, error: Exception) -> HTTPException:
    logger.exception("Failed to %s: %s", action, error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


class GeocodeHandler:
    """HTTP handlers for geocoding operations.

    This handler delegates business logic to GeocodeCacheService
    and handles HTTP-specific concerns like:
    - Converting entities to DTOs
    - Setting appropriate status codes (404 on a miss)
    - Error handling and responses

    Example:
        ```python
        handler = GeocodeHandler(cache_service=service)

        @app.post("/api/geocode", response_model=GeocodeResponse)
        async def geocode(request: GeocodeRequest):
            return await handler.geocode(request)
        ```
    """

    def __init__(self, cache_service: GeocodeCacheService) -> None:
        """Initialize the geocode handler.

        Args:
            cache_service: The cache service for business logic (required).
        """
        self._cache = cache_service

    async def geocode(self, request: GeocodeRequest) -> GeocodeResponse:
        """Handle POST /api/geocode requests.

        Raises:
            HTTPException: 404 if the address cannot be resolved, 500 on error
        """
        try:
            result = await self._cache.resolve_address(request.address)
        except Exception as e:
            raise _internal_error("geocode address", e) from e

        if result is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Address not found")
        return _geocode_response(result)

    async def reverse_geocode(self, request: ReverseGeocodeRequest) -> GeocodeResponse:
        """Handle POST /api/reverse-geocode requests.

        Raises:
            HTTPException: 400 on invalid coordinates, 404 if nothing is
                found, 500 on error
        """
        try:
            result = await self._cache.resolve_coordinates(request.lat, request.lng)
        except InvalidCoordinatesError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
        except Exception as e:
            raise _internal_error("reverse geocode", e) from e

        if result is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Location not found")
        return _geocode_response(result)

    async def autocomplete(self, query: str) -> list[AutocompleteItem]:
        """Handle GET /api/autocomplete requests."""
        try:
            suggestions = await self._cache.autocomplete(query)
        except Exception as e:
            raise _internal_error("autocomplete", e) from e

        logger.info("Autocomplete for %r: %d suggestions", query, len(suggestions))
        return [
            AutocompleteItem(
                display_name=s.display_name,
                structured=_address_item(s.structured),
            )
            for s in suggestions
        ]

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /api/cache/stats requests."""
        try:
            stats = self._cache.get_stats()
        except Exception as e:
            raise _internal_error("get stats", e) from e

        return CacheStatsResponse(**stats.to_dict())

    async def clear_cache(self) -> ClearCacheResponse:
        """Handle POST /api/cache/clear requests."""
        try:
            self._cache.clear()
        except Exception as e:
            raise _internal_error("clear cache", e) from e

        return ClearCacheResponse(message="Cache cleared successfully")

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        health = await self._cache.is_healthy()

        return HealthCheckResponse(
            status="ok",
            timestamp=datetime.now(timezone.utc).isoformat(),
            cache_healthy=health["cache"],
            embedding_healthy=health["embedding"],
        )
