"""Geocoding provider protocol.

Forward lookup, reverse lookup and autocomplete against an external
geocoding backend. Implementations must report failure as "no result"
(None or an empty list) rather than raising.
"""

from typing import Protocol, runtime_checkable

from geo_semantic_cache.entities import AutocompleteEntity, GeocodeResultEntity


@runtime_checkable
class GeoProvider(Protocol):
    """Protocol for geocoding backends."""

    @property
    def name(self) -> str:
        """Human-readable name of this provider."""
        ...

    async def geocode(self, address: str) -> GeocodeResultEntity | None:
        """Resolve an address to coordinates.

        Args:
            address: Free-form address text

        Returns:
            The best result, or None if not found or the backend failed
        """
        ...

    async def reverse_geocode(self, latitude: float, longitude: float) -> GeocodeResultEntity | None:
        """Resolve coordinates to an address.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            The result, or None if not found or the backend failed
        """
        ...

    async def autocomplete(self, query: str) -> list[AutocompleteEntity]:
        """Suggest addresses for a query prefix.

        Args:
            query: Partial address text

        Returns:
            Ordered suggestions (bounded length), empty on failure
        """
        ...
