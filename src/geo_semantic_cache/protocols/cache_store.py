"""Cache storage protocol.

Defines the interface for the bounded store of resolved addresses that
performs semantic matching (forward path) and proximity lookup
(reverse path).
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from geo_semantic_cache.entities import CacheEntryEntity, CacheStatsEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for cache storage backends."""

    def store(self, entry: CacheEntryEntity) -> None:
        """Insert an entry, evicting the oldest one when over capacity.

        Args:
            entry: The entry to insert
        """
        ...

    def find_similar(
        self,
        normalized_query: str,
        query_embedding: Sequence[float],
    ) -> CacheEntryEntity | None:
        """Find the best semantically similar entry.

        Args:
            normalized_query: The normalized query text
            query_embedding: Embedding of the normalized query

        Returns:
            The best match, or None
        """
        ...

    def find_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_meters: float,
    ) -> CacheEntryEntity | None:
        """Find the first entry within a radius of a point.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees
            radius_meters: Exclusive search radius in meters

        Returns:
            The first entry found, or None
        """
        ...

    def get_by_key(self, normalized_key: str) -> CacheEntryEntity | None:
        """Look up the latest entry for an exact normalized key.

        Args:
            normalized_key: The normalized address

        Returns:
            The entry, or None if absent or expired
        """
        ...

    def clear(self) -> None:
        """Drop all entries and reset the statistics counters."""
        ...

    def count(self) -> int:
        """Count live entries."""
        ...

    def health_check(self) -> bool:
        """Check if the store is usable."""
        ...

    def get_stats(self) -> CacheStatsEntity:
        """Get a statistics snapshot."""
        ...
