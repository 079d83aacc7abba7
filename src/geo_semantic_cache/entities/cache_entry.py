"""Cache entry domain entity."""

import time
from collections.abc import Sequence
from dataclasses import dataclass, field

from geo_semantic_cache.exceptions import InvalidCoordinatesError

from .address import StructuredAddress
from .geocode_result import GeocodeResultEntity, Provenance


def validate_coordinates(latitude: float, longitude: float) -> None:
    """Raise InvalidCoordinatesError unless both values are in range."""
    if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
        raise InvalidCoordinatesError(latitude, longitude)


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a resolved address held by the cache store.

    Entries are immutable once created; the store never updates one in
    place, a newer entry is inserted instead.

    Attributes:
        raw_address: The query string that produced this entry
        normalized_key: Canonical form of raw_address, used as the keyed-store identity
        latitude: Latitude in degrees, [-90, 90]
        longitude: Longitude in degrees, [-180, 180]
        display_name: Human-readable full address
        embedding: Embedding vector of normalized_key
        structured: Address components
        inserted_at: Creation time (Unix timestamp), used only for TTL expiry
    """

    raw_address: str
    normalized_key: str
    latitude: float
    longitude: float
    display_name: str
    embedding: tuple[float, ...]
    structured: StructuredAddress = field(default_factory=StructuredAddress)
    inserted_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        validate_coordinates(self.latitude, self.longitude)
        # Freeze the vector so callers cannot mutate it through a shared list
        if not isinstance(self.embedding, tuple):
            object.__setattr__(self, "embedding", tuple(float(v) for v in self.embedding))

    @classmethod
    def from_result(
        cls,
        raw_address: str,
        normalized_key: str,
        result: GeocodeResultEntity,
        embedding: Sequence[float],
        inserted_at: float | None = None,
    ) -> "CacheEntryEntity":
        """Build an entry from a provider result."""
        return cls(
            raw_address=raw_address,
            normalized_key=normalized_key,
            latitude=result.latitude,
            longitude=result.longitude,
            display_name=result.display_name,
            embedding=tuple(float(v) for v in embedding),
            structured=result.structured,
            inserted_at=time.time() if inserted_at is None else inserted_at,
        )

    @property
    def dimension(self) -> int:
        """Length of the embedding vector."""
        return len(self.embedding)

    def to_result(self, source: Provenance = Provenance.CACHE) -> GeocodeResultEntity:
        """Convert to a geocoding result tagged with the given provenance."""
        return GeocodeResultEntity(
            latitude=self.latitude,
            longitude=self.longitude,
            display_name=self.display_name,
            structured=self.structured,
            source=source,
        )
