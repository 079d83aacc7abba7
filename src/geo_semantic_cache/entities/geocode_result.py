"""Geocoding result domain entities."""

from dataclasses import dataclass, field, replace
from enum import Enum

from .address import StructuredAddress


class Provenance(str, Enum):
    """Where a result came from."""

    CACHE = "cache"
    PROVIDER = "provider"


@dataclass(frozen=True)
class GeocodeResultEntity:
    """A resolved location.

    Attributes:
        latitude: Latitude in degrees
        longitude: Longitude in degrees
        display_name: Human-readable full address
        structured: Address components
        source: Provenance tag ("cache" or "provider")
    """

    latitude: float
    longitude: float
    display_name: str
    structured: StructuredAddress = field(default_factory=StructuredAddress)
    source: Provenance = Provenance.PROVIDER

    def with_source(self, source: Provenance) -> "GeocodeResultEntity":
        """Return a copy tagged with another provenance."""
        return replace(self, source=source)


@dataclass(frozen=True)
class AutocompleteEntity:
    """A single autocomplete suggestion."""

    display_name: str
    structured: StructuredAddress = field(default_factory=StructuredAddress)
