"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .address import StructuredAddress
from .cache_entry import CacheEntryEntity
from .cache_stats import CacheStatsEntity
from .geocode_result import AutocompleteEntity, GeocodeResultEntity, Provenance

__all__ = [
    "StructuredAddress",
    "CacheEntryEntity",
    "CacheStatsEntity",
    "GeocodeResultEntity",
    "AutocompleteEntity",
    "Provenance",
]
