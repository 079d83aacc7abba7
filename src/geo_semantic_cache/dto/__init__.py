"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import GeocodeRequest, ReverseGeocodeRequest
from .responses import (
    AutocompleteItem,
    CacheStatsResponse,
    ClearCacheResponse,
    GeocodeResponse,
    HealthCheckResponse,
    StructuredAddressItem,
)

__all__ = [
    "GeocodeRequest",
    "ReverseGeocodeRequest",
    "StructuredAddressItem",
    "GeocodeResponse",
    "AutocompleteItem",
    "CacheStatsResponse",
    "ClearCacheResponse",
    "HealthCheckResponse",
]
