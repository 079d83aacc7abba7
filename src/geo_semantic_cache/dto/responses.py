"""Response DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class StructuredAddressItem(BaseModel):
    """Address components; every field may be unknown."""

    building: str | None = None
    street: str | None = None
    area: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class GeocodeResponse(BaseModel):
    """Response DTO for forward and reverse geocoding."""

    lat: float = Field(..., description="Latitude in degrees", ge=-90.0, le=90.0)
    lng: float = Field(..., description="Longitude in degrees", ge=-180.0, le=180.0)
    display_name: str = Field(..., description="Human-readable full address")
    structured: StructuredAddressItem = Field(default_factory=StructuredAddressItem)
    source: Literal["cache", "provider"] = Field(
        ..., description="Whether the result came from the cache or the geocoding provider"
    )


class AutocompleteItem(BaseModel):
    """Single autocomplete suggestion."""

    display_name: str
    structured: StructuredAddressItem = Field(default_factory=StructuredAddressItem)


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics.

    ``hits``/``misses`` count exact keyed lookups; ``similarity_hits`` and
    ``similarity_misses`` count semantic matching scans.
    """

    entries: int = Field(..., description="Live entries in the match list", ge=0)
    keys: int = Field(..., description="Keys in the keyed timed store", ge=0)
    hits: int = Field(..., description="Exact keyed lookups that hit", ge=0)
    misses: int = Field(..., description="Exact keyed lookups that missed", ge=0)
    similarity_hits: int = Field(0, description="Similarity scans that matched", ge=0)
    similarity_misses: int = Field(0, description="Similarity scans without a match", ge=0)
    capacity: int = Field(0, description="Maximum entries before FIFO eviction", ge=0)
    ttl_seconds: int = Field(0, description="Time-to-live for cache entries in seconds", ge=0)


class ClearCacheResponse(BaseModel):
    """Response DTO for clearing the cache."""

    message: str


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'ok'")
    timestamp: str = Field(..., description="ISO-8601 server time")
    cache_healthy: bool = Field(..., description="Whether the cache store is usable")
    embedding_healthy: bool | None = Field(
        None,
        description="Whether the primary embedding service is reachable",
    )
