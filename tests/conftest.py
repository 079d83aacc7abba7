"""Shared fixtures and fake providers for the test suite."""

import asyncio

import pytest

from geo_semantic_cache.entities import (
    AutocompleteEntity,
    CacheEntryEntity,
    GeocodeResultEntity,
    Provenance,
    StructuredAddress,
)
from geo_semantic_cache.exceptions import EmbeddingProviderError
from geo_semantic_cache.repositories import HashEmbeddingProvider, InMemoryCacheRepository
from geo_semantic_cache.services import GeocodeCacheService

# Koregaon Park, Pune
PUNE_LAT = 18.5285
PUNE_LNG = 73.8741


def make_entry(
    key: str,
    lat: float = PUNE_LAT,
    lng: float = PUNE_LNG,
    embedding: tuple[float, ...] = (1.0, 0.0, 0.0),
    inserted_at: float = 1_000.0,
    display_name: str | None = None,
) -> CacheEntryEntity:
    """Build a cache entry with sensible defaults."""
    return CacheEntryEntity(
        raw_address=key,
        normalized_key=key,
        latitude=lat,
        longitude=lng,
        display_name=display_name or key.title(),
        embedding=embedding,
        structured=StructuredAddress(city="Pune", state="Maharashtra", country="India"),
        inserted_at=inserted_at,
    )


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeEmbeddingProvider:
    """Embedding provider returning fixed vectors for known texts.

    Unknown texts get a deterministic hash vector of the same dimension.
    """

    def __init__(self, vectors: dict[str, list[float]] | None = None, dimension: int = 3) -> None:
        self.vectors = vectors or {}
        self._hash = HashEmbeddingProvider(dimension=dimension)
        self.calls: list[str] = []
        self.fail = False

    @property
    def dimension(self) -> int:
        return self._hash.dimension

    @property
    def model_name(self) -> str:
        return "fake"

    async def encode(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingProviderError("fake embedding backend down")
        if text in self.vectors:
            return list(self.vectors[text])
        return await self._hash.encode(text)

    async def is_available(self) -> bool:
        return not self.fail


class FakeGeoProvider:
    """Geo provider answering from in-memory tables."""

    def __init__(
        self,
        forward: dict[str, GeocodeResultEntity] | None = None,
        reverse: GeocodeResultEntity | None = None,
        suggestions: list[AutocompleteEntity] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.forward = forward or {}
        self.reverse = reverse
        self.suggestions = suggestions or []
        self.delay = delay
        self.geocode_calls: list[str] = []
        self.reverse_calls: list[tuple[float, float]] = []

    @property
    def name(self) -> str:
        return "fake"

    async def geocode(self, address: str) -> GeocodeResultEntity | None:
        self.geocode_calls.append(address)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.forward.get(address)

    async def reverse_geocode(self, latitude: float, longitude: float) -> GeocodeResultEntity | None:
        self.reverse_calls.append((latitude, longitude))
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.reverse

    async def autocomplete(self, query: str) -> list[AutocompleteEntity]:
        return list(self.suggestions)


def provider_result(
    display_name: str = "Koregaon Park, Pune, Maharashtra, 411001, India",
    lat: float = PUNE_LAT,
    lng: float = PUNE_LNG,
) -> GeocodeResultEntity:
    return GeocodeResultEntity(
        latitude=lat,
        longitude=lng,
        display_name=display_name,
        structured=StructuredAddress(
            area="Koregaon Park",
            city="Pune",
            state="Maharashtra",
            postal_code="411001",
            country="India",
        ),
        source=Provenance.PROVIDER,
    )


@pytest.fixture
def clock():
    """A controllable clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def repository(clock):
    """Small in-memory repository with default thresholds."""
    return InMemoryCacheRepository(
        max_entries=1000,
        ttl=86_400,
        similarity_threshold=0.85,
        distance_threshold_meters=500,
        clock=clock,
    )


@pytest.fixture
def embeddings():
    return FakeEmbeddingProvider()


@pytest.fixture
def geo():
    return FakeGeoProvider(
        forward={"Koregaon Park, Pune": provider_result()},
        reverse=provider_result(),
        suggestions=[
            AutocompleteEntity(
                display_name="Koregaon Park, Pune, Maharashtra, India",
                structured=StructuredAddress(area="Koregaon Park", city="Pune"),
            )
        ],
    )


@pytest.fixture
def service(embeddings, geo):
    return GeocodeCacheService(
        repository=InMemoryCacheRepository(max_entries=1000, ttl=86_400),
        embedding_provider=embeddings,
        geo_provider=geo,
        reverse_radius_meters=100,
        geocoder_timeout=1.0,
        exact_match_first=False,
    )
