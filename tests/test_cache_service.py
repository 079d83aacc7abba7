"""Tests for GeocodeCacheService orchestration."""

import asyncio
import math

import pytest

from geo_semantic_cache.entities import Provenance
from geo_semantic_cache.exceptions import InvalidCoordinatesError
from geo_semantic_cache.repositories import InMemoryCacheRepository
from geo_semantic_cache.services import GeocodeCacheService

from .conftest import (
    PUNE_LAT,
    PUNE_LNG,
    FakeEmbeddingProvider,
    FakeGeoProvider,
    make_entry,
    provider_result,
)

# ~800 m north of PUNE_LAT
FAR_NORTH_LAT = PUNE_LAT + 800 / 111_195.0


def competing_entries_service(clock, exact_match_first: bool) -> GeocodeCacheService:
    """Store an older similar entry and a newer exact-key entry 800 m away."""
    repository = InMemoryCacheRepository(max_entries=10, ttl=60, clock=clock)
    similar = (0.90, math.sqrt(1 - 0.90**2), 0.0)
    repository.store(make_entry("fc road pune", embedding=similar, inserted_at=clock.now))
    repository.store(
        make_entry(
            "koregaon park",
            lat=FAR_NORTH_LAT,
            embedding=(1.0, 0.0, 0.0),
            inserted_at=clock.now,
        )
    )
    return GeocodeCacheService(
        repository=repository,
        embedding_provider=FakeEmbeddingProvider({"koregaon park": [1.0, 0.0, 0.0]}),
        geo_provider=FakeGeoProvider(),
        geocoder_timeout=1.0,
        exact_match_first=exact_match_first,
    )


class TestResolveAddress:
    def test_provider_then_cache_hit(self, service, geo):
        first = asyncio.run(service.resolve_address("Koregaon Park, Pune"))
        second = asyncio.run(service.resolve_address("  koregaon   park pune "))

        assert first.source is Provenance.PROVIDER
        assert second.source is Provenance.CACHE
        assert second.latitude == first.latitude
        assert second.display_name == first.display_name
        assert geo.geocode_calls == ["Koregaon Park, Pune"]

        stats = service.get_stats()
        assert stats.entries == 1
        assert (stats.similarity_hits, stats.similarity_misses) == (1, 1)
        # No keyed lookups while exact_match_first is off
        assert (stats.hits, stats.misses) == (0, 0)

    def test_similarity_hit_skips_provider(self, geo):
        embeddings = FakeEmbeddingProvider(
            {
                "koregaon park pune": [1.0, 0.0, 0.0],
                "koregaon park pune maharashtra": [0.95, 0.31, 0.0],
            }
        )
        service = GeocodeCacheService(
            repository=InMemoryCacheRepository(max_entries=10, ttl=60),
            embedding_provider=embeddings,
            geo_provider=geo,
            geocoder_timeout=1.0,
        )

        asyncio.run(service.resolve_address("Koregaon Park, Pune"))
        result = asyncio.run(service.resolve_address("Koregaon Park, Pune, Maharashtra"))

        assert result.source is Provenance.CACHE
        assert result.display_name == provider_result().display_name
        assert geo.geocode_calls == ["Koregaon Park, Pune"]
        assert service.get_stats().similarity_hits == 1

    def test_dissimilar_address_goes_to_provider(self, service, embeddings, geo):
        embeddings.vectors["koregaon park pune"] = [1.0, 0.0, 0.0]
        embeddings.vectors["somewhere else entirely"] = [0.0, 1.0, 0.0]
        asyncio.run(service.resolve_address("Koregaon Park, Pune"))
        result = asyncio.run(service.resolve_address("Somewhere Else Entirely"))

        assert result is None
        assert geo.geocode_calls == ["Koregaon Park, Pune", "Somewhere Else Entirely"]

    def test_not_found_is_not_cached(self, service, geo):
        assert asyncio.run(service.resolve_address("Atlantis")) is None
        assert service.get_stats().entries == 0

    def test_blank_after_normalizing_is_none(self, service, embeddings, geo):
        assert asyncio.run(service.resolve_address(" ,.; ")) is None
        assert embeddings.calls == []
        assert geo.geocode_calls == []

    def test_provider_timeout_is_a_miss(self, embeddings):
        slow = FakeGeoProvider(forward={"Koregaon Park, Pune": provider_result()}, delay=0.5)
        service = GeocodeCacheService(
            repository=InMemoryCacheRepository(max_entries=10, ttl=60),
            embedding_provider=embeddings,
            geo_provider=slow,
            geocoder_timeout=0.05,
        )

        assert asyncio.run(service.resolve_address("Koregaon Park, Pune")) is None
        assert service.get_stats().entries == 0

    def test_embedding_failure_still_resolves_uncached(self, service, embeddings, geo):
        embeddings.fail = True

        result = asyncio.run(service.resolve_address("Koregaon Park, Pune"))

        assert result.source is Provenance.PROVIDER
        assert service.get_stats().entries == 0

    def test_dimension_mismatch_returns_result_uncached(self, service, embeddings, geo):
        asyncio.run(service.resolve_address("Koregaon Park, Pune"))
        geo.forward["Baner, Pune"] = provider_result("Baner, Pune, Maharashtra, India")
        embeddings.vectors["baner pune"] = [1.0, 0.0]

        result = asyncio.run(service.resolve_address("Baner, Pune"))

        assert result.source is Provenance.PROVIDER
        assert result.display_name == "Baner, Pune, Maharashtra, India"
        assert service.get_stats().entries == 1


    def test_exact_key_goes_through_similarity_selection(self, clock):
        """The earlier candidate wins: the better one is 800 m away from it."""
        service = competing_entries_service(clock, exact_match_first=False)

        result = asyncio.run(service.resolve_address("Koregaon Park"))

        assert result.source is Provenance.CACHE
        assert result.latitude == PUNE_LAT
        assert result.display_name == "Fc Road Pune"
        assert service.get_stats().hits == 0

    def test_exact_match_first_returns_keyed_entry(self, clock):
        service = competing_entries_service(clock, exact_match_first=True)

        result = asyncio.run(service.resolve_address("Koregaon Park"))

        assert result.source is Provenance.CACHE
        assert result.latitude == FAR_NORTH_LAT
        assert service.exact_match_first is True
        assert service.get_stats().hits == 1


class TestResolveCoordinates:
    def test_miss_then_nearby_hit(self, service, geo):
        first = asyncio.run(service.resolve_coordinates(PUNE_LAT, PUNE_LNG))
        second = asyncio.run(service.resolve_coordinates(18.5290, 73.8745))

        assert first.source is Provenance.PROVIDER
        assert second.source is Provenance.CACHE
        assert second.display_name == first.display_name
        assert geo.reverse_calls == [(PUNE_LAT, PUNE_LNG)]

    def test_reverse_result_also_serves_forward_lookups(self, service, geo):
        asyncio.run(service.resolve_coordinates(PUNE_LAT, PUNE_LNG))

        result = asyncio.run(
            service.resolve_address("Koregaon Park, Pune, Maharashtra, 411001, India")
        )

        assert result.source is Provenance.CACHE
        assert geo.geocode_calls == []

    def test_outside_radius_calls_provider(self, service, geo):
        asyncio.run(service.resolve_coordinates(PUNE_LAT, PUNE_LNG))
        asyncio.run(service.resolve_coordinates(PUNE_LAT + 0.01, PUNE_LNG))

        assert len(geo.reverse_calls) == 2

    @pytest.mark.parametrize("lat,lng", [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.1), (0.0, -181.0)])
    def test_invalid_coordinates_raise(self, service, geo, lat, lng):
        with pytest.raises(InvalidCoordinatesError):
            asyncio.run(service.resolve_coordinates(lat, lng))
        assert geo.reverse_calls == []

    def test_not_found(self, embeddings):
        service = GeocodeCacheService(
            repository=InMemoryCacheRepository(max_entries=10, ttl=60),
            embedding_provider=embeddings,
            geo_provider=FakeGeoProvider(),
            geocoder_timeout=1.0,
        )

        assert asyncio.run(service.resolve_coordinates(0.0, 0.0)) is None


class TestHousekeeping:
    def test_autocomplete_passes_through(self, service):
        suggestions = asyncio.run(service.autocomplete("Koregaon"))

        assert [s.display_name for s in suggestions] == ["Koregaon Park, Pune, Maharashtra, India"]

    def test_autocomplete_timeout_is_empty(self, embeddings):
        class SlowSuggestions(FakeGeoProvider):
            async def autocomplete(self, query):
                await asyncio.sleep(0.5)
                return []

        service = GeocodeCacheService(
            repository=InMemoryCacheRepository(max_entries=10, ttl=60),
            embedding_provider=embeddings,
            geo_provider=SlowSuggestions(),
            geocoder_timeout=0.05,
        )

        assert asyncio.run(service.autocomplete("pune")) == []

    def test_clear(self, service):
        asyncio.run(service.resolve_address("Koregaon Park, Pune"))
        service.clear()

        assert service.get_stats().entries == 0

    def test_is_healthy(self, service, embeddings):
        assert asyncio.run(service.is_healthy()) == {"cache": True, "embedding": True}

        embeddings.fail = True
        assert asyncio.run(service.is_healthy()) == {"cache": True, "embedding": False}

    def test_exposes_collaborators(self, service, embeddings, geo):
        assert service.embedding_provider is embeddings
        assert service.geo_provider is geo
        assert service.reverse_radius_meters == 100
