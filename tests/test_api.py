"""
Tests for the geocoding API.
"""

import pytest
from fastapi.testclient import TestClient

from geo_semantic_cache.api.app import app
from geo_semantic_cache.handlers import GeocodeHandler
from geo_semantic_cache.repositories import InMemoryCacheRepository
from geo_semantic_cache.services import GeocodeCacheService

from .conftest import PUNE_LAT, PUNE_LNG


@pytest.fixture
def client(embeddings, geo):
    """Create a test client wired to fake providers."""
    service = GeocodeCacheService(
        repository=InMemoryCacheRepository(max_entries=100, ttl=3_600),
        embedding_provider=embeddings,
        geo_provider=geo,
        reverse_radius_meters=100,
        geocoder_timeout=1.0,
        exact_match_first=False,
    )
    app.state.geocode_handler = GeocodeHandler(cache_service=service)
    yield TestClient(app)
    del app.state.geocode_handler


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Geo Semantic Cache API"
    assert data["endpoints"]["geocode"] == "/api/geocode"


def test_health(client, embeddings):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["cache_healthy"] is True
    assert data["embedding_healthy"] is True
    assert data["timestamp"].endswith("+00:00")

    embeddings.fail = True
    assert client.get("/health").json()["embedding_healthy"] is False


def test_geocode_provider_then_cache(client, geo):
    """Test forward geocoding: first from the provider, then from the cache."""
    first = client.post("/api/geocode", json={"address": "Koregaon Park, Pune"})
    assert first.status_code == 200
    data = first.json()
    assert data["source"] == "provider"
    assert data["lat"] == PUNE_LAT
    assert data["lng"] == PUNE_LNG
    assert data["structured"]["city"] == "Pune"
    assert data["structured"]["building"] is None

    second = client.post("/api/geocode", json={"address": "koregaon park pune"})
    assert second.status_code == 200
    assert second.json()["source"] == "cache"
    assert geo.geocode_calls == ["Koregaon Park, Pune"]


def test_geocode_not_found(client):
    response = client.post("/api/geocode", json={"address": "Atlantis"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Address not found"


@pytest.mark.parametrize("body", [{}, {"address": ""}, {"address": "   "}, {"address": 42}])
def test_geocode_rejects_invalid_address(client, body):
    response = client.post("/api/geocode", json=body)
    assert response.status_code == 422


def test_reverse_geocode(client, geo):
    """Test reverse geocoding: provider first, then a nearby cache hit."""
    first = client.post("/api/reverse-geocode", json={"lat": PUNE_LAT, "lng": PUNE_LNG})
    assert first.status_code == 200
    assert first.json()["source"] == "provider"

    second = client.post("/api/reverse-geocode", json={"lat": 18.5290, "lng": 73.8745})
    assert second.status_code == 200
    assert second.json()["source"] == "cache"
    assert len(geo.reverse_calls) == 1


def test_reverse_geocode_not_found(client, geo):
    geo.reverse = None
    response = client.post("/api/reverse-geocode", json={"lat": 0.0, "lng": 0.0})
    assert response.status_code == 404
    assert response.json()["detail"] == "Location not found"


@pytest.mark.parametrize(
    "body",
    [{"lat": 95.0, "lng": 0.0}, {"lat": 0.0, "lng": -200.0}, {"lat": "north", "lng": 0.0}, {"lat": 1.0}],
)
def test_reverse_geocode_rejects_invalid_coordinates(client, body):
    response = client.post("/api/reverse-geocode", json=body)
    assert response.status_code == 422


def test_autocomplete(client):
    response = client.get("/api/autocomplete", params={"query": "Koregaon"})
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["display_name"] == "Koregaon Park, Pune, Maharashtra, India"
    assert data[0]["structured"]["area"] == "Koregaon Park"


@pytest.mark.parametrize("params", [{}, {"query": ""}])
def test_autocomplete_requires_query(client, params):
    response = client.get("/api/autocomplete", params=params)
    assert response.status_code == 422


def test_get_stats(client):
    """Test stats endpoint."""
    client.post("/api/geocode", json={"address": "Koregaon Park, Pune"})
    client.post("/api/geocode", json={"address": "Koregaon Park, Pune"})

    response = client.get("/api/cache/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["entries"] == 1
    assert data["similarity_hits"] == 1
    assert data["similarity_misses"] == 1
    assert data["hits"] == 0
    assert data["misses"] == 0
    assert data["capacity"] == 100
    assert data["ttl_seconds"] == 3_600


def test_clear_cache(client):
    """Test clearing the cache."""
    client.post("/api/geocode", json={"address": "Koregaon Park, Pune"})

    response = client.post("/api/cache/clear")
    assert response.status_code == 200
    assert response.json()["message"] == "Cache cleared successfully"
    assert client.get("/api/cache/stats").json()["entries"] == 0


def test_routes_fail_loudly_without_lifespan_setup():
    """Test that a missing handler is reported instead of silently served."""
    with pytest.raises(RuntimeError, match="GeocodeHandler not initialized"):
        TestClient(app).get("/api/cache/stats")
