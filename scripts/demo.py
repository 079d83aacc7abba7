#!/usr/bin/env python3
"""
Demo script for the geo semantic cache.

This script walks through address normalization, embedding similarity and
cached forward/reverse geocoding against OpenStreetMap Nominatim. Ollama is
used for embeddings when it is running; otherwise the hash fallback kicks in.
"""

import asyncio
import time

from geo_semantic_cache import (
    FallbackEmbeddingProvider,
    GeocodeCacheService,
    InMemoryCacheRepository,
    NominatimGeoProvider,
    OllamaEmbeddingProvider,
    cosine_similarity,
    haversine_distance,
    normalize_address,
)
from geo_semantic_cache.logging_config import configure_logging


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def demo_normalization() -> None:
    """Demonstrate address normalization."""
    print_section("Address Normalization")

    addresses = [
        "  FC Rd., Shivajinagar,  Pune ",
        "12, MG Rd.,  Pune MH",
        "North Main St, Koregaon Park, Maha",
    ]

    for address in addresses:
        print(f"\n  '{address}'")
        print(f"    -> '{normalize_address(address)}'")


async def demo_embeddings(provider: FallbackEmbeddingProvider) -> None:
    """Demonstrate embedding similarity between address variants."""
    print_section("Embedding Similarity")

    print("\n📊 Model Information:")
    print(f"  Model: {provider.model_name}")
    print(f"  Dimension: {provider.dimension}")

    pairs = [
        ("Koregaon Park, Pune", "Koregaon Park Pune Maharashtra"),
        ("FC Road, Pune", "Fergusson College Rd, Pune"),
        ("Koregaon Park, Pune", "Colaba Causeway, Mumbai"),
    ]

    print("\n🔗 Comparing similarities:")
    for left, right in pairs:
        start = time.time()
        a = await provider.encode(normalize_address(left))
        b = await provider.encode(normalize_address(right))
        duration = (time.time() - start) * 1000
        print(f"  '{left}' vs '{right}'")
        print(f"    Similarity: {cosine_similarity(a, b):.4f}  ({duration:.1f}ms)")

    if provider.fallback_count:
        print(f"\n  ⚠️  {provider.fallback_count} encodings used the hash fallback (is Ollama running?)")


async def demo_geocoding(service: GeocodeCacheService) -> None:
    """Demonstrate cached forward geocoding."""
    print_section("Forward Geocoding")

    queries = [
        "Koregaon Park, Pune",
        "koregaon park,   PUNE",  # same key after normalization
        "Koregaon Park, Pune, Maharashtra",  # similar
        "Shaniwar Wada, Pune",
    ]

    for query in queries:
        start = time.time()
        result = await service.resolve_address(query)
        duration = (time.time() - start) * 1000
        print(f"\n  Query: {query}")
        if result is None:
            print(f"  ✗ Not found ({duration:.1f}ms)")
            continue
        marker = "✓ CACHE HIT" if result.source.value == "cache" else "→ provider"
        print(f"  {marker} ({duration:.1f}ms)")
        print(f"  {result.latitude:.5f}, {result.longitude:.5f}  {result.display_name[:60]}")


async def demo_reverse(service: GeocodeCacheService) -> None:
    """Demonstrate cached reverse geocoding."""
    print_section("Reverse Geocoding")

    points = [
        (18.5362, 73.8939),
        (18.5366, 73.8942),  # ~50 m away
        (18.5196, 73.8553),
    ]

    previous = None
    for lat, lng in points:
        result = await service.resolve_coordinates(lat, lng)
        print(f"\n  Point: {lat}, {lng}")
        if previous is not None:
            print(f"  Distance from previous: {haversine_distance(*previous, lat, lng):.0f}m")
        previous = (lat, lng)
        if result is None:
            print("  ✗ Not found")
            continue
        print(f"  [{result.source.value}] {result.display_name[:60]}")


def demo_stats(service: GeocodeCacheService) -> None:
    """Show cache statistics."""
    print_section("Cache Statistics")

    for key, value in service.get_stats().to_dict().items():
        print(f"  {key:<20} {value}")


async def main() -> None:
    """Run all demos."""
    configure_logging("WARNING")

    print("\n" + "=" * 70)
    print("  🌍 GEO SEMANTIC CACHE DEMO")
    print("=" * 70)

    ollama = OllamaEmbeddingProvider.create()
    embeddings = FallbackEmbeddingProvider.create(primary=ollama)
    geo = NominatimGeoProvider.create()
    service = GeocodeCacheService.create(
        repository=InMemoryCacheRepository.create(),
        embedding_provider=embeddings,
        geo_provider=geo,
    )

    try:
        demo_normalization()
        await demo_embeddings(embeddings)
        await demo_geocoding(service)
        await demo_reverse(service)
        demo_stats(service)
    except KeyboardInterrupt:
        print("\n\n👋 Demo interrupted by user")
    finally:
        await ollama.close()
        await geo.close()

    print("\n" + "=" * 70)
    print("  ✅ Demo completed!")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    asyncio.run(main())
