"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from geo_semantic_cache.handlers import GeocodeHandler
from geo_semantic_cache.logging_config import configure_logging
from geo_semantic_cache.repositories import (
    FallbackEmbeddingProvider,
    InMemoryCacheRepository,
    NominatimGeoProvider,
    OllamaEmbeddingProvider,
)
from geo_semantic_cache.services import GeocodeCacheService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> GeocodeHandler:
    """Dependency injection for GeocodeHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "geocode_handler", None)
    if handler is None:
        raise RuntimeError("GeocodeHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores the handler in app.state:
    1. Providers (embedding with hash fallback, Nominatim geocoder)
    2. Repository (in-memory matching store)
    3. Service (business logic), owned by the handler
    4. Handler (HTTP endpoints) - stored in app.state.geocode_handler

    Cleanup:
        Closes HTTP clients and removes the handler from app.state on shutdown
    """
    configure_logging()

    ollama = OllamaEmbeddingProvider.create()
    embedding_provider = FallbackEmbeddingProvider.create(primary=ollama)
    geo_provider = NominatimGeoProvider.create()
    repository = InMemoryCacheRepository.create()

    logger.info("Checking Ollama availability...")
    if await ollama.is_available():
        logger.info("Ollama is available. Ensuring model %s is ready...", ollama.model_name)
        await ollama.ensure_model()
    else:
        logger.warning(
            "Ollama is not available. Using fallback embeddings. "
            "For better semantic matching run: ollama pull %s",
            ollama.model_name,
        )

    cache_service = GeocodeCacheService.create(
        repository=repository,
        embedding_provider=embedding_provider,
        geo_provider=geo_provider,
    )
    geocode_handler = GeocodeHandler(cache_service=cache_service)

    # Store in app.state (FastAPI pattern)
    app.state.geocode_handler = geocode_handler

    logger.info(
        "Geocode cache initialized (capacity=%d, ttl=%ds, similarity>%.2f, distance<%.0fm)",
        repository.max_entries,
        repository.ttl,
        repository.similarity_threshold,
        repository.distance_threshold_meters,
    )

    yield

    await ollama.close()
    await geo_provider.close()
    del app.state.geocode_handler
    logger.info("Geocode cache shut down")


# Type alias for cleaner dependency injection
HandlerDep = Annotated[GeocodeHandler, Depends(get_handler)]
