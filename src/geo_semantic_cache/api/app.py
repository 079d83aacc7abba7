from typing import Any

from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from geo_semantic_cache.api.dependencies import HandlerDep, lifespan
from geo_semantic_cache.config import settings
from geo_semantic_cache.dto import (
    AutocompleteItem,
    CacheStatsResponse,
    ClearCacheResponse,
    GeocodeRequest,
    GeocodeResponse,
    HealthCheckResponse,
    ReverseGeocodeRequest,
)

app = FastAPI(
    title="Geo Semantic Cache API",
    description="Geocoding with a semantic cache in front of the geocoding provider",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Geo Semantic Cache API",
        "version": "0.1.0",
        "endpoints": {
            "geocode": "/api/geocode",
            "reverse_geocode": "/api/reverse-geocode",
            "autocomplete": "/api/autocomplete",
            "stats": "/api/cache/stats",
            "clear": "/api/cache/clear",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.post("/api/geocode", response_model=GeocodeResponse)
async def geocode(request: GeocodeRequest, handler: HandlerDep) -> GeocodeResponse:
    """Resolve an address to coordinates, from the cache when possible."""
    return await handler.geocode(request)


@app.post("/api/reverse-geocode", response_model=GeocodeResponse)
async def reverse_geocode(request: ReverseGeocodeRequest, handler: HandlerDep) -> GeocodeResponse:
    """Resolve coordinates to an address, from the cache when possible."""
    return await handler.reverse_geocode(request)


@app.get("/api/autocomplete", response_model=list[AutocompleteItem])
async def autocomplete(
    handler: HandlerDep,
    query: str = Query(..., min_length=1, description="Partial address"),
) -> list[AutocompleteItem]:
    """Suggest addresses for a partial query."""
    return await handler.autocomplete(query)


@app.get("/api/cache/stats", response_model=CacheStatsResponse)
async def cache_stats(handler: HandlerDep) -> CacheStatsResponse:
    """Get cache statistics."""
    return await handler.get_stats()


@app.post("/api/cache/clear", response_model=ClearCacheResponse)
async def clear_cache(handler: HandlerDep) -> ClearCacheResponse:
    """Clear all entries from the cache."""
    return await handler.clear_cache()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "geo_semantic_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
