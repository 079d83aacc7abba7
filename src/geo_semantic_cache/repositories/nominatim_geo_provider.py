"""OpenStreetMap Nominatim geocoding provider.

Forward geocoding, reverse geocoding and autocomplete over the public
Nominatim HTTP API. Every failure is logged and reported as "no result".

Nominatim usage policy requires an identifying User-Agent and at most one
request per second for the public instance; point GEOCODER_BASE_URL at a
self-hosted instance for heavier use.
"""

import logging
from typing import Any

import httpx

from geo_semantic_cache.config import settings
from geo_semantic_cache.entities import (
    AutocompleteEntity,
    GeocodeResultEntity,
    Provenance,
    StructuredAddress,
)

logger = logging.getLogger(__name__)


def _first(data: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = data.get(key)
        if value:
            return str(value)
    return None


def parse_osm_address(osm_address: dict[str, Any] | None) -> StructuredAddress:
    """Map a Nominatim ``address`` object onto StructuredAddress."""
    data = osm_address or {}
    return StructuredAddress(
        building=_first(data, "building", "house_number"),
        street=_first(data, "road", "street"),
        area=_first(data, "suburb", "neighbourhood", "quarter"),
        city=_first(data, "city", "town", "village", "municipality"),
        state=_first(data, "state"),
        postal_code=_first(data, "postcode"),
        country=_first(data, "country"),
    )


class NominatimGeoProvider:
    """Nominatim implementation of the GeoProvider protocol.

    Example:
        ```python
        provider = NominatimGeoProvider.create()
        result = await provider.geocode("Koregaon Park, Pune")
        if result:
            print(result.latitude, result.longitude, result.display_name)
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
        country_codes: str | None = None,
        region: str | None = None,
        autocomplete_limit: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Nominatim provider.

        Args:
            base_url: Nominatim base URL. Defaults to settings.geocoder_base_url.
            user_agent: User-Agent header. Defaults to settings.geocoder_user_agent.
            timeout: Request timeout in seconds. Defaults to settings.
            country_codes: Comma-separated ISO country codes to restrict results.
                Empty string disables the restriction. Defaults to settings.
            region: Region appended to autocomplete queries and preferred in
                their ordering. Empty string disables it. Defaults to settings.
            autocomplete_limit: Maximum number of suggestions. Defaults to settings.
            transport: Optional httpx transport (used by tests).
        """
        self._base_url = (base_url or settings.geocoder_base_url).rstrip("/")
        self._user_agent = user_agent or settings.geocoder_user_agent
        self._timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self._country_codes = (
            country_codes if country_codes is not None else settings.geocoder_country_codes
        )
        self._region = region if region is not None else settings.autocomplete_region
        self._autocomplete_limit = autocomplete_limit or settings.autocomplete_limit
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(
        cls,
        base_url: str | None = None,
        user_agent: str | None = None,
    ) -> "NominatimGeoProvider":
        """Factory method to create NominatimGeoProvider with defaults."""
        return cls(base_url=base_url, user_agent=user_agent)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"User-Agent": self._user_agent},
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    @property
    def name(self) -> str:
        """Human-readable name of this provider."""
        return "nominatim"

    def _search_params(self, query: str, limit: int) -> dict[str, Any]:
        params: dict[str, Any] = {
            "q": query,
            "format": "json",
            "addressdetails": 1,
            "limit": limit,
        }
        if self._country_codes:
            params["countrycodes"] = self._country_codes
        return params

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        response = await self.client.get(path, params=params)
        response.raise_for_status()
        return response.json()

    async def geocode(self, address: str) -> GeocodeResultEntity | None:
        """Resolve an address to its best match.

        Args:
            address: Free-form address text

        Returns:
            GeocodeResultEntity, or None if not found or the request failed
        """
        try:
            data = await self._get_json("/search", self._search_params(address, limit=1))
            if not isinstance(data, list) or not data:
                return None
            hit = data[0]
            return GeocodeResultEntity(
                latitude=float(hit["lat"]),
                longitude=float(hit["lon"]),
                display_name=hit["display_name"],
                structured=parse_osm_address(hit.get("address")),
                source=Provenance.PROVIDER,
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning("Geocoding failed for %r: %s", address, e)
            return None

    async def reverse_geocode(self, latitude: float, longitude: float) -> GeocodeResultEntity | None:
        """Resolve coordinates to an address.

        The result keeps the queried coordinates rather than the ones of
        the OSM object that was found.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            GeocodeResultEntity, or None if not found or the request failed
        """
        params = {
            "lat": latitude,
            "lon": longitude,
            "format": "json",
            "addressdetails": 1,
        }
        try:
            data = await self._get_json("/reverse", params)
            # Nominatim answers 200 {"error": "Unable to geocode"} for empty areas
            if not isinstance(data, dict) or "error" in data or not data.get("display_name"):
                return None
            return GeocodeResultEntity(
                latitude=latitude,
                longitude=longitude,
                display_name=data["display_name"],
                structured=parse_osm_address(data.get("address")),
                source=Provenance.PROVIDER,
            )
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning("Reverse geocoding failed for (%s, %s): %s", latitude, longitude, e)
            return None

    async def autocomplete(self, query: str) -> list[AutocompleteEntity]:
        """Suggest addresses for a partial query.

        The configured region is appended to the query when missing, and
        suggestions mentioning it are listed first (stable order otherwise).

        Args:
            query: Partial address text

        Returns:
            Up to autocomplete_limit suggestions, empty on failure
        """
        enhanced = query
        if self._region and self._region.lower() not in query.lower():
            enhanced = f"{query}, {self._region}"

        try:
            data = await self._get_json(
                "/search", self._search_params(enhanced, limit=self._autocomplete_limit)
            )
            if not isinstance(data, list):
                return []
            results = [
                AutocompleteEntity(
                    display_name=item["display_name"],
                    structured=parse_osm_address(item.get("address")),
                )
                for item in data
            ]
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.warning("Autocomplete failed for %r: %s", query, e)
            return []

        if self._region:
            region = self._region.lower()
            results.sort(key=lambda r: region not in r.display_name.lower())
        return results[: self._autocomplete_limit]

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
