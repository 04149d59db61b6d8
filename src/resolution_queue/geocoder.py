"""
Nominatim (OpenStreetMap) forward geocoding client.

One request per call: GET <endpoint>?format=json&limit=1&q=<query>. Rate
limiting is the caller's job (see ResolutionQueue).
"""

import time
from typing import Any, Protocol

import httpx

from common.config import (
    GEOCODE_ACCEPT_LANGUAGE,
    GEOCODE_TIMEOUT_SECONDS,
    NOMINATIM_SEARCH_URL,
    NOMINATIM_USER_AGENT,
)
from common.errors import GeocodeLookupError
from common.metrics import geocode_duration, geocode_requests
from common.types import Coordinates


class Geocoder(Protocol):
    async def geocode(self, query: str) -> Coordinates | None: ...


def parse_search_results(query: str, data: Any) -> Coordinates | None:
    """
    Parse a Nominatim search response into the first result's coordinates.

    Raises:
        GeocodeLookupError: If the payload is not a list or the first result
            has no usable lat/lon
    """
    if not isinstance(data, list):
        raise GeocodeLookupError(query, "expected a JSON array")
    if not data:
        return None

    first = data[0]
    try:
        lat = float(first["lat"])
        lon = float(first["lon"])
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodeLookupError(query, f"unparseable result: {e}") from e

    return {"latitude": lat, "longitude": lon}


class NominatimGeocoder:
    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = NOMINATIM_SEARCH_URL,
        user_agent: str = NOMINATIM_USER_AGENT,
        timeout: float = GEOCODE_TIMEOUT_SECONDS,
        accept_language: str = GEOCODE_ACCEPT_LANGUAGE,
    ):
        self.client = client
        self.base_url = base_url
        self.headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self.timeout = timeout
        self.accept_language = accept_language

    async def geocode(self, query: str) -> Coordinates | None:
        """
        Resolve a free-text location to coordinates.

        Returns:
            Coordinates of the first match, or None when nothing matched

        Raises:
            GeocodeLookupError: On transport failure, non-success status or a
                malformed response
        """
        params = {
            "format": "json",
            "limit": 1,
            "accept-language": self.accept_language,
            "q": query,
        }
        start = time.perf_counter()
        try:
            response = await self.client.get(
                self.base_url, params=params, headers=self.headers, timeout=self.timeout
            )
        except httpx.HTTPError as e:
            geocode_requests.add(1, {"outcome": "transport_error"})
            raise GeocodeLookupError(query, str(e) or type(e).__name__) from e
        finally:
            geocode_duration.record((time.perf_counter() - start) * 1000)

        if not response.is_success:
            geocode_requests.add(1, {"outcome": "http_error"})
            raise GeocodeLookupError(query, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            geocode_requests.add(1, {"outcome": "parse_error"})
            raise GeocodeLookupError(query, f"invalid JSON: {e}") from e

        try:
            coords = parse_search_results(query, data)
        except GeocodeLookupError:
            geocode_requests.add(1, {"outcome": "parse_error"})
            raise

        geocode_requests.add(1, {"outcome": "found" if coords else "not_found"})
        return coords
