import httpx
import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from maps_api.core.errors import (
    ConfigurationError,
    DetailFetchError,
    FetchError,
    NetworkError,
    ProviderError,
)
from maps_api.core.logger import logs, mask_secret
from maps_api.models.places_model import (
    NoResults,
    Place,
    ProviderFailure,
    Success,
    decode_outcome,
)
from maps_api.repos.cache_repo import InMemoryCache, details_cache_key, search_cache_key
from maps_api.services.formatter import build_static_map_url, markers_for

DETAIL_FIELDS = "name,formatted_address,geometry,rating,opening_hours,photos,website,formatted_phone_number,price_level"


class PlacesService:
    """
    Proxy to the Google Places API.
    Built once at startup with the credential and the shared cache; route
    handlers receive it through a dependency instead of importing globals.
    """

    def __init__(
        self,
        api_key: str,
        cache: InMemoryCache,
        base_url: str = "https://maps.googleapis.com/maps/api",
        search_timeout: float = 15.0,
        detail_timeout: float = 10.0,
        max_results: int = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.cache = cache
        self.base_url = base_url.rstrip("/")
        self.search_timeout = search_timeout
        self.detail_timeout = detail_timeout
        self.max_results = max_results
        self.transport = transport

        logs.log(logging.INFO, "PlacesService initialized", {"api_key": mask_secret(api_key)})

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    def _require_key(self):
        if not self.api_key:
            raise ConfigurationError("No API key available for Google Maps API")

    async def search_places(
        self,
        query: str,
        location: Optional[str] = None,
        radius: int = 5000,
        place_type: Optional[str] = None,
    ) -> List[Place]:
        self._require_key()

        # 1. Check Cache
        cache_key = search_cache_key(query, location, radius, place_type)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logs.log(logging.INFO, f"✓ Search cache HIT for '{query}'")
            return cached

        # 2. Call the Text Search API
        logs.log(logging.INFO, f"✗ Search cache MISS for '{query}'. Calling Places Text Search...")
        params = {"key": self.api_key, "query": query, "radius": radius}
        if location:
            params["location"] = location
        if place_type:
            params["type"] = place_type

        try:
            async with self._client() as client:
                resp = await client.get(
                    f"{self.base_url}/place/textsearch/json",
                    params=params,
                    timeout=self.search_timeout
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logs.log(logging.ERROR, f"Text Search HTTP error: {e.response.status_code} - {message}")
            raise ProviderError(str(e.response.status_code), message) from e
        except httpx.ConnectError as e:
            logs.log(logging.ERROR, f"Text Search connect failed: {str(e)}")
            raise NetworkError("Network error: Cannot connect to Google Maps API") from e
        except httpx.TransportError as e:
            logs.log(logging.ERROR, f"Text Search got no response: {str(e)}")
            raise NetworkError("No response from Google Maps API - check network connection") from e
        except Exception as e:
            logs.log(logging.ERROR, f"Text Search failed: {str(e)}")
            raise FetchError(f"Failed to fetch places data: {str(e)}") from e

        # 3. Interpret the provider status
        outcome = decode_outcome(data)
        logs.log(logging.INFO, f"Text Search status for '{query}': {data.get('status')}")

        if isinstance(outcome, Success):
            results = outcome.payload.get("results") or []
            try:
                places = [Place(**r) for r in results[:self.max_results]]
            except (PydanticValidationError, TypeError) as e:
                logs.log(logging.ERROR, f"Malformed Text Search result: {str(e)}")
                raise FetchError(f"Failed to fetch places data: {str(e)}") from e
        elif isinstance(outcome, NoResults):
            places = []
        else:
            logs.log(logging.ERROR, f"Places API error: {outcome.code} {outcome.message}")
            raise ProviderError(outcome.code, outcome.message)

        # 4. Save to Cache
        self.cache.set(cache_key, places)
        return places

    async def get_place_details(self, place_id: str) -> Place:
        self._require_key()

        cache_key = details_cache_key(place_id)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logs.log(logging.INFO, f"✓ Details cache HIT for {place_id}")
            return cached

        logs.log(logging.INFO, f"✗ Details cache MISS for {place_id}. Calling Place Details...")
        try:
            async with self._client() as client:
                resp = await client.get(
                    f"{self.base_url}/place/details/json",
                    params={"key": self.api_key, "place_id": place_id, "fields": DETAIL_FIELDS},
                    timeout=self.detail_timeout
                )
                resp.raise_for_status()
                data = resp.json()

            outcome = decode_outcome(data)
            if not isinstance(outcome, Success):
                raise ProviderError(getattr(outcome, "code", "ZERO_RESULTS"), getattr(outcome, "message", None))

            place = Place(**(outcome.payload.get("result") or {}))
        except Exception as e:
            logs.log(logging.ERROR, f"Place details API error for {place_id}: {str(e)}")
            raise DetailFetchError("Failed to fetch place details") from e

        self.cache.set(cache_key, place)
        return place

    async def test_api_key(self) -> bool:
        """Round-trips one cheap search to confirm the credential works."""
        if not self.api_key:
            logs.log(logging.ERROR, "No API key available for testing")
            return False

        try:
            async with self._client() as client:
                resp = await client.get(
                    f"{self.base_url}/place/textsearch/json",
                    params={"key": self.api_key, "query": "New York", "radius": 1000},
                    timeout=self.detail_timeout
                )
                resp.raise_for_status()
                data = resp.json()
        except Exception as e:
            logs.log(logging.ERROR, f"API key test failed: {str(e)}")
            return False

        outcome = decode_outcome(data)
        logs.log(logging.INFO, f"API key test response: {data.get('status')}")
        return not isinstance(outcome, ProviderFailure)

    def static_map_for(self, places: List[Place]) -> Optional[str]:
        """Map centred on the first place with one marker per place."""
        if not places or places[0].geometry is None:
            return None

        center = places[0].geometry.location
        return build_static_map_url(center.lat, center.lng, markers_for(places), api_key=self.api_key)


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("error_message") or "Unknown error"
    except (ValueError, AttributeError):
        return "Unknown error"
