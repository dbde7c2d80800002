import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from maps_api.core.errors import ValidationError
from maps_api.core.logger import logs
from maps_api.core.security import validate_frontend_key
from maps_api.models.places_model import (
    GeocodeResponse,
    PlaceDetailsResponse,
    SearchRequest,
    SearchResponse,
    SupportedCitiesResponse,
)
from maps_api.services.Places_service import PlacesService
from maps_api.services.formatter import build_place_url, format_for_display
from maps_api.services.geocode_service import lookup_city, supported_cities

router = APIRouter(prefix="/api/maps", dependencies=[Depends(validate_frontend_key)])

# --- Dependency Injection ---
def get_places_service(request: Request) -> PlacesService:
    return request.app.state.places_service


@router.get("/test-api-key")
async def test_api_key_endpoint(service: PlacesService = Depends(get_places_service)):
    logs.log(logging.INFO, "Testing Google Maps API key...")
    if await service.test_api_key():
        return {
            "success": True,
            "message": "Google Maps API key is valid and working",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Google Maps API key is invalid or not working",
            "message": "Please check your API key configuration in .env file"
        }
    )


@router.post("/search", response_model=SearchResponse)
async def search_endpoint(
    request: SearchRequest,
    service: PlacesService = Depends(get_places_service)
):
    if not request.query or not request.query.strip():
        raise ValidationError("Provide a non-empty 'query' field", error="Query parameter is required")

    logs.log(logging.INFO, f"Search request: query='{request.query}' location={request.location} radius={request.radius} type={request.type}")

    try:
        places = await service.search_places(request.query, request.location, request.radius, request.type)
        static_map_url = service.static_map_for(places)
        llm_response = format_for_display(places, request.query, static_map_url)
    except Exception as e:
        logs.log(logging.ERROR, f"Search error: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": "Search failed",
                "message": str(e),
                "details": "Check Google Maps API key and network connection"
            }
        )

    logs.log(logging.INFO, f"Search successful, found {len(places)} places")
    return SearchResponse(
        query=request.query,
        places=[p.to_response() for p in places],
        llm_response=llm_response,
        static_map_url=static_map_url,
        total_results=len(places)
    )


@router.get("/place/{place_id}", response_model=PlaceDetailsResponse)
async def place_details_endpoint(place_id: str, service: PlacesService = Depends(get_places_service)):
    try:
        place = await service.get_place_details(place_id)
    except Exception as e:
        logs.log(logging.ERROR, f"Place details error: {str(e)}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to get place details", "message": str(e)}
        )

    return PlaceDetailsResponse(place=place.to_response(), maps_url=build_place_url(place_id))


@router.get("/geocode", response_model=GeocodeResponse)
async def geocode_endpoint(location: Optional[str] = None):
    logs.log(logging.INFO, f"Geocoding request for: {location}")
    if not location:
        raise ValidationError("Provide the 'location' query parameter", error="Location parameter is required")

    # NotFoundError is rendered as a 404 envelope by the app-level handler
    return GeocodeResponse(location=location, coordinates=lookup_city(location))


@router.get("/supported-cities", response_model=SupportedCitiesResponse)
async def supported_cities_endpoint():
    cities = supported_cities()
    return SupportedCitiesResponse(supported_cities=cities, count=len(cities))
