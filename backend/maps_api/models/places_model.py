from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# --- Domain Models (as returned by the Places API) ---

class ProviderModel(BaseModel):
    # Immutable once fetched; unknown provider fields are kept for pass-through
    model_config = ConfigDict(frozen=True, extra="allow")


class LatLng(ProviderModel):
    lat: float
    lng: float


class Geometry(ProviderModel):
    location: LatLng


class OpeningHours(ProviderModel):
    open_now: Optional[bool] = None
    weekday_text: Optional[List[str]] = None


class Place(ProviderModel):
    place_id: Optional[str] = None
    name: Optional[str] = None
    formatted_address: Optional[str] = None
    geometry: Optional[Geometry] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    opening_hours: Optional[OpeningHours] = None
    formatted_phone_number: Optional[str] = None
    website: Optional[str] = None
    price_level: Optional[int] = None
    photos: Optional[List[Dict[str, Any]]] = None
    types: Optional[List[str]] = None

    @property
    def is_open(self) -> Optional[bool]:
        if self.opening_hours is None:
            return None
        return self.opening_hours.open_now

    def to_response(self) -> dict:
        return self.model_dump(exclude_none=True)


# --- Provider outcome, decoded once from the "status" field ---

@dataclass(frozen=True)
class Success:
    payload: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NoResults:
    pass


@dataclass(frozen=True)
class ProviderFailure:
    code: str
    message: Optional[str] = None


ProviderOutcome = Union[Success, NoResults, ProviderFailure]


def decode_outcome(data: Dict[str, Any]) -> ProviderOutcome:
    status = data.get("status")
    if status == "OK":
        return Success(payload=data)
    if status == "ZERO_RESULTS":
        return NoResults()
    return ProviderFailure(code=str(status or "UNKNOWN"), message=data.get("error_message"))


# --- API Request/Response Models ---

class SearchRequest(BaseModel):
    # Optional here so a missing query gets the 400 envelope instead of a 422
    query: Optional[str] = Field(None, description="Free-text place search")
    location: Optional[str] = Field(None, description="Bias location as 'lat,lng'")
    radius: int = Field(5000, description="Search radius in meters")
    type: Optional[str] = Field(None, description="Place type filter, e.g. 'restaurant'")


class SearchResponse(BaseModel):
    success: bool = True
    query: str
    places: List[Dict[str, Any]]
    llm_response: str
    static_map_url: Optional[str] = None
    total_results: int


class PlaceDetailsResponse(BaseModel):
    success: bool = True
    place: Dict[str, Any]
    maps_url: str


class GeocodeResponse(BaseModel):
    success: bool = True
    location: str
    coordinates: str


class SupportedCitiesResponse(BaseModel):
    success: bool = True
    supported_cities: List[str]
    count: int
