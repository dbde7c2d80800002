"""
Text and URL rendering for search results.
Everything here is pure: the same places in the same order always render
the same text.
"""
from typing import Iterable, List, Optional, Sequence
from urllib.parse import quote

from maps_api.models.places_model import LatLng, Place

STATIC_MAP_BASE_URL = "https://maps.googleapis.com/maps/api/staticmap"
STATIC_MAP_SIZE = "600x300"


def build_place_url(place_id: str) -> str:
    return f"https://www.google.com/maps/place/?q=place_id:{place_id}"


def build_directions_url(origin: str, destination: Optional[str]) -> str:
    return (
        "https://www.google.com/maps/dir/?api=1"
        f"&origin={quote(origin or '', safe='')}"
        f"&destination={quote(destination or '', safe='')}"
        "&travelmode=driving"
    )


def build_static_map_url(
    center_lat: float,
    center_lng: float,
    markers: Sequence[Optional[LatLng]],
    zoom: int = 14,
    api_key: Optional[str] = None,
) -> Optional[str]:
    """
    Static map centred on (center_lat, center_lng) with one pin per marker.
    The first pin is red and labelled "S", the rest are blue and numbered
    by their position in the list, so a None entry leaves a gap in the
    numbering instead of shifting later labels. Returns None when no
    credential is configured.
    """
    if not api_key:
        return None

    url = f"{STATIC_MAP_BASE_URL}?center={center_lat},{center_lng}&zoom={zoom}&size={STATIC_MAP_SIZE}&key={api_key}"

    for index, marker in enumerate(markers):
        if marker is None:
            continue
        color = "red" if index == 0 else "blue"
        label = "S" if index == 0 else str(index + 1)
        url += f"&markers=color:{color}%7Clabel:{label}%7C{marker.lat},{marker.lng}"

    return url


def markers_for(places: Iterable[Place]) -> List[Optional[LatLng]]:
    # One slot per place so pin labels match the numbered text entries
    return [p.geometry.location if p.geometry is not None else None for p in places]


def _format_rating(rating: Optional[float]) -> str:
    if not rating:
        return "No rating"
    return f"{rating:g}"


def _format_entry(index: int, place: Place) -> str:
    lines = [
        f"**{index}. {place.name}**",
        f"📍 {place.formatted_address or 'Address not available'}",
        f"⭐ Rating: {_format_rating(place.rating)}",
    ]

    if place.is_open is not None:
        status = "🟢 Open Now" if place.is_open else "🔴 Closed Now"
        lines.append(f"⏰ {status}")

    lines.append(f"🗺️ [View on Maps]({build_place_url(place.place_id)})")
    lines.append(f"🚗 [Get Directions]({build_directions_url('Current Location', place.formatted_address)})")
    return "\n".join(lines) + "\n\n"


def format_for_display(places: Sequence[Place], query: str, static_map_url: Optional[str] = None) -> str:
    if not places:
        return f'No places found for "{query}". Try a different search term or location.'

    response = f'I found these places for "{query}":\n\n'
    response += "".join(_format_entry(i, place) for i, place in enumerate(places, start=1))

    if static_map_url:
        response += f"\n![Location Map]({static_map_url})"

    return response
