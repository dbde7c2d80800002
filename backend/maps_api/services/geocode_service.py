from maps_api.core.errors import NotFoundError

# Display name -> "lat,lng"
CITY_COORDINATES = {
    "New York": "40.7128,-74.0060",
    "Los Angeles": "34.0522,-118.2437",
    "Chicago": "41.8781,-87.6298",
    "Miami": "25.7617,-80.1918",
    "London": "51.5074,-0.1278",
    "Tokyo": "35.6762,139.6503",
    "Paris": "48.8566,2.3522",
    "Sydney": "-33.8688,151.2093",
    "Bangkok": "13.7563,100.5018",
    "Dubai": "25.2048,55.2708",
    "Rome": "41.9028,12.4964",
    "San Francisco": "37.7749,-122.4194",
    "Seattle": "47.6062,-122.3321",
    "Toronto": "43.6532,-79.3832",
    "Berlin": "52.5200,13.4050",
    "Amsterdam": "52.3676,4.9041",
    "Singapore": "1.3521,103.8198",
    "Hong Kong": "22.3193,114.1694",
    "Shanghai": "31.2304,121.4737",
}

_BY_LOWER_NAME = {name.lower(): coords for name, coords in CITY_COORDINATES.items()}


def lookup_city(location: str) -> str:
    """Case-insensitive lookup in the fixed city table."""
    coordinates = _BY_LOWER_NAME.get(location.strip().lower())
    if coordinates is None:
        raise NotFoundError(
            f'Coordinates for "{location}" are not available. Try one of the supported cities.',
            error="Location not found in database",
        )
    return coordinates


def supported_cities() -> list[str]:
    return list(CITY_COORDINATES)
