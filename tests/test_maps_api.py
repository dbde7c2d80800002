"""
HTTP surface tests: JSON envelopes, status codes and request auth.
"""

import hmac
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from maps_api.core.config import settings
from maps_api.core.errors import ConfigurationError
from maps_api.main import build_places_service, create_app

from conftest import TEST_API_KEY, make_place

TEXT_SEARCH = "/place/textsearch/json"
DETAILS = "/place/details/json"


class TestSearchEndpoint:

    def test_search_success(self, client, fake_api):
        fake_api.respond(TEXT_SEARCH, {"status": "OK", "results": [make_place(1), make_place(2)]})

        resp = client.post("/api/maps/search", json={"query": "coffee", "location": "40.7,-74.0"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["query"] == "coffee"
        assert body["total_results"] == 2
        assert [p["place_id"] for p in body["places"]] == ["place-1", "place-2"]
        assert body["llm_response"].startswith('I found these places for "coffee"')
        assert f"key={TEST_API_KEY}" in body["static_map_url"]
        assert "label:S%7C40.72,-74.01" in body["static_map_url"]
        assert body["llm_response"].endswith(f"![Location Map]({body['static_map_url']})")

    def test_search_without_results(self, client, fake_api):
        fake_api.respond(TEXT_SEARCH, {"status": "ZERO_RESULTS", "results": []})

        body = client.post("/api/maps/search", json={"query": "unicorns"}).json()

        assert body["success"] is True
        assert body["places"] == []
        assert body["static_map_url"] is None
        assert body["total_results"] == 0
        assert body["llm_response"] == 'No places found for "unicorns". Try a different search term or location.'

    def test_passes_through_provider_fields(self, client, fake_api):
        fake_api.respond(TEXT_SEARCH, {"status": "OK", "results": [make_place(1, business_status="OPERATIONAL")]})

        place = client.post("/api/maps/search", json={"query": "coffee"}).json()["places"][0]

        assert place["business_status"] == "OPERATIONAL"
        assert place["geometry"]["location"] == {"lat": 40.72, "lng": -74.01}

    @pytest.mark.parametrize("payload", [{}, {"query": ""}, {"query": "   "}])
    def test_missing_query_is_400(self, client, fake_api, payload):
        resp = client.post("/api/maps/search", json=payload)

        assert resp.status_code == 400
        assert resp.json()["success"] is False
        assert resp.json()["error"] == "Query parameter is required"
        assert fake_api.requests == []

    def test_malformed_body_is_readable_400(self, client, fake_api):
        resp = client.post("/api/maps/search", json={"query": "coffee", "radius": "far"})

        assert resp.status_code == 400
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Invalid request"
        assert body["message"].startswith("radius: ")
        assert "{" not in body["message"]
        assert fake_api.requests == []

    def test_upstream_failure_is_500(self, client, fake_api):
        fake_api.respond(TEXT_SEARCH, {"status": "REQUEST_DENIED", "error_message": "denied"})

        resp = client.post("/api/maps/search", json={"query": "coffee"})

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Search failed"
        assert "REQUEST_DENIED" in body["message"]


class TestPlaceEndpoint:

    def test_place_details(self, client, fake_api):
        fake_api.respond(DETAILS, {"status": "OK", "result": make_place(7, formatted_phone_number="(212) 555-0100")})

        resp = client.get("/api/maps/place/place-7")

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["place"]["formatted_phone_number"] == "(212) 555-0100"
        assert body["maps_url"] == "https://www.google.com/maps/place/?q=place_id:place-7"

    def test_place_details_failure(self, client, fake_api):
        fake_api.respond(DETAILS, {"status": "NOT_FOUND"})

        resp = client.get("/api/maps/place/nope")

        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "error": "Failed to get place details",
            "message": "Failed to fetch place details",
        }


class TestGeocodeEndpoint:

    @pytest.mark.parametrize("city", ["new york", "New York", "NEW YORK"])
    def test_known_city_case_insensitive(self, client, city):
        resp = client.get("/api/maps/geocode", params={"location": city})

        assert resp.status_code == 200
        assert resp.json() == {"success": True, "location": city, "coordinates": "40.7128,-74.0060"}

    def test_unknown_city_is_404(self, client):
        resp = client.get("/api/maps/geocode", params={"location": "Atlantis"})

        assert resp.status_code == 404
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Location not found in database"
        assert '"Atlantis"' in body["message"]

    def test_missing_location_is_400(self, client):
        resp = client.get("/api/maps/geocode")

        assert resp.status_code == 400
        assert resp.json()["error"] == "Location parameter is required"


def test_supported_cities(client):
    body = client.get("/api/maps/supported-cities").json()

    assert body["success"] is True
    assert body["count"] == 19
    assert body["supported_cities"][0] == "New York"
    assert "Hong Kong" in body["supported_cities"]


class TestApiKeyEndpoint:

    def test_valid_key(self, client, fake_api):
        fake_api.respond(TEXT_SEARCH, {"status": "OK", "results": []})

        resp = client.get("/api/maps/test-api-key")

        assert resp.status_code == 200
        assert resp.json()["success"] is True

    def test_invalid_key(self, client, fake_api):
        fake_api.respond(TEXT_SEARCH, {"status": "REQUEST_DENIED"})

        resp = client.get("/api/maps/test-api-key")

        assert resp.status_code == 500
        assert resp.json()["success"] is False


class TestFrontendAuth:

    @pytest.fixture
    def prod_client(self, places_service, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        monkeypatch.setattr(settings, "FRONTEND_API_KEY", "widget-secret")
        return TestClient(create_app(places_service=places_service))

    def test_rejects_missing_header(self, prod_client):
        resp = prod_client.get("/api/maps/supported-cities")

        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "API key required", "message": "Include x-api-key header"}

    @pytest.mark.parametrize("key", ["nope", "widget-secreT", "widget-secret-extra"])
    def test_rejects_wrong_header(self, prod_client, key):
        resp = prod_client.get("/api/maps/supported-cities", headers={"x-api-key": key})
        assert resp.status_code == 401

    def test_comparison_is_constant_time(self, prod_client):
        with patch("maps_api.core.security.hmac.compare_digest", wraps=hmac.compare_digest) as compare:
            resp = prod_client.get("/api/maps/supported-cities", headers={"x-api-key": "widget-secret"})

        assert resp.status_code == 200
        compare.assert_called_once_with(b"widget-secret", b"widget-secret")

    def test_accepts_matching_header(self, prod_client):
        resp = prod_client.get("/api/maps/supported-cities", headers={"x-api-key": "widget-secret"})
        assert resp.status_code == 200

    def test_probes_are_open(self, prod_client):
        assert prod_client.get("/health").status_code == 200
        assert prod_client.get("/api/cors-test").status_code == 200

    def test_development_mode_skips_check(self, client):
        assert client.get("/api/maps/supported-cities").status_code == 200


class TestProbesAndHeaders:

    def test_health(self, client):
        body = client.get("/health").json()
        assert body["success"] is True
        assert body["status"] == "OK"

    def test_debug_env_masks_key(self, client, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_MAPS_API_KEY", "AIzaSyABCDEFGHIJKLMNOP")

        info = client.get("/api/debug-env").json()["google_maps_api_key"]

        assert info == {"loaded": True, "length": 22, "prefix": "AIzaSyABCD..."}

    def test_cors_allows_any_origin(self, client):
        resp = client.get("/api/cors-test", headers={"Origin": "https://chat.example"})

        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.json()["origin"] == "https://chat.example"

    def test_security_headers(self, client):
        resp = client.get("/health")

        assert resp.headers["referrer-policy"] == "no-referrer-when-downgrade"
        assert resp.headers["x-content-type-options"] == "nosniff"
        assert resp.headers["x-frame-options"] == "DENY"

    def test_unhandled_error_keeps_headers(self, places_service, dev_mode):
        """It should return the generic 500 envelope with CORS and security headers."""
        app = create_app(places_service=places_service)

        @app.get("/api/explode")
        async def explode():
            raise RuntimeError("kaboom")

        resp = TestClient(app, raise_server_exceptions=False).get(
            "/api/explode", headers={"Origin": "https://chat.example"}
        )

        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "error": "Internal server error",
            "message": "An unexpected error occurred",
        }
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["x-frame-options"] == "DENY"
        assert resp.headers["referrer-policy"] == "no-referrer-when-downgrade"
        assert resp.headers["x-content-type-options"] == "nosniff"

    def test_unknown_route_is_json_404(self, client):
        resp = client.get("/nope")

        assert resp.status_code == 404
        assert resp.json()["error"] == "Endpoint not found"


def test_service_construction_requires_provider_key(monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_MAPS_API_KEY", "")
    with pytest.raises(ConfigurationError):
        build_places_service()


def test_service_construction_uses_settings(monkeypatch):
    monkeypatch.setattr(settings, "GOOGLE_MAPS_API_KEY", TEST_API_KEY)
    monkeypatch.setattr(settings, "MAX_SEARCH_RESULTS", 3)

    service = build_places_service()

    assert service.api_key == TEST_API_KEY
    assert service.max_results == 3
    assert service.cache.ttl == settings.CACHE_TTL_SECONDS
