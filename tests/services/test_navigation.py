"""Tests for the navigation service."""
import pytest
import requests

from visionassist.core.exceptions import ExternalServiceError, ValidationError
from visionassist.domain.entities.route import LatLng
from visionassist.services import navigation
from visionassist.services.navigation import NavigationService, strip_html

DIRECTIONS_OK = {
    "status": "OK",
    "routes": [
        {
            "overview_polyline": {"points": "a~l~Fjk~uOwHJy@P"},
            "legs": [
                {
                    "distance": {"text": "0.8 km", "value": 800},
                    "duration": {"text": "10 mins", "value": 600},
                    "end_address": "1 Main St, Springfield",
                    "start_location": {"lat": 40.0, "lng": -74.0},
                    "end_location": {"lat": 40.005, "lng": -74.002},
                    "steps": [
                        {"html_instructions": "Head <b>north</b> on <b>Main St</b>"},
                        {"html_instructions": "Turn <b>left</b> onto Elm St"},
                    ],
                }
            ],
        }
    ],
}

GEOCODE_OK = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "1 Main St, Springfield",
            "geometry": {"location": {"lat": 40.005, "lng": -74.002}},
        }
    ],
}


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


@pytest.fixture
def calls(monkeypatch):
    """Record provider calls and answer with a configurable payload."""
    recorded = {"requests": [], "response": FakeResponse(DIRECTIONS_OK)}

    def fake_get(url, params=None, timeout=None):
        recorded["requests"].append({"url": url, "params": params, "timeout": timeout})
        response = recorded["response"]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(navigation.requests, "get", fake_get)
    return recorded


@pytest.fixture
def service():
    return NavigationService(api_key="test-key", timeout=3)


ORIGIN = LatLng(lat=40.0, lng=-74.0)


class TestSafeRoute:
    """Test suite for NavigationService.safe_route."""

    async def test_builds_route(self, service, calls):
        route = await service.safe_route(ORIGIN, "1 Main St")

        assert route.origin == "40.0,-74.0"
        assert route.destination == "1 Main St, Springfield"
        assert route.distance_text == "0.8 km"
        assert route.duration_seconds == 600
        assert route.safety_score == 85
        assert route.steps == ["Head north on Main St", "Turn left onto Elm St"]
        assert route.polyline == "a~l~Fjk~uOwHJy@P"

        params = calls["requests"][0]["params"]
        assert params["mode"] == "walking"
        assert params["key"] == "test-key"
        assert calls["requests"][0]["timeout"] == 3

    async def test_provider_status_error(self, service, calls):
        """A non-OK provider status should carry the status code."""
        calls["response"] = FakeResponse({"status": "ZERO_RESULTS", "routes": []})

        with pytest.raises(ExternalServiceError) as exc_info:
            await service.safe_route(ORIGIN, "nowhere")

        assert exc_info.value.details["status"] == "ZERO_RESULTS"

    async def test_malformed_payload(self, service, calls):
        """A route without legs is a provider failure, not a crash."""
        calls["response"] = FakeResponse({"status": "OK", "routes": [{"overview_polyline": {}}]})

        with pytest.raises(ExternalServiceError) as exc_info:
            await service.safe_route(ORIGIN, "1 Main St")

        assert exc_info.value.details["status"] == "OK"

    async def test_transport_error(self, service, calls):
        calls["response"] = requests.ConnectionError("connection refused")

        with pytest.raises(ExternalServiceError):
            await service.safe_route(ORIGIN, "1 Main St")

    async def test_http_error(self, service, calls):
        calls["response"] = FakeResponse({}, status_code=503)

        with pytest.raises(ExternalServiceError):
            await service.safe_route(ORIGIN, "1 Main St")

    async def test_missing_key(self, calls):
        service = NavigationService(api_key="")

        with pytest.raises(ExternalServiceError) as exc_info:
            await service.safe_route(ORIGIN, "1 Main St")

        assert exc_info.value.details["status"] == "NOT_CONFIGURED"
        assert calls["requests"] == []

    async def test_blank_destination(self, service, calls):
        with pytest.raises(ValidationError):
            await service.safe_route(ORIGIN, "  ")

        assert calls["requests"] == []


class TestGeocode:
    async def test_geocode(self, service, calls):
        calls["response"] = FakeResponse(GEOCODE_OK)

        result = await service.geocode("1 Main St")

        assert result.location == LatLng(lat=40.005, lng=-74.002)
        assert result.formatted_address == "1 Main St, Springfield"

    async def test_address_not_found(self, service, calls):
        calls["response"] = FakeResponse({"status": "ZERO_RESULTS", "results": []})

        with pytest.raises(ExternalServiceError):
            await service.geocode("nowhere")


def test_strip_html():
    assert strip_html('Turn <b>left</b><div style="x">Destination ahead</div>') == "Turn leftDestination ahead"
