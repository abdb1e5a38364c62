"""Tests for the navigation API."""
import pytest
from fastapi.testclient import TestClient

from visionassist.core.exceptions import ExternalServiceError
from visionassist.domain.entities.route import GeocodeResult, LatLng, RouteResult
from visionassist.infrastructure.dependencies import get_navigation_service
from visionassist.main import app


class StubNavigationService:
    def __init__(self):
        self.error = None
        self.requests = []

    async def safe_route(self, origin, destination):
        self.requests.append((origin, destination))
        if self.error:
            raise self.error
        return RouteResult(
            origin=origin.as_param(),
            destination="1 Main St, Springfield",
            distance_text="4.8 km",
            duration_text="1 hour",
            duration_seconds=3600,
            steps=["Head north on Main St"],
            safety_score=65,
            polyline="abc",
            start_location=origin,
            end_location=LatLng(lat=40.05, lng=-74.0),
        )

    async def geocode(self, address):
        if self.error:
            raise self.error
        return GeocodeResult(location=LatLng(lat=1.5, lng=2.5), formatted_address=address.title())


@pytest.fixture
def navigation():
    return StubNavigationService()


@pytest.fixture
def client(navigation):
    app.dependency_overrides[get_navigation_service] = lambda: navigation
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestRouteEndpoint:

    def test_route(self, client, navigation):
        response = client.post(
            "/api/route",
            json={"origin": {"lat": 40.0, "lng": -74.0}, "destination": "1 Main St"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["safetyScore"] == 65
        assert body["distance"] == "4.8 km"
        assert body["duration"] == "1 hour"
        assert body["steps"] == ["Head north on Main St"]
        assert navigation.requests[0][1] == "1 Main St"

    def test_provider_error(self, client, navigation):
        navigation.error = ExternalServiceError("Could not find route", details={"status": "ZERO_RESULTS"})

        response = client.post(
            "/api/route",
            json={"origin": {"lat": 40.0, "lng": -74.0}, "destination": "nowhere"}
        )

        assert response.status_code == 502
        assert response.json()["detail"]["status"] == "ZERO_RESULTS"

    def test_unexpected_error_is_generic_500(self, navigation):
        navigation.error = KeyError("legs")
        app.dependency_overrides[get_navigation_service] = lambda: navigation
        try:
            with TestClient(app, raise_server_exceptions=False) as test_client:
                response = test_client.post(
                    "/api/route",
                    json={"origin": {"lat": 40.0, "lng": -74.0}, "destination": "1 Main St"}
                )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"detail": "An unexpected error occurred."}

    def test_invalid_origin(self, client):
        response = client.post(
            "/api/route",
            json={"origin": {"lat": 140.0, "lng": -74.0}, "destination": "1 Main St"}
        )

        assert response.status_code == 400


def test_geocode(client):
    response = client.post("/api/geocode", json={"address": "1 main st"})

    assert response.json() == {"location": {"lat": 1.5, "lng": 2.5}, "formattedAddress": "1 Main St"}


def test_emergency_sos(client):
    response = client.post(
        "/api/emergency-sos",
        json={"location": {"lat": 1.0, "lng": 2.0}, "userId": "default_user"}
    )

    assert response.json()["success"] is True
