"""API specific navigation models."""
from typing import List, Optional

from pydantic import Field

from visionassist.api.models.face import ApiModel
from visionassist.domain.entities.route import GeocodeResult, LatLng, RouteResult


class RouteRequest(ApiModel):
    """Request model for the /route endpoint."""
    origin: LatLng
    destination: str = Field(..., min_length=1, max_length=512)


class RouteResponse(ApiModel):
    """A computed walking route."""
    origin: str
    destination: str
    distance: str
    duration: str
    duration_seconds: int
    safety_score: int
    steps: List[str]
    polyline: str
    start_location: LatLng
    end_location: LatLng

    @classmethod
    def from_result(cls, route: RouteResult) -> "RouteResponse":
        return cls(
            origin=route.origin,
            destination=route.destination,
            distance=route.distance_text,
            duration=route.duration_text,
            duration_seconds=route.duration_seconds,
            safety_score=route.safety_score,
            steps=route.steps,
            polyline=route.polyline,
            start_location=route.start_location,
            end_location=route.end_location,
        )


class GeocodeRequest(ApiModel):
    """Request model for the /geocode endpoint."""
    address: str = Field(..., min_length=1, max_length=512)


class GeocodeResponse(ApiModel):
    location: LatLng
    formatted_address: str

    @classmethod
    def from_result(cls, result: GeocodeResult) -> "GeocodeResponse":
        return cls(location=result.location, formatted_address=result.formatted_address)


class EmergencyRequest(ApiModel):
    """Request model for the /emergency-sos endpoint."""
    location: Optional[LatLng] = None
    user_id: Optional[str] = Field(None, max_length=255)


class EmergencyResponse(ApiModel):
    success: bool
    message: str
