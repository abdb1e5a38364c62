"""Navigation domain entities."""
from typing import List

from pydantic import BaseModel, Field


class LatLng(BaseModel):
    """Geographic coordinate."""
    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")

    def as_param(self) -> str:
        """Format as the ``lat,lng`` string the maps provider expects."""
        return f"{self.lat},{self.lng}"


class RouteResult(BaseModel):
    """A walking route computed for one navigation request. Never cached."""
    origin: str = Field(..., description="Origin as sent to the provider")
    destination: str = Field(..., description="Resolved end address")
    distance_text: str = Field(..., description="Human readable distance")
    duration_text: str = Field(..., description="Human readable duration")
    duration_seconds: int = Field(..., ge=0, description="Total duration in seconds")
    steps: List[str] = Field(default_factory=list, description="Plain text instructions")
    safety_score: int = Field(..., ge=50, le=95, description="Route safety heuristic")
    polyline: str = Field("", description="Encoded overview polyline")
    start_location: LatLng
    end_location: LatLng


class GeocodeResult(BaseModel):
    """Result of an address lookup."""
    location: LatLng
    formatted_address: str
