"""Walking navigation backed by the Google Directions and Geocoding APIs."""
import asyncio
import re
from typing import Any, Dict, Optional

import requests

from visionassist.core.config import settings
from visionassist.core.exceptions import ExternalServiceError, ValidationError
from visionassist.core.logging import get_logger
from visionassist.domain.entities.route import GeocodeResult, LatLng, RouteResult
from visionassist.services.route_safety import score_route

logger = get_logger(__name__)

_HTML_TAG = re.compile(r"<[^>]*>")


def strip_html(text: str) -> str:
    """Remove markup from a provider instruction."""
    return _HTML_TAG.sub("", text).strip()


class NavigationService:
    """Computes walking routes and geocodes addresses.

    Every call hits the provider; nothing is cached across requests.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        directions_url: Optional[str] = None,
        geocode_url: Optional[str] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self.timeout = timeout or settings.MAPS_REQUEST_TIMEOUT
        self.directions_url = directions_url or settings.DIRECTIONS_URL
        self.geocode_url = geocode_url or settings.GEOCODE_URL

    def _require_key(self) -> str:
        if not self.api_key:
            raise ExternalServiceError(
                "Google Maps API key not configured",
                details={"status": "NOT_CONFIGURED"}
            )
        return self.api_key

    async def _get(self, url: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Run a provider GET in a worker thread and return the decoded body."""
        try:
            response = await asyncio.to_thread(
                requests.get, url, params=params, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error("Maps provider request failed", url=url, error=str(e))
            raise ExternalServiceError(
                "Maps provider is unreachable",
                details={"status": "REQUEST_FAILED", "error": str(e)}
            )
        except ValueError as e:
            raise ExternalServiceError(
                "Maps provider returned an invalid response",
                details={"status": "INVALID_RESPONSE", "error": str(e)}
            )

    async def safe_route(self, origin: LatLng, destination: str) -> RouteResult:
        """Compute a walking route and its safety score.

        Args:
            origin: Current position
            destination: Free-form destination address

        Returns:
            RouteResult for the first route's first leg

        Raises:
            ValidationError: If the destination is blank
            ExternalServiceError: If the provider is unreachable, not
                configured, or returned a non-OK status
        """
        if not destination or not destination.strip():
            raise ValidationError("Destination is required", details={"field": "destination"})
        key = self._require_key()

        origin_str = origin.as_param()
        logger.info("Requesting walking route", origin=origin_str, destination=destination)
        data = await self._get(self.directions_url, {
            "origin": origin_str,
            "destination": destination,
            "mode": "walking",
            "key": key,
        })

        status = data.get("status", "UNKNOWN_ERROR")
        routes = data.get("routes") or []
        if status != "OK" or not routes:
            logger.warning("Directions request unsuccessful", status=status)
            raise ExternalServiceError(
                "Could not find route. Please check the destination address.",
                details={"status": status}
            )

        route = routes[0]
        try:
            leg = route["legs"][0]
            duration_seconds = int(leg["duration"]["value"])
            result = RouteResult(
                origin=origin_str,
                destination=leg.get("end_address", destination),
                distance_text=leg["distance"]["text"],
                duration_text=leg["duration"]["text"],
                duration_seconds=duration_seconds,
                steps=[strip_html(step.get("html_instructions", "")) for step in leg.get("steps", [])],
                safety_score=score_route(duration_seconds),
                polyline=route.get("overview_polyline", {}).get("points", ""),
                start_location=LatLng(**leg["start_location"]),
                end_location=LatLng(**leg["end_location"]),
            )
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error("Malformed directions response", error=str(e))
            raise ExternalServiceError(
                "Unexpected response from directions service",
                details={"status": status, "error": str(e)}
            )
        logger.info(
            "Route computed",
            distance=result.distance_text,
            duration=result.duration_text,
            safety_score=result.safety_score,
            steps=len(result.steps)
        )
        return result

    async def geocode(self, address: str) -> GeocodeResult:
        """Resolve an address to coordinates.

        Raises:
            ValidationError: If the address is blank
            ExternalServiceError: If the provider fails or finds nothing
        """
        if not address or not address.strip():
            raise ValidationError("Address is required", details={"field": "address"})
        key = self._require_key()

        data = await self._get(self.geocode_url, {"address": address, "key": key})
        status = data.get("status", "UNKNOWN_ERROR")
        results = data.get("results") or []
        if status != "OK" or not results:
            raise ExternalServiceError("Address not found", details={"status": status})

        first = results[0]
        return GeocodeResult(
            location=LatLng(**first["geometry"]["location"]),
            formatted_address=first.get("formatted_address", address),
        )
