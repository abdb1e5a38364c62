"""Navigation API endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from visionassist.api.models.navigation import (
    EmergencyRequest,
    EmergencyResponse,
    GeocodeRequest,
    GeocodeResponse,
    RouteRequest,
    RouteResponse,
)
from visionassist.core.exceptions import ExternalServiceError, ValidationError
from visionassist.core.logging import get_logger
from visionassist.infrastructure.dependencies import get_navigation_service
from visionassist.services.navigation import NavigationService

logger = get_logger(__name__)
router = APIRouter(
    tags=["navigation"],
    responses={
        400: {"description": "Invalid request"},
        502: {"description": "Maps provider error"},
    }
)


def _provider_error(e: ExternalServiceError) -> HTTPException:
    return HTTPException(
        status_code=502,
        detail={"error": e.message, "status": e.details.get("status")}
    )


@router.post(
    "/route",
    response_model=RouteResponse,
    summary="Compute a safe walking route",
    description="Asks the maps provider for a walking route and scores its safety.",
)
async def safe_route(
    request: RouteRequest,
    service: NavigationService = Depends(get_navigation_service)
) -> RouteResponse:
    try:
        route = await service.safe_route(request.origin, request.destination)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ExternalServiceError as e:
        logger.error("Route lookup failed", error=str(e), status=e.details.get("status"))
        raise _provider_error(e)
    return RouteResponse.from_result(route)


@router.post(
    "/geocode",
    response_model=GeocodeResponse,
    summary="Geocode an address",
)
async def geocode(
    request: GeocodeRequest,
    service: NavigationService = Depends(get_navigation_service)
) -> GeocodeResponse:
    try:
        result = await service.geocode(request.address)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ExternalServiceError as e:
        logger.error("Geocoding failed", error=str(e), status=e.details.get("status"))
        raise _provider_error(e)
    return GeocodeResponse.from_result(result)


@router.post(
    "/emergency-sos",
    response_model=EmergencyResponse,
    summary="Raise an emergency alert",
)
async def emergency_sos(request: EmergencyRequest) -> EmergencyResponse:
    """Record an SOS alert. Delivery to contacts is not wired up."""
    logger.warning(
        "SOS triggered",
        user_id=request.user_id,
        location=request.location.as_param() if request.location else None
    )
    return EmergencyResponse(success=True, message="SOS alert recorded")
