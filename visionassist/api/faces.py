"""Face registry API endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from visionassist.api.models.face import (
    FaceDeletionResponse,
    FaceDescriptorEntry,
    FaceMatchRequest,
    FaceMatchResponse,
    FaceRegistrationRequest,
    FaceRegistrationResponse,
    FaceSummary,
)
from visionassist.core.config import settings
from visionassist.core.exceptions import ExternalServiceError, ValidationError
from visionassist.core.logging import get_logger
from visionassist.domain.interfaces.storage.descriptor_store import DescriptorStore
from visionassist.infrastructure.dependencies import get_descriptor_store
from visionassist.services.face_matching import build_matcher

logger = get_logger(__name__)
router = APIRouter(
    tags=["faces"],
    responses={
        400: {"description": "Invalid request"},
        502: {"description": "Face store unavailable"},
        500: {"description": "Internal server error"}
    }
)


@router.post(
    "/register",
    response_model=FaceRegistrationResponse,
    summary="Register a face",
    description="Stores a named face descriptor for a user.",
)
async def register_face(
    request: FaceRegistrationRequest,
    store: DescriptorStore = Depends(get_descriptor_store)
) -> FaceRegistrationResponse:
    """Register a new face descriptor.

    Raises:
        HTTPException: 400 on invalid input, 502 when the store fails
    """
    logger.info("Registering face", name=request.name, user_id=request.user_id)
    try:
        record = await store.register(
            request.name,
            request.descriptor,
            user_id=request.user_id,
            image_url=request.image_url,
        )
        return FaceRegistrationResponse.from_record(record)

    except ValidationError as e:
        logger.warning("Rejected face registration", error=str(e))
        raise HTTPException(status_code=400, detail=e.message)
    except ExternalServiceError as e:
        logger.error("Failed to store face", error=str(e))
        raise HTTPException(status_code=502, detail=e.message)
    except Exception as e:
        logger.error("Unexpected error during face registration", error=str(e), exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred.")


@router.get(
    "",
    response_model=List[FaceSummary],
    summary="List registered faces",
    description="Returns registered faces newest first, without descriptors.",
)
async def list_faces(
    user_id: Optional[str] = Query(None, alias="userId"),
    store: DescriptorStore = Depends(get_descriptor_store)
) -> List[FaceSummary]:
    logger.info("Listing faces", user_id=user_id or "all")
    try:
        records = await store.list(user_id)
    except ExternalServiceError as e:
        logger.error("Failed to list faces", error=str(e))
        raise HTTPException(status_code=502, detail=e.message)
    return [FaceSummary.from_record(record) for record in records]


@router.get(
    "/descriptors",
    response_model=List[FaceDescriptorEntry],
    summary="List face descriptors",
    description="Returns every registered descriptor so a client can build its matcher.",
)
async def list_descriptors(
    user_id: Optional[str] = Query(None, alias="userId"),
    store: DescriptorStore = Depends(get_descriptor_store)
) -> List[FaceDescriptorEntry]:
    logger.info("Listing face descriptors", user_id=user_id or "all")
    try:
        records = await store.list_with_descriptors(user_id)
    except ExternalServiceError as e:
        logger.error("Failed to load face descriptors", error=str(e))
        raise HTTPException(status_code=502, detail=e.message)
    return [FaceDescriptorEntry.from_record(record) for record in records]


@router.post(
    "/match",
    response_model=FaceMatchResponse,
    summary="Identify a face descriptor",
    description="Matches a probe descriptor against the registered faces of a user.",
)
async def match_face(
    request: FaceMatchRequest,
    store: DescriptorStore = Depends(get_descriptor_store)
) -> FaceMatchResponse:
    """Match a probe against a matcher freshly built from the store."""
    try:
        records = await store.list_with_descriptors(request.user_id or settings.DEFAULT_USER_ID)
        result = build_matcher(records, threshold=request.threshold).match(request.descriptor)
    except ValidationError as e:
        logger.warning("Rejected face match", error=str(e), details=e.details)
        raise HTTPException(status_code=400, detail=e.message)
    except ExternalServiceError as e:
        logger.error("Failed to load face descriptors", error=str(e))
        raise HTTPException(status_code=502, detail=e.message)

    logger.info("Matched face descriptor", label=result.label, distance=result.distance)
    return FaceMatchResponse.from_result(result)


@router.delete(
    "/{face_id}",
    response_model=FaceDeletionResponse,
    summary="Delete a registered face",
    description="Deletes a face by id. Unknown ids are reported as deleted.",
)
async def delete_face(
    face_id: str,
    store: DescriptorStore = Depends(get_descriptor_store)
) -> FaceDeletionResponse:
    logger.info("Deleting face", face_id=face_id)
    try:
        success = await store.delete(face_id)
    except ExternalServiceError as e:
        logger.error("Failed to delete face", face_id=face_id, error=str(e))
        raise HTTPException(status_code=502, detail=e.message)
    return FaceDeletionResponse(success=success)
