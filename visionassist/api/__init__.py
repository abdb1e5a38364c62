"""API router initialization."""
from fastapi import APIRouter

from .faces import router as faces_router
from .navigation import router as navigation_router

router = APIRouter()

router.include_router(faces_router, prefix="/faces")
router.include_router(navigation_router)
