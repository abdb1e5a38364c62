"""Value objects package."""
from .notification import Notification, Severity
from .recognition import (
    UNKNOWN_LABEL,
    DetectionTick,
    FaceAnnotation,
    MatchResult,
    PipelineState,
)

__all__ = [
    "UNKNOWN_LABEL",
    "DetectionTick",
    "FaceAnnotation",
    "MatchResult",
    "Notification",
    "PipelineState",
    "Severity",
]
