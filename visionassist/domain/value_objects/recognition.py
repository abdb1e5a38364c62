"""Face recognition value objects."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from visionassist.domain.entities.face import BoundingBox

UNKNOWN_LABEL = "unknown"


class MatchResult(BaseModel):
    """Best match of a probe descriptor against the labeled references."""
    label: str = Field(..., description="Matched label, or 'unknown'")
    distance: float = Field(..., description="Distance to the closest reference")

    model_config = ConfigDict(frozen=True)

    @property
    def is_known(self) -> bool:
        return self.label != UNKNOWN_LABEL

    def __str__(self) -> str:
        return f"{self.label} ({self.distance:.2f})"


class FaceAnnotation(BaseModel):
    """One detected face in a tick, optionally labeled by the matcher."""
    bounding_box: BoundingBox
    confidence: float
    label: Optional[str] = Field(None, description="None when no matcher cache is loaded")
    distance: Optional[float] = None


class DetectionTick(BaseModel):
    """Annotations published by a single detection tick."""
    sequence: int = Field(..., description="Tick number within the detection session")
    annotations: List[FaceAnnotation] = Field(default_factory=list)


class PipelineState(str, Enum):
    """Lifecycle states of the face pipeline controller."""
    IDLE = "idle"
    CAMERA_ACTIVE = "camera_active"
    DETECTING = "detecting"
    REGISTRATION_PENDING = "registration_pending"
