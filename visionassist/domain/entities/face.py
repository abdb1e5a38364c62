"""Core face domain entities."""
from datetime import datetime
from typing import List, Optional, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BoundingBox(BaseModel):
    """Face bounding box coordinates, normalized to the frame size (0-1)."""
    left: float = Field(..., description="Left coordinate of the bounding box")
    top: float = Field(..., description="Top coordinate of the bounding box")
    width: float = Field(..., description="Width of the bounding box")
    height: float = Field(..., description="Height of the bounding box")

    @property
    def area(self) -> float:
        return self.width * self.height


class DetectedFace(BaseModel):
    """A face found in a video frame by the embedding model."""
    confidence: float = Field(..., description="Confidence score of the detection")
    bounding_box: BoundingBox = Field(..., description="Bounding box coordinates")
    descriptor: np.ndarray = Field(..., description="Face embedding vector")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("descriptor", mode="before")
    @classmethod
    def validate_descriptor(cls, v: Union[np.ndarray, list]) -> np.ndarray:
        """Validate and convert the descriptor to a flat float array."""
        return np.asarray(v, dtype=np.float32).ravel()


class FaceRecord(BaseModel):
    """A registered, named face descriptor.

    Records are never updated in place. ``descriptor`` is ``None`` when the
    record was listed without its payload.
    """
    id: str = Field(..., description="Identifier assigned by the store")
    name: str = Field(..., description="Display label")
    descriptor: Optional[List[float]] = Field(None, description="Face embedding vector")
    user_id: str = Field(..., description="Partition key")
    timestamp: datetime = Field(..., description="Creation time, set once")
    image_url: Optional[str] = Field(None, description="Optional snapshot location")

    model_config = ConfigDict(frozen=True)

    def without_descriptor(self) -> "FaceRecord":
        """Return a copy carrying only the record metadata."""
        return self.model_copy(update={"descriptor": None})
