"""API specific face models."""
from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from visionassist.domain.entities.face import FaceRecord
from visionassist.domain.value_objects.recognition import MatchResult


class ApiModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FaceRegistrationRequest(ApiModel):
    """Request model for the /faces/register endpoint."""
    name: str = Field(..., description="Display label", min_length=1, max_length=255)
    descriptor: List[float] = Field(
        ...,
        description="Face embedding vector",
        min_length=1,
        validation_alias=AliasChoices("descriptor", "faceDescriptor"),
    )
    user_id: Optional[str] = Field(None, description="Partition key", max_length=255)
    image_url: Optional[str] = Field(None, description="Optional snapshot location", max_length=2048)


class FaceRegistrationResponse(ApiModel):
    """Response model for the /faces/register endpoint."""
    id: str = Field(..., description="Identifier assigned by the store")
    name: str
    timestamp: datetime

    @classmethod
    def from_record(cls, record: FaceRecord) -> "FaceRegistrationResponse":
        return cls(id=record.id, name=record.name, timestamp=record.timestamp)


class FaceSummary(ApiModel):
    """A registered face without its descriptor."""
    id: str
    name: str
    timestamp: datetime
    image_url: Optional[str] = None

    @classmethod
    def from_record(cls, record: FaceRecord) -> "FaceSummary":
        return cls(
            id=record.id,
            name=record.name,
            timestamp=record.timestamp,
            image_url=record.image_url
        )


class FaceDescriptorEntry(ApiModel):
    """A registered face with its descriptor, used to build client matchers."""
    id: str
    name: str
    descriptor: List[float]

    @classmethod
    def from_record(cls, record: FaceRecord) -> "FaceDescriptorEntry":
        return cls(id=record.id, name=record.name, descriptor=record.descriptor or [])


class FaceDeletionResponse(ApiModel):
    """Response model for face deletion."""
    success: bool


class FaceMatchRequest(ApiModel):
    """Request model for the /faces/match endpoint."""
    descriptor: List[float] = Field(..., description="Probe descriptor", min_length=1)
    user_id: Optional[str] = Field(None, max_length=255)
    threshold: Optional[float] = Field(None, description="Override the distance threshold", ge=0.0, le=2.0)


class FaceMatchResponse(ApiModel):
    """Best match for a probe descriptor."""
    label: str = Field(..., description="Matched name, or 'unknown'")
    distance: Optional[float] = Field(None, description="Distance to the closest reference, null when nothing is registered")

    @classmethod
    def from_result(cls, result: MatchResult) -> "FaceMatchResponse":
        distance = result.distance if result.distance != float("inf") else None
        return cls(label=result.label, distance=distance)
