"""Notification value objects."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Notification severities shown by the UI banner."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notification(BaseModel):
    """A transient banner entry."""
    id: str = Field(..., description="Notification identifier")
    message: str = Field(..., description="Text shown and spoken")
    severity: Severity = Field(Severity.INFO)
    created_at: datetime

    model_config = ConfigDict(frozen=True)
