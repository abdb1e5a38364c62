"""Custom exceptions for the VisionAssist backend."""
from typing import Optional


class VisionAssistError(Exception):
    """Base exception for VisionAssist operations."""

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize VisionAssist error.

        Args:
            message: Error description
            details: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(VisionAssistError):
    """Raised when a required field is missing or empty.

    Always raised before any external call is made.
    """
    pass


class DeviceError(VisionAssistError):
    """Raised when the camera or microphone is unavailable or access was denied."""
    pass


class NoFaceDetectedError(VisionAssistError):
    """Raised when registration is attempted with no face in frame."""
    pass


class ExternalServiceError(VisionAssistError):
    """Raised when the face store or mapping provider is unreachable or returned a non-success status."""
    pass


class ModelInferenceError(VisionAssistError):
    """Raised when the embedding or detection model call fails."""
    pass


class ServiceNotInitializedError(VisionAssistError):
    """Raised when a service is requested before the container was initialized."""
    pass
