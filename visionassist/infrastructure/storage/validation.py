"""Input checks shared by every descriptor store backend."""
import math
from typing import List, Optional, Sequence

from visionassist.core.exceptions import ValidationError


def validate_registration(name: Optional[str], descriptor: Optional[Sequence[float]]) -> List[float]:
    """Check a registration request and normalize its descriptor.

    Args:
        name: Display label
        descriptor: Face embedding vector

    Returns:
        The descriptor as a list of floats

    Raises:
        ValidationError: If the name is blank or the descriptor is missing,
            empty, non-numeric or holds NaN/infinite values
    """
    if name is None or not name.strip():
        raise ValidationError("Name is required", details={"field": "name"})
    if descriptor is None or len(descriptor) == 0:
        raise ValidationError("Face descriptor is required", details={"field": "descriptor"})
    try:
        values = [float(value) for value in descriptor]
    except (TypeError, ValueError) as e:
        raise ValidationError(
            "Face descriptor must be numeric",
            details={"field": "descriptor", "error": str(e)}
        )
    if not all(math.isfinite(value) for value in values):
        raise ValidationError("Face descriptor must be finite", details={"field": "descriptor"})
    return values


def check_descriptor_length(values: Sequence[float], expected: Optional[int], user_id: str) -> None:
    """Reject a descriptor whose length differs from the user's stored faces.

    Args:
        values: Validated descriptor about to be stored
        expected: Length of an already stored descriptor for the user, None
            when the user has no faces yet
        user_id: Partition the descriptor is registered under

    Raises:
        ValidationError: If the lengths differ
    """
    if expected is not None and len(values) != expected:
        raise ValidationError(
            "Face descriptor length does not match the registered faces",
            details={"field": "descriptor", "user_id": user_id, "expected": expected, "actual": len(values)}
        )
