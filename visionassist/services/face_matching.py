"""Nearest-labeled-descriptor matching for face identification."""
import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np

from visionassist.core.config import settings
from visionassist.core.exceptions import ValidationError
from visionassist.core.logging import get_logger
from visionassist.domain.entities.face import FaceRecord
from visionassist.domain.value_objects.recognition import UNKNOWN_LABEL, MatchResult

logger = get_logger(__name__)

Vector = Union[np.ndarray, Sequence[float]]

DEFAULT_THRESHOLD = 0.6


class DescriptorMatcher:
    """Matches a probe descriptor against labeled reference descriptors.

    The reference set is fixed at construction. When the underlying face
    records change a new matcher must be built; an instance never refreshes
    itself.

    Example:
        ```python
        matcher = DescriptorMatcher({"Alice": [[0.0, 0.0, 0.0]]}, threshold=0.6)
        result = matcher.match([0.01, 0.0, 0.0])
        assert result.label == "Alice"
        ```
    """

    def __init__(
        self,
        labeled_descriptors: Mapping[str, Iterable[Vector]],
        threshold: float = DEFAULT_THRESHOLD,
    ) -> None:
        """
        Args:
            labeled_descriptors: Name to one-or-more reference descriptors, in
                the order labels should win ties
            threshold: Maximum Euclidean distance accepted as a match
        """
        if threshold < 0:
            raise ValidationError("Threshold must be non-negative", details={"threshold": threshold})

        self.threshold = float(threshold)
        self._labels: List[str] = []
        self._references: List[np.ndarray] = []
        self._dimension = None

        for label, descriptors in labeled_descriptors.items():
            vectors = [np.asarray(d, dtype=np.float64).ravel() for d in descriptors]
            if not vectors:
                continue
            for vector in vectors:
                self._check_dimension(vector)
            self._labels.append(label)
            self._references.append(np.vstack(vectors))

    @classmethod
    def from_records(
        cls,
        records: Iterable[FaceRecord],
        threshold: float = DEFAULT_THRESHOLD,
    ) -> "DescriptorMatcher":
        """Group face records by name, keeping the order names were first seen."""
        grouped: Dict[str, List[List[float]]] = {}
        for record in records:
            if not record.descriptor:
                continue
            grouped.setdefault(record.name, []).append(record.descriptor)
        return cls(grouped, threshold=threshold)

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    @property
    def is_empty(self) -> bool:
        return not self._labels

    def _check_dimension(self, vector: np.ndarray) -> None:
        if self._dimension is None:
            self._dimension = vector.shape[0]
        elif vector.shape[0] != self._dimension:
            raise ValidationError(
                "Descriptor length does not match the reference set",
                details={"expected": self._dimension, "actual": int(vector.shape[0])}
            )

    def match(self, probe: Vector) -> MatchResult:
        """Return the label of the closest reference, or 'unknown'.

        Args:
            probe: Descriptor to identify

        Returns:
            MatchResult with the closest label when its distance is within the
            threshold, otherwise the 'unknown' label with that distance

        Raises:
            ValidationError: If the probe length differs from the references
        """
        if self.is_empty:
            return MatchResult(label=UNKNOWN_LABEL, distance=math.inf)

        vector = np.asarray(probe, dtype=np.float64).ravel()
        if vector.shape[0] != self._dimension:
            raise ValidationError(
                "Probe descriptor length does not match the reference set",
                details={"expected": self._dimension, "actual": int(vector.shape[0])}
            )

        best_label = UNKNOWN_LABEL
        best_distance = math.inf
        for label, references in zip(self._labels, self._references):
            distance = float(np.linalg.norm(references - vector, axis=1).min())
            # Strict comparison so the first label seen wins ties
            if distance < best_distance:
                best_label, best_distance = label, distance

        if best_distance <= self.threshold:
            return MatchResult(label=best_label, distance=best_distance)
        return MatchResult(label=UNKNOWN_LABEL, distance=best_distance)


def build_matcher(records: Iterable[FaceRecord], threshold: Optional[float] = None) -> DescriptorMatcher:
    """Build a matcher over face records using the configured threshold by default."""
    matcher = DescriptorMatcher.from_records(
        records,
        threshold=settings.MATCH_THRESHOLD if threshold is None else threshold,
    )
    logger.debug("Built descriptor matcher", labels=len(matcher.labels), threshold=matcher.threshold)
    return matcher
