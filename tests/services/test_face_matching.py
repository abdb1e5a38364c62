"""Tests for the descriptor matcher."""
import math
from datetime import datetime, timezone

import numpy as np
import pytest

from visionassist.core.exceptions import ValidationError
from visionassist.domain.entities.face import FaceRecord
from visionassist.domain.value_objects.recognition import UNKNOWN_LABEL
from visionassist.services.face_matching import DescriptorMatcher, build_matcher


def _record(name: str, descriptor) -> FaceRecord:
    return FaceRecord(
        id=f"{name}-{len(descriptor)}-{descriptor[0]}",
        name=name,
        descriptor=descriptor,
        user_id="default_user",
        timestamp=datetime.now(timezone.utc),
    )


class TestDescriptorMatcher:
    """Test suite for nearest-labeled-descriptor matching."""

    def test_matches_close_probe(self):
        """Should match a probe within the threshold of a single reference."""
        matcher = DescriptorMatcher({"Alice": [[0.0, 0.0, 0.0]]}, threshold=0.6)

        result = matcher.match([0.01, 0.0, 0.0])

        assert result.label == "Alice"
        assert result.distance == pytest.approx(0.01)
        assert result.is_known

    def test_empty_reference_set_is_unknown(self):
        """Should return unknown for any probe when nothing is registered."""
        matcher = DescriptorMatcher({})

        result = matcher.match([0.3, 0.1, 0.9])

        assert result.label == UNKNOWN_LABEL
        assert math.isinf(result.distance)
        assert matcher.is_empty

    def test_far_probe_is_unknown(self):
        """Should return unknown when every reference is beyond the threshold."""
        matcher = DescriptorMatcher(
            {"Alice": [[0.0, 0.0, 0.0]], "Bob": [[1.0, 1.0, 1.0]]},
            threshold=0.6
        )

        result = matcher.match([3.0, 0.0, 0.0])

        assert result.label == UNKNOWN_LABEL
        assert result.distance == pytest.approx(math.sqrt(4.0 + 1.0 + 1.0))

    def test_distance_equal_to_threshold_matches(self):
        """Should accept a reference exactly at the threshold distance."""
        matcher = DescriptorMatcher({"Alice": [[0.0, 0.0]]}, threshold=0.5)

        assert matcher.match([0.5, 0.0]).label == "Alice"

    def test_picks_closest_label(self):
        """Should pick the label of the nearest reference across all labels."""
        matcher = DescriptorMatcher(
            {"Alice": [[0.0, 0.0]], "Bob": [[0.4, 0.0]]},
            threshold=0.6
        )

        result = matcher.match([0.3, 0.0])

        assert result.label == "Bob"
        assert result.distance == pytest.approx(0.1)

    def test_ties_go_to_first_label(self):
        """Should break ties by insertion order of the mapping."""
        matcher = DescriptorMatcher(
            {"Bob": [[1.0, 0.0]], "Alice": [[-1.0, 0.0]]},
            threshold=2.0
        )

        assert matcher.match([0.0, 0.0]).label == "Bob"

    def test_uses_any_reference_of_a_label(self):
        """Should use the closest of several references for a label."""
        matcher = DescriptorMatcher(
            {"Alice": [[5.0, 5.0], [0.0, 0.0]]},
            threshold=0.6
        )

        result = matcher.match(np.array([0.1, 0.0]))

        assert result.label == "Alice"
        assert result.distance == pytest.approx(0.1)

    def test_probe_length_mismatch(self):
        """Should reject probes of a different dimensionality."""
        matcher = DescriptorMatcher({"Alice": [[0.0, 0.0, 0.0]]})

        with pytest.raises(ValidationError):
            matcher.match([0.0, 0.0])

    def test_reference_length_mismatch(self):
        """Should refuse to build a reference set of mixed lengths."""
        with pytest.raises(ValidationError):
            DescriptorMatcher({"Alice": [[0.0, 0.0]], "Bob": [[0.0, 0.0, 0.0]]})

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError):
            DescriptorMatcher({}, threshold=-0.1)

    def test_from_records_groups_by_name(self):
        """Should group records by name, keeping first-seen order."""
        records = [
            _record("Alice", [0.0, 0.0]),
            _record("Bob", [1.0, 0.0]),
            _record("Alice", [0.0, 1.0]),
        ]

        matcher = DescriptorMatcher.from_records(records, threshold=0.2)

        assert matcher.labels == ["Alice", "Bob"]
        assert matcher.match([0.0, 0.95]).label == "Alice"

    def test_build_matcher_uses_configured_threshold(self):
        matcher = build_matcher([_record("Alice", [0.0, 0.0])])

        assert matcher.threshold == pytest.approx(0.6)
