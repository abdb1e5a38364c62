"""Tests for the route safety heuristic."""
import pytest

from visionassist.core.exceptions import ValidationError
from visionassist.services.route_safety import score_route


class TestRouteSafety:
    """Test suite for score_route."""

    def test_short_route_bonus(self):
        """A 10 minute walk should score 85."""
        assert score_route(600) == 85

    def test_long_route_penalty(self):
        """A 60 minute walk should score 65."""
        assert score_route(3600) == 65

    def test_medium_route_base_score(self):
        assert score_route(30 * 60) == 75

    @pytest.mark.parametrize("seconds, expected", [
        (15 * 60, 75),
        (15 * 60 - 1, 85),
        (45 * 60, 75),
        (45 * 60 + 1, 65),
        (0, 85),
    ])
    def test_boundaries(self, seconds, expected):
        assert score_route(seconds) == expected

    def test_bounded_and_non_increasing(self):
        """Scores should stay in [50, 95] and never rise as duration grows."""
        scores = [score_route(seconds) for seconds in range(0, 6 * 3600, 30)]

        assert all(50 <= score <= 95 for score in scores)
        assert all(a >= b for a, b in zip(scores, scores[1:]))

    def test_negative_duration_rejected(self):
        with pytest.raises(ValidationError):
            score_route(-1)
