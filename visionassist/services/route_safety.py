"""Route safety heuristic."""
from visionassist.core.exceptions import ValidationError

BASE_SCORE = 75
SHORT_ROUTE_BONUS = 10
LONG_ROUTE_PENALTY = 10
SHORT_ROUTE_MINUTES = 15
LONG_ROUTE_MINUTES = 45
MIN_SCORE = 50
MAX_SCORE = 95


def score_route(duration_seconds: float) -> int:
    """Derive a bounded safety score from a route's total duration.

    Short walks (under 15 minutes) earn a bonus, long ones (over 45 minutes)
    a penalty. The result is clamped to [50, 95].

    Args:
        duration_seconds: Total route duration

    Returns:
        int: Safety score

    Raises:
        ValidationError: If the duration is negative
    """
    if duration_seconds < 0:
        raise ValidationError("Route duration cannot be negative", details={"duration": duration_seconds})

    minutes = duration_seconds / 60
    score = BASE_SCORE
    if minutes < SHORT_ROUTE_MINUTES:
        score += SHORT_ROUTE_BONUS
    if minutes > LONG_ROUTE_MINUTES:
        score -= LONG_ROUTE_PENALTY
    return max(MIN_SCORE, min(MAX_SCORE, score))
