"""Five-band status for any 0-100 score."""

from __future__ import annotations

import math
from enum import Enum

from wellcharge.errors import ValidationError


class HealthStatus(str, Enum):
    OPTIMAL = "optimal"
    GOOD = "good"
    FAIR = "fair"
    DECLINING = "declining"
    NEEDS_ATTENTION = "needs attention"


# (lower bound, status), checked top-down
STATUS_BANDS = [
    (80, HealthStatus.OPTIMAL),
    (60, HealthStatus.GOOD),
    (40, HealthStatus.FAIR),
    (20, HealthStatus.DECLINING),
    (0, HealthStatus.NEEDS_ATTENTION),
]


def classify_status(score: float) -> HealthStatus:
    """Map a score to its band; out-of-range input is clamped first."""
    if not math.isfinite(score):
        raise ValidationError(f"score must be finite, got {score!r}")
    value = max(0, min(100, int(round(score))))
    for lower, status in STATUS_BANDS:
        if value >= lower:
            return status
    return HealthStatus.NEEDS_ATTENTION
