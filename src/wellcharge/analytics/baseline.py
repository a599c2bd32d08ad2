"""Personal rolling baselines built from caller-owned history.

The history itself belongs to the persistence layer; these functions read
it, never mutate it, and keep nothing between calls.  A baseline needs at
least two weeks of data before relative scoring is trusted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Sequence

from wellcharge.analytics.stats import TrendDirection, linear_trend, mean, rolling_window
from wellcharge.errors import InsufficientHistoryError, ValidationError
from wellcharge.models import HRVSample

BASELINE_WINDOW_DAYS = 30
MIN_BASELINE_DAYS = 14
TREND_WINDOW_DAYS = 7


@dataclass(frozen=True)
class HRVBaseline:
    """Rolling means of HRV and resting HR."""

    hrv_ms: float
    resting_hr: float
    days: int  # distinct days the means were taken over

    def __post_init__(self) -> None:
        if self.hrv_ms <= 0 or self.resting_hr <= 0:
            raise ValidationError("baseline means must be > 0")
        if self.days < 0:
            raise ValidationError("baseline days must be >= 0")


def _one_per_day(samples: Sequence[HRVSample]) -> list[HRVSample]:
    """Keep the last sample seen for each date."""
    by_day: dict[date, HRVSample] = {}
    for s in samples:
        by_day[s.date] = s
    return [by_day[d] for d in sorted(by_day)]


def build_baseline(
    history: Sequence[HRVSample],
    as_of: date,
    window_days: int = BASELINE_WINDOW_DAYS,
    min_days: int = MIN_BASELINE_DAYS,
) -> HRVBaseline:
    """Average the last *window_days* of history ending on *as_of*.

    Raises:
        InsufficientHistoryError: fewer than *min_days* distinct days fall
            in the window.
    """
    window = _one_per_day(rolling_window(history, as_of, window_days))
    if len(window) < min_days:
        raise InsufficientHistoryError(len(window), min_days)

    return HRVBaseline(
        hrv_ms=mean([s.hrv_ms for s in window]),
        resting_hr=mean([s.resting_hr for s in window]),
        days=len(window),
    )


def hrv_trend(
    history: Sequence[HRVSample],
    as_of: date,
    days: int = TREND_WINDOW_DAYS,
) -> TrendDirection:
    """Least-squares HRV trend over the last *days* days."""
    window = _one_per_day(rolling_window(history, as_of, days))
    return linear_trend([(s.date, s.hrv_ms) for s in window])
