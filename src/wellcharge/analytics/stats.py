"""Rolling-window statistics shared by all scorers.

This is the shared foundation for the analytics modules.  It provides:
  - Mean and population standard deviation that never raise on short input
  - Percent deviation from a baseline (zero-safe)
  - Least-squares trend direction with a dead zone
  - Rolling-window selection over dated samples
  - The plateau/linear-falloff shape used by every weighted sub-score
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from enum import Enum
from typing import Sequence, TypeVar

import numpy as np
from scipy import stats as sp_stats

T = TypeVar("T")

# Trend slopes within +/- 1% of the series mean per day are "flat"
TREND_DEAD_ZONE = 0.01


class TrendDirection(str, Enum):
    """Sign of a least-squares slope."""

    RISING = "rising"
    FALLING = "falling"
    FLAT = "flat"


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def mean(samples: Sequence[float]) -> float | None:
    """Arithmetic mean, or None for empty input."""
    if len(samples) == 0:
        return None
    return float(np.mean(np.asarray(samples, dtype=np.float64)))


def standard_deviation(samples: Sequence[float]) -> float:
    """Population standard deviation.

    Returns 0.0 for fewer than 2 samples.
    """
    if len(samples) < 2:
        return 0.0
    arr = np.asarray(samples, dtype=np.float64)
    return float(np.std(arr, ddof=0))


def percent_deviation(current: float, baseline: float) -> float:
    """``(current - baseline) / baseline * 100``; 0.0 when baseline is 0."""
    if baseline == 0:
        return 0.0
    return (current - baseline) / baseline * 100.0


# ---------------------------------------------------------------------------
# Trend
# ---------------------------------------------------------------------------


def _day_offset(value: date | datetime | float, origin: date | datetime | float) -> float:
    if isinstance(value, (int, float)):
        return float(value) - float(origin)
    delta = value - origin
    return delta.total_seconds() / 86400.0


def linear_trend(
    samples: Sequence[tuple[date | datetime | float, float]],
    dead_zone: float = TREND_DEAD_ZONE,
) -> TrendDirection:
    """Direction of the least-squares slope through ``(x, value)`` pairs.

    Dates are converted to days since the first sample; numeric x values are
    taken as days already.  The slope is divided by the series mean, so
    ``dead_zone`` is a fraction of the mean per day.  Fewer than two points,
    or points that all share one x, are ``FLAT``.
    """
    if len(samples) < 2:
        return TrendDirection.FLAT

    ordered = sorted(samples, key=lambda s: _day_offset(s[0], samples[0][0]))
    origin = ordered[0][0]
    x = np.asarray([_day_offset(s[0], origin) for s in ordered], dtype=np.float64)
    y = np.asarray([s[1] for s in ordered], dtype=np.float64)

    if np.ptp(x) == 0:
        return TrendDirection.FLAT

    slope = float(sp_stats.linregress(x, y).slope)
    scale = abs(float(np.mean(y)))
    relative = slope / scale if scale > 0 else slope

    if relative > dead_zone:
        return TrendDirection.RISING
    if relative < -dead_zone:
        return TrendDirection.FALLING
    return TrendDirection.FLAT


# ---------------------------------------------------------------------------
# Windowing
# ---------------------------------------------------------------------------


def rolling_window(samples: Sequence[T], as_of: date, days: int) -> list[T]:
    """Samples whose ``.date`` falls in ``(as_of - days, as_of]``.

    Returned in chronological order.  Samples dated after *as_of* are
    ignored so that a caller's history can run ahead of the scoring day.
    """
    if days <= 0:
        return []
    start = as_of - timedelta(days=days - 1)
    window = [s for s in samples if start <= s.date <= as_of]  # type: ignore[attr-defined]
    return sorted(window, key=lambda s: s.date)  # type: ignore[attr-defined]


# ---------------------------------------------------------------------------
# Sub-score shape
# ---------------------------------------------------------------------------


def band_score(
    value: float,
    low: float,
    high: float,
    outer_low: float,
    outer_high: float,
    weight: float,
) -> float:
    """Full *weight* inside ``[low, high]``, linear falloff to 0 at the outer bounds.

    Values at or beyond ``outer_low`` / ``outer_high`` score 0.
    """
    if low <= value <= high:
        return weight
    if value < low:
        if value <= outer_low or low == outer_low:
            return 0.0
        return weight * (value - outer_low) / (low - outer_low)
    if value >= outer_high or high == outer_high:
        return 0.0
    return weight * (outer_high - value) / (outer_high - high)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp *value* into ``[low, high]``."""
    return max(low, min(high, value))
