"""HRV score (0-100) relative to the user's personal baseline.

Weights:
    baseline comparison  50  |deviation| <= 20 % full, 0 at 50 %
    7-day trend          25  rising 25 / flat 12 / falling 0
    resting-HR           25  full at or below baseline, 0 at +15 bpm

Until two weeks of history exist there is no trustworthy baseline; the
score then comes from an absolute RMSSD table and the result is flagged
with ``used_absolute_fallback``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Sequence

from wellcharge.analytics.baseline import (
    MIN_BASELINE_DAYS,
    HRVBaseline,
    build_baseline,
    hrv_trend,
)
from wellcharge.analytics.stats import TrendDirection, band_score, clamp, percent_deviation
from wellcharge.errors import InsufficientHistoryError
from wellcharge.models import HRVSample

logger = logging.getLogger(__name__)

W_BASELINE = 50.0
W_TREND = 25.0
W_RESTING_HR = 25.0

DEVIATION_FULL_PCT = 20.0
DEVIATION_ZERO_PCT = 50.0
RESTING_HR_ZERO_EXCESS = 15.0  # bpm above baseline that scores 0

TREND_POINTS = {
    TrendDirection.RISING: 25.0,
    TrendDirection.FLAT: 12.0,
    TrendDirection.FALLING: 0.0,
}

# (lower bound ms, score), checked top-down
ABSOLUTE_HRV_TABLE = [
    (50.0, 95.0),
    (40.0, 85.0),
    (30.0, 75.0),
    (25.0, 60.0),
    (20.0, 45.0),
    (15.0, 30.0),
    (0.0, 20.0),
]
ABSOLUTE_TREND_ADJUST = 10.0


@dataclass(frozen=True)
class HRVPolicy:
    """Tunable thresholds for :func:`score_hrv`."""

    deviation_full_pct: float = DEVIATION_FULL_PCT
    deviation_zero_pct: float = DEVIATION_ZERO_PCT
    resting_hr_zero_excess: float = RESTING_HR_ZERO_EXCESS
    min_baseline_days: int = MIN_BASELINE_DAYS


DEFAULT_POLICY = HRVPolicy()


@dataclass
class HRVScoreResult:
    """HRV score, components and confidence."""

    score: int  # 0-100
    hrv_ms: float
    resting_hr: float
    trend: TrendDirection
    used_absolute_fallback: bool
    deviation_pct: float | None = None  # None on the fallback path
    breakdown: dict[str, float] = field(default_factory=dict)

    def __repr__(self) -> str:
        mode = "absolute" if self.used_absolute_fallback else f"dev={self.deviation_pct:+.1f}%"
        return (
            f"HRVScoreResult(score={self.score}, "
            f"hrv={self.hrv_ms:.1f}ms, {mode}, trend={self.trend.value})"
        )


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def _baseline_component(deviation_pct: float, policy: HRVPolicy) -> float:
    full = policy.deviation_full_pct
    zero = policy.deviation_zero_pct
    return band_score(deviation_pct, -full, full, -zero, zero, W_BASELINE)


def _resting_hr_component(current: float, baseline: float, policy: HRVPolicy) -> float:
    excess = current - baseline
    if excess <= 0:
        return W_RESTING_HR
    if excess >= policy.resting_hr_zero_excess:
        return 0.0
    return W_RESTING_HR * (1.0 - excess / policy.resting_hr_zero_excess)


def absolute_hrv_score(hrv_ms: float, trend: TrendDirection = TrendDirection.FLAT) -> float:
    """Score raw HRV against population tiers, nudged by the trend."""
    base = ABSOLUTE_HRV_TABLE[-1][1]
    for lower, points in ABSOLUTE_HRV_TABLE:
        if hrv_ms >= lower:
            base = points
            break

    if trend == TrendDirection.RISING:
        base += ABSOLUTE_TREND_ADJUST
    elif trend == TrendDirection.FALLING:
        base -= ABSOLUTE_TREND_ADJUST
    return clamp(base)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_hrv(
    sample: HRVSample,
    baseline: HRVBaseline | None,
    trend: TrendDirection | None = None,
    policy: HRVPolicy = DEFAULT_POLICY,
) -> HRVScoreResult:
    """Score today's HRV and resting HR.

    Args:
        sample: Today's overnight HRV and resting HR.
        baseline: 30-day rolling baseline, or None if none exists yet.
        trend: 7-day HRV trend; None is treated as flat.
        policy: Threshold overrides.

    Returns:
        HRVScoreResult.  ``used_absolute_fallback`` is True whenever the
        baseline is missing or built from fewer than
        ``policy.min_baseline_days`` days.
    """
    trend = trend or TrendDirection.FLAT

    if baseline is None or baseline.days < policy.min_baseline_days:
        logger.debug(
            "HRV baseline unavailable (%s days); using absolute table",
            baseline.days if baseline is not None else 0,
        )
        score = absolute_hrv_score(sample.hrv_ms, trend)
        return HRVScoreResult(
            score=int(round(score)),
            hrv_ms=sample.hrv_ms,
            resting_hr=sample.resting_hr,
            trend=trend,
            used_absolute_fallback=True,
            breakdown={"absolute": round(score, 1)},
        )

    deviation = percent_deviation(sample.hrv_ms, baseline.hrv_ms)
    baseline_pts = _baseline_component(deviation, policy)
    trend_pts = TREND_POINTS[trend]
    rhr_pts = _resting_hr_component(sample.resting_hr, baseline.resting_hr, policy)

    raw = baseline_pts + trend_pts + rhr_pts
    return HRVScoreResult(
        score=int(round(clamp(raw))),
        hrv_ms=sample.hrv_ms,
        resting_hr=sample.resting_hr,
        trend=trend,
        used_absolute_fallback=False,
        deviation_pct=round(deviation, 2),
        breakdown={
            "baseline": round(baseline_pts, 1),
            "trend": round(trend_pts, 1),
            "resting_hr": round(rhr_pts, 1),
        },
    )


def score_hrv_from_history(
    sample: HRVSample,
    history: Sequence[HRVSample],
    as_of: date | None = None,
    policy: HRVPolicy = DEFAULT_POLICY,
) -> HRVScoreResult:
    """Build baseline and trend from *history*, then score *sample*.

    *history* may or may not include *sample* itself; it is read, never
    modified.  Too little history selects the absolute fallback.
    """
    as_of = as_of or sample.date
    trend = hrv_trend(list(history) + [sample], as_of)
    try:
        baseline = build_baseline(history, as_of, min_days=policy.min_baseline_days)
    except InsufficientHistoryError as exc:
        logger.debug("No HRV baseline for %s: %s", as_of, exc)
        baseline = None
    return score_hrv(sample, baseline, trend, policy)
