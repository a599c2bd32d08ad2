"""Nightly sleep score (0-100) from five weighted components.

    duration      40  full for 7-9 h, linear to 0 at 4 h / 12 h
    deep ratio    25  full for 15-20 % of total sleep
    REM ratio     20  full for 20-25 % of total sleep
    efficiency    10  full at >= 0.85, 0 at <= 0.50, neutral 5 if unknown
    timing         5  bedtime between 22:00 and midnight

Missing deep/REM durations are estimated from population ratios (17 % and
22 %) and tagged :class:`~wellcharge.models.Estimated` on the result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time

from wellcharge.analytics.clock import in_clock_window
from wellcharge.analytics.stats import band_score, clamp
from wellcharge.models import Estimated, SensorValue, SleepSample


# ---------------------------------------------------------------------------
# Weights and thresholds
# ---------------------------------------------------------------------------

W_DURATION = 40.0
W_DEEP = 25.0
W_REM = 20.0
W_EFFICIENCY = 10.0
W_TIMING = 5.0

DURATION_IDEAL_H = (7.0, 9.0)
DURATION_ZERO_H = (4.0, 12.0)

DEEP_IDEAL = (0.15, 0.20)
DEEP_ZERO = (0.05, 0.30)
REM_IDEAL = (0.20, 0.25)
REM_ZERO = (0.10, 0.35)

DEEP_FALLBACK_RATIO = 0.17
REM_FALLBACK_RATIO = 0.22

EFFICIENCY_FULL = 0.85
EFFICIENCY_ZERO = 0.50

BEDTIME_WINDOW = (time(22, 0), time(0, 0))  # end is inclusive: midnight counts


@dataclass(frozen=True)
class SleepPolicy:
    """Tunable thresholds for :func:`score_sleep`."""

    duration_ideal_h: tuple[float, float] = DURATION_IDEAL_H
    duration_zero_h: tuple[float, float] = DURATION_ZERO_H
    deep_ideal: tuple[float, float] = DEEP_IDEAL
    deep_zero: tuple[float, float] = DEEP_ZERO
    rem_ideal: tuple[float, float] = REM_IDEAL
    rem_zero: tuple[float, float] = REM_ZERO
    deep_fallback_ratio: float = DEEP_FALLBACK_RATIO
    rem_fallback_ratio: float = REM_FALLBACK_RATIO
    efficiency_full: float = EFFICIENCY_FULL
    efficiency_zero: float = EFFICIENCY_ZERO
    bedtime_window: tuple[time, time] = BEDTIME_WINDOW


DEFAULT_POLICY = SleepPolicy()


@dataclass
class SleepScoreResult:
    """Sleep score and its components."""

    score: int  # 0-100
    breakdown: dict[str, float]
    deep: SensorValue  # minutes
    rem: SensorValue  # minutes
    efficiency: SensorValue
    estimated_fields: list[str] = field(default_factory=list)

    def __repr__(self) -> str:
        est = f", estimated={','.join(self.estimated_fields)}" if self.estimated_fields else ""
        return f"SleepScoreResult(score={self.score}{est})"


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def _duration_component(hours: float, policy: SleepPolicy) -> float:
    lo, hi = policy.duration_ideal_h
    zero_lo, zero_hi = policy.duration_zero_h
    return band_score(hours, lo, hi, zero_lo, zero_hi, W_DURATION)


def _ratio_component(
    minutes: float,
    total_min: float,
    ideal: tuple[float, float],
    zero: tuple[float, float],
    weight: float,
) -> float:
    if total_min <= 0:
        return 0.0
    ratio = minutes / total_min
    return band_score(ratio, ideal[0], ideal[1], zero[0], zero[1], weight)


def _efficiency_component(efficiency: SensorValue, policy: SleepPolicy) -> float:
    if efficiency.estimated:
        return W_EFFICIENCY / 2.0
    eff = efficiency.value
    if eff >= policy.efficiency_full:
        return W_EFFICIENCY
    if eff <= policy.efficiency_zero:
        return 0.0
    span = policy.efficiency_full - policy.efficiency_zero
    return W_EFFICIENCY * (eff - policy.efficiency_zero) / span


def _timing_component(bedtime: time, policy: SleepPolicy) -> float:
    start, end = policy.bedtime_window
    return W_TIMING if in_clock_window(bedtime, start, end, inclusive_end=True) else 0.0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_sleep(sample: SleepSample, policy: SleepPolicy = DEFAULT_POLICY) -> SleepScoreResult:
    """Score one night of sleep.

    Args:
        sample: The night's sleep record.
        policy: Threshold overrides; defaults to the module constants.

    Returns:
        SleepScoreResult with the integer score, per-component points and
        the (possibly estimated) deep/REM/efficiency inputs.
    """
    total_min = sample.total_duration_min
    deep = sample.deep_sleep(policy.deep_fallback_ratio)
    rem = sample.rem_sleep(policy.rem_fallback_ratio)
    # Unknown efficiency sits mid-scale: neither penalised nor rewarded
    efficiency = sample.efficiency_value() or Estimated(
        (policy.efficiency_full + policy.efficiency_zero) / 2.0
    )

    duration_pts = _duration_component(sample.total_duration_h, policy)
    timing_pts = _timing_component(sample.bedtime, policy)

    if total_min > 0:
        deep_pts = _ratio_component(deep.value, total_min, policy.deep_ideal, policy.deep_zero, W_DEEP)
        rem_pts = _ratio_component(rem.value, total_min, policy.rem_ideal, policy.rem_zero, W_REM)
        eff_pts = _efficiency_component(efficiency, policy)
    else:
        # Nothing slept: only the bedtime can still earn points
        deep_pts = rem_pts = eff_pts = 0.0

    raw = duration_pts + deep_pts + rem_pts + eff_pts + timing_pts
    score = int(round(clamp(raw)))

    estimated = [
        name for name, value in (("deep", deep), ("rem", rem), ("efficiency", efficiency))
        if value.estimated
    ]

    return SleepScoreResult(
        score=score,
        breakdown={
            "duration": round(duration_pts, 1),
            "deep": round(deep_pts, 1),
            "rem": round(rem_pts, 1),
            "efficiency": round(eff_pts, 1),
            "timing": round(timing_pts, 1),
        },
        deep=deep,
        rem=rem,
        efficiency=efficiency,
        estimated_fields=estimated,
    )
