"""Circadian rhythm score (0-100) over the last seven nights.

    bedtime stability  35  35 * max(0, 1 - sd / 30 min)
    wake stability     35  35 * max(0, 1 - sd / 30 min)
    weekend shift      20  20 * max(0, 1 - |weekday avg - weekend avg| / 60 min)
    ideal window       10  majority of bedtimes between 22:00 and 06:00

Clock times are anchored (see :mod:`wellcharge.analytics.clock`) so a
bedtime of 23:50 one night and 00:10 the next is a 20-minute spread, not a
23-hour one.  Bedtimes pivot at noon; wake times pivot at 18:00, so 11:50
and 12:10 wake-ups are also 20 minutes apart.

Day-to-day tracking of the score lives in :func:`track_rhythm_stability`.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from enum import Enum
from typing import Sequence

from wellcharge.analytics.clock import NOON, anchored_minutes, in_clock_window
from wellcharge.analytics.stats import clamp, mean, rolling_window, standard_deviation
from wellcharge.errors import ValidationError
from wellcharge.models import SleepSample

logger = logging.getLogger(__name__)

W_BEDTIME = 35.0
W_WAKE = 35.0
W_WEEKEND = 20.0
W_IDEAL = 10.0

WINDOW_DAYS = 7
STABILITY_SD_ZERO_MIN = 30.0
WEEKEND_SHIFT_ZERO_MIN = 60.0
IDEAL_BEDTIME_WINDOW = (time(22, 0), time(6, 0))
# Wake times wrap at 18:00, clear of usual wake hours
WAKE_PIVOT = time(18, 0)
WEEKEND_DAYS = frozenset({5, 6})  # Saturday, Sunday

STABLE_DAY_DELTA = 10  # max day-over-day score change that counts as stable
GOOD_RHYTHM_SCORE = 70
FAIR_RHYTHM_SCORE = 40


@dataclass(frozen=True)
class RhythmPolicy:
    """Tunable thresholds for :func:`score_rhythm`."""

    stability_sd_zero_min: float = STABILITY_SD_ZERO_MIN
    weekend_shift_zero_min: float = WEEKEND_SHIFT_ZERO_MIN
    ideal_window: tuple[time, time] = IDEAL_BEDTIME_WINDOW
    weekend_days: frozenset[int] = WEEKEND_DAYS
    bedtime_pivot: time = NOON
    wake_pivot: time = WAKE_PIVOT


DEFAULT_POLICY = RhythmPolicy()


# ---------------------------------------------------------------------------
# Window
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RhythmWindow:
    """Up to seven nights from consecutive calendar days, oldest first.

    Missing nights simply shrink the window; they are never filled in.
    """

    samples: tuple[SleepSample, ...]

    def __post_init__(self) -> None:
        dates = [s.date for s in self.samples]
        if any(b <= a for a, b in zip(dates, dates[1:])):
            raise ValidationError("rhythm window samples must be in strictly increasing date order")
        if dates and (dates[-1] - dates[0]).days >= WINDOW_DAYS:
            raise ValidationError(f"rhythm window spans more than {WINDOW_DAYS} days")

    @classmethod
    def from_history(cls, history: Sequence[SleepSample], as_of: date) -> RhythmWindow:
        """The nights dated within the seven days ending on *as_of*."""
        by_day: dict[date, SleepSample] = {}
        for s in rolling_window(history, as_of, WINDOW_DAYS):
            by_day[s.date] = s
        return cls(tuple(by_day[d] for d in sorted(by_day)))

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def bedtimes(self) -> list[time]:
        return [s.bedtime for s in self.samples]

    @property
    def wake_times(self) -> list[time]:
        return [s.wake_time for s in self.samples]

    def split(self, weekend_days: frozenset[int] = WEEKEND_DAYS) -> tuple[list[SleepSample], list[SleepSample]]:
        """``(weekday, weekend)`` samples by the night's date."""
        weekday = [s for s in self.samples if s.date.weekday() not in weekend_days]
        weekend = [s for s in self.samples if s.date.weekday() in weekend_days]
        return weekday, weekend


@dataclass
class RhythmScoreResult:
    """Rhythm score and components."""

    score: int  # 0-100
    sample_count: int
    bedtime_sd_min: float
    wake_sd_min: float
    low_confidence: bool  # fewer than 2 nights: stability is a neutral default
    weekend_shift_defined: bool  # both weekday and weekend nights present
    breakdown: dict[str, float] = field(default_factory=dict)

    def __repr__(self) -> str:
        flag = ", low-confidence" if self.low_confidence else ""
        return (
            f"RhythmScoreResult(score={self.score}, nights={self.sample_count}, "
            f"bed_sd={self.bedtime_sd_min:.0f}min{flag})"
        )


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def _stability_points(sd_min: float, weight: float, policy: RhythmPolicy) -> float:
    return weight * max(0.0, 1.0 - sd_min / policy.stability_sd_zero_min)


def _weekend_shift_points(window: RhythmWindow, policy: RhythmPolicy) -> tuple[float, bool]:
    weekday, weekend = window.split(policy.weekend_days)
    weekday_avg = mean(anchored_minutes((s.bedtime for s in weekday), policy.bedtime_pivot))
    weekend_avg = mean(anchored_minutes((s.bedtime for s in weekend), policy.bedtime_pivot))
    if weekday_avg is None or weekend_avg is None:
        return W_WEEKEND, False
    shift = abs(weekday_avg - weekend_avg)
    return W_WEEKEND * max(0.0, 1.0 - shift / policy.weekend_shift_zero_min), True


def _ideal_window_points(bedtimes: list[time], policy: RhythmPolicy) -> float:
    if not bedtimes:
        return 0.0
    start, end = policy.ideal_window
    inside = sum(1 for t in bedtimes if in_clock_window(t, start, end))
    # strict majority: 4 of 7 for a full week
    return W_IDEAL if inside * 2 > len(bedtimes) else 0.0


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_rhythm(window: RhythmWindow, policy: RhythmPolicy = DEFAULT_POLICY) -> RhythmScoreResult:
    """Score sleep-timing consistency over a :class:`RhythmWindow`."""
    n = len(window)
    bed_minutes = anchored_minutes(window.bedtimes, policy.bedtime_pivot)
    wake_minutes = anchored_minutes(window.wake_times, policy.wake_pivot)

    low_confidence = n < 2
    if low_confidence:
        logger.debug("Only %d night(s) in rhythm window; stability defaults to full credit", n)
        bed_sd = wake_sd = 0.0
    else:
        bed_sd = standard_deviation(bed_minutes)
        wake_sd = standard_deviation(wake_minutes)

    bed_pts = _stability_points(bed_sd, W_BEDTIME, policy)
    wake_pts = _stability_points(wake_sd, W_WAKE, policy)
    weekend_pts, shift_defined = _weekend_shift_points(window, policy)
    ideal_pts = _ideal_window_points(window.bedtimes, policy)

    raw = bed_pts + wake_pts + weekend_pts + ideal_pts
    return RhythmScoreResult(
        score=int(round(clamp(raw))),
        sample_count=n,
        bedtime_sd_min=round(bed_sd, 1),
        wake_sd_min=round(wake_sd, 1),
        low_confidence=low_confidence,
        weekend_shift_defined=shift_defined,
        breakdown={
            "bedtime_stability": round(bed_pts, 1),
            "wake_stability": round(wake_pts, 1),
            "weekend_shift": round(weekend_pts, 1),
            "ideal_window": round(ideal_pts, 1),
        },
    )


# ---------------------------------------------------------------------------
# Multi-day stability
# ---------------------------------------------------------------------------


class RhythmStatus(str, Enum):
    GOOD = "good"
    FAIR = "fair"
    IRREGULAR = "irregular"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RhythmStability:
    """Status of the latest day plus the current run of stable days."""

    status: RhythmStatus
    consecutive_stable_days: int


def track_rhythm_stability(
    daily_scores: Sequence[tuple[date, int]],
    stable_delta: int = STABLE_DAY_DELTA,
) -> RhythmStability:
    """Summarise a history of daily rhythm scores.

    A day is stable when the previous calendar day has a score and the
    change from it is within ``+/- stable_delta``.  A missing day breaks
    the run.  The latest day is ``GOOD`` when it scores at least 70 and
    did not fall by more than ``stable_delta``.
    """
    if not daily_scores:
        return RhythmStability(RhythmStatus.UNKNOWN, 0)

    for day, score in daily_scores:
        if isinstance(score, bool) or not isinstance(score, numbers.Real) or not 0 <= score <= 100:
            raise ValidationError(f"rhythm score for {day} must be in [0, 100], got {score!r}")

    by_day = dict(daily_scores)
    days = sorted(by_day)

    run = 0
    for prev_day, day in zip(days, days[1:]):
        consecutive = day - prev_day == timedelta(days=1)
        if consecutive and abs(by_day[day] - by_day[prev_day]) <= stable_delta:
            run += 1
        else:
            run = 0

    latest = by_day[days[-1]]
    if len(days) > 1 and days[-1] - days[-2] == timedelta(days=1):
        change = latest - by_day[days[-2]]
    else:
        change = 0

    if latest >= GOOD_RHYTHM_SCORE and change >= -stable_delta:
        status = RhythmStatus.GOOD
    elif latest >= FAIR_RHYTHM_SCORE:
        status = RhythmStatus.FAIR
    else:
        status = RhythmStatus.IRREGULAR

    return RhythmStability(status=status, consecutive_stable_days=run)
