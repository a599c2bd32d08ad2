"""Input value objects handed to the scorers by the sensor/weather collaborators.

Every sample is a frozen dataclass that validates itself on construction,
so a scorer never sees a negative duration or an efficiency of 1.4.
Optional sensor fields resolve to a :class:`Measured` or :class:`Estimated`
variant so that downstream confidence flags come from the type, not from
``None`` checks scattered through the scoring code.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Union

from wellcharge.errors import ValidationError


# ---------------------------------------------------------------------------
# Measured / estimated variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Measured:
    """A value reported by the sensor."""

    value: float

    @property
    def estimated(self) -> bool:
        return False


@dataclass(frozen=True)
class Estimated:
    """A fallback value substituted for a missing sensor field."""

    value: float

    @property
    def estimated(self) -> bool:
        return True


SensorValue = Union[Measured, Estimated]


def resolve(value: float | None, fallback: float) -> SensorValue:
    """Wrap *value* as Measured, or *fallback* as Estimated when it is None."""
    if value is None:
        return Estimated(fallback)
    return Measured(value)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_finite(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value!r}")


def _check_non_negative(name: str, value: float) -> None:
    _check_finite(name, value)
    if value < 0:
        raise ValidationError(f"{name} must be >= 0, got {value}")


def _check_positive(name: str, value: float) -> None:
    _check_finite(name, value)
    if value <= 0:
        raise ValidationError(f"{name} must be > 0, got {value}")


def _check_range(name: str, value: float, low: float, high: float) -> None:
    _check_finite(name, value)
    if not low <= value <= high:
        raise ValidationError(f"{name} must be in [{low}, {high}], got {value}")


# Asleep may exceed in-bed by rounding only (one minute)
IN_BED_TOLERANCE_H = 1.0 / 60.0


class UserMode(str, Enum):
    """User-selected coaching mode."""

    STANDARD = "standard"
    ATHLETE = "athlete"


# ---------------------------------------------------------------------------
# Samples
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SleepSample:
    """One night's sleep session.

    ``bedtime`` and ``wake_time`` are clock times; the wake time is taken to
    fall after the bedtime across the night boundary, so 23:30 → 07:00 is
    a normal night.
    """

    date: date
    bedtime: time
    wake_time: time
    total_duration_h: float
    time_in_bed_h: float
    deep_min: float | None = None
    rem_min: float | None = None
    efficiency: float | None = None  # asleep / in bed (0-1)

    def __post_init__(self) -> None:
        if not isinstance(self.bedtime, time) or not isinstance(self.wake_time, time):
            raise ValidationError("bedtime and wake_time must be datetime.time values")
        _check_range("total_duration_h", self.total_duration_h, 0.0, 24.0)
        _check_range("time_in_bed_h", self.time_in_bed_h, 0.0, 24.0)
        if self.total_duration_h > self.time_in_bed_h + IN_BED_TOLERANCE_H:
            raise ValidationError(
                f"total sleep ({self.total_duration_h} h) exceeds time in bed "
                f"({self.time_in_bed_h} h)"
            )
        if self.deep_min is not None:
            _check_non_negative("deep_min", self.deep_min)
        if self.rem_min is not None:
            _check_non_negative("rem_min", self.rem_min)
        if self.efficiency is not None:
            _check_range("efficiency", self.efficiency, 0.0, 1.0)

        staged = (self.deep_min or 0.0) + (self.rem_min or 0.0)
        if staged > self.total_duration_min + 1e-9:
            raise ValidationError(
                f"deep+rem ({staged:.0f} min) exceeds total sleep "
                f"({self.total_duration_min:.0f} min)"
            )

    @property
    def total_duration_min(self) -> float:
        return self.total_duration_h * 60.0

    def deep_sleep(self, fallback_ratio: float) -> SensorValue:
        """Deep sleep in minutes, estimated from *fallback_ratio* if absent."""
        return resolve(self.deep_min, self.total_duration_min * fallback_ratio)

    def rem_sleep(self, fallback_ratio: float) -> SensorValue:
        """REM sleep in minutes, estimated from *fallback_ratio* if absent."""
        return resolve(self.rem_min, self.total_duration_min * fallback_ratio)

    def efficiency_value(self) -> SensorValue | None:
        """Efficiency as a Measured value, or None when the sensor gave none."""
        if self.efficiency is None:
            return None
        return Measured(self.efficiency)


@dataclass(frozen=True)
class HRVSample:
    """Overnight HRV (ms) and resting heart rate (bpm) for one day."""

    date: date
    hrv_ms: float
    resting_hr: float

    def __post_init__(self) -> None:
        _check_positive("hrv_ms", self.hrv_ms)
        _check_positive("resting_hr", self.resting_hr)


@dataclass(frozen=True)
class ActivitySample:
    """Daily activity totals."""

    date: date
    steps: int
    active_minutes: float  # moderate-to-vigorous
    longest_sedentary_min: float
    exercise_goal_met: bool | None = None

    def __post_init__(self) -> None:
        if isinstance(self.steps, bool) or not isinstance(self.steps, numbers.Integral):
            raise ValidationError(f"steps must be a whole number, got {self.steps!r}")
        _check_non_negative("steps", self.steps)
        _check_non_negative("active_minutes", self.active_minutes)
        _check_range("longest_sedentary_min", self.longest_sedentary_min, 0.0, 1440.0)


@dataclass(frozen=True)
class WeatherSample:
    """Current conditions at the user's location."""

    temperature_c: float
    humidity_pct: float
    pressure_hpa: float
    pressure_change_hpa: float  # change over the prior period (usually 3 h)
    timestamp: datetime

    def __post_init__(self) -> None:
        _check_range("temperature_c", self.temperature_c, -90.0, 60.0)
        _check_range("humidity_pct", self.humidity_pct, 0.0, 100.0)
        _check_positive("pressure_hpa", self.pressure_hpa)
        _check_finite("pressure_change_hpa", self.pressure_change_hpa)
