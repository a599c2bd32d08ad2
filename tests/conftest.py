"""Shared fixtures and helpers for the wellcharge test suite."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from wellcharge.models import ActivitySample, HRVSample, SleepSample, WeatherSample

# Monday
MONDAY = date(2026, 3, 2)


# ---------------------------------------------------------------------------
# Sample builders
# ---------------------------------------------------------------------------


def make_sleep(
    day: date = MONDAY,
    bedtime: time = time(23, 0),
    wake_time: time = time(6, 30),
    hours: float = 7.5,
    in_bed: float | None = None,
    deep_ratio: float | None = 0.17,
    rem_ratio: float | None = 0.22,
    efficiency: float | None = 0.88,
) -> SleepSample:
    """Build a SleepSample with deep/REM given as ratios of total sleep."""
    total_min = hours * 60.0
    return SleepSample(
        date=day,
        bedtime=bedtime,
        wake_time=wake_time,
        total_duration_h=hours,
        time_in_bed_h=in_bed if in_bed is not None else hours,
        deep_min=total_min * deep_ratio if deep_ratio is not None else None,
        rem_min=total_min * rem_ratio if rem_ratio is not None else None,
        efficiency=efficiency,
    )


def make_week(
    bedtimes: list[time],
    wake_times: list[time] | None = None,
    start: date = MONDAY,
) -> list[SleepSample]:
    """Consecutive nights starting on *start*, one per bedtime."""
    wake_times = wake_times or [time(7, 0)] * len(bedtimes)
    return [
        make_sleep(day=start + timedelta(days=i), bedtime=bed, wake_time=wake)
        for i, (bed, wake) in enumerate(zip(bedtimes, wake_times))
    ]


def make_hrv_history(
    days: int,
    end: date = MONDAY,
    hrv_ms: float = 60.0,
    resting_hr: float = 58.0,
    step: float = 0.0,
) -> list[HRVSample]:
    """*days* consecutive readings ending the day before *end*.

    ``step`` adds a linear drift per day to the HRV value.
    """
    first = end - timedelta(days=days)
    return [
        HRVSample(
            date=first + timedelta(days=i),
            hrv_ms=hrv_ms + step * i,
            resting_hr=resting_hr,
        )
        for i in range(days)
    ]


def make_activity(
    steps: int = 8000,
    active_minutes: float = 30.0,
    longest_sedentary_min: float = 45.0,
    exercise_goal_met: bool | None = True,
    day: date = MONDAY,
) -> ActivitySample:
    return ActivitySample(
        date=day,
        steps=steps,
        active_minutes=active_minutes,
        longest_sedentary_min=longest_sedentary_min,
        exercise_goal_met=exercise_goal_met,
    )


def make_weather(
    temperature_c: float = 22.0,
    humidity_pct: float = 65.0,
    pressure_hpa: float = 1013.25,
    pressure_change_hpa: float = -1.0,
) -> WeatherSample:
    return WeatherSample(
        temperature_c=temperature_c,
        humidity_pct=humidity_pct,
        pressure_hpa=pressure_hpa,
        pressure_change_hpa=pressure_change_hpa,
        timestamp=datetime(2026, 3, 2, 7, 0),
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def wake() -> datetime:
    return datetime(2026, 3, 2, 7, 0)


@pytest.fixture
def ideal_sleep() -> SleepSample:
    return make_sleep()


@pytest.fixture
def neutral_weather() -> WeatherSample:
    return make_weather()
