"""Daily scoring pipeline: wire one day's samples through every scorer.

The four scorers are independent of each other; their outputs feed the
status bands and, for sleep and HRV, the battery.  History is supplied by
the caller and only read.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Sequence

from wellcharge.analytics.activity import score_activity
from wellcharge.analytics.battery import charge_battery
from wellcharge.analytics.hrv import score_hrv_from_history
from wellcharge.analytics.rhythm import RhythmWindow, score_rhythm, track_rhythm_stability
from wellcharge.analytics.sleep import score_sleep
from wellcharge.analytics.summary import DailyReport, build_daily_report
from wellcharge.models import (
    ActivitySample,
    HRVSample,
    SleepSample,
    UserMode,
    WeatherSample,
)

logger = logging.getLogger(__name__)


def score_day(
    sleep: SleepSample,
    hrv: HRVSample,
    activity: ActivitySample,
    sleep_history: Sequence[SleepSample] = (),
    hrv_history: Sequence[HRVSample] = (),
    rhythm_history: Sequence[tuple[date, int]] = (),
    weather: WeatherSample | None = None,
    user_mode: UserMode = UserMode.STANDARD,
    wake_time: datetime | None = None,
    previous_level: float | None = None,
) -> DailyReport:
    """Score one day end to end.

    Args:
        sleep: Last night's sleep (dated the scoring day).
        hrv: This morning's HRV reading.
        activity: The day's activity totals.
        sleep_history: Earlier nights, for the 7-day rhythm window.
        hrv_history: Earlier HRV readings, for the 30-day baseline.
        rhythm_history: Earlier ``(date, rhythm_score)`` pairs.
        weather: Current weather, if known.
        user_mode: Standard or athlete.
        wake_time: When the battery is charged; defaults to the sleep
            sample's date at its wake time.
        previous_level: Yesterday's final battery level, if known.

    Returns:
        DailyReport for ``sleep.date``.
    """
    day = sleep.date

    sleep_result = score_sleep(sleep)
    hrv_result = score_hrv_from_history(hrv, hrv_history, as_of=day)
    activity_result = score_activity(activity)

    window = RhythmWindow.from_history(list(sleep_history) + [sleep], day)
    rhythm_result = score_rhythm(window)

    history = [(d, s) for d, s in rhythm_history if d < day]
    stability = track_rhythm_stability(history + [(day, rhythm_result.score)])

    if wake_time is None:
        wake_time = datetime.combine(day, sleep.wake_time)

    battery = charge_battery(
        sleep_result.score,
        hrv_result.score,
        wake_time=wake_time,
        user_mode=user_mode,
        weather=weather,
        previous_level=previous_level,
    )

    logger.debug(
        "Scored %s: sleep=%d hrv=%d rhythm=%d activity=%d",
        day, sleep_result.score, hrv_result.score, rhythm_result.score, activity_result.score,
    )

    return build_daily_report(
        day,
        sleep=sleep_result,
        hrv=hrv_result,
        rhythm=rhythm_result,
        activity=activity_result,
        rhythm_stability=stability,
        battery=battery,
    )
