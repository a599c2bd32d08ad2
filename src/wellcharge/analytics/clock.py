"""Clock-time arithmetic for bedtimes and wake times.

Bedtimes straddle midnight, so raw minutes-from-midnight put 23:59 and
00:01 almost a full day apart.  Every clock time is instead measured from
an anchor before noon: times earlier than the pivot are pushed forward by
a day, which puts 23:59 at 1439 and 00:01 at 1441.
"""

from __future__ import annotations

from datetime import time
from typing import Iterable

MINUTES_PER_DAY = 1440
NOON = time(12, 0)


def clock_minutes(t: time) -> float:
    """Minutes since midnight, including seconds as a fraction."""
    return t.hour * 60 + t.minute + t.second / 60.0


def minutes_since_anchor(t: time, pivot: time = NOON) -> float:
    """Minutes from midnight, with times before *pivot* shifted by +1440."""
    minutes = clock_minutes(t)
    if minutes < clock_minutes(pivot):
        minutes += MINUTES_PER_DAY
    return minutes


def anchored_minutes(times: Iterable[time], pivot: time = NOON) -> list[float]:
    return [minutes_since_anchor(t, pivot) for t in times]


def in_clock_window(t: time, start: time, end: time, inclusive_end: bool = False) -> bool:
    """True if *t* falls in the window from *start* to *end*.

    Windows that wrap midnight (``start > end``, e.g. 22:00-06:00) are
    handled.  An *end* of ``time(0, 0)`` with ``inclusive_end`` means
    "up to and including midnight".
    """
    m = clock_minutes(t)
    lo = clock_minutes(start)
    hi = clock_minutes(end)

    if lo <= hi:
        return lo <= m < hi or (inclusive_end and m == hi)
    # wraps midnight
    return m >= lo or m < hi or (inclusive_end and m == hi)
