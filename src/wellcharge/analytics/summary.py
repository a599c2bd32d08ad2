"""Daily report aggregator.

Pulls the scorer and battery results into a single DailyReport that is
JSON-serializable and ready for the advice and display layers.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from wellcharge.analytics.activity import ActivityScoreResult
from wellcharge.analytics.battery import HumanBattery
from wellcharge.analytics.hrv import HRVScoreResult
from wellcharge.analytics.rhythm import RhythmScoreResult, RhythmStability, RhythmStatus
from wellcharge.analytics.sleep import SleepScoreResult
from wellcharge.analytics.status import HealthStatus, classify_status
from wellcharge.errors import ValidationError


@dataclass(frozen=True)
class Scores:
    """The four daily scores, each an integer 0-100."""

    sleep: int
    hrv: int
    rhythm: int
    activity: int

    def __post_init__(self) -> None:
        for name, value in asdict(self).items():
            if not isinstance(value, int) or not 0 <= value <= 100:
                raise ValidationError(f"{name} score must be an int in [0, 100], got {value!r}")

    def statuses(self) -> dict[str, HealthStatus]:
        return {name: classify_status(value) for name, value in asdict(self).items()}


@dataclass
class DailyReport:
    """A single day's wellness scores and battery."""

    date: str  # ISO date string, e.g. "2026-02-13"
    scores: Scores
    statuses: dict[str, str] = field(default_factory=dict)

    rhythm_stability: RhythmStability = field(
        default_factory=lambda: RhythmStability(RhythmStatus.UNKNOWN, 0)
    )
    battery: HumanBattery | None = None

    # Confidence flags
    used_absolute_fallback: bool = False
    low_confidence_rhythm: bool = False
    estimated_sleep_fields: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        out = asdict(self)
        out["rhythm_stability"]["status"] = self.rhythm_stability.status.value
        if self.battery is not None:
            out["battery"]["last_updated"] = self.battery.last_updated.isoformat()
            out["battery"]["state"] = self.battery.state.value
        return out

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        level = f"{self.battery.current_level:.0f}%" if self.battery else "n/a"
        return (
            f"DailyReport({self.date}: "
            f"sleep={self.scores.sleep}, hrv={self.scores.hrv}, "
            f"rhythm={self.scores.rhythm}, activity={self.scores.activity}, "
            f"battery={level})"
        )


def build_daily_report(
    day: date | str,
    sleep: SleepScoreResult,
    hrv: HRVScoreResult,
    rhythm: RhythmScoreResult,
    activity: ActivityScoreResult,
    rhythm_stability: RhythmStability | None = None,
    battery: HumanBattery | None = None,
) -> DailyReport:
    """Build a daily report from individual scorer results.

    Args:
        day: The date for this report.
        sleep: Sleep score result.
        hrv: HRV score result.
        rhythm: Rhythm score result.
        activity: Activity score result.
        rhythm_stability: Multi-day rhythm summary, if tracked.
        battery: The day's battery, if charged.

    Returns:
        A populated DailyReport.
    """
    date_str = day if isinstance(day, str) else day.isoformat()

    scores = Scores(
        sleep=sleep.score,
        hrv=hrv.score,
        rhythm=rhythm.score,
        activity=activity.score,
    )

    report = DailyReport(
        date=date_str,
        scores=scores,
        statuses={name: status.value for name, status in scores.statuses().items()},
        battery=battery,
        used_absolute_fallback=hrv.used_absolute_fallback,
        low_confidence_rhythm=rhythm.low_confidence,
        estimated_sleep_fields=list(sleep.estimated_fields),
    )
    if rhythm_stability is not None:
        report.rhythm_stability = rhythm_stability

    return report
