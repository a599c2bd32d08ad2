"""Scoring engine for daily wellness metrics.

Modules:
    stats     -- Rolling-window statistics and the shared sub-score shape
    clock     -- Midnight-safe clock-time arithmetic
    baseline  -- 30-day personal baselines and 7-day trends
    sleep     -- Nightly sleep score
    hrv       -- Baseline-relative HRV score with absolute fallback
    activity  -- Daily activity score
    rhythm    -- 7-day circadian rhythm score and stability tracking
    status    -- Five-band status classification
    battery   -- Morning charge, drain rate and live battery level
    summary   -- Daily report aggregation
    pipeline  -- One-call daily scoring
"""

from wellcharge.analytics.stats import (
    TrendDirection,
    mean,
    standard_deviation,
    percent_deviation,
    linear_trend,
    rolling_window,
)
from wellcharge.analytics.baseline import HRVBaseline, build_baseline, hrv_trend
from wellcharge.analytics.sleep import score_sleep, SleepScoreResult, SleepPolicy
from wellcharge.analytics.hrv import (
    score_hrv,
    score_hrv_from_history,
    HRVScoreResult,
    HRVPolicy,
)
from wellcharge.analytics.activity import score_activity, ActivityScoreResult, ActivityPolicy
from wellcharge.analytics.rhythm import (
    score_rhythm,
    track_rhythm_stability,
    RhythmWindow,
    RhythmScoreResult,
    RhythmStability,
    RhythmStatus,
    RhythmPolicy,
)
from wellcharge.analytics.status import classify_status, HealthStatus
from wellcharge.analytics.battery import (
    calculate_morning_charge,
    calculate_environment_factor,
    calculate_drain_rate,
    estimate_stress_level,
    classify_pressure_trend,
    charge_battery,
    update_battery,
    level_at,
    projected_end_time,
    HumanBattery,
    BatteryState,
    BatteryPolicy,
)
from wellcharge.analytics.summary import build_daily_report, DailyReport, Scores
from wellcharge.analytics.pipeline import score_day

__all__ = [
    # stats
    "TrendDirection",
    "mean",
    "standard_deviation",
    "percent_deviation",
    "linear_trend",
    "rolling_window",
    # baseline
    "HRVBaseline",
    "build_baseline",
    "hrv_trend",
    # sleep
    "score_sleep",
    "SleepScoreResult",
    "SleepPolicy",
    # hrv
    "score_hrv",
    "score_hrv_from_history",
    "HRVScoreResult",
    "HRVPolicy",
    # activity
    "score_activity",
    "ActivityScoreResult",
    "ActivityPolicy",
    # rhythm
    "score_rhythm",
    "track_rhythm_stability",
    "RhythmWindow",
    "RhythmScoreResult",
    "RhythmStability",
    "RhythmStatus",
    "RhythmPolicy",
    # status
    "classify_status",
    "HealthStatus",
    # battery
    "calculate_morning_charge",
    "calculate_environment_factor",
    "calculate_drain_rate",
    "estimate_stress_level",
    "classify_pressure_trend",
    "charge_battery",
    "update_battery",
    "level_at",
    "projected_end_time",
    "HumanBattery",
    "BatteryState",
    "BatteryPolicy",
    # summary
    "build_daily_report",
    "DailyReport",
    "Scores",
    # pipeline
    "score_day",
]
