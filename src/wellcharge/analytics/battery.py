"""The "human battery": a daily energy budget that drains through the day.

The battery is charged once at wake time from the sleep and HRV scores,
then drains at a rate set by activity, stress and the weather:

    level(t) = max(0, level(t0) + drain_rate * hours(t - t0))

where ``t0`` is ``last_updated``.  Right after charging ``level(t0)`` is the
morning charge.  Nothing here runs on a timer; the level is recomputed
whenever it is read, and every update returns a new battery.

Weather never touches the level directly.  It only multiplies the drain
rate through :func:`calculate_environment_factor`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum

from wellcharge.analytics.stats import clamp
from wellcharge.errors import ValidationError
from wellcharge.models import UserMode, WeatherSample

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Morning charge
# ---------------------------------------------------------------------------

SLEEP_WEIGHT = 0.5
HRV_WEIGHT = 0.5
MODE_MULTIPLIERS = {
    UserMode.STANDARD: 1.0,
    UserMode.ATHLETE: 1.1,
}
DEPLETED_LEVEL = 20.0  # previous day ending below this carries a penalty
DEPLETED_PENALTY = 0.9

# ---------------------------------------------------------------------------
# Drain
# ---------------------------------------------------------------------------

BASE_DRAIN = -2.5  # %/hour at rest
ACTIVITY_DRAIN_PER_KCAL = 0.01
ATHLETE_ACTIVITY_SCALE = 0.8
STRESS_DRAIN_PER_POINT = 0.05

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

HEAT_THRESHOLD_C = 30.0
HUMIDITY_THRESHOLD_PCT = 70.0
HEAT_HUMIDITY_STEP = 0.20
HEAT_SLOPE_PER_C = 0.03
HUMIDITY_SLOPE_PER_PCT = 0.005

PRESSURE_DROP_THRESHOLD_HPA = 3.0
PRESSURE_DROP_STEP = 0.15
PRESSURE_DROP_SLOPE_PER_HPA = 0.05

ENVIRONMENT_FACTOR_MAX = 2.0
PRESSURE_TREND_DEAD_ZONE_HPA = 2.0


@dataclass(frozen=True)
class BatteryPolicy:
    """Tunable constants for the battery model."""

    sleep_weight: float = SLEEP_WEIGHT
    hrv_weight: float = HRV_WEIGHT
    athlete_multiplier: float = MODE_MULTIPLIERS[UserMode.ATHLETE]
    depleted_level: float = DEPLETED_LEVEL
    depleted_penalty: float = DEPLETED_PENALTY
    base_drain: float = BASE_DRAIN
    heat_threshold_c: float = HEAT_THRESHOLD_C
    humidity_threshold_pct: float = HUMIDITY_THRESHOLD_PCT
    pressure_drop_threshold_hpa: float = PRESSURE_DROP_THRESHOLD_HPA
    environment_factor_max: float = ENVIRONMENT_FACTOR_MAX

    def mode_multiplier(self, mode: UserMode) -> float:
        if mode == UserMode.ATHLETE:
            return self.athlete_multiplier
        return MODE_MULTIPLIERS[UserMode.STANDARD]


DEFAULT_POLICY = BatteryPolicy()


class BatteryState(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    CRITICAL = "critical"

    @classmethod
    def from_level(cls, level: float) -> BatteryState:
        if level >= 80:
            return cls.HIGH
        if level >= 40:
            return cls.MEDIUM
        if level >= 20:
            return cls.LOW
        return cls.CRITICAL


class PressureTrend(str, Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


@dataclass(frozen=True)
class HumanBattery:
    """Battery snapshot.  ``state`` is derived from the level on every read."""

    current_level: float  # level at last_updated (0-100)
    morning_charge: float  # fixed for the day (0-100)
    drain_rate: float  # %/hour, negative while depleting
    last_updated: datetime

    def __post_init__(self) -> None:
        for name in ("current_level", "morning_charge"):
            value = getattr(self, name)
            if not 0.0 <= value <= 100.0:
                raise ValidationError(f"{name} must be in [0, 100], got {value}")

    @property
    def state(self) -> BatteryState:
        return BatteryState.from_level(self.current_level)

    def __repr__(self) -> str:
        return (
            f"HumanBattery(level={self.current_level:.1f}%, "
            f"charge={self.morning_charge:.1f}%, "
            f"drain={self.drain_rate:+.2f}%/h, {self.state.value})"
        )


# ---------------------------------------------------------------------------
# Inputs to the model
# ---------------------------------------------------------------------------


def _check_score(name: str, value: float) -> None:
    if not 0.0 <= value <= 100.0:
        raise ValidationError(f"{name} must be in [0, 100], got {value}")


def calculate_morning_charge(
    sleep_score: float,
    hrv_score: float,
    user_mode: UserMode = UserMode.STANDARD,
    previous_level: float | None = None,
    policy: BatteryPolicy = DEFAULT_POLICY,
) -> float:
    """Starting charge for the day.

    An equal blend of the sleep and HRV scores, scaled by the user-mode
    multiplier, and docked 10 % if yesterday's battery ran below 20.
    """
    _check_score("sleep_score", sleep_score)
    _check_score("hrv_score", hrv_score)

    base = policy.sleep_weight * sleep_score + policy.hrv_weight * hrv_score
    charge = base * policy.mode_multiplier(user_mode)
    if previous_level is not None and previous_level < policy.depleted_level:
        charge *= policy.depleted_penalty
    return round(clamp(charge), 2)


def classify_pressure_trend(pressure_change_hpa: float) -> PressureTrend:
    """Rising/falling if the pressure moved more than 2 hPa, else stable."""
    if pressure_change_hpa > PRESSURE_TREND_DEAD_ZONE_HPA:
        return PressureTrend.RISING
    if pressure_change_hpa < -PRESSURE_TREND_DEAD_ZONE_HPA:
        return PressureTrend.FALLING
    return PressureTrend.STABLE


def calculate_environment_factor(
    weather: WeatherSample,
    policy: BatteryPolicy = DEFAULT_POLICY,
) -> float:
    """Drain-rate multiplier for the current weather.

    1.0 in neutral conditions.  Heat combined with humidity adds a step
    plus a slope in each excess; a pressure drop past the threshold adds
    another.  Every term only grows with temperature, humidity and drop
    size, so the factor never decreases as conditions get worse.
    """
    factor = 1.0

    heat_excess = weather.temperature_c - policy.heat_threshold_c
    humidity_excess = weather.humidity_pct - policy.humidity_threshold_pct
    if heat_excess > 0 and humidity_excess > 0:
        factor += (
            HEAT_HUMIDITY_STEP
            + HEAT_SLOPE_PER_C * heat_excess
            + HUMIDITY_SLOPE_PER_PCT * humidity_excess
        )

    drop = -weather.pressure_change_hpa
    drop_excess = drop - policy.pressure_drop_threshold_hpa
    if drop_excess > 0:
        factor += PRESSURE_DROP_STEP + PRESSURE_DROP_SLOPE_PER_HPA * drop_excess

    return round(min(factor, policy.environment_factor_max), 4)


def estimate_stress_level(hrv_ms: float, baseline_hrv_ms: float | None, heart_rate: float) -> float:
    """Rough 0-100 stress estimate.

    Averages HRV suppression below baseline (%) with heart-rate elevation
    above 60 bpm (% of 60).  Without a baseline the estimate is 50.
    """
    if baseline_hrv_ms is None or baseline_hrv_ms <= 0:
        return 50.0
    hrv_stress = max(0.0, (baseline_hrv_ms - hrv_ms) / baseline_hrv_ms * 100.0)
    hr_stress = max(0.0, (heart_rate - 60.0) / 60.0 * 100.0)
    return round(min(100.0, (hrv_stress + hr_stress) / 2.0), 1)


def calculate_drain_rate(
    active_energy_kcal: float = 0.0,
    stress_level: float = 0.0,
    environment_factor: float = 1.0,
    user_mode: UserMode = UserMode.STANDARD,
    policy: BatteryPolicy = DEFAULT_POLICY,
) -> float:
    """Hourly drain (negative %/h).

    Resting drain plus activity and stress terms, all multiplied by the
    environment factor.
    """
    if active_energy_kcal < 0:
        raise ValidationError(f"active_energy_kcal must be >= 0, got {active_energy_kcal}")
    _check_score("stress_level", stress_level)
    if environment_factor < 0:
        raise ValidationError(f"environment_factor must be >= 0, got {environment_factor}")

    activity_scale = ATHLETE_ACTIVITY_SCALE if user_mode == UserMode.ATHLETE else 1.0
    activity = active_energy_kcal * activity_scale * ACTIVITY_DRAIN_PER_KCAL
    stress = stress_level * STRESS_DRAIN_PER_POINT

    return round((policy.base_drain - activity - stress) * environment_factor, 4)


# ---------------------------------------------------------------------------
# Battery lifecycle
# ---------------------------------------------------------------------------


def charge_battery(
    sleep_score: float,
    hrv_score: float,
    wake_time: datetime,
    user_mode: UserMode = UserMode.STANDARD,
    weather: WeatherSample | None = None,
    previous_level: float | None = None,
    policy: BatteryPolicy = DEFAULT_POLICY,
) -> HumanBattery:
    """Create the day's battery at wake time.

    The initial drain is the resting drain scaled by the weather, if any.
    """
    charge = calculate_morning_charge(sleep_score, hrv_score, user_mode, previous_level, policy)
    env = calculate_environment_factor(weather, policy) if weather is not None else 1.0
    drain = calculate_drain_rate(environment_factor=env, user_mode=user_mode, policy=policy)
    logger.debug("Charged battery to %.1f%% (env factor %.2f, drain %.2f%%/h)", charge, env, drain)
    return HumanBattery(
        current_level=charge,
        morning_charge=charge,
        drain_rate=drain,
        last_updated=wake_time,
    )


def _hours_since(battery: HumanBattery, now: datetime) -> float:
    hours = (now - battery.last_updated).total_seconds() / 3600.0
    if hours < 0:
        raise ValidationError(
            f"timestamp {now.isoformat()} precedes last update {battery.last_updated.isoformat()}"
        )
    return hours


def level_at(battery: HumanBattery, now: datetime) -> float:
    """Battery level at *now*, floored at 0."""
    hours = _hours_since(battery, now)
    return clamp(battery.current_level + battery.drain_rate * hours)


def state_at(battery: HumanBattery, now: datetime) -> BatteryState:
    return BatteryState.from_level(level_at(battery, now))


def update_battery(
    battery: HumanBattery,
    now: datetime,
    drain_rate: float | None = None,
) -> HumanBattery:
    """Settle the level at *now* and start a new drain segment.

    The morning charge is carried over unchanged.
    """
    level = level_at(battery, now)
    return replace(
        battery,
        current_level=round(level, 4),
        drain_rate=battery.drain_rate if drain_rate is None else drain_rate,
        last_updated=now,
    )


def projected_end_time(battery: HumanBattery, now: datetime) -> datetime | None:
    """When the battery reaches 0 at the current drain, or None if not draining."""
    if battery.drain_rate >= 0:
        return None
    hours_left = level_at(battery, now) / abs(battery.drain_rate)
    return now + timedelta(hours=hours_left)
