"""Tests for wellcharge.analytics.battery -- the human battery model."""

from datetime import datetime, timedelta

import numpy as np
import pytest

from wellcharge.analytics.battery import (
    calculate_morning_charge,
    calculate_environment_factor,
    calculate_drain_rate,
    classify_pressure_trend,
    estimate_stress_level,
    charge_battery,
    level_at,
    state_at,
    update_battery,
    projected_end_time,
    BatteryPolicy,
    BatteryState,
    HumanBattery,
    PressureTrend,
    BASE_DRAIN,
)
from wellcharge.errors import ValidationError
from wellcharge.models import UserMode

from conftest import make_weather


def _battery(level=50.0, charge=80.0, drain=-10.0, at=None):
    return HumanBattery(
        current_level=level,
        morning_charge=charge,
        drain_rate=drain,
        last_updated=at or datetime(2026, 3, 2, 12, 0),
    )


class TestMorningCharge:
    def test_standard_mode(self):
        charge = calculate_morning_charge(80, 80, UserMode.STANDARD)
        assert charge >= 70.0
        assert charge == 80.0

    def test_equal_weights(self):
        assert calculate_morning_charge(100, 0) == 50.0
        assert calculate_morning_charge(0, 100) == 50.0

    def test_athlete_credits_more(self):
        standard = calculate_morning_charge(70, 70, UserMode.STANDARD)
        athlete = calculate_morning_charge(70, 70, UserMode.ATHLETE)
        assert athlete > standard
        assert athlete == pytest.approx(77.0)

    def test_clamped_to_100(self):
        assert calculate_morning_charge(100, 100, UserMode.ATHLETE) == 100.0

    def test_depleted_previous_day_penalty(self):
        assert calculate_morning_charge(80, 80, previous_level=10.0) == pytest.approx(72.0)
        assert calculate_morning_charge(80, 80, previous_level=20.0) == 80.0

    def test_invalid_score(self):
        with pytest.raises(ValidationError):
            calculate_morning_charge(120, 80)
        with pytest.raises(ValidationError):
            calculate_morning_charge(80, -1)

    def test_custom_policy(self):
        policy = BatteryPolicy(sleep_weight=0.6, hrv_weight=0.4)
        assert calculate_morning_charge(100, 50, policy=policy) == pytest.approx(80.0)


class TestEnvironmentFactor:
    def test_neutral_is_one(self, neutral_weather):
        assert calculate_environment_factor(neutral_weather) == 1.0

    def test_hot_and_humid(self):
        factor = calculate_environment_factor(make_weather(temperature_c=35.0, humidity_pct=80.0))
        assert factor == pytest.approx(1.0 + 0.20 + 0.03 * 5 + 0.005 * 10)

    def test_hot_but_dry_is_neutral(self):
        assert calculate_environment_factor(make_weather(temperature_c=35.0, humidity_pct=40.0)) == 1.0

    def test_pressure_drop(self):
        factor = calculate_environment_factor(make_weather(temperature_c=25.0, humidity_pct=60.0,
                                                           pressure_change_hpa=-5.0))
        assert factor > 1.0
        assert factor == pytest.approx(1.0 + 0.15 + 0.05 * 2)

    def test_small_drop_ignored(self):
        assert calculate_environment_factor(make_weather(pressure_change_hpa=-3.0)) == 1.0

    def test_rising_pressure_neutral(self):
        assert calculate_environment_factor(make_weather(pressure_change_hpa=6.0)) == 1.0

    def test_capped(self):
        weather = make_weather(temperature_c=50.0, humidity_pct=100.0, pressure_change_hpa=-30.0)
        assert calculate_environment_factor(weather) == 2.0

    def test_never_below_one(self):
        rng = np.random.default_rng(3)
        for _ in range(200):
            weather = make_weather(
                temperature_c=float(rng.uniform(-20, 50)),
                humidity_pct=float(rng.uniform(0, 100)),
                pressure_change_hpa=float(rng.uniform(-15, 15)),
            )
            assert 1.0 <= calculate_environment_factor(weather) <= 2.0

    @pytest.mark.parametrize("field, values", [
        ("temperature_c", np.arange(25.0, 50.0, 1.0)),
        ("humidity_pct", np.arange(50.0, 100.0, 2.0)),
    ])
    def test_monotonic_in_heat_and_humidity(self, field, values):
        base = {"temperature_c": 33.0, "humidity_pct": 80.0}
        factors = []
        for v in values:
            kwargs = dict(base, **{field: float(v)})
            factors.append(calculate_environment_factor(make_weather(**kwargs)))
        assert all(a <= b for a, b in zip(factors, factors[1:]))

    def test_monotonic_in_pressure_drop(self):
        factors = [
            calculate_environment_factor(make_weather(pressure_change_hpa=-float(d)))
            for d in np.arange(0.0, 20.0, 0.5)
        ]
        assert all(a <= b for a, b in zip(factors, factors[1:]))


class TestPressureTrend:
    def test_trends(self):
        assert classify_pressure_trend(3.0) == PressureTrend.RISING
        assert classify_pressure_trend(-3.0) == PressureTrend.FALLING
        assert classify_pressure_trend(1.0) == PressureTrend.STABLE
        assert classify_pressure_trend(-2.0) == PressureTrend.STABLE


class TestStressLevel:
    def test_no_baseline(self):
        assert estimate_stress_level(45.0, None, 70.0) == 50.0

    def test_relaxed(self):
        assert estimate_stress_level(50.0, 45.0, 55.0) == 0.0

    def test_combined(self):
        # HRV 20 % below baseline, HR 50 % above 60
        assert estimate_stress_level(36.0, 45.0, 90.0) == pytest.approx(35.0)

    def test_capped(self):
        assert estimate_stress_level(1.0, 100.0, 200.0) == 100.0


class TestDrainRate:
    def test_resting(self):
        assert calculate_drain_rate() == BASE_DRAIN

    def test_environment_scales_drain(self):
        assert calculate_drain_rate(environment_factor=1.4) == pytest.approx(-3.5)

    def test_activity(self):
        assert calculate_drain_rate(active_energy_kcal=300.0) == pytest.approx(-5.5)

    def test_athlete_activity_discount(self):
        rate = calculate_drain_rate(active_energy_kcal=300.0, user_mode=UserMode.ATHLETE)
        assert rate == pytest.approx(-4.9)

    def test_stress(self):
        assert calculate_drain_rate(stress_level=50.0) == pytest.approx(-5.0)

    def test_always_negative(self):
        assert calculate_drain_rate(600.0, 80.0, 1.8) < 0

    def test_invalid_inputs(self):
        with pytest.raises(ValidationError):
            calculate_drain_rate(active_energy_kcal=-1.0)
        with pytest.raises(ValidationError):
            calculate_drain_rate(stress_level=150.0)
        with pytest.raises(ValidationError):
            calculate_drain_rate(environment_factor=-0.5)


class TestBatteryState:
    @pytest.mark.parametrize("level, expected", [
        (100.0, BatteryState.HIGH),
        (80.0, BatteryState.HIGH),
        (79.9, BatteryState.MEDIUM),
        (40.0, BatteryState.MEDIUM),
        (39.9, BatteryState.LOW),
        (20.0, BatteryState.LOW),
        (19.9, BatteryState.CRITICAL),
        (0.0, BatteryState.CRITICAL),
    ])
    def test_from_level(self, level, expected):
        assert BatteryState.from_level(level) == expected

    def test_state_is_derived(self):
        assert _battery(level=85.0).state == BatteryState.HIGH
        assert _battery(level=25.0).state == BatteryState.LOW

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            _battery(level=120.0)
        with pytest.raises(ValidationError):
            _battery(charge=-5.0)


class TestBatteryLifecycle:
    def test_charge_at_wake(self, wake):
        battery = charge_battery(80, 80, wake)
        assert battery.current_level == battery.morning_charge == 80.0
        assert battery.drain_rate == BASE_DRAIN
        assert battery.last_updated == wake
        assert battery.state == BatteryState.HIGH

    def test_charge_with_weather(self, wake):
        weather = make_weather(temperature_c=35.0, humidity_pct=80.0)
        battery = charge_battery(80, 80, wake, weather=weather)
        assert battery.drain_rate < BASE_DRAIN
        # Weather changes the drain, never the starting level
        assert battery.current_level == 80.0

    def test_level_decays_linearly(self, wake):
        battery = charge_battery(80, 80, wake)
        assert level_at(battery, wake) == 80.0
        assert level_at(battery, wake + timedelta(hours=4)) == pytest.approx(70.0)

    def test_level_matches_morning_formula(self, wake):
        battery = charge_battery(60, 90, wake)
        t = wake + timedelta(hours=6, minutes=30)
        expected = max(0.0, battery.morning_charge + battery.drain_rate * 6.5)
        assert level_at(battery, t) == pytest.approx(expected)

    def test_level_floored_at_zero(self, wake):
        battery = charge_battery(40, 40, wake)
        assert level_at(battery, wake + timedelta(hours=30)) == 0.0
        assert state_at(battery, wake + timedelta(hours=30)) == BatteryState.CRITICAL

    def test_read_before_last_update_rejected(self, wake):
        battery = charge_battery(80, 80, wake)
        with pytest.raises(ValidationError):
            level_at(battery, wake - timedelta(minutes=1))

    def test_update_rebases(self, wake):
        battery = charge_battery(80, 80, wake)
        later = wake + timedelta(hours=2)
        updated = update_battery(battery, later, drain_rate=-5.0)
        assert updated.current_level == pytest.approx(75.0)
        assert updated.morning_charge == 80.0
        assert updated.drain_rate == -5.0
        assert updated.last_updated == later
        assert level_at(updated, later + timedelta(hours=3)) == pytest.approx(60.0)
        # Earlier snapshot is untouched
        assert battery.current_level == 80.0

    def test_update_keeps_drain(self, wake):
        battery = charge_battery(80, 80, wake)
        updated = update_battery(battery, wake + timedelta(hours=1))
        assert updated.drain_rate == battery.drain_rate

    def test_battery_repr(self):
        s = repr(_battery())
        assert "50.0%" in s
        assert "medium" in s


class TestProjectedEndTime:
    def test_five_hours(self):
        now = datetime(2026, 3, 2, 12, 0)
        battery = _battery(level=50.0, drain=-10.0, at=now)
        assert projected_end_time(battery, now) == now + timedelta(hours=5)

    def test_accounts_for_elapsed_drain(self):
        start = datetime(2026, 3, 2, 12, 0)
        battery = _battery(level=50.0, drain=-10.0, at=start)
        now = start + timedelta(hours=1)
        assert projected_end_time(battery, now) == now + timedelta(hours=4)

    def test_zero_drain_has_no_end(self):
        assert projected_end_time(_battery(drain=0.0), datetime(2026, 3, 2, 12, 0)) is None

    def test_charging_has_no_end(self):
        assert projected_end_time(_battery(drain=2.0), datetime(2026, 3, 2, 12, 0)) is None
