"""Daily activity score (0-100).

Four independently clamped components:
  steps          40  ratio of the 8,000-step goal, capped at 100 %
  active minutes 30  full at >= 30 min moderate-to-vigorous
  sedentary      20  full if no sitting bout reaches 60 min, 0 at 180 min
  exercise goal  10  binary
"""

from __future__ import annotations

from dataclasses import dataclass, field

from wellcharge.analytics.stats import clamp
from wellcharge.models import ActivitySample

W_STEPS = 40.0
W_ACTIVE = 30.0
W_SEDENTARY = 20.0
W_GOAL = 10.0

STEP_GOAL = 8000
ACTIVE_MINUTES_GOAL = 30.0
SEDENTARY_LIMIT_MIN = 60.0
SEDENTARY_ZERO_MIN = 180.0


@dataclass(frozen=True)
class ActivityPolicy:
    """Tunable goals for :func:`score_activity`."""

    step_goal: int = STEP_GOAL
    active_minutes_goal: float = ACTIVE_MINUTES_GOAL
    sedentary_limit_min: float = SEDENTARY_LIMIT_MIN
    sedentary_zero_min: float = SEDENTARY_ZERO_MIN


DEFAULT_POLICY = ActivityPolicy()


@dataclass
class ActivityScoreResult:
    """Activity score and components."""

    score: int  # 0-100
    steps: int
    active_minutes: float
    goal_reported: bool  # False if the device gave no exercise-goal flag
    breakdown: dict[str, float] = field(default_factory=dict)

    def __repr__(self) -> str:
        return (
            f"ActivityScoreResult(score={self.score}, "
            f"steps={self.steps}, active={self.active_minutes:.0f}min)"
        )


def _ratio_points(value: float, goal: float, weight: float) -> float:
    if goal <= 0:
        return weight
    return clamp(weight * value / goal, 0.0, weight)


def _sedentary_points(longest_min: float, policy: ActivityPolicy) -> float:
    limit = policy.sedentary_limit_min
    zero = policy.sedentary_zero_min
    if longest_min < limit:
        return W_SEDENTARY
    if longest_min >= zero or zero <= limit:
        return 0.0
    return clamp(W_SEDENTARY * (zero - longest_min) / (zero - limit), 0.0, W_SEDENTARY)


def score_activity(
    sample: ActivitySample,
    policy: ActivityPolicy = DEFAULT_POLICY,
) -> ActivityScoreResult:
    """Score one day of activity."""
    steps_pts = _ratio_points(sample.steps, policy.step_goal, W_STEPS)
    active_pts = _ratio_points(sample.active_minutes, policy.active_minutes_goal, W_ACTIVE)
    sedentary_pts = _sedentary_points(sample.longest_sedentary_min, policy)
    goal_pts = W_GOAL if sample.exercise_goal_met else 0.0

    raw = steps_pts + active_pts + sedentary_pts + goal_pts
    return ActivityScoreResult(
        score=int(round(clamp(raw))),
        steps=sample.steps,
        active_minutes=sample.active_minutes,
        goal_reported=sample.exercise_goal_met is not None,
        breakdown={
            "steps": round(steps_pts, 1),
            "active_minutes": round(active_pts, 1),
            "sedentary": round(sedentary_pts, 1),
            "exercise_goal": round(goal_pts, 1),
        },
    )
