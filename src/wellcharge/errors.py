"""Error types raised by the scoring engine."""

from __future__ import annotations


class WellchargeError(Exception):
    """Base class for all wellcharge errors."""


class ValidationError(WellchargeError, ValueError):
    """Malformed input: negative durations, impossible timestamps,
    out-of-range percentages or scores.

    Subclasses ``ValueError`` so callers that already guard argument
    errors keep working.
    """


class InsufficientHistoryError(WellchargeError):
    """Not enough history to build a personal baseline.

    Never escapes a scorer: it selects the documented fallback path and
    the result carries a flag saying so.
    """

    def __init__(self, days: int, required: int) -> None:
        self.days = days
        self.required = required
        super().__init__(f"{days} day(s) of history, {required} required")
