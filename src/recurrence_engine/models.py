"""
Pure data models: rule variants, end conditions and engine settings.
"""

import enum
from dataclasses import dataclass
from dataclasses import field
from datetime import date
from datetime import datetime
from pathlib import Path

DEFAULT_CONFIG = Path.home() / ".config/recurrence-engine.conf"

DEFAULT_SEARCH_HORIZON_DAYS = 365
DEFAULT_PREVIEW_COUNT = 5

MONDAY = 1
SUNDAY = 7


class RecurrenceError(Exception):
    """Base exception for recurrence engine errors."""

    pass


class MalformedPatternError(RecurrenceError):
    """Raised by the strict parser when a pattern string cannot be read."""

    def __init__(self, reason: str, raw_input: str | None):
        super().__init__(f"{reason}: {raw_input!r}")
        self.reason = reason
        self.raw_input = raw_input


class InvalidRuleError(RecurrenceError, ValueError):
    """Raised when a rule or end condition is built with out-of-range fields."""

    pass


def _check_range(name: str, value: int, low: int, high: int | None = None) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRuleError(f"{name} must be an integer, got {value!r}")
    if value < low or (high is not None and value > high):
        bound = f"{low}..{high}" if high is not None else f">= {low}"
        raise InvalidRuleError(f"{name} must be {bound}, got {value}")


# ---------------------------------------------------------------------------
# Rule variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Daily:
    """Every ``interval`` days, counted from the anchor date."""

    interval: int = 1

    def __post_init__(self):
        _check_range("interval", self.interval, 1)


@dataclass(frozen=True)
class Weekdays:
    """Monday through Friday, every week."""


@dataclass(frozen=True)
class Weekly:
    """Selected weekdays (1=Monday..7=Sunday)."""

    interval: int = 1
    days: frozenset[int] = field(default_factory=lambda: frozenset({MONDAY}))

    def __post_init__(self):
        _check_range("interval", self.interval, 1)
        # Accept any iterable of day numbers; store as a frozenset.
        object.__setattr__(self, "days", frozenset(self.days))
        if not self.days:
            raise InvalidRuleError("weekly rule needs at least one weekday")
        for day in self.days:
            _check_range("weekday", day, MONDAY, SUNDAY)


@dataclass(frozen=True)
class MonthlyByDate:
    """A fixed day of every month; months without that day are skipped."""

    day_of_month: int = 1

    def __post_init__(self):
        _check_range("day_of_month", self.day_of_month, 1, 31)


@dataclass(frozen=True)
class MonthlyByWeekday:
    """The Nth weekday of every month; ordinal 5 means the last one."""

    ordinal: int = 1
    weekday: int = MONDAY

    def __post_init__(self):
        _check_range("ordinal", self.ordinal, 1, 5)
        _check_range("weekday", self.weekday, MONDAY, SUNDAY)


@dataclass(frozen=True)
class Yearly:
    month: int = 1
    day_of_month: int = 1

    def __post_init__(self):
        _check_range("month", self.month, 1, 12)
        _check_range("day_of_month", self.day_of_month, 1, 31)


RecurrenceRule = Daily | Weekdays | Weekly | MonthlyByDate | MonthlyByWeekday | Yearly

DEFAULT_RULE = Daily()


# ---------------------------------------------------------------------------
# End conditions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Never:
    """The rule repeats indefinitely."""


@dataclass(frozen=True)
class AfterCount:
    """The rule stops after ``count`` occurrences in total."""

    count: int

    def __post_init__(self):
        _check_range("count", self.count, 1)


@dataclass(frozen=True)
class OnDate:
    """The rule stops after ``date`` (inclusive)."""

    date: date

    def __post_init__(self):
        if not isinstance(self.date, date):
            raise InvalidRuleError(f"end date must be a date, got {self.date!r}")
        if isinstance(self.date, datetime):
            object.__setattr__(self, "date", self.date.date())


EndCondition = Never | AfterCount | OnDate


# ---------------------------------------------------------------------------
# Engine settings
# ---------------------------------------------------------------------------


class LeapDayPolicy(enum.Enum):
    """How a yearly February 29 rule behaves in non-leap years."""

    SKIP = "skip"  # fire only in leap years
    FEB_28 = "feb-28"
    MAR_1 = "mar-1"


@dataclass
class EngineConfig:
    """Settings shared by enumeration calls."""

    search_horizon_days: int = DEFAULT_SEARCH_HORIZON_DAYS
    preview_count: int = DEFAULT_PREVIEW_COUNT
    interval_aware_weekly: bool = False
    leap_day_policy: LeapDayPolicy = LeapDayPolicy.SKIP

    def __post_init__(self):
        _check_range("search_horizon_days", self.search_horizon_days, 1)
        _check_range("preview_count", self.preview_count, 0)
