"""
Human-readable summaries of rules, end conditions and occurrence dates.
"""

import logging
from datetime import date

from recurrence_engine.models import AfterCount
from recurrence_engine.models import Daily
from recurrence_engine.models import EndCondition
from recurrence_engine.models import MonthlyByDate
from recurrence_engine.models import MonthlyByWeekday
from recurrence_engine.models import Never
from recurrence_engine.models import OnDate
from recurrence_engine.models import RecurrenceRule
from recurrence_engine.models import Weekdays
from recurrence_engine.models import Weekly
from recurrence_engine.models import Yearly

_logger = logging.getLogger(__name__)

WEEKDAY_NAMES = {
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
    7: "Sunday",
}

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Monthly-by-weekday ordinals; 5 is the last occurrence in the month.
ORDINAL_LABELS = {1: "1st", 2: "2nd", 3: "3rd", 4: "4th", 5: "Last"}

_SUFFIXES = {1: "st", 2: "nd", 3: "rd"}


def ordinal_suffix(n: int) -> str:
    """English ordinal suffix: 1 -> "st", 12 -> "th", 22 -> "nd"."""
    if 11 <= n % 100 <= 13:
        return "th"
    return _SUFFIXES.get(n % 10, "th")


def _join_days(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return f"{', '.join(names[:-1])}, and {names[-1]}"


def _describe_weekly(rule: Weekly) -> str:
    names = [WEEKDAY_NAMES[d] for d in sorted(rule.days) if d in WEEKDAY_NAMES]
    if not names:
        _logger.warning("Weekly rule has no selected days: %r", rule)
        return "No days selected"
    prefix = "Every" if rule.interval == 1 else f"Every {rule.interval} weeks on"
    return f"{prefix} {_join_days(names)}"


def describe(rule: RecurrenceRule) -> str:
    """Render a rule as an English phrase, e.g. "Every 2 weeks on Monday and Friday"."""
    if isinstance(rule, Daily):
        return "Every day" if rule.interval == 1 else f"Every {rule.interval} days"
    if isinstance(rule, Weekdays):
        return "Every weekday (Mon-Fri)"
    if isinstance(rule, Weekly):
        return _describe_weekly(rule)
    if isinstance(rule, MonthlyByDate):
        day = rule.day_of_month
        return f"Every month on the {day}{ordinal_suffix(day)}"
    if isinstance(rule, MonthlyByWeekday):
        ordinal = ORDINAL_LABELS.get(rule.ordinal, "1st")
        weekday = WEEKDAY_NAMES.get(rule.weekday, "Monday")
        return f"Every month on the {ordinal} {weekday}"
    if isinstance(rule, Yearly):
        return f"Every year on {MONTH_NAMES[rule.month - 1]} {rule.day_of_month}"
    _logger.warning("Cannot describe unknown rule type: %r", rule)
    return "Custom recurrence"


def describe_end(end: EndCondition) -> str:
    if isinstance(end, AfterCount):
        noun = "occurrence" if end.count == 1 else "occurrences"
        return f"Ends after {end.count} {noun}"
    if isinstance(end, OnDate):
        d = end.date
        return f"Ends on {MONTH_NAMES[d.month - 1]} {d.day}, {d.year}"
    if not isinstance(end, Never):
        _logger.warning("Unknown end condition %r; treating as never", end)
    return "Never ends"


def format_occurrence(d: date) -> str:
    """Short label for an occurrence preview, e.g. "Wed, Mar 4"."""
    return f"{WEEKDAY_NAMES[d.isoweekday()][:3]}, {MONTH_NAMES[d.month - 1][:3]} {d.day}"
