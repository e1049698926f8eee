"""
Helpers for editing rules interactively.
"""

from datetime import date

from recurrence_engine.models import Daily
from recurrence_engine.models import MonthlyByDate
from recurrence_engine.models import RecurrenceRule
from recurrence_engine.models import Weekdays
from recurrence_engine.models import Weekly
from recurrence_engine.models import Yearly

PRESETS = ("daily", "weekdays", "weekly", "monthly", "yearly")


def toggle_weekday(rule: Weekly, day: int) -> Weekly:
    """Select or deselect ``day``.

    Deselecting the only selected day keeps it selected, so a weekly rule
    never ends up without days.
    """
    if day in rule.days:
        days = rule.days - {day}
        if not days:
            days = frozenset({day})
    else:
        days = rule.days | {day}
    return Weekly(rule.interval, days)


def apply_preset(name: str, anchor: date) -> RecurrenceRule:
    """Build one of the quick-preset rules relative to ``anchor``."""
    key = name.strip().lower()
    if key == "daily":
        return Daily(1)
    if key == "weekdays":
        return Weekdays()
    if key == "weekly":
        return Weekly(1, {anchor.isoweekday()})
    if key == "monthly":
        return MonthlyByDate(anchor.day)
    if key == "yearly":
        return Yearly(anchor.month, anchor.day)
    raise ValueError(f"Unknown preset {name!r}; expected one of {', '.join(PRESETS)}")
