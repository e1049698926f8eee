"""
Persisted form of end conditions.

Callers store an end condition as a discriminant plus one optional count and
one optional date::

    {"end_type": "after", "end_after": 10, "end_date": None}
"""

import logging
from datetime import date
from datetime import datetime

from recurrence_engine.models import AfterCount
from recurrence_engine.models import EndCondition
from recurrence_engine.models import Never
from recurrence_engine.models import OnDate

_logger = logging.getLogger(__name__)

END_NEVER = "never"
END_AFTER = "after"
END_ON = "on"

# Matches the occurrence-count field of the recurrence editor.
DEFAULT_END_AFTER = 10
MAX_END_AFTER = 999


def end_condition_to_record(end: EndCondition) -> dict:
    """Return the storage record for an end condition."""
    if isinstance(end, AfterCount):
        return {"end_type": END_AFTER, "end_after": end.count, "end_date": None}
    if isinstance(end, OnDate):
        return {"end_type": END_ON, "end_after": None, "end_date": end.date.isoformat()}
    return {"end_type": END_NEVER, "end_after": None, "end_date": None}


def _coerce_count(value) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        _logger.debug("Invalid end_after %r; using %d", value, DEFAULT_END_AFTER)
        return DEFAULT_END_AFTER
    return max(1, min(count, MAX_END_AFTER))


def _coerce_date(value) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            # Accept full ISO timestamps too; only the date part matters.
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            pass
    _logger.debug("Invalid end_date %r", value)
    return None


def end_condition_from_record(
    end_type: str | None, end_after=None, end_date=None
) -> EndCondition:
    """Rebuild an end condition from its stored fields.

    Lenient like the pattern parser: an unknown type or an "on" record
    without a usable date becomes Never.
    """
    kind = (end_type or END_NEVER).strip().lower()
    if kind == END_AFTER:
        if end_after is None:
            return AfterCount(DEFAULT_END_AFTER)
        return AfterCount(_coerce_count(end_after))
    if kind == END_ON:
        parsed = _coerce_date(end_date)
        return OnDate(parsed) if parsed is not None else Never()
    if kind != END_NEVER:
        _logger.debug("Unknown end_type %r; treating as never", end_type)
    return Never()
