"""
Pattern codec: canonical pattern strings <-> rule values.

Grammar (keyword is case-insensitive, segments are colon-delimited)::

    DAILY[:interval]
    WEEKDAYS
    WEEKLY:interval:day[,day...]
    MONTHLY:dayOfMonth              (2 segments, by date)
    MONTHLY:ordinal:weekday         (3 segments, by weekday)
    YEARLY:month-day

``parse`` is lenient: it never raises, and malformed fields fall back to
their defaults.  ``parse_strict`` reads the same grammar but raises
MalformedPatternError instead of recovering.
"""

import logging

from recurrence_engine.models import DEFAULT_RULE
from recurrence_engine.models import MONDAY
from recurrence_engine.models import SUNDAY
from recurrence_engine.models import Daily
from recurrence_engine.models import MalformedPatternError
from recurrence_engine.models import MonthlyByDate
from recurrence_engine.models import MonthlyByWeekday
from recurrence_engine.models import RecurrenceRule
from recurrence_engine.models import Weekdays
from recurrence_engine.models import Weekly
from recurrence_engine.models import Yearly

_logger = logging.getLogger(__name__)


class _Reader:
    """Converts pattern segments to ints under one error policy.

    Lenient readers log and return the field default; strict readers raise.
    """

    def __init__(self, raw: str | None, strict: bool):
        self.raw = raw
        self.strict = strict

    def fail(self, reason: str):
        if self.strict:
            raise MalformedPatternError(reason, self.raw)
        _logger.debug("Pattern %r: %s; using default", self.raw, reason)

    def number(
        self, segment: str | None, name: str, default: int, low: int, high: int | None = None
    ) -> int:
        if segment is None or not segment.strip():
            self.fail(f"missing {name}")
            return default
        try:
            value = int(segment.strip())
        except ValueError:
            self.fail(f"{name} is not a number ({segment!r})")
            return default
        if value < low or (high is not None and value > high):
            self.fail(f"{name} out of range ({value})")
            return default
        return value

    def optional_number(self, segment: str | None, name: str, default: int, low: int) -> int:
        if segment is None:
            return default
        return self.number(segment, name, default, low)

    def weekdays(self, segment: str | None) -> frozenset[int]:
        days = set()
        for item in (segment or "").split(","):
            item = item.strip()
            if not item:
                continue
            try:
                day = int(item)
            except ValueError:
                self.fail(f"weekday is not a number ({item!r})")
                continue
            if MONDAY <= day <= SUNDAY:
                days.add(day)
            else:
                self.fail(f"weekday out of range ({day})")
        if not days:
            self.fail("no weekdays given")
            days = {MONDAY}
        return frozenset(days)


def _parse(text: str | None, strict: bool) -> RecurrenceRule:
    reader = _Reader(text, strict)
    if not text or not text.strip():
        reader.fail("empty pattern")
        return DEFAULT_RULE

    parts = text.strip().split(":")
    keyword = parts[0].strip().upper()
    segment = parts[1] if len(parts) > 1 else None

    if keyword == "DAILY":
        if len(parts) > 2:
            reader.fail("DAILY takes at most one segment")
        return Daily(reader.optional_number(segment, "interval", 1, 1))

    if keyword == "WEEKDAYS":
        if len(parts) > 1:
            reader.fail("WEEKDAYS takes no segments")
        return Weekdays()

    if keyword == "WEEKLY":
        if len(parts) > 3:
            reader.fail("WEEKLY takes at most two segments")
        interval = reader.optional_number(segment, "interval", 1, 1)
        days = reader.weekdays(parts[2] if len(parts) > 2 else None)
        return Weekly(interval, days)

    if keyword == "MONTHLY":
        # Segment count alone selects the form; stored strings rely on it.
        if len(parts) == 2:
            return MonthlyByDate(reader.number(parts[1], "day of month", 1, 1, 31))
        if len(parts) == 3:
            return MonthlyByWeekday(
                reader.number(parts[1], "ordinal", 1, 1, 5),
                reader.number(parts[2], "weekday", MONDAY, MONDAY, SUNDAY),
            )
        reader.fail(f"MONTHLY needs 2 or 3 segments, got {len(parts)}")
        return DEFAULT_RULE

    if keyword == "YEARLY":
        if len(parts) > 2:
            reader.fail("YEARLY takes one segment")
        if segment is None:
            reader.fail("missing month-day")
            return Yearly(1, 1)
        month_day = segment.split("-")
        if len(month_day) != 2:
            reader.fail(f"month-day must look like M-D ({segment!r})")
        month = reader.number(month_day[0], "month", 1, 1, 12)
        day = reader.number(month_day[1] if len(month_day) > 1 else None, "day", 1, 1, 31)
        return Yearly(month, day)

    reader.fail(f"unknown keyword {keyword!r}")
    return DEFAULT_RULE


def parse(text: str | None) -> RecurrenceRule:
    """Parse a pattern string, falling back to defaults for anything malformed.

    Empty or unrecognized input yields ``Daily(1)``.  Never raises.
    """
    return _parse(text, strict=False)


def parse_strict(text: str | None) -> RecurrenceRule:
    """Parse a pattern string, raising MalformedPatternError on any defect."""
    return _parse(text, strict=True)


def format_pattern(rule: RecurrenceRule) -> str:
    """Return the canonical pattern string for a rule."""
    if isinstance(rule, Daily):
        return "DAILY" if rule.interval == 1 else f"DAILY:{rule.interval}"
    if isinstance(rule, Weekdays):
        return "WEEKDAYS"
    if isinstance(rule, Weekly):
        days = ",".join(str(d) for d in sorted(rule.days))
        return f"WEEKLY:{rule.interval}:{days}"
    if isinstance(rule, MonthlyByDate):
        return f"MONTHLY:{rule.day_of_month}"
    if isinstance(rule, MonthlyByWeekday):
        return f"MONTHLY:{rule.ordinal}:{rule.weekday}"
    if isinstance(rule, Yearly):
        return f"YEARLY:{rule.month}-{rule.day_of_month}"
    raise TypeError(f"not a recurrence rule: {rule!r}")


def normalize(text: str | None) -> str:
    """Canonical form of a possibly hand-edited pattern string."""
    return format_pattern(parse(text))
