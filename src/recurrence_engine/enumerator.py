"""
Occurrence enumeration: scan forward from an anchor date and yield the
calendar dates on which a rule fires.

The scan is day-by-day and bounded by ``search_horizon_days``; it stops early
once ``max_results`` dates have been produced or the end condition is reached.
Every call is independent: no state survives between calls.
"""

import calendar
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from datetime import date
from datetime import timedelta

from recurrence_engine.models import DEFAULT_PREVIEW_COUNT
from recurrence_engine.models import DEFAULT_SEARCH_HORIZON_DAYS
from recurrence_engine.models import AfterCount
from recurrence_engine.models import Daily
from recurrence_engine.models import EndCondition
from recurrence_engine.models import EngineConfig
from recurrence_engine.models import LeapDayPolicy
from recurrence_engine.models import MonthlyByDate
from recurrence_engine.models import MonthlyByWeekday
from recurrence_engine.models import Never
from recurrence_engine.models import OnDate
from recurrence_engine.models import RecurrenceRule
from recurrence_engine.models import Weekdays
from recurrence_engine.models import Weekly
from recurrence_engine.models import Yearly
from recurrence_engine.models import _check_range

_logger = logging.getLogger(__name__)

LAST_ORDINAL = 5


@dataclass(frozen=True)
class OccurrenceQuery:
    """One enumeration request.

    ``occurrences_before`` is the number of occurrences the rule has already
    produced since its true start; AfterCount counts against the running total.
    """

    rule: RecurrenceRule
    anchor: date
    end: EndCondition = field(default_factory=Never)
    max_results: int = DEFAULT_PREVIEW_COUNT
    search_horizon_days: int = DEFAULT_SEARCH_HORIZON_DAYS
    occurrences_before: int = 0
    interval_aware_weekly: bool = False
    leap_day_policy: LeapDayPolicy = LeapDayPolicy.SKIP

    def __post_init__(self):
        _check_range("max_results", self.max_results, 0)
        _check_range("search_horizon_days", self.search_horizon_days, 1)
        _check_range("occurrences_before", self.occurrences_before, 0)


def _matches_yearly(rule: Yearly, candidate: date, policy: LeapDayPolicy) -> bool:
    if candidate.month == rule.month and candidate.day == rule.day_of_month:
        return True
    if (rule.month, rule.day_of_month) != (2, 29) or calendar.isleap(candidate.year):
        return False
    if policy is LeapDayPolicy.FEB_28:
        return (candidate.month, candidate.day) == (2, 28)
    if policy is LeapDayPolicy.MAR_1:
        return (candidate.month, candidate.day) == (3, 1)
    return False


def matches(
    rule: RecurrenceRule,
    candidate: date,
    anchor: date,
    *,
    interval_aware_weekly: bool = False,
    leap_day_policy: LeapDayPolicy = LeapDayPolicy.SKIP,
) -> bool:
    """Return True when ``rule`` fires on ``candidate``.

    Interval cadences (daily, and weekly when ``interval_aware_weekly`` is
    set) are counted from ``anchor``, not from a calendar epoch.
    """
    days_since_anchor = (candidate - anchor).days
    weekday = candidate.isoweekday()

    if isinstance(rule, Daily):
        return rule.interval == 1 or days_since_anchor % rule.interval == 0
    if isinstance(rule, Weekdays):
        return weekday <= 5
    if isinstance(rule, Weekly):
        if weekday not in rule.days:
            return False
        if interval_aware_weekly:
            return (days_since_anchor // 7) % rule.interval == 0
        return True
    if isinstance(rule, MonthlyByDate):
        return candidate.day == rule.day_of_month
    if isinstance(rule, MonthlyByWeekday):
        if weekday != rule.weekday:
            return False
        if rule.ordinal == LAST_ORDINAL:
            # Last when the same weekday a week later falls in the next month.
            days_in_month = calendar.monthrange(candidate.year, candidate.month)[1]
            return candidate.day + 7 > days_in_month
        return (candidate.day + 6) // 7 == rule.ordinal
    if isinstance(rule, Yearly):
        return _matches_yearly(rule, candidate, leap_day_policy)
    return False


def iter_occurrences(query: OccurrenceQuery) -> Iterator[date]:
    """Yield occurrence dates strictly after ``query.anchor``, in ascending order."""
    limit = query.max_results
    end = query.end
    if isinstance(end, AfterCount):
        remaining = end.count - query.occurrences_before
        if remaining < limit:
            _logger.debug("AfterCount(%d) leaves %d occurrence(s)", end.count, remaining)
        limit = min(limit, remaining)
    if limit <= 0:
        return

    produced = 0
    candidate = query.anchor
    for _ in range(query.search_horizon_days):
        candidate += timedelta(days=1)
        if isinstance(end, OnDate) and candidate > end.date:
            _logger.debug("Reached end date %s after %d occurrence(s)", end.date, produced)
            return
        if matches(
            query.rule,
            candidate,
            query.anchor,
            interval_aware_weekly=query.interval_aware_weekly,
            leap_day_policy=query.leap_day_policy,
        ):
            yield candidate
            produced += 1
            if produced >= limit:
                return
    _logger.debug(
        "Search horizon of %d day(s) exhausted with %d occurrence(s)",
        query.search_horizon_days,
        produced,
    )


def next_occurrences(
    rule: RecurrenceRule,
    anchor: date,
    end: EndCondition | None = None,
    max_results: int = DEFAULT_PREVIEW_COUNT,
    search_horizon_days: int = DEFAULT_SEARCH_HORIZON_DAYS,
    **options,
) -> list[date]:
    """List up to ``max_results`` occurrences after ``anchor``.

    Extra keyword options (``occurrences_before``, ``interval_aware_weekly``,
    ``leap_day_policy``) are passed through to OccurrenceQuery.
    """
    query = OccurrenceQuery(
        rule=rule,
        anchor=anchor,
        end=end if end is not None else Never(),
        max_results=max_results,
        search_horizon_days=search_horizon_days,
        **options,
    )
    return list(iter_occurrences(query))


def preview(rule: RecurrenceRule, anchor: date, config: EngineConfig | None = None) -> list[date]:
    """The short "next occurrences" list shown while editing a rule."""
    config = config or EngineConfig()
    return next_occurrences(
        rule,
        anchor,
        max_results=config.preview_count,
        search_horizon_days=config.search_horizon_days,
        interval_aware_weekly=config.interval_aware_weekly,
        leap_day_policy=config.leap_day_policy,
    )


def next_occurrence(
    rule: RecurrenceRule,
    after: date,
    end: EndCondition | None = None,
    config: EngineConfig | None = None,
    occurrences_before: int = 0,
) -> date | None:
    """Next due date after ``after``, or None when the rule has run out.

    Used to roll a completed recurring task forward to its next instance.
    """
    config = config or EngineConfig()
    found = next_occurrences(
        rule,
        after,
        end=end,
        max_results=1,
        search_horizon_days=config.search_horizon_days,
        occurrences_before=occurrences_before,
        interval_aware_weekly=config.interval_aware_weekly,
        leap_day_policy=config.leap_day_policy,
    )
    return found[0] if found else None
