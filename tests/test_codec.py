"""
Unit tests for the pattern codec in recurrence_engine.codec.

Covers the lenient parser's fallback policy, the strict parser's error
reporting, canonical formatting and round-trip stability.
"""

import pytest

from recurrence_engine.codec import format_pattern
from recurrence_engine.codec import normalize
from recurrence_engine.codec import parse
from recurrence_engine.codec import parse_strict
from recurrence_engine.models import Daily
from recurrence_engine.models import MalformedPatternError
from recurrence_engine.models import MonthlyByDate
from recurrence_engine.models import MonthlyByWeekday
from recurrence_engine.models import Weekdays
from recurrence_engine.models import Weekly
from recurrence_engine.models import Yearly

CANONICAL_RULES = [
    Daily(1),
    Daily(3),
    Weekdays(),
    Weekly(1, {1}),
    Weekly(2, {1, 3, 5}),
    Weekly(4, {6, 7}),
    MonthlyByDate(1),
    MonthlyByDate(31),
    MonthlyByWeekday(2, 2),
    MonthlyByWeekday(5, 7),
    Yearly(3, 15),
    Yearly(2, 29),
]


# ---------------------------------------------------------------------------
# TestParse
# ---------------------------------------------------------------------------


class TestParse:
    def test_daily_without_interval(self):
        assert parse("DAILY") == Daily(1)

    def test_daily_with_interval(self):
        assert parse("DAILY:3") == Daily(3)

    def test_keyword_is_case_insensitive(self):
        """Lower- and mixed-case keywords parse like upper case."""
        assert parse("weekly:1:2") == Weekly(1, {2})
        assert parse("Monthly:15") == MonthlyByDate(15)

    def test_weekdays(self):
        assert parse("WEEKDAYS") == Weekdays()

    def test_weekly_days_are_a_set(self):
        """Duplicates are ignored and order does not matter."""
        assert parse("WEEKLY:1:5,1,3,3") == Weekly(1, {1, 3, 5})

    def test_weekly_missing_days_defaults_to_monday(self):
        assert parse("WEEKLY:2") == Weekly(2, {1})
        assert parse("WEEKLY:2:") == Weekly(2, {1})

    def test_weekly_drops_invalid_days(self):
        """Non-numeric and out-of-range day entries are dropped."""
        assert parse("WEEKLY:1:x,3,9,0") == Weekly(1, {3})

    def test_monthly_two_segments_is_by_date(self):
        assert parse("MONTHLY:15") == MonthlyByDate(15)

    def test_monthly_three_segments_is_by_weekday(self):
        assert parse("MONTHLY:5:7") == MonthlyByWeekday(5, 7)

    def test_monthly_other_segment_counts_fall_back(self):
        """MONTHLY is disambiguated only by segment count; anything else is unrecognised."""
        assert parse("MONTHLY") == Daily(1)
        assert parse("MONTHLY:1:2:3") == Daily(1)

    def test_yearly(self):
        assert parse("YEARLY:3-15") == Yearly(3, 15)

    def test_yearly_missing_date_is_january_first(self):
        assert parse("YEARLY") == Yearly(1, 1)

    @pytest.mark.parametrize("text", ["", None, "   ", "HOURLY:2", "garbage"])
    def test_empty_or_unknown_is_daily(self, text):
        assert parse(text) == Daily(1)

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("DAILY:abc", Daily(1)),
            ("DAILY:0", Daily(1)),
            ("DAILY:-4", Daily(1)),
            ("WEEKLY:x:2", Weekly(1, {2})),
            ("MONTHLY:40", MonthlyByDate(1)),
            ("MONTHLY:9:3", MonthlyByWeekday(1, 3)),
            ("MONTHLY:2:8", MonthlyByWeekday(2, 1)),
            ("YEARLY:13-5", Yearly(1, 5)),
            ("YEARLY:4-x", Yearly(4, 1)),
        ],
    )
    def test_malformed_fields_fall_back_to_defaults(self, text, expected):
        """A bad field only resets that field; the rest of the pattern is kept."""
        assert parse(text) == expected

    def test_surrounding_whitespace_ignored(self):
        assert parse("  WEEKLY:1:2,4 ") == Weekly(1, {2, 4})

    def test_fallback_is_logged(self, debug_logs):
        parse("DAILY:abc")
        assert any("interval" in r.getMessage() for r in debug_logs.records)


# ---------------------------------------------------------------------------
# TestParseStrict
# ---------------------------------------------------------------------------


class TestParseStrict:
    def test_valid_patterns_match_lenient_parse(self):
        for rule in CANONICAL_RULES:
            text = format_pattern(rule)
            assert parse_strict(text) == parse(text)

    @pytest.mark.parametrize(
        "text",
        [
            "",
            None,
            "HOURLY",
            "DAILY:abc",
            "DAILY:0",
            "DAILY:1:2",
            "WEEKDAYS:1",
            "WEEKLY:1",
            "WEEKLY:1:8",
            "MONTHLY",
            "MONTHLY:32",
            "MONTHLY:6:1",
            "YEARLY",
            "YEARLY:3",
            "YEARLY:2-30-1",
        ],
    )
    def test_malformed_raises(self, text):
        with pytest.raises(MalformedPatternError):
            parse_strict(text)

    def test_error_carries_reason_and_input(self):
        with pytest.raises(MalformedPatternError) as excinfo:
            parse_strict("MONTHLY:40")
        assert excinfo.value.raw_input == "MONTHLY:40"
        assert "day of month" in excinfo.value.reason


# ---------------------------------------------------------------------------
# TestFormat
# ---------------------------------------------------------------------------


class TestFormat:
    def test_daily_interval_one_is_bare(self):
        assert format_pattern(Daily(1)) == "DAILY"

    def test_daily_interval_included(self):
        assert format_pattern(Daily(7)) == "DAILY:7"

    def test_weekdays_is_bare(self):
        assert format_pattern(Weekdays()) == "WEEKDAYS"

    def test_weekly_days_sorted(self):
        assert format_pattern(Weekly(1, [5, 1, 3])) == "WEEKLY:1:1,3,5"

    def test_monthly_forms(self):
        assert format_pattern(MonthlyByDate(15)) == "MONTHLY:15"
        assert format_pattern(MonthlyByWeekday(5, 7)) == "MONTHLY:5:7"

    def test_yearly(self):
        assert format_pattern(Yearly(2, 29)) == "YEARLY:2-29"

    def test_rejects_non_rule(self):
        with pytest.raises(TypeError):
            format_pattern("DAILY")


# ---------------------------------------------------------------------------
# TestRoundTrip
# ---------------------------------------------------------------------------


class TestRoundTrip:
    @pytest.mark.parametrize("rule", CANONICAL_RULES, ids=format_pattern)
    def test_parse_of_format_is_identity(self, rule):
        assert parse(format_pattern(rule)) == rule

    @pytest.mark.parametrize(
        "text, canonical",
        [
            ("weekly:1:5,3,1", "WEEKLY:1:1,3,5"),
            ("DAILY:1", "DAILY"),
            ("daily", "DAILY"),
            ("WEEKLY:2:7,7,6", "WEEKLY:2:6,7"),
            ("", "DAILY"),
            ("yearly:03-05", "YEARLY:3-5"),
        ],
    )
    def test_normalize_is_stable(self, text, canonical):
        """Non-canonical input normalises once and then stays fixed."""
        assert normalize(text) == canonical
        assert normalize(canonical) == canonical
