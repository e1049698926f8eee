"""
Recurrence rule engine: pattern codec, summaries and occurrence enumeration.
"""

from recurrence_engine.codec import format_pattern
from recurrence_engine.codec import normalize
from recurrence_engine.codec import parse
from recurrence_engine.codec import parse_strict
from recurrence_engine.enumerator import OccurrenceQuery
from recurrence_engine.enumerator import iter_occurrences
from recurrence_engine.enumerator import next_occurrence
from recurrence_engine.enumerator import next_occurrences
from recurrence_engine.enumerator import preview
from recurrence_engine.summary import describe
from recurrence_engine.summary import describe_end

__all__ = [
    "OccurrenceQuery",
    "describe",
    "describe_end",
    "format_pattern",
    "iter_occurrences",
    "next_occurrence",
    "next_occurrences",
    "normalize",
    "parse",
    "parse_strict",
    "preview",
]
