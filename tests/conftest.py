"""
Shared pytest fixtures and date helpers.
"""

import logging
from datetime import date

import pytest

from recurrence_engine.models import EngineConfig

# 2026-03-02 is a Monday; March 2026 starts on a Sunday and has five Sundays.
MONDAY_ANCHOR = date(2026, 3, 2)
SUNDAY_ANCHOR = date(2026, 3, 1)


def d(month: int, day: int, year: int = 2026) -> date:
    """Shorthand for dates in the test calendar (2026 unless given)."""
    return date(year, month, day)


@pytest.fixture
def engine_config():
    return EngineConfig()


@pytest.fixture
def config_file(tmp_path):
    """Return a writer that stores an INI [recurrence] section and returns its path."""

    def _write(body: str):
        path = tmp_path / "recurrence-engine.conf"
        path.write_text("[recurrence]\n" + body)
        return path

    return _write


@pytest.fixture
def debug_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="recurrence_engine")
    return caplog
