"""Pytest configuration for test isolation.

Settings are read from ``FINANCE_CLARITY_*`` environment variables and cached
process-wide, and the CLI configures package logging once per process. Both
would leak between tests, so an autouse fixture scrubs the environment, clears
the settings cache, and resets logging around every test.
"""

from __future__ import annotations

import os
from datetime import date

import pytest

from finance_clarity.logging_setup import reset_logging
from finance_clarity.settings import get_settings

FIXED_TODAY = date(2024, 3, 10)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch):
    for name in list(os.environ):
        if name.startswith("FINANCE_CLARITY_"):
            monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    reset_logging()


@pytest.fixture
def fixed_clock():
    """Clock returning :data:`FIXED_TODAY`."""
    return lambda: FIXED_TODAY
