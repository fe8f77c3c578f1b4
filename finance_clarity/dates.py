"""Date normalization to canonical ``YYYY-MM-DD`` strings.

Supported shapes (after trimming):

- ISO ``YYYY-MM-DD``: returned unchanged.
- Day-first ``D/M/YY`` or ``D/M/YYYY`` (Brazilian convention). Two-digit
  years pivot at 50: ``50..99`` map to 19xx, ``00..49`` to 20xx.
- Month-first ``M/D/YYYY``, consulted only when the day-first rule did not
  match.

Anything else falls back to the clock's current date. That fallback silently
substitutes a plausible date, so it is logged and the clock is injectable to
keep tests deterministic.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import TypeAlias
from datetime import date

from .logging_setup import get_logger

_ISO_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DAY_FIRST_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})$")
_MONTH_FIRST_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")

_TWO_DIGIT_YEAR_PIVOT = 50

Clock: TypeAlias = Callable[[], date]

_logger = get_logger("finance_clarity.dates")


def _expand_year(year: str) -> str:
    if len(year) != 2:
        return year
    century = "19" if int(year) >= _TWO_DIGIT_YEAR_PIVOT else "20"
    return century + year


class DateNormalizer:
    """Normalize raw date text, falling back to ``clock()`` when unparseable."""

    __slots__ = ("_clock",)

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock: Clock = clock or date.today

    def today(self) -> str:
        return self._clock().isoformat()

    def normalize(self, raw: object) -> str:
        if not isinstance(raw, str) or not raw.strip():
            return self._fallback(raw)

        s = raw.strip()
        if _ISO_RE.match(s):
            return s

        m = _DAY_FIRST_RE.match(s)
        if m:
            day, month, year = m.groups()
            return f"{_expand_year(year)}-{month.zfill(2)}-{day.zfill(2)}"

        m = _MONTH_FIRST_RE.match(s)
        if m:
            month, day, year = m.groups()
            return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

        return self._fallback(raw)

    def _fallback(self, raw: object) -> str:
        fallback = self.today()
        _logger.debug("Unrecognized date %r; falling back to %s", raw, fallback)
        return fallback


def normalize_date(raw: object, *, clock: Clock | None = None) -> str:
    """Module-level shortcut for ``DateNormalizer(clock).normalize(raw)``."""

    return DateNormalizer(clock).normalize(raw)


__all__ = ["Clock", "DateNormalizer", "normalize_date"]
