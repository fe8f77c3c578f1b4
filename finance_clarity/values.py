"""Monetary value parsing into integer minor units (centavos).

Amounts arrive as free text from a best-effort upstream classifier, in either
the Brazilian convention (``1.234,56``) or the US one (``1,234.56``), with
optional currency symbols and two independent negativity markers (wrapping
parentheses and a leading minus). Parsing is lenient: malformed input
degrades to ``0`` or a best-effort partial value and never raises.

The separator policy lives in :func:`split_decimal` so it can be tested and
swapped without touching the rest of the pipeline. It is a heuristic
convention resolver, not a guaranteed-correct parser: ``"1.234"`` is read as
one thousand two hundred thirty-four, ``"1.23"`` as one point two three.
"""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

_DISALLOWED_RE = re.compile(r"[^\d,.\-]")
_MAX_FRACTION_DIGITS = 2
_CENTS = Decimal("0.01")


def split_decimal(cleaned: str) -> tuple[str, str]:
    """Split an unsigned, cleaned amount into ``(integer_digits, fraction_digits)``.

    ``cleaned`` holds only digits, ``","`` and ``"."``. Rules:

    - A comma is present: split on the last comma. A suffix of at most two
      characters makes the comma the decimal separator and any periods in the
      prefix thousands separators. A longer suffix means the commas were
      thousands separators; they are dropped and the period rule applies to
      what remains.
    - Only periods: split on the last period. A suffix of at most two
      characters makes it the decimal separator (prefix commas are dropped).
      A longer suffix means periods group thousands and there is no
      fraction (``"1.234.567"`` is ``1234567``).
    - Neither: the whole string is an integer number of units.

    The returned groups may be empty; callers treat an empty group as zero.
    """

    if "," in cleaned:
        prefix, _, suffix = cleaned.rpartition(",")
        if len(suffix) <= _MAX_FRACTION_DIGITS:
            return prefix.replace(".", "").replace(",", ""), suffix
        cleaned = cleaned.replace(",", "")

    if "." in cleaned:
        prefix, _, suffix = cleaned.rpartition(".")
        if len(suffix) <= _MAX_FRACTION_DIGITS:
            return prefix.replace(".", ""), suffix
        return cleaned.replace(".", ""), ""

    return cleaned, ""


def _digits_to_int(digits: str) -> int:
    try:
        return int(digits) if digits else 0
    except ValueError:
        return 0


def _number_to_minor_units(value: int | float | Decimal) -> int:
    try:
        d = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, ValueError):
        return 0
    if not d.is_finite():
        return 0
    # Round half away from zero.
    return int((d * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_minor_units(raw: object) -> int:
    """Parse ``raw`` into a signed count of minor currency units.

    Examples
    --------
    >>> parse_minor_units("1.234,56")
    123456
    >>> parse_minor_units("R$ 99,90")
    9990
    >>> parse_minor_units("(100,00)")
    -10000
    >>> parse_minor_units("1,234.56")
    123456
    >>> parse_minor_units(69.99)
    6999

    Empty strings, ``None`` and unsupported types yield ``0``.
    """

    if isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float, Decimal)):
        return _number_to_minor_units(raw)
    if not isinstance(raw, str) or not raw:
        return 0

    s = raw.strip()

    negative_parens = len(s) >= 2 and s.startswith("(") and s.endswith(")")
    if negative_parens:
        s = s[1:-1]

    s = _DISALLOWED_RE.sub("", s)

    negative_sign = s.startswith("-")
    # Stray minus signs elsewhere carry no meaning once the leading one is read.
    s = s.replace("-", "")

    integer_digits, fraction_digits = split_decimal(s)
    fraction_digits = fraction_digits.ljust(_MAX_FRACTION_DIGITS, "0")[:_MAX_FRACTION_DIGITS]

    minor = _digits_to_int(integer_digits) * 100 + _digits_to_int(fraction_digits)
    return -minor if (negative_parens or negative_sign) else minor


def minor_to_major(minor_units: int) -> Decimal:
    """Return ``minor_units`` as an exact two-place :class:`~decimal.Decimal`."""

    return (Decimal(minor_units) / 100).quantize(_CENTS)


def format_brl(minor_units: int) -> str:
    """Format minor units as Brazilian currency text.

    ``123456`` becomes ``"R$ 1.234,56"`` and ``-50075`` becomes
    ``"-R$ 500,75"``.
    """

    negative = minor_units < 0
    units, cents = divmod(abs(minor_units), 100)
    grouped = f"{units:,}".replace(",", ".")
    text = f"R$ {grouped},{cents:02d}"
    return f"-{text}" if negative else text


__all__ = ["format_brl", "minor_to_major", "parse_minor_units", "split_decimal"]
