"""Exception types raised by ``finance_clarity``.

Per-field problems (unparsable amount, date or category text) never raise;
they degrade to documented defaults. Only inputs that are not a collection of
records at all are surfaced to the caller.
"""

from __future__ import annotations


class FinanceClarityError(Exception):
    """Base class for errors raised by this package."""


class StructuralInputError(FinanceClarityError, ValueError):
    """The input is not a collection of classifier records.

    Raised for non-iterable or string inputs, items that are not mappings, and
    records lacking an integer ``id``.
    """


__all__ = ["FinanceClarityError", "StructuralInputError"]
