"""Sign-aware hierarchical aggregation over canonical transactions.

:func:`aggregate_transactions` is a pure function of its input. It recomputes
every figure from the full transaction set on each call, so results never
depend on call order or on partially applied updates. All arithmetic is on
integer minor units; only percentages are floats.

Invariants of the result:

- ``total_inflow - total_outflow == balance`` exactly.
- For each kind, the depth-1 category totals sum to that kind's grand total
  (every transaction contributes its full amount to each ancestor prefix, so
  deeper levels must not be summed together with shallower ones).
- Inflow and outflow amounts in the same category are never netted; each
  (prefix, kind) pair is its own entry.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from .categories import join_path
from .dates import Clock
from .errors import StructuralInputError
from .logging_setup import get_logger
from .models import (
    AggregationResult,
    CategoryAggregate,
    MonthlyAggregate,
    Transaction,
    TransactionKind,
)

DEFAULT_TOP_N = 5

_logger = get_logger("finance_clarity.aggregate")


@dataclass(slots=True)
class _CategoryBucket:
    path: tuple[str, ...]
    total: int = 0
    count: int = 0


@dataclass(slots=True)
class _MonthBucket:
    inflow: int = 0
    outflow: int = 0
    count: int = 0


@dataclass(slots=True)
class _Accumulator:
    """Scratch state for a single aggregation call; never shared."""

    inflow: int = 0
    outflow: int = 0
    categories: dict[tuple[str, TransactionKind], _CategoryBucket] = field(default_factory=dict)
    months: dict[str, _MonthBucket] = field(default_factory=dict)

    def add(self, tx: Transaction) -> None:
        amount = tx.amount_minor_units
        is_inflow = tx.kind is TransactionKind.INFLOW
        if is_inflow:
            self.inflow += amount
        else:
            self.outflow += amount

        for depth in range(1, len(tx.category_path) + 1):
            prefix = tx.category_path[:depth]
            key = (join_path(prefix), tx.kind)
            bucket = self.categories.get(key)
            if bucket is None:
                bucket = self.categories[key] = _CategoryBucket(path=prefix)
            bucket.total += amount
            bucket.count += 1

        month = self.months.setdefault(tx.month, _MonthBucket())
        if is_inflow:
            month.inflow += amount
        else:
            month.outflow += amount
        month.count += 1


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def _category_entries(acc: _Accumulator) -> list[CategoryAggregate]:
    entries: list[CategoryAggregate] = []
    for (key, kind), bucket in acc.categories.items():
        if bucket.total <= 0:
            continue
        denominator = acc.inflow if kind is TransactionKind.INFLOW else acc.outflow
        entries.append(
            CategoryAggregate(
                category=key,
                category_path=bucket.path,
                kind=kind,
                total_minor_units=bucket.total,
                transaction_count=bucket.count,
                percentage=_percentage(bucket.total, denominator),
            )
        )
    # Stable sort: ties keep first-observed order.
    entries.sort(key=lambda e: e.total_minor_units, reverse=True)
    return entries


def _monthly_entries(acc: _Accumulator) -> list[MonthlyAggregate]:
    return [
        MonthlyAggregate(
            month=month,
            inflow_minor_units=b.inflow,
            outflow_minor_units=b.outflow,
            balance_minor_units=b.inflow - b.outflow,
            transaction_count=b.count,
        )
        for month, b in sorted(acc.months.items())
    ]


def _most_expensive_month(months: list[MonthlyAggregate], clock: Clock) -> str:
    if not months:
        return clock().isoformat()[:7]
    # ``max`` returns the first maximal element, i.e. the earliest month on ties.
    return max(months, key=lambda m: m.outflow_minor_units).month


def aggregate_transactions(
    transactions: Iterable[Transaction],
    *,
    clock: Clock | None = None,
    top_n: int = DEFAULT_TOP_N,
) -> AggregationResult:
    """Aggregate ``transactions`` into totals, category and monthly roll-ups.

    Parameters
    ----------
    transactions:
        Canonical transactions (typically the full snapshot of a
        :class:`~finance_clarity.builder.TransactionCollector`). The input is
        read only.
    clock:
        Supplies "today" for the most-expensive-month fallback when there are
        no transactions. Defaults to :meth:`datetime.date.today`.
    top_n:
        Number of outflow categories kept in ``top_outflow_categories``.
    """

    if isinstance(transactions, (str, bytes)) or not isinstance(transactions, Iterable):
        raise StructuralInputError(
            f"Expected an iterable of transactions, got {type(transactions).__name__}"
        )

    acc = _Accumulator()
    for tx in transactions:
        if not isinstance(tx, Transaction):
            raise StructuralInputError(f"Expected Transaction, got {type(tx).__name__}")
        acc.add(tx)

    categories = _category_entries(acc)
    months = _monthly_entries(acc)
    top_outflow = [c for c in categories if c.kind is TransactionKind.OUTFLOW][: max(top_n, 0)]

    _logger.debug(
        "Aggregated %d category entries over %d months", len(categories), len(months)
    )

    return AggregationResult(
        total_inflow_minor_units=acc.inflow,
        total_outflow_minor_units=acc.outflow,
        balance_minor_units=acc.inflow - acc.outflow,
        category_aggregates=tuple(categories),
        monthly_aggregates=tuple(months),
        top_outflow_categories=tuple(top_outflow),
        most_expensive_month=_most_expensive_month(months, clock or date.today),
    )


__all__ = ["DEFAULT_TOP_N", "aggregate_transactions"]
