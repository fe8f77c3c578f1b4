"""Public orchestration for the ``finance_clarity`` package.

Wires the pipeline end to end: classifier records are built into canonical
transactions, the full set is aggregated, and recommendations plus a display
summary are derived from the aggregation.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .aggregate import aggregate_transactions
from .builder import TransactionBuilder, TransactionCollector
from .dates import Clock, DateNormalizer
from .insights import derive_recommendations, summarize_insights
from .logging_setup import get_logger
from .models import AggregationResult, FinancialInsights, Recommendation, Transaction
from .settings import Settings, get_settings

_logger = get_logger("finance_clarity.api")


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    """Everything the presentation layer needs for one run."""

    transactions: tuple[Transaction, ...]
    aggregation: AggregationResult
    recommendations: tuple[Recommendation, ...]
    insights: FinancialInsights

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactions": [t.to_dict() for t in self.transactions],
            "aggregation": self.aggregation.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "insights": self.insights.to_dict(),
        }


def _make_builder(settings: Settings, clock: Clock | None) -> TransactionBuilder:
    return TransactionBuilder(settings=settings, date_normalizer=DateNormalizer(clock))


def _report(
    transactions: tuple[Transaction, ...], *, settings: Settings, clock: Clock | None
) -> AnalysisReport:
    aggregation = aggregate_transactions(
        transactions, clock=clock, top_n=settings.top_outflow_limit
    )
    recommendations = derive_recommendations(aggregation, settings=settings)
    return AnalysisReport(
        transactions=transactions,
        aggregation=aggregation,
        recommendations=tuple(recommendations),
        insights=summarize_insights(aggregation, recommendations),
    )


def analyze_records(
    records: Iterable[Mapping[str, Any]],
    *,
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> AnalysisReport:
    """Build, aggregate and advise over one collection of classifier records.

    Raises
    ------
    StructuralInputError
        When ``records`` is not a collection of record mappings.
    """

    cfg = settings or get_settings()
    transactions = tuple(_make_builder(cfg, clock).build_many(records))
    return _report(transactions, settings=cfg, clock=clock)


def analyze_batches(
    batches: Iterable[Iterable[Mapping[str, Any]]],
    *,
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> AnalysisReport:
    """Like :func:`analyze_records` for output split across classifier calls.

    Batches are accumulated in a :class:`TransactionCollector`; aggregation
    runs once over the full collected set.
    """

    cfg = settings or get_settings()
    collector = TransactionCollector(_make_builder(cfg, clock))
    for batch in batches:
        collector.add_batch(batch)
    _logger.info(
        "Collected %d transactions from %d batch(es)", len(collector), collector.batch_count
    )
    return _report(collector.transactions, settings=cfg, clock=clock)


__all__ = ["AnalysisReport", "analyze_batches", "analyze_records"]
