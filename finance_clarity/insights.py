"""Rule-based recommendations and display summaries.

Everything here is advisory. Functions read an
:class:`~finance_clarity.models.AggregationResult` and never modify it, and
nothing in this module feeds back into any total.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from .logging_setup import get_logger
from .models import (
    AggregationResult,
    CategorySummary,
    FinancialInsights,
    Recommendation,
    RecommendationKind,
    TransactionKind,
)
from .settings import Settings, get_settings
from .values import format_brl, minor_to_major

# Share of the dominant category suggested as realistic monthly savings.
_SAVINGS_SHARE = Decimal("0.15")
# Emergency reserve target, in months of total outflow.
_RESERVE_MONTHS = 3
# Rows per kind in the display summary.
_SUMMARY_ROWS_PER_KIND = 10

_logger = get_logger("finance_clarity.insights")


def _concentration(result: AggregationResult, settings: Settings) -> Recommendation | None:
    if not result.top_outflow_categories:
        return None
    top = result.top_outflow_categories[0]
    if top.percentage <= settings.concentration_threshold_pct:
        return None
    savings = int(
        (top.total_minor_units * _SAVINGS_SHARE).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    )
    return Recommendation(
        kind=RecommendationKind.OPTIMIZATION,
        title=f"High spending on {top.category}",
        description=(
            f"Spending on {top.category} is {top.percentage:.1f}% of total outflow. "
            "Consider reviewing these expenses."
        ),
        impact=f"Potential savings: {format_brl(savings)}/month",
    )


def _balance(result: AggregationResult) -> Recommendation:
    if result.balance_minor_units > 0:
        return Recommendation(
            kind=RecommendationKind.OPPORTUNITY,
            title="Investable surplus",
            description=(
                f"Positive balance of {format_brl(result.balance_minor_units)}. "
                "Consider investing this amount."
            ),
            impact=(
                "Reserve target: "
                f"{format_brl(result.total_outflow_minor_units * _RESERVE_MONTHS)} "
                f"({_RESERVE_MONTHS}x outflow)"
            ),
        )
    return Recommendation(
        kind=RecommendationKind.ALERT,
        title="Deficit",
        description=(
            f"Outflow exceeds inflow by {format_brl(abs(result.balance_minor_units))}."
        ),
        impact="Review expenses and look for additional income",
    )


def _trend(result: AggregationResult, settings: Settings) -> Recommendation | None:
    months = result.monthly_aggregates
    if len(months) < 2:
        return None
    previous, latest = months[-2], months[-1]
    if previous.outflow_minor_units == 0:
        # No baseline to compare against; a percentage would be infinite.
        _logger.debug("Skipping trend: no outflow in %s", previous.month)
        return None

    change = (
        (latest.outflow_minor_units - previous.outflow_minor_units)
        / previous.outflow_minor_units
        * 100
    )
    if change > settings.growth_threshold_pct:
        return Recommendation(
            kind=RecommendationKind.ALERT,
            title="Spending growth",
            description=f"Outflow grew {change:.1f}% in {latest.month} versus {previous.month}.",
            impact="Monitor the trend and identify what drove the increase",
        )
    if change < settings.reduction_threshold_pct:
        return Recommendation(
            kind=RecommendationKind.OPPORTUNITY,
            title="Spending reduction",
            description=(
                f"Well done! Outflow fell {abs(change):.1f}% in {latest.month} "
                f"versus {previous.month}."
            ),
            impact="Keep up this level of control",
        )
    return None


def derive_recommendations(
    result: AggregationResult, *, settings: Settings | None = None
) -> list[Recommendation]:
    """Return up to ``settings.max_recommendations`` recommendations.

    Order: concentration warning (largest outflow category above the
    threshold share), then surplus or deficit, then the month-over-month
    outflow trend over the two most recent months. The trend is skipped when
    the earlier month has no outflow.
    """

    cfg = settings or get_settings()
    candidates = [_concentration(result, cfg), _balance(result), _trend(result, cfg)]
    return [r for r in candidates if r is not None][: cfg.max_recommendations]


def summarize_insights(
    result: AggregationResult, recommendations: list[Recommendation] | None = None
) -> FinancialInsights:
    """Convert an aggregation into major-unit display figures.

    Lists up to ten outflow categories followed by up to ten inflow
    categories, each with its percentage rounded to one decimal place.
    """

    outflow = result.categories_for(TransactionKind.OUTFLOW)[:_SUMMARY_ROWS_PER_KIND]
    inflow = result.categories_for(TransactionKind.INFLOW)[:_SUMMARY_ROWS_PER_KIND]
    categories = tuple(
        CategorySummary(
            name=c.category,
            value=minor_to_major(c.total_minor_units),
            kind=c.kind,
            percentage=round(c.percentage, 1),
        )
        for c in (*outflow, *inflow)
    )
    return FinancialInsights(
        total_inflow=minor_to_major(result.total_inflow_minor_units),
        total_outflow=minor_to_major(result.total_outflow_minor_units),
        balance=minor_to_major(result.balance_minor_units),
        categories=categories,
        recommendations=tuple(recommendations or ()),
    )


__all__ = ["derive_recommendations", "summarize_insights"]
