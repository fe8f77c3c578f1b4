"""Public interface for the ``finance_clarity`` package.

Re-exports the parsing, building, aggregation and advisory entry points plus
the public models as the stable import surface. No runtime logic lives here.
"""

from .aggregate import aggregate_transactions
from .api import AnalysisReport, analyze_batches, analyze_records
from .builder import TransactionBuilder, TransactionCollector, settlement_marker_predicate
from .categories import join_path, normalize_segment, to_path
from .dates import DateNormalizer, normalize_date
from .errors import FinanceClarityError, StructuralInputError
from .insights import derive_recommendations, summarize_insights
from .models import (
    AggregationResult,
    CategoryAggregate,
    CategorySummary,
    ClassifiedRecord,
    FinancialInsights,
    MonthlyAggregate,
    Recommendation,
    RecommendationKind,
    Transaction,
    TransactionKind,
)
from .settings import Settings, get_settings
from .values import format_brl, minor_to_major, parse_minor_units, split_decimal

__all__ = [
    # API
    "analyze_records",
    "analyze_batches",
    "AnalysisReport",
    # Parsing
    "parse_minor_units",
    "split_decimal",
    "format_brl",
    "minor_to_major",
    "DateNormalizer",
    "normalize_date",
    "normalize_segment",
    "to_path",
    "join_path",
    # Building / aggregation / advice
    "TransactionBuilder",
    "TransactionCollector",
    "settlement_marker_predicate",
    "aggregate_transactions",
    "derive_recommendations",
    "summarize_insights",
    # Models / types
    "AggregationResult",
    "CategoryAggregate",
    "CategorySummary",
    "ClassifiedRecord",
    "FinancialInsights",
    "MonthlyAggregate",
    "Recommendation",
    "RecommendationKind",
    "Transaction",
    "TransactionKind",
    # Configuration / errors
    "Settings",
    "get_settings",
    "FinanceClarityError",
    "StructuralInputError",
]
