"""Data models for ``finance_clarity``.

Monetary fields are integer minor units (centavos) throughout. Using ``int``
keeps every total exact; conversion to major units for display lives in
:mod:`finance_clarity.values` and :class:`FinancialInsights`.

Records received from the upstream classifier are validated with Pydantic
(:class:`ClassifiedRecord`); everything the engine produces is a frozen,
slotted dataclass so downstream code can share instances freely.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TransactionKind(StrEnum):
    """Direction of a transaction, derived from the parsed amount's sign."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


class RecommendationKind(StrEnum):
    OPTIMIZATION = "optimization"
    OPPORTUNITY = "opportunity"
    ALERT = "alert"


# ---------------------------------------------------------------------------
# Upstream classifier record
# ---------------------------------------------------------------------------


class ClassifiedRecord(BaseModel):
    """One record as emitted by the upstream classifier.

    Accepts both English field names and the Portuguese keys emitted by the
    classifier prompt (``tipo``, ``valorOriginal``, ``categoria``,
    ``empresa``, ``descricao``, ``data``). Only ``id`` is strictly validated;
    every other field is carried raw and parsed leniently by the builder.
    ``kind_hint`` is advisory and never trusted.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: int
    kind_hint: str | None = Field(
        default=None, validation_alias=AliasChoices("kind_hint", "kind", "tipo")
    )
    raw_amount: Any = Field(
        default=None, validation_alias=AliasChoices("raw_amount", "amount", "valorOriginal")
    )
    category: str | None = Field(
        default=None, validation_alias=AliasChoices("category", "categoria")
    )
    counterparty: str | None = Field(
        default=None, validation_alias=AliasChoices("counterparty", "empresa")
    )
    description: str | None = Field(
        default=None, validation_alias=AliasChoices("description", "descricao")
    )
    raw_date: Any = Field(default=None, validation_alias=AliasChoices("raw_date", "date", "data"))

    @field_validator("id", mode="before")
    @classmethod
    def _id_is_integral(cls, v: Any) -> Any:
        # Booleans are ints; a flag in the id slot is a malformed record.
        if isinstance(v, bool):
            raise ValueError("id must be an integer")
        return v

    @field_validator("kind_hint", "category", "counterparty", "description", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> str | None:
        if v is None:
            return None
        return v if isinstance(v, str) else str(v)


# ---------------------------------------------------------------------------
# Canonical transaction
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Transaction:
    """A canonical, immutable transaction produced by the builder.

    ``amount_minor_units`` is always non-negative; the sign lives exclusively
    in ``kind``. ``category_path`` has at least one segment (``("outros",)``
    when the category text was unusable).
    """

    id: int
    kind: TransactionKind
    amount_minor_units: int
    category: str
    category_path: tuple[str, ...]
    counterparty: str
    description: str
    date: str

    def __post_init__(self) -> None:
        if self.amount_minor_units < 0:
            raise ValueError("amount_minor_units must be non-negative")
        if not self.category_path:
            raise ValueError("category_path must have at least one segment")

    @property
    def month(self) -> str:
        """Calendar month key (``YYYY-MM``)."""
        return self.date[:7]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "amount_minor_units": self.amount_minor_units,
            "category": self.category,
            "category_path": list(self.category_path),
            "counterparty": self.counterparty,
            "description": self.description,
            "date": self.date,
        }


# ---------------------------------------------------------------------------
# Aggregation output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CategoryAggregate:
    """Roll-up of one category-path prefix for one transaction kind."""

    category: str
    category_path: tuple[str, ...]
    kind: TransactionKind
    total_minor_units: int
    transaction_count: int
    percentage: float

    @property
    def depth(self) -> int:
        return len(self.category_path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "category_path": list(self.category_path),
            "kind": self.kind.value,
            "total_minor_units": self.total_minor_units,
            "transaction_count": self.transaction_count,
            "percentage": self.percentage,
        }


@dataclass(frozen=True, slots=True)
class MonthlyAggregate:
    month: str
    inflow_minor_units: int
    outflow_minor_units: int
    balance_minor_units: int
    transaction_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "month": self.month,
            "inflow_minor_units": self.inflow_minor_units,
            "outflow_minor_units": self.outflow_minor_units,
            "balance_minor_units": self.balance_minor_units,
            "transaction_count": self.transaction_count,
        }


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Totals and roll-ups derived from a full transaction set.

    Always recomputed from scratch by
    :func:`finance_clarity.aggregate.aggregate_transactions`; never merged
    incrementally.
    """

    total_inflow_minor_units: int
    total_outflow_minor_units: int
    balance_minor_units: int
    category_aggregates: tuple[CategoryAggregate, ...]
    monthly_aggregates: tuple[MonthlyAggregate, ...]
    top_outflow_categories: tuple[CategoryAggregate, ...]
    most_expensive_month: str

    def categories_for(
        self, kind: TransactionKind, *, depth: int | None = None
    ) -> list[CategoryAggregate]:
        """Return category entries of ``kind``, optionally at one ``depth``."""

        return [
            c
            for c in self.category_aggregates
            if c.kind is kind and (depth is None or c.depth == depth)
        ]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_inflow_minor_units": self.total_inflow_minor_units,
            "total_outflow_minor_units": self.total_outflow_minor_units,
            "balance_minor_units": self.balance_minor_units,
            "category_aggregates": [c.to_dict() for c in self.category_aggregates],
            "monthly_aggregates": [m.to_dict() for m in self.monthly_aggregates],
            "top_outflow_categories": [c.to_dict() for c in self.top_outflow_categories],
            "most_expensive_month": self.most_expensive_month,
        }


# ---------------------------------------------------------------------------
# Advisory output
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Recommendation:
    kind: RecommendationKind
    title: str
    description: str
    impact: str

    def to_dict(self) -> dict[str, str]:
        return {
            "kind": self.kind.value,
            "title": self.title,
            "description": self.description,
            "impact": self.impact,
        }


@dataclass(frozen=True, slots=True)
class CategorySummary:
    """Display row for one category; ``value`` is in major units."""

    name: str
    value: Decimal
    kind: TransactionKind
    percentage: float


@dataclass(frozen=True, slots=True)
class FinancialInsights:
    """Display-oriented view of an aggregation (major units)."""

    total_inflow: Decimal
    total_outflow: Decimal
    balance: Decimal
    categories: tuple[CategorySummary, ...]
    recommendations: tuple[Recommendation, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_inflow": str(self.total_inflow),
            "total_outflow": str(self.total_outflow),
            "balance": str(self.balance),
            "categories": [
                {
                    "name": c.name,
                    "value": str(c.value),
                    "kind": c.kind.value,
                    "percentage": c.percentage,
                }
                for c in self.categories
            ],
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


# Raw classifier output before validation.
RawRecord: TypeAlias = Mapping[str, Any]


__all__ = [
    "AggregationResult",
    "CategoryAggregate",
    "CategorySummary",
    "ClassifiedRecord",
    "FinancialInsights",
    "MonthlyAggregate",
    "RawRecord",
    "Recommendation",
    "RecommendationKind",
    "Transaction",
    "TransactionKind",
]
