"""Build canonical :class:`~finance_clarity.models.Transaction` records.

Each classifier record is turned into zero or one transaction:

1. The record is validated structurally (a mapping with an integer ``id``).
   Within a batch, records failing this check are logged and skipped.
2. The exclusion predicate runs on the raw record; matching records (bill
   settlements by default) are dropped before any parsing.
3. Amount, date and category are parsed leniently. Malformed fields degrade
   to their documented defaults so that one bad row never aborts a batch.
4. The transaction kind comes from the parsed amount's sign; the classifier's
   own kind hint is ignored.

:class:`TransactionCollector` accumulates transactions across classifier
batches. Aggregation always replays the collector's full snapshot.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeAlias

from pydantic import ValidationError

from .categories import to_path
from .dates import DateNormalizer
from .errors import StructuralInputError
from .logging_setup import get_logger
from .models import ClassifiedRecord, Transaction, TransactionKind
from .settings import Settings, get_settings
from .values import parse_minor_units

ExclusionPredicate: TypeAlias = Callable[[ClassifiedRecord], bool]

_logger = get_logger("finance_clarity.builder")


def settlement_marker_predicate(markers: Iterable[str]) -> ExclusionPredicate:
    """Return a predicate matching records whose counterparty or description
    contains any of ``markers`` (case-insensitive substring match)."""

    needles = tuple(m.strip().lower() for m in markers if m and m.strip())

    def _is_settlement(record: ClassifiedRecord) -> bool:
        if not needles:
            return False
        haystacks = (
            (record.counterparty or "").lower(),
            (record.description or "").lower(),
        )
        return any(n in h for n in needles for h in haystacks)

    return _is_settlement


def _validate_record(record: Any) -> ClassifiedRecord:
    if isinstance(record, ClassifiedRecord):
        return record
    if not isinstance(record, Mapping):
        raise StructuralInputError(
            f"Expected each record to be a mapping, got {type(record).__name__}"
        )
    try:
        return ClassifiedRecord.model_validate(dict(record))
    except ValidationError as exc:
        raise StructuralInputError(
            f"Invalid classifier record (id={record.get('id')!r}): {exc.errors()[0]['msg']}"
        ) from exc


def ensure_record_collection(records: Any) -> Sequence[Any]:
    """Coerce ``records`` to a list, rejecting inputs that are not collections.

    Strings, bytes and single mappings are iterable but are not collections of
    records; they are rejected along with non-iterables.
    """

    if isinstance(records, (str, bytes, bytearray, Mapping)) or not isinstance(
        records, Iterable
    ):
        raise StructuralInputError(
            f"Expected a collection of records, got {type(records).__name__}"
        )
    return list(records)


class TransactionBuilder:
    """Turn classifier records into canonical transactions.

    Parameters
    ----------
    exclude:
        Predicate deciding whether a record is dropped before parsing.
        Defaults to :func:`settlement_marker_predicate` over
        ``settings.settlement_markers``.
    date_normalizer:
        Date parser; inject one with a fixed clock for deterministic output.
    settings:
        Policy settings (defaults to :func:`~finance_clarity.settings.get_settings`).
    """

    def __init__(
        self,
        *,
        exclude: ExclusionPredicate | None = None,
        date_normalizer: DateNormalizer | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._exclude = exclude or settlement_marker_predicate(self._settings.settlement_markers)
        self._dates = date_normalizer or DateNormalizer()

    def build(self, record: Mapping[str, Any] | ClassifiedRecord) -> Transaction | None:
        """Return the canonical transaction for ``record`` or ``None`` when excluded."""

        rec = _validate_record(record)
        if self._exclude(rec):
            _logger.debug("Excluding record id=%s (settlement marker)", rec.id)
            return None

        signed = parse_minor_units(rec.raw_amount)
        kind = TransactionKind.INFLOW if signed < 0 else TransactionKind.OUTFLOW

        category = (rec.category or "").strip()
        counterparty = (rec.counterparty or "").strip() or self._settings.default_counterparty
        description = (rec.description or "").strip() or self._settings.default_description

        return Transaction(
            id=rec.id,
            kind=kind,
            amount_minor_units=abs(signed),
            category=category,
            category_path=to_path(category),
            counterparty=counterparty,
            description=description,
            date=self._dates.normalize(rec.raw_date),
        )

    def build_many(self, records: Iterable[Mapping[str, Any]]) -> list[Transaction]:
        """Build every record in order, skipping excluded and malformed ones.

        Only a ``records`` value that is not a collection raises. A single
        record without a usable ``id`` (or that is not a mapping) is logged at
        WARNING and skipped so the rest of the batch survives.
        """

        items = ensure_record_collection(records)
        out: list[Transaction] = []
        skipped = 0
        for position, record in enumerate(items):
            try:
                tx = self.build(record)
            except StructuralInputError as exc:
                _logger.warning("Skipping record at position %d: %s", position, exc)
                skipped += 1
                continue
            if tx is not None:
                out.append(tx)
        excluded = len(items) - len(out) - skipped
        if excluded or skipped:
            _logger.info(
                "Built %d transactions (%d excluded, %d malformed)", len(out), excluded, skipped
            )
        return out


class TransactionCollector:
    """Accumulate transactions across classifier batches.

    The collector only appends; it never aggregates. Callers replay
    :attr:`transactions` through the aggregation engine after each batch.
    """

    def __init__(self, builder: TransactionBuilder | None = None) -> None:
        self._builder = builder or TransactionBuilder()
        self._transactions: list[Transaction] = []
        self._seen_ids: set[int] = set()
        self._batches = 0

    def add_batch(self, records: Iterable[Mapping[str, Any]]) -> list[Transaction]:
        """Build ``records`` and append them; return this batch's transactions."""

        built = self._builder.build_many(records)
        for tx in built:
            if tx.id in self._seen_ids:
                _logger.warning("Duplicate transaction id %s across batches", tx.id)
            self._seen_ids.add(tx.id)
        self._transactions.extend(built)
        self._batches += 1
        return built

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Snapshot of every transaction collected so far, in arrival order."""
        return tuple(self._transactions)

    @property
    def batch_count(self) -> int:
        return self._batches

    def __len__(self) -> int:
        return len(self._transactions)


__all__ = [
    "ExclusionPredicate",
    "TransactionBuilder",
    "TransactionCollector",
    "ensure_record_collection",
    "settlement_marker_predicate",
]
