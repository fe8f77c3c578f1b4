import logging

import pytest

from finance_clarity.builder import (
    TransactionBuilder,
    TransactionCollector,
    ensure_record_collection,
    settlement_marker_predicate,
)
from finance_clarity.dates import DateNormalizer
from finance_clarity.errors import StructuralInputError
from finance_clarity.models import ClassifiedRecord, TransactionKind
from finance_clarity.settings import Settings

# ---- Helpers -----------------------------------------------------------------


def _mk_builder(fixed_clock, **kwargs) -> TransactionBuilder:
    return TransactionBuilder(date_normalizer=DateNormalizer(fixed_clock), **kwargs)


def _mk_rows():
    return [
        {
            "id": 1,
            "tipo": "Saída",
            "valorOriginal": "R$ 1.234,56",
            "categoria": "Alimentação > Restaurante",
            "empresa": "Bistrô Central",
            "descricao": "Jantar",
            "data": "15/01/2024",
        },
        {
            "id": 2,
            "tipo": "Entrada",
            "valorOriginal": "-5.000,00",
            "categoria": "Renda > Salário",
            "empresa": "ACME Ltda",
            "descricao": "Salário janeiro",
            "data": "05/01/2024",
        },
        {
            "id": 3,
            "tipo": "Saída",
            "valorOriginal": "2.500,00",
            "categoria": "Cartão",
            "empresa": "Banco X",
            "descricao": "Pagamentos Validos Normais",
            "data": "10/01/2024",
        },
        {
            "id": 4,
            "tipo": "Saída",
            "valorOriginal": "69.99",
            "categoria": "Transporte / Apps / Uber",
            "empresa": "Uber",
            "descricao": "Corrida",
            "data": "2024-02-03",
        },
        {
            "id": 5,
            "tipo": "Saída",
            "valorOriginal": "(100,00)",
            "categoria": "Alimentação",
            "empresa": "",
            "descricao": None,
            "data": "sometime",
        },
    ]


# ---- Settlement exclusion ----------------------------------------------------


def test_settlement_rows_are_dropped_before_parsing(fixed_clock):
    txs = _mk_builder(fixed_clock).build_many(_mk_rows())

    assert [t.id for t in txs] == [1, 2, 4, 5]


def test_settlement_marker_matches_counterparty_case_insensitively():
    is_settlement = settlement_marker_predicate(["pagamentos validos normais"])

    assert is_settlement(ClassifiedRecord(id=1, counterparty="PAGAMENTOS VALIDOS NORMAIS - CARD"))
    assert is_settlement(ClassifiedRecord(id=2, description="ref pagamentos validos normais"))
    assert not is_settlement(ClassifiedRecord(id=3, description="pagamento válido"))


def test_empty_marker_list_never_excludes():
    is_settlement = settlement_marker_predicate(["", "   "])
    assert not is_settlement(ClassifiedRecord(id=1, description="anything"))


def test_custom_exclusion_predicate(fixed_clock):
    builder = _mk_builder(fixed_clock, exclude=lambda rec: rec.id % 2 == 0)
    txs = builder.build_many(_mk_rows())
    assert [t.id for t in txs] == [1, 3, 5]


def test_exclusion_count_is_logged(fixed_clock, caplog):
    with caplog.at_level(logging.INFO, logger="finance_clarity"):
        _mk_builder(fixed_clock).build_many(_mk_rows())
    assert any("(1 excluded, 0 malformed)" in r.getMessage() for r in caplog.records)


# ---- Field derivation ---------------------------------------------------------


def test_kind_comes_from_amount_sign_not_hint(fixed_clock):
    by_id = {t.id: t for t in _mk_builder(fixed_clock).build_many(_mk_rows())}

    assert by_id[1].kind is TransactionKind.OUTFLOW
    assert by_id[1].amount_minor_units == 123456
    assert by_id[2].kind is TransactionKind.INFLOW
    assert by_id[2].amount_minor_units == 500000
    # Hint says "Saída" but the parenthesized amount is negative.
    assert by_id[5].kind is TransactionKind.INFLOW
    assert by_id[5].amount_minor_units == 10000


def test_zero_amount_is_outflow(fixed_clock):
    tx = _mk_builder(fixed_clock).build({"id": 9, "valorOriginal": "abc"})
    assert tx is not None
    assert tx.kind is TransactionKind.OUTFLOW
    assert tx.amount_minor_units == 0


def test_category_date_and_defaults(fixed_clock):
    by_id = {t.id: t for t in _mk_builder(fixed_clock).build_many(_mk_rows())}

    assert by_id[1].category == "Alimentação > Restaurante"
    assert by_id[1].category_path == ("alimentacao", "restaurante")
    assert by_id[1].date == "2024-01-15"
    assert by_id[4].category_path == ("transporte", "apps", "uber")
    assert by_id[4].date == "2024-02-03"

    assert by_id[5].counterparty == "Not specified"
    assert by_id[5].description == "No description"
    assert by_id[5].date == "2024-03-10"


def test_missing_category_falls_back_to_outros(fixed_clock):
    tx = _mk_builder(fixed_clock).build({"id": 1, "amount": "10,00"})
    assert tx is not None
    assert tx.category == ""
    assert tx.category_path == ("outros",)


def test_english_field_names_are_accepted(fixed_clock):
    tx = _mk_builder(fixed_clock).build(
        {
            "id": 7,
            "kind": "inflow",
            "amount": 12.5,
            "category": "Lazer",
            "counterparty": "Cinema",
            "description": "Ingresso",
            "date": "2024-01-02",
            "unexpected": "ignored",
        }
    )
    assert tx is not None
    assert tx.amount_minor_units == 1250
    assert tx.kind is TransactionKind.OUTFLOW
    assert tx.counterparty == "Cinema"


def test_settings_control_defaults(fixed_clock):
    settings = Settings(default_counterparty="?", default_description="-")
    tx = _mk_builder(fixed_clock, settings=settings).build({"id": 1})
    assert tx is not None
    assert (tx.counterparty, tx.description) == ("?", "-")


# ---- Structural errors -------------------------------------------------------


@pytest.mark.parametrize("records", ["not records", b"bytes", {"id": 1}, 42, None])
def test_non_collections_are_rejected(records, fixed_clock):
    with pytest.raises(StructuralInputError):
        _mk_builder(fixed_clock).build_many(records)


@pytest.mark.parametrize(
    "record",
    [
        ["id", 1],
        "record",
        {"valorOriginal": "10,00"},
        {"id": "abc"},
        {"id": True},
        {"id": 1.5},
    ],
)
def test_malformed_records_are_rejected_individually(record, fixed_clock):
    with pytest.raises(StructuralInputError):
        _mk_builder(fixed_clock).build(record)


@pytest.mark.parametrize(
    "bad",
    [
        {"id": "x-2", "valorOriginal": "20,00"},
        {"id": 1.5, "valorOriginal": "20,00"},
        {"id": True, "valorOriginal": "20,00"},
        {"valorOriginal": "20,00"},
        "record",
    ],
)
def test_malformed_record_does_not_abort_the_batch(bad, fixed_clock, caplog):
    good = {"id": 1, "valorOriginal": "10,00", "categoria": "Lazer", "data": "2024-01-05"}
    with caplog.at_level(logging.WARNING, logger="finance_clarity"):
        txs = _mk_builder(fixed_clock).build_many([good, bad])

    assert [(t.id, t.amount_minor_units) for t in txs] == [(1, 1000)]
    assert any("Skipping record at position 1" in r.getMessage() for r in caplog.records)


def test_structural_error_is_a_value_error():
    with pytest.raises(ValueError):
        ensure_record_collection("nope")


def test_ensure_record_collection_materializes_generators():
    assert ensure_record_collection(r for r in ({"id": 1}, {"id": 2})) == [{"id": 1}, {"id": 2}]


# ---- Collector ---------------------------------------------------------------


def test_collector_accumulates_batches_in_order(fixed_clock):
    collector = TransactionCollector(_mk_builder(fixed_clock))
    rows = _mk_rows()

    first = collector.add_batch(rows[:3])
    second = collector.add_batch(rows[3:])

    assert [t.id for t in first] == [1, 2]
    assert [t.id for t in second] == [4, 5]
    assert [t.id for t in collector.transactions] == [1, 2, 4, 5]
    assert collector.batch_count == 2
    assert len(collector) == 4


def test_collector_snapshot_is_immutable(fixed_clock):
    collector = TransactionCollector(_mk_builder(fixed_clock))
    collector.add_batch(_mk_rows()[:1])
    snapshot = collector.transactions
    collector.add_batch(_mk_rows()[1:2])

    assert len(snapshot) == 1
    assert len(collector.transactions) == 2


def test_collector_warns_on_duplicate_ids(fixed_clock, caplog):
    collector = TransactionCollector(_mk_builder(fixed_clock))
    with caplog.at_level(logging.WARNING, logger="finance_clarity"):
        collector.add_batch(_mk_rows()[:1])
        collector.add_batch(_mk_rows()[:1])

    assert len(collector) == 2
    assert any("Duplicate transaction id 1" in r.getMessage() for r in caplog.records)
