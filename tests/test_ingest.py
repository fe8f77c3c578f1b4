import json

import pytest

from finance_clarity.errors import StructuralInputError
from finance_clarity.ingest import load_classified_batches, load_classified_records, split_batches

RECORD_A = {"id": 1, "valorOriginal": "10,00", "categoria": "Lazer", "data": "01/01/2024"}
RECORD_B = {"id": 2, "valorOriginal": "-20,00", "categoria": "Renda", "data": "02/01/2024"}


def _write(tmp_path, payload, name="classified.json"):
    path = tmp_path / name
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


def test_split_plain_record_list():
    assert split_batches([RECORD_A, RECORD_B]) == [[RECORD_A, RECORD_B]]


def test_split_single_batch_object():
    payload = {"transactions": [RECORD_A], "batch_summary": "1 transação"}
    assert split_batches(payload) == [[RECORD_A]]


def test_split_list_of_batches():
    payload = [{"transactions": [RECORD_A]}, {"transactions": [RECORD_B], "batch_summary": ""}]
    assert split_batches(payload) == [[RECORD_A], [RECORD_B]]


def test_empty_list_is_one_empty_batch():
    assert split_batches([]) == [[]]


@pytest.mark.parametrize(
    "payload",
    [
        "records",
        42,
        None,
        {"records": []},
        {"transactions": {"id": 1}},
        [{"transactions": [RECORD_A]}, {"transactions": "nope"}],
    ],
)
def test_split_rejects_other_shapes(payload):
    with pytest.raises(StructuralInputError):
        split_batches(payload)


def test_load_batches_from_file(tmp_path):
    path = _write(tmp_path, [{"transactions": [RECORD_A]}, {"transactions": [RECORD_B]}])

    assert load_classified_batches(path) == [[RECORD_A], [RECORD_B]]
    assert load_classified_records(str(path)) == [RECORD_A, RECORD_B]


def test_load_preserves_non_ascii_text(tmp_path):
    record = {**RECORD_A, "categoria": "Alimentação", "empresa": "Padaria São João"}
    path = _write(tmp_path, [record])

    assert load_classified_records(path)[0]["empresa"] == "Padaria São João"


def test_invalid_json_is_a_structural_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(StructuralInputError, match="invalid JSON"):
        load_classified_batches(path)


def test_non_utf8_file_is_a_structural_error(tmp_path):
    path = tmp_path / "latin1.json"
    path.write_bytes('[{"id": 1, "empresa": "Padaria São João"}]'.encode("latin-1"))

    with pytest.raises(StructuralInputError, match="not UTF-8"):
        load_classified_batches(path)
