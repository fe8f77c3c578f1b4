"""Load classifier output from JSON files.

Accepted top-level shapes:

- a list of record objects;
- a batch object ``{"transactions": [...], "batch_summary": "..."}``;
- a list of batch objects (one per classifier call).

Batches are flattened in file order. Anything else is a structural error.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import Any

from .errors import StructuralInputError
from .logging_setup import get_logger

_logger = get_logger("finance_clarity.ingest")


def _is_batch(obj: Any) -> bool:
    return isinstance(obj, Mapping) and "transactions" in obj


def _batch_records(batch: Mapping[str, Any], position: int) -> list[Any]:
    records = batch.get("transactions")
    if not isinstance(records, list):
        raise StructuralInputError(f"Batch {position}: 'transactions' must be a list")
    return records


def split_batches(payload: Any) -> list[list[Any]]:
    """Return ``payload`` as a list of record batches (see module docstring)."""

    if _is_batch(payload):
        return [_batch_records(payload, 0)]
    if not isinstance(payload, list):
        raise StructuralInputError(
            f"Expected a list of records or batch objects, got {type(payload).__name__}"
        )
    if payload and all(_is_batch(item) for item in payload):
        return [_batch_records(b, i) for i, b in enumerate(payload)]
    return [payload]


def load_classified_batches(path: str | PathLike[str]) -> list[list[Any]]:
    """Read ``path`` and return its record batches."""

    p = Path(path)
    try:
        payload = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise StructuralInputError(f"{p}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    except UnicodeDecodeError as exc:
        raise StructuralInputError(f"{p}: not UTF-8 text ({exc.reason} at byte {exc.start})") from exc
    batches = split_batches(payload)
    _logger.info("Loaded %d batch(es) from %s", len(batches), p)
    return batches


def load_classified_records(path: str | PathLike[str]) -> list[Any]:
    """Read ``path`` and return all records flattened across batches."""

    return [record for batch in load_classified_batches(path) for record in batch]


__all__ = ["load_classified_batches", "load_classified_records", "split_batches"]
