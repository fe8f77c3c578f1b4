"""Hierarchical category-path normalization.

Category text such as ``"Transporte > Apps > Uber"`` becomes the path
``("transporte", "apps", "uber")``. Segments are lowercase, accent-free and
limited to ``[a-z0-9 ]`` so that spelling variants collapse into one key.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

FALLBACK_SEGMENT = "outros"
PATH_SEPARATOR = " > "

_SPLIT_RE = re.compile(r"[>/:]")
_WHITESPACE_RE = re.compile(r"\s+")
_DISALLOWED_RE = re.compile(r"[^a-z0-9 ]")


def _clean(raw: str) -> str:
    s = raw.strip().lower()
    # Decompose accented letters and drop the combining marks.
    s = unicodedata.normalize("NFD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = _WHITESPACE_RE.sub(" ", s)
    s = _DISALLOWED_RE.sub("", s)
    return _WHITESPACE_RE.sub(" ", s).strip()


def normalize_segment(raw: object) -> str:
    """Return the normalized form of a single category segment.

    Empty results (including non-string input) become ``"outros"``.
    """

    if not isinstance(raw, str):
        return FALLBACK_SEGMENT
    return _clean(raw) or FALLBACK_SEGMENT


def to_path(raw: object) -> tuple[str, ...]:
    """Split category text on ``>``, ``/`` or ``:`` into normalized segments.

    Pieces that normalize to nothing are dropped; when no segment survives
    the path is ``("outros",)``.
    """

    if not isinstance(raw, str):
        return (FALLBACK_SEGMENT,)
    segments = tuple(seg for seg in (_clean(piece) for piece in _SPLIT_RE.split(raw)) if seg)
    return segments or (FALLBACK_SEGMENT,)


def join_path(path: Iterable[str]) -> str:
    """Join path segments into the display/aggregation key."""

    return PATH_SEPARATOR.join(path)


__all__ = ["FALLBACK_SEGMENT", "PATH_SEPARATOR", "join_path", "normalize_segment", "to_path"]
