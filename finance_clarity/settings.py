"""Runtime settings read from ``FINANCE_CLARITY_*`` environment variables.

The CLI loads a ``.env`` from the working directory (``override=False``)
before the first call to :func:`get_settings`, so values may live in either
place. Library callers can also build :class:`Settings` directly.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache

_ENV_PREFIX = "FINANCE_CLARITY_"

# Credit-card bill settlements echoed back by the classifier. They are neither
# income nor expense and must not reach any total.
DEFAULT_SETTLEMENT_MARKERS: tuple[str, ...] = ("pagamentos validos normais",)


@dataclass(frozen=True, slots=True)
class Settings:
    """Tunable policy knobs for building, aggregating and advising.

    Attributes
    ----------
    settlement_markers:
        Phrases that mark a record as a bill settlement (matched
        case-insensitively against counterparty and description).
    top_outflow_limit:
        Number of outflow categories kept in ``top_outflow_categories``.
    concentration_threshold_pct:
        Share of total outflow above which the largest category is flagged.
    growth_threshold_pct / reduction_threshold_pct:
        Month-over-month outflow change bounds for the trend note.
    max_recommendations:
        Cap on the number of recommendations returned.
    default_counterparty / default_description:
        Fallback text for records missing those fields.
    """

    settlement_markers: tuple[str, ...] = DEFAULT_SETTLEMENT_MARKERS
    top_outflow_limit: int = 5
    concentration_threshold_pct: float = 40.0
    growth_threshold_pct: float = 15.0
    reduction_threshold_pct: float = -10.0
    max_recommendations: int = 3
    default_counterparty: str = "Not specified"
    default_description: str = "No description"

    def __post_init__(self) -> None:
        if self.top_outflow_limit < 0:
            raise ValueError("top_outflow_limit must be >= 0")
        if self.max_recommendations < 0:
            raise ValueError("max_recommendations must be >= 0")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``environ`` (defaults to ``os.environ``).

        Unset or blank variables keep their defaults. Invalid numbers raise
        ``ValueError`` naming the offending variable.
        """

        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        markers = _env_str(env, "SETTLEMENT_MARKERS")
        if markers is not None:
            kwargs["settlement_markers"] = tuple(
                m.strip().lower() for m in markers.split(";") if m.strip()
            )

        for env_name, attr in (
            ("TOP_OUTFLOW_LIMIT", "top_outflow_limit"),
            ("MAX_RECOMMENDATIONS", "max_recommendations"),
        ):
            raw = _env_str(env, env_name)
            if raw is not None:
                kwargs[attr] = _to_int(env_name, raw)

        for env_name, attr in (
            ("CONCENTRATION_THRESHOLD", "concentration_threshold_pct"),
            ("GROWTH_THRESHOLD", "growth_threshold_pct"),
            ("REDUCTION_THRESHOLD", "reduction_threshold_pct"),
        ):
            raw = _env_str(env, env_name)
            if raw is not None:
                kwargs[attr] = _to_float(env_name, raw)

        for env_name, attr in (
            ("DEFAULT_COUNTERPARTY", "default_counterparty"),
            ("DEFAULT_DESCRIPTION", "default_description"),
        ):
            raw = _env_str(env, env_name)
            if raw is not None:
                kwargs[attr] = raw

        return cls(**kwargs)  # type: ignore[arg-type]


def _env_str(env: Mapping[str, str], name: str) -> str | None:
    raw = env.get(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _to_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


def _to_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{_ENV_PREFIX}{name} must be a number, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, read from the environment once."""

    return Settings.from_env()


__all__ = ["DEFAULT_SETTLEMENT_MARKERS", "Settings", "get_settings"]
