"""Command-line interface for ``finance_clarity`` (Typer + Rich).

Commands
--------
- ``analyze <json_path>``: build, aggregate and advise over classifier output
  stored as JSON (see :mod:`finance_clarity.ingest` for accepted shapes).
- ``parse-amount <raw>``: show the minor-unit value of an amount string.
- ``parse-date <raw>``: show the canonical date for a date string.
- ``category-path <raw>``: show the normalized category path.

The root callback loads ``.env`` from the working directory (without
overriding variables already set) and configures package logging once.
"""

from __future__ import annotations

import json
from datetime import date
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from .api import AnalysisReport, analyze_batches
from .categories import join_path, to_path
from .dates import Clock, DateNormalizer
from .errors import StructuralInputError
from .ingest import load_classified_batches
from .logging_setup import configure_logging
from .models import TransactionKind
from .settings import get_settings
from .values import format_brl, parse_minor_units


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Deterministic parsing and aggregation of classified transaction records.",
)
console = Console()
err_console = Console(stderr=True)


def _clock_from_option(today: str | None) -> Clock | None:
    if today is None:
        return None
    try:
        fixed = date.fromisoformat(today)
    except ValueError as exc:
        raise typer.BadParameter(f"expected YYYY-MM-DD, got {today!r}") from exc
    return lambda: fixed


TODAY_OPTION = typer.Option(
    "--today", help="Override the processing date (YYYY-MM-DD) used for fallbacks."
)


@app.callback()
def main(
    log_level: Annotated[
        str | None, typer.Option(help="Log level (defaults to FINANCE_CLARITY_LOG_LEVEL or INFO).")
    ] = None,
) -> None:
    """Root command: load ``.env`` and configure logging."""

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging(log_level)


def _render_table(report: AnalysisReport) -> None:
    agg = report.aggregation

    totals = Table(title="Totals", show_header=False)
    totals.add_column("Metric")
    totals.add_column("Amount", justify="right")
    totals.add_row("Total inflow", format_brl(agg.total_inflow_minor_units))
    totals.add_row("Total outflow", format_brl(agg.total_outflow_minor_units))
    totals.add_row("Balance", format_brl(agg.balance_minor_units))
    totals.add_row("Transactions", str(len(report.transactions)))
    totals.add_row("Most expensive month", agg.most_expensive_month)
    console.print(totals)

    categories = Table(title="Categories")
    categories.add_column("Category")
    categories.add_column("Kind")
    categories.add_column("Total", justify="right")
    categories.add_column("Count", justify="right")
    categories.add_column("%", justify="right")
    for kind in (TransactionKind.OUTFLOW, TransactionKind.INFLOW):
        for entry in agg.categories_for(kind):
            categories.add_row(
                entry.category,
                entry.kind.value,
                format_brl(entry.total_minor_units),
                str(entry.transaction_count),
                f"{entry.percentage:.1f}",
            )
    console.print(categories)

    months = Table(title="Months")
    months.add_column("Month")
    months.add_column("Inflow", justify="right")
    months.add_column("Outflow", justify="right")
    months.add_column("Balance", justify="right")
    months.add_column("Count", justify="right")
    for m in agg.monthly_aggregates:
        months.add_row(
            m.month,
            format_brl(m.inflow_minor_units),
            format_brl(m.outflow_minor_units),
            format_brl(m.balance_minor_units),
            str(m.transaction_count),
        )
    console.print(months)

    for rec in report.recommendations:
        console.print(f"[bold]{rec.title}[/bold] ({rec.kind.value})")
        console.print(f"  {rec.description}")
        console.print(f"  [dim]{rec.impact}[/dim]")


@app.command("analyze")
def analyze_cmd(
    json_path: Annotated[
        Path,
        typer.Argument(
            exists=True, dir_okay=False, readable=True, help="Classifier output JSON file."
        ),
    ],
    output_format: Annotated[
        OutputFormat, typer.Option("--format", help="Output format.")
    ] = OutputFormat.TABLE,
    today: Annotated[str | None, TODAY_OPTION] = None,
) -> None:
    """Aggregate classified records and print totals, roll-ups and recommendations."""

    clock = _clock_from_option(today)
    try:
        settings = get_settings()
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    try:
        batches = load_classified_batches(json_path)
        report = analyze_batches(batches, settings=settings, clock=clock)
    except StructuralInputError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    if output_format is OutputFormat.JSON:
        typer.echo(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
    else:
        _render_table(report)


@app.command("parse-amount")
def parse_amount_cmd(
    raw: Annotated[
        str,
        typer.Argument(help="Amount text, e.g. 'R$ 1.234,56'. Put -- before negative values."),
    ],
) -> None:
    """Print the signed minor-unit value of ``raw``.

    A leading minus reads as an option flag, so pass negative amounts after
    ``--``: ``finance-clarity parse-amount -- -500,75``.
    """

    minor = parse_minor_units(raw)
    typer.echo(f"{minor}\t{format_brl(minor)}")


@app.command("parse-date")
def parse_date_cmd(
    raw: Annotated[str, typer.Argument(help="Date text, e.g. '15/01/2024'.")],
    today: Annotated[str | None, TODAY_OPTION] = None,
) -> None:
    """Print the canonical ``YYYY-MM-DD`` form of ``raw``."""

    typer.echo(DateNormalizer(_clock_from_option(today)).normalize(raw))


@app.command("category-path")
def category_path_cmd(
    raw: Annotated[str, typer.Argument(help="Category text, e.g. 'Transporte > Uber'.")],
) -> None:
    """Print the normalized category path of ``raw``."""

    typer.echo(join_path(to_path(raw)))


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    app()
