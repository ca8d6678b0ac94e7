#!/usr/bin/env python3
"""
Report CLI - ledger summaries and tables.
"""

import json
from pathlib import Path

import click

from ..views import OverviewView, ReportsView
from .common import context_config, open_session


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print the summary as JSON")
@click.pass_context
def summary(ctx: click.Context, as_json: bool) -> None:
    """Show totals, overall budget usage and budget warnings."""
    config = context_config(ctx)
    session = open_session(ctx)
    view = OverviewView(session.aggregator, session.bus, config.budget.warning_threshold, session.currency)
    snapshot = view.snapshot
    view.close()

    if as_json:
        click.echo(json.dumps(snapshot.to_dict(), indent=2))
        return

    money = session.currency.format
    click.echo(f"Ledger for {config.username}")
    if snapshot.start_date:
        click.echo(f"  Period: {snapshot.start_date} to {snapshot.end_date}")
    click.echo(f"  Transactions: {snapshot.transaction_count}")
    click.echo(f"  Income: {money(snapshot.total_income)}")
    click.echo(f"  Expenses: {money(snapshot.total_expenses)}")
    click.echo(f"  Savings: {money(snapshot.total_savings)}")
    click.echo(f"  Budget used: {snapshot.overall_percentage:.1f}% of {money(snapshot.total_budget)}")

    for warning in snapshot.warnings:
        click.echo(f"[WARNING] {warning.message()}")


@click.group()
def report() -> None:
    """Tabular ledger reports."""
    pass


def _emit(frame, csv_output: Path | None, empty_message: str) -> None:
    if csv_output:
        csv_output.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(csv_output, index=False)
        click.echo(f"✅ Report saved to: {csv_output}")
        return
    if frame.empty:
        click.echo(empty_message)
        return
    click.echo(frame.to_string(index=False))


@report.command()
@click.option("--csv-output", type=click.Path(dir_okay=False, path_type=Path), help="Write the table to a CSV file")
@click.pass_context
def monthly(ctx: click.Context, csv_output: Path | None) -> None:
    """Income, expenses and net per month."""
    session = open_session(ctx)
    view = ReportsView(session.aggregator, session.bus)
    _emit(view.monthly_summary(), csv_output, "No transactions")


@report.command()
@click.option("--csv-output", type=click.Path(dir_okay=False, path_type=Path), help="Write the table to a CSV file")
@click.pass_context
def categories(ctx: click.Context, csv_output: Path | None) -> None:
    """Spending against budget per category."""
    session = open_session(ctx)
    view = ReportsView(session.aggregator, session.bus)
    _emit(view.category_breakdown(), csv_output, "No categories")
