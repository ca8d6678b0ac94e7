#!/usr/bin/env python3
"""
Budget CLI - view and edit category budgets.
"""

from datetime import datetime

import click

from ..ledger import PersistenceFailure
from .common import open_session


@click.group()
def budget() -> None:
    """Category budget commands."""
    pass


@budget.command("list")
@click.pass_context
def list_budgets(ctx: click.Context) -> None:
    """Show every category budget with spending and usage."""
    session = open_session(ctx)
    aggregator = session.aggregator
    budgets = aggregator.get_category_budgets()

    if not budgets:
        click.echo("No budgets set")
        return

    click.echo(f"{'Category':<24} {'Budget':>12} {'Spent':>12} {'Used':>7}")
    for category in sorted(budgets):
        entry = budgets[category]
        marker = "  (default)" if entry.is_default else ""
        click.echo(
            f"{category:<24} {session.currency.format(entry.limit):>12} "
            f"{session.currency.format(aggregator.get_category_expense(category)):>12} "
            f"{aggregator.get_category_percentage(category):>6.1f}%{marker}"
        )
    click.echo(
        f"{'Total':<24} {session.currency.format(aggregator.get_total_budget()):>12} "
        f"{session.currency.format(aggregator.get_total_expenses()):>12} "
        f"{aggregator.get_overall_budget_percentage():>6.1f}%"
    )


@budget.command("set")
@click.argument("category")
@click.argument("limit")
@click.option("--start", type=click.DateTime(formats=["%Y-%m-%d"]), help="Start date (YYYY-MM-DD)")
@click.option("--end", type=click.DateTime(formats=["%Y-%m-%d"]), help="End date (YYYY-MM-DD)")
@click.pass_context
def set_budget(
    ctx: click.Context,
    category: str,
    limit: str,
    start: datetime | None,
    end: datetime | None,
) -> None:
    """
    Set the budget for CATEGORY to LIMIT.

    Examples:
      fintrack budget set Food 800
      fintrack budget set Travel 2500 --start 2025-06-01 --end 2025-08-31
    """
    session = open_session(ctx)
    aggregator = session.aggregator
    try:
        entry = aggregator.update_category_budget(
            category,
            limit,
            start_date=start.date() if start else None,
            end_date=end.date() if end else None,
        )
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    except PersistenceFailure as e:
        click.echo(f"❌ {e}", err=True)
        raise click.ClickException(str(e)) from e

    click.echo(f"✅ Budget for {entry.category} set to {session.currency.format(entry.limit)}")


@budget.command("delete")
@click.argument("category")
@click.pass_context
def delete_budget(ctx: click.Context, category: str) -> None:
    """Remove the budget for CATEGORY."""
    aggregator = open_session(ctx).aggregator
    try:
        removed = aggregator.delete_category_budget(category)
    except PersistenceFailure as e:
        click.echo(f"❌ {e}", err=True)
        raise click.ClickException(str(e)) from e

    if not removed:
        raise click.ClickException(f"No budget for {category}")
    click.echo(f"✅ Budget for {category} removed")
