#!/usr/bin/env python3
"""
Main CLI Entry Point for fintrack

Provides the unified command-line interface for importing, budgeting and reporting.
"""

import logging
import os

import click

from ..core.config import get_config, reload_config


@click.group()
@click.option(
    "--config-env",
    type=click.Choice(["development", "test", "production"]),
    help="Override environment configuration",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_env: str | None, verbose: bool, debug: bool) -> None:
    """
    fintrack - Personal Finance Tracker

    Import bank and payment exports, track category budgets, and report on
    income and spending.
    """
    ctx.ensure_object(dict)

    if config_env:
        os.environ["FINTRACK_ENV"] = config_env

    if debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("fintrack").setLevel(logging.DEBUG)

    try:
        config_obj = reload_config() if (config_env or debug) else get_config()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    ctx.obj["verbose"] = verbose
    ctx.obj["debug"] = debug
    ctx.obj["config"] = config_obj

    if verbose:
        click.echo(f"Environment: {config_obj.environment.value}")
        click.echo(f"User directory: {config_obj.storage.user_dir}")

    if debug:
        click.echo("Debug logging enabled")


@main.command()
@click.pass_context
def version(ctx: click.Context) -> None:
    """Show version information."""
    from fintrack import __author__, __version__

    click.echo(f"fintrack v{__version__}")
    click.echo(f"Author: {__author__}")


@main.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """Show current configuration."""
    config_obj = ctx.obj["config"]

    click.echo("Current Configuration:")
    click.echo(f"  Environment: {config_obj.environment.value}")
    click.echo(f"  User: {config_obj.username}")
    click.echo(f"  Data Directory: {config_obj.data_dir}")
    click.echo(f"  Transactions File: {config_obj.storage.transactions_file}")
    click.echo(f"  Budgets File: {config_obj.storage.budgets_file}")
    click.echo(f"  Date Format: {config_obj.importing.date_format}")
    click.echo(f"  Monthly Budget: {config_obj.budget.monthly_budget}")
    click.echo(f"  Allocation Policy: {config_obj.budget.allocation_policy}")
    click.echo(f"  Warning Threshold: {config_obj.budget.warning_threshold}%")
    click.echo(f"  Debug Mode: {config_obj.debug}")
    click.echo(f"  Log Level: {config_obj.log_level}")


from .budget import budget  # noqa: E402
from .importing import import_csv  # noqa: E402
from .report import report, summary  # noqa: E402

main.add_command(import_csv)
main.add_command(summary)
main.add_command(budget)
main.add_command(report)


if __name__ == "__main__":
    main()
