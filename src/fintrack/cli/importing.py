#!/usr/bin/env python3
"""
Import CLI - load a CSV export into the ledger.
"""

import dataclasses
from pathlib import Path

import click

from ..core.dates import DateFormatResolver
from ..importer import (
    CUSTOM,
    ColumnMapping,
    ConfigurationError,
    CsvTransactionImporter,
    ImportTemplate,
    SignPolicy,
    default_type_policy,
    get_template,
)
from ..importer.templates import TEMPLATES
from ..ledger import PersistenceFailure
from .common import context_config, open_session


def _column_ref(value: str | None) -> str | int | None:
    """Column options accept a header name or a 0-based index."""
    if value is None:
        return None
    value = value.strip()
    return int(value) if value.isdigit() else value


def build_mapping(template: ImportTemplate, **columns: str | None) -> ColumnMapping:
    """Override template columns with any column options given on the command line."""
    overrides = {name: _column_ref(value) for name, value in columns.items() if value is not None}
    return dataclasses.replace(template.mapping, **overrides)


def build_sign_policy(
    template: ImportTemplate,
    mapping: ColumnMapping,
    expense_ids: str | None,
    income_ids: str | None,
) -> SignPolicy:
    """
    Pick the sign policy for an import.

    Each identifier option replaces the matching side of a type-aware
    template's identifiers and leaves the other side as the template has it.
    A type column without a type-aware template uses the generic English
    identifiers for any side not given.
    """
    if mapping.type_column is None:
        if expense_ids or income_ids:
            raise click.UsageError("--expense-ids/--income-ids need a type column (--type-column)")
        return template.sign_policy

    policy = template.sign_policy
    if not policy.uses_type_column:
        return default_type_policy(expense_ids, income_ids)
    if not (expense_ids or income_ids):
        return policy
    return SignPolicy.from_type_column(
        expense_identifiers=expense_ids or policy.expense_identifiers,
        income_identifiers=income_ids or policy.income_identifiers,
    )


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--template",
    "template_key",
    type=click.Choice(sorted(TEMPLATES)),
    default="custom",
    help="Export layout preset (default: custom)",
)
@click.option("--date-column", help="Header name or 0-based index of the date column")
@click.option("--description-column", help="Header name or index of the description column")
@click.option("--category-column", help="Header name or index of the category column")
@click.option("--amount-column", help="Header name or index of the amount column")
@click.option("--type-column", help="Header name or index of the income/expense type column")
@click.option("--income-ids", help="Comma-separated type values meaning income")
@click.option("--expense-ids", help="Comma-separated type values meaning expense")
@click.option("--date-format", help="Primary date format, e.g. yyyy-MM-dd or %d.%m.%Y")
@click.option("--encoding", help="File encoding (default from FINTRACK_CSV_ENCODING)")
@click.option("--dry-run", is_flag=True, help="Parse and report without changing the ledger")
@click.pass_context
def import_csv(
    ctx: click.Context,
    csv_file: Path,
    template_key: str,
    date_column: str | None,
    description_column: str | None,
    category_column: str | None,
    amount_column: str | None,
    type_column: str | None,
    income_ids: str | None,
    expense_ids: str | None,
    date_format: str | None,
    encoding: str | None,
    dry_run: bool,
) -> None:
    """
    Import transactions from a CSV export.

    Examples:
      fintrack import bank.csv
      fintrack import wechat.csv --template wechat-pay
      fintrack import export.csv --amount-column Betrag --date-format dd.MM.yyyy
      fintrack import card.csv --type-column Type --expense-ids Debit,Purchase
    """
    config = context_config(ctx)
    template = get_template(template_key)

    mapping = build_mapping(
        template,
        date=date_column,
        description=description_column,
        category=category_column,
        amount=amount_column,
        type_column=type_column,
    )
    sign_policy = build_sign_policy(template, mapping, expense_ids, income_ids)
    primary_format = date_format or (config.importing.date_format if template is CUSTOM else template.date_format)

    try:
        text = csv_file.read_text(encoding=encoding or config.importing.encoding)
    except (OSError, UnicodeDecodeError) as e:
        raise click.ClickException(f"Cannot read {csv_file}: {e}") from e

    importer = CsvTransactionImporter(DateFormatResolver(primary_format))
    try:
        result = importer.import_rows(text, mapping, sign_policy)
    except ConfigurationError as e:
        click.echo(f"❌ Import configuration error: {e}", err=True)
        raise click.ClickException(str(e)) from e

    click.echo(f"Parsed {csv_file.name} with {template.name} template: {result.summary_text()}")
    for skip in result.skipped:
        click.echo(f"  SKIPPED {skip.describe()}")
    for warning in result.warnings:
        click.echo(f"  WARNING Row {warning.row_index}: {warning.message} ('{warning.raw_value}')")

    if dry_run:
        click.echo("Dry run: ledger not changed")
        return

    session = open_session(ctx)
    merge = session.aggregator.import_transactions(result.records)
    try:
        session.aggregator.save_transactions()
    except PersistenceFailure as e:
        click.echo(f"❌ {e}", err=True)
        raise click.ClickException(str(e)) from e

    click.echo(
        f"✅ Imported {merge.added_count} new transactions "
        f"({merge.duplicate_count} already in ledger, {len(result.skipped)} rows skipped)"
    )
