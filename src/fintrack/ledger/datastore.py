#!/usr/bin/env python3
"""
Ledger DataStore Implementations

CSV-backed persistence for transactions and user-set budgets. Every save is a
whole-file overwrite; a crash mid-write can leave a truncated file, which the
next load reports as a PersistenceFailure.
"""

import logging
from collections.abc import Sequence
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

from ..core.datastore_mixin import DataStoreMixin
from ..core.models import CategoryBudget, TransactionRecord

logger = logging.getLogger(__name__)

TRANSACTION_COLUMNS = ["Date", "Description", "Category", "Amount"]
BUDGET_COLUMNS = ["Category", "Amount", "StartDate", "EndDate"]


class PersistenceFailure(Exception):
    """Raised when stored data cannot be loaded, or a save did not complete."""

    pass


def _read_frame(path: Path, required: list[str]) -> pd.DataFrame | None:
    """Read a CSV as strings, or None when the file is missing or empty."""
    if not path.exists():
        return None
    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8")
    except pd.errors.EmptyDataError:
        return None
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
        raise PersistenceFailure(f"Cannot read {path}: {e}") from e

    frame.columns = [str(c).strip().lstrip("\ufeff") for c in frame.columns]
    missing = [c for c in required if c not in frame.columns]
    if missing:
        raise PersistenceFailure(f"{path} is missing columns: {', '.join(missing)}")
    return frame


def _write_frame(path: Path, frame: pd.DataFrame, what: str) -> bool:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        frame.to_csv(path, index=False, encoding="utf-8")
    except OSError as e:
        logger.error("Error saving %s to %s: %s", what, path, e)
        return False
    logger.info("Saved %d %s to %s", len(frame), what, path)
    return True


def _stored_amount(value: str) -> Decimal:
    amount = Decimal(value.strip())
    if not amount.is_finite():
        raise ValueError(f"Non-finite amount '{value}'")
    return amount


def _optional_date(value: str) -> date | None:
    value = value.strip()
    return date.fromisoformat(value) if value else None


class CsvTransactionStore(DataStoreMixin):
    """
    DataStore for a user's transaction file.

    File layout: Date,Description,Category,Amount with ISO dates and plain
    decimal amounts (negative = expense).
    """

    def load(self) -> list[TransactionRecord]:
        """
        Load all stored transactions.

        Rows that cannot be parsed are logged and skipped.

        Raises:
            PersistenceFailure: If the file is unreadable or lacks required columns
        """
        frame = _read_frame(self.path, TRANSACTION_COLUMNS)
        if frame is None:
            return []

        records: list[TransactionRecord] = []
        for position, row in enumerate(frame.to_dict("records"), start=2):
            try:
                records.append(
                    TransactionRecord.create(
                        date=date.fromisoformat(row["Date"].strip()),
                        description=row["Description"],
                        category=row["Category"],
                        amount=_stored_amount(row["Amount"]),
                    )
                )
            except (ValueError, InvalidOperation) as e:
                logger.warning("Skipping unreadable transaction at %s line %d: %s", self.path, position, e)

        logger.info("Loaded %d transactions from %s", len(records), self.path)
        return records

    def save(self, data: Sequence[TransactionRecord]) -> bool:
        """Overwrite the file with the given transactions."""
        frame = pd.DataFrame(
            [[r.date.isoformat(), r.description, r.category, str(r.amount)] for r in data],
            columns=TRANSACTION_COLUMNS,
        )
        return _write_frame(self.path, frame, "transactions")

    def load_transactions(self) -> list[TransactionRecord]:
        return self.load()

    def save_transactions(self, records: Sequence[TransactionRecord]) -> bool:
        return self.save(records)

    def item_count(self) -> int | None:
        if not self.exists():
            return None
        try:
            return len(self.load())
        except PersistenceFailure:
            return 0

    def describe_items(self, count: int) -> str:
        return f"{count} transactions"


class CsvBudgetStore(DataStoreMixin):
    """
    DataStore for a user's category budgets.

    File layout: Category,Amount,StartDate,EndDate; dates are optional ISO dates.
    One row per category, last write wins.
    """

    def load(self) -> list[CategoryBudget]:
        """
        Load all stored budgets.

        Raises:
            PersistenceFailure: If the file is unreadable or lacks required columns
        """
        frame = _read_frame(self.path, BUDGET_COLUMNS[:2])
        if frame is None:
            return []

        budgets: dict[str, CategoryBudget] = {}
        for position, row in enumerate(frame.to_dict("records"), start=2):
            try:
                budget = CategoryBudget(
                    category=row["Category"].strip(),
                    limit=Decimal(row["Amount"].strip()),
                    start_date=_optional_date(row.get("StartDate", "")),
                    end_date=_optional_date(row.get("EndDate", "")),
                )
            except (ValueError, InvalidOperation) as e:
                logger.warning("Skipping unreadable budget at %s line %d: %s", self.path, position, e)
                continue
            budgets[budget.category] = budget

        logger.info("Loaded %d budget categories from %s", len(budgets), self.path)
        return list(budgets.values())

    def save(self, data: Sequence[CategoryBudget]) -> bool:
        """Overwrite the file with the given budgets."""
        frame = pd.DataFrame(
            [
                [
                    b.category,
                    str(b.limit),
                    b.start_date.isoformat() if b.start_date else "",
                    b.end_date.isoformat() if b.end_date else "",
                ]
                for b in data
            ],
            columns=BUDGET_COLUMNS,
        )
        return _write_frame(self.path, frame, "budgets")

    def load_budgets(self) -> list[CategoryBudget]:
        return self.load()

    def save_budgets(self, budgets: Sequence[CategoryBudget]) -> bool:
        return self.save(budgets)

    def item_count(self) -> int | None:
        if not self.exists():
            return None
        try:
            return len(self.load())
        except PersistenceFailure:
            return 0

    def describe_items(self, count: int) -> str:
        return f"{count} budget categories"
