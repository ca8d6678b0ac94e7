#!/usr/bin/env python3
"""
Core Data Models for fintrack

Typed records shared by the importer, the aggregator, the stores and the
read-models.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any

from .currency import ZERO

UNCATEGORISED = "Uncategorised"

# (date, description, category, amount), compared as exact values
DedupKey = tuple[date, str, str, Decimal]


class TransactionType(Enum):
    """Direction of a transaction."""

    EXPENSE = "expense"
    INCOME = "income"


@dataclass(frozen=True)
class TransactionRecord:
    """
    Canonical transaction entity.

    Negative amounts are expenses, zero and positive amounts are income.
    Records are immutable; two records with the same dedup key are the same
    transaction.
    """

    date: date
    description: str
    category: str
    amount: Decimal

    @classmethod
    def create(
        cls,
        date: date,
        description: str | None,
        category: str | None,
        amount: Decimal,
    ) -> "TransactionRecord":
        """Create a record with trimmed text fields and the default category applied."""
        category_name = (category or "").strip() or UNCATEGORISED
        return cls(
            date=date,
            description=(description or "").strip(),
            category=category_name,
            amount=amount,
        )

    @property
    def dedup_key(self) -> DedupKey:
        """Get the identity tuple used for deduplication."""
        return (self.date, self.description, self.category, self.amount)

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def is_income(self) -> bool:
        return self.amount >= 0

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.EXPENSE if self.is_expense else TransactionType.INCOME

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "date": self.date.isoformat(),
            "description": self.description,
            "category": self.category,
            "amount": str(self.amount),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TransactionRecord":
        """Create a record from a dictionary produced by to_dict()."""
        return cls.create(
            date=date.fromisoformat(data["date"]),
            description=data.get("description"),
            category=data.get("category"),
            amount=Decimal(str(data["amount"])),
        )


@dataclass(frozen=True)
class CategoryBudget:
    """
    Spending ceiling for one category.

    Used only for percentage and warning display, never enforced.
    Budgets with is_default=True were allocated automatically and are not
    user decisions.
    """

    category: str
    limit: Decimal
    start_date: date | None = None
    end_date: date | None = None
    is_default: bool = False

    def __post_init__(self) -> None:
        if not self.category or not self.category.strip():
            raise ValueError("Budget category must not be empty")
        if self.limit < ZERO:
            raise ValueError(f"Budget limit must be non-negative, got {self.limit} for {self.category}")
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(f"Budget end date {self.end_date} is before start date {self.start_date}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "category": self.category,
            "limit": str(self.limit),
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_default": self.is_default,
        }
