#!/usr/bin/env python3
"""
DataStore Protocols - persistence contracts for the ledger.

The aggregator never touches files directly. It talks to collaborators that
load and save whole collections atomically from its point of view: load returns
everything, save overwrites everything and reports success as a boolean.
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, TypeVar

from .models import CategoryBudget, TransactionRecord

T = TypeVar("T")


class DataStore(Protocol[T]):
    """
    Protocol for whole-collection persistence plus metadata queries.

    Type parameter T is the collection type (list of records or budgets).
    """

    def exists(self) -> bool:
        """Check if the backing file exists."""
        ...

    def load(self) -> T:
        """
        Load the full collection.

        Returns:
            The stored collection (empty if nothing was stored yet)

        Raises:
            PersistenceFailure: If stored data cannot be read or parsed
        """
        ...

    def save(self, data: T) -> bool:
        """
        Overwrite storage with the full collection.

        Returns:
            True if written, False if the write failed (changes not durable)
        """
        ...

    def last_modified(self) -> datetime | None:
        """Get timestamp of the last write, or None if nothing is stored."""
        ...

    def age_days(self) -> int | None:
        """Get days since the last write, or None if nothing is stored."""
        ...

    def item_count(self) -> int | None:
        """Get number of stored items, or None if nothing is stored."""
        ...

    def size_bytes(self) -> int | None:
        """Get size of the backing file, or None if nothing is stored."""
        ...

    def summary_text(self) -> str:
        """Get a one-line human-readable description of the stored data."""
        ...


class TransactionPersistence(Protocol):
    """Collaborator the aggregator uses to persist transactions."""

    def load_transactions(self) -> list[TransactionRecord]: ...

    def save_transactions(self, records: Sequence[TransactionRecord]) -> bool: ...


class BudgetPersistence(Protocol):
    """Collaborator the aggregator uses to persist user-set budgets."""

    def load_budgets(self) -> list[CategoryBudget]: ...

    def save_budgets(self, budgets: Sequence[CategoryBudget]) -> bool: ...
