#!/usr/bin/env python3
"""
Financial Aggregator

Owns the authoritative in-memory transaction set and category-budget map, and
derives daily/category sums, totals and budget-usage percentages from them.

Every mutation publishes a RefreshEvent on the bus it was constructed with;
read-models re-query the getters instead of receiving pushed data.

Derivation rules:
- amount < 0 contributes abs(amount) to that date's and category's expenses
- amount >= 0 contributes to income sums
- every expense category has a budget entry; missing ones get a default
  allocation from the configured BudgetAllocationPolicy
"""

import logging
import threading
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from ..core.currency import ZERO, safe_percentage, sum_amounts, to_decimal
from ..core.datastore import BudgetPersistence, TransactionPersistence
from ..core.models import CategoryBudget, DedupKey, TransactionRecord
from ..core.refresh import RefreshBus, RefreshEvent
from .allocation import BudgetAllocationPolicy, EvenSplitAllocation
from .datastore import PersistenceFailure

logger = logging.getLogger(__name__)

DEFAULT_MONTHLY_BUDGET = Decimal("4000")
DAYS_PER_BUDGET_MONTH = 30


class AggregationError(Exception):
    """Raised when a malformed transaction reaches the aggregator."""

    def __init__(self, message: str, index: int | None = None, value: Any = None):
        self.index = index
        self.value = value
        super().__init__(message)


@dataclass
class MergeResult:
    """Outcome of merging a batch into the transaction set."""

    added: list[TransactionRecord] = field(default_factory=list)
    duplicates: list[TransactionRecord] = field(default_factory=list)

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicates)


TransactionLike = TransactionRecord | tuple


class FinancialAggregator:
    """
    Authoritative transaction set and budget map with derived summaries.

    Not designed for unsynchronized use from several threads; an internal
    re-entrant lock serializes calls so hosts that do use threads stay
    consistent. Events are published after the lock is released.
    """

    def __init__(
        self,
        bus: RefreshBus,
        budget_store: BudgetPersistence | None = None,
        transaction_store: TransactionPersistence | None = None,
        allocation_policy: BudgetAllocationPolicy | None = None,
        monthly_budget: Decimal = DEFAULT_MONTHLY_BUDGET,
    ):
        self.bus = bus
        self.budget_store = budget_store
        self.transaction_store = transaction_store
        self.allocation_policy = allocation_policy or EvenSplitAllocation()
        self.monthly_budget = to_decimal(monthly_budget)

        self._lock = threading.RLock()
        self._transactions: list[TransactionRecord] = []
        self._keys: set[DedupKey] = set()
        self._budgets: dict[str, CategoryBudget] = {}

        self._daily_incomes: dict[date, Decimal] = {}
        self._daily_expenses: dict[date, Decimal] = {}
        self._category_incomes: dict[str, Decimal] = {}
        self._category_expenses: dict[str, Decimal] = {}

    # ------------------------------------------------------------------
    # Transactions

    def import_transactions(self, records: Iterable[TransactionLike]) -> MergeResult:
        """
        Merge records into the transaction set.

        Records whose dedup key is already held are skipped. The whole batch is
        validated before anything is merged, so a malformed record leaves the
        aggregator untouched.

        Args:
            records: TransactionRecords or (date, description, category, amount) tuples

        Returns:
            MergeResult listing added and duplicate records

        Raises:
            AggregationError: If any record has a non-numeric amount or invalid date
        """
        batch = [_coerce_record(item, index) for index, item in enumerate(records)]

        result = MergeResult()
        with self._lock:
            for record in batch:
                key = record.dedup_key
                if key in self._keys:
                    result.duplicates.append(record)
                    continue
                self._keys.add(key)
                self._transactions.append(record)
                result.added.append(record)

            self._rebuild_indices()

        logger.info(
            "Merged %d transactions (%d duplicates skipped), %d held",
            result.added_count,
            result.duplicate_count,
            self.transaction_count,
        )
        self.bus.publish(RefreshEvent.TRANSACTIONS)
        return result

    def load_transactions(self) -> int:
        """
        Replace the transaction set with the stored one.

        Returns:
            Number of transactions held after loading

        Raises:
            PersistenceFailure: If no store is attached or the store cannot load;
                in-memory state is unchanged in that case
            AggregationError: If the store returned malformed records
        """
        store = self._require_store(self.transaction_store, "transaction")
        loaded = [_coerce_record(item, index) for index, item in enumerate(store.load_transactions())]

        with self._lock:
            self._transactions = []
            self._keys = set()
            for record in loaded:
                if record.dedup_key not in self._keys:
                    self._keys.add(record.dedup_key)
                    self._transactions.append(record)
            self._rebuild_indices()
            count = len(self._transactions)

        self.bus.publish(RefreshEvent.TRANSACTIONS)
        return count

    def save_transactions(self) -> None:
        """
        Persist the transaction set.

        Raises:
            PersistenceFailure: If no store is attached or the write failed
        """
        store = self._require_store(self.transaction_store, "transaction")
        with self._lock:
            snapshot = list(self._transactions)
        if not store.save_transactions(snapshot):
            raise PersistenceFailure("Transactions were not saved; changes are not durable")

    # ------------------------------------------------------------------
    # Budgets

    def update_category_budget(
        self,
        category: str,
        limit: Decimal | int | float | str,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> CategoryBudget:
        """
        Create or replace the user budget for a category.

        The in-memory change is kept and published even if persisting fails.

        Returns:
            The stored CategoryBudget

        Raises:
            ValueError: If category is empty or limit is negative/non-numeric
            PersistenceFailure: If a budget store is attached and the save failed
        """
        budget = CategoryBudget(
            category=(category or "").strip(),
            limit=_parse_limit(limit),
            start_date=start_date,
            end_date=end_date,
        )
        with self._lock:
            self._budgets[budget.category] = budget
            saved = self._persist_budgets()

        logger.info("Budget for %s set to %s", budget.category, budget.limit)
        self.bus.publish(RefreshEvent.BUDGETS)
        if not saved:
            raise PersistenceFailure(f"Budget for {budget.category} updated in memory but not saved")
        return budget

    def delete_category_budget(self, category: str) -> bool:
        """
        Remove the budget for a category.

        A category that still has expenses immediately receives a default
        allocation again, so percentages stay defined.

        Returns:
            True if a budget existed and was removed, False otherwise

        Raises:
            PersistenceFailure: If a budget store is attached and the save failed
        """
        category = (category or "").strip()
        with self._lock:
            if category not in self._budgets:
                return False
            del self._budgets[category]
            self._apply_default_allocations()
            saved = self._persist_budgets()

        logger.info("Budget for %s deleted", category)
        self.bus.publish(RefreshEvent.BUDGETS)
        if not saved:
            raise PersistenceFailure(f"Budget for {category} deleted in memory but not saved")
        return True

    def load_budgets(self) -> int:
        """
        Replace user budgets with the stored ones.

        Returns:
            Number of budgets loaded from the store

        Raises:
            PersistenceFailure: If no store is attached or the store cannot load;
                in-memory state is unchanged in that case
        """
        store = self._require_store(self.budget_store, "budget")
        loaded = store.load_budgets()

        with self._lock:
            self._budgets = {b.category: b for b in loaded}
            self._apply_default_allocations()

        self.bus.publish(RefreshEvent.BUDGETS)
        return len(loaded)

    def save_budgets(self) -> None:
        """
        Persist user-set budgets.

        Raises:
            PersistenceFailure: If no store is attached or the write failed
        """
        self._require_store(self.budget_store, "budget")
        with self._lock:
            saved = self._persist_budgets()
        if not saved:
            raise PersistenceFailure("Budgets were not saved; changes are not durable")

    # ------------------------------------------------------------------
    # Derived data

    def get_transactions(self) -> list[TransactionRecord]:
        with self._lock:
            return list(self._transactions)

    @property
    def transaction_count(self) -> int:
        return len(self._transactions)

    def get_daily_incomes(self) -> dict[date, Decimal]:
        with self._lock:
            return dict(self._daily_incomes)

    def get_daily_expenses(self) -> dict[date, Decimal]:
        with self._lock:
            return dict(self._daily_expenses)

    def get_category_incomes(self) -> dict[str, Decimal]:
        with self._lock:
            return dict(self._category_incomes)

    def get_category_expenses(self) -> dict[str, Decimal]:
        with self._lock:
            return dict(self._category_expenses)

    def get_category_expense(self, category: str) -> Decimal:
        with self._lock:
            return self._category_expenses.get(category, ZERO)

    def get_total_income(self) -> Decimal:
        with self._lock:
            return sum_amounts(self._daily_incomes.values())

    def get_total_expenses(self) -> Decimal:
        with self._lock:
            return sum_amounts(self._daily_expenses.values())

    def get_total_savings(self) -> Decimal:
        """Get total income minus total expenses."""
        with self._lock:
            return self.get_total_income() - self.get_total_expenses()

    def get_category_budgets(self) -> dict[str, CategoryBudget]:
        with self._lock:
            return dict(self._budgets)

    def get_category_budget(self, category: str) -> Decimal:
        """Get the budget limit for a category (0 when it has none)."""
        with self._lock:
            budget = self._budgets.get(category)
            return budget.limit if budget else ZERO

    def get_total_budget(self) -> Decimal:
        """Sum of all category budgets; a display total, never enforced."""
        with self._lock:
            return sum_amounts(b.limit for b in self._budgets.values())

    def get_category_percentage(self, category: str) -> float:
        """
        Get expense / budget * 100 for a category.

        Returns 0.0 when the category has no budget or a zero budget.
        """
        with self._lock:
            return safe_percentage(self.get_category_expense(category), self.get_category_budget(category))

    def get_overall_budget_percentage(self) -> float:
        """Get total expenses / total budgets * 100, or 0.0 without budgets."""
        with self._lock:
            return safe_percentage(self.get_total_expenses(), self.get_total_budget())

    def get_dates(self) -> list[date]:
        """Get every date with at least one transaction, ascending."""
        with self._lock:
            return sorted(set(self._daily_incomes) | set(self._daily_expenses))

    def get_start_date(self) -> date | None:
        dates = self.get_dates()
        return dates[0] if dates else None

    def get_end_date(self) -> date | None:
        dates = self.get_dates()
        return dates[-1] if dates else None

    def get_monthly_budget(self) -> Decimal:
        """Nominal monthly total used for default allocations."""
        return self.monthly_budget

    def get_daily_budget(self) -> Decimal:
        return (self.monthly_budget / DAYS_PER_BUDGET_MONTH).quantize(Decimal("0.01"))

    # ------------------------------------------------------------------
    # Internals

    def _rebuild_indices(self) -> None:
        daily_incomes: dict[date, Decimal] = defaultdict(lambda: ZERO)
        daily_expenses: dict[date, Decimal] = defaultdict(lambda: ZERO)
        category_incomes: dict[str, Decimal] = defaultdict(lambda: ZERO)
        category_expenses: dict[str, Decimal] = defaultdict(lambda: ZERO)

        for record in self._transactions:
            if record.is_expense:
                spent = abs(record.amount)
                daily_expenses[record.date] += spent
                category_expenses[record.category] += spent
            else:
                daily_incomes[record.date] += record.amount
                category_incomes[record.category] += record.amount

        self._daily_incomes = dict(sorted(daily_incomes.items()))
        self._daily_expenses = dict(sorted(daily_expenses.items()))
        self._category_incomes = dict(category_incomes)
        self._category_expenses = dict(category_expenses)

        self._apply_default_allocations()

    def _apply_default_allocations(self) -> None:
        observed = list(self._category_expenses)
        missing = [c for c in observed if c not in self._budgets]
        if not missing:
            return

        allocations = self.allocation_policy.allocate(missing, observed, self.monthly_budget)
        for category in missing:
            limit = allocations.get(category, ZERO)
            self._budgets[category] = CategoryBudget(category=category, limit=max(limit, ZERO), is_default=True)
        logger.debug("Allocated default budgets for %s", ", ".join(missing))

    def _persist_budgets(self) -> bool:
        if self.budget_store is None:
            return True
        user_budgets = [b for b in self._budgets.values() if not b.is_default]
        return self.budget_store.save_budgets(user_budgets)

    @staticmethod
    def _require_store(store: Any, name: str) -> Any:
        if store is None:
            raise PersistenceFailure(f"No {name} store is attached")
        return store


def _parse_limit(limit: Decimal | int | float | str) -> Decimal:
    if isinstance(limit, str):
        try:
            return to_decimal(Decimal(limit.strip()))
        except ArithmeticError as e:
            raise ValueError(f"Budget limit must be a number, got '{limit}'") from e
    try:
        return to_decimal(limit)
    except TypeError as e:
        raise ValueError(str(e)) from e


def _coerce_record(item: TransactionLike, index: int) -> TransactionRecord:
    """Validate one incoming transaction without coercing bad values."""
    if isinstance(item, TransactionRecord):
        raw_date, description, category, amount = item.date, item.description, item.category, item.amount
    elif isinstance(item, Sequence) and not isinstance(item, str) and len(item) == 4:
        raw_date, description, category, amount = item
    else:
        raise AggregationError(f"Transaction {index} is not a record or 4-tuple: {item!r}", index, item)

    try:
        decimal_amount = to_decimal(amount)
    except (TypeError, ValueError) as e:
        raise AggregationError(f"Transaction {index} has a malformed amount: {e}", index, amount) from e

    if isinstance(raw_date, str):
        try:
            raw_date = date.fromisoformat(raw_date.strip())
        except ValueError as e:
            raise AggregationError(f"Transaction {index} has a malformed date: {raw_date!r}", index, raw_date) from e
    if not isinstance(raw_date, date):
        raise AggregationError(f"Transaction {index} has a malformed date: {raw_date!r}", index, raw_date)

    return TransactionRecord.create(
        date=raw_date,
        description=description if isinstance(description, str) else str(description or ""),
        category=category if isinstance(category, str) else str(category or ""),
        amount=decimal_amount,
    )
