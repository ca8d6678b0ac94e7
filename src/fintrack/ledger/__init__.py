"""
Ledger Package

Authoritative in-memory financial state and its persistence.

Key Components:
- aggregator: transaction set, budgets and derived sums/percentages
- allocation: default budgets for categories without a user-set budget
- datastore: CSV stores for transactions and budgets
- session: aggregator/bus pair wired from configuration
"""

from .aggregator import AggregationError, FinancialAggregator, MergeResult
from .allocation import (
    BudgetAllocationPolicy,
    EvenSplitAllocation,
    NoAllocation,
    WeightedAllocation,
    policy_from_name,
)
from .datastore import CsvBudgetStore, CsvTransactionStore, PersistenceFailure
from .session import LedgerSession

__all__ = [
    "AggregationError",
    "BudgetAllocationPolicy",
    "CsvBudgetStore",
    "CsvTransactionStore",
    "EvenSplitAllocation",
    "FinancialAggregator",
    "LedgerSession",
    "MergeResult",
    "NoAllocation",
    "PersistenceFailure",
    "WeightedAllocation",
    "policy_from_name",
]
