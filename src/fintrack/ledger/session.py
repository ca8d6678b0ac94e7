#!/usr/bin/env python3
"""
Ledger Session

Explicitly constructed aggregator/bus pair for one user's ledger. Everything
that reads or mutates financial data for the user goes through the session's
aggregator, and every read-model subscribes to the session's bus.
"""

import logging
from dataclasses import dataclass

from ..core.config import Config
from ..core.currency import CurrencySettings
from ..core.refresh import RefreshBus
from .aggregator import FinancialAggregator
from .allocation import policy_from_name
from .datastore import CsvBudgetStore, CsvTransactionStore

logger = logging.getLogger(__name__)


@dataclass
class LedgerSession:
    """A user's aggregator, refresh bus, file stores and display currency."""

    config: Config
    bus: RefreshBus
    aggregator: FinancialAggregator
    transaction_store: CsvTransactionStore
    budget_store: CsvBudgetStore
    currency: CurrencySettings

    @classmethod
    def open(cls, config: Config, load: bool = True) -> "LedgerSession":
        """
        Build the session from configuration and load persisted state.

        Args:
            config: Application configuration (storage paths, budget settings)
            load: Load stored budgets and transactions before returning

        Raises:
            PersistenceFailure: If a stored file exists but cannot be read
            ValueError: If the configured allocation policy is unknown or the
                currency settings are empty
        """
        bus = RefreshBus()
        transaction_store = CsvTransactionStore(config.storage.transactions_file)
        budget_store = CsvBudgetStore(config.storage.budgets_file)
        aggregator = FinancialAggregator(
            bus,
            budget_store=budget_store,
            transaction_store=transaction_store,
            allocation_policy=policy_from_name(config.budget.allocation_policy),
            monthly_budget=config.budget.monthly_budget,
        )
        session = cls(
            config=config,
            bus=bus,
            aggregator=aggregator,
            transaction_store=transaction_store,
            budget_store=budget_store,
            currency=CurrencySettings(bus, config.display.currency_code, config.display.currency_symbol),
        )
        if load:
            session.reload()
        return session

    def reload(self) -> None:
        """Reload budgets first so stored limits win over default allocations."""
        budgets = self.aggregator.load_budgets()
        transactions = self.aggregator.load_transactions()
        logger.info(
            "Opened ledger for %s: %d transactions, %d budgets",
            self.config.username,
            transactions,
            budgets,
        )

    def save(self) -> None:
        """
        Persist transactions and user-set budgets.

        Raises:
            PersistenceFailure: If either write failed
        """
        self.aggregator.save_transactions()
        self.aggregator.save_budgets()
