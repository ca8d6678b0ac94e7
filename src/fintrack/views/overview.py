#!/usr/bin/env python3
"""
Overview Read-Model

Dashboard figures for the current ledger: totals, savings, overall budget
usage and budget warnings. The view keeps no financial data of its own; on
every relevant refresh event it re-pulls a fresh snapshot from the aggregator.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from ..core.currency import DEFAULT_CURRENCY_SYMBOL, CurrencySettings, format_amount
from ..core.refresh import RefreshBus, RefreshEvent
from ..ledger.aggregator import FinancialAggregator

logger = logging.getLogger(__name__)

DEFAULT_WARNING_THRESHOLD = 90.0

OVERVIEW_EVENTS = frozenset(
    {RefreshEvent.TRANSACTIONS, RefreshEvent.BUDGETS, RefreshEvent.CURRENCY, RefreshEvent.ALL}
)


@dataclass(frozen=True)
class BudgetWarning:
    """A category, or the overall budget, at or above the warning threshold."""

    category: str | None
    percentage: float
    spent: Decimal
    limit: Decimal
    symbol: str = DEFAULT_CURRENCY_SYMBOL

    @property
    def is_overall(self) -> bool:
        return self.category is None

    @property
    def is_exceeded(self) -> bool:
        return self.percentage > 100.0

    def message(self) -> str:
        name = "Overall budget" if self.is_overall else f"Budget for {self.category}"
        state = "exceeded" if self.is_exceeded else "nearly used"
        spent = format_amount(self.spent, self.symbol)
        limit = format_amount(self.limit, self.symbol)
        return f"{name} {state}: {spent} of {limit} ({self.percentage:.1f}%)"


@dataclass(frozen=True)
class OverviewSnapshot:
    """Point-in-time dashboard figures."""

    total_income: Decimal
    total_expenses: Decimal
    total_savings: Decimal
    total_budget: Decimal
    overall_percentage: float
    transaction_count: int
    start_date: date | None = None
    end_date: date | None = None
    warnings: list[BudgetWarning] = field(default_factory=list)
    currency_code: str = "USD"

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "total_income": str(self.total_income),
            "total_expenses": str(self.total_expenses),
            "total_savings": str(self.total_savings),
            "total_budget": str(self.total_budget),
            "overall_percentage": round(self.overall_percentage, 2),
            "transaction_count": self.transaction_count,
            "currency": self.currency_code,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "warnings": [w.message() for w in self.warnings],
        }


class OverviewView:
    """Dashboard read-model subscribed to a ledger's refresh bus."""

    def __init__(
        self,
        aggregator: FinancialAggregator,
        bus: RefreshBus,
        warning_threshold: float = DEFAULT_WARNING_THRESHOLD,
        currency: CurrencySettings | None = None,
    ):
        self.aggregator = aggregator
        self.bus = bus
        self.warning_threshold = warning_threshold
        self.currency = currency or CurrencySettings()
        self.refresh_count = 0
        self._snapshot = self._build_snapshot()
        bus.subscribe(self.on_refresh)

    @property
    def snapshot(self) -> OverviewSnapshot:
        return self._snapshot

    def on_refresh(self, event: RefreshEvent) -> None:
        """Refresh listener; other event kinds do not affect the overview."""
        if event not in OVERVIEW_EVENTS:
            return
        self.refresh()

    def refresh(self) -> OverviewSnapshot:
        self._snapshot = self._build_snapshot()
        self.refresh_count += 1
        logger.debug("Overview refreshed (%d warnings)", len(self._snapshot.warnings))
        return self._snapshot

    def close(self) -> None:
        """Stop receiving refresh events."""
        self.bus.unsubscribe(self.on_refresh)

    def _build_snapshot(self) -> OverviewSnapshot:
        agg = self.aggregator
        return OverviewSnapshot(
            total_income=agg.get_total_income(),
            total_expenses=agg.get_total_expenses(),
            total_savings=agg.get_total_savings(),
            total_budget=agg.get_total_budget(),
            overall_percentage=agg.get_overall_budget_percentage(),
            transaction_count=agg.transaction_count,
            start_date=agg.get_start_date(),
            end_date=agg.get_end_date(),
            warnings=self._collect_warnings(),
            currency_code=self.currency.code,
        )

    def _collect_warnings(self) -> list[BudgetWarning]:
        agg = self.aggregator
        warnings = []
        for category in sorted(agg.get_category_budgets()):
            percentage = agg.get_category_percentage(category)
            if percentage >= self.warning_threshold:
                warnings.append(
                    BudgetWarning(
                        category=category,
                        percentage=percentage,
                        spent=agg.get_category_expense(category),
                        limit=agg.get_category_budget(category),
                        symbol=self.currency.symbol,
                    )
                )

        overall = agg.get_overall_budget_percentage()
        if overall >= self.warning_threshold:
            warnings.append(
                BudgetWarning(
                    category=None,
                    percentage=overall,
                    spent=agg.get_total_expenses(),
                    limit=agg.get_total_budget(),
                    symbol=self.currency.symbol,
                )
            )
        return warnings
