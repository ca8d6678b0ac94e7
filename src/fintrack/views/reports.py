#!/usr/bin/env python3
"""
Reports Read-Model

Tabular summaries of the ledger as pandas DataFrames. Frames are built lazily
from the aggregator and cached until a refresh event invalidates them.

Amounts are converted to float here because the frames are for display only;
the aggregator keeps exact Decimal values.
"""

import logging

import pandas as pd

from ..core.currency import ZERO
from ..core.refresh import RefreshBus, RefreshEvent
from ..ledger.aggregator import FinancialAggregator

logger = logging.getLogger(__name__)

MONTHLY_COLUMNS = ["Month", "Income", "Expenses", "Net"]
CATEGORY_COLUMNS = ["Category", "Spent", "Budget", "Percentage", "IsDefault"]


class ReportsView:
    """Monthly and per-category report tables for one ledger."""

    def __init__(self, aggregator: FinancialAggregator, bus: RefreshBus):
        self.aggregator = aggregator
        self.bus = bus
        self._monthly: pd.DataFrame | None = None
        self._categories: pd.DataFrame | None = None
        bus.subscribe(self.on_refresh)

    @property
    def is_stale(self) -> bool:
        return self._monthly is None or self._categories is None

    def on_refresh(self, event: RefreshEvent) -> None:
        if event in (RefreshEvent.TRANSACTIONS, RefreshEvent.ALL):
            self._monthly = None
            self._categories = None
        elif event == RefreshEvent.BUDGETS:
            self._categories = None

    def close(self) -> None:
        self.bus.unsubscribe(self.on_refresh)

    def monthly_summary(self) -> pd.DataFrame:
        """
        Income, expenses and net per calendar month.

        Returns:
            DataFrame with columns Month (YYYY-MM), Income, Expenses, Net,
            ascending by month; empty when there are no transactions
        """
        if self._monthly is None:
            self._monthly = self._build_monthly()
        return self._monthly.copy()

    def category_breakdown(self) -> pd.DataFrame:
        """
        Spending against budget per category.

        Returns:
            DataFrame with columns Category, Spent, Budget, Percentage, IsDefault,
            largest spend first; includes budgeted categories without spending
        """
        if self._categories is None:
            self._categories = self._build_categories()
        return self._categories.copy()

    def _build_monthly(self) -> pd.DataFrame:
        dates = self.aggregator.get_dates()
        if not dates:
            return pd.DataFrame(columns=MONTHLY_COLUMNS)

        incomes = self.aggregator.get_daily_incomes()
        expenses = self.aggregator.get_daily_expenses()
        daily = pd.DataFrame(
            {
                "Date": pd.to_datetime(dates),
                "Income": [float(incomes.get(d, ZERO)) for d in dates],
                "Expenses": [float(expenses.get(d, ZERO)) for d in dates],
            }
        )
        daily["Month"] = daily["Date"].dt.strftime("%Y-%m")

        monthly = daily.groupby("Month", as_index=False)[["Income", "Expenses"]].sum()
        monthly["Net"] = monthly["Income"] - monthly["Expenses"]
        logger.debug("Built monthly summary for %d months", len(monthly))
        return monthly[MONTHLY_COLUMNS].round(2)

    def _build_categories(self) -> pd.DataFrame:
        budgets = self.aggregator.get_category_budgets()
        spent = self.aggregator.get_category_expenses()
        categories = sorted(set(budgets) | set(spent))
        if not categories:
            return pd.DataFrame(columns=CATEGORY_COLUMNS)

        rows = []
        for category in categories:
            budget = budgets.get(category)
            rows.append(
                {
                    "Category": category,
                    "Spent": float(spent.get(category, ZERO)),
                    "Budget": float(budget.limit) if budget else 0.0,
                    "Percentage": round(self.aggregator.get_category_percentage(category), 2),
                    "IsDefault": bool(budget.is_default) if budget else False,
                }
            )

        frame = pd.DataFrame(rows, columns=CATEGORY_COLUMNS)
        frame = frame.sort_values(["Spent", "Category"], ascending=[False, True], kind="stable")
        return frame.reset_index(drop=True)
