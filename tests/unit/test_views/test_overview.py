#!/usr/bin/env python3
"""Tests for the overview read-model."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.core.models import TransactionRecord
from fintrack.core.refresh import RefreshEvent
from fintrack.ledger import FinancialAggregator, NoAllocation
from fintrack.views import OverviewView


def spend(day: int, category: str, amount: str) -> TransactionRecord:
    return TransactionRecord.create(date(2025, 5, day), f"{category} purchase", category, Decimal(amount))


@pytest.mark.refresh
class TestOverviewView:
    def setup_method(self):
        from fintrack.core.refresh import RefreshBus

        self.bus = RefreshBus()
        self.aggregator = FinancialAggregator(self.bus, allocation_policy=NoAllocation())
        self.view = OverviewView(self.aggregator, self.bus, warning_threshold=90.0)

    def test_initial_snapshot_is_empty(self):
        snapshot = self.view.snapshot

        assert snapshot.total_income == Decimal("0")
        assert snapshot.transaction_count == 0
        assert snapshot.warnings == []
        assert snapshot.start_date is None

    def test_refreshes_on_import(self):
        self.aggregator.import_transactions([spend(1, "Food", "-50")])

        assert self.view.refresh_count == 1
        assert self.view.snapshot.total_expenses == Decimal("50")
        assert self.view.snapshot.transaction_count == 1

    def test_refreshes_on_budget_change(self):
        self.aggregator.import_transactions([spend(1, "Food", "-95")])
        self.aggregator.update_category_budget("Food", 100)

        snapshot = self.view.snapshot
        assert self.view.refresh_count == 2
        assert snapshot.overall_percentage == 95.0
        assert [w.category for w in snapshot.warnings] == ["Food", None]
        assert "Budget for Food nearly used" in snapshot.warnings[0].message()
        assert snapshot.warnings[1].is_overall

    def test_exceeded_budget_message(self):
        self.aggregator.update_category_budget("Food", 100)
        self.aggregator.import_transactions([spend(1, "Food", "-150")])

        warning = self.view.snapshot.warnings[0]
        assert warning.is_exceeded
        assert warning.message() == "Budget for Food exceeded: $150.00 of $100.00 (150.0%)"

    def test_below_threshold_has_no_warning(self):
        self.aggregator.update_category_budget("Food", 100)
        self.aggregator.import_transactions([spend(1, "Food", "-89.99")])

        assert self.view.snapshot.warnings == []

    def test_ignores_unrelated_events(self):
        self.bus.publish(RefreshEvent.SETTINGS)
        self.bus.publish(RefreshEvent.ADVICE)

        assert self.view.refresh_count == 0

    def test_close_unsubscribes(self):
        self.view.close()
        self.aggregator.import_transactions([spend(1, "Food", "-50")])

        assert self.view.refresh_count == 0
        assert self.bus.subscriber_count == 0

    def test_to_dict(self):
        self.aggregator.import_transactions([spend(1, "Food", "-50"), spend(3, "Pay", "1000")])
        data = self.view.snapshot.to_dict()

        assert data["total_savings"] == "950"
        assert data["start_date"] == "2025-05-01"
        assert data["end_date"] == "2025-05-03"
        assert data["warnings"] == []
        assert data["currency"] == "USD"

    def test_currency_change_rerenders_warnings(self):
        from fintrack.core.currency import CurrencySettings

        currency = CurrencySettings(self.bus)
        view = OverviewView(self.aggregator, self.bus, warning_threshold=90.0, currency=currency)
        self.aggregator.update_category_budget("Food", 100)
        self.aggregator.import_transactions([spend(1, "Food", "-150")])
        refreshes = view.refresh_count

        currency.set_currency("CNY", "¥")

        assert view.refresh_count == refreshes + 1
        assert view.snapshot.currency_code == "CNY"
        assert view.snapshot.warnings[0].message() == "Budget for Food exceeded: ¥150.00 of ¥100.00 (150.0%)"
        view.close()
