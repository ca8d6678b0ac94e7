#!/usr/bin/env python3
"""Tests for environment-based configuration."""

from decimal import Decimal
from pathlib import Path

import pytest

from fintrack.core.config import Config, Environment, get_config, reload_config


class TestConfigFromEnvironment:
    """Test configuration loading from environment variables."""

    def test_test_environment_defaults(self, tmp_path):
        config = Config.from_environment()

        assert config.environment == Environment.TEST
        assert config.username == "tester"
        assert config.data_dir == tmp_path / "data"
        assert config.storage.user_dir == tmp_path / "data" / "users" / "tester"
        assert config.storage.user_dir.is_dir()
        assert config.storage.transactions_file.name == "user_bill.csv"
        assert config.storage.budgets_file.name == "user_budgets.csv"
        assert config.budget.monthly_budget == Decimal("4000")
        assert config.budget.allocation_policy == "even"
        assert config.budget.warning_threshold == 90.0
        assert config.importing.date_format == "yyyy-MM-dd"
        assert config.display.currency_code == "USD"
        assert config.display.currency_symbol == "$"
        assert config.validate() == []

    def test_users_get_separate_directories(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FINTRACK_USER", "alex")
        config = Config.from_environment()

        assert config.storage.user_dir == tmp_path / "data" / "users" / "alex"

    def test_budget_settings_are_read(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_MONTHLY_BUDGET", "2500.50")
        monkeypatch.setenv("FINTRACK_ALLOCATION", "Weighted")
        monkeypatch.setenv("FINTRACK_WARNING_THRESHOLD", "75")

        config = Config.from_environment()
        assert config.budget.monthly_budget == Decimal("2500.50")
        assert config.budget.allocation_policy == "weighted"
        assert config.budget.warning_threshold == 75.0

    def test_currency_settings_are_read(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_CURRENCY_CODE", " cny ")
        monkeypatch.setenv("FINTRACK_CURRENCY_SYMBOL", "¥")

        config = Config.from_environment()
        assert config.display.currency_code == "CNY"
        assert config.display.currency_symbol == "¥"

    def test_empty_currency_symbol_is_invalid(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_CURRENCY_SYMBOL", "  ")

        errors = Config.from_environment().validate()
        assert any("FINTRACK_CURRENCY_SYMBOL" in e for e in errors)

    def test_validate_reports_bad_values(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_MONTHLY_BUDGET", "lots")
        monkeypatch.setenv("FINTRACK_ALLOCATION", "random")

        errors = Config.from_environment().validate()
        assert any("FINTRACK_MONTHLY_BUDGET" in e for e in errors)
        assert any("FINTRACK_ALLOCATION" in e for e in errors)

    def test_get_config_raises_on_invalid_configuration(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_ALLOCATION", "random")
        with pytest.raises(ValueError, match="Configuration validation failed"):
            reload_config()

    def test_get_config_is_cached(self):
        assert get_config() is get_config()
        assert reload_config() is not None

    def test_to_dict_is_display_friendly(self):
        data = get_config().to_dict()

        assert data["environment"] == "test"
        assert isinstance(data["data_dir"], str)
        assert data["budget"]["monthly_budget"] == "4000"
        assert data["display"] == {"currency_code": "USD", "currency_symbol": "$"}
        assert isinstance(data["storage"]["user_dir"], str)
        assert not isinstance(data["storage"]["user_dir"], Path)
