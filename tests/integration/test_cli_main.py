#!/usr/bin/env python3
"""
Integration tests for CLI Main Entry Point

Tests end-to-end CLI command execution with real command invocation.
"""

import json

import pytest
from click.testing import CliRunner

from fintrack.cli.main import main


@pytest.mark.integration
class TestCLIMainIntegration:
    """Test main CLI entry point with real command execution."""

    def setup_method(self):
        """Set up test environment."""
        self.runner = CliRunner()

    def test_help_command_lists_all_subcommands(self):
        result = self.runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Personal Finance Tracker" in result.output
        for command in ["version", "config", "import", "summary", "budget", "report"]:
            assert command in result.output

    def test_version_command_shows_version_info(self):
        result = self.runner.invoke(main, ["version"])

        assert result.exit_code == 0
        assert "fintrack v" in result.output
        assert "Author:" in result.output

    def test_config_command_shows_configuration(self):
        result = self.runner.invoke(main, ["config"])

        assert result.exit_code == 0
        assert "Current Configuration:" in result.output
        assert "Environment: test" in result.output
        assert "User: tester" in result.output
        assert "user_bill.csv" in result.output
        assert "Allocation Policy: even" in result.output

    def test_verbose_flag_enables_verbose_output(self):
        result = self.runner.invoke(main, ["--verbose", "config"])

        assert result.exit_code == 0
        assert "User directory:" in result.output

    def test_invalid_configuration_is_reported(self, monkeypatch):
        monkeypatch.setenv("FINTRACK_ALLOCATION", "random")
        result = self.runner.invoke(main, ["config"])

        assert result.exit_code != 0
        assert "FINTRACK_ALLOCATION" in result.output

    def test_invalid_command_shows_error(self):
        result = self.runner.invoke(main, ["invalid-command"])

        assert result.exit_code != 0
        assert "No such command" in result.output

    def test_summary_on_empty_ledger(self):
        result = self.runner.invoke(main, ["summary", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["transaction_count"] == 0
        assert data["overall_percentage"] == 0.0


@pytest.mark.integration
class TestBudgetCommands:
    """Test the budget command group."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_set_list_delete(self):
        result = self.runner.invoke(main, ["budget", "set", "Food", "800"])
        assert result.exit_code == 0, result.output
        assert "Budget for Food set to $800.00" in result.output

        result = self.runner.invoke(main, ["budget", "list"])
        assert result.exit_code == 0
        assert "Food" in result.output
        assert "$800.00" in result.output

        result = self.runner.invoke(main, ["budget", "delete", "Food"])
        assert result.exit_code == 0
        assert "removed" in result.output

        result = self.runner.invoke(main, ["budget", "list"])
        assert "No budgets set" in result.output

    def test_set_with_dates(self):
        result = self.runner.invoke(
            main, ["budget", "set", "Travel", "2500", "--start", "2025-06-01", "--end", "2025-08-31"]
        )
        assert result.exit_code == 0, result.output

    def test_negative_limit_rejected(self):
        result = self.runner.invoke(main, ["budget", "set", "Food", "--", "-5"])

        assert result.exit_code != 0
        assert "non-negative" in result.output

    def test_delete_unknown_budget(self):
        result = self.runner.invoke(main, ["budget", "delete", "Nothing"])

        assert result.exit_code != 0
        assert "No budget for Nothing" in result.output
