"""
Pytest Configuration and Shared Fixtures

Provides common test fixtures and configuration for the entire test suite.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from fintrack.core import config as config_module
from fintrack.core.models import TransactionRecord
from fintrack.core.refresh import RefreshBus
from fintrack.ledger.aggregator import FinancialAggregator

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding synthetic CSV exports."""
    return FIXTURES_DIR


@pytest.fixture
def bank_csv_path() -> Path:
    """Synthetic bank export with signed amounts, a duplicate and two broken rows."""
    return FIXTURES_DIR / "bank_export.csv"


@pytest.fixture
def bank_csv_text(bank_csv_path) -> str:
    return bank_csv_path.read_text(encoding="utf-8")


@pytest.fixture
def wechat_csv_path() -> Path:
    """Synthetic WeChat Pay bill export with unsigned amounts and a 收/支 column."""
    return FIXTURES_DIR / "wechat_export.csv"


@pytest.fixture
def wechat_csv_text(wechat_csv_path) -> str:
    return wechat_csv_path.read_text(encoding="utf-8")


@pytest.fixture
def bus() -> RefreshBus:
    return RefreshBus()


@pytest.fixture
def aggregator(bus) -> FinancialAggregator:
    """Aggregator without persistence collaborators."""
    return FinancialAggregator(bus)


@pytest.fixture
def sample_records() -> list[TransactionRecord]:
    """Salary plus a handful of expenses across three categories."""
    return [
        TransactionRecord.create(date(2025, 3, 1), "Salary", "Income", Decimal("5000")),
        TransactionRecord.create(date(2025, 3, 2), "Supermarket", "Food", Decimal("-120.50")),
        TransactionRecord.create(date(2025, 3, 2), "Bakery", "Food", Decimal("-9.50")),
        TransactionRecord.create(date(2025, 3, 5), "Rent", "Housing", Decimal("-1500")),
        TransactionRecord.create(date(2025, 4, 9), "Cinema", "Entertainment", Decimal("-25")),
    ]


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Set up test environment variables."""
    # Ensure tests never touch a real ledger
    monkeypatch.setenv("FINTRACK_ENV", "test")
    monkeypatch.setenv("FINTRACK_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("FINTRACK_USER", "tester")

    # Pin every setting so a local .env cannot leak into tests
    monkeypatch.setenv("FINTRACK_DATE_FORMAT", "yyyy-MM-dd")
    monkeypatch.setenv("FINTRACK_CSV_ENCODING", "utf-8")
    monkeypatch.setenv("FINTRACK_MONTHLY_BUDGET", "4000")
    monkeypatch.setenv("FINTRACK_ALLOCATION", "even")
    monkeypatch.setenv("FINTRACK_WARNING_THRESHOLD", "90")
    monkeypatch.setenv("FINTRACK_CURRENCY_CODE", "USD")
    monkeypatch.setenv("FINTRACK_CURRENCY_SYMBOL", "$")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("DEBUG", "false")

    monkeypatch.setattr(config_module, "_config", None)


# Test markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests for complete workflows")
    config.addinivalue_line("markers", "currency: Tests for amount handling and precision")
    config.addinivalue_line("markers", "importer: Tests for CSV transaction import")
    config.addinivalue_line("markers", "ledger: Tests for the financial aggregator and persistence")
    config.addinivalue_line("markers", "refresh: Tests for refresh event propagation")
