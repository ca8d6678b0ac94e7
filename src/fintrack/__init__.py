"""
fintrack - Personal Finance Tracker

Data layer for a personal finance tracker: imports bank and payment-provider
CSV exports, keeps a deduplicated ledger with per-day and per-category sums,
tracks category budgets, and tells every open view when to refresh.

Key Features:
- CSV import with flexible column mapping and date format fallback
- Sign resolution from income/expense type columns (WeChat Pay template)
- Budget usage percentages with automatic default allocations
- Refresh bus that never recurses and isolates failing listeners

Domain Packages:
- core: Currency handling, dates, data models, refresh bus, configuration
- importer: CSV import and export templates
- ledger: Financial aggregator, persistence, sessions
- views: Overview and report read-models
- cli: Command-line interface

Example Usage:
    from fintrack.core.refresh import RefreshBus
    from fintrack.ledger import FinancialAggregator
    from fintrack.importer import CUSTOM, import_transactions
"""

__version__ = "0.1.0"
__author__ = "fintrack contributors"

from .core.config import Environment, get_config
from .core.models import CategoryBudget, TransactionRecord
from .core.refresh import RefreshBus, RefreshEvent

__all__ = [
    # Core models
    "CategoryBudget",
    "TransactionRecord",
    # Refresh
    "RefreshBus",
    "RefreshEvent",
    # Configuration
    "get_config",
    "Environment",
]
