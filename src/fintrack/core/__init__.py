"""
Core Utilities Package

Shared data models and utilities used by the importer, ledger and views.

This package provides:
- Decimal amount parsing and formatting
- Date resolution over an ordered list of candidate formats
- Transaction and budget records
- The refresh bus that keeps read-models in step with the ledger
- Configuration management for environment-specific settings
"""

from .config import Config, Environment, get_config, reload_config
from .currency import CurrencySettings, format_amount, parse_amount, safe_percentage, sum_amounts, to_decimal
from .dates import DateFormatResolver, DateParseError, EmptyInput, FormatError, parse_date
from .models import UNCATEGORISED, CategoryBudget, TransactionRecord, TransactionType
from .refresh import RefreshBus, RefreshEvent

__all__ = [
    # Configuration
    "Config",
    "Environment",
    "get_config",
    "reload_config",
    # Currency utilities
    "CurrencySettings",
    "format_amount",
    "parse_amount",
    "safe_percentage",
    "sum_amounts",
    "to_decimal",
    # Dates
    "DateFormatResolver",
    "DateParseError",
    "EmptyInput",
    "FormatError",
    "parse_date",
    # Data models
    "UNCATEGORISED",
    "CategoryBudget",
    "TransactionRecord",
    "TransactionType",
    # Refresh
    "RefreshBus",
    "RefreshEvent",
]
