"""
Transaction Import Package

Converts raw bank and payment-provider CSV exports into TransactionRecords.

Key Components:
- csv_importer: column mapping, sign resolution, in-batch deduplication
- templates: preset settings for known export layouts (WeChat Pay)
"""

from .csv_importer import (
    ColumnMapping,
    ConfigurationError,
    CsvTransactionImporter,
    ImportResult,
    ImportWarning,
    SignMode,
    SignPolicy,
    SkipKind,
    SkipReason,
    import_transactions,
    parse_identifiers,
)
from .templates import CUSTOM, WECHAT_PAY, ImportTemplate, default_type_policy, get_template

__all__ = [
    "CUSTOM",
    "ColumnMapping",
    "ConfigurationError",
    "CsvTransactionImporter",
    "ImportResult",
    "ImportTemplate",
    "ImportWarning",
    "SignMode",
    "SignPolicy",
    "SkipKind",
    "SkipReason",
    "WECHAT_PAY",
    "default_type_policy",
    "get_template",
    "import_transactions",
    "parse_identifiers",
]
