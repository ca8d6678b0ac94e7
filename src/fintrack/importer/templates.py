#!/usr/bin/env python3
"""
Import Templates

Preset column mappings and sign policies for known export layouts.
"""

from dataclasses import dataclass

from .csv_importer import ColumnMapping, SignPolicy, parse_identifiers

DEFAULT_INCOME_IDENTIFIERS = "Income,Revenue,Deposit"
DEFAULT_EXPENSE_IDENTIFIERS = "Expense,Withdrawal,Debit"


@dataclass(frozen=True)
class ImportTemplate:
    """Named bundle of import settings."""

    name: str
    mapping: ColumnMapping
    sign_policy: SignPolicy
    date_format: str = "yyyy-MM-dd"


CUSTOM = ImportTemplate(
    name="Custom",
    mapping=ColumnMapping(date="Date", description="Description", category="Category", amount="Amount"),
    sign_policy=SignPolicy.already_signed(),
)

# WeChat Pay bill export: amounts are unsigned, 收/支 says which way money moved
WECHAT_PAY = ImportTemplate(
    name="WeChat Pay",
    mapping=ColumnMapping(
        date="交易时间",
        description="商品",
        category=None,
        amount="金额(元)",
        type_column="收/支",
    ),
    sign_policy=SignPolicy.from_type_column(expense_identifiers={"支出"}, income_identifiers={"收入"}),
    date_format="yyyy-MM-dd HH:mm:ss",
)

TEMPLATES: dict[str, ImportTemplate] = {
    "custom": CUSTOM,
    "wechat-pay": WECHAT_PAY,
}


def get_template(key: str) -> ImportTemplate:
    """
    Look up a template by key ("custom", "wechat-pay") or display name.

    Raises:
        KeyError: If no template matches
    """
    normalized = key.strip().lower()
    if normalized in TEMPLATES:
        return TEMPLATES[normalized]
    for template in TEMPLATES.values():
        if template.name.lower() == normalized:
            return template
    raise KeyError(f"Unknown import template: {key}")


def default_type_policy(
    expense_identifiers: str | None = None,
    income_identifiers: str | None = None,
) -> SignPolicy:
    """Type-column policy with the generic English identifiers unless overridden."""
    return SignPolicy.from_type_column(
        expense_identifiers=parse_identifiers(expense_identifiers or DEFAULT_EXPENSE_IDENTIFIERS),
        income_identifiers=parse_identifiers(income_identifiers or DEFAULT_INCOME_IDENTIFIERS),
    )
