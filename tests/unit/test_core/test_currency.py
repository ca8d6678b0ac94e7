#!/usr/bin/env python3
"""Tests for amount parsing and formatting utilities."""

from decimal import Decimal

import pytest

from fintrack.core.currency import (
    ZERO,
    CurrencySettings,
    clean_amount_text,
    format_amount,
    parse_amount,
    safe_percentage,
    sum_amounts,
    to_decimal,
)
from fintrack.core.refresh import RefreshBus, RefreshEvent


class TestParseAmount:
    """Test parsing amounts out of raw export text."""

    @pytest.mark.currency
    def test_strips_currency_symbols_and_separators(self):
        assert parse_amount("¥1,234.56") == Decimal("1234.56")
        assert parse_amount("$45.99") == Decimal("45.99")
        assert parse_amount(" 1 200 ") == Decimal("1200")

    @pytest.mark.currency
    def test_preserves_sign(self):
        assert parse_amount("-45.99") == Decimal("-45.99")
        assert parse_amount("-$3.50") == Decimal("-3.50")

    @pytest.mark.currency
    def test_rejects_text_without_digits(self):
        with pytest.raises(ValueError):
            parse_amount("")
        with pytest.raises(ValueError):
            parse_amount("FREE")

    @pytest.mark.currency
    def test_rejects_malformed_remainder(self):
        """Stray minus signs or multiple points do not become a number."""
        with pytest.raises(ValueError):
            parse_amount("1.2.3")
        with pytest.raises(ValueError):
            parse_amount("12-5")

    @pytest.mark.currency
    def test_clean_amount_text(self):
        assert clean_amount_text("¥1,234.56") == "1234.56"
        assert clean_amount_text("-$45.99") == "-45.99"
        assert clean_amount_text(None) == ""


class TestToDecimal:
    """Test strict numeric conversion used by the aggregator."""

    @pytest.mark.currency
    def test_converts_numbers(self):
        assert to_decimal(5000) == Decimal("5000")
        assert to_decimal(5000.0) == Decimal("5000.0")
        assert to_decimal(Decimal("-200")) == Decimal("-200")
        assert to_decimal(0.1) == Decimal("0.1")

    @pytest.mark.currency
    def test_rejects_text_and_bool(self):
        with pytest.raises(TypeError):
            to_decimal("12.00")
        with pytest.raises(TypeError):
            to_decimal(True)
        with pytest.raises(TypeError):
            to_decimal(None)

    @pytest.mark.currency
    def test_rejects_non_finite(self):
        with pytest.raises(ValueError):
            to_decimal(float("nan"))
        with pytest.raises(ValueError):
            to_decimal(Decimal("Infinity"))


class TestArithmeticHelpers:
    """Test sums, percentages and formatting."""

    @pytest.mark.currency
    def test_sum_amounts_is_exact(self):
        total = sum_amounts([Decimal("0.1"), Decimal("0.2")])
        assert total == Decimal("0.3")
        assert sum_amounts([]) == ZERO

    @pytest.mark.currency
    def test_safe_percentage(self):
        assert safe_percentage(Decimal("50"), Decimal("200")) == 25.0
        assert safe_percentage(Decimal("300"), Decimal("200")) == 150.0

    @pytest.mark.currency
    def test_safe_percentage_zero_whole_is_zero(self):
        assert safe_percentage(Decimal("50"), ZERO) == 0.0
        assert safe_percentage(Decimal("50"), Decimal("-1")) == 0.0

    @pytest.mark.currency
    def test_format_amount(self):
        assert format_amount(Decimal("1234.5")) == "$1,234.50"
        assert format_amount(Decimal("-45.99"), "¥") == "-¥45.99"
        assert format_amount(ZERO) == "$0.00"


class TestCurrencySettings:
    """Test the display currency and its change notifications."""

    def setup_method(self):
        self.bus = RefreshBus()
        self.events = []
        self.bus.subscribe(self.events.append)

    @pytest.mark.currency
    def test_defaults_to_dollars(self):
        settings = CurrencySettings(self.bus)

        assert settings.code == "USD"
        assert settings.format(Decimal("12.5")) == "$12.50"

    @pytest.mark.currency
    def test_change_publishes_currency_event(self):
        settings = CurrencySettings(self.bus)

        assert settings.set_currency("cny", "¥") is True
        assert settings.code == "CNY"
        assert settings.format(Decimal("-30")) == "-¥30.00"
        assert self.events == [RefreshEvent.CURRENCY]

    @pytest.mark.currency
    def test_same_currency_is_not_published(self):
        settings = CurrencySettings(self.bus, "EUR", "€")

        assert settings.set_currency("EUR", " € ") is False
        assert self.events == []

    @pytest.mark.currency
    def test_empty_values_are_rejected(self):
        settings = CurrencySettings(self.bus)

        with pytest.raises(ValueError, match="code"):
            settings.set_currency("  ", "$")
        with pytest.raises(ValueError, match="symbol"):
            CurrencySettings(code="GBP", symbol="")
        assert settings.code == "USD"
