#!/usr/bin/env python3
"""
Configuration Management for fintrack

Handles environment-based configuration with validation. Supports multiple
environments (development, test, production) and per-user data directories.
"""

import logging
import os
import tempfile
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

ALLOCATION_POLICIES = ("even", "weighted", "none")


class Environment(Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


@dataclass
class StorageConfig:
    """Where a user's ledger files live."""

    user_dir: Path
    transactions_file: Path
    budgets_file: Path


@dataclass
class ImportConfig:
    """CSV import defaults."""

    date_format: str = "yyyy-MM-dd"
    encoding: str = "utf-8"


@dataclass
class BudgetConfig:
    """Budget display settings."""

    monthly_budget: Decimal = Decimal("4000")
    allocation_policy: str = "even"
    warning_threshold: float = 90.0


@dataclass
class DisplayConfig:
    """How amounts are shown to the user."""

    currency_code: str = "USD"
    currency_symbol: str = "$"


@dataclass
class Config:
    """
    Main configuration class for fintrack.

    Loads configuration from environment variables with defaults and
    validation for each environment type.
    """

    environment: Environment
    username: str

    # Core directories
    data_dir: Path

    # Component configurations
    storage: StorageConfig
    importing: ImportConfig
    budget: BudgetConfig

    # Application settings
    debug: bool = False
    log_level: str = "INFO"
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def from_environment(cls) -> "Config":
        """Create configuration from environment variables."""
        env = Environment(os.getenv("FINTRACK_ENV", "development"))

        if env == Environment.TEST:
            default_test_dir = Path(tempfile.gettempdir()) / "test_fintrack"
            data_dir = Path(os.getenv("FINTRACK_DATA_DIR", str(default_test_dir)))
        else:
            data_dir = Path(os.getenv("FINTRACK_DATA_DIR", "./data")).expanduser().resolve()

        username = os.getenv("FINTRACK_USER", "default").strip() or "default"
        user_dir = data_dir / "users" / username
        user_dir.mkdir(parents=True, exist_ok=True)

        storage = StorageConfig(
            user_dir=user_dir,
            transactions_file=user_dir / "user_bill.csv",
            budgets_file=user_dir / "user_budgets.csv",
        )

        importing = ImportConfig(
            date_format=os.getenv("FINTRACK_DATE_FORMAT", "yyyy-MM-dd"),
            encoding=os.getenv("FINTRACK_CSV_ENCODING", "utf-8"),
        )

        budget = BudgetConfig(
            monthly_budget=_parse_decimal(os.getenv("FINTRACK_MONTHLY_BUDGET", "4000")),
            allocation_policy=os.getenv("FINTRACK_ALLOCATION", "even").strip().lower(),
            warning_threshold=float(os.getenv("FINTRACK_WARNING_THRESHOLD", "90")),
        )

        display = DisplayConfig(
            currency_code=os.getenv("FINTRACK_CURRENCY_CODE", "USD").strip().upper(),
            currency_symbol=os.getenv("FINTRACK_CURRENCY_SYMBOL", "$").strip(),
        )

        return cls(
            environment=env,
            username=username,
            data_dir=data_dir,
            storage=storage,
            importing=importing,
            budget=budget,
            debug=os.getenv("DEBUG", "false").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            display=display,
        )

    def validate(self) -> list:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.storage.user_dir.exists():
            errors.append(f"user_dir does not exist: {self.storage.user_dir}")

        if self.budget.monthly_budget.is_nan() or self.budget.monthly_budget < 0:
            errors.append("FINTRACK_MONTHLY_BUDGET must be a non-negative number")

        if self.budget.allocation_policy not in ALLOCATION_POLICIES:
            errors.append(
                f"FINTRACK_ALLOCATION must be one of {', '.join(ALLOCATION_POLICIES)}, "
                f"got '{self.budget.allocation_policy}'"
            )

        if self.budget.warning_threshold <= 0:
            errors.append("FINTRACK_WARNING_THRESHOLD must be positive")

        if not self.importing.date_format.strip():
            errors.append("FINTRACK_DATE_FORMAT must not be empty")

        if not self.display.currency_code:
            errors.append("FINTRACK_CURRENCY_CODE must not be empty")

        if not self.display.currency_symbol:
            errors.append("FINTRACK_CURRENCY_SYMBOL must not be empty")

        return errors

    def setup_logging(self) -> None:
        """Configure logging based on configuration."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.environment == Environment.DEVELOPMENT:
            format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        else:
            format_str = "%(asctime)s - %(levelname)s - %(message)s"

        logging.basicConfig(level=level, format=format_str, datefmt="%Y-%m-%d %H:%M:%S")

        # The bus logs every publish at INFO; keep production output quiet
        if self.environment == Environment.PRODUCTION:
            logging.getLogger("fintrack.core.refresh").setLevel(logging.WARNING)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a flat-ish dictionary for display."""
        result: dict[str, Any] = {}

        for field_name, field_value in self.__dict__.items():
            if hasattr(field_value, "__dict__") and not isinstance(field_value, (Path, Enum)):
                result[field_name] = {name: _display_value(value) for name, value in field_value.__dict__.items()}
            else:
                result[field_name] = _display_value(field_value)

        return result


def _display_value(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    return value


def _parse_decimal(value: str) -> Decimal:
    """Parse a decimal setting, mapping garbage to NaN so validate() reports it."""
    try:
        return Decimal(value.strip())
    except InvalidOperation:
        return Decimal("NaN")


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_environment()

        errors = _config.validate()
        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        _config.setup_logging()

    return _config


def reload_config() -> Config:
    """Reload configuration from environment (useful for testing)."""
    global _config
    _config = None
    return get_config()
