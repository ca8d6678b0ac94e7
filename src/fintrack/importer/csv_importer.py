#!/usr/bin/env python3
"""
CSV Transaction Importer

Turns raw delimited export text into TransactionRecords. The importer is a pure
function over in-memory text: callers read files, the importer never does I/O.

Processing per data row:
1. Extract fields by column index (out-of-range index yields "")
2. Resolve the date through DateFormatResolver
3. Parse the amount after stripping non-numeric characters
4. Optionally force the sign from a type column (expense/income identifiers)
5. Drop rows whose dedup key was already seen in this batch

Row-level problems are collected in ImportResult.skipped and never abort the
import. Missing required column mappings raise ConfigurationError once.
"""

import csv
import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from ..core.currency import parse_amount
from ..core.dates import DateFormatResolver, DateParseError
from ..core.models import DedupKey, TransactionRecord

logger = logging.getLogger(__name__)

ColumnRef = str | int | None


class ConfigurationError(Exception):
    """Raised when the column mapping or sign policy cannot be applied to the input."""

    pass


class SkipKind(Enum):
    """Why a row was dropped."""

    PARSE_FAILURE = "parse_failure"
    DUPLICATE_IN_BATCH = "duplicate_in_batch"
    COMMENT = "comment"


class SignMode(Enum):
    """How the sign of an amount is determined."""

    ALREADY_SIGNED = "already_signed"
    TYPE_COLUMN = "type_column"


def parse_identifiers(text: str | None) -> frozenset[str]:
    """
    Parse a comma-separated identifier list into a normalized set.

    Example:
        parse_identifiers("Income, Revenue,,Deposit") -> {"income", "revenue", "deposit"}
    """
    if not text:
        return frozenset()
    return frozenset(part.strip().lower() for part in text.split(",") if part.strip())


@dataclass(frozen=True)
class ColumnMapping:
    """
    Which column feeds each logical field.

    Each entry is a header name, a 0-based column index, or None.
    Header names are matched exactly, then case-insensitively, then by
    case-insensitive containment.
    """

    date: ColumnRef = None
    description: ColumnRef = None
    category: ColumnRef = None
    amount: ColumnRef = None
    type_column: ColumnRef = None


@dataclass(frozen=True)
class SignPolicy:
    """Rule set deciding whether an amount is income or expense."""

    mode: SignMode = SignMode.ALREADY_SIGNED
    expense_identifiers: frozenset[str] = frozenset()
    income_identifiers: frozenset[str] = frozenset()

    @classmethod
    def already_signed(cls) -> "SignPolicy":
        return cls(mode=SignMode.ALREADY_SIGNED)

    @classmethod
    def from_type_column(
        cls,
        expense_identifiers: Iterable[str] | str = (),
        income_identifiers: Iterable[str] | str = (),
    ) -> "SignPolicy":
        """Create a type-column policy; identifiers may be sets or comma-separated text."""
        return cls(
            mode=SignMode.TYPE_COLUMN,
            expense_identifiers=_normalize_identifiers(expense_identifiers),
            income_identifiers=_normalize_identifiers(income_identifiers),
        )

    @property
    def uses_type_column(self) -> bool:
        return self.mode == SignMode.TYPE_COLUMN

    def classify(self, type_value: str) -> str | None:
        """
        Match a type-column value against the identifier sets.

        Exact case-insensitive matches win over substring matches; within each
        pass expense identifiers are checked before income identifiers.

        Returns:
            "expense", "income", or None when nothing matches
        """
        value = type_value.strip().lower()
        if not value:
            return None

        if value in self.expense_identifiers:
            return "expense"
        if value in self.income_identifiers:
            return "income"

        if any(identifier in value for identifier in self.expense_identifiers):
            return "expense"
        if any(identifier in value for identifier in self.income_identifiers):
            return "income"

        return None

    def apply(self, amount: Decimal, type_value: str) -> tuple[Decimal, bool]:
        """
        Apply the policy to a parsed amount.

        Returns:
            Tuple of (signed amount, whether the type value was recognized)
        """
        if not self.uses_type_column:
            return amount, True

        kind = self.classify(type_value)
        if kind == "expense":
            return -abs(amount), True
        if kind == "income":
            return abs(amount), True
        return amount, False


def _normalize_identifiers(identifiers: Iterable[str] | str) -> frozenset[str]:
    if isinstance(identifiers, str):
        return parse_identifiers(identifiers)
    return frozenset(item.strip().lower() for item in identifiers if item and item.strip())


@dataclass(frozen=True)
class SkipReason:
    """One dropped row, with enough detail for a user-facing report."""

    row_index: int
    kind: SkipKind
    raw_value: str
    field: str | None = None
    message: str = ""

    def describe(self) -> str:
        """Get a one-line description for display."""
        if self.kind == SkipKind.PARSE_FAILURE:
            return f"Row {self.row_index}: cannot parse {self.field} '{self.raw_value}' ({self.message})"
        if self.kind == SkipKind.DUPLICATE_IN_BATCH:
            return f"Row {self.row_index}: duplicate of an earlier row ({self.raw_value})"
        return f"Row {self.row_index}: comment line skipped"


@dataclass(frozen=True)
class ImportWarning:
    """Soft problem on a row that was still imported."""

    row_index: int
    message: str
    raw_value: str


@dataclass
class ImportResult:
    """Records produced by an import plus every dropped row and warning."""

    records: list[TransactionRecord] = field(default_factory=list)
    skipped: list[SkipReason] = field(default_factory=list)
    warnings: list[ImportWarning] = field(default_factory=list)

    @property
    def duplicate_count(self) -> int:
        return sum(1 for s in self.skipped if s.kind == SkipKind.DUPLICATE_IN_BATCH)

    @property
    def failure_count(self) -> int:
        return sum(1 for s in self.skipped if s.kind == SkipKind.PARSE_FAILURE)

    def summary_text(self) -> str:
        return (
            f"{len(self.records)} records, {self.failure_count} unparseable, "
            f"{self.duplicate_count} duplicates, {len(self.warnings)} warnings"
        )


@dataclass(frozen=True)
class _ResolvedColumns:
    date: int
    amount: int
    description: int | None
    category: int | None
    type_column: int | None


class CsvTransactionImporter:
    """Import transactions from delimited text using a column mapping and sign policy."""

    def __init__(self, date_resolver: DateFormatResolver | None = None):
        self.date_resolver = date_resolver or DateFormatResolver()

    def import_rows(
        self,
        rows: str | Iterable[str],
        mapping: ColumnMapping,
        sign_policy: SignPolicy | None = None,
    ) -> ImportResult:
        """
        Import transactions from CSV text.

        Args:
            rows: Whole CSV text, or an iterable of lines, with the header first
            mapping: Column mapping for the logical fields
            sign_policy: Sign rules (default: amounts already signed)

        Returns:
            ImportResult with records in input order

        Raises:
            ConfigurationError: If date/amount mapping is missing or unresolvable,
                or a type-column policy has no usable type column
        """
        sign_policy = sign_policy or SignPolicy.already_signed()
        lines = io.StringIO(rows, newline="") if isinstance(rows, str) else rows
        reader = csv.reader(lines)

        header = next(reader, None)
        if header is None:
            logger.info("CSV input is empty, nothing to import")
            return ImportResult()
        if header:
            header[0] = header[0].lstrip("\ufeff")

        columns = self._resolve_columns(header, mapping, sign_policy)

        result = ImportResult()
        seen: set[DedupKey] = set()
        row_index = 0

        for row in reader:
            if not row or all(not cell.strip() for cell in row):
                continue
            row_index += 1

            if row[0].strip().startswith("//"):
                result.skipped.append(SkipReason(row_index, SkipKind.COMMENT, ",".join(row)))
                continue

            record = self._parse_row(row, row_index, columns, sign_policy, result)
            if record is None:
                continue

            key = record.dedup_key
            if key in seen:
                result.skipped.append(
                    SkipReason(
                        row_index,
                        SkipKind.DUPLICATE_IN_BATCH,
                        ",".join(row),
                        message="same date, description, category and amount",
                    )
                )
                continue

            seen.add(key)
            result.records.append(record)

        logger.info("CSV import finished: %s", result.summary_text())
        return result

    def _parse_row(
        self,
        row: list[str],
        row_index: int,
        columns: _ResolvedColumns,
        sign_policy: SignPolicy,
        result: ImportResult,
    ) -> TransactionRecord | None:
        raw_date = _cell(row, columns.date)
        raw_amount = _cell(row, columns.amount)

        try:
            record_date = self.date_resolver.parse(raw_date)
        except DateParseError as e:
            result.skipped.append(SkipReason(row_index, SkipKind.PARSE_FAILURE, raw_date, "date", str(e)))
            return None

        try:
            amount = parse_amount(raw_amount)
        except ValueError as e:
            result.skipped.append(SkipReason(row_index, SkipKind.PARSE_FAILURE, raw_amount, "amount", str(e)))
            return None

        if sign_policy.uses_type_column:
            type_value = _cell(row, columns.type_column)
            amount, recognized = sign_policy.apply(amount, type_value)
            if not recognized:
                result.warnings.append(
                    ImportWarning(row_index, "Transaction type not recognized, sign left unchanged", type_value)
                )

        return TransactionRecord.create(
            date=record_date,
            description=_cell(row, columns.description),
            category=_cell(row, columns.category),
            amount=amount,
        )

    def _resolve_columns(
        self, header: list[str], mapping: ColumnMapping, sign_policy: SignPolicy
    ) -> _ResolvedColumns:
        missing = [name for name in ("date", "amount") if getattr(mapping, name) is None]
        if missing:
            raise ConfigurationError(f"Column mapping required for: {', '.join(missing)}")

        resolved: dict[str, int | None] = {}
        for name in ("date", "amount", "description", "category", "type_column"):
            ref = getattr(mapping, name)
            index = resolve_column(header, ref)
            if ref is not None and index is None:
                if name in ("date", "amount") or (name == "type_column" and sign_policy.uses_type_column):
                    raise ConfigurationError(f"Column '{ref}' for {name} not found in header {header}")
                logger.warning("Column '%s' for %s not found, using default", ref, name)
            resolved[name] = index

        if sign_policy.uses_type_column and resolved["type_column"] is None:
            raise ConfigurationError("Sign policy uses a type column but no type column is mapped")

        return _ResolvedColumns(
            date=resolved["date"],  # type: ignore[arg-type]
            amount=resolved["amount"],  # type: ignore[arg-type]
            description=resolved["description"],
            category=resolved["category"],
            type_column=resolved["type_column"],
        )


def resolve_column(header: list[str], ref: ColumnRef) -> int | None:
    """
    Map a column reference to an index.

    Integer references are returned as-is (a negative index counts as unmapped);
    names are matched exactly, then case-insensitively, then by containment.
    """
    if ref is None:
        return None
    if isinstance(ref, int):
        return ref if ref >= 0 else None

    names = [h.strip() for h in header]
    wanted = ref.strip()
    if wanted in names:
        return names.index(wanted)

    lowered = [n.lower() for n in names]
    if wanted.lower() in lowered:
        return lowered.index(wanted.lower())

    for i, name in enumerate(lowered):
        if name and wanted.lower() in name:
            return i
    return None


def _cell(row: list[str], index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    return row[index].strip()


def import_transactions(
    rows: str | Iterable[str],
    mapping: ColumnMapping,
    sign_policy: SignPolicy | None = None,
    primary_date_format: str = "yyyy-MM-dd",
) -> ImportResult:
    """Import CSV text with a resolver built from primary_date_format."""
    importer = CsvTransactionImporter(DateFormatResolver(primary_date_format))
    return importer.import_rows(rows, mapping, sign_policy)
