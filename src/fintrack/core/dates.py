#!/usr/bin/env python3
"""
Date Format Resolution

Parses transaction dates from bank and payment-provider exports, which use
inconsistent regional conventions. A primary format is tried first, followed by
an ordered list of common fallback formats.

Formats may be written either as strptime patterns ("%Y-%m-%d") or as the
Java-style patterns users type into import settings ("yyyy-MM-dd HH:mm:ss").

Known ambiguity: a string such as "01/02/2024" matches both the US (month/day)
and EU (day/month) fallbacks. It is resolved by list order (US first), not by
heuristics.
"""

import re
from datetime import date, datetime
from functools import lru_cache

_DATE_PARTS = [
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%Y.%m.%d",
    "%d.%m.%Y",
    "%m-%d-%Y",
    "%d-%m-%Y",
]

_TIME_SUFFIXES = ["", " %H:%M:%S", " %H:%M", "T%H:%M:%S", "T%H:%M"]

DEFAULT_FALLBACK_FORMATS: tuple[str, ...] = tuple(
    base + suffix for base in _DATE_PARTS for suffix in _TIME_SUFFIXES
) + ("%Y%m%d",)

# Quoted text is literal ('' is an apostrophe). Longest tokens first so "yyyy" is
# not read as two "yy".
_JAVA_TOKENS = re.compile(r"'([^']*)'|yyyy|yy|MMM|MM|M|dd|d|HH|H|mm|ss")
_JAVA_TO_STRPTIME = {
    "yyyy": "%Y",
    "yy": "%y",
    "MMM": "%b",
    "MM": "%m",
    "M": "%m",
    "dd": "%d",
    "d": "%d",
    "HH": "%H",
    "H": "%H",
    "mm": "%M",
    "ss": "%S",
}


class DateParseError(ValueError):
    """Base class for date resolution failures."""

    pass


class EmptyInput(DateParseError):
    """Raised when the date text is empty or whitespace only."""

    def __init__(self) -> None:
        super().__init__("Date value is empty")


class FormatError(DateParseError):
    """Raised when no candidate format matches the date text."""

    def __init__(self, text: str, attempted: list[str]):
        self.text = text
        self.attempted = attempted
        super().__init__(f"Unrecognized date '{text}' (tried {len(attempted)} formats)")


def _convert_token(match: re.Match) -> str:
    literal = match.group(1)
    if literal is None:
        return _JAVA_TO_STRPTIME[match.group(0)]
    return literal or "'"


@lru_cache(maxsize=128)
def to_strptime_format(pattern: str) -> str:
    """
    Convert a Java-style date pattern to a strptime pattern.

    Patterns that already contain a '%' directive are returned unchanged.
    Text in single quotes is copied literally without the quotes.

    Examples:
        to_strptime_format("yyyy-MM-dd HH:mm") -> "%Y-%m-%d %H:%M"
        to_strptime_format("yyyy-MM-dd'T'HH:mm:ss") -> "%Y-%m-%dT%H:%M:%S"
        to_strptime_format("%d.%m.%Y") -> "%d.%m.%Y"
    """
    if "%" in pattern:
        return pattern
    return _JAVA_TOKENS.sub(_convert_token, pattern)


class DateFormatResolver:
    """Resolve date strings against a primary format with ordered fallbacks."""

    def __init__(
        self,
        primary_format: str = "yyyy-MM-dd",
        fallback_formats: tuple[str, ...] | list[str] = DEFAULT_FALLBACK_FORMATS,
    ):
        self.primary_format = primary_format
        self.fallback_formats = tuple(fallback_formats)

    def candidate_formats(self, primary_format: str | None = None) -> list[str]:
        """Get strptime formats in the order they are attempted."""
        primary = to_strptime_format(primary_format or self.primary_format)
        candidates = [primary]
        for fmt in self.fallback_formats:
            converted = to_strptime_format(fmt)
            if converted not in candidates:
                candidates.append(converted)
        return candidates

    def resolve(self, text: str | None, primary_format: str | None = None) -> tuple[date, str]:
        """
        Parse a date string and report which format matched.

        Args:
            text: Raw date text, optionally with a time-of-day suffix
            primary_format: Overrides the resolver's primary format for this call

        Returns:
            Tuple of (calendar date, strptime format that matched)

        Raises:
            EmptyInput: If text is empty or whitespace
            FormatError: If no candidate format consumes the whole string
        """
        value = (text or "").strip()
        if not value:
            raise EmptyInput()

        candidates = self.candidate_formats(primary_format)
        for fmt in candidates:
            try:
                parsed = datetime.strptime(value, fmt)
            except ValueError:
                continue
            # Time-of-day is dropped; the literal calendar date is kept.
            return parsed.date(), fmt

        raise FormatError(value, candidates)

    def parse(self, text: str | None, primary_format: str | None = None) -> date:
        """Parse a date string into a calendar date."""
        return self.resolve(text, primary_format)[0]


def parse_date(text: str | None, primary_format: str = "yyyy-MM-dd") -> date:
    """Parse a date string using the default fallback list."""
    return DateFormatResolver(primary_format).parse(text)
