#!/usr/bin/env python3
"""
DataStore Mixin - shared metadata for single-file DataStore implementations.
"""

from abc import abstractmethod
from datetime import datetime
from pathlib import Path


class DataStoreMixin:
    """
    Mixin providing file metadata for stores backed by one file.

    Provides:
    - exists / last_modified / age_days / size_bytes from the file stat
    - summary_text built from item_count

    Subclasses must implement:
    - item_count() -> int | None
    - describe_items(count) -> str
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        """Check if the backing file exists."""
        return self.path.exists()

    def last_modified(self) -> datetime | None:
        """Get modification time of the backing file."""
        if not self.exists():
            return None
        return datetime.fromtimestamp(self.path.stat().st_mtime)

    def age_days(self) -> int | None:
        """
        Get age of data in days since last modification.

        Returns:
            Number of days since last modification, or None if data doesn't exist
        """
        last_mod = self.last_modified()
        if last_mod is None:
            return None
        return (datetime.now() - last_mod).days

    def size_bytes(self) -> int | None:
        """Get size of the backing file in bytes."""
        if not self.exists():
            return None
        return self.path.stat().st_size

    def summary_text(self) -> str:
        """Get human-readable summary of current data state."""
        count = self.item_count()
        if count is None:
            return f"No data at {self.path}"
        age = self.age_days()
        age_text = "today" if age == 0 else f"{age} days ago"
        return f"{self.describe_items(count)} (updated {age_text})"

    @abstractmethod
    def item_count(self) -> int | None:
        """Get count of items/records in stored data."""
        ...

    @abstractmethod
    def describe_items(self, count: int) -> str:
        """Describe a number of stored items, e.g. '12 transactions'."""
        ...
