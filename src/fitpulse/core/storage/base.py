"""
Abstract base class for record stores.

A record store is where a consolidated dataset is committed once the user is
happy with it.  Records are grouped under ``<user>/<category>/<date>`` keys;
committing the same group again replaces it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from typing import Any

from fitpulse.core.exceptions import FitpulseError
from fitpulse.ingest.models import ConsolidatedDataset, RecordCategory


def record_key(user_id: str, category: RecordCategory | str, day: str) -> str:
    """Storage key for one (user, category, date) group.

    Slashes in vendor dates (``01/15/2024``) become dashes so a date is
    always one path segment.
    """
    day = day.replace("/", "-").replace("\\", "-")
    return f"{user_id}/{category}/{day}"


def group_by_date(dataset: ConsolidatedDataset) -> dict[tuple[RecordCategory, str], list[dict[str, Any]]]:
    """Group every record of *dataset* by (category, date), keeping file order."""
    groups: dict[tuple[RecordCategory, str], list[dict[str, Any]]] = defaultdict(list)
    for category in RecordCategory:
        if category == RecordCategory.UNKNOWN:
            continue
        for record in dataset.bucket(category):
            day = (record.date or "").strip() or "undated"
            groups[(category, day)].append(asdict(record))
    return dict(groups)


@dataclass
class CommitSummary:
    """What a commit wrote."""

    user_id: str
    keys: list[str] = field(default_factory=list)
    records: int = 0

    @property
    def groups(self) -> int:
        return len(self.keys)


class RecordStore(ABC):
    """Abstract base class for record stores."""

    def __init__(self, **config):
        self.config = config

    @abstractmethod
    async def save_group(self, key: str, records: list[dict[str, Any]]) -> None:
        """Write (replace) the records stored under *key*."""

    @abstractmethod
    async def load(self, user_id: str, category: RecordCategory | str, day: str) -> list[dict[str, Any]]:
        """Load one group.  Raises StorageKeyError if not found."""

    @abstractmethod
    async def list_dates(self, user_id: str, category: RecordCategory | str) -> list[str]:
        """Dates with committed records for (user, category), sorted."""

    @abstractmethod
    async def delete(self, user_id: str, category: RecordCategory | str, day: str) -> bool:
        """Delete one group.  Returns True if deleted, False if it didn't exist."""

    async def commit(self, user_id: str, dataset: ConsolidatedDataset) -> CommitSummary:
        """Write every (category, date) group of *dataset* for *user_id*."""
        summary = CommitSummary(user_id=user_id)
        for (category, day), records in group_by_date(dataset).items():
            key = record_key(user_id, category, day)
            await self.save_group(key, records)
            summary.keys.append(key)
            summary.records += len(records)
        return summary


class StorageError(FitpulseError):
    """Base exception for storage errors."""


class StorageKeyError(StorageError, KeyError):
    """Raised when a storage key doesn't exist."""


class StoragePermissionError(StorageError):
    """Raised when storage operation is not permitted."""
