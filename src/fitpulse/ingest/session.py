"""
Import sessions and consolidation.

Files are parsed as soon as they are added, but nothing reaches the unified
dataset until :meth:`ImportSession.consolidate` is called.  That leaves room
to inspect each file and drop the ones that parsed badly before committing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

from loguru import logger

from fitpulse.core.exceptions import DataProcessingError, FileIOError

from .models import ConsolidatedDataset, ParsedFileResult, RecordCategory
from .parser import CSVParser

CSV_SUFFIXES = frozenset({".csv"})


def consolidate(results: Iterable[ParsedFileResult]) -> ConsolidatedDataset:
    """Concatenate records of successful results by category, in order.

    No deduplication and no sorting: two files that both contain a day
    contribute two records for it.
    """
    dataset = ConsolidatedDataset()
    for result in results:
        if not result.success or result.category == RecordCategory.UNKNOWN:
            continue
        dataset.bucket(result.category).extend(result.records)
    return dataset


class UploadStatus(StrEnum):
    PROCESSED = "processed"
    ERROR = "error"


@dataclass
class UploadedFile:
    """A file added to a session and its parse outcome."""

    name: str
    status: UploadStatus
    result: ParsedFileResult

    @property
    def category(self) -> RecordCategory:
        return self.result.category

    @property
    def error(self) -> str | None:
        return self.result.error


class ImportSession:
    """Collects parsed files and consolidates them on request."""

    def __init__(self, parser: CSVParser | None = None):
        self.parser = parser or CSVParser()
        self._files: list[UploadedFile] = []
        self.dataset: ConsolidatedDataset | None = None

    @property
    def files(self) -> list[UploadedFile]:
        return list(self._files)

    @property
    def processed(self) -> list[UploadedFile]:
        return [f for f in self._files if f.status == UploadStatus.PROCESSED]

    @property
    def failed(self) -> list[UploadedFile]:
        return [f for f in self._files if f.status == UploadStatus.ERROR]

    def _track(self, result: ParsedFileResult, name: str) -> UploadedFile:
        status = UploadStatus.PROCESSED if result.success else UploadStatus.ERROR
        uploaded = UploadedFile(name=name, status=status, result=result)
        self._files.append(uploaded)
        if result.success:
            logger.info(f"{name}: {result.category}, {result.rows_processed} rows processed")
        else:
            logger.warning(f"{name}: {result.error}")
        return uploaded

    def add_text(self, name: str, text: str) -> UploadedFile:
        """Parse CSV *text* under display *name* and track it."""
        return self._track(self.parser.parse_text(text, source=name), name)

    def add_file(self, path: str | Path) -> UploadedFile:
        """Parse the file at *path* and track it.  Unreadable files are tracked as errors."""
        path = Path(path)
        try:
            result = self.parser.parse_file(path)
        except FileIOError as e:
            result = ParsedFileResult.failure(str(e), source=path.name)
        return self._track(result, path.name)

    def add_files(self, paths: Iterable[str | Path]) -> list[UploadedFile]:
        """Add every ``.csv`` path; others are skipped.

        Raises:
            DataProcessingError: none of *paths* is a CSV file.
        """
        paths = [Path(p) for p in paths]
        csv_paths = [p for p in paths if p.suffix.lower() in CSV_SUFFIXES]
        for p in paths:
            if p not in csv_paths:
                logger.warning(f"Skipping non-CSV file: {p.name}")
        if not csv_paths:
            raise DataProcessingError("Please upload CSV files only")
        return [self.add_file(p) for p in csv_paths]

    def remove(self, name: str) -> UploadedFile:
        """Drop the first tracked file called *name*.

        Raises:
            KeyError: no such file in this session.
        """
        for i, uploaded in enumerate(self._files):
            if uploaded.name == name:
                return self._files.pop(i)
        raise KeyError(f"No uploaded file named '{name}'")

    def clear(self) -> None:
        self._files = []
        self.dataset = None

    def consolidate(self) -> ConsolidatedDataset:
        """Merge every processed file into a new dataset and make it current."""
        processed = self.processed
        dataset = consolidate(f.result for f in processed)
        self.dataset = dataset
        logger.info(f"Consolidated {len(processed)} file(s): {dataset.counts()}")
        return dataset
