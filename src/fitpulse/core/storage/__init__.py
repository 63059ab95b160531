"""
Record storage for consolidated datasets.

Committed records are grouped by user, category and date, written as
gzip-compressed JSON through a pluggable backend (local filesystem by
default).
"""

from .base import (
    CommitSummary,
    RecordStore,
    StorageError,
    StorageKeyError,
    StoragePermissionError,
    record_key,
)
from .compression import compress_json, decompress_json
from .local import LocalRecordStore

__all__ = [
    "CommitSummary",
    "LocalRecordStore",
    "RecordStore",
    "StorageError",
    "StorageKeyError",
    "StoragePermissionError",
    "compress_json",
    "decompress_json",
    "record_key",
]
