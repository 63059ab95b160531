"""
CSV ingestion and normalization.

Turns vendor CSV exports (WHOOP, StrongLifts) into typed health records:
tokenize → classify → resolve headers → materialize rows, then consolidate
many files into one dataset on request.
"""

from .aliases import AliasStore, HeaderAliasTable, InMemoryAliasStore, JsonFileAliasStore
from .classifier import classify_headers
from .models import (
    ColumnMapping,
    ColumnType,
    ConsolidatedDataset,
    DailyActivityRecord,
    JournalRecord,
    ParsedFileResult,
    RecordCategory,
    RecoveryRecord,
    SleepRecord,
    StrengthRecord,
    WorkoutRecord,
)
from .parser import CSVParser
from .resolver import HeaderResolver, levenshtein
from .session import ImportSession, consolidate
from .tokenizer import tokenize

__all__ = [
    "AliasStore",
    "CSVParser",
    "ColumnMapping",
    "ColumnType",
    "ConsolidatedDataset",
    "DailyActivityRecord",
    "HeaderAliasTable",
    "HeaderResolver",
    "ImportSession",
    "InMemoryAliasStore",
    "JournalRecord",
    "JsonFileAliasStore",
    "ParsedFileResult",
    "RecordCategory",
    "RecoveryRecord",
    "SleepRecord",
    "StrengthRecord",
    "WorkoutRecord",
    "classify_headers",
    "consolidate",
    "levenshtein",
    "tokenize",
]
