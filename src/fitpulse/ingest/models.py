"""
Ingestion data models.

Typed records produced from vendor CSV exports (WHOOP, StrongLifts), plus
the per-file and consolidated result containers.  Everything here is a plain
dataclass; parsing logic lives in the sibling modules.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

# ── Enumerations ─────────────────────────────────────────────────────


class RecordCategory(StrEnum):
    """Which record schema a file represents."""

    RECOVERY = "recovery"
    SLEEP = "sleep"
    WORKOUT = "workout"
    DAILY = "daily"
    JOURNAL = "journal"
    STRONGLIFTS = "stronglifts"
    UNKNOWN = "unknown"


class ColumnType(StrEnum):
    """Semantic type of a target field, drives value coercion."""

    TEXT = "TEXT"
    DATE = "DATE"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    DURATION = "DURATION"
    BOOLEAN = "BOOLEAN"


# ── Records ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class RecoveryRecord:
    """One day of WHOOP recovery / physiological data."""

    date: str
    recovery_score: float = 0.0
    hrv_rmssd: float = 0.0  # ms
    resting_heart_rate: float = 0.0  # bpm
    skin_temp: float = 0.0  # celsius


@dataclass(frozen=True)
class SleepRecord:
    """One sleep.  Durations are milliseconds."""

    date: str
    total_sleep_time: int = 0
    sleep_efficiency: float = 0.0
    slow_wave_time: int = 0
    rem_time: int = 0
    light_time: int = 0
    wake_time: int = 0
    sleep_score: float = 0.0


@dataclass(frozen=True)
class WorkoutRecord:
    """One workout / activity session."""

    date: str
    strain_score: float = 0.0
    energy: float = 0.0
    avg_heart_rate: float = 0.0
    max_heart_rate: float = 0.0
    duration: int = 0  # ms
    workout_type: str = ""


@dataclass(frozen=True)
class DailyActivityRecord:
    """One day of general activity."""

    date: str
    steps: int = 0
    calories_burned: float = 0.0
    ambient_temperature: float = 0.0


@dataclass(frozen=True)
class JournalRecord:
    """One answered journal question."""

    date: str
    question_text: str = ""
    answered_yes: bool = False
    notes: str = ""


@dataclass(frozen=True)
class StrengthRecord:
    """One exercise entry from a strength-training log."""

    date: str
    exercise: str = ""
    weight: float = 0.0
    reps: int = 0
    sets: int = 0
    volume: float = 0.0
    one_rep_max: float | None = None
    workout_duration: int | None = None  # ms


HealthRecord = RecoveryRecord | SleepRecord | WorkoutRecord | DailyActivityRecord | JournalRecord | StrengthRecord

RECORD_TYPES: dict[RecordCategory, type] = {
    RecordCategory.RECOVERY: RecoveryRecord,
    RecordCategory.SLEEP: SleepRecord,
    RecordCategory.WORKOUT: WorkoutRecord,
    RecordCategory.DAILY: DailyActivityRecord,
    RecordCategory.JOURNAL: JournalRecord,
    RecordCategory.STRONGLIFTS: StrengthRecord,
}

# Target fields per category, in record order.  ``date`` always comes first.
FIELD_TYPES: dict[RecordCategory, dict[str, ColumnType]] = {
    RecordCategory.RECOVERY: {
        "date": ColumnType.DATE,
        "recovery_score": ColumnType.FLOAT,
        "hrv_rmssd": ColumnType.FLOAT,
        "resting_heart_rate": ColumnType.FLOAT,
        "skin_temp": ColumnType.FLOAT,
    },
    RecordCategory.SLEEP: {
        "date": ColumnType.DATE,
        "total_sleep_time": ColumnType.DURATION,
        "sleep_efficiency": ColumnType.FLOAT,
        "slow_wave_time": ColumnType.DURATION,
        "rem_time": ColumnType.DURATION,
        "light_time": ColumnType.DURATION,
        "wake_time": ColumnType.DURATION,
        "sleep_score": ColumnType.FLOAT,
    },
    RecordCategory.WORKOUT: {
        "date": ColumnType.DATE,
        "strain_score": ColumnType.FLOAT,
        "energy": ColumnType.FLOAT,
        "avg_heart_rate": ColumnType.FLOAT,
        "max_heart_rate": ColumnType.FLOAT,
        "duration": ColumnType.DURATION,
        "workout_type": ColumnType.TEXT,
    },
    RecordCategory.DAILY: {
        "date": ColumnType.DATE,
        "steps": ColumnType.INTEGER,
        "calories_burned": ColumnType.FLOAT,
        "ambient_temperature": ColumnType.FLOAT,
    },
    RecordCategory.JOURNAL: {
        "date": ColumnType.DATE,
        "question_text": ColumnType.TEXT,
        "answered_yes": ColumnType.BOOLEAN,
        "notes": ColumnType.TEXT,
    },
    RecordCategory.STRONGLIFTS: {
        "date": ColumnType.DATE,
        "exercise": ColumnType.TEXT,
        "weight": ColumnType.FLOAT,
        "reps": ColumnType.INTEGER,
        "sets": ColumnType.INTEGER,
        "volume": ColumnType.FLOAT,
        "one_rep_max": ColumnType.FLOAT,
        "workout_duration": ColumnType.DURATION,
    },
}


def target_fields(category: RecordCategory) -> list[str]:
    """Return the target field names for a category (empty for UNKNOWN)."""
    return list(FIELD_TYPES.get(category, {}))


# ── Results ──────────────────────────────────────────────────────────


@dataclass
class ColumnMapping:
    """Target field -> matched header string for one parse attempt."""

    columns: dict[str, str] = field(default_factory=dict)
    confidence: dict[str, float] = field(default_factory=dict)

    def __contains__(self, field_name: str) -> bool:
        return field_name in self.columns

    def get(self, field_name: str) -> str | None:
        return self.columns.get(field_name)

    def index_of(self, field_name: str, headers: list[str]) -> int | None:
        """Column index of the header mapped to *field_name*, or None if unmapped."""
        header = self.columns.get(field_name)
        if header is None:
            return None
        try:
            return headers.index(header)
        except ValueError:
            return None

    def unmapped(self, fields: list[str]) -> list[str]:
        return [f for f in fields if f not in self.columns]


@dataclass(frozen=True)
class ParsedFileResult:
    """Terminal outcome of parsing one file.

    Exactly one category's records are carried.  ``rows_processed`` counts
    every data row attempted (skipped ones included); ``rows_skipped`` says
    how many of those produced no record.
    """

    success: bool
    category: RecordCategory = RecordCategory.UNKNOWN
    records: tuple[HealthRecord, ...] = ()
    rows_processed: int = 0
    rows_skipped: int = 0
    error: str | None = None
    source: str = ""
    mapping: ColumnMapping | None = field(default=None, compare=False)

    @classmethod
    def failure(cls, error: str, *, source: str = "", category: RecordCategory = RecordCategory.UNKNOWN):
        return cls(success=False, category=category, error=error, source=source)

    @property
    def record_count(self) -> int:
        return len(self.records)


@dataclass
class ConsolidatedDataset:
    """Union of every successfully parsed file, grouped by category."""

    recovery: list[RecoveryRecord] = field(default_factory=list)
    sleep: list[SleepRecord] = field(default_factory=list)
    workouts: list[WorkoutRecord] = field(default_factory=list)
    daily: list[DailyActivityRecord] = field(default_factory=list)
    journal: list[JournalRecord] = field(default_factory=list)
    stronglifts: list[StrengthRecord] = field(default_factory=list)

    def bucket(self, category: RecordCategory) -> list:
        """Return the list that holds *category* records."""
        if category not in _DATASET_ATTRS:
            raise ValueError(f"No dataset bucket for category '{category}'")
        return getattr(self, _DATASET_ATTRS[category])

    def counts(self) -> dict[str, int]:
        return {attr: len(getattr(self, attr)) for attr in _DATASET_ATTRS.values()}

    def is_empty(self) -> bool:
        return not any(self.counts().values())

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {attr: [asdict(r) for r in getattr(self, attr)] for attr in _DATASET_ATTRS.values()}


_DATASET_ATTRS: dict[RecordCategory, str] = {
    RecordCategory.RECOVERY: "recovery",
    RecordCategory.SLEEP: "sleep",
    RecordCategory.WORKOUT: "workouts",
    RecordCategory.DAILY: "daily",
    RecordCategory.JOURNAL: "journal",
    RecordCategory.STRONGLIFTS: "stronglifts",
}
