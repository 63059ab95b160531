"""
Row materialization: turn tokenized data rows into typed records.

Coercion never raises for ordinary bad input — unparseable numbers become 0,
unparseable durations 0 ms.  Rows shorter than the header are skipped, and a
row that still fails during coercion is skipped with a warning; neither
aborts the batch.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from loguru import logger

from .models import (
    FIELD_TYPES,
    RECORD_TYPES,
    ColumnMapping,
    ColumnType,
    HealthRecord,
    RecordCategory,
)

_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_LEADING_INT = re.compile(r"^[+-]?\d+")

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND

# ── Coercion helpers ─────────────────────────────────────────────────


def parse_float(value: str | None) -> float:
    """Parse the leading number of *value* (``"72 %"`` -> 72.0); 0.0 on failure."""
    match = _LEADING_FLOAT.match((value or "").strip())
    if not match:
        return 0.0
    return float(match.group(0))


def parse_int(value: str | None) -> int:
    """Parse the leading integer of *value* (``"12.7"`` -> 12); 0 on failure."""
    match = _LEADING_INT.match((value or "").strip())
    if not match:
        return 0
    return int(match.group(0))


def parse_duration_ms(value: str | None) -> int:
    """Convert ``H:MM:SS``, ``MM:SS`` or bare minutes to milliseconds.

    Bare numbers are minutes, the unit WHOOP uses for its ``(min)`` columns.
    Anything else is 0.
    """
    text = (value or "").strip()
    if not text:
        return 0

    if ":" in text:
        parts = [parse_int(p) for p in text.split(":")]
        if len(parts) == 3:
            hours, minutes, seconds = parts
            return (hours * 3600 + minutes * 60 + seconds) * MS_PER_SECOND
        if len(parts) == 2:
            minutes, seconds = parts
            return (minutes * 60 + seconds) * MS_PER_SECOND
        return 0

    match = _LEADING_FLOAT.match(text)
    if not match:
        return 0
    return round(float(match.group(0)) * MS_PER_MINUTE)


def parse_bool(value: str | None) -> bool:
    text = (value or "").strip()
    return text.lower() == "true" or text == "1"


_DEFAULTS: dict[ColumnType, object] = {
    ColumnType.TEXT: "",
    ColumnType.DATE: "",
    ColumnType.INTEGER: 0,
    ColumnType.FLOAT: 0.0,
    ColumnType.DURATION: 0,
    ColumnType.BOOLEAN: False,
}


def coerce(value: str | None, column_type: ColumnType):
    """Coerce one raw field to *column_type*."""
    if value is None:
        return _DEFAULTS[column_type]
    if column_type == ColumnType.FLOAT:
        return parse_float(value)
    if column_type == ColumnType.INTEGER:
        return parse_int(value)
    if column_type == ColumnType.DURATION:
        return parse_duration_ms(value)
    if column_type == ColumnType.BOOLEAN:
        return parse_bool(value)
    return value


# ── Materialization ──────────────────────────────────────────────────


@dataclass
class MaterializedRows:
    """Records built from a table plus how many data rows produced none."""

    records: list[HealthRecord] = field(default_factory=list)
    skipped: int = 0


def _finish_strength(values: dict) -> dict:
    """Derive volume and blank out empty optional fields."""
    if not values["volume"] and values["weight"] and values["reps"] and values["sets"]:
        values["volume"] = values["weight"] * values["reps"] * values["sets"]
    values["one_rep_max"] = values["one_rep_max"] or None
    values["workout_duration"] = values["workout_duration"] or None
    return values


def build_record(category: RecordCategory, row: list[str], indices: dict[str, int | None]) -> HealthRecord:
    """Build one record from *row* using resolved column *indices*."""
    values = {}
    for field_name, column_type in FIELD_TYPES[category].items():
        idx = indices.get(field_name)
        raw = row[idx] if idx is not None else None
        values[field_name] = coerce(raw, column_type)

    if category == RecordCategory.STRONGLIFTS:
        values = _finish_strength(values)
    return RECORD_TYPES[category](**values)


def materialize(
    category: RecordCategory,
    rows: list[list[str]],
    headers: list[str],
    mapping: ColumnMapping,
) -> MaterializedRows:
    """Materialize data *rows* (header excluded) for an already-classified *category*."""
    if category not in RECORD_TYPES:
        raise ValueError(f"Cannot materialize rows for category '{category}'")

    indices = {f: mapping.index_of(f, headers) for f in FIELD_TYPES[category]}
    result = MaterializedRows()

    for row_number, row in enumerate(rows, start=1):
        if len(row) < len(headers):
            result.skipped += 1
            continue
        try:
            result.records.append(build_record(category, row, indices))
        except (ValueError, TypeError, IndexError, OverflowError) as e:
            logger.warning(f"Skipping {category} row {row_number}: {e}")
            result.skipped += 1

    return result
