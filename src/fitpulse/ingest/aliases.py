"""
Header alias tables and the learned-alias store.

Two tiers feed header resolution:

- a static tier compiled in below (``STATIC_ALIASES``), and
- a learned tier that grows every time a header is confirmed for a field,
  persisted through an :class:`AliasStore` under a single namespaced key.

``VENDOR_COLUMNS`` lists exact column names from known WHOOP and StrongLifts
exports.  The resolver checks them before any alias scoring so those files
always map the same way regardless of what the learned tier contains.
"""

from __future__ import annotations

import copy
import json
import os
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from loguru import logger

from fitpulse.core.exceptions import AliasStoreError

from .models import RecordCategory

LEARNED_ALIASES_KEY = "fitpulse.learned_header_aliases"

LearnedAliases = dict[str, dict[str, list[str]]]

# ── Static tier ──────────────────────────────────────────────────────

STATIC_ALIASES: dict[RecordCategory, dict[str, tuple[str, ...]]] = {
    RecordCategory.RECOVERY: {
        "date": ("date", "day", "cycle start time", "cycle date"),
        "recovery_score": ("recovery score", "recovery", "readiness", "readiness score"),
        "hrv_rmssd": ("hrv", "heart rate variability", "rmssd", "hrv rmssd", "variability"),
        "resting_heart_rate": ("resting heart rate", "rhr", "rest hr", "resting hr"),
        "skin_temp": ("skin temp", "skin temperature", "body temp", "body temperature"),
    },
    RecordCategory.SLEEP: {
        "date": ("date", "day", "sleep onset", "cycle start time"),
        "total_sleep_time": ("total sleep", "asleep duration", "total sleep time", "sleep duration"),
        "sleep_efficiency": ("sleep efficiency", "efficiency"),
        "slow_wave_time": ("deep sleep", "slow wave sleep", "deep (sws) duration", "sws", "deep"),
        "rem_time": ("rem duration", "rem sleep", "rem"),
        "light_time": ("light sleep duration", "light sleep", "light"),
        "wake_time": ("awake duration", "awake", "wake time", "time awake"),
        "sleep_score": ("sleep performance", "sleep score", "sleep quality"),
    },
    RecordCategory.WORKOUT: {
        "date": ("date", "day", "workout start time", "start time"),
        "strain_score": ("activity strain", "strain", "strain score"),
        "energy": ("energy burned", "calories", "kilojoules", "kilojoule", "energy"),
        "avg_heart_rate": ("average hr", "average heart rate", "avg hr", "avg heart rate"),
        "max_heart_rate": ("max hr", "max heart rate", "peak hr"),
        "duration": ("duration", "workout duration", "elapsed time"),
        "workout_type": ("activity name", "activity", "workout type", "sport", "type"),
    },
    RecordCategory.DAILY: {
        "date": ("date", "day"),
        "steps": ("steps", "step count", "total steps", "daily steps"),
        "calories_burned": ("calories burned", "total calories", "calories", "energy burned"),
        "ambient_temperature": ("ambient temperature", "ambient temp", "temperature"),
    },
    RecordCategory.JOURNAL: {
        "date": ("date", "day", "cycle start time"),
        "question_text": ("question text", "question"),
        "answered_yes": ("answered yes", "answer", "answered"),
        "notes": ("notes", "note", "comments"),
    },
    RecordCategory.STRONGLIFTS: {
        "date": ("date", "day", "workout date"),
        "exercise": ("exercise", "exercise name", "lift", "movement"),
        "weight": ("weight", "load", "weight (kg)", "weight (lb)"),
        "reps": ("reps", "repetitions", "rep count"),
        "sets": ("sets", "set count"),
        "volume": ("volume", "total volume"),
        "one_rep_max": ("1rm", "one rep max", "estimated 1rm", "e1rm"),
        "workout_duration": ("duration", "workout duration", "time"),
    },
}

# Exact column names from vendor exports, matched before alias scoring.
VENDOR_COLUMNS: dict[RecordCategory, dict[str, tuple[str, ...]]] = {
    RecordCategory.RECOVERY: {
        "date": ("Cycle start time",),
        "recovery_score": ("Recovery score %", "Recovery score"),
        "hrv_rmssd": ("Heart rate variability (ms)", "HRV (ms)"),
        "resting_heart_rate": ("Resting heart rate (bpm)", "RHR (bpm)"),
        "skin_temp": ("Skin temp (celsius)", "Skin temp (°C)"),
    },
    RecordCategory.SLEEP: {
        "date": ("Sleep onset", "Cycle start time"),
        "total_sleep_time": ("Asleep duration (min)",),
        "sleep_efficiency": ("Sleep efficiency %",),
        "slow_wave_time": ("Deep (SWS) duration (min)",),
        "rem_time": ("REM duration (min)",),
        "light_time": ("Light sleep duration (min)",),
        "wake_time": ("Awake duration (min)",),
        "sleep_score": ("Sleep performance %",),
    },
    RecordCategory.WORKOUT: {
        "date": ("Workout start time", "Cycle start time"),
        "strain_score": ("Activity Strain",),
        "energy": ("Energy burned (cal)", "Kilojoules"),
        "avg_heart_rate": ("Average HR (bpm)",),
        "max_heart_rate": ("Max HR (bpm)",),
        "duration": ("Duration (min)",),
        "workout_type": ("Activity name",),
    },
    RecordCategory.DAILY: {
        "date": ("Cycle start time", "Date"),
        "steps": ("Steps",),
        "calories_burned": ("Calories burned", "Energy burned (cal)"),
        "ambient_temperature": ("Ambient temperature (celsius)",),
    },
    RecordCategory.JOURNAL: {
        "date": ("Cycle start time",),
        "question_text": ("Question text",),
        "answered_yes": ("Answered yes",),
        "notes": ("Notes",),
    },
    RecordCategory.STRONGLIFTS: {
        "date": ("Date",),
        "exercise": ("Exercise",),
        "weight": ("Weight (kg)", "Weight (lb)", "Weight"),
        "reps": ("Reps",),
        "sets": ("Sets",),
        "volume": ("Volume",),
        "one_rep_max": ("1RM", "Estimated 1RM"),
        "workout_duration": ("Workout Duration", "Duration"),
    },
}


def normalize_header(header: str) -> str:
    """Case-fold and trim a header for comparison."""
    return (header or "").strip().lower()


# ── Alias store ──────────────────────────────────────────────────────


@runtime_checkable
class AliasStore(Protocol):
    """Durable key-value storage for the learned alias tier."""

    def get(self, key: str) -> Any | None:
        """Return the value stored under *key*, or None."""
        ...

    def put(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    def update(self, key: str, fn: Callable[[Any | None], Any]) -> Any:
        """Replace the value under *key* with ``fn(current)`` as one atomic step.

        Returns the new value.  Nothing is written when it equals the current one.
        """
        ...


class InMemoryAliasStore:
    """Process-local store.  Useful for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = {}
        self._lock = threading.Lock()
        for key, value in (initial or {}).items():
            self._data[key] = _copy(value)

    def get(self, key: str) -> Any | None:
        # Hand out copies so callers can't mutate stored state in place.
        with self._lock:
            return _copy(self._data.get(key))

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = _copy(value)

    def update(self, key: str, fn: Callable[[Any | None], Any]) -> Any:
        with self._lock:
            current = self._data.get(key)
            new = fn(_copy(current))
            if new != current:
                self._data[key] = _copy(new)
            return _copy(new)


# One lock per file, shared by every JsonFileAliasStore opened on it.
_PATH_LOCKS: dict[Path, threading.Lock] = {}
_PATH_LOCKS_GUARD = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _PATH_LOCKS_GUARD:
        return _PATH_LOCKS.setdefault(path.resolve(), threading.Lock())


class JsonFileAliasStore:
    """Key-value store persisted as a single JSON document on disk.

    Writes go to a temp file first and are moved into place, so a crash
    mid-write leaves the previous document intact.  A corrupt document is
    logged and treated as empty.  All stores opened on the same path in one
    process share a lock, so ``update()`` never loses a concurrent write.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()
        self._lock = _lock_for(self.path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable alias store {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring alias store {self.path}: expected a JSON object")
            return {}
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise AliasStoreError(f"Cannot write alias store {self.path}: {e}") from e

    def get(self, key: str) -> Any | None:
        with self._lock:
            return self._read_all().get(key)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._read_all()
            data[key] = value
            self._write_all(data)

    def update(self, key: str, fn: Callable[[Any | None], Any]) -> Any:
        with self._lock:
            data = self._read_all()
            current = data.get(key)
            new = fn(_copy(current))
            if new != current:
                data[key] = new
                self._write_all(data)
            return new


def _copy(value: Any) -> Any:
    return copy.deepcopy(value)


# ── Alias table ──────────────────────────────────────────────────────


def _sanitize(raw: Any) -> LearnedAliases:
    """Drop anything in a stored learned tier that isn't ``{category: {field: [str]}}``."""
    if not isinstance(raw, dict):
        return {}
    learned: LearnedAliases = {}
    for category, fields in raw.items():
        if not isinstance(fields, dict):
            continue
        learned[category] = {
            f: [h for h in headers if isinstance(h, str)]
            for f, headers in fields.items()
            if isinstance(headers, list)
        }
    return learned


class HeaderAliasTable:
    """Static + learned aliases for every (category, field) pair.

    Appends go through ``AliasStore.update``, so tables sharing a store
    never lose each other's learned headers.
    """

    def __init__(self, store: AliasStore | None = None, key: str = LEARNED_ALIASES_KEY):
        self.store: AliasStore = store if store is not None else InMemoryAliasStore()
        self.key = key

    # ── reads ────────────────────────────────────────────────────────

    def static_aliases(self, category: RecordCategory, field_name: str) -> list[str]:
        return [normalize_header(a) for a in STATIC_ALIASES.get(category, {}).get(field_name, ())]

    def vendor_columns(self, category: RecordCategory, field_name: str) -> list[str]:
        return [normalize_header(c) for c in VENDOR_COLUMNS.get(category, {}).get(field_name, ())]

    def learned(self) -> LearnedAliases:
        """Return the whole learned tier as ``{category: {field: [headers]}}``."""
        return _sanitize(self.store.get(self.key))

    def learned_aliases(self, category: RecordCategory, field_name: str) -> list[str]:
        return list(self.learned().get(str(category), {}).get(field_name, []))

    def aliases_for(self, category: RecordCategory, field_name: str) -> list[str]:
        """Effective aliases: static tier first, then learned, deduplicated."""
        seen: dict[str, None] = {}
        for alias in self.static_aliases(category, field_name) + self.learned_aliases(category, field_name):
            alias = normalize_header(alias)
            if alias:
                seen.setdefault(alias, None)
        return list(seen)

    # ── writes ───────────────────────────────────────────────────────

    def learn(self, category: RecordCategory, field_name: str, header: str) -> bool:
        """Append *header* to the learned tier for (category, field).

        Returns True if it was new, False if already known or blank.
        """
        return self.learn_many(category, {field_name: header}) == 1

    def learn_many(self, category: RecordCategory, matches: dict[str, str]) -> int:
        """Learn every ``field -> header`` pair in one store write.  Returns count of new aliases."""
        if category == RecordCategory.UNKNOWN or not matches:
            return 0

        added = 0

        def merge(raw: Any) -> Any:
            nonlocal added
            added = 0
            learned = _sanitize(raw)
            fields = learned.setdefault(str(category), {})
            for field_name, header in matches.items():
                alias = normalize_header(header)
                if not alias:
                    continue
                headers = fields.setdefault(field_name, [])
                if alias not in headers:
                    headers.append(alias)
                    added += 1
            return learned if added else raw

        self.store.update(self.key, merge)

        if added:
            logger.debug(f"Learned {added} new header alias(es) for {category}: {matches}")
        return added
