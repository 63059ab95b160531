"""Shared test fixtures for fitpulse."""

import os
import tempfile

import pytest

from fitpulse.ingest.aliases import HeaderAliasTable, InMemoryAliasStore
from fitpulse.ingest.parser import CSVParser

RECOVERY_CSV = (
    "Cycle start time,Cycle end time,Recovery score %,Resting heart rate (bpm),"
    "Heart rate variability (ms),Skin temp (celsius)\n"
    "2024-01-01 22:10:00,2024-01-02 21:40:00,72,52,55.5,33.1\n"
    "2024-01-02 21:40:00,2024-01-03 22:05:00,41,58,38,33.4\n"
    "2024-01-03 22:05:00,2024-01-04 22:30:00,88,49,71,33.0\n"
)

SLEEP_CSV = (
    "Cycle start time,Sleep onset,Wake onset,Sleep performance %,Asleep duration (min),"
    "Light sleep duration (min),Deep (SWS) duration (min),REM duration (min),Awake duration (min),"
    "Sleep efficiency %\n"
    "2024-01-01 22:10:00,2024-01-01 23:02:00,2024-01-02 07:01:00,91,452,230,98,124,27,94\n"
    "2024-01-02 21:40:00,2024-01-02 23:30:00,2024-01-03 06:15:00,70,370,200,70,100,35,89\n"
)

WORKOUT_CSV = (
    "Cycle start time,Workout start time,Workout end time,Duration (min),Activity name,"
    "Activity Strain,Energy burned (cal),Max HR (bpm),Average HR (bpm)\n"
    "2024-01-01 22:10:00,2024-01-02 17:00:00,2024-01-02 17:45:00,45,Running,12.4,520,181,152\n"
)

JOURNAL_CSV = (
    "Cycle start time,Cycle end time,Question text,Answered yes,Notes\n"
    "2024-01-01 22:10:00,2024-01-02 21:40:00,Have any alcoholic drinks?,true,\n"
    "2024-01-02 21:40:00,2024-01-03 22:05:00,Read (non-screened device) while in bed?,0,"
    "\"Finished chapter 3, slept early\"\n"
)

STRONGLIFTS_CSV = (
    "Date,Exercise,Weight,Reps,Sets,Volume,Duration\n"
    "2024-01-02,Squat,100,5,5,,45:00\n"
    "2024-01-02,Bench Press,60,5,5,1500,45:00\n"
)

DAILY_CSV = (
    "Date,Steps,Calories,Ambient temperature (celsius)\n"
    "2024-01-01,10432,2650,18.5\n"
    "2024-01-02,8120,2390,17\n"
)


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def alias_store():
    return InMemoryAliasStore()


@pytest.fixture
def alias_table(alias_store):
    return HeaderAliasTable(alias_store)


@pytest.fixture
def parser(alias_table):
    return CSVParser(alias_table)


@pytest.fixture
def write_csv(tmp_dir):
    """Write CSV text into the temp dir and return its path."""

    def _write(name: str, text: str) -> str:
        path = os.path.join(tmp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    return _write


@pytest.fixture
def tmp_config_file(tmp_dir):
    """YAML config that keeps every fitpulse path inside the temp dir."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
            "log_dir": os.path.join(tmp_dir, "data", "logs"),
            "records_dir": os.path.join(tmp_dir, "data", "records"),
        },
        "ingest": {"alias_store_path": os.path.join(tmp_dir, "data", "learned_aliases.json")},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def samples():
    """Representative vendor exports keyed by category name."""
    return {
        "recovery": RECOVERY_CSV,
        "sleep": SLEEP_CSV,
        "workout": WORKOUT_CSV,
        "journal": JOURNAL_CSV,
        "stronglifts": STRONGLIFTS_CSV,
        "daily": DAILY_CSV,
    }
