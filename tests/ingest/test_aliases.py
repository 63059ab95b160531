"""Tests for ingest.aliases — alias tiers and the learned-alias store."""

import json
import threading
from pathlib import Path

import pytest

from fitpulse.core.exceptions import AliasStoreError
from fitpulse.ingest.aliases import (
    LEARNED_ALIASES_KEY,
    STATIC_ALIASES,
    VENDOR_COLUMNS,
    AliasStore,
    HeaderAliasTable,
    InMemoryAliasStore,
    JsonFileAliasStore,
)
from fitpulse.ingest.models import FIELD_TYPES, RecordCategory


class TestTables:
    def test_static_tier_covers_every_field(self):
        for category, fields in FIELD_TYPES.items():
            assert set(STATIC_ALIASES[category]) == set(fields), category

    def test_vendor_fields_are_target_fields(self):
        for category, fields in VENDOR_COLUMNS.items():
            assert set(fields) <= set(FIELD_TYPES[category]), category


class TestStores:
    def test_protocol(self, tmp_dir):
        assert isinstance(InMemoryAliasStore(), AliasStore)
        assert isinstance(JsonFileAliasStore(Path(tmp_dir) / "a.json"), AliasStore)

    def test_in_memory_returns_copies(self):
        store = InMemoryAliasStore()
        store.put("k", {"a": [1]})
        value = store.get("k")
        value["a"].append(2)
        assert store.get("k") == {"a": [1]}

    def test_in_memory_missing_key(self):
        assert InMemoryAliasStore().get("missing") is None

    def test_json_file_roundtrip(self, tmp_dir):
        path = Path(tmp_dir) / "nested" / "aliases.json"
        store = JsonFileAliasStore(path)
        store.put("k", {"recovery": {"date": ["day"]}})
        assert path.exists()
        assert JsonFileAliasStore(path).get("k") == {"recovery": {"date": ["day"]}}

    def test_json_file_keeps_other_keys(self, tmp_dir):
        store = JsonFileAliasStore(Path(tmp_dir) / "aliases.json")
        store.put("a", 1)
        store.put("b", 2)
        assert store.get("a") == 1
        assert store.get("b") == 2

    def test_json_file_corrupt_is_empty(self, tmp_dir):
        path = Path(tmp_dir) / "aliases.json"
        path.write_text("{not json", encoding="utf-8")
        assert JsonFileAliasStore(path).get("k") is None

    def test_json_file_non_object_is_empty(self, tmp_dir):
        path = Path(tmp_dir) / "aliases.json"
        path.write_text("[1, 2]", encoding="utf-8")
        assert JsonFileAliasStore(path).get("k") is None

    def test_json_file_write_failure(self, tmp_dir):
        blocker = Path(tmp_dir) / "blocker"
        blocker.write_text("x", encoding="utf-8")
        store = JsonFileAliasStore(blocker / "aliases.json")
        with pytest.raises(AliasStoreError, match="Cannot write"):
            store.put("k", {})


class TestHeaderAliasTable:
    def test_aliases_are_lowercase_and_deduped(self, alias_table):
        alias_table.learn(RecordCategory.DAILY, "steps", "STEPS")
        aliases = alias_table.aliases_for(RecordCategory.DAILY, "steps")
        assert aliases.count("steps") == 1
        assert all(a == a.lower() for a in aliases)

    def test_learned_tier_is_unioned(self, alias_table):
        alias_table.learn(RecordCategory.DAILY, "steps", " Schritte ")
        assert "schritte" in alias_table.aliases_for(RecordCategory.DAILY, "steps")
        assert "steps" in alias_table.aliases_for(RecordCategory.DAILY, "steps")

    def test_learn_reports_novelty(self, alias_table):
        assert alias_table.learn(RecordCategory.SLEEP, "rem_time", "REM mins") is True
        assert alias_table.learn(RecordCategory.SLEEP, "rem_time", "rem mins") is False
        assert alias_table.learn(RecordCategory.SLEEP, "rem_time", "   ") is False

    def test_unknown_category_is_never_learned(self, alias_table):
        assert alias_table.learn(RecordCategory.UNKNOWN, "date", "Date") is False
        assert alias_table.learn_many(RecordCategory.UNKNOWN, {"date": "Date"}) == 0

    def test_persisted_shape(self, alias_store, alias_table):
        alias_table.learn_many(RecordCategory.RECOVERY, {"date": "Day", "hrv_rmssd": "HRV"})
        assert alias_store.get(LEARNED_ALIASES_KEY) == {"recovery": {"date": ["day"], "hrv_rmssd": ["hrv"]}}

    def test_learn_many_counts_new_only(self, alias_table):
        assert alias_table.learn_many(RecordCategory.DAILY, {"steps": "Steps", "date": "Day"}) == 2
        assert alias_table.learn_many(RecordCategory.DAILY, {"steps": "steps"}) == 0

    def test_shared_store_across_tables(self, tmp_dir):
        path = Path(tmp_dir) / "aliases.json"
        HeaderAliasTable(JsonFileAliasStore(path)).learn(RecordCategory.WORKOUT, "energy", "Kcal")
        fresh = HeaderAliasTable(JsonFileAliasStore(path))
        assert "kcal" in fresh.aliases_for(RecordCategory.WORKOUT, "energy")
        assert json.loads(path.read_text())[LEARNED_ALIASES_KEY]["workout"]["energy"] == ["kcal"]

    def test_garbage_in_store_is_ignored(self):
        store = InMemoryAliasStore({LEARNED_ALIASES_KEY: {"daily": {"steps": ["ok", 3]}, "sleep": "nope"}})
        table = HeaderAliasTable(store)
        assert table.learned() == {"daily": {"steps": ["ok"]}}

    def test_concurrent_learning_loses_nothing(self, alias_table):
        def worker(n: int) -> None:
            for i in range(20):
                alias_table.learn(RecordCategory.DAILY, "steps", f"steps {n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(alias_table.learned_aliases(RecordCategory.DAILY, "steps")) == 80

    @pytest.mark.parametrize("shared_store", [True, False])
    def test_tables_sharing_a_file_lose_nothing(self, tmp_dir, shared_store):
        path = Path(tmp_dir) / "aliases.json"
        store = JsonFileAliasStore(path)
        tables = [
            HeaderAliasTable(store if shared_store else JsonFileAliasStore(path)),
            HeaderAliasTable(store if shared_store else JsonFileAliasStore(path)),
        ]

        def worker(n: int) -> None:
            for i in range(50):
                tables[n].learn(RecordCategory.DAILY, "steps", f"steps {n}-{i}")

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        fresh = HeaderAliasTable(JsonFileAliasStore(path))
        assert len(fresh.learned_aliases(RecordCategory.DAILY, "steps")) == 100


class TestStoreUpdate:
    def test_in_memory_update(self):
        store = InMemoryAliasStore({"k": [1]})
        assert store.update("k", lambda v: v + [2]) == [1, 2]
        assert store.get("k") == [1, 2]

    def test_update_missing_key_sees_none(self, tmp_dir):
        store = JsonFileAliasStore(Path(tmp_dir) / "aliases.json")
        assert store.update("k", lambda v: {"seen": v}) == {"seen": None}
        assert store.get("k") == {"seen": None}

    def test_unchanged_value_is_not_written(self, tmp_dir):
        path = Path(tmp_dir) / "aliases.json"
        store = JsonFileAliasStore(path)
        store.update("k", lambda v: v)
        assert not path.exists()

    def test_known_alias_does_not_write(self, tmp_dir):
        path = Path(tmp_dir) / "aliases.json"
        table = HeaderAliasTable(JsonFileAliasStore(path))
        table.learn(RecordCategory.DAILY, "steps", "Schritte")
        mtime = path.stat().st_mtime_ns
        assert table.learn(RecordCategory.DAILY, "steps", "schritte") is False
        assert path.stat().st_mtime_ns == mtime
