"""
Local filesystem record store.

Each (user, category, date) group is one gzip-compressed JSON file at
``<base_path>/<user>/<category>/<date>.json.gz``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
from loguru import logger

from fitpulse.ingest.models import RecordCategory

from .base import RecordStore, StorageKeyError, StoragePermissionError, record_key
from .compression import compress_json, decompress_json

_SUFFIX = ".json.gz"


class LocalRecordStore(RecordStore):
    """Local filesystem record store."""

    def __init__(self, base_path: str = "~/.fitpulse-data/records", **config):
        super().__init__(**config)
        self.base_path = Path(base_path).expanduser().resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str, suffix: str = _SUFFIX) -> Path:
        """Resolve a storage key to an absolute path under ``base_path``.

        Rejects unsafe keys (absolute paths, traversal, empty keys, and
        backslash-delimited paths) to prevent writes outside ``base_path``.
        """
        raw_key = key.strip()
        if not raw_key:
            raise StoragePermissionError("Storage key cannot be empty.")
        if "\x00" in raw_key:
            raise StoragePermissionError("Storage key cannot contain null bytes.")
        if "\\" in raw_key:
            raise StoragePermissionError("Storage key cannot contain backslashes. Use '/' separators.")

        key_path = Path(raw_key)
        if key_path.is_absolute() or raw_key.startswith("~"):
            raise StoragePermissionError(f"Unsafe storage key '{key}': absolute paths are not allowed.")

        full_path = (self.base_path / (raw_key + suffix)).resolve()
        try:
            full_path.relative_to(self.base_path)
        except ValueError as e:
            raise StoragePermissionError(f"Unsafe storage key '{key}': path traversal is not allowed.") from e
        return full_path

    async def save_group(self, key: str, records: list[dict[str, Any]]) -> None:
        path = self._get_full_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(compress_json(records))
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot write to {path}: {e}") from e
        logger.debug(f"Committed {len(records)} record(s) to {key}")

    async def load(self, user_id: str, category: RecordCategory | str, day: str) -> list[dict[str, Any]]:
        key = record_key(user_id, category, day)
        path = self._get_full_path(key)
        if not path.exists():
            raise StorageKeyError(f"Key not found: {key}")
        try:
            async with aiofiles.open(path, "rb") as f:
                data = await f.read()
        except PermissionError as e:
            raise StoragePermissionError(f"Cannot read {path}: {e}") from e
        return decompress_json(data)

    async def list_dates(self, user_id: str, category: RecordCategory | str) -> list[str]:
        directory = self._get_full_path(f"{user_id}/{category}", suffix="")
        if not directory.is_dir():
            return []
        return sorted(p.name[: -len(_SUFFIX)] for p in directory.iterdir() if p.name.endswith(_SUFFIX))

    async def delete(self, user_id: str, category: RecordCategory | str, day: str) -> bool:
        path = self._get_full_path(record_key(user_id, category, day))
        if not path.exists():
            return False
        await aiofiles.os.remove(path)
        return True
