"""
JSON file implementation of KeyValueStore.

All keys live in one JSON object on disk. Writes go to a temp file that is then
swapped in with os.replace, so readers never see a half-written file.
"""
import asyncio
import json
import logging
import os
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from exercise_resolver.exceptions import CacheStoreError

logger = logging.getLogger(__name__)


class JsonFileKeyValueStore:
    """File-backed string store for local development and single-process use."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read_all)
        value = data.get(key)
        return value if isinstance(value, str) else None

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._update, key, value)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._update, key, None)

    def _read_all(self) -> Dict[str, object]:
        with self._lock:
            return self._read_unlocked()

    def _read_unlocked(self) -> Dict[str, object]:
        if not self._path.exists():
            return {}
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise CacheStoreError(f"Cannot read {self._path}: {e}") from e

        if not text.strip():
            return {}
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt store file {self._path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _update(self, key: str, value: Optional[str]) -> None:
        with self._lock:
            data = self._read_unlocked()
            if value is None:
                if key not in data:
                    return
                del data[key]
            else:
                data[key] = value

            tmp_path = self._path.with_name(self._path.name + ".tmp")
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
                os.replace(tmp_path, self._path)
            except OSError as e:
                raise CacheStoreError(f"Cannot write {self._path}: {e}") from e
