"""Textual key-value storage for folder metadata records.

The metadata list lives as one JSON array under a single well-known key,
mirroring a browser-style ``localStorage`` slot.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence

import structlog

from folderbridge.domain.folders import FolderMetadataRecord
from folderbridge.infrastructure.storage.io_text import read_json_safe, write_json_atomic

logger = structlog.get_logger()

METADATA_KEY = "tracked-folders-metadata"


class KeyValueStore(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class InMemoryKeyValueStore:
    def __init__(self) -> None:
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileKeyValueStore:
    """String key-value pairs persisted as one JSON object, written atomically."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, str]:
        data = read_json_safe(str(self._path))
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            data = self._load()
            data[key] = str(value)
            write_json_atomic(str(self._path), data)

    def remove_item(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                write_json_atomic(str(self._path), data)


class MetadataStore:
    """Reads and writes the FolderMetadataRecord list."""

    def __init__(self, kv: KeyValueStore, key: str = METADATA_KEY) -> None:
        self._kv = kv
        self._key = key

    def load(self) -> List[FolderMetadataRecord]:
        raw = self._kv.get_item(self._key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("folder_metadata_malformed", key=self._key, error=str(exc))
            return []
        if not isinstance(data, list):
            logger.warning("folder_metadata_malformed", key=self._key, error="expected a JSON array")
            return []

        records: List[FolderMetadataRecord] = []
        for item in data:
            record = FolderMetadataRecord.from_dict(item)
            if record is None:
                logger.warning("folder_metadata_record_skipped", record=repr(item)[:200])
                continue
            records.append(record)
        return records

    def save(self, records: Sequence[FolderMetadataRecord]) -> None:
        payload = json.dumps([record.to_dict() for record in records], ensure_ascii=False)
        self._kv.set_item(self._key, payload)
