"""Tests for capability and metadata persistence."""

import json
import sqlite3

from folderbridge.domain.folders import FolderMetadataRecord
from folderbridge.infrastructure.storage.capabilities import LocalDirectoryCapability
from folderbridge.infrastructure.storage.capability_store import (
    InMemoryCapabilityStore,
    SqliteCapabilityStore,
)
from folderbridge.infrastructure.storage.metadata_store import (
    METADATA_KEY,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    MetadataStore,
)


def test_sqlite_capability_store_survives_reopen(tmp_path):
    db_path = tmp_path / "state" / "capabilities.db"
    capability = LocalDirectoryCapability(tmp_path)

    SqliteCapabilityStore(db_path).put("folder-1", capability)
    reopened = SqliteCapabilityStore(db_path)

    assert reopened.get("folder-1") == capability
    assert reopened.keys() == ["folder-1"]
    assert reopened.get("folder-missing") is None


def test_sqlite_capability_store_delete(tmp_path):
    store = SqliteCapabilityStore(tmp_path / "capabilities.db")
    store.put("folder-1", LocalDirectoryCapability(tmp_path))

    store.delete("folder-1")
    store.delete("folder-1")

    assert store.get("folder-1") is None
    assert store.keys() == []


def test_sqlite_capability_store_unreadable_payload(tmp_path):
    db_path = tmp_path / "capabilities.db"
    store = SqliteCapabilityStore(db_path)
    conn = sqlite3.connect(str(db_path))
    conn.execute(
        "INSERT INTO folder_capabilities(folder_id, stored_at, payload) VALUES (?, ?, ?)",
        ("folder-bad", "2024-01-01T00:00:00+00:00", b"not a pickle"),
    )
    conn.commit()
    conn.close()

    assert store.get("folder-bad") is None


def test_in_memory_capability_store():
    store = InMemoryCapabilityStore()
    store.put("a", "handle")
    assert store.get("a") == "handle"
    assert store.keys() == ["a"]
    store.delete("a")
    assert store.get("a") is None


def test_json_key_value_store_persists(tmp_path):
    path = tmp_path / "metadata.json"
    JsonFileKeyValueStore(path).set_item("k", "v")

    reopened = JsonFileKeyValueStore(path)
    assert reopened.get_item("k") == "v"
    reopened.remove_item("k")
    assert JsonFileKeyValueStore(path).get_item("k") is None


def test_metadata_store_round_trip(tmp_path):
    kv = JsonFileKeyValueStore(tmp_path / "metadata.json")
    records = [
        FolderMetadataRecord(id="folder-1", name="alpha", added_at=1),
        FolderMetadataRecord(id="folder-2", name="beta", added_at=2),
    ]

    MetadataStore(kv).save(records)

    assert MetadataStore(kv).load() == records
    stored = json.loads(kv.get_item(METADATA_KEY))
    assert stored[0] == {"id": "folder-1", "name": "alpha", "addedAt": 1}


def test_metadata_store_tolerates_malformed_data():
    kv = InMemoryKeyValueStore()
    store = MetadataStore(kv)

    assert store.load() == []

    kv.set_item(METADATA_KEY, "{not json")
    assert store.load() == []

    kv.set_item(METADATA_KEY, json.dumps({"id": "x"}))
    assert store.load() == []

    kv.set_item(
        METADATA_KEY,
        json.dumps([{"id": "folder-1", "name": "ok", "addedAt": 5}, {"name": "no id"}, 3]),
    )
    assert store.load() == [FolderMetadataRecord(id="folder-1", name="ok", added_at=5)]
