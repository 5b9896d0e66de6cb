"""Storage infrastructure for folderbridge.

Provides capability protocols, capability/metadata persistence, and text
I/O helpers.
"""

from .capabilities import (
    Capability,
    DirectoryCapability,
    EntryKind,
    FileCapability,
    FileInfo,
    LocalDirectoryCapability,
    LocalFileCapability,
    PermissionState,
)
from .capability_store import CapabilityStore, InMemoryCapabilityStore, SqliteCapabilityStore
from .metadata_store import (
    METADATA_KEY,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    MetadataStore,
)
from .path_guard import InvalidStatePathError, ensure_within_root, normalize_path, safe_join

__all__ = [
    # Capabilities
    "Capability",
    "DirectoryCapability",
    "EntryKind",
    "FileCapability",
    "FileInfo",
    "LocalDirectoryCapability",
    "LocalFileCapability",
    "PermissionState",
    # Stores
    "CapabilityStore",
    "InMemoryCapabilityStore",
    "SqliteCapabilityStore",
    "METADATA_KEY",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MetadataStore",
    # Path guard
    "InvalidStatePathError",
    "ensure_within_root",
    "normalize_path",
    "safe_join",
]
