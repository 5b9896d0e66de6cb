"""Folder Registry - the authoritative list of tracked folders.

Rehydrates from the metadata and capability stores on startup and is
mutated only through add()/remove(). Folders whose capability went missing
or whose permission is no longer granted are not surfaced as active, but
their metadata records are preserved and reported as disconnected.
"""

from __future__ import annotations

import asyncio
import uuid
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

import structlog

from folderbridge.domain.errors import AbortedByUser, FolderBridgeError, NotFoundError
from folderbridge.domain.folders import FolderMetadataRecord, TrackedFolder
from folderbridge.infrastructure.storage.capabilities import (
    DirectoryCapability,
    LocalDirectoryCapability,
    PermissionState,
)
from folderbridge.infrastructure.storage.capability_store import CapabilityStore
from folderbridge.infrastructure.storage.metadata_store import MetadataStore
from folderbridge.infrastructure.time_utils import epoch_ms

logger = structlog.get_logger()


class DirectoryPicker(Protocol):
    """Capability acquisition: prompts the user for a directory.

    Raises AbortedByUser when the user cancels.
    """

    async def pick_directory(self) -> DirectoryCapability: ...


class StaticPathPicker:
    """Picker for a directory the user already chose (CLI argument, API body)."""

    def __init__(self, path: Union[str, Path]):
        self.raw_path = str(path or "").strip()
        self.path = Path(self.raw_path).expanduser()

    async def pick_directory(self) -> LocalDirectoryCapability:
        if not self.raw_path:
            raise AbortedByUser("no directory chosen")
        if not self.path.is_dir():
            raise NotFoundError("Directory not found", str(self.path), "pick")
        return LocalDirectoryCapability(self.path)


def generate_folder_id() -> str:
    """Return a collision-resistant folder id (128 random bits)."""
    return f"folder-{uuid.uuid4().hex}"


class FolderRegistry:
    """Tracks user-granted folders in registration order."""

    def __init__(
        self,
        capability_store: CapabilityStore,
        metadata_store: MetadataStore,
        picker: Optional[DirectoryPicker] = None,
        *,
        id_factory: Callable[[], str] = generate_folder_id,
        clock: Callable[[], int] = epoch_ms,
    ):
        self._capability_store = capability_store
        self._metadata_store = metadata_store
        self._picker = picker
        self._id_factory = id_factory
        self._clock = clock
        # All known records (active and disconnected), registration order.
        self._records: List[FolderMetadataRecord] = []
        self._active: Dict[str, TrackedFolder] = {}
        # Serializes add/remove across their store awaits.
        self._mutation_lock = asyncio.Lock()

    # -------------------------------------------------------------------------
    # Rehydration
    # -------------------------------------------------------------------------

    async def load(self) -> List[TrackedFolder]:
        """Rebuild the in-memory list from the persistent stores.

        Missing capabilities and non-granted permissions drop the folder
        from the active list without raising.
        """
        records = await asyncio.to_thread(self._metadata_store.load)
        active: Dict[str, TrackedFolder] = {}

        for record in records:
            capability = await asyncio.to_thread(self._capability_store.get, record.id)
            if capability is None:
                logger.info(
                    "folder_dropped_missing_capability",
                    folder_id=record.id,
                    name=record.name,
                )
                continue
            if not await self._permission_granted(capability, record):
                logger.info(
                    "folder_dropped_permission",
                    folder_id=record.id,
                    name=record.name,
                )
                continue
            active[record.id] = TrackedFolder(
                id=record.id,
                name=record.name,
                capability=capability,
                added_at=record.added_at,
            )

        self._records = list(records)
        self._active = active
        logger.info(
            "folder_registry_loaded",
            active=len(active),
            disconnected=len(records) - len(active),
        )
        return self.list()

    @staticmethod
    async def _permission_granted(capability: Any, record: FolderMetadataRecord) -> bool:
        query = getattr(capability, "query_permission", None)
        if query is None:
            return True
        try:
            state = await query("readwrite")
        except Exception as exc:
            # A failing query is treated like an absent one.
            logger.debug("permission_query_failed", folder_id=record.id, error=str(exc))
            return True
        if state is None:
            return True
        value = state.value if isinstance(state, PermissionState) else str(state)
        return value == PermissionState.GRANTED.value

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def add(self, picker: Optional[DirectoryPicker] = None) -> Optional[TrackedFolder]:
        """Ask the user for a directory and start tracking it.

        Returns None when the user cancels the picker. The folder becomes
        visible only after both stores accepted it; a failing store leaves
        the registry unchanged.
        """
        picker = picker or self._picker
        if picker is None:
            raise FolderBridgeError("No directory picker configured", operation="add")

        try:
            capability = await picker.pick_directory()
        except AbortedByUser:
            logger.info("folder_add_aborted")
            return None

        async with self._mutation_lock:
            folder_id = self._allocate_id()
            folder = TrackedFolder(
                id=folder_id,
                name=self._unique_name(capability.name),
                capability=capability,
                added_at=self._clock(),
            )
            records = [*self._records, folder.to_record()]
            await asyncio.to_thread(self._capability_store.put, folder_id, capability)
            try:
                await asyncio.to_thread(self._metadata_store.save, records)
            except Exception:
                logger.warning("folder_add_rolled_back", folder_id=folder_id, name=folder.name)
                await asyncio.to_thread(self._capability_store.delete, folder_id)
                raise
            self._records = records
            self._active[folder_id] = folder

        logger.info("folder_added", folder_id=folder_id, name=folder.name)
        return folder

    async def remove(self, folder_id: str) -> bool:
        """Stop tracking ``folder_id``. Unknown ids are a no-op.

        Returns True when a record was removed.
        """
        async with self._mutation_lock:
            known = any(record.id == folder_id for record in self._records)
            if known:
                records = [record for record in self._records if record.id != folder_id]
                await asyncio.to_thread(self._metadata_store.save, records)
                self._records = records
            await asyncio.to_thread(self._capability_store.delete, folder_id)
            self._active.pop(folder_id, None)
        logger.info("folder_removed", folder_id=folder_id, known=known)
        return known

    def _allocate_id(self) -> str:
        taken = {record.id for record in self._records}
        folder_id = self._id_factory()
        while folder_id in taken:
            folder_id = self._id_factory()
        return folder_id

    def _unique_name(self, base_name: str) -> str:
        base = (base_name or "folder").replace("/", "_").strip() or "folder"
        taken = {record.name for record in self._records}
        if base not in taken:
            return base
        suffix = 2
        while f"{base} ({suffix})" in taken:
            suffix += 1
        return f"{base} ({suffix})"

    # -------------------------------------------------------------------------
    # Queries (no I/O)
    # -------------------------------------------------------------------------

    def list(self) -> List[TrackedFolder]:
        """Snapshot of active folders in registration order."""
        return [self._active[record.id] for record in self._records if record.id in self._active]

    def disconnected(self) -> List[FolderMetadataRecord]:
        """Records kept on disk whose folder could not be rehydrated."""
        return [record for record in self._records if record.id not in self._active]

    def get(self, folder_id: str) -> TrackedFolder:
        folder = self._active.get(folder_id)
        if folder is None:
            raise NotFoundError("Folder not found", folder_id, "get_folder")
        return folder

    def find_by_name(self, name: str) -> Optional[TrackedFolder]:
        """First active folder with display name ``name``, in registration order."""
        for folder in self.list():
            if folder.name == name:
                return folder
        return None


__all__ = [
    "DirectoryPicker",
    "FolderRegistry",
    "StaticPathPicker",
    "generate_folder_id",
]
