"""FolderBridge - wires stores, registry and services together.

One bridge per process. The change notifier is created here (or passed
in) and shared by every component that emits or observes changes.
"""

from typing import List, Optional

import structlog

from folderbridge.config import Settings
from folderbridge.domain.folders import TrackedFolder
from folderbridge.domain.tree import FileTreeNode
from folderbridge.infrastructure.storage.capability_store import (
    InMemoryCapabilityStore,
    SqliteCapabilityStore,
)
from folderbridge.infrastructure.storage.metadata_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    MetadataStore,
)
from folderbridge.services.change_notifier import ChangeNotifier
from folderbridge.services.file_operations import FileOperations
from folderbridge.services.folder_registry import DirectoryPicker, FolderRegistry
from folderbridge.services.path_resolver import PathResolver
from folderbridge.services.resource_service import ResourceService
from folderbridge.services.search_service import SearchService
from folderbridge.services.tree_builder import TreeBuilder

logger = structlog.get_logger()


class FolderBridge:
    """All services over one folder registry."""

    def __init__(
        self,
        registry: FolderRegistry,
        *,
        notifier: Optional[ChangeNotifier] = None,
        settings: Optional[Settings] = None,
    ):
        self.registry = registry
        self.notifier = notifier or ChangeNotifier()
        self.resolver = PathResolver(registry)
        self.trees = TreeBuilder(self.resolver)
        self.search = SearchService(registry)
        self.resources = ResourceService(registry, self.resolver)

        file_options = {}
        if settings is not None:
            file_options = {
                "default_limit": settings.read_default_limit,
                "max_line_chars": settings.read_max_line_chars,
            }
        self.files = FileOperations(self.resolver, self.notifier, **file_options)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        picker: Optional[DirectoryPicker] = None,
        notifier: Optional[ChangeNotifier] = None,
    ) -> "FolderBridge":
        """Bridge persisting to the state root of ``settings``."""
        settings.ensure_directories()
        registry = FolderRegistry(
            SqliteCapabilityStore(settings.capability_db_path),
            MetadataStore(JsonFileKeyValueStore(settings.metadata_path)),
            picker,
        )
        logger.debug("folder_bridge_created", state_root=str(settings.state_root))
        return cls(registry, notifier=notifier, settings=settings)

    @classmethod
    def in_memory(
        cls,
        picker: Optional[DirectoryPicker] = None,
        notifier: Optional[ChangeNotifier] = None,
    ) -> "FolderBridge":
        registry = FolderRegistry(
            InMemoryCapabilityStore(),
            MetadataStore(InMemoryKeyValueStore()),
            picker,
        )
        return cls(registry, notifier=notifier)

    async def load(self) -> List[TrackedFolder]:
        return await self.registry.load()

    async def folder_tree(self, folder_id: str) -> FileTreeNode:
        """Full tree of the tracked folder ``folder_id``."""
        return await self.trees.build_full(self.registry.get(folder_id))


__all__ = ["FolderBridge"]
