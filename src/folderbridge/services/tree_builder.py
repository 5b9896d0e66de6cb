"""Tree Builder - typed, sorted trees of tracked folders.

Two modes:
- build_full(): every descendant, eagerly, under a synthetic folder root
- expand_one_level(): direct children of one directory, sub-directories left
  unexpanded (``children is None``)

Children are always sorted directories-first, then by case-sensitive name.
"""

from __future__ import annotations

from typing import List, Tuple

import structlog

from folderbridge.domain.errors import FolderBridgeError
from folderbridge.domain.folders import TrackedFolder
from folderbridge.domain.tree import FileTreeNode, NodeType, node_sort_key
from folderbridge.infrastructure.storage.capabilities import (
    Capability,
    DirectoryCapability,
    EntryKind,
)
from folderbridge.services.path_resolver import PathResolver, normalize_virtual_path

logger = structlog.get_logger()


class TreeBuilder:
    def __init__(self, resolver: PathResolver):
        self._resolver = resolver

    async def build_full(self, folder: TrackedFolder) -> FileTreeNode:
        """Eagerly build the whole tree of ``folder``.

        A subtree that cannot be enumerated is left unexpanded; its siblings
        are still returned.
        """
        root_path = folder.root_path
        children = await self._build_children(folder.capability, root_path)
        logger.debug("tree_built", folder_id=folder.id, entries=len(children))
        return FileTreeNode(
            name=folder.name,
            path=root_path,
            type=NodeType.DIRECTORY,
            children=children,
            expanded=True,
        )

    async def expand_one_level(self, path: str) -> List[FileTreeNode]:
        """Direct children of the directory at ``path``, sorted."""
        directory = await self._resolver.resolve_directory(path)
        base_path = normalize_virtual_path(path)
        pairs = await self._list_level(directory, base_path)
        return [node for node, _capability in pairs]

    async def _build_children(
        self,
        directory: DirectoryCapability,
        base_path: str,
    ) -> List[FileTreeNode]:
        pairs = await self._list_level(directory, base_path)
        for node, capability in pairs:
            if node.type is not NodeType.DIRECTORY:
                continue
            try:
                node.children = await self._build_children(capability, node.path)
                node.expanded = True
            except FolderBridgeError as exc:
                logger.warning("walk_subtree_failed", path=node.path, error=str(exc))
        return [node for node, _capability in pairs]

    async def _list_level(
        self,
        directory: DirectoryCapability,
        base_path: str,
    ) -> List[Tuple[FileTreeNode, Capability]]:
        pairs: List[Tuple[FileTreeNode, Capability]] = []
        async for child in directory.list_children():
            pairs.append((await self._describe(child, f"{base_path}/{child.name}"), child))
        # Enumeration order is platform-defined.
        pairs.sort(key=lambda pair: node_sort_key(pair[0]))
        return pairs

    @staticmethod
    async def _describe(child: Capability, path: str) -> FileTreeNode:
        if child.kind == EntryKind.DIRECTORY:
            return FileTreeNode(
                name=child.name,
                path=path,
                type=NodeType.DIRECTORY,
                children=None,
                expanded=False,
            )
        size = None
        last_modified = None
        try:
            info = await child.stat()
            size = info.size
            last_modified = info.last_modified
        except FolderBridgeError as exc:
            logger.warning("file_stat_failed", path=path, error=str(exc))
        return FileTreeNode(
            name=child.name,
            path=path,
            type=NodeType.FILE,
            size=size,
            last_modified=last_modified,
        )


__all__ = ["TreeBuilder"]
