"""Virtual path resolution.

A virtual path looks like ``/<folder-name>/dir/file.txt``. The first
segment selects a tracked folder by display name (first match in
registration order); the remaining segments are walked through the
folder's directory capability.
"""

from __future__ import annotations

from typing import List, Tuple

from folderbridge.domain.errors import InvalidPathError, NotFoundError
from folderbridge.domain.folders import TrackedFolder
from folderbridge.infrastructure.storage.capabilities import (
    Capability,
    DirectoryCapability,
    FileCapability,
)
from folderbridge.services.folder_registry import FolderRegistry


def split_virtual_path(path: str) -> List[str]:
    """Split on ``/`` and discard empty segments."""
    return [segment for segment in str(path or "").split("/") if segment]


def join_virtual_path(*segments: str) -> str:
    parts: List[str] = []
    for segment in segments:
        parts.extend(split_virtual_path(segment))
    return "/" + "/".join(parts)


def normalize_virtual_path(path: str) -> str:
    segments = split_virtual_path(path)
    if not segments:
        raise InvalidPathError("Invalid path: empty path", str(path or ""), "normalize")
    return "/" + "/".join(segments)


class PathResolver:
    """Translates virtual paths into capability handles."""

    def __init__(self, registry: FolderRegistry):
        self._registry = registry

    def split(self, path: str) -> Tuple[TrackedFolder, List[str]]:
        """Return the owning folder and the segments below it."""
        segments = split_virtual_path(path)
        if not segments:
            raise InvalidPathError("Invalid path: empty path", str(path or ""), "resolve")
        for segment in segments[1:]:
            if segment in (".", ".."):
                raise InvalidPathError(f"Invalid path segment {segment!r}", path, "resolve")

        folder = self._registry.find_by_name(segments[0])
        if folder is None:
            raise NotFoundError(f"Folder not found: {segments[0]}", path, "resolve")
        return folder, segments[1:]

    async def resolve(self, path: str) -> Capability:
        """Resolve ``path`` to a directory or file capability.

        Every segment but the last must be a directory. The last segment is
        tried as a directory first, then as a file.
        """
        folder, rest = self.split(path)
        if not rest:
            return folder.capability

        parent = await self._walk_directories(folder.capability, rest[:-1], path, create=False)
        last = rest[-1]
        try:
            return await parent.get_child_directory(last)
        except NotFoundError:
            pass
        try:
            return await parent.get_child_file(last)
        except NotFoundError as exc:
            raise NotFoundError(f"Path not found: {path}", path, "resolve") from exc

    async def resolve_directory(self, path: str, *, create: bool = False) -> DirectoryCapability:
        folder, rest = self.split(path)
        return await self._walk_directories(folder.capability, rest, path, create=create)

    async def resolve_file(self, path: str, *, create: bool = False) -> FileCapability:
        folder, rest = self.split(path)
        if not rest:
            raise NotFoundError(f"Path is a folder, not a file: {path}", path, "resolve_file")

        parent = await self._walk_directories(folder.capability, rest[:-1], path, create=create)
        try:
            return await parent.get_child_file(rest[-1], create=create)
        except NotFoundError as exc:
            raise NotFoundError(f"File not found: {path}", path, "resolve_file") from exc

    @staticmethod
    async def _walk_directories(
        start: DirectoryCapability,
        segments: List[str],
        path: str,
        *,
        create: bool,
    ) -> DirectoryCapability:
        current = start
        for segment in segments:
            try:
                current = await current.get_child_directory(segment, create=create)
            except NotFoundError as exc:
                raise NotFoundError(f"Path not found: {path}", path, "resolve") from exc
        return current


__all__ = [
    "PathResolver",
    "join_virtual_path",
    "normalize_virtual_path",
    "split_virtual_path",
]
