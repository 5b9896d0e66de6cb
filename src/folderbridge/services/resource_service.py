"""Resource provider: every tracked file as an addressable resource.

A resource URI is the file's virtual path. Text resources are returned
decoded; binary MIME types are returned as a base64 blob.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import structlog

from folderbridge.domain.errors import FolderBridgeError, InvalidPathError, ReadFailureError
from folderbridge.infrastructure.storage.io_text import decode_text_bytes
from folderbridge.infrastructure.storage.mime_types import guess_mime_type, is_binary_mime_type
from folderbridge.services.folder_registry import FolderRegistry
from folderbridge.services.path_resolver import PathResolver, split_virtual_path
from folderbridge.services.search_service import walk_files

logger = structlog.get_logger()


@dataclass(frozen=True)
class ResourceItem:
    uri: str
    name: str
    description: str
    mime_type: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": self.mime_type,
        }


@dataclass(frozen=True)
class ResourceContent:
    uri: str
    mime_type: str
    text: Optional[str] = None
    blob: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"uri": self.uri, "mimeType": self.mime_type}
        if self.blob is not None:
            data["blob"] = self.blob
        else:
            data["text"] = self.text
        return data


class ResourceService:
    def __init__(self, registry: FolderRegistry, resolver: PathResolver):
        self._registry = registry
        self._resolver = resolver

    async def list_resources(self, search: Optional[str] = None) -> List[ResourceItem]:
        """All files of all folders, optionally filtered by a substring of the uri."""
        items: List[ResourceItem] = []
        for folder in self._registry.list():
            try:
                async for walked in walk_files(folder):
                    name = walked.path.rsplit("/", 1)[-1]
                    items.append(
                        ResourceItem(
                            uri=walked.path,
                            name=name,
                            description=walked.path,
                            mime_type=guess_mime_type(name),
                        )
                    )
            except FolderBridgeError as exc:
                logger.warning("resource_folder_scan_failed", folder=folder.name, error=str(exc))

        if search:
            needle = search.lower()
            items = [item for item in items if needle in item.uri.lower()]
        return items

    async def get_resource(self, uri: str) -> ResourceContent:
        if not split_virtual_path(uri):
            raise InvalidPathError(f"Invalid resource URI: {uri}", str(uri or ""), "get_resource")

        file = await self._resolver.resolve_file(uri)
        data = await file.read_bytes()
        mime_type = guess_mime_type(file.name)

        if is_binary_mime_type(mime_type):
            return ResourceContent(
                uri=uri,
                mime_type=mime_type,
                blob=base64.b64encode(data).decode("ascii"),
            )
        try:
            text = decode_text_bytes(data)
        except UnicodeDecodeError as exc:
            raise ReadFailureError("Resource is not valid UTF-8 text", uri, "get_resource") from exc
        return ResourceContent(uri=uri, mime_type=mime_type, text=text)


__all__ = ["ResourceContent", "ResourceItem", "ResourceService"]
