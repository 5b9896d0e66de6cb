"""Tracked folder models and their persisted projection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from folderbridge.infrastructure.storage.capabilities import DirectoryCapability


@dataclass(frozen=True)
class FolderMetadataRecord:
    """Serializable projection of a tracked folder (no capability)."""

    id: str
    name: str
    added_at: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "addedAt": self.added_at}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["FolderMetadataRecord"]:
        """Parse one stored record, returning None for malformed entries."""
        if not isinstance(data, dict):
            return None
        folder_id = data.get("id")
        name = data.get("name")
        added_at = data.get("addedAt", 0)
        if not isinstance(folder_id, str) or not folder_id:
            return None
        if not isinstance(name, str) or not name:
            return None
        if isinstance(added_at, bool) or not isinstance(added_at, (int, float)):
            added_at = 0
        return cls(id=folder_id, name=name, added_at=int(added_at))


@dataclass(frozen=True)
class TrackedFolder:
    """A user-granted directory registered under a generated id.

    ``id`` is unique and immutable. ``name`` is the display name and the
    first segment of every virtual path inside the folder.
    """

    id: str
    name: str
    capability: "DirectoryCapability"
    added_at: int

    @property
    def root_path(self) -> str:
        return f"/{self.name}"

    def to_record(self) -> FolderMetadataRecord:
        return FolderMetadataRecord(id=self.id, name=self.name, added_at=self.added_at)

    def to_dict(self) -> Dict[str, Any]:
        return self.to_record().to_dict()
