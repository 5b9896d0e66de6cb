"""File tree node model and ordering rule."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class NodeType(str, Enum):
    """Kind of a tree node."""

    FILE = "file"
    DIRECTORY = "directory"


@dataclass
class FileTreeNode:
    """One file or directory in a folder tree.

    For directories, ``children is None`` means "not expanded yet", which is
    distinct from an empty list ("known to have no children").
    """

    name: str
    path: str
    type: NodeType
    children: Optional[List["FileTreeNode"]] = None
    expanded: Optional[bool] = None
    size: Optional[int] = None
    last_modified: Optional[int] = None  # epoch milliseconds, files only

    @property
    def is_directory(self) -> bool:
        return self.type is NodeType.DIRECTORY

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "path": self.path,
            "type": self.type.value,
        }
        if self.type is NodeType.DIRECTORY:
            data["expanded"] = bool(self.expanded)
            if self.children is not None:
                data["children"] = [child.to_dict() for child in self.children]
        else:
            data["size"] = self.size
            data["lastModified"] = self.last_modified
        return data


def node_sort_key(node: FileTreeNode) -> tuple[int, str]:
    """Directories first, then files; case-sensitive name order in each group."""
    return (0 if node.type is NodeType.DIRECTORY else 1, node.name)

