"""Domain models for folderbridge."""

from .errors import (
    AbortedByUser,
    EditMatchError,
    FolderBridgeError,
    InvalidPathError,
    NotFoundError,
    PatternError,
    PermissionDeniedError,
    ReadFailureError,
    WriteFailureError,
)
from .events import ChangeEvent, ChangeKind
from .folders import FolderMetadataRecord, TrackedFolder
from .search import GrepMatch
from .tree import FileTreeNode, NodeType, node_sort_key

__all__ = [
    "AbortedByUser",
    "EditMatchError",
    "FolderBridgeError",
    "InvalidPathError",
    "NotFoundError",
    "PatternError",
    "PermissionDeniedError",
    "ReadFailureError",
    "WriteFailureError",
    "ChangeEvent",
    "ChangeKind",
    "FolderMetadataRecord",
    "TrackedFolder",
    "GrepMatch",
    "FileTreeNode",
    "NodeType",
    "node_sort_key",
]
