"""Core services over tracked folders."""

from folderbridge.services.change_notifier import ChangeListener, ChangeNotifier
from folderbridge.services.file_operations import (
    EditResult,
    FileOperations,
    ReadResult,
    WriteResult,
    strip_line_numbers,
)
from folderbridge.services.folder_registry import (
    DirectoryPicker,
    FolderRegistry,
    StaticPathPicker,
    generate_folder_id,
)
from folderbridge.services.glob_match import compile_glob, glob_matches
from folderbridge.services.path_resolver import PathResolver
from folderbridge.services.resource_service import ResourceContent, ResourceItem, ResourceService
from folderbridge.services.search_service import SearchService
from folderbridge.services.tree_builder import TreeBuilder

__all__ = [
    "ChangeListener",
    "ChangeNotifier",
    "DirectoryPicker",
    "EditResult",
    "FileOperations",
    "FolderRegistry",
    "PathResolver",
    "ReadResult",
    "ResourceContent",
    "ResourceItem",
    "ResourceService",
    "SearchService",
    "StaticPathPicker",
    "TreeBuilder",
    "WriteResult",
    "compile_glob",
    "generate_folder_id",
    "glob_matches",
    "strip_line_numbers",
]
