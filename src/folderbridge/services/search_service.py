"""Search Engine - glob path search and grep content search.

Both operations walk the selected folders depth-first, one child at a time.
Globs are tested against the path relative to the folder root (folder name
excluded). Search is best-effort: an unreadable subtree or file is logged
and skipped, it never aborts the scan. The whole call fails only for an
invalid glob/regex.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

import structlog

from folderbridge.domain.errors import FolderBridgeError, PatternError
from folderbridge.domain.folders import TrackedFolder
from folderbridge.domain.search import GrepMatch
from folderbridge.infrastructure.storage.capabilities import (
    DirectoryCapability,
    EntryKind,
    FileCapability,
)
from folderbridge.infrastructure.storage.io_text import decode_text_bytes
from folderbridge.services.folder_registry import FolderRegistry
from folderbridge.services.glob_match import compile_glob

logger = structlog.get_logger()

DEFAULT_FILE_PATTERN = "**/*"


@dataclass(frozen=True)
class WalkedFile:
    """A file reached by a folder walk."""

    path: str  # virtual path, folder name included
    relative_path: str  # relative to the folder root
    capability: FileCapability


async def walk_files(folder: TrackedFolder) -> AsyncIterator[WalkedFile]:
    """Yield every file below ``folder``, depth-first.

    Subtrees that fail to enumerate are logged and skipped; files already
    yielded stay valid.
    """
    async for walked in _walk_directory(folder.capability, folder.root_path, ""):
        yield walked


async def _walk_directory(
    directory: DirectoryCapability,
    base_path: str,
    relative_path: str,
) -> AsyncIterator[WalkedFile]:
    try:
        children = [child async for child in directory.list_children()]
    except (FolderBridgeError, OSError) as exc:
        logger.warning("walk_subtree_failed", path=base_path, error=str(exc))
        return

    for child in children:
        entry_path = f"{base_path}/{child.name}"
        entry_relative = f"{relative_path}/{child.name}" if relative_path else child.name
        if child.kind == EntryKind.DIRECTORY:
            async for walked in _walk_directory(child, entry_path, entry_relative):
                yield walked
        else:
            yield WalkedFile(path=entry_path, relative_path=entry_relative, capability=child)


def normalize_folder_filter(folder_filter: Optional[str]) -> Optional[str]:
    if folder_filter is None:
        return None
    name = str(folder_filter).strip()
    if name.startswith("/"):
        name = name[1:]
    name = name.rstrip("/")
    return name or None


class SearchService:
    """Glob and grep across one or all tracked folders."""

    def __init__(self, registry: FolderRegistry):
        self._registry = registry

    def target_folders(self, folder_filter: Optional[str] = None) -> List[TrackedFolder]:
        """All folders, or those whose display name equals the filter."""
        name = normalize_folder_filter(folder_filter)
        folders = self._registry.list()
        if name is None:
            return folders
        return [folder for folder in folders if folder.name == name]

    async def glob(self, pattern: str, folder_filter: Optional[str] = None) -> List[str]:
        """Virtual paths of files matching ``pattern``, sorted ascending."""
        matcher = compile_glob(pattern)
        results: List[str] = []

        for folder in self.target_folders(folder_filter):
            async for walked in walk_files(folder):
                if matcher.fullmatch(walked.relative_path):
                    results.append(walked.path)

        results.sort()
        logger.debug("glob_completed", pattern=pattern, folder=folder_filter, matches=len(results))
        return results

    async def grep(
        self,
        pattern: str,
        folder_filter: Optional[str] = None,
        file_pattern: Optional[str] = DEFAULT_FILE_PATTERN,
        ignore_case: bool = False,
    ) -> List[GrepMatch]:
        """One result per regex match occurrence, in walk order."""
        try:
            regex = re.compile(pattern, re.IGNORECASE if ignore_case else 0)
        except (re.error, TypeError) as exc:
            raise PatternError(f"Invalid regex {pattern!r}: {exc}", operation="grep") from exc
        file_matcher = compile_glob(file_pattern or DEFAULT_FILE_PATTERN)

        results: List[GrepMatch] = []
        skipped = 0
        for folder in self.target_folders(folder_filter):
            async for walked in walk_files(folder):
                if not file_matcher.fullmatch(walked.relative_path):
                    continue
                try:
                    text = decode_text_bytes(await walked.capability.read_bytes())
                except (FolderBridgeError, OSError, UnicodeDecodeError) as exc:
                    skipped += 1
                    logger.warning("grep_file_skipped", path=walked.path, error=str(exc))
                    continue

                for index, line in enumerate(text.split("\n")):
                    for match in regex.finditer(line):
                        results.append(
                            GrepMatch(
                                path=walked.path,
                                line_number=index + 1,
                                line=line,
                                column=match.start(),
                            )
                        )

        logger.debug("grep_completed", pattern=pattern, matches=len(results), skipped=skipped)
        return results


__all__ = [
    "DEFAULT_FILE_PATTERN",
    "SearchService",
    "WalkedFile",
    "normalize_folder_filter",
    "walk_files",
]
