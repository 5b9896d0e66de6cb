"""Tool facade over a FolderBridge.

Exposes read/write/edit/glob/grep as tool calls that never raise: every
call returns a ToolResult carrying either the payload or an error message.

Examples:
    >>> tools = FileTools(bridge)
    >>> await tools.read("/project/src/main.py")
    >>> await tools.write("/project/notes.txt", "hello")
    >>> await tools.glob("**/*.py", folder="/project")
    >>> await tools.grep("TODO", ignore_case=True)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import structlog

from folderbridge.domain.errors import FolderBridgeError
from folderbridge.infrastructure.logging_setup import tool_context
from folderbridge.runtime.bridge import FolderBridge
from folderbridge.services.search_service import DEFAULT_FILE_PATTERN

logger = structlog.get_logger()


@dataclass
class ToolResult:
    """Result of a file tool operation."""
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        result = {"success": self.success}
        if self.error:
            result["error"] = self.error
        result.update(self.data)
        return result


class FileTools:
    """File tools for an assistant, addressed by virtual path."""

    def __init__(self, bridge: FolderBridge):
        self.bridge = bridge

    async def read(
        self,
        path: str,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> ToolResult:
        """Read a file.

        Args:
            path: Virtual path (e.g., "/project/src/main.py")
            offset: Zero-based line to start from
            limit: Max lines to return (None = configured default)

        Returns:
            ToolResult with content (or image attachment) and metadata
        """
        with tool_context("read", path=path):
            try:
                result = await self.bridge.files.read(path, offset=offset, limit=limit)
                return ToolResult(success=True, data=result.to_dict())
            except FolderBridgeError as e:
                return ToolResult(success=False, error=str(e))
            except Exception as e:
                logger.exception("tool_failed")
                return ToolResult(success=False, error=f"unexpected error: {e}")

    async def write(self, path: str, content: str) -> ToolResult:
        """Create or overwrite a file, creating parent directories."""
        with tool_context("write", path=path):
            try:
                result = await self.bridge.files.write(path, content)
                return ToolResult(success=True, data=result.to_dict())
            except FolderBridgeError as e:
                return ToolResult(success=False, error=str(e))
            except Exception as e:
                logger.exception("tool_failed")
                return ToolResult(success=False, error=f"unexpected error: {e}")

    async def edit(
        self,
        path: str,
        old_text: str,
        new_text: str,
        *,
        replace_all: bool = False,
    ) -> ToolResult:
        """Replace text in a file: the first occurrence, or every one."""
        with tool_context("edit", path=path):
            try:
                result = await self.bridge.files.edit(
                    path, old_text, new_text, replace_all=replace_all
                )
                return ToolResult(success=True, data=result.to_dict())
            except FolderBridgeError as e:
                return ToolResult(success=False, error=str(e))
            except Exception as e:
                logger.exception("tool_failed")
                return ToolResult(success=False, error=f"unexpected error: {e}")

    async def glob(self, pattern: str, *, folder: Optional[str] = None) -> ToolResult:
        """Find files by glob pattern.

        Args:
            pattern: Glob relative to each folder root (e.g., "src/**/*.py")
            folder: Optional folder name (or "/name") to restrict the search

        Returns:
            ToolResult with sorted virtual paths
        """
        with tool_context("glob", pattern=pattern, folder=folder):
            try:
                paths = await self.bridge.search.glob(pattern, folder)
                return ToolResult(success=True, data={"paths": paths, "count": len(paths)})
            except FolderBridgeError as e:
                return ToolResult(success=False, error=str(e))
            except Exception as e:
                logger.exception("tool_failed")
                return ToolResult(success=False, error=f"unexpected error: {e}")

    async def grep(
        self,
        pattern: str,
        *,
        folder: Optional[str] = None,
        file_pattern: str = DEFAULT_FILE_PATTERN,
        ignore_case: bool = False,
    ) -> ToolResult:
        """Search file contents by regex, one entry per match."""
        with tool_context("grep", pattern=pattern, folder=folder):
            try:
                matches = await self.bridge.search.grep(
                    pattern,
                    folder,
                    file_pattern=file_pattern,
                    ignore_case=ignore_case,
                )
                return ToolResult(
                    success=True,
                    data={"matches": [m.to_dict() for m in matches], "count": len(matches)},
                )
            except FolderBridgeError as e:
                return ToolResult(success=False, error=str(e))
            except Exception as e:
                logger.exception("tool_failed")
                return ToolResult(success=False, error=f"unexpected error: {e}")


__all__ = ["FileTools", "ToolResult"]
