"""Runtime layer - composition root and tool facade."""

from .bridge import FolderBridge
from .file_tools import FileTools, ToolResult

__all__ = ["FileTools", "FolderBridge", "ToolResult"]
