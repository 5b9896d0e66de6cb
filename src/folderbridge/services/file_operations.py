"""File operations behind the read/write/edit tools.

Paths are virtual paths (``/<folder-name>/...``). Text is read and written
as UTF-8. Read output is line-numbered for display::

         1→first line
         2→second line

``strip_line_numbers`` reverses that prefix. Image files are returned as a
base64 data-URL attachment instead of text.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import structlog

from folderbridge.domain.errors import (
    EditMatchError,
    FolderBridgeError,
    InvalidPathError,
    PermissionDeniedError,
    ReadFailureError,
    WriteFailureError,
)
from folderbridge.domain.events import ChangeKind
from folderbridge.infrastructure.storage.io_text import decode_text_bytes
from folderbridge.infrastructure.storage.mime_types import is_image_file
from folderbridge.services.change_notifier import ChangeNotifier
from folderbridge.services.path_resolver import PathResolver, normalize_virtual_path

logger = structlog.get_logger()

LINE_NUMBER_WIDTH = 6
LINE_NUMBER_SEPARATOR = "→"
TRUNCATION_MARKER = "...[truncated]"


def format_numbered_lines(lines: List[str], first_line_number: int, max_line_chars: int) -> str:
    formatted: List[str] = []
    for index, line in enumerate(lines):
        if len(line) > max_line_chars:
            line = line[:max_line_chars] + TRUNCATION_MARKER
        number = str(first_line_number + index).rjust(LINE_NUMBER_WIDTH)
        formatted.append(f"{number}{LINE_NUMBER_SEPARATOR}{line}")
    return "\n".join(formatted)


def strip_line_numbers(content: str) -> str:
    """Remove the display prefix added by ``format_numbered_lines``."""
    stripped: List[str] = []
    for line in content.split("\n"):
        prefix, separator, rest = line.partition(LINE_NUMBER_SEPARATOR)
        if separator and prefix.strip().isdigit():
            stripped.append(rest)
        else:
            stripped.append(line)
    return "\n".join(stripped)


@dataclass(frozen=True)
class Attachment:
    filename: str
    mime_type: str
    url: str

    def to_dict(self) -> Dict[str, Any]:
        return {"filename": self.filename, "mimeType": self.mime_type, "url": self.url}


@dataclass(frozen=True)
class ReadResult:
    path: str
    size: int
    last_modified: int
    mime_type: str
    is_image: bool
    content: Optional[str] = None
    attachment: Optional[Attachment] = None
    line_count: Optional[int] = None
    offset: Optional[int] = None
    limit: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {
            "path": self.path,
            "size": self.size,
            "lastModified": self.last_modified,
            "mimeType": self.mime_type,
            "isImage": self.is_image,
        }
        if not self.is_image:
            metadata.update(lineCount=self.line_count, offset=self.offset, limit=self.limit)
        data: Dict[str, Any] = {"metadata": metadata}
        if self.attachment is not None:
            data["attachment"] = self.attachment.to_dict()
        else:
            data["content"] = self.content
        return data


@dataclass(frozen=True)
class WriteResult:
    path: str
    created: bool
    bytes_written: int

    @property
    def message(self) -> str:
        return f"Successfully wrote to {self.path}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": self.message,
            "path": self.path,
            "created": self.created,
            "bytesWritten": self.bytes_written,
        }


@dataclass(frozen=True)
class EditResult:
    path: str
    replacements: int

    @property
    def message(self) -> str:
        return f"Successfully replaced {self.replacements} occurrence(s)"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "message": self.message,
            "path": self.path,
            "replacements": self.replacements,
        }


class FileOperations:
    """read / write / edit over virtual paths."""

    def __init__(
        self,
        resolver: PathResolver,
        notifier: ChangeNotifier,
        *,
        default_limit: int = 2000,
        max_line_chars: int = 2000,
    ):
        self._resolver = resolver
        self._notifier = notifier
        self.default_limit = default_limit
        self.max_line_chars = max_line_chars

    async def read(self, path: str, offset: int = 0, limit: Optional[int] = None) -> ReadResult:
        """Read a file as numbered lines, or as an attachment for images."""
        path = normalize_virtual_path(path)
        file = await self._resolver.resolve_file(path)
        info = await file.stat()
        data = await file.read_bytes()

        if is_image_file(info.name, info.mime_type):
            encoded = base64.b64encode(data).decode("ascii")
            return ReadResult(
                path=path,
                size=info.size,
                last_modified=info.last_modified,
                mime_type=info.mime_type,
                is_image=True,
                attachment=Attachment(
                    filename=info.name,
                    mime_type=info.mime_type,
                    url=f"data:{info.mime_type};base64,{encoded}",
                ),
            )

        try:
            text = decode_text_bytes(data)
        except UnicodeDecodeError as exc:
            raise ReadFailureError("File is not valid UTF-8 text", path, "read") from exc

        lines = text.split("\n")
        start = max(0, int(offset or 0))
        count = self.default_limit if limit is None else max(0, int(limit))
        end = min(len(lines), start + count)
        selected = lines[start:end]

        return ReadResult(
            path=path,
            size=info.size,
            last_modified=info.last_modified,
            mime_type=info.mime_type,
            is_image=False,
            content=format_numbered_lines(selected, start + 1, self.max_line_chars),
            line_count=len(lines),
            offset=start,
            limit=len(selected),
        )

    async def write(self, path: str, content: str) -> WriteResult:
        """Create or overwrite a file, creating missing directories."""
        path = normalize_virtual_path(path)
        _folder, rest = self._resolver.split(path)
        if not rest:
            raise InvalidPathError("Path must name a file inside a folder", path, "write")

        existed = await self._file_exists(path)
        payload = (content or "").encode("utf-8")
        try:
            file = await self._resolver.resolve_file(path, create=True)
            await file.write_bytes(payload)
        except (WriteFailureError, PermissionDeniedError):
            raise
        except FolderBridgeError as exc:
            raise WriteFailureError(f"Failed to write file: {exc.message}", path, "write") from exc

        kind = ChangeKind.UPDATE if existed else ChangeKind.CREATE
        self._notifier.emit(kind, path)
        logger.info("file_written", path=path, created=not existed, bytes=len(payload))
        return WriteResult(path=path, created=not existed, bytes_written=len(payload))

    async def edit(
        self,
        path: str,
        old_text: str,
        new_text: str,
        replace_all: bool = False,
    ) -> EditResult:
        """Replace ``old_text`` with ``new_text``: first occurrence, or all."""
        path = normalize_virtual_path(path)
        if not old_text:
            raise EditMatchError("Text to replace must not be empty", path, "edit")

        file = await self._resolver.resolve_file(path)
        try:
            content = decode_text_bytes(await file.read_bytes())
        except UnicodeDecodeError as exc:
            raise ReadFailureError("File is not valid UTF-8 text", path, "edit") from exc

        if replace_all:
            replacements = content.count(old_text)
            updated = content.replace(old_text, new_text)
        else:
            index = content.find(old_text)
            replacements = 0 if index < 0 else 1
            updated = content[:index] + new_text + content[index + len(old_text):]
        if replacements == 0:
            raise EditMatchError(f'String not found in file: "{old_text}"', path, "edit")

        await self.write(path, updated)
        logger.info("file_edited", path=path, replacements=replacements)
        return EditResult(path=path, replacements=replacements)

    async def _file_exists(self, path: str) -> bool:
        try:
            await self._resolver.resolve_file(path)
        except FolderBridgeError:
            return False
        return True


__all__ = [
    "Attachment",
    "EditResult",
    "FileOperations",
    "ReadResult",
    "WriteResult",
    "format_numbered_lines",
    "strip_line_numbers",
]
