"""Directory/file access capabilities.

A capability is an opaque handle granting access to one directory or file.
Core services only ever talk to the protocols below; the local-disk
implementation backs them with a real directory on this machine.

Protocol surface:
- list_children()                  platform-ordered async iteration
- get_child_directory(name)        optionally creating it
- get_child_file(name)             optionally creating it
- stat() / read_bytes() / write_bytes()
- query_permission(mode)           optional, probed with getattr()
"""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import AsyncIterator, Protocol, Union, runtime_checkable

from folderbridge.domain.errors import (
    InvalidPathError,
    NotFoundError,
    PermissionDeniedError,
    ReadFailureError,
    WriteFailureError,
)
from folderbridge.infrastructure.storage.mime_types import guess_mime_type


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class PermissionState(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    PROMPT = "prompt"


@dataclass(frozen=True)
class FileInfo:
    """Metadata snapshot of a file capability."""

    name: str
    size: int
    last_modified: int  # epoch milliseconds
    mime_type: str


@runtime_checkable
class FileCapability(Protocol):
    name: str
    kind: EntryKind

    async def stat(self) -> FileInfo: ...

    async def read_bytes(self) -> bytes: ...

    async def write_bytes(self, data: bytes) -> None: ...


@runtime_checkable
class DirectoryCapability(Protocol):
    name: str
    kind: EntryKind

    def list_children(self) -> AsyncIterator[Union["DirectoryCapability", FileCapability]]: ...

    async def get_child_directory(self, name: str, *, create: bool = False) -> "DirectoryCapability": ...

    async def get_child_file(self, name: str, *, create: bool = False) -> FileCapability: ...


Capability = Union[DirectoryCapability, FileCapability]


def _check_entry_name(name: str, path: Path) -> None:
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise InvalidPathError(f"invalid entry name {name!r}", str(path), "lookup")


def _translate_os_error(exc: OSError, path: Path, operation: str, *, writing: bool = False):
    """Map an OSError onto the domain error taxonomy."""
    if isinstance(exc, FileNotFoundError):
        return NotFoundError("No such file or directory", str(path), operation)
    if isinstance(exc, PermissionError):
        return PermissionDeniedError("Permission denied", str(path), operation)
    if writing:
        return WriteFailureError(exc.strerror or str(exc), str(path), operation)
    return ReadFailureError(exc.strerror or str(exc), str(path), operation)


class LocalFileCapability:
    """File capability backed by a local file."""

    kind = EntryKind.FILE

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self.name = self._path.name

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"LocalFileCapability({str(self._path)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LocalFileCapability) and other._path == self._path

    def __hash__(self) -> int:
        return hash(("file", self._path))

    async def stat(self) -> FileInfo:
        try:
            st = await asyncio.to_thread(self._path.stat)
        except OSError as exc:
            raise _translate_os_error(exc, self._path, "stat") from exc
        return FileInfo(
            name=self.name,
            size=int(st.st_size),
            last_modified=int(st.st_mtime_ns // 1_000_000),
            mime_type=guess_mime_type(self.name),
        )

    async def read_bytes(self) -> bytes:
        try:
            return await asyncio.to_thread(self._path.read_bytes)
        except OSError as exc:
            raise _translate_os_error(exc, self._path, "read") from exc

    async def write_bytes(self, data: bytes) -> None:
        try:
            await asyncio.to_thread(self._write_replace, data)
        except OSError as exc:
            raise _translate_os_error(exc, self._path, "write", writing=True) from exc

    def _write_replace(self, data: bytes) -> None:
        # Commit on close, like a swap-file writable stream.
        tmp_path = self._path.with_name(f".{self.name}.folderbridge-tmp")
        try:
            with open(tmp_path, "wb") as handle:
                handle.write(data)
                handle.flush()
            os.replace(tmp_path, self._path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()


class LocalDirectoryCapability:
    """Directory capability backed by a local directory.

    Holds only the absolute path, so instances pickle cleanly for the
    capability store. Symbolic links are not exposed as children.
    """

    kind = EntryKind.DIRECTORY

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path).expanduser().resolve(strict=False)
        self.name = self._path.name or str(self._path)

    @property
    def path(self) -> Path:
        return self._path

    def __repr__(self) -> str:
        return f"LocalDirectoryCapability({str(self._path)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LocalDirectoryCapability) and other._path == self._path

    def __hash__(self) -> int:
        return hash(("directory", self._path))

    async def query_permission(self, mode: str = "read") -> PermissionState:
        wanted = os.R_OK | os.X_OK
        if mode == "readwrite":
            wanted |= os.W_OK

        def _check() -> bool:
            return self._path.is_dir() and os.access(self._path, wanted)

        granted = await asyncio.to_thread(_check)
        return PermissionState.GRANTED if granted else PermissionState.DENIED

    def _scan(self) -> list[tuple[str, bool]]:
        entries: list[tuple[str, bool]] = []
        with os.scandir(self._path) as iterator:
            for entry in iterator:
                if entry.is_symlink():
                    continue
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                entries.append((entry.name, is_dir))
        return entries

    async def list_children(self) -> AsyncIterator[Capability]:
        try:
            entries = await asyncio.to_thread(self._scan)
        except OSError as exc:
            raise _translate_os_error(exc, self._path, "list") from exc
        for name, is_dir in entries:
            child_path = self._path / name
            if is_dir:
                yield LocalDirectoryCapability(child_path)
            else:
                yield LocalFileCapability(child_path)

    async def get_child_directory(self, name: str, *, create: bool = False) -> "LocalDirectoryCapability":
        _check_entry_name(name, self._path)
        child = self._path / name

        def _lookup() -> None:
            if child.is_symlink():
                raise NotFoundError("Not a directory", str(child), "get_directory")
            if child.is_dir():
                return
            if child.exists():
                raise NotFoundError("Not a directory", str(child), "get_directory")
            if not create:
                raise NotFoundError("Directory not found", str(child), "get_directory")
            child.mkdir()

        try:
            await asyncio.to_thread(_lookup)
        except OSError as exc:
            raise _translate_os_error(exc, child, "get_directory", writing=create) from exc
        return LocalDirectoryCapability(child)

    async def get_child_file(self, name: str, *, create: bool = False) -> LocalFileCapability:
        _check_entry_name(name, self._path)
        child = self._path / name

        def _lookup() -> None:
            if child.is_symlink():
                raise NotFoundError("Not a file", str(child), "get_file")
            if child.is_file():
                return
            if child.exists():
                raise NotFoundError("Not a file", str(child), "get_file")
            if not create:
                raise NotFoundError("File not found", str(child), "get_file")
            child.touch(exist_ok=False)

        try:
            await asyncio.to_thread(_lookup)
        except OSError as exc:
            raise _translate_os_error(exc, child, "get_file", writing=create) from exc
        return LocalFileCapability(child)


__all__ = [
    "Capability",
    "DirectoryCapability",
    "EntryKind",
    "FileCapability",
    "FileInfo",
    "LocalDirectoryCapability",
    "LocalFileCapability",
    "PermissionState",
]
