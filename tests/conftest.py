"""Shared fixtures: a small on-disk project, an in-memory bridge and an
in-memory folder with one unreadable subdirectory."""

import pytest

from folderbridge.domain.errors import NotFoundError, PermissionDeniedError
from folderbridge.infrastructure.storage.capabilities import EntryKind, FileInfo
from folderbridge.infrastructure.storage.mime_types import guess_mime_type
from folderbridge.runtime.bridge import FolderBridge


class MemoryFile:
    kind = EntryKind.FILE

    def __init__(self, name, content=b""):
        self.name = name
        self.content = content

    async def stat(self):
        return FileInfo(
            name=self.name,
            size=len(self.content),
            last_modified=1_700_000_000_000,
            mime_type=guess_mime_type(self.name),
        )

    async def read_bytes(self):
        return self.content

    async def write_bytes(self, data):
        self.content = data


class MemoryDirectory:
    kind = EntryKind.DIRECTORY

    def __init__(self, name, children=(), *, locked=False):
        self.name = name
        self.children = list(children)
        self.locked = locked

    async def list_children(self):
        if self.locked:
            raise PermissionDeniedError("Permission denied", self.name, "list")
        for child in self.children:
            yield child

    def _child(self, name, kind):
        for child in self.children:
            if child.name == name and child.kind == kind:
                return child
        return None

    async def get_child_directory(self, name, *, create=False):
        child = self._child(name, EntryKind.DIRECTORY)
        if child is None:
            if not create:
                raise NotFoundError("Directory not found", name, "resolve")
            child = MemoryDirectory(name)
            self.children.append(child)
        return child

    async def get_child_file(self, name, *, create=False):
        child = self._child(name, EntryKind.FILE)
        if child is None:
            if not create:
                raise NotFoundError("File not found", name, "resolve")
            child = MemoryFile(name)
            self.children.append(child)
        return child


class FixedPicker:
    def __init__(self, capability):
        self.capability = capability

    async def pick_directory(self):
        return self.capability


@pytest.fixture
def project_dir(tmp_path):
    root = tmp_path / "project"
    (root / "src" / "utils").mkdir(parents=True)
    (root / "src" / "index.ts").write_text("export const answer = 42;\n", encoding="utf-8")
    (root / "src" / "utils" / "helper.ts").write_text(
        "// TODO: refactor\nexport function help() {}\n",
        encoding="utf-8",
    )
    (root / "README.md").write_text("# Project\ntodo: write docs\n", encoding="utf-8")
    (root / "package.json").write_text("{}\n", encoding="utf-8")
    return root


@pytest.fixture
def bridge():
    return FolderBridge.in_memory()


@pytest.fixture
def partly_locked_picker():
    """Folder "shared" whose "locked" subdirectory refuses listing."""
    root = MemoryDirectory(
        "shared",
        [
            MemoryDirectory("locked", [MemoryFile("secret.txt", b"needle\n")], locked=True),
            MemoryDirectory("open", [MemoryFile("b.txt", b"needle in b\n")]),
            MemoryFile("a.txt", b"needle in a\n"),
        ],
    )
    return FixedPicker(root)
