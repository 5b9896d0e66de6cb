"""Tests for virtual path resolution."""

import pytest

from folderbridge.domain.errors import InvalidPathError, NotFoundError
from folderbridge.infrastructure.storage.capabilities import EntryKind
from folderbridge.services.folder_registry import StaticPathPicker
from folderbridge.services.path_resolver import (
    join_virtual_path,
    normalize_virtual_path,
    split_virtual_path,
)


def test_split_discards_empty_segments():
    assert split_virtual_path("//project//src/") == ["project", "src"]
    assert split_virtual_path("") == []


def test_join_and_normalize():
    assert join_virtual_path("/project/", "src", "a.ts") == "/project/src/a.ts"
    assert normalize_virtual_path("project//src/") == "/project/src"
    with pytest.raises(InvalidPathError):
        normalize_virtual_path("///")


@pytest.mark.asyncio
async def test_resolve_directory_and_file(bridge, project_dir):
    folder = await bridge.registry.add(StaticPathPicker(project_dir))

    assert await bridge.resolver.resolve("/project") is folder.capability
    directory = await bridge.resolver.resolve("/project/src")
    file = await bridge.resolver.resolve("/project/src/index.ts")

    assert directory.kind == EntryKind.DIRECTORY
    assert file.kind == EntryKind.FILE
    assert file.name == "index.ts"


@pytest.mark.asyncio
async def test_unknown_folder(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    with pytest.raises(NotFoundError, match="Folder not found: elsewhere"):
        await bridge.resolver.resolve("/elsewhere/file.txt")


@pytest.mark.asyncio
async def test_missing_segments(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    with pytest.raises(NotFoundError):
        await bridge.resolver.resolve("/project/missing/index.ts")
    with pytest.raises(NotFoundError):
        await bridge.resolver.resolve("/project/src/missing.ts")
    # Intermediate segments must be directories.
    with pytest.raises(NotFoundError):
        await bridge.resolver.resolve("/project/README.md/child")


@pytest.mark.asyncio
async def test_typed_entry_points(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    with pytest.raises(NotFoundError):
        await bridge.resolver.resolve_file("/project/src")
    with pytest.raises(NotFoundError):
        await bridge.resolver.resolve_file("/project")
    with pytest.raises(NotFoundError):
        await bridge.resolver.resolve_directory("/project/README.md")

    created = await bridge.resolver.resolve_directory("/project/new/nested", create=True)
    assert created.name == "nested"
    assert (project_dir / "new" / "nested").is_dir()


@pytest.mark.asyncio
async def test_dot_segments_rejected(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    with pytest.raises(InvalidPathError):
        await bridge.resolver.resolve("/project/../secret")
    with pytest.raises(InvalidPathError):
        await bridge.resolver.resolve("/")


@pytest.mark.asyncio
async def test_duplicate_names_resolve_to_their_own_folder(bridge, tmp_path):
    first = tmp_path / "one" / "app"
    second = tmp_path / "two" / "app"
    first.mkdir(parents=True)
    second.mkdir(parents=True)
    (first / "first.txt").write_text("1")
    (second / "second.txt").write_text("2")

    await bridge.registry.add(StaticPathPicker(first))
    await bridge.registry.add(StaticPathPicker(second))

    assert (await bridge.resolver.resolve("/app/first.txt")).name == "first.txt"
    assert (await bridge.resolver.resolve("/app (2)/second.txt")).name == "second.txt"
