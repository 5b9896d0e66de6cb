"""Tests for glob and grep across tracked folders."""

import pytest

from folderbridge.domain.errors import PatternError
from folderbridge.services.folder_registry import StaticPathPicker
from folderbridge.services.search_service import normalize_folder_filter


def test_normalize_folder_filter():
    assert normalize_folder_filter("/project") == "project"
    assert normalize_folder_filter("project/") == "project"
    assert normalize_folder_filter("") is None
    assert normalize_folder_filter(None) is None


@pytest.mark.asyncio
async def test_glob_returns_sorted_virtual_paths(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    assert await bridge.search.glob("**/*.ts") == [
        "/project/src/index.ts",
        "/project/src/utils/helper.ts",
    ]
    assert await bridge.search.glob("*.md") == ["/project/README.md"]


@pytest.mark.asyncio
async def test_glob_folder_filter(bridge, project_dir, tmp_path):
    other = tmp_path / "other"
    other.mkdir()
    (other / "main.ts").write_text("x")
    await bridge.registry.add(StaticPathPicker(project_dir))
    await bridge.registry.add(StaticPathPicker(other))

    assert await bridge.search.glob("**/*.ts") == [
        "/other/main.ts",
        "/project/src/index.ts",
        "/project/src/utils/helper.ts",
    ]
    assert await bridge.search.glob("**/*.ts", "/other") == ["/other/main.ts"]
    assert await bridge.search.glob("**/*.ts", "missing") == []


@pytest.mark.asyncio
async def test_glob_invalid_pattern(bridge):
    with pytest.raises(PatternError):
        await bridge.search.glob("")


@pytest.mark.asyncio
async def test_grep_ignore_case(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    matches = await bridge.search.grep("todo", ignore_case=True)

    found = {(m.path, m.line_number, m.column, m.line) for m in matches}
    assert found == {
        ("/project/README.md", 2, 0, "todo: write docs"),
        ("/project/src/utils/helper.ts", 1, 3, "// TODO: refactor"),
    }


@pytest.mark.asyncio
async def test_grep_is_case_sensitive_by_default(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    matches = await bridge.search.grep("todo")

    assert [(m.path, m.line_number) for m in matches] == [("/project/README.md", 2)]


@pytest.mark.asyncio
async def test_grep_one_result_per_occurrence(bridge, tmp_path):
    root = tmp_path / "repeat"
    root.mkdir()
    (root / "a.txt").write_text("ab ab ab\nnone\n")
    await bridge.registry.add(StaticPathPicker(root))

    matches = await bridge.search.grep("ab")

    assert [(m.line_number, m.column) for m in matches] == [(1, 0), (1, 3), (1, 6)]
    assert matches[0].to_dict() == {
        "path": "/repeat/a.txt",
        "line_number": 1,
        "line": "ab ab ab",
        "column": 0,
    }


@pytest.mark.asyncio
async def test_grep_file_pattern_and_folder_filter(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    matches = await bridge.search.grep("o", "/project", file_pattern="**/*.md")
    assert {m.path for m in matches} == {"/project/README.md"}

    assert await bridge.search.grep("o", "elsewhere") == []


@pytest.mark.asyncio
async def test_grep_skips_binary_files(bridge, project_dir):
    (project_dir / "blob.bin").write_bytes(b"\x00\x01todo\xff")
    await bridge.registry.add(StaticPathPicker(project_dir))

    matches = await bridge.search.grep("todo")

    assert all(m.path != "/project/blob.bin" for m in matches)


@pytest.mark.asyncio
async def test_grep_invalid_regex(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))
    with pytest.raises(PatternError):
        await bridge.search.grep("(unclosed")


@pytest.mark.asyncio
async def test_glob_recursive_typescript(bridge, tmp_path):
    root = tmp_path / "folder"
    (root / "b").mkdir(parents=True)
    (root / "a.ts").write_text("a")
    (root / "b" / "c.ts").write_text("c")
    (root / "b" / "d.txt").write_text("d")
    await bridge.registry.add(StaticPathPicker(root))

    assert await bridge.search.glob("**/*.ts") == ["/folder/a.ts", "/folder/b/c.ts"]


@pytest.mark.asyncio
async def test_grep_reports_line_and_column(bridge, tmp_path):
    root = tmp_path / "folder"
    root.mkdir()
    (root / "notes.txt").write_text("Foo bar\nbaz foo\n")
    await bridge.registry.add(StaticPathPicker(root))

    matches = await bridge.search.grep("foo", ignore_case=True)

    assert [(m.line_number, m.column) for m in matches] == [(1, 0), (2, 4)]


@pytest.mark.asyncio
async def test_glob_and_grep_skip_dot_entries(bridge, tmp_path):
    root = tmp_path / "proj"
    (root / ".git").mkdir(parents=True)
    (root / ".git" / "config").write_text("foo\n")
    (root / ".env").write_text("foo\n")
    (root / "a.ts").write_text("foo\n")
    await bridge.registry.add(StaticPathPicker(root))

    assert await bridge.search.glob("**/*") == ["/proj/a.ts"]
    assert [m.path for m in await bridge.search.grep("foo")] == ["/proj/a.ts"]


@pytest.mark.asyncio
async def test_explicit_dot_patterns_still_match(bridge, tmp_path):
    root = tmp_path / "proj"
    (root / ".git").mkdir(parents=True)
    (root / ".git" / "config").write_text("foo\n")
    (root / ".env").write_text("foo\n")
    await bridge.registry.add(StaticPathPicker(root))

    assert await bridge.search.glob(".env") == ["/proj/.env"]
    assert await bridge.search.glob(".git/**") == ["/proj/.git/config"]
    matches = await bridge.search.grep("foo", file_pattern="**/.env")
    assert [m.path for m in matches] == ["/proj/.env"]


@pytest.mark.asyncio
async def test_unreadable_subtree_keeps_sibling_files(bridge, partly_locked_picker):
    await bridge.registry.add(partly_locked_picker)

    assert await bridge.search.glob("**/*") == ["/shared/a.txt", "/shared/open/b.txt"]
    matches = await bridge.search.grep("needle")
    assert sorted(m.path for m in matches) == ["/shared/a.txt", "/shared/open/b.txt"]
