"""Tests for tree building and lazy expansion."""

import os

import pytest

from folderbridge.domain.tree import FileTreeNode, NodeType
from folderbridge.services.folder_registry import StaticPathPicker


def _walk(node: FileTreeNode):
    yield node
    for child in node.children or []:
        yield from _walk(child)


@pytest.mark.asyncio
async def test_build_full_shape(bridge, project_dir):
    folder = await bridge.registry.add(StaticPathPicker(project_dir))

    tree = await bridge.folder_tree(folder.id)

    assert (tree.name, tree.path, tree.type, tree.expanded) == (
        "project",
        "/project",
        NodeType.DIRECTORY,
        True,
    )
    assert [child.name for child in tree.children] == ["src", "README.md", "package.json"]
    src = tree.children[0]
    assert src.expanded is True
    assert [child.name for child in src.children] == ["utils", "index.ts"]
    assert [child.path for child in src.children[0].children] == ["/project/src/utils/helper.ts"]


@pytest.mark.asyncio
async def test_file_nodes_carry_stat_data(bridge, project_dir):
    folder = await bridge.registry.add(StaticPathPicker(project_dir))

    tree = await bridge.folder_tree(folder.id)
    package = next(node for node in _walk(tree) if node.name == "package.json")

    assert package.type is NodeType.FILE
    assert package.size == 3
    assert package.last_modified > 0
    assert package.to_dict()["lastModified"] == package.last_modified


@pytest.mark.asyncio
async def test_every_tree_path_resolves(bridge, project_dir):
    folder = await bridge.registry.add(StaticPathPicker(project_dir))

    tree = await bridge.folder_tree(folder.id)

    for node in _walk(tree):
        capability = await bridge.resolver.resolve(node.path)
        assert capability.kind.value == node.type.value


@pytest.mark.asyncio
async def test_children_sorted_directories_first_case_sensitive(bridge, tmp_path):
    root = tmp_path / "mixed"
    root.mkdir()
    for name in ("b.txt", "A.txt", "_x.txt"):
        (root / name).write_text("x")
    for name in ("a", "B"):
        (root / name).mkdir()
    await bridge.registry.add(StaticPathPicker(root))

    nodes = await bridge.trees.expand_one_level("/mixed")

    assert [node.name for node in nodes] == ["B", "a", "A.txt", "_x.txt", "b.txt"]


@pytest.mark.asyncio
async def test_expand_one_level_leaves_directories_unexpanded(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    nodes = await bridge.trees.expand_one_level("/project/src")

    utils = nodes[0]
    assert (utils.name, utils.children, utils.expanded) == ("utils", None, False)
    assert utils.to_dict() == {
        "name": "utils",
        "path": "/project/src/utils",
        "type": "directory",
        "expanded": False,
    }


@pytest.mark.asyncio
async def test_expand_one_level_is_idempotent(bridge, project_dir):
    await bridge.registry.add(StaticPathPicker(project_dir))

    first = await bridge.trees.expand_one_level("/project")
    second = await bridge.trees.expand_one_level("/project")

    assert first == second


@pytest.mark.asyncio
async def test_empty_directory_has_empty_children(bridge, tmp_path):
    root = tmp_path / "empty_root"
    (root / "nothing").mkdir(parents=True)
    folder = await bridge.registry.add(StaticPathPicker(root))

    tree = await bridge.folder_tree(folder.id)

    assert tree.children[0].children == []
    assert tree.children[0].to_dict()["children"] == []


@pytest.mark.asyncio
async def test_symlinks_are_not_listed(bridge, project_dir):
    os.symlink(project_dir / "README.md", project_dir / "link.md")
    await bridge.registry.add(StaticPathPicker(project_dir))

    names = [node.name for node in await bridge.trees.expand_one_level("/project")]

    assert "link.md" not in names


@pytest.mark.asyncio
async def test_unreadable_subtree_keeps_siblings(bridge, partly_locked_picker):
    folder = await bridge.registry.add(partly_locked_picker)

    tree = await bridge.folder_tree(folder.id)

    assert [child.name for child in tree.children] == ["locked", "open", "a.txt"]
    locked, opened, _file = tree.children
    assert locked.children is None
    assert locked.expanded is False
    assert opened.expanded is True
    assert [child.path for child in opened.children] == ["/shared/open/b.txt"]
