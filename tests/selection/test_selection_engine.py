"""Unit tests for the selection engine."""

import pytest

from treemark.file_system_tree.tree_node import TreeNode
from treemark.selection.selection_engine import (
    BulkOperation,
    apply_to_level,
    apply_to_node,
    check_all_children,
    check_all_children_at_level,
    check_all_folders,
    check_only_files_at_level,
    check_only_folders_at_level,
    check_without_children,
    find_node,
    iter_invariant_violations,
    normalize_tree,
    set_checked,
    uncheck_all_children,
)
from treemark.types import CheckState, NodeKind


def file_node(node_id, checked=True):
    return TreeNode(node_id, node_id.rsplit("/", 1)[-1], NodeKind.FILE, checked=checked)


def folder_node(node_id, children, checked=True, indeterminate=False):
    return TreeNode(
        node_id,
        node_id.rsplit("/", 1)[-1],
        NodeKind.FOLDER,
        checked=checked,
        indeterminate=indeterminate,
        children=tuple(children),
    )


@pytest.fixture
def mixed_tree():
    """root -> folderA -> [fileX (unchecked), fileY (checked)], fileZ (checked)."""
    folder_a = folder_node(
        "/root/folderA",
        [file_node("/root/folderA/fileX", checked=False), file_node("/root/folderA/fileY")],
        checked=False,
        indeterminate=True,
    )
    root = folder_node("/root", [folder_a, file_node("/root/fileZ")], checked=False, indeterminate=True)
    return (root,)


@pytest.fixture
def deep_tree():
    """root -> [src -> [lib -> [a.py], main.py], README.md], all unchecked."""
    lib = folder_node("/root/src/lib", [file_node("/root/src/lib/a.py", False)], checked=False)
    src = folder_node("/root/src", [lib, file_node("/root/src/main.py", False)], checked=False)
    root = folder_node("/root", [src, file_node("/root/README.md", False)], checked=False)
    return (root,)


def assert_invariants(nodes):
    assert list(iter_invariant_violations(nodes)) == []


def test_fixture_trees_are_consistent(mixed_tree, deep_tree):
    assert_invariants(mixed_tree)
    assert_invariants(deep_tree)


class TestSetChecked:
    def test_cascade_to_children(self):
        tree = (folder_node("/f", [file_node("/f/a", False), file_node("/f/b", False)], checked=False),)
        result = set_checked(tree, "/f", True)
        folder = result[0]
        assert folder.checked
        assert not folder.indeterminate
        assert all(child.checked for child in folder.children)

    def test_cascade_clears_nested_indeterminate(self, mixed_tree):
        result = set_checked(mixed_tree, "/root", False)
        assert all(not node.checked and not node.indeterminate for node in result[0].walk())
        assert_invariants(result)

    def test_upward_recompute(self, mixed_tree):
        folder_a = find_node(mixed_tree, "/root/folderA")
        assert folder_a.state is CheckState.INDETERMINATE

        result = set_checked(mixed_tree, "/root/folderA/fileX", True)
        assert find_node(result, "/root/folderA").state is CheckState.CHECKED
        assert result[0].state is CheckState.CHECKED
        assert_invariants(result)

    def test_upward_recompute_to_indeterminate(self, deep_tree):
        result = set_checked(deep_tree, "/root/src/lib/a.py", True)
        assert find_node(result, "/root/src/lib").state is CheckState.CHECKED
        assert find_node(result, "/root/src").state is CheckState.INDETERMINATE
        assert result[0].state is CheckState.INDETERMINATE
        assert_invariants(result)

    def test_unchecking_last_checked_child(self, mixed_tree):
        result = set_checked(mixed_tree, "/root/folderA/fileY", False)
        assert find_node(result, "/root/folderA").state is CheckState.UNCHECKED
        # fileZ is still checked
        assert result[0].state is CheckState.INDETERMINATE
        assert_invariants(result)

    def test_no_op_on_miss(self, mixed_tree):
        result = set_checked(mixed_tree, "nonexistent-id", True)
        assert result == mixed_tree

    def test_input_is_not_modified(self, mixed_tree):
        before = mixed_tree[0].to_dict()
        set_checked(mixed_tree, "/root", True)
        assert mixed_tree[0].to_dict() == before

    def test_unchanged_branches_are_shared(self, mixed_tree):
        result = set_checked(mixed_tree, "/root/fileZ", False)
        assert find_node(result, "/root/folderA") is find_node(mixed_tree, "/root/folderA")

    def test_multiple_roots(self):
        tree = (file_node("/a"), folder_node("/b", [file_node("/b/c")]))
        result = set_checked(tree, "/b/c", False)
        assert result[0] is tree[0]
        assert result[1].state is CheckState.UNCHECKED


class TestListTransforms:
    def test_check_all_children(self, deep_tree):
        result = check_all_children(deep_tree)
        assert all(node.checked and not node.indeterminate for node in result[0].walk())

    def test_check_all_children_is_idempotent(self, mixed_tree):
        once = check_all_children(mixed_tree)
        assert check_all_children(once) == once

    def test_uncheck_all_children(self, mixed_tree):
        result = uncheck_all_children(mixed_tree)
        assert all(not node.checked and not node.indeterminate for node in result[0].walk())

    def test_check_all_folders(self, deep_tree):
        result = check_all_folders(deep_tree)
        for node in result[0].walk():
            assert node.checked == (node.kind is NodeKind.FOLDER)

    def test_check_without_children(self, deep_tree):
        result = check_without_children(deep_tree[0])
        assert result.checked
        assert result.children == deep_tree[0].children

    def test_check_only_folders_at_level(self, deep_tree):
        src = find_node(deep_tree, "/root/src")
        result = check_only_folders_at_level(src.children)
        assert [(n.name, n.checked) for n in result] == [("lib", True), ("main.py", False)]
        # Not recursive
        assert not result[0].children[0].checked

    def test_check_only_files_at_level(self, deep_tree):
        src = find_node(deep_tree, "/root/src")
        result = check_only_files_at_level(src.children)
        assert [(n.name, n.checked) for n in result] == [("lib", False), ("main.py", True)]

    def test_check_all_children_at_level(self, deep_tree):
        src = find_node(deep_tree, "/root/src")
        result = check_all_children_at_level(src.children)
        assert all(n.checked for n in result)
        assert not result[0].children[0].checked

    def test_level_transforms_clear_indeterminate(self, mixed_tree):
        result = check_only_files_at_level(mixed_tree[0].children)
        assert not any(n.indeterminate for n in result)

    @pytest.mark.parametrize("operation", list(BulkOperation))
    def test_apply_to_level_accepts_every_operation(self, mixed_tree, operation):
        assert len(apply_to_level(mixed_tree, operation)) == 1

    def test_apply_to_level_accepts_wire_names(self, deep_tree):
        result = apply_to_level(deep_tree, "checkAllChildren")
        assert result == check_all_children(deep_tree)


class TestApplyToNode:
    def test_check_all_children_on_node(self, deep_tree):
        result = apply_to_node(deep_tree, "/root/src", BulkOperation.CHECK_ALL_CHILDREN)
        assert find_node(result, "/root/src").state is CheckState.CHECKED
        assert find_node(result, "/root/src/lib/a.py").checked
        assert result[0].state is CheckState.INDETERMINATE
        assert_invariants(result)

    def test_check_all_folders_on_node(self, deep_tree):
        result = apply_to_node(deep_tree, "/root/src", BulkOperation.CHECK_ALL_FOLDERS)
        # lib is forced checked while a.py stays unchecked
        assert find_node(result, "/root/src/lib").checked
        assert not find_node(result, "/root/src/lib/a.py").checked
        assert find_node(result, "/root/src").state is CheckState.INDETERMINATE

    def test_only_files_at_level_on_node(self, deep_tree):
        result = apply_to_node(deep_tree, "/root/src", BulkOperation.CHECK_ONLY_FILES_AT_LEVEL)
        assert find_node(result, "/root/src/main.py").checked
        assert not find_node(result, "/root/src/lib").checked
        assert find_node(result, "/root/src").state is CheckState.INDETERMINATE
        assert_invariants(result)

    def test_only_folders_at_level_on_node(self, deep_tree):
        result = apply_to_node(deep_tree, "/root/src", BulkOperation.CHECK_ONLY_FOLDERS_AT_LEVEL)
        assert find_node(result, "/root/src/lib").checked
        assert not find_node(result, "/root/src/main.py").checked
        assert find_node(result, "/root/src").state is CheckState.INDETERMINATE

    def test_all_children_at_level_on_node(self, deep_tree):
        result = apply_to_node(deep_tree, "/root", BulkOperation.CHECK_ALL_CHILDREN_AT_LEVEL)
        assert find_node(result, "/root/src").checked
        assert find_node(result, "/root/README.md").checked
        assert result[0].state is CheckState.CHECKED

    def test_uncheck_all_children_on_node(self, mixed_tree):
        result = apply_to_node(mixed_tree, "/root/folderA", BulkOperation.UNCHECK_ALL_CHILDREN)
        assert find_node(result, "/root/folderA").state is CheckState.UNCHECKED
        assert result[0].state is CheckState.INDETERMINATE
        assert_invariants(result)

    def test_check_without_children_on_node(self, deep_tree):
        result = apply_to_node(deep_tree, "/root/src", BulkOperation.CHECK_WITHOUT_CHILDREN)
        src = find_node(result, "/root/src")
        assert src.checked
        assert not find_node(result, "/root/src/main.py").checked
        assert result[0].state is CheckState.INDETERMINATE
        # The marked folder deliberately disagrees with its children
        assert list(iter_invariant_violations(result)) == ["/root/src"]

    def test_no_op_on_miss(self, deep_tree):
        assert apply_to_node(deep_tree, "/nowhere", BulkOperation.CHECK_ALL_CHILDREN) == deep_tree

    def test_file_target(self, deep_tree):
        result = apply_to_node(deep_tree, "/root/README.md", BulkOperation.CHECK_ALL_CHILDREN)
        # Files have no children, so the node itself is left as it was
        assert not find_node(result, "/root/README.md").checked

    def test_unknown_operation(self, deep_tree):
        with pytest.raises(ValueError):
            apply_to_node(deep_tree, "/root", "explode")


def test_find_node(mixed_tree):
    assert find_node(mixed_tree, "/root/folderA/fileY").name == "fileY"
    assert find_node(mixed_tree, "missing") is None


def test_normalize_tree():
    stale = folder_node("/r", [file_node("/r/a", False), file_node("/r/b")], checked=True)
    result = normalize_tree((stale,))
    assert result[0].state is CheckState.INDETERMINATE
    assert_invariants(result)


def test_iter_invariant_violations_reports_stale_folders():
    stale = folder_node("/r", [file_node("/r/a", False)], checked=True)
    both = folder_node("/q", [], checked=True, indeterminate=True)
    assert list(iter_invariant_violations((stale, both))) == ["/r", "/q"]
