"""Unit tests for the TreeNode class."""

import pytest

from treemark.exceptions import MalformedMessageError
from treemark.file_system_tree.tree_node import TreeNode
from treemark.types import CheckState, NodeKind


def make_folder(children, checked=True, indeterminate=False):
    return TreeNode("/root", "root", NodeKind.FOLDER, checked=checked, indeterminate=indeterminate, children=children)


def test_tree_node_initialization():
    file_node = TreeNode("/root/a.txt", "a.txt", NodeKind.FILE)
    assert file_node.checked
    assert not file_node.indeterminate
    assert file_node.children == ()
    assert not file_node.is_folder

    folder = make_folder(())
    assert folder.is_folder
    assert folder.children == ()


def test_file_nodes_reject_children_and_indeterminate():
    child = TreeNode("/root/a/b", "b", NodeKind.FILE)
    with pytest.raises(ValueError):
        TreeNode("/root/a", "a", NodeKind.FILE, children=(child,))
    with pytest.raises(ValueError):
        TreeNode("/root/a", "a", NodeKind.FILE, indeterminate=True)


def test_tree_node_is_immutable():
    node = TreeNode("/root/a.txt", "a.txt", NodeKind.FILE)
    with pytest.raises(AttributeError):
        node.checked = False


@pytest.mark.parametrize(
    "checked,indeterminate,state",
    [
        (True, False, CheckState.CHECKED),
        (False, False, CheckState.UNCHECKED),
        (False, True, CheckState.INDETERMINATE),
    ],
)
def test_state(checked, indeterminate, state):
    assert make_folder((), checked=checked, indeterminate=indeterminate).state is state


def test_with_check_clears_indeterminate():
    folder = make_folder((), checked=False, indeterminate=True)
    updated = folder.with_check(True)
    assert updated.checked and not updated.indeterminate
    # Original is untouched
    assert folder.indeterminate


@pytest.mark.parametrize(
    "child_states,expected",
    [
        ([True, True], CheckState.CHECKED),
        ([False, False], CheckState.UNCHECKED),
        ([True, False], CheckState.INDETERMINATE),
    ],
)
def test_recomputed(child_states, expected):
    children = tuple(
        TreeNode(f"/root/{i}", str(i), NodeKind.FILE, checked=checked) for i, checked in enumerate(child_states)
    )
    assert make_folder(children).recomputed().state is expected


def test_recomputed_with_indeterminate_child():
    inner = TreeNode("/root/sub", "sub", NodeKind.FOLDER, checked=False, indeterminate=True)
    unchecked = TreeNode("/root/x", "x", NodeKind.FILE, checked=False)
    assert make_folder((inner, unchecked)).recomputed().state is CheckState.INDETERMINATE


def test_recomputed_leaves_empty_folder_alone():
    folder = make_folder((), checked=False)
    assert folder.recomputed() is folder


def test_walk_is_depth_first():
    b = TreeNode("/root/a/b", "b", NodeKind.FILE)
    a = TreeNode("/root/a", "a", NodeKind.FOLDER, children=(b,))
    c = TreeNode("/root/c", "c", NodeKind.FILE)
    assert [n.name for n in make_folder((a, c)).walk()] == ["root", "a", "b", "c"]


def test_to_dict():
    child = TreeNode("/root/a.txt", "a.txt", NodeKind.FILE, checked=False)
    folder = make_folder((child,), checked=False)
    assert folder.to_dict() == {
        "id": "/root",
        "name": "root",
        "type": "folder",
        "checked": False,
        "indeterminate": False,
        "children": [{"id": "/root/a.txt", "name": "a.txt", "type": "file", "checked": False}],
    }


def test_from_dict_defaults():
    node = TreeNode.from_dict({"id": "/root", "name": "root", "type": "folder", "checked": True})
    assert node.children == ()
    assert not node.indeterminate

    leaf = TreeNode.from_dict({"id": "/root/a", "name": "a", "type": "file", "checked": True, "indeterminate": None})
    assert leaf.kind is NodeKind.FILE
    assert not leaf.indeterminate


def test_from_dict_nested():
    data = {
        "id": "/root",
        "name": "root",
        "type": "folder",
        "checked": False,
        "indeterminate": True,
        "children": [
            {"id": "/root/a", "name": "a", "type": "file", "checked": True},
            {"id": "/root/b", "name": "b", "type": "file", "checked": False},
        ],
    }
    node = TreeNode.from_dict(data)
    assert node.state is CheckState.INDETERMINATE
    assert [child.name for child in node.children] == ["a", "b"]
    assert node.to_dict() == data


def test_from_dict_unknown_type():
    with pytest.raises(MalformedMessageError):
        TreeNode.from_dict({"id": "/x", "name": "x", "type": "socket", "checked": True})


def test_from_dict_missing_field():
    with pytest.raises(MalformedMessageError, match="'id'"):
        TreeNode.from_dict({"name": "x", "type": "file", "checked": True})


@pytest.mark.parametrize("data", ["/x", 42, None, ["id", "name"]])
def test_from_dict_rejects_non_mapping(data):
    with pytest.raises(MalformedMessageError, match="mapping"):
        TreeNode.from_dict(data)


def test_from_dict_rejects_non_mapping_child():
    data = {"id": "/r", "name": "r", "type": "folder", "checked": True, "children": ["/r/a"]}
    with pytest.raises(MalformedMessageError):
        TreeNode.from_dict(data)


def test_from_dict_rejects_non_list_children():
    data = {"id": "/r", "name": "r", "type": "folder", "checked": True, "children": 3}
    with pytest.raises(MalformedMessageError):
        TreeNode.from_dict(data)


def test_from_dict_rejects_checked_and_indeterminate_folder():
    data = {"id": "/r", "name": "r", "type": "folder", "checked": True, "indeterminate": True, "children": []}
    with pytest.raises(MalformedMessageError, match="both checked and indeterminate"):
        TreeNode.from_dict(data)
