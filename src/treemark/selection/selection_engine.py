"""Tri-state selection transforms over tree snapshots.

Every function here is pure: it takes a sequence of root nodes and returns a new
tuple of root nodes. Nodes off the changed paths are shared with the input, which
is safe because ``TreeNode`` is immutable. A snapshot passed in is never modified.

Two kinds of operations exist:

* targeted operations (``set_checked``, ``apply_to_node``) locate a node by id,
  change it, and recompute every ancestor from its children on the way back up;
* list transforms (``check_all_children`` and friends) change an explicit list
  of sibling nodes, either recursively or only at that level.

An unknown id is never an error; the input snapshot is returned unchanged.
"""

from enum import Enum
from typing import Callable, Dict, Iterator, Optional, Sequence, Tuple

from treemark.file_system_tree.tree_node import TreeNode
from treemark.types import NodeKind

Snapshot = Tuple[TreeNode, ...]
NodeUpdate = Callable[[TreeNode], TreeNode]


def cascade(node: TreeNode, checked: bool) -> TreeNode:
    """Set ``checked`` on a node and every node below it, clearing indeterminate flags."""
    return node.with_check(checked).with_children(tuple(cascade(child, checked) for child in node.children))


def check_all_children(nodes: Sequence[TreeNode]) -> Snapshot:
    """Recursively check every node in the list and below."""
    return tuple(cascade(node, True) for node in nodes)


def uncheck_all_children(nodes: Sequence[TreeNode]) -> Snapshot:
    """Recursively uncheck every node in the list and below."""
    return tuple(cascade(node, False) for node in nodes)


def check_all_folders(nodes: Sequence[TreeNode]) -> Snapshot:
    """Recursively check every folder, leaving files as they are.

    Example:
        >>> f = TreeNode("/r/f", "f", NodeKind.FILE, checked=False)
        >>> d = TreeNode("/r/d", "d", NodeKind.FOLDER, checked=False)
        >>> [(n.name, n.checked) for n in check_all_folders([f, d])]
        [('f', False), ('d', True)]
    """
    result = []
    for node in nodes:
        if node.kind is NodeKind.FOLDER:
            node = node.with_check(True).with_children(check_all_folders(node.children))
        result.append(node)
    return tuple(result)


def check_without_children(node: TreeNode) -> TreeNode:
    """Check a single node without touching its children.

    The node's flag may then disagree with its children until something
    recomputes it; this is the point of the operation.
    """
    return node.with_check(True)


def check_only_folders_at_level(nodes: Sequence[TreeNode]) -> Snapshot:
    """Check the folders and uncheck the files of one sibling list, without recursing."""
    return tuple(node.with_check(node.kind is NodeKind.FOLDER) for node in nodes)


def check_only_files_at_level(nodes: Sequence[TreeNode]) -> Snapshot:
    """Check the files and uncheck the folders of one sibling list, without recursing."""
    return tuple(node.with_check(node.kind is NodeKind.FILE) for node in nodes)


def check_all_children_at_level(nodes: Sequence[TreeNode]) -> Snapshot:
    """Check every node of one sibling list, without recursing."""
    return tuple(node.with_check(True) for node in nodes)


class BulkOperation(str, Enum):
    """Bulk selection operations, valued by the command names used in messages."""

    CHECK_ALL_CHILDREN = "checkAllChildren"
    CHECK_ALL_FOLDERS = "checkAllFolders"
    UNCHECK_ALL_CHILDREN = "uncheckAllChildren"
    CHECK_WITHOUT_CHILDREN = "checkWithoutChildren"
    CHECK_ONLY_FOLDERS_AT_LEVEL = "checkOnlyFoldersAtLevel"
    CHECK_ONLY_FILES_AT_LEVEL = "checkOnlyFilesAtLevel"
    CHECK_ALL_CHILDREN_AT_LEVEL = "checkAllChildrenAtLevel"


LIST_TRANSFORMS: Dict[BulkOperation, Callable[[Sequence[TreeNode]], Snapshot]] = {
    BulkOperation.CHECK_ALL_CHILDREN: check_all_children,
    BulkOperation.CHECK_ALL_FOLDERS: check_all_folders,
    BulkOperation.UNCHECK_ALL_CHILDREN: uncheck_all_children,
    BulkOperation.CHECK_WITHOUT_CHILDREN: lambda nodes: tuple(check_without_children(node) for node in nodes),
    BulkOperation.CHECK_ONLY_FOLDERS_AT_LEVEL: check_only_folders_at_level,
    BulkOperation.CHECK_ONLY_FILES_AT_LEVEL: check_only_files_at_level,
    BulkOperation.CHECK_ALL_CHILDREN_AT_LEVEL: check_all_children_at_level,
}


def apply_to_level(nodes: Sequence[TreeNode], operation: BulkOperation) -> Snapshot:
    """Apply a bulk operation to an explicit list of sibling nodes."""
    return LIST_TRANSFORMS[BulkOperation(operation)](nodes)


def _update(nodes: Sequence[TreeNode], target_id: str, update: NodeUpdate) -> Optional[Snapshot]:
    """Replace the node with ``target_id`` by ``update(node)`` and recompute its ancestors.

    Returns None when no node has the id, so callers can hand back the original
    snapshot untouched.
    """
    for index, node in enumerate(nodes):
        if node.id == target_id:
            replacement = update(node)
        elif node.children:
            children = _update(node.children, target_id, update)
            if children is None:
                continue
            replacement = node.with_children(children).recomputed()
        else:
            continue
        return tuple(nodes[:index]) + (replacement,) + tuple(nodes[index + 1 :])
    return None


def set_checked(nodes: Sequence[TreeNode], target_id: str, checked: bool) -> Snapshot:
    """Check or uncheck a node, cascading down and recomputing ancestors.

    Args:
        nodes: Root nodes of the snapshot.
        target_id: Id of the node to change.
        checked: The new value.

    Returns:
        The new snapshot, or the input (as a tuple) when no node has ``target_id``.

    Example:
        >>> x = TreeNode("/r/a/x", "x", NodeKind.FILE, checked=False)
        >>> y = TreeNode("/r/a/y", "y", NodeKind.FILE, checked=True)
        >>> a = TreeNode("/r/a", "a", NodeKind.FOLDER, checked=False, indeterminate=True, children=(x, y))
        >>> after = set_checked([a], "/r/a/x", True)
        >>> after[0].state
        <CheckState.CHECKED: 'checked'>
    """
    updated = _update(nodes, target_id, lambda node: cascade(node, checked))
    return tuple(nodes) if updated is None else updated


def apply_to_node(nodes: Sequence[TreeNode], target_id: str, operation: BulkOperation) -> Snapshot:
    """Apply a bulk operation to the children of one node.

    The node's own flags are then recomputed from its transformed children and the
    change is propagated to every ancestor, as with ``set_checked``.
    ``CHECK_WITHOUT_CHILDREN`` is the exception: it marks the node itself and
    leaves its children, and its own flag, as they are.

    Returns:
        The new snapshot, or the input (as a tuple) when no node has ``target_id``.
    """
    operation = BulkOperation(operation)
    transform = LIST_TRANSFORMS[operation]

    def update_children(node: TreeNode) -> TreeNode:
        return node.with_children(transform(node.children)).recomputed()

    update: NodeUpdate = update_children
    if operation is BulkOperation.CHECK_WITHOUT_CHILDREN:
        update = check_without_children

    updated = _update(nodes, target_id, update)
    return tuple(nodes) if updated is None else updated


def find_node(nodes: Sequence[TreeNode], node_id: str) -> Optional[TreeNode]:
    """Return the node with ``node_id``, or None."""
    for root in nodes:
        for node in root.walk():
            if node.id == node_id:
                return node
    return None


def normalize_tree(nodes: Sequence[TreeNode]) -> Snapshot:
    """Recompute every folder from its children, bottom-up."""
    return tuple(
        node.with_children(normalize_tree(node.children)).recomputed() if node.children else node for node in nodes
    )


def iter_invariant_violations(nodes: Sequence[TreeNode]) -> Iterator[str]:
    """Yield the ids of nodes whose flags disagree with their children.

    A file must not be indeterminate or have children. A folder with children must
    carry exactly the flags ``TreeNode.recomputed`` would give it. Folders without
    children are unconstrained apart from never being checked and indeterminate
    at once.
    """
    for root in nodes:
        for node in root.walk():
            if node.indeterminate and node.checked:
                yield node.id
            elif node.kind is NodeKind.FILE:
                if node.indeterminate or node.children:
                    yield node.id
            elif node.children:
                expected = node.recomputed()
                if (expected.checked, expected.indeterminate) != (node.checked, node.indeterminate):
                    yield node.id
