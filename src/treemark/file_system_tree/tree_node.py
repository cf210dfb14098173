"""Node representation for entries in a selection tree."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, Tuple

from treemark.exceptions import MalformedMessageError
from treemark.types import CheckState, NodeKind


@dataclass(frozen=True)
class TreeNode:
    """Immutable node representing a file or directory in a selection tree.

    Nodes are never modified in place. Every change to a selection produces new
    nodes along the changed paths (see ``treemark.selection``), so a tree held by
    a caller is a point-in-time snapshot.

    Attributes:
        id (str): Unique, stable identifier (the entry's absolute path).
        name (str): Display label (the entry's base name).
        kind (NodeKind): Whether the node is a file or a folder.
        checked (bool): Whether the node is part of the selection.
        indeterminate (bool): For folders, whether the children are a mix of
            selected and unselected entries. Always False for files.
        children (Tuple[TreeNode, ...]): Child nodes of a folder. Always empty for files.

    Example:
        >>> leaf = TreeNode("/p/a.txt", "a.txt", NodeKind.FILE, checked=True)
        >>> folder = TreeNode("/p", "p", NodeKind.FOLDER, checked=True, children=(leaf,))
        >>> folder.state
        <CheckState.CHECKED: 'checked'>
        >>> folder.with_check(False).checked
        False
    """

    id: str
    name: str
    kind: NodeKind
    checked: bool = True
    indeterminate: bool = False
    children: Tuple["TreeNode", ...] = field(default=())

    def __post_init__(self) -> None:
        if self.kind is NodeKind.FILE and (self.children or self.indeterminate):
            raise ValueError(f"File node cannot have children or be indeterminate: {self.id}")

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER

    @property
    def state(self) -> CheckState:
        """The tri-state view of ``checked`` and ``indeterminate``."""
        if self.indeterminate:
            return CheckState.INDETERMINATE
        return CheckState.CHECKED if self.checked else CheckState.UNCHECKED

    def with_check(self, checked: bool) -> "TreeNode":
        """Return a copy with ``checked`` set and ``indeterminate`` cleared."""
        return replace(self, checked=checked, indeterminate=False)

    def with_children(self, children: Tuple["TreeNode", ...]) -> "TreeNode":
        return replace(self, children=tuple(children))

    def recomputed(self) -> "TreeNode":
        """Return a copy whose flags are derived from its direct children.

        A folder is checked when every child is checked, unchecked when no child is
        checked or indeterminate, and indeterminate otherwise. Nodes without
        children are returned unchanged.

        Example:
            >>> a = TreeNode("/p/a", "a", NodeKind.FILE, checked=True)
            >>> b = TreeNode("/p/b", "b", NodeKind.FILE, checked=False)
            >>> TreeNode("/p", "p", NodeKind.FOLDER, children=(a, b)).recomputed().state
            <CheckState.INDETERMINATE: 'indeterminate'>
        """
        if not self.children:
            return self
        all_checked = all(child.checked for child in self.children)
        none_checked = all(not child.checked and not child.indeterminate for child in self.children)
        return replace(self, checked=all_checked, indeterminate=not all_checked and not none_checked)

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and all its descendants, depth-first in order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        """Convert the node to its message form.

        Files carry no ``indeterminate`` or ``children`` keys.

        Example:
            >>> TreeNode("/p/a.txt", "a.txt", NodeKind.FILE).to_dict()
            {'id': '/p/a.txt', 'name': 'a.txt', 'type': 'file', 'checked': True}
        """
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.kind.value,
            "checked": self.checked,
        }
        if self.is_folder:
            data["indeterminate"] = self.indeterminate
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TreeNode":
        """Build a node (and its subtree) from its message form.

        Raises:
            MalformedMessageError: If the record is not a mapping, a required field is
                missing, ``type`` is unknown, ``children`` is not a list, or a folder
                is both checked and indeterminate.
        """
        if not isinstance(data, Mapping):
            raise MalformedMessageError(f"Tree node must be a mapping, got {type(data).__name__}")
        try:
            kind = NodeKind(data["type"])
            node_id = str(data["id"])
            name = str(data["name"])
        except KeyError as e:
            raise MalformedMessageError(f"Tree node is missing field {e.args[0]!r}") from e
        except ValueError as e:
            raise MalformedMessageError(f"Unknown tree node type: {data.get('type')!r}") from e

        if kind is NodeKind.FILE:
            return cls(node_id, name, kind, checked=bool(data.get("checked", False)))

        raw_children = data.get("children") or []
        if not isinstance(raw_children, (list, tuple)):
            raise MalformedMessageError(f"Folder {node_id!r} has non-list children")
        checked = bool(data.get("checked", False))
        indeterminate = bool(data.get("indeterminate", False))
        if checked and indeterminate:
            raise MalformedMessageError(f"Folder {node_id!r} cannot be both checked and indeterminate")

        children = tuple(cls.from_dict(child) for child in raw_children)
        return cls(node_id, name, kind, checked=checked, indeterminate=indeterminate, children=children)
