"""Message records exchanged with the host.

Messages are plain dictionaries with fixed field names so that they can be sent
as JSON without further conversion.

Inbound ``addFolder``::

    {"command": "addFolder", "folderPath": "/path/to/dir", "tree": [<node>, ...]}

Outbound ``copyTree``::

    {"command": "copyTree", "treeText": "└── dir\\n"}
"""

from typing import Any, Dict, Mapping, Sequence, Tuple

from treemark.exceptions import MalformedMessageError
from treemark.file_system_tree.tree_node import TreeNode

ADD_FOLDER = "addFolder"
COPY_TREE = "copyTree"

Message = Dict[str, Any]


def add_folder_message(folder_path: str, tree: Sequence[TreeNode]) -> Message:
    return {"command": ADD_FOLDER, "folderPath": folder_path, "tree": [node.to_dict() for node in tree]}


def copy_tree_message(tree_text: str) -> Message:
    return {"command": COPY_TREE, "treeText": tree_text}


def parse_add_folder(message: Mapping[str, Any]) -> Tuple[str, Tuple[TreeNode, ...]]:
    """Extract the folder path and tree from an ``addFolder`` message.

    Raises:
        MalformedMessageError: If the message is not a well-formed ``addFolder``.
    """
    if message.get("command") != ADD_FOLDER:
        raise MalformedMessageError(f"Expected {ADD_FOLDER!r} message, got {message.get('command')!r}")
    folder_path = message.get("folderPath")
    if not isinstance(folder_path, str):
        raise MalformedMessageError("addFolder message is missing 'folderPath'")
    tree = message.get("tree")
    if not isinstance(tree, list):
        raise MalformedMessageError("addFolder message is missing 'tree'")
    return folder_path, tuple(TreeNode.from_dict(node) for node in tree)
