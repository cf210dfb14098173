from enum import Enum
from os import PathLike
from typing import Union

# Complete path type including strings and any path-like object
PathType = Union[str, PathLike[str]]


class NodeKind(str, Enum):
    """Enumeration of tree node kinds.

    The values double as the ``type`` field of a node in its message form.

    Attributes:
        FILE: Regular file (never has children)
        FOLDER: Directory (has a possibly empty list of children)
    """

    FILE = "file"
    FOLDER = "folder"


class CheckState(Enum):
    """Tri-state view of a node's selection flags.

    Attributes:
        CHECKED: The node and, for folders, everything below it is selected.
        UNCHECKED: Nothing at or below the node is selected.
        INDETERMINATE: A folder whose children are a mix of the other states.
    """

    CHECKED = "checked"
    UNCHECKED = "unchecked"
    INDETERMINATE = "indeterminate"
