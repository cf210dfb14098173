"""Rendering a selection as an indented text diagram.

Only the selected part of a tree is rendered: unchecked nodes are dropped, while
indeterminate folders are kept because something below them is selected. The
diagram uses the same connectors as the Unix ``tree`` command::

    ├── src
    │   └── main.py
    └── README.md
"""

from dataclasses import replace
from typing import Iterator, Sequence, Tuple

from treemark.file_system_tree.tree_node import TreeNode

BRANCH = "├──"
LAST_BRANCH = "└──"
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "


def filter_selected(nodes: Sequence[TreeNode]) -> Tuple[TreeNode, ...]:
    """Keep the checked and indeterminate nodes, recursively.

    The copies have ``indeterminate`` cleared; it means nothing in the text form.
    """
    return tuple(
        replace(node, indeterminate=False, children=filter_selected(node.children))
        for node in nodes
        if node.checked or node.indeterminate
    )


def stream_tree(nodes: Sequence[TreeNode]) -> Iterator[str]:
    """Generate the diagram for the selected nodes one line at a time.

    Each yielded line ends with a newline.

    Example:
        >>> from treemark.types import NodeKind
        >>> b = TreeNode("/a/b", "b", NodeKind.FILE)
        >>> a = TreeNode("/a", "a", NodeKind.FOLDER, children=(b,))
        >>> list(stream_tree([a]))
        ['└── a\\n', '    └── b\\n']
    """

    def write_nodes(siblings: Sequence[TreeNode], prefix: str) -> Iterator[str]:
        for i, node in enumerate(siblings):
            is_last = i == len(siblings) - 1
            connector = LAST_BRANCH if is_last else BRANCH
            yield f"{prefix}{connector} {node.name}\n"
            if node.children:
                yield from write_nodes(node.children, prefix + (SPACE_PREFIX if is_last else PIPE_PREFIX))

    yield from write_nodes(filter_selected(nodes), "")


def render_tree(nodes: Sequence[TreeNode]) -> str:
    """Render the selected nodes as a complete diagram.

    Returns:
        The diagram, with a newline after every line, or an empty string when
        nothing is selected.

    Example:
        >>> from treemark.types import NodeKind
        >>> b = TreeNode("/a/b", "b", NodeKind.FILE)
        >>> a = TreeNode("/a", "a", NodeKind.FOLDER, children=(b,))
        >>> render_tree([a])
        '└── a\\n    └── b\\n'
    """
    return "".join(stream_tree(nodes))
