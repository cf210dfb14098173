"""Tab session: one independent selection tree per open tab.

The session is the thin coordinating shell between the host and the engines. It
turns ``addFolder`` messages into tabs, routes selection actions to
``treemark.selection`` and copy requests to ``treemark.tree_renderer``, and posts
the resulting ``copyTree`` messages on its outbound channel.
"""

import itertools
import logging
import os
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from treemark.exceptions import MalformedMessageError, WelcomeTabError
from treemark.exclusion_rules.ignore_pattern import IgnorePattern
from treemark.file_system_tree.tree_builder import TreeBuilder
from treemark.file_system_tree.tree_node import TreeNode
from treemark.selection.selection_engine import BulkOperation, apply_to_level, apply_to_node, set_checked
from treemark.session.channel import MessageChannel
from treemark.session.messages import ADD_FOLDER, add_folder_message, copy_tree_message, parse_add_folder
from treemark.tree_renderer import render_tree
from treemark.types import PathType

logger = logging.getLogger(__name__)

WELCOME_TAB_ID = "welcome"
WELCOME_TAB_TITLE = "Welcome"


@dataclass(frozen=True)
class Tab:
    """One open tab.

    Attributes:
        id (str): Unique tab identifier.
        title (str): Label shown for the tab (the folder's last path segment).
        tree_root (Tuple[TreeNode, ...]): Current snapshot of the tab's tree.
        is_welcome (bool): Whether this is the welcome tab, which has no tree.
    """

    id: str
    title: str
    tree_root: Tuple[TreeNode, ...] = field(default=())
    is_welcome: bool = False


def tab_title(folder_path: str) -> str:
    """Derive a tab title from a folder path.

    Example:
        >>> tab_title("/home/user/project/")
        'project'
        >>> tab_title("C:\\\\work\\\\repo")
        'repo'
        >>> tab_title("/")
        '/'
    """
    parts = re.split(r"[/\\]", re.sub(r"[/\\]$", "", folder_path))
    return parts[-1] or folder_path


class TabSession:
    """Holds the open tabs and routes messages and user actions to them.

    A session starts with the welcome tab open and active. Every ``addFolder``
    message opens a new tab, which becomes the active one.

    Attributes:
        channel (MessageChannel): Outbound channel for ``copyTree`` messages.
        builder (TreeBuilder): Builder used by ``show_folder``.
        active_tab_id (str): Identifier of the active tab.

    Example:
        >>> from treemark.types import NodeKind
        >>> session = TabSession()
        >>> root = TreeNode("/tmp/demo", "demo", NodeKind.FOLDER)
        >>> tab = session.add_folder("/tmp/demo", [root])
        >>> tab.title, session.active_tab_id == tab.id
        ('demo', True)
        >>> session.copy(tab.id)
        '└── demo\\n'
    """

    def __init__(self, channel: Optional[MessageChannel] = None, builder: Optional[TreeBuilder] = None) -> None:
        self.channel = channel if channel is not None else MessageChannel()
        self.builder = builder if builder is not None else TreeBuilder()
        self._tabs: Dict[str, Tab] = {WELCOME_TAB_ID: Tab(WELCOME_TAB_ID, WELCOME_TAB_TITLE, is_welcome=True)}
        self._ids = itertools.count(1)
        self.active_tab_id = WELCOME_TAB_ID

    @property
    def tabs(self) -> List[Tab]:
        return list(self._tabs.values())

    @property
    def active_tab(self) -> Tab:
        return self._tabs[self.active_tab_id]

    def get_tab(self, tab_id: str) -> Tab:
        """Return a tab by id.

        Raises:
            KeyError: If there is no such tab.
        """
        return self._tabs[tab_id]

    def handle_message(self, message: Mapping[str, Any]) -> Tab:
        """Handle an inbound message from the host.

        Raises:
            MalformedMessageError: If the command is unknown or the message is malformed.
        """
        command = message.get("command")
        logger.debug("Received %r message", command)
        if command == ADD_FOLDER:
            folder_path, tree = parse_add_folder(message)
            return self.add_folder(folder_path, tree)
        raise MalformedMessageError(f"Unknown command: {command!r}")

    def add_folder(self, folder_path: str, tree: Sequence[TreeNode]) -> Tab:
        """Open a new tab for a folder's tree and make it active."""
        tab = Tab(f"tab-{next(self._ids)}", tab_title(folder_path), tuple(tree))
        self._tabs[tab.id] = tab
        self.active_tab_id = tab.id
        logger.debug("Opened tab %s for %s", tab.id, folder_path)
        return tab

    def show_folder(self, directory: PathType, inherited_patterns: Sequence[IgnorePattern] = ()) -> Tab:
        """Build the tree for a directory and open it in a new tab.

        This is the "show folder tree" action: the tree is built first, then fed
        through the same ``addFolder`` route a host message would take. A relative
        ``directory`` is made absolute first. A failed build opens no tab.

        Raises:
            DirectoryReadError: If the directory cannot be listed.
        """
        folder_path = os.path.abspath(os.fspath(directory))
        root = self.builder.build(folder_path, inherited_patterns)
        return self.handle_message(add_folder_message(folder_path, [root]))

    def close_tab(self, tab_id: str) -> None:
        """Close a tab. Closing the active tab activates the last remaining one.

        Unknown ids are ignored.

        Raises:
            WelcomeTabError: If ``tab_id`` is the welcome tab.
        """
        tab = self._tabs.get(tab_id)
        if tab is None:
            return
        if tab.is_welcome:
            raise WelcomeTabError(tab_id)
        del self._tabs[tab_id]
        if self.active_tab_id == tab_id:
            self.active_tab_id = list(self._tabs)[-1]

    def activate(self, tab_id: str) -> None:
        if tab_id not in self._tabs:
            raise KeyError(tab_id)
        self.active_tab_id = tab_id

    def toggle(self, tab_id: str, node_id: str, checked: bool) -> Tab:
        """Check or uncheck one node of a tab's tree."""
        tab = self._tree_tab(tab_id)
        return self._store(replace(tab, tree_root=set_checked(tab.tree_root, node_id, checked)))

    def bulk(self, tab_id: str, node_id: str, operation: BulkOperation) -> Tab:
        """Apply a bulk operation to one node of a tab's tree."""
        tab = self._tree_tab(tab_id)
        return self._store(replace(tab, tree_root=apply_to_node(tab.tree_root, node_id, operation)))

    def bulk_at_level(self, tab_id: str, operation: BulkOperation) -> Tab:
        """Apply a bulk operation to the top-level nodes of a tab's tree."""
        tab = self._tree_tab(tab_id)
        return self._store(replace(tab, tree_root=apply_to_level(tab.tree_root, operation)))

    def copy(self, tab_id: str) -> str:
        """Render a tab's selection and ask the host to put it on the clipboard."""
        text = render_tree(self._tree_tab(tab_id).tree_root)
        self.channel.post(copy_tree_message(text))
        return text

    def _tree_tab(self, tab_id: str) -> Tab:
        tab = self.get_tab(tab_id)
        if tab.is_welcome:
            raise WelcomeTabError(tab_id)
        return tab

    def _store(self, tab: Tab) -> Tab:
        self._tabs[tab.id] = tab
        return tab
