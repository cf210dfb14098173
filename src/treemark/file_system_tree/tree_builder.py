"""Building the initial selection tree for a directory.

This module walks a directory through a ``FileSystem`` and produces the
``TreeNode`` snapshot a selection session starts from. Every directory may carry
its own rule file; its patterns are combined with the patterns inherited from the
directories above it, and entries matched by the combined rules start out
unchecked.
"""

import locale
import logging
import os
import unicodedata
from typing import List, Optional, Sequence

from treemark.exceptions import DirectoryReadError
from treemark.exclusion_rules.ignore_pattern import IgnorePattern, parse_rules, resolve
from treemark.file_system_tree.file_system import DirEntry, FileSystem, LocalFileSystem
from treemark.file_system_tree.permission_action import PermissionAction
from treemark.file_system_tree.tree_node import TreeNode
from treemark.types import NodeKind, PathType

logger = logging.getLogger(__name__)

DEFAULT_RULES_FILE_NAME = ".gitignore"


def base_letters(name: str) -> str:
    """Case-fold a name and drop its accents, so ``"Éclair"`` compares as ``"eclair"``."""
    decomposed = unicodedata.normalize("NFKD", name.casefold())
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def sort_key(entry: DirEntry) -> tuple:
    """Locale-aware, case- and accent-insensitive ordering.

    Names are compared by their base letters first, then case-folded with accents,
    then raw as the final tie-breaker. ``locale.strxfrm`` follows ``LC_COLLATE``,
    which the command line sets from the environment.

    Example:
        >>> names = ["zeta", "éclair", "Apple", "eclair"]
        >>> [e.name for e in sorted((DirEntry(n, False) for n in names), key=sort_key)]
        ['Apple', 'eclair', 'éclair', 'zeta']
    """
    return (locale.strxfrm(base_letters(entry.name)), locale.strxfrm(entry.name.casefold()), entry.name)


class TreeBuilder:
    """Builds selection trees from directories.

    Entries whose name starts with ``.`` are never listed. Every other entry is
    checked unless the ignore rules in effect for its directory exclude it, or one
    of its ancestors was excluded. Folders derive their own flags from their
    children, so a folder with some excluded entries below it starts out
    indeterminate.

    Rule composition:
        The patterns used for a directory are the directory's own rule file
        followed by the patterns inherited from its parent. Because resolution is
        last-match-wins, a matching ancestor rule overrides a local one.

    Attributes:
        file_system (FileSystem): Where listings and rule files are read from.
        rules_file_name (str): Name of the per-directory rule file.
        permission_action (PermissionAction): What to do when a subdirectory cannot
            be listed. The root directory always raises.

    Example:
        >>> builder = TreeBuilder()
        >>> tree = builder.build("src")  # doctest: +SKIP
        >>> tree.checked  # doctest: +SKIP
        True
    """

    def __init__(
        self,
        file_system: Optional[FileSystem] = None,
        rules_file_name: str = DEFAULT_RULES_FILE_NAME,
        permission_action: PermissionAction = PermissionAction.RAISE,
    ) -> None:
        self.file_system: FileSystem = file_system if file_system is not None else LocalFileSystem()
        self.rules_file_name = rules_file_name
        self.permission_action = permission_action

    def build(
        self,
        directory: PathType,
        inherited_patterns: Sequence[IgnorePattern] = (),
        force_exclude: bool = False,
    ) -> TreeNode:
        """Build the tree for a directory.

        Node ids are absolute paths, so a relative ``directory`` is resolved against
        the current working directory first.

        Args:
            directory: The directory to walk.
            inherited_patterns: Patterns declared by enclosing directories (or passed
                in by the caller), in precedence order.
            force_exclude: Whether an ancestor was excluded, in which case every
                entry below starts out unchecked.

        Returns:
            A folder node for ``directory`` with its whole subtree.

        Raises:
            DirectoryReadError: If ``directory`` or its rule file cannot be read, or a
                subdirectory or its rule file cannot be read and ``permission_action``
                is RAISE.
        """
        path = os.path.abspath(os.fspath(directory))
        entries = self.file_system.list_entries(path)
        patterns = self._load_patterns(path) + list(inherited_patterns)
        return self._build_folder(path, entries, patterns, force_exclude)

    def _load_patterns(self, directory: str) -> List[IgnorePattern]:
        rules_path = os.path.join(directory, self.rules_file_name)
        text = self.file_system.read_file_if_exists(rules_path)
        if text is None:
            return []
        patterns = parse_rules(text)
        logger.debug("Loaded %d pattern(s) from %s", len(patterns), rules_path)
        return patterns

    def _build_folder(
        self,
        directory: str,
        entries: List[DirEntry],
        patterns: List[IgnorePattern],
        force_exclude: bool,
    ) -> TreeNode:
        visible = sorted((entry for entry in entries if not entry.name.startswith(".")), key=sort_key)

        children = []
        for entry in visible:
            entry_path = os.path.join(directory, entry.name)
            excluded = resolve(entry.name, patterns, entry.is_directory)
            if entry.is_directory:
                child = self._build_child_folder(entry_path, patterns, excluded or force_exclude)
                if excluded or force_exclude:
                    child = child.with_check(False)
            else:
                child = TreeNode(
                    entry_path, entry.name, NodeKind.FILE, checked=not excluded and not force_exclude
                )
            children.append(child)

        name = os.path.basename(directory.rstrip("/\\")) or directory
        node = TreeNode(directory, name, NodeKind.FOLDER, checked=True, children=tuple(children))
        return node.recomputed()

    def _build_child_folder(self, directory: str, patterns: List[IgnorePattern], force_exclude: bool) -> TreeNode:
        try:
            entries = self.file_system.list_entries(directory)
            own_patterns = self._load_patterns(directory)
        except DirectoryReadError as e:
            if self.permission_action == PermissionAction.RAISE:
                raise
            logger.warning("Skipping contents of unreadable directory %s: %s", directory, e)
            name = os.path.basename(directory)
            return TreeNode(directory, name, NodeKind.FOLDER, checked=not force_exclude)
        return self._build_folder(directory, entries, own_patterns + patterns, force_exclude)


def build_tree(
    directory: PathType,
    inherited_patterns: Sequence[IgnorePattern] = (),
    force_exclude: bool = False,
    *,
    file_system: Optional[FileSystem] = None,
    rules_file_name: str = DEFAULT_RULES_FILE_NAME,
    permission_action: PermissionAction = PermissionAction.RAISE,
) -> TreeNode:
    """Build the selection tree for a directory with a one-off ``TreeBuilder``.

    See ``TreeBuilder.build`` for the arguments and errors.
    """
    builder = TreeBuilder(file_system, rules_file_name=rules_file_name, permission_action=permission_action)
    return builder.build(directory, inherited_patterns, force_exclude)
