"""Tri-state selection operations over tree snapshots."""

from .selection_engine import (
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

__all__ = [
    "BulkOperation",
    "apply_to_level",
    "apply_to_node",
    "check_all_children",
    "check_all_children_at_level",
    "check_all_folders",
    "check_only_files_at_level",
    "check_only_folders_at_level",
    "check_without_children",
    "find_node",
    "iter_invariant_violations",
    "normalize_tree",
    "set_checked",
    "uncheck_all_children",
]
