"""Tab session orchestration and the host message channel."""

from .channel import MessageChannel
from .messages import ADD_FOLDER, COPY_TREE, add_folder_message, copy_tree_message, parse_add_folder
from .tabs import Tab, TabSession

__all__ = [
    "ADD_FOLDER",
    "COPY_TREE",
    "MessageChannel",
    "Tab",
    "TabSession",
    "add_folder_message",
    "copy_tree_message",
    "parse_add_folder",
]
