"""Clipboard receiver for ``copyTree`` messages."""

from typing import Any, Mapping

import pyperclip

from treemark.session.messages import COPY_TREE


class ClipboardReceiver:
    """Writes the text of ``copyTree`` messages to the system clipboard.

    Other messages are ignored.

    Attributes:
        copied (int): Number of messages written to the clipboard so far.
    """

    def __init__(self) -> None:
        self.copied = 0

    def __call__(self, message: Mapping[str, Any]) -> None:
        if message.get("command") != COPY_TREE:
            return
        pyperclip.copy(message["treeText"])
        self.copied += 1
