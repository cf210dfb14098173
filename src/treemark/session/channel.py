"""Outbound message channel with a pending-message mailbox."""

import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, Optional

logger = logging.getLogger(__name__)

Receiver = Callable[[Dict[str, Any]], None]


class MessageChannel:
    """Delivers messages to a receiver, queueing them while none is attached.

    Messages posted before a receiver exists are kept in arrival order and flushed
    exactly once when one attaches. Nothing is dropped and nothing is delivered
    twice.

    Example:
        >>> channel = MessageChannel()
        >>> channel.post({"command": "copyTree", "treeText": "└── a\\n"})
        >>> channel.pending_count
        1
        >>> received = []
        >>> channel.attach(received.append)
        >>> received[0]["command"], channel.pending_count
        ('copyTree', 0)
    """

    def __init__(self) -> None:
        self._receiver: Optional[Receiver] = None
        self._pending: Deque[Dict[str, Any]] = deque()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def attached(self) -> bool:
        return self._receiver is not None

    def post(self, message: Dict[str, Any]) -> None:
        if self._receiver is None:
            logger.debug("No receiver attached, queueing %r message", message.get("command"))
            self._pending.append(message)
            return
        self._receiver(message)

    def attach(self, receiver: Receiver) -> None:
        """Attach a receiver and flush the pending messages to it in order.

        A message leaves the queue only once the receiver has accepted it. A receiver
        that raises is detached again and the failed message stays first in line.
        """
        self._receiver = receiver
        if self._pending:
            logger.debug("Flushing %d pending message(s)", len(self._pending))
        while self._pending and self._receiver is receiver:
            try:
                receiver(self._pending[0])
            except Exception:
                self._receiver = None
                raise
            self._pending.popleft()

    def detach(self) -> None:
        self._receiver = None
