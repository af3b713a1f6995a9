"""Thread-safe bounded FIFO of typed messages with unique identifiers."""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass

__all__ = ["Message", "QueueFullError", "MessageQueue"]

_MAX_ATTEMPTS = 4
_RETRY_DELAY = 0.05


@dataclass(frozen=True)
class Message:
    """One queued item: its payload, its identifier and an extra integer tag."""

    data: bytes
    msg_id: int
    type: int = 0


class QueueFullError(Exception):
    """Raised when a message cannot be queued because the queue stays full."""


class MessageQueue:
    """A FIFO shared between threads.

    The queue holds at most ``max_items - 1`` messages.  Every accepted
    message receives an identifier, starting at 1 and growing by one.
    """

    def __init__(self, max_items: int) -> None:
        if max_items < 1:
            raise ValueError("max_items must be at least 1")
        self.max_items = max_items
        self._items: deque[Message] = deque()
        self._next_id = 1
        self._cond = threading.Condition()

    @property
    def capacity(self) -> int:
        """Number of messages the queue accepts before it is full."""
        return max(self.max_items - 1, 0)

    def push(self, data: bytes, type: int = 0) -> int:
        """Copy ``data`` into the queue and return the new message identifier.

        When the queue is full the call waits a little for a consumer and
        retries a few times before raising :class:`QueueFullError`.
        """
        payload = bytes(data)
        with self._cond:
            for attempt in range(_MAX_ATTEMPTS):
                if len(self._items) < self.capacity:
                    msg_id = self._next_id
                    self._next_id += 1
                    self._items.append(Message(payload, msg_id, type))
                    self._cond.notify_all()
                    return msg_id
                if attempt + 1 < _MAX_ATTEMPTS:
                    self._cond.wait(_RETRY_DELAY)
        raise QueueFullError(f"queue full ({self.capacity} messages)")

    def pop(self) -> Message | None:
        """Remove and return the oldest message, or ``None`` if the queue is empty."""
        with self._cond:
            if not self._items:
                return None
            message = self._items.popleft()
            self._cond.notify_all()
            return message

    def wait_until_empty(self) -> None:
        """Block until every queued message has been popped."""
        with self._cond:
            while self._items:
                self._cond.wait()

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)