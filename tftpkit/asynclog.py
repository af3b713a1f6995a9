"""Log, error and warning reports sent to a console sink and optionally to a file."""

from __future__ import annotations

import enum
import logging
import os
import threading
import time
from collections.abc import Callable
from datetime import datetime

__all__ = [
    "LOGSIZE",
    "MAX_MSG_IN_QUEUE",
    "MessageKind",
    "AsyncLogger",
    "append_to_file",
    "log_to_monitor",
]

LOGSIZE = 512
MAX_MSG_IN_QUEUE = 300
_PER_SECOND_MAX = 100
_OPEN_ATTEMPTS = 3
_OPEN_RETRY_DELAY = 0.05

_monitor = logging.getLogger(__name__)


class MessageKind(enum.Enum):
    """The kind of report handed to the sink."""

    LOG = "log"
    ERROR = "error"
    WARNING = "warning"


Sink = Callable[[MessageKind, str, bool], object]


def _limit(text: str) -> str:
    return text[: LOGSIZE - 1]


def _format(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt


def append_to_file(filename: str | os.PathLike, text: str) -> int:
    """Append ``text`` and a CRLF to ``filename``; return the bytes written, 0 on failure.

    Opening is tried three times, 50 ms apart, since another writer may
    hold the file.
    """
    payload = text.encode("utf-8") + b"\r\n"
    for attempt in range(_OPEN_ATTEMPTS):
        try:
            with open(filename, "ab") as handle:
                handle.write(payload)
                handle.flush()
            return len(payload)
        except OSError:
            if attempt + 1 < _OPEN_ATTEMPTS:
                time.sleep(_OPEN_RETRY_DELAY)
    return 0


def log_to_monitor(fmt: str, *args) -> str:
    """Emit a debug trace prefixed with the current thread id and return it."""
    text = _limit(f"Th{threading.get_native_id():5d} :" + _format(fmt, args))
    _monitor.debug("%s", text)
    return text


class AsyncLogger:
    """Formats reports and pushes them to ``sink(kind, text, retain)``.

    Log entries above ``level`` are dropped; log entries get a timestamp and
    are also appended to ``log_file`` when one is set.  To avoid flooding
    the console, at most about 100 log entries per second go through.
    """

    clock: Callable[[], float] = staticmethod(time.time)
    now: Callable[[], datetime] = staticmethod(datetime.now)

    def __init__(
        self,
        sink: Sink | None,
        level: int = 0,
        log_file: str | os.PathLike | None = None,
    ) -> None:
        self.sink = sink
        self.level = level
        self.log_file = log_file
        self.event_log: Callable[[str], object] | None = None
        self._lock = threading.Lock()
        self._pacing_second: int | None = None
        self._pacing_count = 0

    def _pace(self) -> bool:
        """Return False when this second's quota of log entries is used up."""
        second = int(self.clock())
        with self._lock:
            if second != self._pacing_second:
                self._pacing_second = second
                self._pacing_count = 0
                return True
            self._pacing_count += 1
            count = self._pacing_count
        if count > _PER_SECOND_MAX // 2:
            time.sleep(0.001)  # let the console catch up
        return count <= _PER_SECOND_MAX

    def _stamp(self) -> str:
        moment = self.now()
        return (
            f" [{moment.day:02d}/{moment.month:02d} "
            f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}."
            f"{moment.microsecond // 1000:03d}]"
        )

    def log(self, level: int, fmt: str, *args) -> str | None:
        """Report a log entry; return its text, or None if it was dropped."""
        if level > self.level or self.sink is None:
            return None
        if not self._pace():
            return None
        stamp = self._stamp()
        text = _format(fmt, args)[: LOGSIZE - 1 - len(stamp)] + stamp
        self.sink(MessageKind.LOG, text, False)
        if self.log_file:
            append_to_file(self.log_file, text)
        return text

    def error(self, fmt: str, *args) -> str:
        """Report an error; it is kept for the console and sent to the event log if set."""
        text = _limit(_format(fmt, args))
        if self.sink is not None:
            self.sink(MessageKind.ERROR, text, True)
        if self.event_log is not None:
            self.event_log(text)
        return text

    def warning(self, fmt: str, *args) -> str:
        """Report a warning to the console."""
        text = _limit(_format(fmt, args))
        if self.sink is not None:
            self.sink(MessageKind.WARNING, text, False)
        return text