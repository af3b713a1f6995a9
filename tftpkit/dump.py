"""Hexadecimal dump of binary frames, sixteen bytes per line."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator

__all__ = ["dump_lines", "bin_dump"]

_PREFIX_MAX = 19
_COLUMNS = 16


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte < 0x7F else "."


def _format_line(prefix: str, chunk: bytes) -> str:
    parts = [prefix, " "]
    for col, byte in enumerate(chunk):
        if col == 8:
            parts.append("- ")
        parts.append(f"{byte:02X} ")
    # Padding keeps every line the same width; its gap sits one column
    # earlier than the separator of a full line.
    for col in range(len(chunk), _COLUMNS):
        if col + 1 == 8:
            parts.append("  ")
        parts.append("   ")
    parts.append("  ")
    parts.append("".join(_printable(byte) for byte in chunk))
    return "".join(parts)


def _iter_lines(data: bytes, prefix: str | None) -> Iterator[str]:
    head = (prefix or "")[:_PREFIX_MAX]
    if not data:
        yield f"{head} Empty Message"
        return
    for start in range(0, len(data), _COLUMNS):
        yield _format_line(head, data[start:start + _COLUMNS])


def dump_lines(data: bytes, prefix: str | None = None) -> list[str]:
    """Return the dump of ``data`` as lines without their line ending.

    The prefix is cut to 19 characters; an empty frame gives a single
    ``Empty Message`` line.
    """
    return list(_iter_lines(bytes(data), prefix))


def bin_dump(
    data: bytes,
    prefix: str | None = None,
    write: Callable[[str], object] | None = None,
) -> None:
    """Write the dump of ``data`` line by line through ``write`` (stderr by default)."""
    sink = write if write is not None else sys.stderr.write
    for line in dump_lines(data, prefix):
        sink(line + "\n")