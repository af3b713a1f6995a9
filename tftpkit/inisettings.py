"""Settings stored as keys of an INI file, one section per settings path."""

from __future__ import annotations

import os
import re
from pathlib import Path

__all__ = ["section_name", "read_key", "save_key"]

_ENTRY_MAX = 63
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def section_name(reg_path: str) -> str:
    """Return the INI section for a settings path: its last backslash-separated part."""
    return reg_path.rpartition("\\")[2][:_ENTRY_MAX]


def _read_lines(ini_file: str | os.PathLike) -> list[str] | None:
    try:
        return Path(ini_file).read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return None


def _header(line: str) -> str | None:
    stripped = line.strip()
    if stripped.startswith("[") and "]" in stripped:
        return stripped[1:stripped.index("]")].strip().lower()
    return None


def _entry(line: str) -> tuple[str, str] | None:
    stripped = line.strip()
    if not stripped or stripped.startswith(";") or "=" not in stripped:
        return None
    name, _, value = stripped.partition("=")
    return name.strip().lower(), value.strip()


def _section_span(lines: list[str], section: str) -> tuple[int, int] | None:
    wanted = section.strip().lower()
    start = None
    for index, line in enumerate(lines):
        name = _header(line)
        if name is None:
            continue
        if start is not None:
            return start, index
        if name == wanted:
            start = index + 1
    return (start, len(lines)) if start is not None else None


def _lookup(lines: list[str], section: str, key: str) -> str | None:
    span = _section_span(lines, section)
    if span is None:
        return None
    wanted = key.strip().lower()
    for line in lines[span[0]:span[1]]:
        entry = _entry(line)
        if entry is not None and entry[0] == wanted:
            return entry[1]
    return None


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def read_key(
    reg_path: str,
    key: str,
    kind: type = str,
    ini_file: str | os.PathLike = "",
) -> int | str | None:
    """Read ``key`` from the section of ``reg_path`` in ``ini_file``.

    ``kind`` is ``int`` or ``str``.  Integers are read like ``atoi``: the
    leading digits, or 0.  Returns ``None`` when the file, the key or a
    value for it is missing.
    """
    if kind not in (int, str):
        raise ValueError("kind must be int or str")
    lines = _read_lines(ini_file)
    if lines is None:
        return None
    value = _lookup(lines, section_name(reg_path), key)
    if value is None:
        return None
    value = _unquote(value)
    if not value:
        return None
    return _atoi(value) if kind is int else value


def save_key(
    reg_path: str,
    key: str,
    value: int | str,
    ini_file: str | os.PathLike,
) -> None:
    """Write ``key`` into the section of ``reg_path`` in an existing ``ini_file``.

    An existing entry is replaced; otherwise the entry is added at the end
    of its section, which is created at the end of the file if needed.
    """
    path = Path(ini_file)
    if not path.is_file():
        raise FileNotFoundError(f"settings file {path} does not exist")
    if isinstance(value, int):
        text = str(int(value))
    elif isinstance(value, str):
        text = value
    else:
        raise TypeError("value must be an int or a str")

    lines = _read_lines(path) or []
    section = section_name(reg_path)
    entry_line = f"{key}={text}"
    span = _section_span(lines, section)
    if span is None:
        lines += [f"[{section}]", entry_line]
    else:
        start, end = span
        wanted = key.strip().lower()
        for index, line in enumerate(lines[start:end], start):
            entry = _entry(line)
            if entry is not None and entry[0] == wanted:
                lines[index] = entry_line
                break
        else:
            insert_at = end
            while insert_at > start and not lines[insert_at - 1].strip():
                insert_at -= 1
            lines.insert(insert_at, entry_line)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")