"""Command-line handling: split a raw command line and map options to environment variables."""

from __future__ import annotations

import os
import re
from collections.abc import MutableMapping

__all__ = [
    "TFTP_DIR",
    "TFTP_LOG",
    "TFTP_INI",
    "split_command_line",
    "parse_command_line",
    "apply_command_line",
]

TFTP_DIR = "TFTP_DIR"
TFTP_LOG = "TFTP_LOG"
TFTP_INI = "TFTP_INI"

_OPTIONS = {"s": TFTP_DIR, "l": TFTP_LOG, "i": TFTP_INI}
_LINE_MAX = 511
_WORD = re.compile(r'"([^"]*)"?|([^ ]+)')


def split_command_line(line: str) -> list[str]:
    """Split ``line`` into words separated by spaces.

    A word starting with a double quote runs to the next double quote (or
    the end of the line) and may hold spaces.  Only the first 511
    characters of the line are considered.
    """
    return [
        match.group(1) if match.group(1) is not None else match.group(2)
        for match in _WORD.finditer(line[:_LINE_MAX])
    ]


def parse_command_line(line: str) -> dict[str, str]:
    """Return the environment settings given by the options of ``line``.

    ``-s`` sets the base directory, ``-l`` the log file and ``-i`` the
    settings file; each takes the following word as its value.  Only the
    second character of an option is looked at; unknown options and an
    option with no following word are ignored.
    """
    words = split_command_line(line)
    settings: dict[str, str] = {}
    position = 0
    while position < len(words):
        word = words[position]
        if word.startswith("-") and position + 1 < len(words):
            name = _OPTIONS.get(word[1:2])
            if name is not None:
                position += 1
                settings[name] = words[position]
        position += 1
    return settings


def apply_command_line(
    line: str,
    environ: MutableMapping[str, str] | None = None,
) -> dict[str, str]:
    """Store the settings of ``line`` into ``environ`` (the process environment by default)."""
    target = os.environ if environ is None else environ
    settings = parse_command_line(line)
    target.update(settings)
    return settings