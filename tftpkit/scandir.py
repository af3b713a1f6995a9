"""Listing of the plain files of a directory, one tab-separated line per file."""

from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import datetime
from pathlib import Path

__all__ = ["is_valid_directory", "format_line", "scan_dir"]

_NAME_MAX = 62
_DATE_FORMAT = "%d/%m/%Y"
_DATE_MAX = len("jj/mm/aaaa")


def is_valid_directory(path: str | os.PathLike) -> bool:
    """Return True if ``path`` names an existing directory."""
    return Path(path).is_dir()


def format_line(name: str, created: datetime | float, size: int) -> str:
    """Build the ``name<TAB>date<TAB>size`` line describing one file.

    The name is cut to 62 characters, the date is the short day/month/year
    form and the size keeps only its low 32 bits.
    """
    if not isinstance(created, datetime):
        created = datetime.fromtimestamp(created)
    date = created.strftime(_DATE_FORMAT)[:_DATE_MAX]
    return f"{name[:_NAME_MAX]}\t{date}\t{size & 0xFFFFFFFF}"


def _creation_time(stat: os.stat_result) -> float:
    return getattr(stat, "st_birthtime", stat.st_ctime)


def scan_dir(directory: str | os.PathLike) -> Iterator[str]:
    """Yield one line per plain file of ``directory``, sorted by name.

    Sub-directories are skipped; a directory that cannot be read yields nothing.
    """
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError:
        return
    for entry in entries:
        try:
            if entry.is_dir():
                continue
            stat = entry.stat()
        except OSError:
            continue
        yield format_line(entry.name, _creation_time(stat), stat.st_size)