"""
Helpers for recognising input files by extension.

The checks are *pure* suffix comparisons: no file is opened, so a mismatch
is rejected before any process starts or any archive is read.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

#: Extensions accepted by the archive-extract operation.
ARCHIVE_SUFFIXES: tuple[str, ...] = (".zip",)

#: Extensions accepted by the dBase conversion operation.
DBASE_SUFFIXES: tuple[str, ...] = (".dbf",)


def has_suffix(path: Path, suffixes: Iterable[str]) -> bool:
    """Return *True* when the basename of *path* ends with one of *suffixes*.

    The comparison is case-insensitive::

        >>> has_suffix(Path("l_amat.ZIP"), (".zip",))
        True
        >>> has_suffix(Path("notes.txt"), (".zip",))
        False
    """
    lower_name = path.name.lower()
    return any(lower_name.endswith(suf) for suf in suffixes)


def looks_like_archive(path: Path) -> bool:
    """Return *True* when *path* carries a supported archive extension."""
    return has_suffix(path, ARCHIVE_SUFFIXES)


def table_name(path: Path) -> str:
    """Return the file name with its last extension stripped.

    ``fcc_uls.lo.dat`` → ``fcc_uls.lo``; a name without a dot is returned
    unchanged.
    """
    name = path.name
    return name.rsplit(".", 1)[0] if "." in name else name


__all__ = [
    "ARCHIVE_SUFFIXES",
    "DBASE_SUFFIXES",
    "has_suffix",
    "looks_like_archive",
    "table_name",
]
