"""
Cheap checks performed before any child process is spawned.

:class:`PreflightValidator` rejects incomplete settings and disallowed
parameters with an exception, and turns the "nothing to do" import cases
(empty source file, no matching table) into an ignored
:class:`~execomatic.types.StatusReport` instead of an error.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Collection, Mapping, Optional, Sequence
from urllib.parse import urlsplit

import structlog

from .commands.base import MYSQL_REQUIRED
from .configset import ConfigSet
from .errors import DestinationExistsError, ValidationError
from .operations import (
    ArchiveCreate,
    ArchiveExtract,
    Convert,
    Export,
    Fetch,
    Import,
    Operation,
    Query,
)
from .types import StatusReport
from .utils.archive import DBASE_SUFFIXES, has_suffix, looks_like_archive, table_name

log = structlog.get_logger()

#: ConfigSet keys each operation kind cannot run without.
REQUIRED_KEYS: Mapping[str, Sequence[str]] = {
    "query": MYSQL_REQUIRED,
    "export": MYSQL_REQUIRED,
    "import": MYSQL_REQUIRED,
    "archive_extract": (),
    "archive_create": (),
    "fetch": (),
    "convert": (),
}

#: Keyword a read-only export statement must start with.
QUERY_KEYWORD = "SELECT"

FETCH_SCHEMES = frozenset({"http", "https", "ftp"})


def fetch_file_name(url: str) -> str:
    """Return the last path segment of *url*.

    Raises:
        ValidationError: When the scheme is unsupported or the URL path does
            not end with a file name.
    """
    parts = urlsplit(url)
    if parts.scheme.lower() not in FETCH_SCHEMES or not parts.netloc:
        raise ValidationError(f"Unsupported or malformed URL: {url}")
    name = parts.path.rsplit("/", 1)[-1]
    if not name or name in {".", ".."}:
        raise ValidationError(f"URL does not name a file: {url}")
    return name


def effective_overwrite(op: Fetch, settings: ConfigSet) -> bool:
    """Overwrite when either the operation or the ``overwrite`` key asks for it."""
    return op.overwrite or settings.flag("overwrite")


def blocking_ancestor(path: Path) -> Optional[Path]:
    """Return the nearest existing ancestor of *path* if it is not a directory."""
    for parent in path.parents:
        if parent.exists():
            return None if parent.is_dir() else parent
    return None


def _skipped(start: float) -> StatusReport:
    report = StatusReport()
    report["Duration"] = int((time.monotonic() - start) * 1000)
    return report.mark_ignored()


class PreflightValidator:
    """Gate an operation before the command builder and runner see it.

    Args:
        known_tables: Zero-argument callable returning the destination table
            names.  It is invoked only when an import actually needs it, so
            callers can back it with a lazily cached ``show tables`` query.
    """

    def __init__(self, known_tables: Optional[Callable[[], Collection[str]]] = None) -> None:
        self._known_tables = known_tables

    def validate(self, op: Operation, settings: ConfigSet) -> Optional[StatusReport]:
        """Check *op* against *settings*.

        Returns:
            ``None`` when the operation should run, or an ignored
            :class:`StatusReport` when it is a deliberate no-op.

        Raises:
            ConfigurationError: Missing/empty required setting.
            ValidationError: Disallowed or malformed parameters.
            DestinationExistsError: Output already present, overwrite disabled.
        """
        settings.require(*REQUIRED_KEYS[op.kind])
        handler = getattr(self, f"_check_{op.kind}")
        return handler(op, settings)

    # ------------------------------------------------------------------ #
    # per-kind checks                                                    #
    # ------------------------------------------------------------------ #
    def _check_query(self, op: Query, settings: ConfigSet) -> None:
        if not op.sql or not op.sql.strip():
            raise ValidationError("Null or empty SQL statement.")

    def _check_export(self, op: Export, settings: ConfigSet) -> None:
        if not op.sql or not op.sql.strip():
            raise ValidationError("Null or empty SQL statement.")
        if not op.sql.strip().upper().startswith(QUERY_KEYWORD):
            raise ValidationError(f'SQL statement must begin with "{QUERY_KEYWORD}": {op.sql}')
        dest = op.destination
        if dest.is_dir():
            raise ValidationError(f"Export destination {dest} is a directory.")
        blocker = blocking_ancestor(dest)
        if blocker is not None:
            raise ValidationError(f"Export destination {dest}: {blocker} is not a directory.")
        if dest.exists() and not settings.flag("replace", default=True):
            raise DestinationExistsError(f"{dest} already exists and replace is disabled.")

    def _check_import(self, op: Import, settings: ConfigSet) -> Optional[StatusReport]:
        start = time.monotonic()
        src = op.source
        if not src.is_file():
            raise ValidationError(f"Invalid, empty or null source data file: {src}")
        if looks_like_archive(src):
            raise ValidationError(f"Unreadable source data file: {src} is a ZIP file.")
        if src.stat().st_size == 0:
            log.warning("import.ignored", file=src.name, reason="zero length")
            return _skipped(start)

        table = table_name(src)
        tables = self._known_tables() if self._known_tables is not None else ()
        if table not in tables:
            log.warning(
                "import.ignored",
                file=src.name,
                reason=f"table {settings.get('mysql.database')}.{table} does not exist",
            )
            return _skipped(start)
        return None

    def _check_archive_extract(self, op: ArchiveExtract, settings: ConfigSet) -> None:
        if not looks_like_archive(op.archive):
            raise ValidationError(f"{op.archive} does not appear to be a zip file.")
        if not op.archive.is_file():
            raise ValidationError(f"Archive {op.archive} does not exist.")
        if op.destination is not None and op.destination.exists() and not op.destination.is_dir():
            raise ValidationError(f"Extraction target {op.destination} is not a directory.")

    def _check_archive_create(self, op: ArchiveCreate, settings: ConfigSet) -> None:
        if not op.source_dir.is_dir():
            raise ValidationError(f"{op.source_dir} is not a directory.")
        if op.destination is not None:
            if not looks_like_archive(op.destination):
                raise ValidationError(f"Archive name {op.destination} must end with .zip")
            if op.destination.exists() and not settings.flag("overwrite"):
                raise DestinationExistsError(f"{op.destination} already exists and overwrite is disabled.")

    def _check_fetch(self, op: Fetch, settings: ConfigSet) -> None:
        name = fetch_file_name(op.url)
        if op.destination is None:
            return
        if op.destination.exists() and not op.destination.is_dir():
            raise ValidationError(f"Download directory {op.destination} is not a directory.")
        blocker = blocking_ancestor(op.destination)
        if blocker is not None:
            raise ValidationError(f"Download directory {op.destination}: {blocker} is not a directory.")
        target = op.destination / name
        if target.exists() and not effective_overwrite(op, settings):
            raise DestinationExistsError(
                f"{target} exists and fetch is configured NOT to overwrite existing files."
            )

    def _check_convert(self, op: Convert, settings: ConfigSet) -> None:
        if not has_suffix(op.source, DBASE_SUFFIXES):
            raise ValidationError(f"{op.source.name} is not a dBase III file.")
        if not op.source.is_file():
            raise ValidationError(f"{op.source} does not exist.")


__all__ = [
    "PreflightValidator",
    "REQUIRED_KEYS",
    "QUERY_KEYWORD",
    "fetch_file_name",
    "effective_overwrite",
    "blocking_ancestor",
]
