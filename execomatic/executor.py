"""
Orchestration of one wrapped-program invocation.

:class:`Executor` ties the pieces together for every operation variant::

    ConfigSet + Operation
        → PreflightValidator   (fail fast, or skip)
        → CommandBuilder       (argument vector / quoted command line)
        → ProcessRunner        (stream stdout into StatusParser, wait)
        → ExitStatusTranslator (per-tool success codes)
        → AtomicTransfer       (commit the staged output)
        → StatusReport

Each call is synchronous and self-contained: it owns its child process, its
staged files and its report.  The only state kept between calls is the
cached table list of each :class:`ImportSession` (one per database) and
the worker pool used by
:meth:`Executor.fetch_async` / :meth:`Executor.fetch_all`.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import structlog

from .archive import create_zip, extract_zip
from .commands import (
    DbviewCommand,
    MysqlExportCommand,
    MysqlImportCommand,
    MysqlQueryCommand,
    WgetCommand,
)
from .commands.dbview import converted_name
from .config import ExecConfig, load_config
from .configset import ConfigSet
from .errors import ExecomaticError, ProcessExitError, TransferError
from .exit_codes import ExitStatusTranslator
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
from .preflight import PreflightValidator, effective_overwrite, fetch_file_name
from .runner import ProcessRunner
from .status import StatusParser
from .transfer import AtomicTransfer
from .types import Failure, Outcome, ProcessResult, Skipped, StatusReport, Success

log = structlog.get_logger()

SettingsLike = Union[ConfigSet, Mapping[str, Any], None]

#: Settings that identify the database whose table list a session caches.
SESSION_KEYS = ("mysql.database", "mysql.host", "mysql.user")


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _count_lines(path: Path) -> int:
    """Count newline-terminated records without loading the file."""
    count = 0
    with open(path, "rb") as fh:
        for _ in fh:
            count += 1
    return count


class ImportSession:
    """Import context that fetches the destination table list once.

    The list is read lazily with ``show tables`` on the first import that
    reaches the table-match check and reused for the lifetime of the session.
    """

    def __init__(self, executor: "Executor", settings: ConfigSet) -> None:
        self._executor = executor
        self._settings = settings
        self._tables: Optional[frozenset[str]] = None
        self._lock = threading.Lock()

    @property
    def tables(self) -> frozenset[str]:
        """Table names of ``mysql.database`` (cached)."""
        with self._lock:
            if self._tables is None:
                log.debug("import.read_tables", database=self._settings.get("mysql.database"))
                lines = self._executor.select("show tables", settings=self._settings)
                self._tables = frozenset(line.strip() for line in lines if line.strip())
            return self._tables

    def load(self, source: Path) -> StatusReport:
        """Import *source* (see :meth:`Executor.load`)."""
        return self._executor._run_import(Import(source=source), self._settings, self)


class Executor:
    """Run operations against the configured wrapped programs.

    Args:
        settings: Credentials and per-tool options (a :class:`ConfigSet` or
            any string mapping).
        config: Framework configuration; the packaged default is loaded when
            omitted.
    """

    def __init__(self, settings: SettingsLike = None, config: Optional[ExecConfig] = None) -> None:
        self.settings = settings if isinstance(settings, ConfigSet) else ConfigSet(settings or {})
        self.config = config or load_config()
        self.translator = ExitStatusTranslator.from_config(self.config)
        self.runner = ProcessRunner(self.config.runner, self.translator)
        self.transfer = AtomicTransfer(self.config.scratch_root)
        self.session = ImportSession(self, self.settings)
        self._sessions: Dict[tuple, ImportSession] = {}
        self._sessions_lock = threading.Lock()
        self._pool: Optional[ThreadPoolExecutor] = None
        self._pool_lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # lifecycle                                                          #
    # ------------------------------------------------------------------ #
    def __enter__(self) -> "Executor":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Wait for pending asynchronous fetches and release the worker pool."""
        with self._pool_lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=True)

    # ------------------------------------------------------------------ #
    # helpers                                                            #
    # ------------------------------------------------------------------ #
    def _program(self, tool: str) -> str:
        return self.config.program(tool).path

    def _settings(self, settings: SettingsLike, overrides: Optional[Mapping[str, Any]] = None) -> ConfigSet:
        base = self.settings if settings is None else (
            settings if isinstance(settings, ConfigSet) else ConfigSet(settings)
        )
        return base.merged(overrides) if overrides else base

    def _session_for(self, cfg: ConfigSet) -> ImportSession:
        """Return the import session for the database *cfg* points at."""
        if cfg is self.settings:
            return self.session
        key = tuple(cfg.get(k) for k in SESSION_KEYS)
        with self._sessions_lock:
            session = self._sessions.get(key)
            if session is None:
                session = self._sessions[key] = ImportSession(self, cfg)
            return session

    @property
    def _tail(self) -> int:
        return self.config.runner.tail_lines

    # ------------------------------------------------------------------ #
    # generic entry points                                               #
    # ------------------------------------------------------------------ #
    def run(
        self,
        op: Operation,
        *,
        settings: SettingsLike = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> StatusReport:
        """Execute *op* and return its :class:`StatusReport`.

        Raises:
            ExecomaticError: Any subclass, see :mod:`execomatic.errors`.
        """
        cfg = self._settings(settings, overrides)
        if isinstance(op, Query):
            return self._run_query(op, cfg)[1]
        if isinstance(op, Export):
            return self._run_export(op, cfg)
        if isinstance(op, Import):
            return self._run_import(op, cfg, self._session_for(cfg))
        if isinstance(op, ArchiveExtract):
            PreflightValidator().validate(op, cfg)
            return extract_zip(op.archive, op.destination, self.transfer)
        if isinstance(op, ArchiveCreate):
            PreflightValidator().validate(op, cfg)
            return create_zip(
                op.source_dir, op.destination, self.transfer, overwrite=cfg.flag("overwrite")
            )
        if isinstance(op, Fetch):
            return self._run_fetch(op, cfg)
        if isinstance(op, Convert):
            return self._run_convert(op, cfg)
        raise TypeError(f"Unsupported operation: {op!r}")

    def attempt(
        self,
        op: Operation,
        *,
        settings: SettingsLike = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> Outcome:
        """Like :meth:`run` but return a tagged outcome instead of raising."""
        try:
            report = self.run(op, settings=settings, overrides=overrides)
        except ExecomaticError as exc:
            return Failure(kind=exc.kind, detail=str(exc), exit_code=getattr(exc, "exit_code", None))
        return Skipped(report=report) if report.ignored else Success(report=report)

    # ------------------------------------------------------------------ #
    # query                                                              #
    # ------------------------------------------------------------------ #
    def _run_query(self, op: Query, cfg: ConfigSet) -> tuple[ProcessResult, StatusReport]:
        start = time.monotonic()
        PreflightValidator().validate(op, cfg)
        report = StatusReport()
        for key in ("mysql.database", "mysql.host"):
            report[key] = cfg[key]

        spec = MysqlQueryCommand(self._program("mysql")).build(cfg, op.sql)
        result = self.runner.run(spec)

        report["SQL"] = op.sql
        report["Duration"] = _elapsed_ms(start)
        log.debug("query.done", database=cfg["mysql.database"], duration=report["Duration"])
        return result, report

    def select(self, sql: str, *, settings: SettingsLike = None) -> List[str]:
        """Run *sql* and return the client's stdout lines."""
        return list(self._run_query(Query(sql=sql), self._settings(settings))[0].stdout)

    def execute(self, sql: str, *, settings: SettingsLike = None) -> StatusReport:
        """Run *sql* for its side effect and return the status report."""
        return self.run(Query(sql=sql), settings=settings)

    # ------------------------------------------------------------------ #
    # export                                                             #
    # ------------------------------------------------------------------ #
    def _run_export(self, op: Export, cfg: ConfigSet) -> StatusReport:
        PreflightValidator().validate(op, cfg)
        report = StatusReport()
        report["startTime"] = int(time.time() * 1000)
        start = time.monotonic()

        staged = self.transfer.staging_file("export-", ".part")
        try:
            spec = MysqlExportCommand(self._program("mysql")).build(cfg, op.sql, staged)
            log.info("export.start", command=spec.redacted(), destination=str(op.destination))
            self.runner.run(spec, tail_lines=self._tail)
            report["fileSize"] = staged.stat().st_size
            report["records"] = _count_lines(staged)
            self.transfer.commit(
                staged, op.destination, overwrite=cfg.flag("replace", default=True)
            )
        except BaseException:
            self.transfer.discard(staged)
            raise

        report["duration"] = _elapsed_ms(start)
        log.info("export.done", destination=str(op.destination), **report)
        return report

    def export(self, sql: str, destination: Path, *, settings: SettingsLike = None) -> StatusReport:
        """Write the result of *sql* to *destination* atomically."""
        return self.run(Export(sql=sql, destination=destination), settings=settings)

    # ------------------------------------------------------------------ #
    # import                                                             #
    # ------------------------------------------------------------------ #
    def _run_import(self, op: Import, cfg: ConfigSet, session: ImportSession) -> StatusReport:
        start = time.monotonic()
        skipped = PreflightValidator(known_tables=lambda: session.tables).validate(op, cfg)
        if skipped is not None:
            return skipped

        report = StatusReport()
        parser = StatusParser(report, label_key="Table")
        spec = MysqlImportCommand(self._program("mysqlimport")).build(cfg, op.source)
        log.debug("import.start", file=op.source.name, command=spec.redacted())
        self.runner.run(spec, on_stdout=parser.feed, tail_lines=self._tail)

        report["Duration"] = _elapsed_ms(start)
        log.info("import.done", file=op.source.name, **report)
        return report

    def load(self, source: Path, *, settings: SettingsLike = None) -> StatusReport:
        """Bulk-load *source*; skipped files return ``Ignored=TRUE``."""
        return self.run(Import(source=source), settings=settings)

    # ------------------------------------------------------------------ #
    # fetch                                                              #
    # ------------------------------------------------------------------ #
    def _run_fetch(self, op: Fetch, cfg: ConfigSet) -> StatusReport:
        start = time.monotonic()
        PreflightValidator().validate(op, cfg)
        fetch = self.config.fetch
        name = fetch_file_name(op.url)
        overwrite = effective_overwrite(op, cfg)

        if op.destination is None:
            download_dir = self.transfer.staging_dir("wget-")
        else:
            download_dir = op.destination
            if not download_dir.exists():
                log.debug("fetch.mkdir", directory=str(download_dir))
                try:
                    download_dir.mkdir(parents=True, exist_ok=True)
                except OSError as exc:
                    raise TransferError(
                        f"Cannot create download directory {download_dir}: {exc.strerror or exc}"
                    ) from exc
        target = download_dir / name

        report = StatusReport()
        report["source"] = op.url
        builder = WgetCommand(self._program("wget"), fetch)

        for attempt in range(1, fetch.attempts + 1):
            staged = self.transfer.staging_file("wget-")
            try:
                spec = builder.build(cfg, op.url, staged)
                result = self.runner.run(spec, tail_lines=self._tail)
                size = staged.stat().st_size
                self.transfer.commit(staged, target, overwrite=overwrite)
            except ProcessExitError as exc:
                self.transfer.discard(staged)
                if exc.exit_code in fetch.retry_on and attempt < fetch.attempts:
                    log.warning("fetch.retry", url=op.url, attempt=attempt, exit_code=exc.exit_code)
                    continue
                raise
            except BaseException:
                self.transfer.discard(staged)
                raise
            break

        duration = max(_elapsed_ms(start), 1)
        report["status"] = self.translator.translate("wget", result.exit_code).description
        report["size"] = size
        report["duration"] = duration
        report["speed"] = round((size * 8) / (duration * 1000), 3)  # Mbps
        report["Destination"] = target
        log.info("fetch.done", **report)
        return report

    def fetch(
        self,
        url: str,
        destination: Optional[Path] = None,
        overwrite: bool = False,
        *,
        settings: SettingsLike = None,
    ) -> StatusReport:
        """Download *url* into the *destination* directory."""
        return self.run(Fetch(url=url, destination=destination, overwrite=overwrite), settings=settings)

    def _pool_executor(self) -> ThreadPoolExecutor:
        with self._pool_lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self.config.fetch.max_workers, thread_name_prefix="fetch"
                )
            return self._pool

    def fetch_async(
        self,
        url: str,
        destination: Optional[Path] = None,
        overwrite: bool = False,
        *,
        settings: SettingsLike = None,
    ) -> "Future[StatusReport]":
        """Submit one fetch to the worker pool and return its future.

        A failure is logged when the future completes and stays confined to
        that future; it never affects other submitted fetches.
        """
        future = self._pool_executor().submit(
            self.fetch, url, destination, overwrite, settings=settings
        )

        def _report(done: "Future[StatusReport]") -> None:
            exc = done.exception()
            if exc is not None:
                log.error("fetch.async_failed", url=url, error=str(exc))

        future.add_done_callback(_report)
        return future

    def fetch_all(
        self,
        urls: Iterable[str],
        destination: Optional[Path] = None,
        overwrite: bool = False,
        *,
        settings: SettingsLike = None,
    ) -> List["Future[StatusReport]"]:
        """Submit one independent fetch per URL and return the futures."""
        return [
            self.fetch_async(url, destination, overwrite, settings=settings) for url in urls
        ]

    # ------------------------------------------------------------------ #
    # archives                                                           #
    # ------------------------------------------------------------------ #
    def unzip(self, archive: Path, destination: Optional[Path] = None) -> StatusReport:
        """Extract *archive* (flattened) into *destination*."""
        return self.run(ArchiveExtract(archive=archive, destination=destination))

    def zip(self, source_dir: Path, destination: Optional[Path] = None) -> StatusReport:
        """Archive the files of *source_dir*."""
        return self.run(ArchiveCreate(source_dir=source_dir, destination=destination))

    # ------------------------------------------------------------------ #
    # dBase conversion                                                   #
    # ------------------------------------------------------------------ #
    def _run_convert(self, op: Convert, cfg: ConfigSet) -> StatusReport:
        start = time.monotonic()
        PreflightValidator().validate(op, cfg)
        source = op.source
        final = source.parent / converted_name(source)
        log.debug("convert.start", source=source.name, destination=final.name)

        staged = self.transfer.staging_file("dbview-", ".dat")
        try:
            spec = DbviewCommand(self._program("dbview")).build(cfg, source, staged)
            self.runner.run(spec, tail_lines=self._tail)
            self.transfer.commit(staged, final, overwrite=cfg.flag("overwrite", default=True))
        except BaseException:
            self.transfer.discard(staged)
            raise

        report = StatusReport()
        report["Source"] = source
        report["Destination"] = final
        report["Duration"] = _elapsed_ms(start)
        return report

    def convert(self, source: Path) -> Path:
        """Convert a ``.dbf`` file and return the path of the ``.dat`` file."""
        return Path(self.run(Convert(source=source))["Destination"])


__all__ = ["Executor", "ImportSession"]
