"""
Logging wiring for library callers and the ``execomatic-cli`` script.

structlog events and plain :mod:`logging` records share one pipeline:

* the console goes through :class:`rich.logging.RichHandler` (level chosen by
  ``--verbose`` / ``--debug``, WARNING otherwise);
* every record at INFO or above (DEBUG with ``--debug``) is appended as one
  JSON object per line to ``execomatic.log``, rotated at ~5 MB;
* ``--save-logfile`` adds a plain-text copy of what the console shows.

The JSON log lives in ``$EXECOMATIC_LOG_DIR`` when set, else in
``<project_root>/logs`` and finally in the package-local ``logs/`` folder.
"""

from __future__ import annotations

import atexit
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

import structlog
from rich.logging import RichHandler
from structlog.stdlib import LoggerFactory, ProcessorFormatter

__all__ = ["setup_logging", "log_dir"]

LOG_FILE = "execomatic.log"

# Applied to structlog events and to foreign stdlib records alike.
_SHARED = [
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


def _without(*keys: str):
    """Processor that drops *keys* (Rich already prints time and level)."""

    def _drop(_logger, _name, event_dict):
        for key in keys:
            event_dict.pop(key, None)
        return event_dict

    return _drop


def log_dir(project_root: Path | None = None) -> Path:
    """Return the directory receiving the rotating JSON log."""
    env_dir = os.environ.get("EXECOMATIC_LOG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    if project_root is not None:
        return project_root / "logs"
    return Path(__file__).resolve().parents[1] / "logs"


def _formatter(*renderers) -> ProcessorFormatter:
    return ProcessorFormatter(
        processors=[ProcessorFormatter.remove_processors_meta, *renderers],
        foreign_pre_chain=_SHARED,
    )


def setup_logging(
    *,
    project_root: Path | None = None,
    verbose: bool = False,
    debug: bool = False,
    extra_text_log: Optional[Path] = None,
) -> None:
    """Install console, JSON-file and optional plain-text handlers.

    Args:
        project_root: Directory whose ``logs/`` folder receives the JSON log
            when ``$EXECOMATIC_LOG_DIR`` is unset.
        verbose: Show INFO messages on the console.
        debug: Show DEBUG messages and record them in the JSON log.
        extra_text_log: Mirror console output into this file.
    """
    if debug:
        console_lvl = logging.DEBUG
    elif verbose:
        console_lvl = logging.INFO
    else:
        console_lvl = logging.WARNING

    console_fmt = _formatter(
        _without("timestamp", "level"),
        structlog.dev.ConsoleRenderer(colors=False),
    )

    console = RichHandler(level=console_lvl, rich_tracebacks=debug, markup=False)
    console.setFormatter(console_fmt)
    handlers: list[logging.Handler] = [console]

    directory = log_dir(project_root)
    directory.mkdir(parents=True, exist_ok=True)
    json_file = logging.handlers.RotatingFileHandler(
        directory / LOG_FILE, maxBytes=5_000_000, backupCount=3, encoding="utf-8"
    )
    json_file.setLevel(logging.DEBUG if debug else logging.INFO)
    json_file.setFormatter(_formatter(structlog.processors.JSONRenderer()))
    handlers.append(json_file)

    if extra_text_log is not None:
        path = extra_text_log.expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        mirror = logging.FileHandler(path, encoding="utf-8", mode="a")
        mirror.setLevel(console_lvl)
        mirror.setFormatter(console_fmt)
        atexit.register(mirror.close)
        handlers.append(mirror)

    # Root stays at DEBUG; each handler applies its own threshold.
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    structlog.configure(
        processors=[*_SHARED, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        cache_logger_on_first_use=False,
    )
