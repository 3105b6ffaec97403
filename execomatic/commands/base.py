"""Base classes for command builders."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from ..configset import ConfigSet
from ..utils.redact import redact

#: Settings every database-backed operation needs.
MYSQL_REQUIRED: tuple[str, ...] = ("mysql.database", "mysql.host", "mysql.user", "mysql.pass")


@dataclass(frozen=True)
class CommandSpec:
    """Immutable description of one child-process invocation.

    Attributes:
        tool: Key into the exit-code tables (``mysql``, ``wget`` …).
        argv: Complete argument vector; ``argv[0]`` is the program path.
        stdout_path: When set, the child's stdout is written to this file
            (the staged file of a file-producing operation).
        cwd: Working directory for the child.
        secrets: Values masked whenever the command is logged or surfaced.
    """

    tool: str
    argv: tuple[str, ...]
    stdout_path: Optional[Path] = None
    cwd: Optional[Path] = None
    secrets: tuple[str, ...] = field(default=(), repr=False)

    def render(self) -> str:
        """Return a shell-safe command line; every token is quoted."""
        line = shlex.join(self.argv)
        if self.stdout_path is not None:
            line += " > " + shlex.quote(str(self.stdout_path))
        return line

    def redacted(self) -> str:
        """Return :meth:`render` with credentials masked."""
        return redact(self.render(), self.secrets)


class CommandBuilder:
    """Base class for wrappers that turn an operation into a :class:`CommandSpec`."""

    #: Exit-code table key; also the program key in :class:`ExecConfig`.
    tool: str = ""
    #: ConfigSet keys that must be set and non-empty.
    required: Sequence[str] = ()

    def __init__(self, program: str) -> None:
        """Store the absolute path (or bare name) of the wrapped program."""
        self.program = program

    def check(self, settings: ConfigSet) -> None:
        """Raise :class:`ConfigurationError` when a required key is missing."""
        settings.require(*self.required)

    def build(self, settings: ConfigSet, *args, **kwargs) -> CommandSpec:
        """Return a :class:`CommandSpec` describing how to run this tool."""
        raise NotImplementedError


def flatten_sql(sql: str) -> str:
    """Collapse *sql* onto one line and make sure it ends with ``;``."""
    flat = " ".join(sql.replace("\r\n", "\n").split("\n")).strip()
    return flat if flat.endswith(";") else flat + ";"


def connection_flags(settings: ConfigSet) -> list[str]:
    """Return the ``--host/--user/--password`` flags, always emitted last."""
    return [
        f"--host={settings['mysql.host']}",
        f"--user={settings['mysql.user']}",
        f"--password={settings['mysql.pass']}",
    ]
