"""Command builders for the ``mysql`` client (query and export)."""

from __future__ import annotations

from pathlib import Path

from ..configset import ConfigSet
from ..errors import ValidationError
from .base import MYSQL_REQUIRED, CommandBuilder, CommandSpec, connection_flags, flatten_sql


class MysqlQueryCommand(CommandBuilder):
    """Build ``mysql … --execute=<sql> <database>``."""

    tool = "mysql"
    required = MYSQL_REQUIRED

    def _argv(self, settings: ConfigSet, sql: str, extra: list[str]) -> tuple[str, ...]:
        self.check(settings)
        if not sql or not sql.strip():
            raise ValidationError("Null or empty SQL statement.")
        argv = [self.program, *extra, f"--execute={flatten_sql(sql)}"]
        argv += connection_flags(settings)
        argv.append(settings["mysql.database"])
        return tuple(argv)

    def build(self, settings: ConfigSet, sql: str) -> CommandSpec:  # type: ignore[override]
        """Return the spec for a query whose output is captured in memory."""
        return CommandSpec(
            tool=self.tool,
            argv=self._argv(settings, sql, []),
            secrets=(settings["mysql.pass"],),
        )


class MysqlExportCommand(MysqlQueryCommand):
    """Build the export variant whose stdout is redirected into *staged*.

    Optional flags:
        ``table`` – ``--table`` (ASCII-table output); off when absent.
    """

    def build(self, settings: ConfigSet, sql: str, staged: Path) -> CommandSpec:  # type: ignore[override]
        """Return the spec writing the result set to the staged file."""
        extra = ["--table"] if settings.flag("table") else []
        return CommandSpec(
            tool=self.tool,
            argv=self._argv(settings, sql, extra),
            stdout_path=staged,
            secrets=(settings["mysql.pass"],),
        )
