"""Command builder for ``mysqlimport``.

Optional flags and their defaults when the key is absent:

=====================================  ===========================  ==========
ConfigSet key                          Flag                         Absent
=====================================  ===========================  ==========
``mysql.force``                        ``--force``                  off
``mysql.delete``                       ``--delete``                 off
``mysql.replace``                      ``--replace``                ``--ignore``
``mysql.ignore-lines``                 ``--ignore-lines=N``         off
``mysql.fields-terminated-by``         ``--fields-terminated-by``   tab
``mysql.lines-terminated-by``          ``--lines-terminated-by``    newline
``mysql.fields-optionally-enclosed-by``  ``--fields-optionally-…``  off
``mysql.fields-enclosed-by``           ``--fields-enclosed-by``     off
=====================================  ===========================  ==========

``--fields-enclosed-by`` is only used when the "optionally" variant is not
set.  ``--lock-tables --low-priority`` are always present.
"""

from __future__ import annotations

from pathlib import Path

from ..configset import ConfigSet
from .base import MYSQL_REQUIRED, CommandBuilder, CommandSpec, connection_flags

_VALUE_FLAGS: tuple[tuple[str, str], ...] = (
    ("mysql.ignore-lines", "--ignore-lines"),
    ("mysql.fields-terminated-by", "--fields-terminated-by"),
    ("mysql.lines-terminated-by", "--lines-terminated-by"),
)


class MysqlImportCommand(CommandBuilder):
    """Build ``mysqlimport --local … <database> <file>``."""

    tool = "mysqlimport"
    required = MYSQL_REQUIRED

    def build(self, settings: ConfigSet, source: Path) -> CommandSpec:  # type: ignore[override]
        """Return the spec that loads *source* into its namesake table."""
        self.check(settings)
        argv: list[str] = [self.program, "--local"]

        if settings.flag("mysql.force"):
            argv.append("--force")
        if settings.flag("mysql.delete"):
            argv.append("--delete")
        # Duplicate keys: skip existing rows unless replace is requested.
        argv.append("--replace" if settings.flag("mysql.replace") else "--ignore")

        for key, flag in _VALUE_FLAGS:
            if settings.has(key):
                argv.append(f"{flag}={settings[key]}")

        if settings.has("mysql.fields-optionally-enclosed-by"):
            argv.append(
                f"--fields-optionally-enclosed-by={settings['mysql.fields-optionally-enclosed-by']}"
            )
        elif settings.has("mysql.fields-enclosed-by"):
            argv.append(f"--fields-enclosed-by={settings['mysql.fields-enclosed-by']}")

        argv += ["--lock-tables", "--low-priority"]
        argv += connection_flags(settings)
        argv += [settings["mysql.database"], str(source)]

        return CommandSpec(
            tool=self.tool,
            argv=tuple(argv),
            cwd=source.parent,
            secrets=(settings["mysql.pass"],),
        )
