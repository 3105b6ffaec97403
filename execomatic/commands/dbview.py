"""Command builder for ``dbview`` (dBase III → delimited text)."""

from __future__ import annotations

from pathlib import Path

from ..configset import ConfigSet
from .base import CommandBuilder, CommandSpec


def converted_name(source: Path) -> str:
    """Return the ``.dat`` file name produced for *source* (lower-cased)."""
    return source.name.lower().replace(".dbf", ".dat")


class DbviewCommand(CommandBuilder):
    """Build ``dbview -b -t <file>`` with stdout redirected to *staged*.

    The child runs inside the source directory and receives the bare file
    name, matching how dbview resolves memo files next to the table.
    """

    tool = "dbview"

    def build(self, settings: ConfigSet, source: Path, staged: Path) -> CommandSpec:  # type: ignore[override]
        """Return the spec converting *source* into *staged*."""
        return CommandSpec(
            tool=self.tool,
            argv=(self.program, "-b", "-t", source.name),
            stdout_path=staged,
            cwd=source.parent,
        )
