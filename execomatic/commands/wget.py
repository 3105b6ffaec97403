"""Command builder for ``wget``."""

from __future__ import annotations

from pathlib import Path

from ..config.schema import FetchSettings
from ..configset import ConfigSet
from .base import CommandBuilder, CommandSpec


class WgetCommand(CommandBuilder):
    """Build ``wget --quiet … -O <staged> <url>``.

    Timeouts, tries and redirects come from :class:`FetchSettings`; the
    framework relies on wget to enforce them.
    """

    tool = "wget"

    def __init__(self, program: str, fetch: FetchSettings | None = None) -> None:
        super().__init__(program)
        self.fetch = fetch or FetchSettings()

    def build(self, settings: ConfigSet, url: str, staged: Path) -> CommandSpec:  # type: ignore[override]
        """Return the spec downloading *url* into *staged*."""
        f = self.fetch
        argv = [
            self.program,
            "--quiet",
            f"--max-redirect={f.max_redirect}",
            f"--tries={f.tries}",
            f"--timeout={f.timeout}",
        ]
        if f.connect_timeout is not None:
            argv.append(f"--connect-timeout={f.connect_timeout}")
        if f.read_timeout is not None:
            argv.append(f"--read-timeout={f.read_timeout}")
        argv += ["-O", str(staged), url]
        return CommandSpec(tool=self.tool, argv=tuple(argv))
