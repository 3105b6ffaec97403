"""
Per-tool translation of child exit codes into success or a failure category.

"Zero means success" is not universal: ``dbview`` exits with ``1`` after a
completed conversion.  Every tool therefore owns an explicit table built from
:class:`execomatic.config.schema.ProgramConfig`; nothing is inferred.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .config.schema import ExecConfig, ExitCodeEntry, ProgramConfig


@dataclass(frozen=True)
class ExitStatus:
    """Classification of one exit code.

    Attributes:
        tool: Tool the code belongs to.
        code: Raw exit code.
        success: ``True`` when *code* is a success code for *tool*.
        kind: ``"ok"`` on success, otherwise the failure category.
        description: Human-readable text for logs and error messages.
    """

    tool: str
    code: int
    success: bool
    kind: str
    description: str


class ExitStatusTranslator:
    """Map ``(tool, exit code)`` to an :class:`ExitStatus`."""

    def __init__(self, programs: Mapping[str, ProgramConfig]) -> None:
        self._programs = dict(programs)

    @classmethod
    def from_config(cls, cfg: ExecConfig) -> "ExitStatusTranslator":
        """Build the translator from the ``programs`` section of *cfg*."""
        return cls(cfg.programs)

    def translate(self, tool: str, code: int) -> ExitStatus:
        """Classify *code* for *tool*.

        Unknown tools fall back to the conventional ``0 = success`` rule;
        unknown failure codes are reported as ``generic``.
        """
        program = self._programs.get(tool)
        success_codes = set(program.success_codes) if program else {0}
        if code in success_codes:
            return ExitStatus(tool, code, True, "ok", "OK")
        entry = (program.exit_codes.get(code) if program else None) or ExitCodeEntry(
            description=f"{tool} exited with status {code}"
        )
        return ExitStatus(tool, code, False, entry.kind, entry.description or entry.kind)

    def is_success(self, tool: str, code: int) -> bool:
        """Shorthand for ``translate(tool, code).success``."""
        return self.translate(tool, code).success


__all__ = ["ExitStatus", "ExitStatusTranslator"]
