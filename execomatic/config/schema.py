"""
Pydantic models that mirror the YAML configuration consumed by *execomatic*.

The framework never reads program paths, timeouts or exit-code tables from
module globals; everything arrives through an :class:`ExecConfig` instance
handed to :class:`execomatic.executor.Executor`.  Tests therefore point the
same models at fake executables.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

# --------------------------------------------------------------------------- #
# 1.  Per-program settings                                                    #
# --------------------------------------------------------------------------- #


class ExitCodeEntry(BaseModel):
    """Meaning of one non-success exit code.

    Attributes:
        kind: Short machine-friendly category (``network``, ``server`` …).
        description: Human-readable explanation surfaced in error messages.
    """

    kind: str = "generic"
    description: str = ""


class ProgramConfig(BaseModel):
    """Location and exit-code convention of one wrapped program.

    Attributes:
        path: Absolute path or bare name resolved through ``$PATH``.
        success_codes: Exit codes that mean the program succeeded.  Most
            tools use ``[0]``; ``dbview`` reports success with ``1``.
        exit_codes: Optional descriptions for individual failure codes.
    """

    path: str
    success_codes: List[int] = Field(default_factory=lambda: [0])
    exit_codes: Dict[int, ExitCodeEntry] = Field(default_factory=dict)

    @field_validator("success_codes")
    @classmethod
    def _not_empty(cls, value: List[int]) -> List[int]:
        """A program without any success code could never succeed."""
        if not value:
            raise ValueError("success_codes must list at least one exit code")
        return value


# --------------------------------------------------------------------------- #
# 2.  Behavioural sections                                                    #
# --------------------------------------------------------------------------- #


class RunnerSettings(BaseModel):
    """How child processes are launched.

    Attributes:
        use_shell: Run the rendered command line through *shell* instead of
            executing the argument vector directly.
        shell: Shell used when *use_shell* is enabled.
        tail_lines: Number of stdout/stderr lines kept for error reports.
    """

    use_shell: bool = False
    shell: str = "/bin/sh"
    tail_lines: int = Field(50, ge=1)


class FetchSettings(BaseModel):
    """Timeouts and retry bounds for the remote-fetch operation.

    The timeouts are passed to ``wget`` itself; the framework does not kill
    slow children.
    """

    timeout: int = Field(5, ge=1, description="wget --timeout (seconds)")
    connect_timeout: Optional[int] = Field(None, ge=1)
    read_timeout: Optional[int] = Field(None, ge=1)
    tries: int = Field(1, ge=1, description="wget --tries")
    max_redirect: int = Field(2, ge=0)
    attempts: int = Field(1, ge=1, description="framework-level attempts")
    retry_on: List[int] = Field(default_factory=lambda: [4])
    max_workers: int = Field(4, ge=1)


# --------------------------------------------------------------------------- #
# 3.  Top-level model                                                         #
# --------------------------------------------------------------------------- #


class ExecConfig(BaseModel):
    """Root configuration object consumed by the rest of *execomatic*.

    Attributes:
        version: Version string of the configuration schema.
        programs: Wrapped programs keyed by tool name (``mysql``,
            ``mysqlimport``, ``wget``, ``dbview``).
        runner: Process launch settings.
        fetch: Remote-fetch tuning.
        scratch_root: Directory holding staged files; defaults to
            ``<system tmp>/execomatic``.
    """

    version: str = "1"
    programs: Dict[str, ProgramConfig]
    runner: RunnerSettings = Field(default_factory=RunnerSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    scratch_root: Optional[Path] = None

    def program(self, tool: str) -> ProgramConfig:
        """Return the settings for *tool* or raise ``KeyError`` with context."""
        try:
            return self.programs[tool]
        except KeyError:
            raise KeyError(f"No program configured for tool '{tool}'") from None
