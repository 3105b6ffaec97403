"""Exception taxonomy shared by every wrapped-program operation.

All exceptions derive from :class:`ExecomaticError` so CLI callers can catch
a single type, while library callers can discriminate on the concrete class
or on :attr:`ExecomaticError.kind`.  Messages never contain credential values;
callers pass already-redacted command strings.

A "skipped" import is *not* an error and therefore has no exception here; it
is reported through :attr:`execomatic.types.StatusReport.ignored`.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class ErrorKind(str, Enum):
    """Failure categories surfaced by :meth:`Executor.attempt`."""

    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    SPAWN = "spawn"
    PROCESS_EXIT = "process_exit"
    DESTINATION_EXISTS = "destination_exists"
    TRANSFER = "transfer"


class ExecomaticError(RuntimeError):
    """Base class for all framework failures."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ConfigurationError(ExecomaticError):
    """A required setting is missing or empty, or the config file is invalid."""

    kind = ErrorKind.CONFIGURATION


class ValidationError(ExecomaticError):
    """Operation parameters are malformed or disallowed."""

    kind = ErrorKind.VALIDATION


class SpawnError(ExecomaticError):
    """The child process could not be started."""

    kind = ErrorKind.SPAWN


class DestinationExistsError(ExecomaticError):
    """The final path already exists and overwriting is disabled."""

    kind = ErrorKind.DESTINATION_EXISTS


class TransferError(ExecomaticError):
    """A staged file could not be moved to its final location."""

    kind = ErrorKind.TRANSFER


class ProcessExitError(ExecomaticError):
    """The child ran but its exit code is not a success code for the tool.

    Attributes:
        exit_code: Raw exit code of the child.
        failure: Tool-specific failure category (e.g. ``network``).
        command: Redacted command line.
        stdout_tail: Last captured stdout lines (redacted).
        stderr_tail: Last captured stderr lines (redacted).
    """

    kind = ErrorKind.PROCESS_EXIT

    def __init__(
        self,
        message: str,
        *,
        exit_code: int,
        failure: str = "generic",
        command: str = "",
        stdout_tail: Sequence[str] = (),
        stderr_tail: Sequence[str] = (),
    ) -> None:
        self.exit_code = exit_code
        self.failure = failure
        self.command = command
        self.stdout_tail = tuple(stdout_tail)
        self.stderr_tail = tuple(stderr_tail)
        super().__init__(message)

    def __str__(self) -> str:
        parts = [f"{self.args[0]} (exit code {self.exit_code}, {self.failure})"]
        if self.command:
            parts.append(f"command: {self.command}")
        if self.stderr_tail:
            parts.append("stderr:\n" + "\n".join(self.stderr_tail))
        if self.stdout_tail:
            parts.append("stdout:\n" + "\n".join(self.stdout_tail))
        return "\n".join(parts)


__all__ = [
    "ErrorKind",
    "ExecomaticError",
    "ConfigurationError",
    "ValidationError",
    "SpawnError",
    "DestinationExistsError",
    "TransferError",
    "ProcessExitError",
]
