"""
Typed value objects that circulate between the execution stages.

:class:`ProcessResult` and the outcome classes are frozen pydantic models so
they cannot be mutated once the child process has terminated.
:class:`StatusReport` is a plain ``dict`` subclass: it is built
incrementally while output streams in and is owned by exactly one invocation.
"""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, GetCoreSchemaHandler
from pydantic_core import core_schema

from .errors import ErrorKind


class StatusReport(dict):
    """Mapping of metric name to string value.

    Every assigned value is coerced to ``str`` so reports look the same no
    matter which stage produced a metric.
    """

    IGNORED = "Ignored"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__()
        self.update(*args, **kwargs)

    def __setitem__(self, key: str, value: Any) -> None:
        super().__setitem__(str(key), str(value))

    def update(self, *args: Any, **kwargs: Any) -> None:  # type: ignore[override]
        for key, value in dict(*args, **kwargs).items():
            self[key] = value

    def setdefault(self, key: str, default: Any = "") -> str:  # type: ignore[override]
        if key not in self:
            self[key] = default
        return self[key]

    @property
    def ignored(self) -> bool:
        """``True`` when the operation intentionally did nothing."""
        return self.get(self.IGNORED, "").upper() == "TRUE"

    def mark_ignored(self) -> "StatusReport":
        """Flag the report as a skipped no-op and return it."""
        self[self.IGNORED] = "TRUE"
        return self

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Embedded as-is in the outcome models; no copying or coercion.
        return core_schema.is_instance_schema(cls)


class ProcessResult(BaseModel, frozen=True):
    """Terminal state of one child process.

    Attributes
    ----------
    exit_code
        Raw exit status reported by the operating system.
    stdout
        Captured standard-output lines (only the tail when a cap was set;
        empty when stdout was redirected into a file).
    stderr
        Captured standard-error lines (same capping rule).
    duration_ms
        Wall-clock time between spawn and exit.
    """

    exit_code: int
    stdout: tuple[str, ...] = ()
    stderr: tuple[str, ...] = ()
    duration_ms: int = 0


# --------------------------------------------------------------------------- #
# Outcome variants returned by Executor.attempt                               #
# --------------------------------------------------------------------------- #
class Success(BaseModel, frozen=True):
    """The operation ran and its result was committed."""

    status: Literal["success"] = "success"
    report: StatusReport


class Skipped(BaseModel, frozen=True):
    """The operation was a deliberate no-op (empty file, unknown table)."""

    status: Literal["skipped"] = "skipped"
    report: StatusReport


class Failure(BaseModel, frozen=True):
    """The operation failed; *detail* is already redacted."""

    status: Literal["failure"] = "failure"
    kind: ErrorKind
    detail: str
    exit_code: Optional[int] = None


Outcome = Union[Success, Skipped, Failure]

__all__ = [
    "StatusReport",
    "ProcessResult",
    "Success",
    "Skipped",
    "Failure",
    "Outcome",
]
