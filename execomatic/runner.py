"""
Blocking child-process execution with line-by-line output streaming.

:class:`ProcessRunner` spawns the program described by a
:class:`~execomatic.commands.base.CommandSpec`, hands every stdout line to an
optional callback as soon as it is produced, drains stderr on a helper thread
so neither pipe can fill up, and returns a frozen
:class:`~execomatic.types.ProcessResult` once the child has exited.

The argument vector is executed directly by default.  With
``runner.use_shell`` enabled the rendered (fully quoted) command line is
passed to ``/bin/sh -c`` instead; output redirection then happens inside the
shell.  No timeout or retry is applied here.
"""

from __future__ import annotations

import subprocess
import threading
import time
from collections import deque
from typing import IO, Callable, Deque, Optional

import structlog

from .commands.base import CommandSpec
from .config.schema import RunnerSettings
from .errors import ProcessExitError, SpawnError
from .exit_codes import ExitStatusTranslator
from .types import ProcessResult
from .utils.redact import redact, redact_lines

log = structlog.get_logger()

# Shell conventions for "command not found" / "not executable".
NOT_FOUND = 127
NOT_EXEC = 126


def _drain(stream: IO[str], sink: Deque[str]) -> None:
    """Copy every line of *stream* into *sink* until EOF."""
    for line in stream:
        sink.append(line.rstrip("\r\n"))


class ProcessRunner:
    """Execute :class:`CommandSpec` objects and classify their exit codes.

    Args:
        settings: Launch settings (shell mode, tail size).
        translator: Exit-code tables; when ``None`` only ``0`` is success.
    """

    def __init__(
        self,
        settings: Optional[RunnerSettings] = None,
        translator: Optional[ExitStatusTranslator] = None,
    ) -> None:
        self.settings = settings or RunnerSettings()
        self.translator = translator or ExitStatusTranslator({})

    # ------------------------------------------------------------------ #
    # internal helpers                                                   #
    # ------------------------------------------------------------------ #
    def _popen_args(self, spec: CommandSpec) -> tuple[list[str], bool]:
        """Return ``(argv, redirect_in_python)`` for *spec*."""
        if self.settings.use_shell:
            return [self.settings.shell, "-c", spec.render()], False
        return list(spec.argv), spec.stdout_path is not None

    def _spawn(self, spec: CommandSpec, argv: list[str], stdout_target) -> subprocess.Popen:
        try:
            return subprocess.Popen(
                argv,
                stdout=stdout_target,
                stderr=subprocess.PIPE,
                cwd=str(spec.cwd) if spec.cwd else None,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except (FileNotFoundError, PermissionError) as exc:
            raise SpawnError(f"Cannot start {spec.argv[0]}: {exc.strerror or exc}") from exc
        except OSError as exc:
            raise SpawnError(f"Cannot start {spec.argv[0]}: {exc}") from exc

    # ------------------------------------------------------------------ #
    # public API                                                         #
    # ------------------------------------------------------------------ #
    def run(
        self,
        spec: CommandSpec,
        *,
        on_stdout: Optional[Callable[[str], object]] = None,
        tail_lines: Optional[int] = None,
        check: bool = True,
    ) -> ProcessResult:
        """Run *spec* to completion.

        Args:
            spec: Command to execute.
            on_stdout: Called with each stdout line (newline stripped) while
                the child is still running.
            tail_lines: Keep only the last *N* lines of each stream; ``None``
                keeps everything (needed when the caller consumes stdout).
            check: Raise :class:`ProcessExitError` when the exit code is not a
                success code for ``spec.tool``.

        Returns:
            ProcessResult: Exit code, captured lines and duration.

        Raises:
            SpawnError: When the program could not be started.
            ProcessExitError: When *check* is set and the child failed.
        """
        argv, redirect = self._popen_args(spec)
        command = spec.redacted()
        out_lines: Deque[str] = deque(maxlen=tail_lines)
        err_lines: Deque[str] = deque(maxlen=tail_lines)

        log.debug("process.spawn", tool=spec.tool, command=command, cwd=str(spec.cwd or ""))
        start = time.monotonic()

        out_file = open(spec.stdout_path, "w", encoding="utf-8") if redirect else None
        try:
            proc = self._spawn(spec, argv, out_file if out_file else subprocess.PIPE)
            with proc:
                assert proc.stderr is not None
                drain = threading.Thread(
                    target=_drain, args=(proc.stderr, err_lines), daemon=True
                )
                drain.start()
                if proc.stdout is not None:
                    for raw in proc.stdout:
                        line = raw.rstrip("\r\n")
                        out_lines.append(line)
                        if on_stdout is not None:
                            on_stdout(line)
                code = proc.wait()
                drain.join()
        finally:
            if out_file is not None:
                out_file.close()

        duration_ms = int((time.monotonic() - start) * 1000)
        result = ProcessResult(
            exit_code=code,
            stdout=tuple(out_lines),
            stderr=tuple(err_lines),
            duration_ms=duration_ms,
        )
        log.debug("process.exit", tool=spec.tool, exit_code=code, duration_ms=duration_ms)

        if self.settings.use_shell and code in (NOT_FOUND, NOT_EXEC):
            detail = "; ".join(result.stderr[-3:]) or "command not found or not executable"
            raise SpawnError(f"Cannot start {spec.argv[0]}: {redact(detail, spec.secrets)}")

        if check:
            status = self.translator.translate(spec.tool, code)
            if not status.success:
                tail = self.settings.tail_lines
                log.error("process.failed", tool=spec.tool, exit_code=code, kind=status.kind)
                raise ProcessExitError(
                    f"{spec.tool} process did not exit cleanly: {status.description}",
                    exit_code=code,
                    failure=status.kind,
                    command=command,
                    stdout_tail=redact_lines(result.stdout[-tail:], spec.secrets),
                    stderr_tail=redact_lines(result.stderr[-tail:], spec.secrets),
                )
        return result


__all__ = ["ProcessRunner", "NOT_FOUND", "NOT_EXEC"]
