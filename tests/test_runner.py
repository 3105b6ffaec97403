from pathlib import Path

import pytest

from execomatic.commands.base import CommandSpec
from execomatic.config import RunnerSettings
from execomatic.errors import ProcessExitError, SpawnError
from execomatic.runner import ProcessRunner
from execomatic.utils.redact import MASK

from .utils import make_tool


def test_missing_program_is_a_spawn_error(tmp_path: Path):
    """Verify a program that cannot start raises SpawnError."""
    spec = CommandSpec(tool="mysql", argv=(str(tmp_path / "no-such-tool"),))
    with pytest.raises(SpawnError):
        ProcessRunner().run(spec)


def test_stdout_is_streamed_line_by_line(tmp_path: Path):
    """Verify every stdout line reaches the callback and the result."""
    tool = make_tool(tmp_path / "bin", "talk", "printf 'one\\ntwo\\n'\necho oops >&2\n")
    seen = []
    result = ProcessRunner().run(CommandSpec(tool="talk", argv=(str(tool),)), on_stdout=seen.append)
    assert seen == ["one", "two"]
    assert result.exit_code == 0
    assert result.stdout == ("one", "two")
    assert result.stderr == ("oops",)


def test_tail_lines_caps_captured_output(tmp_path: Path):
    """Verify only the requested tail is retained."""
    tool = make_tool(tmp_path / "bin", "many", "for i in 1 2 3 4 5; do echo $i; done\n")
    result = ProcessRunner().run(CommandSpec(tool="many", argv=(str(tool),)), tail_lines=2)
    assert result.stdout == ("4", "5")


def test_stdout_redirected_into_file(tmp_path: Path):
    """Verify stdout_path receives the child's output."""
    tool = make_tool(tmp_path / "bin", "rows", "printf 'a\\nb\\n'\n")
    out = tmp_path / "rows.part"
    result = ProcessRunner().run(CommandSpec(tool="rows", argv=(str(tool),), stdout_path=out))
    assert out.read_text() == "a\nb\n"
    assert result.stdout == ()


def test_failure_message_is_redacted(tmp_path: Path):
    """Verify the password never appears in a ProcessExitError."""
    tool = make_tool(tmp_path / "bin", "deny", 'echo "access denied for $1" >&2\nexit 1\n')
    spec = CommandSpec(
        tool="mysql",
        argv=(str(tool), "--password=hunter2pw"),
        secrets=("hunter2pw",),
    )
    with pytest.raises(ProcessExitError) as info:
        ProcessRunner().run(spec)
    exc = info.value
    assert exc.exit_code == 1
    assert "hunter2pw" not in str(exc)
    assert MASK in str(exc)
    assert exc.stderr_tail == (f"access denied for --password={MASK}",)


def test_check_false_returns_failed_result(tmp_path: Path):
    """Verify check=False hands back the non-zero exit code."""
    tool = make_tool(tmp_path / "bin", "fail", "exit 3\n")
    result = ProcessRunner().run(CommandSpec(tool="x", argv=(str(tool),)), check=False)
    assert result.exit_code == 3


def test_shell_mode_keeps_hostile_argument_literal(tmp_path: Path):
    """Verify shell rendering passes metacharacters through as data."""
    tool = make_tool(tmp_path / "bin", "say", "printf '%s\\n' \"$1\"\n")
    hostile = f"x; touch {tmp_path / 'pwned'}"
    runner = ProcessRunner(RunnerSettings(use_shell=True))
    result = runner.run(CommandSpec(tool="say", argv=(str(tool), hostile)))
    assert result.stdout == (hostile,)
    assert not (tmp_path / "pwned").exists()


def test_shell_mode_missing_program_is_a_spawn_error(tmp_path: Path):
    """Verify the shell's command-not-found status becomes SpawnError."""
    runner = ProcessRunner(RunnerSettings(use_shell=True))
    with pytest.raises(SpawnError):
        runner.run(CommandSpec(tool="x", argv=(str(tmp_path / "absent"),)))
