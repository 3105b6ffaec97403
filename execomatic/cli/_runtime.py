"""Helpers shared by the sub-command modules."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Mapping

import click

from execomatic.errors import ExecomaticError
from execomatic.executor import Executor


def make_executor(ctx_obj: Mapping[str, Any]) -> Executor:
    """Build an :class:`Executor` from the objects stashed by the root group."""
    return Executor(ctx_obj["settings"], ctx_obj["cfg"])


@contextmanager
def reported_errors() -> Iterator[None]:
    """Re-raise framework errors as :class:`click.ClickException`."""
    try:
        yield
    except ExecomaticError as exc:
        raise click.ClickException(f"[{exc.kind.value}] {exc}") from exc
