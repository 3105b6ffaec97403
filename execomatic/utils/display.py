"""Utility functions to print formatted CLI messages."""

from __future__ import annotations

from typing import Mapping

import click

__all__ = ["echo_banner", "echo_success", "echo_report"]


def echo_banner(text: str) -> None:
    """Print a colourful banner announcing a processing step.

    Args:
        text: Banner text.
    """
    click.secho(f"\n=== {text} ===", fg="cyan")


def echo_success(text: str) -> None:
    """Echo a green success message prefixed with a tick."""
    click.secho(f"✓ {text}", fg="green")


def echo_report(report: Mapping[str, str]) -> None:
    """Echo one ``key: value`` line per status-report entry."""
    width = max((len(k) for k in report), default=0)
    for key, value in report.items():
        click.echo(f"  {key.ljust(width)} : {value}")
