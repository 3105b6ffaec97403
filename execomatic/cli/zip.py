"""Pack the files of a directory into a ZIP archive.

Exposed as ``execomatic-cli zip``.
"""

from __future__ import annotations

from pathlib import Path

import click

from execomatic.cli._runtime import make_executor, reported_errors
from execomatic.utils.display import echo_banner, echo_report, echo_success


@click.command(
    name="zip",
    help="Archive the top-level files of a directory.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("source_dir", type=click.Path(file_okay=False, exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Archive path (.zip); a scratch file is used when omitted.")
@click.pass_obj
def cli(ctx_obj, source_dir: Path, output: Path | None) -> None:  # noqa: D401
    """Entry-point for ``execomatic-cli zip``."""
    echo_banner("Create archive")
    with reported_errors():
        report = make_executor(ctx_obj).zip(source_dir, output)
    echo_report(report)
    echo_success(f"{report['Files']} file(s) archived")
