"""Bulk-load delimited data files with ``mysqlimport``.

Exposed as ``execomatic-cli import``.  Each file is loaded into the table
named after its basename (last extension stripped).  Empty files and files
without a matching table are reported as ignored; the table list is read
once per invocation.
"""

from __future__ import annotations

from pathlib import Path

import click

from execomatic.cli._runtime import make_executor, reported_errors
from execomatic.utils.display import echo_banner, echo_report, echo_success


@click.command(
    name="import",
    help="Load data files into the tables named after them.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument(
    "files",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    nargs=-1,
    required=True,
)
@click.pass_obj
def cli(ctx_obj, files: tuple[Path, ...]) -> None:  # noqa: D401 – Click callback
    """Entry-point for ``execomatic-cli import``."""
    echo_banner("Import")
    executor = make_executor(ctx_obj)
    loaded = 0
    for path in files:
        click.echo(f"  • {path.name}")
        with reported_errors():
            report = executor.load(path)
        echo_report(report)
        if not report.ignored:
            loaded += 1
    echo_success(f"{loaded} of {len(files)} file(s) imported")
