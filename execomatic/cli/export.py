"""Write the result of a ``SELECT`` statement to a file.

Exposed as ``execomatic-cli export``.  The output is staged first and only
moved onto *DESTINATION* once the client has exited successfully; an existing
file is replaced unless ``-D replace=false`` is given.
"""

from __future__ import annotations

from pathlib import Path

import click

from execomatic.cli._runtime import make_executor, reported_errors
from execomatic.utils.display import echo_banner, echo_report, echo_success


@click.command(
    name="export",
    help="Export the rows of a SELECT statement to a file.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("sql")
@click.argument("destination", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def cli(ctx_obj, sql: str, destination: Path) -> None:  # noqa: D401 – Click callback
    """Entry-point for ``execomatic-cli export``."""
    echo_banner("Export")
    with reported_errors():
        report = make_executor(ctx_obj).export(sql, destination)
    echo_report(report)
    echo_success(f"{report['records']} record(s) written to {destination}")
