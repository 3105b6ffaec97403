"""Run one SQL statement through the ``mysql`` client.

Exposed as ``execomatic-cli query``.  By default the client's output rows are
printed; ``--execute`` runs the statement for its side effect and prints the
status report instead.
"""

from __future__ import annotations

import click

from execomatic.cli._runtime import make_executor, reported_errors
from execomatic.utils.display import echo_report


@click.command(
    name="query",
    help="Run an SQL statement with the mysql client.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("sql")
@click.option("--execute", "execute", is_flag=True,
              help="Print the status report instead of the result rows.")
@click.pass_obj
def cli(ctx_obj, sql: str, execute: bool) -> None:  # noqa: D401 – Click callback
    """Entry-point for ``execomatic-cli query``."""
    executor = make_executor(ctx_obj)
    with reported_errors():
        if execute:
            echo_report(executor.execute(sql))
            return
        for line in executor.select(sql):
            click.echo(line)
