"""Convert dBase III ``.dbf`` tables to delimited ``.dat`` files with ``dbview``.

Exposed as ``execomatic-cli convert``.  The output is written next to the
source under its lower-cased name.
"""

from __future__ import annotations

from pathlib import Path

import click

from execomatic.cli._runtime import make_executor, reported_errors
from execomatic.utils.display import echo_banner, echo_success


@click.command(
    name="convert",
    help="Convert .dbf files to .dat with dbview.",
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
    """Entry-point for ``execomatic-cli convert``."""
    echo_banner("Convert dBase files")
    executor = make_executor(ctx_obj)
    for path in files:
        with reported_errors():
            out = executor.convert(path)
        click.echo(f"  {path.name} → {out.name}")
    echo_success(f"{len(files)} file(s) converted")
