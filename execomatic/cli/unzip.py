"""Extract ZIP archives into a flat directory.

Exposed as ``execomatic-cli unzip``.  Entry paths are discarded and every
member is written under its lower-cased basename.
"""

from __future__ import annotations

from pathlib import Path

import click

from execomatic.cli._runtime import make_executor, reported_errors
from execomatic.utils.display import echo_banner, echo_report, echo_success


@click.command(
    name="unzip",
    help="Extract archives (flattened, lower-case names).",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument(
    "archives",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    nargs=-1,
    required=True,
)
@click.option("-d", "--destination", type=click.Path(file_okay=False, path_type=Path),
              help="Target directory; a scratch directory is used when omitted.")
@click.pass_obj
def cli(ctx_obj, archives: tuple[Path, ...], destination: Path | None) -> None:  # noqa: D401
    """Entry-point for ``execomatic-cli unzip``."""
    echo_banner("Unzip archives")
    executor = make_executor(ctx_obj)
    total = 0
    for archive in archives:
        with reported_errors():
            report = executor.unzip(archive, destination)
        echo_report(report)
        total += int(report["Files"])
    echo_success(f"{total} file(s) extracted from {len(archives)} archive(s)")
