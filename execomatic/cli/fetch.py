"""Download remote files with ``wget``.

Exposed as ``execomatic-cli fetch``.  A single URL is fetched in the
foreground; several URLs are fetched concurrently on a bounded worker pool,
and one failing download does not stop the others.

Key flags
------------
* ``-d/--destination`` – download directory (scratch directory when omitted).
* ``--overwrite``      – replace files that already exist.
"""

from __future__ import annotations

from pathlib import Path

import click

from execomatic.cli._runtime import make_executor, reported_errors
from execomatic.errors import ExecomaticError
from execomatic.utils.display import echo_banner, echo_report, echo_success


@click.command(
    name="fetch",
    help="Download one or more URLs.",
    context_settings=dict(help_option_names=["-h", "--help"], max_content_width=120),
)
@click.argument("urls", nargs=-1, required=True)
@click.option("-d", "--destination", type=click.Path(file_okay=False, path_type=Path),
              help="Download directory.")
@click.option("--overwrite", is_flag=True, help="Replace existing files.")
@click.pass_obj
def cli(ctx_obj, urls: tuple[str, ...], destination: Path | None, overwrite: bool) -> None:  # noqa: D401
    """Entry-point for ``execomatic-cli fetch``."""
    echo_banner("Fetch")
    if len(urls) == 1:
        with reported_errors():
            report = make_executor(ctx_obj).fetch(urls[0], destination, overwrite)
        echo_report(report)
        echo_success(f"{report['Destination']}")
        return

    failed: list[str] = []
    with make_executor(ctx_obj) as executor:
        futures = executor.fetch_all(urls, destination, overwrite)
        for url, future in zip(urls, futures):
            try:
                report = future.result()
            except ExecomaticError as exc:
                failed.append(url)
                click.secho(f"✗ {url}: {exc}", fg="red", err=True)
                continue
            echo_report(report)

    if failed:
        raise click.ClickException(f"{len(failed)} of {len(urls)} download(s) failed")
    echo_success(f"{len(urls)} file(s) downloaded")
