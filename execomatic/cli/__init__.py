"""Click entry-point for the ``execomatic-cli`` script.

The root group parses the global flags, configures logging, loads the
framework YAML and the caller's settings, and stores them in ``ctx.obj`` for
the sub-commands.  Sub-command modules are imported only when invoked, so
``execomatic-cli --help`` stays fast.

Settings precedence (last wins): ``--settings`` YAML, then each ``-D
key=value`` in command-line order.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Any, Dict, Mapping

import click

from execomatic import __version__
from execomatic.config import load_config
from execomatic.configset import ConfigSet
from execomatic.errors import ExecomaticError
from execomatic.utils.logging import setup_logging

#: Sub-command name → ``module:attribute`` of its Click command.
SUBCOMMANDS: Mapping[str, str] = {
    "query": "execomatic.cli.query:cli",
    "export": "execomatic.cli.export:cli",
    "import": "execomatic.cli.import_:cli",
    "unzip": "execomatic.cli.unzip:cli",
    "zip": "execomatic.cli.zip:cli",
    "fetch": "execomatic.cli.fetch:cli",
    "convert": "execomatic.cli.convert:cli",
}


class LazyGroup(click.Group):
    """Group resolving sub-commands from an import table on first use."""

    def __init__(self, *args, lazy_subcommands: Mapping[str, str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.lazy_subcommands = dict(lazy_subcommands or {})

    def list_commands(self, ctx):
        return sorted({*super().list_commands(ctx), *self.lazy_subcommands})

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        if cmd_name in self.lazy_subcommands and cmd_name not in self.commands:
            module_name, attr = self.lazy_subcommands[cmd_name].split(":", 1)
            self.add_command(getattr(importlib.import_module(module_name), attr), cmd_name)
        return super().get_command(ctx, cmd_name)


def _parse_overrides(ctx, param, values: tuple[str, ...]) -> dict[str, str]:
    """Turn repeated ``-D key=value`` options into a dict."""
    out: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected key=value, got {item!r}", param=param)
        out[key.strip()] = value
    return out


_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


@click.group(
    cls=LazyGroup,
    lazy_subcommands=SUBCOMMANDS,
    context_settings=_CTX,
    help="""\b
execomatic-cli – run mysql, mysqlimport, wget and dbview jobs safely.

""",
)
@click.version_option(__version__)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Framework YAML (program paths, exit codes, fetch tuning).",
)
@click.option(
    "-s",
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    help="YAML file with credentials and per-tool options.",
)
@click.option(
    "-D",
    "--set",
    "overrides",
    multiple=True,
    metavar="KEY=VALUE",
    callback=_parse_overrides,
    help="Override one setting, e.g. -D mysql.host=db1. Repeatable.",
)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG console output and JSON log.")
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console output into this plain-text file.",
)
@click.pass_context
def main(  # noqa: D401 – Click requires the callback to be named “main”.
    ctx: click.Context,
    config_path: Path | None,
    settings_path: Path | None,
    overrides: dict[str, str],
    verbose: bool,
    debug: bool,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *execomatic-cli*.

    Raises:
        click.ClickException: When the framework configuration or the
            settings file cannot be loaded.
    """
    root = Path.cwd()
    setup_logging(
        project_root=root, verbose=verbose, debug=debug, extra_text_log=save_logfile
    )

    try:
        cfg = load_config(config_path=config_path, project_root=root)
        settings = ConfigSet.from_yaml(settings_path) if settings_path else ConfigSet()
    except ExecomaticError as exc:
        raise click.ClickException(str(exc)) from exc

    ctx.obj = {
        "root": root,
        "cfg": cfg,
        "settings": settings.merged(overrides),
        "verbose": verbose,
        "debug": debug,
    }


# The public symbol exported by this module.  Required for ``python -m`` entry-points.
cli = main
__all__: list[str] = ["main", "SUBCOMMANDS"]
