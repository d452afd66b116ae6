"""Root CLI group for tplctl with global flags and command registration."""

from __future__ import annotations

import click

from tplctl import __version__
from tplctl.commands import register_commands
from tplctl.commands._context import AppContext
from tplctl.config.settings import TplSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="tplctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with stage timings.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--log-level", default=None, help="Package-manager --loglevel value.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    log_level: str | None,
    config_path: str | None,
) -> None:
    """tplctl — create projects from installable templates."""
    ctx.ensure_object(dict)
    settings = TplSettings.from_cli(
        config_path=config_path,
        json_output=json_output or None,
        quiet=quiet or None,
        verbose=verbose or None,
        log_json=log_json or None,
        log_level=log_level,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
