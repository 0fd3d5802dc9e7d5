"""Root CLI group for frontline with global flags and command registration."""

from __future__ import annotations

import click

from frontline import __version__
from frontline.commands import register_commands
from frontline.commands._base import FrontlineGroup
from frontline.commands._context import AppContext
from frontline.config.settings import FrontlineSettings


@click.group(cls=FrontlineGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="frontline")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """frontline: run named requests as chains of commands."""
    ctx.ensure_object(dict)
    settings = FrontlineSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
