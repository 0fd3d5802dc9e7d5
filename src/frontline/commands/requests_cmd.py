"""Command: list the configured requests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from frontline.commands._base import FrontlineCommand

if TYPE_CHECKING:
    from frontline.commands._context import AppContext


@click.command(
    "requests",
    cls=FrontlineCommand,
    examples="""\
  frontline requests
  frontline -q requests
  frontline --json requests""",
)
@click.pass_obj
def requests_cmd(app: AppContext) -> None:
    """List configured requests with their command chains."""
    registry = app.registry
    rows = [registry.describe(name) for name in registry.request_names()]

    if app.settings.json_output:
        click.echo(json.dumps({"requests": rows}, indent=2))
    elif app.settings.quiet:
        for row in rows:
            click.echo(row["name"])
    elif not rows:
        click.echo("No requests configured.")
    else:
        from frontline.output.console import render_requests_table

        click.echo(render_requests_table(rows))
