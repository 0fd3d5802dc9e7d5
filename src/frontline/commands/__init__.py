"""Subcommand modules for the frontline CLI.

register_commands() uses deferred imports to keep ``frontline --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from frontline.commands.explain import explain
    from frontline.commands.requests_cmd import requests_cmd
    from frontline.commands.run import run

    cli.add_command(run)
    cli.add_command(explain)
    cli.add_command(requests_cmd)
