"""Click classes shared by the ``frontline`` subcommands.

``run``, ``explain`` and ``requests`` each declare ``examples=`` with a few
sample invocations (request identifiers, ``--get``/``--post`` pairs,
``--internal``). ``--examples`` prints them and exits, so ``--help`` only
lists options.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    # Eager, so a missing IDENTIFIER or a bad KEY=VALUE never blocks it.
    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show sample invocations and exit.",
        )
    )


class FrontlineCommand(click.Command):
    """A frontline subcommand; ``examples`` holds its sample invocations."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class FrontlineGroup(click.Group):
    """Root ``frontline`` group. Subcommands are built as FrontlineCommand."""

    command_class = FrontlineCommand
