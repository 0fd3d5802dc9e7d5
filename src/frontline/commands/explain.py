"""Command: describe a request's command chain without running it."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import click

from frontline.commands._base import FrontlineCommand

if TYPE_CHECKING:
    from frontline.commands._context import AppContext


@click.command(
    cls=FrontlineCommand,
    examples="""\
  frontline explain home
  frontline explain _rebuild --internal
  frontline --json explain home""",
)
@click.argument("identifier", required=False)
@click.option("--internal", is_flag=True, help="Allow internal-only requests.")
@click.pass_obj
def explain(app: AppContext, identifier: str | None, internal: bool) -> None:
    """Explain the request IDENTIFIER without executing any command."""
    from frontline.domain.errors import FrontlineError

    identifier = app.default_identifier(identifier)
    dispatcher = app.dispatcher()
    try:
        name = dispatcher.request_mapper.uri_to_request(identifier)
        request = app.registry.get_request(name, allow_internal=internal)
        text = dispatcher.explain_request(request)
    except FrontlineError as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        dispatcher.close()

    if app.settings.json_output:
        click.echo(json.dumps({"request": name, "explanation": text}, indent=2))
    else:
        click.echo(text, nl=False)
