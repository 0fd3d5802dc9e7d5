"""Command: dispatch a request and print what its commands write."""

from __future__ import annotations

import io
import os
from typing import TYPE_CHECKING

import click

from frontline.commands._base import FrontlineCommand

if TYPE_CHECKING:
    from frontline.commands._context import AppContext


@click.command(
    cls=FrontlineCommand,
    examples="""\
  frontline run home
  frontline run article 42 --get page=2
  frontline run login --post user=ada --post password=secret
  frontline run _rebuild --internal
  frontline --json run home""",
)
@click.argument("identifier", required=False)
@click.argument("args", nargs=-1)
@click.option("--get", "get_pairs", multiple=True, metavar="KEY=VALUE", help="Query value.")
@click.option("--post", "post_pairs", multiple=True, metavar="KEY=VALUE", help="Form value.")
@click.option("--cookie", "cookie_pairs", multiple=True, metavar="KEY=VALUE", help="Cookie.")
@click.option(
    "--session", "session_pairs", multiple=True, metavar="KEY=VALUE", help="Session value."
)
@click.option("--internal", is_flag=True, help="Allow internal-only requests.")
@click.pass_obj
def run(
    app: AppContext,
    identifier: str | None,
    args: tuple[str, ...],
    get_pairs: tuple[str, ...],
    post_pairs: tuple[str, ...],
    cookie_pairs: tuple[str, ...],
    session_pairs: tuple[str, ...],
    internal: bool,
) -> None:
    """Run the request IDENTIFIER (default: the configured default request)."""
    from frontline.domain.sources import InputSources, parse_pairs

    identifier = app.default_identifier(identifier)
    sources = InputSources.from_cli(
        (identifier, *args),
        env=dict(os.environ),
        get=parse_pairs(get_pairs),
        post=parse_pairs(post_pairs),
        cookie=parse_pairs(cookie_pairs),
        session=parse_pairs(session_pairs),
    )

    sink = io.StringIO() if app.settings.json_output else None
    dispatcher = app.dispatcher(sources=sources, output=sink)
    try:
        result = dispatcher.handle_request(identifier, allow_internal=internal)
    except Exception as exc:
        msg = f"{identifier}: unhandled {type(exc).__name__}: {exc}"
        raise click.ClickException(msg) from exc
    finally:
        dispatcher.close()

    if sink is not None:
        app.emit(result, output=sink.getvalue())
    else:
        app.emit(result, summary_to_stderr=True)
