"""Pluggy hook specifications for dispatcher lifecycle events.

Hooks observe the chain; they cannot change its outcome. They run
synchronously, in the dispatcher's thread, at these points:

- ``request_started``: after the request resolved and the context exists
- ``command_finished``: after each command, with its outcome name
- ``request_forwarded``: when a command forwards to another request
- ``request_finished``: once per request entered, with the final status
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from frontline.domain.context import ExecutionContext

PROJECT_NAME = "frontline"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class FrontlineHookSpec:
    """Hook specifications for the frontline plugin system."""

    @hookspec
    def request_started(self, request_name: str, context: ExecutionContext) -> None:
        """Called before the first command of a request runs."""

    @hookspec
    def command_finished(self, request_name: str, command_name: str, outcome: str) -> None:
        """Called after each command with the outcome variant name."""

    @hookspec
    def request_forwarded(self, source: str, destination: str) -> None:
        """Called when a command forwards *source* to *destination*."""

    @hookspec
    def request_finished(self, request_name: str, status: str) -> None:
        """Called when a request's chain ends, however it ended."""
