"""Command capabilities.

A command is any object with ``execute`` and ``is_cacheable``. Two further
capabilities are optional and detected structurally:

* :class:`Explainable`: ``explain()`` returns a self-description used by
  explain mode.
* :class:`Observable`: ``set_event_handlers()`` receives the listeners
  configured for the command (see :class:`frontline.domain.events.EventEmitter`).

Nothing here requires inheritance; the protocols are runtime-checkable so
the dispatcher can test capabilities with ``isinstance``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from frontline.domain.context import ExecutionContext
    from frontline.domain.outcomes import Outcome

EventHandler = Callable[[str, dict[str, Any]], Any]


@runtime_checkable
class Command(Protocol):
    """A single unit of work in a request chain."""

    def execute(self, params: dict[str, Any], context: ExecutionContext) -> Outcome | None:
        """Run against resolved *params* and the shared *context*."""
        ...

    def is_cacheable(self) -> bool:
        """Whether this command's own result may be cached."""
        ...


@runtime_checkable
class Explainable(Protocol):
    def explain(self) -> str: ...


@runtime_checkable
class Observable(Protocol):
    def set_event_handlers(self, listeners: Mapping[str, list[EventHandler]]) -> None: ...


CommandFactory = Callable[[str], Any]
