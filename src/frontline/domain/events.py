"""Listener support for observable commands."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from frontline.domain.command import EventHandler

logger = logging.getLogger(__name__)


class EventEmitter:
    """Helper giving a command the :class:`Observable` capability.

    Commands may inherit from it or hold one and delegate. Handlers are
    called as ``handler(event, payload)`` in registration order.

    INVARIANT: Listener failures are warnings, never errors.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventHandler]] = {}

    def set_event_handlers(self, listeners: Mapping[str, list[EventHandler]]) -> None:
        self._listeners = {event: list(handlers) for event, handlers in listeners.items()}

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(event))

    def fire_event(self, event: str, **payload: Any) -> int:
        """Call every handler registered for *event*. Returns how many ran cleanly."""
        handlers = getattr(self, "_listeners", {}).get(event, [])
        ok = 0
        for handler in handlers:
            try:
                handler(event, payload)
            except Exception:
                logger.warning("Listener %r failed for event %s", handler, event, exc_info=True)
            else:
                ok += 1
        return ok
