"""Command, cache and mapper doubles shared by the test suite.

They are importable as ``tests.fakes:<Name>`` so TOML configs written by
CLI tests can reference them.
"""

from __future__ import annotations

from typing import Any

from frontline.domain.events import EventEmitter
from frontline.domain.outcomes import FatalInterrupt, Forward, Interrupt, RecoverableError
from frontline.services.mapper import RequestMapper


class MockCommand:
    """Stores ``params['value']`` (default ``"test"``) under its own name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> None:
        cxt.add(self.name, params.get("value", "test"))

    def is_cacheable(self) -> bool:
        return False


class MockPrintBarCommand:
    """Writes ``bar`` to the output channel."""

    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> None:
        cxt.write("bar")

    def is_cacheable(self) -> bool:
        return True


class CommandRepeater:
    """Stores ``params['cmd']`` under its own name."""

    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> None:
        cxt.add(self.name, params.get("cmd"))

    def is_cacheable(self) -> bool:
        return False


class CommandForward:
    """Records itself in the context, then forwards to ``params['forward']``."""

    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> Forward:
        cxt.add(self.name, type(self).__name__)
        return Forward(params["forward"])

    def is_cacheable(self) -> bool:
        return False


class EchoCommand:
    """Writes ``params['text']`` to the output channel."""

    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> None:
        cxt.write(str(params.get("text", "")))

    def is_cacheable(self) -> bool:
        return True


class InterruptCommand:
    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> Interrupt:
        return Interrupt(params.get("reason", ""))

    def is_cacheable(self) -> bool:
        return False


class FatalCommand:
    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> FatalInterrupt:
        return FatalInterrupt(params.get("message", "stop everything"))

    def is_cacheable(self) -> bool:
        return False


class RecoverableCommand:
    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> RecoverableError:
        return RecoverableError(params.get("message", "minor problem"))

    def is_cacheable(self) -> bool:
        return False


class ExplodingCommand:
    """Raises instead of returning an outcome."""

    def __init__(self, name: str) -> None:
        self.name = name

    def execute(self, params: dict[str, Any], cxt: Any) -> None:
        raise RuntimeError("boom")

    def is_cacheable(self) -> bool:
        return False


class ExplainedCommand(MockCommand):
    def explain(self) -> str:
        return f"CMD: {self.name}: stores a value"


class EventCommand(EventEmitter, MockCommand):
    """Fires ``done`` with its stored value after executing."""

    def __init__(self, name: str) -> None:
        EventEmitter.__init__(self)
        MockCommand.__init__(self, name)

    def execute(self, params: dict[str, Any], cxt: Any) -> None:
        super().execute(params, cxt)
        self.fire_event("done", value=cxt.get(self.name))


class CountingCommand:
    """Counts its own executions and stores the count under its name."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.runs = 0

    def execute(self, params: dict[str, Any], cxt: Any) -> None:
        self.runs += 1
        cxt.add(self.name, self.runs)

    def is_cacheable(self) -> bool:
        return True


class AlwaysFooCache:
    """Cache that claims to hold ``foo`` for every key."""

    def __init__(self, name: str, **_params: Any) -> None:
        self.name = name
        self.is_default = True

    def get(self, key: str) -> str:
        return "foo"

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        pass

    def delete(self, key: str) -> None:
        pass

    def clear(self) -> None:
        pass


class MockRequestMapper(RequestMapper):
    """Maps ``NonExistentRequestName`` onto ``testHandleRequest2``."""

    def uri_to_request(self, identifier: str) -> str:
        if identifier == "NonExistentRequestName":
            return "testHandleRequest2"
        return super().uri_to_request(identifier)


def record_event(event: str, payload: dict[str, Any]) -> None:
    RECORDED_EVENTS.append((event, payload))


RECORDED_EVENTS: list[tuple[str, dict[str, Any]]] = []
