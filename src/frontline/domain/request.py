"""Requests and command descriptors.

A :class:`Request` is a named, ordered chain of :class:`CommandDescriptor`
entries. Iteration order is insertion order and is the execution order.
Both types are immutable once built; the only thing a descriptor reuses
across executions is its command *instance*.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from frontline.domain.errors import ConfigurationError

if TYPE_CHECKING:
    from frontline.domain.command import CommandFactory, EventHandler


@dataclass(frozen=True)
class ParamSpec:
    """Where a parameter's value comes from.

    Attributes:
        name: Parameter name as the command sees it.
        source: Space-separated ``source:key`` fallback chain, e.g.
            ``"get:id post:id"``. ``None`` means default-only.
        default: Used when every source is absent. ``None`` means no default,
            in which case the parameter is omitted.
    """

    name: str
    source: str | None = None
    default: Any = None

    @property
    def tokens(self) -> tuple[str, ...]:
        if not self.source:
            return ()
        return tuple(self.source.split())


@dataclass(frozen=True)
class CommandDescriptor:
    """One entry in a request chain."""

    name: str
    factory: Any
    instance: Any
    params: Mapping[str, ParamSpec] = field(default_factory=dict)
    listeners: Mapping[str, tuple[EventHandler, ...]] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        name: str,
        factory: CommandFactory,
        *,
        params: Mapping[str, ParamSpec] | None = None,
        listeners: Mapping[str, list[EventHandler]] | None = None,
    ) -> CommandDescriptor:
        """Build a descriptor, constructing the command instance once via ``factory(name)``."""
        if not callable(factory):
            msg = f"Command {name!r}: factory {factory!r} is not callable"
            raise ConfigurationError(msg)
        instance = factory(name)
        if not callable(getattr(instance, "execute", None)):
            msg = f"Command {name!r}: {type(instance).__name__} has no execute() method"
            raise ConfigurationError(msg)
        return cls(
            name=name,
            factory=factory,
            instance=instance,
            params=MappingProxyType(dict(params or {})),
            listeners=MappingProxyType(
                {event: tuple(handlers) for event, handlers in (listeners or {}).items()}
            ),
        )

    @property
    def class_name(self) -> str:
        """Qualified class name of the instance, used in explain output."""
        kind = type(self.instance)
        return f"{kind.__module__}.{kind.__qualname__}"


@dataclass(frozen=True)
class Request:
    """A named chain of commands plus caching/explain/internal flags."""

    name: str
    commands: tuple[CommandDescriptor, ...] = ()
    caching: bool = False
    explain: bool = False
    internal: bool = False

    def __post_init__(self) -> None:
        seen: set[str] = set()
        for descriptor in self.commands:
            if descriptor.name in seen:
                msg = f"Request {self.name!r}: duplicate command name {descriptor.name!r}"
                raise ConfigurationError(msg)
            seen.add(descriptor.name)

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def is_caching(self) -> bool:
        return self.caching

    def is_explaining(self) -> bool:
        return self.explain

    def command_names(self) -> list[str]:
        return [d.name for d in self.commands]
