"""Registry: the request map and collaborator configuration.

The registry is built once per process (from ``frontline.toml`` or in
code) and handed to the :class:`~frontline.services.dispatcher.Dispatcher`.
There is no global instance.

Usage::

    registry = Registry()
    (
        registry.request("home", caching=True)
        .command("load", LoadPage)
        .param("slug", source="get:page arg:1", default="index")
        .command("render", RenderPage)
        .listener("rendered", on_rendered)
    )
    registry.cache("pages", "memory", default=True)

Class references may be objects or strings: a builtin alias for backends
(``"memory"``, ``"structlog"``, ``"sql"``) or a ``"module:attr"`` path.
Strings are imported lazily when the request is first resolved, and each
built :class:`Request` is kept for reuse.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from frontline.domain.errors import ConfigurationError, RequestNotFoundError
from frontline.domain.request import CommandDescriptor, ParamSpec, Request
from frontline.infrastructure.caches import BUILTIN_CACHES
from frontline.infrastructure.datasources import BUILTIN_DATASOURCES
from frontline.infrastructure.loggers import BUILTIN_LOGGERS
from frontline.services.mapper import RequestMapper

if TYPE_CHECKING:
    from frontline.config.models import FrontlineConfig

logger = logging.getLogger(__name__)


def import_string(ref: Any, builtins: Mapping[str, Any] | None = None) -> Any:
    """Resolve *ref* to an object.

    Non-string refs are returned unchanged. Strings are looked up in
    *builtins* first, then imported as ``module:attr`` (or ``module.attr``).
    """
    if not isinstance(ref, str):
        return ref
    if builtins and ref in builtins:
        return builtins[ref]
    if ":" in ref:
        module_name, _, attr = ref.partition(":")
    else:
        module_name, _, attr = ref.rpartition(".")
    if not module_name or not attr:
        msg = f"Cannot resolve {ref!r}: expected 'module:attr'"
        raise ConfigurationError(msg)
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import module {module_name!r} for {ref!r}: {exc}"
        raise ConfigurationError(msg) from exc
    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            msg = f"Module {module_name!r} has no attribute {attr!r}"
            raise ConfigurationError(msg) from None
    return target


# ---------------------------------------------------------------------------
# Backend specs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BackendSpec:
    """A logger, cache or datasource waiting to be constructed."""

    factory: Any
    params: dict[str, Any] = field(default_factory=dict)

    def create(self, name: str, builtins: Mapping[str, Any]) -> Any:
        factory = import_string(self.factory, builtins)
        try:
            return factory(name, **self.params)
        except TypeError as exc:
            msg = f"Cannot construct backend {name!r} from {self.factory!r}: {exc}"
            raise ConfigurationError(msg) from exc


def _instantiate(specs: Mapping[str, BackendSpec], builtins: Mapping[str, Any]) -> dict[str, Any]:
    return {name: spec.create(name, builtins) for name, spec in specs.items()}


# ---------------------------------------------------------------------------
# Request builder
# ---------------------------------------------------------------------------


@dataclass
class _PendingCommand:
    name: str
    factory: Any
    params: dict[str, ParamSpec] = field(default_factory=dict)
    listeners: dict[str, list[Any]] = field(default_factory=dict)


class RequestBuilder:
    """Fluent description of one request; ``build()`` produces the Request."""

    def __init__(
        self,
        name: str,
        *,
        caching: bool = False,
        explain: bool = False,
        internal: bool = False,
    ) -> None:
        self.name = name
        self.caching = caching
        self.explain = explain
        self.internal = internal
        self._commands: list[_PendingCommand] = []

    def command(self, name: str, factory: Any) -> RequestBuilder:
        """Append a command; *factory* is called once with the command name."""
        if any(pending.name == name for pending in self._commands):
            msg = f"Request {self.name!r}: duplicate command name {name!r}"
            raise ConfigurationError(msg)
        self._commands.append(_PendingCommand(name=name, factory=factory))
        return self

    def param(self, name: str, source: str | None = None, default: Any = None) -> RequestBuilder:
        """Declare a parameter on the most recently added command."""
        self._last("param").params[name] = ParamSpec(name=name, source=source, default=default)
        return self

    def listener(self, event: str, handler: Any) -> RequestBuilder:
        """Attach *handler* to *event* on the most recently added command."""
        self._last("listener").listeners.setdefault(event, []).append(handler)
        return self

    def set_caching(self, flag: bool = True) -> RequestBuilder:
        self.caching = flag
        return self

    def set_explain(self, flag: bool = True) -> RequestBuilder:
        self.explain = flag
        return self

    @property
    def command_names(self) -> list[str]:
        return [pending.name for pending in self._commands]

    def build(self) -> Request:
        descriptors = []
        for pending in self._commands:
            listeners = {
                event: [import_string(handler) for handler in handlers]
                for event, handlers in pending.listeners.items()
            }
            descriptors.append(
                CommandDescriptor.create(
                    pending.name,
                    import_string(pending.factory),
                    params=pending.params,
                    listeners=listeners,
                )
            )
        return Request(
            name=self.name,
            commands=tuple(descriptors),
            caching=self.caching,
            explain=self.explain,
            internal=self.internal,
        )

    def _last(self, what: str) -> _PendingCommand:
        if not self._commands:
            msg = f"Request {self.name!r}: {what}() called before any command()"
            raise ConfigurationError(msg)
        return self._commands[-1]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class Registry:
    """Request map plus logger/cache/datasource/request-mapper configuration."""

    def __init__(
        self,
        *,
        initial_context: Mapping[str, Any] | None = None,
        base_url: str = "/",
    ) -> None:
        self._builders: dict[str, RequestBuilder] = {}
        self._built: dict[str, Request] = {}
        self._loggers: dict[str, BackendSpec] = {}
        self._caches: dict[str, BackendSpec] = {}
        self._datasources: dict[str, BackendSpec] = {}
        self._request_mapper: Any = RequestMapper
        self.initial_context: dict[str, Any] = dict(initial_context or {})
        self.base_url = base_url

    # --- requests -------------------------------------------------------

    def request(
        self,
        name: str,
        *,
        caching: bool = False,
        explain: bool = False,
        internal: bool = False,
    ) -> RequestBuilder:
        """Start (or replace) the definition of request *name*."""
        builder = RequestBuilder(name, caching=caching, explain=explain, internal=internal)
        self._builders[name] = builder
        self._built.pop(name, None)
        return builder

    def add_request(self, request: Request) -> None:
        """Register an already-built request."""
        self._builders.pop(request.name, None)
        self._built[request.name] = request

    def has_request(self, name: str, allow_internal: bool = False) -> bool:
        internal = self._is_internal(name)
        if internal is None:
            return False
        return allow_internal or not internal

    def get_request(self, name: str, allow_internal: bool = False) -> Request:
        """Return the built request, raising RequestNotFoundError when unavailable."""
        internal = self._is_internal(name)
        if internal is None:
            raise RequestNotFoundError(name)
        if internal and not allow_internal:
            raise RequestNotFoundError(name, internal=True)
        request = self._built.get(name)
        if request is None:
            request = self._builders[name].build()
            self._built[name] = request
            logger.debug("Built request %s with %d commands", name, len(request))
        return request

    def request_names(self) -> list[str]:
        names = list(self._built)
        names.extend(n for n in self._builders if n not in self._built)
        return names

    def describe(self, name: str) -> dict[str, Any]:
        """Summary of a request without importing its command classes."""
        request = self._built.get(name)
        if request is not None:
            return {
                "name": name,
                "commands": request.command_names(),
                "caching": request.caching,
                "explain": request.explain,
                "internal": request.internal,
            }
        builder = self._builders.get(name)
        if builder is None:
            raise RequestNotFoundError(name)
        return {
            "name": name,
            "commands": builder.command_names,
            "caching": builder.caching,
            "explain": builder.explain,
            "internal": builder.internal,
        }

    def _is_internal(self, name: str) -> bool | None:
        if name in self._built:
            return self._built[name].internal
        if name in self._builders:
            return self._builders[name].internal
        return None

    # --- collaborators --------------------------------------------------

    def logger(self, name: str, factory: Any, **params: Any) -> Registry:
        self._loggers[name] = BackendSpec(factory, params)
        return self

    def cache(self, name: str, factory: Any, **params: Any) -> Registry:
        self._caches[name] = BackendSpec(factory, params)
        return self

    def datasource(self, name: str, factory: Any, **params: Any) -> Registry:
        self._datasources[name] = BackendSpec(factory, params)
        return self

    def set_request_mapper(self, factory: Any) -> Registry:
        self._request_mapper = factory
        return self

    def get_loggers(self) -> dict[str, BackendSpec]:
        return dict(self._loggers)

    def get_caches(self) -> dict[str, BackendSpec]:
        return dict(self._caches)

    def get_datasources(self) -> dict[str, BackendSpec]:
        return dict(self._datasources)

    def get_request_mapper(self) -> Any:
        return import_string(self._request_mapper)

    def create_loggers(self) -> dict[str, Any]:
        return _instantiate(self._loggers, BUILTIN_LOGGERS)

    def create_caches(self) -> dict[str, Any]:
        return _instantiate(self._caches, BUILTIN_CACHES)

    def create_datasources(self) -> dict[str, Any]:
        return _instantiate(self._datasources, BUILTIN_DATASOURCES)

    # --- construction from config --------------------------------------

    @classmethod
    def from_config(cls, config: FrontlineConfig) -> Registry:
        """Build a registry from a FrontlineConfig (or FrontlineSettings).

        Nothing is imported here; class paths resolve on first use.
        """
        registry = cls(initial_context=config.context, base_url=config.app.base_url)
        if config.request_mapper:
            registry.set_request_mapper(config.request_mapper)
        for name, backend in config.loggers.items():
            registry.logger(name, backend.invokes, **backend.params)
        for name, backend in config.caches.items():
            registry.cache(name, backend.invokes, **backend.params)
        for name, backend in config.datasources.items():
            registry.datasource(name, backend.invokes, **backend.params)
        for name, request_config in config.requests.items():
            builder = registry.request(
                name,
                caching=request_config.caching,
                explain=request_config.explain,
                internal=request_config.internal,
            )
            for command in request_config.commands:
                builder.command(command.name, command.invokes)
                for param_name, param in command.params.items():
                    builder.param(param_name, source=param.from_, default=param.value)
                for event, handlers in command.listeners.items():
                    for handler in handlers:
                        builder.listener(event, handler)
        return registry
