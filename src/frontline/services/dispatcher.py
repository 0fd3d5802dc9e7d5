"""Dispatcher: the front controller.

``handle_request`` takes an external identifier through these states:

1. **Resolve** the identifier to a request via the request mapper. On a
   miss, log at USER and fall back to the not-found request; if that is
   missing too, return a ``not_found`` result.
2. **Explain**: an explaining request writes its explanation and stops.
3. **Cache check**: a caching request served from the request cache
   writes the cached text and stops; otherwise output is captured.
4. **Context**: reuse the caller's context or build a fresh one.
5. **Command loop**: resolve parameters, attach listeners, execute, and
   act on the returned outcome.
6. **Cache commit** when the loop ran to the end with nothing cancelled.

Forwarding re-enters step 1 with the destination, the *same* context, and
internal requests allowed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from frontline.domain.command import Explainable, Observable
from frontline.domain.context import ExecutionContext
from frontline.domain.errors import RequestNotFoundError
from frontline.domain.outcomes import (
    CONTINUE,
    FatalInterrupt,
    Forward,
    Interrupt,
    Outcome,
    RecoverableError,
    normalize,
)
from frontline.domain.parameters import ParameterResolver
from frontline.domain.sources import InputSources
from frontline.domain.types import DispatchStatus, LogCategory
from frontline.infrastructure.caches import CacheManager
from frontline.infrastructure.datasources import DatasourceManager
from frontline.infrastructure.loggers import LoggerManager
from frontline.services.mapper import NOT_FOUND_REQUEST
from frontline.services.output import OutputChannel
from frontline.services.result import DispatchError, DispatchResult

if TYPE_CHECKING:
    from frontline.config.settings import FrontlineSettings
    from frontline.domain.ports import TextSink
    from frontline.domain.request import CommandDescriptor, Request
    from frontline.plugins.manager import PluginManager
    from frontline.services.registry import Registry

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "request-"
DEFAULT_MAX_FORWARD_DEPTH = 16


class Dispatcher:
    """Runs named requests as chains of commands.

    Parameters:
        registry: Request map and collaborator configuration.
        sources: Input snapshot parameters resolve against.
        output: Output channel, or a text sink to wrap in one. Defaults to
            stdout.
        plugins: Optional plugin manager receiving lifecycle hooks.
        not_found_request: Identifier tried when a request is missing.
        max_forward_depth: Forwards allowed within one ``handle_request``.
    """

    def __init__(
        self,
        registry: Registry,
        *,
        sources: InputSources | None = None,
        output: OutputChannel | TextSink | None = None,
        plugins: PluginManager | None = None,
        not_found_request: str = NOT_FOUND_REQUEST,
        max_forward_depth: int = DEFAULT_MAX_FORWARD_DEPTH,
    ) -> None:
        self.registry = registry
        self.sources = sources or InputSources()
        if isinstance(output, OutputChannel):
            self.output = output
        else:
            self.output = OutputChannel(output)
        self.plugins = plugins
        self.not_found_request = not_found_request
        self.max_forward_depth = max_forward_depth

        self.loggers = LoggerManager(registry.create_loggers())
        self.datasources = DatasourceManager(registry.create_datasources())
        self.caches = CacheManager(registry.create_caches())
        mapper_cls = registry.get_request_mapper()
        self.request_mapper = mapper_cls(
            self.loggers, self.caches, self.datasources, base_url=registry.base_url
        )

        self._context: ExecutionContext | None = None

    @classmethod
    def from_settings(
        cls,
        settings: FrontlineSettings,
        *,
        registry: Registry | None = None,
        **kwargs: Any,
    ) -> Dispatcher:
        """Build a dispatcher from unified settings.

        *registry* is built from the same settings when not given.
        """
        if registry is None:
            from frontline.services.registry import Registry

            registry = Registry.from_config(settings)
        kwargs.setdefault("not_found_request", settings.app.not_found_request)
        kwargs.setdefault("max_forward_depth", settings.app.max_forward_depth)
        return cls(registry, **kwargs)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def context(self) -> ExecutionContext | None:
        """The context used by the most recent dispatch."""
        return self._context

    @staticmethod
    def cache_key(request_name: str) -> str:
        return CACHE_KEY_PREFIX + request_name

    def new_context(self, initial: Mapping[str, Any] | None = None) -> ExecutionContext:
        """A fresh context wired to this dispatcher's collaborators."""
        data = dict(self.registry.initial_context)
        data.update(initial or {})
        return ExecutionContext(
            data,
            loggers=self.loggers,
            datasources=self.datasources,
            caches=self.caches,
            request_mapper=self.request_mapper,
            output=self.output,
        )

    def handle_request(
        self,
        identifier: str = "default",
        context: ExecutionContext | None = None,
        allow_internal: bool = False,
    ) -> DispatchResult:
        """Resolve *identifier* and run its command chain.

        Raises whatever an unclassified command failure raised, after
        logging it at FATAL.
        """
        result = self._dispatch(
            identifier,
            context,
            allow_internal,
            trail=[],
            warnings=[],
            depth=0,
        )
        if result.identifier != identifier:
            # Forwarded: report what the caller asked for, not the last hop.
            result = result.model_copy(update={"identifier": identifier})
        return result

    def explain_request(self, request: Request) -> str:
        """Describe every command in *request* without running any of them."""
        parts = [f"REQUEST: {request.name}\n"]
        for descriptor in request:
            instance = descriptor.instance
            if isinstance(instance, Explainable):
                text = instance.explain()
                parts.append(text if text.endswith("\n") else text + "\n")
            else:
                parts.append(
                    f"CMD: {descriptor.name} ({descriptor.class_name}): "
                    "Unexplainable command, unknown parameters.\n"
                )
        parts.append("\n")
        return "".join(parts)

    def close(self) -> None:
        """Release datasource connections."""
        self.datasources.close()

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _dispatch(
        self,
        identifier: str,
        context: ExecutionContext | None,
        allow_internal: bool,
        *,
        trail: list[str],
        warnings: list[str],
        depth: int,
    ) -> DispatchResult:
        request = self._resolve(identifier, allow_internal)
        if request is None:
            return self._result(
                identifier,
                None,
                DispatchStatus.NOT_FOUND,
                trail,
                warnings,
                error=DispatchError(
                    code="NOT_FOUND",
                    message=f"No request matches {identifier!r}",
                ),
            )
        trail.append(request.name)

        if request.is_explaining():
            self.output.write(self.explain_request(request))
            return self._result(identifier, request.name, DispatchStatus.EXPLAINED, trail, warnings)

        cache_key: str | None = None
        if request.is_caching() and self.caches.has_cache():
            cache_key = self.cache_key(request.name)
            cached = self.caches.get(cache_key)
            if cached is not None:
                logger.debug("Serving %s from request cache", request.name)
                self.output.write(cached)
                return self._result(
                    identifier,
                    request.name,
                    DispatchStatus.CACHE_HIT,
                    trail,
                    warnings,
                    data={"cache_key": cache_key},
                )

        cxt = self._prepare_context(context)
        self._notify("request_started", warnings, request_name=request.name, context=cxt)

        try:
            outcome = self._run_chain(request, cxt, cache_key, warnings)
        except Exception:
            self._notify(
                "request_finished",
                warnings,
                request_name=request.name,
                status=DispatchStatus.FAILED.value,
            )
            raise

        if isinstance(outcome, Forward):
            return self._forward(
                identifier, request, outcome, cxt, trail=trail, warnings=warnings, depth=depth
            )

        if isinstance(outcome, FatalInterrupt):
            status = DispatchStatus.INTERRUPTED
            error: DispatchError | None = DispatchError(
                code="FATAL_INTERRUPT", message=outcome.message
            )
        elif isinstance(outcome, Interrupt):
            status, error = DispatchStatus.INTERRUPTED, None
        else:
            status, error = DispatchStatus.COMPLETED, None

        self._notify("request_finished", warnings, request_name=request.name, status=status.value)
        data = {"cache_key": cache_key} if cache_key else {}
        return self._result(
            identifier, request.name, status, trail, warnings, error=error, data=data
        )

    def _resolve(self, identifier: str, allow_internal: bool) -> Request | None:
        request_name = self.request_mapper.uri_to_request(identifier)
        try:
            return self.registry.get_request(request_name, allow_internal)
        except RequestNotFoundError as exc:
            self.loggers.log(exc, LogCategory.USER)

        fallback = self.request_mapper.uri_to_request(self.not_found_request)
        if self.registry.has_request(fallback, allow_internal):
            return self.registry.get_request(fallback, allow_internal)
        return None

    def _prepare_context(self, context: ExecutionContext | None) -> ExecutionContext:
        if context is None:
            cxt = self.new_context()
        else:
            cxt = context
            cxt.bind(
                loggers=self.loggers,
                datasources=self.datasources,
                caches=self.caches,
                request_mapper=self.request_mapper,
                output=self.output,
            )
        self._context = cxt
        return cxt

    def _run_chain(
        self,
        request: Request,
        cxt: ExecutionContext,
        cache_key: str | None,
        warnings: list[str],
    ) -> Outcome:
        """Execute every command in order and return the outcome that ended the chain."""
        with self.output.capture(enabled=cache_key is not None) as capture:
            for descriptor in request:
                outcome = self._exec_command(descriptor, cxt)
                self._notify(
                    "command_finished",
                    warnings,
                    request_name=request.name,
                    command_name=descriptor.name,
                    outcome=type(outcome).__name__,
                )

                if isinstance(outcome, RecoverableError):
                    capture.cancel()
                    self.loggers.log(
                        f"{request.name}/{descriptor.name}: {outcome.message}",
                        LogCategory.RECOVERABLE,
                    )
                    warnings.append(f"{descriptor.name}: {outcome.message}")
                    continue

                if isinstance(outcome, FatalInterrupt):
                    capture.cancel()
                    self.loggers.log(
                        f"{request.name}/{descriptor.name}: {outcome.message}",
                        LogCategory.FATAL,
                    )
                    return outcome

                if isinstance(outcome, (Interrupt, Forward)):
                    capture.cancel()
                    return outcome

            if capture.cacheable and cache_key is not None:
                self.caches.set(cache_key, capture.text())
        return CONTINUE

    def _exec_command(self, descriptor: CommandDescriptor, cxt: ExecutionContext) -> Outcome:
        """Resolve parameters, attach listeners and execute one command.

        Exceptions escaping ``execute`` are logged at FATAL and re-raised.
        """
        instance = descriptor.instance
        params = ParameterResolver(self.sources, cxt).resolve_params(descriptor.params)
        if descriptor.listeners and isinstance(instance, Observable):
            instance.set_event_handlers({k: list(v) for k, v in descriptor.listeners.items()})

        logger.debug("Executing %s with %s", descriptor.name, sorted(params))
        try:
            return normalize(instance.execute(params, cxt))
        except Exception as exc:
            self.loggers.log(exc, LogCategory.FATAL)
            raise

    def _forward(
        self,
        identifier: str,
        request: Request,
        forward: Forward,
        cxt: ExecutionContext,
        *,
        trail: list[str],
        warnings: list[str],
        depth: int,
    ) -> DispatchResult:
        self._notify(
            "request_forwarded",
            warnings,
            source=request.name,
            destination=forward.destination,
        )
        self._notify(
            "request_finished",
            warnings,
            request_name=request.name,
            status="forwarded",
        )
        if depth >= self.max_forward_depth:
            message = (
                f"Forward from {request.name!r} to {forward.destination!r} exceeds "
                f"the limit of {self.max_forward_depth} forwards"
            )
            self.loggers.log(message, LogCategory.FATAL)
            return self._result(
                identifier,
                request.name,
                DispatchStatus.FAILED,
                trail,
                warnings,
                error=DispatchError(
                    code="FORWARD_LIMIT",
                    message=message,
                    detail={"trail": list(trail)},
                ),
            )
        logger.debug("Forwarding %s -> %s", request.name, forward.destination)
        return self._dispatch(
            forward.destination,
            forward.context if forward.context is not None else cxt,
            True,
            trail=trail,
            warnings=warnings,
            depth=depth + 1,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _notify(self, hook_name: str, warnings: list[str], **payload: Any) -> None:
        if self.plugins is not None:
            self.plugins.notify(hook_name, warnings, **payload)

    @staticmethod
    def _result(
        identifier: str,
        request_name: str | None,
        status: DispatchStatus,
        trail: list[str],
        warnings: list[str],
        *,
        error: DispatchError | None = None,
        data: dict[str, Any] | None = None,
    ) -> DispatchResult:
        return DispatchResult(
            ok=error is None,
            identifier=identifier,
            request=request_name,
            status=status,
            trail=list(trail),
            warnings=list(warnings),
            error=error,
            data=data or {},
        )
