"""ExecutionContext: shared state for one external invocation.

The context travels from command to command, and across forwards, during
a single call into the dispatcher. Commands use it to:

- share data with later commands (``add`` / ``get``),
- log through the configured loggers (``log``),
- reach datasources and caches,
- write output (``write``), which the dispatcher may capture for the
  request-level cache.

Mutable built-in containers are copied on ``get`` so a caller cannot
change stored state by accident; to change a value, ``add`` it back.
Other objects are returned as the stored handle.
"""

from __future__ import annotations

import copy
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from frontline.domain.errors import DatasourceNotFoundError

if TYPE_CHECKING:
    from frontline.domain.ports import (
        CacheStore,
        DatasourceProvider,
        LogSink,
        RequestMapping,
        TextSink,
    )

_COPY_ON_READ = (dict, list, set, bytearray)


class ExecutionContext:
    """Ordered name/value store plus handles to the dispatcher's collaborators."""

    def __init__(
        self,
        initial: Mapping[str, Any] | ExecutionContext | None = None,
        *,
        loggers: LogSink | None = None,
        datasources: DatasourceProvider | None = None,
        caches: CacheStore | None = None,
        request_mapper: RequestMapping | None = None,
        output: TextSink | None = None,
    ) -> None:
        if isinstance(initial, ExecutionContext):
            self._data: dict[str, Any] = initial.to_dict()
        else:
            self._data = dict(initial or {})
        self._loggers = loggers
        self._datasources = datasources
        self._caches = caches
        self._request_mapper = request_mapper
        self.output = output

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def has(self, name: str) -> bool:
        return name in self._data

    def get(self, name: str, default: Any = None) -> Any:
        """Return the value stored under *name*, or *default* when absent."""
        if name not in self._data:
            return default
        value = self._data[name]
        if isinstance(value, _COPY_ON_READ):
            return copy.copy(value)
        return value

    def add(self, name: str, value: Any) -> None:
        """Store *value* under *name*, replacing any existing entry."""
        self._data[name] = value

    def add_all(self, values: Mapping[str, Any]) -> None:
        """Merge *values* in; keys already in the context keep their value."""
        for name, value in values.items():
            self._data.setdefault(name, value)

    def remove(self, name: str) -> None:
        self._data.pop(name, None)

    def size(self) -> int:
        return len(self._data)

    def to_dict(self) -> dict[str, Any]:
        """Shallow copy of all entries in insertion order."""
        return dict(self._data)

    def from_dict(self, values: Mapping[str, Any]) -> None:
        """Replace every entry with *values*."""
        self._data = dict(values)

    def items(self) -> Iterator[tuple[str, Any]]:
        return iter(list(self._data.items()))

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, name: object) -> bool:
        return name in self._data

    def __repr__(self) -> str:
        return f"ExecutionContext({list(self._data)!r})"

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    def log(self, message: Any, category: str) -> None:
        """Pass *message* to the configured loggers. No-op without loggers."""
        if self._loggers is not None:
            self._loggers.log(message, category)

    def datasource(self, name: str | None = None) -> Any:
        """Return the named datasource, or the default one when *name* is None."""
        if self._datasources is None:
            msg = "No datasources are configured"
            raise DatasourceNotFoundError(msg)
        return self._datasources.datasource(name)

    ds = datasource

    def write(self, text: str) -> None:
        """Send *text* to the request's output channel."""
        if self.output is not None:
            self.output.write(text)

    @property
    def loggers(self) -> LogSink | None:
        return self._loggers

    @property
    def datasources(self) -> DatasourceProvider | None:
        return self._datasources

    @property
    def caches(self) -> CacheStore | None:
        return self._caches

    @property
    def request_mapper(self) -> RequestMapping | None:
        return self._request_mapper

    def bind(
        self,
        *,
        loggers: LogSink | None = None,
        datasources: DatasourceProvider | None = None,
        caches: CacheStore | None = None,
        request_mapper: RequestMapping | None = None,
        output: TextSink | None = None,
    ) -> None:
        """Attach collaborators that are not set yet.

        Used when a caller hands the dispatcher a bare context.
        """
        if self._loggers is None:
            self._loggers = loggers
        if self._datasources is None:
            self._datasources = datasources
        if self._caches is None:
            self._caches = caches
        if self._request_mapper is None:
            self._request_mapper = request_mapper
        if self.output is None:
            self.output = output
