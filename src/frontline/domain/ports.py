"""Collaborator contracts the execution context and dispatcher rely on.

Concrete implementations live in :mod:`frontline.infrastructure` and
:mod:`frontline.services`; the domain only sees these protocols.
"""

from __future__ import annotations

from typing import Any, Protocol


class LogSink(Protocol):
    def log(self, message: Any, category: str) -> None: ...


class CacheStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl: float | None = None) -> None: ...


class DatasourceProvider(Protocol):
    def datasource(self, name: str | None = None) -> Any: ...


class RequestMapping(Protocol):
    def uri_to_request(self, identifier: str) -> str: ...


class TextSink(Protocol):
    def write(self, text: str) -> Any: ...
