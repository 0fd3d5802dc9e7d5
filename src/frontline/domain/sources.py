"""InputSources: read-only snapshot of the raw request inputs.

The host (CLI, WSGI adapter, test) builds one snapshot per invocation and
hands it to the dispatcher. The core only ever reads from it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any
from urllib.parse import parse_qsl

_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze(values: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if not values:
        return _EMPTY
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class InputSources:
    """Query, form, cookie, session, environment, server, files and argv views."""

    get: Mapping[str, Any] = field(default_factory=dict)
    post: Mapping[str, Any] = field(default_factory=dict)
    cookie: Mapping[str, Any] = field(default_factory=dict)
    session: Mapping[str, Any] = field(default_factory=dict)
    env: Mapping[str, Any] = field(default_factory=dict)
    server: Mapping[str, Any] = field(default_factory=dict)
    files: Mapping[str, Any] = field(default_factory=dict)
    argv: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("get", "post", "cookie", "session", "env", "server", "files"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))
        object.__setattr__(self, "argv", tuple(self.argv))

    def request_value(self, key: str) -> Any | None:
        """Merged GET/POST lookup; the query string wins over the form body."""
        value = self.get.get(key)
        if value is None:
            value = self.post.get(key)
        return value

    def arg(self, index: int) -> str | None:
        if 0 <= index < len(self.argv):
            return self.argv[index]
        return None

    @classmethod
    def from_cli(
        cls,
        argv: Sequence[str],
        *,
        env: Mapping[str, str] | None = None,
        **sources: Mapping[str, Any],
    ) -> InputSources:
        """Snapshot for a command-line invocation."""
        return cls(argv=tuple(argv), env=env or {}, **sources)

    @classmethod
    def from_query_string(
        cls,
        query: str,
        *,
        body: str | None = None,
        **sources: Any,
    ) -> InputSources:
        """Snapshot for a web-style invocation from raw ``a=1&b=2`` strings.

        Repeated keys keep their last value.
        """
        get = dict(parse_qsl(query, keep_blank_values=True))
        post = dict(parse_qsl(body, keep_blank_values=True)) if body else {}
        return cls(get=get, post=post, **sources)


def parse_pairs(pairs: Sequence[str]) -> dict[str, str]:
    """Turn ``["k=v", "flag"]`` into ``{"k": "v", "flag": ""}``."""
    result: dict[str, str] = {}
    for pair in pairs:
        key, _, value = pair.partition("=")
        key = key.strip()
        if key:
            result[key] = value
    return result
