"""Parameter resolution.

Each command parameter declares a fallback chain of ``source:key`` tokens,
for example ``"get:id post:id arg:1"``. Tokens are tried in order and the
first non-absent value wins. If all are absent the configured default is
used; with no default the parameter is left out of the mapping entirely.

Source tags are case-insensitive:

=========  ==============================
Source     Aliases
=========  ==============================
get        ``g``
post       ``p``
cookie     ``c``, ``cookies``
session    ``s``
context    ``x``, ``cmd``, ``cxt``
env        ``e``, ``environment``
server     -
request    ``r`` (GET, then POST)
argv       ``a``, ``arg`` (key is a 0-based index)
files      ``f``, ``file``
=========  ==============================

Unknown tags and malformed tokens resolve to absent.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from frontline.domain.context import ExecutionContext
    from frontline.domain.request import ParamSpec
    from frontline.domain.sources import InputSources

logger = logging.getLogger(__name__)

SOURCE_ALIASES: dict[str, str] = {
    "g": "get",
    "get": "get",
    "p": "post",
    "post": "post",
    "c": "cookie",
    "cookie": "cookie",
    "cookies": "cookie",
    "s": "session",
    "session": "session",
    "x": "context",
    "cmd": "context",
    "cxt": "context",
    "context": "context",
    "e": "env",
    "env": "env",
    "environment": "env",
    "server": "server",
    "r": "request",
    "request": "request",
    "a": "argv",
    "arg": "argv",
    "argv": "argv",
    "f": "files",
    "file": "files",
    "files": "files",
}


def split_token(token: str) -> tuple[str, str] | None:
    """Split ``"get:id"`` into ``("get", "id")``; None if there is no source tag."""
    proto, sep, key = token.partition(":")
    if not sep:
        return None
    source = SOURCE_ALIASES.get(proto.strip().lower())
    if source is None:
        return None
    return source, key


class ParameterResolver:
    """Resolve parameter specs against an input snapshot and a live context."""

    def __init__(self, sources: InputSources, context: ExecutionContext) -> None:
        self._sources = sources
        self._context = context

    def resolve(self, token: str) -> Any | None:
        """Resolve one ``source:key`` token. Returns None when absent."""
        parsed = split_token(token)
        if parsed is None:
            logger.debug("Unresolvable parameter source %r", token)
            return None
        source, key = parsed
        if source == "context":
            return self._context.get(key)
        if source == "request":
            return self._sources.request_value(key)
        if source == "argv":
            try:
                index = int(key)
            except ValueError:
                return None
            return self._sources.arg(index)
        view: Mapping[str, Any] = getattr(self._sources, source)
        return view.get(key)

    def resolve_chain(self, tokens: Iterable[str]) -> Any | None:
        """Return the first non-absent value among *tokens*, tried in order."""
        for token in tokens:
            value = self.resolve(token)
            if value is not None:
                return value
        return None

    def resolve_params(self, specs: Mapping[str, ParamSpec]) -> dict[str, Any]:
        """Build the parameter mapping for one command execution.

        Always computed fresh: nothing is cached between executions.
        """
        params: dict[str, Any] = {}
        for name, spec in specs.items():
            value = self.resolve_chain(spec.tokens)
            if value is None:
                value = spec.default
            if value is not None:
                params[name] = value
        return params
