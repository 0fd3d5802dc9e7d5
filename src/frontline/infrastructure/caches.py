"""Cache backends and the cache manager used for request-level caching."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator, Mapping
from typing import Any

logger = logging.getLogger(__name__)


class MemoryCache:
    """Process-local dict cache with optional per-entry TTL (seconds).

    Expiry uses the monotonic clock, so wall-clock changes do not affect it.
    """

    def __init__(
        self,
        name: str,
        *,
        default: bool = False,
        ttl: float | None = None,
    ) -> None:
        self.name = name
        self.is_default = default
        self.default_ttl = ttl
        self._entries: dict[str, tuple[Any, float | None]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires = entry
        if expires is not None and time.monotonic() >= expires:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = ttl if ttl is not None else self.default_ttl
        expires = time.monotonic() + ttl if ttl is not None else None
        self._entries[key] = (value, expires)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


BUILTIN_CACHES: dict[str, type] = {
    "memory": MemoryCache,
}


class CacheManager:
    """Front for the configured caches.

    Operations without an explicit *cache* name go to the default cache:
    the first one flagged ``is_default``, otherwise the first configured.
    """

    def __init__(self, caches: Mapping[str, Any] | None = None) -> None:
        self._caches: dict[str, Any] = dict(caches or {})

    def has_cache(self) -> bool:
        return bool(self._caches)

    def default_cache(self) -> Any | None:
        for cache in self._caches.values():
            if getattr(cache, "is_default", False):
                return cache
        return next(iter(self._caches.values()), None)

    def get_cache(self, name: str | None = None) -> Any | None:
        if name is None:
            return self.default_cache()
        return self._caches.get(name)

    def get(self, key: str, cache: str | None = None) -> Any | None:
        backend = self.get_cache(cache)
        if backend is None:
            return None
        return backend.get(key)

    def set(self, key: str, value: Any, ttl: float | None = None, cache: str | None = None) -> None:
        backend = self.get_cache(cache)
        if backend is None:
            logger.debug("No cache configured; dropping write for %s", key)
            return
        backend.set(key, value, ttl)

    def delete(self, key: str, cache: str | None = None) -> None:
        backend = self.get_cache(cache)
        if backend is not None:
            backend.delete(key)

    def clear(self) -> None:
        for backend in self._caches.values():
            backend.clear()

    def names(self) -> list[str]:
        return list(self._caches)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._caches.values())

    def __len__(self) -> int:
        return len(self._caches)
