"""Logger backends and the manager that fans messages out to them.

Every backend accepts ``log(message, category)`` where *message* is a
string or an exception. A backend configured with ``categories`` only
records messages in those categories.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import structlog

from frontline.domain.types import LogCategory

_CATEGORY_LEVELS: dict[str, int] = {
    LogCategory.FATAL: logging.ERROR,
    LogCategory.RECOVERABLE: logging.WARNING,
    LogCategory.USER: logging.INFO,
}


def format_message(message: Any) -> str:
    """Render an exception as ``Type: message``; anything else via ``str``."""
    if isinstance(message, BaseException):
        text = str(message)
        name = type(message).__name__
        return f"{name}: {text}" if text else name
    return str(message)


class BaseLogger:
    """Category filtering shared by the concrete backends."""

    def __init__(self, name: str, *, categories: Iterable[str] | None = None) -> None:
        self.name = name
        self.categories: frozenset[str] | None = frozenset(categories) if categories else None

    def is_logging_category(self, category: str) -> bool:
        return self.categories is None or category in self.categories

    def log(self, message: Any, category: str) -> None:
        if self.is_logging_category(category):
            self.write(message, category)

    def write(self, message: Any, category: str) -> None:
        raise NotImplementedError


class StructlogLogger(BaseLogger):
    """Routes messages to structlog; the category picks the level."""

    def __init__(
        self,
        name: str,
        *,
        categories: Iterable[str] | None = None,
        logger_name: str = "frontline.dispatch",
    ) -> None:
        super().__init__(name, categories=categories)
        self._log = structlog.get_logger(logger_name)

    def write(self, message: Any, category: str) -> None:
        level = _CATEGORY_LEVELS.get(category, logging.INFO)
        fields: dict[str, Any] = {"category": category, "logger_backend": self.name}
        if isinstance(message, BaseException):
            fields["exc_info"] = message
        self._log.log(level, format_message(message), **fields)


class MemoryLogger(BaseLogger):
    """Keeps formatted messages in memory. Useful in tests and for debug pages."""

    def __init__(self, name: str, *, categories: Iterable[str] | None = None) -> None:
        super().__init__(name, categories=categories)
        self.entries: list[tuple[str, str]] = []

    def write(self, message: Any, category: str) -> None:
        self.entries.append((category, format_message(message)))

    @property
    def messages(self) -> list[str]:
        return [f"{category}: {text}" for category, text in self.entries]

    def clear(self) -> None:
        self.entries.clear()


BUILTIN_LOGGERS: dict[str, type[BaseLogger]] = {
    "structlog": StructlogLogger,
    "memory": MemoryLogger,
}


class LoggerManager:
    """Fans each message out to every configured logger.

    With no loggers configured, a :class:`StructlogLogger` named
    ``default`` is installed so failures are never silently dropped.
    """

    def __init__(self, loggers: Mapping[str, Any] | None = None) -> None:
        self._loggers: dict[str, Any] = dict(loggers or {})
        if not self._loggers:
            self._loggers["default"] = StructlogLogger("default")

    def log(self, message: Any, category: str) -> None:
        for logger in self._loggers.values():
            logger.log(message, category)

    def get_logger(self, name: str) -> Any | None:
        return self._loggers.get(name)

    def names(self) -> list[str]:
        return list(self._loggers)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._loggers.values())

    def __len__(self) -> int:
        return len(self._loggers)
