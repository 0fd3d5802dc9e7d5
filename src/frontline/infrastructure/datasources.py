"""Datasources: named handles to external data stores.

The dispatcher treats datasources as opaque; commands fetch them through
``context.datasource(name)``. The bundled backend wraps a SQLAlchemy
engine created lazily on first use.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine

from frontline.domain.errors import DatasourceNotFoundError

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


class SqlDatasource:
    """SQLAlchemy-backed datasource.

    Parameters:
        name: Datasource name from configuration.
        url: SQLAlchemy database URL, e.g. ``sqlite:///app.db``.
        default: Whether this is the default datasource.
        echo: Forwarded to :func:`sqlalchemy.create_engine`.
    """

    def __init__(self, name: str, *, url: str, default: bool = False, echo: bool = False) -> None:
        self.name = name
        self.url = url
        self.is_default = default
        self._echo = echo
        self._engine: Engine | None = None

    def get(self) -> Engine:
        """The engine (created on first access)."""
        if self._engine is None:
            logger.debug("Opening datasource %s", self.name)
            self._engine = create_engine(self.url, echo=self._echo)
        return self._engine

    @property
    def engine(self) -> Engine:
        return self.get()

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None


BUILTIN_DATASOURCES: dict[str, type] = {
    "sql": SqlDatasource,
}


class DatasourceManager:
    """Lookup of configured datasources by name, with a default."""

    def __init__(self, datasources: Mapping[str, Any] | None = None) -> None:
        self._datasources: dict[str, Any] = dict(datasources or {})

    def datasource(self, name: str | None = None) -> Any:
        if name is None:
            default = self.default_datasource()
            if default is None:
                msg = "No default datasource is configured"
                raise DatasourceNotFoundError(msg)
            return default
        try:
            return self._datasources[name]
        except KeyError:
            msg = f"Datasource {name!r} not found"
            raise DatasourceNotFoundError(msg) from None

    def default_datasource(self) -> Any | None:
        for source in self._datasources.values():
            if getattr(source, "is_default", False):
                return source
        return next(iter(self._datasources.values()), None)

    def names(self) -> list[str]:
        return list(self._datasources)

    def close(self) -> None:
        """Close every datasource that supports it."""
        for source in self._datasources.values():
            closer = getattr(source, "close", None)
            if callable(closer):
                try:
                    closer()
                except Exception:
                    logger.warning("Failed to close datasource %r", source, exc_info=True)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._datasources.values())

    def __len__(self) -> int:
        return len(self._datasources)
