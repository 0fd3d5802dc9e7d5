"""DispatchResult and DispatchError: what the front controller hands back.

The CLI (and any other host) reads the status to decide what to emit:
HTTP-style not-found, exit codes, JSON payloads.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from frontline.domain.types import DispatchStatus


class DispatchError(BaseModel):
    """Structured error payload within a DispatchResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class DispatchResult(BaseModel):
    """Terminal state of one ``handle_request`` call.

    Attributes:
        ok: False for not-found, fatal interrupts and forward-limit failures.
        identifier: What the caller asked for, before request mapping.
        request: Name of the last request that ran (after forwards), or
            None when nothing could be resolved.
        status: How the dispatch ended.
        trail: Every request entered, in order. Longer than one entry
            when commands forwarded.
        warnings: Recoverable errors and plugin failures seen on the way.
        error: Set when ``ok`` is False.
        data: Extra facts, e.g. the cache key used.
    """

    model_config = {"frozen": True}

    ok: bool
    identifier: str
    request: str | None = None
    status: DispatchStatus
    trail: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error: DispatchError | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def forwarded(self) -> bool:
        return len(self.trail) > 1
