"""Shared enums: log categories and dispatch statuses."""

from __future__ import annotations

from enum import StrEnum


class LogCategory(StrEnum):
    """Categories the dispatcher uses when it logs a classified failure.

    Loggers accept any string category; these three are the ones the
    front controller itself emits.
    """

    FATAL = "Fatal Error"
    RECOVERABLE = "Recoverable Error"
    USER = "User Error"


class DispatchStatus(StrEnum):
    """Terminal state of one ``handle_request`` call."""

    COMPLETED = "completed"
    INTERRUPTED = "interrupted"
    FAILED = "failed"
    CACHE_HIT = "cache_hit"
    EXPLAINED = "explained"
    NOT_FOUND = "not_found"
