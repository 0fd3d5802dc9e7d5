"""Outcome variants returned by ``Command.execute``.

A command returns one of these (or ``None``, which means :class:`Continue`)
and the dispatcher switches on the variant. Anything *raised* out of
``execute`` is an unclassified failure and is treated as fatal.

| Variant            | Chain      | Logged as          |
|--------------------|------------|--------------------|
| Continue           | continues  | -                  |
| Interrupt          | stops      | -                  |
| FatalInterrupt     | stops      | Fatal Error        |
| Forward            | re-dispatch| -                  |
| RecoverableError   | continues  | Recoverable Error  |
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from frontline.domain.context import ExecutionContext


@dataclass(frozen=True)
class Continue:
    """Proceed to the next command."""


@dataclass(frozen=True)
class Interrupt:
    """Stop the chain silently. Not an error."""

    reason: str = ""


@dataclass(frozen=True)
class FatalInterrupt:
    """Stop the chain and record the reason at FATAL."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Forward:
    """Abandon this chain and re-dispatch to *destination*.

    *context* defaults to the live context of the current chain, so state
    written so far stays visible to the destination request.
    """

    destination: str
    context: ExecutionContext | None = None


@dataclass(frozen=True)
class RecoverableError:
    """The command failed but the chain should carry on without it."""

    message: str
    detail: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


Outcome = Continue | Interrupt | FatalInterrupt | Forward | RecoverableError

CONTINUE = Continue()


def normalize(outcome: Outcome | None) -> Outcome:
    """Map a command's return value onto an outcome variant.

    ``None`` is the common "nothing to report" return and means continue.
    """
    if outcome is None:
        return CONTINUE
    if isinstance(outcome, (Continue, Interrupt, FatalInterrupt, Forward, RecoverableError)):
        return outcome
    msg = f"Command returned {type(outcome).__name__}, expected an outcome or None"
    raise TypeError(msg)
