"""Formatting of DispatchResult for the CLI.

``--json`` gives the full model, ``--quiet`` only errors, and the default
human mode a one-line status plus forward trail and warnings.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.markup import escape

from frontline.output.console import create_console, get_output

if TYPE_CHECKING:
    from frontline.services.result import DispatchResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode flags copied from the CLI settings."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def result_payload(result: DispatchResult, **extra: Any) -> dict[str, Any]:
    """JSON-ready dict of *result*, with optional extra top-level keys."""
    payload = result.model_dump(mode="json")
    payload.update(extra)
    return payload


def format_result(
    result: DispatchResult,
    *,
    settings: OutputSettings | None = None,
    **extra: Any,
) -> str:
    """Format a DispatchResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return _json.dumps(result_payload(result, **extra), indent=2)
    if not result.ok:
        message = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.identifier}: {message}"
    if settings.quiet:
        return ""

    console = create_console()
    name = escape(str(result.request))
    console.print(f"[fl.ok]OK[/]: [fl.request]{name}[/] ({result.status.value})")
    if result.forwarded:
        console.print(f"  [fl.dim]trail:[/] {escape(' -> '.join(result.trail))}")
    if settings.verbose and result.data:
        for key, value in result.data.items():
            console.print(f"  [fl.dim]{key}:[/] {escape(str(value))}")
    for warning in result.warnings:
        console.print(f"  [fl.warning]WARNING[/]: {escape(warning)}")
    return get_output(console).rstrip("\n")
