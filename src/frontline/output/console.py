"""Rich Console factory and theme for frontline output.

Consoles render into a StringIO buffer so callers get plain strings back.
In non-TTY environments (tests, pipes) Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

FRONTLINE_THEME = Theme(
    {
        "fl.ok": "bold green",
        "fl.error": "bold red",
        "fl.warning": "bold yellow",
        "fl.request": "bold cyan",
        "fl.flag": "magenta",
        "fl.dim": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=FRONTLINE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def render_requests_table(rows: list[dict[str, Any]]) -> str:
    """Table of configured requests: name, commands and flags."""
    console = create_console()
    table = Table(title="Requests", title_justify="left")
    table.add_column("Request", style="fl.request")
    table.add_column("Commands")
    table.add_column("Flags", style="fl.flag")
    for row in rows:
        flags = [flag for flag in ("caching", "explain", "internal") if row.get(flag)]
        table.add_row(row["name"], ", ".join(row["commands"]) or "-", " ".join(flags))
    console.print(table)
    return get_output(console).rstrip("\n")
