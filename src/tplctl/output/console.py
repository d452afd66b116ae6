"""Rich Console factory and theme for tplctl output.

Consoles render into a StringIO buffer so renderers keep a
``ServiceResult -> str`` contract. Outside a terminal (tests, pipes) Rich
emits no color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

TPL_THEME = Theme(
    {
        "tpl.ok": "bold green",
        "tpl.error": "bold red",
        "tpl.warning": "bold yellow",
        "tpl.op": "bold cyan",
        "tpl.key": "dim",
        "tpl.name": "bold green",
        "tpl.path": "cyan",
        "tpl.script": "cyan",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=TPL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
