"""Rich Console factory and theme for modelctl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MODELCTL_THEME = Theme(
    {
        "mc.ok": "bold green",
        "mc.error": "bold red",
        "mc.warning": "bold yellow",
        "mc.info": "cyan",
        "mc.op": "bold cyan",
        "mc.key": "dim",
        "mc.path": "dim",
        "mc.kind": "magenta",
        "mc.title": "bold",
    }
)

_SEVERITY_STYLES: dict[str, str] = {
    "error": "mc.error",
    "warning": "mc.warning",
    "info": "mc.info",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=MODELCTL_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_severity(severity: str) -> str:
    """Return the Rich style name for a diagnostic severity."""
    return _SEVERITY_STYLES.get(severity, "")
