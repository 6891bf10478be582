"""
Console styling helpers built on rich.

Usage:
    import FontOrganizerCore.core_console_styles as cs

    cs.StatusIndicator("updated").add_file("font.otf").add_message("→ Family/").emit()
    cs.print_panel("Files: 12", title="Summary", border_style="green")
"""

from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.theme import Theme

THEME = Theme(
    {
        "info": "cyan",
        "updated": "green",
        "warning": "yellow",
        "error": "bold red",
        "skipped": "dim yellow",
        "file": "bold",
        "count": "bold magenta",
        "dry": "dim",
        "explanation": "italic",
    }
)

STATUS_LABELS = {
    "info": "INFO",
    "updated": "UPDATED",
    "warning": "WARNING",
    "error": "ERROR",
    "skipped": "SKIPPED",
}

INDENT = "  "

_console: Optional[Console] = None


def get_console() -> Console:
    global _console
    if _console is None:
        _console = Console(theme=THEME, highlight=False)
    return _console


def emit(message: str = "") -> None:
    get_console().print(message)


def indent(level: int = 1) -> str:
    return INDENT * level


def fmt_count(value: int) -> str:
    return f"[count]{value:,}[/count]"


def fmt_value(value) -> str:
    return escape(str(value))


def fmt_file(path: str) -> str:
    return f"[file]{escape(path)}[/file]"


def print_panel(text: str, title: str = "", border_style: str = "blue") -> None:
    get_console().print(Panel(text, title=title, border_style=border_style, expand=False))


class StatusIndicator:
    """Builder for one status line: label, optional file, message, explanation"""

    def __init__(self, status: str, dry_run: bool = False):
        self.status = status
        self.dry_run = dry_run
        self._file: Optional[str] = None
        self._messages: List[str] = []
        self._explanation: Optional[str] = None

    def add_file(self, filename: str) -> "StatusIndicator":
        self._file = filename
        return self

    def add_message(self, message: str) -> "StatusIndicator":
        self._messages.append(message)
        return self

    def with_explanation(self, explanation: str) -> "StatusIndicator":
        self._explanation = explanation
        return self

    def render(self) -> str:
        style = self.status if self.status in STATUS_LABELS else "info"
        label = STATUS_LABELS.get(self.status, self.status.upper())
        parts = []
        if self.dry_run:
            parts.append("[dry]DRY[/dry]")
        parts.append(f"[{style}]{label}[/{style}]")
        if self._file:
            parts.append(fmt_file(self._file))
        parts.extend(self._messages)
        if self._explanation:
            parts.append(f"[explanation]{escape(self._explanation)}[/explanation]")
        return " ".join(parts)

    def emit(self) -> None:
        get_console().print(self.render())
