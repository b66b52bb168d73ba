"""Rich console notifications."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from todosync.engine.notify import Notifier


class RichNotifier(Notifier):
    """Prints notifications to stderr, colored by severity."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)

    def info(self, message: str) -> None:
        self._console.print(escape(message))

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]warning:[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        self._console.print(f"[red]error:[/red] {escape(message)}")
