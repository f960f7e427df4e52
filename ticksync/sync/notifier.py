"""User-visible notifications for sync passes."""
from __future__ import annotations

from typing import Optional, Protocol

from rich.console import Console
from rich.markup import escape


class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class ConsoleNotifier:
    """Prints notices to the terminal with rich styling."""

    def __init__(self, console: Optional[Console] = None, quiet: bool = False):
        self.console = console or Console()
        self.quiet = quiet

    def info(self, message: str) -> None:
        if not self.quiet:
            self.console.print(f"[green]✔[/green] {escape(message)}", highlight=False)

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠[/yellow] {escape(message)}", highlight=False)

    def error(self, message: str) -> None:
        self.console.print(f"[red]✘ {escape(message)}[/red]", highlight=False)
