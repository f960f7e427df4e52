"""Handler for showing and changing sync settings."""
from typing import Any, Dict

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ..sync.store import document_path
from ..utils.config import Settings, save_settings, settings_path

console = Console()

_SECRET_FIELDS = {"access_token", "refresh_token", "client_secret", "auth_code"}


def _display_value(key: str, value: Any) -> str:
    if key in _SECRET_FIELDS:
        return "•••" if value else ""
    if isinstance(value, list):
        return ", ".join(value) or "-"
    return str(value)


def handle_config(settings: Settings, updates: Dict[str, Any]) -> None:
    """Apply any given updates, persist them, then print the effective settings."""
    changes = {k: v for k, v in updates.items() if v is not None}
    if changes:
        try:
            for key, value in changes.items():
                setattr(settings, key, value)
        except ValidationError as e:
            console.print(f"[red]Invalid setting: {e.errors()[0]['msg']}[/red]")
            raise typer.Exit(code=1)
        save_settings(settings)
        console.print(f"Saved {len(changes)} setting(s) to {settings_path()}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key, value in settings.model_dump().items():
        table.add_row(key, _display_value(key, value))
    table.add_row("target document", document_path(settings.target_page_path))
    console.print(table)
