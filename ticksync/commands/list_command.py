"""Handlers for listing TickTick projects and choosing which ones to sync."""
import json
from typing import List

import requests
import typer
from rich.console import Console
from rich.table import Table

from ..ticktick_api.client import TickTickAPIError
from ..utils.config import Settings, save_settings
from .sync_command import build_client, require_connection

console = Console()


def handle_list_projects(settings: Settings, json_output: bool = False) -> None:
    require_connection(settings)
    try:
        projects = build_client(settings).get_projects()
    except (TickTickAPIError, requests.RequestException) as e:
        console.print(f"[red]Failed to list projects: {e}[/red]")
        raise typer.Exit(code=1)

    selected = set(settings.selected_projects)
    if json_output:
        print(json.dumps(
            [{"id": p.id, "name": p.name, "closed": bool(p.closed), "selected": p.id in selected} for p in projects],
            indent=2,
        ))
        return

    if not projects:
        print("No projects found.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan")
    table.add_column("Project", style="green")
    table.add_column("Synced", style="magenta")
    for project in projects:
        table.add_row(project.id, project.name, "✓" if project.id in selected else "")
    console.print(table)


def handle_select_projects(settings: Settings, project_ids: List[str]) -> None:
    """Replace the set of synced projects, keeping the given order and dropping duplicates."""
    settings.selected_projects = list(dict.fromkeys(pid.strip() for pid in project_ids if pid.strip()))
    save_settings(settings)
    if settings.selected_projects:
        console.print(f"Syncing {len(settings.selected_projects)} project(s): {', '.join(settings.selected_projects)}")
    else:
        console.print("No projects selected; pull will do nothing until some are chosen.")
