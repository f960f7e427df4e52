"""Handler for creating a single TickTick task from the command line."""
from typing import List, Optional

import dateparser
import requests
import typer
from rich.console import Console
from thefuzz import process

from ..sync.dates import to_api_datetime
from ..ticktick_api.client import TickTickAPIError
from ..ticktick_api.data_models import Priority, Project
from ..utils.config import Settings
from .sync_command import build_client, require_connection

console = Console()

PRIORITY_NAMES = {
    "none": Priority.NONE,
    "low": Priority.LOW,
    "medium": Priority.MEDIUM,
    "high": Priority.HIGH,
}

# Minimum thefuzz score for a project name to count as a match.
PROJECT_MATCH_THRESHOLD = 80


def resolve_project(name: str, projects: List[Project]) -> Optional[Project]:
    """Exact (case-insensitive) name match first, then the best fuzzy match above the threshold."""
    for project in projects:
        if project.name.lower() == name.lower():
            return project
    choices = {p.id: p.name for p in projects}
    if not choices:
        return None
    best = process.extractOne(name, choices)
    if best and best[1] >= PROJECT_MATCH_THRESHOLD:
        return next(p for p in projects if p.id == best[2])
    return None


def parse_due(text: Optional[str]) -> Optional[str]:
    """Natural language or ISO date -> API timestamp. Raises typer.BadParameter when unreadable."""
    if not text:
        return None
    dt = dateparser.parse(text, settings={"PREFER_DATES_FROM": "future"})
    if dt is None:
        raise typer.BadParameter(f"Could not understand due date '{text}'")
    return to_api_datetime(dt)


def handle_add(settings: Settings, title: str, project: Optional[str] = None,
               due: Optional[str] = None, priority: str = "none") -> None:
    """
    Creates a new task. Without --project the first synced project is used.
    """
    require_connection(settings)
    if not title.strip():
        console.print("[red]Please enter a title.[/red]")
        raise typer.Exit(code=1)
    if priority.lower() not in PRIORITY_NAMES:
        raise typer.BadParameter(f"Priority must be one of: {', '.join(PRIORITY_NAMES)}")

    client = build_client(settings)
    try:
        if project:
            target = resolve_project(project, client.get_projects())
            if target is None:
                console.print(f"[red]No project matches '{project}'.[/red]")
                raise typer.Exit(code=1)
            project_id, project_name = target.id, target.name
        elif settings.selected_projects:
            project_id = settings.selected_projects[0]
            project_name = client.get_project(project_id).name or project_id
        else:
            console.print("[red]Please select a project with `ticksync select-projects` or pass --project.[/red]")
            raise typer.Exit(code=1)

        fields = {"title": title.strip(), "projectId": project_id}
        due_date = parse_due(due)
        if due_date:
            fields["dueDate"] = due_date
        if PRIORITY_NAMES[priority.lower()] is not Priority.NONE:
            fields["priority"] = int(PRIORITY_NAMES[priority.lower()])

        task = client.create_task(fields)
    except (TickTickAPIError, requests.RequestException) as e:
        console.print(f"[red]Failed to create task: {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"Task '{task.title or title}' created in {project_name} (ID: {task.id}).")
