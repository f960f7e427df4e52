#!/usr/bin/env python3
from typing import List, Optional

import typer

from .utils.config import load_env_vars, load_settings
from .utils.logger import configure_logging

# Load environment variables
load_env_vars()

# Create app instance
app = typer.Typer(
    name="ticksync",
    help="TickTick Sync - Keep a markdown task page and your TickTick projects in step.",
    no_args_is_help=True,
)

from .commands.add_command import handle_add
from .commands.auth_command import handle_auth_url, handle_connect, handle_disconnect, handle_refresh
from .commands.config_command import handle_config
from .commands.list_command import handle_list_projects, handle_select_projects
from .commands.sync_command import handle_pull, handle_push, handle_watch


def _version_callback(value: bool):
    if value:
        from . import __version__
        print(f"ticksync {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log sync details."),
    version: Optional[bool] = typer.Option(None, "--version", callback=_version_callback, is_eager=True,
                                           help="Show the version and exit."),
):
    """TickTick Sync - Keep a markdown task page and your TickTick projects in step."""
    if verbose:
        configure_logging("INFO")


@app.command("auth-url")
def auth_url():
    """Print the TickTick authorization URL."""
    handle_auth_url(load_settings())


@app.command("connect")
def connect(
    code: str = typer.Option(..., "--code", "-c", help="Authorization code copied from the redirect URL."),
):
    """Exchange an authorization code for access tokens."""
    handle_connect(load_settings(), code)


@app.command("disconnect")
def disconnect():
    """Forget the stored TickTick tokens."""
    handle_disconnect(load_settings())


@app.command("refresh-token")
def refresh_token():
    """Refresh the access token now."""
    handle_refresh(load_settings())


@app.command("config")
def config(
    target_page: Optional[str] = typer.Option(None, "--target-page", help="Page path inside the vault (.md is added)."),
    vault: Optional[str] = typer.Option(None, "--vault", help="Directory holding the page."),
    interval: Optional[int] = typer.Option(None, "--interval", help="Auto-sync interval in minutes."),
    auto_sync: Optional[bool] = typer.Option(None, "--auto-sync/--no-auto-sync", help="Pull periodically in watch mode."),
    include_completed: Optional[bool] = typer.Option(None, "--include-completed/--no-include-completed",
                                                     help="Show completed tasks on the page."),
    days: Optional[int] = typer.Option(None, "--days", help="How many days of completed tasks to show."),
):
    """Show the current settings, or change them."""
    handle_config(load_settings(), {
        "target_page_path": target_page,
        "vault_path": vault,
        "sync_interval": interval,
        "auto_sync": auto_sync,
        "include_completed": include_completed,
        "completed_days_limit": days,
    })


@app.command("list-projects")
def list_projects(
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format."),
):
    """List TickTick projects, marking the synced ones."""
    handle_list_projects(load_settings(), json_output)


@app.command("select-projects")
def select_projects(
    project_ids: List[str] = typer.Argument(..., help="IDs of the projects to sync."),
):
    """Choose which projects are synced."""
    handle_select_projects(load_settings(), project_ids)


@app.command("pull")
def pull():
    """Write the synced projects' tasks into the target page."""
    handle_pull(load_settings())


@app.command("push")
def push():
    """Send edits made in the target page to TickTick."""
    handle_push(load_settings())


@app.command("watch")
def watch(
    poll: float = typer.Option(1.0, "--poll", help="Seconds between checks of the page."),
):
    """Keep syncing: pull on the interval, push after edits."""
    handle_watch(load_settings(), poll)


@app.command("add")
def add(
    title: str = typer.Option(..., "--title", "-t", help="Title of the new task."),
    project: Optional[str] = typer.Option(None, "--project", "-p", help="Project name (defaults to the first synced project)."),
    due: Optional[str] = typer.Option(None, "--due", "-d", help="Due date (natural language or YYYY-MM-DD)."),
    priority: str = typer.Option("none", "--priority", help="none, low, medium or high."),
):
    """Create a task in TickTick."""
    handle_add(load_settings(), title, project, due, priority)


if __name__ == "__main__":
    app()
