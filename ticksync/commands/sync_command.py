"""Handlers for pull, push and watch."""
from typing import Optional

import typer
from rich.console import Console

from ..sync.engine import SyncEngine
from ..sync.notifier import ConsoleNotifier
from ..sync.scheduler import SyncScheduler
from ..sync.store import FileDocumentStore
from ..ticktick_api.client import TickTickClient
from ..ticktick_api.oauth import CredentialProvider
from ..utils.config import Settings, save_settings

console = Console()


def require_connection(settings: Settings) -> None:
    if not settings.is_connected:
        console.print("[red]Not connected to TickTick. Run `ticksync auth-url` and `ticksync connect` first.[/red]")
        raise typer.Exit(code=1)


def build_client(settings: Settings) -> TickTickClient:
    """Client whose token comes from a provider that persists refreshed tokens."""
    credentials = CredentialProvider(settings, on_update=save_settings)
    return TickTickClient(credentials)


def build_engine(settings: Settings, notifier: Optional[ConsoleNotifier] = None) -> SyncEngine:
    return SyncEngine(
        client=build_client(settings),
        settings=settings,
        store=FileDocumentStore(settings.vault_path),
        notifier=notifier or ConsoleNotifier(console),
    )


def handle_pull(settings: Settings) -> None:
    """Render the selected TickTick projects into the target page."""
    require_connection(settings)
    engine = build_engine(settings)
    console.print("Syncing with TickTick...")
    if engine.pull() is None:
        raise typer.Exit(code=1)
    console.print(f"Wrote {engine.store.resolve(settings.target_page_path)}")


def handle_push(settings: Settings) -> None:
    """Push edits made in the target page back to TickTick."""
    require_connection(settings)
    engine = build_engine(settings)
    console.print("Pushing changes to TickTick...")
    result = engine.reconcile_from_document()
    if result.synced == 0 and result.errors == 0:
        console.print("Nothing to push.")
    if result.errors:
        raise typer.Exit(code=1)


def handle_watch(settings: Settings, poll_seconds: float = 1.0) -> None:
    """Pull on the auto-sync interval and push shortly after the page is edited."""
    require_connection(settings)
    engine = build_engine(settings)
    scheduler = SyncScheduler(engine, engine.store, settings)

    if settings.auto_sync and settings.sync_interval > 0:
        console.print(f"Auto-sync every {settings.sync_interval} min; watching {engine.store.resolve(settings.target_page_path)}")
    else:
        console.print(f"Auto-sync is off; watching {engine.store.resolve(settings.target_page_path)} for edits")
    console.print("Press Ctrl+C to stop.")

    try:
        scheduler.run_forever(poll_seconds)
    except KeyboardInterrupt:
        console.print("Stopped watching.")
