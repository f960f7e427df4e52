"""Handlers for connecting to and disconnecting from TickTick."""
import requests
import typer
from rich.console import Console

from ..ticktick_api.oauth import CredentialProvider, OAuthError, OAuthManager
from ..utils.config import Settings, save_settings

console = Console()


def _require_app_credentials(settings: Settings) -> None:
    if not settings.client_id or not settings.client_secret:
        console.print(
            "[red]Client ID and secret are missing. Set TICKTICK_CLIENT_ID and "
            "TICKTICK_CLIENT_SECRET (for example in .ticksync.env).[/red]"
        )
        raise typer.Exit(code=1)


def handle_auth_url(settings: Settings) -> None:
    _require_app_credentials(settings)
    url = OAuthManager(settings.client_id, settings.client_secret).authorization_url()
    console.print("Open this URL, approve access, then copy the `code` parameter from the redirect:")
    print(url)


def handle_connect(settings: Settings, code: str) -> None:
    """Exchange a pasted authorization code for tokens and store them."""
    _require_app_credentials(settings)
    settings.auth_code = code
    provider = CredentialProvider(settings, on_update=save_settings)
    try:
        provider.connect(code)
    except (OAuthError, requests.RequestException) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Connected to TickTick.[/green]")


def handle_refresh(settings: Settings) -> None:
    _require_app_credentials(settings)
    provider = CredentialProvider(settings, on_update=save_settings)
    try:
        provider.refresh()
    except (OAuthError, requests.RequestException) as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Access token refreshed.[/green]")


def handle_disconnect(settings: Settings) -> None:
    CredentialProvider(settings, on_update=save_settings).disconnect()
    console.print("Disconnected from TickTick.")
