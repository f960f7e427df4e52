"""
Configuration utilities for ticksync.

Secrets for the OAuth app can live in ``.ticksync.env`` files (loaded with
python-dotenv); everything the sync needs between runs lives in a JSON
settings file validated by :class:`Settings`.
"""

import json
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .logger import get_logger

log = get_logger(__name__)

ENV_FILE_NAME = ".ticksync.env"
DEFAULT_SETTINGS_PATH = Path.home() / ".ticksync" / "settings.json"


class Settings(BaseModel):
    """Everything a sync pass and the auth flow need, persisted as JSON."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    # OAuth tokens
    access_token: str = ""
    refresh_token: str = ""
    token_expiry: float = 0

    # Sync settings
    vault_path: str = "."
    target_page_path: str = "TickTick Tasks"
    selected_projects: List[str] = Field(default_factory=list)
    sync_interval: int = 5  # minutes
    auto_sync: bool = True

    # Completed tasks
    include_completed: bool = False
    completed_days_limit: int = 7

    # OAuth app credentials
    client_id: str = ""
    client_secret: str = ""
    auth_code: str = ""

    @field_validator("sync_interval", "completed_days_limit")
    @classmethod
    def non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must be zero or positive")
        return v

    @property
    def is_connected(self) -> bool:
        return bool(self.access_token)


def load_env_vars() -> None:
    """
    Load environment variables from .env files in the following order:
    1. .ticksync.env in the current directory
    2. .ticksync.env in the user's home directory
    Values already present in the environment win.
    """
    if os.path.exists(ENV_FILE_NAME):
        load_dotenv(ENV_FILE_NAME)

    home_env = Path.home() / ENV_FILE_NAME
    if home_env.exists():
        load_dotenv(home_env)


def get_config(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get configuration value from environment variables."""
    return os.getenv(key, default)


def settings_path() -> Path:
    override = get_config("TICKSYNC_SETTINGS")
    return Path(override).expanduser() if override else DEFAULT_SETTINGS_PATH


def _apply_env_overrides(settings: Settings) -> Settings:
    client_id = get_config("TICKTICK_CLIENT_ID")
    if client_id:
        settings.client_id = client_id
    client_secret = get_config("TICKTICK_CLIENT_SECRET")
    if client_secret:
        settings.client_secret = client_secret
    vault = get_config("TICKSYNC_VAULT")
    if vault:
        settings.vault_path = vault
    return settings


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from the JSON file, falling back to defaults when the file is
    missing or unreadable. Environment overrides are applied last.
    """
    path = Path(path) if path else settings_path()
    data = {}
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            log.warning("Could not read settings from %s: %s", path, e)
            data = {}

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        log.warning("Invalid settings in %s, using defaults: %s", path, e)
        settings = Settings()

    return _apply_env_overrides(settings)


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Write the settings back to the JSON file and return its path."""
    path = Path(path) if path else settings_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(settings.model_dump(), fh, indent=4)
    log.debug("Saved settings to %s", path)
    return path
