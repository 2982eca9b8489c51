"""Pydantic models for sync configuration."""

from pydantic import BaseModel


class SyncProfile(BaseModel):
    """Remote engine connection profile from sync.toml."""

    url: str
    description: str = ""
    password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution


class SyncConfig(BaseModel):
    """Complete sync configuration from sync.toml."""

    profiles: dict[str, SyncProfile]
    root_folder: str = "schema"
    use_legacy: bool = True
