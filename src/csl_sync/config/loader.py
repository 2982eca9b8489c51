"""TOML configuration loader for sync profiles."""

import tomllib
from pathlib import Path

from csl_sync.config.models import SyncConfig, SyncProfile


def load_sync_config(config_path: Path | None = None) -> SyncConfig:
    """Load sync configuration from TOML file.

    Args:
        config_path: Path to sync.toml (default: ``Path.cwd() / "sync.toml"``)

    Returns:
        SyncConfig with all profiles

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / "sync.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Sync config not found: {config_path}\n"
            f"Create sync.toml with a [profiles.<name>] section."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse profiles
    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = SyncProfile(**profile_data)

    # Parse sync settings
    sync_settings = data.get("sync", {})

    return SyncConfig(
        profiles=profiles,
        root_folder=sync_settings.get("root_folder", "schema"),
        use_legacy=sync_settings.get("use_legacy", True),
    )
