"""Schema client and sync engine factory.

Resolves the active profile from ``sync.toml`` and builds the
``EngineSchemaClient`` and ``SyncEngine`` for it.

Profile priority:
1. Explicit ``profile_name`` argument
2. ``{env_prefix}SYNC_PROFILE`` environment variable
3. Raise ``ProfileNotFoundError``
"""

import os
from pathlib import Path
from urllib.parse import quote

from csl_sync.adapters.engine import EngineSchemaClient
from csl_sync.config.loader import load_sync_config
from csl_sync.config.models import SyncConfig, SyncProfile
from csl_sync.errors import ProfileNotFoundError
from csl_sync.schema.sync import SyncEngine


# ============================================================================
# Profile Resolution
# ============================================================================


def get_active_profile_name(env_prefix: str = "") -> str:
    """Get active profile name from the environment.

    Args:
        env_prefix: Prefix for the variable name
            (e.g., ``"APP_"`` reads ``APP_SYNC_PROFILE``).

    Returns:
        Profile name

    Raises:
        ProfileNotFoundError: If no profile is configured
    """
    var_name = f"{env_prefix}SYNC_PROFILE"
    env_profile = os.environ.get(var_name)
    if env_profile:
        return env_profile

    raise ProfileNotFoundError(
        "No sync profile configured.\n"
        f"Set {var_name}=<name> or pass --profile <name>."
    )


def get_profile(
    profile_name: str | None = None,
    config: SyncConfig | None = None,
    env_prefix: str = "",
) -> tuple[str, SyncProfile]:
    """Get profile name and configuration.

    Returns:
        Tuple of (profile_name, SyncProfile)

    Raises:
        ProfileNotFoundError: If no profile configured, or the profile is
            not in sync.toml
    """
    if profile_name is None:
        profile_name = get_active_profile_name(env_prefix)
    if config is None:
        config = load_sync_config()

    if profile_name not in config.profiles:
        available = ", ".join(config.profiles.keys())
        raise ProfileNotFoundError(
            f"Profile '{profile_name}' not found in sync.toml. "
            f"Available: {available}"
        )

    return profile_name, config.profiles[profile_name]


def resolve_url(profile: SyncProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Sync profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.password, safe=""))
    return url


# ============================================================================
# Construction
# ============================================================================


def create_client(
    profile_name: str | None = None,
    config: SyncConfig | None = None,
    env_prefix: str = "",
) -> EngineSchemaClient:
    """Create an ``EngineSchemaClient`` for a profile."""
    _, profile = get_profile(profile_name, config, env_prefix)
    return EngineSchemaClient(resolve_url(profile))


def create_sync_engine(
    profile_name: str | None = None,
    root_folder: str | Path | None = None,
    config: SyncConfig | None = None,
    env_prefix: str = "",
) -> SyncEngine:
    """Create a ``SyncEngine`` with a client for the given profile.

    Args:
        profile_name: Profile from sync.toml.  If None, uses the
            ``SYNC_PROFILE`` environment variable.
        root_folder: Root of the definition tree.  Defaults to
            ``[sync] root_folder`` from sync.toml.
        config: Pre-loaded config.  Loaded from sync.toml if None.
        env_prefix: Prefix for environment variable lookup.

    Example:
        >>> engine = create_sync_engine("dev", root_folder="schema")
        >>> engine.push(table, SyncTarget.REMOTE)
    """
    if config is None:
        config = load_sync_config()
    client = create_client(profile_name, config, env_prefix)
    return SyncEngine(
        root_folder if root_folder is not None else config.root_folder,
        client=client,
        use_legacy=config.use_legacy,
    )
