"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from csl_sync.config import load_sync_config, SyncProfile, SyncConfig
"""

from csl_sync.config.loader import load_sync_config
from csl_sync.config.models import SyncConfig, SyncProfile

__all__ = ["load_sync_config", "SyncConfig", "SyncProfile"]
