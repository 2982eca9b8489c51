"""csl-sync: keep schema definition files and a live engine in sync.

Stores tables and functions as ``.csl`` create-or-alter command files
under a root folder, detects drift against a live engine, and pushes
single objects in either direction.

Usage:
    from csl_sync import SyncEngine, SyncTarget, TableDefinition
    from csl_sync import compare_definitions, load_definitions
    from csl_sync import create_sync_engine, load_sync_config
"""

__version__ = "0.1.0"

# Adapters
from csl_sync.adapters.base import SchemaClient
from csl_sync.adapters.engine import EngineSchemaClient

# Config
from csl_sync.config.loader import load_sync_config
from csl_sync.config.models import SyncConfig, SyncProfile

# Errors
from csl_sync.errors import (
    DefinitionNotFoundError,
    DefinitionParseError,
    ProfileNotFoundError,
    SyncError,
)

# Factory
from csl_sync.factory import create_client, create_sync_engine, resolve_url

# Schema
from csl_sync.schema.comparator import compare_definitions
from csl_sync.schema.models import (
    ColumnDefinition,
    DriftReport,
    FunctionDefinition,
    ObjectKind,
    ParameterDefinition,
    SyncResult,
    SyncTarget,
    TableDefinition,
)
from csl_sync.schema.store import load_definitions
from csl_sync.schema.sync import SyncEngine

__all__ = [
    # Adapters
    "SchemaClient",
    "EngineSchemaClient",
    # Config
    "load_sync_config",
    "SyncConfig",
    "SyncProfile",
    # Errors
    "SyncError",
    "DefinitionNotFoundError",
    "DefinitionParseError",
    "ProfileNotFoundError",
    # Factory
    "create_client",
    "create_sync_engine",
    "resolve_url",
    # Schema
    "ColumnDefinition",
    "ParameterDefinition",
    "TableDefinition",
    "FunctionDefinition",
    "ObjectKind",
    "SyncTarget",
    "SyncResult",
    "DriftReport",
    "compare_definitions",
    "load_definitions",
    "SyncEngine",
]
