"""Schema definitions, command generation, definition files, and sync.

Provides the definition models, the command generator and parser, the
file-based definition store, drift comparison (``compare_definitions``),
and the sync engine (``SyncEngine``).

Usage:
    from csl_sync.schema import SyncEngine, SyncTarget, TableDefinition
    from csl_sync.schema import compare_definitions, load_definitions
"""

from csl_sync.schema.commands import (
    generate_create_or_alter_command,
    generate_drop_command,
)
from csl_sync.schema.comparator import compare_definitions
from csl_sync.schema.models import (
    ColumnDefinition,
    DriftEntry,
    DriftReport,
    FunctionDefinition,
    ObjectKind,
    ParameterDefinition,
    SchemaObject,
    SyncResult,
    SyncTarget,
    TableDefinition,
)
from csl_sync.schema.parser import parse_definition
from csl_sync.schema.store import (
    delete_definition,
    definition_path,
    load_definitions,
    read_definition,
    sanitize_folder,
    write_definition,
)
from csl_sync.schema.sync import SyncEngine, apply_to_remote, remove_from_remote

__all__ = [
    "ColumnDefinition",
    "ParameterDefinition",
    "SchemaObject",
    "TableDefinition",
    "FunctionDefinition",
    "ObjectKind",
    "SyncTarget",
    "SyncResult",
    "DriftEntry",
    "DriftReport",
    "generate_create_or_alter_command",
    "generate_drop_command",
    "parse_definition",
    "sanitize_folder",
    "definition_path",
    "write_definition",
    "delete_definition",
    "read_definition",
    "load_definitions",
    "compare_definitions",
    "SyncEngine",
    "apply_to_remote",
    "remove_from_remote",
]
