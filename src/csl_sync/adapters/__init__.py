"""Schema client adapters package.

Provides the ``SchemaClient`` Protocol and ``EngineSchemaClient``, its
SQLAlchemy-backed implementation.

Usage:
    from csl_sync.adapters import SchemaClient, EngineSchemaClient
"""

from csl_sync.adapters.base import SchemaClient
from csl_sync.adapters.engine import EngineSchemaClient

__all__ = [
    "SchemaClient",
    "EngineSchemaClient",
]
