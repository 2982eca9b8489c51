"""SQLAlchemy-backed schema client.

Provides ``EngineSchemaClient``, an implementation of the ``SchemaClient``
protocol over a SQLAlchemy ``Engine``.  Any dialect whose driver accepts
control commands as statement text can be used; the URL picks it.
The ``kustokql+https`` scheme comes from ``sqlalchemy-kusto`` (the
``kusto`` extra).

Usage:
    from csl_sync.adapters.engine import EngineSchemaClient

    with EngineSchemaClient("kustokql+https://cluster.example.net/MyDb") as client:
        tables = client.list_tables()
        client.execute(".create-merge table Orders (Id:long)", "Orders")
"""

import logging
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from csl_sync.schema.commands import generate_drop_command, quote_name
from csl_sync.schema.models import FunctionDefinition, ObjectKind, TableDefinition
from csl_sync.schema.parser import parse_column_list, parse_parameter_list

logger = logging.getLogger(__name__)

SHOW_TABLES_COMMAND = ".show tables details"
SHOW_FUNCTIONS_COMMAND = ".show functions"


def create_engine_pooled(database_url: str, **kwargs: Any) -> Engine:
    """Create a SQLAlchemy engine with connection pooling.

    Default pool settings:

    - ``pool_pre_ping=True``: Validate connections before checkout.
    - ``pool_recycle=300``: Recycle connections every 5 minutes.

    Args:
        database_url: Engine connection URL.
        **kwargs: Additional keyword arguments forwarded to
            ``create_engine``.

    Returns:
        Configured ``Engine``.
    """
    defaults: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "echo": False,
    }
    # Caller kwargs override defaults
    merged = {**defaults, **kwargs}

    return create_engine(database_url, **merged)


class EngineSchemaClient:
    """``SchemaClient`` implementation over a SQLAlchemy engine.

    Commands are passed to the driver verbatim with ``exec_driver_sql``:
    control command text contains ``name:type`` pairs that SQLAlchemy's
    ``text()`` would read as bind parameters.

    Args:
        database_url: Engine connection URL.
        engine: Pre-built engine to use instead of creating one from the URL.
        **engine_kwargs: Additional keyword arguments forwarded to
            ``create_engine_pooled``.
    """

    def __init__(
        self,
        database_url: str | None = None,
        engine: Engine | None = None,
        **engine_kwargs: Any,
    ) -> None:
        if engine is None:
            if not database_url:
                raise ValueError("EngineSchemaClient needs a database_url or an engine")
            engine = create_engine_pooled(database_url, **engine_kwargs)
        self._engine: Engine = engine

    def __enter__(self) -> "EngineSchemaClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def execute(self, command: str, object_name: str) -> None:
        """Execute a control command for ``object_name``.

        Uses ``engine.begin()`` so the command is committed on success.
        """
        logger.debug("Executing command for %s", object_name)
        with self._engine.begin() as conn:
            conn.exec_driver_sql(command)

    def drop(self, kind: ObjectKind, name: str) -> None:
        """Drop a table or function by name."""
        self.execute(generate_drop_command(kind, name), name)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def _query(self, command: str) -> list[dict[str, Any]]:
        with self._engine.connect() as conn:
            result = conn.exec_driver_sql(command)
            return [dict(row) for row in result.mappings().all()]

    def list_tables(self) -> list[TableDefinition]:
        """Return every table with its columns, folder and docstring.

        Runs ``.show tables details`` for names, folders and docstrings,
        then ``.show table T cslschema`` for each table's columns.
        """
        tables: list[TableDefinition] = []
        for row in self._query(SHOW_TABLES_COMMAND):
            name = row["TableName"]
            details = self._query(f".show table {quote_name(name)} cslschema")
            if not details:
                logger.warning("No schema returned for table %s", name)
                continue
            tables.append(
                TableDefinition(
                    name=name,
                    folder=row.get("Folder") or "",
                    docstring=row.get("DocString") or "",
                    columns=parse_column_list(details[0].get("Schema") or ""),
                )
            )
        return tables

    def list_functions(self) -> list[FunctionDefinition]:
        """Return every function with its parameters and body."""
        return [
            FunctionDefinition(
                name=row["Name"],
                folder=row.get("Folder") or "",
                docstring=row.get("DocString") or "",
                parameters=parse_parameter_list(row.get("Parameters") or ""),
                body=row.get("Body") or "",
            )
            for row in self._query(SHOW_FUNCTIONS_COMMAND)
        ]

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        if self._engine:
            self._engine.dispose()
