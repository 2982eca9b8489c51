"""Schema client protocol definition.

Defines the ``SchemaClient`` Protocol that remote engine clients must
implement.  All methods are blocking: each call returns once the engine
has finished the operation, or raises.

Usage:
    from csl_sync.adapters.base import SchemaClient

    def deploy(client: SchemaClient, command: str) -> None:
        client.execute(command, "Orders")
        client.drop(ObjectKind.FUNCTION, "OldReport")
        client.close()
"""

from typing import Protocol

from csl_sync.schema.models import FunctionDefinition, ObjectKind, TableDefinition


class SchemaClient(Protocol):
    """Remote schema engine interface.

    Clients do not retry; errors from the engine or the network are raised
    to the caller unchanged.
    """

    def execute(self, command: str, object_name: str) -> None:
        """Execute a control command that creates or alters one object.

        Args:
            command: Command text, e.g. ``.create-or-alter function ...``.
            object_name: Name of the object the command affects.

        Example:
            client.execute(".create-merge table Orders (Id:long)", "Orders")
        """
        ...

    def drop(self, kind: ObjectKind, name: str) -> None:
        """Drop a table or function by name.

        Example:
            client.drop(ObjectKind.TABLE, "Orders")
        """
        ...

    def list_tables(self) -> list[TableDefinition]:
        """Return every table deployed in the database."""
        ...

    def list_functions(self) -> list[FunctionDefinition]:
        """Return every function deployed in the database."""
        ...

    def close(self) -> None:
        """Close the connection and release resources."""
        ...
