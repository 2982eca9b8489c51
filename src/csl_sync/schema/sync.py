"""Schema sync engine.

Pushes a schema object to, or retracts it from, one side of the sync:
the definition file tree (``SyncTarget.FILE``) or the live engine
(``SyncTarget.REMOTE``).  Every operation is stateless and idempotent;
there is no transaction across objects, and an interrupted run is
repaired by running it again.

Usage:
    from csl_sync.schema.sync import SyncEngine
    from csl_sync.schema.models import SyncTarget, TableDefinition

    engine = SyncEngine("schema", client=client)

    # Files -> remote
    result = engine.push(table, SyncTarget.REMOTE)

    # Remote -> files
    result = engine.push(table, SyncTarget.FILE)
    for warning in result.cleanup_warnings:
        print(warning)

    # Remove from files (fails if not at the exact expected path)
    engine.retract(table, SyncTarget.FILE)
"""

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from csl_sync.schema.commands import generate_create_or_alter_command
from csl_sync.schema.models import ObjectKind, SchemaObject, SyncResult, SyncTarget
from csl_sync.schema.store import (
    definition_path,
    delete_definition,
    write_definition,
)

if TYPE_CHECKING:
    from csl_sync.adapters.base import SchemaClient

logger = logging.getLogger(__name__)

# Table commands sent to the engine use the non-legacy form
_REMOTE_LEGACY: dict[ObjectKind, bool] = {
    ObjectKind.TABLE: False,
    ObjectKind.FUNCTION: True,
}


# ---------------------------------------------------------------------------
# Remote helpers
# ---------------------------------------------------------------------------


def apply_to_remote(obj: SchemaObject, client: "SchemaClient") -> None:
    """Create or alter ``obj`` on the live engine.

    Blocks until the engine has applied the command.  Errors from the
    client are not caught.
    """
    command = generate_create_or_alter_command(obj, _REMOTE_LEGACY[obj.kind])
    client.execute(command, obj.name)


def remove_from_remote(obj: SchemaObject, client: "SchemaClient") -> None:
    """Drop ``obj`` from the live engine by name."""
    client.drop(obj.kind, obj.name)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class SyncEngine:
    """Applies push/retract operations for single schema objects.

    Args:
        root_folder: Root of the definition file tree.
        client: Remote schema client.  Required only for
            ``SyncTarget.REMOTE`` operations.
        use_legacy: Command form used when writing files.
    """

    def __init__(
        self,
        root_folder: str | Path,
        client: "SchemaClient | None" = None,
        use_legacy: bool = True,
    ) -> None:
        self.root_folder = Path(root_folder)
        self.client = client
        self.use_legacy = use_legacy

    def _require_client(self) -> "SchemaClient":
        if self.client is None:
            raise RuntimeError("No schema client configured for remote operations")
        return self.client

    def push(self, obj: SchemaObject, target: SyncTarget | str) -> SyncResult:
        """Write ``obj`` to ``target``, overwriting what is there.

        Returns:
            ``SyncResult`` with ``success=True``; cleanup warnings from the
            file target are included.

        Raises:
            OSError: If the definition file cannot be written.
            RuntimeError: If ``target`` is remote and no client is set.
            Exception: Whatever the remote client raises, unchanged.
        """
        target = SyncTarget(target)
        result = SyncResult(kind=obj.kind, name=obj.name, target=target, action="push")

        if target is SyncTarget.FILE:
            result.cleanup_warnings = write_definition(obj, self.root_folder, self.use_legacy)
            result.path = str(definition_path(obj, self.root_folder))
        else:
            apply_to_remote(obj, self._require_client())
            logger.info("Applied %s %s to remote", obj.kind.value, obj.name)

        result.success = True
        return result

    def retract(self, obj: SchemaObject, target: SyncTarget | str) -> SyncResult:
        """Remove ``obj`` from ``target``.

        The file target requires the file to be at the exact path implied
        by ``obj.folder``; the remote target drops with ``ifexists``.

        Raises:
            DefinitionNotFoundError: If the definition file is missing.
            RuntimeError: If ``target`` is remote and no client is set.
            Exception: Whatever the remote client raises, unchanged.
        """
        target = SyncTarget(target)
        result = SyncResult(kind=obj.kind, name=obj.name, target=target, action="retract")

        if target is SyncTarget.FILE:
            result.path = str(delete_definition(obj, self.root_folder))
        else:
            remove_from_remote(obj, self._require_client())
            logger.info("Dropped %s %s from remote", obj.kind.value, obj.name)

        result.success = True
        return result

    # ------------------------------------------------------------------
    # Batch helpers
    # ------------------------------------------------------------------

    def _run_many(
        self,
        action: str,
        objects: Iterable[SchemaObject],
        target: SyncTarget | str,
    ) -> list[SyncResult]:
        target = SyncTarget(target)
        operation = self.push if action == "push" else self.retract
        results: list[SyncResult] = []

        for obj in objects:
            try:
                results.append(operation(obj, target))
            except Exception as e:
                logger.error("Failed to %s %s %s: %s", action, obj.kind.value, obj.name, e)
                results.append(
                    SyncResult(
                        success=False,
                        kind=obj.kind,
                        name=obj.name,
                        target=target,
                        action=action,
                        error=str(e),
                    )
                )

        return results

    def push_many(self, objects: Iterable[SchemaObject], target: SyncTarget | str) -> list[SyncResult]:
        """Push each object in order, recording failures instead of raising."""
        return self._run_many("push", objects, target)

    def retract_many(self, objects: Iterable[SchemaObject], target: SyncTarget | str) -> list[SyncResult]:
        """Retract each object in order, recording failures instead of raising."""
        return self._run_many("retract", objects, target)
