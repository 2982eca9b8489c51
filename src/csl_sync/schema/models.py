"""Pydantic models for schema objects and sync results.

This module contains schema-domain models:
- Definition models: ColumnDefinition, ParameterDefinition, SchemaObject,
  TableDefinition, FunctionDefinition
- Enums: ObjectKind, SyncTarget
- Result models: SyncResult, DriftEntry, DriftReport

Configuration models (SyncProfile, SyncConfig) live in
csl_sync.config.models.
"""

from abc import ABC, abstractmethod
from enum import Enum

from pydantic import BaseModel, Field


# ============================================================================
# Enums
# ============================================================================


class ObjectKind(str, Enum):
    """Kind of schema object, each stored under its own top-level folder."""

    TABLE = "table"
    FUNCTION = "function"

    @property
    def folder(self) -> str:
        """Name of the kind folder directly under the root folder."""
        return "Tables" if self is ObjectKind.TABLE else "Functions"


class SyncTarget(str, Enum):
    """Side of the sync that an operation writes to."""

    FILE = "file"
    REMOTE = "remote"


# ============================================================================
# Definition Models
# ============================================================================


class ColumnDefinition(BaseModel):
    """A table column.

    Example:
        >>> col = ColumnDefinition(name="OrderId", data_type="long")
        >>> col.data_type
        'long'
    """

    name: str
    data_type: str


class ParameterDefinition(BaseModel):
    """A function parameter."""

    name: str
    data_type: str
    default: str | None = None


class SchemaObject(BaseModel, ABC):
    """Common fields of every schema object.

    ``name`` identifies the object within its kind; ``folder`` is the
    logical grouping path chosen by the user and may contain characters
    the filesystem rejects.
    """

    name: str = Field(min_length=1)
    folder: str = ""
    docstring: str = ""

    @property
    @abstractmethod
    def kind(self) -> ObjectKind:
        """Kind of object, which selects its top-level folder."""


class TableDefinition(SchemaObject):
    """Schema for a table."""

    columns: list[ColumnDefinition] = Field(default_factory=list)

    @property
    def kind(self) -> ObjectKind:
        return ObjectKind.TABLE


class FunctionDefinition(SchemaObject):
    """Schema for a stored function."""

    parameters: list[ParameterDefinition] = Field(default_factory=list)
    body: str = ""

    @property
    def kind(self) -> ObjectKind:
        return ObjectKind.FUNCTION


# ============================================================================
# Result Models
# ============================================================================


class SyncResult(BaseModel):
    """Outcome of a single push or retract.

    A successful result may still carry ``cleanup_warnings``: stale
    duplicate files that could not be deleted while writing.

    Attributes:
        success: Whether the target change was applied.
        kind: Kind of the object.
        name: Name of the object.
        target: Side that was written to.
        action: ``"push"`` or ``"retract"``.
        path: File written or deleted (file target only).
        cleanup_warnings: Suppressed cleanup failures.
        error: Error message when ``success`` is False.
    """

    success: bool = False
    kind: ObjectKind
    name: str
    target: SyncTarget
    action: str
    path: str | None = None
    cleanup_warnings: list[str] = Field(default_factory=list)
    error: str | None = None


class DriftEntry(BaseModel):
    """An object that differs between the file tree and the live engine."""

    kind: ObjectKind
    name: str
    local_folder: str | None = None
    remote_folder: str | None = None


class DriftReport(BaseModel):
    """Result of comparing the file tree with the live engine.

    Example:
        >>> report = DriftReport()
        >>> report.has_drift
        False
        >>> report.format_report()
        'No drift'
    """

    only_local: list[DriftEntry] = Field(default_factory=list)
    only_remote: list[DriftEntry] = Field(default_factory=list)
    modified: list[DriftEntry] = Field(default_factory=list)

    @property
    def drift_count(self) -> int:
        """Total number of objects that differ."""
        return len(self.only_local) + len(self.only_remote) + len(self.modified)

    @property
    def has_drift(self) -> bool:
        return self.drift_count > 0

    def format_report(self) -> str:
        """Format drift report as human-readable text."""
        if not self.has_drift:
            return "No drift"

        lines = [f"Drift detected ({self.drift_count} objects):"]

        if self.only_local:
            lines.append(f"\n  Only in files ({len(self.only_local)}):")
            for entry in self.only_local:
                lines.append(f"    - {entry.kind.value} {entry.name}")

        if self.only_remote:
            lines.append(f"\n  Only in remote ({len(self.only_remote)}):")
            for entry in self.only_remote:
                lines.append(f"    - {entry.kind.value} {entry.name}")

        if self.modified:
            lines.append(f"\n  Modified ({len(self.modified)}):")
            for entry in self.modified:
                line = f"    - {entry.kind.value} {entry.name}"
                if entry.local_folder != entry.remote_folder:
                    line += f" (folder: {entry.remote_folder!r} -> {entry.local_folder!r})"
                lines.append(line)

        return "\n".join(lines)
