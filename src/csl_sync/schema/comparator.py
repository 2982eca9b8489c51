"""Drift detection between the definition files and the live engine.

Pure logic -- no I/O.  Objects are matched by (kind, name); two matched
objects differ when their create-or-alter command text differs.

Usage:
    from csl_sync.schema.comparator import compare_definitions
    from csl_sync.schema.store import load_definitions

    local = load_definitions("schema")
    remote = client.list_tables() + client.list_functions()

    report = compare_definitions(local, remote)
    if report.has_drift:
        print(report.format_report())
"""

from collections.abc import Iterable

from csl_sync.schema.commands import generate_create_or_alter_command
from csl_sync.schema.models import DriftEntry, DriftReport, ObjectKind, SchemaObject


def _index(objects: Iterable[SchemaObject]) -> dict[tuple[ObjectKind, str], SchemaObject]:
    return {(obj.kind, obj.name): obj for obj in objects}


def _sort_key(key: tuple[ObjectKind, str]) -> tuple[str, str]:
    return key[0].value, key[1]


def compare_definitions(
    local: Iterable[SchemaObject],
    remote: Iterable[SchemaObject],
    use_legacy: bool = True,
) -> DriftReport:
    """Compare file definitions against deployed definitions.

    Args:
        local: Definitions read from the file tree.
        remote: Definitions enumerated from the live engine.
        use_legacy: Command form used to render both sides for comparison.

    Returns:
        ``DriftReport`` with:

        - ``only_local``: objects present only in the files
        - ``only_remote``: objects present only on the engine
        - ``modified``: objects on both sides whose definitions differ
          (a folder change counts)

    Examples:
        >>> report = compare_definitions(
        ...     [TableDefinition(name="Orders")],
        ...     [TableDefinition(name="Orders")],
        ... )
        >>> report.has_drift
        False
    """
    local_index = _index(local)
    remote_index = _index(remote)

    report = DriftReport()

    for key in sorted(local_index.keys() - remote_index.keys(), key=_sort_key):
        obj = local_index[key]
        report.only_local.append(
            DriftEntry(kind=obj.kind, name=obj.name, local_folder=obj.folder)
        )

    for key in sorted(remote_index.keys() - local_index.keys(), key=_sort_key):
        obj = remote_index[key]
        report.only_remote.append(
            DriftEntry(kind=obj.kind, name=obj.name, remote_folder=obj.folder)
        )

    for key in sorted(local_index.keys() & remote_index.keys(), key=_sort_key):
        local_obj = local_index[key]
        remote_obj = remote_index[key]
        local_text = generate_create_or_alter_command(local_obj, use_legacy)
        remote_text = generate_create_or_alter_command(remote_obj, use_legacy)
        if local_text != remote_text:
            report.modified.append(
                DriftEntry(
                    kind=local_obj.kind,
                    name=local_obj.name,
                    local_folder=local_obj.folder,
                    remote_folder=remote_obj.folder,
                )
            )

    return report
