"""Definition store -- schema objects as ``.csl`` files on disk.

Layout under the root folder::

    <root>/Tables/[<sanitized folder>/]<Name>.csl
    <root>/Functions/[<sanitized folder>/]<Name>.csl

Each file holds the object's create-or-alter command text.

Writes scan the whole kind folder for files with the same name and delete
them first, so an object whose folder changed does not leave its old file
behind.  Deletes only look at the exact path implied by the object's
current folder.

Usage:
    from csl_sync.schema.store import write_definition, delete_definition

    warnings = write_definition(table, Path("schema"))
    delete_definition(table, Path("schema"))
"""

import logging
import re
from pathlib import Path

from csl_sync.errors import DefinitionNotFoundError, DefinitionParseError
from csl_sync.schema.commands import generate_create_or_alter_command
from csl_sync.schema.models import ObjectKind, SchemaObject
from csl_sync.schema.parser import parse_definition

logger = logging.getLogger(__name__)

DEFINITION_SUFFIX = ".csl"

# Characters rejected in path components by common host filesystems
_INVALID_PATH_CHARS = frozenset('<>:"|?*') | frozenset(chr(i) for i in range(32))
_SEPARATORS = re.compile(r"[\\/]")


# ------------------------------------------------------------------
# Path helpers
# ------------------------------------------------------------------


def sanitize_folder(folder: str) -> str:
    """Turn a logical folder into a relative path usable on disk.

    Invalid characters are removed, not replaced.  Both ``/`` and ``\\``
    separate segments; empty, ``.`` and ``..`` segments are dropped.

    Example:
        >>> sanitize_folder('Sales|2024/"EU"')
        'Sales2024/EU'
        >>> sanitize_folder("")
        ''
    """
    segments: list[str] = []
    for segment in _SEPARATORS.split(folder):
        cleaned = "".join(ch for ch in segment if ch not in _INVALID_PATH_CHARS)
        if cleaned in ("", ".", ".."):
            continue
        segments.append(cleaned)
    return "/".join(segments)


def definition_filename(name: str) -> str:
    """File name for an object called ``name``."""
    if not name or _SEPARATORS.search(name) or "\0" in name:
        raise ValueError(f"Invalid object name for a definition file: {name!r}")
    return name + DEFINITION_SUFFIX


def definition_folder(obj: SchemaObject, root_folder: str | Path) -> Path:
    """Directory that holds ``obj``'s file, based on its current folder."""
    folder = Path(root_folder) / obj.kind.folder
    sanitized = sanitize_folder(obj.folder)
    if sanitized:
        folder = folder / sanitized
    return folder


def definition_path(obj: SchemaObject, root_folder: str | Path) -> Path:
    """Full path of ``obj``'s file.

    Example:
        >>> definition_path(TableDefinition(name="Orders", folder="Sales"), "root")
        PosixPath('root/Tables/Sales/Orders.csl')
    """
    return definition_folder(obj, root_folder) / definition_filename(obj.name)


def find_definition_files(kind: ObjectKind, name: str, root_folder: str | Path) -> list[Path]:
    """Find every file for ``name`` anywhere under the kind folder.

    The match is on the exact file name, independent of sub-folder.
    """
    kind_root = Path(root_folder) / kind.folder
    if not kind_root.is_dir():
        return []
    filename = definition_filename(name)
    return sorted(
        p for p in kind_root.rglob(f"*{DEFINITION_SUFFIX}")
        if p.name == filename and p.is_file()
    )


# ------------------------------------------------------------------
# Write / delete
# ------------------------------------------------------------------


def write_definition(
    obj: SchemaObject,
    root_folder: str | Path,
    use_legacy: bool = True,
) -> list[str]:
    """Write ``obj`` to its file, removing any stale copies first.

    Steps:

    1. Delete every ``<Name>.csl`` under the kind folder, whatever
       sub-folder it is in.  Failures are logged and returned, never raised.
    2. Create the destination folder for the object's current folder.
    3. Write the create-or-alter command text, overwriting the file.

    Args:
        obj: Table or function definition.
        root_folder: Root of the definition tree.
        use_legacy: Forwarded to the command generator.

    Returns:
        Cleanup warnings, one per stale file that could not be deleted.

    Raises:
        ValueError: If the object name cannot be used as a file name.
        OSError: If the destination folder or file cannot be written.
    """
    warnings: list[str] = []

    for stale in find_definition_files(obj.kind, obj.name, root_folder):
        try:
            stale.unlink()
            logger.debug("Removed existing definition file %s", stale)
        except OSError as e:
            message = f"Could not remove stale definition file {stale}: {e}"
            logger.warning(message)
            warnings.append(message)

    destination = definition_path(obj, root_folder)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(
        generate_create_or_alter_command(obj, use_legacy), encoding="utf-8"
    )
    logger.info("Wrote %s %s to %s", obj.kind.value, obj.name, destination)

    return warnings


def delete_definition(obj: SchemaObject, root_folder: str | Path) -> Path:
    """Delete ``obj``'s file at the exact path implied by its folder.

    No sub-folder scan is done: the caller's folder value is taken as
    current.

    Returns:
        The deleted path.

    Raises:
        DefinitionNotFoundError: If no file exists at that path.
    """
    path = definition_path(obj, root_folder)
    if not path.is_file():
        raise DefinitionNotFoundError(
            f"Definition file not found for {obj.kind.value} {obj.name}: {path}"
        )
    path.unlink()
    logger.info("Deleted %s %s at %s", obj.kind.value, obj.name, path)
    return path


# ------------------------------------------------------------------
# Read
# ------------------------------------------------------------------


def read_definition(path: str | Path, root_folder: str | Path | None = None) -> SchemaObject:
    """Read and parse one definition file.

    If the file declares no folder and ``root_folder`` is given, the folder
    is taken from the file's location below its kind folder. A leading
    UTF-8 byte-order mark is ignored.

    Raises:
        DefinitionParseError: If the file is not UTF-8 text or its content
            cannot be parsed.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise DefinitionParseError(f"Definition file is not valid UTF-8: {path}: {e}") from e
    obj = parse_definition(text)

    if not obj.folder and root_folder is not None:
        kind_root = Path(root_folder) / obj.kind.folder
        try:
            relative = path.parent.relative_to(kind_root)
        except ValueError:
            relative = Path()
        if relative != Path():
            obj.folder = relative.as_posix()

    return obj


def load_definitions(root_folder: str | Path) -> list[SchemaObject]:
    """Load every definition under ``Tables/`` and ``Functions/``.

    When two files claim the same kind and name, the first in path order
    is kept and the other is logged; the next write of that object removes
    the duplicate.
    """
    objects: list[SchemaObject] = []
    seen: dict[tuple[ObjectKind, str], Path] = {}

    for kind in ObjectKind:
        kind_root = Path(root_folder) / kind.folder
        if not kind_root.is_dir():
            continue
        for path in sorted(kind_root.rglob(f"*{DEFINITION_SUFFIX}")):
            if not path.is_file():
                continue
            obj = read_definition(path, root_folder)
            key = (obj.kind, obj.name)
            if key in seen:
                logger.warning(
                    "Duplicate definition for %s %s: %s (keeping %s)",
                    obj.kind.value, obj.name, path, seen[key],
                )
                continue
            seen[key] = path
            objects.append(obj)

    return objects
