"""Control command generation for schema objects.

Pure functions -- no I/O.  Turns a ``TableDefinition`` or
``FunctionDefinition`` into the engine's create-or-alter command text, and
a kind + name into the matching drop command.

Usage:
    from csl_sync.schema.commands import (
        generate_create_or_alter_command,
        generate_drop_command,
    )

    text = generate_create_or_alter_command(table, use_legacy=True)
    drop = generate_drop_command(ObjectKind.TABLE, "Orders")
"""

import re

from csl_sync.schema.models import (
    FunctionDefinition,
    ObjectKind,
    SchemaObject,
    TableDefinition,
)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def quote_name(name: str, force: bool = False) -> str:
    """Quote an entity name for use in a command.

    Plain identifiers are returned unchanged unless ``force`` is set;
    anything else is wrapped as ``['name']``.

    Example:
        >>> quote_name("Orders")
        'Orders'
        >>> quote_name("Order Lines")
        "['Order Lines']"
        >>> quote_name("Orders", force=True)
        "['Orders']"
    """
    if not force and _IDENTIFIER.fullmatch(name):
        return name
    escaped = name.replace("\\", "\\\\").replace("'", "\\'")
    return f"['{escaped}']"


def quote_string(value: str) -> str:
    """Render ``value`` as a double-quoted string literal."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _body_block(body: str) -> str:
    body = body.strip()
    if body.startswith("{") and body.endswith("}"):
        return body
    return "{\n" + body + "\n}"


def _table_command(table: TableDefinition, use_legacy: bool) -> str:
    columns = ", ".join(
        f"{quote_name(col.name, force=use_legacy)}:{col.data_type}"
        for col in table.columns
    )
    return (
        f".create-merge table {quote_name(table.name)} ({columns}) "
        f"with (folder = {quote_string(table.folder)}, "
        f"docstring = {quote_string(table.docstring)})"
    )


def _function_command(function: FunctionDefinition, use_legacy: bool) -> str:
    params: list[str] = []
    for param in function.parameters:
        rendered = f"{quote_name(param.name, force=use_legacy)}:{param.data_type}"
        if param.default is not None:
            rendered += f" = {param.default}"
        params.append(rendered)

    return (
        f".create-or-alter function with "
        f"(folder = {quote_string(function.folder)}, "
        f"docstring = {quote_string(function.docstring)}, "
        f'skipvalidation = "true") '
        f"{quote_name(function.name)}({', '.join(params)}) "
        f"{_body_block(function.body)}"
    )


def generate_create_or_alter_command(obj: SchemaObject, use_legacy: bool) -> str:
    """Generate the idempotent create-or-alter command for ``obj``.

    Tables use ``.create-merge table`` and functions use
    ``.create-or-alter function``; both create the object if absent and
    replace its definition otherwise.

    Args:
        obj: Table or function definition.
        use_legacy: If True, column and parameter names are always
            bracket-quoted.  Files are written in this form.

    Returns:
        Command text, without a trailing newline.

    Raises:
        TypeError: If ``obj`` is not a table or function definition.

    Example:
        >>> table = TableDefinition(
        ...     name="Orders",
        ...     folder="Sales",
        ...     columns=[ColumnDefinition(name="Id", data_type="long")],
        ... )
        >>> generate_create_or_alter_command(table, use_legacy=False)
        '.create-merge table Orders (Id:long) with (folder = "Sales", docstring = "")'
    """
    if isinstance(obj, TableDefinition):
        return _table_command(obj, use_legacy)
    if isinstance(obj, FunctionDefinition):
        return _function_command(obj, use_legacy)
    raise TypeError(f"Unsupported schema object: {type(obj).__name__}")


def generate_drop_command(kind: ObjectKind, name: str) -> str:
    """Generate the drop-by-name command for an object.

    Uses ``ifexists`` so dropping an absent object succeeds.

    Example:
        >>> generate_drop_command(ObjectKind.FUNCTION, "Foo")
        '.drop function Foo ifexists'
    """
    return f".drop {kind.value} {quote_name(name)} ifexists"
