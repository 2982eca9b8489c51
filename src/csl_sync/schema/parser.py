"""Parse create-or-alter command text back into definitions.

Reads the command forms produced by ``csl_sync.schema.commands`` (and the
equivalent hand-written forms) so a directory of ``.csl`` files can act as
the source of truth.  Pure logic -- no I/O.

Supported forms:
- ``.create table T (...)`` / ``.create-merge table T (...) [with (...)]``
- ``.create function [with (...)] F(...) { ... }`` /
  ``.create-or-alter function [with (...)] F(...) { ... }``
"""

import re

from csl_sync.errors import DefinitionParseError
from csl_sync.schema.models import (
    ColumnDefinition,
    FunctionDefinition,
    ParameterDefinition,
    SchemaObject,
    TableDefinition,
)

_NAME = re.compile(
    r"""\[\s*'((?:[^'\\]|\\.)*)'\s*\]"""
    r'''|\[\s*"((?:[^"\\]|\\.)*)"\s*\]'''
    r"|([A-Za-z_][A-Za-z0-9_]*)"
)
_TABLE_HEAD = re.compile(r"\.create(?:-merge)?\s+table\s+", re.IGNORECASE)
_FUNCTION_HEAD = re.compile(r"\.create(?:-or-alter)?\s+function\s*", re.IGNORECASE)
_WITH = re.compile(r"with\s*(?=\()", re.IGNORECASE)
_PROPERTY = re.compile(r"""(\w+)\s*=\s*(?:"((?:[^"\\]|\\.)*)"|'((?:[^'\\]|\\.)*)'|(\S+))""")
_ESCAPE = re.compile(r"\\(.)")


def _unescape(value: str) -> str:
    return _ESCAPE.sub(r"\1", value)


def _skip_ws(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _read_balanced(text: str, pos: int, open_ch: str = "(", close_ch: str = ")") -> tuple[str, int]:
    """Read a bracketed group starting at ``text[pos]``.

    Quoted strings inside the group are skipped so brackets within them
    are not counted.

    Returns:
        Tuple of (inner text, index just past the closing bracket).
    """
    if pos >= len(text) or text[pos] != open_ch:
        raise DefinitionParseError(f"Expected '{open_ch}' at offset {pos}")

    depth = 0
    quote: str | None = None
    i = pos
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return text[pos + 1:i], i + 1
        i += 1

    raise DefinitionParseError(f"Unbalanced '{open_ch}' starting at offset {pos}")


def _split_top_level(text: str) -> list[str]:
    """Split on commas that are outside brackets and quoted strings."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return [p.strip() for p in parts if p.strip()]


def _read_name(text: str, pos: int) -> tuple[str, int]:
    match = _NAME.match(text, pos)
    if not match:
        raise DefinitionParseError(f"Expected an entity name at offset {pos}")
    single, double, bare = match.groups()
    if bare is not None:
        return bare, match.end()
    return _unescape(single if single is not None else double), match.end()


def _parse_properties(text: str) -> dict[str, str]:
    properties: dict[str, str] = {}
    for key, double, single, bare in _PROPERTY.findall(text):
        if double or single:
            properties[key.lower()] = _unescape(double or single)
        else:
            properties[key.lower()] = bare.rstrip(",")
    return properties


def _split_typed(item: str) -> tuple[str, str]:
    name, pos = _read_name(item, _skip_ws(item, 0))
    pos = _skip_ws(item, pos)
    if pos >= len(item) or item[pos] != ":":
        raise DefinitionParseError(f"Expected 'name:type', got {item!r}")
    return name, item[pos + 1:].strip()


def parse_column_list(text: str) -> list[ColumnDefinition]:
    """Parse ``a:string, ['b c']:long`` into column definitions."""
    columns: list[ColumnDefinition] = []
    for item in _split_top_level(text):
        name, data_type = _split_typed(item)
        columns.append(ColumnDefinition(name=name, data_type=data_type))
    return columns


def parse_parameter_list(text: str) -> list[ParameterDefinition]:
    """Parse ``a:string, b:long = 10`` into parameter definitions.

    Surrounding parentheses, as returned by ``.show functions``, are
    accepted.
    """
    text = text.strip()
    if text.startswith("(") and text.endswith(")"):
        text = text[1:-1]

    parameters: list[ParameterDefinition] = []
    for item in _split_top_level(text):
        name, rest = _split_typed(item)
        default: str | None = None
        # Default values follow the type after a top-level '='
        depth = 0
        for i, ch in enumerate(rest):
            if ch in "([":
                depth += 1
            elif ch in ")]":
                depth -= 1
            elif ch == "=" and depth == 0:
                default = rest[i + 1:].strip()
                rest = rest[:i].strip()
                break
        parameters.append(ParameterDefinition(name=name, data_type=rest, default=default))
    return parameters


def _parse_table(text: str, pos: int) -> TableDefinition:
    name, pos = _read_name(text, pos)
    pos = _skip_ws(text, pos)
    columns_text, pos = _read_balanced(text, pos)
    pos = _skip_ws(text, pos)

    properties: dict[str, str] = {}
    with_match = _WITH.match(text, pos)
    if with_match:
        props_text, pos = _read_balanced(text, with_match.end())
        properties = _parse_properties(props_text)
        pos = _skip_ws(text, pos)

    if pos != len(text):
        raise DefinitionParseError(f"Unexpected text after table definition: {text[pos:]!r}")

    return TableDefinition(
        name=name,
        folder=properties.get("folder", ""),
        docstring=properties.get("docstring", ""),
        columns=parse_column_list(columns_text),
    )


def _parse_function(text: str, pos: int) -> FunctionDefinition:
    properties: dict[str, str] = {}
    with_match = _WITH.match(text, pos)
    if with_match:
        props_text, pos = _read_balanced(text, with_match.end())
        properties = _parse_properties(props_text)
        pos = _skip_ws(text, pos)

    name, pos = _read_name(text, pos)
    pos = _skip_ws(text, pos)
    params_text, pos = _read_balanced(text, pos)

    body = text[pos:].strip()
    if not (body.startswith("{") and body.endswith("}")):
        raise DefinitionParseError(f"Function {name} has no body block")

    return FunctionDefinition(
        name=name,
        folder=properties.get("folder", ""),
        docstring=properties.get("docstring", ""),
        parameters=parse_parameter_list(params_text),
        body=body,
    )


def parse_definition(text: str) -> SchemaObject:
    """Parse create-or-alter command text into a definition.

    Args:
        text: Contents of a ``.csl`` file.

    Returns:
        ``TableDefinition`` or ``FunctionDefinition``.

    Raises:
        DefinitionParseError: If the text is not a supported create command.

    Example:
        >>> obj = parse_definition('.create-merge table Orders (Id:long)')
        >>> obj.name, obj.columns[0].data_type
        ('Orders', 'long')
    """
    stripped = text.strip()

    table_match = _TABLE_HEAD.match(stripped)
    if table_match:
        return _parse_table(stripped, table_match.end())

    function_match = _FUNCTION_HEAD.match(stripped)
    if function_match:
        return _parse_function(stripped, function_match.end())

    first_line = stripped.splitlines()[0] if stripped else ""
    raise DefinitionParseError(f"Not a table or function definition: {first_line!r}")
