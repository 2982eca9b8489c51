"""Tests for command generation and parsing.

Checks the exact command text produced for tables and functions, the
drop command, name quoting, and that the parser reads command text back
into the same definitions.
"""

import pytest

from csl_sync.errors import DefinitionParseError
from csl_sync.schema.commands import (
    generate_create_or_alter_command,
    generate_drop_command,
    quote_name,
    quote_string,
)
from csl_sync.schema.models import (
    ColumnDefinition,
    FunctionDefinition,
    ObjectKind,
    ParameterDefinition,
    SchemaObject,
    TableDefinition,
)
from csl_sync.schema.parser import (
    parse_column_list,
    parse_definition,
    parse_parameter_list,
)


# ------------------------------------------------------------------
# Quoting
# ------------------------------------------------------------------


class TestQuoting:
    def test_identifier_is_bare(self) -> None:
        assert quote_name("Orders") == "Orders"

    def test_non_identifier_is_bracketed(self) -> None:
        assert quote_name("Order Lines") == "['Order Lines']"

    def test_force_brackets(self) -> None:
        assert quote_name("Orders", force=True) == "['Orders']"

    def test_single_quote_escaped(self) -> None:
        assert quote_name("it's") == "['it\\'s']"

    def test_string_literal(self) -> None:
        assert quote_string('say "hi"') == '"say \\"hi\\""'


# ------------------------------------------------------------------
# Generation
# ------------------------------------------------------------------


class TestTableCommand:
    def test_non_legacy(self) -> None:
        table = TableDefinition(
            name="Orders",
            folder="Sales",
            columns=[
                ColumnDefinition(name="OrderId", data_type="long"),
                ColumnDefinition(name="Total", data_type="real"),
            ],
        )
        assert generate_create_or_alter_command(table, use_legacy=False) == (
            '.create-merge table Orders (OrderId:long, Total:real) '
            'with (folder = "Sales", docstring = "")'
        )

    def test_legacy_brackets_columns(self) -> None:
        table = TableDefinition(
            name="Orders",
            columns=[ColumnDefinition(name="OrderId", data_type="long")],
            docstring="All orders",
        )
        assert generate_create_or_alter_command(table, use_legacy=True) == (
            ".create-merge table Orders (['OrderId']:long) "
            'with (folder = "", docstring = "All orders")'
        )


class TestFunctionCommand:
    def test_wraps_body(self) -> None:
        function = FunctionDefinition(
            name="Foo",
            folder="X",
            parameters=[
                ParameterDefinition(name="n", data_type="long", default="10"),
                ParameterDefinition(name="s", data_type="string"),
            ],
            body="Orders | take n",
        )
        assert generate_create_or_alter_command(function, use_legacy=False) == (
            '.create-or-alter function with (folder = "X", docstring = "", '
            'skipvalidation = "true") Foo(n:long = 10, s:string) {\n'
            "Orders | take n\n}"
        )

    def test_keeps_braced_body(self) -> None:
        function = FunctionDefinition(name="Foo", body="  { print 1 }  ")
        command = generate_create_or_alter_command(function, use_legacy=True)
        assert command.endswith("Foo() { print 1 }")

    def test_legacy_brackets_parameters(self) -> None:
        function = FunctionDefinition(
            name="Foo",
            parameters=[ParameterDefinition(name="n", data_type="long")],
            body="{ n }",
        )
        assert "Foo(['n']:long)" in generate_create_or_alter_command(function, True)

    def test_unsupported_type_raises(self) -> None:
        class ViewDefinition(SchemaObject):
            @property
            def kind(self) -> ObjectKind:
                return ObjectKind.TABLE

        with pytest.raises(TypeError):
            generate_create_or_alter_command(ViewDefinition(name="x"), True)

    def test_base_object_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            SchemaObject(name="x")


class TestDropCommand:
    def test_table(self) -> None:
        assert generate_drop_command(ObjectKind.TABLE, "Orders") == ".drop table Orders ifexists"

    def test_function_quoted(self) -> None:
        assert generate_drop_command(ObjectKind.FUNCTION, "my fn") == ".drop function ['my fn'] ifexists"


# ------------------------------------------------------------------
# Parsing
# ------------------------------------------------------------------


class TestParseDefinition:
    @pytest.mark.parametrize("use_legacy", [True, False])
    def test_reads_generated_table(self, use_legacy: bool) -> None:
        table = TableDefinition(
            name="Order Lines",
            folder='Sales\\"EU"',
            docstring="Line items (per order)",
            columns=[
                ColumnDefinition(name="Line Id", data_type="long"),
                ColumnDefinition(name="Props", data_type="dynamic"),
            ],
        )
        assert parse_definition(generate_create_or_alter_command(table, use_legacy)) == table

    def test_reads_generated_function(self) -> None:
        function = FunctionDefinition(
            name="Foo",
            folder="Reports/Daily",
            docstring="Top n) orders",
            parameters=[
                ParameterDefinition(name="T", data_type="(OrderId:long)"),
                ParameterDefinition(name="n", data_type="long", default="10"),
            ],
            body="{\n    T | take n\n}",
        )
        assert parse_definition(generate_create_or_alter_command(function, True)) == function

    def test_plain_create_table(self) -> None:
        obj = parse_definition(".create table Events (Timestamp:datetime, Name:string)\n")
        assert isinstance(obj, TableDefinition)
        assert obj.name == "Events"
        assert obj.folder == ""
        assert [c.name for c in obj.columns] == ["Timestamp", "Name"]

    def test_function_without_properties(self) -> None:
        obj = parse_definition(".create-or-alter function Bar() {\n  print 1\n}")
        assert isinstance(obj, FunctionDefinition)
        assert obj.name == "Bar"
        assert obj.parameters == []
        assert obj.body == "{\n  print 1\n}"

    def test_unsupported_command(self) -> None:
        with pytest.raises(DefinitionParseError, match="Not a table or function"):
            parse_definition(".show tables")

    def test_function_without_body(self) -> None:
        with pytest.raises(DefinitionParseError, match="no body"):
            parse_definition(".create function Bar()")

    def test_unbalanced_columns(self) -> None:
        with pytest.raises(DefinitionParseError):
            parse_definition(".create table T (a:string")

    def test_trailing_text(self) -> None:
        with pytest.raises(DefinitionParseError, match="Unexpected text"):
            parse_definition(".create table T (a:string) garbage")

    def test_empty_text(self) -> None:
        with pytest.raises(DefinitionParseError):
            parse_definition("")


class TestParseLists:
    def test_column_list(self) -> None:
        columns = parse_column_list("a:string, ['b c']:long")
        assert [(c.name, c.data_type) for c in columns] == [("a", "string"), ("b c", "long")]

    def test_parameter_list_with_parentheses(self) -> None:
        params = parse_parameter_list("(a:string, b:long = 5)")
        assert [(p.name, p.data_type, p.default) for p in params] == [
            ("a", "string", None),
            ("b", "long", "5"),
        ]

    def test_empty_parameter_list(self) -> None:
        assert parse_parameter_list("()") == []

    def test_malformed_column(self) -> None:
        with pytest.raises(DefinitionParseError):
            parse_column_list("nocolon")
