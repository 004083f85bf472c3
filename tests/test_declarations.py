"""Tests for declared-symbol collection from C# trees."""

from typing import Any

import pytest
from symbolwalk.symbols import (
    DeclarationTable,
    MemberSymbol,
    NamedTypeSymbol,
    SymbolKind,
    TypeKind,
    TypeParameterSymbol,
    collect_declarations,
    qualified_name,
)
from symbolwalk.syntax import (
    TreeSitterLanguage,
    find_descendants,
    find_first_descendant,
    parse_source,
)

CSHARP_SOURCE = """\
using System;

namespace Acme.Tools
{
    public class Outer<T>
    {
        public class Inner
        {
            public int Count, Total;

            public void Run<TArg>(TArg value)
            {
                var local = 1;
            }
        }

        public string Name { get; set; }
    }

    public partial class Widget { }

    public partial class Widget { }

    public enum Color { Red, Green }

    public interface IShape { }
}
"""


@pytest.fixture
def root() -> Any:
    return parse_source(CSHARP_SOURCE, TreeSitterLanguage.CSHARP).root_node


@pytest.fixture
def table(root: Any) -> DeclarationTable:
    return collect_declarations(root)


class TestCollectDeclarations:
    """Tests for collect_declarations."""

    def test_dotted_namespace_is_nested(self, table: DeclarationTable) -> None:
        """Test that `namespace Acme.Tools` creates two levels."""
        acme = table.global_namespace.members["Acme"]
        assert acme.members["Tools"].containing_symbol is acme

    def test_types_and_qualified_names(self, table: DeclarationTable) -> None:
        """Test the qualified names of every declared type."""
        names = [qualified_name(t) for t in table.named_types()]
        assert names == [
            "Acme.Tools.Outer<Acme.Tools.Outer<T>.T>",
            "Acme.Tools.Outer<T>.Inner",
            "Acme.Tools.Widget",
            "Acme.Tools.Color",
            "Acme.Tools.IShape",
        ]

    def test_type_kinds(self, table: DeclarationTable) -> None:
        """Test that declaration node types map to type kinds."""
        kinds = {t.name: t.type_kind for t in table.named_types()}
        assert kinds["Outer"] == TypeKind.CLASS
        assert kinds["Color"] == TypeKind.ENUM
        assert kinds["IShape"] == TypeKind.INTERFACE

    def test_generic_metadata_name(self, table: DeclarationTable) -> None:
        """Test that type parameters set the arity suffix."""
        tools = table.global_namespace.members["Acme"].members["Tools"]
        outer = tools.members["Outer`1"]
        assert isinstance(outer, NamedTypeSymbol)
        assert [p.name for p in outer.type_parameters] == ["T"]

    def test_find_type(self, table: DeclarationTable) -> None:
        """Test lookup by qualified name."""
        inner = table.find_type("Acme.Tools.Outer<T>.Inner")
        assert inner is not None
        assert inner.name == "Inner"
        assert table.find_type("Acme.Missing") is None

    def test_partial_declarations_share_symbol(self, root: Any, table: DeclarationTable) -> None:
        """Test that both halves of a partial class map to one symbol."""
        classes = find_descendants(root, "class_declaration")
        widgets = [
            table.declared_symbol(c)
            for c in classes
            if c.child_by_field_name("name").text == b"Widget"
        ]
        assert len(widgets) == 2
        assert widgets[0] is widgets[1]

    def test_members(self, table: DeclarationTable) -> None:
        """Test fields, methods, properties and enum members."""
        outer = table.find_type("Acme.Tools.Outer<Acme.Tools.Outer<T>.T>")
        inner = table.find_type("Acme.Tools.Outer<T>.Inner")
        color = table.find_type("Acme.Tools.Color")
        assert outer is not None and inner is not None and color is not None

        assert inner.members["Count"].kind == SymbolKind.FIELD
        assert inner.members["Total"].kind == SymbolKind.FIELD
        assert inner.members["Run"].kind == SymbolKind.METHOD
        assert outer.members["Name"].kind == SymbolKind.PROPERTY
        assert set(color.members) == {"Red", "Green"}

    def test_method_declared_symbol(self, root: Any, table: DeclarationTable) -> None:
        """Test mapping a method node to its symbol and name."""
        method_node = find_first_descendant(root, "method_declaration")
        method = table.declared_symbol(method_node)
        assert isinstance(method, MemberSymbol)
        assert method.name == "Run"
        assert [p.name for p in method.type_parameters] == ["TArg"]
        assert qualified_name(method) == "Acme.Tools.Outer<T>.Inner"

    def test_type_parameter_node(self, root: Any, table: DeclarationTable) -> None:
        """Test that type parameter nodes declare type parameter symbols."""
        parameter_node = find_first_descendant(root, "type_parameter")
        parameter = table.declared_symbol(parameter_node)
        assert isinstance(parameter, TypeParameterSymbol)
        assert qualified_name(parameter) == "Acme.Tools.Outer<T>.T"

    def test_enclosing_symbol_skips_locals(self, root: Any, table: DeclarationTable) -> None:
        """Test that a statement inside a method resolves to the method."""
        method_node = find_first_descendant(root, "method_declaration")
        local = find_first_descendant(method_node.child_by_field_name("body"), "variable_declarator")
        enclosing = table.enclosing_symbol(local)
        assert isinstance(enclosing, MemberSymbol)
        assert enclosing.name == "Run"

    def test_enclosing_symbol_outside_declarations(self, root: Any, table: DeclarationTable) -> None:
        """Test a node that no declaration contains."""
        using = find_first_descendant(root, "using_directive")
        assert table.enclosing_symbol(using) is None


class TestFileScopedNamespace:
    """Tests for `namespace N;` declarations."""

    def test_types_belong_to_namespace(self) -> None:
        """Test that declarations after the directive are inside it."""
        source = "namespace Acme.App;\n\npublic class Program { }\n\npublic record Settings(int Port);\n"
        root = parse_source(source, TreeSitterLanguage.CSHARP).root_node
        table = collect_declarations(root)

        assert table.find_type("Acme.App.Program") is not None
        settings = table.find_type("Acme.App.Settings")
        assert settings is not None
        assert settings.type_kind == TypeKind.RECORD
