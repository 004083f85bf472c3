"""In-memory symbol model.

Symbols form a containment graph rooted at a global namespace. The qualified
name builder only relies on the ``SymbolLike`` protocol, so symbols coming
from another front end can be used as long as they expose the same
attributes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Protocol, runtime_checkable

from symbolwalk.symbols.exceptions import SymbolDisplayError


class SymbolKind(Enum):
    """Kinds of program entities."""

    NAMESPACE = "namespace"
    NAMED_TYPE = "named_type"
    ARRAY_TYPE = "array_type"
    TYPE_PARAMETER = "type_parameter"
    METHOD = "method"
    CONSTRUCTOR = "constructor"
    PROPERTY = "property"
    FIELD = "field"
    EVENT = "event"
    PARAMETER = "parameter"
    LOCAL = "local"


class TypeKind(Enum):
    """Kinds of named types."""

    CLASS = "class"
    STRUCT = "struct"
    INTERFACE = "interface"
    ENUM = "enum"
    RECORD = "record"
    DELEGATE = "delegate"


@runtime_checkable
class SymbolLike(Protocol):
    """What the qualified name builder needs from a symbol."""

    @property
    def containing_symbol(self) -> SymbolLike | None: ...

    @property
    def metadata_name(self) -> str: ...

    @property
    def is_namespace(self) -> bool: ...

    @property
    def is_global_namespace(self) -> bool: ...

    @property
    def is_type(self) -> bool: ...

    @property
    def is_array(self) -> bool: ...

    @property
    def is_named_type(self) -> bool: ...

    @property
    def element_type(self) -> SymbolLike | None: ...

    @property
    def type_arguments(self) -> Sequence[SymbolLike]: ...

    @property
    def arity(self) -> int: ...

    @property
    def original_definition(self) -> SymbolLike: ...

    def to_display_string(self) -> str: ...


@dataclass(eq=False)
class Symbol:
    """A named program entity.

    Symbols compare by identity: two declarations of the same entity share
    one symbol object.
    """

    name: str
    kind: SymbolKind
    containing_symbol: Symbol | None = field(default=None, repr=False)

    is_namespace: ClassVar[bool] = False
    is_type: ClassVar[bool] = False
    is_array: ClassVar[bool] = False
    is_named_type: ClassVar[bool] = False

    @property
    def metadata_name(self) -> str:
        return self.name

    @property
    def is_global_namespace(self) -> bool:
        return False

    @property
    def element_type(self) -> Symbol | None:
        return None

    @property
    def type_arguments(self) -> tuple[Symbol, ...]:
        return ()

    @property
    def arity(self) -> int:
        return 0

    @property
    def original_definition(self) -> Symbol:
        return self

    def to_display_string(self) -> str:
        """Minimally-qualified display name.

        Raises:
            SymbolDisplayError: If this kind of symbol has no display form
        """
        raise SymbolDisplayError(f"{self.kind.value} symbol {self.name!r} has no display form")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


@dataclass(eq=False, repr=False)
class NamespaceSymbol(Symbol):
    """A namespace. The global namespace has an empty name and no container."""

    kind: SymbolKind = SymbolKind.NAMESPACE
    members: dict[str, Symbol] = field(default_factory=dict)

    is_namespace: ClassVar[bool] = True

    @classmethod
    def create_global(cls) -> NamespaceSymbol:
        return cls(name="")

    @property
    def is_global_namespace(self) -> bool:
        return self.containing_symbol is None and not self.name

    def to_display_string(self) -> str:
        if self.is_global_namespace:
            return "<global namespace>"
        return self.name

    def get_or_add_namespace(self, name: str) -> NamespaceSymbol:
        """Return the child namespace called ``name``, creating it if needed."""
        existing = self.members.get(name)
        if isinstance(existing, NamespaceSymbol):
            return existing
        namespace = NamespaceSymbol(name=name, containing_symbol=self)
        self.members[name] = namespace
        return namespace

    def add_member(self, symbol: Symbol) -> Symbol:
        """Add a member keyed by metadata name, returning the existing one on clash."""
        existing = self.members.get(symbol.metadata_name)
        if existing is not None:
            return existing
        symbol.containing_symbol = self
        self.members[symbol.metadata_name] = symbol
        return symbol


@dataclass(eq=False, repr=False)
class TypeSymbol(Symbol):
    """Base class for type symbols."""

    is_type: ClassVar[bool] = True

    def make_array(self, rank: int = 1) -> ArrayTypeSymbol:
        """Return the array type with this element type."""
        return ArrayTypeSymbol(element=self, rank=rank)


@dataclass(eq=False, repr=False)
class TypeParameterSymbol(TypeSymbol):
    """A type parameter of a generic type or method."""

    kind: SymbolKind = SymbolKind.TYPE_PARAMETER
    ordinal: int = 0

    def to_display_string(self) -> str:
        return self.name


@dataclass(eq=False, repr=False)
class NamedTypeSymbol(TypeSymbol):
    """A class, struct, interface, enum, record or delegate.

    A generic definition lists its type parameters; ``construct`` binds them
    to type arguments and returns a constructed type whose
    ``original_definition`` is the definition.
    """

    kind: SymbolKind = SymbolKind.NAMED_TYPE
    type_kind: TypeKind = TypeKind.CLASS
    type_parameters: list[TypeParameterSymbol] = field(default_factory=list)
    members: dict[str, Symbol] = field(default_factory=dict)
    constructed_from: NamedTypeSymbol | None = None
    bound_arguments: tuple[TypeSymbol, ...] = ()

    is_named_type: ClassVar[bool] = True

    @property
    def arity(self) -> int:
        return len(self.type_parameters)

    @property
    def metadata_name(self) -> str:
        if self.arity:
            return f"{self.name}`{self.arity}"
        return self.name

    @property
    def type_arguments(self) -> tuple[TypeSymbol, ...]:
        if self.constructed_from is not None:
            return self.bound_arguments
        return tuple(self.type_parameters)

    @property
    def original_definition(self) -> NamedTypeSymbol:
        return self.constructed_from or self

    def add_type_parameter(self, name: str) -> TypeParameterSymbol:
        parameter = TypeParameterSymbol(
            name=name, containing_symbol=self, ordinal=len(self.type_parameters)
        )
        self.type_parameters.append(parameter)
        return parameter

    def add_member(self, symbol: Symbol) -> Symbol:
        """Add a member keyed by metadata name, returning the existing one on clash."""
        existing = self.members.get(symbol.metadata_name)
        if existing is not None:
            return existing
        symbol.containing_symbol = self
        self.members[symbol.metadata_name] = symbol
        return symbol

    def construct(self, *type_arguments: TypeSymbol) -> NamedTypeSymbol:
        """Bind the type parameters of this generic type.

        Raises:
            ValueError: If the number of arguments does not match the arity
        """
        definition = self.original_definition
        if len(type_arguments) != definition.arity:
            raise ValueError(
                f"{definition.metadata_name} takes {definition.arity} type "
                f"argument(s), got {len(type_arguments)}"
            )
        return NamedTypeSymbol(
            name=definition.name,
            containing_symbol=definition.containing_symbol,
            type_kind=definition.type_kind,
            type_parameters=definition.type_parameters,
            members=definition.members,
            constructed_from=definition,
            bound_arguments=tuple(type_arguments),
        )

    def to_display_string(self) -> str:
        if not self.arity:
            return self.name
        arguments = ", ".join(arg.to_display_string() for arg in self.type_arguments)
        return f"{self.name}<{arguments}>"


@dataclass(eq=False, repr=False, kw_only=True)
class ArrayTypeSymbol(TypeSymbol):
    """An array of an element type. Arrays have no containing symbol."""

    name: str = ""
    kind: SymbolKind = SymbolKind.ARRAY_TYPE
    element: TypeSymbol
    rank: int = 1

    is_array: ClassVar[bool] = True

    @property
    def element_type(self) -> TypeSymbol:
        return self.element

    def to_display_string(self) -> str:
        return f"{self.element.to_display_string()}[{',' * (self.rank - 1)}]"

    def __repr__(self) -> str:
        return f"ArrayTypeSymbol({self.element!r}, rank={self.rank})"


@dataclass(eq=False, repr=False)
class MemberSymbol(Symbol):
    """A method, constructor, property, field or event of a type."""

    type_parameters: list[TypeParameterSymbol] = field(default_factory=list)

    def add_type_parameter(self, name: str) -> TypeParameterSymbol:
        parameter = TypeParameterSymbol(
            name=name, containing_symbol=self, ordinal=len(self.type_parameters)
        )
        self.type_parameters.append(parameter)
        return parameter

    def to_display_string(self) -> str:
        if not self.type_parameters:
            return self.name
        parameters = ", ".join(p.name for p in self.type_parameters)
        return f"{self.name}<{parameters}>"


@dataclass(eq=False, repr=False)
class LocalSymbol(Symbol):
    """A local variable or parameter."""

    kind: SymbolKind = SymbolKind.LOCAL
