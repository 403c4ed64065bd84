"""Type definitions for view model parsing and type classification."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


@dataclass(frozen=True)
class TypeDescriptor:
    """Represents a type expression as written in the model.

    For arrays:
    - element is the element type and rank the number of dimensions
    - element=None, rank=0: not an array

    `Nullable<T>` and `T?` are both represented as `T` with nullable=True.
    """

    name: str
    arguments: tuple[TypeDescriptor, ...] = ()
    nullable: bool = False
    element: TypeDescriptor | None = None
    rank: int = 0
    is_enum: bool = False

    @property
    def base_name(self) -> str:
        """Name without namespace qualification."""
        return self.name.rsplit(".", 1)[-1]

    def without_nullable(self) -> TypeDescriptor:
        if not self.nullable:
            return self
        return TypeDescriptor(
            name=self.name,
            arguments=self.arguments,
            element=self.element,
            rank=self.rank,
            is_enum=self.is_enum,
        )

    def __str__(self) -> str:
        if self.element is not None:
            text = f"{self.element}[{',' * (self.rank - 1)}]"
        elif self.arguments:
            text = f"{self.name}<{', '.join(str(a) for a in self.arguments)}>"
        else:
            text = self.name
        return f"{text}?" if self.nullable else text


@dataclass(frozen=True)
class ModelProperty:
    """A named, typed property of the view model."""

    name: str
    type: TypeDescriptor
    ordinal: int


@dataclass(frozen=True)
class CommandParameter:
    """A named, typed parameter of a command."""

    name: str
    type: TypeDescriptor
    ordinal: int


@dataclass(frozen=True)
class ModelCommand:
    """A command exposed by the view model."""

    name: str
    is_async: bool
    parameters: tuple[CommandParameter, ...]


@dataclass(frozen=True)
class CompositeMember:
    """A field-like member of a declared composite type."""

    name: str
    type: TypeDescriptor


@dataclass(frozen=True)
class CompositeType:
    """A user-declared composite type."""

    name: str
    members: tuple[CompositeMember, ...]


@dataclass(frozen=True)
class EnumValue:
    """A named enum value, with its number when one is written."""

    name: str
    number: int | None = None


@dataclass(frozen=True)
class EnumType:
    """A user-declared enum type."""

    name: str
    values: tuple[EnumValue, ...]


@dataclass(frozen=True)
class ModelOption:
    """A `name = "value"` option inside the view model block."""

    name: str
    value: Any


@dataclass(frozen=True)
class ViewModel:
    """Represents a complete, introspected view model."""

    name: str
    properties: tuple[ModelProperty, ...]
    commands: tuple[ModelCommand, ...]
    composites: tuple[CompositeType, ...] = ()
    enums: tuple[EnumType, ...] = ()
    options: tuple[ModelOption, ...] = ()

    def option(self, name: str, default: str | None = None) -> str | None:
        for opt in self.options:
            if opt.name == name:
                return opt.value
        return default

    def composite(self, t: TypeDescriptor) -> CompositeType | None:
        """Return the declaration a type expression refers to, if any.

        Types are matched by their written name first and by their
        unqualified name second. Generic, array and enum types never refer
        to a declared composite.
        """
        if t.arguments or t.element is not None or t.is_enum:
            return None
        by_name = {c.name: c for c in self.composites}
        composite = by_name.get(t.name)
        if composite is None:
            short = {c.name.rsplit(".", 1)[-1]: c for c in self.composites}
            composite = short.get(t.base_name)
        return composite

    def member_lookup(self, t: TypeDescriptor) -> list[CompositeMember]:
        """Return the declared members of a composite type, in declared order.

        Unknown types have no members.
        """
        composite = self.composite(t)
        if composite is None:
            return []
        return list(composite.members)


class ScalarKind(StrEnum):
    """Proto3 scalar value types."""

    DOUBLE = "double"
    FLOAT = "float"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    BOOL = "bool"
    STRING = "string"
    BYTES = "bytes"


class WellKnownKind(StrEnum):
    """Well-known temporal, identifier and buffer forms."""

    TIMESTAMP = "timestamp"
    DURATION = "duration"
    ANY = "any"
    BYTES = "bytes"
    GUID = "guid"
    URI = "uri"
    VERSION = "version"
    DECIMAL = "decimal"
    BIG_INTEGER = "big_integer"
    DATE = "date"
    TIME = "time"


# TypeReference variants. Consumers match over these exhaustively.


@dataclass(frozen=True)
class Primitive:
    kind: ScalarKind


@dataclass(frozen=True)
class WellKnown:
    kind: WellKnownKind


@dataclass(frozen=True)
class Nullable:
    inner: Primitive


@dataclass(frozen=True)
class Array:
    element: TypeReference
    rank: int
    element_type: TypeDescriptor = field(compare=False)


@dataclass(frozen=True)
class Enumerable:
    element: TypeReference
    element_type: TypeDescriptor = field(compare=False)


@dataclass(frozen=True)
class Dictionary:
    key: TypeReference
    value: TypeReference
    key_type: TypeDescriptor = field(compare=False)
    value_type: TypeDescriptor = field(compare=False)


@dataclass(frozen=True)
class Enum:
    name: str


@dataclass(frozen=True)
class Message:
    nominal_id: str
    name: str


@dataclass(frozen=True)
class Unsupported:
    type_name: str


TypeReference = (
    Primitive
    | WellKnown
    | Nullable
    | Array
    | Enumerable
    | Dictionary
    | Enum
    | Message
    | Unsupported
)


@dataclass(frozen=True)
class FieldEncoding:
    """The wire type of a field and whether it is repeated."""

    type: str
    repeated: bool = False
