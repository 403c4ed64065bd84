"""View model description parser using Lark."""

import os
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, TypeVar

from lark import Lark, Token
from lark.visitors import Transformer

from . import naming
from .types import (
    CommandParameter,
    CompositeMember,
    CompositeType,
    EnumType,
    EnumValue,
    ModelCommand,
    ModelOption,
    ModelProperty,
    TypeDescriptor,
    ViewModel,
)

_g_parser: Lark | None = None

KNOWN_OPTIONS = frozenset(["namespace", "service"])


class ValidationError(RuntimeError):
    """Raised when view model validation fails."""


@dataclass
class _Name:
    value: str


@dataclass
class _Value:
    value: str


@dataclass
class _Property:
    name: str
    type: TypeDescriptor


@dataclass
class _Parameter:
    name: str
    type: TypeDescriptor


@dataclass
class _ViewModel:
    name: str
    options: list[ModelOption]
    properties: list[_Property]
    commands: list[ModelCommand]


TFilter = TypeVar("TFilter", bound=object)


def _filter(args: list[Any], class_type: type[TFilter]) -> list[TFilter]:
    return [v for v in args if isinstance(v, class_type)]


def _find_one(args: list[Any], class_type: type[object]) -> Any:
    filtered = _filter(args, class_type)
    if len(filtered) == 0:
        return None
    if len(filtered) > 1:
        raise RuntimeError(f"Found more than one {class_type}")

    if hasattr(filtered[0], "value"):
        return filtered[0].value
    return filtered[0]


class TreeTransformer(Transformer):
    """Transform parse tree into view model types."""

    def start(self, args: list[Any]) -> list[Any]:
        return args

    def name(self, args: list[Any]) -> _Name:
        return _Name(value=str(args[0]))

    def qualified_name(self, args: list[Any]) -> _Name:
        return _Name(value=".".join(str(a) for a in args))

    def value(self, args: list[Any]) -> _Value:
        return _Value(value=str(args[0])[1:-1])

    def simple(self, args: list[Any]) -> TypeDescriptor:
        return TypeDescriptor(name=_find_one(args, _Name))

    def generic(self, args: list[Any]) -> TypeDescriptor:
        name = _find_one(args, _Name)
        arguments = tuple(_filter(args, TypeDescriptor))
        if naming.clr_name(name) == "Nullable" and len(arguments) == 1:
            return replace(arguments[0], nullable=True)
        return TypeDescriptor(name=name, arguments=arguments)

    def nullable(self, args: list[Any]) -> TypeDescriptor:
        return replace(args[0], nullable=True)

    def array(self, args: list[Any]) -> TypeDescriptor:
        element = args[0]
        rank = str(args[1]).count(",") + 1
        return TypeDescriptor(name=f"{element}[{',' * (rank - 1)}]", element=element, rank=rank)

    def option(self, args: list[Any]) -> ModelOption:
        return ModelOption(name=_find_one(args, _Name), value=_find_one(args, _Value))

    def property(self, args: list[Any]) -> _Property:
        return _Property(name=_find_one(args, _Name), type=_find_one(args, TypeDescriptor))

    def parameter(self, args: list[Any]) -> _Parameter:
        return _Parameter(name=_find_one(args, _Name), type=_find_one(args, TypeDescriptor))

    def command(self, args: list[Any]) -> ModelCommand:
        is_async = any(isinstance(a, Token) and a.type == "ASYNC" for a in args)
        parameters = tuple(
            CommandParameter(name=p.name, type=p.type, ordinal=i)
            for i, p in enumerate(_filter(args, _Parameter), start=1)
        )
        return ModelCommand(name=_find_one(args, _Name), is_async=is_async, parameters=parameters)

    def viewmodel(self, args: list[Any]) -> _ViewModel:
        return _ViewModel(
            name=_find_one(args, _Name),
            options=_filter(args, ModelOption),
            properties=_filter(args, _Property),
            commands=_filter(args, ModelCommand),
        )

    def member(self, args: list[Any]) -> CompositeMember:
        return CompositeMember(name=_find_one(args, _Name), type=_find_one(args, TypeDescriptor))

    def composite(self, args: list[Any]) -> CompositeType:
        return CompositeType(
            name=_find_one(args, _Name), members=tuple(_filter(args, CompositeMember))
        )

    def enum_value(self, args: list[Any]) -> EnumValue:
        numbers = [int(a) for a in args if isinstance(a, Token) and a.type == "SIGNED_INT"]
        return EnumValue(name=_find_one(args, _Name), number=numbers[0] if numbers else None)

    def enum(self, args: list[Any]) -> EnumType:
        return EnumType(name=_find_one(args, _Name), values=tuple(_filter(args, EnumValue)))


def _resolve_enums(t: TypeDescriptor, enum_names: set[str]) -> TypeDescriptor:
    """Mark references to declared enums, recursively."""
    element = _resolve_enums(t.element, enum_names) if t.element is not None else None
    arguments = tuple(_resolve_enums(a, enum_names) for a in t.arguments)
    is_enum = element is None and not arguments and (
        t.name in enum_names or t.base_name in enum_names
    )
    return replace(t, element=element, arguments=arguments, is_enum=is_enum)


def _duplicates(names: list[str]) -> list[str]:
    return sorted(name for name, count in Counter(names).items() if count > 1)


def validate(
    view_models: list[_ViewModel],
    composites: list[CompositeType],
    enums: list[EnumType],
) -> None:
    """Validate a parsed view model description."""
    if len(view_models) == 0:
        raise ValidationError("No viewmodel declared")
    if len(view_models) > 1:
        names = ", ".join(vm.name for vm in view_models)
        raise ValidationError(f"Only one viewmodel may be declared, found {names}")

    vm = view_models[0]
    for opt in vm.options:
        if opt.name not in KNOWN_OPTIONS:
            raise ValidationError(f"Unknown option {opt.name} in viewmodel {vm.name}")

    if dups := _duplicates([opt.name for opt in vm.options]):
        raise ValidationError(f"Option {dups[0]} set more than once")
    if dups := _duplicates([p.name for p in vm.properties]):
        raise ValidationError(f"Property {dups[0]} declared more than once")
    if dups := _duplicates([naming.strip_async_suffix(c.name) for c in vm.commands]):
        raise ValidationError(f"Command {dups[0]} declared more than once")
    for command in vm.commands:
        if dups := _duplicates([p.name for p in command.parameters]):
            raise ValidationError(f"Parameter {dups[0]} of command {command.name} repeated")

    if dups := _duplicates([t.name for t in composites] + [e.name for e in enums]):
        raise ValidationError(f"Type {dups[0]} declared more than once")
    for composite in composites:
        if dups := _duplicates([m.name for m in composite.members]):
            raise ValidationError(f"Member {dups[0]} of type {composite.name} repeated")
    for enum in enums:
        if dups := _duplicates([v.name for v in enum.values]):
            raise ValidationError(f"Value {dups[0]} of enum {enum.name} repeated")


def parse(text: str) -> ViewModel:
    """Parse a view model description."""
    global _g_parser

    if not _g_parser:
        with open(f"{os.path.dirname(__file__)}/model.lark", encoding="utf-8") as f:
            grammar = f.read()

        _g_parser = Lark(grammar)

    tree = _g_parser.parse(text)
    items = TreeTransformer().transform(tree)

    view_models = _filter(items, _ViewModel)
    composites = _filter(items, CompositeType)
    enums = _filter(items, EnumType)

    validate(view_models, composites, enums)

    vm = view_models[0]
    enum_names = {e.name for e in enums} | {e.name.rsplit(".", 1)[-1] for e in enums}

    def resolve(t: TypeDescriptor) -> TypeDescriptor:
        return _resolve_enums(t, enum_names)

    return ViewModel(
        name=vm.name,
        properties=tuple(
            ModelProperty(name=p.name, type=resolve(p.type), ordinal=i)
            for i, p in enumerate(vm.properties, start=1)
        ),
        commands=tuple(
            replace(
                c,
                parameters=tuple(replace(p, type=resolve(p.type)) for p in c.parameters),
            )
            for c in vm.commands
        ),
        composites=tuple(
            replace(
                t,
                members=tuple(replace(m, type=resolve(m.type)) for m in t.members),
            )
            for t in composites
        ),
        enums=tuple(enums),
        options=tuple(vm.options),
    )
