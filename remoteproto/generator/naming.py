"""Naming conventions shared by the classifier, mappers and emitter."""

import re

from .types import Array, Dictionary, Enumerable, Message, TypeDescriptor, TypeReference

# C# keyword aliases and their framework type names
TYPE_ALIASES: dict[str, str] = {
    "bool": "Boolean",
    "byte": "Byte",
    "sbyte": "SByte",
    "char": "Char",
    "short": "Int16",
    "ushort": "UInt16",
    "int": "Int32",
    "uint": "UInt32",
    "long": "Int64",
    "ulong": "UInt64",
    "float": "Single",
    "double": "Double",
    "decimal": "Decimal",
    "string": "String",
    "object": "Object",
}

FOUNDATIONAL_NAMESPACES = ("System.", "Microsoft.", "Windows.")

STATE_SUFFIX = "State"
ASYNC_SUFFIX = "Async"

_SNAKE_BOUNDARY = re.compile(r"(?<=[a-z0-9])[A-Z]|(?<=[A-Z])[A-Z](?=[a-z])")
_INVALID_IDENTIFIER = re.compile(r"[^A-Za-z0-9_]+")
_INVALID_PACKAGE = re.compile(r"[^a-z0-9_]+")


def to_snake_case(name: str) -> str:
    """Convert a PascalCase or camelCase name to snake_case.

    >>> to_snake_case("IsEnabled")
    'is_enabled'
    >>> to_snake_case("HTTPServer")
    'http_server'
    """
    if not name:
        return name
    return _SNAKE_BOUNDARY.sub(r"_\g<0>", name).lower()


def sanitize_identifier(text: str) -> str:
    """Replace every run of characters not valid in an identifier with `_`."""
    result = _INVALID_IDENTIFIER.sub("_", text).strip("_")
    if not result:
        return "_"
    if result[0].isdigit():
        return f"_{result}"
    return result


def strip_async_suffix(name: str) -> str:
    """Return the base name of a command, without a trailing `Async`."""
    if name.endswith(ASYNC_SUFFIX) and len(name) > len(ASYNC_SUFFIX):
        return name[: -len(ASYNC_SUFFIX)]
    return name


def package_name(namespace: str) -> str:
    """Derive a proto package name from a dotted namespace."""
    package = _INVALID_PACKAGE.sub("_", namespace.lower()).strip("_")
    if not package or not package[0].isalpha():
        package = f"generated_{package}"
    return package


def is_foundational(name: str) -> bool:
    return name.startswith(FOUNDATIONAL_NAMESPACES)


def clr_name(name: str) -> str:
    """Normalise a written type name to its framework name.

    Keyword aliases are resolved and namespace qualification is dropped for
    foundational types, so `int`, `Int32` and `System.Int32` all become
    `Int32`. Names of user types are returned unchanged.
    """
    if name in TYPE_ALIASES:
        return TYPE_ALIASES[name]
    if is_foundational(name):
        return name.rsplit(".", 1)[-1]
    return name


def canonical_name(t: TypeDescriptor) -> str:
    """Stable identity of a type, used for de-duplication."""
    if t.element is not None:
        return f"{canonical_name(t.element)}[{',' * (t.rank - 1)}]"
    name = clr_name(t.name)
    if t.arguments:
        name += f"<{','.join(canonical_name(a) for a in t.arguments)}>"
    return name


def display_name(t: TypeDescriptor) -> str:
    """Unqualified framework-style name, e.g. `List<Int32>` for `List<int>`."""
    if t.element is not None:
        return f"{display_name(t.element)}[{',' * (t.rank - 1)}]"
    name = clr_name(t.name).rsplit(".", 1)[-1]
    if t.arguments:
        name += f"<{','.join(display_name(a) for a in t.arguments)}>"
    return name


def type_identifier(t: TypeDescriptor) -> str:
    """Sanitized display name, e.g. `List_Int32` for `List<int>`."""
    return sanitize_identifier(display_name(t.without_nullable()))


def message_name(t: TypeDescriptor) -> str:
    """Name of the message generated for a composite type."""
    return f"{type_identifier(t)}{STATE_SUFFIX}"


def entry_name(key: TypeDescriptor, value: TypeDescriptor) -> str:
    return f"{type_identifier(key)}_{type_identifier(value)}_Entry"


def map_wrapper_name(key: TypeDescriptor, value: TypeDescriptor) -> str:
    return f"{type_identifier(key)}_{type_identifier(value)}_Map"


def list_wrapper_name(element: TypeDescriptor) -> str:
    return f"{type_identifier(element)}_List"


def reference_identity(ref: TypeReference, t: TypeDescriptor) -> str:
    """Stable identity of a classified type, used for de-duplication.

    Composites are keyed by the declaration they resolve to, so `Node` and
    `Acme.Node` share one identity when they name the same type.
    """
    match ref:
        case Message(nominal_id=nominal_id):
            return nominal_id
        case Array(element=element, rank=rank, element_type=element_type):
            return f"{reference_identity(element, element_type)}[{',' * (rank - 1)}]"
        case Enumerable(element=element, element_type=element_type):
            return f"{clr_name(t.name)}<{reference_identity(element, element_type)}>"
        case Dictionary(key=key, value=value, key_type=key_type, value_type=value_type):
            key_id = reference_identity(key, key_type)
            value_id = reference_identity(value, value_type)
            return f"{clr_name(t.name)}<{key_id},{value_id}>"
        case _:
            return canonical_name(t)
