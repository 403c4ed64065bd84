"""Classification of model type descriptors into wire shape variants."""

import logging
from collections.abc import Callable

from . import naming
from .errors import Diagnostic
from .registry import Registry
from .types import (
    Array,
    CompositeType,
    Dictionary,
    Enum,
    Enumerable,
    Message,
    Nullable,
    Primitive,
    ScalarKind,
    TypeDescriptor,
    TypeReference,
    Unsupported,
    WellKnown,
    WellKnownKind,
)

logger = logging.getLogger(__name__)

CompositeResolver = Callable[[TypeDescriptor], CompositeType | None]

BYTE_NAMES = frozenset(["Byte"])

BUFFER_TYPES = frozenset(["Memory", "ReadOnlyMemory", "ArraySegment", "ReadOnlySequence"])

DICTIONARY_TYPES = frozenset(
    [
        "Dictionary",
        "IDictionary",
        "IReadOnlyDictionary",
        "SortedDictionary",
        "SortedList",
        "ConcurrentDictionary",
        "ImmutableDictionary",
        "IImmutableDictionary",
        "ObservableDictionary",
    ]
)

ENUMERABLE_TYPES = frozenset(
    [
        "IEnumerable",
        "ICollection",
        "IReadOnlyCollection",
        "IList",
        "IReadOnlyList",
        "List",
        "Collection",
        "ReadOnlyCollection",
        "ObservableCollection",
        "ReadOnlyObservableCollection",
        "HashSet",
        "ISet",
        "IReadOnlySet",
        "SortedSet",
        "LinkedList",
        "Queue",
        "Stack",
        "ImmutableArray",
        "ImmutableList",
        "IImmutableList",
        "ConcurrentBag",
    ]
)

ASYNC_TYPES = frozenset(["Task", "ValueTask"])

# Value primitives, which get a wrapper encoding when nullable
PRIMITIVE_TYPES: dict[str, ScalarKind] = {
    "Boolean": ScalarKind.BOOL,
    "Char": ScalarKind.STRING,
    "SByte": ScalarKind.INT32,
    "Byte": ScalarKind.UINT32,
    "Int16": ScalarKind.INT32,
    "UInt16": ScalarKind.UINT32,
    "Int32": ScalarKind.INT32,
    "UInt32": ScalarKind.UINT32,
    "Int64": ScalarKind.INT64,
    "UInt64": ScalarKind.UINT64,
    "Half": ScalarKind.FLOAT,
    "Single": ScalarKind.FLOAT,
    "Double": ScalarKind.DOUBLE,
}

WELL_KNOWN_TYPES: dict[str, TypeReference] = {
    "String": Primitive(ScalarKind.STRING),
    **{name: Primitive(kind) for name, kind in PRIMITIVE_TYPES.items()},
    "Decimal": WellKnown(WellKnownKind.DECIMAL),
    "DateTime": WellKnown(WellKnownKind.TIMESTAMP),
    "DateTimeOffset": WellKnown(WellKnownKind.TIMESTAMP),
    "TimeSpan": WellKnown(WellKnownKind.DURATION),
    "Guid": WellKnown(WellKnownKind.GUID),
    "Uri": WellKnown(WellKnownKind.URI),
    "Version": WellKnown(WellKnownKind.VERSION),
    "BigInteger": WellKnown(WellKnownKind.BIG_INTEGER),
    "DateOnly": WellKnown(WellKnownKind.DATE),
    "TimeOnly": WellKnown(WellKnownKind.TIME),
    "Object": WellKnown(WellKnownKind.ANY),
}

_FRAMEWORK_NAMES = (
    DICTIONARY_TYPES | ENUMERABLE_TYPES | BUFFER_TYPES | ASYNC_TYPES | frozenset(WELL_KNOWN_TYPES)
)


class TypeClassifier:
    """Map type descriptors to TypeReference variants.

    Classification never raises. Composite types are pushed onto the
    registry as they are found, and unmappable types are reported as soft
    diagnostics and classified as Unsupported.
    """

    def __init__(
        self,
        registry: Registry,
        diagnostics: list[Diagnostic] | None = None,
        resolve: CompositeResolver | None = None,
    ):
        self.registry = registry
        self.diagnostics: list[Diagnostic] = diagnostics if diagnostics is not None else []
        self.resolve = resolve

    def classify(self, t: TypeDescriptor, path: str = "") -> TypeReference:
        """Classify a type, applying the precedence rules in order."""
        name = naming.clr_name(t.name)

        # Byte arrays and byte buffers are a single bytes scalar
        if t.element is not None and t.rank == 1 and self._is_byte(t.element):
            return WellKnown(WellKnownKind.BYTES)
        if name in BUFFER_TYPES and len(t.arguments) == 1 and self._is_byte(t.arguments[0]):
            return WellKnown(WellKnownKind.BYTES)

        if t.nullable:
            inner = self.classify(t.without_nullable(), path)
            if isinstance(inner, Primitive) and name in PRIMITIVE_TYPES:
                return Nullable(inner)
            return inner

        if name in DICTIONARY_TYPES and len(t.arguments) == 2:
            key_type, value_type = t.arguments
            return Dictionary(
                key=self.classify(key_type, path),
                value=self.classify(value_type, path),
                key_type=key_type,
                value_type=value_type,
            )

        if t.element is not None:
            return Array(self.classify(t.element, path), t.rank, t.element)
        if name in ENUMERABLE_TYPES and len(t.arguments) == 1:
            return Enumerable(self.classify(t.arguments[0], path), t.arguments[0])

        if t.is_enum:
            return Enum(t.name)

        # Declared composites take precedence over framework names
        declared = self.resolve(t) if self.resolve is not None else None
        if declared is not None:
            return self._message(TypeDescriptor(name=declared.name))

        if name in WELL_KNOWN_TYPES and not t.arguments:
            return WELL_KNOWN_TYPES[name]

        if name in ASYNC_TYPES:
            if len(t.arguments) == 1:
                return self.classify(t.arguments[0], path)
            if not t.arguments:
                return WellKnown(WellKnownKind.ANY)

        if not naming.is_foundational(t.name) and self._is_user_type(t):
            return self._message(t)

        diagnostic = Diagnostic(
            path=path, type_name=str(t), message="Unsupported type, encoded as int32"
        )
        logger.warning("%s", diagnostic)
        self.diagnostics.append(diagnostic)
        return Unsupported(str(t))

    def _message(self, t: TypeDescriptor) -> Message:
        nominal_id = naming.canonical_name(t)
        message = Message(nominal_id, naming.message_name(t))
        self.registry.enqueue(nominal_id, t, message.name)
        return message

    def _is_byte(self, t: TypeDescriptor) -> bool:
        if t.nullable or t.arguments or t.element is not None:
            return False
        return naming.clr_name(t.name) in BYTE_NAMES

    def _is_user_type(self, t: TypeDescriptor) -> bool:
        # Generic framework shapes used with the wrong arity are not composites
        return naming.clr_name(t.name) not in _FRAMEWORK_NAMES and t.name not in naming.TYPE_ALIASES
