"""Field encodings for classified type references."""

from typing import assert_never

from .dictionaries import DictionaryMapper
from .registry import Registry
from .schema import ImportFlags, MessageField
from .sequences import CollectionMapper
from .types import (
    Array,
    Dictionary,
    Enum,
    Enumerable,
    FieldEncoding,
    Message,
    Nullable,
    Primitive,
    ScalarKind,
    TypeReference,
    Unsupported,
    WellKnown,
    WellKnownKind,
)

# Boxed scalars that distinguish "absent" from "present with default value"
WRAPPER_TYPES: dict[ScalarKind, str] = {
    ScalarKind.DOUBLE: "google.protobuf.DoubleValue",
    ScalarKind.FLOAT: "google.protobuf.FloatValue",
    ScalarKind.INT64: "google.protobuf.Int64Value",
    ScalarKind.UINT64: "google.protobuf.UInt64Value",
    ScalarKind.INT32: "google.protobuf.Int32Value",
    ScalarKind.UINT32: "google.protobuf.UInt32Value",
    ScalarKind.BOOL: "google.protobuf.BoolValue",
    ScalarKind.STRING: "google.protobuf.StringValue",
    ScalarKind.BYTES: "google.protobuf.BytesValue",
}

# Wire type and required import for each well-known kind
WELL_KNOWN_ENCODINGS: dict[WellKnownKind, tuple[str, str | None]] = {
    WellKnownKind.TIMESTAMP: ("google.protobuf.Timestamp", "timestamp"),
    WellKnownKind.DURATION: ("google.protobuf.Duration", "duration"),
    WellKnownKind.ANY: ("google.protobuf.Any", "any"),
    WellKnownKind.BYTES: ("bytes", None),
    WellKnownKind.GUID: ("string", None),
    WellKnownKind.URI: ("string", None),
    WellKnownKind.VERSION: ("string", None),
    WellKnownKind.DECIMAL: ("string", None),
    WellKnownKind.BIG_INTEGER: ("string", None),
    WellKnownKind.DATE: ("string", None),
    WellKnownKind.TIME: ("string", None),
}

# Safe scalar used for enums and unsupported leaves
DEFAULT_SCALAR = ScalarKind.INT32


class FieldEncoder:
    """Turn type references into field encodings.

    Collections and dictionaries are delegated to their mappers, which may
    register synthesized messages with the registry.
    """

    def __init__(self, registry: Registry):
        self.registry = registry
        self.used_imports: set[str] = set()
        self.collections = CollectionMapper(self)
        self.dictionaries = DictionaryMapper(self)

    def encode(self, ref: TypeReference, path: str) -> FieldEncoding:
        match ref:
            case Primitive(kind=kind):
                return FieldEncoding(str(kind))
            case Nullable(inner=inner):
                self.used_imports.add("wrappers")
                return FieldEncoding(WRAPPER_TYPES[inner.kind])
            case WellKnown(kind=kind):
                type_name, import_name = WELL_KNOWN_ENCODINGS[kind]
                if import_name:
                    self.used_imports.add(import_name)
                return FieldEncoding(type_name)
            case Enum():
                return FieldEncoding(str(DEFAULT_SCALAR))
            case Message(name=name):
                return FieldEncoding(name)
            case Unsupported():
                return FieldEncoding(str(DEFAULT_SCALAR))
            case Array() | Enumerable():
                return self.collections.map(ref, path)
            case Dictionary():
                return self.dictionaries.map(ref, path)
            case _:
                assert_never(ref)

    def field(
        self, name: str, ref: TypeReference, number: int, path: str, comment: str | None = None
    ) -> MessageField:
        """Build a numbered message field for a classified type."""
        encoding = self.encode(ref, path)
        return MessageField(
            name=name,
            type=encoding.type,
            number=number,
            repeated=encoding.repeated,
            comment=comment,
        )

    def import_flags(self) -> ImportFlags:
        return ImportFlags(
            timestamp="timestamp" in self.used_imports,
            duration="duration" in self.used_imports,
            wrappers="wrappers" in self.used_imports,
        )
