"""Encodings for key/value collections."""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import naming
from .errors import UnsupportedShapeError
from .schema import MessageDescriptor, MessageField, Provenance
from .types import (
    Array,
    Dictionary,
    Enum,
    Enumerable,
    FieldEncoding,
    Nullable,
    Primitive,
    ScalarKind,
    TypeReference,
    Unsupported,
)

if TYPE_CHECKING:
    from .encoding import FieldEncoder

# Scalar kinds proto3 accepts as map keys
MAP_KEY_KINDS = frozenset(
    [
        ScalarKind.INT32,
        ScalarKind.INT64,
        ScalarKind.UINT32,
        ScalarKind.UINT64,
        ScalarKind.BOOL,
        ScalarKind.STRING,
    ]
)


class DictionaryMapper:
    """Map dictionaries to native maps or to repeated entry messages.

    A native `map<k, v>` is used when the key is an allowed map key kind and
    the value is neither a dictionary nor a collection. Everything else gets
    a synthesized `<Key>_<Value>_Entry` message with `key` and `value`
    fields, shared by every field using the same key and value types.
    """

    def __init__(self, encoder: FieldEncoder):
        self.encoder = encoder

    def map(self, ref: Dictionary, path: str) -> FieldEncoding:
        if isinstance(ref.key, Unsupported):
            raise UnsupportedShapeError(
                str(ref.key_type), path, "dictionary key type cannot be mapped"
            )
        if isinstance(ref.value, Unsupported):
            raise UnsupportedShapeError(
                str(ref.value_type), path, "dictionary value type cannot be mapped"
            )

        key = ref.key.inner if isinstance(ref.key, Nullable) else ref.key
        if is_map_key(key) and not isinstance(ref.value, (Dictionary, Array, Enumerable)):
            key_type = self.encoder.encode(key, path).type
            value_type = self.encoder.encode(ref.value, path).type
            return FieldEncoding(f"map<{key_type}, {value_type}>")

        return FieldEncoding(self._entry(ref, key, path), repeated=True)

    def wrap(self, ref: Dictionary, path: str) -> str:
        """Return the name of a message holding one dictionary.

        Used for enumerables of dictionaries, since a map field cannot be
        repeated. The wrapper has a single field named `entries`.
        """
        registry = self.encoder.registry
        identity = f"map:{_identity(ref)}"
        existing = registry.synthesized(identity)
        if existing is not None:
            return existing

        entries = self.map(ref, path)
        message = MessageDescriptor(
            name=naming.map_wrapper_name(ref.key_type, ref.value_type),
            fields=[
                MessageField(name="entries", type=entries.type, number=1, repeated=entries.repeated)
            ],
            provenance=Provenance.SYNTHESIZED_WRAPPER,
            comment=f"Wrapper for a dictionary of {ref.key_type} to {ref.value_type}",
        )
        return registry.add_synthesized(identity, message)

    def _entry(self, ref: Dictionary, key: TypeReference, path: str) -> str:
        registry = self.encoder.registry
        identity = f"entry:{_identity(ref)}"
        existing = registry.synthesized(identity)
        if existing is not None:
            return existing

        key_encoding = self.encoder.encode(key, path)
        value_encoding = self.encoder.encode(ref.value, path)
        message = MessageDescriptor(
            name=naming.entry_name(ref.key_type, ref.value_type),
            fields=[
                MessageField(
                    name="key", type=key_encoding.type, number=1, repeated=key_encoding.repeated
                ),
                MessageField(
                    name="value",
                    type=value_encoding.type,
                    number=2,
                    repeated=value_encoding.repeated,
                ),
            ],
            provenance=Provenance.SYNTHESIZED_ENTRY,
            comment=f"Entry of a dictionary of {ref.key_type} to {ref.value_type}",
        )
        return registry.add_synthesized(identity, message)


def is_map_key(ref: TypeReference) -> bool:
    """Check if a type can be the key of a native map."""
    match ref:
        case Primitive(kind=kind):
            return kind in MAP_KEY_KINDS
        case Enum():
            return True
        case _:
            return False


def _identity(ref: Dictionary) -> str:
    key = naming.reference_identity(ref.key, ref.key_type)
    value = naming.reference_identity(ref.value, ref.value_type)
    return f"{key},{value}"
