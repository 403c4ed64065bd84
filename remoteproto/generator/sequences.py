"""Encodings for arrays and enumerables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import naming
from .errors import UnsupportedShapeError
from .schema import MessageDescriptor, MessageField, Provenance
from .types import Array, Dictionary, Enumerable, FieldEncoding, TypeDescriptor

if TYPE_CHECKING:
    from .encoding import FieldEncoder


class CollectionMapper:
    """Map arrays and enumerables to repeated fields.

    Byte arrays never reach this mapper; they are classified as a bytes
    scalar. Proto3 has no repeated-of-repeated or repeated-of-map fields, so
    nested collections and dictionaries are wrapped in a synthesized message.
    """

    def __init__(self, encoder: FieldEncoder):
        self.encoder = encoder

    def map(self, ref: Array | Enumerable, path: str) -> FieldEncoding:
        if isinstance(ref, Array) and ref.rank > 1:
            type_name = f"{ref.element_type}[{',' * (ref.rank - 1)}]"
            raise UnsupportedShapeError(
                type_name, path, "multi-dimensional arrays have no wire encoding"
            )

        element = ref.element
        if isinstance(element, Dictionary):
            return FieldEncoding(self.encoder.dictionaries.wrap(element, path), repeated=True)
        if isinstance(element, (Array, Enumerable)):
            return FieldEncoding(self._wrap(element, ref.element_type, path), repeated=True)

        encoding = self.encoder.encode(element, path)
        return FieldEncoding(encoding.type, repeated=True)

    def _wrap(self, element: Array | Enumerable, element_type: TypeDescriptor, path: str) -> str:
        """Return the name of a message holding one inner collection."""
        registry = self.encoder.registry
        identity = f"list:{naming.reference_identity(element, element_type)}"
        existing = registry.synthesized(identity)
        if existing is not None:
            return existing

        inner = self.map(element, path)
        message = MessageDescriptor(
            name=naming.list_wrapper_name(element_type),
            fields=[MessageField(name="items", type=inner.type, number=1, repeated=True)],
            provenance=Provenance.SYNTHESIZED_WRAPPER,
            comment=f"Wrapper for {element_type}",
        )
        return registry.add_synthesized(identity, message)
