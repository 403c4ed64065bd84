"""Tests for the composite type registry."""

import pytest

from remoteproto.generator.errors import NamingCollisionError
from remoteproto.generator.registry import Registry
from remoteproto.generator.schema import MessageDescriptor, MessageField, Provenance
from remoteproto.generator.types import CompositeMember, TypeDescriptor


def _wrapper(name):
    return MessageDescriptor(
        name=name,
        fields=[MessageField("items", "int32", 1, repeated=True)],
        provenance=Provenance.SYNTHESIZED_WRAPPER,
    )


def describe_enqueue():
    def queues_new_types(expect):
        registry = Registry()

        expect(registry.enqueue("Person", TypeDescriptor("Person"), "PersonState")) == True

        expect(list(registry.queue)) == ["Person"]
        expect("Person" in registry.processed) == True

    def skips_processed_types(expect):
        registry = Registry()
        registry.enqueue("Person", TypeDescriptor("Person"), "PersonState")

        expect(registry.enqueue("Person", TypeDescriptor("Person"), "PersonState")) == False
        expect(len(registry.queue)) == 1

    def rejects_name_collisions(expect):
        registry = Registry()
        registry.enqueue("A.Item", TypeDescriptor("A.Item"), "ItemState")

        with pytest.raises(NamingCollisionError) as exc:
            registry.enqueue("B.Item", TypeDescriptor("B.Item"), "ItemState")

        expect(exc.value.name) == "ItemState"
        expect(exc.value.first) == "A.Item"
        expect(exc.value.second) == "B.Item"

    def keeps_first_definition_when_collisions_are_allowed(expect):
        registry = Registry(allow_name_collisions=True)
        registry.enqueue("A.Item", TypeDescriptor("A.Item"), "ItemState")

        expect(registry.enqueue("B.Item", TypeDescriptor("B.Item"), "ItemState")) == False
        expect(list(registry.queue)) == ["A.Item"]


def describe_drain():
    def expands_types_discovered_while_draining(expect):
        registry = Registry()
        registry.enqueue("Node", TypeDescriptor("Node"), "NodeState")
        members = {
            "Node": [CompositeMember("Next", TypeDescriptor("Node"))],
            "Leaf": [],
        }
        built = []

        def build_fields(found, owner):
            built.append(owner)
            if owner == "Node":
                registry.enqueue("Node", TypeDescriptor("Node"), "NodeState")
                registry.enqueue("Leaf", TypeDescriptor("Leaf"), "LeafState")
            return [MessageField(m.name.lower(), "NodeState", i) for i, m in enumerate(found, 1)]

        registry.drain(lambda t: members[t.name], build_fields)

        expect(built) == ["Node", "Leaf"]
        expect([m.name for m in registry.messages]) == ["NodeState", "LeafState"]
        expect(registry.messages[0].fields[0].type) == "NodeState"
        expect(registry.messages[1].fields) == []
        expect(registry.messages[0].provenance) == Provenance.NESTED_COMPOSITE


def describe_synthesized():
    def registers_each_identity_once(expect):
        registry = Registry()

        first = registry.add_synthesized("list:Int32", _wrapper("Int32_List"))
        second = registry.add_synthesized("list:Int32", _wrapper("Other_List"))

        expect(first) == "Int32_List"
        expect(second) == "Int32_List"
        expect(registry.synthesized("list:Int32")) == "Int32_List"
        expect([m.name for m in registry.messages]) == ["Int32_List"]

    def keeps_discovery_order_with_composites(expect):
        registry = Registry()
        registry.enqueue("Person", TypeDescriptor("Person"), "PersonState")
        registry.add_synthesized("list:Int32", _wrapper("Int32_List"))

        registry.drain(lambda t: [], lambda members, owner: [])

        expect([m.name for m in registry.messages]) == ["PersonState", "Int32_List"]
