"""Assembly of the complete schema for one view model."""

import logging
from dataclasses import dataclass, field

from dataclasses_json import DataClassJsonMixin

from . import naming
from .classifier import TypeClassifier
from .encoding import FieldEncoder
from .errors import Diagnostic
from .registry import Registry
from .schema import (
    EnumDescriptor,
    EnumValueDescriptor,
    MessageDescriptor,
    MessageField,
    Provenance,
    RpcDescriptor,
    Schema,
)
from .types import CompositeMember, ModelCommand, TypeDescriptor, ViewModel

logger = logging.getLogger(__name__)

EMPTY = "google.protobuf.Empty"
ANY = "google.protobuf.Any"

CONTROL_MESSAGES = [
    MessageDescriptor(
        name="UpdatePropertyValueRequest",
        fields=[
            MessageField("property_name", "string", 1),
            MessageField("new_value", ANY, 2),
            MessageField("property_path", "string", 3),
            MessageField("collection_key", "string", 4),
            MessageField("array_index", "int32", 5),
            MessageField("operation_type", "string", 6),
            MessageField("client_id", "string", 7),
        ],
        provenance=Provenance.CONTROL_MESSAGE,
    ),
    MessageDescriptor(
        name="UpdatePropertyValueResponse",
        fields=[
            MessageField("success", "bool", 1),
            MessageField("error_message", "string", 2),
            MessageField("old_value", ANY, 3),
        ],
        provenance=Provenance.CONTROL_MESSAGE,
    ),
    MessageDescriptor(
        name="PropertyChangeNotification",
        fields=[
            MessageField("property_name", "string", 1),
            MessageField("new_value", ANY, 2),
            MessageField("property_path", "string", 3),
            MessageField("change_type", "string", 4),
            MessageField("old_value", ANY, 5),
        ],
        provenance=Provenance.CONTROL_MESSAGE,
    ),
    MessageDescriptor(
        name="SubscribeRequest",
        fields=[MessageField("client_id", "string", 1)],
        provenance=Provenance.CONTROL_MESSAGE,
    ),
]

CONNECTION_STATUS = EnumDescriptor(
    name="ConnectionStatus",
    values=[
        EnumValueDescriptor("UNKNOWN", 0),
        EnumValueDescriptor("CONNECTED", 1),
        EnumValueDescriptor("DISCONNECTED", 2),
    ],
)

CONNECTION_STATUS_RESPONSE = MessageDescriptor(
    name="ConnectionStatusResponse",
    fields=[MessageField("status", CONNECTION_STATUS.name, 1)],
    provenance=Provenance.CONNECTION_STATUS,
)


@dataclass(frozen=True)
class GeneratorOptions(DataClassJsonMixin):
    """Settings for one generation run.

    Unset values fall back to the view model's own options, then to names
    derived from the view model.
    """

    namespace: str | None = None
    service_name: str | None = None
    allow_name_collisions: bool = False

    def resolve(self, view_model: ViewModel) -> "GeneratorOptions":
        return GeneratorOptions(
            namespace=self.namespace
            or view_model.option("namespace")
            or f"{view_model.name}.Protos",
            service_name=self.service_name
            or view_model.option("service")
            or f"{view_model.name}Service",
            allow_name_collisions=self.allow_name_collisions,
        )


@dataclass(frozen=True)
class GenerationResult(DataClassJsonMixin):
    """A schema and the soft diagnostics reported while deriving it."""

    schema: Schema
    diagnostics: list[Diagnostic] = field(default_factory=list)


class SchemaEmitter:
    """Derive the schema of a view model in a single pass.

    An emitter owns its registry and must be used for one view model only.
    """

    def __init__(self, view_model: ViewModel, options: GeneratorOptions | None = None):
        self.view_model = view_model
        self.options = (options or GeneratorOptions()).resolve(view_model)
        self.registry = Registry(allow_name_collisions=self.options.allow_name_collisions)
        self.diagnostics: list[Diagnostic] = []
        self.classifier = TypeClassifier(self.registry, self.diagnostics, view_model.composite)
        self.encoder = FieldEncoder(self.registry)

    @property
    def state_message_name(self) -> str:
        return f"{self.view_model.name}{naming.STATE_SUFFIX}"

    def emit(self) -> GenerationResult:
        vm = self.view_model
        self._reserve_fixed_names()

        root = MessageDescriptor(
            name=self.state_message_name,
            fields=[
                self._field(prop.name, prop.type, number, f"{vm.name}.{prop.name}")
                for number, prop in enumerate(vm.properties, start=1)
            ],
            provenance=Provenance.ROOT_STATE,
            comment=f"Message representing the full state of the {vm.name}",
        )
        command_messages = [m for command in vm.commands for m in self._command_messages(command)]

        self.registry.drain(vm.member_lookup, self._member_fields)

        messages = [
            root,
            *self.registry.messages,
            *CONTROL_MESSAGES,
            *command_messages,
            CONNECTION_STATUS_RESPONSE,
        ]
        schema = Schema(
            package=naming.package_name(self.options.namespace or ""),
            namespace=self.options.namespace or "",
            service_name=self.options.service_name or "",
            messages=messages,
            enums=[CONNECTION_STATUS],
            rpcs=self._rpcs(),
            imports=self.encoder.import_flags(),
        )
        logger.info(
            "Generated %d messages for %s with %d diagnostic(s)",
            len(messages),
            vm.name,
            len(self.diagnostics),
        )
        return GenerationResult(schema=schema, diagnostics=list(self.diagnostics))

    def _reserve_fixed_names(self) -> None:
        self.registry.reserve(self.state_message_name, f"root:{self.view_model.name}")
        for message in [*CONTROL_MESSAGES, CONNECTION_STATUS_RESPONSE]:
            self.registry.reserve(message.name, f"control:{message.name}")
        for command in self.view_model.commands:
            base = naming.strip_async_suffix(command.name)
            self.registry.reserve(f"{base}Request", f"command:{command.name}")
            self.registry.reserve(f"{base}Response", f"command:{command.name}")

    def _field(self, name: str, t: TypeDescriptor, number: int, path: str) -> MessageField:
        ref = self.classifier.classify(t, path)
        return self.encoder.field(naming.to_snake_case(name), ref, number, path, f"{t} {name}")

    def _member_fields(self, members: list[CompositeMember], owner: str) -> list[MessageField]:
        return [
            self._field(member.name, member.type, number, f"{owner}.{member.name}")
            for number, member in enumerate(members, start=1)
        ]

    def _command_messages(self, command: ModelCommand) -> list[MessageDescriptor]:
        base = naming.strip_async_suffix(command.name)
        request = MessageDescriptor(
            name=f"{base}Request",
            fields=[
                self._field(param.name, param.type, number, f"{command.name}({param.name})")
                for number, param in enumerate(command.parameters, start=1)
            ],
            provenance=Provenance.COMMAND_REQUEST,
        )
        response = MessageDescriptor(
            name=f"{base}Response", fields=[], provenance=Provenance.COMMAND_RESPONSE
        )
        return [request, response]

    def _rpcs(self) -> list[RpcDescriptor]:
        rpcs = [
            RpcDescriptor("GetState", EMPTY, self.state_message_name),
            RpcDescriptor(
                "UpdatePropertyValue", "UpdatePropertyValueRequest", "UpdatePropertyValueResponse"
            ),
            RpcDescriptor(
                "SubscribeToPropertyChanges",
                "SubscribeRequest",
                "PropertyChangeNotification",
                server_streaming=True,
            ),
        ]
        for command in self.view_model.commands:
            base = naming.strip_async_suffix(command.name)
            rpcs.append(RpcDescriptor(base, f"{base}Request", f"{base}Response"))
        rpcs.append(RpcDescriptor("Ping", EMPTY, CONNECTION_STATUS_RESPONSE.name))
        return rpcs


def generate(view_model: ViewModel, options: GeneratorOptions | None = None) -> GenerationResult:
    """Derive the schema of a view model."""
    return SchemaEmitter(view_model, options).emit()
