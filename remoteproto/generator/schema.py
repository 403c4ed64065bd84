"""Schema document produced by a generation run."""

from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin


class Provenance(StrEnum):
    """Why a message exists in the schema."""

    ROOT_STATE = auto()
    NESTED_COMPOSITE = auto()
    SYNTHESIZED_ENTRY = auto()
    SYNTHESIZED_WRAPPER = auto()
    CONTROL_MESSAGE = auto()
    COMMAND_REQUEST = auto()
    COMMAND_RESPONSE = auto()
    CONNECTION_STATUS = auto()


@dataclass(frozen=True)
class MessageField(DataClassJsonMixin):
    """Represents a single `type name = number;` line of a message."""

    name: str
    type: str
    number: int
    repeated: bool = False
    comment: str | None = None


@dataclass(frozen=True)
class MessageDescriptor(DataClassJsonMixin):
    """Represents a message definition."""

    name: str
    fields: list[MessageField]
    provenance: Provenance
    comment: str | None = None


@dataclass(frozen=True)
class EnumValueDescriptor(DataClassJsonMixin):
    name: str
    number: int


@dataclass(frozen=True)
class EnumDescriptor(DataClassJsonMixin):
    """Represents an enum definition."""

    name: str
    values: list[EnumValueDescriptor]


@dataclass(frozen=True)
class RpcDescriptor(DataClassJsonMixin):
    """Represents one RPC of the service block."""

    name: str
    request: str
    response: str
    server_streaming: bool = False


@dataclass(frozen=True)
class ImportFlags(DataClassJsonMixin):
    """Well-known proto files the schema depends on."""

    timestamp: bool = False
    duration: bool = False
    wrappers: bool = False
    any: bool = True
    empty: bool = True

    def paths(self) -> list[str]:
        """Return the import paths, sorted."""
        names = [
            name
            for name, used in (
                ("any", self.any),
                ("duration", self.duration),
                ("empty", self.empty),
                ("timestamp", self.timestamp),
                ("wrappers", self.wrappers),
            )
            if used
        ]
        return [f"google/protobuf/{name}.proto" for name in names]


@dataclass(frozen=True)
class Schema(DataClassJsonMixin):
    """Represents a complete schema document."""

    package: str
    namespace: str
    service_name: str
    messages: list[MessageDescriptor]
    enums: list[EnumDescriptor]
    rpcs: list[RpcDescriptor]
    imports: ImportFlags = field(default_factory=ImportFlags)

    def message(self, name: str) -> MessageDescriptor | None:
        for message in self.messages:
            if message.name == name:
                return message
        return None
