"""Errors and diagnostics raised while deriving a schema."""

from dataclasses import dataclass

from dataclasses_json import DataClassJsonMixin


class GenerationError(RuntimeError):
    """Base class for failures that abort schema generation."""


class UnsupportedShapeError(GenerationError):
    """Raised for shapes with no legal wire encoding."""

    def __init__(self, type_name: str, path: str, reason: str):
        super().__init__(f"{path}: {reason} (type {type_name})")
        self.type_name = type_name
        self.path = path
        self.reason = reason


class NamingCollisionError(GenerationError):
    """Raised when two distinct types would produce the same message name."""

    def __init__(self, name: str, first: str, second: str):
        super().__init__(f"Message name {name} is produced by both {first} and {second}")
        self.name = name
        self.first = first
        self.second = second


@dataclass(frozen=True)
class Diagnostic(DataClassJsonMixin):
    """A soft problem reported alongside a successful schema."""

    path: str
    type_name: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message} ({self.type_name})"
