"""
Errors raised while parsing serialized modifiers.

``ModifierParseError`` is the structured error the dispatcher reasons about
(unknown or deprecated modifier names). Every other parse failure is a
``StylesheetParseError`` and is opaque to dispatch.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .values import Metadata


class StylesheetError(Exception):
    """Base exception for all runtime parse errors."""

    pass


class StylesheetParseError(StylesheetError):
    """The token stream does not have the expected shape."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        self.message = message
        self.line = line
        self.column = column
        location = f"{line}:{column}: " if line else ""
        super().__init__(f"{location}{message}")


@dataclass(frozen=True)
class UnknownModifier:
    name: str

    def __str__(self) -> str:
        return f"Unknown modifier `{self.name}`"


@dataclass(frozen=True)
class DeprecatedModifier:
    name: str
    message: str

    def __str__(self) -> str:
        return f"Modifier `{self.name}` is deprecated: {self.message}"


ModifierErrorKind = UnknownModifier | DeprecatedModifier


class ModifierParseError(StylesheetError):
    """
    A structured dispatch failure.

    Attributes:
        error: What went wrong (unknown or deprecated name)
        metadata: Source position of the offending call
    """

    def __init__(self, error: ModifierErrorKind, metadata: "Metadata"):
        self.error = error
        self.metadata = metadata
        super().__init__(f"{metadata}: {error}" if metadata.has_location else str(error))


class UnavailableError(StylesheetError):
    """A value is not available on the current build target."""

    pass


class UnregisteredTypeError(StylesheetError):
    """No value parser is registered for a parameter type."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"No parser registered for type `{type_name}`")
