"""
Values produced by the runtime parsers.

References (views, text, attributes, bindings, events) are resolved against
the host's evaluation context when a modifier is applied; everything else is
a plain Python value.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Metadata:
    """Source position attached to a serialized call."""

    line: int = 0
    column: int = 0
    file: str | None = None
    module: str | None = None
    source: str | None = None

    @property
    def has_location(self) -> bool:
        return bool(self.line or self.file)

    def __str__(self) -> str:
        file = self.file or "<stylesheet>"
        return f"{file}:{self.line}" if self.line else file


@dataclass(frozen=True)
class Atom:
    """A bare or colon-prefixed name: ``:red``, ``red``."""

    name: str


@dataclass(frozen=True)
class Member:
    """An implicit member expression: ``.horizontal``."""

    name: str


@dataclass(frozen=True)
class Call:
    """A nested call parsed without a schema."""

    name: str
    metadata: Metadata
    arguments: tuple[Any, ...] = ()
    keywords: dict[str, Any] = field(default_factory=dict)


class _Default:
    """Placeholder for an omitted argument that has a default value."""

    _instance: "_Default | None" = None

    def __new__(cls) -> "_Default":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DEFAULT"

    def __bool__(self) -> bool:
        return False


DEFAULT = _Default()


@dataclass(frozen=True)
class ViewReference:
    """One or more named child templates."""

    templates: tuple[str, ...]

    def resolve(self, context: Any) -> Any:
        return context.children(self.templates)


@dataclass(frozen=True)
class InlineViewReference(ViewReference):
    pass


@dataclass(frozen=True)
class ToolbarContentReference(ViewReference):
    pass


@dataclass(frozen=True)
class TextReference:
    template: str

    def resolve(self, context: Any) -> Any:
        return context.text(self.template)


@dataclass(frozen=True)
class AttributeReference:
    """Either a constant or the name of an element attribute to read at apply time."""

    value: Any = None
    attribute: str | None = None

    def resolve(self, context: Any) -> Any:
        if self.attribute is None:
            return self.value
        return context.attribute(self.attribute)


@dataclass(frozen=True)
class ChangeTracked:
    """A two-way binding to a named piece of host state."""

    name: str

    def resolve(self, context: Any) -> Any:
        return context.binding(self.name)


@dataclass(frozen=True)
class Event:
    """A named event sent to the host when an action fires."""

    name: str
    params: dict[str, Any] = field(default_factory=dict)

    def resolve(self, context: Any) -> Any:
        return context.event(self.name, self.params)


def resolve(value: Any, context: Any) -> Any:
    """Resolve a reference against the host context; other values pass through."""
    if isinstance(value, tuple):
        return tuple(resolve(v, context) for v in value)
    resolver = getattr(value, "resolve", None)
    if resolver is None or isinstance(value, type):
        return value
    return resolver(context)
