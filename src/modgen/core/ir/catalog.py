"""
Catalog records: the validated, deduplicated view of an interface.

The catalog is built once per run by ``modgen.core.pipeline.build_catalog``
and is read-only afterwards; both emitters consume it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .availability import ALWAYS_AVAILABLE, AvailabilityConstraint
from .types import IdentifierType, OptionalType, TypeRef

WILDCARD = "_"

# Parameter types that need the element/context at evaluation time
CONTEXT_TYPES = frozenset(
    {"ViewReference", "TextReference", "AttributeReference", "InlineViewReference"}
)


class Parameter(BaseModel):
    """
    A parameter of a mapped signature.

    Attributes:
        first_name: Argument label, or ``_`` when the argument is positional
        second_name: Internal parameter name, if declared separately
        type: Parser-facing type (after type mapping)
        has_default: True if the interface declares a default value
    """

    first_name: str
    second_name: str | None = None
    type: TypeRef
    has_default: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_labeled(self) -> bool:
        return self.first_name != WILDCARD

    @property
    def binding_name(self) -> str:
        """The name the parameter is known by inside the generated code."""
        return self.second_name or self.first_name

    @property
    def type_name(self) -> str:
        return str(self.type)


class Signature(BaseModel):
    """One overload's ordered parameter list."""

    parameters: tuple[Parameter, ...] = ()

    model_config = ConfigDict(frozen=True)

    def is_duplicate(self, other: Signature) -> bool:
        """
        Two signatures are duplicates when they have the same parameter count
        and, positionally, the same first name and the same simplified type.
        """
        if len(self.parameters) != len(other.parameters):
            return False
        return all(
            a.first_name == b.first_name and a.type.simple_name == b.type.simple_name
            for a, b in zip(self.parameters, other.parameters)
        )

    @property
    def requires_context(self) -> bool:
        for parameter in self.parameters:
            base = parameter.type
            if isinstance(base, OptionalType):
                base = base.wrapped
            if isinstance(base, IdentifierType) and base.name in CONTEXT_TYPES:
                return True
        return False

    def __str__(self) -> str:
        labels = "".join(f"{p.first_name}:" for p in self.parameters)
        return f"({labels})"


class Modifier(BaseModel):
    """A retained modifier and its deduplicated signatures."""

    name: str
    signatures: list[Signature] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def requires_context(self) -> bool:
        return any(s.requires_context for s in self.signatures)


class EnumCase(BaseModel):
    """An enum case with its own availability."""

    name: str
    availability: AvailabilityConstraint = ALWAYS_AVAILABLE

    model_config = ConfigDict(frozen=True)


class EnumType(BaseModel):
    """An enumerated value type required by the modifiers."""

    name: str
    cases: list[EnumCase] = Field(default_factory=list)
    availability: AvailabilityConstraint = ALWAYS_AVAILABLE

    model_config = ConfigDict(frozen=True)

    def case_needs_guard(self, case: EnumCase) -> bool:
        """
        True when a case's availability differs from the type's own.

        A case whose constraint set equals the type's is unconditionally
        available wherever the type is, so no inner guard is emitted for it.
        """
        if case.availability.is_empty:
            return False
        return not case.availability.same_platforms(self.availability)


class Catalog(BaseModel):
    """
    Everything the emitters need, built once per run.

    Attributes:
        modifiers: Retained modifiers, sorted by name
        enums: Required enum types found in the interface, sorted by name
        deprecations: Deprecated modifier name -> human-readable message
        skipped: Modifier names removed by the denylist or validation
        extra_modifier_types: Hand-written host modifier types unioned into dispatch
        parseable_enums: Enums found by the secondary (schema-mode) scan
        referenced_types: Type names referenced by parseable declarations
    """

    modifiers: list[Modifier] = Field(default_factory=list)
    enums: list[EnumType] = Field(default_factory=list)
    deprecations: dict[str, str] = Field(default_factory=dict)
    skipped: list[str] = Field(default_factory=list)
    extra_modifier_types: list[str] = Field(default_factory=list)
    parseable_enums: dict[str, list[str]] = Field(default_factory=dict)
    referenced_types: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def modifier_names(self) -> list[str]:
        return [m.name for m in self.modifiers]

    def modifier(self, name: str) -> Modifier | None:
        for modifier in self.modifiers:
            if modifier.name == name:
                return modifier
        return None
