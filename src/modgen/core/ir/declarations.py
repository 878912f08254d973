"""
Declaration tree produced by the interface parser.

Only the declarations the generator reads are modelled: extensions, nominal
types (enum/struct/class/protocol/actor), functions and enum cases. Everything
else in the interface is skipped by the parser.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .availability import ALWAYS_AVAILABLE, AvailabilityConstraint
from .location import SourceLocation
from .types import TypeRef


class Attribute(BaseModel):
    """
    A declaration or parameter attribute.

    Attributes:
        name: Last component of the attribute name (``SwiftUI.ViewBuilder`` -> ``ViewBuilder``)
        arguments: Raw argument text, if the attribute had a parenthesised list
    """

    name: str
    arguments: str | None = None

    model_config = ConfigDict(frozen=True)


class GenericParameter(BaseModel):
    """A generic parameter with the constraints declared inline or in ``where``."""

    name: str
    constraints: list[TypeRef] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class ParameterDecl(BaseModel):
    """
    One function parameter.

    ``first_name`` is the argument label (``_`` for an unlabelled argument);
    ``second_name`` is the internal name when it differs from the label.
    """

    first_name: str
    second_name: str | None = None
    type: TypeRef
    attributes: list[Attribute] = Field(default_factory=list)
    has_default: bool = False

    model_config = ConfigDict(frozen=True)

    def has_attribute(self, name: str) -> bool:
        return any(a.name == name for a in self.attributes)


class FunctionDecl(BaseModel):
    """A ``func`` declaration."""

    name: str
    parameters: list[ParameterDecl] = Field(default_factory=list)
    generic_parameters: list[GenericParameter] = Field(default_factory=list)
    return_type: TypeRef | None = None
    attributes: list[Attribute] = Field(default_factory=list)
    modifiers: list[str] = Field(default_factory=list)
    availability: AvailabilityConstraint = ALWAYS_AVAILABLE
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers or "class" in self.modifiers

    def has_attribute(self, name: str) -> bool:
        return any(a.name == name for a in self.attributes)

    def generic_constraints(self, name: str) -> list[TypeRef]:
        for generic in self.generic_parameters:
            if generic.name == name:
                return generic.constraints
        return []


class EnumCaseDecl(BaseModel):
    """One enum case (``case a`` or ``case b(Int)``)."""

    name: str
    associated_types: list[TypeRef] = Field(default_factory=list)
    availability: AvailabilityConstraint = ALWAYS_AVAILABLE
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)


class PropertyDecl(BaseModel):
    """A ``var``/``let`` declaration with an explicit type annotation."""

    name: str
    type: TypeRef
    modifiers: list[str] = Field(default_factory=list)
    availability: AvailabilityConstraint = ALWAYS_AVAILABLE
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_static(self) -> bool:
        return "static" in self.modifiers or "class" in self.modifiers


class TypeDecl(BaseModel):
    """
    A nominal type declaration or an extension.

    For extensions ``name`` is the extended type as written
    (``SwiftUI.View``) and ``kind`` is ``"extension"``.
    """

    kind: str
    name: str
    inherits: list[TypeRef] = Field(default_factory=list)
    attributes: list[Attribute] = Field(default_factory=list)
    modifiers: list[str] = Field(default_factory=list)
    availability: AvailabilityConstraint = ALWAYS_AVAILABLE
    functions: list[FunctionDecl] = Field(default_factory=list)
    cases: list[EnumCaseDecl] = Field(default_factory=list)
    properties: list[PropertyDecl] = Field(default_factory=list)
    nested: list[TypeDecl] = Field(default_factory=list)
    location: SourceLocation | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_extension(self) -> bool:
        return self.kind == "extension"

    def has_attribute(self, name: str) -> bool:
        return any(a.name == name for a in self.attributes)


class SourceFile(BaseModel):
    """Root of a parsed interface."""

    path: str
    imports: list[str] = Field(default_factory=list)
    declarations: list[TypeDecl] = Field(default_factory=list)
    functions: list[FunctionDecl] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


TypeDecl.model_rebuild()
