"""
Type references for the interface declaration tree.

Every node renders back to trimmed source text through ``str()``, which is the
spelling used for schema output and for duplicate detection.

Syntax examples:

    Swift.Double                      MemberType(IdentifierType(Swift), Double)
    SwiftUI.Binding<Swift.Bool>       MemberType(..., Binding, [MemberType(...)])
    () -> Swift.Void                  FunctionType([], MemberType(...))
    @escaping (Swift.Int) -> ()       AttributedType([escaping], None, FunctionType(...))
    some SwiftUI.View                 OpaqueType(some, MemberType(...))
    SwiftUI.Font?                     OptionalType(MemberType(...))
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


def _generic_suffix(args: list[TypeRef]) -> str:
    if not args:
        return ""
    return "<" + ", ".join(str(a) for a in args) + ">"


class IdentifierType(BaseModel):
    """A single, unqualified type name with optional generic arguments."""

    name: str
    generic_args: list[TypeRef] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.name}{_generic_suffix(self.generic_args)}"

    @property
    def simple_name(self) -> str:
        return str(self)


class MemberType(BaseModel):
    """A qualified type name: ``base.name<args>``."""

    base: TypeRef
    name: str
    generic_args: list[TypeRef] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.base}.{self.name}{_generic_suffix(self.generic_args)}"

    @property
    def simple_name(self) -> str:
        return self.name


class OptionalType(BaseModel):
    """``T?`` or ``T!``."""

    wrapped: TypeRef
    implicitly_unwrapped: bool = False

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.wrapped}{'!' if self.implicitly_unwrapped else '?'}"

    @property
    def simple_name(self) -> str:
        return str(self)


class ArrayType(BaseModel):
    """``[T]``."""

    element: TypeRef

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{self.element}]"

    @property
    def simple_name(self) -> str:
        return str(self)


class DictionaryType(BaseModel):
    """``[K: V]``."""

    key: TypeRef
    value: TypeRef

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"[{self.key}: {self.value}]"

    @property
    def simple_name(self) -> str:
        return str(self)


class TupleElement(BaseModel):
    """One element of a tuple type, optionally labelled."""

    label: str | None = None
    type: TypeRef

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.label:
            return f"{self.label}: {self.type}"
        return str(self.type)


class TupleType(BaseModel):
    """``(A, b: B)``; the empty tuple ``()`` is the unit type."""

    elements: list[TupleElement] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "(" + ", ".join(str(e) for e in self.elements) + ")"

    @property
    def simple_name(self) -> str:
        return str(self)


class FunctionType(BaseModel):
    """``(A, B) async throws -> R``."""

    parameters: list[TypeRef] = Field(default_factory=list)
    return_type: TypeRef
    is_async: bool = False
    throws: bool = False

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        params = ", ".join(str(p) for p in self.parameters)
        effects = ""
        if self.is_async:
            effects += " async"
        if self.throws:
            effects += " throws"
        return f"({params}){effects} -> {self.return_type}"

    @property
    def simple_name(self) -> str:
        return str(self)


class AttributedType(BaseModel):
    """A type carrying attributes or a specifier: ``@escaping () -> Void``, ``inout T``."""

    attributes: list[str] = Field(default_factory=list)
    specifier: str | None = None
    base: TypeRef

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        parts = [f"@{a}" for a in self.attributes]
        if self.specifier:
            parts.append(self.specifier)
        parts.append(str(self.base))
        return " ".join(parts)

    @property
    def simple_name(self) -> str:
        return str(self)


class OpaqueType(BaseModel):
    """``some P`` or ``any P``."""

    keyword: str
    constraint: TypeRef

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.keyword} {self.constraint}"

    @property
    def simple_name(self) -> str:
        return str(self)


class CompositionType(BaseModel):
    """``A & B``."""

    types: list[TypeRef]

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return " & ".join(str(t) for t in self.types)

    @property
    def simple_name(self) -> str:
        return str(self)


class MetatypeType(BaseModel):
    """``T.Type`` or ``T.Protocol``."""

    base: TypeRef
    kind: str = "Type"

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.base}.{self.kind}"

    @property
    def simple_name(self) -> str:
        return str(self)


class VariadicType(BaseModel):
    """``T...`` in parameter position."""

    element: TypeRef

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.element}..."

    @property
    def simple_name(self) -> str:
        return str(self)


TypeRef = (
    IdentifierType
    | MemberType
    | OptionalType
    | ArrayType
    | DictionaryType
    | TupleType
    | FunctionType
    | AttributedType
    | OpaqueType
    | CompositionType
    | MetatypeType
    | VariadicType
)

# Rebuild models for recursive forward references
for _model in (
    IdentifierType,
    MemberType,
    OptionalType,
    ArrayType,
    DictionaryType,
    TupleElement,
    TupleType,
    FunctionType,
    AttributedType,
    OpaqueType,
    CompositionType,
    MetatypeType,
    VariadicType,
):
    _model.model_rebuild()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def name_path(type_ref: TypeRef) -> list[str] | None:
    """
    Return the dotted name components of a nominal type, ignoring generics.

    ``SwiftUI.Image.Scale`` -> ``["SwiftUI", "Image", "Scale"]``; non-nominal
    types return None.
    """
    if isinstance(type_ref, IdentifierType):
        return [type_ref.name]
    if isinstance(type_ref, MemberType):
        base = name_path(type_ref.base)
        if base is None:
            return None
        return [*base, type_ref.name]
    return None


def unwrap_function(type_ref: TypeRef) -> FunctionType | None:
    """Return the closure type behind attributes (``@escaping``), if any."""
    if isinstance(type_ref, FunctionType):
        return type_ref
    if isinstance(type_ref, AttributedType) and isinstance(type_ref.base, FunctionType):
        return type_ref.base
    return None


def is_void(type_ref: TypeRef) -> bool:
    """True for ``Void``, ``Swift.Void`` and the empty tuple ``()``."""
    if isinstance(type_ref, TupleType):
        return not type_ref.elements
    path = name_path(type_ref)
    if path is None or path[-1] != "Void":
        return False
    return not type_ref.generic_args  # type: ignore[union-attr]
