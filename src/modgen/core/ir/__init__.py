"""
Intermediate representation for modgen.

Two layers:
- the declaration tree produced by the interface parser (types, declarations)
- the catalog consumed by the emitters (modifiers, enum types, deprecations)
"""

from .availability import ALWAYS_AVAILABLE, AvailabilityConstraint, PlatformVersion
from .catalog import (
    CONTEXT_TYPES,
    WILDCARD,
    Catalog,
    EnumCase,
    EnumType,
    Modifier,
    Parameter,
    Signature,
)
from .declarations import (
    Attribute,
    EnumCaseDecl,
    FunctionDecl,
    GenericParameter,
    ParameterDecl,
    PropertyDecl,
    SourceFile,
    TypeDecl,
)
from .location import SourceLocation
from .types import (
    ArrayType,
    AttributedType,
    CompositionType,
    DictionaryType,
    FunctionType,
    IdentifierType,
    MemberType,
    MetatypeType,
    OpaqueType,
    OptionalType,
    TupleElement,
    TupleType,
    TypeRef,
    VariadicType,
    is_void,
    name_path,
    unwrap_function,
)

__all__ = [
    # Availability
    "ALWAYS_AVAILABLE",
    "AvailabilityConstraint",
    "PlatformVersion",
    # Types
    "ArrayType",
    "AttributedType",
    "CompositionType",
    "DictionaryType",
    "FunctionType",
    "IdentifierType",
    "MemberType",
    "MetatypeType",
    "OpaqueType",
    "OptionalType",
    "TupleElement",
    "TupleType",
    "TypeRef",
    "VariadicType",
    "is_void",
    "name_path",
    "unwrap_function",
    # Declarations
    "Attribute",
    "EnumCaseDecl",
    "FunctionDecl",
    "GenericParameter",
    "ParameterDecl",
    "PropertyDecl",
    "SourceFile",
    "SourceLocation",
    "TypeDecl",
    # Catalog
    "CONTEXT_TYPES",
    "WILDCARD",
    "Catalog",
    "EnumCase",
    "EnumType",
    "Modifier",
    "Parameter",
    "Signature",
]
