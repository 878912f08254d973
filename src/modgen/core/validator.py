"""
Signature validation.

An overload is invalid when any parameter cannot be represented in the
generated form:

- a builder parameter (``@ViewBuilder``/``@ToolbarContentBuilder``) that is
  not a zero-argument closure;
- a plain closure parameter whose return type is neither ``Void`` nor ``()``;
- a ``FocusState`` parameter.
"""

import logging

from . import ir
from .type_mapping import builder_kind

logger = logging.getLogger(__name__)


def _closure(type_ref: ir.TypeRef) -> ir.FunctionType | None:
    if isinstance(type_ref, ir.OptionalType):
        type_ref = type_ref.wrapped
    return ir.unwrap_function(type_ref)


def _mentions(type_ref: ir.TypeRef, name: str) -> bool:
    """True if *name* appears as a component of any nominal type inside *type_ref*."""
    path = ir.name_path(type_ref)
    if path is not None and name in path:
        return True
    return any(_mentions(child, name) for child in _children(type_ref))


def _children(type_ref: ir.TypeRef) -> list[ir.TypeRef]:
    if isinstance(type_ref, ir.IdentifierType):
        return list(type_ref.generic_args)
    if isinstance(type_ref, ir.MemberType):
        return [type_ref.base, *type_ref.generic_args]
    if isinstance(type_ref, ir.OptionalType):
        return [type_ref.wrapped]
    if isinstance(type_ref, ir.ArrayType):
        return [type_ref.element]
    if isinstance(type_ref, ir.DictionaryType):
        return [type_ref.key, type_ref.value]
    if isinstance(type_ref, ir.TupleType):
        return [e.type for e in type_ref.elements]
    if isinstance(type_ref, ir.FunctionType):
        return [*type_ref.parameters, type_ref.return_type]
    if isinstance(type_ref, ir.AttributedType):
        return [type_ref.base]
    if isinstance(type_ref, ir.OpaqueType):
        return [type_ref.constraint]
    if isinstance(type_ref, ir.CompositionType):
        return list(type_ref.types)
    if isinstance(type_ref, ir.MetatypeType):
        return [type_ref.base]
    if isinstance(type_ref, ir.VariadicType):
        return [type_ref.element]
    return []


def invalid_reason(function: ir.FunctionDecl) -> str | None:
    """Return why an overload cannot be generated, or None if it can."""
    for parameter in function.parameters:
        closure = _closure(parameter.type)
        builder = builder_kind(parameter)

        if builder is not None:
            if closure is None or closure.parameters:
                return f"@{builder} parameter '{parameter.first_name}' takes arguments"
        elif closure is not None and not ir.is_void(closure.return_type):
            return f"closure parameter '{parameter.first_name}' returns {closure.return_type}"

        if _mentions(parameter.type, "FocusState"):
            return f"parameter '{parameter.first_name}' is a FocusState binding"
    return None


def is_valid(function: ir.FunctionDecl) -> bool:
    reason = invalid_reason(function)
    if reason is not None:
        logger.debug("Dropping %s%s: %s", function.name, _labels(function), reason)
        return False
    return True


def _labels(function: ir.FunctionDecl) -> str:
    return "(" + "".join(f"{p.first_name}:" for p in function.parameters) + ")"
