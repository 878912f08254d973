"""
Map interface parameter types to the types the generated parser reads.

Rules, applied after module qualifiers are stripped:

    @ViewBuilder () -> Content              ViewReference
    @ToolbarContentBuilder () -> Content    ToolbarContentReference
    @escaping () -> Void                    Event
    Binding<Bool>                           ChangeTracked<Bool>
    Text                                    TextReference
    V where V : View                        ViewReference
    Color?                                  Color?
"""

from . import ir
from .config import GeneratorConfig

VIEW_BUILDER = "ViewBuilder"
TOOLBAR_CONTENT_BUILDER = "ToolbarContentBuilder"
BUILDER_ATTRIBUTES = (VIEW_BUILDER, TOOLBAR_CONTENT_BUILDER)

_BUILDER_REFERENCES = {
    VIEW_BUILDER: "ViewReference",
    TOOLBAR_CONTENT_BUILDER: "ToolbarContentReference",
}


def builder_kind(parameter: ir.ParameterDecl) -> str | None:
    """Return the builder attribute on a parameter or on its type, if any."""
    for name in BUILDER_ATTRIBUTES:
        if parameter.has_attribute(name):
            return name
    if isinstance(parameter.type, ir.AttributedType):
        for name in BUILDER_ATTRIBUTES:
            if name in parameter.type.attributes:
                return name
    return None


def strip_modules(type_ref: ir.TypeRef, prefixes: tuple[str, ...]) -> ir.TypeRef:
    """Remove leading module qualifiers (``SwiftUI.Font`` -> ``Font``) everywhere in a type."""

    def strip(t: ir.TypeRef) -> ir.TypeRef:
        return strip_modules(t, prefixes)

    if isinstance(type_ref, ir.MemberType):
        args = [strip(a) for a in type_ref.generic_args]
        base = type_ref.base
        if isinstance(base, ir.IdentifierType) and base.name in prefixes and not base.generic_args:
            return ir.IdentifierType(name=type_ref.name, generic_args=args)
        return ir.MemberType(base=strip(base), name=type_ref.name, generic_args=args)
    if isinstance(type_ref, ir.IdentifierType):
        if not type_ref.generic_args:
            return type_ref
        return ir.IdentifierType(
            name=type_ref.name, generic_args=[strip(a) for a in type_ref.generic_args]
        )
    if isinstance(type_ref, ir.OptionalType):
        return ir.OptionalType(
            wrapped=strip(type_ref.wrapped), implicitly_unwrapped=type_ref.implicitly_unwrapped
        )
    if isinstance(type_ref, ir.ArrayType):
        return ir.ArrayType(element=strip(type_ref.element))
    if isinstance(type_ref, ir.DictionaryType):
        return ir.DictionaryType(key=strip(type_ref.key), value=strip(type_ref.value))
    if isinstance(type_ref, ir.TupleType):
        return ir.TupleType(
            elements=[
                ir.TupleElement(label=e.label, type=strip(e.type)) for e in type_ref.elements
            ]
        )
    if isinstance(type_ref, ir.FunctionType):
        return ir.FunctionType(
            parameters=[strip(p) for p in type_ref.parameters],
            return_type=strip(type_ref.return_type),
            is_async=type_ref.is_async,
            throws=type_ref.throws,
        )
    if isinstance(type_ref, ir.AttributedType):
        return ir.AttributedType(
            attributes=type_ref.attributes,
            specifier=type_ref.specifier,
            base=strip(type_ref.base),
        )
    if isinstance(type_ref, ir.OpaqueType):
        return ir.OpaqueType(keyword=type_ref.keyword, constraint=strip(type_ref.constraint))
    if isinstance(type_ref, ir.CompositionType):
        return ir.CompositionType(types=[strip(t) for t in type_ref.types])
    if isinstance(type_ref, ir.MetatypeType):
        return ir.MetatypeType(base=strip(type_ref.base), kind=type_ref.kind)
    if isinstance(type_ref, ir.VariadicType):
        return ir.VariadicType(element=strip(type_ref.element))
    return type_ref


class TypeMapper:
    """
    Maps the parameters of one modifier overload.

    Generic parameters are resolved against the overload's own generic
    clause, so a mapper is created per function.
    """

    def __init__(self, function: ir.FunctionDecl, config: GeneratorConfig):
        self.function = function
        self.config = config

    def is_view_constraint(self, constraint: ir.TypeRef) -> bool:
        path = ir.name_path(constraint)
        if path is None:
            return False
        if path[0] in self.config.module_prefixes:
            path = path[1:]
        return len(path) == 1 and path[0] in self.config.view_protocols

    def is_view_generic(self, name: str) -> bool:
        return any(self.is_view_constraint(c) for c in self.function.generic_constraints(name))

    def map_parameter(self, parameter: ir.ParameterDecl) -> ir.Parameter:
        return ir.Parameter(
            first_name=parameter.first_name,
            second_name=parameter.second_name,
            type=self.map_parameter_type(parameter),
            has_default=parameter.has_default,
        )

    def map_parameter_type(self, parameter: ir.ParameterDecl) -> ir.TypeRef:
        builder = builder_kind(parameter)
        if builder is not None:
            return ir.IdentifierType(name=_BUILDER_REFERENCES[builder])
        return self.map_type(strip_modules(parameter.type, self.config.module_prefixes))

    def map_type(self, type_ref: ir.TypeRef) -> ir.TypeRef:
        if isinstance(type_ref, ir.AttributedType):
            return self.map_type(type_ref.base)

        if isinstance(type_ref, ir.OptionalType):
            return ir.OptionalType(
                wrapped=self.map_type(type_ref.wrapped),
                implicitly_unwrapped=type_ref.implicitly_unwrapped,
            )

        closure = ir.unwrap_function(type_ref)
        if closure is not None and ir.is_void(closure.return_type):
            return ir.IdentifierType(name="Event")

        if isinstance(type_ref, ir.OpaqueType) and self.is_view_constraint(type_ref.constraint):
            return ir.IdentifierType(name="ViewReference")

        if isinstance(type_ref, ir.IdentifierType):
            if type_ref.name == "Binding" and len(type_ref.generic_args) == 1:
                return ir.IdentifierType(
                    name="ChangeTracked", generic_args=[self.map_type(type_ref.generic_args[0])]
                )
            if type_ref.name == "Text" and not type_ref.generic_args:
                return ir.IdentifierType(name="TextReference")
            if not type_ref.generic_args and self.is_view_generic(type_ref.name):
                return ir.IdentifierType(name="ViewReference")

        return type_ref


def map_signature(function: ir.FunctionDecl, config: GeneratorConfig) -> ir.Signature:
    """Map every parameter of a (valid) overload, in declared order."""
    mapper = TypeMapper(function, config)
    return ir.Signature(parameters=tuple(mapper.map_parameter(p) for p in function.parameters))
