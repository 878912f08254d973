"""
Declaration parsing for interface descriptions.

Handles imports, extensions, nominal types, functions, enum cases and typed
properties.
Any other declaration (initializers, subscripts, typealiases, operators, ...)
is skipped with balanced-bracket recovery.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType

MODIFIER_WORDS = {
    "public",
    "open",
    "package",
    "internal",
    "private",
    "fileprivate",
    "static",
    "final",
    "nonisolated",
    "mutating",
    "nonmutating",
    "override",
    "convenience",
    "required",
    "optional",
    "lazy",
    "weak",
    "unowned",
    "dynamic",
    "indirect",
    "prefix",
    "postfix",
    "infix",
    "distributed",
    "__consuming",
    "consuming",
    "borrowing",
}

# Tokens that can begin a new declaration; skipping stops at these
DECLARATION_STARTS = {
    TokenType.AT,
    TokenType.IMPORT,
    TokenType.EXTENSION,
    TokenType.ENUM,
    TokenType.STRUCT,
    TokenType.CLASS,
    TokenType.PROTOCOL,
    TokenType.ACTOR,
    TokenType.FUNC,
    TokenType.CASE,
    TokenType.VAR,
    TokenType.LET,
    TokenType.INIT,
    TokenType.DEINIT,
    TokenType.SUBSCRIPT,
    TokenType.TYPEALIAS,
    TokenType.ASSOCIATEDTYPE,
    TokenType.OPERATOR,
    TokenType.PRECEDENCEGROUP,
    TokenType.MACRO,
    TokenType.SEMICOLON,
}

_TYPE_KINDS = {
    TokenType.EXTENSION,
    TokenType.ENUM,
    TokenType.STRUCT,
    TokenType.CLASS,
    TokenType.PROTOCOL,
    TokenType.ACTOR,
}


@dataclass
class _Members:
    """Declarations collected from one scope."""

    imports: list[str] = field(default_factory=list)
    types: list[ir.TypeDecl] = field(default_factory=list)
    functions: list[ir.FunctionDecl] = field(default_factory=list)
    cases: list[ir.EnumCaseDecl] = field(default_factory=list)
    properties: list[ir.PropertyDecl] = field(default_factory=list)


class DeclarationParserMixin:
    """
    Mixin providing declaration parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        file: Any
        expect: Any
        advance: Any
        match: Any
        match_value: Any
        current_token: Any
        peek_token: Any
        previous_token: Any
        is_adjacent: Any
        is_identifier_like: Any
        expect_identifier_or_keyword: Any
        parse_dotted_name: Any
        skip_balanced: Any
        skip_expression: Any
        location: Any
        error: Any
        parse_attributes: Any
        parse_type: Any
        parse_generic_parameters: Any
        parse_where_clause: Any

    def parse_source_file(self) -> ir.SourceFile:
        """Parse a complete interface file."""
        members = self.parse_members(TokenType.EOF)
        return ir.SourceFile(
            path=str(self.file),
            imports=members.imports,
            declarations=members.types,
            functions=members.functions,
        )

    def parse_members(self, terminator: TokenType) -> _Members:
        """Parse declarations until *terminator* (``}`` or end of file)."""
        members = _Members()
        while not self.match(terminator, TokenType.EOF):
            if self.match(TokenType.SEMICOLON):
                self.advance()
                continue
            if self.match(TokenType.RBRACE):
                raise self.error("Unexpected '}'")
            self.parse_declaration(members)
        return members

    def parse_declaration(self, members: _Members) -> None:
        attributes, availability = self.parse_attributes()
        modifiers = self.parse_modifiers()
        token = self.current_token()

        if token.type == TokenType.IMPORT:
            self.advance()
            # `import struct Foundation.URL`
            if self.match(
                *_TYPE_KINDS, TokenType.FUNC, TokenType.VAR, TokenType.LET, TokenType.TYPEALIAS
            ):
                self.advance()
            members.imports.append(self.parse_dotted_name())
        elif token.type in _TYPE_KINDS:
            members.types.append(self.parse_type_declaration(attributes, modifiers, availability))
        elif token.type == TokenType.FUNC:
            members.functions.append(self.parse_function(attributes, modifiers, availability))
        elif token.type == TokenType.CASE:
            members.cases.extend(self.parse_enum_cases(availability))
        elif token.type in (TokenType.VAR, TokenType.LET):
            prop = self.parse_property(modifiers, availability)
            if prop is not None:
                members.properties.append(prop)
        else:
            self.skip_declaration()

    def parse_modifiers(self) -> list[str]:
        """
        Parse declaration modifiers.

        ``private(set)`` style arguments are consumed; ``class`` counts as a
        modifier only when it precedes another declaration keyword.
        """
        modifiers: list[str] = []
        while True:
            token = self.current_token()
            if token.type == TokenType.IDENTIFIER and token.value in MODIFIER_WORDS:
                self.advance()
            elif token.type == TokenType.CLASS and self._class_is_modifier():
                self.advance()
            else:
                return modifiers
            modifiers.append(token.value)
            if self.match(TokenType.LPAREN) and self.is_adjacent(token, self.current_token()):
                self.skip_balanced()

    def _class_is_modifier(self) -> bool:
        following = self.peek_token()
        if following.type in DECLARATION_STARTS and following.type != TokenType.AT:
            return True
        return following.type == TokenType.IDENTIFIER and following.value in MODIFIER_WORDS

    def parse_type_declaration(
        self,
        attributes: list[ir.Attribute],
        modifiers: list[str],
        availability: ir.AvailabilityConstraint,
    ) -> ir.TypeDecl:
        """
        Parse an extension or a nominal type with its members.

        Examples:
            extension SwiftUI.View { ... }
            @frozen public enum BlendMode : Swift.Hashable { case normal ... }
        """
        keyword = self.advance()
        if keyword.type == TokenType.EXTENSION:
            name = str(self.parse_type())
        else:
            name = self.expect_identifier_or_keyword().value
            if self.match(TokenType.LESS_THAN):
                self.parse_generic_parameters()

        inherits: list[ir.TypeRef] = []
        if self.match(TokenType.COLON):
            self.advance()
            while True:
                if self.match(TokenType.CLASS):
                    self.advance()
                    inherits.append(ir.IdentifierType(name="AnyObject"))
                else:
                    inherits.append(self.parse_type())
                if not self.match(TokenType.COMMA):
                    break
                self.advance()

        if self.match(TokenType.WHERE):
            self.parse_where_clause()

        self.expect(TokenType.LBRACE)
        body = self.parse_members(TokenType.RBRACE)
        self.expect(TokenType.RBRACE)

        return ir.TypeDecl(
            kind=keyword.value,
            name=name,
            inherits=inherits,
            attributes=attributes,
            modifiers=modifiers,
            availability=availability,
            functions=body.functions,
            cases=body.cases,
            properties=body.properties,
            nested=body.types,
            location=self.location(keyword),
        )

    def parse_function(
        self,
        attributes: list[ir.Attribute],
        modifiers: list[str],
        availability: ir.AvailabilityConstraint,
    ) -> ir.FunctionDecl:
        """
        Parse a function declaration; a body, if present, is skipped.

        Example:
            public func blur(radius: CoreFoundation.CGFloat, opaque: Swift.Bool = false) -> some SwiftUI.View
        """
        keyword = self.expect(TokenType.FUNC)
        name_token = self.current_token()
        if self.is_identifier_like():
            name = self.advance().value
        else:
            # Operator functions: `static func == (lhs: Self, rhs: Self)`
            parts = []
            while not self.match(TokenType.LPAREN, TokenType.EOF) and not (
                parts and self.match(TokenType.LESS_THAN)
            ):
                parts.append(self.advance().value)
            if not parts:
                raise self.error("Expected function name", name_token)
            name = "".join(parts)

        generics: list[ir.GenericParameter] = []
        if self.match(TokenType.LESS_THAN):
            generics = self.parse_generic_parameters()

        self.expect(TokenType.LPAREN)
        parameters = self.parse_parameter_list()
        self.expect(TokenType.RPAREN)

        while self.match(TokenType.ASYNC, TokenType.THROWS, TokenType.RETHROWS):
            effect = self.advance()
            if self.match(TokenType.LPAREN) and self.is_adjacent(effect, self.current_token()):
                self.skip_balanced()

        return_type: ir.TypeRef | None = None
        if self.match(TokenType.ARROW):
            self.advance()
            return_type = self.parse_type()

        if self.match(TokenType.WHERE):
            generics = _apply_requirements(generics, self.parse_where_clause())

        if self.match(TokenType.LBRACE):
            self.skip_balanced()

        return ir.FunctionDecl(
            name=name,
            parameters=parameters,
            generic_parameters=generics,
            return_type=return_type,
            attributes=attributes,
            modifiers=modifiers,
            availability=availability,
            location=self.location(keyword),
        )

    def parse_parameter_list(self) -> list[ir.ParameterDecl]:
        parameters: list[ir.ParameterDecl] = []
        while not self.match(TokenType.RPAREN):
            parameters.append(self.parse_parameter())
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        return parameters

    def parse_parameter(self) -> ir.ParameterDecl:
        """
        Parse one parameter.

        Examples:
            _ color: SwiftUI.Color?
            in edges: SwiftUI.Edge.Set = .all
            @SwiftUI.ViewBuilder content: () -> Content
        """
        attributes, _ = self.parse_attributes()
        first_name = self.expect_identifier_or_keyword().value
        second_name: str | None = None
        if not self.match(TokenType.COLON):
            second_name = self.expect_identifier_or_keyword().value
        self.expect(TokenType.COLON)
        type_ref = self.parse_type()

        has_default = False
        if self.match(TokenType.EQUALS):
            self.advance()
            self.skip_expression(TokenType.COMMA, TokenType.RPAREN)
            has_default = True

        return ir.ParameterDecl(
            first_name=first_name,
            second_name=second_name,
            type=type_ref,
            attributes=attributes,
            has_default=has_default,
        )

    def parse_enum_cases(self, availability: ir.AvailabilityConstraint) -> list[ir.EnumCaseDecl]:
        """
        Parse ``case a, b(Int), c = 3``.

        Every case in one ``case`` clause shares the clause's availability.
        """
        self.expect(TokenType.CASE)
        cases: list[ir.EnumCaseDecl] = []
        while True:
            name_token = self.expect_identifier_or_keyword()
            associated: list[ir.TypeRef] = []
            if self.match(TokenType.LPAREN):
                associated = self._parse_associated_values()
            if self.match(TokenType.EQUALS):
                # Raw values are single literals, optionally negated
                self.advance()
                if self.match(TokenType.SYMBOL) and self.current_token().value == "-":
                    self.advance()
                self.advance()
            cases.append(
                ir.EnumCaseDecl(
                    name=name_token.value,
                    associated_types=associated,
                    availability=availability,
                    location=self.location(name_token),
                )
            )
            if not self.match(TokenType.COMMA):
                return cases
            self.advance()

    def _parse_associated_values(self) -> list[ir.TypeRef]:
        self.expect(TokenType.LPAREN)
        types: list[ir.TypeRef] = []
        while not self.match(TokenType.RPAREN):
            if self.is_identifier_like() and self.peek_token().type == TokenType.COLON:
                self.advance()
                self.advance()
            elif (
                self.is_identifier_like()
                and self.is_identifier_like(self.peek_token())
                and self.peek_token(2).type == TokenType.COLON
            ):
                self.advance()
                self.advance()
                self.advance()
            types.append(self.parse_type())
            if self.match(TokenType.EQUALS):
                self.advance()
                self.skip_expression(TokenType.COMMA, TokenType.RPAREN)
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        self.expect(TokenType.RPAREN)
        return types

    def parse_property(
        self, modifiers: list[str], availability: ir.AvailabilityConstraint
    ) -> ir.PropertyDecl | None:
        """
        Parse ``var name: Type`` / ``let name: Type``; accessors and initial
        values are skipped.

        Returns None for untyped or pattern bindings, which are skipped.
        """
        keyword = self.advance()
        if not (self.is_identifier_like() and self.peek_token().type == TokenType.COLON):
            self.skip_declaration(consume_first=False)
            return None
        name = self.advance().value
        self.expect(TokenType.COLON)
        type_ref = self.parse_type()
        self.skip_declaration(consume_first=False)
        return ir.PropertyDecl(
            name=name,
            type=type_ref,
            modifiers=modifiers,
            availability=availability,
            location=self.location(keyword),
        )

    def skip_declaration(self, consume_first: bool = True) -> None:
        """
        Skip an unsupported declaration, or the rest of one.

        Consumes tokens until the next declaration start, or the closing
        brace of the enclosing scope, at bracket depth zero.
        """
        first = consume_first
        while not self.match(TokenType.EOF, TokenType.RBRACE):
            token = self.current_token()
            if token.type in (TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE):
                self.skip_balanced()
            elif token.type in (TokenType.RPAREN, TokenType.RBRACKET):
                raise self.error(f"Unexpected '{token.value}'", token)
            elif first:
                self.advance()
            elif token.type in DECLARATION_STARTS:
                return
            elif token.type == TokenType.IDENTIFIER and token.value in MODIFIER_WORDS:
                following = self.peek_token()
                if following.type in DECLARATION_STARTS or (
                    following.type == TokenType.IDENTIFIER and following.value in MODIFIER_WORDS
                ):
                    return
                self.advance()
            else:
                self.advance()
            first = False


def _apply_requirements(
    generics: list[ir.GenericParameter], requirements: list[tuple[str, ir.TypeRef]]
) -> list[ir.GenericParameter]:
    """Fold ``where`` conformance requirements into the generic parameter list."""
    result = []
    for generic in generics:
        extra = [constraint for name, constraint in requirements if name == generic.name]
        if extra:
            generic = ir.GenericParameter(
                name=generic.name, constraints=[*generic.constraints, *extra]
            )
        result.append(generic)
    return result
