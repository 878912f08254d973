"""
Type reference parsing for interface descriptions.

Handles nominal, member, generic, optional, collection, tuple, function,
opaque and attributed types, plus generic parameter and ``where`` clauses.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType

# Ownership specifiers that may precede a parameter type
_SPECIFIERS = {"__owned", "__shared", "borrowing", "consuming", "isolated", "sending"}


class TypeParserMixin:
    """
    Mixin providing type reference parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
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
        error: Any

    def parse_type(self) -> ir.TypeRef:
        """
        Parse a full type, including leading attributes and specifiers.

        Examples:
            Swift.Double
            @escaping () -> Swift.Void
            inout Swift.Hasher
            some SwiftUI.View & Swift.Sendable
        """
        attributes: list[str] = []
        while self.match(TokenType.AT):
            self.advance()
            attributes.append(self.parse_dotted_name().rsplit(".", 1)[-1])
            name_token = self.previous_token()
            # @convention(c), @isolated(any)
            if self.match(TokenType.LPAREN) and self.is_adjacent(name_token, self.current_token()):
                self.skip_balanced()

        specifier: str | None = None
        if self.match(TokenType.INOUT):
            specifier = self.advance().value
        elif self.match_value(*_SPECIFIERS) and self.is_identifier_like(self.peek_token()):
            specifier = self.advance().value

        base = self.parse_composition_type()
        if attributes or specifier:
            return ir.AttributedType(attributes=attributes, specifier=specifier, base=base)
        return base

    def parse_composition_type(self) -> ir.TypeRef:
        types = [self.parse_postfix_type()]
        while self.match(TokenType.AMPERSAND):
            self.advance()
            types.append(self.parse_postfix_type())
        if len(types) == 1:
            return types[0]
        return ir.CompositionType(types=types)

    def parse_postfix_type(self) -> ir.TypeRef:
        result = self.parse_primary_type()
        while True:
            if self.match(TokenType.QUESTION):
                self.advance()
                result = ir.OptionalType(wrapped=result)
            elif self.match(TokenType.BANG):
                self.advance()
                result = ir.OptionalType(wrapped=result, implicitly_unwrapped=True)
            elif self.match(TokenType.ELLIPSIS):
                self.advance()
                result = ir.VariadicType(element=result)
            elif self.match(TokenType.DOT) and self.is_identifier_like(self.peek_token()):
                self.advance()
                name = self.advance().value
                if name in ("Type", "Protocol"):
                    result = ir.MetatypeType(base=result, kind=name)
                else:
                    result = ir.MemberType(
                        base=result, name=name, generic_args=self.parse_generic_arguments()
                    )
            else:
                return result

    def parse_primary_type(self) -> ir.TypeRef:
        token = self.current_token()

        if token.type in (TokenType.SOME, TokenType.ANY):
            self.advance()
            return ir.OpaqueType(keyword=token.value, constraint=self.parse_composition_type())

        if token.type == TokenType.LPAREN:
            return self.parse_parenthesized_type()

        if token.type == TokenType.LBRACKET:
            self.advance()
            element = self.parse_type()
            if self.match(TokenType.COLON):
                self.advance()
                value = self.parse_type()
                self.expect(TokenType.RBRACKET)
                return ir.DictionaryType(key=element, value=value)
            self.expect(TokenType.RBRACKET)
            return ir.ArrayType(element=element)

        if token.type == TokenType.IDENTIFIER:
            self.advance()
            # Parameter packs: `repeat each T`
            if token.value in ("repeat", "each") and self.is_identifier_like():
                return self.parse_primary_type()
            return ir.IdentifierType(name=token.value, generic_args=self.parse_generic_arguments())

        found = token.value or token.type.value
        raise self.error(f"Expected type, got '{found}'", token)

    def parse_parenthesized_type(self) -> ir.TypeRef:
        """
        Parse ``(...)``: a tuple, a parenthesized type, or a function type.

        The distinction is made after the closing paren: ``async``, ``throws``
        or ``->`` make it a function's parameter list.
        """
        self.expect(TokenType.LPAREN)
        elements: list[ir.TupleElement] = []
        while not self.match(TokenType.RPAREN):
            label: str | None = None
            # `name: T` or `_ name: T`
            if self.is_identifier_like() and self.peek_token().type == TokenType.COLON:
                label = self.advance().value
                self.advance()
            elif (
                self.is_identifier_like()
                and self.is_identifier_like(self.peek_token())
                and self.peek_token(2).type == TokenType.COLON
            ):
                label = self.advance().value
                self.advance()
                self.advance()
            elements.append(ir.TupleElement(label=label, type=self.parse_type()))
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        self.expect(TokenType.RPAREN)

        is_async = False
        throws = False
        while self.match(TokenType.ASYNC, TokenType.THROWS, TokenType.RETHROWS):
            keyword = self.advance()
            if keyword.type == TokenType.ASYNC:
                is_async = True
            else:
                throws = True
                # typed throws: throws(SomeError)
                if self.match(TokenType.LPAREN) and self.is_adjacent(keyword, self.current_token()):
                    self.skip_balanced()

        if self.match(TokenType.ARROW):
            self.advance()
            return ir.FunctionType(
                parameters=[e.type for e in elements],
                return_type=self.parse_type(),
                is_async=is_async,
                throws=throws,
            )
        if is_async or throws:
            raise self.error("Expected '->' after function effects")

        if len(elements) == 1 and elements[0].label is None:
            return elements[0].type
        return ir.TupleType(elements=elements)

    def parse_generic_arguments(self) -> list[ir.TypeRef]:
        """Parse ``<A, B>`` if present."""
        if not self.match(TokenType.LESS_THAN):
            return []
        self.advance()
        arguments = [self.parse_type()]
        while self.match(TokenType.COMMA):
            self.advance()
            arguments.append(self.parse_type())
        self.expect(TokenType.GREATER_THAN)
        return arguments

    def parse_generic_parameters(self) -> list[ir.GenericParameter]:
        """
        Parse a generic parameter clause.

        Examples:
            <Content>
            <V : SwiftUI.View, S>
            <each T>
        """
        self.expect(TokenType.LESS_THAN)
        parameters: list[ir.GenericParameter] = []
        while not self.match(TokenType.GREATER_THAN):
            name = self.expect_identifier_or_keyword().value
            if name == "each" and self.is_identifier_like():
                name = self.advance().value
            constraints: list[ir.TypeRef] = []
            if self.match(TokenType.COLON):
                self.advance()
                constraints.append(self.parse_type())
            parameters.append(ir.GenericParameter(name=name, constraints=constraints))
            if not self.match(TokenType.COMMA):
                break
            self.advance()
        self.expect(TokenType.GREATER_THAN)
        return parameters

    def parse_where_clause(self) -> list[tuple[str, ir.TypeRef]]:
        """
        Parse ``where A : P, B == C``.

        Returns:
            (generic name, constraint) pairs for conformance requirements;
            same-type requirements are consumed and dropped.
        """
        self.expect(TokenType.WHERE)
        requirements: list[tuple[str, ir.TypeRef]] = []
        while True:
            subject = self.parse_type()
            if self.match(TokenType.COLON):
                self.advance()
                requirements.append((str(subject), self.parse_type()))
            elif self.match(TokenType.SYMBOL) and self.current_token().value == "==":
                self.advance()
                self.parse_type()
            else:
                raise self.error("Expected ':' or '==' in where clause")
            if not self.match(TokenType.COMMA):
                return requirements
            self.advance()
