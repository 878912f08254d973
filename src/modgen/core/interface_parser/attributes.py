"""
Attribute parsing for interface descriptions.

Handles ``@name`` and ``@name(arguments)`` attributes, and decodes
``@available`` into an availability constraint.
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import Token, TokenType

_AVAILABILITY_FLAGS = {"deprecated", "unavailable", "noasync"}


class AttributeParserMixin:
    """
    Mixin providing attribute and ``@available`` parsing.

    Note: This mixin expects to be combined with BaseParser via multiple inheritance.
    """

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        current_token: Any
        peek_token: Any
        previous_token: Any
        is_adjacent: Any
        is_identifier_like: Any
        skip_balanced: Any
        parse_dotted_name: Any
        error: Any

    def parse_attributes(self) -> tuple[list[ir.Attribute], ir.AvailabilityConstraint]:
        """
        Parse a run of declaration attributes.

        Multiple ``@available`` attributes on one declaration are merged.

        Returns:
            (attributes, merged availability)
        """
        attributes: list[ir.Attribute] = []
        availability = ir.ALWAYS_AVAILABLE

        while self.match(TokenType.AT):
            self.advance()
            name = self.parse_dotted_name().rsplit(".", 1)[-1]
            name_token = self.previous_token()

            if self.match(TokenType.LPAREN) and self.is_adjacent(name_token, self.current_token()):
                inner = self.skip_balanced()
                if name == "available":
                    availability = availability.merge(self._parse_available(inner))
                attributes.append(ir.Attribute(name=name, arguments=_join(inner)))
            else:
                attributes.append(ir.Attribute(name=name))

        return attributes, availability

    def _parse_available(self, tokens: list[Token]) -> ir.AvailabilityConstraint:
        """
        Decode the argument tokens of an ``@available`` attribute.

        Supports the shorthand form (``iOS 14.0, macOS 11.0, *``) and the long
        form (``iOS, introduced: 13.0, deprecated: 100000.0, message: "..."``).
        """
        items = _split_items(tokens)
        if not items:
            return ir.ALWAYS_AVAILABLE

        platforms: list[ir.PlatformVersion] = []
        unavailable: set[str] = set()
        deprecated = False
        message: str | None = None
        renamed: str | None = None

        first = items[0]
        long_form_platform: str | None = None
        if len(first) == 1 and (
            first[0].type == TokenType.STAR
            or (first[0].type == TokenType.IDENTIFIER and first[0].value not in _AVAILABILITY_FLAGS)
        ):
            long_form_platform = first[0].value
            items = items[1:]

        introduced: str | None = None
        for item in items:
            head = item[0]
            if head.type == TokenType.STAR:
                continue
            if len(item) >= 2 and item[1].type == TokenType.NUMBER:
                platforms.append(ir.PlatformVersion(platform=head.value, version=item[1].value))
            elif len(item) >= 3 and item[1].type == TokenType.COLON:
                value = item[2].value
                if head.value == "introduced":
                    introduced = value
                elif head.value == "deprecated":
                    deprecated = True
                elif head.value == "message":
                    message = value
                elif head.value == "renamed":
                    renamed = value
            elif head.value == "deprecated":
                deprecated = True
            elif head.value == "unavailable":
                unavailable.add(long_form_platform or "*")

        if long_form_platform and long_form_platform != "*" and introduced:
            platforms.append(ir.PlatformVersion(platform=long_form_platform, version=introduced))

        return ir.AvailabilityConstraint(
            platforms=tuple(platforms),
            unavailable=frozenset(unavailable),
            deprecated=deprecated,
            message=message,
            renamed=renamed,
        )


def _split_items(tokens: list[Token]) -> list[list[Token]]:
    """Split attribute argument tokens on top-level commas."""
    items: list[list[Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.type in (TokenType.LPAREN, TokenType.LBRACKET):
            depth += 1
        elif token.type in (TokenType.RPAREN, TokenType.RBRACKET):
            depth -= 1
        if token.type == TokenType.COMMA and depth == 0:
            items.append([])
        else:
            items[-1].append(token)
    return [item for item in items if item]


def _join(tokens: list[Token]) -> str:
    parts: list[str] = []
    for token in tokens:
        if token.type == TokenType.STRING:
            parts.append(f'"{token.value}"')
        elif token.type in (TokenType.COMMA, TokenType.COLON):
            parts.append(token.value + " ")
        else:
            parts.append(token.value)
    return "".join(parts).strip()
