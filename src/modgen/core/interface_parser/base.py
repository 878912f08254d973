"""
Base parser class for interface descriptions.

Token navigation, bracket skipping and error construction for the parser mixins.
"""

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..errors import ParseError, make_parse_error
from ..ir import SourceLocation
from ..lexer import KEYWORDS, Token, TokenType

if TYPE_CHECKING:
    from .. import ir


# Keyword tokens that may still appear where an identifier is expected
# (argument labels, case names, member names).
KEYWORD_AS_IDENTIFIER_TYPES = frozenset(TokenType(k) for k in KEYWORDS)

_BRACKET_PAIRS = {
    TokenType.LPAREN: TokenType.RPAREN,
    TokenType.LBRACKET: TokenType.RBRACKET,
    TokenType.LBRACE: TokenType.RBRACE,
}


@runtime_checkable
class ParserProtocol(Protocol):
    """
    Protocol defining the interface available to parser mixins.

    Mixins rely on BaseParser methods once combined in the final Parser class.
    """

    tokens: list[Token]
    file: Path
    pos: int

    def current_token(self) -> Token: ...
    def peek_token(self, offset: int = 1) -> Token: ...
    def advance(self) -> Token: ...
    def expect(self, token_type: TokenType) -> Token: ...
    def expect_identifier_or_keyword(self) -> Token: ...
    def match(self, *token_types: TokenType) -> bool: ...
    def skip_balanced(self) -> list[Token]: ...

    # Methods from other mixins that may be called cross-mixin
    def parse_type(self) -> "ir.TypeRef": ...
    def parse_attributes(self) -> "tuple[list[ir.Attribute], ir.AvailabilityConstraint]": ...


class BaseParser:
    """
    Token cursor shared by the parser mixins.

    Errors are built with ``error()`` so that every ``ParseError`` carries the
    interface file, the offending token position and a source snippet.
    """

    def __init__(self, tokens: list[Token], file: Path, text: str = ""):
        self.tokens = tokens
        self.file = file
        self.text = text
        self.pos = 0

    def peek_token(self, offset: int = 1) -> Token:
        """Token at *offset* from the cursor; the trailing EOF repeats past the end."""
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def current_token(self) -> Token:
        return self.peek_token(0)

    def previous_token(self) -> Token | None:
        if self.pos == 0:
            return None
        return self.tokens[self.pos - 1]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def error(self, message: str, token: Token | None = None) -> ParseError:
        token = token or self.current_token()
        return make_parse_error(
            message, self.file, token.line, token.column, text=self.text or None
        )

    def expect(self, token_type: TokenType) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            found = token.value or token.type.value
            raise self.error(f"Expected '{token_type.value}', got '{found}'", token)
        return self.advance()

    def expect_identifier_or_keyword(self) -> Token:
        """
        Expect an identifier or accept a keyword as an identifier.

        Argument labels and member names may be spelled like keywords
        (``for``, ``in``, ``default``, ``init``).
        """
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER or token.type in KEYWORD_AS_IDENTIFIER_TYPES:
            return self.advance()
        found = token.value or token.type.value
        raise self.error(f"Expected identifier, got '{found}'", token)

    def is_identifier_like(self, token: Token | None = None) -> bool:
        token = token or self.current_token()
        return token.type == TokenType.IDENTIFIER or token.type in KEYWORD_AS_IDENTIFIER_TYPES

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def match_value(self, *values: str) -> bool:
        """Check if the current identifier token has one of the given spellings."""
        token = self.current_token()
        return token.type == TokenType.IDENTIFIER and token.value in values

    def is_adjacent(self, left: Token, right: Token) -> bool:
        """True if *right* starts immediately after *left* on the same line."""
        return left.line == right.line and left.column + len(left.value) == right.column

    def skip_balanced(self) -> list[Token]:
        """
        Consume a bracketed group starting at the current token.

        Returns:
            The tokens inside the brackets (exclusive)

        Raises:
            ParseError: If the group is not closed before end of input
        """
        opener = self.advance()
        closer = _BRACKET_PAIRS[opener.type]
        stack = [closer]
        inner: list[Token] = []
        while stack:
            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.error(f"Unclosed '{opener.value}'", opener)
            self.advance()
            if token.type in _BRACKET_PAIRS:
                stack.append(_BRACKET_PAIRS[token.type])
            elif token.type in _BRACKET_PAIRS.values():
                if token.type != stack[-1]:
                    raise self.error(f"Mismatched '{token.value}'", token)
                stack.pop()
                if not stack:
                    break
            inner.append(token)
        return inner

    def skip_expression(self, *terminators: TokenType) -> None:
        """Skip an expression (default value, raw value) up to a terminator at depth 0."""
        while not self.match(TokenType.EOF, *terminators):
            if self.match(*_BRACKET_PAIRS):
                self.skip_balanced()
            else:
                self.advance()

    def location(self, token: Token) -> SourceLocation:
        return SourceLocation(file=str(self.file), line=token.line, column=token.column)

    def parse_dotted_name(self) -> str:
        """Parse ``a.b.c`` and return it joined with dots."""
        parts = [self.expect_identifier_or_keyword().value]
        while self.match(TokenType.DOT) and self.is_identifier_like(self.peek_token()):
            self.advance()
            parts.append(self.advance().value)
        return ".".join(parts)
