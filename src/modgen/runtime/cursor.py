"""
Rewindable token cursor and value-returning parse attempts.

Ordered fallback parsing is written as a sequence of ``attempt`` calls: each
failure comes back as a ``Failure`` value with the cursor rewound, and only
the error the caller decides to surface is raised.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .errors import StylesheetError, StylesheetParseError
from .tokens import Token, TokenKind, tokenize_stylesheet

T = TypeVar("T")


class TokenCursor:
    """A position in a token list that can be saved and restored."""

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    @classmethod
    def from_text(cls, text: str) -> "TokenCursor":
        return cls(tokenize_stylesheet(text))

    def peek(self, offset: int = 0) -> Token:
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[pos]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind != TokenKind.EOF:
            self.pos += 1
        return token

    def at(self, kind: TokenKind, value: str | None = None) -> bool:
        token = self.peek()
        return token.kind == kind and (value is None or token.value == value)

    def at_key(self) -> bool:
        """True at ``name:`` (an identifier followed by a colon)."""
        return self.peek().kind == TokenKind.IDENT and self.peek(1).kind == TokenKind.COLON

    @property
    def at_end(self) -> bool:
        return self.peek().kind == TokenKind.EOF

    def mark(self) -> int:
        return self.pos

    def reset(self, mark: int) -> None:
        self.pos = mark

    def error(self, message: str, token: Token | None = None) -> StylesheetParseError:
        token = token or self.peek()
        return StylesheetParseError(message, token.line, token.column)

    def expect(self, kind: TokenKind, description: str | None = None) -> Token:
        token = self.peek()
        if token.kind != kind:
            expected = description or f"'{kind.value}'"
            raise self.error(f"Expected {expected}, found {token.describe()}", token)
        return self.advance()


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: Exception

    @property
    def ok(self) -> bool:
        return False


def attempt(
    parse: Callable[..., T],
    cursor: TokenCursor,
    *args: Any,
    errors: tuple[type[Exception], ...] = (StylesheetError,),
) -> Success[T] | Failure:
    """
    Run ``parse(cursor, *args)``; on failure rewind the cursor and return the error.

    Only exceptions listed in *errors* are captured; anything else propagates.
    """
    mark = cursor.mark()
    try:
        return Success(parse(cursor, *args))
    except errors as e:
        cursor.reset(mark)
        return Failure(e)
