"""
Tokenizer for serialized modifier calls.

A call is written as a three-element tuple of name, metadata and arguments:

    {fade, [line: 3, file: "home.ex"], [amount: 0.5]}
    {:padding, [line: 4], [.horizontal, 8]}
    {toolbar, [line: 5], [content: :toolbar_items]}
"""

import re
from dataclasses import dataclass
from enum import Enum

from .errors import StylesheetParseError


class TokenKind(Enum):
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"
    COMMA = ","
    COLON = ":"
    DOT = "."
    NUMBER = "NUMBER"
    STRING = "STRING"
    ATOM = "ATOM"
    IDENT = "IDENT"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    line: int
    column: int

    def describe(self) -> str:
        if self.kind == TokenKind.EOF:
            return "end of input"
        if self.kind == TokenKind.STRING:
            return f'"{self.value}"'
        if self.kind == TokenKind.ATOM:
            return f":{self.value}"
        return self.value


_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
  | (?P<number>-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
  | (?P<string>"(?:[^"\\\n]|\\.)*")
  | (?P<atom>:(?:[A-Za-z_][A-Za-z0-9_?!@]*|"(?:[^"\\\n]|\\.)*"))
  | (?P<ident>[A-Za-z_][A-Za-z0-9_?!]*)
  | (?P<punct>[{}\[\],:.])
    """,
    re.VERBOSE,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}


def _unescape(body: str) -> str:
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body)


def tokenize_stylesheet(text: str) -> list[Token]:
    """
    Tokenize serialized modifier text.

    Raises:
        StylesheetParseError: On a character that starts no token
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0

    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        column = pos - line_start + 1
        if match is None:
            raise StylesheetParseError(f"Unexpected character {text[pos]!r}", line, column)

        kind = match.lastgroup
        raw = match.group()
        if kind == "number":
            tokens.append(Token(TokenKind.NUMBER, raw, line, column))
        elif kind == "string":
            tokens.append(Token(TokenKind.STRING, _unescape(raw[1:-1]), line, column))
        elif kind == "atom":
            name = raw[1:]
            if name.startswith('"'):
                name = _unescape(name[1:-1])
            tokens.append(Token(TokenKind.ATOM, name, line, column))
        elif kind == "ident":
            tokens.append(Token(TokenKind.IDENT, raw, line, column))
        elif kind == "punct":
            tokens.append(Token(TokenKind(raw), raw, line, column))

        newlines = raw.count("\n")
        if newlines:
            line += newlines
            line_start = pos + raw.rindex("\n") + 1
        pos = match.end()

    tokens.append(Token(TokenKind.EOF, "", line, pos - line_start + 1))
    return tokens
