"""
Lexer/Tokenizer for interface descriptions.

Converts raw interface text (a Swift-interface-like language) into a stream of
tokens with source location tracking. Conditional compilation directives are
resolved here: the first branch of every ``#if`` block is kept and the
``#elseif``/``#else`` branches are dropped.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import make_parse_error


class TokenType(Enum):
    """Token types in the interface language."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Declaration keywords
    IMPORT = "import"
    EXTENSION = "extension"
    ENUM = "enum"
    STRUCT = "struct"
    CLASS = "class"
    PROTOCOL = "protocol"
    ACTOR = "actor"
    FUNC = "func"
    CASE = "case"
    VAR = "var"
    LET = "let"
    INIT = "init"
    DEINIT = "deinit"
    SUBSCRIPT = "subscript"
    TYPEALIAS = "typealias"
    ASSOCIATEDTYPE = "associatedtype"
    OPERATOR = "operator"
    PRECEDENCEGROUP = "precedencegroup"
    MACRO = "macro"

    # Type keywords
    WHERE = "where"
    SOME = "some"
    ANY = "any"
    INOUT = "inout"
    THROWS = "throws"
    RETHROWS = "rethrows"
    ASYNC = "async"

    # Punctuation
    AT = "@"
    LBRACE = "{"
    RBRACE = "}"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LESS_THAN = "<"
    GREATER_THAN = ">"
    COMMA = ","
    COLON = ":"
    SEMICOLON = ";"
    DOT = "."
    ELLIPSIS = "..."
    QUESTION = "?"
    BANG = "!"
    EQUALS = "="
    ARROW = "->"
    AMPERSAND = "&"
    STAR = "*"
    SYMBOL = "SYMBOL"  # any other operator character run (==, -, |, ...)

    # Special
    EOF = "EOF"


KEYWORDS = {
    "import",
    "extension",
    "enum",
    "struct",
    "class",
    "protocol",
    "actor",
    "func",
    "case",
    "var",
    "let",
    "init",
    "deinit",
    "subscript",
    "typealias",
    "associatedtype",
    "operator",
    "precedencegroup",
    "macro",
    "where",
    "some",
    "any",
    "inout",
    "throws",
    "rethrows",
    "async",
}

_PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    ",": TokenType.COMMA,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    "?": TokenType.QUESTION,
    "@": TokenType.AT,
    "&": TokenType.AMPERSAND,
    "*": TokenType.STAR,
}

_OPERATOR_CHARS = set("=-+!*/%<>&|^~?.")

_DIRECTIVES = {"if", "elseif", "else", "endif", "warning", "error", "sourceLocation"}


@dataclass
class Token:
    """
    A single token of interface text.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


@dataclass
class _ConditionalFrame:
    """One open ``#if`` block."""

    line: int
    column: int
    skipping: bool


class Lexer:
    """
    Lexer for interface descriptions.

    Converts source text into a flat token stream. Newlines are not
    significant in the interface language and are not emitted.
    """

    def __init__(self, text: str, file: Path):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []
        self.conditionals: list[_ConditionalFrame] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def error(self, message: str, line: int, column: int) -> Exception:
        return make_parse_error(message, self.file, line, column, text=self.text)

    @property
    def skipping(self) -> bool:
        return bool(self.conditionals) and self.conditionals[-1].skipping

    def skip_line(self) -> None:
        """Skip to (but not past) the end of the current line."""
        while self.current_char() not in (None, "\n"):
            self.advance()

    def skip_block_comment(self) -> None:
        """Skip a ``/* ... */`` comment, honouring nesting."""
        start_line, start_col = self.line, self.column
        depth = 0
        while True:
            ch = self.current_char()
            if ch is None:
                raise self.error("Unterminated block comment", start_line, start_col)
            if ch == "/" and self.peek_char() == "*":
                depth += 1
                self.advance()
                self.advance()
            elif ch == "*" and self.peek_char() == "/":
                depth -= 1
                self.advance()
                self.advance()
                if depth == 0:
                    return
            else:
                self.advance()

    def read_string(self) -> str:
        """Read a quoted string, single-line or triple-quoted."""
        start_line = self.line
        start_col = self.column

        if self.text.startswith('"""', self.pos):
            for _ in range(3):
                self.advance()
            end = self.text.find('"""', self.pos)
            if end < 0:
                raise self.error("Unterminated multi-line string literal", start_line, start_col)
            body = self.text[self.pos : end]
            while self.pos < end + 3:
                self.advance()
            return "\n".join(line.strip() for line in body.strip("\n").split("\n"))

        self.advance()  # skip opening quote
        chars: list[str] = []
        while True:
            current = self.current_char()
            if current is None or current == "\n":
                raise self.error("Unterminated string literal", start_line, start_col)
            if current == '"':
                break
            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char == "n":
                    chars.append("\n")
                elif escape_char == "t":
                    chars.append("\t")
                elif escape_char == "(":
                    chars.append(self.read_interpolation())
                    continue
                elif escape_char is not None:
                    chars.append(escape_char)
                self.advance()
            else:
                chars.append(current)
                self.advance()

        self.advance()  # skip closing quote
        return "".join(chars)

    def read_interpolation(self) -> str:
        """Read a ``\\(...)`` interpolation segment verbatim."""
        start = self.pos
        depth = 0
        while True:
            ch = self.current_char()
            if ch is None or ch == "\n":
                raise self.error("Unterminated string interpolation", self.line, self.column)
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
                if depth == 0:
                    self.advance()
                    return "\\" + self.text[start : self.pos]
            self.advance()

    def read_raw_string(self) -> str:
        """Read a ``#"..."#`` raw string literal."""
        start_line, start_col = self.line, self.column
        hashes = 0
        while self.current_char() == "#":
            hashes += 1
            self.advance()
        terminator = '"' + "#" * hashes
        self.advance()  # opening quote
        end = self.text.find(terminator, self.pos)
        if end < 0:
            raise self.error("Unterminated raw string literal", start_line, start_col)
        value = self.text[self.pos : end]
        while self.pos < end + len(terminator):
            self.advance()
        return value

    def read_number(self) -> str:
        """Read an integer, decimal, or dotted version number (``10.15.4``)."""
        chars = []
        current = self.current_char()
        while current and (
            current.isalnum()
            or current == "_"
            or (current == "." and (self.peek_char() or "").isdigit())
        ):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current in ("_", "$")):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_backticked(self) -> str:
        """Read a `` `escaped` `` identifier."""
        start_line, start_col = self.line, self.column
        self.advance()
        chars = []
        while self.current_char() not in (None, "`", "\n"):
            chars.append(self.current_char())
            self.advance()
        if self.current_char() != "`":
            raise self.error("Unterminated escaped identifier", start_line, start_col)
        self.advance()
        return "".join(chars)

    def handle_directive(self, line: int, column: int) -> bool:
        """
        Handle a ``#`` at the current position.

        Returns:
            True if a compiler directive was consumed, False if the ``#`` starts
            an ordinary token (``#file``, raw strings, ...).
        """
        offset = 1
        while (self.peek_char(offset) or "").isalpha():
            offset += 1
        name = self.text[self.pos + 1 : self.pos + offset]
        if name not in _DIRECTIVES:
            return False

        if name == "if":
            self.conditionals.append(_ConditionalFrame(line, column, skipping=self.skipping))
        elif name in ("elseif", "else"):
            if not self.conditionals:
                raise self.error(f"#{name} without matching #if", line, column)
            # The first branch is always the one kept
            self.conditionals[-1].skipping = True
        elif name == "endif":
            if not self.conditionals:
                raise self.error("#endif without matching #if", line, column)
            self.conditionals.pop()
        self.skip_line()
        return True

    def add(self, token_type: TokenType, value: str, line: int, column: int) -> None:
        if not self.skipping:
            self.tokens.append(Token(token_type, value, line, column))

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            ParseError: If a lexical error is encountered
        """
        while self.pos < len(self.text):
            ch = self.current_char()
            assert ch is not None
            token_line = self.line
            token_col = self.column

            if ch in (" ", "\t", "\r", "\n"):
                self.advance()

            elif ch == "/" and self.peek_char() == "/":
                self.skip_line()

            elif ch == "/" and self.peek_char() == "*":
                self.skip_block_comment()

            elif ch == "#" and self.handle_directive(token_line, token_col):
                continue

            elif self.skipping:
                # Inactive branch: only directives matter, but strings and
                # comments are still scanned so their contents stay inert.
                if ch == '"':
                    self.read_string()
                else:
                    self.advance()

            elif ch == "#" and self.peek_char() in ('"', "#"):
                self.add(TokenType.STRING, self.read_raw_string(), token_line, token_col)

            elif ch == "#":
                self.advance()
                self.add(TokenType.IDENTIFIER, "#" + self.read_identifier(), token_line, token_col)

            elif ch == '"':
                self.add(TokenType.STRING, self.read_string(), token_line, token_col)

            elif ch.isdigit():
                self.add(TokenType.NUMBER, self.read_number(), token_line, token_col)

            elif ch == "`":
                self.add(TokenType.IDENTIFIER, self.read_backticked(), token_line, token_col)

            elif ch.isalpha() or ch in ("_", "$"):
                value = self.read_identifier()
                token_type = TokenType(value) if value in KEYWORDS else TokenType.IDENTIFIER
                self.add(token_type, value, token_line, token_col)

            elif ch == "-" and self.peek_char() == ">":
                self.advance()
                self.advance()
                self.add(TokenType.ARROW, "->", token_line, token_col)

            elif ch == "." and self.text.startswith("...", self.pos):
                for _ in range(3):
                    self.advance()
                self.add(TokenType.ELLIPSIS, "...", token_line, token_col)

            elif ch == ".":
                self.advance()
                self.add(TokenType.DOT, ".", token_line, token_col)

            elif ch == "!" and self.peek_char() != "=":
                self.advance()
                self.add(TokenType.BANG, "!", token_line, token_col)

            elif ch == "=" and self.peek_char() not in ("=", ">"):
                self.advance()
                self.add(TokenType.EQUALS, "=", token_line, token_col)

            elif ch in _PUNCTUATION and not (ch in "&*" and self.peek_char() in _OPERATOR_CHARS):
                # '<' and '>' are always single tokens so nested generic
                # argument lists (Set<Set<T>>) close one level at a time.
                self.advance()
                self.add(_PUNCTUATION[ch], ch, token_line, token_col)

            elif ch in _OPERATOR_CHARS:
                chars = []
                while self.current_char() in _OPERATOR_CHARS and self.current_char() not in "<>?":
                    chars.append(self.current_char())
                    self.advance()
                if not chars:
                    chars.append(ch)
                    self.advance()
                self.add(TokenType.SYMBOL, "".join(chars), token_line, token_col)

            elif ch == "'":
                # Character literals are not part of the language; tolerate them
                # inside skipped bodies as opaque symbols.
                self.advance()
                self.add(TokenType.SYMBOL, ch, token_line, token_col)

            elif ch == "\\":
                self.advance()
                self.add(TokenType.SYMBOL, ch, token_line, token_col)

            else:
                raise self.error(f"Unexpected character: {ch!r}", token_line, token_col)

        if self.conditionals:
            frame = self.conditionals[-1]
            raise self.error("#if without matching #endif", frame.line, frame.column)

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))
        return self.tokens


def tokenize(text: str, file: Path) -> list[Token]:
    """
    Convenience function to tokenize interface text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
