"""
Value parsers and the type registry.

A value parser is a callable ``parser(cursor, context) -> value`` that either
consumes one value from the cursor or raises ``StylesheetParseError``.
Parameter types are looked up by their spelling in a ``TypeRegistry``:

    registry = default_registry()
    registry.resolve("Double")                      # number
    registry.resolve("AttributeReference<CGFloat>") # constant or attr("name")
    registry.resolve("[String]?")                   # optional list of strings
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from .cursor import TokenCursor
from .errors import StylesheetParseError, UnregisteredTypeError
from .tokens import TokenKind
from .values import (
    Atom,
    AttributeReference,
    Call,
    ChangeTracked,
    Event,
    InlineViewReference,
    Member,
    Metadata,
    TextReference,
    ToolbarContentReference,
    ViewReference,
)

logger = logging.getLogger(__name__)

ValueParser = Callable[[TokenCursor, Any], Any]

ATTRIBUTE_CALL = "__attr__"
EVENT_CALL = "__event__"


# =============================================================================
# Primitive values
# =============================================================================


def parse_number(cursor: TokenCursor, context: Any = None) -> float:
    token = cursor.expect(TokenKind.NUMBER, "a number")
    return float(token.value)


def parse_integer(cursor: TokenCursor, context: Any = None) -> int:
    token = cursor.peek()
    if token.kind != TokenKind.NUMBER or not token.value.lstrip("-").isdigit():
        raise cursor.error(f"Expected an integer, found {token.describe()}")
    cursor.advance()
    return int(token.value)


def parse_bool(cursor: TokenCursor, context: Any = None) -> bool:
    token = cursor.peek()
    if token.kind == TokenKind.IDENT and token.value in ("true", "false"):
        cursor.advance()
        return token.value == "true"
    raise cursor.error(f"Expected true or false, found {token.describe()}")


def parse_string(cursor: TokenCursor, context: Any = None) -> str:
    return cursor.expect(TokenKind.STRING, "a string").value


def parse_atom_string(cursor: TokenCursor, context: Any = None) -> str:
    """An atom or a string, as text."""
    token = cursor.peek()
    if token.kind in (TokenKind.ATOM, TokenKind.STRING):
        cursor.advance()
        return token.value
    raise cursor.error(f"Expected an atom or string, found {token.describe()}")


# =============================================================================
# Untyped values and calls
# =============================================================================


def parse_metadata(cursor: TokenCursor) -> Metadata:
    """Parse a ``[line: 1, file: "x"]`` keyword list into Metadata."""
    start = cursor.peek()
    values: dict[str, Any] = {}
    cursor.expect(TokenKind.LBRACKET, "call metadata")
    while not cursor.at(TokenKind.RBRACKET):
        key = cursor.expect(TokenKind.IDENT, "a metadata key").value
        cursor.expect(TokenKind.COLON)
        values[key] = parse_any_value(cursor)
        if not cursor.at(TokenKind.COMMA):
            break
        cursor.advance()
    cursor.expect(TokenKind.RBRACKET)

    line = values.get("line")
    module = values.get("module")
    return Metadata(
        line=line if isinstance(line, int) else start.line,
        column=start.column,
        file=values.get("file") if isinstance(values.get("file"), str) else None,
        module=module.name if isinstance(module, Atom) else module,
        source=values.get("source") if isinstance(values.get("source"), str) else None,
    )


def parse_call_head(cursor: TokenCursor) -> tuple[str, Metadata]:
    """Parse ``{ name , metadata`` and leave the cursor after the metadata."""
    cursor.expect(TokenKind.LBRACE, "'{' starting a modifier")
    token = cursor.peek()
    if token.kind not in (TokenKind.ATOM, TokenKind.IDENT):
        raise cursor.error(f"Expected a modifier name, found {token.describe()}")
    cursor.advance()
    cursor.expect(TokenKind.COMMA)
    return token.value, parse_metadata(cursor)


def peek_call_head(cursor: TokenCursor) -> tuple[str, Metadata]:
    """Read the name and metadata of a call without consuming input."""
    mark = cursor.mark()
    try:
        return parse_call_head(cursor)
    finally:
        cursor.reset(mark)


def parse_any_arguments(cursor: TokenCursor) -> tuple[tuple[Any, ...], dict[str, Any]]:
    """Parse the optional ``, [args]`` tail of a call and its closing brace."""
    positional: list[Any] = []
    keywords: dict[str, Any] = {}
    if cursor.at(TokenKind.COMMA):
        cursor.advance()
        cursor.expect(TokenKind.LBRACKET, "an argument list")
        while not cursor.at(TokenKind.RBRACKET):
            if cursor.at_key():
                key = cursor.advance().value
                cursor.advance()
                keywords[key] = parse_any_value(cursor)
            else:
                positional.append(parse_any_value(cursor))
            if not cursor.at(TokenKind.COMMA):
                break
            cursor.advance()
        cursor.expect(TokenKind.RBRACKET)
    cursor.expect(TokenKind.RBRACE)
    return tuple(positional), keywords


def parse_any_value(cursor: TokenCursor, context: Any = None) -> Any:
    """Parse any value without a schema."""
    token = cursor.peek()
    if token.kind == TokenKind.NUMBER:
        cursor.advance()
        return float(token.value) if any(c in token.value for c in ".eE") else int(token.value)
    if token.kind == TokenKind.STRING:
        cursor.advance()
        return token.value
    if token.kind == TokenKind.ATOM:
        cursor.advance()
        return Atom(token.value)
    if token.kind == TokenKind.IDENT:
        cursor.advance()
        if token.value == "nil":
            return None
        if token.value in ("true", "false"):
            return token.value == "true"
        return Atom(token.value)
    if token.kind == TokenKind.DOT:
        cursor.advance()
        return Member(cursor.expect(TokenKind.IDENT, "a member name").value)
    if token.kind == TokenKind.LBRACKET:
        cursor.advance()
        items: list[Any] = []
        while not cursor.at(TokenKind.RBRACKET):
            if cursor.at_key():
                key = cursor.advance().value
                cursor.advance()
                items.append((key, parse_any_value(cursor)))
            else:
                items.append(parse_any_value(cursor))
            if not cursor.at(TokenKind.COMMA):
                break
            cursor.advance()
        cursor.expect(TokenKind.RBRACKET)
        return items
    if token.kind == TokenKind.LBRACE:
        name, metadata = parse_call_head(cursor)
        arguments, keywords = parse_any_arguments(cursor)
        return Call(name=name, metadata=metadata, arguments=arguments, keywords=keywords)
    raise cursor.error(f"Expected a value, found {token.describe()}")


def _parse_special_call(cursor: TokenCursor, name: str) -> tuple[tuple[Any, ...], dict[str, Any]]:
    mark = cursor.mark()
    call_name, _ = parse_call_head(cursor)
    if call_name != name:
        cursor.reset(mark)
        raise cursor.error(f"Expected {name}, found {call_name}")
    return parse_any_arguments(cursor)


# =============================================================================
# Combinators
# =============================================================================


def optional(parser: ValueParser) -> ValueParser:
    def parse(cursor: TokenCursor, context: Any) -> Any:
        if cursor.at(TokenKind.IDENT, "nil"):
            cursor.advance()
            return None
        return parser(cursor, context)

    return parse


def array_of(parser: ValueParser) -> ValueParser:
    def parse(cursor: TokenCursor, context: Any) -> tuple[Any, ...]:
        cursor.expect(TokenKind.LBRACKET, "a list")
        items = []
        while not cursor.at(TokenKind.RBRACKET):
            items.append(parser(cursor, context))
            if not cursor.at(TokenKind.COMMA):
                break
            cursor.advance()
        cursor.expect(TokenKind.RBRACKET)
        return tuple(items)

    return parse


def set_of(parser: ValueParser) -> ValueParser:
    items = array_of(parser)

    def parse(cursor: TokenCursor, context: Any) -> frozenset[Any]:
        return frozenset(items(cursor, context))

    return parse


def dictionary_of(key: ValueParser, value: ValueParser) -> ValueParser:
    """A keyword list ``[name: value, ...]``; keys are read as strings."""

    def parse(cursor: TokenCursor, context: Any) -> dict[str, Any]:
        cursor.expect(TokenKind.LBRACKET, "a keyword list")
        items: dict[str, Any] = {}
        while not cursor.at(TokenKind.RBRACKET):
            if not cursor.at_key():
                raise cursor.error(f"Expected a key, found {cursor.peek().describe()}")
            name = cursor.advance().value
            cursor.advance()
            items[name] = value(cursor, context)
            if not cursor.at(TokenKind.COMMA):
                break
            cursor.advance()
        cursor.expect(TokenKind.RBRACKET)
        return items

    return parse


def implicit_static_member(members: Mapping[str, Callable[[], Any]]) -> ValueParser:
    """
    Parse ``.name`` or ``:name`` and build the member with its constructor.

    Constructors are called at parse time so availability guards run then.
    """

    def parse(cursor: TokenCursor, context: Any) -> Any:
        token = cursor.peek()
        if token.kind == TokenKind.DOT and cursor.peek(1).kind == TokenKind.IDENT:
            name_token = cursor.peek(1)
        elif token.kind == TokenKind.ATOM:
            name_token = token
        else:
            raise cursor.error(f"Expected a member, found {token.describe()}")
        constructor = members.get(name_token.value)
        if constructor is None:
            raise cursor.error(f"Unknown member {name_token.value}", name_token)
        value = constructor()
        cursor.advance()
        if token.kind == TokenKind.DOT:
            cursor.advance()
        return value

    return parse


# =============================================================================
# References
# =============================================================================


def _template_names(cursor: TokenCursor) -> tuple[str, ...]:
    if cursor.at(TokenKind.LBRACKET):
        return array_of(parse_atom_string)(cursor, None)
    return (parse_atom_string(cursor),)


def parse_view_reference(cursor: TokenCursor, context: Any = None) -> ViewReference:
    return ViewReference(_template_names(cursor))


def parse_inline_view_reference(cursor: TokenCursor, context: Any = None) -> InlineViewReference:
    return InlineViewReference(_template_names(cursor))


def parse_toolbar_content_reference(
    cursor: TokenCursor, context: Any = None
) -> ToolbarContentReference:
    return ToolbarContentReference(_template_names(cursor))


def parse_text_reference(cursor: TokenCursor, context: Any = None) -> TextReference:
    return TextReference(parse_atom_string(cursor))


def parse_event(cursor: TokenCursor, context: Any = None) -> Event:
    """``"save"``, ``:save`` or ``{__event__, [], ["save", [target: 1]]}``."""
    if not cursor.at(TokenKind.LBRACE):
        return Event(parse_atom_string(cursor))
    arguments, keywords = _parse_special_call(cursor, EVENT_CALL)
    if not arguments or not isinstance(arguments[0], str):
        raise cursor.error("Event name must be a string")
    params = dict(keywords)
    for extra in arguments[1:]:
        if isinstance(extra, list):
            params.update(item for item in extra if isinstance(item, tuple))
    return Event(arguments[0], params)


def attribute_reference(parser: ValueParser) -> ValueParser:
    """A constant of the wrapped type, or ``{__attr__, [], ["name"]}``."""

    def parse(cursor: TokenCursor, context: Any) -> AttributeReference:
        if cursor.at(TokenKind.LBRACE):
            head = cursor.mark()
            arguments, _ = _parse_special_call(cursor, ATTRIBUTE_CALL)
            if len(arguments) != 1 or not isinstance(arguments[0], str):
                cursor.reset(head)
                raise cursor.error("Attribute reference takes one attribute name")
            return AttributeReference(attribute=arguments[0])
        return AttributeReference(value=parser(cursor, context))

    return parse


def change_tracked(parser: ValueParser) -> ValueParser:
    """A binding name; the wrapped type is read by the host when the binding changes."""

    def parse(cursor: TokenCursor, context: Any) -> ChangeTracked:
        return ChangeTracked(parse_atom_string(cursor))

    return parse


# =============================================================================
# Registry
# =============================================================================


def _split_generic(spelling: str) -> tuple[str, list[str]] | None:
    """``Name<A, B<C>>`` -> ``("Name", ["A", "B<C>"])``."""
    open_index = spelling.find("<")
    if open_index <= 0 or not spelling.endswith(">"):
        return None
    name = spelling[:open_index]
    args: list[str] = []
    depth = 0
    current = []
    for ch in spelling[open_index + 1 : -1]:
        if ch in "<[(":
            depth += 1
        elif ch in ">])":
            depth -= 1
        if ch == "," and depth == 0:
            args.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    args.append("".join(current).strip())
    return name, args


def _top_level_colon(spelling: str) -> int:
    depth = 0
    for index, ch in enumerate(spelling):
        if ch in "<[(":
            depth += 1
        elif ch in ">])":
            depth -= 1
        elif ch == ":" and depth == 0:
            return index
    return -1


class TypeRegistry:
    """
    Value parsers keyed by type spelling.

    Plain names map to parsers; generic names (``ChangeTracked``) map to
    factories taking the parsers of their arguments. Optionals, arrays and
    dictionaries are built structurally.
    """

    def __init__(self) -> None:
        self._parsers: dict[str, ValueParser] = {}
        self._generics: dict[str, Callable[..., ValueParser]] = {}
        self._resolved: dict[str, ValueParser] = {}

    def register(self, name: str, parser: ValueParser) -> None:
        logger.debug("Registering value parser for %s", name)
        self._parsers[name] = parser
        self._resolved.clear()

    def register_generic(self, name: str, factory: Callable[..., ValueParser]) -> None:
        self._generics[name] = factory
        self._resolved.clear()

    def __contains__(self, spelling: str) -> bool:
        try:
            self.resolve(spelling)
        except UnregisteredTypeError:
            return False
        return True

    def resolve(self, spelling: str) -> ValueParser:
        """
        Return the parser for a type spelling.

        Raises:
            UnregisteredTypeError: If no parser covers the spelling
        """
        spelling = spelling.strip()
        cached = self._resolved.get(spelling)
        if cached is not None:
            return cached
        parser = self._build(spelling)
        self._resolved[spelling] = parser
        return parser

    def _build(self, spelling: str) -> ValueParser:
        if spelling in self._parsers:
            return self._parsers[spelling]
        if spelling.endswith(("?", "!")):
            return optional(self.resolve(spelling[:-1]))
        if spelling.startswith("[") and spelling.endswith("]"):
            inner = spelling[1:-1]
            colon = _top_level_colon(inner)
            if colon < 0:
                return array_of(self.resolve(inner))
            return dictionary_of(
                self.resolve(inner[:colon]), self.resolve(inner[colon + 1 :])
            )
        generic = _split_generic(spelling)
        if generic is not None:
            name, args = generic
            factory = self._generics.get(name)
            if factory is not None:
                return factory(*(self.resolve(a) for a in args))
        raise UnregisteredTypeError(spelling)


def default_registry() -> TypeRegistry:
    """A registry with parsers for the standard scalar and reference types."""
    registry = TypeRegistry()
    for name in ("Double", "Float", "CGFloat"):
        registry.register(name, parse_number)
    registry.register("Int", parse_integer)
    registry.register("Bool", parse_bool)
    registry.register("String", parse_string)
    registry.register("AtomString", parse_atom_string)
    registry.register("Event", parse_event)
    registry.register("ViewReference", parse_view_reference)
    registry.register("InlineViewReference", parse_inline_view_reference)
    registry.register("ToolbarContentReference", parse_toolbar_content_reference)
    registry.register("TextReference", parse_text_reference)
    registry.register_generic("AttributeReference", attribute_reference)
    registry.register_generic("ChangeTracked", change_tracked)
    registry.register_generic("Set", set_of)
    registry.register_generic("Array", array_of)
    registry.register_generic("Optional", optional)
    return registry


__all__ = [
    "ValueParser",
    "TypeRegistry",
    "default_registry",
    "parse_number",
    "parse_integer",
    "parse_bool",
    "parse_string",
    "parse_atom_string",
    "parse_any_value",
    "parse_any_arguments",
    "parse_metadata",
    "parse_call_head",
    "peek_call_head",
    "parse_view_reference",
    "parse_inline_view_reference",
    "parse_toolbar_content_reference",
    "parse_text_reference",
    "parse_event",
    "attribute_reference",
    "change_tracked",
    "optional",
    "array_of",
    "set_of",
    "dictionary_of",
    "implicit_static_member",
]
