"""
Base classes for generated modifier types.

Generated code subclasses ``ParseableModifier`` once per modifier and nests
one ``Overload`` dataclass per signature:

    class _fadeModifier(ParseableModifier):
        name = "fade"

        @dataclass(frozen=True)
        class _0(Overload):
            amount: Any

            @classmethod
            def parse_arguments(cls, args):
                return cls(amount=args.labeled("amount", "Double"))

            def apply(self, content, host):
                return invoke(content, "fade", (), {"amount": self.amount})

        overloads = (_0,)
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

from .context import ParseContext
from .cursor import TokenCursor, attempt
from .errors import StylesheetParseError
from .parsers import parse_any_arguments, parse_call_head, peek_call_head
from .tokens import TokenKind
from .values import DEFAULT, Metadata, resolve

logger = logging.getLogger(__name__)


class ArgumentReader:
    """
    Reads the ``[positional..., label: value]`` list of one call.

    The list itself may be omitted, in which case every argument must have
    a default. Omitted defaulted arguments read as ``DEFAULT``.
    """

    def __init__(self, cursor: TokenCursor, context: ParseContext):
        self.cursor = cursor
        self.context = context
        self.has_list = False
        if cursor.at(TokenKind.COMMA):
            cursor.advance()
            cursor.expect(TokenKind.LBRACKET, "an argument list")
            self.has_list = True

    def _exhausted(self) -> bool:
        return not self.has_list or self.cursor.at(TokenKind.RBRACKET)

    def _separator(self) -> None:
        if self.cursor.at(TokenKind.COMMA):
            self.cursor.advance()
        elif not self.cursor.at(TokenKind.RBRACKET):
            raise self.cursor.error(f"Expected ',' or ']', found {self.cursor.peek().describe()}")

    def positional(self, spelling: str, has_default: bool = False) -> Any:
        if self._exhausted() or self.cursor.at_key():
            if has_default:
                return DEFAULT
            raise self.cursor.error(f"Missing argument of type {spelling}")
        parser = self.context.parser(spelling)
        if has_default:
            result = attempt(parser, self.cursor, self.context)
            if not result.ok:
                return DEFAULT
            value = result.value
        else:
            value = parser(self.cursor, self.context)
        self._separator()
        return value

    def labeled(self, label: str, spelling: str, has_default: bool = False) -> Any:
        cursor = self.cursor
        if self._exhausted() or not cursor.at_key() or cursor.peek().value != label:
            if has_default:
                return DEFAULT
            raise cursor.error(f"Missing argument `{label}`")
        parser = self.context.parser(spelling)
        cursor.advance()
        cursor.advance()
        value = parser(cursor, self.context)
        self._separator()
        return value

    def finish(self) -> None:
        if self.has_list:
            if not self.cursor.at(TokenKind.RBRACKET):
                raise self.cursor.error(f"Unexpected argument {self.cursor.peek().describe()}")
            self.cursor.advance()
        self.cursor.expect(TokenKind.RBRACE, "'}' closing the modifier")


def invoke(content: Any, name: str, args: Iterable[Any], kwargs: Mapping[str, Any]) -> Any:
    """Call ``content.<name>(...)`` leaving out arguments that were not given."""
    positional = list(args)
    while positional and positional[-1] is DEFAULT:
        positional.pop()
    keywords = {k: v for k, v in kwargs.items() if v is not DEFAULT}
    return getattr(content, name)(*positional, **keywords)


class Overload:
    """One signature of a modifier. Subclasses are frozen dataclasses."""

    @classmethod
    def parse_arguments(cls, args: ArgumentReader) -> "Overload":
        raise NotImplementedError

    @classmethod
    def parse(cls, cursor: TokenCursor, context: ParseContext) -> "Overload":
        reader = ArgumentReader(cursor, context)
        value = cls.parse_arguments(reader)
        reader.finish()
        return value

    def apply(self, content: Any, host: Any) -> Any:
        raise NotImplementedError


@dataclass(frozen=True)
class ParseableModifier:
    """A parsed call of one modifier: the matching overload plus its position."""

    name: ClassVar[str] = ""
    requires_context: ClassVar[bool] = False
    overloads: ClassVar[tuple[type[Overload], ...]] = ()

    value: Overload
    metadata: Metadata = field(default_factory=Metadata)

    @classmethod
    def parse(cls, cursor: TokenCursor, context: ParseContext) -> "ParseableModifier":
        """
        Parse one call, trying each overload in declaration order.

        Raises:
            StylesheetParseError: If the name differs or no overload matches
        """
        start = cursor.peek()
        name, metadata = parse_call_head(cursor)
        if name != cls.name:
            raise StylesheetParseError(
                f"Expected `{cls.name}`, found `{name}`", start.line, start.column
            )

        failures = []
        for overload in cls.overloads:
            result = attempt(overload.parse, cursor, context)
            if result.ok:
                return cls(result.value, metadata)
            failures.append(result.error)

        if len(failures) == 1:
            raise failures[0]
        reasons = "; ".join(str(f) for f in failures)
        raise StylesheetParseError(
            f"No overload of `{cls.name}` matches: {reasons}", start.line, start.column
        )

    def apply(self, content: Any, host: Any = None) -> Any:
        return self.value.apply(content, host)


@dataclass(frozen=True)
class ModifierChunk:
    """A bounded group of modifier types, keyed by modifier name."""

    members: ClassVar[dict[str, type[ParseableModifier]]] = {}

    modifier: ParseableModifier

    def apply(self, content: Any, host: Any = None) -> Any:
        return self.modifier.apply(content, host)


@dataclass(frozen=True)
class ModifierUnion:
    """
    A tagged union over chunks and fallback modifier kinds.

    ``case`` names the alternative (``chunk0``, ``_customRegistryModifier``,
    ...), ``value`` holds its payload.
    """

    CASES: ClassVar[tuple[str, ...]] = ()

    case: str
    value: Any

    def __post_init__(self) -> None:
        if self.CASES and self.case not in self.CASES:
            raise ValueError(f"{type(self).__name__} has no case {self.case!r}")

    def apply(self, content: Any, host: Any = None) -> Any:
        apply = getattr(self.value, "apply", None)
        if apply is None:
            return content
        return apply(content, host)


@dataclass(frozen=True)
class AnyModifier:
    """A call parsed without a schema, applied by name."""

    name: str
    metadata: Metadata
    arguments: tuple[Any, ...] = ()
    keywords: dict[str, Any] = field(default_factory=dict)

    def apply(self, content: Any, host: Any = None) -> Any:
        args = [resolve(a, host) for a in self.arguments]
        kwargs = {k: resolve(v, host) for k, v in self.keywords.items()}
        return invoke(content, self.name, args, kwargs)


class AnyModifierParser:
    """
    Parses modifiers that only apply to one kind of content (text, images).

    Only the listed names are accepted. When the host registered a parser
    for the kind under *attribute* it is used; otherwise the call is read
    without a schema.
    """

    def __init__(self, names: Iterable[str], attribute: str):
        self.names = frozenset(names)
        self.attribute = attribute

    def __call__(self, cursor: TokenCursor, context: ParseContext) -> Any:
        start = cursor.peek()
        name, _ = peek_call_head(cursor)
        if name not in self.names:
            raise StylesheetParseError(
                f"`{name}` is not handled by {self.attribute}", start.line, start.column
            )
        delegate = getattr(context, self.attribute)
        if delegate is not None:
            return delegate(cursor, context)
        name, metadata = parse_call_head(cursor)
        arguments, keywords = parse_any_arguments(cursor)
        logger.debug("Parsed %s without a schema", name)
        return AnyModifier(name, metadata, arguments, keywords)


__all__ = [
    "ArgumentReader",
    "Overload",
    "ParseableModifier",
    "ModifierChunk",
    "ModifierUnion",
    "AnyModifier",
    "AnyModifierParser",
    "invoke",
]
