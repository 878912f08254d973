"""
Runtime support for generated modifier parsers.

Generated modules import everything they need from here: the token cursor,
value parsers and registry, modifier base classes, the error types the
dispatcher reasons about, and the build target used by availability guards.
"""

from .context import CustomModifierParser, ParseContext, reject_custom_modifier
from .cursor import Failure, Success, TokenCursor, attempt
from .errors import (
    DeprecatedModifier,
    ModifierErrorKind,
    ModifierParseError,
    StylesheetError,
    StylesheetParseError,
    UnavailableError,
    UnknownModifier,
    UnregisteredTypeError,
)
from .modifiers import (
    AnyModifier,
    AnyModifierParser,
    ArgumentReader,
    ModifierChunk,
    ModifierUnion,
    Overload,
    ParseableModifier,
    invoke,
)
from .parsers import (
    TypeRegistry,
    ValueParser,
    default_registry,
    implicit_static_member,
    parse_any_arguments,
    parse_any_value,
    parse_atom_string,
    parse_bool,
    parse_call_head,
    parse_integer,
    parse_number,
    parse_string,
    peek_call_head,
)
from .platform import BUILD_TARGET, BuildTarget, parse_version
from .tokens import Token, TokenKind, tokenize_stylesheet
from .values import (
    DEFAULT,
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
    resolve,
)

__all__ = [
    # Context
    "ParseContext",
    "CustomModifierParser",
    "reject_custom_modifier",
    # Cursor
    "TokenCursor",
    "Success",
    "Failure",
    "attempt",
    # Errors
    "StylesheetError",
    "StylesheetParseError",
    "ModifierParseError",
    "ModifierErrorKind",
    "UnknownModifier",
    "DeprecatedModifier",
    "UnavailableError",
    "UnregisteredTypeError",
    # Modifiers
    "ParseableModifier",
    "Overload",
    "ArgumentReader",
    "ModifierChunk",
    "ModifierUnion",
    "AnyModifier",
    "AnyModifierParser",
    "invoke",
    # Parsers
    "TypeRegistry",
    "ValueParser",
    "default_registry",
    "implicit_static_member",
    "parse_any_arguments",
    "parse_any_value",
    "parse_atom_string",
    "parse_bool",
    "parse_call_head",
    "parse_integer",
    "parse_number",
    "parse_string",
    "peek_call_head",
    # Platform
    "BUILD_TARGET",
    "BuildTarget",
    "parse_version",
    # Tokens
    "Token",
    "TokenKind",
    "tokenize_stylesheet",
    # Values
    "DEFAULT",
    "Atom",
    "Member",
    "Call",
    "Metadata",
    "ViewReference",
    "InlineViewReference",
    "ToolbarContentReference",
    "TextReference",
    "AttributeReference",
    "ChangeTracked",
    "Event",
    "resolve",
]
