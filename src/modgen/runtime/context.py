"""
Host extension points for generated modifier parsers.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol

from .cursor import TokenCursor
from .errors import UnregisteredTypeError
from .parsers import TypeRegistry, ValueParser, default_registry


class CustomModifierParser(Protocol):
    """
    Parses modifiers the host registers itself.

    Implementations consume one serialized call from the cursor. Raising
    ``ModifierParseError`` means "I do not know this name"; any other
    exception means the call was recognized but malformed.
    """

    def __call__(self, cursor: TokenCursor, context: "ParseContext") -> Any: ...


def reject_custom_modifier(cursor: TokenCursor, context: "ParseContext") -> Any:
    """
    The default custom parser: no host modifiers are registered.

    The failure is unstructured, so the dispatcher surfaces its own
    unknown, deprecated or malformed-call error instead.
    """
    raise cursor.error("No custom modifiers are registered")


@dataclass
class ParseContext:
    """
    Everything a generated parser needs from its host.

    Attributes:
        registry: Value parsers by type spelling
        custom_modifier_parser: Fallback for names no built-in parser knows
        text_modifier_parser: Parser for modifiers that only apply to text
        image_modifier_parser: Parser for modifiers that only apply to images
        extra_modifier_types: Hand-written modifier types by case name
    """

    registry: TypeRegistry = field(default_factory=default_registry)
    custom_modifier_parser: CustomModifierParser = reject_custom_modifier
    text_modifier_parser: Callable[[TokenCursor, "ParseContext"], Any] | None = None
    image_modifier_parser: Callable[[TokenCursor, "ParseContext"], Any] | None = None
    extra_modifier_types: dict[str, Any] = field(default_factory=dict)

    def parser(self, spelling: str) -> ValueParser:
        return self.registry.resolve(spelling)

    def extra_modifier_type(self, case: str) -> Any:
        """
        Look up a hand-written modifier type.

        Raises:
            UnregisteredTypeError: If the host did not provide it
        """
        try:
            return self.extra_modifier_types[case]
        except KeyError:
            raise UnregisteredTypeError(case) from None
