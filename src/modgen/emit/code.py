"""
Code-mode emitter.

Generates one Python module from a catalog. The module defines a
``ParseableModifier`` subclass per modifier, groups them into chunk classes,
unions the chunks with the fallback kinds in ``BuiltinModifier`` and
dispatches serialized calls through ``BuiltinModifierParser``:

    from generated_modifiers import BuiltinModifierParser

    parser = BuiltinModifierParser(ParseContext())
    modifier = parser.parse_text('{fade, [line: 1], [amount: 0.5]}')
    view = modifier.apply(view, host)
"""

import keyword
import logging
from textwrap import dedent

from modgen.core import ir
from modgen.core.config import GeneratorConfig

from .chunks import chunk
from .enums import generate_enums

logger = logging.getLogger(__name__)

INDENT = "    "

# Attributes of generated overload classes that parameter fields must not shadow
_RESERVED_FIELDS = frozenset({"apply", "parse", "parse_arguments", "cls", "self"})

RUNTIME_IMPORTS = (
    "BUILD_TARGET",
    "AnyModifierParser",
    "ArgumentReader",
    "DeprecatedModifier",
    "ModifierChunk",
    "ModifierParseError",
    "ModifierUnion",
    "Overload",
    "ParseContext",
    "ParseableModifier",
    "StylesheetParseError",
    "TokenCursor",
    "TokenKind",
    "TypeRegistry",
    "UnavailableError",
    "UnknownModifier",
    "ValueParser",
    "attempt",
    "implicit_static_member",
    "invoke",
    "peek_call_head",
    "resolve",
)


def modifier_class_name(name: str) -> str:
    return f"_{name}Modifier"


def chunk_class_name(index: int) -> str:
    return f"_BuiltinModifierChunk{index}"


def extra_case_name(type_name: str) -> str:
    """``_ScaleModifier<R>`` -> ``_ScaleModifier``."""
    return type_name.split("<", 1)[0]


def field_names(signature: ir.Signature) -> list[str]:
    """Python-safe dataclass field names for a signature's parameters."""
    names: list[str] = []
    for i, parameter in enumerate(signature.parameters):
        name = parameter.binding_name
        if name == ir.WILDCARD:
            name = f"arg{i}"
        elif keyword.iskeyword(name) or name in _RESERVED_FIELDS:
            name = f"{name}_"
        while name in names:
            name = f"{name}_"
        names.append(name)
    return names


def _read_call(parameter: ir.Parameter) -> str:
    default = ", has_default=True" if parameter.has_default else ""
    if parameter.is_labeled:
        return f'args.labeled("{parameter.first_name}", "{parameter.type_name}"{default})'
    return f'args.positional("{parameter.type_name}"{default})'


def generate_overload(
    modifier: ir.Modifier, index: int, signature: ir.Signature
) -> list[str]:
    """Generate the nested dataclass for one signature."""
    fields = field_names(signature)
    lines = [
        "@dataclass(frozen=True)",
        f"class _{index}(Overload):",
        f'    """{modifier.name}{signature}"""',
        "",
    ]
    for name in fields:
        lines.append(f"    {name}: Any")
    if fields:
        lines.append("")

    lines.append("    @classmethod")
    lines.append(f'    def parse_arguments(cls, args: ArgumentReader) -> "_{index}":')
    if fields:
        lines.append("        return cls(")
        for name, parameter in zip(fields, signature.parameters):
            lines.append(f"            {name}={_read_call(parameter)},")
        lines.append("        )")
    else:
        lines.append("        return cls()")
    lines.append("")

    def argument(name: str) -> str:
        value = f"self.{name}"
        return f"resolve({value}, host)" if modifier.requires_context else value

    positional = [
        argument(name)
        for name, parameter in zip(fields, signature.parameters)
        if not parameter.is_labeled
    ]
    labeled = [
        f'"{parameter.first_name}": {argument(name)}'
        for name, parameter in zip(fields, signature.parameters)
        if parameter.is_labeled
    ]
    args = "(" + "".join(f"{p}, " for p in positional) + ")"
    kwargs = "{" + ", ".join(labeled) + "}"
    lines.append("    def apply(self, content: Any, host: Any) -> Any:")
    lines.append(f'        return invoke(content, "{modifier.name}", {args}, {kwargs})')
    return lines


def generate_modifier(modifier: ir.Modifier) -> str:
    """Generate the ``ParseableModifier`` subclass for one modifier."""
    lines = [
        f"class {modifier_class_name(modifier.name)}(ParseableModifier):",
        f'    name = "{modifier.name}"',
        f"    requires_context = {modifier.requires_context}",
    ]
    overloads: list[str] = []
    for index, signature in enumerate(modifier.signatures):
        lines.append("")
        body = generate_overload(modifier, index, signature)
        lines.extend(f"{INDENT}{line}" if line else "" for line in body)
        overloads.append(f"_{index}")

    lines.append("")
    lines.append(f"    Value = {' | '.join(['Never', *overloads])}")
    lines.append(f"    overloads = ({''.join(f'{o}, ' for o in overloads)})")
    return "\n".join(lines)


def generate_chunks(names: list[str], chunk_size: int) -> tuple[str, int]:
    """Generate the chunk classes; returns the code and the chunk count."""
    blocks = []
    groups = chunk(names, chunk_size)
    for index, group in enumerate(groups):
        lines = [
            f"class {chunk_class_name(index)}(ModifierChunk):",
            "    members = {",
        ]
        for name in group:
            lines.append(f'        "{name}": {modifier_class_name(name)},')
        lines.append("    }")
        blocks.append("\n".join(lines))
    return "\n\n\n".join(blocks), len(groups)


def _string_tuple(values: list[str]) -> str:
    if not values:
        return "()"
    inner = "".join(f'    "{v}",\n' for v in values)
    return f"(\n{inner})"


def _string_dict(items: dict[str, str]) -> str:
    if not items:
        return "{}"
    inner = "".join(f"    {_literal(k)}: {_literal(v)},\n" for k, v in items.items())
    return f"{{\n{inner}}}"


def _literal(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n") + '"'


def generate_tables(catalog: ir.Catalog, config: GeneratorConfig, chunk_count: int) -> str:
    extras = [extra_case_name(t) for t in catalog.extra_modifier_types]
    cases = [
        *(f"chunk{i}" for i in range(chunk_count)),
        *extras,
        "_customRegistryModifier",
        "_anyTextModifier",
        "_anyImageModifier",
    ]
    chunks = ", ".join(chunk_class_name(i) for i in range(chunk_count))
    return "\n".join(
        [
            f"CHUNKS = ({chunks}{',' if chunk_count == 1 else ''})",
            "",
            f"EXTRA_MODIFIER_TYPES = {_string_tuple(extras)}",
            "",
            f"DEPRECATIONS = {_string_dict(catalog.deprecations)}",
            "",
            f"TEXT_MODIFIERS = frozenset({_string_tuple(sorted(config.text_modifiers))})",
            "",
            f"IMAGE_MODIFIERS = frozenset({_string_tuple(sorted(config.image_modifiers))})",
            "",
            "",
            "class BuiltinModifier(ModifierUnion):",
            '    """Any modifier the stylesheet can produce."""',
            "",
            f"    CASES = {_indent_block(_string_tuple(cases))}",
            "",
            "",
            '_AnyTextModifierParser = AnyModifierParser(TEXT_MODIFIERS, "text_modifier_parser")',
            '_AnyImageModifierParser = AnyModifierParser(IMAGE_MODIFIERS, "image_modifier_parser")',
        ]
    )


def _indent_block(text: str) -> str:
    return text.replace("\n", f"\n{INDENT}")


DISPATCHER = dedent('''
    class BuiltinModifierParser:
        """
        Parses one serialized modifier call into a ``BuiltinModifier``.

        Order of precedence:
        built-in modifiers, then text and image modifiers, then the host's
        custom modifiers. Unknown and deprecated names surface as
        ``ModifierParseError``.
        """

        def __init__(self, context: ParseContext | None = None):
            self.context = context or ParseContext()
            register_types(self.context.registry)
            self.parsers: dict[str, Any] = {}
            for index, group in enumerate(CHUNKS):
                for name, modifier in group.members.items():
                    self.parsers[name] = self._chunk_parser(f"chunk{index}", group, modifier)
            for case in EXTRA_MODIFIER_TYPES:
                extra = self.context.extra_modifier_type(case)
                self.parsers[extra.name] = self._extra_parser(case, extra)

        def _chunk_parser(self, case: str, group: type[ModifierChunk], modifier: Any) -> Any:
            def parse(cursor: TokenCursor) -> BuiltinModifier:
                return BuiltinModifier(case, group(modifier.parse(cursor, self.context)))

            return parse

        def _extra_parser(self, case: str, extra: Any) -> Any:
            def parse(cursor: TokenCursor) -> BuiltinModifier:
                return BuiltinModifier(case, extra.parse(cursor, self.context))

            return parse

        def _parse_builtin(self, cursor: TokenCursor, name: str, metadata: Any) -> BuiltinModifier:
            parser = self.parsers.get(name)
            if parser is not None:
                return parser(cursor)
            if name in DEPRECATIONS:
                raise ModifierParseError(DeprecatedModifier(name, DEPRECATIONS[name]), metadata)
            raise ModifierParseError(UnknownModifier(name), metadata)

        def parse(self, cursor: TokenCursor) -> BuiltinModifier:
            name, metadata = peek_call_head(cursor)

            builtin = attempt(
                self._parse_builtin, cursor, name, metadata, errors=(Exception,)
            )
            if builtin.ok:
                return builtin.value

            text = attempt(_AnyTextModifierParser, cursor, self.context, errors=(Exception,))
            if text.ok:
                return BuiltinModifier("_anyTextModifier", text.value)
            image = attempt(_AnyImageModifierParser, cursor, self.context, errors=(Exception,))
            if image.ok:
                return BuiltinModifier("_anyImageModifier", image.value)

            custom = attempt(
                self.context.custom_modifier_parser, cursor, self.context, errors=(Exception,)
            )
            if custom.ok:
                return BuiltinModifier("_customRegistryModifier", custom.value)
            if isinstance(custom.error, ModifierParseError):
                if name in DEPRECATIONS:
                    raise ModifierParseError(
                        DeprecatedModifier(name, DEPRECATIONS[name]), metadata
                    ) from custom.error
                raise custom.error
            raise builtin.error from custom.error

        def parse_text(self, text: str) -> BuiltinModifier:
            """Parse exactly one call from stylesheet text."""
            cursor = TokenCursor.from_text(text)
            modifier = self.parse(cursor)
            if not cursor.at_end:
                raise cursor.error(f"Unexpected {cursor.peek().describe()} after modifier")
            return modifier

        def parse_list(self, text: str) -> list[BuiltinModifier]:
            """Parse a ``[call, call, ...]`` list from stylesheet text."""
            cursor = TokenCursor.from_text(text)
            cursor.expect(TokenKind.LBRACKET, "a modifier list")
            modifiers = []
            while not cursor.at(TokenKind.RBRACKET):
                modifiers.append(self.parse(cursor))
                if not cursor.at(TokenKind.COMMA):
                    break
                cursor.advance()
            cursor.expect(TokenKind.RBRACKET)
            if not cursor.at_end:
                raise StylesheetParseError(
                    f"Unexpected {cursor.peek().describe()} after modifier list",
                    cursor.peek().line,
                    cursor.peek().column,
                )
            return modifiers
''').strip()


class CodeEmitter:
    """
    Renders a catalog as a Python module.

    Args:
        catalog: The catalog to render
        config: Generator tables (chunk size, text and image fallbacks)
        command: Command line recorded in the header
    """

    def __init__(self, catalog: ir.Catalog, config: GeneratorConfig, command: str = "modgen"):
        self.catalog = catalog
        self.config = config
        self.command = command

    def header(self) -> str:
        imports = "".join(f"    {name},\n" for name in RUNTIME_IMPORTS)
        return "\n".join(
            [
                f"# Generated by `{self.command}`. Do not edit.",
                "# fmt: off",
                "",
                "from dataclasses import dataclass",
                "from enum import StrEnum",
                "from typing import Any, Never",
                "",
                f"from modgen.runtime import (\n{imports})",
            ]
        )

    def emit(self) -> str:
        """Return the complete module source."""
        names = self.catalog.modifier_names
        chunks, chunk_count = generate_chunks(names, self.config.chunk_size)
        logger.info(
            "Emitting %d modifiers in %d chunks, %d enums",
            len(names),
            chunk_count,
            len(self.catalog.enums),
        )

        blocks = [self.header()]
        blocks.extend(generate_modifier(m) for m in self.catalog.modifiers)
        if chunks:
            blocks.append(chunks)
        blocks.append(generate_tables(self.catalog, self.config, chunk_count))
        blocks.append(generate_enums(self.catalog.enums))
        blocks.append(DISPATCHER)
        return "\n\n\n".join(blocks) + "\n"


def emit_code(catalog: ir.Catalog, config: GeneratorConfig, command: str = "modgen") -> str:
    return CodeEmitter(catalog, config, command).emit()
