"""
Interface parser package.

A recursive descent parser for the declaration subset of Swift interface
files that the generator reads. The parser is built from mixins that
separate parsing logic by construct:

- AttributeParserMixin: ``@attr`` runs and ``@available`` decoding
- TypeParserMixin: type references, generic parameters, ``where`` clauses
- DeclarationParserMixin: imports, extensions, nominal types, functions, enum cases

Usage:
    from modgen.core.interface_parser import parse_interface

    source = parse_interface(text, Path("SwiftUI.swiftinterface"))
"""

from pathlib import Path

from .. import ir
from ..lexer import tokenize
from .attributes import AttributeParserMixin
from .base import BaseParser
from .declarations import DeclarationParserMixin
from .types import TypeParserMixin


class Parser(
    BaseParser,
    AttributeParserMixin,
    TypeParserMixin,
    DeclarationParserMixin,
):
    """Complete interface parser."""


def parse_interface(text: str, file: Path) -> ir.SourceFile:
    """
    Parse interface text into a declaration tree.

    Args:
        text: Interface source text
        file: Source file path (for error reporting)

    Returns:
        The parsed SourceFile

    Raises:
        ParseError: If the text cannot be tokenized or parsed
    """
    tokens = tokenize(text, file)
    parser = Parser(tokens, file, text)
    return parser.parse_source_file()


__all__ = ["Parser", "parse_interface"]
