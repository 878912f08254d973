"""
Error types for modgen interface parsing, configuration, and emission.

Every error the generator raises for bad input derives from ``ModgenError``;
the CLI prints it and exits with status 1. Parse errors carry an
``ErrorContext`` pointing into the interface text:

    Sample.swiftinterface:2:20: Expected a type, found ')'
       1 | extension View {
       2 |   public func fade(amount: ) -> some View
         |                            ^
"""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        file: Interface file the error was found in
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Lines surrounding ``line``, if the source text was available
        first_line: Line number of the first snippet line
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None
    first_line: int = 1

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def render_snippet(self) -> list[str]:
        if not self.snippet:
            return []
        rendered = []
        for number, text in enumerate(self.snippet.split("\n"), start=self.first_line):
            rendered.append(f"{number:4d} | {text}")
            if number == self.line:
                rendered.append("     | " + " " * (self.column - 1) + "^")
        return rendered


class ModgenError(Exception):
    """Base exception for all generator errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self.describe())

    def describe(self) -> str:
        if self.context is None:
            return self.message
        return "\n".join(
            [f"{self.context.location}: {self.message}", *self.context.render_snippet()]
        )


class ParseError(ModgenError):
    """Interface text (or an auxiliary source file) could not be parsed."""


class ConfigError(ModgenError):
    """The generator configuration file is unreadable or invalid."""


class EmitError(ModgenError):
    """
    The catalog could not be emitted.

    Raised for an unreadable ``--parseable-types`` directory in schema mode.
    """


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
    text: str | None = None,
    radius: int = 2,
) -> ParseError:
    """
    Build a ``ParseError`` located at ``line``/``column`` of ``file``.

    When the source ``text`` is given, up to ``radius`` lines either side of
    the error line are attached as a snippet.
    """
    if text is None:
        return ParseError(message, ErrorContext(file=file, line=line, column=column))

    lines = text.split("\n")
    first = max(1, line - radius)
    last = min(len(lines), line + radius)
    context = ErrorContext(
        file=file,
        line=line,
        column=column,
        snippet="\n".join(lines[first - 1 : last]),
        first_line=first,
    )
    return ParseError(message, context)
