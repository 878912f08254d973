"""
Enumerated value type extraction.

Two independent passes:

a) over the interface, collecting the types named in
   ``config.required_types`` with per-case availability;
b) (schema mode) over a directory of auxiliary sources, collecting enums
   marked parseable and the types they reference.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from . import ir
from .config import GeneratorConfig
from .errors import EmitError
from .interface_parser import parse_interface

logger = logging.getLogger(__name__)

PARSEABLE_ATTRIBUTES = ("ParseableExpression", "Parseable")
PARSEABLE_PROTOCOL = "ParseableModifierValue"


def _unqualified(name: str, prefixes: tuple[str, ...]) -> str:
    parts = name.split(".")
    if len(parts) > 1 and parts[0] in prefixes:
        parts = parts[1:]
    return ".".join(parts)


def _walk(
    decls: list[ir.TypeDecl],
    prefixes: tuple[str, ...],
    scope: str = "",
    inherited: ir.AvailabilityConstraint = ir.ALWAYS_AVAILABLE,
) -> Iterator[tuple[str, ir.TypeDecl, ir.AvailabilityConstraint]]:
    """
    Yield ``(qualified name, declaration, availability)`` for every nominal
    type, with module qualifiers stripped and extension scopes applied.
    """
    for decl in decls:
        availability = decl.availability.merge(inherited)
        if decl.is_extension:
            yield from _walk(decl.nested, prefixes, _unqualified(decl.name, prefixes), availability)
            continue
        name = f"{scope}.{decl.name}" if scope else decl.name
        yield name, decl, availability
        yield from _walk(decl.nested, prefixes, name, availability)


def _is_self_typed(prop: ir.PropertyDecl, type_name: str) -> bool:
    path = ir.name_path(prop.type)
    if path is None:
        return False
    return path[-1] in ("Self", type_name.rsplit(".", 1)[-1])


def _cases_of(decl: ir.TypeDecl, name: str) -> list[ir.EnumCase]:
    """
    Cases of an enum, or the static ``Self``-typed members of a struct
    (option sets and open enumerations are declared that way).
    """
    if decl.kind == "enum":
        return [ir.EnumCase(name=c.name, availability=c.availability) for c in decl.cases]
    return [
        ir.EnumCase(name=p.name, availability=p.availability)
        for p in decl.properties
        if p.is_static and _is_self_typed(p, name)
    ]


def extract_required_enums(source: ir.SourceFile, config: GeneratorConfig) -> list[ir.EnumType]:
    """
    Collect the required enum types found in the interface, sorted by name.

    Extensions that add cases to an already-seen type extend its case list.
    """
    required = set(config.required_types)
    found: dict[str, ir.EnumType] = {}

    for name, decl, availability in _walk(source.declarations, config.module_prefixes):
        if name not in required or decl.kind not in ("enum", "struct"):
            continue
        cases = _cases_of(decl, name)
        if name in found:
            previous = found[name]
            known = {c.name for c in previous.cases}
            cases = [*previous.cases, *(c for c in cases if c.name not in known)]
            availability = previous.availability
        found[name] = ir.EnumType(name=name, cases=cases, availability=availability)
        logger.debug("Found required type %s with %d cases", name, len(cases))

    missing = sorted(required - set(found))
    if missing:
        logger.warning("Required types not found in interface: %s", ", ".join(missing))

    return [found[name] for name in sorted(found)]


def _is_parseable(decl: ir.TypeDecl) -> bool:
    if any(decl.has_attribute(a) for a in PARSEABLE_ATTRIBUTES):
        return True
    return any((ir.name_path(t) or [""])[-1] == PARSEABLE_PROTOCOL for t in decl.inherits)


def _referenced_names(type_ref: ir.TypeRef, prefixes: tuple[str, ...]) -> Iterator[str]:
    if isinstance(type_ref, ir.OptionalType):
        yield from _referenced_names(type_ref.wrapped, prefixes)
    elif isinstance(type_ref, ir.ArrayType):
        yield from _referenced_names(type_ref.element, prefixes)
    else:
        path = ir.name_path(type_ref)
        if path is not None:
            yield _unqualified(".".join(path), prefixes)


def scan_parseable_types(
    directory: Path, config: GeneratorConfig
) -> tuple[dict[str, list[str]], list[str]]:
    """
    Scan ``*.swift`` files under *directory* in sorted relative-path order.

    Returns:
        (enum name -> case names, sorted referenced type names)

    Raises:
        EmitError: If the directory or a file cannot be read
        ParseError: If a file cannot be parsed
    """
    if not directory.is_dir():
        raise EmitError(f"Parseable types directory not found: {directory}")

    enums: dict[str, list[str]] = {}
    types: set[str] = set()

    paths = sorted(directory.rglob("*.swift"), key=lambda p: p.relative_to(directory).as_posix())
    for path in paths:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise EmitError(f"Cannot read {path}: {e}") from e
        source = parse_interface(text, path)
        logger.debug("Scanning %s", path)

        for decl in source.declarations:
            if decl.is_extension and _is_parseable(decl):
                types.add(_unqualified(decl.name, config.module_prefixes))

        for name, decl, _ in _walk(source.declarations, config.module_prefixes):
            if not _is_parseable(decl):
                continue
            if decl.kind == "enum":
                enums[name] = [c.name for c in decl.cases]
                for case in decl.cases:
                    for associated in case.associated_types:
                        types.update(_referenced_names(associated, config.module_prefixes))
            else:
                types.add(name)

    logger.info("Found %d parseable enums and %d referenced types", len(enums), len(types))
    return enums, sorted(types)
