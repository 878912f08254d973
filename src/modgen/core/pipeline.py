"""
Catalog assembly.

The catalog is built completely before anything is emitted:

    interface text -> SourceFile -> candidates -> validate -> map -> dedup
                   -> ambiguity -> enums (+ parseable scan) -> Catalog
"""

import logging
from pathlib import Path

from . import ir
from .catalog_builder import INTERNAL_PREFIX, collect_modifiers
from .config import GeneratorConfig
from .dedup import deduplicate, resolve_ambiguity
from .enum_extractor import extract_required_enums, scan_parseable_types
from .errors import ParseError
from .interface_parser import parse_interface
from .type_mapping import map_signature
from .validator import is_valid

logger = logging.getLogger(__name__)


def build_modifiers(
    overloads: dict[str, list[ir.FunctionDecl]], config: GeneratorConfig
) -> tuple[list[ir.Modifier], list[str]]:
    """
    Validate, map and deduplicate every candidate, in sorted name order.

    Internal (underscore) names, denylisted names and names with no valid
    overload are skipped.

    Returns:
        (retained modifiers, skipped names)
    """
    modifiers: list[ir.Modifier] = []
    skipped: list[str] = []

    for name in sorted(overloads):
        functions = overloads[name]
        valid = [f for f in functions if is_valid(f)]
        if name.startswith(INTERNAL_PREFIX) or name in config.denylist or not valid:
            skipped.append(name)
            continue

        signatures = deduplicate([map_signature(f, config) for f in valid])
        signatures = resolve_ambiguity(name, signatures, config.prefer_view_reference)
        logger.debug(
            "%s: %d overloads, %d valid, %d signatures",
            name,
            len(functions),
            len(valid),
            len(signatures),
        )
        modifiers.append(ir.Modifier(name=name, signatures=signatures))

    return modifiers, skipped


def build_catalog(
    source: ir.SourceFile,
    config: GeneratorConfig,
    parseable_types: Path | None = None,
) -> ir.Catalog:
    """
    Build the immutable catalog for one run.

    Args:
        source: Parsed interface
        config: Generator tables
        parseable_types: Optional directory for the secondary enum scan

    Returns:
        Catalog
    """
    candidates = collect_modifiers(source, config)
    modifiers, skipped = build_modifiers(candidates.overloads, config)
    enums = extract_required_enums(source, config)

    parseable_enums: dict[str, list[str]] = {}
    referenced_types: list[str] = []
    if parseable_types is not None:
        parseable_enums, referenced_types = scan_parseable_types(parseable_types, config)

    deprecations = {
        name: message
        for name, message in sorted(candidates.deprecations.items())
        if not name.startswith(INTERNAL_PREFIX)
    }

    logger.info(
        "Catalog: %d modifiers, %d skipped, %d enums, %d deprecations",
        len(modifiers),
        len(skipped),
        len(enums),
        len(deprecations),
    )
    return ir.Catalog(
        modifiers=modifiers,
        enums=enums,
        deprecations=deprecations,
        skipped=skipped,
        extra_modifier_types=list(config.extra_modifier_types),
        parseable_enums=parseable_enums,
        referenced_types=referenced_types,
    )


def load_catalog(
    interface: Path, config: GeneratorConfig, parseable_types: Path | None = None
) -> ir.Catalog:
    """
    Read and parse an interface file, then build its catalog.

    Raises:
        ParseError: If the file cannot be read or parsed
    """
    try:
        text = interface.read_text(encoding="utf-8")
    except OSError as e:
        raise ParseError(f"Cannot read interface file {interface}: {e}") from e
    source = parse_interface(text, interface)
    return build_catalog(source, config, parseable_types)
