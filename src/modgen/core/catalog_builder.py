"""
Collect modifier candidates from a parsed interface.

A modifier is any non-static function declared in an extension of the view
protocol. Overloads are grouped by name in first-seen order. Deprecated
overloads contribute no signatures; they feed the deprecation table instead.
"""

import logging
from dataclasses import dataclass, field

from . import ir
from .config import GeneratorConfig

logger = logging.getLogger(__name__)

INTERNAL_PREFIX = "_"


@dataclass
class ModifierCandidates:
    """
    Pre-validation view of the interface.

    Attributes:
        overloads: Modifier name -> overloads, in declaration order
        deprecations: Modifier name -> human-readable deprecation message
    """

    overloads: dict[str, list[ir.FunctionDecl]] = field(default_factory=dict)
    deprecations: dict[str, str] = field(default_factory=dict)


def deprecation_message(function: ir.FunctionDecl) -> str:
    availability = function.availability
    if availability.message:
        return availability.message
    if availability.renamed:
        return f"renamed to `{availability.renamed}`"
    return f"`{function.name}` is deprecated"


def is_view_extension(decl: ir.TypeDecl, config: GeneratorConfig) -> bool:
    if not decl.is_extension:
        return False
    parts = decl.name.split(".")
    if len(parts) == 2 and parts[0] in config.module_prefixes:
        parts = parts[1:]
    return len(parts) == 1 and parts[0] in config.view_protocols


def collect_modifiers(source: ir.SourceFile, config: GeneratorConfig) -> ModifierCandidates:
    """
    Walk the declaration tree and group modifier overloads by name.

    Internal names (leading underscore) are kept here so that the pipeline
    reports them as skipped; hand-written host types for them come from
    ``config.extra_modifier_types``.
    """
    candidates = ModifierCandidates()

    for decl in source.declarations:
        if not is_view_extension(decl, config):
            continue
        for function in decl.functions:
            if function.is_static:
                continue
            availability = function.availability.merge(decl.availability)
            if "*" in availability.unavailable:
                logger.debug("Skipping unavailable overload of %s", function.name)
                continue

            function = function.model_copy(update={"availability": availability})
            if availability.deprecated:
                candidates.deprecations.setdefault(function.name, deprecation_message(function))
                continue

            candidates.overloads.setdefault(function.name, []).append(function)

    logger.info(
        "Collected %d modifier names (%d deprecated)",
        len(candidates.overloads),
        len(candidates.deprecations),
    )
    return candidates
