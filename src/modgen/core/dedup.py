"""
Signature deduplication and builder ambiguity resolution.
"""

import logging

from . import ir

logger = logging.getLogger(__name__)

VIEW_REFERENCE = "ViewReference"
TOOLBAR_CONTENT_REFERENCE = "ToolbarContentReference"


def deduplicate(signatures: list[ir.Signature]) -> list[ir.Signature]:
    """
    Fold signatures left to right, discarding any that duplicate an earlier one.

    First-seen order wins. Applying the fold to its own output changes nothing.
    """
    result: list[ir.Signature] = []
    for signature in signatures:
        if any(previous.is_duplicate(signature) for previous in result):
            continue
        result.append(signature)
    return result


def _is_reference(type_ref: ir.TypeRef, name: str) -> bool:
    return isinstance(type_ref, ir.IdentifierType) and type_ref.name == name


def _shadowed_by(builder_form: ir.Signature, reference_form: ir.Signature) -> bool:
    """
    True when *reference_form* is *builder_form* with every child-content
    builder parameter replaced by a view reference.
    """
    if len(builder_form.parameters) != len(reference_form.parameters):
        return False
    replaced = False
    for a, b in zip(builder_form.parameters, reference_form.parameters):
        if a.first_name != b.first_name:
            return False
        if _is_reference(a.type, TOOLBAR_CONTENT_REFERENCE) and _is_reference(
            b.type, VIEW_REFERENCE
        ):
            replaced = True
        elif a.type != b.type:
            return False
    return replaced


def resolve_ambiguity(
    name: str, signatures: list[ir.Signature], prefer_view_reference: tuple[str, ...]
) -> list[ir.Signature]:
    """
    Drop child-content builder forms that a view-reference sibling makes unreachable.

    Only applies to modifiers listed in ``prefer_view_reference``.
    """
    if name not in prefer_view_reference:
        return signatures

    kept = []
    for signature in signatures:
        if any(_shadowed_by(signature, other) for other in signatures if other is not signature):
            logger.debug("Dropping %s%s: builder form shadowed by view reference", name, signature)
            continue
        kept.append(signature)
    return kept
