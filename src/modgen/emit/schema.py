"""
Schema-mode emitter.

Renders the catalog as a deterministic JSON document for developer tooling:

    {
      "enums": {"BlendMode": ["normal", "multiply"]},
      "modifiers": {
        "fade": [[{"firstName": "amount", "secondName": null, "type": "Double"}]]
      },
      "types": ["ShapeStyle"]
    }
"""

import json
from typing import Any

from modgen.core import ir
from modgen.core.config import ExtraParameter, GeneratorConfig


def _parameter(first_name: str, second_name: str | None, type_name: str) -> dict[str, Any]:
    return {"firstName": first_name, "secondName": second_name, "type": type_name}


def _signature(signature: ir.Signature) -> list[dict[str, Any]]:
    return [_parameter(p.first_name, p.second_name, p.type_name) for p in signature.parameters]


def _extra_signature(parameters: list[ExtraParameter]) -> list[dict[str, Any]]:
    return [_parameter(p.first_name, p.second_name, p.type) for p in parameters]


def build_schema(catalog: ir.Catalog, config: GeneratorConfig) -> dict[str, Any]:
    """
    Build the schema document.

    Hand-written modifiers from ``config.extra_schemas`` are added alongside
    the generated ones. Enums from the interface take precedence over
    same-named enums found by the parseable-types scan.
    """
    modifiers: dict[str, Any] = {
        modifier.name: [_signature(s) for s in modifier.signatures]
        for modifier in catalog.modifiers
    }
    for name, signatures in config.extra_schemas.items():
        modifiers[name] = [_extra_signature(s) for s in signatures]

    enums: dict[str, list[str]] = dict(catalog.parseable_enums)
    for enum in catalog.enums:
        enums[enum.name] = [case.name for case in enum.cases]

    return {
        "modifiers": modifiers,
        "enums": enums,
        "types": sorted(set(catalog.referenced_types)),
    }


def emit_schema(catalog: ir.Catalog, config: GeneratorConfig) -> str:
    """Serialize the schema with sorted keys; identical input gives identical bytes."""
    return json.dumps(build_schema(catalog, config), indent=2, sort_keys=True) + "\n"
