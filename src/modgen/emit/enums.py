"""
Enumerated-type parser generation.

Each required enum becomes a ``StrEnum`` plus a registered value parser that
accepts ``.case`` or ``:case``. Availability becomes import-time platform
guards and parse-time version checks against ``BUILD_TARGET``:

    if BUILD_TARGET.platform in ("iOS", "macOS"):
        class BlendMode(StrEnum):
            normal = "normal"
            plusDarker = "plusDarker"

        if BUILD_TARGET.platform in ("iOS",):
            def _BlendMode_plusDarker():
                if not BUILD_TARGET.is_available({"iOS": (17,)}):
                    raise UnavailableError("'plusDarker' is not available in this OS version")
                return BlendMode.plusDarker
        else:
            def _BlendMode_plusDarker():
                raise UnavailableError("'plusDarker' is not available on this OS")

        ENUM_PARSERS["BlendMode"] = implicit_static_member({...})
"""

import keyword

from modgen.core import ir

INDENT = "    "

# Names StrEnum reserves for its own attributes
_RESERVED_MEMBERS = frozenset({"name", "value", "mro"})


def class_name(type_name: str) -> str:
    """``KeyPress.Phases`` -> ``KeyPress_Phases``."""
    return type_name.replace(".", "_")


def member_name(case: str) -> str:
    """A Python-safe StrEnum member name for a case."""
    if case.startswith("_"):
        return f"case{case}"
    if keyword.iskeyword(case) or case in _RESERVED_MEMBERS:
        return f"{case}_"
    return case


def _platform_tuple(platforms: list[str]) -> str:
    inner = ", ".join(f'"{p}"' for p in platforms)
    return f"({inner},)" if len(platforms) == 1 else f"({inner})"


def _requirements(availability: ir.AvailabilityConstraint) -> str:
    versions = availability.version_requirements()
    items = []
    for platform in availability.available_platforms():
        version = versions.get(platform)
        if version:
            items.append(f'"{platform}": {_version_literal(version)}')
        else:
            items.append(f'"{platform}": None')
    return "{" + ", ".join(items) + "}"


def _version_literal(version: tuple[int, ...]) -> str:
    parts = list(version)
    while len(parts) > 1 and parts[-1] == 0:
        parts.pop()
    inner = ", ".join(str(p) for p in parts)
    return f"({inner},)" if len(parts) == 1 else f"({inner})"


def constructor_name(enum: ir.EnumType, case: ir.EnumCase) -> str:
    return f"_{class_name(enum.name)}_{case.name}"


def _indent(lines: list[str], depth: int) -> list[str]:
    return [f"{INDENT * depth}{line}" if line else "" for line in lines]


def _case_constructor(enum: ir.EnumType, case: ir.EnumCase) -> list[str]:
    """Module-level platform guard around a version-checked constructor."""
    function = constructor_name(enum, case)
    member = f"{class_name(enum.name)}.{member_name(case.name)}"
    platforms = case.availability.available_platforms()
    return [
        f"if BUILD_TARGET.platform in {_platform_tuple(platforms)}:",
        f"    def {function}():",
        f"        if not BUILD_TARGET.is_available({_requirements(case.availability)}):",
        "            raise UnavailableError(",
        f"                \"'{case.name}' is not available in this OS version\"",
        "            )",
        f"        return {member}",
        "else:",
        f"    def {function}():",
        f"        raise UnavailableError(\"'{case.name}' is not available on this OS\")",
    ]


def generate_enum(enum: ir.EnumType) -> str:
    """Generate the class, case constructors and parser registration of one enum."""
    name = class_name(enum.name)
    body: list[str] = [f"class {name}(StrEnum):"]
    if enum.cases:
        for case in enum.cases:
            body.append(f'{INDENT}{member_name(case.name)} = "{case.name}"')
    else:
        body.append(f"{INDENT}pass")

    members: list[str] = []
    for case in enum.cases:
        if enum.case_needs_guard(case):
            body.append("")
            body.extend(_case_constructor(enum, case))
            members.append(f'{INDENT}"{case.name}": {constructor_name(enum, case)},')
        else:
            members.append(f'{INDENT}"{case.name}": lambda: {name}.{member_name(case.name)},')

    body.append("")
    body.append(f'ENUM_PARSERS["{enum.name}"] = implicit_static_member({{')
    body.extend(members)
    body.append("})")

    platforms = enum.availability.available_platforms()
    if not platforms:
        return "\n".join(body)
    guarded = [f"if BUILD_TARGET.platform in {_platform_tuple(platforms)}:"]
    guarded.extend(_indent(body, 1))
    return "\n".join(guarded)


def generate_enums(enums: list[ir.EnumType]) -> str:
    """Generate every enum block followed by the ``register_types`` hook."""
    blocks = ["ENUM_PARSERS: dict[str, ValueParser] = {}"]
    for enum in sorted(enums, key=lambda e: e.name):
        blocks.append(generate_enum(enum))
    blocks.append(
        "\n".join(
            [
                "def register_types(registry: TypeRegistry) -> None:",
                '    """Register a parser for every enum available on this build target."""',
                "    for name, parser in ENUM_PARSERS.items():",
                "        registry.register(name, parser)",
            ]
        )
    )
    return "\n\n\n".join(blocks)
