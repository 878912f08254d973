"""Tests for generated enum parsers and their availability guards."""

import pytest

from modgen.core import ir
from modgen.emit.enums import class_name, generate_enum, generate_enums, member_name
from modgen.runtime import (
    BuildTarget,
    TokenCursor,
    UnavailableError,
    UnregisteredTypeError,
    default_registry,
)

ENUM_HEADER = """\
from enum import StrEnum

from modgen.runtime import (
    BUILD_TARGET,
    TypeRegistry,
    UnavailableError,
    ValueParser,
    implicit_static_member,
)


"""


@pytest.fixture
def load_enums(catalog, load_module, monkeypatch):
    """Load the sample enums as if imported on *platform* at *version*."""

    def load(platform: str, version: tuple[int, ...]):
        monkeypatch.setattr("modgen.runtime.BUILD_TARGET", BuildTarget(platform, version))
        module = load_module(ENUM_HEADER + generate_enums(catalog.enums), "generated_enums")
        registry = default_registry()
        module.register_types(registry)
        return module, registry

    return load


def parse(registry, spelling: str, text: str):
    return registry.resolve(spelling)(TokenCursor.from_text(text), None)


class TestNames:
    def test_class_name(self):
        assert class_name("KeyPress.Phases") == "KeyPress_Phases"

    @pytest.mark.parametrize(
        "case,expected",
        [("normal", "normal"), ("class", "class_"), ("name", "name_"), ("_hidden", "case_hidden")],
    )
    def test_member_name(self, case, expected):
        assert member_name(case) == expected


class TestGeneratedSource:
    def test_unguarded_type(self, catalog):
        blend = next(e for e in catalog.enums if e.name == "BlendMode")

        source = generate_enum(blend)

        assert source.startswith("class BlendMode(StrEnum):")
        assert "_BlendMode_normal" not in source
        assert "def _BlendMode_plusDarker():" in source

    def test_guarded_type(self, catalog):
        mode = next(e for e in catalog.enums if e.name == "ScrollDismissesKeyboardMode")

        source = generate_enum(mode)

        assert source.startswith('if BUILD_TARGET.platform in ("iOS", "macOS"):')
        assert '{"iOS": (17,)}' in source

    def test_case_with_type_constraint_is_unguarded(self, catalog):
        mode = next(e for e in catalog.enums if e.name == "ScrollDismissesKeyboardMode")

        source = generate_enum(mode)

        assert "_ScrollDismissesKeyboardMode_immediately" not in source
        assert '"immediately": lambda: ScrollDismissesKeyboardMode.immediately,' in source
        assert source.count("BUILD_TARGET.is_available") == 1

    def test_keyword_case(self):
        enum = ir.EnumType(name="Weight", cases=[ir.EnumCase(name="class")])

        source = generate_enum(enum)

        assert 'class_ = "class"' in source
        assert '"class": lambda: Weight.class_,' in source

    def test_empty_enum(self):
        source = generate_enum(ir.EnumType(name="Nothing"))

        assert "class Nothing(StrEnum):\n    pass" in source

    def test_deterministic(self, catalog):
        assert generate_enums(catalog.enums) == generate_enums(list(reversed(catalog.enums)))


class TestLatestIOS:
    def test_cases_parse(self, load_enums):
        module, registry = load_enums("iOS", (17,))

        assert parse(registry, "BlendMode", ".multiply") is module.BlendMode.multiply
        assert parse(registry, "BlendMode", ":plusDarker") == "plusDarker"
        assert parse(registry, "ScrollDismissesKeyboardMode", ":interactively") == "interactively"

    def test_option_set_members(self, load_enums):
        module, registry = load_enums("iOS", (17,))

        assert parse(registry, "EventModifiers", ".capsLock") is module.EventModifiers.capsLock
        assert parse(registry, "KeyPress.Phases", ":down") is module.KeyPress_Phases.down

    def test_optional_and_list_of_enum(self, load_enums):
        module, registry = load_enums("iOS", (17,))

        assert parse(registry, "BlendMode?", "nil") is None
        assert parse(registry, "[KeyPress.Phases]", "[:down, :up]") == (
            module.KeyPress_Phases.down,
            module.KeyPress_Phases.up,
        )


class TestOlderIOS:
    def test_newer_case_unavailable(self, load_enums):
        _, registry = load_enums("iOS", (16, 4))

        with pytest.raises(UnavailableError, match="'plusDarker' is not available in this OS version"):
            parse(registry, "BlendMode", ":plusDarker")

    def test_older_cases_still_parse(self, load_enums):
        _, registry = load_enums("iOS", (16,))

        assert parse(registry, "BlendMode", ":normal") == "normal"
        assert parse(registry, "ScrollDismissesKeyboardMode", ":automatic") == "automatic"
        assert parse(registry, "ScrollDismissesKeyboardMode", ":immediately") == "immediately"

    def test_guarded_case_on_older_version(self, load_enums):
        _, registry = load_enums("iOS", (16,))

        with pytest.raises(UnavailableError, match="in this OS version"):
            parse(registry, "ScrollDismissesKeyboardMode", ":interactively")


class TestOtherPlatforms:
    def test_case_for_other_platform(self, load_enums):
        _, registry = load_enums("macOS", (14,))

        with pytest.raises(UnavailableError, match="'interactively' is not available on this OS"):
            parse(registry, "ScrollDismissesKeyboardMode", ":interactively")

    def test_macos_version_check(self, load_enums):
        _, registry = load_enums("macOS", (13,))

        with pytest.raises(UnavailableError, match="in this OS version"):
            parse(registry, "BlendMode", ":plusDarker")

    def test_type_missing_on_unsupported_platform(self, load_enums):
        module, registry = load_enums("watchOS", (10,))

        assert not hasattr(module, "ScrollDismissesKeyboardMode")
        assert "ScrollDismissesKeyboardMode" not in module.ENUM_PARSERS
        with pytest.raises(UnregisteredTypeError):
            registry.resolve("ScrollDismissesKeyboardMode")

    def test_case_missing_on_unsupported_platform(self, load_enums):
        _, registry = load_enums("watchOS", (10,))

        assert parse(registry, "BlendMode", ":normal") == "normal"
        with pytest.raises(UnavailableError, match="not available on this OS"):
            parse(registry, "BlendMode", ":plusDarker")
