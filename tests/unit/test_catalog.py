"""Tests for modifier collection and catalog assembly."""

from dataclasses import replace
from pathlib import Path

import pytest

from modgen.core import ir
from modgen.core.catalog_builder import collect_modifiers, deprecation_message, is_view_extension
from modgen.core.errors import ParseError
from modgen.core.interface_parser import parse_interface
from modgen.core.pipeline import build_catalog, load_catalog

RETAINED = [
    "blendMode",
    "blink",
    "fade",
    "glow",
    "hover",
    "navigationTitle",
    "onTapGesture",
    "overlay",
    "scrollDismissesKeyboard",
    "sheet",
    "shimmer",
    "toolbar",
]


def types_of(catalog: ir.Catalog, name: str) -> list[list[str]]:
    modifier = catalog.modifier(name)
    assert modifier is not None
    return [[p.type_name for p in s.parameters] for s in modifier.signatures]


class TestCollectModifiers:
    def test_static_functions_skipped(self, sample_source, config):
        candidates = collect_modifiers(sample_source, config)

        assert "_makeView" not in candidates.overloads

    def test_internal_functions_kept_for_reporting(self, sample_source, config):
        candidates = collect_modifiers(sample_source, config)

        assert len(candidates.overloads["_internalModifier"]) == 1

    def test_unavailable_overload_dropped(self, sample_source, config):
        candidates = collect_modifiers(sample_source, config)

        assert "gone" not in candidates.overloads
        assert "gone" not in candidates.deprecations

    def test_text_extension_ignored(self, sample_source, config):
        candidates = collect_modifiers(sample_source, config)

        # Only the View extension's `bold` is a candidate
        assert len(candidates.overloads["bold"]) == 1

    def test_extension_availability_merged(self, sample_source, config):
        candidates = collect_modifiers(sample_source, config)

        [function] = candidates.overloads["scrollDismissesKeyboard"]
        assert function.availability.available_platforms() == ["iOS", "macOS"]
        assert "watchOS" in function.availability.unavailable

    def test_first_conditional_branch_kept(self, sample_source, config):
        candidates = collect_modifiers(sample_source, config)

        [shimmer] = candidates.overloads["shimmer"]
        assert str(shimmer.parameters[0].type) == "Swift.Double"

    def test_deprecated_overloads_feed_deprecations(self, sample_source, config):
        candidates = collect_modifiers(sample_source, config)

        assert "dim" not in candidates.overloads
        assert candidates.deprecations == {
            "dim": "Use fade(amount:) instead",
            "fadeOut": "renamed to `fade(amount:)`",
        }

    def test_first_deprecation_message_wins(self, config):
        source = parse_interface(
            """
extension View {
  @available(*, deprecated, message: "first")
  public func dim(_ amount: Double) -> some View
  @available(*, deprecated, message: "second")
  public func dim(amount: Double) -> some View
}
""",
            Path("test.swiftinterface"),
        )

        candidates = collect_modifiers(source, config)

        assert candidates.deprecations == {"dim": "first"}

    def test_non_view_extension_ignored(self, config):
        source = parse_interface(
            "extension SwiftUI.Scene {\n  public func windowStyle(_ s: Int) -> some Scene\n}\n",
            Path("test.swiftinterface"),
        )

        assert collect_modifiers(source, config).overloads == {}


class TestViewExtension:
    @pytest.mark.parametrize(
        "name,expected",
        [("View", True), ("SwiftUI.View", True), ("Scene", False), ("Other.View", False)],
    )
    def test_names(self, config, name, expected):
        decl = ir.TypeDecl(kind="extension", name=name)

        assert is_view_extension(decl, config) is expected

    def test_nominal_type_is_not_extension(self, config):
        assert not is_view_extension(ir.TypeDecl(kind="struct", name="View"), config)


class TestDeprecationMessage:
    def test_default_message(self):
        function = ir.FunctionDecl(
            name="old", availability=ir.AvailabilityConstraint(deprecated=True)
        )

        assert deprecation_message(function) == "`old` is deprecated"


class TestBuildCatalog:
    def test_retained_modifiers_sorted(self, catalog):
        assert catalog.modifier_names == RETAINED

    def test_skipped(self, catalog):
        assert catalog.skipped == [
            "_internalModifier",
            "badBuilder",
            "bold",
            "environment",
            "focused",
            "transform",
        ]

    def test_internal_modifier_not_retained(self, catalog):
        assert catalog.modifier("_internalModifier") is None
        assert "_internalModifier" not in catalog.deprecations

    def test_deprecations(self, catalog):
        assert list(catalog.deprecations) == ["dim", "fadeOut"]

    def test_duplicate_overloads_collapse(self, catalog):
        assert types_of(catalog, "fade") == [["CGFloat"]]

    def test_invalid_overload_dropped_valid_kept(self, catalog):
        assert types_of(catalog, "hover") == [["Event"]]

    def test_toolbar_keeps_view_reference(self, catalog):
        assert types_of(catalog, "toolbar") == [["ViewReference"]]

    def test_mapped_signatures(self, catalog):
        assert types_of(catalog, "sheet") == [["ChangeTracked<Bool>", "Event?", "ViewReference"]]
        assert types_of(catalog, "overlay") == [["ViewReference", "Alignment"]]
        assert types_of(catalog, "navigationTitle") == [["TextReference"]]
        assert types_of(catalog, "glow") == [["Color?", "CGFloat"]]

    def test_context_requirement(self, catalog):
        assert catalog.modifier("overlay").requires_context
        assert not catalog.modifier("fade").requires_context

    def test_enums(self, catalog):
        assert [e.name for e in catalog.enums] == [
            "BlendMode",
            "EventModifiers",
            "KeyPress.Phases",
            "ScrollDismissesKeyboardMode",
        ]

    def test_no_parseable_scan_by_default(self, catalog):
        assert catalog.parseable_enums == {}
        assert catalog.referenced_types == []

    def test_extra_types_from_config(self, sample_source, config):
        config = replace(config, extra_modifier_types=("_MaskModifier<R>",))

        catalog = build_catalog(sample_source, config)

        assert catalog.extra_modifier_types == ["_MaskModifier<R>"]

    def test_catalog_is_immutable(self, catalog):
        with pytest.raises(Exception):
            catalog.skipped = []


class TestLoadCatalog:
    def test_loads_file(self, sample_interface, config):
        assert load_catalog(sample_interface, config).modifier_names == RETAINED

    def test_missing_file(self, tmp_path, config):
        with pytest.raises(ParseError, match="Cannot read interface file"):
            load_catalog(tmp_path / "Missing.swiftinterface", config)

    def test_parse_error_has_location(self, tmp_path, config):
        path = tmp_path / "Broken.swiftinterface"
        path.write_text("extension View {\n  public func fade(amount: ) -> some View\n}\n")

        with pytest.raises(ParseError) as exc_info:
            load_catalog(path, config)

        assert exc_info.value.context is not None
        assert exc_info.value.context.line == 2
