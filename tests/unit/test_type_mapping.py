"""Tests for interface-to-parser type mapping."""

from pathlib import Path

import pytest

from modgen.core import ir
from modgen.core.interface_parser import parse_interface
from modgen.core.type_mapping import builder_kind, map_signature, strip_modules


def parse_function(signature: str) -> ir.FunctionDecl:
    source = parse_interface(
        f"extension SwiftUI.View {{\n  public func {signature}\n}}\n", Path("test.swiftinterface")
    )
    return source.declarations[0].functions[0]


def mapped(signature: str, config) -> list[str]:
    return [p.type_name for p in map_signature(parse_function(signature), config).parameters]


class TestStripModules:
    def test_member_of_module(self):
        function = parse_function("f(_ x: SwiftUI.Font) -> some SwiftUI.View")

        stripped = strip_modules(function.parameters[0].type, ("SwiftUI",))

        assert str(stripped) == "Font"

    def test_nested_member_keeps_outer_type(self):
        function = parse_function("f(_ x: SwiftUI.Image.Scale) -> some SwiftUI.View")

        stripped = strip_modules(function.parameters[0].type, ("SwiftUI",))

        assert str(stripped) == "Image.Scale"

    def test_generic_arguments(self):
        function = parse_function("f(_ x: [Swift.String: SwiftUI.Binding<Swift.Bool>?]) -> Swift.Int")

        stripped = strip_modules(function.parameters[0].type, ("Swift", "SwiftUI"))

        assert str(stripped) == "[String: Binding<Bool>?]"

    def test_unknown_module_kept(self):
        function = parse_function("f(_ x: UIKit.UIColor) -> Swift.Int")

        stripped = strip_modules(function.parameters[0].type, ("SwiftUI",))

        assert str(stripped) == "UIKit.UIColor"


class TestMapping:
    @pytest.mark.parametrize(
        "signature,expected",
        [
            ("f(_ x: CoreFoundation.CGFloat) -> some SwiftUI.View", ["CGFloat"]),
            ("f(_ x: SwiftUI.Color?) -> some SwiftUI.View", ["Color?"]),
            ("f(_ x: SwiftUI.Binding<Swift.Bool>) -> some SwiftUI.View", ["ChangeTracked<Bool>"]),
            ("f(_ x: SwiftUI.Text) -> some SwiftUI.View", ["TextReference"]),
            ("f(_ x: SwiftUI.Text?) -> some SwiftUI.View", ["TextReference?"]),
            ("f(_ x: @escaping () -> Swift.Void) -> some SwiftUI.View", ["Event"]),
            ("f(_ x: (() -> ())?) -> some SwiftUI.View", ["Event?"]),
            ("f(_ x: some SwiftUI.View) -> some SwiftUI.View", ["ViewReference"]),
            ("f(_ x: [SwiftUI.Edge]) -> some SwiftUI.View", ["[Edge]"]),
        ],
    )
    def test_parameter_types(self, config, signature, expected):
        assert mapped(signature, config) == expected

    def test_view_builder(self, config):
        signature = (
            "f<C>(@SwiftUI.ViewBuilder content: () -> C) -> some SwiftUI.View "
            "where C : SwiftUI.View"
        )

        assert mapped(signature, config) == ["ViewReference"]

    def test_toolbar_content_builder(self, config):
        signature = (
            "f<C>(@SwiftUI.ToolbarContentBuilder content: () -> C) -> some SwiftUI.View "
            "where C : SwiftUI.ToolbarContent"
        )

        assert mapped(signature, config) == ["ToolbarContentReference"]

    def test_view_constrained_generic(self, config):
        assert mapped("f<V : SwiftUI.View>(_ v: V) -> some SwiftUI.View", config) == [
            "ViewReference"
        ]

    def test_unconstrained_generic_kept(self, config):
        assert mapped("f<V>(_ v: V) -> some SwiftUI.View", config) == ["V"]

    def test_shape_style_generic_kept(self, config):
        signature = "f<S>(_ s: S) -> some SwiftUI.View where S : SwiftUI.ShapeStyle"

        assert mapped(signature, config) == ["S"]

    def test_labels_and_defaults_carried(self, config):
        function = parse_function(
            "blink(_ enabled: Swift.Bool = true, interval: Swift.Double) -> some SwiftUI.View"
        )

        first, second = map_signature(function, config).parameters

        assert (first.first_name, first.second_name, first.has_default) == ("_", "enabled", True)
        assert (second.first_name, second.second_name, second.has_default) == (
            "interval",
            None,
            False,
        )
        assert not first.is_labeled
        assert second.is_labeled
        assert first.binding_name == "enabled"


class TestBuilderKind:
    def test_attribute_on_parameter(self):
        function = parse_function(
            "f<C>(@SwiftUI.ViewBuilder content: () -> C) -> some SwiftUI.View"
        )

        assert builder_kind(function.parameters[0]) == "ViewBuilder"

    def test_plain_closure(self):
        function = parse_function("f(action: @escaping () -> Swift.Void) -> some SwiftUI.View")

        assert builder_kind(function.parameters[0]) is None


class TestRequiresContext:
    def test_view_reference_requires_context(self, config):
        function = parse_function("f(_ x: some SwiftUI.View) -> some SwiftUI.View")

        assert map_signature(function, config).requires_context

    def test_optional_text_requires_context(self, config):
        function = parse_function("f(_ x: SwiftUI.Text?) -> some SwiftUI.View")

        assert map_signature(function, config).requires_context

    def test_plain_values_do_not(self, config):
        function = parse_function("f(_ x: Swift.Double, y: SwiftUI.Color) -> some SwiftUI.View")

        assert not map_signature(function, config).requires_context
