"""Tests for overload validation."""

from pathlib import Path

import pytest

from modgen.core import ir
from modgen.core.interface_parser import parse_interface
from modgen.core.validator import invalid_reason, is_valid


def parse_function(signature: str) -> ir.FunctionDecl:
    source = parse_interface(
        f"extension SwiftUI.View {{\n  public func {signature}\n}}\n", Path("test.swiftinterface")
    )
    return source.declarations[0].functions[0]


class TestValidOverloads:
    @pytest.mark.parametrize(
        "signature",
        [
            "fade(amount: CoreFoundation.CGFloat) -> some SwiftUI.View",
            "onTapGesture(count: Swift.Int = 1, perform action: @escaping () -> Swift.Void) -> some SwiftUI.View",
            "onAppear(perform action: (() -> ())? = nil) -> some SwiftUI.View",
            "hover(perform action: @escaping (Swift.Bool) -> Swift.Void) -> some SwiftUI.View",
            "overlay<V>(@SwiftUI.ViewBuilder content: () -> V) -> some SwiftUI.View where V : SwiftUI.View",
            "sheet<C>(isPresented: SwiftUI.Binding<Swift.Bool>, @SwiftUI.ViewBuilder content: @escaping () -> C) -> some SwiftUI.View",
        ],
    )
    def test_accepted(self, signature):
        assert is_valid(parse_function(signature))


class TestInvalidOverloads:
    def test_builder_with_arguments(self):
        function = parse_function(
            "badBuilder<V>(@SwiftUI.ViewBuilder content: @escaping (Swift.Int) -> V) "
            "-> some SwiftUI.View"
        )

        assert "takes arguments" in invalid_reason(function)

    def test_closure_returning_value(self):
        function = parse_function(
            "transform(_ body: @escaping (Swift.Int) -> Swift.Int) -> some SwiftUI.View"
        )

        assert "returns Swift.Int" in invalid_reason(function)

    def test_focus_state(self):
        function = parse_function(
            "focused(_ binding: SwiftUI.FocusState<Swift.Bool>.Binding) -> some SwiftUI.View"
        )

        assert "FocusState" in invalid_reason(function)

    def test_focus_state_nested_in_generic(self):
        function = parse_function(
            "focused<V>(_ binding: SwiftUI.FocusState<V?>.Binding, equals value: V) "
            "-> some SwiftUI.View"
        )

        assert not is_valid(function)

    def test_invalid_drop_is_logged(self, caplog):
        function = parse_function(
            "transform(_ body: @escaping (Swift.Int) -> Swift.Int) -> some SwiftUI.View"
        )

        with caplog.at_level("DEBUG", logger="modgen.core.validator"):
            assert not is_valid(function)

        assert "Dropping transform(_:)" in caplog.text
