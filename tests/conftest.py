"""Shared pytest fixtures for modgen tests."""

import sys
import types
from pathlib import Path

import pytest

from modgen.core import ir
from modgen.core.config import GeneratorConfig
from modgen.core.interface_parser import parse_interface
from modgen.core.pipeline import build_catalog
from modgen.emit.code import emit_code
from modgen.runtime import ParseContext, default_registry, parse_atom_string


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_interface(fixtures_dir: Path) -> Path:
    return fixtures_dir / "Sample.swiftinterface"


@pytest.fixture
def parseable_dir(fixtures_dir: Path) -> Path:
    return fixtures_dir / "parseable"


@pytest.fixture
def config() -> GeneratorConfig:
    """A small, self-contained config so tests do not depend on the packaged tables."""
    return GeneratorConfig(
        chunk_size=5,
        view_protocols=("View",),
        module_prefixes=("Swift", "SwiftUI", "CoreFoundation", "CoreGraphics"),
        prefer_view_reference=("toolbar",),
        extra_modifier_types=(),
        required_types=(
            "BlendMode",
            "ScrollDismissesKeyboardMode",
            "EventModifiers",
            "KeyPress.Phases",
            "ControlSize",
        ),
        text_modifiers=("bold", "italic"),
        image_modifiers=("resizable",),
        denylist=frozenset({"environment", "bold"}),
    )


@pytest.fixture
def sample_source(sample_interface: Path) -> ir.SourceFile:
    return parse_interface(sample_interface.read_text(), sample_interface)


@pytest.fixture
def catalog(sample_source: ir.SourceFile, config: GeneratorConfig) -> ir.Catalog:
    return build_catalog(sample_source, config)


@pytest.fixture
def load_module(monkeypatch: pytest.MonkeyPatch):
    """Execute generated source as a throwaway module."""

    def load(source: str, name: str = "generated_modifiers") -> types.ModuleType:
        module = types.ModuleType(name)
        monkeypatch.setitem(sys.modules, name, module)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module

    return load


@pytest.fixture
def generated(catalog: ir.Catalog, config: GeneratorConfig, load_module):
    """The generated dispatcher module for the sample interface."""
    return load_module(emit_code(catalog, config))


@pytest.fixture
def parse_context() -> ParseContext:
    """A context whose registry also knows the host's Color and Alignment types."""
    registry = default_registry()
    registry.register("Color", parse_atom_string)
    registry.register("Alignment", parse_atom_string)
    return ParseContext(registry=registry)
