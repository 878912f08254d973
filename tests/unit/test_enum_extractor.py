"""Tests for required enum extraction and the parseable-type scan."""

from pathlib import Path

import pytest

from modgen.core.enum_extractor import extract_required_enums, scan_parseable_types
from modgen.core.errors import EmitError, ParseError


def enums_by_name(source, config):
    return {e.name: e for e in extract_required_enums(source, config)}


class TestRequiredEnums:
    def test_enum_cases_in_order(self, sample_source, config):
        blend = enums_by_name(sample_source, config)["BlendMode"]

        assert [c.name for c in blend.cases] == ["normal", "multiply", "plusDarker"]

    def test_option_set_struct(self, sample_source, config):
        modifiers = enums_by_name(sample_source, config)["EventModifiers"]

        assert [c.name for c in modifiers.cases] == ["capsLock", "shift", "all"]

    def test_type_nested_in_extension(self, sample_source, config):
        phases = enums_by_name(sample_source, config)["KeyPress.Phases"]

        assert [c.name for c in phases.cases] == ["down", "up"]

    def test_type_availability(self, sample_source, config):
        mode = enums_by_name(sample_source, config)["ScrollDismissesKeyboardMode"]

        assert mode.availability.available_platforms() == ["iOS", "macOS"]
        assert mode.availability.version_requirements() == {"iOS": (16, 0), "macOS": (13, 0)}

    def test_case_guard_only_when_constraints_differ(self, sample_source, config):
        enums = enums_by_name(sample_source, config)
        blend = enums["BlendMode"]
        mode = enums["ScrollDismissesKeyboardMode"]

        normal, _, plus_darker = blend.cases
        assert not blend.case_needs_guard(normal)
        assert blend.case_needs_guard(plus_darker)

        automatic, _, interactively = mode.cases
        assert not mode.case_needs_guard(automatic)
        assert mode.case_needs_guard(interactively)

    def test_case_matching_type_constraint_needs_no_guard(self, sample_source, config):
        mode = enums_by_name(sample_source, config)["ScrollDismissesKeyboardMode"]

        immediately = mode.cases[1]
        assert immediately.name == "immediately"
        assert not immediately.availability.is_empty
        assert immediately.availability.same_platforms(mode.availability)
        assert not mode.case_needs_guard(immediately)

    def test_missing_type_warns(self, sample_source, config, caplog):
        with caplog.at_level("WARNING", logger="modgen.core.enum_extractor"):
            enums = enums_by_name(sample_source, config)

        assert "ControlSize" not in enums
        assert "ControlSize" in caplog.text

    def test_only_required_types(self, sample_source, config):
        assert "Text" not in enums_by_name(sample_source, config)


class TestParseableScan:
    def test_enums_and_referenced_types(self, parseable_dir, config):
        enums, types = scan_parseable_types(parseable_dir, config)

        assert enums == {
            "ShapeKind": ["circle", "capsule", "rectangle"],
            "AnimationCurve": ["linear", "easeIn", "easeOut"],
        }
        assert types == ["CGFloat", "Edge.Set", "RoundedCornerStyle", "StrokeStyle"]

    def test_unmarked_enum_ignored(self, parseable_dir, config):
        enums, _ = scan_parseable_types(parseable_dir, config)

        assert "InternalState" not in enums

    def test_files_scanned_in_path_order(self, parseable_dir, config):
        enums, _ = scan_parseable_types(parseable_dir, config)

        # Animation.swift sorts before Modifiers/Shapes.swift
        assert list(enums) == ["AnimationCurve", "ShapeKind"]

    def test_missing_directory(self, tmp_path, config):
        with pytest.raises(EmitError, match="not found"):
            scan_parseable_types(tmp_path / "nowhere", config)

    def test_unparseable_file(self, tmp_path: Path, config):
        (tmp_path / "Broken.swift").write_text("enum Broken {\n  case a(\n")

        with pytest.raises(ParseError):
            scan_parseable_types(tmp_path, config)
