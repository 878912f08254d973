"""Tests for the modgen command line."""

import json
from importlib.metadata import PackageNotFoundError
from pathlib import Path

import pytest
from typer.testing import CliRunner

from modgen.cli import app


@pytest.fixture
def cli_runner():
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def small_config(tmp_path: Path) -> Path:
    """Override the packaged tables so the output stays small."""
    path = tmp_path / "modgen.toml"
    path.write_text(
        """
chunk_size = 4
extra_modifier_types = []
required_types = ["BlendMode", "KeyPress.Phases"]
extra_schemas = {}
"""
    )
    return path


def json_document(output: str) -> dict:
    # Skip notices on stderr precede the document
    return json.loads(output[output.index("{") :])


class TestGenerateCode:
    def test_writes_module(self, cli_runner, sample_interface, small_config):
        result = cli_runner.invoke(app, [str(sample_interface), "--config", str(small_config)])

        assert result.exit_code == 0, result.output
        assert "# Generated by `modgen Sample.swiftinterface --chunk-size 4`. Do not edit." in (
            result.output
        )
        assert "class BuiltinModifierParser:" in result.output
        assert "class _fadeModifier(ParseableModifier):" in result.output

    def test_reports_skipped_modifiers(self, cli_runner, sample_interface, small_config):
        result = cli_runner.invoke(app, [str(sample_interface), "--config", str(small_config)])

        skipped = ["_internalModifier", "badBuilder", "bold", "environment", "focused", "transform"]
        for name in skipped:
            assert f"`{name}` will be skipped" in result.output

    def test_chunk_size_option(self, cli_runner, sample_interface, small_config):
        result = cli_runner.invoke(
            app, [str(sample_interface), "--config", str(small_config), "--chunk-size", "2"]
        )

        assert result.exit_code == 0, result.output
        assert "--chunk-size 2`" in result.output
        assert "class _BuiltinModifierChunk5(ModifierChunk):" in result.output
        assert "_BuiltinModifierChunk6" not in result.output

    def test_chunk_size_must_be_positive(self, cli_runner, sample_interface):
        result = cli_runner.invoke(app, [str(sample_interface), "--chunk-size", "0"])

        assert result.exit_code != 0

    def test_parseable_types_ignored_for_code(
        self, cli_runner, sample_interface, small_config, parseable_dir
    ):
        result = cli_runner.invoke(
            app,
            [
                str(sample_interface),
                "--config",
                str(small_config),
                "--parseable-types",
                str(parseable_dir),
            ],
        )

        assert result.exit_code == 0, result.output
        assert "only applies to schema mode" in result.output


class TestGenerateSchema:
    def test_writes_schema(self, cli_runner, sample_interface, small_config):
        result = cli_runner.invoke(
            app, [str(sample_interface), "--config", str(small_config), "--schema"]
        )

        assert result.exit_code == 0, result.output
        document = json_document(result.output)
        assert "fade" in document["modifiers"]
        assert document["enums"]["BlendMode"] == ["normal", "multiply", "plusDarker"]

    def test_parseable_types(self, cli_runner, sample_interface, small_config, parseable_dir):
        result = cli_runner.invoke(
            app,
            [
                str(sample_interface),
                "--config",
                str(small_config),
                "--schema",
                "--parseable-types",
                str(parseable_dir),
            ],
        )

        assert result.exit_code == 0, result.output
        document = json_document(result.output)
        assert document["types"] == ["CGFloat", "Edge.Set", "RoundedCornerStyle", "StrokeStyle"]
        assert "ShapeKind" in document["enums"]


class TestErrors:
    def test_unparseable_interface(self, cli_runner, tmp_path):
        path = tmp_path / "Broken.swiftinterface"
        path.write_text("extension View {\n  public func fade(amount: ) -> some View\n}\n")

        result = cli_runner.invoke(app, [str(path)])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "Broken.swiftinterface:2" in result.output

    def test_bad_config(self, cli_runner, sample_interface, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("chunk = 3\n")

        result = cli_runner.invoke(app, [str(sample_interface), "--config", str(config)])

        assert result.exit_code == 1
        assert "Unknown config keys" in result.output

    def test_missing_parseable_directory(self, cli_runner, sample_interface, tmp_path):
        result = cli_runner.invoke(
            app,
            [str(sample_interface), "--schema", "--parseable-types", str(tmp_path / "nowhere")],
        )

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_missing_interface(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, [str(tmp_path / "Missing.swiftinterface")])

        assert result.exit_code != 0


class TestVersion:
    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "modgen version" in result.output

    def test_version_from_bare_checkout(self, cli_runner, monkeypatch):
        def not_installed(name):
            raise PackageNotFoundError(name)

        monkeypatch.setattr("modgen._version.version", not_installed)

        result = cli_runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "modgen version unknown" in result.output
