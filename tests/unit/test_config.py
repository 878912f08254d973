"""Tests for generator configuration loading."""

from pathlib import Path

import pytest

from modgen.core.config import DEFAULT_CHUNK_SIZE, GeneratorConfig, load_config
from modgen.core.errors import ConfigError


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "modgen.toml"
    path.write_text(text)
    return path


class TestDefaults:
    def test_packaged_defaults_load(self):
        config = load_config()

        assert config.chunk_size == DEFAULT_CHUNK_SIZE
        assert config.view_protocols == ("View",)
        assert "SwiftUI" in config.module_prefixes
        assert "environment" in config.denylist
        assert "BlendMode" in config.required_types
        assert "toolbar" in config.prefer_view_reference

    def test_defaults_include_extra_host_types(self):
        config = load_config()

        assert "_ScaleModifier<R>" in config.extra_modifier_types
        assert "_OnSubmitModifier" in config.extra_modifier_types

    def test_text_modifiers_are_denylisted(self):
        config = load_config()

        for name in config.text_modifiers:
            assert name in config.denylist


class TestOverrides:
    def test_override_replaces_whole_key(self, tmp_path):
        path = write_config(tmp_path, 'denylist = ["onChange"]\nchunk_size = 3\n')

        config = load_config(path)

        assert config.denylist == frozenset({"onChange"})
        assert config.chunk_size == 3
        # Keys the file does not mention keep their defaults
        assert "BlendMode" in config.required_types

    def test_extra_schemas(self, tmp_path):
        path = write_config(
            tmp_path,
            "[extra_schemas]\n"
            'mask = [[{ first_name = "_", second_name = "mask", type = "ViewReference" }]]\n',
        )

        config = load_config(path)

        [signature] = config.extra_schemas["mask"]
        assert signature[0].first_name == "_"
        assert signature[0].second_name == "mask"
        assert signature[0].type == "ViewReference"

    def test_unknown_key(self, tmp_path):
        path = write_config(tmp_path, 'deny_list = ["onChange"]\n')

        with pytest.raises(ConfigError, match="Unknown config keys"):
            load_config(path)

    def test_invalid_toml(self, tmp_path):
        path = write_config(tmp_path, "denylist = [\n")

        with pytest.raises(ConfigError, match="Invalid TOML"):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config file"):
            load_config(tmp_path / "missing.toml")

    @pytest.mark.parametrize("value", ["0", "-2", '"ten"'])
    def test_bad_chunk_size(self, tmp_path, value):
        path = write_config(tmp_path, f"chunk_size = {value}\n")

        with pytest.raises(ConfigError, match="chunk_size"):
            load_config(path)

    def test_list_of_strings_required(self, tmp_path):
        path = write_config(tmp_path, "required_types = [1, 2]\n")

        with pytest.raises(ConfigError, match="required_types"):
            load_config(path)

    def test_malformed_extra_schema(self, tmp_path):
        path = write_config(tmp_path, '[extra_schemas]\nmask = [[{ first_name = "_" }]]\n')

        with pytest.raises(ConfigError, match="mask"):
            load_config(path)


class TestWithChunkSize:
    def test_replaces_chunk_size(self):
        config = GeneratorConfig(chunk_size=10, denylist=frozenset({"a"}))

        updated = config.with_chunk_size(4)

        assert updated.chunk_size == 4
        assert updated.denylist == frozenset({"a"})
        assert config.chunk_size == 10

    def test_rejects_zero(self):
        with pytest.raises(ConfigError):
            GeneratorConfig().with_chunk_size(0)
