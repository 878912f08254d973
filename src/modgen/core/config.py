"""
Generator configuration.

The static tables the generator works from (denylist, required enum types,
hand-written extras) live in the packaged ``defaults.toml``. A user file
passed with ``--config`` replaces every top-level key it defines:

    # modgen.toml
    chunk_size = 20
    denylist = ["environment", "onChange"]
    required_types = ["BlendMode", "Visibility"]
"""

import logging
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULTS_PATH = Path(__file__).with_name("defaults.toml")

DEFAULT_CHUNK_SIZE = 10

_LIST_KEYS = (
    "view_protocols",
    "module_prefixes",
    "prefer_view_reference",
    "extra_modifier_types",
    "required_types",
    "text_modifiers",
    "image_modifiers",
    "denylist",
)


@dataclass(frozen=True)
class ExtraParameter:
    """One parameter of a hand-written modifier's schema entry."""

    first_name: str
    type: str
    second_name: str | None = None


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Read-only inputs to the catalog builder and emitters.

    Attributes:
        chunk_size: Maximum modifiers per generated dispatch chunk
        view_protocols: Extended protocols whose functions are modifiers
        module_prefixes: Qualifiers stripped from type spellings
        prefer_view_reference: Modifiers whose builder form is dropped
        extra_modifier_types: Hand-written host modifier types
        required_types: Enum types whose parsers are generated
        text_modifiers: Names handled by the text-styling fallback
        image_modifiers: Names handled by the image-styling fallback
        denylist: Modifiers never generated
        extra_schemas: Schema entries for hand-written modifiers
    """

    chunk_size: int = DEFAULT_CHUNK_SIZE
    view_protocols: tuple[str, ...] = ("View",)
    module_prefixes: tuple[str, ...] = ()
    prefer_view_reference: tuple[str, ...] = ()
    extra_modifier_types: tuple[str, ...] = ()
    required_types: tuple[str, ...] = ()
    text_modifiers: tuple[str, ...] = ()
    image_modifiers: tuple[str, ...] = ()
    denylist: frozenset[str] = field(default_factory=frozenset)
    extra_schemas: dict[str, list[list[ExtraParameter]]] = field(default_factory=dict)

    def with_chunk_size(self, chunk_size: int) -> "GeneratorConfig":
        if chunk_size < 1:
            raise ConfigError(f"chunk size must be at least 1, got {chunk_size}")
        return replace(self, chunk_size=chunk_size)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e


def _string_list(data: dict[str, Any], key: str, source: Path) -> tuple[str, ...]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' in {source} must be a list of strings")
    return tuple(value)


def _extra_schemas(data: dict[str, Any], source: Path) -> dict[str, list[list[ExtraParameter]]]:
    raw = data.get("extra_schemas", {})
    if not isinstance(raw, dict):
        raise ConfigError(f"'extra_schemas' in {source} must be a table")

    schemas: dict[str, list[list[ExtraParameter]]] = {}
    for name, signatures in raw.items():
        parsed: list[list[ExtraParameter]] = []
        for signature in signatures:
            try:
                parsed.append(
                    [
                        ExtraParameter(
                            first_name=p["first_name"],
                            type=p["type"],
                            second_name=p.get("second_name"),
                        )
                        for p in signature
                    ]
                )
            except (KeyError, TypeError) as e:
                raise ConfigError(f"Invalid extra schema for '{name}' in {source}: {e}") from e
        schemas[name] = parsed
    return schemas


def load_config(path: Path | None = None) -> GeneratorConfig:
    """
    Load the packaged defaults, optionally overridden by a user file.

    Args:
        path: Optional user TOML file

    Returns:
        GeneratorConfig

    Raises:
        ConfigError: If a file is unreadable, malformed, or has unknown keys
    """
    data = _read_toml(DEFAULTS_PATH)
    source = DEFAULTS_PATH

    if path is not None:
        overrides = _read_toml(path)
        known = {*_LIST_KEYS, "extra_schemas", "chunk_size"}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ConfigError(f"Unknown config keys in {path}: {', '.join(unknown)}")
        logger.debug("Overriding config keys from %s: %s", path, sorted(overrides))
        data.update(overrides)
        source = path

    chunk_size = data.get("chunk_size", DEFAULT_CHUNK_SIZE)
    if not isinstance(chunk_size, int) or chunk_size < 1:
        raise ConfigError(f"'chunk_size' in {source} must be a positive integer")

    lists = {key: _string_list(data, key, source) for key in _LIST_KEYS}
    return GeneratorConfig(
        chunk_size=chunk_size,
        view_protocols=lists["view_protocols"],
        module_prefixes=lists["module_prefixes"],
        prefer_view_reference=lists["prefer_view_reference"],
        extra_modifier_types=lists["extra_modifier_types"],
        required_types=lists["required_types"],
        text_modifiers=lists["text_modifiers"],
        image_modifiers=lists["image_modifiers"],
        denylist=frozenset(lists["denylist"]),
        extra_schemas=_extra_schemas(data, source),
    )
