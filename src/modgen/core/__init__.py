"""Core modgen functionality: IR, interface parser, catalog building, configuration."""

from . import ir
from .config import GeneratorConfig, load_config
from .errors import (
    ConfigError,
    EmitError,
    ErrorContext,
    ModgenError,
    ParseError,
)
from .interface_parser import parse_interface
from .pipeline import build_catalog, load_catalog

__all__ = [
    "ir",
    "ModgenError",
    "ParseError",
    "ConfigError",
    "EmitError",
    "ErrorContext",
    "GeneratorConfig",
    "load_config",
    "parse_interface",
    "build_catalog",
    "load_catalog",
]
