"""
Emitters: generated Python dispatcher code, or a JSON schema.
"""

from .chunks import chunk
from .code import CodeEmitter, emit_code
from .enums import generate_enums
from .schema import build_schema, emit_schema

__all__ = [
    "chunk",
    "CodeEmitter",
    "emit_code",
    "generate_enums",
    "build_schema",
    "emit_schema",
]
