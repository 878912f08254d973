"""
modgen - modifier dispatcher and schema generator for UI interface files.

Reads a Swift-style interface, extracts the view modifiers and the enum
types they need, and emits either a Python dispatcher module built on
``modgen.runtime`` or a JSON schema.
"""

from ._version import get_version

__version__ = get_version()

__all__ = ["__version__"]
