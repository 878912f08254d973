"""
The platform and OS version generated modules are imported for.

Generated enum modules decide at import time which types exist
(``BUILD_TARGET.platform``) and check case availability at parse time
(``BUILD_TARGET.is_available``). The target is read from the environment:

    MODGEN_TARGET_OS=macOS MODGEN_TARGET_VERSION=14.0
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

DEFAULT_PLATFORM = "iOS"
DEFAULT_VERSION = "17.0"


def parse_version(text: str) -> tuple[int, ...]:
    """``"17.0.1"`` -> ``(17, 0, 1)``; trailing zeros are dropped."""
    parts = [int(p) for p in text.strip().split(".") if p]
    while parts and parts[-1] == 0:
        parts.pop()
    return tuple(parts)


@dataclass(frozen=True)
class BuildTarget:
    platform: str
    version: tuple[int, ...]

    @classmethod
    def from_environment(cls) -> "BuildTarget":
        return cls(
            platform=os.environ.get("MODGEN_TARGET_OS", DEFAULT_PLATFORM),
            version=parse_version(os.environ.get("MODGEN_TARGET_VERSION", DEFAULT_VERSION)),
        )

    def is_available(self, requirements: Mapping[str, tuple[int, ...] | None]) -> bool:
        """
        True when this target satisfies a ``platform -> minimum version`` map.

        A platform missing from the map is not available; ``None`` means any
        version.
        """
        if self.platform not in requirements:
            return False
        minimum = requirements[self.platform]
        return minimum is None or self.version >= minimum


BUILD_TARGET = BuildTarget.from_environment()
