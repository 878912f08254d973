"""
Platform availability constraints.

Built from ``@available`` attributes:

    @available(iOS 14.0, macOS 11.0, *)
    @available(iOS, introduced: 13.0, deprecated: 100000.0, message: "Use fade")
    @available(watchOS, unavailable)
    @available(*, deprecated, renamed: "fade(amount:)")
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PlatformVersion(BaseModel):
    """A minimum-version requirement on one platform."""

    platform: str
    version: str | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        if self.version:
            return f"{self.platform} {self.version}"
        return self.platform

    @property
    def version_tuple(self) -> tuple[int, ...]:
        if not self.version:
            return ()
        return tuple(int(part) for part in self.version.split(".") if part.isdigit())


class AvailabilityConstraint(BaseModel):
    """
    Availability of a declaration.

    Attributes:
        platforms: (platform, minimum version) requirements in declaration order
        unavailable: platforms explicitly marked unavailable
        deprecated: True if any availability attribute deprecates the declaration
        message: deprecation message, if one was given
        renamed: replacement name, if one was given
    """

    platforms: tuple[PlatformVersion, ...] = ()
    unavailable: frozenset[str] = Field(default_factory=frozenset)
    deprecated: bool = False
    message: str | None = None
    renamed: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        """True when the constraint places no platform requirement."""
        return not self.platforms

    def normalized(self) -> list[tuple[str, str]]:
        """Sorted ``(platform, version)`` tuples used for equality checks."""
        return sorted((p.platform, p.version or "") for p in self.platforms)

    def same_platforms(self, other: AvailabilityConstraint) -> bool:
        return self.normalized() == other.normalized()

    def available_platforms(self) -> list[str]:
        """Platforms the declaration exists on, sorted, unavailable ones removed."""
        return sorted({p.platform for p in self.platforms} - set(self.unavailable))

    def version_requirements(self) -> dict[str, tuple[int, ...]]:
        """Minimum version per platform, for platforms that name one."""
        return {p.platform: p.version_tuple for p in self.platforms if p.version}

    def merge(self, other: AvailabilityConstraint) -> AvailabilityConstraint:
        """Combine two attributes attached to the same declaration."""
        platforms = list(self.platforms)
        known = {p.platform for p in platforms}
        platforms.extend(p for p in other.platforms if p.platform not in known)
        return AvailabilityConstraint(
            platforms=tuple(platforms),
            unavailable=self.unavailable | other.unavailable,
            deprecated=self.deprecated or other.deprecated,
            message=self.message or other.message,
            renamed=self.renamed or other.renamed,
        )

    def __str__(self) -> str:
        return ", ".join([*(str(p) for p in self.platforms), "*"])


ALWAYS_AVAILABLE = AvailabilityConstraint()
