"""Version of the installed modgen distribution."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "modgen"


def get_version() -> str:
    """Return the installed version, or ``"unknown"`` when running from a bare checkout."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return "unknown"
