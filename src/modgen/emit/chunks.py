"""
Partition of sorted modifier names into fixed-size dispatch groups.
"""

from collections.abc import Sequence


def chunk(names: Sequence[str], size: int) -> list[list[str]]:
    """
    Split *names* into consecutive groups of at most *size* names.

    Every group but the last is full; order is preserved. An empty input
    gives no groups.

    Raises:
        ValueError: If size is less than 1
    """
    if size < 1:
        raise ValueError(f"chunk size must be at least 1, got {size}")
    return [list(names[i : i + size]) for i in range(0, len(names), size)]


def chunk_index(names: Sequence[str], size: int) -> dict[str, int]:
    """Map each name to the index of the group it lands in."""
    return {name: i // size for i, name in enumerate(names)}
