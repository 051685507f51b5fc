"""Utility functions for the board inference engine."""

from typing import Dict, List, Tuple

# 8-connected offsets as (d_row, d_col), row-major order.
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)

# Module-level cache: (height, width) -> {(row, col): ((nr, nc), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[
    Tuple[int, int],
    Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]
] = {}


def get_neighborhoods(
    height: int, width: int
) -> Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]:
    """
    Precompute and cache 8-connected neighbor coordinates for a full rectangle.

    Args:
        height: Number of rows. Must be positive.
        width: Number of columns. Must be positive.

    Returns:
        Mapping from each coordinate (row, col) to a tuple of valid
        neighboring coordinates (nr, nc).

    Raises:
        ValueError: If height or width is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    key = (height, width)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]] = {}
    for row in range(height):
        for col in range(width):
            nbrs: List[Tuple[int, int]] = []
            for dr, dc in NEIGHBOR_OFFSETS:
                nr, nc = row + dr, col + dc
                if 0 <= nr < height and 0 <= nc < width:
                    nbrs.append((nr, nc))
            neighborhoods[(row, col)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods
