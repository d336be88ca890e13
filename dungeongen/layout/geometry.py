"""Positions, neighbourhoods and distances.

``x`` indexes the outer (height) axis and ``y`` the inner (width) axis, so a
grid is addressed as ``grid[x][y]``. The outermost ring of cells never counts
as interior.
"""

from __future__ import annotations

import math
import random
from typing import List, NamedTuple


class Position(NamedTuple):
    x: int
    y: int


def is_within_bounds(x: int, y: int, height: int, width: int) -> bool:
    return 0 < x < height - 1 and 0 < y < width - 1


def neighbors(pos: Position, height: int, width: int) -> List[Position]:
    """Axis neighbours in +x, -x, +y, -y order, restricted to the interior.

    The order matters: tie-breaking during descent walks this list first.
    """
    x, y = pos
    candidates = (Position(x + 1, y), Position(x - 1, y), Position(x, y + 1), Position(x, y - 1))
    return [p for p in candidates if is_within_bounds(p.x, p.y, height, width)]


def diagonals(pos: Position, height: int, width: int) -> List[Position]:
    x, y = pos
    candidates = (
        Position(x + 1, y + 1),
        Position(x - 1, y - 1),
        Position(x - 1, y + 1),
        Position(x + 1, y - 1),
    )
    return [p for p in candidates if is_within_bounds(p.x, p.y, height, width)]


def distance(a: Position, b: Position) -> float:
    """Euclidean distance; (1, 1) to (0, 0) is sqrt(2)."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def rectilinear_distance(a: Position, b: Position) -> int:
    """Taxicab distance; (1, 1) to (0, 0) is 2."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def random_interior_position(rng: random.Random, height: int, width: int) -> Position:
    return Position(rng.randint(1, height - 2), rng.randint(1, width - 2))


__all__ = [
    "Position",
    "is_within_bounds",
    "neighbors",
    "diagonals",
    "distance",
    "rectilinear_distance",
    "random_interior_position",
]
