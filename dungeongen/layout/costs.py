"""Per-cell cost fields derived from a snapshot of the tile grid.

Every builder returns a fresh ``(height, width)`` float array and leaves the
tiles untouched. Lower values are preferred by placement and descent.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from .geometry import Position, rectilinear_distance
from .tiles import Opacity, Tile, TileType

DistanceFunction = Callable[[Position, Position], float]

# Centres of existing rooms are avoided hardest, plain open floor mildly.
ROOM_COST_OPEN = 1.0
ROOM_COST_ROOM = 3.0
ROOM_COST_HALLWAY = 1.0
ROOM_COST_ROOM_CENTER = 10.0

# Extending an existing hallway is cheaper than cutting through a room.
HALLWAY_COST_ROOM = 1.0
HALLWAY_COST_HALLWAY = -1.0


def room_cost_field(tiles: Sequence[Sequence[Tile]]) -> np.ndarray:
    costs = np.zeros((len(tiles), len(tiles[0])), dtype=float)
    for x, row in enumerate(tiles):
        for y, tile in enumerate(row):
            if tile.opacity is Opacity.OPEN:
                costs[x, y] += ROOM_COST_OPEN
            if tile.type is TileType.ROOM:
                costs[x, y] += ROOM_COST_ROOM
            elif tile.type is TileType.HALLWAY:
                costs[x, y] += ROOM_COST_HALLWAY
            elif tile.type is TileType.ROOM_CENTER:
                costs[x, y] += ROOM_COST_ROOM_CENTER
    return costs


def hallway_cost_field(tiles: Sequence[Sequence[Tile]]) -> np.ndarray:
    costs = np.zeros((len(tiles), len(tiles[0])), dtype=float)
    for x, row in enumerate(tiles):
        for y, tile in enumerate(row):
            if tile.type is TileType.ROOM:
                costs[x, y] += HALLWAY_COST_ROOM
            elif tile.type is TileType.HALLWAY:
                costs[x, y] += HALLWAY_COST_HALLWAY
    return costs


def distance_field(
    height: int,
    width: int,
    goal: Position,
    distance_function: DistanceFunction = rectilinear_distance,
) -> np.ndarray:
    """Distance from ``goal`` to every cell, measured with ``distance_function``."""
    costs = np.zeros((height, width), dtype=float)
    for x in range(height):
        for y in range(width):
            costs[x, y] = distance_function(goal, Position(x, y))
    return costs


__all__ = [
    "DistanceFunction",
    "room_cost_field",
    "hallway_cost_field",
    "distance_field",
]
