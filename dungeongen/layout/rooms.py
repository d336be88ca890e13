"""Room entity and cost-driven placement helpers."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple

import numpy as np

from .geometry import Position, distance

ORIGIN = Position(0, 0)


@dataclass
class Room:
    top_left: Position
    height: int
    width: int
    grid_height: int = field(repr=False, default=0)
    grid_width: int = field(repr=False, default=0)
    connected: bool = False
    sort_order: float = 0.0

    def __post_init__(self):
        self.top_left = Position(*self.top_left)
        # Never let a room poke past the grid edge.
        if self.grid_height:
            self.height = min(self.height, self.grid_height - self.top_left.x)
        if self.grid_width:
            self.width = min(self.width, self.grid_width - self.top_left.y)

    @property
    def center(self) -> Position:
        return Position(self.top_left.x + self.height // 2, self.top_left.y + self.width // 2)

    @property
    def bottom_right(self) -> Position:
        """Exclusive corner: one past the last footprint cell on both axes."""
        return Position(self.top_left.x + self.height, self.top_left.y + self.width)

    def cells(self) -> Iterator[Position]:
        for ix in range(self.top_left.x, self.top_left.x + self.height):
            for iy in range(self.top_left.y, self.top_left.y + self.width):
                yield Position(ix, iy)

    def contains(self, pos: Position) -> bool:
        return (
            self.top_left.x <= pos[0] < self.top_left.x + self.height
            and self.top_left.y <= pos[1] < self.top_left.y + self.width
        )

    def to_dict(self):
        return {
            "top_left": list(self.top_left),
            "height": self.height,
            "width": self.width,
            "center": list(self.center),
            "bottom_right": list(self.bottom_right),
            "connected": self.connected,
        }


def candidate_positions(
    costs: np.ndarray, room_height: int, room_width: int
) -> List[Tuple[Position, float]]:
    """Every top-left corner whose footprint stays inside the interior, with its cost."""
    grid_height, grid_width = costs.shape
    return [
        (Position(x, y), float(costs[x, y]))
        for x in range(1, grid_height - room_height)
        for y in range(1, grid_width - room_width)
    ]


def cheapest_positions(candidates: Sequence[Tuple[Position, float]]) -> List[Position]:
    if not candidates:
        return []
    lowest = min(cost for _, cost in candidates)
    return [pos for pos, cost in candidates if cost <= lowest]


def choose_position(candidates: Sequence[Tuple[Position, float]], rng: random.Random) -> Position | None:
    """Uniformly pick one of the candidates tied at the minimum cost."""
    ties = cheapest_positions(candidates)
    if not ties:
        return None
    return ties[rng.randrange(len(ties))]


def order_for_connection(rooms: List[Room]) -> List[Room]:
    """Stable-sort rooms in place by the distance of their centre from the origin.

    Chaining neighbours in this order is not a spanning tree; two far-apart
    rooms can end up adjacent in the chain.
    """
    for room in rooms:
        room.sort_order = distance(room.center, ORIGIN)
    rooms.sort(key=lambda r: r.sort_order)
    return rooms


def connection_pairs(rooms: Sequence[Room]) -> Iterator[Tuple[Room, Room]]:
    """Yield adjacent (earlier, later) pairs whose earlier room is still unconnected.

    The earlier room is marked connected as each pair is yielded.
    """
    for earlier, later in zip(rooms, rooms[1:]):
        if earlier.connected:
            continue
        earlier.connected = True
        yield earlier, later


__all__ = [
    "Room",
    "candidate_positions",
    "cheapest_positions",
    "choose_position",
    "order_for_connection",
    "connection_pairs",
]
