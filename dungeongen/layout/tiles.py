"""Tile model and the enumerations shared across the layout engine."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class Opacity(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class TileType(str, Enum):
    NONE = "none"
    START = "start"
    GOAL = "goal"
    PATH = "path"
    ROOM = "room"
    ROOM_CENTER = "roomCenter"
    HALLWAY = "hallway"


class HallwayKind(str, Enum):
    DIRECT = "direct"
    MEANDERING = "meandering"


class AnchorMode(str, Enum):
    """Where a convolution kernel is pinned relative to the output cell."""

    TOP_LEFT = "topLeft"
    CENTER = "center"


class DescentPolicy(str, Enum):
    GREEDY = "greedy"
    DETOUR = "detour"


# Types that can never be replaced once written.
PROTECTED_TYPES = frozenset({TileType.START, TileType.GOAL})


@dataclass(frozen=True)
class Tile:
    """What a single grid position holds.

    ``cost`` is a scratch value for diagnostics; nothing in the engine reads
    it back when making decisions.
    """

    opacity: Opacity = Opacity.CLOSED
    type: TileType = TileType.NONE
    cost: float = 0.0

    @property
    def is_open(self) -> bool:
        return self.opacity is Opacity.OPEN

    def to_dict(self):
        return {"opacity": self.opacity.value, "type": self.type.value, "cost": self.cost}


def merge_tile(existing: Tile, incoming: Tile) -> Tile:
    """Return the tile that results from writing ``incoming`` over ``existing``.

    * An untyped write, or a hallway write onto an already typed cell, keeps the
      existing type.
    * Start and goal tiles keep their type no matter what is written.
    * A positive existing cost survives unless the incoming tile brings its own.
    """
    new_type = incoming.type
    if new_type is TileType.NONE or (new_type is TileType.HALLWAY and existing.type is not TileType.NONE):
        new_type = existing.type
    if existing.type in PROTECTED_TYPES:
        new_type = existing.type
    cost = incoming.cost
    if existing.cost > 0 and not incoming.cost > 0:
        cost = existing.cost
    return replace(incoming, type=new_type, cost=cost)


OPEN_ROOM = Tile(Opacity.OPEN, TileType.ROOM)
OPEN_ROOM_CENTER = Tile(Opacity.OPEN, TileType.ROOM_CENTER)
OPEN_HALLWAY = Tile(Opacity.OPEN, TileType.HALLWAY)
OPEN_FLOOR = Tile(Opacity.OPEN)

__all__ = [
    "Opacity",
    "TileType",
    "HallwayKind",
    "AnchorMode",
    "DescentPolicy",
    "PROTECTED_TYPES",
    "Tile",
    "merge_tile",
    "OPEN_ROOM",
    "OPEN_ROOM_CENTER",
    "OPEN_HALLWAY",
    "OPEN_FLOOR",
]
