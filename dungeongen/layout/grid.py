"""The tile grid and the generation operations that mutate it.

Phase order for a full layout:
    * optional noise fill
    * room placement, optionally chained together with hallways
    * start/goal placement, optionally joined by a hallway

Every write goes through ``assign_position`` which applies ``merge_tile`` and
silently ignores positions outside the interior. The outer ring therefore
stays closed and untyped forever.
"""

from __future__ import annotations

import random
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from dungeongen.logging_utils import get_logger

from . import geometry
from .convolution import convolve, room_kernel
from .costs import room_cost_field
from .errors import RoomPlacementFailed
from .geometry import Position
from .hallways import direct_costs, find_path, find_path_with_detours, plan_meandering
from .metrics import init_metrics
from .rooms import Room, candidate_positions, choose_position, connection_pairs, order_for_connection
from .tiles import (
    OPEN_FLOOR,
    OPEN_HALLWAY,
    OPEN_ROOM,
    OPEN_ROOM_CENTER,
    AnchorMode,
    DescentPolicy,
    HallwayKind,
    Opacity,
    Tile,
    TileType,
    merge_tile,
)

log = get_logger("dungeongen.layout")

# Padding ring weighed around every candidate room footprint.
ROOM_PAD_AMOUNT = 1
ROOM_PAD_VALUE = 1.0
NOISE_OPEN_CHANCE = 0.5


class DungeonGrid:
    def __init__(
        self,
        height: int,
        width: int,
        *,
        seed: int | None = None,
        rng: random.Random | None = None,
        descent: DescentPolicy = DescentPolicy.GREEDY,
        meander_factor: float = 3.0,
    ):
        self.height = height
        self.width = width
        if rng is None:
            if seed is None:
                seed = random.randint(0, 2**31 - 1)
            rng = random.Random(seed)
        self.seed = seed
        # Single source for every random decision made on this grid.
        self._rng = rng
        self.descent = DescentPolicy(descent)
        self.meander_factor = meander_factor
        self.grid: List[List[Tile]] = [[Tile() for _ in range(width)] for _ in range(height)]
        self.rooms: List[Room] = []
        self.start: Optional[Position] = None
        self.goal: Optional[Position] = None
        self.metrics: Dict[str, Any] = init_metrics()

    # ------------------------------------------------------------------
    # Read surface
    # ------------------------------------------------------------------
    def __getitem__(self, x: int) -> List[Tile]:
        return self.grid[x]

    def tile_at(self, pos: Position) -> Tile:
        return self.grid[pos[0]][pos[1]]

    def is_open(self, pos: Position) -> bool:
        return self.tile_at(pos).opacity is Opacity.OPEN

    def is_within_bounds(self, x: int, y: int) -> bool:
        return geometry.is_within_bounds(x, y, self.height, self.width)

    def is_position_within_bounds(self, pos: Position) -> bool:
        return self.is_within_bounds(pos[0], pos[1])

    def neighbors(self, pos: Position) -> List[Position]:
        return geometry.neighbors(Position(*pos), self.height, self.width)

    def diagonals(self, pos: Position) -> List[Position]:
        return geometry.diagonals(Position(*pos), self.height, self.width)

    def positions_of(self, tile_type: TileType) -> List[Position]:
        return [
            Position(x, y)
            for x in range(self.height)
            for y in range(self.width)
            if self.grid[x][y].type is tile_type
        ]

    def cost_snapshot(self) -> np.ndarray:
        """Scratch costs last recorded on the tiles, as a field."""
        return np.array([[tile.cost for tile in row] for row in self.grid], dtype=float)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def assign_position(self, pos: Position, tile: Tile) -> bool:
        """Write ``tile`` at ``pos`` under the overwrite rules; returns False when out of bounds."""
        x, y = pos
        if not self.is_within_bounds(x, y):
            return False
        self.grid[x][y] = merge_tile(self.grid[x][y], tile)
        return True

    def assign_area(self, pos_a: Position, pos_b: Position, tile: Tile) -> None:
        """Write ``tile`` over the rectangle spanned by two corners, ``pos_b`` exclusive.

        Each side is at least one cell long, so equal corners still write one tile.
        """
        top = min(pos_a[0], pos_b[0])
        left = min(pos_a[1], pos_b[1])
        span_x = max(abs(pos_a[0] - pos_b[0]), 1)
        span_y = max(abs(pos_a[1] - pos_b[1]), 1)
        log.debug(
            event="assign_area",
            top=top,
            left=left,
            bottom=top + span_x,
            right=left + span_y,
            opacity=tile.opacity.value,
            type=tile.type.value,
        )
        for x in range(top, top + span_x):
            for y in range(left, left + span_y):
                self.assign_position(Position(x, y), tile)

    def _record_costs(self, field: np.ndarray) -> None:
        for x, row in enumerate(self.grid):
            for y, tile in enumerate(row):
                row[y] = Tile(tile.opacity, tile.type, float(field[x, y]))

    def _commit_route(self, route: Sequence[Position]) -> int:
        """Open every route position except the two ends as hallway; returns how many were in bounds."""
        written = 0
        for pos in route[1:-1]:
            if self.assign_position(pos, OPEN_HALLWAY):
                written += 1
        self.metrics["hallway_tiles"] += written
        return written

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate_noise(self) -> None:
        """Open roughly half of the interior at random; no structure."""
        for x in range(self.height):
            for y in range(self.width):
                if self.is_within_bounds(x, y) and self._rng.random() > NOISE_OPEN_CHANCE:
                    self.assign_position(Position(x, y), OPEN_FLOOR)

    def place_room(self, min_room_size: int = 3, max_room_size: int = 12) -> Room:
        """Place one room of random size at a cheapest spot.

        Raises ``RoomPlacementFailed`` when the sampled size fits nowhere.
        """
        room_height = self._rng.randint(min_room_size, max_room_size)
        room_width = self._rng.randint(min_room_size, max_room_size)
        costs = convolve(
            room_cost_field(self.grid),
            room_kernel(room_height, room_width),
            AnchorMode.TOP_LEFT,
            pad_amount=ROOM_PAD_AMOUNT,
            pad_value=ROOM_PAD_VALUE,
        )
        self._record_costs(costs)
        top_left = choose_position(candidate_positions(costs, room_height, room_width), self._rng)
        if top_left is None:
            self.metrics["room_placement_failures"] += 1
            log.warn(
                event="room_placement_failed",
                room_height=room_height,
                room_width=room_width,
                grid_height=self.height,
                grid_width=self.width,
            )
            raise RoomPlacementFailed(room_height, room_width, self.height, self.width)

        room = Room(top_left, room_height, room_width, self.height, self.width)
        self.assign_area(room.top_left, room.bottom_right, OPEN_ROOM)
        # Centre after footprint so the bulk write cannot mask it.
        self.assign_position(room.center, OPEN_ROOM_CENTER)
        self.rooms.append(room)
        self.metrics["rooms_placed"] += 1
        log.debug(
            event="room_placed",
            index=len(self.rooms) - 1,
            x=room.top_left.x,
            y=room.top_left.y,
            height=room.height,
            width=room.width,
            center=f"{room.center.x},{room.center.y}",
        )
        return room

    def generate_rooms(
        self,
        count: int,
        include_hallways: bool = True,
        min_room_size: int = 3,
        max_room_size: int = 12,
    ) -> List[Room]:
        placed = [self.place_room(min_room_size, max_room_size) for _ in range(count)]
        if include_hallways:
            self.connect_rooms()
        return placed

    def connect_rooms(self) -> List[List[Position]]:
        """Chain rooms by distance from the origin with direct hallways.

        A direct hallway that finds no route is retried once as a meandering one.
        """
        return [
            self.connect_positions(earlier.center, later.center)
            for earlier, later in connection_pairs(order_for_connection(self.rooms))
        ]

    def connect_positions(
        self, start: Position, stop: Position, kind: HallwayKind = HallwayKind.DIRECT
    ) -> List[Position]:
        """Carve a hallway of ``kind``, retrying an empty direct route as a meandering one."""
        start, stop = Position(*start), Position(*stop)
        kind = HallwayKind(kind)
        route = self.generate_hallway(start, stop, kind)
        if not route and kind is HallwayKind.DIRECT:
            self.metrics["hallway_fallbacks"] += 1
            log.warn(
                event="hallway_fallback",
                descent=self.descent.value,
                start=f"{start.x},{start.y}",
                stop=f"{stop.x},{stop.y}",
            )
            route = self.generate_hallway(start, stop, HallwayKind.MEANDERING)
        return route

    def generate_start_and_goal(self, connect: HallwayKind | None = None) -> None:
        """Drop start and goal on distinct random interior cells.

        With ``connect`` a hallway of that kind joins them; an empty direct
        route falls back to a meandering one as in ``connect_rooms``.
        """
        self.start = geometry.random_interior_position(self._rng, self.height, self.width)
        self.goal = geometry.random_interior_position(self._rng, self.height, self.width)
        interior = (self.height - 2) * (self.width - 2)
        while self.goal == self.start and interior > 1:
            self.goal = geometry.random_interior_position(self._rng, self.height, self.width)
        self.assign_position(self.start, Tile(Opacity.OPEN, TileType.START))
        self.assign_position(self.goal, Tile(Opacity.OPEN, TileType.GOAL))
        if connect is not None:
            self.connect_positions(self.start, self.goal, HallwayKind(connect))

    def generate_hallway(
        self, start: Position, stop: Position, kind: HallwayKind = HallwayKind.DIRECT
    ) -> List[Position]:
        """Carve a hallway from ``start`` to ``stop``.

        Returns the full route including both ends (which are never written),
        or an empty list when no route was found and nothing was carved.
        """
        start, stop = Position(*start), Position(*stop)
        kind = HallwayKind(kind)
        costs, affinity = direct_costs(self.grid, stop)
        self._record_costs(affinity)
        if kind is HallwayKind.DIRECT:
            if self.descent is DescentPolicy.DETOUR:
                route = find_path_with_detours(costs, start, self._rng, self.meander_factor)
            else:
                route = find_path(costs, start, self._rng, straight_preference=True)
        else:
            route = plan_meandering(start, stop, self._rng, self.height, self.width)

        if not route:
            self.metrics["hallways_empty"] += 1
            log.debug(event="hallway_unreachable", kind=kind.value, start=f"{start.x},{start.y}", stop=f"{stop.x},{stop.y}")
            return []
        written = self._commit_route(route)
        self.metrics["hallways_carved"] += 1
        log.debug(event="hallway_carved", kind=kind.value, length=len(route), tiles=written)
        return route

    def to_dict(self):
        return {
            "height": self.height,
            "width": self.width,
            "seed": self.seed,
            "start": list(self.start) if self.start else None,
            "goal": list(self.goal) if self.goal else None,
            "rooms": [room.to_dict() for room in self.rooms],
        }


__all__ = ["DungeonGrid"]
