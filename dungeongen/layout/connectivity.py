"""Reachability over open tiles.

Used by the pipeline to report unreachable rooms and by anything that walks
a finished layout (movement, diagnostics).
"""
from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from .geometry import Position
from .rooms import Room

if TYPE_CHECKING:
    from .grid import DungeonGrid


def reachable_from(grid: "DungeonGrid", start: Position) -> Set[Position]:
    """Every open position reachable from ``start`` by axis moves over open tiles."""
    start = Position(*start)
    if not grid.is_open(start):
        return set()
    seen = {start}
    q = deque([start])
    while q:
        cur = q.popleft()
        for nxt in grid.neighbors(cur):
            if nxt not in seen and grid.is_open(nxt):
                seen.add(nxt)
                q.append(nxt)
    return seen


def unreachable_rooms(grid: "DungeonGrid") -> List[Room]:
    """Rooms whose centre cannot be reached from the first room's centre."""
    if not grid.rooms:
        return []
    seen = reachable_from(grid, grid.rooms[0].center)
    return [room for room in grid.rooms if room.center not in seen]


def open_route(grid: "DungeonGrid", start: Position, goal: Position) -> List[Position]:
    """Shortest axis-move route over open tiles from ``start`` to ``goal``, or [] if none."""
    start, goal = Position(*start), Position(*goal)
    if not (grid.is_open(start) and grid.is_open(goal)):
        return []
    parent: Dict[Position, Optional[Position]] = {start: None}
    q = deque([start])
    while q:
        cur = q.popleft()
        if cur == goal:
            break
        for nxt in grid.neighbors(cur):
            if nxt not in parent and grid.is_open(nxt):
                parent[nxt] = cur
                q.append(nxt)
    if goal not in parent:
        return []
    route: List[Position] = []
    node: Optional[Position] = goal
    while node is not None:
        route.append(node)
        node = parent[node]
    route.reverse()
    return route


__all__ = ["reachable_from", "unreachable_rooms", "open_route"]
