"""Hallway planning: cost-descent walkers and the two hallway kinds.

Both walkers return the full path from ``start`` to the zero-cost cell, or an
empty list when the descent cannot get there. An empty path means "no hallway";
callers decide whether to retry.
"""

from __future__ import annotations

import math
import random
from typing import List, Sequence

import numpy as np

from .convolution import HALLWAY_KERNEL, convolve
from .costs import distance_field, hallway_cost_field
from .geometry import (
    Position,
    diagonals,
    distance,
    is_within_bounds,
    neighbors,
    random_interior_position,
    rectilinear_distance,
)
from .tiles import AnchorMode, Tile

STRAIGHT_PREFERENCE = 0.8
# Keeps every cell except the goal strictly above zero so descent can only stop there.
MIN_STEP_COST = 1e-3

# Detour walker tuning.
DETOUR_MAX_LENGTH = 10
DETOUR_MIN_STEPS = 4
DETOUR_CELL_PENALTY = 2.0
DETOUR_DIAGONAL_PENALTY = 1.0
OSCILLATION_BASE_POP = 4


def find_path(
    costs: np.ndarray,
    start: Position,
    rng: random.Random,
    straight_preference: bool = True,
) -> List[Position]:
    """Greedy descent from ``start`` until a cell with cost exactly 0.

    Each step moves to the cheapest neighbour not already on the path. With
    ``straight_preference`` the first tied neighbour (in neighbour order) wins
    80% of the time; otherwise ties are broken uniformly.
    """
    height, width = costs.shape
    start = Position(*start)
    path = [start]
    visited = {start}
    for _ in range(height * width):
        current = path[-1]
        if costs[current.x, current.y] == 0:
            return path
        options = [n for n in neighbors(current, height, width) if n not in visited]
        if not options:
            return []
        lowest = min(costs[n.x, n.y] for n in options)
        ties = [n for n in options if costs[n.x, n.y] == lowest]
        if straight_preference and rng.random() < STRAIGHT_PREFERENCE:
            nxt = ties[0]
        else:
            nxt = rng.choice(ties)
        path.append(nxt)
        visited.add(nxt)
    return path if costs[path[-1].x, path[-1].y] == 0 else []


def find_path_with_detours(
    costs: np.ndarray,
    start: Position,
    rng: random.Random,
    meander_factor: float = 3.0,
) -> List[Position]:
    """Descent that injects lateral detours and recovers from back-and-forth loops.

    ``meander_factor`` is the per-step chance, in percent, of a detour once the
    path has gone at least four steps without one. Detour cells (and the
    diagonals of where the detour ends) get more expensive so the walk does
    not trace back over them. If the walk is about to return to the cell two
    steps back, a few trailing entries are dropped instead, more on each
    consecutive repeat. ``costs`` is not modified.
    """
    costs = np.array(costs, dtype=float)
    height, width = costs.shape
    path = [Position(*start)]
    steps_since_detour = 0
    oscillations = 0
    for _ in range(height * width):
        current = path[-1]
        if (
            len(path) > DETOUR_MIN_STEPS
            and steps_since_detour > DETOUR_MIN_STEPS
            and rng.random() * 100 < meander_factor
        ):
            steps_since_detour = 0
            _inject_detour(costs, path, rng)
            current = path[-1]
            for diag in diagonals(current, height, width):
                _penalize(costs, diag.x, diag.y, DETOUR_DIAGONAL_PENALTY)

        if costs[current.x, current.y] == 0:
            return path
        options = neighbors(current, height, width)
        if not options:
            return []
        # min() keeps the first of equal costs, i.e. canonical neighbour order.
        nxt = min(options, key=lambda n: costs[n.x, n.y])

        if len(path) > 3 and nxt == path[-2]:
            drop = min(OSCILLATION_BASE_POP + oscillations, len(path) - 1)
            steps_since_detour = -oscillations - OSCILLATION_BASE_POP
            oscillations += 1
            del path[len(path) - drop :]
        else:
            oscillations = 0
            steps_since_detour += 1
            path.append(nxt)
    return path if costs[path[-1].x, path[-1].y] == 0 else []


def _inject_detour(costs: np.ndarray, path: List[Position], rng: random.Random) -> None:
    height, width = costs.shape
    last, prev = path[-1], path[-2]
    dx, dy = prev.x - last.x, prev.y - last.y
    if abs(dx + dy) != 1:
        return
    # Swerve perpendicular to the current heading.
    shift_x = shift_y = 0
    if dx != 0:
        shift_y = round((rng.random() - 0.5) * 2 * DETOUR_MAX_LENGTH)
    if dy != 0:
        shift_x = round((rng.random() - 0.5) * 2 * DETOUR_MAX_LENGTH)
    step_x = int(math.copysign(1, shift_x)) if shift_x else 0
    step_y = int(math.copysign(1, shift_y)) if shift_y else 0
    x, y = last
    for _ in range(abs(shift_x)):
        if is_within_bounds(x + step_x, y, height, width):
            x += step_x
            _penalize(costs, x, y, DETOUR_CELL_PENALTY)
            path.append(Position(x, y))
    for _ in range(abs(shift_y)):
        if is_within_bounds(x, y + step_y, height, width):
            y += step_y
            _penalize(costs, x, y, DETOUR_CELL_PENALTY)
            path.append(Position(x, y))


def _penalize(costs: np.ndarray, x: int, y: int, amount: float) -> None:
    # The goal stays at zero or the walk could never finish.
    if costs[x, y] != 0:
        costs[x, y] += amount


def direct_costs(tiles: Sequence[Sequence[Tile]], stop: Position) -> tuple[np.ndarray, np.ndarray]:
    """Combined descent field toward ``stop`` plus the smoothed affinity it was built from.

    Hallway affinity is smoothed with the 3x3 cross kernel, then the
    rectilinear distance to ``stop`` is added. ``stop`` is the only zero cell.
    """
    height, width = len(tiles), len(tiles[0])
    affinity = convolve(hallway_cost_field(tiles), HALLWAY_KERNEL, AnchorMode.CENTER)
    combined = affinity + distance_field(height, width, stop)
    combined = np.maximum(combined, MIN_STEP_COST)
    combined[stop[0], stop[1]] = 0.0
    return combined, affinity


def meander_waypoints(
    start: Position, stop: Position, rng: random.Random, height: int, width: int
) -> List[Position]:
    """``start``, one or two random interior waypoints and ``stop``, ordered by distance from ``start``."""
    stops = [(0.0, Position(*start))]
    for _ in range(rng.randint(1, 2)):
        pos = random_interior_position(rng, height, width)
        stops.append((float(rectilinear_distance(start, pos)), pos))
    stops.append((math.inf, Position(*stop)))
    stops.sort(key=lambda item: item[0])
    return [pos for _, pos in stops]


def plan_meandering(
    start: Position, stop: Position, rng: random.Random, height: int, width: int
) -> List[Position]:
    """Chain of plain-distance descents through random waypoints.

    Returns the concatenated route (waypoints appear once), or ``[]`` when any
    leg fails.
    """
    waypoints = meander_waypoints(start, stop, rng, height, width)
    route: List[Position] = [waypoints[0]]
    for leg_start, leg_stop in zip(waypoints, waypoints[1:]):
        costs = distance_field(height, width, leg_stop, distance)
        leg = find_path(costs, leg_start, rng, straight_preference=False)
        if not leg:
            return []
        route.extend(leg[1:])
    return route


__all__ = [
    "STRAIGHT_PREFERENCE",
    "MIN_STEP_COST",
    "find_path",
    "find_path_with_detours",
    "direct_costs",
    "meander_waypoints",
    "plan_meandering",
]
