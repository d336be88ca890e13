from collections import deque

from dungeongen.layout import Opacity, TileType


def perimeter_positions(grid):
    for x in range(grid.height):
        for y in range(grid.width):
            if x in (0, grid.height - 1) or y in (0, grid.width - 1):
                yield x, y


def perimeter_untouched(grid):
    return all(
        grid[x][y].opacity is Opacity.CLOSED and grid[x][y].type is TileType.NONE
        for x, y in perimeter_positions(grid)
    )


def bfs_open(grid, start):
    """Return set of (x,y) open tiles reachable from start, scanning the whole array."""
    h = grid.height
    w = grid.width
    sx, sy = start
    if grid[sx][sy].opacity is not Opacity.OPEN:
        return set()
    q = deque([(sx, sy)])
    vis = {(sx, sy)}
    while q:
        x, y = q.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if 0 <= nx < h and 0 <= ny < w and (nx, ny) not in vis:
                if grid[nx][ny].opacity is Opacity.OPEN:
                    vis.add((nx, ny))
                    q.append((nx, ny))
    return vis


def is_axis_chain(route):
    """Every consecutive pair is one axis step apart."""
    return all(abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1 for a, b in zip(route, route[1:]))


def type_map(grid):
    return [[tile.type for tile in row] for row in grid.grid]


def opacity_map(grid):
    return [[tile.opacity for tile in row] for row in grid.grid]
