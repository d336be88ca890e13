"""Exceptions raised by the layout engine."""


class LayoutError(Exception):
    """Base class for layout generation failures."""


class RoomPlacementFailed(LayoutError):
    """No footprint of the sampled size fits inside the grid interior."""

    def __init__(self, height: int, width: int, grid_height: int, grid_width: int):
        self.height = height
        self.width = width
        super().__init__(
            f"no valid position for a {height}x{width} room in a {grid_height}x{grid_width} grid"
        )


class InvalidLayoutConfig(LayoutError, ValueError):
    """Generation parameters that can never produce a layout."""


__all__ = ["LayoutError", "RoomPlacementFailed", "InvalidLayoutConfig"]
