"""Public layout package interface."""

from .config import LayoutConfig
from .connectivity import open_route, reachable_from, unreachable_rooms
from .convolution import HALLWAY_KERNEL, convolve, room_kernel
from .errors import InvalidLayoutConfig, LayoutError, RoomPlacementFailed
from .geometry import Position, distance, rectilinear_distance
from .grid import DungeonGrid
from .hallways import find_path, find_path_with_detours
from .pipeline import LayoutPipeline, generate_layout
from .rooms import Room
from .tiles import AnchorMode, DescentPolicy, HallwayKind, Opacity, Tile, TileType, merge_tile

__all__ = [
    "AnchorMode",
    "DescentPolicy",
    "DungeonGrid",
    "HALLWAY_KERNEL",
    "HallwayKind",
    "InvalidLayoutConfig",
    "LayoutConfig",
    "LayoutError",
    "LayoutPipeline",
    "Opacity",
    "Position",
    "Room",
    "RoomPlacementFailed",
    "Tile",
    "TileType",
    "convolve",
    "distance",
    "find_path",
    "find_path_with_detours",
    "generate_layout",
    "merge_tile",
    "open_route",
    "reachable_from",
    "rectilinear_distance",
    "room_kernel",
    "unreachable_rooms",
]
