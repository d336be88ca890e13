"""Pipeline orchestration for layout generation.

Validates a ``LayoutConfig`` up front, then drives a ``DungeonGrid`` through
its phases in order, retrying rooms that do not fit and timing each phase.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Dict

from dungeongen.logging_utils import get_logger

from .config import LayoutConfig
from .connectivity import unreachable_rooms
from .errors import RoomPlacementFailed
from .grid import DungeonGrid

log = get_logger("dungeongen.pipeline")


class LayoutPipeline:
    def __init__(self, config: LayoutConfig | None = None):
        self.config = (config or LayoutConfig()).validate()
        self.phase_ms: Dict[str, int] = {}

    def _phase(self, label: str, fn: Callable[..., Any], *a, **k):
        if not self.config.enable_metrics:
            return fn(*a, **k)
        ps = time.perf_counter()
        result = fn(*a, **k)
        self.phase_ms[label] = int((time.perf_counter() - ps) * 1000)
        return result

    def run(self) -> DungeonGrid:
        cfg = self.config
        start = time.perf_counter()
        grid = DungeonGrid(cfg.height, cfg.width, seed=cfg.seed, descent=cfg.descent)
        if cfg.include_noise:
            self._phase("noise", grid.generate_noise)
        self._phase("rooms", self._place_rooms, grid)
        if cfg.include_hallways:
            self._phase("hallways", grid.connect_rooms)
        if cfg.place_start_and_goal:
            self._phase("start_and_goal", grid.generate_start_and_goal, cfg.start_goal_hallway)

        if cfg.enable_metrics:
            grid.metrics["unreachable_rooms"] = len(unreachable_rooms(grid))
            grid.metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
            grid.metrics["phase_ms"] = dict(self.phase_ms)
        log.info(
            event="layout_generated",
            seed=grid.seed,
            height=grid.height,
            width=grid.width,
            rooms=len(grid.rooms),
            hallways=grid.metrics["hallways_carved"],
            unreachable=grid.metrics["unreachable_rooms"],
            runtime_ms=grid.metrics["runtime_ms"],
        )
        return grid

    def _place_rooms(self, grid: DungeonGrid) -> None:
        """Place rooms one at a time, resampling sizes when one does not fit.

        After the retries run out the room is skipped, or the failure is
        re-raised when the config is strict.
        """
        cfg = self.config
        for index in range(cfg.room_count):
            for attempt in range(cfg.room_retry_attempts + 1):
                try:
                    grid.place_room(cfg.min_room_size, cfg.max_room_size)
                    break
                except RoomPlacementFailed:
                    if attempt < cfg.room_retry_attempts:
                        continue
                    if cfg.strict:
                        raise
                    grid.metrics["rooms_skipped"] += 1
                    log.warn(event="room_skipped", index=index, attempts=attempt + 1)


def generate_layout(config: LayoutConfig | None = None, **overrides) -> DungeonGrid:
    """Convenience wrapper: ``generate_layout(height=30, width=30, seed=1)``."""
    if config is None:
        config = LayoutConfig(**overrides)
    elif overrides:
        raise TypeError("pass either a LayoutConfig or keyword overrides, not both")
    return LayoutPipeline(config).run()


__all__ = ["LayoutPipeline", "generate_layout"]
