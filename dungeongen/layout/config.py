import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from .errors import InvalidLayoutConfig
from .tiles import DescentPolicy, HallwayKind

_TRUE = {"1", "true", "yes", "on"}


@dataclass
class LayoutConfig:
    height: int = 40
    width: int = 60
    room_count: int = 8
    min_room_size: int = 3
    max_room_size: int = 12
    include_hallways: bool = True
    include_noise: bool = False
    place_start_and_goal: bool = True
    start_goal_hallway: Optional[HallwayKind] = None
    descent: DescentPolicy = DescentPolicy.GREEDY
    seed: Optional[int] = None
    room_retry_attempts: int = 3
    strict: bool = False
    enable_metrics: bool = True

    def validate(self) -> "LayoutConfig":
        """Reject parameters the engine can never satisfy; returns self for chaining."""
        if self.height < 3 or self.width < 3:
            raise InvalidLayoutConfig(f"grid must be at least 3x3, got {self.height}x{self.width}")
        if self.room_count < 0:
            raise InvalidLayoutConfig(f"room_count must be >= 0, got {self.room_count}")
        if self.min_room_size < 1:
            raise InvalidLayoutConfig(f"min_room_size must be >= 1, got {self.min_room_size}")
        if self.min_room_size > self.max_room_size:
            raise InvalidLayoutConfig(
                f"min_room_size {self.min_room_size} exceeds max_room_size {self.max_room_size}"
            )
        if self.room_count and self.max_room_size > min(self.height, self.width) - 2:
            # Every sampled size has to clear the perimeter ring on both sides.
            raise InvalidLayoutConfig(
                f"max_room_size {self.max_room_size} cannot fit a {self.height}x{self.width} grid"
            )
        if self.room_retry_attempts < 0:
            raise InvalidLayoutConfig("room_retry_attempts must be >= 0")
        return self

    @classmethod
    def from_env(cls, prefix: str = "DUNGEONGEN_", environ: Mapping[str, str] | None = None) -> "LayoutConfig":
        """Build a config from ``<prefix><FIELD>`` variables, e.g. ``DUNGEONGEN_ROOM_COUNT=5``."""
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = environ.get(prefix + f.name.upper())
            if raw is None or raw == "":
                continue
            values[f.name] = _coerce(f.name, raw)
        return cls(**values)


def _coerce(name: str, raw: str):
    if name in ("include_hallways", "include_noise", "place_start_and_goal", "strict", "enable_metrics"):
        return raw.strip().lower() in _TRUE
    try:
        if name == "start_goal_hallway":
            return HallwayKind(raw.strip().lower())
        if name == "descent":
            return DescentPolicy(raw.strip().lower())
        return int(raw)
    except ValueError as exc:
        raise InvalidLayoutConfig(f"invalid value for {name}: {raw!r}") from exc


__all__ = ["LayoutConfig"]
