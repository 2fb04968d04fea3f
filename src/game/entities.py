# src/game/entities.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import pygame


@dataclass(frozen=True)
class Box:
    """Axis-aligned box in float world coordinates (y grows downward)."""
    left: float
    top: float
    right: float
    bottom: float

    def overlaps(self, other: "Box") -> bool:
        # open intervals: boxes that only share an edge do not overlap
        return (self.left < other.right and self.right > other.left
                and self.top < other.bottom and self.bottom > other.top)

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.left), int(self.top),
                           int(self.right - self.left), int(self.bottom - self.top))


@dataclass(eq=False)
class ObstaclePair:
    """
    Two pipes sharing a vertical gap. `x` is the leading (left) edge and
    `gap_y` the centre of the opening. `slot` is the pair's fixed index in
    its pool; it survives recycling.
    """
    slot: int
    x: float
    gap_y: float
    width: float
    gap_height: float
    world_height: float
    drift_dir: int = 1   # +1 drifts down, -1 drifts up

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def gap_top(self) -> float:
        return self.gap_y - self.gap_height / 2

    @property
    def gap_bottom(self) -> float:
        return self.gap_y + self.gap_height / 2

    def boxes(self) -> Tuple[Box, Box]:
        """(upper pipe, lower pipe)"""
        return (Box(self.x, 0.0, self.right, self.gap_top),
                Box(self.x, self.gap_bottom, self.right, self.world_height))

    def translate(self, dx: float):
        self.x -= dx

    def drift(self, dy: float, band: Tuple[float, float]):
        """Move the gap centre by dy along drift_dir, bouncing off the band limits."""
        lo, hi = band
        y = self.gap_y + self.drift_dir * dy
        if y > hi:
            y = hi - (y - hi)
            self.drift_dir = -1
        elif y < lo:
            y = lo + (lo - y)
            self.drift_dir = 1
        self.gap_y = min(hi, max(lo, y))


@dataclass(eq=False)
class Collectible:
    """A bonus item. Invisible collectibles keep moving but cannot be picked up."""
    slot: int
    cx: float
    cy: float
    size: float
    visible: bool = True
    frame: int = 0

    @property
    def left(self) -> float:
        return self.cx - self.size / 2

    @property
    def right(self) -> float:
        return self.cx + self.size / 2

    @property
    def box(self) -> Box:
        half = self.size / 2
        return Box(self.cx - half, self.cy - half, self.cx + half, self.cy + half)

    def translate(self, dx: float):
        self.cx -= dx


@dataclass(eq=False)
class GroundTile:
    slot: int
    x: float
    width: float
    y: float        # top of the ground strip
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def box(self) -> Box:
        return Box(self.x, self.y, self.right, self.y + self.height)

    def translate(self, dx: float):
        self.x -= dx
