# src/game/flyer.py
from __future__ import annotations
import threading
import pygame
from dataclasses import dataclass
from .entities import Box
from .physics import shift_y, velocity_after
from .config import GRAVITY, MAX_VY


class ActionLatch:
    """
    Single-shot jump request. `request()` may be called any number of times
    (from any thread) between two ticks; `consume()` returns True once and clears it.
    """
    def __init__(self):
        self._lock = threading.Lock()
        self._set = False

    def request(self):
        with self._lock:
            self._set = True

    def consume(self) -> bool:
        with self._lock:
            was_set, self._set = self._set, False
        return was_set

    def clear(self):
        with self._lock:
            self._set = False

    @property
    def is_set(self) -> bool:
        return self._set


@dataclass
class Flyer:
    """
    The controllable actor. (x, y) is the centre; x stays fixed while the
    world scrolls left. Positive vy points down.
    """
    x: float
    y: float
    vy: float
    half_w: float
    half_h: float
    frame: int = 0

    @property
    def left(self) -> float:
        return self.x - self.half_w

    @property
    def right(self) -> float:
        return self.x + self.half_w

    @property
    def top(self) -> float:
        return self.y - self.half_h

    @property
    def bottom(self) -> float:
        return self.y + self.half_h

    @property
    def box(self) -> Box:
        return Box(self.left, self.top, self.right, self.bottom)

    @property
    def rect(self) -> pygame.Rect:
        return self.box.rect

    def jump(self, jump_speed: float, dt: float, gravity: float = GRAVITY, max_vy: float = MAX_VY):
        """Velocity becomes exactly -jump_speed; position advances one slice from it."""
        vy = -jump_speed
        self.y += shift_y(vy, dt, gravity, max_vy)
        self.vy = vy

    def fall(self, dt: float, gravity: float = GRAVITY, max_vy: float = MAX_VY):
        """Integrate one slice of free fall."""
        dy = shift_y(self.vy, dt, gravity, max_vy)
        self.vy = velocity_after(self.vy, dt, gravity, max_vy)
        self.y += dy
