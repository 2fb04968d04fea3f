# src/game/conveyor.py
"""
Fixed-size pools that fake an endless world.

A Conveyor keeps its entities ordered left to right. Every tick each entity is
moved by its kind; when the leftmost one has scrolled fully off screen it is
moved behind the rightmost one, re-randomized and appended to the back. No
entity is ever created or dropped after the initial layout.
"""
from __future__ import annotations
import logging
import random
from collections import deque
from typing import Deque, Generic, Iterable, Iterator, Optional, Protocol, Tuple, TypeVar

from .config import Constants
from .entities import Collectible, GroundTile, ObstaclePair
from .physics import shift_x

log = logging.getLogger(__name__)

T = TypeVar("T")


class ConveyorKind(Protocol[T]):
    def spawn(self, slot: int, x: float) -> T:
        """Create the entity for `slot` with its leading position at x."""
        ...

    def translate(self, entity: T, dt: float) -> None:
        ...

    def trailing_edge(self, entity: T) -> float:
        ...

    def next_x(self, entity: T) -> float:
        """Leading position of the entity that follows `entity`."""
        ...

    def respawn(self, entity: T, x: float) -> None:
        """Move a recycled entity to x and redraw its random parameters."""
        ...


class Conveyor(Generic[T]):
    def __init__(self, kind: ConveyorKind[T], entities: Iterable[T] = ()):
        self.kind = kind
        self._queue: Deque[T] = deque(entities)

    @classmethod
    def laid_out(cls, kind: ConveyorKind[T], count: int, start_x: float) -> "Conveyor[T]":
        """Spawn `count` entities from start_x, each placed by the kind's spacing rule."""
        entities = []
        x = start_x
        for slot in range(count):
            entity = kind.spawn(slot, x)
            entities.append(entity)
            x = kind.next_x(entity)
        return cls(kind, entities)

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[T]:
        return iter(self._queue)

    @property
    def entities(self) -> Tuple[T, ...]:
        return tuple(self._queue)

    @property
    def first(self) -> Optional[T]:
        return self._queue[0] if self._queue else None

    @property
    def last(self) -> Optional[T]:
        return self._queue[-1] if self._queue else None

    def advance(self, dt: float) -> Optional[T]:
        """
        Move every entity, then recycle the front one if it left the screen.
        At most one entity is recycled per call. Returns it, or None.
        """
        for entity in self._queue:
            self.kind.translate(entity, dt)

        if not self._queue:
            return None
        first = self._queue[0]
        if self.kind.trailing_edge(first) >= 0:
            return None

        self._queue.popleft()
        last = self._queue[-1] if self._queue else first
        self.kind.respawn(first, self.kind.next_x(last))
        self._queue.append(first)
        log.debug("recycled %s, trailing edge now %.1f", type(first).__name__, self.kind.trailing_edge(first))
        return first


# -------------------- Kinds --------------------

class PipeKind:
    def __init__(self, constants: Constants, rng: random.Random):
        self.c = constants
        self.rng = rng

    def _gap_y(self) -> float:
        return self.rng.uniform(*self.c.gap_center_band)

    def spawn(self, slot: int, x: float) -> ObstaclePair:
        return ObstaclePair(
            slot=slot,
            x=x,
            gap_y=self._gap_y(),
            width=self.c.pipe_width,
            gap_height=self.c.pipe_gap_y,
            world_height=self.c.game_height,
            drift_dir=self.rng.choice((-1, 1)),
        )

    def translate(self, pipe: ObstaclePair, dt: float):
        pipe.translate(shift_x(self.c.pipes_speed_x, dt))
        if self.c.pipes_speed_y:
            pipe.drift(shift_x(self.c.pipes_speed_y, dt), self.c.gap_center_band)

    def trailing_edge(self, pipe: ObstaclePair) -> float:
        return pipe.right

    def next_x(self, pipe: ObstaclePair) -> float:
        return pipe.right + self.c.pipe_gap_x

    def respawn(self, pipe: ObstaclePair, x: float):
        pipe.x = x
        pipe.gap_y = self._gap_y()
        pipe.drift_dir = self.rng.choice((-1, 1))


class RewardKind:
    def __init__(self, constants: Constants, rng: random.Random):
        self.c = constants
        self.rng = rng

    def _draw(self, reward: Collectible):
        reward.cy = self.rng.uniform(*self.c.reward_band)
        reward.visible = self.rng.random() < self.c.reward_probability

    def spawn(self, slot: int, x: float) -> Collectible:
        reward = Collectible(slot=slot, cx=x, cy=0.0, size=self.c.reward_size)
        self._draw(reward)
        return reward

    def translate(self, reward: Collectible, dt: float):
        reward.translate(shift_x(self.c.reward_speed_x, dt))
        reward.frame += 1

    def trailing_edge(self, reward: Collectible) -> float:
        return reward.right

    def next_x(self, reward: Collectible) -> float:
        return reward.cx + self.c.reward_gap_x

    def respawn(self, reward: Collectible, x: float):
        reward.cx = x
        self._draw(reward)


class GroundKind:
    """Ground scrolls in lock-step with the pipes; tiles are packed edge to edge."""
    def __init__(self, constants: Constants):
        self.c = constants

    def spawn(self, slot: int, x: float) -> GroundTile:
        return GroundTile(slot=slot, x=x, width=self.c.ground_tile_width,
                          y=self.c.game_height, height=self.c.ground_height)

    def translate(self, tile: GroundTile, dt: float):
        tile.translate(shift_x(self.c.pipes_speed_x, dt))

    def trailing_edge(self, tile: GroundTile) -> float:
        return tile.right

    def next_x(self, tile: GroundTile) -> float:
        return tile.right

    def respawn(self, tile: GroundTile, x: float):
        tile.x = x
