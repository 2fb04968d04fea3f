# src/game/world.py
from __future__ import annotations
import logging
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, List, Optional, Tuple

from .collision import collision_cause
from .config import DEFAULT_CONSTANTS, TRAIL_LENGTH, Constants
from .conveyor import Conveyor, GroundKind, PipeKind, RewardKind
from .entities import Collectible, GroundTile, ObstaclePair
from .flyer import ActionLatch, Flyer
from .physics import shift_x
from .score import ScoreListener, ScoreTracker, nearest_pipe_ahead

log = logging.getLogger(__name__)


class TickResult(Enum):
    CONTINUE = "continue"
    GAME_OVER = "game_over"


class WorldStatus(Enum):
    RUNNING = "running"
    OVER = "over"


@dataclass(frozen=True)
class EnvironmentScan:
    """Read-only snapshot handed to scan hooks after each successful tick."""
    tick: int
    flyer_x: float
    flyer_y: float
    flyer_vy: float
    flyer_half_w: float
    flyer_half_h: float
    pipe_x: Optional[float]          # nearest pair ahead
    pipe_right: Optional[float]
    gap_top: Optional[float]
    gap_bottom: Optional[float]
    next_gap_y: Optional[float]      # gap centre of the pair after it
    reward_x: Optional[float]        # nearest visible reward ahead
    reward_y: Optional[float]
    score: int
    passed: int
    distance: float


ScanHook = Callable[[EnvironmentScan], None]


class World:
    """
    One flyer, three conveyors (pipes, rewards, ground) and the score.

    Drive it by calling `update(dt)` once per frame; it returns
    TickResult.GAME_OVER once the flyer has crashed. Input sources call
    `request_jump()` whenever they like; the next tick consumes it.
    """
    def __init__(self, constants: Optional[Constants] = None, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None):
        self.c = (constants or DEFAULT_CONSTANTS).validate()
        self.rng = rng if rng is not None else random.Random()
        if seed is None:
            # an injected source also picks the layout seed
            seed = self.rng.randrange(0, 2**32 - 1) if rng is not None else random.randrange(0, 2**32 - 1)
        self.seed = seed

        self.invulnerable = self.c.god_mode
        self.traceable = False
        self.trail: Deque[Tuple[float, float]] = deque(maxlen=TRAIL_LENGTH)  # (distance, flyer y)
        self.jump = ActionLatch()
        self.tracker = ScoreTracker(self.c)
        self._scan_hooks: List[ScanHook] = []
        self.last_scan: Optional[EnvironmentScan] = None

        self._init_world()

    # -------------------- Layout --------------------

    def _init_world(self):
        """Build the initial layout from self.seed. Same seed, same layout."""
        self.rng.seed(self.seed)
        c = self.c

        self.flyer = Flyer(x=c.flyer_x, y=c.game_height / 2, vy=0.0,
                           half_w=c.flyer_half_width, half_h=c.flyer_half_height)

        # rewards sit halfway between two pipes
        first_pipe_x = c.world_width + c.initial_pipe_offset
        first_reward_x = first_pipe_x + c.pipe_width + c.pipe_gap_x / 2
        pipe_kind = PipeKind(c, self.rng)
        reward_kind = RewardKind(c, self.rng)
        self.pipes: Conveyor[ObstaclePair] = Conveyor.laid_out(pipe_kind, c.number_of_pipes, first_pipe_x)
        self.rewards: Conveyor[Collectible] = Conveyor.laid_out(reward_kind, c.number_of_rewards, first_reward_x)
        self.grounds: Conveyor[GroundTile] = Conveyor.laid_out(GroundKind(c), c.number_of_grounds, 0.0)

        self.status = WorldStatus.RUNNING
        self.death_cause: Optional[str] = None
        self.ticks = 0
        self.distance = 0.0
        self.trail.clear()
        self.jump.clear()
        self.tracker.reset(nearest_pipe_ahead(self.flyer, self.pipes))
        self.last_scan = None

    def reset(self, seed: Optional[int] = None):
        """Back to the initial layout. Keeps the current seed unless one is given."""
        if seed is not None:
            self.seed = seed
        self._init_world()
        log.info("world reset (seed=%s)", self.seed)

    # -------------------- Tick --------------------

    def update(self, dt: float) -> TickResult:
        """
        Advance the world by dt seconds:
        collisions -> score -> conveyors -> flyer -> scan hooks.
        """
        if dt < 0 or dt > self.c.max_dt:
            raise ValueError(f"dt must be in [0, {self.c.max_dt}], got {dt!r}")
        if self.status is WorldStatus.OVER:
            return TickResult.GAME_OVER

        if not self.invulnerable:
            cause = collision_cause(self.flyer, self.pipes, self.c.game_height)
            if cause is not None:
                self.status = WorldStatus.OVER
                self.death_cause = cause
                log.info("game over: %s (score=%d, passed=%d)", cause, self.score, self.passed)
                return TickResult.GAME_OVER

        self.tracker.refresh(self.flyer, self.pipes, self.rewards)

        self.pipes.advance(dt)
        self.rewards.advance(dt)
        self.grounds.advance(dt)
        self._move_flyer(dt)

        self.ticks += 1
        self.distance += shift_x(self.c.pipes_speed_x, dt)
        if self.traceable:
            self.trail.append((self.distance, self.flyer.y))

        self.scan_environment()
        return TickResult.CONTINUE

    def _move_flyer(self, dt: float):
        c = self.c
        if self.jump.consume():
            self.flyer.jump(c.jump_speed, dt, c.gravity, c.max_vy)
        else:
            self.flyer.fall(dt, c.gravity, c.max_vy)
        self.flyer.frame += 1

    # -------------------- Input / flags --------------------

    def request_jump(self):
        self.jump.request()

    def set_invulnerable(self, on: bool):
        if on != self.invulnerable:
            log.info("invulnerable %s", "on" if on else "off")
        self.invulnerable = on

    def set_traceable(self, on: bool):
        self.traceable = on
        if not on:
            self.trail.clear()

    # -------------------- Observers --------------------

    def add_score_listener(self, fn: ScoreListener):
        self.tracker.add_listener(fn)

    def add_scan_hook(self, fn: ScanHook):
        self._scan_hooks.append(fn)

    def remove_scan_hook(self, fn: ScanHook):
        self._scan_hooks.remove(fn)

    def scan_environment(self):
        """Called once per successful tick. Subclasses may override to inspect the world."""
        if not self._scan_hooks:
            return
        scan = self.scan()
        self.last_scan = scan
        for fn in list(self._scan_hooks):
            fn(scan)

    def scan(self) -> EnvironmentScan:
        f = self.flyer
        pipes = self.pipes.entities
        nearest = nearest_pipe_ahead(f, pipes)
        following = None
        if nearest is not None:
            i = pipes.index(nearest)
            if i + 1 < len(pipes):
                following = pipes[i + 1]
        reward = next((r for r in self.rewards if r.visible and r.right > f.left), None)

        return EnvironmentScan(
            tick=self.ticks,
            flyer_x=f.x, flyer_y=f.y, flyer_vy=f.vy,
            flyer_half_w=f.half_w, flyer_half_h=f.half_h,
            pipe_x=nearest.x if nearest else None,
            pipe_right=nearest.right if nearest else None,
            gap_top=nearest.gap_top if nearest else None,
            gap_bottom=nearest.gap_bottom if nearest else None,
            next_gap_y=following.gap_y if following else None,
            reward_x=reward.cx if reward else None,
            reward_y=reward.cy if reward else None,
            score=self.score,
            passed=self.passed,
            distance=self.distance,
        )

    # -------------------- Read access --------------------

    @property
    def score(self) -> int:
        return self.tracker.score

    @property
    def passed(self) -> int:
        return self.tracker.passed

    @property
    def is_over(self) -> bool:
        return self.status is WorldStatus.OVER

    @property
    def width(self) -> float:
        return self.c.world_width

    @property
    def height(self) -> float:
        return self.c.world_height

    @property
    def game_height(self) -> float:
        return self.c.game_height
