# src/game/config.py
from __future__ import annotations
import dataclasses
from dataclasses import dataclass
from typing import Tuple

# --- Display ---
WIDTH = 960
HEIGHT = 540
FPS = 60
GROUND_H = HEIGHT // 8      # ground strip drawn below the playable area

# --- World / Physics ---
GRAVITY = 1800.0            # downward acceleration (px/s^2)
JUMP_SPEED = 520.0          # magnitude of the upward velocity set by a jump (px/s)
MAX_VY = 1200.0             # clamp vertical velocity
MAX_DT = 1.0 / 30.0         # largest time slice a driver may pass to World.update (s)

# --- Flyer ---
FLYER_HALF_W = 17
FLYER_HALF_H = 12
FLYER_X_RATIO = 1.0 / 3.0   # flyer's fixed x as a fraction of WIDTH
TRAIL_LENGTH = 40           # points kept while the world is traceable

# --- Pipes ---
PIPE_WIDTH = 80
PIPE_GAP_Y = 170            # vertical opening between the two pipes of a pair
PIPE_GAP_X = 260            # horizontal gap between successive pairs
PIPES_SPEED_X = 200.0       # scroll speed (px/s), shared with the ground
PIPES_SPEED_Y = 0.0         # vertical drift of the gap centre (px/s)
INITIAL_PIPE_OFFSET = 200   # first pair starts this far past the right edge
GAP_MARGIN = 40             # keep gaps / rewards this far from top and ground
NUMBER_OF_PIPES = 4

# --- Rewards ---
NUMBER_OF_REWARDS = NUMBER_OF_PIPES
REWARD_SIZE = 24
REWARD_GAP_X = PIPE_WIDTH + PIPE_GAP_X
REWARD_SPEED_X = PIPES_SPEED_X
REWARD_PROBABILITY = 0.5

# --- Ground ---
NUMBER_OF_GROUNDS = 5
GROUND_TILE_WIDTH = 240

# --- Score ---
REWARD_COLLECTED_BONUS = 5
PIPE_PASSED_BONUS = 1

GOD_MODE = False
SEED_DEFAULT = 12345

# --- Colors (RGB) ---
COLOR_BG = (9, 14, 28)
COLOR_FG = (220, 232, 255)
COLOR_ACCENT = (120, 200, 255)
COLOR_PIPE = (33, 120, 68)
COLOR_GROUND = (68, 52, 33)
COLOR_REWARD = (255, 206, 84)
COLOR_TRAIL = (90, 130, 180)
COLOR_DANGER = (255, 86, 110)


class ConfigError(ValueError):
    """Raised when a Constants bundle cannot drive a world."""


@dataclass(frozen=True)
class Constants:
    """
    Tunables for one run. Defaults mirror the module constants above.
    Distances are pixels, speeds px/s, times seconds.
    """
    world_width: float = WIDTH
    world_height: float = HEIGHT
    ground_height: float = GROUND_H

    gravity: float = GRAVITY
    jump_speed: float = JUMP_SPEED
    max_vy: float = MAX_VY
    max_dt: float = MAX_DT

    flyer_half_width: float = FLYER_HALF_W
    flyer_half_height: float = FLYER_HALF_H
    flyer_x_ratio: float = FLYER_X_RATIO

    pipe_width: float = PIPE_WIDTH
    pipe_gap_y: float = PIPE_GAP_Y
    pipe_gap_x: float = PIPE_GAP_X
    pipes_speed_x: float = PIPES_SPEED_X
    pipes_speed_y: float = PIPES_SPEED_Y
    initial_pipe_offset: float = INITIAL_PIPE_OFFSET
    gap_margin: float = GAP_MARGIN
    number_of_pipes: int = NUMBER_OF_PIPES

    number_of_rewards: int = NUMBER_OF_REWARDS
    reward_size: float = REWARD_SIZE
    reward_gap_x: float = REWARD_GAP_X
    reward_speed_x: float = REWARD_SPEED_X
    reward_probability: float = REWARD_PROBABILITY

    number_of_grounds: int = NUMBER_OF_GROUNDS
    ground_tile_width: float = GROUND_TILE_WIDTH

    reward_collected_bonus: int = REWARD_COLLECTED_BONUS
    pipe_passed_bonus: int = PIPE_PASSED_BONUS

    god_mode: bool = GOD_MODE

    # --- derived ---
    @property
    def game_height(self) -> float:
        """Height of the playable area (everything above the ground strip)."""
        return self.world_height - self.ground_height

    @property
    def flyer_x(self) -> float:
        return self.world_width * self.flyer_x_ratio

    @property
    def gap_center_band(self) -> Tuple[float, float]:
        half = self.pipe_gap_y / 2
        return self.gap_margin + half, self.game_height - self.gap_margin - half

    @property
    def reward_band(self) -> Tuple[float, float]:
        half = self.reward_size / 2
        return self.gap_margin + half, self.game_height - self.gap_margin - half

    def replace(self, **changes) -> "Constants":
        return dataclasses.replace(self, **changes).validate()

    def validate(self) -> "Constants":
        """Reject bundles that would make a tick misbehave. Returns self."""
        positive = (
            "world_width", "world_height", "pipe_width", "pipe_gap_y", "pipe_gap_x",
            "flyer_half_width", "flyer_half_height", "reward_size", "reward_gap_x",
            "ground_tile_width", "max_dt", "max_vy",
        )
        for name in positive:
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be > 0, got {getattr(self, name)!r}")

        non_negative = (
            "ground_height", "gravity", "jump_speed", "pipes_speed_x", "pipes_speed_y",
            "reward_speed_x", "initial_pipe_offset", "gap_margin",
            "reward_collected_bonus", "pipe_passed_bonus",
        )
        for name in non_negative:
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0, got {getattr(self, name)!r}")

        for name in ("number_of_pipes", "number_of_rewards", "number_of_grounds"):
            if int(getattr(self, name)) < 1:
                raise ConfigError(f"{name} must be >= 1, got {getattr(self, name)!r}")

        if not 0.0 <= self.reward_probability <= 1.0:
            raise ConfigError(f"reward_probability must be in [0, 1], got {self.reward_probability!r}")
        if not 0.0 < self.flyer_x_ratio < 1.0:
            raise ConfigError(f"flyer_x_ratio must be in (0, 1), got {self.flyer_x_ratio!r}")
        if self.game_height <= 2 * self.flyer_half_height:
            raise ConfigError("ground_height leaves no room for the flyer")
        if self.jump_speed > self.max_vy:
            raise ConfigError(f"jump_speed must be <= max_vy, got {self.jump_speed!r} > {self.max_vy!r}")

        lo, hi = self.gap_center_band
        if lo > hi:
            raise ConfigError("pipe_gap_y plus 2 * gap_margin exceeds the playable height")
        lo, hi = self.reward_band
        if lo > hi:
            raise ConfigError("reward_size plus 2 * gap_margin exceeds the playable height")

        if self.number_of_grounds * self.ground_tile_width < self.world_width + self.ground_tile_width:
            raise ConfigError("ground tiles must cover world_width plus one tile")

        # A conveyor recycles at most one entity per tick: the per-tick shift has
        # to stay below the distance between two successive entities.
        spacings = (
            ("pipes_speed_x", self.pipes_speed_x, self.pipe_width + self.pipe_gap_x),
            ("reward_speed_x", self.reward_speed_x, self.reward_gap_x),
            ("pipes_speed_x", self.pipes_speed_x, self.ground_tile_width),
        )
        for name, speed, spacing in spacings:
            if speed * self.max_dt >= spacing:
                raise ConfigError(
                    f"{name} * max_dt = {speed * self.max_dt:.1f} px must be smaller "
                    f"than the entity spacing ({spacing:.1f} px)"
                )
        return self


DEFAULT_CONSTANTS = Constants()
