# src/env/flyer_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from src.game.config import Constants, DEFAULT_CONSTANTS, FPS, COLOR_FG
from src.game.render import draw_world
from src.game.world import World, TickResult
from src.env.observations import build_observation, OBS_LOW, OBS_HIGH


class FlyerEnv(gym.Env):
    """
    Gymnasium environment around World (vector observations).
    - Simulation at 60 Hz (internal).
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Observation: shape (6,), float32 (see build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 30.0,
                 constants: Optional[Constants] = None,
                 alive_reward: float = 0.1):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.constants = (constants or DEFAULT_CONSTANTS).validate()
        self.alive_reward = float(alive_reward)

        # Internal sim timing
        self.sim_fps = 60
        self.dt = 1.0 / self.sim_fps
        assert self.dt <= self.constants.max_dt, "max_dt is smaller than the simulation step"

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            # decisions per second = sim_fps / frame_skip
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        # Actions: 0 = NOOP, 1 = JUMP
        self.action_space = gym.spaces.Discrete(2)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.world: Optional[World] = None
        self.timestep: int = 0                   # number of *decision* steps elapsed

        # Rendering
        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # A given seed fixes the layout; None draws the next one from np_random.
        level_seed = int(seed) if seed is not None else int(self.np_random.integers(0, 2**32 - 1))
        if self.world is None:
            self.world = World(self.constants, seed=level_seed)
        else:
            self.world.reset(seed=level_seed)
        self.timestep = 0

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), self._info()

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.world is not None, "call reset() first"

        if action == 1:
            self.world.request_jump()

        score_before = self.world.score
        result = TickResult.CONTINUE
        for _ in range(self.frame_skip):
            result = self.world.update(self.dt)
            if result is TickResult.GAME_OVER:
                break

        terminated = result is TickResult.GAME_OVER
        if terminated:
            reward = -1.0
        else:
            reward = self.alive_reward + float(self.world.score - score_before)

        self.timestep += 1
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = not terminated

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), float(reward), terminated, truncated, self._info()

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.world is not None
        return build_observation(self.world.scan(), self.constants)

    def _info(self) -> Dict[str, Any]:
        w = self.world
        return {
            "seed": w.seed,
            "score": w.score,
            "passed": w.passed,
            "distance_px": w.distance,
            "timestep": self.timestep,
            "death_cause": w.death_cause,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.world is None:
            return None

        size = (int(self.constants.world_width), int(self.constants.world_height))
        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode(size)
                pygame.display.set_caption("Neural Bird - FlyerEnv")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface(size)
            pygame.font.init()
            self.font = pygame.font.SysFont("jetbrainsmono", 18)

        draw_world(self.screen, self.world)
        hud = f"Score: {self.world.score}   Passed: {self.world.passed}"
        self.screen.blit(self.font.render(hud, True, COLOR_FG), (12, 10))

        if self.render_mode == "human":
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        # Return an (H, W, 3) uint8 array
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
