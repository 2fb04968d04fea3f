# src/env/observations.py
from __future__ import annotations
from typing import Optional
import numpy as np

from src.game.config import Constants, DEFAULT_CONSTANTS
from src.game.world import EnvironmentScan

OBS_SIZE = 6
OBS_LOW = np.array([0.0, -1.0, 0.0, 0.0, 0.0, 0.0], dtype=np.float32)
OBS_HIGH = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)


def _clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)

def _norm_y(y: Optional[float], game_height: float, missing: float) -> float:
    if y is None:
        return missing
    return _clamp01(y / max(1.0, game_height))

def build_observation(scan: EnvironmentScan, constants: Constants = DEFAULT_CONSTANTS) -> np.ndarray:
    """
    Returns a fixed (6,) float32 vector:
      [ y_norm, vy_norm, dx_norm, gap_top_norm, gap_bottom_norm, next_gap_norm ]
    - y_norm      flyer centre over the playable height, in [0,1]
    - vy_norm     vy / max_vy clipped to [-1,1]
    - dx_norm     horizontal distance from the flyer centre to the nearest pair ahead,
                  over the screen width; 1.0 when there is none
    - gap_*_norm  nearest gap bounds in [0,1]; sentinels 0.0 (top) / 1.0 (bottom) when absent
    - next_gap_norm  gap centre of the pair after it; 0.5 when absent
    """
    h = constants.game_height
    vy_max = float(max(1.0, constants.max_vy))

    y_norm = _norm_y(scan.flyer_y, h, 0.5)
    vy_norm = max(-1.0, min(1.0, scan.flyer_vy / vy_max))
    if scan.pipe_x is None:
        dx_norm = 1.0
    else:
        dx_norm = _clamp01((scan.pipe_x - scan.flyer_x) / float(constants.world_width))

    feats = [
        y_norm,
        vy_norm,
        dx_norm,
        _norm_y(scan.gap_top, h, 0.0),
        _norm_y(scan.gap_bottom, h, 1.0),
        _norm_y(scan.next_gap_y, h, 0.5),
    ]
    return np.clip(np.asarray(feats, dtype=np.float32), OBS_LOW, OBS_HIGH)
