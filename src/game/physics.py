# src/game/physics.py
"""Kinematics for a side-scroller: constant-speed scrolling and gravity on one axis."""
from __future__ import annotations
from .config import GRAVITY, MAX_VY


def shift_x(speed: float, dt: float) -> float:
    """Horizontal displacement over dt at constant speed."""
    return speed * dt


def velocity_after(vy: float, dt: float, gravity: float = GRAVITY, max_vy: float = MAX_VY) -> float:
    """Vertical velocity after dt under constant downward acceleration, clamped to +/-max_vy."""
    vy = vy + gravity * dt
    if vy > max_vy: vy = max_vy
    if vy < -max_vy: vy = -max_vy
    return vy


def shift_y(vy: float, dt: float, gravity: float = GRAVITY, max_vy: float = MAX_VY) -> float:
    """
    Vertical displacement over dt starting at vy.
    Uses the mean of the start and end velocities, which is exact
    (vy*dt + g*dt^2/2) while the velocity is not clamped.
    """
    return 0.5 * (vy + velocity_after(vy, dt, gravity, max_vy)) * dt
