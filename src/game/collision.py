# src/game/collision.py
"""
Flyer-vs-world collision tests. All boxes use open intervals, so touching
edges never count as a hit, matching pygame.Rect.colliderect.
"""
from __future__ import annotations
from typing import Iterable, List, Optional

from .entities import Collectible, ObstaclePair
from .flyer import Flyer

CAUSE_PIPE = "pipe"
CAUSE_TOP = "top"
CAUSE_BOTTOM = "bottom"


def hits_pipe(flyer: Flyer, pipe: ObstaclePair) -> bool:
    me = flyer.box
    upper, lower = pipe.boxes()
    return me.overlaps(upper) or me.overlaps(lower)


def out_of_bounds(flyer: Flyer, game_height: float) -> Optional[str]:
    """'top' / 'bottom' if the flyer's box sticks out of [0, game_height], else None."""
    if flyer.top < 0:
        return CAUSE_TOP
    if flyer.bottom > game_height:
        return CAUSE_BOTTOM
    return None


def collision_cause(flyer: Flyer, pipes: Iterable[ObstaclePair], game_height: float) -> Optional[str]:
    if any(hits_pipe(flyer, p) for p in pipes):
        return CAUSE_PIPE
    return out_of_bounds(flyer, game_height)


def has_collided(flyer: Flyer, pipes: Iterable[ObstaclePair], game_height: float) -> bool:
    return collision_cause(flyer, pipes, game_height) is not None


def touched_rewards(flyer: Flyer, rewards: Iterable[Collectible]) -> List[Collectible]:
    """Visible rewards whose box overlaps the flyer."""
    me = flyer.box
    return [r for r in rewards if r.visible and me.overlaps(r.box)]
