# src/game/score.py
from __future__ import annotations
from typing import Callable, Iterable, List, Optional

from .collision import touched_rewards
from .config import Constants
from .entities import Collectible, ObstaclePair
from .flyer import Flyer

ScoreListener = Callable[[int, int], None]


def nearest_pipe_ahead(flyer: Flyer, pipes: Iterable[ObstaclePair]) -> Optional[ObstaclePair]:
    """
    First pair (in conveyor order, i.e. ascending x) whose trailing edge is
    still right of the flyer's left edge.
    """
    for pipe in pipes:
        if pipe.right > flyer.left:
            return pipe
    return None


class ScoreTracker:
    """
    Score and passed-pipe counter. A pass is detected when the nearest pair
    ahead changes slot: recycling keeps slots, so a new slot means the
    previous pair has just been cleared.
    """
    def __init__(self, constants: Constants):
        self.c = constants
        self.score = 0
        self.passed = 0
        self.last_slot: Optional[int] = None
        self._listeners: List[ScoreListener] = []

    def add_listener(self, fn: ScoreListener):
        self._listeners.append(fn)

    def remove_listener(self, fn: ScoreListener):
        self._listeners.remove(fn)

    def reset(self, nearest: Optional[ObstaclePair]):
        changed = self.score != 0 or self.passed != 0
        self.score = 0
        self.passed = 0
        self.last_slot = nearest.slot if nearest is not None else None
        if changed:
            self._notify()

    def refresh(self, flyer: Flyer, pipes: Iterable[ObstaclePair], rewards: Iterable[Collectible]) -> int:
        """Apply both score triggers for this tick. Returns the points gained."""
        before = (self.score, self.passed)
        self.collect_rewards(flyer, rewards)
        self.check_passed(flyer, pipes)
        if (self.score, self.passed) != before:
            self._notify()
        return self.score - before[0]

    def collect_rewards(self, flyer: Flyer, rewards: Iterable[Collectible]) -> int:
        gained = 0
        for reward in touched_rewards(flyer, rewards):
            reward.visible = False
            gained += self.c.reward_collected_bonus
        self.score += gained
        return gained

    def check_passed(self, flyer: Flyer, pipes: Iterable[ObstaclePair]) -> bool:
        nearest = nearest_pipe_ahead(flyer, pipes)
        if nearest is None or nearest.slot == self.last_slot:
            return False
        self.score += self.c.pipe_passed_bonus
        self.passed += 1
        self.last_slot = nearest.slot
        return True

    def _notify(self):
        for fn in list(self._listeners):
            fn(self.score, self.passed)
