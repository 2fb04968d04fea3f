# src/game/render.py
from __future__ import annotations
import pygame
from .config import (
    COLOR_BG, COLOR_PIPE, COLOR_GROUND, COLOR_REWARD, COLOR_ACCENT, COLOR_DANGER, COLOR_TRAIL
)
from .world import World


def draw_world(surf: pygame.Surface, world: World):
    """Draw pipes, rewards, ground, trail and flyer. No HUD."""
    surf.fill(COLOR_BG)

    for pipe in world.pipes:
        upper, lower = pipe.boxes()
        pygame.draw.rect(surf, COLOR_PIPE, upper.rect)
        pygame.draw.rect(surf, COLOR_PIPE, lower.rect)

    for reward in world.rewards:
        if not reward.visible:
            continue
        # pulse a little with the animation frame
        r = int(reward.size / 2) - (reward.frame // 8) % 3
        pygame.draw.circle(surf, COLOR_REWARD, (int(reward.cx), int(reward.cy)), max(2, r))

    for tile in world.grounds:
        pygame.draw.rect(surf, COLOR_GROUND, tile.box.rect)
        pygame.draw.line(surf, COLOR_BG, (int(tile.x), int(tile.y)), (int(tile.x), int(tile.y + tile.height)), 1)

    if world.traceable and len(world.trail) > 1:
        # the flyer's x never changes: older points sit further left by the distance scrolled since
        fx = world.flyer.x
        pts = [(int(fx - (world.distance - d)), int(y)) for d, y in world.trail]
        pygame.draw.lines(surf, COLOR_TRAIL, False, pts, 2)

    color = COLOR_DANGER if world.is_over else COLOR_ACCENT
    pygame.draw.rect(surf, color, world.flyer.rect)
