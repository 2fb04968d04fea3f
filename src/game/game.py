# src/game/game.py
import sys, argparse, logging, random
import pygame
from pygame import K_SPACE, K_ESCAPE, K_r, K_n, K_g, K_t
from .config import WIDTH, HEIGHT, FPS, COLOR_FG, SEED_DEFAULT, Constants
from .render import draw_world
from .world import World, TickResult


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Layout seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--god", action="store_true", help="Start invulnerable")
    p.add_argument("--log-level", default="WARNING")
    return p.parse_args()


def run():
    args = parse_args()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Resolve seed: None -> use SEED_DEFAULT; -1 -> random
    if args.seed is None:
        launch_seed = SEED_DEFAULT
    elif args.seed == -1:
        launch_seed = None  # signals World to randomize
    else:
        launch_seed = args.seed

    constants = Constants(world_width=WIDTH, world_height=HEIGHT, god_mode=args.god)
    world = World(constants, seed=launch_seed)

    pygame.init()
    pygame.display.set_caption("Neural Bird")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 18)

    while True:
        dt = clock.tick(FPS) / 1000.0
        if dt > constants.max_dt:  # clamp stalls
            dt = constants.max_dt

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if event.type == pygame.KEYDOWN:
                if event.key == K_ESCAPE:
                    pygame.quit(); sys.exit()
                if event.key == K_SPACE and not world.is_over:
                    world.request_jump()
                if event.key == K_r:
                    # Restart SAME seed
                    world.reset()
                if event.key == K_n:
                    # Restart with NEW RANDOM seed
                    world.reset(seed=random.randrange(0, 2**32 - 1))
                if event.key == K_g:
                    world.set_invulnerable(not world.invulnerable)
                if event.key == K_t:
                    world.set_traceable(not world.traceable)
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and not world.is_over:
                world.request_jump()

        if world.update(dt) is TickResult.GAME_OVER:
            state = f"OVER ({world.death_cause})  R to restart"
        else:
            state = "GOD" if world.invulnerable else "ALIVE"

        # --- Render ---
        draw_world(screen, world)

        # HUD shows seed so you can reproduce runs
        hud = f"Seed: {world.seed}   Score: {world.score}   Passed: {world.passed}   {state}"
        screen.blit(font.render(hud, True, COLOR_FG), (12, 10))
        screen.blit(font.render("SPACE jump | R restart | N new seed | G god | T trail | ESC quit",
                                True, (160, 180, 210)), (12, 32))

        pygame.display.flip()


if __name__ == "__main__":
    run()
