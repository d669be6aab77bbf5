"""Arena demo entry point.

Runs a host session and a mirroring client session in one process,
joined by a loopback channel, and renders the client's view so what you
see is exactly what a remote participant would see.

Usage:
    python -m arena.main
    python -m arena.main --fighters 3 --seed 7 -v

Keys: SPACE casts a fireball from fighter 1 at fighter 2, R starts a new
round, ESC quits.
"""

from __future__ import annotations

import argparse
import logging
import random

import pygame

from arena.config import FIGHTER_WILL, FPS, GROUND_Y, SCREEN_HEIGHT, SCREEN_WIDTH, SIM_DT
from arena.networking.channel import LoopbackChannel
from arena.rendering.renderer import Renderer
from arena.session import Role, Session
from arena.simulation.events import HazardHit, ProjectileHit, SoundCue, StrikeLanded
from arena.simulation.targets import Fighter

logger = logging.getLogger(__name__)

SHAKE_DURATION = 0.3
SHAKE_MAGNITUDE = 6
WILL_REGEN = 5  # will per second in the demo


def make_fighters(count: int) -> list[Fighter]:
    """Space ``count`` fighters evenly across the arena floor."""
    spacing = SCREEN_WIDTH / (count + 1)
    fighters = []
    for i in range(count):
        f = Fighter(target_id=i + 1, x=spacing * (i + 1), y=0.0)
        f.y = GROUND_Y - f.height / 2
        fighters.append(f)
    return fighters


def main() -> None:
    parser = argparse.ArgumentParser(description="Arena: lightning and fireball replication demo")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the host RNG")
    parser.add_argument(
        "--fighters", type=int, choices=(2, 3), default=2,
        help="Number of fighters in the arena",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    pygame.init()
    screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
    pygame.display.set_caption("Arena")
    try:
        _run(screen, args.seed, args.fighters)
    finally:
        pygame.quit()


def _run(screen: pygame.Surface, seed: int | None, fighter_count: int) -> None:
    host_end, client_end = LoopbackChannel.pair()
    host = Session(Role.HOST, host_end, rng=random.Random(seed))
    client = Session(Role.CLIENT, client_end)
    fighters = make_fighters(fighter_count)

    shake = {"time": 0.0}

    def on_strike(_event: StrikeLanded) -> None:
        shake["time"] = SHAKE_DURATION

    client.events.subscribe(StrikeLanded, on_strike)
    host.events.subscribe(
        HazardHit, lambda e: logger.info("Lightning hit for %.0f at x=%.0f", e.damage, e.x),
    )
    host.events.subscribe(
        ProjectileHit, lambda e: logger.info("Fireball hit fighter %d for %.0f", e.target_id, e.damage),
    )
    host.events.subscribe(SoundCue, lambda e: logger.debug("Sound: %s", e.name))

    view = pygame.Surface(screen.get_size())
    renderer = Renderer(view)
    clock = pygame.time.Clock()

    host.start_round()
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    _cast(host, client, fighters)
                elif event.key == pygame.K_r:
                    for f, fresh in zip(fighters, make_fighters(len(fighters))):
                        f.life, f.will, f.armor = fresh.life, fresh.will, fresh.armor
                    host.start_round()

        host.step(SIM_DT, fighters)
        client.step(SIM_DT, fighters)
        for f in fighters:
            f.hit_flash = max(0.0, f.hit_flash - SIM_DT)
            f.will = min(FIGHTER_WILL, f.will + WILL_REGEN * SIM_DT)

        debug_info = {
            "Tick": str(client.last_applied_tick),
            "Round": str(client.round_number),
            "Next strike": f"{client.lightning.next_strike_timer:.1f}s",
            "Life": " ".join(f"{f.life:.0f}" for f in fighters),
            "FPS": str(int(clock.get_fps())),
        }
        renderer.draw(client.terrain, fighters, client.projectiles, client.lightning, debug_info)
        dx = dy = 0.0
        if shake["time"] > 0:
            shake["time"] -= SIM_DT
            dx = random.uniform(-SHAKE_MAGNITUDE, SHAKE_MAGNITUDE)
            dy = random.uniform(-SHAKE_MAGNITUDE, SHAKE_MAGNITUDE)
        screen.fill((0, 0, 0))
        screen.blit(view, (dx, dy))
        pygame.display.flip()
        clock.tick(FPS)

    host.channel.close()


def _cast(host: Session, client: Session, fighters: list[Fighter]) -> None:
    """Fire from fighter 1 at fighter 2 on both participants.

    Ability input is replicated separately in a real match; here both
    sessions simply see the same cast.
    """
    caster, target = fighters[0], fighters[1]
    will_before = caster.will
    if not host.projectiles.spawn_fireball(caster, target):
        logger.info("Not enough will (%.0f)", caster.will)
        return
    # the client engine mirrors the cast without paying for it twice
    caster.will = will_before
    client.projectiles.spawn_fireball(caster, target)


if __name__ == "__main__":
    main()
