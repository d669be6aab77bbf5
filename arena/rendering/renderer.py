"""Arena renderer: draws platforms, fighters, lightning and fireballs.

Reads engine state only; it never advances anything. Whatever a client
has mirrored from the host is what ends up on screen, so bolts look the
same on every participant.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import pygame

from arena.config import (
    COLOR_BG,
    COLOR_DEBUG_TEXT,
    COLOR_FIGHTERS,
    COLOR_GROUND,
    COLOR_PLATFORM,
    COLOR_PLATFORM_TOP,
    FLASH_DURATION,
    HIT_FLASH_DURATION,
    STRIKE_RADIUS,
    WARNING_DURATION,
)
from arena.simulation.lightning import LightningEngine
from arena.simulation.projectiles import Fireball, ProjectileEngine
from arena.simulation.targets import ArenaBounds, Fighter
from arena.simulation.terrain import TerrainAnimator


class Renderer:
    """Draws one participant's view of the arena."""

    def __init__(self, screen: pygame.Surface, bounds: ArenaBounds | None = None) -> None:
        self._screen = screen
        self._bounds = bounds if bounds is not None else ArenaBounds()
        # Translucent effects are composed here, then blitted once per frame
        self._overlay = pygame.Surface(
            (screen.get_width(), screen.get_height()), pygame.SRCALPHA,
        )
        self._font: pygame.font.Font | None = None

    def draw(
        self,
        terrain: TerrainAnimator,
        fighters: Sequence[Fighter],
        projectiles: ProjectileEngine,
        lightning: LightningEngine,
        debug_info: dict[str, str] | None = None,
    ) -> None:
        """Render a full frame (does not flip the display)."""
        self._screen.fill(COLOR_BG)
        self._overlay.fill((0, 0, 0, 0))
        self._draw_strike_flash(lightning)
        self._draw_ground()
        self._draw_platforms(terrain)
        self._draw_fighters(fighters)
        self._draw_projectiles(projectiles)
        self._draw_lightning(lightning)
        self._screen.blit(self._overlay, (0, 0))
        if debug_info:
            self._draw_debug(debug_info)

    def _draw_ground(self) -> None:
        ground = int(self._bounds.ground_y)
        height = max(0, self._screen.get_height() - ground)
        pygame.draw.rect(
            self._screen, COLOR_GROUND, (0, ground, self._screen.get_width(), height),
        )

    def _draw_platforms(self, terrain: TerrainAnimator) -> None:
        for plat in terrain.platforms:
            rect = pygame.Rect(int(plat.left), int(plat.top), int(plat.width), int(plat.height))
            pygame.draw.rect(self._screen, COLOR_PLATFORM, rect)
            pygame.draw.rect(self._screen, COLOR_PLATFORM_TOP, (rect.x, rect.y, rect.w, 4))

    def _draw_fighters(self, fighters: Sequence[Fighter]) -> None:
        for i, f in enumerate(fighters):
            if not f.is_alive:
                continue
            color = COLOR_FIGHTERS[i % len(COLOR_FIGHTERS)]
            rect = pygame.Rect(
                int(f.x - f.width / 2), int(f.y - f.height / 2), int(f.width), int(f.height),
            )
            pygame.draw.rect(self._screen, color, rect)
            if f.hit_flash > 0:
                alpha = int(255 * 0.6 * min(1.0, f.hit_flash / HIT_FLASH_DURATION))
                pygame.draw.rect(self._overlay, (255, 255, 255, alpha), rect)

    def _draw_projectiles(self, engine: ProjectileEngine) -> None:
        overlay = self._overlay
        for fb in engine.projectiles:
            for pt in fb.particles:
                alpha = int(255 * 0.7 * max(0.0, pt.life / pt.max_life))
                _circle(overlay, (255, 178, 51, alpha), pt.x, pt.y, pt.radius)
        for fb in engine.projectiles:
            self._draw_fireball(fb)

        for effect in engine.effects:
            ring_alpha = max(0.0, 1 - effect.age / 0.4)
            ring_radius = 10 + effect.age * 120
            if ring_alpha > 0:
                pygame.draw.circle(
                    overlay, (255, 204, 51, int(255 * ring_alpha * 0.5)),
                    (int(effect.x), int(effect.y)), int(ring_radius), 3,
                )
            for pt in effect.particles:
                frac = max(0.0, pt.life / pt.max_life)
                _circle(overlay, (255, 230, 77, int(255 * frac)), pt.x, pt.y, pt.radius * frac)

    def _draw_fireball(self, fb: Fireball) -> None:
        overlay = self._overlay
        d = fb.direction
        _circle(overlay, (255, 153, 0, 64), fb.x, fb.y, fb.radius * 2.0)
        _circle(overlay, (255, 178, 51, 230), fb.x, fb.y, fb.radius)
        _circle(overlay, (255, 255, 178, 204), fb.x + d * 2, fb.y, fb.radius * 0.45)
        tail = fb.radius + 20 + math.sin(fb.age * 14) * 5
        pygame.draw.polygon(overlay, (255, 128, 25, 128), [
            (fb.x - d * fb.radius, fb.y - 5),
            (fb.x - d * tail, fb.y),
            (fb.x - d * fb.radius, fb.y + 5),
        ])

    def _draw_strike_flash(self, engine: LightningEngine) -> None:
        """Whole-screen tint while a bolt is fresh, strongest for the newest one."""
        if not engine.strikes:
            return
        alpha = max(1.0 - s.age / FLASH_DURATION for s in engine.strikes)
        self._overlay.fill((255, 255, 255, int(255 * max(0.0, alpha) * 0.08)))

    def _draw_lightning(self, engine: LightningEngine) -> None:
        overlay = self._overlay
        ground = self._bounds.ground_y

        for w in engine.warnings:
            pulse = 0.5 + 0.5 * math.sin(w.age * 12)
            alpha = 0.3 + 0.4 * pulse
            radius = STRIKE_RADIUS * (0.5 + 0.5 * (w.age / WARNING_DURATION))
            pygame.draw.circle(
                overlay, (255, 255, 77, int(255 * alpha)), (int(w.x), int(ground)), int(radius), 2,
            )
            cross = (255, 255, 0, int(255 * alpha * 0.6))
            pygame.draw.line(overlay, cross, (w.x - 10, ground), (w.x + 10, ground))
            pygame.draw.line(overlay, cross, (w.x, ground - 10), (w.x, ground + 10))

        for s in engine.strikes:
            alpha = max(0.0, 1.0 - s.age / FLASH_DURATION)
            for width, color, strength in ((12, (153, 153, 255), 0.3), (3, (230, 230, 255), 0.9)):
                rgba = (*color, int(255 * alpha * strength))
                for seg in s.segments:
                    pygame.draw.line(overlay, rgba, (seg.x1, seg.y1), (seg.x2, seg.y2), width)
            _circle(overlay, (255, 255, 204, int(255 * alpha * 0.6)), s.x, ground, 20 + 30 * (1 - alpha))

    def _draw_debug(self, info: dict[str, str]) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont("monospace", 16)
        y = 8
        for key, value in info.items():
            text = self._font.render(f"{key}: {value}", True, COLOR_DEBUG_TEXT)
            self._screen.blit(text, (8, y))
            y += 18


def _circle(surface: pygame.Surface, color, x: float, y: float, radius: float) -> None:
    if radius < 1:
        return
    pygame.draw.circle(surface, color, (int(x), int(y)), int(radius))
