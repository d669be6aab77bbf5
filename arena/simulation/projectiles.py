"""Fireballs: spawning, horizontal flight, hit detection and spark bursts.

Every participant runs this engine locally. Only the host's engine is
authoritative: it is the one allowed to take life from targets. A client
engine still sees the collision so the fireball vanishes and sparks fly
at the same place, but life changes reach clients through the replicated
fighter state, never through a second local hit.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from arena.config import (
    FIREBALL_DAMAGE,
    FIREBALL_RADIUS,
    FIREBALL_SPAWN_GAP,
    FIREBALL_SPEED,
    FIREBALL_WILL_COST,
    HIT_EFFECT_DURATION,
    HIT_EFFECT_SPARKS,
    HIT_FLASH_DURATION,
    OFFSCREEN_MARGIN_ABOVE,
    OFFSCREEN_MARGIN_BELOW,
    OFFSCREEN_MARGIN_X,
    SPARK_GRAVITY,
    TRAIL_DRIFT,
)
from arena.simulation.events import EventBus, ProjectileHit, SoundCue
from arena.simulation.targets import ArenaBounds, CombatTarget, apply_damage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Particle:
    """Cosmetic point. ``life`` counts down; ``max_life`` drives fading."""
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    life: float
    max_life: float


@dataclass(slots=True)
class Fireball:
    owner_id: int
    target_id: int  # steering at spawn only, never homing
    x: float
    y: float
    vx: float
    vy: float = 0.0
    radius: float = FIREBALL_RADIUS
    age: float = 0.0
    particles: list[Particle] = field(default_factory=list)

    @property
    def direction(self) -> int:
        return 1 if self.vx > 0 else -1


@dataclass(slots=True)
class HitEffect:
    x: float
    y: float
    age: float = 0.0
    particles: list[Particle] = field(default_factory=list)


def circle_hits_box(
    cx: float, cy: float, radius: float,
    box_x: float, box_y: float, width: float, height: float,
) -> bool:
    """Circle vs axis-aligned box given by its center and full extents.

    Touching counts: the test is inclusive at exactly ``radius``.
    """
    left = box_x - width / 2
    top = box_y - height / 2
    closest_x = max(left, min(cx, left + width))
    closest_y = max(top, min(cy, top + height))
    dx = cx - closest_x
    dy = cy - closest_y
    return dx * dx + dy * dy <= radius * radius


class ProjectileEngine:
    """Owns live fireballs and their short-lived hit effects."""

    def __init__(
        self,
        rng: random.Random | None = None,
        bounds: ArenaBounds | None = None,
        events: EventBus | None = None,
        authoritative: bool = True,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._bounds = bounds if bounds is not None else ArenaBounds()
        self._events = events if events is not None else EventBus()
        self.authoritative = authoritative
        self._active: list[Fireball] = []
        self._effects: list[HitEffect] = []

    @property
    def projectiles(self) -> Sequence[Fireball]:
        return self._active

    @property
    def effects(self) -> Sequence[HitEffect]:
        return self._effects

    def spawn_fireball(self, caster: CombatTarget, target: CombatTarget) -> bool:
        """Launch a fireball from ``caster`` toward where ``target`` is now.

        Returns False, changing nothing, when the caster lacks the will.
        """
        if caster.will < FIREBALL_WILL_COST:
            return False
        caster.will = max(0, caster.will - FIREBALL_WILL_COST)

        direction = 1 if target.x > caster.x else -1
        fireball = Fireball(
            owner_id=caster.target_id,
            target_id=target.target_id,
            x=caster.x + direction * (caster.width / 2 + FIREBALL_SPAWN_GAP),
            y=caster.y,
            vx=FIREBALL_SPEED * direction,
        )
        self._active.append(fireball)
        logger.debug(
            "Fireball %d -> %d at (%.1f, %.1f)",
            fireball.owner_id, fireball.target_id, fireball.x, fireball.y,
        )
        return True

    def clear(self) -> None:
        """Drop every fireball and effect. Round reset only."""
        self._active = []
        self._effects = []

    def update(self, dt: float, targets: Sequence[CombatTarget]) -> None:
        """Move fireballs, resolve hits, and age trails and effects."""
        survivors: list[Fireball] = []
        for fireball in self._active:
            fireball.x += fireball.vx * dt
            fireball.y += fireball.vy * dt
            fireball.age += dt
            self._spawn_trail(fireball)

            if self._resolve_hit(fireball, targets):
                continue
            if self._is_offscreen(fireball):
                continue
            survivors.append(fireball)
        self._active = survivors

        for fireball in self._active:
            _age_particles(fireball.particles, dt, gravity=0.0)

        for effect in self._effects:
            effect.age += dt
            _age_particles(effect.particles, dt, gravity=SPARK_GRAVITY)
        self._effects = [e for e in self._effects if e.age <= HIT_EFFECT_DURATION]

    # --- Internals ---

    def _resolve_hit(self, fireball: Fireball, targets: Sequence[CombatTarget]) -> bool:
        """Test targets in list order; the first one touched takes the hit."""
        for target in targets:
            if target.target_id == fireball.owner_id:
                continue
            if not circle_hits_box(
                fireball.x, fireball.y, fireball.radius,
                target.x, target.y, target.width, target.height,
            ):
                continue

            if self.authoritative:
                dealt = apply_damage(target, FIREBALL_DAMAGE, HIT_FLASH_DURATION)
                self._events.publish(
                    ProjectileHit(target.target_id, fireball.x, fireball.y, dealt),
                )
                self._events.publish(SoundCue("player_hurt"))
                logger.debug("Fireball hit %d for %.1f", target.target_id, dealt)
            self._spawn_hit_effect(fireball.x, fireball.y)
            return True
        return False

    def _is_offscreen(self, fireball: Fireball) -> bool:
        b = self._bounds
        return (
            fireball.x < b.wall_left - OFFSCREEN_MARGIN_X
            or fireball.x > b.wall_right + OFFSCREEN_MARGIN_X
            or fireball.y > b.ground_y + OFFSCREEN_MARGIN_BELOW
            or fireball.y < -OFFSCREEN_MARGIN_ABOVE
        )

    def _spawn_trail(self, fireball: Fireball) -> None:
        rng = self._rng
        for _ in range(rng.randint(1, 2)):
            life = 0.3 + rng.random() * 0.2
            fireball.particles.append(Particle(
                x=fireball.x + (rng.random() - 0.5) * fireball.radius,
                y=fireball.y + (rng.random() - 0.5) * fireball.radius,
                # jitter, then drift back along the flight path
                vx=(rng.random() - 0.5) * 30 - fireball.vx * TRAIL_DRIFT,
                vy=(rng.random() - 0.5) * 30,
                radius=rng.random() * 4 + 2,
                life=life,
                max_life=life,
            ))

    def _spawn_hit_effect(self, x: float, y: float) -> None:
        rng = self._rng
        effect = HitEffect(x, y)
        for _ in range(HIT_EFFECT_SPARKS):
            angle = rng.random() * math.tau
            speed = 100 + rng.random() * 200
            effect.particles.append(Particle(
                x=x,
                y=y,
                vx=math.cos(angle) * speed,
                vy=math.sin(angle) * speed - 80,
                radius=rng.random() * 3 + 1.5,
                life=0.3 + rng.random() * 0.3,
                max_life=HIT_EFFECT_DURATION,
            ))
        self._effects.append(effect)


def _age_particles(particles: list[Particle], dt: float, gravity: float) -> None:
    """Integrate particles in place and drop the ones that burned out."""
    for p in particles:
        p.x += p.vx * dt
        p.y += p.vy * dt
        p.vy += gravity * dt
        p.life -= dt
    particles[:] = [p for p in particles if p.life > 0]
