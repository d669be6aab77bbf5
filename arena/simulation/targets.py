"""Combat targets and the damage rule shared by every hazard.

The player subsystem owns its entities; the simulation only needs the
narrow view described by CombatTarget. Positions are centers, y grows
downward, and width/height are full extents.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from arena.config import (
    FIGHTER_HEIGHT,
    FIGHTER_LIFE,
    FIGHTER_WIDTH,
    FIGHTER_WILL,
    GROUND_Y,
    HIT_FLASH_DURATION,
    WALL_LEFT,
    WALL_RIGHT,
)


class CombatTarget(Protocol):
    """What a player-like entity must expose to be damaged."""

    target_id: int
    x: float
    y: float
    width: float
    height: float
    life: float
    will: float
    armor: float
    invulnerable: bool
    hit_flash: float


@dataclass(slots=True)
class Fighter:
    """Minimal CombatTarget used by the demo loop and tests."""
    target_id: int
    x: float
    y: float
    width: float = FIGHTER_WIDTH
    height: float = FIGHTER_HEIGHT
    life: float = FIGHTER_LIFE
    will: float = FIGHTER_WILL
    armor: float = 0
    invulnerable: bool = False
    hit_flash: float = 0.0

    @property
    def is_alive(self) -> bool:
        return self.life > 0


@dataclass(frozen=True, slots=True)
class ArenaBounds:
    """Playable extents supplied by the physics collaborator."""
    wall_left: float = WALL_LEFT
    wall_right: float = WALL_RIGHT
    ground_y: float = GROUND_Y

    @property
    def width(self) -> float:
        return self.wall_right - self.wall_left


def apply_damage(
    target: CombatTarget, amount: float, flash: float = HIT_FLASH_DURATION,
) -> float:
    """Apply ``amount`` damage to ``target`` and return the life actually lost.

    Armor soaks up to its own value first and is reduced by what it
    absorbed. Life and armor are clamped at zero. Invulnerable targets
    are left untouched.
    """
    if target.invulnerable:
        return 0.0

    prev_life = target.life
    remaining = amount
    if target.armor > 0:
        absorbed = min(target.armor, remaining)
        remaining -= absorbed
        target.armor = max(0, target.armor - absorbed)

    target.life = max(0, target.life - remaining)
    target.hit_flash = flash
    return prev_life - target.life
