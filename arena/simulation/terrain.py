"""Animated platforms.

Each platform slides horizontally on a sine wave of the accumulated time.
Nothing here is random, so every participant can run it locally; the
host's anim_time is still replicated and wins when it arrives.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from arena.config import (
    PLATFORM_ANIMATION_AMPLITUDE,
    PLATFORM_ANIMATION_SPEED,
    PLATFORM_LAYOUT,
)
from arena.simulation.snapshot import TerrainSnapshot


@dataclass(frozen=True, slots=True)
class PlatformDef:
    base_x: float
    y: float
    width: float
    height: float
    phase: float = 0.0
    direction: int = 1  # 0 keeps the platform still, -1 mirrors the motion


@dataclass(slots=True)
class Platform:
    """Collision geometry for one platform; x and y are the center."""
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x - self.width / 2

    @property
    def top(self) -> float:
        return self.y - self.height / 2


DEFAULT_PLATFORMS: tuple[PlatformDef, ...] = tuple(
    PlatformDef(*row) for row in PLATFORM_LAYOUT
)


class TerrainAnimator:
    """Derives platform positions from time; no hidden state besides the clock."""

    def __init__(
        self,
        defs: Iterable[PlatformDef] = DEFAULT_PLATFORMS,
        speed: float = PLATFORM_ANIMATION_SPEED,
        amplitude: float = PLATFORM_ANIMATION_AMPLITUDE,
    ) -> None:
        self._defs = tuple(defs)
        self._speed = speed
        self._amplitude = amplitude
        self.anim_time: float = 0.0
        self._platforms = [Platform(d.base_x, d.y, d.width, d.height) for d in self._defs]

    @property
    def platforms(self) -> Sequence[Platform]:
        return self._platforms

    def reset(self) -> None:
        self.anim_time = 0.0
        for platform, d in zip(self._platforms, self._defs):
            platform.x = d.base_x

    def update(self, dt: float) -> None:
        self.anim_time += dt
        self._place()

    def offset(self, d: PlatformDef) -> float:
        """Horizontal displacement of ``d`` at the current time."""
        if d.direction == 0:
            return 0.0
        return self._amplitude * d.direction * math.sin(self.anim_time * self._speed + d.phase)

    def get_state(self) -> TerrainSnapshot:
        return TerrainSnapshot(self.anim_time)

    def set_state(self, state: TerrainSnapshot) -> None:
        self.anim_time = state.anim_time
        self._place()

    def _place(self) -> None:
        for platform, d in zip(self._platforms, self._defs):
            platform.x = d.base_x + self.offset(d)
