"""Lightning hazard: random telegraphed strikes with area damage.

Lifecycle of one hazard: a warning is placed at a random x, ages for
WARNING_DURATION, then turns into exactly one strike. The strike deals
its damage once, on the tick it lands, and stays visible for
FLASH_DURATION before it is dropped.

Only the host runs update(). Strike placement, timing and bolt shape all
come from the engine's RNG, and nothing guarantees two processes draw the
same numbers, so clients never resolve strikes themselves: they mirror
the host through get_state()/set_state().
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from arena.config import (
    BOLT_HORIZONTAL_JITTER,
    BOLT_STEP,
    BOLT_STEP_JITTER,
    FLASH_DURATION,
    HIT_FLASH_DURATION,
    LIGHTNING_DAMAGE,
    MAX_INTERVAL,
    MIN_INTERVAL,
    STRIKE_RADIUS,
    STRIKE_WALL_INSET,
    WARNING_DURATION,
)
from arena.simulation.events import (
    EventBus,
    HazardHit,
    HazardWarningStarted,
    SoundCue,
    StrikeLanded,
)
from arena.simulation.snapshot import HazardSnapshot, Segment, StrikeState, WarningState
from arena.simulation.targets import ArenaBounds, CombatTarget, apply_damage

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LightningWarning:
    x: float
    age: float = 0.0


@dataclass(slots=True)
class LightningStrike:
    x: float
    age: float = 0.0
    segments: list[Segment] = field(default_factory=list)


class LightningEngine:
    """Owns pending warnings, visible strikes and the next-strike countdown.

    Attributes:
        next_strike_timer: Seconds until the next warning is placed.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        bounds: ArenaBounds | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._bounds = bounds if bounds is not None else ArenaBounds()
        self._events = events if events is not None else EventBus()
        self._warnings: list[LightningWarning] = []
        self._strikes: list[LightningStrike] = []
        self.next_strike_timer: float = self._draw_interval()

    @property
    def warnings(self) -> Sequence[LightningWarning]:
        return self._warnings

    @property
    def strikes(self) -> Sequence[LightningStrike]:
        return self._strikes

    def reset(self) -> None:
        """Drop every warning and strike and re-arm the countdown. Round start."""
        self._warnings = []
        self._strikes = []
        self.next_strike_timer = self._draw_interval()
        logger.debug("Lightning reset, next strike in %.2fs", self.next_strike_timer)

    def update(self, dt: float, targets: Sequence[CombatTarget]) -> None:
        """Advance all hazards by ``dt`` seconds.

        Order: fade strikes -> land warnings -> count down to the next warning.
        Anything created this tick starts at age 0 and is first aged next tick,
        so a warning lands exactly WARNING_DURATION after it was placed.
        """
        for strike in self._strikes:
            strike.age += dt
        self._strikes = [s for s in self._strikes if s.age < FLASH_DURATION]

        pending: list[LightningWarning] = []
        landing: list[LightningWarning] = []
        for warning in self._warnings:
            warning.age += dt
            if warning.age >= WARNING_DURATION:
                landing.append(warning)
            else:
                pending.append(warning)
        self._warnings = pending
        for warning in landing:
            self._do_strike(warning.x, targets)

        self.next_strike_timer -= dt
        if self.next_strike_timer <= 0:
            self._spawn_warning()
            self.next_strike_timer = self._draw_interval()

    def generate_bolt_segments(self, x: float) -> list[Segment]:
        """Random-walk a jagged bolt from the top of the arena down to the ground."""
        ground = self._bounds.ground_y
        segments: list[Segment] = []
        cx = x
        y = 0.0
        while y < ground:
            nx = cx + (self._rng.random() - 0.5) * BOLT_HORIZONTAL_JITTER
            ny = min(y + BOLT_STEP + self._rng.random() * BOLT_STEP_JITTER, ground)
            segments.append(Segment(cx, y, nx, ny))
            cx, y = nx, ny
        return segments

    # --- Replication ---

    def get_state(self) -> HazardSnapshot:
        return HazardSnapshot(
            warnings=tuple(WarningState(w.x, w.age) for w in self._warnings),
            strikes=tuple(
                StrikeState(s.x, s.age, tuple(s.segments)) for s in self._strikes
            ),
            next_strike_timer=self.next_strike_timer,
        )

    def set_state(self, state: HazardSnapshot) -> None:
        """Replace local hazards with the host's.

        A rise in the strike count means a bolt landed on the host since the
        last snapshot; clients never resolve strikes, so that edge is the
        only way they learn to shake the screen.
        """
        prev_strike_count = len(self._strikes)
        self._warnings = [LightningWarning(w.x, w.age) for w in state.warnings]
        self._strikes = [
            LightningStrike(s.x, s.age, list(s.segments)) for s in state.strikes
        ]
        self.next_strike_timer = state.next_strike_timer
        if len(self._strikes) > prev_strike_count:
            self._events.publish(StrikeLanded(self._strikes[-1].x))

    # --- Internals ---

    def _draw_interval(self) -> float:
        return MIN_INTERVAL + self._rng.random() * (MAX_INTERVAL - MIN_INTERVAL)

    def _spawn_warning(self) -> None:
        left = self._bounds.wall_left + STRIKE_WALL_INSET
        span = max(0.0, self._bounds.width - 2 * STRIKE_WALL_INSET)
        x = left + self._rng.random() * span
        self._warnings.append(LightningWarning(x))
        logger.debug("Lightning warning at x=%.1f", x)
        self._events.publish(HazardWarningStarted(x))

    def _do_strike(self, x: float, targets: Sequence[CombatTarget]) -> None:
        self._strikes.append(LightningStrike(x, 0.0, self.generate_bolt_segments(x)))
        self._events.publish(SoundCue("lightning"))
        self._events.publish(StrikeLanded(x))

        hits = 0
        for target in targets:
            life = getattr(target, "life", None)
            if life is None or life <= 0 or getattr(target, "invulnerable", False):
                continue
            if abs(target.x - x) > STRIKE_RADIUS:
                continue
            dealt = apply_damage(target, LIGHTNING_DAMAGE, HIT_FLASH_DURATION)
            if dealt > 0:
                hits += 1
                self._events.publish(HazardHit(target.x, target.y, dealt))
                self._events.publish(SoundCue("player_hurt"))
        logger.debug("Lightning struck x=%.1f, %d target(s) hurt", x, hits)
