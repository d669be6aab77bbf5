"""Per-participant simulation session and the replication tick policy.

A Session owns one lightning engine, one projectile engine and one
terrain animator for one match. Each process builds its own; there is
no module-level simulation state.

HOST:   simulate -> capture bundle -> send. Capture happens after the whole
        step so a client never sees a half-updated tick.
CLIENT: run local fireballs without authority -> advance local terrain ->
        handle received messages in arrival order (round starts reset,
        bundles replace whole lists). The lightning engine is never
        advanced on a client.
LOCAL:  host semantics without a channel (offline play and tests).
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from enum import Enum, auto

from arena.networking.channel import SnapshotChannel
from arena.networking.protocol import RoundStartMessage
from arena.simulation.events import EventBus
from arena.simulation.lightning import LightningEngine
from arena.simulation.projectiles import ProjectileEngine
from arena.simulation.snapshot import Replicable, TickBundle
from arena.simulation.targets import ArenaBounds, CombatTarget
from arena.simulation.terrain import TerrainAnimator

logger = logging.getLogger(__name__)


class Role(Enum):
    HOST = auto()
    CLIENT = auto()
    LOCAL = auto()


class Session:
    """Runs the simulation engines for one participant."""

    def __init__(
        self,
        role: Role,
        channel: SnapshotChannel | None = None,
        rng: random.Random | None = None,
        bounds: ArenaBounds | None = None,
        events: EventBus | None = None,
        terrain: TerrainAnimator | None = None,
    ) -> None:
        if role == Role.CLIENT and channel is None:
            raise ValueError("A client session needs a channel to receive snapshots")
        self.role = role
        self.channel = channel
        self.events = events if events is not None else EventBus()
        rng = rng if rng is not None else random.Random()
        bounds = bounds if bounds is not None else ArenaBounds()

        self.lightning = LightningEngine(rng, bounds, self.events)
        self.projectiles = ProjectileEngine(
            rng, bounds, self.events, authoritative=self.is_authority,
        )
        self.terrain = terrain if terrain is not None else TerrainAnimator()
        self.tick = 0
        self.round_number = 0
        self.last_applied_tick = -1

    @property
    def is_authority(self) -> bool:
        return self.role != Role.CLIENT

    def start_round(self) -> None:
        """Reset every engine for a new round; the host tells its clients."""
        self.round_number += 1
        self._reset_engines()
        logger.info("Round %d started (%s)", self.round_number, self.role.name.lower())
        if self.role == Role.HOST and self.channel is not None:
            self.channel.send_round_start(self.round_number)

    def step(self, dt: float, targets: Sequence[CombatTarget]) -> None:
        """Advance this participant by one fixed tick."""
        if self.is_authority:
            self.lightning.update(dt, targets)
            self.projectiles.update(dt, targets)
            self.terrain.update(dt)
            self.tick += 1
            if self.role == Role.HOST and self.channel is not None:
                self.channel.send_snapshot(self.capture())
            return

        self.channel.poll()
        self.projectiles.update(dt, targets)
        self.terrain.update(dt)
        # host messages land last and in arrival order: they override the
        # local terrain advance, and a bundle older than a round start can
        # never be re-applied over the reset
        for message in self.channel.receive():
            if isinstance(message, RoundStartMessage):
                self.round_number = message.round_number
                self._reset_engines()
                logger.info("Round %d started by host", message.round_number)
            else:
                self.apply(message)
        self.tick += 1

    @property
    def replicated(self) -> dict[str, Replicable]:
        """Engines mirrored to clients, keyed by their TickBundle field."""
        return {"hazard": self.lightning, "terrain": self.terrain}

    def capture(self) -> TickBundle:
        states = {name: engine.get_state() for name, engine in self.replicated.items()}
        return TickBundle(tick=self.tick, **states)

    def apply(self, bundle: TickBundle) -> None:
        """Adopt the host's state for one tick."""
        for name, engine in self.replicated.items():
            state = getattr(bundle, name)
            if state is not None:
                engine.set_state(state)
        self.last_applied_tick = bundle.tick

    def _reset_engines(self) -> None:
        self.lightning.reset()
        self.projectiles.clear()
        self.terrain.reset()
