"""Shared test fixtures for the arena simulation."""

from __future__ import annotations

import os
import random

import pytest

# pygame must not try to open a real window during tests
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from arena.simulation.events import (  # noqa: E402
    EventBus,
    EventRecorder,
    HazardHit,
    HazardWarningStarted,
    ProjectileHit,
    SoundCue,
    StrikeLanded,
)
from arena.simulation.targets import ArenaBounds, Fighter  # noqa: E402


@pytest.fixture
def rng() -> random.Random:
    """A seeded RNG so random placement is reproducible per test."""
    return random.Random(1234)


@pytest.fixture
def bounds() -> ArenaBounds:
    return ArenaBounds(wall_left=0, wall_right=1280, ground_y=620)


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def recorder(events: EventBus) -> EventRecorder:
    """Records every event type the engines publish."""
    return EventRecorder(
        events, HazardHit, HazardWarningStarted, StrikeLanded, ProjectileHit, SoundCue,
    )


@pytest.fixture
def fighters() -> list[Fighter]:
    """Two fighters standing on the ground, far apart."""
    return [
        Fighter(target_id=1, x=200.0, y=590.0),
        Fighter(target_id=2, x=1000.0, y=590.0),
    ]
