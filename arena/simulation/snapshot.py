"""Replicated state records shared by host and clients.

The host captures these at the end of a tick and ships them; a client
hands them to the matching engine's set_state(), which replaces its
lists wholesale. Every record is frozen and uses tuples, so a captured
snapshot can never alias the live lists of the engine it came from.

SCHEMA (version 1):
- HazardSnapshot: warnings and strikes are required (possibly empty).
  next_strike_timer is optional; when absent it is DEFAULT_NEXT_STRIKE_TIMER.
- TerrainSnapshot: accumulated animation time only. Platform positions
  are a pure function of it and are never sent.
- TickBundle: one tick's worth of snapshots. terrain may be omitted.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple, Protocol, runtime_checkable

from arena.config import DEFAULT_NEXT_STRIKE_TIMER, SNAPSHOT_VERSION


@runtime_checkable
class Replicable(Protocol):
    """An engine whose volatile state the host replicates to clients."""

    def get_state(self) -> Any: ...

    def set_state(self, state: Any) -> None: ...


class Segment(NamedTuple):
    """One straight piece of a lightning bolt."""
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True, slots=True)
class WarningState:
    x: float
    age: float


@dataclass(frozen=True, slots=True)
class StrikeState:
    x: float
    age: float
    segments: tuple[Segment, ...] = ()


@dataclass(frozen=True, slots=True)
class HazardSnapshot:
    """Everything a client needs to mirror the lightning engine."""
    warnings: tuple[WarningState, ...] = ()
    strikes: tuple[StrikeState, ...] = ()
    next_strike_timer: float = DEFAULT_NEXT_STRIKE_TIMER
    version: int = SNAPSHOT_VERSION

    @classmethod
    def from_mapping(cls, data: Mapping | None) -> HazardSnapshot:
        """Build a snapshot from a loosely typed record (e.g. decoded JSON).

        Missing lists become empty and a missing or null countdown falls
        back to DEFAULT_NEXT_STRIKE_TIMER.
        """
        if not data:
            return cls()
        warnings = tuple(
            WarningState(x=float(w.get("x", 0)), age=float(w.get("age", 0)))
            for w in data.get("warnings") or ()
        )
        strikes = tuple(
            StrikeState(
                x=float(s.get("x", 0)),
                age=float(s.get("age", 0)),
                segments=tuple(
                    Segment(*(float(v) for v in seg)) for seg in s.get("segments") or ()
                ),
            )
            for s in data.get("strikes") or ()
        )
        timer = data.get("next_strike_timer")
        return cls(
            warnings=warnings,
            strikes=strikes,
            next_strike_timer=DEFAULT_NEXT_STRIKE_TIMER if timer is None else float(timer),
            version=int(data.get("version", SNAPSHOT_VERSION)),
        )

    def to_mapping(self) -> dict:
        return {
            "version": self.version,
            "warnings": [{"x": w.x, "age": w.age} for w in self.warnings],
            "strikes": [
                {"x": s.x, "age": s.age, "segments": [list(seg) for seg in s.segments]}
                for s in self.strikes
            ],
            "next_strike_timer": self.next_strike_timer,
        }


@dataclass(frozen=True, slots=True)
class TerrainSnapshot:
    anim_time: float = 0.0


@dataclass(frozen=True, slots=True)
class TickBundle:
    """All replicated state for one host tick."""
    tick: int
    hazard: HazardSnapshot
    terrain: TerrainSnapshot | None = None
