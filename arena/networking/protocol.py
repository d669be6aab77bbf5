"""Network protocol definitions.

The host is the only sender of simulation state: once per tick it ships a
snapshot bundle, and at round boundaries it announces the new round.
Clients never send simulation state back. The socket layer that carries
these frames lives outside this package.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class MessageType(IntEnum):
    """Wire message types, host -> clients."""
    SNAPSHOT = 1      # TickBundle for one host tick (unreliable, latest wins)
    ROUND_START = 2   # Clear projectiles and rewind terrain (reliable)
    DISCONNECT = 3    # Clean shutdown (reliable)


class SnapshotFlags(IntEnum):
    """Optional-field presence bits in a SNAPSHOT payload."""
    HAS_COUNTDOWN = 0x01
    HAS_TERRAIN = 0x02


@dataclass(frozen=True, slots=True)
class RoundStartMessage:
    """Sent by the host when a new round begins."""
    round_number: int
