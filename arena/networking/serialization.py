"""Binary serialization for replicated snapshots and network messages.

All encoding uses struct. Network byte order (big-endian) throughout.
Positions and ages are f64 so a client mirrors the host's numbers exactly.

Wire format for a full message:
    [msg_type:u8][payload_len:u32][payload:bytes]

SNAPSHOT payload:
    [version:u8][tick:u32][flags:u8]
    [next_strike_timer:f64]                 if flags & HAS_COUNTDOWN
    [n_warnings:u16]  per warning: [x:f64][age:f64]
    [n_strikes:u16]   per strike:  [x:f64][age:f64][n_segments:u16]
                                   per segment: [x1:f64][y1:f64][x2:f64][y2:f64]
    [anim_time:f64]                         if flags & HAS_TERRAIN

ROUND_START payload:
    [round_number:u32]
"""

from __future__ import annotations

import struct

from arena.config import SNAPSHOT_VERSION
from arena.networking.protocol import MessageType, RoundStartMessage, SnapshotFlags
from arena.simulation.snapshot import (
    HazardSnapshot,
    Segment,
    StrikeState,
    TerrainSnapshot,
    TickBundle,
    WarningState,
)


# --- Message framing ---

MSG_HEADER = struct.Struct("!BI")  # msg_type (u8), payload_len (u32)


def encode_message(msg_type: MessageType, payload: bytes) -> bytes:
    """Wrap a payload in a message frame."""
    return MSG_HEADER.pack(msg_type, len(payload)) + payload


def decode_message(data: bytes) -> tuple[MessageType, bytes]:
    """Unwrap a message frame into (type, payload).

    Raises ValueError if the data is too short, truncated, or of unknown type.
    """
    if len(data) < MSG_HEADER.size:
        raise ValueError("Message too short")
    msg_type_raw, payload_len = MSG_HEADER.unpack_from(data)
    msg_type = MessageType(msg_type_raw)
    payload = data[MSG_HEADER.size:MSG_HEADER.size + payload_len]
    if len(payload) < payload_len:
        raise ValueError("Payload truncated")
    return msg_type, payload


# --- Snapshot serialization ---

SNAP_HEADER = struct.Struct("!BIB")   # version(u8), tick(u32), flags(u8)
F64 = struct.Struct("!d")
COUNT = struct.Struct("!H")
AGED_POINT = struct.Struct("!dd")     # x(f64), age(f64)
SEGMENT = struct.Struct("!dddd")      # x1, y1, x2, y2


def encode_bundle(bundle: TickBundle) -> bytes:
    """Encode a TickBundle into a SNAPSHOT payload.

    The countdown is always written; HazardSnapshot has no way to omit it.
    """
    hazard = bundle.hazard
    flags = SnapshotFlags.HAS_COUNTDOWN
    if bundle.terrain is not None:
        flags |= SnapshotFlags.HAS_TERRAIN

    parts: list[bytes] = [
        SNAP_HEADER.pack(hazard.version, bundle.tick, flags),
        F64.pack(hazard.next_strike_timer),
        COUNT.pack(len(hazard.warnings)),
    ]
    for w in hazard.warnings:
        parts.append(AGED_POINT.pack(w.x, w.age))
    parts.append(COUNT.pack(len(hazard.strikes)))
    for s in hazard.strikes:
        parts.append(AGED_POINT.pack(s.x, s.age))
        parts.append(COUNT.pack(len(s.segments)))
        for seg in s.segments:
            parts.append(SEGMENT.pack(*seg))
    if bundle.terrain is not None:
        parts.append(F64.pack(bundle.terrain.anim_time))
    return b"".join(parts)


def decode_bundle(data: bytes) -> TickBundle:
    """Decode a SNAPSHOT payload.

    Raises ValueError on an unknown schema version or truncated data.
    A payload without the countdown field gets the schema default.
    """
    try:
        version, tick, flags = SNAP_HEADER.unpack_from(data)
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"Unsupported snapshot version {version}")
        offset = SNAP_HEADER.size

        timer = None
        if flags & SnapshotFlags.HAS_COUNTDOWN:
            (timer,) = F64.unpack_from(data, offset)
            offset += F64.size

        (n_warnings,) = COUNT.unpack_from(data, offset)
        offset += COUNT.size
        warnings: list[WarningState] = []
        for _ in range(n_warnings):
            x, age = AGED_POINT.unpack_from(data, offset)
            offset += AGED_POINT.size
            warnings.append(WarningState(x, age))

        (n_strikes,) = COUNT.unpack_from(data, offset)
        offset += COUNT.size
        strikes: list[StrikeState] = []
        for _ in range(n_strikes):
            x, age = AGED_POINT.unpack_from(data, offset)
            offset += AGED_POINT.size
            (n_segments,) = COUNT.unpack_from(data, offset)
            offset += COUNT.size
            segments: list[Segment] = []
            for _ in range(n_segments):
                segments.append(Segment(*SEGMENT.unpack_from(data, offset)))
                offset += SEGMENT.size
            strikes.append(StrikeState(x, age, tuple(segments)))

        terrain = None
        if flags & SnapshotFlags.HAS_TERRAIN:
            (anim_time,) = F64.unpack_from(data, offset)
            terrain = TerrainSnapshot(anim_time)
    except struct.error as e:
        raise ValueError(f"Snapshot truncated: {e}") from e

    if timer is None:
        hazard = HazardSnapshot(tuple(warnings), tuple(strikes), version=version)
    else:
        hazard = HazardSnapshot(tuple(warnings), tuple(strikes), timer, version)
    return TickBundle(tick=tick, hazard=hazard, terrain=terrain)


# --- Round start ---

ROUND_START_FMT = struct.Struct("!I")  # round_number (u32)


def encode_round_start(round_number: int) -> bytes:
    return ROUND_START_FMT.pack(round_number)


def decode_round_start(data: bytes) -> RoundStartMessage:
    try:
        (round_number,) = ROUND_START_FMT.unpack(data)
    except struct.error as e:
        raise ValueError(f"Bad round start payload: {e}") from e
    return RoundStartMessage(round_number)
