"""Tests for snapshot and message serialization."""

import struct

import pytest

from arena.config import DEFAULT_NEXT_STRIKE_TIMER
from arena.networking.protocol import MessageType, RoundStartMessage
from arena.networking.serialization import (
    SNAP_HEADER,
    decode_bundle,
    decode_message,
    decode_round_start,
    encode_bundle,
    encode_message,
    encode_round_start,
)
from arena.simulation.snapshot import (
    HazardSnapshot,
    Segment,
    StrikeState,
    TerrainSnapshot,
    TickBundle,
    WarningState,
)


def make_bundle(**kwargs) -> TickBundle:
    hazard = HazardSnapshot(
        warnings=(WarningState(123.456, 0.1), WarningState(900.0, 0.75)),
        strikes=(
            StrikeState(640.0, 0.2, (
                Segment(640.0, 0.0, 651.2, 41.3),
                Segment(651.2, 41.3, 633.9, 620.0),
            )),
        ),
        next_strike_timer=6.125,
    )
    defaults = dict(tick=42, hazard=hazard, terrain=TerrainSnapshot(3.3))
    defaults.update(kwargs)
    return TickBundle(**defaults)


class TestBundleSerialization:
    def test_roundtrip_preserves_everything(self):
        """f64 on the wire: the client sees the host's numbers bit for bit."""
        bundle = make_bundle()
        assert decode_bundle(encode_bundle(bundle)) == bundle

    def test_empty_hazard(self):
        bundle = TickBundle(tick=0, hazard=HazardSnapshot())
        decoded = decode_bundle(encode_bundle(bundle))
        assert decoded.hazard.warnings == ()
        assert decoded.hazard.strikes == ()
        assert decoded.terrain is None

    def test_missing_countdown_falls_back_to_default(self):
        """A payload without the countdown flag decodes with the 5s default."""
        payload = (
            SNAP_HEADER.pack(1, 7, 0)
            + struct.pack("!H", 1) + struct.pack("!dd", 10.0, 0.5)
            + struct.pack("!H", 0)
        )
        bundle = decode_bundle(payload)
        assert bundle.tick == 7
        assert bundle.hazard.next_strike_timer == DEFAULT_NEXT_STRIKE_TIMER
        assert bundle.hazard.warnings == (WarningState(10.0, 0.5),)
        assert bundle.terrain is None

    def test_unknown_version_rejected(self):
        payload = bytearray(encode_bundle(make_bundle()))
        payload[0] = 99
        with pytest.raises(ValueError, match="version"):
            decode_bundle(bytes(payload))

    def test_truncated_rejected(self):
        payload = encode_bundle(make_bundle())
        with pytest.raises(ValueError):
            decode_bundle(payload[:-9])


class TestMessageFraming:
    def test_roundtrip(self):
        msg = encode_message(MessageType.SNAPSHOT, b"hello")
        msg_type, payload = decode_message(msg)
        assert msg_type == MessageType.SNAPSHOT
        assert payload == b"hello"

    def test_empty_payload(self):
        msg_type, payload = decode_message(encode_message(MessageType.DISCONNECT, b""))
        assert msg_type == MessageType.DISCONNECT
        assert payload == b""

    def test_too_short(self):
        with pytest.raises(ValueError):
            decode_message(b"\x01")

    def test_truncated_payload(self):
        msg = encode_message(MessageType.SNAPSHOT, b"abcdef")
        with pytest.raises(ValueError):
            decode_message(msg[:-2])

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            decode_message(b"\xff\x00\x00\x00\x00")


class TestRoundStart:
    def test_roundtrip(self):
        assert decode_round_start(encode_round_start(3)) == RoundStartMessage(3)

    def test_bad_payload(self):
        with pytest.raises(ValueError):
            decode_round_start(b"\x00")
