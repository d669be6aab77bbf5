"""Tests for the in-process loopback channel."""

import logging

from arena.networking.channel import LoopbackChannel
from arena.networking.protocol import MessageType, RoundStartMessage
from arena.networking.serialization import encode_message
from arena.simulation.snapshot import HazardSnapshot, TickBundle, WarningState


def bundle(tick: int) -> TickBundle:
    return TickBundle(tick=tick, hazard=HazardSnapshot(warnings=(WarningState(tick, 0.0),)))


class TestLoopbackChannel:
    """Frames travel host -> client encoded, in send order."""

    def test_pair_connected(self):
        """Both ends of a fresh pair report connected."""
        host, client = LoopbackChannel.pair()
        assert host.is_connected()
        assert client.is_connected()

    def test_nothing_before_poll(self):
        """Frames sit in the inbox until poll() decodes them."""
        host, client = LoopbackChannel.pair()
        host.send_snapshot(bundle(1))
        assert client.receive() == []
        client.poll()
        assert client.receive() == [bundle(1)]

    def test_delivered_in_send_order(self):
        host, client = LoopbackChannel.pair()
        for tick in range(5):
            host.send_snapshot(bundle(tick))
        client.poll()
        assert [b.tick for b in client.receive()] == [0, 1, 2, 3, 4]
        assert client.receive() == []

    def test_round_starts(self):
        """A round start decodes to its message record."""
        host, client = LoopbackChannel.pair()
        host.send_round_start(2)
        client.poll()
        assert client.receive() == [RoundStartMessage(2)]
        assert client.receive() == []

    def test_order_kept_across_message_types(self):
        """A round start sent between two snapshots comes back between them."""
        host, client = LoopbackChannel.pair()
        host.send_snapshot(bundle(1))
        host.send_round_start(2)
        host.send_snapshot(bundle(0))
        client.poll()
        assert client.receive() == [bundle(1), RoundStartMessage(2), bundle(0)]

    def test_malformed_frame_dropped(self, caplog):
        """Undecodable frames are logged and skipped; good ones still arrive."""
        host, client = LoopbackChannel.pair()
        client.inject_raw(b"\x01")
        client.inject_raw(encode_message(MessageType.SNAPSHOT, b"\x63\x00"))
        host.send_snapshot(bundle(9))
        with caplog.at_level(logging.WARNING):
            client.poll()
        assert [b.tick for b in client.receive()] == [9]
        assert "Malformed frame" in caplog.text

    def test_close_disconnects_peer(self):
        host, client = LoopbackChannel.pair()
        host.close()
        assert not host.is_connected()
        client.poll()
        assert not client.is_connected()

    def test_send_after_close_is_noop(self):
        """Nothing is delivered once the sending end is closed."""
        host, client = LoopbackChannel.pair()
        host.close()
        host.send_snapshot(bundle(1))
        client.poll()
        assert client.receive() == []
