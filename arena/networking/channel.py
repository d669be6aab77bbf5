"""Snapshot channel interface and in-process loopback implementation.

SnapshotChannel is the seam between the session tick loop and whatever
transport carries frames between host and clients. The session codes
against this interface only.

LoopbackChannel connects a host end and a client end inside one process.
Frames really are encoded and decoded, so it exercises the wire format
the same way a socket transport would.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import deque

from arena.networking.protocol import MessageType, RoundStartMessage
from arena.networking.serialization import (
    decode_bundle,
    decode_message,
    decode_round_start,
    encode_bundle,
    encode_message,
    encode_round_start,
)
from arena.simulation.snapshot import TickBundle

logger = logging.getLogger(__name__)

# Everything a client can be handed by receive(), in arrival order
HostMessage = TickBundle | RoundStartMessage


class SnapshotChannel(ABC):
    """Abstract host -> client replication channel.

    Delivery is assumed in send order, across message types: a round
    start queued after a snapshot is handed back after it. A tick with no
    snapshot simply leaves the client at the last state it applied.
    """

    @abstractmethod
    def poll(self) -> None:
        """Process incoming frames into the inbox. Non-blocking."""
        ...

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    def send_snapshot(self, bundle: TickBundle) -> None:
        """Ship one tick's snapshot bundle to every client."""
        ...

    @abstractmethod
    def send_round_start(self, round_number: int) -> None:
        ...

    @abstractmethod
    def receive(self) -> list[HostMessage]:
        """Return every message received since the last call, oldest first."""
        ...

    @abstractmethod
    def close(self) -> None:
        ...


class LoopbackChannel(SnapshotChannel):
    """One end of an in-process channel. Build connected ends with pair()."""

    def __init__(self) -> None:
        self._inbox: deque[bytes] = deque()
        self._remote: LoopbackChannel | None = None
        self._connected = False
        self._received: list[HostMessage] = []

    @classmethod
    def pair(cls) -> tuple[LoopbackChannel, LoopbackChannel]:
        """Return two connected ends: (host_end, client_end)."""
        host_end, client_end = cls(), cls()
        host_end._remote = client_end
        client_end._remote = host_end
        host_end._connected = client_end._connected = True
        return host_end, client_end

    def poll(self) -> None:
        while self._inbox:
            self._handle_frame(self._inbox.popleft())

    def _handle_frame(self, data: bytes) -> None:
        try:
            msg_type, payload = decode_message(data)
            if msg_type == MessageType.SNAPSHOT:
                self._received.append(decode_bundle(payload))
            elif msg_type == MessageType.ROUND_START:
                self._received.append(decode_round_start(payload))
            elif msg_type == MessageType.DISCONNECT:
                logger.info("Peer disconnected")
                self._connected = False
        except (ValueError, KeyError):
            logger.warning("Malformed frame (%d bytes) dropped", len(data))

    def is_connected(self) -> bool:
        return self._connected

    def send_snapshot(self, bundle: TickBundle) -> None:
        self._send_raw(encode_message(MessageType.SNAPSHOT, encode_bundle(bundle)))

    def send_round_start(self, round_number: int) -> None:
        self._send_raw(encode_message(
            MessageType.ROUND_START, encode_round_start(round_number),
        ))

    def receive(self) -> list[HostMessage]:
        received, self._received = self._received, []
        return received

    def close(self) -> None:
        if self._connected:
            self._send_raw(encode_message(MessageType.DISCONNECT, b""))
        self._connected = False

    def inject_raw(self, data: bytes) -> None:
        """Test helper: queue raw bytes as if they came off the wire."""
        self._inbox.append(data)

    def _send_raw(self, data: bytes) -> None:
        if not self._connected or self._remote is None:
            return
        self._remote._inbox.append(data)
