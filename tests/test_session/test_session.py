"""Tests for the host/client replication tick policy."""

import random

import pytest

from arena.config import FIREBALL_DAMAGE, LIGHTNING_DAMAGE
from arena.networking.channel import LoopbackChannel
from arena.session import Role, Session
from arena.simulation.events import StrikeLanded
from arena.simulation.snapshot import HazardSnapshot, Replicable, WarningState
from arena.simulation.targets import Fighter

DT = 0.25


@pytest.fixture
def pair():
    """A connected host and client session."""
    host_end, client_end = LoopbackChannel.pair()
    host = Session(Role.HOST, host_end, rng=random.Random(1))
    client = Session(Role.CLIENT, client_end, rng=random.Random(2))
    return host, client


def force_warning(session: Session, x: float) -> None:
    session.lightning.set_state(HazardSnapshot(
        warnings=(WarningState(x, 0.0),), next_strike_timer=1000.0,
    ))


def run(host: Session, client: Session, ticks: int, targets) -> None:
    for _ in range(ticks):
        host.step(DT, targets)
        client.step(DT, targets)


class TestRoles:
    """Verify which participant holds authority."""

    def test_client_requires_channel(self):
        """A client with nothing to listen to is rejected up front."""
        with pytest.raises(ValueError):
            Session(Role.CLIENT)

    def test_authority(self, pair):
        """Host engines are authoritative, client engines are not."""
        host, client = pair
        assert host.is_authority
        assert not client.is_authority
        assert host.projectiles.authoritative
        assert not client.projectiles.authoritative

    def test_local_session_runs_without_channel(self):
        """Offline play simulates and damages like a host."""
        session = Session(Role.LOCAL, rng=random.Random(3))
        force_warning(session, 500.0)
        target = Fighter(target_id=1, x=500.0, y=590.0)
        for _ in range(4):
            session.step(DT, [target])
        assert target.life == 100 - LIGHTNING_DAMAGE
        assert session.tick == 4

    def test_replicated_engines(self, pair):
        """Hazard and terrain are the mirrored engines, keyed by bundle field."""
        host, _ = pair
        engines = host.replicated
        assert engines == {"hazard": host.lightning, "terrain": host.terrain}
        assert all(isinstance(e, Replicable) for e in engines.values())


class TestHazardMirroring:
    """Verify the client mirrors the host's lightning without simulating it."""

    def test_client_mirrors_host_exactly(self, pair):
        """After a strike lands both sides hold identical hazard state."""
        host, client = pair
        force_warning(host, 640.0)
        run(host, client, 4, [])
        assert len(host.lightning.strikes) == 1
        assert client.lightning.get_state() == host.lightning.get_state()
        assert client.last_applied_tick == host.tick

    def test_client_never_resolves_damage(self, pair):
        """Damage comes from the host alone; the client only mirrors the bolt."""
        host, client = pair
        target = Fighter(target_id=1, x=640.0, y=590.0)
        force_warning(host, 640.0)
        run(host, client, 6, [target])
        assert target.life == 100 - LIGHTNING_DAMAGE

    def test_client_does_not_advance_lightning_alone(self, pair):
        """Without new snapshots the client stands at the last applied state."""
        host, client = pair
        force_warning(host, 640.0)
        run(host, client, 1, [])
        before = client.lightning.get_state()
        for _ in range(10):
            client.step(DT, [])
        assert client.lightning.get_state() == before

    def test_strike_edge_on_client(self, pair):
        """One landed strike produces exactly one StrikeLanded on the client."""
        host, client = pair
        landed = []
        client.events.subscribe(StrikeLanded, landed.append)
        force_warning(host, 640.0)
        run(host, client, 6, [])
        assert landed == [StrikeLanded(640.0)]

    def test_capture_is_after_full_step(self, pair):
        """The sent bundle reflects the host after the whole tick."""
        host, client = pair
        host.step(DT, [])
        client.channel.poll()
        (bundle,) = client.channel.receive()
        assert bundle.tick == host.tick
        assert bundle.hazard == host.lightning.get_state()
        assert bundle.terrain == host.terrain.get_state()


class TestTerrainSync:
    """Verify platform animation follows the host clock."""

    def test_host_time_wins(self, pair):
        """A drifted client clock is overwritten by the host's."""
        host, client = pair
        client.terrain.update(10.0)
        run(host, client, 3, [])
        assert client.terrain.anim_time == host.terrain.anim_time
        assert [p.x for p in client.terrain.platforms] == [p.x for p in host.terrain.platforms]

    def test_client_keeps_animating_without_snapshots(self, pair):
        """Platforms keep moving locally between snapshots."""
        _, client = pair
        client.step(DT, [])
        client.step(DT, [])
        assert client.terrain.anim_time == 2 * DT


class TestProjectiles:
    """Verify fireball damage is applied by the host only."""

    def test_no_double_damage(self, pair):
        """Both sides see the hit but the target loses life once."""
        host, client = pair
        caster = Fighter(target_id=1, x=100.0, y=590.0)
        target = Fighter(target_id=2, x=400.0, y=590.0)
        host.projectiles.spawn_fireball(caster, target)
        client.projectiles.spawn_fireball(caster, target)
        run(host, client, 2, [caster, target])
        assert target.life == 100 - FIREBALL_DAMAGE
        assert host.projectiles.projectiles == []
        assert client.projectiles.projectiles == []
        assert len(client.projectiles.effects) == 1


class TestRounds:
    """Verify round starts reset every engine on both sides."""

    def test_round_start_resets_client(self, pair):
        """Projectiles are cleared and terrain rewinds to the host's clock."""
        host, client = pair
        caster = Fighter(target_id=1, x=100.0, y=590.0)
        target = Fighter(target_id=2, x=1000.0, y=590.0)
        client.projectiles.spawn_fireball(caster, target)
        run(host, client, 2, [])
        host.start_round()
        client.step(DT, [])
        assert client.round_number == 1
        assert client.projectiles.projectiles == []
        assert client.terrain.anim_time == host.terrain.anim_time == 0.0

    def test_round_start_clears_host_hazards(self, pair):
        """Warnings from the old round never reach the client."""
        host, client = pair
        force_warning(host, 300.0)
        host.start_round()
        assert host.lightning.warnings == []
        host.step(DT, [])
        client.step(DT, [])
        assert client.lightning.warnings == []

    def test_old_round_bundle_not_reapplied_after_reset(self, pair):
        """A bundle queued before a round start is applied before it, never after."""
        host, client = pair
        landed = []
        client.events.subscribe(StrikeLanded, landed.append)
        force_warning(host, 640.0)
        run(host, client, 4, [])
        host.step(DT, [])
        host.start_round()
        client.step(DT, [])
        assert len(landed) == 1
        assert client.lightning.strikes == []
        assert client.round_number == host.round_number == 1
        assert client.terrain.anim_time == host.terrain.anim_time == 0.0

    def test_new_round_bundle_applies_after_reset(self, pair):
        """Bundles sent after a round start land on the fresh round."""
        host, client = pair
        run(host, client, 2, [])
        host.start_round()
        force_warning(host, 300.0)
        host.step(DT, [])
        client.step(DT, [])
        assert client.lightning.get_state() == host.lightning.get_state()
        assert client.terrain.anim_time == host.terrain.anim_time == DT
        assert client.last_applied_tick == host.tick
