"""Tests for the shared damage rule."""

import pytest

from arena.config import HIT_FLASH_DURATION
from arena.simulation.targets import ArenaBounds, Fighter, apply_damage


class TestApplyDamage:
    """Verify the shared armor-then-life damage rule."""

    def test_no_armor(self):
        """Without armor the full amount comes off life."""
        f = Fighter(target_id=1, x=0, y=0, life=100)
        assert apply_damage(f, 20) == 20
        assert f.life == 80
        assert f.hit_flash == HIT_FLASH_DURATION

    def test_armor_absorbs_first(self):
        """life=100, armor=10, damage 20 -> armor 0, life 90."""
        f = Fighter(target_id=1, x=0, y=0, life=100, armor=10)
        assert apply_damage(f, 20) == 10
        assert f.armor == 0
        assert f.life == 90

    def test_armor_soaks_everything(self):
        """Armor larger than the hit absorbs all of it."""
        f = Fighter(target_id=1, x=0, y=0, life=100, armor=30)
        assert apply_damage(f, 20) == 0
        assert f.armor == 10
        assert f.life == 100

    @pytest.mark.parametrize("armor,damage", [(1, 20), (5, 5), (15, 20), (40, 20), (0, 7)])
    def test_armor_and_life_accounting(self, armor, damage):
        """Armor ends at max(0, A-D), life loses max(0, D-A), never more than D in total."""
        f = Fighter(target_id=1, x=0, y=0, life=100, armor=armor)
        lost = apply_damage(f, damage)
        assert f.armor == max(0, armor - damage)
        assert lost == max(0, damage - armor)
        assert lost + (armor - f.armor) <= damage

    def test_life_clamped_at_zero(self):
        """Life never goes negative."""
        f = Fighter(target_id=1, x=0, y=0, life=5)
        assert apply_damage(f, 30) == 5
        assert f.life == 0

    def test_invulnerable_untouched(self):
        """Invulnerable targets take nothing and do not flash."""
        f = Fighter(target_id=1, x=0, y=0, life=100, armor=5, invulnerable=True)
        assert apply_damage(f, 20) == 0
        assert f.life == 100
        assert f.armor == 5
        assert f.hit_flash == 0

    def test_custom_flash(self):
        """Callers can choose the flash duration."""
        f = Fighter(target_id=1, x=0, y=0)
        apply_damage(f, 1, flash=0.1)
        assert f.hit_flash == 0.1


class TestArenaBounds:
    """Verify arena geometry helpers."""

    def test_width(self):
        """Width is the distance between the walls."""
        assert ArenaBounds(wall_left=100, wall_right=500).width == 400
