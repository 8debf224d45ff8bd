"""
Tests for particle bursts and aging.
"""

import random

import pytest

from fruit_run.runner_core.config_loader import load_config
from fruit_run.runner_core.effects import EffectsEngine
from fruit_run.runner_core.entities import Particle


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def particles():
    return []


@pytest.fixture
def effects(particles, config):
    return EffectsEngine(particles, config, rng=random.Random(42))


class TestBursts:
    """Test particle creation."""

    def test_burst_shape(self, effects, particles):
        created = effects.burst(50.0, 60.0, "#FF0000")

        assert len(created) == 8
        assert particles == created
        for p in created:
            assert (p.x, p.y) == (50.0, 60.0)
            assert p.life == 30 and p.max_life == 30
            assert p.color == "#FF0000"
            assert -3.0 <= p.vx < 3.0
            # Biased upward by the lift
            assert -5.0 <= p.vy < 1.0

    def test_level_up_burst(self, effects, particles):
        created = effects.level_up_burst(120.0, 320.0)

        assert len(created) == 15
        for p in created:
            assert p.life == 60
            assert p.color == "#FFD700"
            assert -6.0 <= p.vx < 6.0
            assert -6.0 <= p.vy < 6.0

    def test_bursts_accumulate(self, effects, particles):
        effects.burst(0, 0, "#FFFFFF")
        effects.burst(0, 0, "#000000")
        assert len(particles) == 16
        assert particles[0].color == "#FFFFFF"
        assert particles[-1].color == "#000000"


class TestAging:
    """Test per-tick particle updates."""

    def test_motion_and_gravity(self, effects, particles):
        particles.append(Particle(x=0.0, y=0.0, vx=1.0, vy=-2.0, life=5, max_life=5, color="#FFFFFF"))

        effects.age(1.0)

        p = particles[0]
        assert p.x == pytest.approx(1.0)
        assert p.y == pytest.approx(-2.0)
        assert p.vy == pytest.approx(-1.8)
        assert p.life == 4

    def test_delta_scales_motion_not_life(self, effects, particles):
        particles.append(Particle(x=0.0, y=0.0, vx=1.0, vy=0.0, life=5, max_life=5, color="#FFFFFF"))

        effects.age(2.0)

        assert particles[0].x == pytest.approx(2.0)
        assert particles[0].vy == pytest.approx(0.4)
        assert particles[0].life == 4

    def test_expired_particles_removed(self, effects, particles):
        particles.append(Particle(x=0, y=0, vx=0, vy=0, life=1, max_life=30, color="#111111"))
        particles.append(Particle(x=0, y=0, vx=0, vy=0, life=2, max_life=30, color="#222222"))
        particles.append(Particle(x=0, y=0, vx=0, vy=0, life=1, max_life=30, color="#333333"))

        removed = effects.age(1.0)

        assert removed == 2
        assert [p.color for p in particles] == ["#222222"]

    def test_burst_fades_out_after_its_life(self, effects, particles):
        effects.burst(10, 10, "#00FF00")
        for _ in range(29):
            effects.age(1.0)
        assert len(particles) == 8
        assert particles[0].alpha == pytest.approx(1 / 30)

        effects.age(1.0)
        assert particles == []

    def test_clear(self, effects, particles):
        effects.level_up_burst(0, 0)
        effects.clear()
        assert particles == []
