"""
Effects Engine
==============

Spawns and ages particle bursts (fruit transforms, power-ups, level-ups).
"""

from __future__ import annotations

import random
from typing import List, Optional

from fruit_run.runner_core.config_loader import GameConfig, get_config
from fruit_run.runner_core.entities import Particle


class EffectsEngine:
    """
    Owns particle creation and aging.

    Particles are appended to a caller-owned list (the session's EntityStore)
    so snapshots see them in insertion order.
    """

    def __init__(
        self,
        particles: List[Particle],
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize effects engine.

        Args:
            particles: Particle collection to append to and age.
            config: Game configuration. Uses default if None.
            rng: Random source for particle velocities.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._effects = config.effects
        self._particles = particles
        self._rng = rng if rng is not None else random.Random()

    @property
    def particles(self) -> List[Particle]:
        return self._particles

    def _spread(self, amount: float) -> float:
        """Uniform sample in [-amount/2, amount/2)."""
        return (self._rng.random() - 0.5) * amount

    def burst(self, x: float, y: float, color: str) -> List[Particle]:
        """
        Emit a small burst (fruit transform, bonus pickup, double jump).

        Args:
            x: Burst origin X.
            y: Burst origin Y.
            color: '#RRGGBB' particle color.

        Returns:
            The particles created.
        """
        fx = self._effects
        created = []
        for _ in range(fx.burst_count):
            particle = Particle(
                x=x,
                y=y,
                vx=self._spread(fx.burst_spread),
                vy=self._spread(fx.burst_spread) - fx.burst_lift,
                life=fx.burst_life,
                max_life=fx.burst_life,
                color=color
            )
            self._particles.append(particle)
            created.append(particle)
        return created

    def level_up_burst(self, x: float, y: float) -> List[Particle]:
        """Emit the larger, longer-lived gold burst for a level milestone."""
        fx = self._effects
        created = []
        for _ in range(fx.level_up_count):
            particle = Particle(
                x=x,
                y=y,
                vx=self._spread(fx.level_up_spread),
                vy=self._spread(fx.level_up_spread),
                life=fx.level_up_life,
                max_life=fx.level_up_life,
                color=fx.level_up_color
            )
            self._particles.append(particle)
            created.append(particle)
        return created

    def age(self, delta: float) -> int:
        """
        Advance every particle by one tick.

        Args:
            delta: Frame multiplier for this tick.

        Returns:
            Number of particles removed.
        """
        gravity = self._effects.particle_gravity
        removed = 0
        for i in range(len(self._particles) - 1, -1, -1):
            particle = self._particles[i]
            particle.x += particle.vx * delta
            particle.y += particle.vy * delta
            particle.vy += gravity * delta
            particle.life -= 1
            if particle.life <= 0:
                del self._particles[i]
                removed += 1
        return removed

    def clear(self) -> None:
        self._particles.clear()
