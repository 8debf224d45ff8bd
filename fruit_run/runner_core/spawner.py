"""
Spawn Scheduler
===============

Decides each tick whether an obstacle, fruit or bonus item enters the world
at its right edge. Cadence is frame-count based; obstacle cadence tightens
with the score-derived difficulty level.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import List, Optional

from fruit_run.runner_core.catalog import EntityCatalog, get_catalog
from fruit_run.runner_core.config_loader import GameConfig, get_config
from fruit_run.runner_core.entities import (
    BonusItem,
    EntityStore,
    Fruit,
    Obstacle,
    WorldBounds
)


@dataclass
class SpawnResult:
    """Entities created during one tick."""
    obstacles: List[Obstacle] = field(default_factory=list)
    fruits: List[Fruit] = field(default_factory=list)
    bonus_items: List[BonusItem] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.obstacles) + len(self.fruits) + len(self.bonus_items)


class SpawnScheduler:
    """
    Frame-count driven spawner.

    All randomness (kind choice, heights, bonus roll, bob phase) comes from
    one seedable random.Random so runs are reproducible.
    """

    def __init__(
        self,
        store: EntityStore,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None
    ):
        """
        Initialize scheduler.

        Args:
            store: Entity store receiving new entities.
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Ignored if rng is given.
            rng: Shared random source.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._catalog: EntityCatalog = get_catalog(config)
        self._store = store
        self._rng = rng if rng is not None else random.Random(seed)

    def reset(self, seed: Optional[int] = None) -> None:
        """Reseed the random source (keeps current state if seed is None)."""
        if seed is not None:
            self._rng.seed(seed)

    def obstacle_level(self, score: int) -> int:
        """Difficulty level driving obstacle cadence, starting at 1."""
        return score // self._config.scoring.level_points + 1

    def obstacle_frequency(self, score: int, speed: float) -> int:
        """
        Frames between obstacles.

        Levels covered by the configured table use it directly; beyond that
        the gap shrinks as speed rises, down to the floor.
        """
        spawn = self._config.spawn
        level = self.obstacle_level(score)
        table = spawn.obstacle_frequencies
        if level <= len(table):
            return table[level - 1]
        dynamic = spawn.dynamic_frequency_base - math.floor(speed * spawn.dynamic_speed_factor)
        return max(spawn.dynamic_frequency_floor, dynamic)

    def _band_y(self, band, world: WorldBounds) -> float:
        low, high = band
        min_y = world.height * low
        max_y = world.height * high
        return min_y + self._rng.random() * (max_y - min_y)

    def spawn_obstacle(self, world: WorldBounds) -> Obstacle:
        """Add a random obstacle at the right edge, resting on the ground line."""
        kind = self._catalog.obstacles[self._rng.randrange(len(self._catalog.obstacles))]
        ground = world.ground_y(self._config.world.ground_margin)
        if kind.below_ground:
            y = ground + self._config.spawn.water_depth
        else:
            y = ground - kind.height
        return self._store.add_obstacle(kind, world.width, y)

    def spawn_fruit(self, world: WorldBounds) -> Fruit:
        """Add a random fruit at the right edge, inside the fruit height band."""
        kind = self._catalog.fruits[self._rng.randrange(len(self._catalog.fruits))]
        y = self._band_y(self._config.spawn.fruit_band, world)
        bob_phase = self._rng.random() * 2.0 * math.pi
        return self._store.add_fruit(kind, world.width, y, bob_phase)

    def spawn_bonus(self, world: WorldBounds) -> BonusItem:
        """Add a random bonus at the right edge, inside the bonus height band."""
        kind = self._catalog.bonuses[self._rng.randrange(len(self._catalog.bonuses))]
        y = self._band_y(self._config.spawn.bonus_band, world)
        return self._store.add_bonus(kind, world.width, y)

    def maybe_spawn(
        self,
        frame: int,
        score: int,
        speed: float,
        world: WorldBounds
    ) -> SpawnResult:
        """
        Apply this frame's spawn rules.

        Args:
            frame: Frame counter (already incremented for this tick).
            score: Current score (drives obstacle level).
            speed: Current scroll speed (drives high-level cadence).
            world: Current world bounds.

        Returns:
            SpawnResult listing what was created.
        """
        result = SpawnResult()
        spawn = self._config.spawn

        if frame % self.obstacle_frequency(score, speed) == 0:
            result.obstacles.append(self.spawn_obstacle(world))

        if frame % spawn.fruit_interval == 0:
            result.fruits.append(self.spawn_fruit(world))

        if frame % spawn.bonus_interval == 0 and self._rng.random() < spawn.bonus_chance:
            result.bonus_items.append(self.spawn_bonus(world))

        return result
