"""
Entities
========

Transient world entities and the store that owns them.

Every entity lives in exactly one insertion-ordered collection. Removal is done
by index while walking a collection from the end, so in-place deletion never
skips a neighbour.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from fruit_run.runner_core.config_loader import (
    FruitConfig,
    ObstacleConfig,
    BonusConfig
)


@dataclass(frozen=True)
class WorldBounds:
    """Playable area supplied by the host."""
    width: float
    height: float

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"World bounds must be positive, got {self.width}x{self.height}")

    def ground_y(self, margin: float) -> float:
        """Y of the ground line for a given margin above the bottom edge."""
        return self.height - margin


@dataclass
class Obstacle:
    """A ground hazard scrolling toward the player."""
    uid: int
    kind: ObstacleConfig
    x: float
    y: float

    @property
    def width(self) -> float:
        return self.kind.width

    @property
    def height(self) -> float:
        return self.kind.height

    @property
    def right(self) -> float:
        return self.x + self.kind.width


@dataclass
class Fruit:
    """A collectible fruit; bob_phase drives its vertical wobble."""
    uid: int
    kind: FruitConfig
    x: float
    y: float
    bob_phase: float = 0.0

    @property
    def width(self) -> float:
        return self.kind.width

    @property
    def height(self) -> float:
        return self.kind.height

    @property
    def right(self) -> float:
        return self.x + self.kind.width

    @property
    def points(self) -> int:
        return self.kind.points


@dataclass
class BonusItem:
    """A floating bonus; sparkle_phase drives its glint."""
    uid: int
    kind: BonusConfig
    x: float
    y: float
    sparkle_phase: float = 0.0

    @property
    def width(self) -> float:
        return self.kind.width

    @property
    def height(self) -> float:
        return self.kind.height

    @property
    def right(self) -> float:
        return self.x + self.kind.width

    @property
    def points(self) -> int:
        return self.kind.points

    @property
    def effect(self) -> str:
        return self.kind.effect


@dataclass
class Particle:
    """
    Ephemeral effect particle.

    Life is an integer tick count and is not scaled by the delta multiplier.
    """
    x: float
    y: float
    vx: float
    vy: float
    life: int
    max_life: int
    color: str

    @property
    def alpha(self) -> float:
        """Opacity in [0, 1], fading with remaining life."""
        if self.max_life <= 0:
            return 0.0
        return max(0.0, self.life / self.max_life)


@dataclass
class EntityStore:
    """Owns every transient entity of a session."""
    obstacles: List[Obstacle] = field(default_factory=list)
    fruits: List[Fruit] = field(default_factory=list)
    bonus_items: List[BonusItem] = field(default_factory=list)
    particles: List[Particle] = field(default_factory=list)
    _next_uid: int = 0

    def next_uid(self) -> int:
        """Allocate a session-unique entity id."""
        uid = self._next_uid
        self._next_uid += 1
        return uid

    def add_obstacle(self, kind: ObstacleConfig, x: float, y: float) -> Obstacle:
        obstacle = Obstacle(uid=self.next_uid(), kind=kind, x=x, y=y)
        self.obstacles.append(obstacle)
        return obstacle

    def add_fruit(self, kind: FruitConfig, x: float, y: float, bob_phase: float = 0.0) -> Fruit:
        fruit = Fruit(uid=self.next_uid(), kind=kind, x=x, y=y, bob_phase=bob_phase)
        self.fruits.append(fruit)
        return fruit

    def add_bonus(self, kind: BonusConfig, x: float, y: float) -> BonusItem:
        bonus = BonusItem(uid=self.next_uid(), kind=kind, x=x, y=y)
        self.bonus_items.append(bonus)
        return bonus

    @property
    def entity_count(self) -> int:
        """Obstacles, fruits and bonus items currently alive."""
        return len(self.obstacles) + len(self.fruits) + len(self.bonus_items)

    def clear(self) -> None:
        """Drop every entity and restart uid allocation."""
        self.obstacles.clear()
        self.fruits.clear()
        self.bonus_items.clear()
        self.particles.clear()
        self._next_uid = 0
