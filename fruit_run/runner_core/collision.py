"""
Collision System
================

Scrolls every entity collection toward the player, tests each entity against
the player's inset hitbox and applies the outcome:

- obstacle: run ends, nothing else is processed this tick
- fruit: points, possible transform, removal
- bonus: points, power-up, removal

Entities whose right edge passed the left world boundary are dropped
without scoring in the same pass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from fruit_run.runner_core.config_loader import GameConfig, get_config
from fruit_run.runner_core.entities import EntityStore
from fruit_run.runner_core.effects import EffectsEngine
from fruit_run.runner_core.events import EventSink, SoundCue
from fruit_run.runner_core.player import Player, PlayerController
from fruit_run.runner_core.scoring import ScoreAndDifficultyManager


Box = Tuple[float, float, float, float]


def aabb_overlap(a: Box, b: Box) -> bool:
    """
    Strict axis-aligned overlap test of two (x, y, width, height) boxes.

    Boxes that only touch along an edge do not overlap.
    """
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def player_hitbox(player: Player, inset: float) -> Box:
    """Player box shrunk by `inset` on every side."""
    return (
        player.x + inset,
        player.y + inset,
        player.width - 2 * inset,
        player.height - 2 * inset,
    )


def entity_box(entity) -> Box:
    return (entity.x, entity.y, entity.width, entity.height)


@dataclass
class CollisionReport:
    """What the resolution pass did."""
    hit_obstacle: bool = False
    fruits_collected: int = 0
    bonuses_collected: int = 0
    removed_offscreen: int = 0


class CollisionSystem:
    """Resolves player-entity contacts for one tick."""

    def __init__(
        self,
        store: EntityStore,
        controller: PlayerController,
        scoring: ScoreAndDifficultyManager,
        effects: EffectsEngine,
        config: Optional[GameConfig] = None
    ):
        if config is None:
            config = get_config()

        self._config = config
        self._store = store
        self._controller = controller
        self._scoring = scoring
        self._effects = effects
        self._inset = config.player.hitbox_inset

    def hits_player(self, entity) -> bool:
        """AABB test between the inset player box and an entity's full box."""
        return aabb_overlap(
            player_hitbox(self._controller.player, self._inset),
            entity_box(entity)
        )

    def scroll_distance(self, delta: float) -> float:
        """World movement this tick, slowed while the speed-boost timer runs."""
        distance = self._scoring.speed * delta
        player = self._controller.player
        if player.speed_boost_active:
            distance *= player.slow_motion_factor
        return distance

    def resolve(self, delta: float, events: EventSink) -> CollisionReport:
        """
        Move, test and prune obstacles, then fruits, then bonus items.

        Args:
            delta: Frame multiplier.
            events: Sink for sound cues.

        Returns:
            CollisionReport; hit_obstacle=True means the run is over.
        """
        report = CollisionReport()
        distance = self.scroll_distance(delta)

        if self._resolve_obstacles(distance, report):
            report.hit_obstacle = True
            events.sound(SoundCue.HIT)
            return report

        self._resolve_fruits(distance, delta, events, report)
        self._resolve_bonuses(distance, delta, events, report)
        return report

    def _resolve_obstacles(self, distance: float, report: CollisionReport) -> bool:
        obstacles = self._store.obstacles
        for i in range(len(obstacles) - 1, -1, -1):
            obstacle = obstacles[i]
            obstacle.x -= distance

            if self.hits_player(obstacle):
                return True

            if obstacle.right < 0:
                del obstacles[i]
                report.removed_offscreen += 1
        return False

    def _resolve_fruits(
        self,
        distance: float,
        delta: float,
        events: EventSink,
        report: CollisionReport
    ) -> None:
        fruits = self._store.fruits
        bob_rate = self._config.effects.bob_rate
        for i in range(len(fruits) - 1, -1, -1):
            fruit = fruits[i]
            fruit.x -= distance
            fruit.bob_phase += bob_rate * delta

            if self.hits_player(fruit):
                self._scoring.add_points(fruit.points)
                if self._controller.transform(fruit.kind):
                    events.sound(SoundCue.TRANSFORM)
                    self._effects.burst(fruit.x, fruit.y, fruit.kind.color)
                else:
                    events.sound(SoundCue.COLLECT)
                del fruits[i]
                report.fruits_collected += 1
                continue

            if fruit.right < 0:
                del fruits[i]
                report.removed_offscreen += 1

    def _resolve_bonuses(
        self,
        distance: float,
        delta: float,
        events: EventSink,
        report: CollisionReport
    ) -> None:
        bonuses = self._store.bonus_items
        sparkle_rate = self._config.effects.sparkle_rate
        for i in range(len(bonuses) - 1, -1, -1):
            bonus = bonuses[i]
            bonus.x -= distance
            bonus.sparkle_phase += sparkle_rate * delta

            if self.hits_player(bonus):
                self._scoring.add_points(bonus.points)
                self._controller.apply_power_up(bonus.kind)
                self._effects.burst(bonus.x, bonus.y, bonus.kind.color)
                events.sound(SoundCue.BONUS)
                del bonuses[i]
                report.bonuses_collected += 1
                continue

            if bonus.right < 0:
                del bonuses[i]
                report.removed_offscreen += 1
