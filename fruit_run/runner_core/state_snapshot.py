"""
State Snapshot
==============

Immutable per-tick view of a session for renderers, plus packing into
fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, TYPE_CHECKING
import numpy as np

if TYPE_CHECKING:
    from fruit_run.runner_core.game import RunnerGame

# Entity categories in observation arrays
CATEGORY_NONE = 0
CATEGORY_OBSTACLE = 1
CATEGORY_FRUIT = 2
CATEGORY_BONUS = 3

POWER_UP_NAMES = ("slow_motion", "mega_jump", "float", "double_jump")


@dataclass(frozen=True)
class PlayerView:
    """Read-only player state."""
    x: float
    y: float
    width: float
    height: float
    vy: float
    grounded: bool
    jumping: bool
    fruit: str
    color: str
    speed_boost_timer: float
    mega_jump_timer: float
    float_timer: float
    double_jump_timer: float
    can_double_jump: bool
    run_cycle: float
    arm_reach: float
    eye_blink: float

    @property
    def timers(self) -> Tuple[float, float, float, float]:
        """Power-up timers in POWER_UP_NAMES order."""
        return (
            self.speed_boost_timer,
            self.mega_jump_timer,
            self.float_timer,
            self.double_jump_timer,
        )


@dataclass(frozen=True)
class EntityView:
    """Read-only obstacle, fruit or bonus item."""
    uid: int
    category: int
    kind: str
    type_id: int
    x: float
    y: float
    width: float
    height: float
    color: str
    points: int = 0
    phase: float = 0.0     # Bob phase for fruit, sparkle phase for bonuses
    effect: str = ""


@dataclass(frozen=True)
class ParticleView:
    """Read-only particle."""
    x: float
    y: float
    color: str
    alpha: float
    life: int


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete session state after a tick.

    Collections are tuples in insertion order, so a snapshot can be handed
    to another thread without tearing.
    """
    state: str
    frame: int
    score: int
    high_score: int
    speed: float
    level: int
    world_width: float
    world_height: float
    ground_y: float
    player: PlayerView
    obstacles: Tuple[EntityView, ...]
    fruits: Tuple[EntityView, ...]
    bonus_items: Tuple[EntityView, ...]
    particles: Tuple[ParticleView, ...]
    power_ups: Tuple[Tuple[str, bool], ...]

    @property
    def power_up_flags(self) -> Dict[str, bool]:
        return dict(self.power_ups)

    @property
    def speed_display(self) -> str:
        return f"{self.speed:.1f}x"

    def entities(self) -> Tuple[EntityView, ...]:
        """Every obstacle, fruit and bonus item."""
        return self.obstacles + self.fruits + self.bonus_items

    def to_obs_dict(self, max_entities: int) -> Dict[str, np.ndarray]:
        """
        Convert to a Gymnasium observation dictionary.

        Entities ahead of the player come first, nearest first; entities
        beyond `max_entities` are dropped and padding is masked out.
        """
        ent_category = np.zeros(max_entities, dtype=np.int8)
        ent_type_id = np.full(max_entities, -1, dtype=np.int16)
        ent_x = np.zeros(max_entities, dtype=np.float32)
        ent_y = np.zeros(max_entities, dtype=np.float32)
        ent_w = np.zeros(max_entities, dtype=np.float32)
        ent_h = np.zeros(max_entities, dtype=np.float32)
        ent_mask = np.zeros(max_entities, dtype=bool)

        ordered = sorted(
            self.entities(),
            key=lambda e: (e.x + e.width < self.player.x, e.x)
        )
        for i, entity in enumerate(ordered[:max_entities]):
            ent_category[i] = entity.category
            ent_type_id[i] = entity.type_id
            ent_x[i] = entity.x
            ent_y[i] = entity.y
            ent_w[i] = entity.width
            ent_h[i] = entity.height
            ent_mask[i] = True

        p = self.player
        return {
            "player_y": np.array(p.y, dtype=np.float32),
            "player_vy": np.array(p.vy, dtype=np.float32),
            "grounded": np.array(int(p.grounded), dtype=np.int8),
            "can_double_jump": np.array(int(p.can_double_jump), dtype=np.int8),
            "power_up_timers": np.array(p.timers, dtype=np.float32),
            "speed": np.array(self.speed, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "level": np.array(self.level, dtype=np.int32),
            "frame": np.array(self.frame, dtype=np.int64),
            "ground_y": np.array(self.ground_y, dtype=np.float32),
            "ent_category": ent_category,
            "ent_type_id": ent_type_id,
            "ent_x": ent_x,
            "ent_y": ent_y,
            "ent_w": ent_w,
            "ent_h": ent_h,
            "ent_mask": ent_mask,
        }


def build_snapshot(game: "RunnerGame") -> GameSnapshot:
    """Build a snapshot from current game state."""
    p = game.player
    player = PlayerView(
        x=p.x,
        y=p.y,
        width=p.width,
        height=p.height,
        vy=p.vy,
        grounded=p.grounded,
        jumping=p.jumping,
        fruit=p.fruit.name,
        color=p.color,
        speed_boost_timer=p.speed_boost_timer,
        mega_jump_timer=p.mega_jump_timer,
        float_timer=p.float_timer,
        double_jump_timer=p.double_jump_timer,
        can_double_jump=p.can_double_jump,
        run_cycle=p.run_cycle,
        arm_reach=p.arm_reach,
        eye_blink=p.eye_blink
    )

    store = game.store
    obstacles = tuple(
        EntityView(
            uid=o.uid,
            category=CATEGORY_OBSTACLE,
            kind=o.kind.name,
            type_id=o.kind.id,
            x=o.x,
            y=o.y,
            width=o.width,
            height=o.height,
            color=o.kind.color
        )
        for o in store.obstacles
    )
    fruits = tuple(
        EntityView(
            uid=f.uid,
            category=CATEGORY_FRUIT,
            kind=f.kind.name,
            type_id=f.kind.id,
            x=f.x,
            y=f.y,
            width=f.width,
            height=f.height,
            color=f.kind.color,
            points=f.points,
            phase=f.bob_phase
        )
        for f in store.fruits
    )
    bonus_items = tuple(
        EntityView(
            uid=b.uid,
            category=CATEGORY_BONUS,
            kind=b.kind.name,
            type_id=b.kind.id,
            x=b.x,
            y=b.y,
            width=b.width,
            height=b.height,
            color=b.kind.color,
            points=b.points,
            phase=b.sparkle_phase,
            effect=b.effect
        )
        for b in store.bonus_items
    )
    particles = tuple(
        ParticleView(x=q.x, y=q.y, color=q.color, alpha=q.alpha, life=q.life)
        for q in store.particles
    )

    flags = game.controller.power_up_flags()
    return GameSnapshot(
        state=game.state.value,
        frame=game.frame,
        score=game.score,
        high_score=game.high_score,
        speed=game.speed,
        level=game.level,
        world_width=game.world.width,
        world_height=game.world.height,
        ground_y=game.controller.ground_y(game.world),
        player=player,
        obstacles=obstacles,
        fruits=fruits,
        bonus_items=bonus_items,
        particles=particles,
        power_ups=tuple((name, flags[name]) for name in POWER_UP_NAMES)
    )

