"""
Player Controller
=================

Owns the runner's kinematic state, power-up timers and animation phases.

Coordinates are screen-style: Y grows downward, the player's (x, y) is the
top-left corner of its box and "up" is negative velocity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from fruit_run.runner_core.config_loader import GameConfig, FruitConfig, BonusConfig, get_config
from fruit_run.runner_core.entities import Fruit, WorldBounds
from fruit_run.runner_core.effects import EffectsEngine
from fruit_run.runner_core.events import EventSink, SoundCue

TAU = 2.0 * math.pi


@dataclass
class Player:
    """Mutable player state for one session."""
    x: float
    y: float
    width: float
    height: float
    fruit: FruitConfig
    vy: float = 0.0
    grounded: bool = True
    jumping: bool = False

    # Power-up countdowns, in nominal frames
    speed_boost_timer: float = 0.0
    mega_jump_timer: float = 0.0
    float_timer: float = 0.0
    double_jump_timer: float = 0.0
    can_double_jump: bool = False

    jump_power: float = 18.0
    mega_jump_boost: float = 1.5
    slow_motion_factor: float = 0.5

    # Animation phases
    run_cycle: float = 0.0
    arm_reach: float = 0.0
    eye_blink: float = 0.0

    @property
    def color(self) -> str:
        return self.fruit.color

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def speed_boost_active(self) -> bool:
        return self.speed_boost_timer > 0

    @property
    def mega_jump_active(self) -> bool:
        return self.mega_jump_timer > 0

    @property
    def float_active(self) -> bool:
        return self.float_timer > 0

    @property
    def double_jump_active(self) -> bool:
        return self.double_jump_timer > 0

    @property
    def effective_jump_power(self) -> float:
        """Jump impulse magnitude including the mega-jump boost."""
        if self.mega_jump_active:
            return self.jump_power * self.mega_jump_boost
        return self.jump_power


class PlayerController:
    """
    Applies jumps, gravity, boundary clamping and power-ups to a Player.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        effects: Optional[EffectsEngine] = None
    ):
        """
        Initialize controller.

        Args:
            config: Game configuration. Uses default if None.
            effects: Effects engine for the double-jump burst. None disables bursts.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._effects = effects
        self.player = self._fresh_player(
            WorldBounds(config.world.width, config.world.height)
        )

    def _fresh_player(self, world: WorldBounds) -> Player:
        cfg = self._config.player
        return Player(
            x=cfg.start_x,
            y=self.ground_y(world),
            width=cfg.width,
            height=cfg.height,
            fruit=self._config.get_fruit(cfg.start_fruit),
            jump_power=cfg.jump_power,
            mega_jump_boost=cfg.mega_jump_boost,
            slow_motion_factor=self._config.speed.slow_motion_factor
        )

    def ground_y(self, world: WorldBounds) -> float:
        """Y the player rests at when grounded."""
        return world.ground_y(self._config.world.ground_margin)

    def reset(self, world: WorldBounds) -> Player:
        """Replace the player with a grounded default one."""
        self.player = self._fresh_player(world)
        return self.player

    def jump(self, events: EventSink) -> bool:
        """
        Handle a jump command.

        Grounded: full jump. Airborne with a double jump available: a weaker
        second jump plus a particle burst. Otherwise nothing happens.

        Returns:
            True if a jump was performed.
        """
        p = self.player
        power = p.effective_jump_power

        if p.grounded:
            p.vy = -power
            p.jumping = True
            p.grounded = False
            p.can_double_jump = p.double_jump_active
            events.sound(SoundCue.JUMP)
            return True

        if p.can_double_jump:
            p.vy = -power * self._config.player.double_jump_factor
            p.can_double_jump = False
            events.sound(SoundCue.JUMP)
            if self._effects is not None:
                cx, cy = p.center
                self._effects.burst(cx, cy, self._config.effects.double_jump_color)
            return True

        return False

    def tick_timers(self, delta: float) -> None:
        """Count every active power-up down, never below zero."""
        p = self.player
        p.speed_boost_timer = max(0.0, p.speed_boost_timer - delta)
        p.mega_jump_timer = max(0.0, p.mega_jump_timer - delta)
        p.float_timer = max(0.0, p.float_timer - delta)
        p.double_jump_timer = max(0.0, p.double_jump_timer - delta)

    def _near_fruit(self, fruits: Sequence[Fruit]) -> bool:
        p = self.player
        radius = self._config.animation.arm_reach_radius
        for fruit in fruits:
            if math.hypot(fruit.x - p.x, fruit.y - p.y) < radius:
                return True
        return False

    def animate(self, delta: float, fruits: Sequence[Fruit] = ()) -> None:
        """Advance run cycle, arm reach and eye blink phases."""
        p = self.player
        anim = self._config.animation

        if p.grounded:
            p.run_cycle += anim.run_cycle_rate * delta

        if p.jumping or not p.grounded:
            p.arm_reach = min(p.arm_reach + anim.arm_reach_rise * delta, 1.0)
        else:
            p.arm_reach = max(p.arm_reach - anim.arm_reach_decay * delta, 0.0)

        if not p.grounded and self._near_fruit(fruits):
            p.arm_reach = min(p.arm_reach + anim.arm_reach_fruit_rise * delta, 1.0)

        p.eye_blink += anim.eye_blink_rate * delta
        if p.eye_blink >= TAU:
            p.eye_blink %= TAU

    def integrate(
        self,
        delta: float,
        world: WorldBounds,
        fruits: Sequence[Fruit] = ()
    ) -> None:
        """
        Advance the player by one tick.

        Args:
            delta: Frame multiplier.
            world: Current world bounds (ground line and top clamp).
            fruits: Live fruits, used by the arm-reach animation.
        """
        self.tick_timers(delta)
        self.animate(delta, fruits)

        p = self.player
        physics = self._config.physics
        gravity = (physics.float_gravity if p.float_active else physics.gravity) * delta

        p.vy += gravity
        p.y += p.vy * delta

        top = self._config.world.top_boundary
        if p.y < top:
            p.y = top
            p.vy = max(p.vy, 0.0)

        ground = self.ground_y(world)
        if p.y >= ground:
            p.y = ground
            p.vy = 0.0
            p.grounded = True
            p.jumping = False
            if p.double_jump_active:
                p.can_double_jump = True

    def transform(self, fruit: FruitConfig) -> bool:
        """
        Switch the player's fruit form.

        Returns:
            True if the form changed.
        """
        if self.player.fruit.name == fruit.name:
            return False
        self.player.fruit = fruit
        return True

    def apply_power_up(self, bonus: BonusConfig) -> None:
        """Start the timer matching a bonus effect; 'points' bonuses do nothing here."""
        p = self.player
        if bonus.effect == "speed":
            p.speed_boost_timer = bonus.duration
            p.slow_motion_factor = bonus.magnitude
        elif bonus.effect == "megajump":
            p.mega_jump_timer = bonus.duration
            p.mega_jump_boost = bonus.magnitude
        elif bonus.effect == "float":
            p.float_timer = bonus.duration
        elif bonus.effect == "doublejump":
            p.double_jump_timer = bonus.duration
            p.can_double_jump = True

    def power_up_flags(self) -> dict:
        """Which power-ups are currently active."""
        p = self.player
        return {
            "slow_motion": p.speed_boost_active,
            "mega_jump": p.mega_jump_active,
            "float": p.float_active,
            "double_jump": p.double_jump_active,
        }
