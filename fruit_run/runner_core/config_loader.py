"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple, Optional

import yaml


# Bonus effect kinds understood by the collision system
EFFECT_KINDS = ("points", "speed", "megajump", "float", "doublejump")


@dataclass(frozen=True)
class WorldConfig:
    """Default world geometry (hosts may override per tick)."""
    width: int
    height: int
    ground_margin: float   # Ground line = height - ground_margin
    top_boundary: float    # Minimum player Y


@dataclass(frozen=True)
class TimingConfig:
    """Frame normalization parameters."""
    target_fps: int
    max_frame_multiplier: float

    @property
    def frame_interval_ms(self) -> float:
        """Duration of one nominal frame in milliseconds."""
        return 1000.0 / self.target_fps


@dataclass(frozen=True)
class PhysicsConfig:
    """Player physics parameters (per nominal frame)."""
    gravity: float
    float_gravity: float


@dataclass(frozen=True)
class PlayerConfig:
    """Player geometry and jump tuning."""
    start_x: float
    width: float
    height: float
    jump_power: float
    mega_jump_boost: float
    double_jump_factor: float
    hitbox_inset: float
    start_fruit: str


@dataclass(frozen=True)
class AnimationConfig:
    """Animation phase rates (per nominal frame)."""
    run_cycle_rate: float
    arm_reach_rise: float
    arm_reach_fruit_rise: float
    arm_reach_decay: float
    arm_reach_radius: float
    eye_blink_rate: float


@dataclass(frozen=True)
class SpeedConfig:
    """World scroll speed parameters."""
    base: float
    creep: float
    slow_motion_factor: float
    level_base_increase: float
    level_step_increase: float


@dataclass(frozen=True)
class ScoringConfig:
    """Scoring parameters."""
    survival_points: int
    survival_interval: int
    level_points: int


@dataclass(frozen=True)
class SpawnConfig:
    """Spawn cadence and placement parameters."""
    obstacle_frequencies: Tuple[int, ...]
    dynamic_frequency_base: int
    dynamic_frequency_floor: int
    dynamic_speed_factor: float
    fruit_interval: int
    fruit_band: Tuple[float, float]
    bonus_interval: int
    bonus_chance: float
    bonus_band: Tuple[float, float]
    water_depth: float


@dataclass(frozen=True)
class EffectsConfig:
    """Particle burst parameters."""
    burst_count: int
    burst_life: int
    burst_spread: float
    burst_lift: float
    level_up_count: int
    level_up_life: int
    level_up_spread: float
    level_up_color: str
    double_jump_color: str
    points_color: str
    particle_gravity: float
    bob_rate: float
    sparkle_rate: float


@dataclass(frozen=True)
class ObservationConfig:
    """Agent observation packing."""
    max_entities: int


@dataclass(frozen=True)
class FruitConfig:
    """Configuration for a single fruit kind."""
    id: int
    name: str
    points: int
    color: str
    width: float
    height: float


@dataclass(frozen=True)
class ObstacleConfig:
    """Configuration for a single obstacle kind."""
    id: int
    name: str
    width: float
    height: float
    color: str
    below_ground: bool = False  # Placed under the ground line (water)


@dataclass(frozen=True)
class BonusConfig:
    """Configuration for a single bonus kind."""
    id: int
    name: str
    points: int
    effect: str
    duration: float
    magnitude: float
    color: str
    width: float
    height: float


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    world: WorldConfig
    timing: TimingConfig
    physics: PhysicsConfig
    player: PlayerConfig
    animation: AnimationConfig
    speed: SpeedConfig
    scoring: ScoringConfig
    spawn: SpawnConfig
    effects: EffectsConfig
    observation: ObservationConfig
    fruits: Tuple[FruitConfig, ...]
    obstacles: Tuple[ObstacleConfig, ...]
    bonuses: Tuple[BonusConfig, ...]

    def get_fruit(self, name: str) -> FruitConfig:
        """Get fruit config by name."""
        for fruit in self.fruits:
            if fruit.name == name:
                return fruit
        raise ValueError(f"Invalid fruit name: {name}")


def _parse_color(color_data) -> str:
    """Parse RGB color from YAML into a '#RRGGBB' string."""
    if isinstance(color_data, str):
        if len(color_data) != 7 or not color_data.startswith("#"):
            raise ValueError(f"Color must look like '#RRGGBB', got {color_data!r}")
        return color_data.upper()
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    r, g, b = (int(c) for c in color_data)
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"Color channel out of range [0, 255]: {color_data}")
    return f"#{r:02X}{g:02X}{b:02X}"


def _parse_band(band_data: List) -> Tuple[float, float]:
    """Parse a [low, high] fraction-of-height band."""
    if len(band_data) != 2:
        raise ValueError(f"Band must have 2 values [low, high], got {band_data}")
    return (float(band_data[0]), float(band_data[1]))


def _parse_fruit(index: int, fruit_data: dict) -> FruitConfig:
    """Parse a single fruit configuration from YAML."""
    return FruitConfig(
        id=index,
        name=str(fruit_data["name"]),
        points=int(fruit_data["points"]),
        color=_parse_color(fruit_data["color"]),
        width=float(fruit_data.get("width", 30)),
        height=float(fruit_data.get("height", 30))
    )


def _parse_obstacle(index: int, obstacle_data: dict) -> ObstacleConfig:
    """Parse a single obstacle configuration from YAML."""
    return ObstacleConfig(
        id=index,
        name=str(obstacle_data["name"]),
        width=float(obstacle_data["width"]),
        height=float(obstacle_data["height"]),
        color=_parse_color(obstacle_data["color"]),
        below_ground=bool(obstacle_data.get("below_ground", False))
    )


def _parse_bonus(index: int, bonus_data: dict, default_color: str) -> BonusConfig:
    """Parse a single bonus configuration from YAML."""
    return BonusConfig(
        id=index,
        name=str(bonus_data["name"]),
        points=int(bonus_data["points"]),
        effect=str(bonus_data.get("effect", "points")),
        duration=float(bonus_data.get("duration", 0)),
        magnitude=float(bonus_data.get("magnitude", 1.0)),
        color=_parse_color(bonus_data.get("color", default_color)),
        width=float(bonus_data.get("width", 25)),
        height=float(bonus_data.get("height", 25))
    )


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    for name, catalog in (
        ("fruits", config.fruits),
        ("obstacles", config.obstacles),
        ("bonuses", config.bonuses),
    ):
        if not catalog:
            raise ValueError(f"Catalog '{name}' must not be empty")
        names = [entry.name for entry in catalog]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate names in '{name}': {names}")

    # Start fruit must exist
    config.get_fruit(config.player.start_fruit)

    for bonus in config.bonuses:
        if bonus.effect not in EFFECT_KINDS:
            raise ValueError(
                f"Bonus '{bonus.name}' has unknown effect '{bonus.effect}', "
                f"expected one of {EFFECT_KINDS}"
            )
        if bonus.effect != "points" and bonus.duration <= 0:
            raise ValueError(f"Bonus '{bonus.name}' needs a positive duration")

    spawn = config.spawn
    for label, band in (("fruit_band", spawn.fruit_band), ("bonus_band", spawn.bonus_band)):
        low, high = band
        if not (0.0 <= low <= high <= 1.0):
            raise ValueError(f"spawn.{label} must satisfy 0 <= low <= high <= 1, got {band}")

    player = config.player
    if 2 * player.hitbox_inset >= min(player.width, player.height):
        raise ValueError(
            f"player.hitbox_inset {player.hitbox_inset} leaves no hitbox for a "
            f"{player.width}x{player.height} player"
        )

    world = config.world
    if world.height - world.ground_margin <= world.top_boundary:
        raise ValueError(
            f"Ground line {world.height - world.ground_margin} must sit below "
            f"world.top_boundary {world.top_boundary}"
        )

    if not spawn.obstacle_frequencies or min(spawn.obstacle_frequencies) <= 0:
        raise ValueError("spawn.obstacle_frequencies must be a non-empty list of positive ints")

    for label, value in (
        ("spawn.fruit_interval", spawn.fruit_interval),
        ("spawn.bonus_interval", spawn.bonus_interval),
        ("spawn.dynamic_frequency_floor", spawn.dynamic_frequency_floor),
        ("scoring.survival_interval", config.scoring.survival_interval),
        ("scoring.level_points", config.scoring.level_points),
        ("timing.target_fps", config.timing.target_fps),
        ("observation.max_entities", config.observation.max_entities),
    ):
        if value <= 0:
            raise ValueError(f"{label} must be positive, got {value}")

    if not 0.0 <= spawn.bonus_chance <= 1.0:
        raise ValueError(f"spawn.bonus_chance must be in [0, 1], got {spawn.bonus_chance}")

    if config.timing.max_frame_multiplier <= 0:
        raise ValueError("timing.max_frame_multiplier must be positive")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    world_data = raw["world"]
    world = WorldConfig(
        width=int(world_data["width"]),
        height=int(world_data["height"]),
        ground_margin=float(world_data.get("ground_margin", 100)),
        top_boundary=float(world_data.get("top_boundary", 20))
    )

    timing_data = raw.get("timing", {})
    timing = TimingConfig(
        target_fps=int(timing_data.get("target_fps", 60)),
        max_frame_multiplier=float(timing_data.get("max_frame_multiplier", 3))
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        float_gravity=float(physics_data["float_gravity"])
    )

    player_data = raw["player"]
    player = PlayerConfig(
        start_x=float(player_data["start_x"]),
        width=float(player_data["width"]),
        height=float(player_data["height"]),
        jump_power=float(player_data["jump_power"]),
        mega_jump_boost=float(player_data.get("mega_jump_boost", 1.5)),
        double_jump_factor=float(player_data.get("double_jump_factor", 0.8)),
        hitbox_inset=float(player_data.get("hitbox_inset", 2)),
        start_fruit=str(player_data["start_fruit"])
    )

    anim_data = raw.get("animation", {})
    animation = AnimationConfig(
        run_cycle_rate=float(anim_data.get("run_cycle_rate", 0.3)),
        arm_reach_rise=float(anim_data.get("arm_reach_rise", 0.2)),
        arm_reach_fruit_rise=float(anim_data.get("arm_reach_fruit_rise", 0.3)),
        arm_reach_decay=float(anim_data.get("arm_reach_decay", 0.1)),
        arm_reach_radius=float(anim_data.get("arm_reach_radius", 80)),
        eye_blink_rate=float(anim_data.get("eye_blink_rate", 0.1))
    )

    speed_data = raw["speed"]
    speed = SpeedConfig(
        base=float(speed_data["base"]),
        creep=float(speed_data["creep"]),
        slow_motion_factor=float(speed_data.get("slow_motion_factor", 0.5)),
        level_base_increase=float(speed_data["level_base_increase"]),
        level_step_increase=float(speed_data["level_step_increase"])
    )

    scoring_data = raw["scoring"]
    scoring = ScoringConfig(
        survival_points=int(scoring_data["survival_points"]),
        survival_interval=int(scoring_data["survival_interval"]),
        level_points=int(scoring_data["level_points"])
    )

    spawn_data = raw["spawn"]
    spawn = SpawnConfig(
        obstacle_frequencies=tuple(int(f) for f in spawn_data["obstacle_frequencies"]),
        dynamic_frequency_base=int(spawn_data["dynamic_frequency_base"]),
        dynamic_frequency_floor=int(spawn_data["dynamic_frequency_floor"]),
        dynamic_speed_factor=float(spawn_data["dynamic_speed_factor"]),
        fruit_interval=int(spawn_data["fruit_interval"]),
        fruit_band=_parse_band(spawn_data["fruit_band"]),
        bonus_interval=int(spawn_data["bonus_interval"]),
        bonus_chance=float(spawn_data["bonus_chance"]),
        bonus_band=_parse_band(spawn_data["bonus_band"]),
        water_depth=float(spawn_data.get("water_depth", 20))
    )

    effects_data = raw["effects"]
    effects = EffectsConfig(
        burst_count=int(effects_data["burst_count"]),
        burst_life=int(effects_data["burst_life"]),
        burst_spread=float(effects_data["burst_spread"]),
        burst_lift=float(effects_data.get("burst_lift", 0)),
        level_up_count=int(effects_data["level_up_count"]),
        level_up_life=int(effects_data["level_up_life"]),
        level_up_spread=float(effects_data["level_up_spread"]),
        level_up_color=_parse_color(effects_data["level_up_color"]),
        double_jump_color=_parse_color(effects_data["double_jump_color"]),
        points_color=_parse_color(effects_data["points_color"]),
        particle_gravity=float(effects_data["particle_gravity"]),
        bob_rate=float(effects_data.get("bob_rate", 0.1)),
        sparkle_rate=float(effects_data.get("sparkle_rate", 0.2))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_entities=int(obs_data.get("max_entities", 16))
    )

    fruits = tuple(_parse_fruit(i, f) for i, f in enumerate(raw["fruits"]))
    obstacles = tuple(_parse_obstacle(i, o) for i, o in enumerate(raw["obstacles"]))
    bonuses = tuple(
        _parse_bonus(i, b, effects.points_color) for i, b in enumerate(raw["bonuses"])
    )

    config = GameConfig(
        world=world,
        timing=timing,
        physics=physics,
        player=player,
        animation=animation,
        speed=speed,
        scoring=scoring,
        spawn=spawn,
        effects=effects,
        observation=observation,
        fruits=fruits,
        obstacles=obstacles,
        bonuses=bonuses
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
