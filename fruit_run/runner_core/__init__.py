"""
Runner Core - The deterministic simulation behind Fruit Run.

This module provides the endless-runner simulation, its Gymnasium environment
wrapper, and all supporting systems (timing, spawning, collisions, scoring,
effects).

Main exports:
- RunnerGame: One game session driven by the host's tick loop
- FruitRunEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
- TickResult / SoundCue / LevelUp: Per-tick events for audio and UI
"""

from fruit_run.runner_core.config_loader import GameConfig, load_config
from fruit_run.runner_core.catalog import EntityCatalog
from fruit_run.runner_core.entities import WorldBounds
from fruit_run.runner_core.events import LevelUp, SoundCue, TickResult
from fruit_run.runner_core.game import RunnerGame
from fruit_run.runner_core.env_gym import FruitRunEnv
from fruit_run.runner_core.persistence import InMemoryHighScore, JsonFileHighScore
from fruit_run.runner_core.state_machine import GameState, InvalidTransition
from fruit_run.runner_core.state_snapshot import GameSnapshot
from fruit_run.runner_core.timestep import FrameClock, TimeStepNormalizer

__all__ = [
    "GameConfig",
    "load_config",
    "EntityCatalog",
    "WorldBounds",
    "LevelUp",
    "SoundCue",
    "TickResult",
    "RunnerGame",
    "FruitRunEnv",
    "InMemoryHighScore",
    "JsonFileHighScore",
    "GameState",
    "InvalidTransition",
    "GameSnapshot",
    "FrameClock",
    "TimeStepNormalizer",
]
