"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the runner.
One step is one nominal frame. Reward is always 0.0 - agents compute their
own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from fruit_run.runner_core.config_loader import GameConfig, load_config
from fruit_run.runner_core.game import RunnerGame
from fruit_run.runner_core.persistence import HighScoreProvider
from fruit_run.runner_core.state_snapshot import GameSnapshot

ACTION_IDLE = 0
ACTION_JUMP = 1


class FruitRunEnv(gym.Env):
    """
    Fruit Run endless runner as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = do nothing, 1 = jump (double jump when airborne
        and available).

    Observation Space:
        Dict of player state, speed/score counters and the nearest
        entities packed into fixed-size masked arrays.

    Reward:
        Always 0.0. Agents must compute their own reward from the info dict.

    Info:
        Contains score, delta_score, speed, level, frame, power_ups, sounds.
    """

    metadata = {
        "render_modes": [],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        max_frames: int = 36000,
        frame_ms: Optional[float] = None,
        high_scores: Optional[HighScoreProvider] = None,
        debug: bool = False,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            max_frames: Episode is truncated after this many frames.
            frame_ms: Milliseconds simulated per step. One nominal frame if None.
            high_scores: High-score storage shared across episodes.
            debug: If True, prints verbose debug output.
        """
        super().__init__()

        self._config = load_config(config_path)
        self._max_frames = max_frames
        self._frame_ms = frame_ms or self._config.timing.frame_interval_ms
        self._debug = debug

        self._game = RunnerGame(config=self._config, high_scores=high_scores)
        self._max_entities = self._config.observation.max_entities

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] FruitRunEnv initialized")
            print(f"[DEBUG]   World: {self._config.world.width}x{self._config.world.height}")
            print(f"[DEBUG]   Frame: {self._frame_ms:.2f} ms, max frames: {self._max_frames}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        n = self._max_entities
        world = self._config.world
        n_types = max(
            len(self._config.obstacles),
            len(self._config.fruits),
            len(self._config.bonuses)
        )

        return spaces.Dict({
            "player_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "player_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "grounded": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "can_double_jump": spaces.Box(low=0, high=1, shape=(), dtype=np.int8),
            "power_up_timers": spaces.Box(low=0, high=np.inf, shape=(4,), dtype=np.float32),
            "speed": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "level": spaces.Box(low=1, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "frame": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "ground_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "ent_category": spaces.Box(low=0, high=3, shape=(n,), dtype=np.int8),
            "ent_type_id": spaces.Box(low=-1, high=n_types, shape=(n,), dtype=np.int16),
            "ent_x": spaces.Box(low=-np.inf, high=np.inf, shape=(n,), dtype=np.float32),
            "ent_y": spaces.Box(low=-np.inf, high=np.inf, shape=(n,), dtype=np.float32),
            "ent_w": spaces.Box(low=0, high=world.width, shape=(n,), dtype=np.float32),
            "ent_h": spaces.Box(low=0, high=world.height, shape=(n,), dtype=np.float32),
            "ent_mask": spaces.MultiBinary(n),
        })

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.start_new_session(seed=seed)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_score"] = 0
        info["sounds"] = []

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one frame.

        Args:
            action: 0 (idle) or 1 (jump).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())

        score_before = self._game.score
        jumped = False
        if int(action) == ACTION_JUMP:
            jumped = self._game.request_jump()

        result = self._game.tick(self._frame_ms)
        snapshot = self._game.get_snapshot()
        obs = self._snapshot_to_obs(snapshot)

        terminated = result.game_over
        truncated = not terminated and self._game.frame >= self._max_frames

        reward = 0.0

        info = self._game.get_info()
        info["delta_score"] = self._game.score - score_before
        info["jumped"] = jumped
        info["sounds"] = [cue.value for cue in result.sounds]
        info["new_record"] = result.new_record
        info["level_ups"] = [event.level for event in result.ui_events]

        if self._debug:
            print(f"[DEBUG] Step: action={action}, frame={info['frame']}, "
                  f"score={info['score']}, speed={info['speed']:.3f}")
            if terminated:
                print(f"[DEBUG] TERMINATED: obstacle hit, new_record={result.new_record}")

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        return snapshot.to_obs_dict(self._max_entities)

    def render(self) -> None:
        """Rendering belongs to the host application."""
        return None

    def close(self) -> None:
        """Nothing to release."""

    @property
    def game(self) -> RunnerGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
