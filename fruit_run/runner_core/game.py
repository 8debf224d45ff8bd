"""
Core Game
=========

Session orchestrator combining player physics, spawning, collisions, scoring,
effects and the game state machine.
"""

from __future__ import annotations

import random
from typing import Any, Dict, Optional

from fruit_run.runner_core.config_loader import GameConfig, get_config
from fruit_run.runner_core.collision import CollisionSystem
from fruit_run.runner_core.effects import EffectsEngine
from fruit_run.runner_core.entities import EntityStore, WorldBounds
from fruit_run.runner_core.events import EventSink, TickResult
from fruit_run.runner_core.persistence import HighScoreProvider, InMemoryHighScore
from fruit_run.runner_core.player import Player, PlayerController
from fruit_run.runner_core.scoring import ScoreAndDifficultyManager
from fruit_run.runner_core.spawner import SpawnScheduler
from fruit_run.runner_core.state_machine import GameState, GameStateMachine
from fruit_run.runner_core.state_snapshot import GameSnapshot, build_snapshot
from fruit_run.runner_core.timestep import TimeStepNormalizer


class RunnerGame:
    """
    One endless-runner session.

    The host owns the loop: call tick() with the elapsed milliseconds, then
    read get_snapshot(). Jump commands may arrive between ticks; their sound
    cues are reported by the next tick.

    Per playing tick, in order:
    1. frame counter advances
    2. milestone check, then speed creep
    3. player integration
    4. spawning
    5. collisions (obstacles, fruits, bonus items); an obstacle ends the tick
    6. particle aging
    7. survival score
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        high_scores: Optional[HighScoreProvider] = None,
        world: Optional[WorldBounds] = None
    ):
        """
        Initialize game in the `start` state.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            high_scores: High-score storage. In-memory if None.
            world: Initial world bounds. Config default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._rng = random.Random(seed)
        self._world = world or WorldBounds(config.world.width, config.world.height)

        # Subsystems share the store and one random source
        self._store = EntityStore()
        self._effects = EffectsEngine(self._store.particles, config, rng=self._rng)
        self._controller = PlayerController(config, self._effects)
        self._scoring = ScoreAndDifficultyManager(config, self._effects)
        self._spawner = SpawnScheduler(self._store, config, rng=self._rng)
        self._collisions = CollisionSystem(
            store=self._store,
            controller=self._controller,
            scoring=self._scoring,
            effects=self._effects,
            config=config
        )
        self._normalizer = TimeStepNormalizer(config)
        self._machine = GameStateMachine(high_scores or InMemoryHighScore())
        self._events = EventSink()

        self._frame: int = 0
        self._controller.reset(self._world)

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def state(self) -> GameState:
        return self._machine.state

    @property
    def is_playing(self) -> bool:
        return self._machine.is_playing

    @property
    def world(self) -> WorldBounds:
        return self._world

    @property
    def frame(self) -> int:
        """Ticks simulated in the current session."""
        return self._frame

    @property
    def score(self) -> int:
        return self._scoring.score

    @property
    def speed(self) -> float:
        return self._scoring.speed

    @property
    def level(self) -> int:
        """Level in progress, starting at 1."""
        return self._scoring.level

    @property
    def high_score(self) -> int:
        return self._machine.high_scores.get_high_score()

    @property
    def player(self) -> Player:
        return self._controller.player

    @property
    def controller(self) -> PlayerController:
        return self._controller

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def scoring(self) -> ScoreAndDifficultyManager:
        return self._scoring

    @property
    def effects(self) -> EffectsEngine:
        return self._effects

    @property
    def normalizer(self) -> TimeStepNormalizer:
        return self._normalizer

    def start_new_session(
        self,
        world: Optional[WorldBounds] = None,
        seed: Optional[int] = None
    ) -> GameSnapshot:
        """
        Reset every session field and enter `playing`.

        Args:
            world: New world bounds. Keeps current if None.
            seed: New random seed. Keeps the current random stream if None.

        Returns:
            Initial snapshot.
        """
        if world is not None:
            self._world = world
        if seed is not None:
            self._seed = seed
            self._rng.seed(seed)

        self._store.clear()
        self._scoring.reset()
        self._controller.reset(self._world)
        self._events.clear()
        self._frame = 0
        self._machine.start()

        return self.get_snapshot()

    def request_jump(self) -> bool:
        """
        Deliver a jump command.

        Ignored unless playing.

        Returns:
            True if the player jumped (ground or double jump).
        """
        if not self._machine.is_playing:
            return False
        return self._controller.jump(self._events)

    def tick(
        self,
        elapsed_ms: float,
        world: Optional[WorldBounds] = None
    ) -> TickResult:
        """
        Advance the simulation by the given wall-clock time.

        Args:
            elapsed_ms: Milliseconds since the previous tick.
            world: Current world bounds, if the host's viewport changed.

        Returns:
            TickResult with end-of-game flags and this tick's events.
        """
        if world is not None:
            self._world = world

        delta = self._normalizer.normalize(elapsed_ms)

        if not self._machine.is_playing:
            return TickResult.idle()

        self._frame += 1

        self._scoring.tick_milestones(self._events, self._controller.player.center)
        self._scoring.creep(delta)

        self._controller.integrate(delta, self._world, self._store.fruits)

        self._spawner.maybe_spawn(
            frame=self._frame,
            score=self._scoring.score,
            speed=self._scoring.speed,
            world=self._world
        )

        report = self._collisions.resolve(delta, self._events)
        if report.hit_obstacle:
            outcome = self._machine.game_over(self._scoring.score)
            return self._drain(delta, game_over=True, new_record=outcome.new_record)

        self._effects.age(delta)
        self._scoring.tick_survival(self._frame)

        return self._drain(delta)

    def _drain(
        self,
        delta: float,
        game_over: bool = False,
        new_record: bool = False
    ) -> TickResult:
        """Package pending events into a TickResult and clear them."""
        result = TickResult(
            game_over=game_over,
            new_record=new_record,
            sounds=tuple(self._events.sounds),
            ui_events=tuple(self._events.ui_events),
            delta=delta
        )
        self._events.clear()
        return result

    def get_snapshot(self) -> GameSnapshot:
        """Immutable view of the current state."""
        return build_snapshot(self)

    def reset_high_score(self) -> None:
        """Clear the stored high score."""
        self._machine.high_scores.reset_high_score()

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scoring.score,
            "speed": self._scoring.speed,
            "level": self._scoring.level,
            "frame": self._frame,
            "state": self._machine.state.value,
            "high_score": self.high_score,
            "power_ups": self._controller.power_up_flags(),
        }
