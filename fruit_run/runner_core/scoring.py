"""
Scoring and Difficulty
======================

Tracks score, level milestones and the world scroll speed.
"""

from __future__ import annotations

from typing import Optional, Tuple

from fruit_run.runner_core.config_loader import GameConfig, get_config
from fruit_run.runner_core.effects import EffectsEngine
from fruit_run.runner_core.events import EventSink, LevelUp, SoundCue


class ScoreAndDifficultyManager:
    """
    Score accumulation and speed progression.

    Speed has two components:
    - a slow creep added every tick
    - a step reset to base + level bonus whenever a new milestone is reached

    Milestones sit every `level_points` (500) points. A tick that jumps over
    several thresholds reports only the highest one, once.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        effects: Optional[EffectsEngine] = None
    ):
        """
        Initialize manager.

        Args:
            config: Game configuration. Uses default if None.
            effects: Effects engine for the level-up burst. None disables it.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._effects = effects
        self._score: int = 0
        self._speed: float = config.speed.base
        self._last_milestone_level: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def speed(self) -> float:
        """Current world scroll speed, per nominal frame."""
        return self._speed

    @property
    def base_speed(self) -> float:
        return self._config.speed.base

    @property
    def milestone_level(self) -> int:
        """Completed levels: score // level_points."""
        return self._score // self._config.scoring.level_points

    @property
    def level(self) -> int:
        """Level in progress, starting at 1."""
        return self.milestone_level + 1

    @property
    def last_milestone_level(self) -> int:
        return self._last_milestone_level

    @property
    def last_milestone_score(self) -> int:
        return self._last_milestone_level * self._config.scoring.level_points

    def reset(self) -> None:
        """Back to zero score and base speed."""
        self._score = 0
        self._speed = self._config.speed.base
        self._last_milestone_level = 0

    def add_points(self, points: int) -> None:
        """Add collected points; score never decreases."""
        if points < 0:
            raise ValueError(f"Points must be non-negative, got {points}")
        self._score += int(points)

    def creep(self, delta: float) -> None:
        """Apply the per-tick baseline speed growth."""
        self._speed += self._config.speed.creep * delta

    def level_speed(self, level: int) -> float:
        """Scroll speed right after reaching a milestone level."""
        spd = self._config.speed
        return spd.base + spd.level_base_increase + spd.level_step_increase * level

    def tick_milestones(
        self,
        events: EventSink,
        origin: Tuple[float, float] = (0.0, 0.0)
    ) -> Optional[LevelUp]:
        """
        Detect a newly reached milestone.

        Args:
            events: Sink for the level-up UI event and sound.
            origin: Where the celebration burst starts (player center).

        Returns:
            The LevelUp event, or None.
        """
        current = self.milestone_level
        if current <= self._last_milestone_level or current <= 0:
            return None

        self._last_milestone_level = current
        # Speed never decreases: a level step below the crept speed is a no-op
        self._speed = max(self._speed, self.level_speed(current))

        event = LevelUp(level=current, speed=self._speed)
        events.ui(event)
        events.sound(SoundCue.BONUS)
        if self._effects is not None:
            self._effects.level_up_burst(*origin)
        return event

    def tick_survival(self, frame: int) -> bool:
        """
        Award survival points on every `survival_interval`-th frame.

        Returns:
            True if points were awarded.
        """
        scoring = self._config.scoring
        if frame > 0 and frame % scoring.survival_interval == 0:
            self._score += scoring.survival_points
            return True
        return False
