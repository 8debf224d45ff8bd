"""
Game State Machine
==================

start --start()--> playing --game_over()--> gameOver --start()--> playing

Only `playing` advances the simulation. Ending a game that is not being
played raises InvalidTransition.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fruit_run.runner_core.persistence import HighScoreProvider


class GameState(str, Enum):
    START = "start"
    PLAYING = "playing"
    GAME_OVER = "gameOver"


class InvalidTransition(RuntimeError):
    """Raised for a transition the state machine does not allow."""


@dataclass(frozen=True)
class GameOverResult:
    """Outcome of ending a run."""
    final_score: int
    high_score: int
    new_record: bool


class GameStateMachine:
    """Top-level state gate plus the high-score check on game over."""

    def __init__(self, high_scores: HighScoreProvider):
        self._state = GameState.START
        self._high_scores = high_scores

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state is GameState.PLAYING

    @property
    def high_scores(self) -> HighScoreProvider:
        return self._high_scores

    def start(self) -> None:
        """
        Enter `playing`.

        From `gameOver` this is a restart. From `playing` the current run is
        abandoned without a high-score check.
        """
        self._state = GameState.PLAYING

    def game_over(self, score: int) -> GameOverResult:
        """
        Enter `gameOver` and update the stored high score if beaten.

        Args:
            score: Final score of the run.

        Returns:
            GameOverResult with the record flag.
        """
        if self._state is not GameState.PLAYING:
            raise InvalidTransition(f"Cannot end a game from state '{self._state.value}'")
        self._state = GameState.GAME_OVER

        best = self._high_scores.get_high_score()
        if score > best:
            self._high_scores.set_high_score(score)
            return GameOverResult(final_score=score, high_score=score, new_record=True)
        return GameOverResult(final_score=score, high_score=best, new_record=False)
