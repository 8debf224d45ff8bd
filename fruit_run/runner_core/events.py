"""
Tick Events
===========

One-shot notifications produced by a tick for the audio and UI collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class SoundCue(str, Enum):
    """Named sound effects; the host maps them to actual audio."""
    JUMP = "jump"
    COLLECT = "collect"
    TRANSFORM = "transform"
    HIT = "hit"
    BONUS = "bonus"


@dataclass(frozen=True)
class LevelUp:
    """A score milestone was crossed."""
    level: int
    speed: float

    @property
    def speed_display(self) -> str:
        """Speed as the HUD shows it, e.g. '3.0x'."""
        return f"{self.speed:.1f}x"

    @property
    def message(self) -> str:
        return f"LEVEL {self.level} COMPLETED! {self.speed_display}"


class EventSink:
    """Collects events emitted by subsystems during one tick."""

    def __init__(self):
        self.sounds: List[SoundCue] = []
        self.ui_events: List[LevelUp] = []

    def sound(self, cue: SoundCue) -> None:
        self.sounds.append(cue)

    def ui(self, event: LevelUp) -> None:
        self.ui_events.append(event)

    def clear(self) -> None:
        self.sounds.clear()
        self.ui_events.clear()


@dataclass(frozen=True)
class TickResult:
    """Outcome of a single tick."""
    game_over: bool = False
    new_record: bool = False
    sounds: Tuple[SoundCue, ...] = field(default_factory=tuple)
    ui_events: Tuple[LevelUp, ...] = field(default_factory=tuple)
    delta: float = 0.0

    @staticmethod
    def idle() -> "TickResult":
        """Result of a tick that did no simulation work."""
        return TickResult()
