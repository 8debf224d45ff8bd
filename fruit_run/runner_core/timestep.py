"""
Time Step Normalization
=======================

Converts raw elapsed wall-clock time into the frame multiplier every
time-dependent formula is scaled by. A multiplier of 1.0 is exactly one
nominal frame at the target rate.
"""

from __future__ import annotations

import math
from typing import Optional

from fruit_run.runner_core.config_loader import GameConfig, get_config


class TimeStepNormalizer:
    """Caps and normalizes elapsed milliseconds to a delta multiplier."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._frame_interval_ms = config.timing.frame_interval_ms
        self._max_multiplier = config.timing.max_frame_multiplier

    @property
    def frame_interval_ms(self) -> float:
        """Duration of one nominal frame."""
        return self._frame_interval_ms

    @property
    def max_multiplier(self) -> float:
        """Upper bound of the returned multiplier."""
        return self._max_multiplier

    def normalize(self, elapsed_ms: float) -> float:
        """
        Convert elapsed milliseconds to a delta multiplier.

        Negative or NaN input counts as no elapsed time.

        Args:
            elapsed_ms: Milliseconds since the previous tick.

        Returns:
            Multiplier in [0, max_multiplier].
        """
        elapsed_ms = float(elapsed_ms)
        if math.isnan(elapsed_ms) or elapsed_ms <= 0.0:
            return 0.0
        if elapsed_ms >= self._max_multiplier * self._frame_interval_ms:
            return float(self._max_multiplier)
        return elapsed_ms / self._frame_interval_ms


class FrameClock:
    """
    Turns absolute host timestamps into elapsed milliseconds.

    The first reading yields zero, as does any timestamp earlier than the
    previous one.
    """

    def __init__(self):
        self._last_ms: Optional[float] = None

    def advance(self, now_ms: float) -> float:
        """Record a timestamp and return the milliseconds since the last one."""
        if self._last_ms is None:
            elapsed = 0.0
        else:
            elapsed = max(0.0, now_ms - self._last_ms)
        self._last_ms = now_ms
        return elapsed

    def reset(self) -> None:
        """Forget the previous timestamp."""
        self._last_ms = None
