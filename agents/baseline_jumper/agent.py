"""
Baseline Jumper Agent - Jumps over water just in time.

Stumps and rocks stand on the ground line in front of a running player, so
a grounded runner slides underneath them; they only hurt a player who is in
the air when they pass. Water lies in the player's lane and must be jumped.

Strategy:
- Find the nearest water obstacle ahead of the player in the entity arrays
- Jump once its left edge is within a few frames of travel
- Stay on the ground while a stump or rock is close, unless water forces a jump
"""

from __future__ import annotations

from typing import Any, Dict, Optional
import numpy as np

from fruit_run.runner_core.config_loader import GameConfig, load_config
from fruit_run.runner_core.env_gym import ACTION_IDLE, ACTION_JUMP
from fruit_run.runner_core.state_snapshot import CATEGORY_OBSTACLE


class FruitRunAgent:
    """
    Heuristic agent that only jumps for water.

    Reads ent_category / ent_type_id / ent_x / ent_w from the observation.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        lead_frames: float = 6.0,
        debug: bool = False
    ):
        """
        Initialize the agent.

        Args:
            config: Game configuration. Loads the default if None.
            lead_frames: Jump when water is this many frames of travel away.
            debug: If True, print decisions to stdout.
        """
        if config is None:
            config = load_config()

        self.debug = debug
        self.lead_frames = lead_frames
        self._player_right = config.player.start_x + config.player.width
        self._player_left = config.player.start_x
        self._water_ids = np.array(
            [o.id for o in config.obstacles if o.below_ground],
            dtype=np.int16
        )

    def reset(self, seed: Optional[int] = None) -> None:
        """Called when a new episode starts (stateless agent)."""

    def nearest_water_gap(self, observation: Dict[str, Any]) -> Optional[float]:
        """
        Distance from the player's right edge to the nearest water ahead.

        Returns:
            Gap in pixels, or None if no water is ahead.
        """
        mask = observation["ent_mask"].astype(bool)
        is_water = (
            mask
            & (observation["ent_category"] == CATEGORY_OBSTACLE)
            & np.isin(observation["ent_type_id"], self._water_ids)
        )
        right = observation["ent_x"] + observation["ent_w"]
        ahead = is_water & (right > self._player_left)
        if not ahead.any():
            return None
        return float(np.min(observation["ent_x"][ahead]) - self._player_right)

    def act(self, observation: Dict[str, Any], debug: bool = False) -> int:
        """
        Choose whether to jump this frame.

        Args:
            observation: Dict of numpy arrays from the environment.
            debug: If True, print debug info for this step.

        Returns:
            ACTION_JUMP or ACTION_IDLE.
        """
        if not int(observation["grounded"]):
            return ACTION_IDLE

        gap = self.nearest_water_gap(observation)
        speed = float(observation["speed"])
        action = ACTION_IDLE
        if gap is not None and gap <= self.lead_frames * speed:
            action = ACTION_JUMP

        if debug or self.debug:
            gap_text = "none" if gap is None else f"{gap:.1f}"
            print(f"[Jumper Agent] Frame={int(observation['frame'])}, "
                  f"Speed={speed:.3f}, Water gap={gap_text}, Action={action}")

        return action


# Convenience function to create agent (used by evaluation harness)
def create_agent(**kwargs) -> FruitRunAgent:
    """Factory function to create an agent instance."""
    return FruitRunAgent(**kwargs)
