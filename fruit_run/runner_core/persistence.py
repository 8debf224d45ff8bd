"""
High Score Persistence
======================

The core only needs get/set of one integer. Hosts supply the storage; two
implementations are provided for tools and tests.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol, Union


class HighScoreProvider(Protocol):
    """Storage contract for the best score."""

    def get_high_score(self) -> int: ...

    def set_high_score(self, score: int) -> None: ...

    def reset_high_score(self) -> None: ...


class InMemoryHighScore:
    """High score held in memory for the lifetime of the object."""

    def __init__(self, initial: int = 0):
        self._score = max(0, int(initial))

    def get_high_score(self) -> int:
        return self._score

    def set_high_score(self, score: int) -> None:
        self._score = max(0, int(score))

    def reset_high_score(self) -> None:
        self._score = 0


class JsonFileHighScore:
    """
    High score stored in a small JSON file: {"high_score": 1234}.

    A missing or unreadable file counts as a high score of zero.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get_high_score(self) -> int:
        if not self._path.exists():
            return 0
        try:
            with open(self._path, "r") as f:
                data = json.load(f)
            return max(0, int(data.get("high_score", 0)))
        except (OSError, ValueError, TypeError, AttributeError):
            return 0

    def set_high_score(self, score: int) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w") as f:
            json.dump({"high_score": max(0, int(score))}, f)

    def reset_high_score(self) -> None:
        if self._path.exists():
            self._path.unlink()
