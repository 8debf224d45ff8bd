"""
Entity Catalog
==============

Provides convenient access to the fruit, obstacle and bonus kinds loaded from config.
"""

from __future__ import annotations

from typing import Generic, Iterator, Optional, Tuple, TypeVar

from fruit_run.runner_core.config_loader import (
    GameConfig,
    FruitConfig,
    ObstacleConfig,
    BonusConfig,
    get_config
)


KindT = TypeVar("KindT", FruitConfig, ObstacleConfig, BonusConfig)


class KindTable(Generic[KindT]):
    """
    Ordered, immutable table of entity kinds.

    Indexed by position (for uniform random choice) or by name.
    """

    def __init__(self, label: str, kinds: Tuple[KindT, ...]):
        self._label = label
        self._kinds = kinds
        self._by_name = {kind.name: kind for kind in kinds}

    def __len__(self) -> int:
        return len(self._kinds)

    def __getitem__(self, index: int) -> KindT:
        if 0 <= index < len(self._kinds):
            return self._kinds[index]
        raise IndexError(f"{self._label} index {index} out of range [0, {len(self._kinds)})")

    def __iter__(self) -> Iterator[KindT]:
        return iter(self._kinds)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @property
    def names(self) -> Tuple[str, ...]:
        """Kind names in catalog order."""
        return tuple(kind.name for kind in self._kinds)

    def by_name(self, name: str) -> KindT:
        """Get kind by exact name."""
        try:
            return self._by_name[name]
        except KeyError:
            raise KeyError(f"Unknown {self._label} kind: {name!r}") from None

    def __repr__(self) -> str:
        return f"KindTable({self._label}: {', '.join(self.names)})"


class EntityCatalog:
    """
    Collection of every spawnable kind.

    - fruits: collectible fruit, each transforms the player
    - obstacles: ground hazards that end the run
    - bonuses: floating items granting points and power-ups
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize catalog from game config.

        Args:
            config: GameConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config()

        self._config = config
        self.fruits: KindTable[FruitConfig] = KindTable("fruit", config.fruits)
        self.obstacles: KindTable[ObstacleConfig] = KindTable("obstacle", config.obstacles)
        self.bonuses: KindTable[BonusConfig] = KindTable("bonus", config.bonuses)

    @property
    def start_fruit(self) -> FruitConfig:
        """The fruit the player wears at session start."""
        return self.fruits.by_name(self._config.player.start_fruit)


# Module-level singleton
_cached_catalog: Optional[EntityCatalog] = None


def get_catalog(config: Optional[GameConfig] = None) -> EntityCatalog:
    """
    Get the entity catalog singleton.

    Args:
        config: Optional config to use. If None, uses cached or default config.

    Returns:
        EntityCatalog instance.
    """
    global _cached_catalog
    if _cached_catalog is None or config is not None:
        _cached_catalog = EntityCatalog(config)
    return _cached_catalog
