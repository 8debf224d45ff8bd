"""
Tests for spawn cadence, placement and reproducibility.
"""

import dataclasses

import pytest

from fruit_run.runner_core.config_loader import load_config
from fruit_run.runner_core.entities import EntityStore, WorldBounds
from fruit_run.runner_core.spawner import SpawnScheduler


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def world():
    return WorldBounds(800, 400)


@pytest.fixture
def store():
    return EntityStore()


@pytest.fixture
def spawner(store, config):
    return SpawnScheduler(store, config, seed=42)


def with_spawn(config, **changes):
    return dataclasses.replace(config, spawn=dataclasses.replace(config.spawn, **changes))


class TestObstacleCadence:
    """Test frames-between-obstacles by level."""

    @pytest.mark.parametrize("score,expected", [
        (0, 180),
        (499, 180),
        (500, 150),
        (1000, 120),
        (1500, 100),
        (2000, 100),
    ])
    def test_table_levels(self, spawner, score, expected):
        assert spawner.obstacle_frequency(score, speed=2.0) == expected

    def test_dynamic_cadence_beyond_table(self, spawner):
        assert spawner.obstacle_frequency(2500, speed=3.0) == 90
        assert spawner.obstacle_frequency(2500, speed=5.05) == 70

    def test_dynamic_cadence_floor(self, spawner):
        assert spawner.obstacle_frequency(9000, speed=7.0) == 60
        assert spawner.obstacle_frequency(9000, speed=50.0) == 60

    def test_obstacle_level(self, spawner):
        assert spawner.obstacle_level(0) == 1
        assert spawner.obstacle_level(2500) == 6


class TestSpawning:
    """Test what appears on which frame."""

    def test_nothing_on_ordinary_frames(self, spawner, store, world):
        for frame in range(1, 180):
            spawner.maybe_spawn(frame, score=0, speed=2.0, world=world)
        assert store.entity_count == 0

    def test_obstacle_and_fruit_on_frame_180(self, spawner, store, world):
        result = spawner.maybe_spawn(180, score=0, speed=2.0, world=world)

        assert len(result.obstacles) == 1
        assert len(result.fruits) == 1
        assert result.bonus_items == []
        assert store.obstacles == result.obstacles
        assert store.fruits == result.fruits

    def test_obstacle_cadence_uses_score(self, spawner, store, world):
        result = spawner.maybe_spawn(150, score=600, speed=2.6, world=world)
        assert len(result.obstacles) == 1
        assert result.fruits == []

    def test_bonus_roll_certain(self, store, world, config):
        spawner = SpawnScheduler(store, with_spawn(config, bonus_chance=1.0), seed=1)
        result = spawner.maybe_spawn(300, score=0, speed=2.0, world=world)
        assert len(result.bonus_items) == 1

    def test_bonus_roll_impossible(self, store, world, config):
        spawner = SpawnScheduler(store, with_spawn(config, bonus_chance=0.0), seed=1)
        for frame in range(300, 3001, 300):
            spawner.maybe_spawn(frame, score=0, speed=2.0, world=world)
        assert store.bonus_items == []

    def test_bonus_rate_roughly_matches_chance(self, spawner, store, world):
        rolls = 400
        for i in range(1, rolls + 1):
            spawner.maybe_spawn(300 * 7 * i, score=0, speed=2.0, world=world)
        assert 0.55 < len(store.bonus_items) / rolls < 0.85


class TestPlacement:
    """Test where entities appear."""

    def test_obstacles_at_right_edge(self, spawner, world):
        for _ in range(60):
            obstacle = spawner.spawn_obstacle(world)
            assert obstacle.x == 800
            if obstacle.kind.name == "water":
                assert obstacle.y == 320
            else:
                assert obstacle.y == 300 - obstacle.height

    def test_all_obstacle_kinds_appear(self, spawner, world):
        kinds = {spawner.spawn_obstacle(world).kind.name for _ in range(100)}
        assert kinds == {"stump", "rock", "water"}

    def test_fruit_band(self, spawner, world):
        for _ in range(100):
            fruit = spawner.spawn_fruit(world)
            assert fruit.x == 800
            assert 80 <= fruit.y <= 240
            assert 0 <= fruit.bob_phase < 6.2832

    def test_bonus_band(self, spawner, world):
        for _ in range(100):
            bonus = spawner.spawn_bonus(world)
            assert bonus.x == 800
            assert 60 <= bonus.y <= 200
            assert bonus.sparkle_phase == 0.0

    def test_placement_follows_world_size(self, spawner):
        big = WorldBounds(1200, 600)
        obstacle = spawner.spawn_obstacle(big)
        assert obstacle.x == 1200
        ground = 600 - 100
        assert obstacle.y in (ground + 20, ground - obstacle.height)

    def test_uids_are_unique(self, spawner, store, world):
        for _ in range(20):
            spawner.spawn_obstacle(world)
            spawner.spawn_fruit(world)
            spawner.spawn_bonus(world)
        uids = [e.uid for e in store.obstacles + store.fruits + store.bonus_items]
        assert len(set(uids)) == 60


class TestDeterminism:
    """Same seed, same world."""

    def _run(self, config, world, seed):
        store = EntityStore()
        spawner = SpawnScheduler(store, config, seed=seed)
        for frame in range(1, 3001):
            spawner.maybe_spawn(frame, score=0, speed=2.0, world=world)
        return [
            (e.kind.name, e.x, e.y)
            for e in store.obstacles + store.fruits + store.bonus_items
        ]

    def test_same_seed_same_spawns(self, config, world):
        assert self._run(config, world, 7) == self._run(config, world, 7)

    def test_different_seed_differs(self, config, world):
        assert self._run(config, world, 7) != self._run(config, world, 8)

    def test_reset_reseeds(self, store, config, world):
        spawner = SpawnScheduler(store, config, seed=5)
        first = [spawner.spawn_fruit(world).y for _ in range(5)]
        spawner.reset(seed=5)
        second = [spawner.spawn_fruit(world).y for _ in range(5)]
        assert first == second
