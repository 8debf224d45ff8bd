"""
Tests for score accumulation, level milestones and speed progression.
"""

import random

import pytest

from fruit_run.runner_core.config_loader import load_config
from fruit_run.runner_core.effects import EffectsEngine
from fruit_run.runner_core.events import EventSink, LevelUp, SoundCue
from fruit_run.runner_core.scoring import ScoreAndDifficultyManager


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def particles():
    return []


@pytest.fixture
def scoring(config, particles):
    effects = EffectsEngine(particles, config, rng=random.Random(3))
    return ScoreAndDifficultyManager(config, effects)


@pytest.fixture
def events():
    return EventSink()


class TestScore:
    """Test score bookkeeping."""

    def test_initial_state(self, scoring):
        assert scoring.score == 0
        assert scoring.speed == 2.0
        assert scoring.level == 1
        assert scoring.milestone_level == 0

    def test_add_points(self, scoring):
        scoring.add_points(50)
        scoring.add_points(60)
        assert scoring.score == 110

    def test_negative_points_rejected(self, scoring):
        with pytest.raises(ValueError):
            scoring.add_points(-10)

    def test_survival_points_every_thirty_frames(self, scoring):
        awarded = [f for f in range(1, 121) if scoring.tick_survival(f)]
        assert awarded == [30, 60, 90, 120]
        assert scoring.score == 40

    def test_no_survival_points_on_frame_zero(self, scoring):
        assert not scoring.tick_survival(0)
        assert scoring.score == 0

    def test_reset(self, scoring, events):
        scoring.add_points(1200)
        scoring.creep(100.0)
        scoring.tick_milestones(events)
        scoring.reset()
        assert scoring.score == 0
        assert scoring.speed == 2.0
        assert scoring.last_milestone_level == 0


class TestSpeed:
    """Test speed creep and level steps."""

    def test_creep(self, scoring):
        scoring.creep(1.0)
        assert scoring.speed == pytest.approx(2.0005)
        scoring.creep(2.0)
        assert scoring.speed == pytest.approx(2.0015)

    def test_level_speed(self, scoring):
        assert scoring.level_speed(1) == pytest.approx(2.55)
        assert scoring.level_speed(4) == pytest.approx(3.0)


class TestMilestones:
    """Test level-up detection."""

    def test_no_milestone_below_threshold(self, scoring, events, particles):
        scoring.add_points(499)
        assert scoring.tick_milestones(events) is None
        assert events.ui_events == []
        assert particles == []

    def test_first_milestone(self, scoring, events, particles):
        scoring.add_points(500)

        event = scoring.tick_milestones(events, origin=(120.0, 320.0))

        assert event.level == 1
        assert event.speed == pytest.approx(2.55)
        assert scoring.speed == pytest.approx(2.55)
        assert scoring.level == 2
        assert scoring.last_milestone_score == 500
        assert events.ui_events == [event]
        assert events.sounds == [SoundCue.BONUS]
        assert len(particles) == 15
        assert all((p.x, p.y) == (120.0, 320.0) for p in particles)

    def test_milestone_fires_once(self, scoring, events):
        scoring.add_points(500)
        scoring.tick_milestones(events)
        assert scoring.tick_milestones(events) is None
        scoring.add_points(100)
        assert scoring.tick_milestones(events) is None
        assert len(events.ui_events) == 1

    def test_skipped_levels_report_only_highest(self, scoring, events):
        scoring.add_points(1600)

        event = scoring.tick_milestones(events)

        assert event.level == 3
        assert scoring.speed == pytest.approx(2.85)
        assert len(events.ui_events) == 1
        assert scoring.tick_milestones(events) is None

    def test_milestone_never_slows_down(self, scoring, events):
        scoring.creep(10000.0)
        crept = scoring.speed
        scoring.add_points(500)

        event = scoring.tick_milestones(events)

        assert crept == pytest.approx(7.0)
        assert scoring.speed == crept
        assert event.speed == crept

    def test_late_first_level_keeps_crept_speed(self, scoring, events):
        """1500 frames of creep outpace the level 1 step of 2.55."""
        for _ in range(1500):
            scoring.creep(1.0)
        scoring.add_points(500)

        scoring.tick_milestones(events)

        assert scoring.level_speed(1) == pytest.approx(2.55)
        assert scoring.speed == pytest.approx(2.75)


class TestLevelUpEvent:
    """Test HUD formatting."""

    def test_message(self):
        event = LevelUp(level=2, speed=3.0)
        assert event.speed_display == "3.0x"
        assert event.message == "LEVEL 2 COMPLETED! 3.0x"
