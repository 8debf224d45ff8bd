"""
Tests for elapsed-time normalization.
"""

import math

import pytest

from fruit_run.runner_core.config_loader import load_config
from fruit_run.runner_core.timestep import FrameClock, TimeStepNormalizer


FRAME_MS = 1000.0 / 60.0


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def normalizer(config):
    return TimeStepNormalizer(config)


class TestTimeStepNormalizer:
    """Test the delta multiplier."""

    def test_one_nominal_frame(self, normalizer):
        assert normalizer.normalize(FRAME_MS) == pytest.approx(1.0)

    def test_two_frames(self, normalizer):
        assert normalizer.normalize(2 * FRAME_MS) == pytest.approx(2.0)

    def test_half_frame(self, normalizer):
        assert normalizer.normalize(FRAME_MS / 2) == pytest.approx(0.5)

    def test_long_stall_is_capped(self, normalizer):
        """A one-second hitch simulates at most three frames."""
        assert normalizer.normalize(1000.0) == pytest.approx(3.0)
        assert normalizer.normalize(1e9) == pytest.approx(normalizer.max_multiplier)

    def test_zero_negative_and_nan(self, normalizer):
        assert normalizer.normalize(0) == 0.0
        assert normalizer.normalize(-5.0) == 0.0
        assert normalizer.normalize(math.nan) == 0.0

    def test_result_is_bounded(self, normalizer):
        for elapsed in (0.1, 3.0, 16.0, 40.0, 50.0, 51.0, 500.0):
            delta = normalizer.normalize(elapsed)
            assert 0.0 <= delta <= 3.0

    def test_monotonic_below_cap_and_flat_above(self, normalizer):
        inputs = [-10.0, 0.0, 0.5, 1.0, 8.0, 16.0, 16.67, 33.3, 49.9, 50.0,
                  50.5, 60.0, 200.0, 1000.0, 1e9, math.inf]
        deltas = [normalizer.normalize(elapsed) for elapsed in inputs]

        assert deltas == sorted(deltas)
        for elapsed, delta in zip(inputs, deltas):
            if elapsed > 50.0:
                assert delta == 3.0

    def test_frame_interval(self, normalizer):
        assert normalizer.frame_interval_ms == pytest.approx(FRAME_MS)


class TestFrameClock:
    """Test timestamp to elapsed conversion."""

    def test_first_reading_is_zero(self):
        clock = FrameClock()
        assert clock.advance(12345.0) == 0.0

    def test_elapsed_between_readings(self):
        clock = FrameClock()
        clock.advance(1000.0)
        assert clock.advance(1016.0) == pytest.approx(16.0)
        assert clock.advance(1050.0) == pytest.approx(34.0)

    def test_backwards_timestamp_is_zero(self):
        clock = FrameClock()
        clock.advance(1000.0)
        assert clock.advance(900.0) == 0.0
        assert clock.advance(916.0) == pytest.approx(16.0)

    def test_reset(self):
        clock = FrameClock()
        clock.advance(1000.0)
        clock.reset()
        assert clock.advance(5000.0) == 0.0
