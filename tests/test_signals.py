"""Tests for signal conditioning and differentiation."""

import numpy as np
import pytest


class TestMovingAverage:

    def test_centered_and_clamped(self):
        from swingseq.signals import moving_average
        out = moving_average([1, 2, 3, 4, 5], window=3)
        np.testing.assert_allclose(out, [1.5, 2.0, 3.0, 4.0, 4.5])

    def test_window_one_is_identity(self):
        from swingseq.signals import moving_average
        x = np.array([3.0, -1.0, 7.5])
        np.testing.assert_allclose(moving_average(x, window=1), x)

    def test_nan_ignored(self):
        from swingseq.signals import moving_average
        out = moving_average([1.0, np.nan, 3.0], window=3)
        np.testing.assert_allclose(out, [1.0, 2.0, 3.0])

    def test_even_window_is_symmetric(self):
        from swingseq.signals import moving_average
        x = [0.0, 0.0, 6.0, 0.0, 0.0]
        np.testing.assert_allclose(moving_average(x, window=2), moving_average(x, window=3))
        np.testing.assert_allclose(moving_average(x, window=2), [0.0, 2.0, 2.0, 2.0, 0.0])

    def test_all_nan_gives_zero(self):
        from swingseq.signals import moving_average
        out = moving_average([np.nan, np.nan], window=3)
        np.testing.assert_allclose(out, [0.0, 0.0])

    def test_empty(self):
        from swingseq.signals import moving_average
        assert len(moving_average([], window=5)) == 0

    def test_preserves_length_and_constant(self):
        from swingseq.signals import moving_average
        out = moving_average(np.full(40, 2.5), window=11)
        assert len(out) == 40
        np.testing.assert_allclose(out, 2.5)


class TestSampleRate:

    def test_regular_300hz(self):
        from swingseq.signals import estimate_sample_rate
        times = np.arange(300) / 300.0
        assert estimate_sample_rate(times) == 300

    def test_upper_median_of_positive_steps(self):
        from swingseq.signals import estimate_sample_rate
        assert estimate_sample_rate([0.01, 0.02, 0.03, 0.05]) == 100

    def test_repeated_timestamps_ignored(self):
        from swingseq.signals import estimate_sample_rate
        times = [0.01, 0.01, 0.02, 0.02, 0.03]
        assert estimate_sample_rate(times) == 100

    def test_fallback_when_too_few_times(self):
        from swingseq.signals import estimate_sample_rate
        assert estimate_sample_rate([0.0, 0.0, 0.0]) == 300
        assert estimate_sample_rate([0.5]) == 300
        assert estimate_sample_rate([], default=240) == 240

    def test_fallback_when_no_positive_step(self):
        from swingseq.signals import estimate_sample_rate
        assert estimate_sample_rate([0.3, 0.2, 0.1], default=120) == 120

    def test_millisecond_timestamps_fall_back(self):
        from swingseq.signals import estimate_sample_rate
        assert estimate_sample_rate([0.0, 3.333, 6.667, 10.0]) == 300
        assert estimate_sample_rate([10.0, 20.0, 30.0], default=100) == 100

    def test_slow_but_valid_rate(self):
        from swingseq.signals import estimate_sample_rate
        assert estimate_sample_rate([0.5, 1.0, 1.5]) == 2


class TestVelocity:

    def test_ramp_velocity(self):
        from swingseq.signals import compute_velocity
        x = 2.0 * np.arange(50)
        vel = compute_velocity(x, sample_rate=100, window=7)
        assert vel[10] == pytest.approx(200.0)
        # first sample velocity is zero before smoothing
        assert vel[0] == pytest.approx(150.0)

    def test_constant_signal_zero_velocity(self):
        from swingseq.signals import compute_velocity
        vel = compute_velocity(np.full(30, 4.0), sample_rate=300)
        np.testing.assert_allclose(vel, 0.0)

    def test_empty(self):
        from swingseq.signals import compute_velocity
        assert len(compute_velocity([], 300)) == 0


class TestSegmentMomentum:

    def _sample(self, proj=None, comps=(3.0, 4.0, 0.0)):
        from swingseq.schema import MomentumSample
        return MomentumSample(
            time=0.0,
            movement_id="m",
            projections={"pelvis": proj, "torso": proj, "arms": proj},
            components={"pelvis": comps, "torso": comps, "arms": comps},
        )

    def test_projection_absolute_value(self):
        from swingseq.signals import segment_momentum
        out = segment_momentum([self._sample(proj=-3.0), self._sample(proj=2.0)], "pelvis")
        np.testing.assert_allclose(out, [3.0, 2.0])

    def test_component_magnitude(self):
        from swingseq.signals import segment_momentum
        out = segment_momentum([self._sample()], "torso")
        np.testing.assert_allclose(out, [5.0])

    def test_empty(self):
        from swingseq.signals import segment_momentum
        assert len(segment_momentum([], "arms")) == 0


def test_separation_angle():
    from swingseq.schema import RotationSample
    from swingseq.signals import separation_angle
    rot = [
        RotationSample(time=0.0, movement_id="m", pelvis_rot=10.0, torso_rot=40.0),
        RotationSample(time=0.1, movement_id="m", pelvis_rot=30.0, torso_rot=20.0),
    ]
    np.testing.assert_allclose(separation_angle(rot), [30.0, 10.0])
    assert separation_angle(None) is None
    assert separation_angle([]) is None
