import math

import pytest

from sensorfusion.tracker import KalmanTracker


def test_new_tracker_holds_noise_parameters():
    tracker = KalmanTracker(0.1, 1.0)
    assert tracker.q == 0.1
    assert tracker.r == 1.0
    assert tracker.initialized is False
    assert tracker.uncertainty() == 0.0


def test_predict_before_initialization_is_noop():
    tracker = KalmanTracker(0.1, 1.0)
    tracker.predict(0.1)
    assert tracker.state() == (0.0, 0.0, 0.0, 0.0)
    assert tracker.uncertainty() == 0.0


def test_first_update_initializes():
    tracker = KalmanTracker(0.1, 1.0)
    tracker.update(12.0, 34.0)
    assert tracker.initialized is True
    assert tracker.state() == (12.0, 34.0, 0.0, 0.0)
    assert tracker.uncertainty() == pytest.approx(math.sqrt(2.0))


def test_update_moves_toward_measurement():
    tracker = KalmanTracker(0.1, 1.0)
    tracker.update(10.0, 10.0)
    tracker.predict(0.1)
    tracker.update(20.0, 0.0)
    x, y, vx, vy = tracker.state()
    assert 10.0 < x < 20.0
    assert 0.0 < y < 10.0
    assert vx > 0
    assert vy < 0


def test_update_reduces_uncertainty_and_predict_raises_it():
    tracker = KalmanTracker(0.1, 1.0)
    tracker.update(0.0, 0.0)
    start = tracker.uncertainty()
    tracker.predict(0.1)
    after_predict = tracker.uncertainty()
    tracker.update(1.0, 1.0)
    after_update = tracker.uncertainty()
    assert after_predict > start
    assert after_update < after_predict


def test_predict_advances_by_velocity():
    tracker = KalmanTracker(0.1, 1.0)
    tracker.update(0.0, 0.0)
    tracker.predict(0.1)
    tracker.update(5.0, -5.0)
    x, y, vx, vy = tracker.state()
    tracker.predict(2.0)
    nx, ny, nvx, nvy = tracker.state()
    assert nx == pytest.approx(x + vx * 2.0)
    assert ny == pytest.approx(y + vy * 2.0)
    assert (nvx, nvy) == (vx, vy)


def test_repeated_measurements_converge():
    tracker = KalmanTracker(0.1, 1.0)
    tracker.update(0.0, 0.0)
    for _ in range(200):
        tracker.predict(0.1)
        tracker.update(50.0, 25.0)
    x, y, vx, vy = tracker.state()
    assert x == pytest.approx(50.0, abs=1e-3)
    assert y == pytest.approx(25.0, abs=1e-3)
    assert abs(vx) < 1e-3
    assert abs(vy) < 1e-3


def test_initialize_resets_state():
    tracker = KalmanTracker(0.1, 1.0)
    tracker.update(0.0, 0.0)
    tracker.predict(0.1)
    tracker.update(9.0, 9.0)
    tracker.initialize(3.0, 4.0)
    assert tracker.state() == (3.0, 4.0, 0.0, 0.0)
    assert tracker.p[0] == [1.0, 0.0, 0.0, 0.0]
    assert tracker.uncertainty() == pytest.approx(math.sqrt(2.0))