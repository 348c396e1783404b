#
# test_prediction.py: unit tests for trajectory extrapolation
#

import copy
import math

import pytest

from security_tracker.geometry import Rect
from security_tracker.prediction import predict_trajectory
from security_tracker.tracking import TrackedObject


def make_track(trajectory, speed=0.0, direction=0.0):
    return TrackedObject(
        track_id=0,
        bbox=Rect(0, 0, 10, 10),
        class_name="car",
        last_seen=0.0,
        last_moved=0.0,
        trajectory=list(trajectory),
        speed=speed,
        direction=direction,
    )


def test_needs_two_points():
    assert predict_trajectory(make_track([(5, 5)], speed=3.0), 10) == []
    assert predict_trajectory(make_track([], speed=3.0), 10) == []


def test_points_on_heading_line():
    speed, direction, dt = 4.0, math.radians(30), 0.05
    track = make_track([(0, 0), (100, 40)], speed=speed, direction=direction)

    points = predict_trajectory(track, 20, dt)

    assert len(points) == 20
    x0, y0 = 100, 40
    for x, y in points:
        assert (y - y0) == pytest.approx(math.tan(direction) * (x - x0))

    prev = (x0, y0)
    for point in points:
        assert math.dist(prev, point) == pytest.approx(speed * dt)
        prev = point


def test_zero_horizon_and_negative():
    track = make_track([(0, 0), (1, 0)], speed=1.0)
    assert predict_trajectory(track, 0) == []
    with pytest.raises(ValueError):
        predict_trajectory(track, -1)


def test_track_not_modified():
    track = make_track([(0, 0), (10, 0)], speed=2.0, direction=0.5)
    before = copy.deepcopy(track)
    predict_trajectory(track, 30)
    assert track == before


def test_deterministic():
    track = make_track([(0, 0), (10, 10)], speed=7.5, direction=-1.2)
    assert predict_trajectory(track, 15) == predict_trajectory(track, 15)
