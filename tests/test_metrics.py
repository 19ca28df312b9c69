"""Tests for the activity metrics."""

import pytest

from routeshare import metrics
from routeshare.models import Coordinate


def _profile(*elevations):
    return [Coordinate(0.0, i * 0.001, elevation=e) for i, e in enumerate(elevations)]


def test_equator_round_trip(equator_points):
    summary = metrics.summarize(equator_points)

    assert summary.distance_meters == pytest.approx(222.4, abs=0.1)
    assert summary.duration_seconds == 120
    assert summary.pace_seconds_per_km == pytest.approx(539.5, abs=0.5)


def test_single_point_has_no_distance():
    assert metrics.total_distance([Coordinate(1.0, 1.0)]) == 0


@pytest.mark.parametrize("elevations", [
    (100, 200, 300),
    (300, 200, 100),
    (50, 50, 50),
    (10, -5, 20, 0),
])
def test_elevation_gain_is_never_negative(elevations):
    assert metrics.total_elevation_gain(_profile(*elevations)) >= 0


def test_elevation_gain_counts_only_climbs():
    assert metrics.total_elevation_gain(_profile(100, 120, 110, 130)) == 40


def test_missing_elevation_reads_as_zero():
    assert metrics.total_elevation_gain(_profile(10, None, 20)) == 20


def test_duration_ignores_untimed_ends():
    points = [
        Coordinate(0.0, 0.0),
        Coordinate(0.0, 0.001, timestamp="2024-05-01T06:00:00Z"),
        Coordinate(0.0, 0.002),
        Coordinate(0.0, 0.003, timestamp="2024-05-01T06:05:30+00:00"),
        Coordinate(0.0, 0.004),
    ]
    assert metrics.duration(points) == 330


def test_duration_needs_two_timestamps():
    points = [Coordinate(0.0, 0.0, timestamp="2024-05-01T06:00:00Z"), Coordinate(0.0, 0.001)]
    assert metrics.duration(points) == 0
    assert metrics.duration(_profile(1, 2)) == 0


def test_duration_is_never_negative():
    points = [
        Coordinate(0.0, 0.0, timestamp="2024-05-01T06:10:00Z"),
        Coordinate(0.0, 0.001, timestamp="2024-05-01T06:00:00Z"),
    ]
    assert metrics.duration(points) == 0


def test_naive_timestamps_are_utc():
    points = [
        Coordinate(0.0, 0.0, timestamp="2024-05-01T06:00:00"),
        Coordinate(0.0, 0.001, timestamp="2024-05-01T06:01:00Z"),
    ]
    assert metrics.duration(points) == 60


@pytest.mark.parametrize("duration_seconds", [0, 1, 3600, 1e9])
def test_pace_guards_zero_distance(duration_seconds):
    assert metrics.pace(0, duration_seconds) == 0


def test_pace_is_seconds_per_km():
    assert metrics.pace(5000, 1500) == 300
