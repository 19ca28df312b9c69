"""Shared fixtures for the routeshare tests."""

import pytest

from routeshare.gpx_parser import parse_track
from routeshare.models import Coordinate, GPXDocument

SAMPLE_GPX = """<?xml version="1.0"?>
<gpx version="1.1" creator="routeshare-tests" xmlns="http://www.topografix.com/GPX/1/1">
  <trk>
    <name>Morning Run</name>
    <trkseg>
      <trkpt lat="0.0" lon="0.0"><ele>10</ele><time>2024-05-01T06:00:00Z</time></trkpt>
      <trkpt lat="0.0" lon="0.001"><ele>15</ele><time>2024-05-01T06:01:00Z</time></trkpt>
      <trkpt lat="0.0" lon="0.002"><ele>12</ele><time>2024-05-01T06:02:00Z</time></trkpt>
    </trkseg>
  </trk>
</gpx>
"""


@pytest.fixture
def sample_gpx():
    return SAMPLE_GPX


@pytest.fixture
def equator_points():
    """Three points 0.001 degrees of longitude apart, one minute between each."""
    return [
        Coordinate(0.0, 0.0, timestamp="2024-05-01T06:00:00Z"),
        Coordinate(0.0, 0.001, timestamp="2024-05-01T06:01:00Z"),
        Coordinate(0.0, 0.002, timestamp="2024-05-01T06:02:00Z"),
    ]


@pytest.fixture
def loop_activity():
    """A small loop around a city block with elevation and timestamps."""
    document = GPXDocument.from_dict({
        "tracks": [{
            "name": "Block Loop",
            "segments": [{
                "points": [
                    {"lat": 37.7749, "lon": -122.4194, "elevation": 20, "time": "2024-05-01T06:00:00Z"},
                    {"lat": 37.7759, "lon": -122.4194, "elevation": 25, "time": "2024-05-01T06:02:00Z"},
                    {"lat": 37.7759, "lon": -122.4174, "elevation": 32, "time": "2024-05-01T06:05:00Z"},
                    {"lat": 37.7749, "lon": -122.4174, "elevation": 28, "time": "2024-05-01T06:07:00Z"},
                    {"lat": 37.7749, "lon": -122.4194, "elevation": 20, "time": "2024-05-01T06:10:00Z"},
                ],
            }],
        }],
    })
    return parse_track(document)
