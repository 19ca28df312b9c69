"""Tests for GPX parsing and track conversion."""

import os
import tempfile
from datetime import datetime

import pytest

from routeshare.errors import MalformedInputError
from routeshare.gpx_parser import GPXParser, parse_gpx_text, parse_gpx_upload, parse_track
from routeshare.models import GPXDocument, GPXSegment, GPXTrack, GPXTrackPoint


def _document(*segments, name="Test Track"):
    return GPXDocument(tracks=[GPXTrack(name=name, segments=[
        GPXSegment(points=[GPXTrackPoint(lat, lon) for lat, lon in segment]) for segment in segments
    ])])


def test_parse_gpx_text(sample_gpx):
    activity = parse_gpx_text(sample_gpx)

    assert activity.name == "Morning Run"
    assert activity.activity_type == "Unknown"
    assert len(activity.coordinates) == 3
    assert activity.coordinates[1].lng == 0.001
    assert activity.coordinates[1].elevation == 15
    assert activity.distance_meters == pytest.approx(222.4, abs=0.1)
    assert activity.duration_seconds == 120
    assert activity.elevation_gain_meters == 5
    assert activity.start_time.startswith("2024-05-01T06:00:00")
    assert activity.id.startswith("gpx_")


@pytest.mark.parametrize("count", [0, 1])
def test_too_few_points_are_rejected(count):
    points = [(0.0, 0.0), (0.0, 0.001)][:count]
    with pytest.raises(MalformedInputError, match="Insufficient track points"):
        parse_track(_document(points))


def test_two_points_are_enough():
    activity = parse_track(_document([(0.0, 0.0), (0.0, 0.001)]))
    assert len(activity.coordinates) == 2
    assert activity.duration_seconds == 0
    assert activity.pace_seconds_per_km == 0


def test_no_tracks_is_rejected():
    with pytest.raises(MalformedInputError, match="No tracks"):
        parse_track(GPXDocument())


def test_track_without_segments_is_rejected():
    with pytest.raises(MalformedInputError, match="no segments"):
        parse_track(GPXDocument(tracks=[GPXTrack(name="Empty")]))


def test_only_first_segment_of_first_track_is_used():
    document = _document([(0.0, 0.0), (0.0, 0.001)], [(5.0, 5.0), (6.0, 6.0)], name="First")
    document.tracks.append(GPXTrack(name="Second", segments=[
        GPXSegment(points=[GPXTrackPoint(9.0, 9.0), GPXTrackPoint(9.5, 9.5)])]))

    activity = parse_track(document)

    assert activity.name == "First"
    assert [(c.lat, c.lng) for c in activity.coordinates] == [(0.0, 0.0), (0.0, 0.001)]


def test_missing_name_and_time_use_fallbacks():
    activity = parse_track(_document([(0.0, 0.0), (0.0, 0.001)], name=None))

    assert activity.name == "Unknown Activity"
    # Falls back to the time of parsing
    assert datetime.fromisoformat(activity.start_time).year >= 2024


def test_ids_differ_between_parses():
    document = _document([(0.0, 0.0), (0.0, 0.001)])
    assert parse_track(document).id != parse_track(document).id


def test_out_of_range_coordinates_are_rejected():
    with pytest.raises(MalformedInputError, match="Latitude"):
        parse_track(_document([(95.0, 0.0), (0.0, 0.001)]))


def test_invalid_timestamp_is_rejected():
    document = GPXDocument.from_dict({"tracks": [{"segments": [{"points": [
        {"lat": 0, "lon": 0, "time": "yesterday"},
        {"lat": 0, "lon": 0.001},
    ]}]}]})
    with pytest.raises(MalformedInputError, match="timestamp"):
        parse_track(document)


def test_from_dict_rejects_bad_structure():
    with pytest.raises(MalformedInputError):
        GPXDocument.from_dict({"tracks": [{"segments": [{"points": [{"lat": 1.0}]}]}]})


def test_invalid_xml_is_rejected():
    with pytest.raises(MalformedInputError, match="Invalid GPX"):
        parse_gpx_text("<gpx><trk>")


def test_parser_reads_file(sample_gpx, tmp_path):
    gpx_file = tmp_path / "run.gpx"
    gpx_file.write_text(sample_gpx, encoding="utf-8")

    document = GPXParser(str(gpx_file)).parse_document()
    assert document.tracks[0].name == "Morning Run"
    assert len(document.tracks[0].segments[0].points) == 3
    assert GPXParser(str(gpx_file)).parse().name == "Morning Run"


def test_parser_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        GPXParser(str(tmp_path / "missing.gpx")).parse()


def _upload_files():
    directory = tempfile.gettempdir()
    return {name for name in os.listdir(directory) if name.startswith("routeshare_")}


def test_upload_file_removed_after_success(sample_gpx):
    before = _upload_files()
    activity = parse_gpx_upload(sample_gpx.encode("utf-8"))

    assert activity.name == "Morning Run"
    assert _upload_files() == before


def test_upload_file_removed_after_failure():
    before = _upload_files()
    with pytest.raises(MalformedInputError):
        parse_gpx_upload(b"this is not gpx")

    assert _upload_files() == before
