"""GPX parsing module for turning tracks into activity records.

Only the first segment of the first track becomes part of the activity.
Files with several tracks or segments are not merged.
"""

import logging
import os
import random
import string
import tempfile
import time
from datetime import datetime, timezone
from typing import Optional, Union

import gpxpy
import gpxpy.gpx

from .errors import MalformedInputError
from .metrics import parse_timestamp, summarize
from .models import (
    ActivityRecord,
    Coordinate,
    GPXDocument,
    GPXSegment,
    GPXTrack,
    GPXTrackPoint,
    UNKNOWN_ACTIVITY_NAME,
    UNKNOWN_ACTIVITY_TYPE,
)

logger = logging.getLogger(__name__)

MIN_TRACK_POINTS = 2

_ID_ALPHABET = string.ascii_lowercase + string.digits


class GPXParser:
    """Parser for GPX files that builds the structural track document."""

    def __init__(self, gpx_file_path: str):
        """Initialize with the path to a GPX file.

        Args:
            gpx_file_path: Path to the GPX file to parse
        """
        self.gpx_file_path = gpx_file_path

    def parse_document(self) -> GPXDocument:
        """Read the GPX file into tracks, segments and points.

        Returns:
            GPXDocument with every track of the file

        Raises:
            FileNotFoundError: If the GPX file doesn't exist
            MalformedInputError: If the GPX file is invalid
        """
        try:
            with open(self.gpx_file_path, 'r', encoding='utf-8') as gpx_file:
                document = document_from_gpx(gpxpy.parse(gpx_file))
        except FileNotFoundError:
            logger.error(f"GPX file not found: {self.gpx_file_path}")
            raise
        except (gpxpy.gpx.GPXException, UnicodeDecodeError) as e:
            logger.error(f"Error parsing GPX file: {e}")
            raise MalformedInputError(f"Invalid GPX file: {e}") from e

        logger.info(f"Parsed {len(document.tracks)} track(s) from {self.gpx_file_path}")
        return document

    def parse(self) -> ActivityRecord:
        """Parse the GPX file and convert it to an activity record."""
        return parse_track(self.parse_document())


def document_from_gpx(gpx: gpxpy.gpx.GPX) -> GPXDocument:
    """Convert a gpxpy object tree into a GPXDocument."""
    return GPXDocument(tracks=[
        GPXTrack(
            name=track.name,
            segments=[
                GPXSegment(points=[
                    GPXTrackPoint(
                        latitude=point.latitude,
                        longitude=point.longitude,
                        elevation=point.elevation,
                        time=point.time,
                    )
                    for point in segment.points
                ])
                for segment in track.segments
            ],
        )
        for track in gpx.tracks
    ])


def parse_gpx_text(gpx_text: str) -> ActivityRecord:
    """Parse GPX XML text into an activity record.

    Raises:
        MalformedInputError: If the text is not valid GPX or the track is too short
    """
    try:
        gpx = gpxpy.parse(gpx_text)
    except gpxpy.gpx.GPXException as e:
        logger.error(f"Error parsing GPX data: {e}")
        raise MalformedInputError(f"Invalid GPX data: {e}") from e
    return parse_track(document_from_gpx(gpx))


def parse_gpx_upload(data: bytes, suffix: str = ".gpx") -> ActivityRecord:
    """Parse an uploaded GPX payload.

    The payload is spooled to a temporary file owned by this call. The file
    is removed whether parsing succeeds or fails.
    """
    fd, path = tempfile.mkstemp(prefix="routeshare_", suffix=suffix)
    try:
        with os.fdopen(fd, 'wb') as upload:
            upload.write(data)
        return GPXParser(path).parse()
    finally:
        if os.path.exists(path):
            os.remove(path)
            logger.debug(f"Removed upload file {path}")


def parse_track(document: GPXDocument) -> ActivityRecord:
    """Convert a structural GPX document into an activity record.

    Args:
        document: Parsed tracks -> segments -> points structure

    Returns:
        ActivityRecord built from the first segment of the first track

    Raises:
        MalformedInputError: If there is no track or fewer than two points
    """
    if not document.tracks:
        raise MalformedInputError("No tracks found in GPX data")

    track = document.tracks[0]
    if len(document.tracks) > 1:
        logger.debug(f"Ignoring {len(document.tracks) - 1} additional track(s)")

    if not track.segments:
        raise MalformedInputError("First track has no segments")
    if len(track.segments) > 1:
        logger.debug(f"Ignoring {len(track.segments) - 1} additional segment(s)")

    points = track.segments[0].points
    if len(points) < MIN_TRACK_POINTS:
        raise MalformedInputError(
            f"Insufficient track points: need at least {MIN_TRACK_POINTS}, got {len(points)}")

    coordinates = tuple(
        Coordinate(
            lat=point.latitude,
            lng=point.longitude,
            elevation=point.elevation,
            timestamp=_format_time(point.time),
        )
        for point in points
    )
    metrics = summarize(coordinates)

    activity = ActivityRecord(
        id=generate_activity_id(),
        name=track.name or UNKNOWN_ACTIVITY_NAME,
        distance_meters=metrics.distance_meters,
        duration_seconds=metrics.duration_seconds,
        elevation_gain_meters=metrics.elevation_gain_meters,
        pace_seconds_per_km=metrics.pace_seconds_per_km,
        coordinates=coordinates,
        start_time=coordinates[0].timestamp or datetime.now(timezone.utc).isoformat(),
        activity_type=UNKNOWN_ACTIVITY_TYPE,
    )
    logger.info(f"Converted track '{activity.name}' with {len(coordinates)} points "
                f"({activity.distance_meters:.1f} m)")
    return activity


def generate_activity_id() -> str:
    """Build an opaque id from the current time and a random suffix.

    Uniqueness is best effort only.
    """
    suffix = ''.join(random.choices(_ID_ALPHABET, k=9))
    return f"gpx_{int(time.time() * 1000)}_{suffix}"


def _format_time(value: Optional[Union[datetime, str]]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    try:
        parse_timestamp(value)
    except (TypeError, ValueError) as e:
        raise MalformedInputError(f"Invalid point timestamp {value!r}") from e
    return value
