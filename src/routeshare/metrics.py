"""Summary metrics derived from an ordered sequence of route points."""

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from .geo import haversine_distance
from .models import ActivityMetrics, Coordinate

logger = logging.getLogger(__name__)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, reading naive values as UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def total_distance(points: Sequence[Coordinate]) -> float:
    """Sum of haversine distances between consecutive points, in meters."""
    return sum(haversine_distance(points[i - 1], points[i]) for i in range(1, len(points)))


def total_elevation_gain(points: Sequence[Coordinate]) -> float:
    """Sum of positive elevation changes between consecutive points.

    A point without elevation counts as 0 m for the two pairs it belongs to.
    Gaps in the elevation data therefore show up as climbs from zero.
    """
    gain = 0.0
    for i in range(1, len(points)):
        previous = points[i - 1].elevation or 0.0
        current = points[i].elevation or 0.0
        if current > previous:
            gain += current - previous
    return gain


def duration(points: Sequence[Coordinate]) -> float:
    """Seconds between the first and the last timestamped point.

    Points without a timestamp are skipped. Returns 0 when fewer than two
    points carry a timestamp.
    """
    first = _first_timestamp(points)
    last = _first_timestamp(list(reversed(points)))
    # A single timestamped point is both first and last, giving 0
    if first is None or last is None:
        return 0.0

    return max(0.0, (parse_timestamp(last) - parse_timestamp(first)).total_seconds())


def pace(distance_meters: float, duration_seconds: float) -> float:
    """Seconds per kilometer, or 0 for a zero distance."""
    if distance_meters == 0:
        return 0.0
    return duration_seconds / (distance_meters / 1000)


def summarize(points: Sequence[Coordinate]) -> ActivityMetrics:
    """Compute all metrics for ``points`` in one pass over the helpers above."""
    distance_meters = total_distance(points)
    duration_seconds = duration(points)
    metrics = ActivityMetrics(
        distance_meters=distance_meters,
        elevation_gain_meters=total_elevation_gain(points),
        duration_seconds=duration_seconds,
        pace_seconds_per_km=pace(distance_meters, duration_seconds),
    )
    logger.debug(f"Computed metrics for {len(points)} points: {metrics}")
    return metrics


def _first_timestamp(points: Sequence[Coordinate]) -> Optional[str]:
    for point in points:
        if point.timestamp:
            return point.timestamp
    return None
