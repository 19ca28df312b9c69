"""Data representation classes for the routeshare package.

This module contains the data classes used throughout the routeshare package.
They represent GPX structural documents, normalized activities, and the
style configuration of a rendered overlay.
"""

import re
from dataclasses import dataclass, field, fields, replace, asdict
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .errors import CompositionError, MalformedInputError

UNKNOWN_ACTIVITY_NAME = "Unknown Activity"
UNKNOWN_ACTIVITY_TYPE = "Unknown"

POSITIONS = ("top", "center", "bottom")
MIN_FONT_SIZE = 12
MAX_FONT_SIZE = 120

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class GPXTrackPoint:
    """Represents a single point in a GPX track segment."""

    def __init__(self, latitude: float, longitude: float, elevation: Optional[float] = None,
                 time: Optional[datetime] = None):
        self.latitude = latitude
        self.longitude = longitude
        self.elevation = elevation
        self.time = time

    def __repr__(self) -> str:
        return f"GPXTrackPoint(lat={self.latitude}, lon={self.longitude}, time={self.time})"


@dataclass
class GPXSegment:
    """An ordered run of track points."""
    points: List[GPXTrackPoint] = field(default_factory=list)


@dataclass
class GPXTrack:
    """A named track made of one or more segments."""
    name: Optional[str] = None
    segments: List[GPXSegment] = field(default_factory=list)


@dataclass
class GPXDocument:
    """Structural form of a GPX file: tracks -> segments -> points."""
    tracks: List[GPXTrack] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GPXDocument":
        """Build a document from nested mappings.

        The expected shape is ``{"tracks": [{"name": ..., "segments":
        [{"points": [{"lat", "lon", "elevation", "time"}]}]}]}``.

        Raises:
            MalformedInputError: If the mapping does not have that shape
        """
        try:
            tracks = []
            for track in data.get("tracks") or []:
                segments = []
                for segment in track.get("segments") or []:
                    points = [
                        GPXTrackPoint(
                            latitude=float(point["lat"]),
                            longitude=float(point["lon"]),
                            elevation=_optional_float(point.get("elevation")),
                            time=point.get("time"),
                        )
                        for point in segment.get("points") or []
                    ]
                    segments.append(GPXSegment(points=points))
                tracks.append(GPXTrack(name=track.get("name"), segments=segments))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise MalformedInputError(f"Invalid track structure: {e}") from e
        return cls(tracks=tracks)


@dataclass(frozen=True)
class Coordinate:
    """A single position of a route. Immutable once created."""
    lat: float
    lng: float
    elevation: Optional[float] = None
    timestamp: Optional[str] = None

    def __post_init__(self):
        if not -90.0 <= self.lat <= 90.0:
            raise MalformedInputError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise MalformedInputError(f"Longitude out of range: {self.lng}")

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"lat": self.lat, "lng": self.lng}
        if self.elevation is not None:
            data["elevation"] = self.elevation
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        return data


@dataclass(frozen=True)
class ActivityRecord:
    """Normalized representation of one recorded activity.

    ``coordinates`` keeps track order and is the only source of the route
    shape; the metric fields were derived from it (or, for external
    activities, taken from the provider's own totals).
    """
    id: str
    name: str
    distance_meters: float
    duration_seconds: float
    elevation_gain_meters: float
    pace_seconds_per_km: float
    coordinates: Tuple[Coordinate, ...]
    start_time: str
    activity_type: str

    def __post_init__(self):
        if not self.coordinates:
            raise MalformedInputError("An activity needs at least one coordinate")
        for name in ("distance_meters", "duration_seconds",
                     "elevation_gain_meters", "pace_seconds_per_km"):
            if getattr(self, name) < 0:
                raise MalformedInputError(f"{name} must not be negative")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape exchanged with callers."""
        return {
            "id": self.id,
            "name": self.name,
            "distance": self.distance_meters,
            "duration": self.duration_seconds,
            "elevation": self.elevation_gain_meters,
            "pace": self.pace_seconds_per_km,
            "coordinates": [c.to_dict() for c in self.coordinates],
            "startTime": self.start_time,
            "type": self.activity_type,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ActivityRecord":
        """Rebuild a record from the JSON shape produced by :meth:`to_dict`.

        Raises:
            MalformedInputError: If a field is missing or has the wrong type
        """
        try:
            coordinates = tuple(
                Coordinate(
                    lat=float(c["lat"]),
                    lng=float(c["lng"]),
                    elevation=_optional_float(c.get("elevation")),
                    timestamp=c.get("timestamp"),
                )
                for c in data["coordinates"]
            )
            return cls(
                id=str(data["id"]),
                name=str(data["name"]),
                distance_meters=float(data["distance"]),
                duration_seconds=float(data["duration"]),
                elevation_gain_meters=float(data["elevation"]),
                pace_seconds_per_km=float(data["pace"]),
                coordinates=coordinates,
                start_time=str(data["startTime"]),
                activity_type=str(data.get("type") or UNKNOWN_ACTIVITY_TYPE),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedInputError(f"Invalid activity data: {e}") from e


@dataclass(frozen=True)
class ActivityMetrics:
    """Derived totals for a sequence of points."""
    distance_meters: float
    elevation_gain_meters: float
    duration_seconds: float
    pace_seconds_per_km: float


# camelCase keys accepted from JSON callers
_STYLE_ALIASES = {
    "primaryColor": "primary_color",
    "secondaryColor": "secondary_color",
    "backgroundColor": "background_color",
    "fontSize": "font_size",
    "showMap": "show_map",
    "showStats": "show_stats",
}


@dataclass(frozen=True)
class OverlayStyleConfig:
    """Configuration for overlay rendering."""
    primary_color: str = "#1a1a1a"
    secondary_color: str = "#666666"
    background_color: str = "rgba(255, 255, 255, 0.9)"
    font_size: int = 48
    position: str = "bottom"
    show_map: bool = True
    show_stats: bool = True

    def validate(self) -> "OverlayStyleConfig":
        """Check the documented field constraints.

        Raises:
            CompositionError: If a field is out of range
        """
        for name in ("primary_color", "secondary_color"):
            value = getattr(self, name)
            if not isinstance(value, str) or not _HEX_COLOR.match(value):
                raise CompositionError(f"{name} must be a #rrggbb hex color, got {value!r}")
        if not isinstance(self.background_color, str) or not self.background_color:
            raise CompositionError("background_color must be a non-empty color string")
        if isinstance(self.font_size, bool) or not isinstance(self.font_size, int) \
                or not MIN_FONT_SIZE <= self.font_size <= MAX_FONT_SIZE:
            raise CompositionError(
                f"font_size must be an integer between {MIN_FONT_SIZE} and {MAX_FONT_SIZE}")
        if self.position not in POSITIONS:
            raise CompositionError(f"position must be one of {', '.join(POSITIONS)}")
        for name in ("show_map", "show_stats"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise CompositionError(f"{name} must be true or false, got {value!r}")
        return self

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "OverlayStyleConfig":
        """Return a new config with ``overrides`` applied field by field.

        Keys may be given in snake_case or camelCase. ``None`` values are
        ignored so callers can pass sparse option sets straight through.
        """
        if not overrides:
            return self.validate()
        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in overrides.items():
            name = _STYLE_ALIASES.get(key, key)
            if name not in known:
                raise CompositionError(f"Unknown style option: {key}")
            if value is not None:
                changes[name] = value
        return replace(self, **changes).validate()

    def to_dict(self) -> Dict[str, Any]:
        inverse = {v: k for k, v in _STYLE_ALIASES.items()}
        return {inverse.get(k, k): v for k, v in asdict(self).items()}


DEFAULT_STYLE = OverlayStyleConfig()


@dataclass(frozen=True)
class ViewportBounds:
    """Geographic bounding box of a coordinate set."""
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def lat_range(self) -> float:
        span = self.max_lat - self.min_lat
        return span if span else 1.0

    @property
    def lng_range(self) -> float:
        span = self.max_lng - self.min_lng
        return span if span else 1.0


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)
