"""Strava activity retrieval and conversion.

Activities fetched from the Strava API already carry the provider's own
distance, moving time and elevation totals. Those are trusted as-is; only the
route shape is taken from the encoded summary polyline.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from .errors import MalformedInputError, RetrievalError
from .metrics import pace
from .models import ActivityRecord, Coordinate, UNKNOWN_ACTIVITY_NAME, UNKNOWN_ACTIVITY_TYPE
from .polyline import decode_polyline

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://www.strava.com/api/v3"


def convert_external_activity(api_activity: Mapping[str, Any]) -> ActivityRecord:
    """Convert a Strava activity object into an activity record.

    Args:
        api_activity: Activity JSON as returned by ``GET /activities/{id}``

    Returns:
        ActivityRecord with coordinates decoded from the route polyline

    Raises:
        RetrievalError: If a field is missing or the polyline cannot be decoded
    """
    try:
        activity_id = api_activity["id"]
        distance_meters = float(api_activity["distance"])
        duration_seconds = float(api_activity["moving_time"])
        elevation_gain = float(api_activity.get("total_elevation_gain") or 0.0)
        start_time = str(api_activity["start_date"])
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Strava activity is missing required data: {e}")
        raise RetrievalError(f"Invalid Strava activity: {e}") from e

    encoded = _route_polyline(api_activity)
    if not encoded:
        raise RetrievalError(f"Strava activity {activity_id} has no route polyline")

    try:
        coordinates = tuple(Coordinate(lat=lat, lng=lng) for lat, lng in decode_polyline(encoded))
    except (ValueError, MalformedInputError) as e:
        logger.error(f"Failed to decode polyline of activity {activity_id}: {e}")
        raise RetrievalError(f"Failed to decode route of activity {activity_id}: {e}") from e

    try:
        activity = ActivityRecord(
            id=str(activity_id),
            name=api_activity.get("name") or UNKNOWN_ACTIVITY_NAME,
            distance_meters=distance_meters,
            duration_seconds=duration_seconds,
            elevation_gain_meters=elevation_gain,
            pace_seconds_per_km=pace(distance_meters, duration_seconds),
            coordinates=coordinates,
            start_time=start_time,
            activity_type=api_activity.get("type") or api_activity.get("sport_type")
            or UNKNOWN_ACTIVITY_TYPE,
        )
    except MalformedInputError as e:
        raise RetrievalError(f"Invalid Strava activity {activity_id}: {e.message}") from e

    logger.info(f"Converted Strava activity {activity.id} with {len(coordinates)} points")
    return activity


def _route_polyline(api_activity: Mapping[str, Any]) -> Optional[str]:
    route_map = api_activity.get("map") or {}
    if not isinstance(route_map, Mapping):
        logger.error(f"Strava activity map is not an object: {route_map!r}")
        raise RetrievalError(f"Invalid route map in Strava activity: {route_map!r}")
    encoded = route_map.get("summary_polyline") or route_map.get("polyline")
    if encoded and not isinstance(encoded, str):
        logger.error(f"Strava route polyline is not a string: {encoded!r}")
        raise RetrievalError(f"Invalid route polyline in Strava activity: {encoded!r}")
    return encoded


class StravaClient:
    """Minimal Strava API client. Every call is a single attempt."""

    def __init__(self, access_token: str, base_url: str = DEFAULT_API_BASE, timeout: float = 10.0,
                 session: Optional[requests.Session] = None):
        """Initialize the client.

        Args:
            access_token: OAuth access token with ``activity:read_all`` scope
            base_url: API root
            timeout: Request timeout in seconds
            session: Optional requests session, mainly for tests
        """
        if not access_token:
            raise RetrievalError("A Strava access token is required")
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(
                url,
                headers={"Authorization": f"Bearer {self.access_token}"},
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error(f"Strava request to {path} failed: {e}")
            raise RetrievalError(f"Failed to fetch {path}: {e}") from e
        except ValueError as e:
            logger.error(f"Strava returned invalid JSON for {path}: {e}")
            raise RetrievalError(f"Invalid response for {path}") from e

    def get_activity(self, activity_id: int) -> Dict[str, Any]:
        """Fetch the detailed activity object."""
        return self._get(f"/activities/{activity_id}")

    def list_activities(self, limit: int = 10) -> List[Dict[str, Any]]:
        """Fetch the athlete's most recent activities (first page only)."""
        return self._get("/athlete/activities", params={"per_page": limit, "page": 1})

    def fetch_activity_record(self, activity_id: int) -> ActivityRecord:
        """Fetch an activity and convert it to an activity record."""
        return convert_external_activity(self.get_activity(activity_id))
