"""Geographic helpers: great-circle distance and viewport projection."""

import math
from typing import List, Sequence, Tuple

import numpy as np

from .models import Coordinate, ViewportBounds

EARTH_RADIUS_METERS = 6371000.0


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in meters."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lng - a.lng)

    h = (math.sin(d_phi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2)
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def calculate_bounds(coords: Sequence[Coordinate]) -> ViewportBounds:
    """Get the bounding box of a coordinate set.

    Raises:
        ValueError: If ``coords`` is empty
    """
    if not coords:
        raise ValueError("No coordinates to bound")

    lats = [c.lat for c in coords]
    lngs = [c.lng for c in coords]
    return ViewportBounds(min(lats), max(lats), min(lngs), max(lngs))


def project_to_viewport(coords: Sequence[Coordinate], viewport_width: float,
                        viewport_height: float, padding: float) -> List[Tuple[float, float]]:
    """Map coordinates onto a ``viewport_width`` x ``viewport_height`` surface.

    Longitude and latitude are scaled by the same factor so the route keeps
    its shape, and the result is centred inside the padded area. Latitude
    grows northward while drawing surfaces grow downward, so y is inverted.

    Args:
        coords: Route coordinates in track order
        viewport_width: Width of the drawing surface
        viewport_height: Height of the drawing surface
        padding: Margin kept free on every side

    Returns:
        List of (x, y) tuples, empty when fewer than two coordinates are given
    """
    if len(coords) < 2:
        return []

    bounds = calculate_bounds(coords)
    available_width = viewport_width - 2 * padding
    available_height = viewport_height - 2 * padding

    scale = min(available_width / bounds.lng_range, available_height / bounds.lat_range)

    # Centre the scaled route inside the padded area
    offset_x = padding + (available_width - (bounds.max_lng - bounds.min_lng) * scale) / 2
    offset_y = padding + (available_height - (bounds.max_lat - bounds.min_lat) * scale) / 2

    lngs = np.fromiter((c.lng for c in coords), dtype=float, count=len(coords))
    lats = np.fromiter((c.lat for c in coords), dtype=float, count=len(coords))

    xs = offset_x + (lngs - bounds.min_lng) * scale
    ys = offset_y + (bounds.max_lat - lats) * scale

    return [(float(x), float(y)) for x, y in zip(xs, ys)]
