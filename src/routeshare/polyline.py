"""
Google Polyline encoding/decoding utilities.

Strava uses Google's Polyline encoding format to compress GPS coordinates.
"""

from typing import List, Sequence, Tuple

PRECISION = 1e5


def decode_polyline(encoded: str) -> List[Tuple[float, float]]:
    """
    Decode a Google Polyline encoded string into a list of (lat, lng) coordinates.

    Args:
        encoded: Polyline encoded string

    Returns:
        List of (latitude, longitude) tuples

    Raises:
        ValueError: If the string is truncated or contains invalid characters
    """
    coordinates = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        dlat, index = _decode_value(encoded, index)
        if index >= len(encoded):
            raise ValueError("Polyline ends after a latitude without its longitude")
        dlng, index = _decode_value(encoded, index)

        lat += dlat
        lng += dlng
        coordinates.append((lat / PRECISION, lng / PRECISION))

    return coordinates


def encode_polyline(coordinates: Sequence[Tuple[float, float]]) -> str:
    """
    Encode a list of (lat, lng) coordinates into a Google Polyline string.

    Args:
        coordinates: List of (latitude, longitude) tuples

    Returns:
        Polyline encoded string
    """
    encoded = []
    prev_lat = 0
    prev_lng = 0

    for lat, lng in coordinates:
        lat_int = int(round(lat * PRECISION))
        lng_int = int(round(lng * PRECISION))

        encoded.extend(_encode_value(lat_int - prev_lat))
        encoded.extend(_encode_value(lng_int - prev_lng))

        prev_lat = lat_int
        prev_lng = lng_int

    return ''.join(encoded)


def _decode_value(encoded: str, index: int) -> Tuple[int, int]:
    """Decode one zig-zag delta starting at ``index``; return it and the next index."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ValueError("Polyline is truncated")
        b = ord(encoded[index]) - 63
        if not 0 <= b < 64:
            raise ValueError(f"Invalid polyline character {encoded[index]!r} at {index}")
        index += 1
        result |= (b & 0x1f) << shift
        shift += 5
        if b < 0x20:
            break

    delta = ~(result >> 1) if (result & 1) else (result >> 1)
    return delta, index


def _encode_value(value: int) -> List[str]:
    """Encode a single coordinate delta value."""
    # Left shift and invert if negative
    value = ~(value << 1) if value < 0 else (value << 1)

    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1f)) + 63))
        value >>= 5

    chunks.append(chr(value + 63))
    return chunks
