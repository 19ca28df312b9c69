"""Tests for the encoded polyline codec."""

import pytest

from routeshare.polyline import decode_polyline, encode_polyline

CANONICAL = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def test_decode_canonical_string():
    coordinates = decode_polyline(CANONICAL)

    assert len(coordinates) == 3
    assert coordinates[0] == pytest.approx((38.5, -120.2), abs=1e-5)
    assert coordinates[1] == pytest.approx((40.7, -120.95), abs=1e-5)
    assert coordinates[2] == pytest.approx((43.252, -126.453), abs=1e-5)


def test_encode_canonical_points():
    assert encode_polyline([(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]) == CANONICAL


def test_decode_empty_string():
    assert decode_polyline("") == []


@pytest.mark.parametrize("encoded", ["_p~iF", "_p~iF~ps|", "_p~i"])
def test_truncated_polyline_raises(encoded):
    with pytest.raises(ValueError):
        decode_polyline(encoded)


def test_invalid_character_raises():
    with pytest.raises(ValueError, match="Invalid polyline character"):
        decode_polyline("_p~iF ps|U")
