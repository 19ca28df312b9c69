"""Tests for the data model and style merging."""

import pytest

from routeshare.errors import CompositionError, MalformedInputError
from routeshare.models import DEFAULT_STYLE, ActivityRecord, Coordinate, OverlayStyleConfig
from routeshare.templates import TEMPLATES, get_template_style


def test_default_style_values():
    assert DEFAULT_STYLE.primary_color == "#1a1a1a"
    assert DEFAULT_STYLE.secondary_color == "#666666"
    assert DEFAULT_STYLE.font_size == 48
    assert DEFAULT_STYLE.position == "bottom"
    assert DEFAULT_STYLE.show_map is True
    assert DEFAULT_STYLE.show_stats is True


def test_partial_style_only_changes_given_field():
    style = DEFAULT_STYLE.merged({"position": "top"})

    assert style.position == "top"
    assert style == OverlayStyleConfig(position="top")
    # The defaults are never mutated
    assert DEFAULT_STYLE.position == "bottom"


def test_camel_case_keys_are_accepted():
    style = DEFAULT_STYLE.merged({"primaryColor": "#ff0000", "showMap": False, "fontSize": None})

    assert style.primary_color == "#ff0000"
    assert style.show_map is False
    assert style.font_size == 48


@pytest.mark.parametrize("overrides", [
    {"primary_color": "red"},
    {"secondaryColor": "#12345"},
    {"font_size": 11},
    {"font_size": 121},
    {"font_size": True},
    {"position": "left"},
    {"background_color": ""},
    {"opacity": 0.5},
    {"showMap": "false"},
    {"show_map": 0},
    {"showStats": "true"},
    {"show_stats": 1},
])
def test_invalid_style_is_rejected(overrides):
    with pytest.raises(CompositionError):
        DEFAULT_STYLE.merged(overrides)


def test_style_to_dict_uses_camel_case():
    data = DEFAULT_STYLE.to_dict()
    assert data["primaryColor"] == "#1a1a1a"
    assert data["position"] == "bottom"
    assert OverlayStyleConfig().merged(data) == DEFAULT_STYLE


def test_templates():
    assert get_template_style("minimal") == DEFAULT_STYLE
    assert get_template_style("bold").position == "center"
    for style in TEMPLATES.values():
        style.validate()
    with pytest.raises(LookupError, match="neon"):
        get_template_style("neon")


def test_activity_json_shape(loop_activity):
    data = loop_activity.to_dict()

    assert set(data) == {"id", "name", "distance", "duration", "elevation", "pace",
                         "coordinates", "startTime", "type"}
    assert data["coordinates"][0] == {
        "lat": 37.7749, "lng": -122.4194, "elevation": 20, "timestamp": "2024-05-01T06:00:00Z"}
    assert ActivityRecord.from_dict(data) == loop_activity


def test_activity_from_dict_rejects_bad_data(loop_activity):
    data = loop_activity.to_dict()
    del data["distance"]
    with pytest.raises(MalformedInputError, match="distance"):
        ActivityRecord.from_dict(data)


def test_activity_needs_coordinates():
    with pytest.raises(MalformedInputError):
        ActivityRecord("a", "n", 0, 0, 0, 0, (), "2024-05-01T00:00:00Z", "Run")


def test_activity_rejects_negative_metrics():
    with pytest.raises(MalformedInputError, match="distance_meters"):
        ActivityRecord("a", "n", -1, 0, 0, 0, (Coordinate(0, 0),), "2024-05-01T00:00:00Z", "Run")


def test_coordinate_is_immutable():
    coordinate = Coordinate(1.0, 2.0)
    with pytest.raises(AttributeError):
        coordinate.lat = 3.0


@pytest.mark.parametrize("lat,lng", [(-90.1, 0), (90.1, 0), (0, -180.1), (0, 180.1)])
def test_coordinate_range(lat, lng):
    with pytest.raises(MalformedInputError):
        Coordinate(lat, lng)
