"""Bundled sample activity for trying out overlays without a track of your own."""

import logging
from dataclasses import replace
from importlib import resources

from .gpx_parser import parse_gpx_text
from .models import ActivityRecord

logger = logging.getLogger(__name__)

SAMPLE_ACTIVITY_ID = "sample"
SAMPLE_ACTIVITY_TYPE = "Run"


def sample_gpx_text() -> str:
    """Return the GPX XML of the bundled sample run."""
    return resources.files(__package__).joinpath("data").joinpath("sample.gpx").read_text(encoding="utf-8")


def sample_activity() -> ActivityRecord:
    """Parse the bundled sample run into an activity record with a fixed id."""
    activity = parse_gpx_text(sample_gpx_text())
    logger.debug(f"Loaded sample activity '{activity.name}'")
    return replace(activity, id=SAMPLE_ACTIVITY_ID, activity_type=SAMPLE_ACTIVITY_TYPE)
