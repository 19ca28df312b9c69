"""Utility functions for the CLI commands."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from ..errors import MalformedInputError
from ..gpx_parser import GPXParser
from ..models import ActivityRecord
from ..overlay import format_distance, format_duration, format_elevation, format_pace

logger = logging.getLogger(__name__)


def load_activity(input_file: Path) -> ActivityRecord:
    """Load an activity from a GPX file or an activity JSON file.

    Args:
        input_file: Path ending in .gpx, or a JSON file as written by ``info --json``

    Returns:
        ActivityRecord

    Raises:
        MalformedInputError: If the file content is invalid
    """
    if input_file.suffix.lower() == ".gpx":
        logger.info(f"Parsing GPX file: {input_file}")
        return GPXParser(str(input_file)).parse()

    logger.info(f"Reading activity JSON: {input_file}")
    try:
        with open(input_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"Invalid activity JSON: {e}") from e
    return ActivityRecord.from_dict(data)


def write_activity_json(activity: ActivityRecord, output_file: Optional[Path]) -> None:
    """Write the activity as JSON to ``output_file`` or stdout."""
    text = json.dumps(activity.to_dict(), indent=2)
    if output_file is None:
        typer.echo(text)
        return
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(text + "\n", encoding='utf-8')
    logger.info(f"Activity written to {output_file}")


def echo_summary(activity: ActivityRecord) -> None:
    """Print a human readable summary of an activity."""
    typer.echo(f"Activity: {activity.name} ({activity.activity_type})")
    typer.echo(f"Start time: {activity.start_time}")
    typer.echo(f"Number of points: {len(activity.coordinates)}")
    typer.echo(f"Distance: {format_distance(activity.distance_meters)}")
    typer.echo(f"Duration: {format_duration(activity.duration_seconds)}")
    typer.echo(f"Elevation gain: {format_elevation(activity.elevation_gain_meters)}")
    typer.echo(f"Pace: {format_pace(activity.pace_seconds_per_km)}")


def style_overrides(**options: Any) -> Dict[str, Any]:
    """Collect the style options that were actually given on the command line."""
    return {name: value for name, value in options.items() if value is not None}


def validate_position(position: Optional[str]) -> Optional[str]:
    """Validate the --position option.

    Raises:
        typer.BadParameter: If the position is not top, center or bottom
    """
    if position is not None and position not in ("top", "center", "bottom"):
        logger.error(f"Invalid position: {position}")
        raise typer.BadParameter("Position must be one of: top, center, bottom")
    return position
