"""Command for displaying information about GPX files."""

import logging
from pathlib import Path
from typing import Optional

import typer

from ..errors import RouteshareError
from .utils import echo_summary, load_activity, write_activity_json
from . import app

logger = logging.getLogger(__name__)

@app.command()
def info(
        input_file: Path = typer.Argument(
            ...,
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            help="Path to a GPX file or an activity JSON file"
        ),
        as_json: bool = typer.Option(
            False,
            "--json",
            help="Print the full activity record as JSON"
        ),
        output_file: Optional[Path] = typer.Option(
            None,
            "--output", "-o",
            help="Write the activity JSON to this file instead of stdout (implies --json)"
        ),
):
    """Display the metrics derived from a track."""
    try:
        activity = load_activity(input_file)
    except RouteshareError as e:
        logger.error(f"Error reading {input_file}: {e}")
        raise typer.Abort()

    if as_json or output_file is not None:
        write_activity_json(activity, output_file)
    else:
        echo_summary(activity)
