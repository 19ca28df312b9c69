"""Command for importing activities from Strava."""

import logging
from pathlib import Path
from typing import Optional

import typer

from ..config import settings
from ..errors import RouteshareError
from ..strava import StravaClient
from .utils import echo_summary, write_activity_json
from . import app

logger = logging.getLogger(__name__)

@app.command()
def strava(
        activity_id: int = typer.Argument(..., help="Strava activity id"),
        token: Optional[str] = typer.Option(
            None,
            "--token",
            help="Strava access token (default: STRAVA_ACCESS_TOKEN)"
        ),
        output_file: Optional[Path] = typer.Option(
            None,
            "--output", "-o",
            help="Write the activity JSON to this file; prints a summary otherwise"
        ),
):
    """Fetch a Strava activity and convert it to an activity record."""
    access_token = token or settings.STRAVA_ACCESS_TOKEN
    if not access_token:
        raise typer.BadParameter("No access token given and STRAVA_ACCESS_TOKEN is not set",
                                 param_hint="--token")

    try:
        client = StravaClient(access_token, base_url=settings.STRAVA_API_BASE,
                              timeout=settings.STRAVA_TIMEOUT)
        activity = client.fetch_activity_record(activity_id)
    except RouteshareError as e:
        logger.error(f"Error importing Strava activity {activity_id}: {e}")
        raise typer.Abort()

    if output_file is None:
        echo_summary(activity)
    else:
        write_activity_json(activity, output_file)
